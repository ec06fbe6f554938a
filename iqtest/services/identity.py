"""Identity collaborator.

The core only needs to know whether someone is signed in and, if so, an
opaque identifier to key history records by. Not being signed in is a valid
mode: results are shown but never persisted.
"""

from dataclasses import dataclass
from typing import Optional, Protocol


@dataclass(frozen=True)
class Identity:
    """Opaque authenticated identity (or its absence)."""

    user_id: Optional[str] = None
    token: Optional[str] = None

    @property
    def is_signed_in(self) -> bool:
        return bool(self.user_id)


ANONYMOUS = Identity()


class IdentityProvider(Protocol):
    def current_identity(self) -> Identity:
        ...


class StaticIdentityProvider:
    """Returns a fixed identity; anonymous unless one is given."""

    def __init__(self, identity: Identity = ANONYMOUS):
        self.identity = identity

    def current_identity(self) -> Identity:
        return self.identity
