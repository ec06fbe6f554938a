"""Error taxonomy for the IQ test core.

Only ``ProviderError`` blocks forward progress. ``AnalysisError`` and
``PersistenceError`` are degraded gracefully by the caller, and
``InvariantViolation`` signals a programming error that must surface loudly.
"""

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from iqtest.core.error_classifier import ClassifiedError


class IQTestError(Exception):
    """Base class for all errors raised by this package."""


class ProviderError(IQTestError):
    """The question source is unreachable or returned a malformed payload.

    Attributes:
        is_retryable: Whether asking the provider again may succeed
        classified_error: Classification of the upstream failure, if any
    """

    def __init__(
        self,
        message: str,
        *,
        is_retryable: bool = False,
        classified_error: Optional["ClassifiedError"] = None,
    ):
        super().__init__(message)
        self.is_retryable = is_retryable
        self.classified_error = classified_error


class AnalysisError(IQTestError):
    """The analysis collaborator could not produce explanatory text."""


class PersistenceError(IQTestError):
    """A history record could not be written or read."""


class InvariantViolation(IQTestError):
    """An operation was attempted that the session contract forbids."""
