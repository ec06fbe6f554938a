"""
Per-question countdown timer driven by the asyncio event loop.

The timer never touches session state. It only calls ``on_tick`` with the
question index it was armed for, once per interval, until it is cancelled or
re-armed. The controller decides what a tick means.
"""

import asyncio
import logging
from typing import Callable, Optional

from iqtest.core.config import settings

logger = logging.getLogger(__name__)


class AsyncioQuestionTimer:
    """Repeating tick source built on ``loop.call_later``.

    Must be armed from code running inside the event loop's thread.

    Usage:
        timer = AsyncioQuestionTimer(interval_seconds=1.0)
        controller = TestSessionController(question_set, timer=timer)
        controller.start()  # arms the timer for question 0
    """

    def __init__(
        self,
        interval_seconds: Optional[float] = None,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ):
        self.interval_seconds = (
            interval_seconds
            if interval_seconds is not None
            else settings.TIMER_TICK_INTERVAL_SECONDS
        )
        if self.interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self._loop = loop
        self._handle: Optional[asyncio.TimerHandle] = None
        # Bumped on every arm/cancel; a firing tick whose generation is stale
        # must not reschedule itself.
        self._generation = 0
        self._armed_index: Optional[int] = None

    @property
    def armed_index(self) -> Optional[int]:
        """Question index currently being counted down, if any."""
        return self._armed_index

    @property
    def is_armed(self) -> bool:
        return self._handle is not None

    def arm(self, question_index: int, on_tick: Callable[[int], None]) -> None:
        """Start ticking for ``question_index``, replacing any armed countdown."""
        self.cancel()
        self._armed_index = question_index
        self._schedule(self._generation, question_index, on_tick)

    def cancel(self) -> None:
        """Stop ticking. Safe to call when nothing is armed."""
        self._generation += 1
        self._armed_index = None
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _schedule(
        self, generation: int, question_index: int, on_tick: Callable[[int], None]
    ) -> None:
        loop = self._loop or asyncio.get_running_loop()
        self._handle = loop.call_later(
            self.interval_seconds, self._fire, generation, question_index, on_tick
        )

    def _fire(
        self, generation: int, question_index: int, on_tick: Callable[[int], None]
    ) -> None:
        if generation != self._generation:
            return
        self._handle = None
        try:
            on_tick(question_index)
        except Exception:
            # Leave the countdown disarmed; the error belongs to the caller
            self.cancel()
            raise
        # on_tick may have cancelled or re-armed us for another question
        if generation == self._generation:
            self._schedule(generation, question_index, on_tick)
