"""
Test session controller.

A session is an immutable ``SessionState`` transformed only by the pure
transition function ``apply(state, event)``. User actions and timer ticks are
both events fed through that function, one at a time, in arrival order.

``TestSessionController`` is the thin stateful driver around it: it holds
the current state, arms and cancels the per-question timer, and reports
completion exactly once.

Late events
===========
Events stamped with a ``question_index`` that is no longer the active
question (already finalized, session completed or abandoned) are discarded.
A timer tick armed for question 3 that fires after the user advanced to
question 4 therefore cannot finalize question 3 a second time. The driver
also cancels the armed timer on every transition, so such ticks are rare to
begin with.
"""

import logging
import uuid
from dataclasses import dataclass, replace
from typing import Callable, Optional, Protocol, Sequence, Tuple, Union

from iqtest.core.config import settings
from iqtest.core.errors import InvariantViolation
from iqtest.core.logging_config import session_id_context
from iqtest.models.question import AnswerRecord, Question, QuestionSet
from libs.domain_types import SessionPhase

logger = logging.getLogger(__name__)


# =============================================================================
# State and events
# =============================================================================


@dataclass(frozen=True)
class SessionState:
    """Snapshot of one test attempt."""

    question_set: QuestionSet
    seconds_per_question: int
    phase: SessionPhase = SessionPhase.AWAITING_START
    current_index: int = 0
    remaining_seconds: int = 0
    pending_selection: Optional[int] = None
    answers: Tuple[AnswerRecord, ...] = ()

    @classmethod
    def initial(
        cls, question_set: QuestionSet, seconds_per_question: int
    ) -> "SessionState":
        if seconds_per_question <= 0:
            raise InvariantViolation("seconds_per_question must be positive")
        return cls(
            question_set=question_set,
            seconds_per_question=seconds_per_question,
            remaining_seconds=seconds_per_question,
        )

    @property
    def total_questions(self) -> int:
        return len(self.question_set)

    @property
    def current_question(self) -> Question:
        return self.question_set[self.current_index]

    @property
    def is_active(self) -> bool:
        return self.phase == SessionPhase.ACTIVE


@dataclass(frozen=True)
class Start:
    """Leave ``awaiting_start`` and present the first question."""


@dataclass(frozen=True)
class SelectAnswer:
    """Set the pending selection for the current question."""

    option_index: int
    question_index: Optional[int] = None


@dataclass(frozen=True)
class Advance:
    """Finalize the current question and move on."""

    question_index: Optional[int] = None


@dataclass(frozen=True)
class TimerTick:
    """One unit of countdown time elapsed for ``question_index``."""

    question_index: int


@dataclass(frozen=True)
class Abandon:
    """The user navigated away; discard the attempt."""


SessionEvent = Union[Start, SelectAnswer, Advance, TimerTick, Abandon]


# =============================================================================
# Transition function
# =============================================================================


def is_late(state: SessionState, question_index: Optional[int]) -> bool:
    """Whether an event stamped with ``question_index`` no longer applies."""
    if question_index is None:
        return False
    return not state.is_active or question_index != state.current_index


def _require_active(state: SessionState, operation: str) -> None:
    if not state.is_active:
        raise InvariantViolation(
            f"{operation} is only valid while the session is active "
            f"(phase={state.phase.value})"
        )


def _advance(state: SessionState) -> SessionState:
    record = AnswerRecord.for_question(state.current_question, state.pending_selection)
    answers = state.answers + (record,)

    if state.current_index + 1 < state.total_questions:
        return replace(
            state,
            current_index=state.current_index + 1,
            pending_selection=None,
            remaining_seconds=state.seconds_per_question,
            answers=answers,
        )

    return replace(
        state,
        phase=SessionPhase.COMPLETED,
        pending_selection=None,
        remaining_seconds=0,
        answers=answers,
    )


def apply(state: SessionState, event: SessionEvent) -> SessionState:
    """
    Compute the state that follows ``event``.

    Pure: ``state`` is never modified, and the same inputs always produce
    the same output.

    Raises:
        InvariantViolation: For operations the current phase does not allow
            (starting twice, selecting or advancing outside ``active``) and for
            out-of-range option indexes
    """
    if isinstance(event, Start):
        if state.phase != SessionPhase.AWAITING_START:
            raise InvariantViolation(
                f"Cannot start a session in phase {state.phase.value}"
            )
        return replace(
            state,
            phase=SessionPhase.ACTIVE,
            current_index=0,
            remaining_seconds=state.seconds_per_question,
        )

    if isinstance(event, Abandon):
        if state.phase in (SessionPhase.COMPLETED, SessionPhase.ABANDONED):
            return state
        return replace(
            state,
            phase=SessionPhase.ABANDONED,
            pending_selection=None,
            remaining_seconds=0,
            answers=(),
        )

    if isinstance(event, (SelectAnswer, Advance, TimerTick)) and is_late(
        state, event.question_index
    ):
        logger.debug(
            f"Discarding late {type(event).__name__} for question "
            f"{event.question_index} (current={state.current_index}, "
            f"phase={state.phase.value})"
        )
        return state

    if isinstance(event, SelectAnswer):
        _require_active(state, "select_answer")
        option_count = len(state.current_question.options)
        if not 0 <= event.option_index < option_count:
            raise InvariantViolation(
                f"option_index must be in [0, {option_count - 1}], "
                f"got {event.option_index}"
            )
        return replace(state, pending_selection=event.option_index)

    if isinstance(event, Advance):
        _require_active(state, "advance")
        return _advance(state)

    if isinstance(event, TimerTick):
        remaining = state.remaining_seconds - 1
        if remaining > 0:
            return replace(state, remaining_seconds=remaining)
        # Timeout is an implicit advance with whatever is pending
        return _advance(state)

    raise TypeError(f"Unknown session event: {event!r}")


# =============================================================================
# Driver
# =============================================================================


class QuestionTimer(Protocol):
    """Countdown source feeding ticks to the controller."""

    def arm(self, question_index: int, on_tick: Callable[[int], None]) -> None:
        """Start ticking for ``question_index``, replacing any armed countdown."""
        ...

    def cancel(self) -> None:
        """Stop ticking. Safe to call when nothing is armed."""
        ...


CompletionCallback = Callable[[Tuple[AnswerRecord, ...]], None]


class TestSessionController:
    """
    Drives exactly one attempt through every question of a question set.

    Usage:
        controller = TestSessionController(question_set, timer=timer)
        controller.start()
        controller.select_answer(2)
        controller.advance()

    Retaking the test means building a new controller.
    """

    __test__ = False  # not a pytest test class

    def __init__(
        self,
        question_set: Union[QuestionSet, Sequence[Question]],
        *,
        seconds_per_question: Optional[int] = None,
        timer: Optional[QuestionTimer] = None,
        on_complete: Optional[CompletionCallback] = None,
        session_id: Optional[str] = None,
    ):
        """
        Args:
            question_set: Questions for this attempt (at least one)
            seconds_per_question: Countdown per question; defaults to
                settings.SECONDS_PER_QUESTION
            timer: Tick source; without one, ticks arrive only through
                handle_timer_tick
            on_complete: Called once with the final answers on completion
            session_id: Identifier used for log correlation

        Raises:
            InvariantViolation: If the question set is empty
        """
        if not isinstance(question_set, QuestionSet):
            question_set = QuestionSet(question_set)

        self.session_id = session_id or uuid.uuid4().hex
        self._state = SessionState.initial(
            question_set,
            seconds_per_question
            if seconds_per_question is not None
            else settings.SECONDS_PER_QUESTION,
        )
        self._timer = timer
        self._on_complete = on_complete
        self._completion_reported = False

    # -- read-only view -------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def question_set(self) -> QuestionSet:
        return self._state.question_set

    @property
    def phase(self) -> SessionPhase:
        return self._state.phase

    @property
    def current_index(self) -> int:
        return self._state.current_index

    @property
    def current_question(self) -> Question:
        return self._state.current_question

    @property
    def remaining_seconds(self) -> int:
        return self._state.remaining_seconds

    @property
    def pending_selection(self) -> Optional[int]:
        return self._state.pending_selection

    @property
    def answers(self) -> Tuple[AnswerRecord, ...]:
        return self._state.answers

    @property
    def is_complete(self) -> bool:
        return self._state.phase == SessionPhase.COMPLETED

    # -- operations -----------------------------------------------------------

    def start(self) -> None:
        """Present the first question and arm its countdown."""
        self.dispatch(Start())
        logger.info(
            f"Session started with {self._state.total_questions} questions",
            extra={"phase": self._state.phase.value},
        )

    def select_answer(self, option_index: int) -> None:
        """Set the pending selection for the current question."""
        self.dispatch(SelectAnswer(option_index))

    def advance(self) -> None:
        """Finalize the current question with the pending selection (if any)."""
        self.dispatch(Advance())

    def handle_timer_tick(self, question_index: int) -> None:
        """Timer callback; ticks for questions no longer active are ignored."""
        self.dispatch(TimerTick(question_index))

    def abandon(self) -> None:
        """Navigate away: disarm the timer and discard the attempt."""
        previous = self._state.phase
        self.dispatch(Abandon())
        if previous != self._state.phase:
            logger.info("Session abandoned; partial answers discarded")

    def dispatch(self, event: SessionEvent) -> None:
        """Apply ``event`` and perform the timer/completion side effects."""
        token = session_id_context.set(self.session_id)
        try:
            before = self._state
            after = apply(before, event)
            if after is before:
                return
            self._state = after
            self._on_transition(before, after)
        finally:
            session_id_context.reset(token)

    # -- side effects ---------------------------------------------------------

    def _on_transition(self, before: SessionState, after: SessionState) -> None:
        question_changed = (
            after.current_index != before.current_index
            or after.phase != before.phase
        )
        if not question_changed:
            return

        # Disarm first so a tick for the previous question cannot be scheduled
        if self._timer is not None:
            self._timer.cancel()

        if after.is_active:
            logger.debug(
                "Presenting question",
                extra={"question_index": after.current_index},
            )
            if self._timer is not None:
                self._timer.arm(after.current_index, self.handle_timer_tick)
            return

        if after.phase == SessionPhase.COMPLETED and not self._completion_reported:
            self._completion_reported = True
            correct = sum(1 for a in after.answers if a.is_correct)
            logger.info(
                f"Session completed: {correct}/{after.total_questions} correct",
                extra={"phase": after.phase.value},
            )
            if self._on_complete is not None:
                self._on_complete(after.answers)
