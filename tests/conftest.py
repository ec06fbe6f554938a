"""
Pytest configuration and shared fixtures for testing.
"""
from typing import Callable, List, Optional, Tuple

import pytest

from iqtest.models.question import Question, QuestionSet
from libs.domain_types import DifficultyLevel, QuestionCategory


def make_question(
    question_id: int,
    category: QuestionCategory = QuestionCategory.LOGICAL,
    correct_option_index: int = 0,
    difficulty: DifficultyLevel = DifficultyLevel.MEDIUM,
) -> Question:
    """Build a valid question with predictable text."""
    return Question(
        id=question_id,
        category=category,
        prompt=f"Question {question_id}?",
        options=("A", "B", "C", "D"),
        correct_option_index=correct_option_index,
        rationale=f"Because {question_id}.",
        difficulty=difficulty,
    )


class FakeTimer:
    """Timer double that records arm/cancel calls and fires ticks on demand."""

    def __init__(self) -> None:
        self.calls: List[Tuple[str, Optional[int]]] = []
        self.armed_index: Optional[int] = None
        self._on_tick: Optional[Callable[[int], None]] = None

    def arm(self, question_index: int, on_tick: Callable[[int], None]) -> None:
        self.calls.append(("arm", question_index))
        self.armed_index = question_index
        self._on_tick = on_tick

    def cancel(self) -> None:
        self.calls.append(("cancel", None))
        self.armed_index = None
        self._on_tick = None

    @property
    def is_armed(self) -> bool:
        return self._on_tick is not None

    def tick(self, times: int = 1) -> None:
        """Deliver ``times`` ticks for the armed question (stops if disarmed)."""
        for _ in range(times):
            if self._on_tick is None or self.armed_index is None:
                return
            self._on_tick(self.armed_index)


@pytest.fixture
def question_factory():
    """Factory fixture for building questions."""
    return make_question


@pytest.fixture
def five_questions() -> QuestionSet:
    """Five questions covering every category; correct option is index i % 4."""
    return QuestionSet(
        [
            make_question(1, QuestionCategory.LOGICAL, 0, DifficultyLevel.EASY),
            make_question(2, QuestionCategory.NUMERICAL, 1, DifficultyLevel.MEDIUM),
            make_question(3, QuestionCategory.VERBAL, 2, DifficultyLevel.HARD),
            make_question(4, QuestionCategory.SPATIAL, 3, DifficultyLevel.MEDIUM),
            make_question(5, QuestionCategory.LOGICAL, 0, DifficultyLevel.EASY),
        ]
    )


@pytest.fixture
def fake_timer() -> FakeTimer:
    return FakeTimer()
