"""
IQ Score Calculation Module.

Maps a completed answer sequence to a displayed score and a per-category
performance breakdown. The scoring strategy is pluggable so the linear
mapping can be swapped without touching callers.

Current Implementation
======================
**Scoring Algorithm:** LinearRangeScoring
- Linear transformation: IQ = floor + accuracy * span
- Defaults: floor=70, span=60, giving a range of 70-130
- Rounded half-up to the nearest integer

This is a linear rescaling of raw accuracy. No population norming or
z-scoring is performed, so the number is not a norm-referenced IQ estimate.

**Category Performance:**
- Percentage correct per category (0-100)
- Every category in QuestionCategory is always reported; categories with no
  questions in the set report 0
"""

import logging
import math
from dataclasses import dataclass
from typing import Dict, Optional, Protocol, Sequence

from iqtest.core.config import settings
from iqtest.core.errors import InvariantViolation
from iqtest.models.question import AnswerRecord, QuestionSet
from libs.domain_types import QuestionCategory

logger = logging.getLogger(__name__)

DEFAULT_SCORE_FLOOR = 70
DEFAULT_SCORE_SPAN = 60

CategoryPerformance = Dict[QuestionCategory, float]


@dataclass(frozen=True)
class TestScore:
    """Result of IQ score calculation."""

    __test__ = False  # not a pytest test class

    iq_score: int
    correct_answers: int
    total_questions: int
    accuracy_percentage: float


@dataclass(frozen=True)
class ScoringResult:
    """Score and category breakdown for one completed session."""

    test_score: TestScore
    category_performance: CategoryPerformance

    @property
    def iq_score(self) -> int:
        return self.test_score.iq_score


@dataclass(frozen=True)
class ScoreLevel:
    """Human-readable band for a displayed score."""

    label: str
    description: str
    percentile_band: str


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with .5 always rounding up."""
    return math.floor(value + 0.5)


class ScoringStrategy(Protocol):
    """
    Protocol for IQ scoring strategies.

    Any class implementing this protocol can be used as a scoring strategy.
    """

    def calculate_iq_score(
        self, correct_answers: int, total_questions: int
    ) -> TestScore:
        """
        Calculate IQ score from test performance.

        Args:
            correct_answers: Number of questions answered correctly
            total_questions: Total number of questions in the test

        Returns:
            TestScore with IQ score and performance metrics
        """
        ...


class LinearRangeScoring:
    """
    Linear range scoring algorithm.

    Formula: iq_score = floor + (correct / total) * span

    Performance Mapping (floor=70, span=60):
    - 0% correct   → 70
    - 50% correct  → 100
    - 100% correct → 130
    """

    def __init__(
        self, floor: int = DEFAULT_SCORE_FLOOR, span: int = DEFAULT_SCORE_SPAN
    ):
        if span <= 0:
            raise ValueError("span must be positive")
        self.floor = floor
        self.span = span

    def calculate_iq_score(
        self, correct_answers: int, total_questions: int
    ) -> TestScore:
        """
        Calculate the displayed score.

        Raises:
            ValueError: If total_questions is 0 or negative
            ValueError: If correct_answers is negative or exceeds total_questions
        """
        if total_questions <= 0:
            raise ValueError("total_questions must be positive")

        if correct_answers < 0:
            raise ValueError("correct_answers cannot be negative")

        if correct_answers > total_questions:
            raise ValueError("correct_answers cannot exceed total_questions")

        accuracy = correct_answers / total_questions
        iq_score = round_half_up(self.floor + accuracy * self.span)

        return TestScore(
            iq_score=iq_score,
            correct_answers=correct_answers,
            total_questions=total_questions,
            accuracy_percentage=round(accuracy * 100, 2),
        )


# Default scoring strategy (can be swapped via set_scoring_strategy)
_default_strategy: ScoringStrategy = LinearRangeScoring(
    floor=settings.SCORE_FLOOR, span=settings.SCORE_SPAN
)


def set_scoring_strategy(strategy: ScoringStrategy) -> None:
    """
    Set the global scoring strategy.

    Args:
        strategy: Scoring strategy to use
    """
    global _default_strategy
    _default_strategy = strategy


def get_scoring_strategy() -> ScoringStrategy:
    """Return the currently configured global scoring strategy."""
    return _default_strategy


def calculate_iq_score(correct_answers: int, total_questions: int) -> TestScore:
    """
    Calculate IQ score using the configured scoring strategy.

    Example:
        >>> score = calculate_iq_score(correct_answers=3, total_questions=5)
        >>> score.iq_score
        106
    """
    return _default_strategy.calculate_iq_score(correct_answers, total_questions)


def _check_alignment(answers: Sequence[AnswerRecord], question_set: QuestionSet) -> None:
    """Verify ``answers`` is a complete, in-order record of ``question_set``.

    Raises:
        InvariantViolation: For partial sequences, misordered records, or a
            correctness flag that disagrees with the question's answer key
    """
    if len(answers) != len(question_set):
        raise InvariantViolation(
            f"Expected {len(question_set)} answer records, got {len(answers)}; "
            "partial sessions are never scored"
        )
    for index, (answer, question) in enumerate(zip(answers, question_set)):
        if answer.question_id != question.id:
            raise InvariantViolation(
                f"Answer {index} is for question {answer.question_id}, "
                f"expected question {question.id}"
            )
        expected = answer.answered and question.is_correct(answer.selected_option_index)
        if answer.is_correct != expected:
            raise InvariantViolation(
                f"Answer {index} has is_correct={answer.is_correct} but the answer key "
                f"says {expected}"
            )


def calculate_category_performance(
    answers: Sequence[AnswerRecord], question_set: QuestionSet
) -> CategoryPerformance:
    """
    Calculate per-category percentage correct.

    Args:
        answers: Answer records aligned with ``question_set``
        question_set: The questions that were asked

    Returns:
        Dictionary keyed by every QuestionCategory. Values are
        correct / total * 100 for the category, or 0.0 when the set has no
        questions in that category.

    Example:
        >>> calculate_category_performance(answers, question_set)
        {<QuestionCategory.LOGICAL>: 100.0, <QuestionCategory.NUMERICAL>: 50.0,
         <QuestionCategory.VERBAL>: 0.0, <QuestionCategory.SPATIAL>: 0.0}
    """
    totals = {c: 0 for c in QuestionCategory}
    correct = {c: 0 for c in QuestionCategory}

    for answer, question in zip(answers, question_set):
        totals[question.category] += 1
        if answer.is_correct:
            correct[question.category] += 1

    result: CategoryPerformance = {}
    for category in QuestionCategory:
        total = totals[category]
        result[category] = (correct[category] / total) * 100 if total > 0 else 0.0
    return result


def score_answers(
    answers: Sequence[AnswerRecord],
    question_set: QuestionSet,
    strategy: Optional[ScoringStrategy] = None,
) -> ScoringResult:
    """
    Score a completed session.

    Pure function: calling it twice with the same inputs yields equal results.

    Args:
        answers: One record per question, in question order
        question_set: The questions that were asked
        strategy: Scoring strategy override (defaults to the global strategy)

    Raises:
        InvariantViolation: If ``answers`` is not a complete, aligned sequence
    """
    _check_alignment(answers, question_set)

    correct_count = sum(1 for a in answers if a.is_correct)
    test_score = (strategy or _default_strategy).calculate_iq_score(
        correct_count, len(question_set)
    )
    return ScoringResult(
        test_score=test_score,
        category_performance=calculate_category_performance(answers, question_set),
    )


def get_score_level(iq_score: int) -> ScoreLevel:
    """
    Get the display band for a score.

    Example:
        >>> get_score_level(118).label
        'Above Average'
    """
    if iq_score >= 130:
        return ScoreLevel("Highly Gifted", "Top 2% of population", "98th")
    if iq_score >= 115:
        return ScoreLevel("Above Average", "Top 16% of population", "84th")
    if iq_score >= 100:
        return ScoreLevel("Average", "Average range", "50th")
    if iq_score >= 85:
        return ScoreLevel("Below Average", "Lower range", "16th")
    return ScoreLevel("Well Below Average", "Needs improvement", "16th")


def get_strongest_weakest_categories(
    category_performance: CategoryPerformance,
    question_set: Optional[QuestionSet] = None,
) -> Dict[str, Optional[QuestionCategory]]:
    """
    Identify the strongest and weakest categories.

    Only categories present in ``question_set`` are considered when it is
    given; otherwise every category in the map is. In case of ties, the
    category that appears first in QuestionCategory order is selected.

    Returns:
        {"strongest_category": ..., "weakest_category": ...}; both None if no
        category qualifies.
    """
    candidates = (
        question_set.categories()
        if question_set is not None
        else [c for c in QuestionCategory if c in category_performance]
    )

    strongest: Optional[QuestionCategory] = None
    weakest: Optional[QuestionCategory] = None
    for category in candidates:
        pct = category_performance[category]
        if strongest is None or pct > category_performance[strongest]:
            strongest = category
        if weakest is None or pct < category_performance[weakest]:
            weakest = category

    return {
        "strongest_category": strongest,
        "weakest_category": weakest,
    }
