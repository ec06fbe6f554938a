"""
Result assembly for completed sessions.

``TestResult`` is the single structure handed to display, analysis and
persistence. It is derived purely from the answer records and the question
set, so it can be rebuilt at any time after completion.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Tuple

from iqtest.core.scoring import (
    CategoryPerformance,
    ScoreLevel,
    ScoringStrategy,
    get_score_level,
    score_answers,
)
from iqtest.models.question import AnswerRecord, Question, QuestionSet


@dataclass(frozen=True)
class AnsweredQuestion:
    """A question paired with the answer recorded for it."""

    question: Question
    answer: AnswerRecord

    @property
    def is_correct(self) -> bool:
        return self.answer.is_correct

    @property
    def selected_option(self) -> Optional[str]:
        """Text of the chosen option, or None when nothing was selected."""
        if not self.answer.answered:
            return None
        return self.question.options[self.answer.selected_option_index]

    @property
    def correct_option(self) -> str:
        return self.question.options[self.question.correct_option_index]


@dataclass(frozen=True)
class HistoryRecord:
    """What the history store keeps for one completed attempt."""

    score: int
    category_performance: Dict[str, float]
    analysis_text: Optional[str]
    timestamp: datetime
    answers: List[Dict[str, Any]] = field(default_factory=list)


@dataclass(frozen=True)
class TestResult:
    """Everything downstream collaborators need about a completed session."""

    __test__ = False  # not a pytest test class

    iq_score: int
    correct_count: int
    total_questions: int
    accuracy_percentage: float
    category_performance: CategoryPerformance
    answers: Tuple[AnsweredQuestion, ...]
    score_level: ScoreLevel

    def category_performance_by_name(self) -> Dict[str, float]:
        """Category performance keyed by plain category strings."""
        return {
            category.value: pct for category, pct in self.category_performance.items()
        }

    def to_analysis_payload(self) -> Dict[str, Any]:
        """Serialize into the request body sent to the analysis collaborator."""
        return {
            "score": self.iq_score,
            "total_questions": self.total_questions,
            "correct_answers": self.correct_count,
            "category_performance": self.category_performance_by_name(),
            "answers": [
                {
                    "question": item.question.prompt,
                    "user_answer": item.answer.selected_option_index,
                    "correct_answer": item.question.correct_option_index,
                    "is_correct": item.is_correct,
                    "type": item.question.category.value,
                    "difficulty": item.question.difficulty.value,
                }
                for item in self.answers
            ],
        }

    def to_history_record(
        self, analysis_text: Optional[str], timestamp: datetime
    ) -> HistoryRecord:
        return HistoryRecord(
            score=self.iq_score,
            category_performance=self.category_performance_by_name(),
            analysis_text=analysis_text,
            timestamp=timestamp,
            answers=self.to_analysis_payload()["answers"],
        )


def assemble_result(
    answers: Sequence[AnswerRecord],
    question_set: QuestionSet,
    strategy: Optional[ScoringStrategy] = None,
) -> TestResult:
    """
    Package a completed session into a ``TestResult``.

    Args:
        answers: One record per question, in question order
        question_set: The questions that were asked
        strategy: Scoring strategy override (defaults to the global strategy)

    Raises:
        InvariantViolation: If ``answers`` does not cover the whole set
    """
    scoring = score_answers(answers, question_set, strategy)
    test_score = scoring.test_score

    return TestResult(
        iq_score=test_score.iq_score,
        correct_count=test_score.correct_answers,
        total_questions=test_score.total_questions,
        accuracy_percentage=test_score.accuracy_percentage,
        category_performance=scoring.category_performance,
        answers=tuple(
            AnsweredQuestion(question=q, answer=a) for q, a in zip(question_set, answers)
        ),
        score_level=get_score_level(test_score.iq_score),
    )
