"""
Question, question set and answer record value types.

Questions are frozen pydantic models so that payloads coming from a question
provider are validated on the way in. Field aliases match the JSON produced by
the question generator (``type``, ``question``, ``correctAnswer``,
``explanation``).
"""
from collections import Counter
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Sequence, Tuple, overload

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from iqtest.core.errors import InvariantViolation
from libs.domain_types import DifficultyLevel, QuestionCategory

# Every question offers exactly this many options
OPTION_COUNT = 4

# Sentinel recorded when a question is advanced without a selection
NO_ANSWER = -1


class Question(BaseModel):
    """A single multiple-choice assessment item."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: int = Field(..., gt=0, description="Identifier, unique within a question set")
    category: QuestionCategory = Field(..., alias="type")
    prompt: str = Field(..., min_length=1, alias="question")
    options: Tuple[str, ...] = Field(..., description="Answer options, in display order")
    correct_option_index: int = Field(..., alias="correctAnswer")
    rationale: str = Field(..., alias="explanation")
    difficulty: DifficultyLevel

    @field_validator("options")
    @classmethod
    def validate_option_count(cls, v: Tuple[str, ...]) -> Tuple[str, ...]:
        if len(v) != OPTION_COUNT:
            raise ValueError(f"expected exactly {OPTION_COUNT} options, got {len(v)}")
        return v

    @model_validator(mode="after")
    def validate_correct_option(self) -> "Question":
        if not 0 <= self.correct_option_index < len(self.options):
            raise ValueError(
                f"correctAnswer {self.correct_option_index} does not index one of "
                f"{len(self.options)} options"
            )
        return self

    def is_correct(self, option_index: int) -> bool:
        """Whether ``option_index`` is this question's correct option."""
        return option_index == self.correct_option_index


class QuestionSet(Sequence[Question]):
    """Ordered, immutable collection of questions for one session.

    Raises:
        InvariantViolation: If the set is empty or ids repeat
    """

    def __init__(self, questions: Sequence[Question]):
        items = tuple(questions)
        if not items:
            raise InvariantViolation("A question set needs at least one question")

        duplicates = [qid for qid, n in Counter(q.id for q in items).items() if n > 1]
        if duplicates:
            raise InvariantViolation(f"Duplicate question ids in set: {duplicates}")

        self._questions: Tuple[Question, ...] = items

    @overload
    def __getitem__(self, index: int) -> Question: ...

    @overload
    def __getitem__(self, index: slice) -> Tuple[Question, ...]: ...

    def __getitem__(self, index):
        return self._questions[index]

    def __len__(self) -> int:
        return len(self._questions)

    def __iter__(self) -> Iterator[Question]:
        return iter(self._questions)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, QuestionSet):
            return NotImplemented
        return self._questions == other._questions

    def __hash__(self) -> int:
        return hash(self._questions)

    def __repr__(self) -> str:
        return f"QuestionSet(n={len(getattr(self, '_questions', ()))})"

    def categories(self) -> List[QuestionCategory]:
        """Categories present in the set, in enum order."""
        present = {q.category for q in self._questions}
        return [c for c in QuestionCategory if c in present]

    def count_by_category(self) -> Dict[QuestionCategory, int]:
        """Number of questions per category, including categories with none."""
        counts = {c: 0 for c in QuestionCategory}
        for q in self._questions:
            counts[q.category] += 1
        return counts


@dataclass(frozen=True)
class AnswerRecord:
    """Finalized outcome of one question's attempt."""

    question_id: int
    selected_option_index: int
    is_correct: bool

    @classmethod
    def for_question(
        cls, question: Question, selection: Optional[int]
    ) -> "AnswerRecord":
        """Build the record for ``question`` from a pending selection (or None)."""
        if selection is None or selection == NO_ANSWER:
            return cls(
                question_id=question.id,
                selected_option_index=NO_ANSWER,
                is_correct=False,
            )
        if not 0 <= selection < len(question.options):
            raise InvariantViolation(
                f"Selection {selection} is out of range for question {question.id}"
            )
        return cls(
            question_id=question.id,
            selected_option_index=selection,
            is_correct=question.is_correct(selection),
        )

    @property
    def answered(self) -> bool:
        return self.selected_option_index != NO_ANSWER
