"""Value types shared by the session controller and scoring engine."""

from iqtest.models.question import (
    NO_ANSWER,
    OPTION_COUNT,
    AnswerRecord,
    Question,
    QuestionSet,
)

__all__ = [
    "NO_ANSWER",
    "OPTION_COUNT",
    "AnswerRecord",
    "Question",
    "QuestionSet",
]
