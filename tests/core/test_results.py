"""
Tests for result assembly.
"""
from datetime import datetime, timezone

import pytest

from iqtest.core.errors import InvariantViolation
from iqtest.core.results import HistoryRecord, TestResult, assemble_result
from iqtest.models.question import AnswerRecord
from libs.domain_types import QuestionCategory


@pytest.fixture
def three_correct_answers(five_questions):
    # Correct options are 0, 1, 2, 3, 0
    selections = [0, 1, 2, None, 1]
    return tuple(
        AnswerRecord.for_question(q, s) for q, s in zip(five_questions, selections)
    )


class TestAssembleResult:
    """Tests for assemble_result."""

    def test_fields(self, five_questions, three_correct_answers):
        """Test the assembled totals, score and level."""
        result = assemble_result(three_correct_answers, five_questions)

        assert isinstance(result, TestResult)
        assert result.iq_score == 106
        assert result.correct_count == 3
        assert result.total_questions == 5
        assert result.accuracy_percentage == 60.0
        assert result.score_level.label == "Average"
        assert result.category_performance[QuestionCategory.SPATIAL] == 0.0
        assert result.category_performance[QuestionCategory.LOGICAL] == 50.0

    def test_answers_paired_with_questions(self, five_questions, three_correct_answers):
        """Test that each answer carries its question."""
        result = assemble_result(three_correct_answers, five_questions)

        assert [item.question.id for item in result.answers] == [1, 2, 3, 4, 5]
        assert result.answers[0].selected_option == "A"
        assert result.answers[3].selected_option is None
        assert result.answers[3].correct_option == "D"
        assert result.answers[4].is_correct is False

    def test_rederivable(self, five_questions, three_correct_answers):
        """Test that assembling twice yields equal results."""
        assert assemble_result(three_correct_answers, five_questions) == assemble_result(
            three_correct_answers, five_questions
        )

    def test_partial_answers_rejected(self, five_questions, three_correct_answers):
        """Test that incomplete sessions cannot be assembled."""
        with pytest.raises(InvariantViolation):
            assemble_result(three_correct_answers[:4], five_questions)


class TestTestResultSerialization:
    """Tests for the analysis payload and history record."""

    def test_analysis_payload(self, five_questions, three_correct_answers):
        """Test the shape of the analysis request payload."""
        payload = assemble_result(
            three_correct_answers, five_questions
        ).to_analysis_payload()

        assert payload["score"] == 106
        assert payload["total_questions"] == 5
        assert payload["correct_answers"] == 3
        assert payload["category_performance"] == {
            "logical": 50.0,
            "numerical": 100.0,
            "verbal": 100.0,
            "spatial": 0.0,
        }
        assert payload["answers"][3] == {
            "question": "Question 4?",
            "user_answer": -1,
            "correct_answer": 3,
            "is_correct": False,
            "type": "spatial",
            "difficulty": "medium",
        }

    def test_history_record(self, five_questions, three_correct_answers):
        """Test conversion into the persisted record."""
        timestamp = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
        result = assemble_result(three_correct_answers, five_questions)

        record = result.to_history_record("Nice work", timestamp)

        assert isinstance(record, HistoryRecord)
        assert record.score == 106
        assert record.category_performance["verbal"] == 100.0
        assert record.analysis_text == "Nice work"
        assert record.timestamp == timestamp
        assert len(record.answers) == 5
