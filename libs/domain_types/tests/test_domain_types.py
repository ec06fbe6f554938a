"""Tests for shared domain types package."""

import json

from libs.domain_types import DifficultyLevel, QuestionCategory, SessionPhase


class TestQuestionCategory:
    """Tests for QuestionCategory enum."""

    def test_values(self):
        assert set(QuestionCategory) == {
            QuestionCategory.LOGICAL,
            QuestionCategory.NUMERICAL,
            QuestionCategory.VERBAL,
            QuestionCategory.SPATIAL,
        }

    def test_string_values(self):
        assert QuestionCategory.LOGICAL.value == "logical"
        assert QuestionCategory.NUMERICAL.value == "numerical"
        assert QuestionCategory.VERBAL.value == "verbal"
        assert QuestionCategory.SPATIAL.value == "spatial"

    def test_str_mixin(self):
        assert QuestionCategory("verbal") == QuestionCategory.VERBAL

    def test_json_serializable(self):
        assert json.dumps(QuestionCategory.SPATIAL) == '"spatial"'

    def test_count(self):
        assert len(QuestionCategory) == 4


class TestDifficultyLevel:
    """Tests for DifficultyLevel enum."""

    def test_values(self):
        assert DifficultyLevel.EASY.value == "easy"
        assert DifficultyLevel.MEDIUM.value == "medium"
        assert DifficultyLevel.HARD.value == "hard"

    def test_count(self):
        assert len(DifficultyLevel) == 3


class TestSessionPhase:
    """Tests for SessionPhase enum."""

    def test_values(self):
        assert SessionPhase.AWAITING_START.value == "awaiting_start"
        assert SessionPhase.ACTIVE.value == "active"
        assert SessionPhase.COMPLETED.value == "completed"
        assert SessionPhase.ABANDONED.value == "abandoned"

    def test_count(self):
        assert len(SessionPhase) == 4
