"""Tests for prompt construction and response cleanup."""

import pytest

from iqtest.prompts import (
    build_analysis_prompt,
    build_question_generation_prompt,
    clean_analysis_text,
    extract_json_array,
)
from libs.domain_types import DifficultyLevel, QuestionCategory


class TestQuestionGenerationPrompt:
    """Tests for build_question_generation_prompt."""

    def test_contains_request_details(self):
        """Test count, categories and difficulty mix in the prompt."""
        prompt = build_question_generation_prompt(20, list(QuestionCategory))

        assert "Generate exactly 20 high-quality IQ test questions" in prompt
        assert "categories: logical, numerical, verbal, spatial" in prompt
        assert "(5 questions per category)" in prompt
        assert "easy (30%), medium (50%), hard (20%)" in prompt
        assert '"correctAnswer": 1' in prompt
        assert "4. Spatial Reasoning" in prompt

    def test_custom_mix_and_categories(self):
        """Test a restricted category list and custom mix."""
        prompt = build_question_generation_prompt(
            6,
            [QuestionCategory.VERBAL, QuestionCategory.SPATIAL],
            {
                DifficultyLevel.EASY: 0.5,
                DifficultyLevel.MEDIUM: 0.5,
                DifficultyLevel.HARD: 0.0,
            },
        )

        assert "categories: verbal, spatial" in prompt
        assert "(3 questions per category)" in prompt
        assert "easy (50%), medium (50%), hard (0%)" in prompt
        assert "Logical Reasoning" not in prompt


class TestAnalysisPrompt:
    """Tests for build_analysis_prompt."""

    def test_breakdown(self):
        """Test score summary and per-question breakdown lines."""
        payload = {
            "score": 100,
            "total_questions": 2,
            "correct_answers": 1,
            "category_performance": {"logical": 100.0, "verbal": 0.0},
            "answers": [
                {"type": "logical", "difficulty": "easy", "is_correct": True},
                {"type": "verbal", "difficulty": "hard", "is_correct": False},
            ],
        }

        prompt = build_analysis_prompt(payload)

        assert "IQ Score: 100" in prompt
        assert "Questions Answered: 1/2 (50.0%)" in prompt
        assert "Category Performance: logical: 100.0%, verbal: 0.0%" in prompt
        assert "Question 1 (logical, easy): ✓ Correct" in prompt
        assert "Question 2 (verbal, hard): ✗ Incorrect" in prompt
        assert "400-600 words" in prompt


class TestCleanAnalysisText:
    """Tests for clean_analysis_text."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("**Bold** text", "Bold text"),
            ("*italic* text", "italic text"),
            ("### Header\nBody", "Header\nBody"),
            ("Stray * and # marks", "Stray  and marks"),
            ("  padded  ", "padded"),
        ],
    )
    def test_cleanup(self, raw, expected):
        """Test markdown removal."""
        assert clean_analysis_text(raw) == expected


class TestExtractJsonArray:
    """Tests for extract_json_array."""

    def test_array_inside_prose(self):
        """Test extracting the array from surrounding text and fences."""
        text = 'Sure!\n```json\n[{"id": 1, "options": ["a", "b"]}]\n```\nEnjoy.'

        assert extract_json_array(text) == [{"id": 1, "options": ["a", "b"]}]

    def test_invalid_json(self):
        """Test that broken JSON raises ValueError."""
        with pytest.raises(ValueError, match="Failed to parse"):
            extract_json_array("[{not json}]")

    def test_non_array(self):
        """Test that a bare object raises ValueError."""
        with pytest.raises(ValueError, match="should be an array"):
            extract_json_array('{"id": 1}')
