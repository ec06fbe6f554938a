"""
Tests for Settings configuration validation in config.py.
"""
import pytest
from pydantic import ValidationError

from iqtest.core.config import Settings
from libs.domain_types import QuestionCategory


class TestDefaults:
    """Tests for default configuration values."""

    def test_session_defaults(self):
        """Test the timing and scoring defaults."""
        settings = Settings(_env_file=None)

        assert settings.SECONDS_PER_QUESTION == 45
        assert settings.TIMER_TICK_INTERVAL_SECONDS == pytest.approx(1.0)
        assert settings.SCORE_FLOOR == 70
        assert settings.SCORE_SPAN == 60

    def test_composition_defaults(self):
        """Test the default categories and difficulty mix."""
        settings = Settings(_env_file=None)

        assert settings.TEST_CATEGORIES == list(QuestionCategory)
        assert settings.TEST_DIFFICULTY_DISTRIBUTION == {
            "easy": pytest.approx(0.30),
            "medium": pytest.approx(0.50),
            "hard": pytest.approx(0.20),
        }

    def test_api_key_hidden_from_repr(self):
        """Test that the Gemini key does not leak into repr."""
        settings = Settings(_env_file=None, GEMINI_API_KEY="secret-key")  # pragma: allowlist secret

        assert "secret-key" not in repr(settings)

    def test_environment_override(self, monkeypatch):
        """Test that environment variables override defaults."""
        monkeypatch.setenv("SECONDS_PER_QUESTION", "30")
        monkeypatch.setenv("TEST_CATEGORIES", '["verbal", "spatial"]')

        settings = Settings(_env_file=None)

        assert settings.SECONDS_PER_QUESTION == 30
        assert settings.TEST_CATEGORIES == [
            QuestionCategory.VERBAL,
            QuestionCategory.SPATIAL,
        ]


class TestSessionSettingsValidation:
    """Tests for validate_session_settings."""

    @pytest.mark.parametrize(
        "field",
        [
            "SECONDS_PER_QUESTION",
            "TIMER_TICK_INTERVAL_SECONDS",
            "SCORE_SPAN",
            "TEST_TOTAL_QUESTIONS",
        ],
    )
    def test_non_positive_values_rejected(self, field):
        """Test that zero durations, spans and counts are rejected."""
        with pytest.raises(ValidationError, match=f"{field} must be positive"):
            Settings(_env_file=None, **{field: 0})

    def test_empty_categories_rejected(self):
        """Test that at least one category is required."""
        with pytest.raises(ValidationError, match="TEST_CATEGORIES must not be empty"):
            Settings(_env_file=None, TEST_CATEGORIES=[])

    def test_distribution_must_sum_to_one(self):
        """Test that the difficulty mix must sum to 1."""
        with pytest.raises(ValidationError, match="must sum to 1.0"):
            Settings(
                _env_file=None,
                TEST_DIFFICULTY_DISTRIBUTION={"easy": 0.5, "medium": 0.5, "hard": 0.5},
            )

    def test_distribution_keys(self):
        """Test that the difficulty mix names exactly easy/medium/hard."""
        with pytest.raises(ValidationError, match="keys must be exactly"):
            Settings(
                _env_file=None,
                TEST_DIFFICULTY_DISTRIBUTION={"easy": 0.5, "medium": 0.5},
            )

    def test_negative_fraction_rejected(self):
        """Test that negative fractions are rejected."""
        with pytest.raises(ValidationError, match="non-negative"):
            Settings(
                _env_file=None,
                TEST_DIFFICULTY_DISTRIBUTION={"easy": -0.5, "medium": 1.0, "hard": 0.5},
            )

    def test_float_tolerance(self):
        """Test that tiny float error in the sum is accepted."""
        settings = Settings(
            _env_file=None,
            TEST_DIFFICULTY_DISTRIBUTION={"easy": 0.1, "medium": 0.7, "hard": 0.2},
        )

        assert sum(settings.TEST_DIFFICULTY_DISTRIBUTION.values()) == pytest.approx(1.0)
