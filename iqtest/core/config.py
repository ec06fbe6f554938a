"""
Application configuration settings.
"""

from typing import Dict, List, Optional, Self

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from libs.domain_types import QuestionCategory


# Tolerance for floating-point distribution summation checks
_DISTRIBUTION_SUM_TOLERANCE = 1e-6


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "IQ Test Core"
    APP_VERSION: str = "0.1.0"
    ENV: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # Session timing
    SECONDS_PER_QUESTION: int = Field(
        default=45,
        description="Countdown length for each question, in timer ticks",
    )
    TIMER_TICK_INTERVAL_SECONDS: float = Field(
        default=1.0,
        description="Wall-clock seconds between timer ticks",
    )

    # Scoring
    # Displayed score = round(SCORE_FLOOR + accuracy * SCORE_SPAN).
    # A linear rescaling of raw accuracy, not a norm-referenced IQ.
    SCORE_FLOOR: int = 70
    SCORE_SPAN: int = 60

    # Test composition
    TEST_TOTAL_QUESTIONS: int = 20
    TEST_CATEGORIES: List[QuestionCategory] = list(QuestionCategory)
    TEST_DIFFICULTY_DISTRIBUTION: Dict[str, float] = {
        "easy": 0.30,
        "medium": 0.50,
        "hard": 0.20,
    }

    # Google Gemini
    GEMINI_API_KEY: Optional[str] = Field(
        default=None,
        repr=False,
        description="Gemini API key (leave empty to use the built-in question bank)",
    )
    GEMINI_MODEL: str = "gemini-1.5-flash-latest"
    QUESTION_GENERATION_TEMPERATURE: float = 0.8
    QUESTION_GENERATION_MAX_TOKENS: int = 8192
    ANALYSIS_TEMPERATURE: float = 0.7
    ANALYSIS_MAX_TOKENS: int = 2048
    ANALYSIS_TIMEOUT_SECONDS: float = Field(
        default=30.0,
        description="Upper bound on how long the results screen waits for analysis text",
    )

    # History persistence
    DATABASE_URL: str = "sqlite:///./iqtest.db"
    HISTORY_ENABLED: bool = True

    @model_validator(mode="after")
    def validate_session_settings(self) -> Self:
        """Reject timing, scoring and composition values the core cannot run with."""
        if self.SECONDS_PER_QUESTION <= 0:
            raise ValueError("SECONDS_PER_QUESTION must be positive")
        if self.TIMER_TICK_INTERVAL_SECONDS <= 0:
            raise ValueError("TIMER_TICK_INTERVAL_SECONDS must be positive")
        if self.SCORE_SPAN <= 0:
            raise ValueError("SCORE_SPAN must be positive")
        if self.TEST_TOTAL_QUESTIONS <= 0:
            raise ValueError("TEST_TOTAL_QUESTIONS must be positive")
        if not self.TEST_CATEGORIES:
            raise ValueError("TEST_CATEGORIES must not be empty")

        expected = {"easy", "medium", "hard"}
        if set(self.TEST_DIFFICULTY_DISTRIBUTION) != expected:
            raise ValueError(
                f"TEST_DIFFICULTY_DISTRIBUTION keys must be exactly {sorted(expected)}"
            )
        if any(v < 0 for v in self.TEST_DIFFICULTY_DISTRIBUTION.values()):
            raise ValueError("TEST_DIFFICULTY_DISTRIBUTION values must be non-negative")
        total = sum(self.TEST_DIFFICULTY_DISTRIBUTION.values())
        if abs(total - 1.0) > _DISTRIBUTION_SUM_TOLERANCE:
            raise ValueError(
                f"TEST_DIFFICULTY_DISTRIBUTION must sum to 1.0, got {total}"
            )
        return self

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )


# Global settings instance
settings = Settings()
