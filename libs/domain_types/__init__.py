"""Shared domain types for the IQ test core.

This package is the single source of truth for the closed enumerations used
by the session controller, the scoring engine and the collaborator adapters.

Usage:
    from libs.domain_types import QuestionCategory, DifficultyLevel
"""

import enum


class QuestionCategory(str, enum.Enum):
    """Reasoning categories covered by the assessment."""

    LOGICAL = "logical"
    NUMERICAL = "numerical"
    VERBAL = "verbal"
    SPATIAL = "spatial"


class DifficultyLevel(str, enum.Enum):
    """Difficulty levels for questions."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class SessionPhase(str, enum.Enum):
    """Lifecycle phase of a test session."""

    AWAITING_START = "awaiting_start"
    ACTIVE = "active"
    COMPLETED = "completed"
    ABANDONED = "abandoned"


__all__ = [
    "QuestionCategory",
    "DifficultyLevel",
    "SessionPhase",
]
