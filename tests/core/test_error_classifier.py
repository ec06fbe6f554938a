"""
Tests for LLM error classification.
"""
import pytest

from iqtest.core.error_classifier import (
    ClassifiedError,
    ErrorCategory,
    ErrorClassifier,
    ErrorSeverity,
)


class TestErrorClassifier:
    """Tests for ErrorClassifier.classify_error."""

    @pytest.mark.parametrize(
        "message,category,retryable",
        [
            ("429 Resource has been exhausted (e.g. check quota).", ErrorCategory.BILLING_QUOTA, False),
            ("400 API key not valid. Please pass a valid API key.", ErrorCategory.AUTHENTICATION, False),
            ("403 Permission denied", ErrorCategory.AUTHENTICATION, False),
            ("Rate limit reached, slow down", ErrorCategory.RATE_LIMIT, True),
            ("404 model not found: gemini-9", ErrorCategory.MODEL_ERROR, False),
            ("503 Service Unavailable", ErrorCategory.SERVER_ERROR, True),
            ("504 Deadline Exceeded", ErrorCategory.SERVER_ERROR, True),
            ("Deadline exceeded while waiting", ErrorCategory.NETWORK_ERROR, True),
            ("connection reset by peer", ErrorCategory.NETWORK_ERROR, True),
            ("400 Bad Request: malformed contents", ErrorCategory.INVALID_REQUEST, False),
        ],
    )
    def test_classifies_by_message(self, message, category, retryable):
        """Test pattern-based classification of SDK error messages."""
        classified = ErrorClassifier.classify_error(Exception(message), "google")

        assert classified.category == category
        assert classified.is_retryable is retryable
        assert classified.provider == "google"
        assert classified.original_error == "Exception"

    @pytest.mark.parametrize("error", [TimeoutError(), ConnectionError("")])
    def test_builtin_network_errors(self, error):
        """Test that builtin timeout/connection errors are retryable network errors."""
        classified = ErrorClassifier.classify_error(error, "google")

        assert classified.category == ErrorCategory.NETWORK_ERROR
        assert classified.severity == ErrorSeverity.LOW
        assert classified.is_retryable is True

    def test_unknown_error(self):
        """Test the fallback classification."""
        classified = ErrorClassifier.classify_error(ValueError("something odd"), "google")

        assert classified.category == ErrorCategory.UNKNOWN
        assert classified.is_retryable is False
        assert "something odd" in classified.message


class TestClassifiedError:
    """Tests for ClassifiedError."""

    def test_str_and_to_dict(self):
        """Test string form and serialization."""
        classified = ClassifiedError(
            category=ErrorCategory.RATE_LIMIT,
            severity=ErrorSeverity.HIGH,
            provider="google",
            original_error="ResourceExhausted",
            message="Rate limit exceeded for google.",
            is_retryable=True,
        )

        assert str(classified) == "[HIGH] google: rate_limit - Rate limit exceeded for google."
        assert classified.to_dict() == {
            "category": "rate_limit",
            "severity": "high",
            "provider": "google",
            "original_error": "ResourceExhausted",
            "message": "Rate limit exceeded for google.",
            "is_retryable": True,
        }
