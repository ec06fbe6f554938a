"""Error classification for LLM API failures.

Maps SDK exceptions from the generative-AI backend onto a small set of
categories so callers can decide whether offering a retry makes sense.
"""

import re
from enum import Enum
from typing import List, Tuple


class ErrorCategory(Enum):
    """Categories of API errors."""

    BILLING_QUOTA = "billing_quota"  # Insufficient funds, quota exceeded
    AUTHENTICATION = "authentication"  # API key invalid or expired
    RATE_LIMIT = "rate_limit"  # Rate limit/throttling errors
    MODEL_ERROR = "model_error"  # Model not found or unavailable
    SERVER_ERROR = "server_error"  # Provider server errors (5xx)
    NETWORK_ERROR = "network_error"  # Connection/timeout errors
    INVALID_REQUEST = "invalid_request"  # Malformed request or invalid parameters
    UNKNOWN = "unknown"  # Unclassified errors


class ErrorSeverity(Enum):
    """Severity levels for errors."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class ClassifiedError:
    """A classified API error with category and severity."""

    def __init__(
        self,
        category: ErrorCategory,
        severity: ErrorSeverity,
        provider: str,
        original_error: str,
        message: str,
        is_retryable: bool = False,
    ):
        self.category = category
        self.severity = severity
        self.provider = provider
        self.original_error = original_error
        self.message = message
        self.is_retryable = is_retryable

    def __str__(self) -> str:
        return (
            f"[{self.severity.value.upper()}] {self.provider}: "
            f"{self.category.value} - {self.message}"
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for logging/serialization."""
        return {
            "category": self.category.value,
            "severity": self.severity.value,
            "provider": self.provider,
            "original_error": self.original_error,
            "message": self.message,
            "is_retryable": self.is_retryable,
        }


# Checked in order; the first matching rule wins.
# (category, severity, retryable, patterns, message template)
_RULES: List[Tuple[ErrorCategory, ErrorSeverity, bool, List[str], str]] = [
    (
        ErrorCategory.BILLING_QUOTA,
        ErrorSeverity.CRITICAL,
        False,
        [
            r"insufficient.*funds",
            r"quota.*exceeded",
            r"billing",
            r"resource.*exhausted",
            r"402",
        ],
        "Billing or quota issue detected for {provider}.",
    ),
    (
        ErrorCategory.AUTHENTICATION,
        ErrorSeverity.CRITICAL,
        False,
        [
            r"invalid.*api.*key",
            r"api.*key.*not.*valid",
            r"permission.*denied",
            r"unauthorized",
            r"401",
            r"403",
        ],
        "Authentication failed. Verify the {provider} API key.",
    ),
    (
        ErrorCategory.RATE_LIMIT,
        ErrorSeverity.HIGH,
        True,
        [r"rate.*limit", r"too.*many.*requests", r"throttl", r"429"],
        "Rate limit exceeded for {provider}.",
    ),
    (
        ErrorCategory.MODEL_ERROR,
        ErrorSeverity.MEDIUM,
        False,
        [r"model.*not.*found", r"invalid.*model", r"model.*unavailable"],
        "Model configuration issue with {provider}.",
    ),
    (
        ErrorCategory.SERVER_ERROR,
        ErrorSeverity.MEDIUM,
        True,
        [
            r"internal.*server.*error",
            r"service.*unavailable",
            r"50[0-9]",
            r"server.*error",
        ],
        "{provider} server error. This may be temporary.",
    ),
    (
        ErrorCategory.NETWORK_ERROR,
        ErrorSeverity.LOW,
        True,
        [
            r"connection.*error",
            r"connection.*refused",
            r"connection.*reset",
            r"timeout",
            r"timed.*out",
            r"deadline.*exceeded",
            r"network",
        ],
        "Network connectivity issue. This may be temporary.",
    ),
    (
        ErrorCategory.INVALID_REQUEST,
        ErrorSeverity.MEDIUM,
        False,
        [r"invalid", r"bad.*request", r"400"],
        "Invalid request to {provider}.",
    ),
]


class ErrorClassifier:
    """Classifies API errors raised by LLM SDKs."""

    @staticmethod
    def classify_error(error: Exception, provider: str) -> ClassifiedError:
        """Classify an API error.

        Args:
            error: The exception that was raised
            provider: Provider name (e.g. "google")

        Returns:
            ClassifiedError with category, severity and retryability
        """
        error_str = str(error).lower()
        error_type = type(error).__name__

        # Built-in timeouts/connection failures carry no useful message text
        if isinstance(error, (TimeoutError, ConnectionError)):
            return ClassifiedError(
                category=ErrorCategory.NETWORK_ERROR,
                severity=ErrorSeverity.LOW,
                provider=provider,
                original_error=error_type,
                message="Network connectivity issue. This may be temporary.",
                is_retryable=True,
            )

        for category, severity, retryable, patterns, template in _RULES:
            if ErrorClassifier._match_patterns(error_str, patterns):
                return ClassifiedError(
                    category=category,
                    severity=severity,
                    provider=provider,
                    original_error=error_type,
                    message=template.format(provider=provider),
                    is_retryable=retryable,
                )

        return ClassifiedError(
            category=ErrorCategory.UNKNOWN,
            severity=ErrorSeverity.MEDIUM,
            provider=provider,
            original_error=error_type,
            message=f"Unclassified error from {provider}: {str(error)[:100]}",
            is_retryable=False,
        )

    @staticmethod
    def _match_patterns(text: str, patterns: List[str]) -> bool:
        """Check if text matches any of the given regex patterns."""
        return any(re.search(pattern, text, re.IGNORECASE) for pattern in patterns)
