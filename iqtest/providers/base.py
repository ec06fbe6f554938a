"""Common interface for the generative-model adapters behind question and
analysis collaborators."""

from abc import ABC, abstractmethod
from typing import Any, Optional

from iqtest.core.error_classifier import ClassifiedError, ErrorClassifier


class LLMProviderError(Exception):
    """An SDK failure wrapped together with its classification.

    ``original_exception`` keeps the raw SDK error for logging; callers
    decide what to do from ``classified_error`` (category, severity and
    whether a retry can help).
    """

    def __init__(
        self,
        classified_error: ClassifiedError,
        original_exception: Exception,
    ):
        self.classified_error = classified_error
        self.original_exception = original_exception
        super().__init__(str(classified_error))

    @property
    def is_retryable(self) -> bool:
        return self.classified_error.is_retryable


class BaseLLMProvider(ABC):
    """A text-in, text-out model client.

    Subclasses wrap one SDK and must route every SDK exception through
    ``_handle_api_error`` so that question generation and result analysis
    see a single error type.
    """

    def __init__(self, api_key: str, model: str):
        self.api_key = api_key
        self.model = model

    @abstractmethod
    def generate_completion(
        self,
        prompt: str,
        temperature: float = 0.7,
        max_tokens: int = 1000,
        timeout: Optional[float] = None,
        **kwargs: Any,
    ) -> str:
        """
        Send ``prompt`` to the model and return its reply text.

        Args:
            prompt: Question-generation or analysis prompt
            temperature: Sampling temperature
            max_tokens: Upper bound on reply length
            timeout: Seconds to wait for the reply; None keeps the SDK default
            **kwargs: Sampling options understood by the SDK (top_k, top_p)

        Raises:
            LLMProviderError: If the request fails
        """

    def get_provider_name(self) -> str:
        """Short name used in log lines and error messages ("google")."""
        return self.__class__.__name__.replace("Provider", "").lower()

    def _handle_api_error(self, error: Exception) -> LLMProviderError:
        classified = ErrorClassifier.classify_error(
            error=error,
            provider=self.get_provider_name(),
        )
        return LLMProviderError(
            classified_error=classified,
            original_exception=error,
        )
