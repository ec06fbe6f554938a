"""LLM-backed result analyzer."""

import logging
from typing import Optional

from iqtest.core.config import Settings, settings as default_settings
from iqtest.core.errors import AnalysisError
from iqtest.core.results import TestResult
from iqtest.prompts import build_analysis_prompt, clean_analysis_text
from iqtest.providers.base import BaseLLMProvider, LLMProviderError

logger = logging.getLogger(__name__)


class LLMResultAnalyzer:
    """Asks an LLM provider for a written interpretation of a result.

    Usage:
        analyzer = LLMResultAnalyzer(GoogleProvider(api_key))
        outcome = analyze_with_fallback(result, analyzer)
    """

    def __init__(
        self,
        provider: BaseLLMProvider,
        settings: Optional[Settings] = None,
    ):
        self.provider = provider
        self.settings = settings or default_settings

    def analyze(self, result: TestResult) -> str:
        """
        Generate analysis text for ``result``.

        Markdown emphasis and headers are stripped from the reply.

        Raises:
            AnalysisError: If the request fails or the reply is empty
        """
        prompt = build_analysis_prompt(result.to_analysis_payload())
        provider_name = self.provider.get_provider_name()

        try:
            text = self.provider.generate_completion(
                prompt,
                temperature=self.settings.ANALYSIS_TEMPERATURE,
                max_tokens=self.settings.ANALYSIS_MAX_TOKENS,
                timeout=self.settings.ANALYSIS_TIMEOUT_SECONDS,
                top_k=40,
                top_p=0.95,
            )
        except LLMProviderError as e:
            raise AnalysisError(
                f"Analysis request to {provider_name} failed: {e.classified_error.message}"
            ) from e

        cleaned = clean_analysis_text(text or "")
        if not cleaned:
            raise AnalysisError(f"No analysis content received from {provider_name}")

        logger.info(
            f"Received analysis ({len(cleaned)} chars)",
            extra={"provider": provider_name, "iq_score": result.iq_score},
        )
        return cleaned
