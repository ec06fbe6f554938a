"""Gemini adapter used for question generation and result analysis."""

import logging
from typing import Any, Optional

import google.generativeai as genai
from google.generativeai.types import GenerationConfig

from .base import BaseLLMProvider

logger = logging.getLogger(__name__)


class GoogleProvider(BaseLLMProvider):
    """Calls a Gemini model through the ``google-generativeai`` SDK."""

    def __init__(self, api_key: str, model: str = "gemini-1.5-flash-latest"):
        super().__init__(api_key, model)
        genai.configure(api_key=api_key)
        self.client = genai.GenerativeModel(model)

    def generate_completion(
        self,
        prompt: str,
        temperature: float = 0.7,
        max_tokens: int = 1000,
        timeout: Optional[float] = None,
        **kwargs: Any,
    ) -> str:
        """
        Run one ``generate_content`` call.

        Extra keyword arguments become ``GenerationConfig`` fields, so the
        question provider can pass ``top_k``/``top_p``. ``timeout`` is sent as
        a per-request option.

        Returns:
            Reply text, or "" when Gemini returned no usable candidate

        Raises:
            LLMProviderError: If the SDK call fails
        """
        config = GenerationConfig(
            temperature=temperature,
            max_output_tokens=max_tokens,
            **kwargs,
        )
        try:
            response = self.client.generate_content(
                prompt,
                generation_config=config,
                request_options={"timeout": timeout} if timeout is not None else None,
            )
        except Exception as e:
            logger.debug(f"Gemini {self.model} request failed: {e}")
            raise self._handle_api_error(e)

        return self._reply_text(response)

    def _reply_text(self, response: Any) -> str:
        # The SDK raises ValueError from .text when the candidate was blocked
        # or finished without parts.
        try:
            text = response.text
        except ValueError as e:
            logger.warning(f"Gemini {self.model} returned no text: {e}")
            return ""
        return text or ""
