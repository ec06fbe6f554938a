"""
Tests for the LLM-backed result analyzer.
"""
import pytest

from iqtest.core.errors import AnalysisError
from iqtest.core.results import assemble_result
from iqtest.models.question import AnswerRecord
from iqtest.providers.base import BaseLLMProvider
from iqtest.services.analysis import LLMResultAnalyzer


class FakeProvider(BaseLLMProvider):
    def __init__(self, reply="", error=None):
        super().__init__(api_key="test-key", model="fake-model")  # pragma: allowlist secret
        self.reply = reply
        self.error = error
        self.calls = []

    def generate_completion(self, prompt, temperature=0.7, max_tokens=1000, timeout=None, **kwargs):
        self.calls.append(
            {"prompt": prompt, "temperature": temperature, "max_tokens": max_tokens, "timeout": timeout}
        )
        if self.error is not None:
            raise self._handle_api_error(self.error)
        return self.reply


@pytest.fixture
def result(five_questions):
    selections = [0, 1, 2, None, 1]
    answers = tuple(
        AnswerRecord.for_question(q, s) for q, s in zip(five_questions, selections)
    )
    return assemble_result(answers, five_questions)


class TestLLMResultAnalyzer:
    """Tests for LLMResultAnalyzer."""

    def test_returns_cleaned_text(self, result):
        """Test that markdown is stripped from the reply."""
        provider = FakeProvider(reply="## Overview\n**Strong** numerical *reasoning*.\n")

        text = LLMResultAnalyzer(provider).analyze(result)

        assert text == "Overview\nStrong numerical reasoning."

    def test_request_parameters(self, result):
        """Test the prompt and generation settings sent to the model."""
        provider = FakeProvider(reply="Fine.")

        LLMResultAnalyzer(provider).analyze(result)

        call = provider.calls[0]
        assert "IQ Score: 106" in call["prompt"]
        assert "Questions Answered: 3/5 (60.0%)" in call["prompt"]
        assert "Question 4 (spatial, medium): ✗ Incorrect" in call["prompt"]
        assert call["temperature"] == pytest.approx(0.7)
        assert call["max_tokens"] == 2048
        assert call["timeout"] == pytest.approx(30.0)

    def test_provider_error(self, result):
        """Test that provider failures become AnalysisError."""
        provider = FakeProvider(error=Exception("503 Service Unavailable"))

        with pytest.raises(AnalysisError, match="server error"):
            LLMResultAnalyzer(provider).analyze(result)

    @pytest.mark.parametrize("reply", ["", "***", "## "])
    def test_empty_reply(self, result, reply):
        """Test that a reply with no usable text is an AnalysisError."""
        with pytest.raises(AnalysisError, match="No analysis content"):
            LLMResultAnalyzer(FakeProvider(reply=reply)).analyze(result)
