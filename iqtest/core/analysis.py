"""
Result analysis with a deterministic local fallback.

The analysis collaborator is optional and may fail. The results screen must
never wait on it, so any failure (or an empty reply) yields the locally
built summary instead.
"""
import logging
from dataclasses import dataclass
from typing import Optional, Protocol

from iqtest.core.graceful_failure import graceful_failure
from iqtest.core.results import TestResult
from iqtest.core.scoring import get_strongest_weakest_categories

logger = logging.getLogger(__name__)


class ResultAnalyzer(Protocol):
    """Produces free-form explanatory text for a completed session."""

    def analyze(self, result: TestResult) -> str:
        """
        Raises:
            AnalysisError: If no text could be produced
        """
        ...


@dataclass(frozen=True)
class AnalysisOutcome:
    """Analysis text plus whether it came from the local fallback."""

    text: str
    is_fallback: bool


def _score_band_sentence(iq_score: int) -> str:
    if iq_score >= 130:
        return "in the highly gifted range. This is an exceptional performance!"
    if iq_score >= 115:
        return "above average. You demonstrate strong cognitive abilities."
    if iq_score >= 100:
        return "in the average range, which is perfectly normal."
    return (
        "below average, but remember that IQ tests are just one measure of "
        "intelligence."
    )


def build_fallback_analysis(result: TestResult) -> str:
    """
    Build the local summary shown when no analysis text is available.

    Deterministic: depends only on the score, the answer totals and the
    category performance map.
    """
    percentage = (
        result.correct_count / result.total_questions * 100
        if result.total_questions
        else 0.0
    )

    analysis = (
        f"Based on your IQ test results, you scored {result.iq_score}, which "
        f"places you {_score_band_sentence(result.iq_score)}"
    )
    analysis += (
        f"\n\nYou answered {result.correct_count} out of {result.total_questions} "
        f"questions correctly ({percentage:.1f}%). "
    )

    present = {item.question.category for item in result.answers}
    extremes = get_strongest_weakest_categories(
        {
            category: pct
            for category, pct in result.category_performance.items()
            if category in present
        }
    )
    strongest = extremes["strongest_category"]
    weakest = extremes["weakest_category"]

    if strongest is not None:
        analysis += f"Your strongest area appears to be {strongest.value} reasoning. "
    if weakest is not None and weakest != strongest:
        analysis += f"Your {weakest.value} reasoning has the most room to grow. "
    analysis += (
        "Consider practicing more varied question types to improve your overall "
        "cognitive flexibility."
    )
    return analysis


def analyze_with_fallback(
    result: TestResult, analyzer: Optional[ResultAnalyzer]
) -> AnalysisOutcome:
    """
    Ask ``analyzer`` for analysis text, falling back to the local summary.

    Never raises for analyzer failures; they are logged and replaced by
    ``build_fallback_analysis``.
    """
    text: Optional[str] = None
    if analyzer is not None:
        with graceful_failure(
            "generate result analysis",
            logger,
            context={"iq_score": result.iq_score},
        ):
            text = analyzer.analyze(result)

    if text and text.strip():
        return AnalysisOutcome(text=text.strip(), is_fallback=False)

    if analyzer is not None:
        logger.info("Using local fallback analysis")
    return AnalysisOutcome(text=build_fallback_analysis(result), is_fallback=True)
