"""
Assessment flow orchestration.

Wires the session controller to its collaborators: fetch a question set,
run a session, then score, analyze and (for signed-in users) persist the
result. Only a question provider failure stops the flow; analysis and
history failures degrade to the local fallback and an unsaved result.

Usage:
    flow = AssessmentFlow.from_settings()
    controller = flow.start_session()
    ...  # user answers, timer ticks
    completed = flow.finalize(controller)
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from iqtest.core.analysis import AnalysisOutcome, ResultAnalyzer, analyze_with_fallback
from iqtest.core.config import Settings, settings as default_settings
from iqtest.core.datetime_utils import utc_now
from iqtest.core.errors import InvariantViolation, ProviderError
from iqtest.core.graceful_failure import graceful_failure, graceful_failure_decorator
from iqtest.core.logging_config import setup_logging
from iqtest.core.results import TestResult, assemble_result
from iqtest.core.session import CompletionCallback, QuestionTimer, TestSessionController
from iqtest.core.timer import AsyncioQuestionTimer
from iqtest.providers.google_provider import GoogleProvider
from iqtest.services.analysis import LLMResultAnalyzer
from iqtest.services.history import HistoryEntry, HistoryStore
from iqtest.services.identity import ANONYMOUS, Identity, IdentityProvider
from iqtest.services.question_provider import (
    DifficultyMix,
    LLMQuestionProvider,
    QuestionProvider,
    StaticQuestionProvider,
)
from libs.domain_types import QuestionCategory

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompletedAssessment:
    """Everything the results screen shows for one finished session."""

    result: TestResult
    analysis: AnalysisOutcome
    history_saved: bool


class AssessmentFlow:
    """Runs sessions end to end against a set of collaborators."""

    def __init__(
        self,
        question_provider: QuestionProvider,
        analyzer: Optional[ResultAnalyzer] = None,
        history_store: Optional[HistoryStore] = None,
        identity_provider: Optional[IdentityProvider] = None,
        settings: Optional[Settings] = None,
        timer_factory: Optional[Callable[[], QuestionTimer]] = None,
    ):
        self.question_provider = question_provider
        self.analyzer = analyzer
        self.history_store = history_store
        self.identity_provider = identity_provider
        self.settings = settings or default_settings
        self.timer_factory = timer_factory

    @classmethod
    def from_settings(
        cls,
        settings: Optional[Settings] = None,
        identity_provider: Optional[IdentityProvider] = None,
        configure_logging: bool = True,
    ) -> "AssessmentFlow":
        """
        Build a flow from configuration.

        With a Gemini API key, questions and analysis come from Gemini;
        without one, questions come from the built-in bank and analysis uses
        the local fallback. History is stored in ``DATABASE_URL`` when
        ``HISTORY_ENABLED`` is set; a database that cannot be opened is logged
        and the flow runs without history.

        Args:
            settings: Configuration; defaults to the module settings
            identity_provider: Source of the signed-in user, if any
            configure_logging: Install the package logging configuration
                (leave False when the host application configures logging)
        """
        settings = settings or default_settings
        if configure_logging:
            setup_logging(settings)

        question_provider: QuestionProvider
        analyzer: Optional[ResultAnalyzer] = None
        if settings.GEMINI_API_KEY:
            provider = GoogleProvider(
                api_key=settings.GEMINI_API_KEY, model=settings.GEMINI_MODEL
            )
            question_provider = LLMQuestionProvider(provider, settings=settings)
            analyzer = LLMResultAnalyzer(provider, settings=settings)
        else:
            logger.warning(
                "GEMINI_API_KEY not set; using the built-in question bank "
                "and local analysis"
            )
            question_provider = StaticQuestionProvider(settings=settings)

        history_store: Optional[HistoryStore] = None
        if settings.HISTORY_ENABLED:
            with graceful_failure("open history database", logger, log_level=logging.ERROR):
                history_store = HistoryStore(settings.DATABASE_URL)

        return cls(
            question_provider=question_provider,
            analyzer=analyzer,
            history_store=history_store,
            identity_provider=identity_provider,
            settings=settings,
            timer_factory=lambda: AsyncioQuestionTimer(
                settings.TIMER_TICK_INTERVAL_SECONDS
            ),
        )

    def current_identity(self) -> Identity:
        if self.identity_provider is None:
            return ANONYMOUS
        return self.identity_provider.current_identity()

    def start_session(
        self,
        count: Optional[int] = None,
        categories: Optional[Sequence[QuestionCategory]] = None,
        difficulty_mix: Optional[DifficultyMix] = None,
        on_complete: Optional[CompletionCallback] = None,
    ) -> TestSessionController:
        """
        Fetch a question set and start a session over it.

        Raises:
            ProviderError: If no question set could be fetched. No session
                exists in that case; calling again is the retry.
        """
        count = count if count is not None else self.settings.TEST_TOTAL_QUESTIONS
        try:
            question_set = self.question_provider.fetch_question_set(
                count, categories=categories, difficulty_mix=difficulty_mix
            )
        except ProviderError as e:
            logger.error(
                f"Could not start session: {e} (retryable={e.is_retryable})"
            )
            raise

        controller = TestSessionController(
            question_set,
            seconds_per_question=self.settings.SECONDS_PER_QUESTION,
            timer=self.timer_factory() if self.timer_factory is not None else None,
            on_complete=on_complete,
        )
        controller.start()
        return controller

    def finalize(self, controller: TestSessionController) -> CompletedAssessment:
        """
        Score a completed session, analyze it and save it when signed in.

        Raises:
            InvariantViolation: If the session is not completed
        """
        if not controller.is_complete:
            raise InvariantViolation(
                f"Only completed sessions can be finalized (phase={controller.phase.value})"
            )

        result = assemble_result(controller.answers, controller.question_set)
        analysis = analyze_with_fallback(result, self.analyzer)
        history_saved = self._save_history(result, analysis)

        logger.info(
            f"Assessment finalized: score={result.iq_score} "
            f"({result.score_level.label}), fallback_analysis={analysis.is_fallback}, "
            f"history_saved={history_saved}",
            extra={"iq_score": result.iq_score},
        )
        return CompletedAssessment(
            result=result, analysis=analysis, history_saved=history_saved
        )

    def _save_history(self, result: TestResult, analysis: AnalysisOutcome) -> bool:
        identity = self.current_identity()
        if not identity.is_signed_in or self.history_store is None:
            return False

        saved = False
        with graceful_failure(
            "save test history",
            logger,
            log_level=logging.ERROR,
            context={"user_id": identity.user_id, "iq_score": result.iq_score},
        ):
            self.history_store.save(
                identity.user_id, result.to_history_record(analysis.text, utc_now())
            )
            saved = True
        return saved

    @graceful_failure_decorator("load test history", default=())
    def list_history(self, limit: int = 20) -> Sequence[HistoryEntry]:
        """Stored results for the signed-in user, newest first.

        Returns an empty sequence when anonymous, when history is disabled, or
        when the history store cannot be read.
        """
        identity = self.current_identity()
        if not identity.is_signed_in or self.history_store is None:
            return ()
        return self.history_store.list_for_user(identity.user_id, limit=limit)
