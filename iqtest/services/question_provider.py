"""
Question provider collaborators.

A question provider turns a request (count, categories, difficulty mix) into
a validated ``QuestionSet`` or fails with ``ProviderError``. Two
implementations are shipped:

- ``LLMQuestionProvider`` asks the Gemini model for a JSON array of
  questions and validates it.
- ``StaticQuestionProvider`` samples the built-in bank with stratified
  selection by difficulty and category, for offline use and tests.
"""

import logging
import random
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Protocol, Sequence

from pydantic import ValidationError

from iqtest.core.config import Settings, settings as default_settings
from iqtest.core.errors import InvariantViolation, ProviderError
from iqtest.models.question import Question, QuestionSet
from iqtest.prompts import build_question_generation_prompt, extract_json_array
from iqtest.providers.base import BaseLLMProvider, LLMProviderError
from iqtest.services.question_bank import load_builtin_questions
from libs.domain_types import DifficultyLevel, QuestionCategory

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DifficultyMix:
    """Fraction of a question set drawn from each difficulty level."""

    easy: float = 0.30
    medium: float = 0.50
    hard: float = 0.20

    def __post_init__(self) -> None:
        values = (self.easy, self.medium, self.hard)
        if any(v < 0 for v in values):
            raise ValueError("Difficulty fractions cannot be negative")
        if abs(sum(values) - 1.0) > 1e-6:
            raise ValueError(f"Difficulty fractions must sum to 1.0, got {sum(values)}")

    @classmethod
    def from_settings(cls, settings: Settings) -> "DifficultyMix":
        distribution = settings.TEST_DIFFICULTY_DISTRIBUTION
        return cls(
            easy=distribution["easy"],
            medium=distribution["medium"],
            hard=distribution["hard"],
        )

    def as_dict(self) -> Dict[DifficultyLevel, float]:
        return {
            DifficultyLevel.EASY: self.easy,
            DifficultyLevel.MEDIUM: self.medium,
            DifficultyLevel.HARD: self.hard,
        }

    def target_counts(self, count: int) -> Dict[DifficultyLevel, int]:
        """
        Split ``count`` questions across difficulty levels.

        Each level gets ``int(count * fraction)``; whatever rounding leaves
        over is added to medium so the targets always sum to ``count``.

        Example:
            >>> DifficultyMix().target_counts(20)
            {<DifficultyLevel.EASY>: 6, <DifficultyLevel.MEDIUM>: 10, <DifficultyLevel.HARD>: 4}
        """
        targets = {level: int(count * frac) for level, frac in self.as_dict().items()}
        current_total = sum(targets.values())
        if current_total < count:
            targets[DifficultyLevel.MEDIUM] += count - current_total
        return targets


class QuestionProvider(Protocol):
    """Source of question sets for new sessions."""

    def fetch_question_set(
        self,
        count: int,
        categories: Optional[Sequence[QuestionCategory]] = None,
        difficulty_mix: Optional[DifficultyMix] = None,
    ) -> QuestionSet:
        """
        Raises:
            ProviderError: If the source is unreachable or returns an
                unusable payload
        """
        ...


def _validate_count(count: int) -> None:
    if count <= 0:
        raise ValueError("count must be positive")


def parse_question_set(items: Iterable[Any]) -> QuestionSet:
    """
    Validate raw question payloads into a ``QuestionSet``.

    A missing ``id`` is assigned from the item's 1-based position; every other
    field is required.

    Raises:
        ProviderError: For an empty payload, a non-object item, a field that
            fails validation, or duplicate ids
    """
    questions: List[Question] = []
    for index, item in enumerate(items):
        if not isinstance(item, dict):
            raise ProviderError(
                f"Question {index + 1} is not an object: {type(item).__name__}"
            )
        payload = dict(item)
        if payload.get("id") is None:
            payload["id"] = index + 1
        try:
            questions.append(Question.model_validate(payload))
        except ValidationError as e:
            raise ProviderError(
                f"Question {index + 1} failed validation: "
                f"{e.error_count()} error(s): {e.errors()[0]['msg']}"
            ) from e

    if not questions:
        raise ProviderError("Question provider returned no questions")

    try:
        return QuestionSet(questions)
    except InvariantViolation as e:
        raise ProviderError(str(e)) from e


class LLMQuestionProvider:
    """Generates question sets with an LLM provider."""

    def __init__(
        self,
        provider: BaseLLMProvider,
        settings: Optional[Settings] = None,
    ):
        self.provider = provider
        self.settings = settings or default_settings

    def fetch_question_set(
        self,
        count: int,
        categories: Optional[Sequence[QuestionCategory]] = None,
        difficulty_mix: Optional[DifficultyMix] = None,
    ) -> QuestionSet:
        """
        Request ``count`` questions from the model.

        If the model returns more questions than requested, the extras are
        dropped; fewer is accepted as long as at least one question is valid.

        Raises:
            ProviderError: If the request fails (``is_retryable`` reflects the
                classified cause) or the reply cannot be parsed
        """
        _validate_count(count)
        categories = list(dict.fromkeys(categories or self.settings.TEST_CATEGORIES))
        mix = difficulty_mix or DifficultyMix.from_settings(self.settings)

        prompt = build_question_generation_prompt(count, categories, mix.as_dict())
        provider_name = self.provider.get_provider_name()
        logger.info(
            f"Requesting {count} questions from {provider_name}",
            extra={"provider": provider_name},
        )

        try:
            text = self.provider.generate_completion(
                prompt,
                temperature=self.settings.QUESTION_GENERATION_TEMPERATURE,
                max_tokens=self.settings.QUESTION_GENERATION_MAX_TOKENS,
                top_k=40,
                top_p=0.95,
            )
        except LLMProviderError as e:
            logger.error(
                f"Failed to generate questions with {provider_name}: {str(e)} "
                f"(category={e.classified_error.category.value})"
            )
            raise ProviderError(
                f"Failed to generate questions: {e.classified_error.message}",
                is_retryable=e.is_retryable,
                classified_error=e.classified_error,
            ) from e

        if not text:
            raise ProviderError(
                "No questions content received from model", is_retryable=True
            )

        try:
            items = extract_json_array(text)
        except ValueError as e:
            logger.error(f"Unparseable question payload: {text[:200]}")
            raise ProviderError(str(e), is_retryable=True) from e

        if len(items) > count:
            logger.warning(f"Model returned {len(items)} questions, keeping {count}")
            items = items[:count]
        elif len(items) < count:
            logger.warning(f"Model returned {len(items)} of {count} requested questions")

        question_set = parse_question_set(items)
        logger.info(f"Generated question set with {len(question_set)} questions")
        return question_set


class StaticQuestionProvider:
    """
    Serves question sets from a fixed pool of questions.

    Selection is stratified: difficulty targets come from the mix, and each
    difficulty's target is spread evenly across the requested categories.
    When a stratum runs short, the remainder is filled from any question of
    the same difficulty, then from any remaining question.
    """

    def __init__(
        self,
        questions: Optional[Sequence[Question]] = None,
        seed: Optional[int] = None,
        settings: Optional[Settings] = None,
    ):
        self.questions = (
            tuple(questions) if questions is not None else load_builtin_questions()
        )
        self.settings = settings or default_settings
        self._rng = random.Random(seed)

    def fetch_question_set(
        self,
        count: int,
        categories: Optional[Sequence[QuestionCategory]] = None,
        difficulty_mix: Optional[DifficultyMix] = None,
    ) -> QuestionSet:
        """
        Raises:
            ProviderError: If the pool holds fewer than ``count`` questions in
                the requested categories
        """
        _validate_count(count)
        categories = list(dict.fromkeys(categories or self.settings.TEST_CATEGORIES))
        mix = difficulty_mix or DifficultyMix.from_settings(self.settings)

        pool = [q for q in self.questions if q.category in categories]
        if len(pool) < count:
            raise ProviderError(
                f"Question bank has {len(pool)} questions for "
                f"{[c.value for c in categories]}, {count} requested"
            )

        selected: List[Question] = []
        for difficulty, target in mix.target_counts(count).items():
            if target:
                selected.extend(
                    self._select_for_difficulty(pool, difficulty, target, categories)
                )

        if len(selected) < count:
            chosen_ids = {q.id for q in selected}
            leftovers = [q for q in pool if q.id not in chosen_ids]
            selected.extend(self._rng.sample(leftovers, count - len(selected)))

        self._rng.shuffle(selected)
        logger.info(f"Selected {len(selected)} questions from the built-in bank")
        try:
            return QuestionSet(selected)
        except InvariantViolation as e:
            raise ProviderError(str(e)) from e

    def _select_for_difficulty(
        self,
        pool: Sequence[Question],
        difficulty: DifficultyLevel,
        target: int,
        categories: Sequence[QuestionCategory],
    ) -> List[Question]:
        per_category = target // len(categories)
        remainder = target % len(categories)

        chosen: List[Question] = []
        for idx, category in enumerate(categories):
            # First few categories get the remainder to reach target
            wanted = per_category + (1 if idx < remainder else 0)
            stratum = [
                q for q in pool if q.difficulty == difficulty and q.category == category
            ]
            chosen.extend(self._rng.sample(stratum, min(wanted, len(stratum))))

        if len(chosen) < target:
            chosen_ids = {q.id for q in chosen}
            same_difficulty = [
                q for q in pool if q.difficulty == difficulty and q.id not in chosen_ids
            ]
            shortfall = min(target - len(chosen), len(same_difficulty))
            if shortfall:
                logger.debug(
                    f"Filling {shortfall} {difficulty.value} questions outside "
                    "their category stratum"
                )
                chosen.extend(self._rng.sample(same_difficulty, shortfall))

        return chosen
