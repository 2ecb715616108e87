"""Workflow for building practice sessions and recording review outcomes."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from vocab_trainer.db import Word
from vocab_trainer.db.words import (
    ListStatistics,
    StaleSchedulingError,
    get_list_statistics,
    get_word,
    get_words_for_list,
    save_word_scheduling,
)
from vocab_trainer.srs.scheduler import (
    SchedulingState,
    UniformSource,
    ValidationError,
    apply_review,
    validate_quality,
)
from vocab_trainer.srs.selector import select_due


LOGGER = logging.getLogger(__name__)


DEFAULT_SESSION_SIZE = 5
CORRECT_ANSWER_QUALITY = 5
INCORRECT_ANSWER_QUALITY = 2


class NotEnoughWordsError(RuntimeError):
    """Raised when a list has fewer due words than a session requires."""

    def __init__(self, available: int, required: int) -> None:
        super().__init__(
            f"Only {available} words are due for practice; at least {required} are required."
        )
        self.available = available
        self.required = required


class WordNotFoundError(LookupError):
    """Raised when a review targets a word that does not exist."""


class ReviewNotSavedError(RuntimeError):
    """Raised when a review outcome could not be committed; the review should be retried."""


@dataclass(slots=True)
class PracticeSession:
    """Words chosen for a practice round, in the order they should be studied."""

    list_id: int
    words: List[Word]
    due_count: int


@dataclass(slots=True)
class ReviewResult:
    """Outcome of submitting a single graded answer."""

    word_id: int
    quality: int
    state: Optional[SchedulingState] = None
    error: Optional[str] = None

    @property
    def saved(self) -> bool:
        return self.state is not None


@dataclass(slots=True)
class AnswerBatchResult:
    """Outcome of submitting every answer from a finished quiz."""

    results: List[ReviewResult] = field(default_factory=list)

    @property
    def correct(self) -> int:
        return sum(1 for result in self.results if result.quality == CORRECT_ANSWER_QUALITY)

    @property
    def failed(self) -> List[ReviewResult]:
        return [result for result in self.results if not result.saved]


def grade_answer(is_correct: bool) -> int:
    """Map a quiz answer to a review quality rating."""
    return CORRECT_ANSWER_QUALITY if is_correct else INCORRECT_ANSWER_QUALITY


class PracticeWorkflow:
    """Coordinates due-word selection, scheduling, and persistence of reviews."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        *,
        session_size: int = DEFAULT_SESSION_SIZE,
        minimum_session_size: int = DEFAULT_SESSION_SIZE,
        uniform: UniformSource | None = None,
    ) -> None:
        if session_size < 1:
            raise ValueError("session_size must be a positive integer.")
        if minimum_session_size < 1 or minimum_session_size > session_size:
            raise ValueError("minimum_session_size must be between 1 and session_size.")
        self._session_factory = session_factory
        self._session_size = session_size
        self._minimum_session_size = minimum_session_size
        self._uniform = uniform

    @property
    def session_size(self) -> int:
        return self._session_size

    @property
    def minimum_session_size(self) -> int:
        return self._minimum_session_size

    async def build_session(self, list_id: int, now: Optional[datetime] = None) -> PracticeSession:
        """Pick the words to practice next from a list."""
        if now is None:
            now = datetime.now(timezone.utc)

        async with self._session_factory() as session:
            words = await get_words_for_list(session, list_id)

        due_words = select_due(words, now)
        if len(due_words) < self._minimum_session_size:
            LOGGER.info(
                "List %s has %s due words; %s required for a session.",
                list_id,
                len(due_words),
                self._minimum_session_size,
            )
            raise NotEnoughWordsError(len(due_words), self._minimum_session_size)

        return PracticeSession(
            list_id=list_id,
            words=due_words[: self._session_size],
            due_count=len(due_words),
        )

    async def submit_review(
        self,
        word_id: int,
        quality: int,
        now: Optional[datetime] = None,
    ) -> SchedulingState:
        """Apply a review to a word and persist the new scheduling state."""
        quality = validate_quality(quality)
        if now is None:
            now = datetime.now(timezone.utc)

        try:
            async with self._session_factory() as session:
                async with session.begin():
                    word = await get_word(session, word_id)
                    if word is None:
                        raise WordNotFoundError(f"Word {word_id} does not exist.")

                    previous = word.scheduling
                    state = apply_review(previous, quality, now=now, uniform=self._uniform)
                    await save_word_scheduling(
                        session, word_id, previous.review_count, state, now=now
                    )
        except StaleSchedulingError as exc:
            LOGGER.warning("Discarded review for word %s: %s", word_id, exc)
            raise ReviewNotSavedError(
                f"Word {word_id} was reviewed concurrently; please retry."
            ) from exc
        except SQLAlchemyError as exc:
            LOGGER.exception("Failed to save review for word %s.", word_id)
            raise ReviewNotSavedError(f"Could not save review for word {word_id}.") from exc

        LOGGER.debug(
            "Word %s reviewed with quality %s; next review in %s days (%s).",
            word_id,
            quality,
            state.review_interval,
            state.learning_status.value,
        )
        return state

    async def submit_answers(
        self,
        answers: Sequence[tuple[int, bool]],
        now: Optional[datetime] = None,
    ) -> AnswerBatchResult:
        """Grade quiz answers and record a review for each word."""
        batch = AnswerBatchResult()
        for word_id, is_correct in answers:
            quality = grade_answer(is_correct)
            try:
                state = await self.submit_review(word_id, quality, now=now)
            except (WordNotFoundError, ReviewNotSavedError, ValidationError) as exc:
                LOGGER.warning("Review for word %s was not recorded: %s", word_id, exc)
                batch.results.append(ReviewResult(word_id, quality, error=str(exc)))
                continue
            batch.results.append(ReviewResult(word_id, quality, state=state))
        return batch

    async def list_statistics(self, list_id: int) -> ListStatistics:
        async with self._session_factory() as session:
            return await get_list_statistics(session, list_id)
