"""Helpers for working with word list persistence."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Sequence

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from vocab_trainer.srs.scheduler import DEFAULT_EASE_FACTOR, LearningStatus, SchedulingState

from . import Word, WordList


DIFFICULTIES = ("easy", "medium", "hard")


class StaleSchedulingError(RuntimeError):
    """Raised when a word's scheduling state changed since it was read."""

    def __init__(self, word_id: int, expected_review_count: int) -> None:
        super().__init__(
            f"Word {word_id} no longer has review_count={expected_review_count}; "
            "another review was saved first."
        )
        self.word_id = word_id
        self.expected_review_count = expected_review_count


@dataclass(slots=True)
class WordPayload:
    """Definition of a word to add to a list."""

    original: str
    translation: str
    difficulty: Optional[str] = None

    def normalized(self) -> "WordPayload":
        """Return a payload with whitespace stripped and difficulty lower-cased."""
        difficulty = self.difficulty.strip().lower() if isinstance(self.difficulty, str) else None
        if difficulty not in DIFFICULTIES:
            difficulty = None
        return WordPayload(
            original=self.original.strip(),
            translation=self.translation.strip(),
            difficulty=difficulty,
        )


@dataclass(slots=True)
class ListStatistics:
    """Counts of a list's words by learning status and difficulty."""

    total_words: int = 0
    learned: int = 0
    learning: int = 0
    not_learned: int = 0
    easy: int = 0
    medium: int = 0
    hard: int = 0


async def create_word_list(session: AsyncSession, name: str, owner_id: str) -> WordList:
    """Create an empty word list for the given owner."""
    word_list = WordList(name=name.strip(), owner_id=owner_id)
    session.add(word_list)
    await session.flush()
    return word_list


async def add_word(
    session: AsyncSession,
    list_id: int,
    payload: WordPayload,
    now: Optional[datetime] = None,
) -> Word:
    """Add a word to a list with a fresh scheduling state."""
    if now is None:
        now = datetime.now(timezone.utc)

    normalized = payload.normalized()
    word = Word(
        list_id=list_id,
        original=normalized.original,
        translation=normalized.translation,
        difficulty=normalized.difficulty,
        learning_status=LearningStatus.NOT_LEARNED.value,
        ease_factor=DEFAULT_EASE_FACTOR,
        review_interval=0,
        review_count=0,
        streak_count=0,
        best_streak=0,
        review_history=[],
        last_practiced=None,
        next_review_date=None,
        added_at=now,
        updated_at=now,
    )
    session.add(word)
    await session.flush()
    return word


async def get_word(session: AsyncSession, word_id: int) -> Optional[Word]:
    """Return a word by id, if it exists."""
    return await session.get(Word, word_id)


async def get_words_for_list(session: AsyncSession, list_id: int) -> Sequence[Word]:
    """Return every word in a list in the order it was added."""
    stmt = select(Word).where(Word.list_id == list_id).order_by(Word.added_at, Word.id)
    result = await session.execute(stmt)
    return result.scalars().all()


async def save_word_scheduling(
    session: AsyncSession,
    word_id: int,
    expected_review_count: int,
    state: SchedulingState,
    now: Optional[datetime] = None,
) -> None:
    """Persist a review outcome if nobody else saved one since it was read.

    The update only matches while the stored ``review_count`` still equals
    ``expected_review_count``, so two concurrent reviews of the same word cannot
    both commit on top of the same prior state.
    """
    if now is None:
        now = datetime.now(timezone.utc)

    stmt = (
        update(Word)
        .where(Word.id == word_id, Word.review_count == expected_review_count)
        .values(
            ease_factor=state.ease_factor,
            review_interval=state.review_interval,
            review_count=state.review_count,
            streak_count=state.streak_count,
            best_streak=state.best_streak,
            review_history=[record.to_dict() for record in state.review_history],
            last_practiced=state.last_practiced,
            next_review_date=state.next_review_date,
            learning_status=LearningStatus(state.learning_status).value,
            updated_at=now,
        )
        .execution_options(synchronize_session=False)
    )
    result = await session.execute(stmt)
    if result.rowcount != 1:
        raise StaleSchedulingError(word_id, expected_review_count)


async def get_list_statistics(session: AsyncSession, list_id: int) -> ListStatistics:
    """Aggregate a list's words by learning status and difficulty."""
    stats = ListStatistics()

    status_stmt = (
        select(Word.learning_status, func.count(Word.id))
        .where(Word.list_id == list_id)
        .group_by(Word.learning_status)
    )
    for status, count in (await session.execute(status_stmt)).all():
        stats.total_words += count
        if status == LearningStatus.LEARNED.value:
            stats.learned += count
        elif status == LearningStatus.LEARNING.value:
            stats.learning += count
        else:
            stats.not_learned += count

    difficulty_stmt = (
        select(Word.difficulty, func.count(Word.id))
        .where(Word.list_id == list_id, Word.difficulty.is_not(None))
        .group_by(Word.difficulty)
    )
    for difficulty, count in (await session.execute(difficulty_stmt)).all():
        if difficulty in DIFFICULTIES:
            setattr(stats, difficulty, getattr(stats, difficulty) + count)

    return stats
