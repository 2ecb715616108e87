from __future__ import annotations

from datetime import datetime, timezone

import pytest

from vocab_trainer.db.words import (
    StaleSchedulingError,
    WordPayload,
    add_word,
    create_word_list,
    get_list_statistics,
    get_word,
    get_words_for_list,
    save_word_scheduling,
)
from vocab_trainer.srs.scheduler import LearningStatus, apply_review


NOW = datetime(2025, 4, 2, 18, 15, tzinfo=timezone.utc)


def test_payload_normalization_drops_unknown_difficulty() -> None:
    payload = WordPayload(original="  la casa ", translation=" house  ", difficulty=" Hard ")
    unknown = WordPayload(original="el perro", translation="dog", difficulty="tricky")

    assert payload.normalized() == WordPayload(original="la casa", translation="house", difficulty="hard")
    assert unknown.normalized().difficulty is None


@pytest.mark.asyncio
async def test_add_word_starts_with_default_scheduling(session_factory) -> None:
    async with session_factory() as session:
        async with session.begin():
            word_list = await create_word_list(session, " Spanish basics ", "learner-1")
            word = await add_word(
                session,
                word_list.id,
                WordPayload(original="la casa", translation="house", difficulty="easy"),
                now=NOW,
            )

    assert word_list.name == "Spanish basics"
    state = word.scheduling
    assert state.ease_factor == 2.5
    assert state.review_interval == 0
    assert state.review_count == 0
    assert state.review_history == ()
    assert state.last_practiced is None
    assert state.learning_status is LearningStatus.NOT_LEARNED


@pytest.mark.asyncio
async def test_save_word_scheduling_persists_full_state(session_factory) -> None:
    async with session_factory() as session:
        async with session.begin():
            word_list = await create_word_list(session, "Verbs", "learner-2")
            word = await add_word(session, word_list.id, WordPayload("hablar", "to speak"), now=NOW)

    new_state = apply_review(word.scheduling, 5, now=NOW)

    async with session_factory() as session:
        async with session.begin():
            await save_word_scheduling(session, word.id, 0, new_state, now=NOW)

    async with session_factory() as session:
        stored = await get_word(session, word.id)

    assert stored is not None
    state = stored.scheduling
    assert state.review_count == 1
    assert state.review_interval == 1
    assert state.last_practiced == NOW
    assert state.next_review_date == datetime(2025, 4, 3, tzinfo=timezone.utc)
    assert state.review_history == new_state.review_history
    assert stored.review_history == [{"quality": 5, "date": NOW.isoformat(), "interval": 1}]


@pytest.mark.asyncio
async def test_save_word_scheduling_rejects_stale_state(session_factory) -> None:
    async with session_factory() as session:
        async with session.begin():
            word_list = await create_word_list(session, "Nouns", "learner-3")
            word = await add_word(session, word_list.id, WordPayload("el libro", "book"), now=NOW)

    first = apply_review(word.scheduling, 4, now=NOW)
    second = apply_review(word.scheduling, 1, now=NOW)

    async with session_factory() as session:
        async with session.begin():
            await save_word_scheduling(session, word.id, 0, first, now=NOW)

    with pytest.raises(StaleSchedulingError):
        async with session_factory() as session:
            async with session.begin():
                await save_word_scheduling(session, word.id, 0, second, now=NOW)

    async with session_factory() as session:
        stored = await get_word(session, word.id)

    assert stored is not None
    assert stored.review_count == 1
    assert stored.review_history[-1]["quality"] == 4


@pytest.mark.asyncio
async def test_words_are_listed_in_insertion_order(session_factory) -> None:
    async with session_factory() as session:
        async with session.begin():
            word_list = await create_word_list(session, "Food", "learner-4")
            other_list = await create_word_list(session, "Travel", "learner-4")
            for original in ("el pan", "la leche", "el queso"):
                await add_word(session, word_list.id, WordPayload(original, "-"), now=NOW)
            await add_word(session, other_list.id, WordPayload("el tren", "train"), now=NOW)

        words = await get_words_for_list(session, word_list.id)

    assert [word.original for word in words] == ["el pan", "la leche", "el queso"]


@pytest.mark.asyncio
async def test_list_statistics_counts_status_and_difficulty(session_factory) -> None:
    async with session_factory() as session:
        async with session.begin():
            word_list = await create_word_list(session, "Mixed", "learner-5")
            words = [
                await add_word(session, word_list.id, WordPayload("uno", "one", "easy"), now=NOW),
                await add_word(session, word_list.id, WordPayload("dos", "two", "easy"), now=NOW),
                await add_word(session, word_list.id, WordPayload("tres", "three", "hard"), now=NOW),
                await add_word(session, word_list.id, WordPayload("cuatro", "four"), now=NOW),
            ]
            words[0].learning_status = LearningStatus.LEARNED.value
            words[1].learning_status = LearningStatus.LEARNING.value
            words[2].learning_status = LearningStatus.LEARNING.value

        stats = await get_list_statistics(session, word_list.id)

    assert stats.total_words == 4
    assert stats.learned == 1
    assert stats.learning == 2
    assert stats.not_learned == 1
    assert (stats.easy, stats.medium, stats.hard) == (2, 0, 1)
