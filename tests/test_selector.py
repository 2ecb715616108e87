from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from vocab_trainer.srs.scheduler import LearningStatus, SchedulingState
from vocab_trainer.srs.selector import is_due, select_due


NOW = datetime(2025, 5, 20, 9, 30, tzinfo=timezone.utc)


@dataclass
class _Item:
    name: str
    scheduling: SchedulingState


def _item(
    name: str,
    status: LearningStatus,
    *,
    ease: float = 2.5,
    days_ago: float | None = None,
    interval: int = 0,
) -> _Item:
    last_practiced = NOW - timedelta(days=days_ago) if days_ago is not None else None
    return _Item(
        name,
        SchedulingState(
            ease_factor=ease,
            review_interval=interval,
            last_practiced=last_practiced,
            learning_status=status,
        ),
    )


def test_select_due_filters_and_orders_items() -> None:
    a = _item("A", LearningStatus.NOT_LEARNED)
    b = _item("B", LearningStatus.LEARNING, ease=1.4, days_ago=10, interval=5)
    c = _item("C", LearningStatus.LEARNING, ease=2.0, days_ago=1, interval=5)

    selected = select_due([c, b, a], NOW)

    assert [item.name for item in selected] == ["A", "B"]


def test_harder_words_come_before_easier_ones() -> None:
    easy = _item("easy", LearningStatus.LEARNED, ease=2.5, days_ago=30, interval=20)
    hard = _item("hard", LearningStatus.LEARNING, ease=1.3, days_ago=2, interval=1)
    medium = _item("medium", LearningStatus.LEARNING, ease=1.9, days_ago=5, interval=3)

    selected = select_due([easy, medium, hard], NOW)

    assert [item.name for item in selected] == ["hard", "medium", "easy"]


def test_oldest_practice_wins_ties() -> None:
    recent = _item("recent", LearningStatus.LEARNING, ease=2.0, days_ago=3, interval=1)
    old = _item("old", LearningStatus.LEARNING, ease=2.0, days_ago=9, interval=1)
    never = _item("never", LearningStatus.LEARNING, ease=2.0)

    selected = select_due([recent, old, never], NOW)

    assert [item.name for item in selected] == ["never", "old", "recent"]


def test_not_learned_words_come_first_regardless_of_ease() -> None:
    learning = _item("learning", LearningStatus.LEARNING, ease=1.3, days_ago=4, interval=1)
    fresh = _item("fresh", LearningStatus.NOT_LEARNED, ease=2.5, days_ago=4, interval=1)

    selected = select_due([learning, fresh], NOW)

    assert [item.name for item in selected] == ["fresh", "learning"]


def test_select_due_is_repeatable_and_leaves_input_untouched() -> None:
    items = [
        _item("x", LearningStatus.LEARNING, ease=2.2, days_ago=8, interval=2),
        _item("y", LearningStatus.NOT_LEARNED),
        _item("z", LearningStatus.LEARNED, ease=1.5, days_ago=40, interval=30),
    ]
    snapshot = list(items)

    first = select_due(items, NOW)
    second = select_due(items, NOW)

    assert first == second
    assert items == snapshot
    assert first is not items


def test_due_boundary_uses_whole_elapsed_days() -> None:
    on_time = SchedulingState(review_interval=3, last_practiced=NOW - timedelta(days=3))
    almost = SchedulingState(review_interval=3, last_practiced=NOW - timedelta(days=2, hours=23))

    assert is_due(on_time, NOW) is True
    assert is_due(almost, NOW) is False
    assert is_due(SchedulingState(), NOW) is True


def test_naive_timestamps_are_treated_as_utc() -> None:
    state = SchedulingState(review_interval=1, last_practiced=datetime(2025, 5, 18, 9, 30))

    assert is_due(state, NOW) is True


def test_custom_key_extracts_state() -> None:
    states = {
        "late": SchedulingState(ease_factor=1.5, review_interval=1, last_practiced=NOW - timedelta(days=2)),
        "early": SchedulingState(ease_factor=2.5, review_interval=10, last_practiced=NOW - timedelta(days=2)),
    }

    selected = select_due(list(states), NOW, key=states.__getitem__)

    assert selected == ["late"]
