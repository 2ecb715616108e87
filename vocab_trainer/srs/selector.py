"""Selection of words that are due for practice."""

from __future__ import annotations

from datetime import datetime, timezone
from operator import attrgetter
from typing import Callable, Iterable, Optional, TypeVar

from .scheduler import DEFAULT_EASE_FACTOR, LearningStatus, SchedulingState


T = TypeVar("T")

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

_default_key: Callable[[object], SchedulingState] = attrgetter("scheduling")


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def is_due(state: SchedulingState, now: datetime) -> bool:
    """Return True when a word was never practiced or its interval has elapsed."""
    if state.last_practiced is None:
        return True
    days_elapsed = (_as_utc(now) - _as_utc(state.last_practiced)).days
    return days_elapsed >= (state.review_interval or 0)


def _priority(state: SchedulingState) -> tuple[bool, float, datetime]:
    last_practiced = _as_utc(state.last_practiced) if state.last_practiced else EPOCH
    return (
        state.learning_status != LearningStatus.NOT_LEARNED,
        state.ease_factor or DEFAULT_EASE_FACTOR,
        last_practiced,
    )


def select_due(
    items: Iterable[T],
    now: datetime,
    *,
    key: Optional[Callable[[T], SchedulingState]] = None,
) -> list[T]:
    """Return due items ordered unlearned first, then hardest, then longest idle."""
    get_state = key or _default_key
    due = [item for item in items if is_due(get_state(item), now)]
    due.sort(key=lambda item: _priority(get_state(item)))
    return due
