"""Spaced-repetition scheduling for vocabulary reviews."""

from __future__ import annotations

import random
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Callable, Mapping, Optional, Sequence


DEFAULT_EASE_FACTOR = 2.5
MIN_EASE_FACTOR = 1.3
MAX_EASE_FACTOR = 2.5
MAX_HISTORY_SIZE = 10
PERFORMANCE_WINDOW = 5
MAX_STREAK_BONUS = 0.2
JITTER_RANGE = (0.95, 1.05)

UniformSource = Callable[[float, float], float]


class ValidationError(ValueError):
    """Raised when a review is submitted with an invalid quality rating."""


class LearningStatus(str, Enum):
    NOT_LEARNED = "not_learned"
    LEARNING = "learning"
    LEARNED = "learned"


def validate_quality(value: object) -> int:
    """Return ``value`` if it is an integer rating between 0 and 5."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"Quality must be an integer between 0 and 5, got {value!r}.")
    if value < 0 or value > 5:
        raise ValidationError(f"Quality must be between 0 and 5, got {value}.")
    return value


def _ensure_aware(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


@dataclass(slots=True, frozen=True)
class ReviewRecord:
    """A single entry in a word's review history."""

    quality: int
    date: datetime
    interval: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "quality": self.quality,
            "date": self.date.isoformat(),
            "interval": self.interval,
        }

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> ReviewRecord:
        raw_date = raw["date"]
        if isinstance(raw_date, str):
            raw_date = datetime.fromisoformat(raw_date)
        return cls(
            quality=int(raw["quality"]),
            date=_ensure_aware(raw_date),
            interval=int(raw["interval"]),
        )


@dataclass(slots=True, frozen=True)
class SchedulingState:
    """Scheduling data embedded in every learnable word."""

    ease_factor: float = DEFAULT_EASE_FACTOR
    review_interval: int = 0
    review_count: int = 0
    streak_count: int = 0
    best_streak: int = 0
    review_history: tuple[ReviewRecord, ...] = field(default_factory=tuple)
    last_practiced: Optional[datetime] = None
    next_review_date: Optional[datetime] = None
    learning_status: LearningStatus = LearningStatus.NOT_LEARNED

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> SchedulingState:
        """Build a state from stored values, substituting defaults for gaps."""
        history = tuple(
            entry if isinstance(entry, ReviewRecord) else ReviewRecord.from_dict(entry)
            for entry in raw.get("review_history") or ()
        )
        last_practiced = raw.get("last_practiced")
        next_review_date = raw.get("next_review_date")
        return cls(
            ease_factor=raw.get("ease_factor") or DEFAULT_EASE_FACTOR,
            review_interval=raw.get("review_interval") or 0,
            review_count=raw.get("review_count") or 0,
            streak_count=raw.get("streak_count") or 0,
            best_streak=raw.get("best_streak") or 0,
            review_history=history,
            last_practiced=_ensure_aware(last_practiced) if last_practiced else None,
            next_review_date=_ensure_aware(next_review_date) if next_review_date else None,
            learning_status=LearningStatus(raw.get("learning_status") or LearningStatus.NOT_LEARNED),
        )


@dataclass(slots=True, frozen=True)
class ReviewOutcome:
    """Values recalculated by a single review; merged into the full state by the caller."""

    ease_factor: float
    review_interval: int
    streak_count: int
    best_streak: int
    review_history: tuple[ReviewRecord, ...]


def weighted_performance(history: Sequence[ReviewRecord], quality: int) -> float:
    """Return the decaying weighted average of recent qualities, newest weighted highest."""
    recent = list(reversed(history[-PERFORMANCE_WINDOW:]))
    if not recent:
        return float(quality)

    weights = [1 / 2**index for index in range(len(recent))]
    total = sum(review.quality * weight for review, weight in zip(recent, weights))
    return total / sum(weights)


def recent_success_rate(history: Sequence[ReviewRecord]) -> float:
    """Share of the last few reviews rated 4 or better."""
    recent = history[-PERFORMANCE_WINDOW:]
    if not recent:
        return 0.0
    return sum(1 for review in recent if review.quality >= 4) / len(recent)


def start_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def compute_next_review(
    quality: int,
    state: SchedulingState,
    *,
    now: datetime | None = None,
    uniform: UniformSource | None = None,
) -> ReviewOutcome:
    """Recalculate ease, interval, streaks and history after a review."""
    quality = validate_quality(quality)
    if now is None:
        now = datetime.now(timezone.utc)
    if uniform is None:
        uniform = random.uniform

    performance = weighted_performance(state.review_history, quality)
    ease_factor = state.ease_factor + (
        0.1 - (5 - performance) * (0.08 + (5 - performance) * 0.02)
    )
    ease_factor = max(MIN_EASE_FACTOR, min(MAX_EASE_FACTOR, ease_factor))

    streak_count = state.streak_count
    best_streak = state.best_streak
    if quality >= 4:
        streak_count += 1
        if streak_count > best_streak:
            best_streak = streak_count
    elif quality < 3:
        streak_count = 0

    if quality < 3:
        interval = 1
    elif state.review_count == 0:
        interval = 1
    elif state.review_count == 1:
        interval = 3 if quality >= 4 else 2
    else:
        if quality >= 4:
            performance_factor = 1.1
        elif quality == 3:
            performance_factor = 1.0
        else:
            performance_factor = 0.9
        # The bonus is earned by the streak held before this review.
        streak_bonus = min(state.streak_count * 0.05, MAX_STREAK_BONUS)
        random_factor = uniform(*JITTER_RANGE)
        interval = round(
            state.review_interval
            * ease_factor
            * performance_factor
            * (1 + streak_bonus)
            * random_factor
        )
    interval = max(1, interval)

    history = (*state.review_history, ReviewRecord(quality=quality, date=now, interval=interval))

    return ReviewOutcome(
        ease_factor=ease_factor,
        review_interval=interval,
        streak_count=streak_count,
        best_streak=best_streak,
        review_history=history[-MAX_HISTORY_SIZE:],
    )


def _next_learning_status(
    quality: int,
    review_count: int,
    history: Sequence[ReviewRecord],
    current: LearningStatus,
) -> LearningStatus:
    success_rate = recent_success_rate(history)
    if quality >= 4 and review_count > 3 and success_rate >= 0.8:
        return LearningStatus.LEARNED
    if quality < 3 or success_rate < 0.6:
        return LearningStatus.LEARNING
    return current


def apply_review(
    state: SchedulingState,
    quality: int,
    *,
    now: datetime | None = None,
    uniform: UniformSource | None = None,
) -> SchedulingState:
    """Return the state a word should be persisted with after a review."""
    if now is None:
        now = datetime.now(timezone.utc)

    outcome = compute_next_review(quality, state, now=now, uniform=uniform)
    review_count = state.review_count + 1

    return replace(
        state,
        ease_factor=outcome.ease_factor,
        review_interval=outcome.review_interval,
        review_count=review_count,
        streak_count=outcome.streak_count,
        best_streak=outcome.best_streak,
        review_history=outcome.review_history,
        last_practiced=now,
        next_review_date=start_of_day(now) + timedelta(days=outcome.review_interval),
        learning_status=_next_learning_status(
            quality, review_count, outcome.review_history, state.learning_status
        ),
    )
