"""Spaced-repetition engine: review outcome calculation and due-word selection."""

from .scheduler import (
    LearningStatus,
    ReviewOutcome,
    ReviewRecord,
    SchedulingState,
    ValidationError,
    apply_review,
    compute_next_review,
    validate_quality,
)
from .selector import is_due, select_due

__all__ = [
    "LearningStatus",
    "ReviewOutcome",
    "ReviewRecord",
    "SchedulingState",
    "ValidationError",
    "apply_review",
    "compute_next_review",
    "is_due",
    "select_due",
    "validate_quality",
]
