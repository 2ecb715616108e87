"""Practice sessions built on top of the spaced-repetition engine."""

from .workflow import (
    NotEnoughWordsError,
    PracticeSession,
    PracticeWorkflow,
    ReviewNotSavedError,
    WordNotFoundError,
    grade_answer,
)

__all__ = [
    "NotEnoughWordsError",
    "PracticeSession",
    "PracticeWorkflow",
    "ReviewNotSavedError",
    "WordNotFoundError",
    "grade_answer",
]
