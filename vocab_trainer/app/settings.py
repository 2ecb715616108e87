"""Configuration helpers for the Vocab Trainer runtime."""

from __future__ import annotations

import os
from dataclasses import dataclass


DEFAULT_SESSION_SIZE = 5
MAX_SESSION_SIZE = 50


def _read_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError as exc:
        raise RuntimeError(f"{name} must be an integer.") from exc


@dataclass(frozen=True)
class AppSettings:
    """Strongly typed application settings loaded from environment variables."""

    app_name: str
    app_env: str
    log_level: str
    session_size: int
    minimum_session_size: int

    @classmethod
    def from_env(cls) -> AppSettings:
        """Construct settings directly from environment variables."""
        app_name = os.getenv("APP_NAME", "Vocab Trainer")
        app_env = os.getenv("APP_ENV", "development")
        log_level = os.getenv("LOG_LEVEL", "INFO").upper()

        session_size = _read_int("PRACTICE_SESSION_SIZE", DEFAULT_SESSION_SIZE)
        if session_size < 1 or session_size > MAX_SESSION_SIZE:
            raise RuntimeError(f"PRACTICE_SESSION_SIZE must be between 1 and {MAX_SESSION_SIZE}.")

        minimum_session_size = _read_int("PRACTICE_MINIMUM_SESSION_SIZE", min(DEFAULT_SESSION_SIZE, session_size))
        if minimum_session_size < 1 or minimum_session_size > session_size:
            raise RuntimeError(
                "PRACTICE_MINIMUM_SESSION_SIZE must be a positive integer no larger than PRACTICE_SESSION_SIZE."
            )

        return cls(
            app_name=app_name,
            app_env=app_env,
            log_level=log_level,
            session_size=session_size,
            minimum_session_size=minimum_session_size,
        )
