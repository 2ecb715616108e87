"""Bootstrap logic for the practice service."""

from __future__ import annotations

import logging

from vocab_trainer.app.settings import AppSettings
from vocab_trainer.db import get_session_factory, run_migrations_if_needed
from vocab_trainer.practice import PracticeWorkflow


LOGGER = logging.getLogger(__name__)


def _configure_logging(log_level: str) -> None:
    """Set up project-wide logging configuration."""
    logging.basicConfig(
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        level=log_level,
    )


def bootstrap(settings: AppSettings) -> PracticeWorkflow:
    """Prepare the database and return a practice workflow bound to it."""
    _configure_logging(settings.log_level)

    try:
        run_migrations_if_needed()
    except Exception:
        LOGGER.exception("Database migrations failed. Aborting startup.")
        raise

    workflow = PracticeWorkflow(
        get_session_factory(),
        session_size=settings.session_size,
        minimum_session_size=settings.minimum_session_size,
    )
    LOGGER.info(
        "%s is ready in %s mode (sessions of %s words, at least %s due).",
        settings.app_name,
        settings.app_env,
        settings.session_size,
        settings.minimum_session_size,
    )
    return workflow
