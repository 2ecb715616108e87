"""Application bootstrap helpers for the Vocab Trainer project."""

from .runtime import bootstrap
from .settings import AppSettings

__all__ = ["bootstrap", "AppSettings"]
