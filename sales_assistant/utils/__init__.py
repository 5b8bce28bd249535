"""Utilities package."""

from .logger import get_app_logger, setup_logger, init_app_logger
from .locks import KeyedLock

__all__ = [
    "get_app_logger",
    "setup_logger",
    "init_app_logger",
    "KeyedLock",
]
