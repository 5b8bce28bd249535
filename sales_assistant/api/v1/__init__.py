"""API v1 routes."""

from . import chat, conversations, dependencies

__all__ = ["chat", "conversations", "dependencies"]
