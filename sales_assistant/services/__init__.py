"""Services package."""

from .chat_service import ChatService
from .context_synthesis import ContextSynthesizer

__all__ = ["ChatService", "ContextSynthesizer"]
