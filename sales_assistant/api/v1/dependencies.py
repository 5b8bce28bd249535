"""Shared dependencies for V1 routes."""

from typing import Optional
from fastapi import Header, HTTPException

from ...exceptions import SalesAssistantError
from ...services import ChatService

# Chat service (set by main.py)
chat_service: Optional[ChatService] = None


def get_chat_service() -> ChatService:
    """Dependency to get the chat service."""
    if chat_service is None:
        raise HTTPException(status_code=500, detail="Chat service not initialized")
    return chat_service


def get_owner_id(x_user_id: Optional[str] = Header(None, description="Authenticated user ID")) -> str:
    """Dependency to get the calling user's ID from the gateway header."""
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=401, detail="Missing X-User-Id header")
    return x_user_id.strip()


def to_http_error(error: SalesAssistantError) -> HTTPException:
    """Map a domain error onto its HTTP status."""
    return HTTPException(status_code=error.status_code, detail=str(error))
