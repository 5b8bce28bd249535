"""Message API models."""

from datetime import datetime
from enum import Enum
from pydantic import BaseModel, Field


class MessageSender(str, Enum):
    """Who wrote a message."""

    USER = "user"
    BOT = "bot"


class MessageResponse(BaseModel):
    """Response model for a single message."""

    id: str = Field(description="Message ID")
    conversation_id: str = Field(description="Conversation ID")
    sender: MessageSender = Field(description="Message sender (user/bot)")
    content: str = Field(description="Message content")
    created_at: datetime = Field(description="Message timestamp")
