"""Chat API models: the send-message request and its result."""

import uuid
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field, field_validator

from .conversation import ConversationResponse
from .message import MessageResponse


MAX_CONTENT_LENGTH = 5000


class SendMessageRequest(BaseModel):
    """Request model for sending a chat message."""

    conversation_id: Optional[str] = Field(
        None, description="Existing conversation ID; omit to start a new conversation"
    )
    content: str = Field(description="Message content", min_length=1, max_length=MAX_CONTENT_LENGTH)

    @field_validator("conversation_id")
    @classmethod
    def _valid_uuid(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        try:
            # Stored IDs are canonical lowercase
            return str(uuid.UUID(value))
        except ValueError:
            raise ValueError("Conversation ID must be a valid UUID")

    @field_validator("content")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Content is required")
        return value


class SynthesisStatus(str, Enum):
    """What happened to the metadata during a send."""

    SKIPPED = "skipped"
    APPLIED = "applied"
    FAILED = "failed"


class SynthesisOutcome(BaseModel):
    """Synthesis report attached to a send-message result."""

    status: SynthesisStatus = Field(default=SynthesisStatus.SKIPPED, description="Synthesis status")
    error: Optional[str] = Field(None, description="Failure reason when status is failed")


class SendMessageResult(BaseModel):
    """Response model for a chat exchange."""

    conversation: ConversationResponse = Field(description="Conversation after the exchange")
    user_message: MessageResponse = Field(description="Persisted user message")
    bot_message: MessageResponse = Field(description="Persisted bot reply")
    synthesis: SynthesisOutcome = Field(default_factory=SynthesisOutcome, description="Synthesis report")
