"""Conversation API models."""

from datetime import datetime
from typing import List
from pydantic import BaseModel, Field

from .message import MessageResponse
from .metadata import SalesMetadata


class ConversationSummary(BaseModel):
    """Response model for a conversation in a listing."""

    id: str = Field(description="Conversation ID")
    title: str = Field(description="Conversation title")
    created_at: datetime = Field(description="Creation timestamp")
    updated_at: datetime = Field(description="Last update timestamp")


class ConversationResponse(ConversationSummary):
    """Response model for conversation information."""

    metadata: SalesMetadata = Field(default_factory=SalesMetadata, description="Sales metadata")
    messages_since_synthesis: int = Field(ge=0, description="Messages exchanged since the last synthesis")


class ConversationListResponse(BaseModel):
    """Response model for listing conversations."""

    conversations: List[ConversationSummary] = Field(description="List of conversations")
    total: int = Field(description="Total number of conversations")


class ConversationHistoryResponse(BaseModel):
    """Response model for a conversation with its messages."""

    conversation: ConversationResponse = Field(description="Conversation details")
    messages: List[MessageResponse] = Field(description="Messages in chronological order")
    total: int = Field(description="Total number of messages")


class RenameConversationRequest(BaseModel):
    """Request model for renaming a conversation."""

    title: str = Field(description="New conversation title", min_length=1, max_length=255)
