"""Pydantic models for the domain and the API."""

from .metadata import SaleStatus, SalesMetadata, parse_metadata, serialize_metadata
from .message import MessageSender, MessageResponse
from .conversation import (
    ConversationSummary,
    ConversationResponse,
    ConversationListResponse,
    ConversationHistoryResponse,
    RenameConversationRequest,
)
from .chat import SendMessageRequest, SendMessageResult, SynthesisOutcome, SynthesisStatus

__all__ = [
    "SaleStatus",
    "SalesMetadata",
    "parse_metadata",
    "serialize_metadata",
    "MessageSender",
    "MessageResponse",
    "ConversationSummary",
    "ConversationResponse",
    "ConversationListResponse",
    "ConversationHistoryResponse",
    "RenameConversationRequest",
    "SendMessageRequest",
    "SendMessageResult",
    "SynthesisOutcome",
    "SynthesisStatus",
]
