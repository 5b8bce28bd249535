"""Conversation database model."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Any

# Founding user message and bot reply are already counted at creation.
INITIAL_MESSAGE_COUNT = 2


def default_metadata() -> Dict[str, Any]:
    return {
        "interests": [],
        "offeredProducts": [],
        "rejectedProducts": [],
        "saleStatus": "exploring",
        "lastIntent": None,
    }


@dataclass
class ConversationDO:
    """Conversation data object - maps to conversations table."""

    id: str
    user_id: str
    title: str
    metadata: Dict[str, Any] = field(default_factory=default_metadata)
    messages_since_synthesis: int = INITIAL_MESSAGE_COUNT
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)
