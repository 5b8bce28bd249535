"""Message database model."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass
class MessageDO:
    """Message data object - maps to messages table."""

    id: str
    conversation_id: str
    sender: str
    content: str
    created_at: datetime = field(default_factory=datetime.utcnow)
    # Insertion sequence, assigned by the database
    seq: Optional[int] = None
