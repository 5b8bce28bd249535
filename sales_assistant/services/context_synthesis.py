"""
Context synthesis - derives sales metadata from recent message history.

Two modes:

    initial - nothing is known yet; the last 6 messages are sent to the
              adapter, which extracts metadata from scratch.
    update  - metadata exists; the last 4 messages are sent together with
              the current metadata, and the adapter proposes an update.

Whatever the adapter proposes is decoded strictly and merged with
``merge_metadata``, so set exclusivity and funnel monotonicity hold no
matter what the model returns. The synthesizer never writes; persisting
the result is left to the chat service.
"""

from enum import Enum
from typing import List, Optional

from ..adapters.base import BaseTextAdapter, CallPolicy, call_adapter
from ..db.database_models import ConversationDO, MessageDO
from ..db.repositories.message import MessageRepository
from ..models.message import MessageSender
from ..models.metadata import SalesMetadata, coerce_metadata, load_metadata, merge_metadata
from ..utils.logger import get_app_logger

INITIAL_WINDOW = 6
UPDATE_WINDOW = 4

ROLE_LABELS = {
    MessageSender.USER.value: "Customer",
    MessageSender.BOT.value: "Sales assistant",
}


class SynthesisMode(str, Enum):
    INITIAL = "initial"
    UPDATE = "update"


def select_mode(metadata: SalesMetadata) -> SynthesisMode:
    return SynthesisMode.INITIAL if metadata.is_empty() else SynthesisMode.UPDATE


def format_history(messages: List[MessageDO]) -> str:
    """Render messages oldest-first as ``"<role label>: <content>"`` lines."""
    return "\n".join(
        f"{ROLE_LABELS.get(message.sender, message.sender)}: {message.content}"
        for message in messages
    )


class ContextSynthesizer:
    """Computes the next metadata value for a conversation."""

    def __init__(self, adapter: BaseTextAdapter, messages: MessageRepository, timeout: float = 30.0):
        """
        Args:
            adapter: Text adapter providing ``extract_metadata``
            messages: Repository used to read the history window
            timeout: Seconds allowed for the extraction call
        """
        self.adapter = adapter
        self.messages = messages
        self.timeout = timeout
        self.logger = get_app_logger()

    async def synthesize(self, conversation: ConversationDO) -> SalesMetadata:
        """
        Synthesize updated metadata for a conversation.

        Args:
            conversation: Conversation whose stored metadata is the starting point

        Returns:
            Merged metadata

        Raises:
            DependencyFailure: If the adapter fails or times out
            MetadataParseError: If the adapter output does not decode
        """
        current = load_metadata(conversation.metadata)
        mode = select_mode(current)
        window = INITIAL_WINDOW if mode is SynthesisMode.INITIAL else UPDATE_WINDOW

        messages = self.messages.get_recent(conversation.id, window)
        if not messages:
            self.logger.warning(f"No messages to synthesize for conversation {conversation.id}")
            return current

        history = format_history(messages)
        context: Optional[SalesMetadata] = None if mode is SynthesisMode.INITIAL else current

        proposal = await call_adapter(
            lambda: self.adapter.extract_metadata(history, context),
            CallPolicy.REQUIRED,
            self.timeout,
            operation="metadata extraction"
        )
        merged = merge_metadata(current, coerce_metadata(proposal))

        self.logger.info(
            f"Synthesized metadata for conversation {conversation.id} "
            f"({mode.value}, {len(messages)} messages): "
            f"{current.sale_status.value} -> {merged.sale_status.value}"
        )
        return merged
