"""
Chat service - the entry point for every inbound chat message.

``send_message`` takes one of two paths:

    new conversation      - title, bot reply and the three rows (conversation,
                            user message, bot message) form one unit; the rows
                            are written in a single transaction, so a failed
                            reply leaves nothing behind.
    existing conversation - runs under a per-conversation lock. The user
                            message is stored first and stays stored even if
                            the reply fails afterwards (at-least-once user
                            message). The counter advances by 2 per exchange
                            and synthesis runs once it reaches the threshold.
"""

import uuid
from datetime import datetime
from typing import Any, Dict, Optional, Union

from pydantic import ValidationError

from ..adapters.base import BaseTextAdapter, CallPolicy, call_adapter
from ..config import Settings, settings as default_settings
from ..db.connection import DatabaseConnection
from ..db.database_models import ConversationDO, MessageDO
from ..db.database_models.conversation import INITIAL_MESSAGE_COUNT
from ..db.repositories.conversation import ConversationRepository
from ..db.repositories.message import MessageRepository
from ..exceptions import (
    ForbiddenError,
    NotFoundError,
    SalesAssistantError,
    StorageError,
    ValidationFailure,
)
from ..models.chat import SendMessageRequest, SendMessageResult, SynthesisOutcome, SynthesisStatus
from ..models.conversation import (
    ConversationHistoryResponse,
    ConversationListResponse,
    ConversationResponse,
    ConversationSummary,
)
from ..models.message import MessageResponse, MessageSender
from ..models.metadata import SalesMetadata, load_metadata
from ..utils.locks import KeyedLock
from ..utils.logger import get_app_logger
from .context_synthesis import ContextSynthesizer

SYNTHESIS_THRESHOLD = 6
MESSAGES_PER_EXCHANGE = 2
MAX_TITLE_LENGTH = 255


def _to_message_response(message: MessageDO) -> MessageResponse:
    return MessageResponse(
        id=message.id,
        conversation_id=message.conversation_id,
        sender=message.sender,
        content=message.content,
        created_at=message.created_at
    )


def _to_conversation_response(conversation: ConversationDO) -> ConversationResponse:
    return ConversationResponse(
        id=conversation.id,
        title=conversation.title,
        created_at=conversation.created_at,
        updated_at=conversation.updated_at,
        metadata=load_metadata(conversation.metadata),
        messages_since_synthesis=conversation.messages_since_synthesis
    )


class ChatService:
    """Orchestrates conversations, messages and metadata synthesis."""

    def __init__(
        self,
        db: DatabaseConnection,
        adapter: BaseTextAdapter,
        settings: Optional[Settings] = None
    ):
        """
        Initialize the chat service.

        Args:
            db: Database connection
            adapter: Language-generation adapter
            settings: Application settings (defaults to the global settings)
        """
        self.db = db
        self.adapter = adapter
        self.settings = settings or default_settings
        self.timeout = self.settings.adapter_timeout
        self.logger = get_app_logger()

        self.conversations = ConversationRepository(db.conn)
        self.messages = MessageRepository(db.conn)
        self.synthesizer = ContextSynthesizer(adapter, self.messages, self.timeout)
        self._locks = KeyedLock()

    # === Sending ===

    async def send_message(
        self,
        owner_id: str,
        request: Union[SendMessageRequest, Dict[str, Any]]
    ) -> SendMessageResult:
        """
        Handle one inbound user message and produce the bot reply.

        Args:
            owner_id: ID of the user sending the message
            request: Content and optional conversation ID

        Returns:
            Conversation, both persisted messages and the synthesis report

        Raises:
            ValidationFailure: Malformed request
            NotFoundError: Unknown conversation ID
            ForbiddenError: Conversation owned by another user
            DependencyFailure: Reply generation failed
            StorageError: A write did not go through
        """
        request = self._validate(owner_id, request)

        if request.conversation_id:
            return await self._continue_conversation(owner_id, request.conversation_id, request.content)

        return await self._start_conversation(owner_id, request.content)

    def _validate(self, owner_id: str, request: Union[SendMessageRequest, Dict[str, Any]]) -> SendMessageRequest:
        if not owner_id:
            raise ValidationFailure("Owner ID is required")
        if not isinstance(request, SendMessageRequest):
            try:
                request = SendMessageRequest.model_validate(request)
            except ValidationError as e:
                raise ValidationFailure(f"Invalid message: {e.errors()}") from e
        if len(request.content) > self.settings.max_content_length:
            raise ValidationFailure(
                f"Content must not exceed {self.settings.max_content_length} characters"
            )
        return request

    async def _start_conversation(self, owner_id: str, content: str) -> SendMessageResult:
        title = await call_adapter(
            lambda: self.adapter.generate_title(content),
            CallPolicy.BEST_EFFORT,
            self.timeout,
            fallback=self.settings.default_title,
            operation="title generation"
        )
        title = (title or self.settings.default_title)[:MAX_TITLE_LENGTH]

        started_at = datetime.utcnow()
        # No metadata exists yet, so the reply is generated without context
        reply = await call_adapter(
            lambda: self.adapter.generate_response(content, None),
            CallPolicy.REQUIRED,
            self.timeout,
            operation="response generation"
        )

        conversation = ConversationDO(
            id=str(uuid.uuid4()),
            user_id=owner_id,
            title=title,
            metadata=SalesMetadata().to_document(),
            messages_since_synthesis=INITIAL_MESSAGE_COUNT,
            created_at=started_at,
            updated_at=started_at
        )

        with self.db.transaction() as cursor:
            conversations = ConversationRepository(cursor, in_transaction=True)
            messages = MessageRepository(cursor, in_transaction=True)

            if not conversations.create(conversation):
                raise StorageError("Failed to create conversation")
            user_message = self._append(messages, conversation.id, MessageSender.USER, content, started_at)
            bot_message = self._append(messages, conversation.id, MessageSender.BOT, reply)

        self.logger.info(f"Started conversation {conversation.id} for user {owner_id}: '{title}'")

        return SendMessageResult(
            conversation=_to_conversation_response(conversation),
            user_message=_to_message_response(user_message),
            bot_message=_to_message_response(bot_message)
        )

    async def _continue_conversation(self, owner_id: str, conversation_id: str, content: str) -> SendMessageResult:
        async with self._locks.hold(conversation_id):
            conversation = self._find_owned(conversation_id, owner_id)
            metadata = load_metadata(conversation.metadata)

            # Stays persisted even if the reply below fails
            user_message = self._append(self.messages, conversation.id, MessageSender.USER, content)

            reply = await call_adapter(
                lambda: self.adapter.generate_response(content, metadata),
                CallPolicy.REQUIRED,
                self.timeout,
                operation="response generation"
            )
            bot_message = self._append(self.messages, conversation.id, MessageSender.BOT, reply)

            counter = conversation.messages_since_synthesis + MESSAGES_PER_EXCHANGE
            updates: Dict[str, Any] = {}
            outcome = SynthesisOutcome()

            if counter >= SYNTHESIS_THRESHOLD:
                try:
                    synthesized = await self.synthesizer.synthesize(conversation)
                except SalesAssistantError as e:
                    # Metadata stays as it was; the counter keeps growing so
                    # the next exchange retries.
                    self.logger.warning(f"Synthesis failed for conversation {conversation.id}: {e}")
                    outcome = SynthesisOutcome(status=SynthesisStatus.FAILED, error=str(e))
                else:
                    updates["metadata"] = synthesized.to_document()
                    counter = 0
                    outcome = SynthesisOutcome(status=SynthesisStatus.APPLIED)

            updates["messages_since_synthesis"] = counter
            if not self.conversations.update(conversation.id, updates):
                raise StorageError(f"Failed to update conversation {conversation.id}")

            conversation = self.conversations.get(conversation.id) or conversation

        return SendMessageResult(
            conversation=_to_conversation_response(conversation),
            user_message=_to_message_response(user_message),
            bot_message=_to_message_response(bot_message),
            synthesis=outcome
        )

    def _append(
        self,
        repo: MessageRepository,
        conversation_id: str,
        sender: MessageSender,
        content: str,
        created_at: Optional[datetime] = None
    ) -> MessageDO:
        message = MessageDO(
            id=str(uuid.uuid4()),
            conversation_id=conversation_id,
            sender=sender.value,
            content=content,
            created_at=created_at or datetime.utcnow()
        )
        if repo.add(message) is None:
            raise StorageError(f"Failed to store {sender.value} message in conversation {conversation_id}")
        return message

    def _find_owned(self, conversation_id: str, owner_id: str) -> ConversationDO:
        """Resolve a conversation for its owner, or raise NotFound / Forbidden."""
        conversation = self.conversations.get_for_owner(conversation_id, owner_id)
        if conversation is not None:
            return conversation
        if self.conversations.exists(conversation_id):
            raise ForbiddenError("You do not have access to this conversation")
        raise NotFoundError(f"Conversation with ID {conversation_id} not found")

    # === Conversation management ===

    def list_conversations(self, owner_id: str) -> ConversationListResponse:
        """List a user's conversations, most recently active first."""
        conversations = self.conversations.list_by_owner(owner_id)
        return ConversationListResponse(
            conversations=[
                ConversationSummary(
                    id=c.id,
                    title=c.title,
                    created_at=c.created_at,
                    updated_at=c.updated_at
                )
                for c in conversations
            ],
            total=len(conversations)
        )

    def get_history(self, conversation_id: str, owner_id: str) -> ConversationHistoryResponse:
        """Get a conversation with all of its messages in order."""
        conversation = self._find_owned(conversation_id, owner_id)
        messages = self.messages.get_by_conversation(conversation_id)
        return ConversationHistoryResponse(
            conversation=_to_conversation_response(conversation),
            messages=[_to_message_response(m) for m in messages],
            total=len(messages)
        )

    async def rename_conversation(self, conversation_id: str, owner_id: str, title: str) -> ConversationResponse:
        """Replace a conversation's title."""
        title = (title or "").strip()
        if not title or len(title) > MAX_TITLE_LENGTH:
            raise ValidationFailure(f"Title must be between 1 and {MAX_TITLE_LENGTH} characters")

        async with self._locks.hold(conversation_id):
            conversation = self._find_owned(conversation_id, owner_id)
            if not self.conversations.update(conversation.id, {"title": title}):
                raise StorageError(f"Failed to rename conversation {conversation_id}")
            conversation = self.conversations.get(conversation.id) or conversation

        self.logger.info(f"Renamed conversation {conversation_id} to '{title}'")
        return _to_conversation_response(conversation)

    async def delete_conversation(self, conversation_id: str, owner_id: str) -> None:
        """Delete a conversation and its messages."""
        async with self._locks.hold(conversation_id):
            conversation = self._find_owned(conversation_id, owner_id)
            if not self.conversations.delete(conversation.id):
                raise StorageError(f"Failed to delete conversation {conversation_id}")
