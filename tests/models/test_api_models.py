"""Tests for chat and conversation Pydantic models."""

import uuid
from datetime import datetime

import pytest
from pydantic import ValidationError

from sales_assistant.models.chat import SendMessageRequest, SendMessageResult, SynthesisStatus
from sales_assistant.models.conversation import ConversationResponse, RenameConversationRequest
from sales_assistant.models.message import MessageResponse, MessageSender


class TestSendMessageRequest:
    """SUT: SendMessageRequest"""

    def test_new_conversation(self):
        request = SendMessageRequest(content="I'm looking for a laptop")
        assert request.conversation_id is None

    def test_existing_conversation(self):
        conversation_id = str(uuid.uuid4())
        request = SendMessageRequest(conversation_id=conversation_id, content="hi")
        assert request.conversation_id == conversation_id

    def test_content_required(self):
        with pytest.raises(ValidationError):
            SendMessageRequest(content="")

    def test_blank_content_rejected(self):
        with pytest.raises(ValidationError):
            SendMessageRequest(content="   \n ")

    def test_content_max_length(self):
        with pytest.raises(ValidationError):
            SendMessageRequest(content="x" * 5001)

    def test_conversation_id_normalized(self):
        """Any accepted UUID spelling becomes the canonical lowercase form."""
        conversation_id = str(uuid.uuid4())
        for spelling in (conversation_id.upper(), "{" + conversation_id + "}"):
            request = SendMessageRequest(conversation_id=spelling, content="hi")
            assert request.conversation_id == conversation_id

    def test_conversation_id_must_be_uuid(self):
        with pytest.raises(ValidationError):
            SendMessageRequest(conversation_id="not-a-uuid", content="hi")


class TestRenameConversationRequest:
    """SUT: RenameConversationRequest"""

    def test_max_length(self):
        with pytest.raises(ValidationError):
            RenameConversationRequest(title="x" * 256)

    def test_min_length(self):
        with pytest.raises(ValidationError):
            RenameConversationRequest(title="")


class TestSendMessageResult:
    """SUT: SendMessageResult"""

    def test_serialization(self):
        """Result serializes to JSON with camelCase metadata and ISO timestamps."""
        now = datetime(2025, 1, 15, 10, 30, 0)
        message = MessageResponse(
            id="m1", conversation_id="c1", sender=MessageSender.USER, content="hi", created_at=now
        )
        result = SendMessageResult(
            conversation=ConversationResponse(
                id="c1", title="Laptops", created_at=now, updated_at=now, messages_since_synthesis=2
            ),
            user_message=message,
            bot_message=message.model_copy(update={"id": "m2", "sender": MessageSender.BOT}),
        )
        data = result.model_dump(mode="json", by_alias=True)
        assert data["synthesis"]["status"] == SynthesisStatus.SKIPPED.value
        assert data["conversation"]["metadata"]["saleStatus"] == "exploring"
        assert data["bot_message"]["sender"] == "bot"
        assert "2025-01-15" in data["user_message"]["created_at"]
