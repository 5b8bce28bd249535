"""Conversation REST API routes - V1."""

from fastapi import APIRouter, Depends

from ...exceptions import SalesAssistantError
from ...models.conversation import (
    ConversationResponse,
    ConversationListResponse,
    ConversationHistoryResponse,
    RenameConversationRequest,
)
from ...services import ChatService
from .dependencies import get_chat_service, get_owner_id, to_http_error

router = APIRouter(prefix="/api/v1/conversations", tags=["Conversations"])


@router.get("", response_model=ConversationListResponse)
async def list_conversations(
    owner_id: str = Depends(get_owner_id),
    service: ChatService = Depends(get_chat_service)
):
    """List the caller's conversations."""
    return service.list_conversations(owner_id)


@router.get("/{conversation_id}", response_model=ConversationHistoryResponse)
async def get_conversation(
    conversation_id: str,
    owner_id: str = Depends(get_owner_id),
    service: ChatService = Depends(get_chat_service)
):
    """Get conversation details with its message history."""
    try:
        return service.get_history(conversation_id, owner_id)
    except SalesAssistantError as e:
        raise to_http_error(e)


@router.patch("/{conversation_id}", response_model=ConversationResponse)
async def rename_conversation(
    conversation_id: str,
    request: RenameConversationRequest,
    owner_id: str = Depends(get_owner_id),
    service: ChatService = Depends(get_chat_service)
):
    """Rename a conversation."""
    try:
        return await service.rename_conversation(conversation_id, owner_id, request.title)
    except SalesAssistantError as e:
        raise to_http_error(e)


@router.delete("/{conversation_id}", response_model=dict)
async def delete_conversation(
    conversation_id: str,
    owner_id: str = Depends(get_owner_id),
    service: ChatService = Depends(get_chat_service)
):
    """Delete a conversation and its messages."""
    try:
        await service.delete_conversation(conversation_id, owner_id)
    except SalesAssistantError as e:
        raise to_http_error(e)

    return {
        "status": "deleted",
        "message": f"Conversation {conversation_id} deleted successfully"
    }
