"""Chat REST API routes - V1."""

from fastapi import APIRouter, Depends

from ...exceptions import SalesAssistantError
from ...models.chat import SendMessageRequest, SendMessageResult
from ...services import ChatService
from .dependencies import get_chat_service, get_owner_id, to_http_error

router = APIRouter(prefix="/api/v1/chat", tags=["Chat"])


@router.post("/messages", response_model=SendMessageResult, status_code=201)
async def send_message(
    request: SendMessageRequest,
    owner_id: str = Depends(get_owner_id),
    service: ChatService = Depends(get_chat_service)
):
    """Send a message, starting a new conversation when no ID is given."""
    try:
        return await service.send_message(owner_id, request)
    except SalesAssistantError as e:
        raise to_http_error(e)
