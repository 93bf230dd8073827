"""Chat and message API router."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from app.dependencies import get_chat_service
from app.schemas.chat_schema import (
    AddMessageRequest,
    ChatEnvelope,
    ChatListResponse,
    ChatSearchResponse,
    CreateChatRequest,
    MessageEnvelope,
    MessageListResponse,
    UpdateChatTitleRequest,
    UsageResponse,
)
from app.schemas.response_schema import ApiResponse, success_response
from app.services.chat_service import ChatService

router = APIRouter(prefix="/api/chats", tags=["chats"])

ChatServiceDep = Annotated[ChatService, Depends(get_chat_service)]


@router.get("", response_model=ApiResponse[ChatListResponse])
async def list_chats(
    service: ChatServiceDep,
    limit: int = Query(default=50, ge=1, le=200),
) -> dict:
    """List chats, most recently active first."""
    chats = await service.list_chats(limit=limit)
    return success_response(ChatListResponse(chats=chats))


@router.post("", response_model=ApiResponse[ChatEnvelope])
async def create_chat(request: CreateChatRequest, service: ChatServiceDep) -> dict:
    """Create an empty chat."""
    chat = await service.create_chat(title=request.title, model=request.model)
    return success_response(ChatEnvelope(chat=chat))


@router.get("/search", response_model=ApiResponse[ChatSearchResponse])
async def search_chats(
    service: ChatServiceDep,
    q: str = Query(default=""),
) -> dict:
    """Search chat titles and message content."""
    result = await service.search_chats_ranked(q)
    return success_response(result)


@router.get("/usage", response_model=ApiResponse[UsageResponse])
async def get_usage(service: ChatServiceDep) -> dict:
    """Total tokens used across all chats."""
    return success_response(await service.get_usage())


@router.get("/{chat_id}", response_model=ApiResponse[ChatEnvelope])
async def get_chat(chat_id: str, service: ChatServiceDep) -> dict:
    """Fetch a single chat."""
    chat = await service.get_chat(chat_id)
    return success_response(ChatEnvelope(chat=chat))


@router.patch("/{chat_id}", response_model=ApiResponse[ChatEnvelope])
async def rename_chat(
    chat_id: str,
    request: UpdateChatTitleRequest,
    service: ChatServiceDep,
) -> dict:
    """Rename a chat."""
    chat = await service.rename_chat(chat_id, request.title)
    return success_response(ChatEnvelope(chat=chat), message="Title updated")


@router.delete("/{chat_id}", response_model=ApiResponse[None])
async def delete_chat(chat_id: str, service: ChatServiceDep) -> dict:
    """Delete a chat and all of its messages."""
    await service.delete_chat(chat_id)
    return success_response(None, message="Chat deleted")


@router.get("/{chat_id}/usage", response_model=ApiResponse[UsageResponse])
async def get_chat_usage(chat_id: str, service: ChatServiceDep) -> dict:
    """Tokens used by one chat."""
    return success_response(await service.get_chat_usage(chat_id))


@router.get("/{chat_id}/messages", response_model=ApiResponse[MessageListResponse])
async def list_messages(chat_id: str, service: ChatServiceDep) -> dict:
    """List a chat's messages, oldest first."""
    messages = await service.get_messages(chat_id)
    return success_response(MessageListResponse(messages=messages))


@router.post("/{chat_id}/messages", response_model=ApiResponse[MessageEnvelope])
async def add_message(
    chat_id: str,
    request: AddMessageRequest,
    service: ChatServiceDep,
) -> dict:
    """Append a message; its token count is estimated server-side."""
    message = await service.add_message(
        chat_id=chat_id,
        role=request.role,
        content=request.content,
        model=request.model,
    )
    return success_response(MessageEnvelope(message=message))
