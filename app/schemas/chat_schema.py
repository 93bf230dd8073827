"""Chat and message request/response schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

MessageRole = Literal["user", "assistant", "system"]


class CreateChatRequest(BaseModel):
    """Request to start a new chat."""

    title: str = Field(default="New Chat", min_length=1, max_length=255)
    model: str = Field(default="gpt-4", min_length=1, max_length=100)


class UpdateChatTitleRequest(BaseModel):
    """Request to rename a chat."""

    title: str = Field(..., min_length=1, max_length=255)


class AddMessageRequest(BaseModel):
    """Request to append a message; the server computes the token count.

    ``role`` is checked by the service so that a bad value is reported as a
    domain validation error rather than a schema error.
    """

    role: str
    content: str
    model: str | None = None


class ChatResponse(BaseModel):
    """Public chat representation."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: str
    title: str
    model: str
    created_at: datetime
    updated_at: datetime
    total_tokens: int
    message_count: int


class MessageResponse(BaseModel):
    """Public message representation."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: str
    chat_id: str
    role: MessageRole
    content: str
    tokens: int
    created_at: datetime


class ChatEnvelope(BaseModel):
    model_config = ConfigDict(frozen=True)

    chat: ChatResponse


class ChatListResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    chats: list[ChatResponse]


class ChatSearchResponse(BaseModel):
    """Ranked search results; ``total`` counts matches before the cap."""

    model_config = ConfigDict(frozen=True)

    chats: list[ChatResponse]
    total: int = 0


class MessageEnvelope(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: MessageResponse


class MessageListResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    messages: list[MessageResponse]


class UsageResponse(BaseModel):
    """Token usage across all chats."""

    model_config = ConfigDict(frozen=True)

    total_tokens: int
    formatted: str
