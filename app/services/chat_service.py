"""Service layer for chats, messages and chat search."""

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ChatNotFoundError, StorageError, ValidationFailedError
from app.models.message import MESSAGE_ROLES
from app.repositories.chat_repo import ChatRepository
from app.schemas.chat_schema import (
    ChatResponse,
    ChatSearchResponse,
    MessageResponse,
    UsageResponse,
)
from app.services.token_counter import estimate_tokens, format_token_count

logger = structlog.get_logger()

MIN_SEARCH_QUERY_LENGTH = 2
MAX_SEARCH_RESULTS = 20
DEFAULT_CHAT_LIST_LIMIT = 50
DEFAULT_MESSAGE_MODEL = "gpt-4"


def rank_search_results(chats: list[ChatResponse], query: str) -> list[ChatResponse]:
    """Order matches for display: title hits first, then most recent."""
    needle = query.lower()
    by_recency = sorted(chats, key=lambda c: c.updated_at, reverse=True)
    # sorted() is stable, so recency order survives within each group.
    return sorted(by_recency, key=lambda c: needle not in c.title.lower())


class ChatService:
    """Orchestrates chat persistence and read-side fallbacks.

    Collection reads (chat list, search, messages) degrade to an empty result
    when storage fails. Single-chat reads, usage totals and writes surface
    ``StorageError``, which is answered as an expected error body.
    """

    def __init__(self, chat_repo: ChatRepository, session: AsyncSession) -> None:
        self._chat_repo = chat_repo
        self._session = session

    async def _discard_failed_transaction(self) -> None:
        try:
            await self._session.rollback()
        except SQLAlchemyError:
            logger.warning("Rollback after storage failure also failed")

    async def create_chat(self, title: str, model: str) -> ChatResponse:
        """Create an empty chat."""
        try:
            chat = await self._chat_repo.create_chat(title=title, model=model)
        except SQLAlchemyError as exc:
            logger.error("Failed to create chat", error=str(exc))
            raise StorageError("Failed to create chat") from exc
        logger.info("Chat created", chat_id=chat.id, model=model)
        return ChatResponse.model_validate(chat)

    async def get_chat(self, chat_id: str) -> ChatResponse:
        """Fetch one chat or raise ``ChatNotFoundError``."""
        try:
            chat = await self._chat_repo.find_chat_by_id(chat_id)
        except SQLAlchemyError as exc:
            logger.error("Failed to load chat", chat_id=chat_id, error=str(exc))
            await self._discard_failed_transaction()
            raise StorageError("Failed to load chat") from exc
        if chat is None:
            raise ChatNotFoundError()
        return ChatResponse.model_validate(chat)

    async def list_chats(self, limit: int = DEFAULT_CHAT_LIST_LIMIT) -> list[ChatResponse]:
        """Most recently active chats; empty if storage is unavailable."""
        try:
            chats = await self._chat_repo.find_recent_chats(limit=limit)
        except SQLAlchemyError as exc:
            logger.warning("Chat list unavailable, returning empty", error=str(exc))
            await self._discard_failed_transaction()
            return []
        return [ChatResponse.model_validate(c) for c in chats]

    async def search_chats(self, query: str) -> list[ChatResponse]:
        """Unordered distinct matches on title or message content.

        Queries shorter than two characters match nothing and never reach
        storage.
        """
        if len(query) < MIN_SEARCH_QUERY_LENGTH:
            return []
        try:
            chats = await self._chat_repo.search_chats(query)
        except SQLAlchemyError as exc:
            logger.warning("Chat search unavailable, returning empty", error=str(exc))
            await self._discard_failed_transaction()
            return []
        return [ChatResponse.model_validate(c) for c in chats]

    async def search_chats_ranked(self, query: str) -> ChatSearchResponse:
        """Search results ranked for display and capped."""
        matches = await self.search_chats(query)
        ranked = rank_search_results(matches, query)
        return ChatSearchResponse(
            chats=ranked[:MAX_SEARCH_RESULTS],
            total=len(ranked),
        )

    async def rename_chat(self, chat_id: str, title: str) -> ChatResponse:
        """Change the title of an existing chat."""
        try:
            found = await self._chat_repo.update_chat_title(chat_id, title)
        except SQLAlchemyError as exc:
            logger.error("Failed to rename chat", chat_id=chat_id, error=str(exc))
            raise StorageError("Failed to rename chat") from exc
        if not found:
            raise ChatNotFoundError()
        return await self.get_chat(chat_id)

    async def delete_chat(self, chat_id: str) -> None:
        """Delete a chat together with all of its messages."""
        try:
            found = await self._chat_repo.delete_chat(chat_id)
        except SQLAlchemyError as exc:
            logger.error("Failed to delete chat", chat_id=chat_id, error=str(exc))
            raise StorageError("Failed to delete chat") from exc
        if not found:
            raise ChatNotFoundError()
        logger.info("Chat deleted", chat_id=chat_id)

    async def add_message(
        self,
        chat_id: str,
        role: str,
        content: str,
        model: str | None = None,
        tokens: int | None = None,
    ) -> MessageResponse:
        """Append a message, estimating its tokens unless given explicitly."""
        if role not in MESSAGE_ROLES:
            raise ValidationFailedError(
                f"Invalid role '{role}'; expected one of {', '.join(MESSAGE_ROLES)}"
            )
        if tokens is None:
            tokens = estimate_tokens(content, model or DEFAULT_MESSAGE_MODEL)
        if tokens < 0:
            raise ValidationFailedError("Token count must not be negative")

        try:
            message = await self._chat_repo.append_message(
                chat_id=chat_id, role=role, content=content, tokens=tokens
            )
        except SQLAlchemyError as exc:
            logger.error("Failed to add message", chat_id=chat_id, error=str(exc))
            raise StorageError("Failed to add message") from exc
        if message is None:
            raise ChatNotFoundError()
        return MessageResponse.model_validate(message)

    async def get_messages(self, chat_id: str) -> list[MessageResponse]:
        """Messages in replay order; empty if storage is unavailable."""
        try:
            messages = await self._chat_repo.find_messages_by_chat_id(chat_id)
        except SQLAlchemyError as exc:
            logger.warning(
                "Messages unavailable, returning empty", chat_id=chat_id, error=str(exc)
            )
            await self._discard_failed_transaction()
            return []
        return [MessageResponse.model_validate(m) for m in messages]

    async def get_usage(self) -> UsageResponse:
        """Token usage summed over every chat."""
        try:
            total = await self._chat_repo.get_total_tokens_used()
        except SQLAlchemyError as exc:
            logger.error("Failed to load token usage", error=str(exc))
            await self._discard_failed_transaction()
            raise StorageError("Failed to load token usage") from exc
        return UsageResponse(total_tokens=total, formatted=format_token_count(total))

    async def get_chat_usage(self, chat_id: str) -> UsageResponse:
        """Token usage of a single chat."""
        try:
            chat = await self._chat_repo.find_chat_by_id(chat_id)
            total = await self._chat_repo.get_chat_token_count(chat_id)
        except SQLAlchemyError as exc:
            logger.error("Failed to load chat usage", chat_id=chat_id, error=str(exc))
            await self._discard_failed_transaction()
            raise StorageError("Failed to load token usage") from exc
        if chat is None:
            raise ChatNotFoundError()
        return UsageResponse(total_tokens=total, formatted=format_token_count(total))
