"""Chat repository for chat and message database operations."""

from sqlalchemy import delete, func, literal_column, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.chat import Chat
from app.models.clock import utcnow
from app.models.message import Message


class ChatRepository:
    """Encapsulates chat and message database queries.

    Nothing here commits; the caller's session decides the transaction
    boundary, so multi-statement operations are atomic per request.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create_chat(self, title: str, model: str) -> Chat:
        """Insert an empty chat with zeroed counters."""
        now = utcnow()
        chat = Chat(
            title=title,
            model=model,
            created_at=now,
            updated_at=now,
            total_tokens=0,
            message_count=0,
        )
        self._session.add(chat)
        await self._session.flush()
        await self._session.refresh(chat)
        return chat

    async def find_chat_by_id(self, chat_id: str) -> Chat | None:
        """Find a chat by its identifier."""
        result = await self._session.execute(
            select(Chat)
            .where(Chat.id == chat_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def find_recent_chats(self, limit: int = 50) -> list[Chat]:
        """Most recently active chats first."""
        result = await self._session.execute(
            select(Chat).order_by(Chat.updated_at.desc(), Chat.id.desc()).limit(limit)
        )
        return list(result.scalars().all())

    async def search_chats(self, query: str) -> list[Chat]:
        """Chats whose title or any message content contains ``query``.

        Matching is a case-sensitive substring test (``instr`` rather than
        ``LIKE``, which folds ASCII case in SQLite and treats ``%``/``_`` as
        wildcards). Each chat appears once; no ordering is applied.
        """
        content_match = (
            select(Message.chat_id).where(func.instr(Message.content, query) > 0)
        )
        result = await self._session.execute(
            select(Chat).where(
                or_(
                    func.instr(Chat.title, query) > 0,
                    Chat.id.in_(content_match),
                )
            )
        )
        return list(result.scalars().all())

    async def update_chat_title(self, chat_id: str, title: str) -> bool:
        """Rename a chat and bump its activity time. Returns False if missing."""
        result = await self._session.execute(
            update(Chat)
            .where(Chat.id == chat_id)
            .values(title=title, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0

    async def delete_chat(self, chat_id: str) -> bool:
        """Hard-delete a chat and every message it owns."""
        # The FK cascade covers this too; deleting explicitly keeps the
        # guarantee on connections where foreign keys are not enforced.
        await self._session.execute(delete(Message).where(Message.chat_id == chat_id))
        result = await self._session.execute(delete(Chat).where(Chat.id == chat_id))
        return result.rowcount > 0

    async def append_message(
        self,
        chat_id: str,
        role: str,
        content: str,
        tokens: int,
    ) -> Message | None:
        """Insert a message and advance the parent chat's counters.

        The counters are bumped with a single in-database increment so
        concurrent appends to the same chat cannot lose updates. Returns None
        (having written nothing) when the chat does not exist.
        """
        now = utcnow()
        result = await self._session.execute(
            update(Chat)
            .where(Chat.id == chat_id)
            .values(
                total_tokens=Chat.total_tokens + tokens,
                message_count=Chat.message_count + 1,
                updated_at=now,
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            return None

        message = Message(
            chat_id=chat_id,
            role=role,
            content=content,
            tokens=tokens,
            created_at=now,
        )
        self._session.add(message)
        await self._session.flush()
        await self._session.refresh(message)
        return message

    async def find_messages_by_chat_id(self, chat_id: str) -> list[Message]:
        """All messages of a chat in replay order (oldest first).

        Messages sharing a timestamp keep insertion order through the SQLite
        rowid.
        """
        result = await self._session.execute(
            select(Message)
            .where(Message.chat_id == chat_id)
            .order_by(Message.created_at.asc(), literal_column("messages.rowid").asc())
        )
        return list(result.scalars().all())

    async def get_chat_token_count(self, chat_id: str) -> int:
        """Token total of one chat, 0 if it does not exist."""
        result = await self._session.execute(
            select(Chat.total_tokens).where(Chat.id == chat_id)
        )
        return result.scalar_one_or_none() or 0

    async def get_total_tokens_used(self) -> int:
        """Token total across every chat."""
        result = await self._session.execute(
            select(func.coalesce(func.sum(Chat.total_tokens), 0))
        )
        return int(result.scalar_one())

    async def ping(self) -> None:
        """Run a trivial query to prove the database is reachable."""
        await self._session.execute(select(Chat.id).limit(1))
