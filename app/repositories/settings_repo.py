"""Settings repository for the per-user JSON settings row."""

from sqlalchemy import select, update
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.clock import utcnow
from app.models.user_settings import DEFAULT_USER_ID, UserSettings


class SettingsRepository:
    """Encapsulates reads and writes of the settings blob."""

    def __init__(self, session: AsyncSession, user_id: str = DEFAULT_USER_ID) -> None:
        self._session = session
        self._user_id = user_id

    async def find_settings_data(self) -> str | None:
        """Raw JSON blob for the user, or None if no row exists yet."""
        result = await self._session.execute(
            select(UserSettings.settings_data).where(
                UserSettings.user_id == self._user_id
            )
        )
        return result.scalar_one_or_none()

    async def insert_if_missing(self, settings_data: str) -> None:
        """Create the row with ``settings_data`` unless one already exists."""
        stmt = (
            sqlite_insert(UserSettings)
            .values(
                user_id=self._user_id,
                settings_data=settings_data,
                updated_at=utcnow(),
            )
            .on_conflict_do_nothing(index_elements=[UserSettings.user_id])
        )
        await self._session.execute(stmt)

    async def lock_for_update(self) -> None:
        """Start the write transaction before the row is read.

        SQLite has no ``SELECT ... FOR UPDATE``; touching the row takes the
        database write lock, so a concurrent merge waits instead of
        overwriting this one with a stale read.
        """
        await self._session.execute(
            update(UserSettings)
            .where(UserSettings.user_id == self._user_id)
            .values(updated_at=utcnow())
        )

    async def upsert_settings_data(self, settings_data: str) -> None:
        """Write the blob as a single upsert."""
        now = utcnow()
        stmt = sqlite_insert(UserSettings).values(
            user_id=self._user_id,
            settings_data=settings_data,
            updated_at=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[UserSettings.user_id],
            set_={"settings_data": stmt.excluded.settings_data, "updated_at": now},
        )
        await self._session.execute(stmt)
