"""Database connection configuration."""

from pathlib import Path

from pydantic import BaseModel

SQLITE_URL_PREFIX = "sqlite+aiosqlite:///"


class DatabaseConfig(BaseModel, frozen=True):
    """Database connection settings."""

    url: str

    @property
    def is_memory(self) -> bool:
        """Check if the URL points at an in-memory SQLite database."""
        return self.url.endswith(":memory:")

    @property
    def file_path(self) -> Path | None:
        """Filesystem path of the SQLite file, or None for in-memory databases."""
        if self.is_memory or not self.url.startswith(SQLITE_URL_PREFIX):
            return None
        return Path(self.url[len(SQLITE_URL_PREFIX) :])
