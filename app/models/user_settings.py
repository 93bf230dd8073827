"""User settings database model."""

from datetime import datetime

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base
from app.models.clock import utcnow

DEFAULT_USER_ID = "default"


class UserSettings(Base):
    """Settings document stored as a JSON blob, one row per user."""

    __tablename__ = "user_settings"

    user_id: Mapped[str] = mapped_column(
        String(64), primary_key=True, default=DEFAULT_USER_ID
    )
    settings_data: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
