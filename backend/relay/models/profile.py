"""Profile ORM — one row per user profile, keyed by the identity provider's user id.

Invariants:
    - id is a UUID primary key supplied by the caller (the auth user id), never generated
    - id uses the generic Uuid type: native uuid on PostgreSQL, CHAR(32) hex on SQLite
    - email is unique when present
    - created_at set once on insert; updated_at refreshed on every update
    - nickname <= 100 chars, email <= 255 chars, avatar_url <= 2048 chars
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Text, DateTime, Index, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from relay.db.base import Base


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Profile(Base):
    """User profile — nickname, bio, avatar and contact email."""
    __tablename__ = "profiles"
    __table_args__ = (Index("ix_profiles_created_at", "created_at"),)

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), primary_key=True,
    )
    nickname: Mapped[str | None] = mapped_column(String(100), nullable=True)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    avatar_url: Mapped[str | None] = mapped_column(String(2048), nullable=True)
    email: Mapped[str | None] = mapped_column(
        String(255), nullable=True, unique=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utc_now,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
        default=_utc_now, onupdate=_utc_now,
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "nickname": self.nickname,
            "bio": self.bio,
            "avatar_url": self.avatar_url,
            "email": self.email,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }
