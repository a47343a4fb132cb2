"""SQL Profile Repository — ProfileRepository implemented on async SQLAlchemy.

Invariants:
    - One short-lived session per operation (safe under concurrent batch calls)
    - list_profiles() ordered by created_at descending
    - A uniqueness violation on insert is rolled back and raised as
      DuplicateEntityError; the existing row is untouched
    - Returned profiles are plain dicts (Profile.to_dict), never ORM objects
"""

import logging
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from relay.core.domain_types import ProfileId
from relay.core.errors import DuplicateEntityError
from relay.infrastructure.database import SessionScope
from relay.models.profile import Profile

logger = logging.getLogger(__name__)

_UPDATABLE = frozenset({"nickname", "bio", "avatar_url"})


class SqlProfileRepository:
    """Profile persistence over a session factory."""

    def __init__(self, session_scope: SessionScope):
        self._session_scope = session_scope

    async def list_profiles(self) -> list[dict]:
        async with self._session_scope() as db:
            result = await db.execute(
                select(Profile).order_by(Profile.created_at.desc()),
            )
            return [p.to_dict() for p in result.scalars().all()]

    async def get_profile(self, profile_id: ProfileId) -> dict | None:
        async with self._session_scope() as db:
            profile = await db.get(Profile, profile_id)
            return profile.to_dict() if profile else None

    async def insert_profile(self, data: dict) -> dict:
        async with self._session_scope() as db:
            profile = Profile(**data)
            db.add(profile)
            try:
                await db.commit()
            except IntegrityError as e:
                await db.rollback()
                logger.warning(
                    f"Profile insert rejected by unique constraint: {e.orig}",
                )
                raise DuplicateEntityError("Profile", str(data["id"]))
            await db.refresh(profile)
            return profile.to_dict()

    async def update_profile(
        self, profile_id: ProfileId, fields: dict,
    ) -> dict | None:
        async with self._session_scope() as db:
            profile = await db.get(Profile, profile_id)
            if profile is None:
                return None
            for key, value in fields.items():
                if key in _UPDATABLE:
                    setattr(profile, key, value)
            profile.updated_at = datetime.now(timezone.utc)
            await db.commit()
            await db.refresh(profile)
            return profile.to_dict()
