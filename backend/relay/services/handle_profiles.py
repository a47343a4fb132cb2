"""Profile Handlers — list, read, create and update profiles (5 methods).

Invariants:
    - Handlers reach the store only through context.profiles (ProfileRepository)
    - create_profile lets DuplicateEntityError from the repository propagate;
      the registry puts it on the wire unchanged
    - update_profile on an unknown id is a BadInputError on `id`, nothing written
    - me returns the caller's own profile, or None when there is none yet

Design Decisions:
    - URL/email values are stored as plain strings: the store knows nothing of pydantic types
"""

from uuid import UUID

from relay.core.context import ProcedureContext
from relay.core.domain_types import ProfileId
from relay.core.errors import BadInputError, HandlerError
from relay.core.repository_protocols import ProfileRepository
from relay.core.validation import FieldViolation
from relay.schemas.profile import ProfileCreate, ProfileLookup, ProfileUpdate


def _repository(context: ProcedureContext, procedure: str) -> ProfileRepository:
    if context.profiles is None:
        raise HandlerError(procedure, "Profile store is not available")
    return context.profiles


def _as_text(value: object) -> str | None:
    return None if value is None else str(value)


class ProfileHandlers:
    """getProfiles, getProfile, createProfile, updateProfile, me."""

    async def get_profiles(self, data: None, context: ProcedureContext) -> list[dict]:
        return await _repository(context, "getProfiles").list_profiles()

    async def get_profile(
        self, data: ProfileLookup, context: ProcedureContext,
    ) -> dict | None:
        repo = _repository(context, "getProfile")
        return await repo.get_profile(ProfileId(data.id))

    async def create_profile(
        self, data: ProfileCreate, context: ProcedureContext,
    ) -> dict:
        repo = _repository(context, "createProfile")
        return await repo.insert_profile({
            "id": data.id,
            "nickname": data.nickname,
            "bio": data.bio,
            "avatar_url": _as_text(data.avatar_url),
            "email": _as_text(data.email),
        })

    async def update_profile(
        self, data: ProfileUpdate, context: ProcedureContext,
    ) -> dict:
        repo = _repository(context, "updateProfile")
        fields = data.model_dump(exclude_unset=True, exclude={"id"})
        if "avatar_url" in fields:
            fields["avatar_url"] = _as_text(data.avatar_url)
        updated = await repo.update_profile(ProfileId(data.id), fields)
        if updated is None:
            raise BadInputError([FieldViolation("id", "Profile not found")])
        return updated

    async def me(self, data: None, context: ProcedureContext) -> dict | None:
        repo = _repository(context, "me")
        try:
            profile_id = ProfileId(UUID(str(context.identity)))
        except ValueError:
            return None
        return await repo.get_profile(profile_id)
