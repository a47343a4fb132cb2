"""Boundary Protocols — contracts between the procedure core and the data store.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - Profiles cross the boundary as plain dicts with the Profile shape:
      id, nickname, bio, avatar_url, email, created_at, updated_at
    - list_profiles() is ordered by created_at descending
    - insert_profile() signals uniqueness violations with DuplicateEntityError,
      never with a driver exception

Design Decisions:
    - Protocol over ABC: structural subtyping, test fakes need no inheritance
"""

from typing import Protocol

from relay.core.domain_types import ProfileId


class ProfileRepository(Protocol):
    """Contract for profile persistence — implemented by shell."""
    async def list_profiles(self) -> list[dict]: ...
    async def get_profile(self, profile_id: ProfileId) -> dict | None: ...
    async def insert_profile(self, data: dict) -> dict: ...
    async def update_profile(
        self, profile_id: ProfileId, fields: dict,
    ) -> dict | None: ...
