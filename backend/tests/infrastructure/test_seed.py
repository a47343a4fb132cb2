"""Seed Script — tests that seeding replaces the profiles table.

Tests cover:
    - Existing rows are removed, SEED_PROFILES inserted
    - Re-running yields the same rows (fixed ids)
"""

import pytest

from relay.db.seed import SEED_PROFILES, seed


@pytest.mark.asyncio
async def test_seed_replaces_profiles(test_engine, profile_repository):
    url = test_engine.url.render_as_string(hide_password=False)
    await profile_repository.insert_profile({"id": SEED_PROFILES[0]["id"], "nickname": "Old"})
    assert await seed(url) == len(SEED_PROFILES)
    assert await seed(url) == len(SEED_PROFILES)
    rows = await profile_repository.list_profiles()
    assert {r["id"] for r in rows} == {p["id"] for p in SEED_PROFILES}
    assert "Old" not in {r["nickname"] for r in rows}
