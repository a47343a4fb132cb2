"""SQL Profile Repository — tests against a file-backed SQLite database.

Tests cover:
    - insert/get round trip returns plain dicts
    - All-digit ids load back as UUIDs
    - list_profiles ordered newest first
    - Duplicate id and duplicate email raise DuplicateEntityError; first row kept
    - update_profile touches only updatable fields and refreshes updated_at
"""

from datetime import datetime, timedelta, timezone
from uuid import UUID, uuid4

import pytest

from relay.core.errors import DuplicateEntityError

ADA = UUID("00000000-0000-4000-8000-0000000000ad")
BASE = datetime(2026, 1, 1, tzinfo=timezone.utc)


def _profile(id=None, **fields):
    return {"id": id or uuid4(), "nickname": None, "bio": None,
            "avatar_url": None, "email": None, **fields}


@pytest.mark.asyncio
async def test_insert_and_get(profile_repository):
    created = await profile_repository.insert_profile(_profile(ADA, nickname="Ada"))
    assert created["id"] == ADA
    assert created["created_at"] is not None
    fetched = await profile_repository.get_profile(ADA)
    assert fetched["nickname"] == "Ada"


@pytest.mark.asyncio
async def test_all_digit_id_round_trips(profile_repository):
    digits = UUID("00000000-0000-4000-8000-000000000001")
    await profile_repository.insert_profile(_profile(digits, nickname="Digits"))
    fetched = await profile_repository.get_profile(digits)
    assert fetched["id"] == digits
    assert [p["id"] for p in await profile_repository.list_profiles()] == [digits]


@pytest.mark.asyncio
async def test_get_missing_is_none(profile_repository):
    assert await profile_repository.get_profile(uuid4()) is None


@pytest.mark.asyncio
async def test_list_newest_first(profile_repository):
    for offset, name in enumerate(["first", "second", "third"]):
        await profile_repository.insert_profile(
            _profile(nickname=name, created_at=BASE + timedelta(minutes=offset)),
        )
    names = [p["nickname"] for p in await profile_repository.list_profiles()]
    assert names == ["third", "second", "first"]


@pytest.mark.asyncio
async def test_duplicate_id_keeps_first_row(profile_repository):
    await profile_repository.insert_profile(_profile(ADA, nickname="Ada"))
    with pytest.raises(DuplicateEntityError) as info:
        await profile_repository.insert_profile(_profile(ADA, nickname="Eve"))
    assert info.value.details == {"entity": "Profile", "id": str(ADA)}
    assert (await profile_repository.get_profile(ADA))["nickname"] == "Ada"
    assert len(await profile_repository.list_profiles()) == 1


@pytest.mark.asyncio
async def test_duplicate_email_rejected(profile_repository):
    await profile_repository.insert_profile(_profile(email="ada@analytical.org"))
    with pytest.raises(DuplicateEntityError):
        await profile_repository.insert_profile(_profile(email="ada@analytical.org"))


@pytest.mark.asyncio
async def test_update_only_updatable_fields(profile_repository):
    created = await profile_repository.insert_profile(
        _profile(ADA, nickname="Ada", email="ada@analytical.org"),
    )
    updated = await profile_repository.update_profile(
        ADA, {"bio": "Countess", "email": "evil@analytical.org"},
    )
    assert updated["bio"] == "Countess"
    assert updated["email"] == "ada@analytical.org"
    assert updated["updated_at"] >= created["updated_at"]


@pytest.mark.asyncio
async def test_update_missing_is_none(profile_repository):
    assert await profile_repository.update_profile(uuid4(), {"bio": "x"}) is None
