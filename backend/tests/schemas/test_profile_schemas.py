"""Profile & Greeting Schemas — field-level validation tests.

Tests cover:
    - nickname stripped; whitespace-only rejected
    - Length limits on nickname and bio
    - avatar_url must be http(s); email must be an address
    - ProfileUpdate tracks which fields were sent
"""

from uuid import uuid4

import pytest
from pydantic import ValidationError

from relay.schemas.envelope import CallEnvelope
from relay.schemas.greeting import RandomNumberInput
from relay.schemas.profile import ProfileCreate, ProfileUpdate


def test_nickname_is_stripped():
    assert ProfileCreate(id=uuid4(), nickname="  Ada ").nickname == "Ada"


def test_whitespace_nickname_rejected():
    with pytest.raises(ValidationError, match="nickname"):
        ProfileCreate(id=uuid4(), nickname="   ")


@pytest.mark.parametrize("field, value", [
    ("nickname", "n" * 101),
    ("bio", "b" * 1001),
    ("avatar_url", "ftp://files.local/a.png"),
    ("email", "not-an-email"),
])
def test_invalid_field_rejected(field, value):
    with pytest.raises(ValidationError) as info:
        ProfileCreate(id=uuid4(), **{field: value})
    assert info.value.errors()[0]["loc"] == (field,)


def test_limits_are_inclusive():
    profile = ProfileCreate(id=uuid4(), nickname="n" * 100, bio="b" * 1000)
    assert len(profile.bio) == 1000


def test_update_tracks_sent_fields():
    update = ProfileUpdate(id=uuid4(), bio=None)
    assert update.model_dump(exclude_unset=True, exclude={"id"}) == {"bio": None}


def test_random_range_may_be_a_single_value():
    assert RandomNumberInput(min=5, max=5).max == 5


def test_call_envelope_requires_known_mode():
    with pytest.raises(ValidationError):
        CallEnvelope(id="1", procedure="hello", mode="subscription")


def test_long_email_within_column_accepted():
    email = f"{'a' * 64}@{'b' * 63}.{'c' * 63}.{'d' * 43}.org"
    assert len(email) == 240
    assert ProfileCreate(id=uuid4(), email=email).email == email


def test_overlong_email_rejected():
    with pytest.raises(ValidationError, match="email"):
        ProfileCreate(id=uuid4(), email=f"{'a' * 64}@{'b' * 63}.{'c' * 63}.{'d' * 63}.org")
