"""Profile Schemas — field-level validation for profile procedures.

Invariants:
    - ProfileCreate.id is the identity provider's user id (UUID)
    - nickname: 1-100 chars after stripping; bio: at most 1000 chars
    - avatar_url must be an http(s) URL; email must be a valid address of
      at most 255 chars, the width of profiles.email
    - ProfileUpdate changes only the fields that were sent

Design Decisions:
    - field_validator for the strip transform: keeps the stored value canonical
    - HttpUrl/EmailStr carry URL- and email-shape checks; handlers store str()
"""

from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, HttpUrl, field_validator


def _strip_nickname(v: str | None) -> str | None:
    if v is None:
        return v
    v = v.strip()
    if not v:
        raise ValueError("nickname cannot be empty or whitespace")
    return v


class ProfileCreate(BaseModel):
    """createProfile input."""
    id: UUID
    nickname: str | None = Field(None, max_length=100)
    bio: str | None = Field(None, max_length=1000)
    avatar_url: HttpUrl | None = None
    email: EmailStr | None = None

    @field_validator("nickname")
    @classmethod
    def strip_nickname(cls, v: str | None) -> str | None:
        return _strip_nickname(v)


class ProfileUpdate(BaseModel):
    """updateProfile input — partial; unset fields are left alone."""
    id: UUID
    nickname: str | None = Field(None, max_length=100)
    bio: str | None = Field(None, max_length=1000)
    avatar_url: HttpUrl | None = None

    @field_validator("nickname")
    @classmethod
    def strip_nickname(cls, v: str | None) -> str | None:
        return _strip_nickname(v)


class ProfileLookup(BaseModel):
    id: UUID
