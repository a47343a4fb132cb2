"""Greeting & Demo Schemas — inputs for hello and getRandomNumber.

Invariants:
    - HelloInput.nickname optional; absent means "World"
    - RandomNumberInput defaults to the inclusive range 1..100
    - min > max is reported on the `max` field
"""

from pydantic import BaseModel, ValidationInfo, field_validator


class HelloInput(BaseModel):
    nickname: str | None = None


class RandomNumberInput(BaseModel):
    """Inclusive integer range for getRandomNumber."""
    min: int = 1
    max: int = 100

    @field_validator("max")
    @classmethod
    def max_not_below_min(cls, v: int, info: ValidationInfo) -> int:
        low = info.data.get("min")
        if low is not None and v < low:
            raise ValueError(f"max ({v}) must be >= min ({low})")
        return v
