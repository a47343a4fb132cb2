"""Input Validation — turns an untyped payload into a parsed schema instance or violations.

Invariants:
    - validate_input() never raises for bad input; it returns Err(BadInputError)
    - Every violated constraint is reported, in pydantic's order, not just the first
    - Defaults are applied here, so handlers always see a complete value
    - Unknown fields are dropped unless the schema sets extra="allow"
    - Pure: no IO, no logging

Design Decisions:
    - pydantic models as the schema language: the same class drives runtime
      validation, static types for handlers, and the client stub signatures
    - Missing input (None) validates as {} so all-optional schemas and
      defaulted schemas work without a payload
"""

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ValidationError

from relay.core.errors import BadInputError
from relay.core.result import Err, Ok, Outcome


@dataclass(frozen=True)
class FieldViolation:
    """One failed constraint: dotted path to the field plus a human message."""
    path: str
    message: str

    def to_dict(self) -> dict:
        return {"path": self.path, "message": self.message}


def violations_from(exc: ValidationError) -> list[FieldViolation]:
    """Flatten a pydantic ValidationError into ordered FieldViolations."""
    return [
        FieldViolation(
            path=".".join(str(part) for part in e["loc"]),
            message=e["msg"],
        )
        for e in exc.errors()
    ]


def validate_input(schema: type[BaseModel] | None, raw: Any) -> Outcome:
    """Validate raw against schema. Ok(instance) or Err(BadInputError)."""
    if schema is None:
        return Ok(None)
    payload = {} if raw is None else raw
    try:
        return Ok(schema.model_validate(payload))
    except ValidationError as exc:
        return Err(BadInputError(violations_from(exc)))
