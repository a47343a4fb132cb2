"""Input Validation tests — schema parsing into Ok(value) or Err(BadInputError).

Tests cover:
    - Defaults applied for missing and empty input
    - Every violated field reported, with dotted paths
    - Schema-less procedures receive None
    - Cross-field validator errors land on the right field
"""

from pydantic import BaseModel, Field

from relay.core.errors import BadInputError
from relay.core.result import Err, Ok
from relay.core.validation import FieldViolation, validate_input
from relay.schemas.greeting import HelloInput, RandomNumberInput
from relay.schemas.profile import ProfileCreate


class _Address(BaseModel):
    city: str = Field(min_length=1)


class _Person(BaseModel):
    name: str
    address: _Address


def test_none_input_gets_defaults():
    outcome = validate_input(RandomNumberInput, None)
    assert isinstance(outcome, Ok)
    assert (outcome.value.min, outcome.value.max) == (1, 100)


def test_empty_object_gets_defaults():
    outcome = validate_input(HelloInput, {})
    assert outcome.unwrap().nickname is None


def test_no_schema_yields_none():
    assert validate_input(None, {"ignored": True}) == Ok(None)


def test_all_violations_reported():
    outcome = validate_input(ProfileCreate, {"id": "not-a-uuid", "bio": "x" * 1001})
    assert isinstance(outcome, Err)
    paths = [v.path for v in outcome.error.violations]
    assert paths == ["id", "bio"]


def test_nested_path_is_dotted():
    outcome = validate_input(_Person, {"name": "Ada", "address": {"city": ""}})
    assert isinstance(outcome, Err)
    assert outcome.error.violations[0].path == "address.city"


def test_max_below_min_reported_on_max():
    outcome = validate_input(RandomNumberInput, {"min": 10, "max": 3})
    assert isinstance(outcome, Err)
    [violation] = outcome.error.violations
    assert violation.path == "max"
    assert "must be >= min" in violation.message


def test_error_is_bad_input_with_details():
    outcome = validate_input(ProfileCreate, {})
    error = outcome.error
    assert isinstance(error, BadInputError)
    assert error.code == "BAD_INPUT"
    assert error.details == [{"path": "id", "message": "Field required"}]


def test_field_violation_to_dict():
    assert FieldViolation("bio", "too long").to_dict() == {
        "path": "bio", "message": "too long",
    }
