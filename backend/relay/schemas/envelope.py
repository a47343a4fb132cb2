"""Envelope Schemas — wire wrappers correlating calls and results within a batch.

Invariants:
    - CallEnvelope.id is unique within its batch (checked by the transport)
    - input/data hold wire_codec-encoded values ({"json": ..., "meta": ...})
    - ResultEnvelope carries exactly one of data (ok) or error (not ok)
"""

from typing import Any

from pydantic import BaseModel, Field

from relay.core.domain_types import ProcedureMode


class CallEnvelope(BaseModel):
    id: str = Field(min_length=1, max_length=64)
    procedure: str = Field(min_length=1, max_length=200)
    mode: ProcedureMode
    input: dict[str, Any] | None = None


class BatchRequest(BaseModel):
    calls: list[CallEnvelope]


class ErrorBody(BaseModel):
    code: str
    message: str
    details: Any = None


class ResultEnvelope(BaseModel):
    id: str
    ok: bool
    data: dict[str, Any] | None = None
    error: ErrorBody | None = None


class BatchResponse(BaseModel):
    results: list[ResultEnvelope]
