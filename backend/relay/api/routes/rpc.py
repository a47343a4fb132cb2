"""RPC Endpoint — the single HTTP path that carries batched procedure calls.

Invariants:
    - POST {"calls": [...]} accepts queries and mutations
    - GET ?batch=[...] accepts queries only
    - 200 {"results": [...]} whenever the batch itself parsed, even if every call failed
    - Whole-request failures raise TransportError (400, single top-level error)
    - One ProcedureContext per request, shared by every call in the batch

Design Decisions:
    - Body read from Request, not a pydantic body parameter: malformed batches
      must surface as TransportError rather than FastAPI's validation error
    - Registry and transport live on app.state (built once in create_app)
"""

import json
import logging
from typing import Any

from fastapi import APIRouter, Depends, Header, Request
from fastapi.responses import JSONResponse

from relay.config import Settings, get_settings
from relay.core.context import ProcedureContext
from relay.core.errors import TransportError
from relay.infrastructure.database import SessionScope, get_session_scope
from relay.infrastructure.identity import resolve_identity
from relay.infrastructure.profile_repository import SqlProfileRepository
from relay.schemas.envelope import BatchResponse
from relay.services.transport import BatchTransport, parse_batch

logger = logging.getLogger(__name__)
router = APIRouter(tags=["rpc"])


def get_transport(request: Request) -> BatchTransport:
    return request.app.state.transport


async def get_procedure_context(
    authorization: str | None = Header(default=None),
    session_scope: SessionScope = Depends(get_session_scope),
    settings: Settings = Depends(get_settings),
) -> ProcedureContext:
    return ProcedureContext(
        identity=resolve_identity(authorization, settings),
        profiles=SqlProfileRepository(session_scope),
    )


async def _respond(
    raw: Any,
    *,
    allow_mutations: bool,
    transport: BatchTransport,
    context: ProcedureContext,
    settings: Settings,
) -> JSONResponse:
    calls = parse_batch(
        raw,
        max_batch_size=settings.rpc_max_batch_size,
        allow_mutations=allow_mutations,
    )
    results = await transport.execute(calls, context)
    return JSONResponse(
        content=BatchResponse(results=results).model_dump(mode="json"),
    )


@router.get("")
async def rpc_get(
    batch: str | None = None,
    transport: BatchTransport = Depends(get_transport),
    context: ProcedureContext = Depends(get_procedure_context),
    settings: Settings = Depends(get_settings),
):
    """Batched queries encoded in the `batch` query parameter."""
    if batch is None:
        raise TransportError("Missing 'batch' query parameter")
    try:
        calls = json.loads(batch)
    except json.JSONDecodeError:
        raise TransportError("'batch' query parameter is not valid JSON")
    return await _respond(
        {"calls": calls}, allow_mutations=False,
        transport=transport, context=context, settings=settings,
    )


@router.post("")
async def rpc_post(
    request: Request,
    transport: BatchTransport = Depends(get_transport),
    context: ProcedureContext = Depends(get_procedure_context),
    settings: Settings = Depends(get_settings),
):
    """Batched queries and mutations in the JSON body."""
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise TransportError("Request body is not valid JSON")
    return await _respond(
        body, allow_mutations=True,
        transport=transport, context=context, settings=settings,
    )
