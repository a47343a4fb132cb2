"""Batch Transport — one physical request in, one ordered list of results out.

Invariants:
    - A batch has 1..max_batch_size calls with unique ids, or it is rejected whole
      with a single TransportError (no partial batch)
    - Mutations are rejected when the request method only allows queries (GET)
    - Calls run concurrently; one call's failure never touches its siblings
    - results[i] answers calls[i], regardless of completion order
    - Every input is wire-decoded before any handler runs

Design Decisions:
    - asyncio.gather over a TaskGroup: gather preserves positional order, and
      invoke() never raises, so there is nothing to cancel on sibling failure
    - Encoding a result that the codec cannot carry is a per-call HandlerError
"""

import asyncio
import logging
from typing import Any

from pydantic import ValidationError

from relay.core.context import ProcedureContext
from relay.core.domain_types import CallId, ProcedureMode
from relay.core.errors import HandlerError, RelayError, TransportError
from relay.core.result import Err
from relay.core import wire_codec
from relay.schemas.envelope import (
    BatchRequest, CallEnvelope, ErrorBody, ResultEnvelope,
)
from relay.services.procedure_registry import ProcedureRegistry

logger = logging.getLogger(__name__)


def parse_batch(
    raw: Any, *, max_batch_size: int, allow_mutations: bool = True,
) -> list[tuple[CallEnvelope, Any]]:
    """Validate a raw batch body. Returns (envelope, decoded_input) pairs."""
    try:
        batch = BatchRequest.model_validate(raw)
    except ValidationError as e:
        raise TransportError(f"Malformed batch: {e.error_count()} error(s)")
    calls = batch.calls
    if not calls:
        raise TransportError("Batch must contain at least one call")
    if len(calls) > max_batch_size:
        raise TransportError(
            f"Batch of {len(calls)} calls exceeds limit of {max_batch_size}",
        )
    ids = [c.id for c in calls]
    if len(set(ids)) != len(ids):
        raise TransportError("Call ids must be unique within a batch")
    if not allow_mutations and any(
        c.mode == ProcedureMode.MUTATION for c in calls
    ):
        raise TransportError("Mutations must be sent with POST")
    return [
        (c, None if c.input is None else wire_codec.decode(c.input))
        for c in calls
    ]


class BatchTransport:
    """Runs parsed calls through the registry and builds ResultEnvelopes."""

    def __init__(self, registry: ProcedureRegistry):
        self._registry = registry

    async def execute(
        self,
        calls: list[tuple[CallEnvelope, Any]],
        context: ProcedureContext,
    ) -> list[ResultEnvelope]:
        logger.debug(
            f"Executing batch of {len(calls)} call(s)",
            extra={"batch_size": len(calls)},
        )
        return list(await asyncio.gather(
            *(self._run_one(envelope, raw, context) for envelope, raw in calls),
        ))

    async def _run_one(
        self, envelope: CallEnvelope, raw_input: Any, context: ProcedureContext,
    ) -> ResultEnvelope:
        outcome = await self._registry.invoke(
            envelope.procedure, raw_input, context,
            mode=envelope.mode, call_id=CallId(envelope.id),
        )
        if isinstance(outcome, Err):
            return _error_envelope(envelope.id, outcome.error)
        try:
            data = wire_codec.encode(outcome.value)
        except TransportError as e:
            logger.error(
                f"Result of '{envelope.procedure}' is not encodable: {e.message}",
                extra={"procedure": envelope.procedure, "call_id": envelope.id},
            )
            return _error_envelope(
                envelope.id, HandlerError(envelope.procedure),
            )
        return ResultEnvelope(id=envelope.id, ok=True, data=data)


def _error_envelope(call_id: str, error: RelayError) -> ResultEnvelope:
    return ResultEnvelope(
        id=call_id, ok=False, error=ErrorBody(**error.to_wire()),
    )
