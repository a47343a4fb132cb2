"""Procedure Registry — explicit routing from procedure name to definition, with guarded invoke.

Invariants:
    - Every name -> Procedure mapping is visible; no getattr magic, no auto-discovery
    - register() rejects duplicate names; include() rejects any collision
      before merging anything
    - invoke() never raises: it returns Ok(value) or Err(RelayError)
    - Routing, auth and validation errors are produced before the handler runs
    - Raw handler exceptions are logged server-side and replaced by HandlerError
      carrying their message; driver errors get the generic message instead

Design Decisions:
    - One registry instance per process, built at startup and passed around
      explicitly (app.state / BatchTransport); tests build fresh ones
    - RelayError subclasses raised by handlers pass through unchanged:
      handlers use them to signal domain outcomes (DuplicateEntityError).
      DatabaseError is the exception: DATABASE_ERROR is not a wire code
"""

import logging
from typing import Any

from sqlalchemy.exc import SQLAlchemyError

from relay.core.context import ProcedureContext
from relay.core.domain_types import CallId, ProcedureMode
from relay.core.errors import (
    DatabaseError, DuplicateProcedureError, ErrorContext, HandlerError, RelayError,
    UnauthenticatedError, UnknownProcedureError,
)
from relay.core.procedure import Procedure, ProcedureSpec
from relay.core.result import Err, Ok, Outcome
from relay.core.validation import validate_input

logger = logging.getLogger(__name__)


class ProcedureRegistry:
    """Routes procedure name -> Procedure. Explicit registration only."""

    def __init__(self, procedures: dict[str, Procedure] | None = None):
        self._procedures: dict[str, Procedure] = {}
        for name, definition in (procedures or {}).items():
            self.register(name, definition)

    def __contains__(self, name: str) -> bool:
        return name in self._procedures

    def __len__(self) -> int:
        return len(self._procedures)

    def names(self) -> list[str]:
        return list(self._procedures)

    def register(self, name: str, definition: Procedure) -> None:
        if name in self._procedures:
            raise DuplicateProcedureError(name)
        self._procedures[name] = definition

    def resolve(self, name: str) -> Procedure:
        definition = self._procedures.get(name)
        if definition is None:
            raise UnknownProcedureError(name)
        return definition

    def include(self, group: "ProcedureRegistry", prefix: str | None = None) -> None:
        """Merge another registry into this flat namespace, all or nothing."""
        incoming = {
            (f"{prefix}.{name}" if prefix else name): definition
            for name, definition in group._procedures.items()
        }
        clashes = [name for name in incoming if name in self._procedures]
        if clashes:
            raise DuplicateProcedureError(clashes[0])
        self._procedures.update(incoming)

    def catalog(self) -> list[ProcedureSpec]:
        return [d.spec(name) for name, d in self._procedures.items()]

    async def invoke(
        self,
        name: str,
        raw_input: Any,
        context: ProcedureContext,
        mode: ProcedureMode | None = None,
        call_id: CallId | None = None,
    ) -> Outcome:
        """Resolve, gate, validate, run. Returns Ok(result) or Err(RelayError)."""
        err_ctx = ErrorContext(
            procedure=name, call_id=call_id, request_id=context.request_id,
        )
        definition = self._procedures.get(name)
        if definition is None or (mode is not None and definition.mode != mode):
            return Err(UnknownProcedureError(
                name, mode.value if mode else None, context=err_ctx,
            ))

        if definition.requires_auth and not context.is_authenticated:
            return Err(UnauthenticatedError(name, context=err_ctx))

        parsed = validate_input(definition.input_schema, raw_input)
        if isinstance(parsed, Err):
            parsed.error.context = err_ctx
            return parsed

        try:
            result = await definition.handler(parsed.value, context)
        except (DatabaseError, SQLAlchemyError) as e:
            self._log_failure(name, call_id, e)
            return Err(HandlerError(name, context=err_ctx))
        except RelayError as e:
            e.context.procedure = name
            e.context.call_id = call_id
            e.context.request_id = context.request_id
            return Err(e)
        except Exception as e:
            self._log_failure(name, call_id, e)
            return Err(HandlerError(name, str(e) or None, context=err_ctx))
        return Ok(result)

    @staticmethod
    def _log_failure(name: str, call_id: CallId | None, error: Exception) -> None:
        logger.error(
            f"Procedure '{name}' raised {type(error).__name__}: {error}",
            exc_info=error,
            extra={"procedure": name, "call_id": call_id},
        )
