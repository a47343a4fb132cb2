"""Procedure Definitions — the static description of one callable unit of server logic.

Invariants:
    - name is unique within a registry (enforced by ProcedureRegistry.register)
    - input_schema None means "takes no input"; the handler receives None
    - invalidates only makes sense on mutations; it names the queries whose
      cached results a successful call makes stale
    - Queries are side-effect-free by convention only (not enforced)

Design Decisions:
    - Frozen dataclass: a registered definition cannot be mutated behind the
      registry's back
    - ProcedureSpec is the handler-free view shipped to client stubs
"""

from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from pydantic import BaseModel

from relay.core.context import ProcedureContext
from relay.core.domain_types import ProcedureMode

Handler = Callable[[Any, ProcedureContext], Awaitable[Any]]


@dataclass(frozen=True)
class ProcedureSpec:
    """Client-facing description of a procedure: no handler, no server state."""
    name: str
    mode: ProcedureMode
    input_schema: type[BaseModel] | None = None
    invalidates: tuple[str, ...] = ()


@dataclass(frozen=True)
class Procedure:
    mode: ProcedureMode
    handler: Handler
    input_schema: type[BaseModel] | None = None
    requires_auth: bool = False
    invalidates: tuple[str, ...] = ()

    def spec(self, name: str) -> ProcedureSpec:
        return ProcedureSpec(
            name=name, mode=self.mode,
            input_schema=self.input_schema, invalidates=self.invalidates,
        )


def query(
    handler: Handler,
    input_schema: type[BaseModel] | None = None,
    *,
    requires_auth: bool = False,
) -> Procedure:
    """Build a read-only procedure definition."""
    return Procedure(
        ProcedureMode.QUERY, handler, input_schema,
        requires_auth=requires_auth,
    )


def mutation(
    handler: Handler,
    input_schema: type[BaseModel] | None = None,
    *,
    requires_auth: bool = False,
    invalidates: tuple[str, ...] = (),
) -> Procedure:
    """Build a write procedure definition."""
    return Procedure(
        ProcedureMode.MUTATION, handler, input_schema,
        requires_auth=requires_auth, invalidates=invalidates,
    )
