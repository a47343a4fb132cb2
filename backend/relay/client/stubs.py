"""Procedure Stubs — one async callable per procedure, generated from the registry catalog.

Invariants:
    - One stub per ProcedureSpec; query stubs read through the client cache,
      mutation stubs invalidate the queries their spec lists
    - Inputs are validated against the procedure's input schema before sending;
      a local failure raises BadInputError with every violation, nothing is sent
    - Only explicitly set fields are sent, so equal calls share a cache key
    - Procedures without an input schema reject any input locally

Design Decisions:
    - Stubs built from ProcedureSpec (no handlers): the catalog is the static
      shape shared by server and client
    - Names that are not identifiers (e.g. "admin.stats") are reachable via stubs["..."]
"""

from typing import Any, Iterable, Iterator

from pydantic import ValidationError

from relay.client.client import RelayClient
from relay.core.domain_types import ProcedureMode
from relay.core.errors import BadInputError
from relay.core.procedure import ProcedureSpec
from relay.core.validation import violations_from


class ProcedureStub:
    """Typed calling surface for a single procedure."""

    def __init__(self, client: RelayClient, spec: ProcedureSpec):
        self._client = client
        self.spec = spec

    def __repr__(self) -> str:
        return f"<ProcedureStub {self.spec.mode.value} {self.spec.name}>"

    async def __call__(self, data: Any = None, /, **fields: Any) -> Any:
        payload = self._payload(data, fields)
        if self.spec.mode == ProcedureMode.QUERY:
            return await self._client.query(self.spec.name, payload)
        return await self._client.mutate(
            self.spec.name, payload, invalidates=self.spec.invalidates,
        )

    def invalidate(self) -> int:
        """Drop this procedure's cached results."""
        return self._client.cache.invalidate(self.spec.name)

    def _payload(self, data: Any, fields: dict) -> dict | None:
        if data is not None and fields:
            raise TypeError("Pass either a positional input or keyword fields, not both")
        raw = fields or data
        schema = self.spec.input_schema
        if schema is None:
            if raw:
                raise TypeError(f"Procedure '{self.spec.name}' takes no input")
            return None
        try:
            model = raw if isinstance(raw, schema) else schema.model_validate(raw or {})
        except ValidationError as e:
            raise BadInputError(violations_from(e))
        return model.model_dump(mode="json", exclude_unset=True)


class ProcedureStubs:
    """Namespace of stubs: stubs.hello(...) or stubs["hello"](...)."""

    def __init__(self, stubs: dict[str, ProcedureStub]):
        self._stubs = stubs
        for name, stub in stubs.items():
            if name.isidentifier():
                setattr(self, name, stub)

    def __getitem__(self, name: str) -> ProcedureStub:
        return self._stubs[name]

    def __contains__(self, name: str) -> bool:
        return name in self._stubs

    def __iter__(self) -> Iterator[str]:
        return iter(self._stubs)

    def __len__(self) -> int:
        return len(self._stubs)


def build_stubs(client: RelayClient, catalog: Iterable[ProcedureSpec]) -> ProcedureStubs:
    return ProcedureStubs({
        spec.name: ProcedureStub(client, spec) for spec in catalog
    })
