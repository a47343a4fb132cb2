"""Relay Client — batching HTTP client for the RPC endpoint.

Invariants:
    - Calls issued in the same event-loop tick are flushed together: queries
      in one GET, mutations in one POST
    - Each call gets an id unique within its batch; results are matched by id
    - A failed call raises RemoteProcedureError for that caller only;
      a failed round trip raises it for every call in that round trip
    - query() reads through the QueryCache; mutate() never caches and, on
      success, drops the cached results of every procedure it invalidates
    - Inputs are wire-encoded before queuing, so unencodable input fails the
      caller immediately

Design Decisions:
    - loop.call_soon to close a batch: everything queued by tasks already
      scheduled in this tick runs before the flush callback
    - GET for query batches falls back to POST when the URL would exceed
      max_url_length
"""

import asyncio
import itertools
import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable
from urllib.parse import urlencode

import httpx

from relay.client.cache import CacheKey, QueryCache
from relay.config import Settings, get_settings
from relay.core import wire_codec
from relay.core.domain_types import ProcedureMode
from relay.core.errors import TransportError

logger = logging.getLogger(__name__)


class RemoteProcedureError(Exception):
    """A call came back as an error envelope (or never came back)."""

    def __init__(self, code: str, message: str, details: Any = None):
        super().__init__(f"{code}: {message}")
        self.code = code
        self.message = message
        self.details = details


@dataclass
class _PendingCall:
    id: str
    procedure: str
    mode: ProcedureMode
    encoded_input: dict | None
    future: asyncio.Future

    def envelope(self) -> dict:
        return {
            "id": self.id,
            "procedure": self.procedure,
            "mode": self.mode.value,
            "input": self.encoded_input,
        }


class RelayClient:
    """Typed-procedure client: batching, demultiplexing and query caching."""

    def __init__(
        self,
        base_url: str | None = None,
        *,
        http: httpx.AsyncClient | None = None,
        endpoint: str = "/api/rpc",
        stale_seconds: float = 60.0,
        headers: dict[str, str] | None = None,
        max_url_length: int = 4000,
        clock: Callable[[], float] = time.monotonic,
    ):
        if http is None and base_url is None:
            raise ValueError("base_url or http client is required")
        self._http = http or httpx.AsyncClient(base_url=base_url, headers=headers)
        self._owns_http = http is None
        self._endpoint = endpoint
        self._max_url_length = max_url_length
        self.cache = QueryCache(stale_seconds, clock)
        self._pending: list[_PendingCall] = []
        self._flush_scheduled = False
        self._ids = itertools.count(1)
        self._sends: set[asyncio.Task] = set()

    @classmethod
    def from_settings(
        cls, settings: Settings | None = None, **kwargs: Any,
    ) -> "RelayClient":
        """Client for the configured app_base_url, endpoint and freshness window."""
        settings = settings or get_settings()
        kwargs.setdefault("endpoint", settings.rpc_endpoint)
        kwargs.setdefault("stale_seconds", settings.query_stale_seconds)
        return cls(settings.app_base_url, **kwargs)

    async def __aenter__(self) -> "RelayClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.cache.drain()
        if self._owns_http:
            await self._http.aclose()

    async def call(
        self, procedure: str, mode: ProcedureMode | str, input: Any = None,
    ) -> Any:
        """Queue one call into the current tick's batch and await its result."""
        encoded = None if input is None else wire_codec.encode(input)
        loop = asyncio.get_running_loop()
        pending = _PendingCall(
            id=str(next(self._ids)),
            procedure=procedure,
            mode=ProcedureMode(mode),
            encoded_input=encoded,
            future=loop.create_future(),
        )
        self._pending.append(pending)
        if not self._flush_scheduled:
            self._flush_scheduled = True
            loop.call_soon(self._flush)
        return await pending.future

    async def query(self, procedure: str, input: Any = None) -> Any:
        key = CacheKey.for_call(procedure, input)
        return await self.cache.get_or_fetch(
            key, lambda: self.call(procedure, ProcedureMode.QUERY, input),
        )

    async def mutate(
        self,
        procedure: str,
        input: Any = None,
        invalidates: tuple[str, ...] = (),
    ) -> Any:
        result = await self.call(procedure, ProcedureMode.MUTATION, input)
        for name in invalidates:
            self.cache.invalidate(name)
        return result

    def _flush(self) -> None:
        self._flush_scheduled = False
        batch, self._pending = self._pending, []
        queries = [c for c in batch if c.mode == ProcedureMode.QUERY]
        mutations = [c for c in batch if c.mode == ProcedureMode.MUTATION]
        for calls, use_get in ((queries, True), (mutations, False)):
            if calls:
                task = asyncio.ensure_future(self._send(calls, use_get))
                self._sends.add(task)
                task.add_done_callback(self._sends.discard)

    async def _send(self, calls: list[_PendingCall], use_get: bool) -> None:
        envelopes = [c.envelope() for c in calls]
        try:
            response = await self._request(envelopes, use_get)
            payload = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"RPC round trip failed: {e}")
            _fail_all(calls, RemoteProcedureError("TRANSPORT_ERROR", str(e)))
            return

        results = payload.get("results") if isinstance(payload, dict) else None
        if response.status_code != 200 or not isinstance(results, list):
            error = payload.get("error") if isinstance(payload, dict) else None
            _fail_all(calls, _remote_error(
                error, "TRANSPORT_ERROR", f"HTTP {response.status_code}",
            ))
            return

        by_id = {r.get("id"): r for r in results if isinstance(r, dict)}
        for call in calls:
            _settle(call, by_id.get(call.id))

    async def _request(self, envelopes: list[dict], use_get: bool) -> httpx.Response:
        if use_get:
            query = urlencode({"batch": json.dumps(envelopes, separators=(",", ":"))})
            if len(self._endpoint) + len(query) + 1 <= self._max_url_length:
                return await self._http.get(f"{self._endpoint}?{query}")
        return await self._http.post(self._endpoint, json={"calls": envelopes})


def _fail_all(calls: list[_PendingCall], error: RemoteProcedureError) -> None:
    for call in calls:
        if not call.future.done():
            call.future.set_exception(error)


def _settle(call: _PendingCall, result: dict | None) -> None:
    if call.future.done():
        return
    if result is None:
        call.future.set_exception(RemoteProcedureError(
            "TRANSPORT_ERROR", f"No result for call {call.id}",
        ))
        return
    if result.get("ok"):
        try:
            call.future.set_result(wire_codec.decode(result.get("data")))
        except TransportError as e:
            call.future.set_exception(
                RemoteProcedureError("TRANSPORT_ERROR", str(e)),
            )
        return
    call.future.set_exception(
        _remote_error(result.get("error"), "UNKNOWN", "Unknown error"),
    )


def _remote_error(error: Any, code: str, message: str) -> RemoteProcedureError:
    """Build the client-side error from whatever the server put under "error"."""
    if isinstance(error, str) and error:
        return RemoteProcedureError(code, error)
    if not isinstance(error, dict):
        return RemoteProcedureError(code, message)
    return RemoteProcedureError(
        str(error.get("code") or code),
        str(error.get("message") or message),
        error.get("details"),
    )
