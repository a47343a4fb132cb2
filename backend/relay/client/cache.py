"""Query Cache — stale-while-revalidate cache for query results on the client.

Invariants:
    - Keys are CacheKey(procedure, canonical_input); canonical_input is the
      wire encoding dumped with sorted keys, so equal inputs share one entry
    - An entry younger than stale_seconds is returned without any fetch
    - A read of a stale entry returns the cached value and starts at most one
      background refetch for that entry, however many stale reads follow
    - Concurrent misses on one key share a single fetch
    - invalidate(procedure) drops every entry of that procedure immediately;
      a refetch or first fetch that finishes after the invalidation still
      answers its callers but is not cached
    - A failed background refetch keeps the stale value; the next stale read retries

Design Decisions:
    - Injectable clock (monotonic seconds): freshness tests need no sleeping
"""

import asyncio
import json
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable

from relay.core import wire_codec

logger = logging.getLogger(__name__)

Fetch = Callable[[], Awaitable[Any]]


def canonical_input(value: Any) -> str:
    return json.dumps(
        wire_codec.encode(value), sort_keys=True, separators=(",", ":"),
    )


@dataclass(frozen=True)
class CacheKey:
    procedure: str
    canonical_input: str

    @classmethod
    def for_call(cls, procedure: str, value: Any) -> "CacheKey":
        return cls(procedure, canonical_input(value))


@dataclass
class _Entry:
    value: Any
    fetched_at: float
    refetch: asyncio.Task | None = field(default=None, repr=False)


class QueryCache:
    """Per-client cache of query results."""

    def __init__(
        self,
        stale_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.stale_seconds = stale_seconds
        self._clock = clock
        self._entries: dict[CacheKey, _Entry] = {}
        self._inflight: dict[CacheKey, asyncio.Future] = {}
        self._invalidated: set[CacheKey] = set()

    def __contains__(self, key: CacheKey) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def peek(self, key: CacheKey) -> Any:
        entry = self._entries.get(key)
        return entry.value if entry else None

    def is_stale(self, key: CacheKey) -> bool:
        entry = self._entries.get(key)
        return entry is None or self._age(entry) >= self.stale_seconds

    async def get_or_fetch(self, key: CacheKey, fetch: Fetch) -> Any:
        entry = self._entries.get(key)
        if entry is None:
            return await self._fetch_shared(key, fetch)
        if self._age(entry) >= self.stale_seconds and entry.refetch is None:
            entry.refetch = asyncio.ensure_future(
                self._revalidate(key, entry, fetch),
            )
        return entry.value

    def invalidate(self, procedure: str) -> int:
        """Drop every entry for procedure. Returns how many were dropped."""
        doomed = [k for k in self._entries if k.procedure == procedure]
        for key in doomed:
            del self._entries[key]
        self._invalidated.update(
            k for k in self._inflight if k.procedure == procedure
        )
        return len(doomed)

    def invalidate_key(self, key: CacheKey) -> bool:
        if key in self._inflight:
            self._invalidated.add(key)
        return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        self._entries.clear()
        self._invalidated.update(self._inflight)

    async def drain(self) -> None:
        """Wait for every background refetch currently running."""
        pending = [
            e.refetch for e in self._entries.values()
            if e.refetch is not None and not e.refetch.done()
        ]
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

    def _age(self, entry: _Entry) -> float:
        return self._clock() - entry.fetched_at

    def _store(self, key: CacheKey, value: Any) -> None:
        self._entries[key] = _Entry(value=value, fetched_at=self._clock())

    async def _fetch_shared(self, key: CacheKey, fetch: Fetch) -> Any:
        shared = self._inflight.get(key)
        if shared is not None:
            return await asyncio.shield(shared)
        future = asyncio.get_running_loop().create_future()
        self._inflight[key] = future
        try:
            value = await fetch()
        except asyncio.CancelledError:
            future.cancel()
            raise
        except Exception as e:
            future.set_exception(e)
            # a lone fetcher never awaits the shared future
            future.exception()
            raise
        finally:
            self._inflight.pop(key, None)
            invalidated = key in self._invalidated
            self._invalidated.discard(key)
        if not invalidated:
            self._store(key, value)
        future.set_result(value)
        return value

    async def _revalidate(self, key: CacheKey, entry: _Entry, fetch: Fetch) -> None:
        try:
            value = await fetch()
        except Exception as e:
            logger.warning(
                f"Background refetch of '{key.procedure}' failed: {e}",
                extra={"procedure": key.procedure},
            )
            entry.refetch = None
            return
        if self._entries.get(key) is entry:
            self._store(key, value)
