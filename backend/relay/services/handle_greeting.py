"""Greeting Handlers — stateless demo procedures (2 methods).

Invariants:
    - hello never touches the data store
    - get_random_number returns an integer in [min, max] inclusive;
      min == max is deterministic

Design Decisions:
    - rng and clock injected: tests pin both without monkeypatching modules
"""

import random
from datetime import datetime, timezone
from typing import Callable

from relay.core.context import ProcedureContext
from relay.schemas.greeting import HelloInput, RandomNumberInput


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def iso_timestamp(moment: datetime) -> str:
    """UTC ISO8601 with millisecond precision and a Z suffix."""
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class GreetingHandlers:
    """hello + getRandomNumber."""

    def __init__(
        self,
        rng: random.Random | None = None,
        clock: Callable[[], datetime] = _utc_now,
    ):
        self._rng = rng or random.Random()
        self._clock = clock

    async def hello(self, data: HelloInput, context: ProcedureContext) -> dict:
        return {
            "greeting": f"Hello {data.nickname or 'World'}!",
            "timestamp": iso_timestamp(self._clock()),
        }

    async def get_random_number(
        self, data: RandomNumberInput, context: ProcedureContext,
    ) -> dict:
        return {
            "number": self._rng.randint(data.min, data.max),
            "range": f"{data.min}-{data.max}",
        }
