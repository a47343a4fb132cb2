"""Call Outcome — tagged Ok/Err result returned by every procedure invocation.

Invariants:
    - Exactly one of Ok / Err per invocation
    - Err always wraps a RelayError (never a raw driver or library exception)
    - unwrap() on Err re-raises the wrapped RelayError

Design Decisions:
    - Frozen dataclasses over a single class with an `ok` flag: isinstance
      checks and `match` both work, and mypy narrows on them
"""

from dataclasses import dataclass
from typing import Any, Generic, TypeVar, Union

from relay.core.errors import RelayError

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def is_ok(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Err:
    error: RelayError

    @property
    def is_ok(self) -> bool:
        return False

    def unwrap(self) -> Any:
        raise self.error


Outcome = Union[Ok[Any], Err]
