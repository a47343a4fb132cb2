"""Procedure Context — per-request collaborators handed to every handler.

Invariants:
    - One ProcedureContext per physical request, shared by every call in its batch
    - identity is None unless a bearer token was verified
    - Handlers reach the data store only through `profiles`

Design Decisions:
    - Plain dataclass, built by the transport route: tests construct it directly
      with fake repositories
"""

from dataclasses import dataclass, field
from uuid import uuid4

from relay.core.domain_types import IdentityId
from relay.core.repository_protocols import ProfileRepository


@dataclass
class ProcedureContext:
    identity: IdentityId | None = None
    profiles: ProfileRepository | None = None
    request_id: str = field(default_factory=lambda: uuid4().hex)

    @property
    def is_authenticated(self) -> bool:
        return self.identity is not None
