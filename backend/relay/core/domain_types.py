"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - ProfileId wraps UUID — never use bare UUID in procedure handlers
    - CallId identifies one call inside one batch; unique per batch only
    - ProcedureMode is the only source of query/mutation strings

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

ProfileId = NewType("ProfileId", UUID)
CallId = NewType("CallId", str)
IdentityId = NewType("IdentityId", str)


# ─── Enums ───────────────────────────────────────────────────────

class ProcedureMode(str, Enum):
    """Query = read-only by convention; Mutation = may write."""
    QUERY = "query"
    MUTATION = "mutation"
