"""Error Hierarchy — typed, categorized exceptions for every Relay failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Routing/validation/auth errors (400-level) are raised before any handler runs
    - to_response() produces the REST envelope; to_wire() produces the per-call
      error body carried inside a ResultEnvelope
    - HandlerError keeps the handler's message but never its traceback; driver
      errors (DatabaseError, raw SQLAlchemy errors) reach the wire only as a
      HandlerError with the generic message

Design Decisions:
    - Single hierarchy with RelayError base: one FastAPI handler catches all
    - ErrorContext as dataclass: observability fields live beside the error,
      not in the logging framework
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    ROUTING = "routing"
    CONFLICT = "conflict"
    AUTH = "auth"
    TRANSPORT = "transport"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    procedure: str | None = None
    call_id: str | None = None
    request_id: str | None = None
    debug_info: dict[str, Any] | None = None


class RelayError(Exception):
    """Base exception for all Relay errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    @property
    def details(self) -> list[dict] | dict | None:
        """Structured, wire-safe details. Subclasses override."""
        return None

    def to_wire(self) -> dict:
        """Convert to the per-call error body of a ResultEnvelope."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "details": self.details,
                "context": {
                    "procedure": self.context.procedure,
                    "call_id": self.context.call_id,
                    "request_id": self.context.request_id,
                },
            }
        }


# ─── Registration Errors (raised at startup, never on the wire) ──

class DuplicateProcedureError(RelayError):
    """A procedure name is registered twice."""
    def __init__(self, name: str, context: ErrorContext | None = None):
        super().__init__(
            f"Procedure '{name}' is already registered",
            "DUPLICATE_PROCEDURE", ErrorCategory.INTERNAL,
            ErrorSeverity.CRITICAL, context, 500,
        )
        self.name = name


# ─── Call Errors (400-level) ─────────────────────────────────────

class UnknownProcedureError(RelayError):
    """No procedure with that name (and mode, when one was requested)."""
    def __init__(
        self, name: str, mode: str | None = None,
        context: ErrorContext | None = None,
    ):
        if mode:
            message = f"No {mode} procedure named '{name}'"
        else:
            message = f"Procedure '{name}' does not exist"
        super().__init__(
            message, "UNKNOWN_PROCEDURE", ErrorCategory.ROUTING,
            ErrorSeverity.ERROR, context, 404,
        )
        self.name = name
        self.mode = mode


class BadInputError(RelayError):
    """Procedure input failed schema validation. Carries every violation."""
    def __init__(
        self, violations: list, context: ErrorContext | None = None,
    ):
        fields = ", ".join(v.path or "<root>" for v in violations)
        super().__init__(
            f"Invalid input: {fields}",
            "BAD_INPUT", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.violations = violations

    @property
    def details(self) -> list[dict]:
        return [v.to_dict() for v in self.violations]


class DuplicateEntityError(RelayError):
    """A store-level uniqueness constraint rejected the write."""
    def __init__(
        self, entity_type: str, entity_id: str,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{entity_type} '{entity_id}' already exists",
            "DUPLICATE_ENTITY", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )
        self.entity_type = entity_type
        self.entity_id = entity_id

    @property
    def details(self) -> dict:
        return {"entity": self.entity_type, "id": self.entity_id}


class UnauthenticatedError(RelayError):
    """Procedure requires an authenticated identity and none was supplied."""
    def __init__(self, procedure: str, context: ErrorContext | None = None):
        super().__init__(
            f"Procedure '{procedure}' requires authentication",
            "UNAUTHENTICATED", ErrorCategory.AUTH,
            ErrorSeverity.WARNING, context, 401,
        )


class TransportError(RelayError):
    """The physical request could not be turned into a batch of calls."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "TRANSPORT_ERROR", ErrorCategory.TRANSPORT,
            ErrorSeverity.ERROR, context, 400,
        )


# ─── Internal Errors (500-level) ─────────────────────────────────

class HandlerError(RelayError):
    """A handler failed. The message survives; the traceback stays server-side."""
    def __init__(
        self, procedure: str, message: str | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message or f"Procedure '{procedure}' failed",
            "HANDLER_ERROR", ErrorCategory.INTERNAL,
            ErrorSeverity.CRITICAL, context, 500,
        )
        self.procedure = procedure


class DatabaseError(RelayError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
