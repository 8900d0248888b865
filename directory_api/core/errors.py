"""Error Hierarchy — typed, categorized exceptions for all directory failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
      and an HTTP status, fixed per class unless the raiser overrides the code
    - Client errors (400-level) carry the triggering message verbatim
    - Infrastructure errors (500-level) never carry driver-level detail
    - to_response() produces the REST envelope used by every error handler

Design Decisions:
    - Single hierarchy with DirectoryError base: one FastAPI handler catches all
    - Status, category and severity are class attributes, so a subclass is a
      declaration and the handler never needs an isinstance ladder
    - Services return None/False sentinels for expected failures; routes raise
      these errors at the pipeline boundary
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class ErrorSeverity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    DATABASE = "database"
    EXTERNAL_API = "external_api"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """When the error happened and, if known, for which account."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    account_id: int | None = None


class DirectoryError(Exception):
    """Base exception for all directory API errors."""

    code = "INTERNAL_ERROR"
    category = ErrorCategory.INTERNAL
    severity = ErrorSeverity.ERROR
    http_status = 500

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        self.context = context or ErrorContext()

    def to_response(self) -> dict:
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {"account_id": self.context.account_id},
            }
        }


# ─── Client Errors (400-level) ──────────────────────────────────

class InvalidRequestError(DirectoryError):
    """Well-formed request the domain refused (bad credentials, bad code)."""
    code = "INVALID_REQUEST"
    category = ErrorCategory.VALIDATION
    severity = ErrorSeverity.WARNING
    http_status = 400


class UnauthorizedError(DirectoryError):
    """Missing or unusable session token."""
    code = "NOT_AUTHENTICATED"
    category = ErrorCategory.AUTHENTICATION
    severity = ErrorSeverity.WARNING
    http_status = 401


class ResourceNotFoundError(DirectoryError):
    """Requested resource does not exist or is not visible."""
    code = "RESOURCE_NOT_FOUND"
    category = ErrorCategory.RESOURCE_NOT_FOUND
    severity = ErrorSeverity.INFO
    http_status = 404


class ConflictError(DirectoryError):
    code = "CONFLICT"
    category = ErrorCategory.CONFLICT
    severity = ErrorSeverity.WARNING
    http_status = 409


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(DirectoryError):
    code = "DATABASE_ERROR"
    category = ErrorCategory.DATABASE
    severity = ErrorSeverity.CRITICAL

    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(f"Database {operation} failed: {message}", context=context)
        self.operation = operation


class EmailDeliveryError(DirectoryError):
    """SMTP delivery failed. Logged by the caller, never sent to clients."""
    code = "EMAIL_DELIVERY_ERROR"
    category = ErrorCategory.EXTERNAL_API

    def __init__(self, message: str, recipient: str, context: ErrorContext | None = None):
        super().__init__(f"Email delivery to {recipient} failed: {message}", context=context)
        self.recipient = recipient
