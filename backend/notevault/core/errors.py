"""Error Hierarchy — typed, categorized exceptions for all NoteVault failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (4xx) are caller-recoverable; infrastructure errors (5xx) are critical
    - to_response() produces the REST envelope
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with NoteVaultError base: FastAPI global handler catches all
    - Validation functions in core RETURN these instances; the shell raises them
    - ErrorContext as dataclass: rich observability without coupling to logging framework
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
    AUTHORIZATION = "authorization"
    AUTHENTICATION = "authentication"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    address: str | None = None
    operation: str | None = None
    user_message: str | None = None
    debug_info: dict[str, Any] | None = None


class NoteVaultError(Exception):
    """Base exception for all NoteVault errors."""

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

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.context.user_message or self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "address": self.context.address,
                    "operation": self.context.operation,
                },
            }
        }


# ─── Validation Errors (400) ────────────────────────────────────

class NoteValidationError(NoteVaultError):
    """Title or content violated a size/emptiness constraint."""
    def __init__(
        self, message: str, code: str, field: str,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, code, ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.field = field


class TitleEmptyError(NoteValidationError):
    def __init__(self, context: ErrorContext | None = None):
        super().__init__("Title cannot be empty", "TITLE_EMPTY", "title", context)


class TitleTooLongError(NoteValidationError):
    def __init__(self, limit: int, context: ErrorContext | None = None):
        super().__init__(
            f"Title cannot be longer than {limit} characters",
            "TITLE_TOO_LONG", "title", context,
        )
        self.limit = limit


class TitleInvalidError(NoteValidationError):
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Title is not valid UTF-8 text", "TITLE_INVALID", "title", context,
        )


class ContentEmptyError(NoteValidationError):
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Content cannot be empty", "CONTENT_EMPTY", "content", context,
        )


class ContentTooLongError(NoteValidationError):
    def __init__(self, limit: int, context: ErrorContext | None = None):
        super().__init__(
            f"Content cannot be longer than {limit} characters",
            "CONTENT_TOO_LONG", "content", context,
        )
        self.limit = limit


class ContentInvalidError(NoteValidationError):
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Content is not valid UTF-8 text", "CONTENT_INVALID", "content",
            context,
        )


class InvalidIdentityError(NoteVaultError):
    """Identity value is not a well-formed fixed-size key."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "INVALID_IDENTITY", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )


# ─── Authentication / Authorization (401, 403) ──────────────────

class InvalidCredentialsError(NoteVaultError):
    """Bearer credential missing, malformed, or failed verification."""
    def __init__(
        self, message: str = "Invalid or missing credentials",
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "INVALID_CREDENTIALS", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )


class UnauthorizedError(NoteVaultError):
    """Claimed authority is not the note's owner."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Unauthorized operation", "UNAUTHORIZED",
            ErrorCategory.AUTHORIZATION, ErrorSeverity.WARNING, context, 403,
        )


# ─── Lifecycle Errors (404, 409) ────────────────────────────────

class NoteNotFoundError(NoteVaultError):
    """No live note at the given address."""
    def __init__(self, address: str, context: ErrorContext | None = None):
        super().__init__(
            f"Note '{address}' not found",
            "NOTE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )
        self.address = address


class NoteAlreadyExistsError(NoteVaultError):
    """A live note already occupies the derived address."""
    def __init__(self, address: str, context: ErrorContext | None = None):
        super().__init__(
            f"Note '{address}' already exists",
            "NOTE_ALREADY_EXISTS", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )
        self.address = address


class AddressMismatchError(NoteVaultError):
    """Stored (owner, title) does not derive to the address it was loaded from."""
    def __init__(
        self, address: str, derived: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Note at '{address}' derives to '{derived}'",
            "ADDRESS_MISMATCH", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )
        self.address = address
        self.derived = derived


# ─── Infrastructure Errors (5xx, and 409 for write races) ───────

class ConcurrencyError(NoteVaultError):
    """Concurrent write to the same address detected."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "CONCURRENCY_CONFLICT", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )


class RecordCorruptError(NoteVaultError):
    """Stored bytes do not decode to a note record."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            f"Stored note record is corrupt: {message}",
            "RECORD_CORRUPT", ErrorCategory.INTERNAL,
            ErrorSeverity.CRITICAL, context, 500,
        )


class DatabaseError(NoteVaultError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
