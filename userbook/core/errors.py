"""Error Hierarchy: typed, categorized exceptions for every Userbook failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400/404) are recoverable; infrastructure errors (500) are critical
    - Only the API layer turns an error into a status code and user-facing text
    - No store-specific exception type appears in this module or above the repository

Design Decisions:
    - Single hierarchy with UserbookError base: one global handler catches all
    - ErrorContext as dataclass: observability detail without coupling to logging
    - severity picks the log level in the global handler; category is logged with it
"""

from dataclasses import dataclass
from enum import Enum

from userbook.core.domain_types import PaginationRejection, RejectionReason


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    DATABASE = "database"


@dataclass
class ErrorContext:
    """Context attached to an error for logs."""
    user_id: int | None = None


class UserbookError(Exception):
    """Base exception for all Userbook errors."""

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


# ─── Domain Errors (400-level) ──────────────────────────────────

class UserInputError(UserbookError):
    """Submitted user form was rejected by the validator."""
    def __init__(self, reason: RejectionReason, context: ErrorContext | None = None):
        super().__init__(
            reason.value, reason.name, ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )
        self.reason = reason


class InvalidPaginationError(UserbookError):
    """A page or limit query parameter was rejected.

    `page` is the page already accepted when only the limit is bad.
    """
    def __init__(
        self, field: str, reason: PaginationRejection, page: int = 1,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            reason.value, reason.name, ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )
        self.field = field
        self.reason = reason
        self.page = page


class InvalidUserIdError(UserbookError):
    """Path identifier is not an integer."""
    def __init__(self, raw_id: str, context: ErrorContext | None = None):
        super().__init__(
            "invalid id", "INVALID_ID", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )
        self.raw_id = raw_id


class DuplicateEmailError(UserbookError):
    """Email already belongs to another user."""
    def __init__(self, email: str, context: ErrorContext | None = None):
        super().__init__(
            "email already exists", "DUPLICATE_EMAIL", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, context, 400,
        )
        self.email = email


class UserNotFoundError(UserbookError):
    """No user row matches the identifier."""
    def __init__(self, user_id: int, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.user_id = user_id
        super().__init__(
            "user not found", "USER_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, ctx, 404,
        )
        self.user_id = user_id


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(UserbookError):
    """Database operation failed (unreachable, query failure, deadline exceeded)."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 500,
        )
        self.operation = operation
