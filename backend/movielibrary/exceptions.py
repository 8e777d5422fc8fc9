"""
MovieLibrary Backend: Custom Exception Hierarchy
=================================================

What:  Application-specific exceptions for the failure outcomes of every
       command handler.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with correct HTTP status codes.
Who:   Raised by services and the rental lifecycle engine; caught by the
       global handlers.

Exception Hierarchy:
    MovieLibraryError (base)
    ├── ValidationFailedError        → 400 Bad Request (aggregated field errors)
    ├── InvalidInputError            → 400 Bad Request (business rule violated)
    ├── InvalidStateTransitionError  → 400 Bad Request (terminal state)
    ├── NotFoundError                → 404 Not Found
    ├── ConcurrencyConflictError     → 409 Conflict (stale version token)
    └── DatabaseError                → 500 Internal Server Error

None of these is retried inside the application. A ConcurrencyConflictError
in particular is surfaced unchanged: the caller re-reads, re-applies and
resubmits if it wants to.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional


class MovieLibraryError(Exception):
    """
    Base exception for all MovieLibrary application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged, returned only where the
                  handler for the subclass chooses to)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


@dataclass(frozen=True)
class FieldError:
    """One failed field rule: which field, and the message to show for it."""

    field: str
    message: str


class ValidationFailedError(MovieLibraryError):
    """
    Raised when one or more field-level rules fail.

    Always raised before any repository call, so a rejected command never
    leaves a partial write behind.

    Example response:
        {
            "error": "validation_error",
            "message": "Validation failed",
            "details": {"errors": [{"field": "title", "message": "Title is required"}]}
        }
    """

    def __init__(
        self,
        errors: List[FieldError],
        message: str = "Validation failed",
    ):
        self.errors = list(errors)
        super().__init__(
            message=message,
            context={"errors": [{"field": e.field, "message": e.message} for e in self.errors]},
        )


class InvalidInputError(MovieLibraryError):
    """
    Raised when a command passes field validation but breaks a business rule
    that needs the stored record to check (e.g. return date before rental date).
    """

    def __init__(
        self,
        message: str = "Invalid input",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class InvalidStateTransitionError(MovieLibraryError):
    """Raised when a transition is attempted from a terminal state."""

    def __init__(
        self,
        message: str = "Invalid state transition",
        current_state: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if current_state:
            ctx["current_state"] = current_state
        super().__init__(message=message, context=ctx)
        self.current_state = current_state


class NotFoundError(MovieLibraryError):
    """
    Raised when a referenced record does not exist.

    Repositories return None for missing records; services convert that
    None into this exception so HTTP concerns stay out of the service logic.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource.capitalize()} with Id {resource_id} not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)
        self.resource = resource
        self.resource_id = resource_id


class ConcurrencyConflictError(MovieLibraryError):
    """
    Raised when an update presents a version token that no longer matches
    the stored one: someone else wrote the record since the caller read it.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = (
            f"The {resource} was modified by another request. "
            "Reload it and apply your changes again."
        )
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)
        self.resource = resource
        self.resource_id = resource_id


class DatabaseError(MovieLibraryError):
    """
    Raised when database operations fail unexpectedly.

    The message returned to the client is always generic; the original
    error type is kept in `context` for the server-side log only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
