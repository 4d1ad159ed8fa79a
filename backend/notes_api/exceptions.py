"""
Notes API: Error Kinds and Exception Hierarchy
===============================================

What:  Defines the tagged error kinds of the API and the exceptions that
       services raise for the recoverable ones.
How:   Every ErrorKind member carries its HTTP status, default message and
       default `errors` mapping. Exceptions carry a kind plus per-instance
       message/errors. The handlers registered in main.py translate kinds
       into the `{data, message, errors}` envelope in one place.
Who:   Raised by services; translated by the global handlers.

Error Kinds:
    VALIDATION          → 422 Unprocessable Entity
    NOT_FOUND           → 404 Not Found
    STORE_UNAVAILABLE   → 500 Internal Server Error
    UNKNOWN_ROUTE       → 404 Not Found      (raised by routing, not services)
    METHOD_NOT_ALLOWED  → 405 Method Not Allowed
    UNHANDLED           → 500 Internal Server Error (catch-all)

Exception Hierarchy:
    NotesError (base)
    ├── ValidationError        (VALIDATION)
    ├── NotFoundError          (NOT_FOUND)
    └── StoreUnavailableError  (STORE_UNAVAILABLE)
"""

from enum import Enum
from typing import Any, Dict, List, Optional


FieldErrors = Dict[str, List[str]]


class ErrorKind(Enum):
    """Tagged error kinds with their HTTP mapping."""

    VALIDATION = (422, "The given data was invalid.", None)
    NOT_FOUND = (
        404,
        "The requested resource was not found.",
        {"resource": ["Resource not found"]},
    )
    STORE_UNAVAILABLE = (
        500,
        "The notes store is currently unavailable.",
        {"server": ["Store unavailable"]},
    )
    UNKNOWN_ROUTE = (404, "Endpoint not found.", {"endpoint": ["Endpoint not found"]})
    METHOD_NOT_ALLOWED = (405, "Method not allowed.", {"method": ["Method not allowed"]})
    UNHANDLED = (
        500,
        "An internal server error occurred.",
        {"server": ["Internal server error"]},
    )

    def __init__(self, status_code: int, default_message: str, default_errors: Optional[FieldErrors]):
        self.status_code = status_code
        self.default_message = default_message
        self._default_errors = default_errors

    @property
    def default_errors(self) -> FieldErrors:
        # Copy so callers can never mutate the member's mapping
        return {k: list(v) for k, v in (self._default_errors or {}).items()}


class NotesError(Exception):
    """
    Base exception for all Notes API errors.

    Attributes:
        kind:     ErrorKind deciding status code and defaults
        message:  User-facing error description (safe to return in API response)
        errors:   Field name → list of messages, returned in the envelope
        context:  Additional debug info (logged but NOT returned to client)
    """

    kind: ErrorKind = ErrorKind.UNHANDLED

    def __init__(
        self,
        message: Optional[str] = None,
        errors: Optional[FieldErrors] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message or self.kind.default_message
        self.errors = errors if errors is not None else self.kind.default_errors
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(NotesError):
    """
    Raised when note input breaks a business rule.

    HTTP: 422, with `errors` keyed by field name.

    Example response:
        {
            "data": null,
            "message": "The given data was invalid.",
            "errors": {"title": ["The title field is required."]}
        }
    """

    kind = ErrorKind.VALIDATION

    def __init__(
        self,
        field_message: str,
        field: str = "title",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(errors={field: [field_message]}, context=context)
        self.field = field
        self.field_message = field_message


class NotFoundError(NotesError):
    """
    Raised when a requested record does not exist.

    SQLAlchemy returns None for missing rows; services convert that into
    this exception so the handler can answer 404.
    """

    kind = ErrorKind.NOT_FOUND

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(context=ctx)
        self.resource = resource
        self.resource_id = resource_id


class StoreUnavailableError(NotesError):
    """
    Raised when the database cannot be reached or a query fails in the driver.

    The message returned to the client is always generic. The driver error
    is kept in `context` and logged server-side only.
    """

    kind = ErrorKind.STORE_UNAVAILABLE
