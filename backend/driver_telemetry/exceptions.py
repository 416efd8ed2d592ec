"""
Driver Telemetry API: Custom Exception Hierarchy
===================================================

What:  Application-specific exceptions for the three failure kinds the API
       distinguishes.
How:   Each exception carries a message and an optional context dict.
       Global exception handlers (registered in main.py) turn them into
       `{"error": <message>}` responses with the matching status code.
Who:   Raised by services; caught by the handlers in main.py.

Exception Hierarchy:
    TelemetryError (base)
    ├── ValidationError   → 400 Bad Request
    ├── NotFoundError     → 404 Not Found
    └── StoreError        → 500 Internal Server Error
"""

from typing import Any, Dict, Optional


class TelemetryError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (returned in the API response)
        context:  Additional debug info (logged, not returned)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(TelemetryError):
    """
    Raised when a request is missing required fields or carries values of
    the wrong type.

    HTTP: 400 Bad Request

    Example response:
        {"error": "conductorId y bpm son requeridos"}
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(TelemetryError):
    """
    Raised when a lookup matches no record.

    HTTP: 404 Not Found

    The service layer converts SQLAlchemy's `None` result into this
    exception so routes never deal with missing rows themselves.
    """

    def __init__(
        self,
        message: str = "Recurso no encontrado",
        resource: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if resource:
            ctx["resource"] = resource
        super().__init__(message=message, context=ctx)


class StoreError(TelemetryError):
    """
    Raised when a store operation fails (connectivity, constraint violation).

    HTTP: 500 Internal Server Error

    The message of the underlying driver exception is kept verbatim and
    returned to the caller.
    """

    def __init__(
        self,
        message: str = "Store operation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
