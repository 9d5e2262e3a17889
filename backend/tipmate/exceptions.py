"""
TipMate Backend — Custom Exception Hierarchy
==============================================

What:  Application-specific exceptions for the two failure classes the API
       distinguishes: bad client input and storage failure.
How:   Each exception carries a user-facing message and an optional context
       dict. Global exception handlers (registered in main.py) turn them into
       flat `{"error": ...}` JSON bodies with the matching status code.
Who:   Raised by the database connector and the service layer.

Exception Hierarchy:
    TipMateError (base)          → 500 Internal Server Error
    ├── ValidationError          → 400 Bad Request (client can fix)
    ├── DatabaseError            → 500 Internal Server Error
    └── ApiClientError           (calculator client side, never served)
"""

from typing import Any, Dict, Optional


class TipMateError(Exception):
    """
    Base exception for all TipMate application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(TipMateError):
    """
    Raised when a create payload fails the presence/positivity checks.

    HTTP:    400 Bad Request
    Effect:  Nothing has been written when this is raised.

    Example response:
        {"error": "Missing required fields"}
    """

    def __init__(
        self,
        message: str = "Missing required fields",
        fields: Optional[list] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if fields:
            ctx["fields"] = list(fields)
        super().__init__(message=message, context=ctx)
        self.fields = list(fields or [])


class DatabaseError(TipMateError):
    """
    Raised when connecting to or querying the database fails.

    HTTP:    500 Internal Server Error

    The message returned to the client is always generic. Driver errors,
    SQL text and constraint names go into `context` and the server log only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ApiClientError(TipMateError):
    """
    Raised by the calculator's HTTP client when a call to the API fails.

    Covers transport failures (connection refused, timeout) and non-success
    status codes. `status_code` is None for transport failures.
    """

    def __init__(
        self,
        message: str = "Request to the TipMate API failed",
        status_code: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if status_code is not None:
            ctx["status_code"] = status_code
        super().__init__(message=message, context=ctx)
        self.status_code = status_code
