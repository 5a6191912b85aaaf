"""
Ouderschaps API: Custom Exception Hierarchy
=============================================

What:  Application-specific exceptions for the error scenarios of the API.
How:   Each exception carries a message and optional context dict. Global
       exception handlers (registered in main.py) turn them into the
       `{"success": false, "error": message}` envelope with the status code
       listed below.
Who:   Raised by services, stores and dependencies; caught by global handlers.

Exception Hierarchy:
    OuderschapsApiError (base)              → 500
    ├── ValidationError                     → 400
    ├── AuthenticationError                 → 401
    ├── AccessDeniedError                   → 403
    ├── NotFoundError                       → 404
    ├── ConflictError                       → 409
    ├── DatabaseError                       → 500
    ├── PaymentProviderError                → 500
    ├── LegacyPathNotImplementedError       → 501
    └── CircuitBreakerOpenError             → 503

Authentication itself reports failures through AuthResult values
(see services/credential_resolver.py); AuthenticationError is only raised
at the HTTP boundary, by the `current_user` dependency.
"""

from typing import Any, Dict, Optional


class OuderschapsApiError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    status_code = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(OuderschapsApiError):
    """Client input failed a business rule that the schema cannot express."""

    status_code = 400

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


class AuthenticationError(OuderschapsApiError):
    """No usable credentials on the request."""

    status_code = 401

    def __init__(self, reason: str = "No authorization header", context: Optional[Dict[str, Any]] = None):
        super().__init__(message=f"Unauthorized: {reason}", context=context)
        self.reason = reason


class AccessDeniedError(OuderschapsApiError):
    """The resolved user does not own the dossier behind the resource."""

    status_code = 403

    def __init__(
        self,
        message: str = "Forbidden: You do not have access to this resource",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(OuderschapsApiError):
    """
    A referenced entity does not exist.

    The message is `"{resource} not found"` unless one is given explicitly,
    e.g. NotFoundError("Dossier") → "Dossier not found".
    """

    status_code = 404

    def __init__(
        self,
        resource: str = "Resource",
        resource_id: Optional[Any] = None,
        message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(message=message or f"{resource} not found", context=ctx)
        self.resource = resource


class ConflictError(OuderschapsApiError):
    """Pre-write existence check found a duplicate (role, slot, email)."""

    status_code = 409

    def __init__(self, message: str = "Conflict", context: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, context=context)


class DatabaseError(OuderschapsApiError):
    """
    A database operation failed unexpectedly.

    The handler logs `context` server-side; the message is what the client sees.
    """

    status_code = 500

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class PaymentProviderError(OuderschapsApiError):
    """The payment provider rejected a call or could not be reached."""

    status_code = 500

    def __init__(
        self,
        message: str = "Payment provider request failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class LegacyPathNotImplementedError(OuderschapsApiError):
    """Operation exists only on the repository-backed store set."""

    status_code = 501

    def __init__(self, message: str = "Not implemented", context: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, context=context)


class CircuitBreakerOpenError(OuderschapsApiError):
    """
    Raised when the circuit breaker for an outbound service is OPEN.

    CLOSED → (threshold failures) → OPEN → (recovery timeout) → HALF_OPEN
    → success closes, failure re-opens.
    """

    status_code = 503

    def __init__(
        self,
        service: str = "upstream",
        recovery_time: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = (
            f"The {service} service is temporarily unavailable. "
            f"Retry in approximately {recovery_time} seconds."
        )
        ctx = context or {}
        ctx["recovery_time"] = recovery_time
        super().__init__(message=message, context=ctx)
        self.recovery_time = recovery_time
