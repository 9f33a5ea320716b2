"""
Domain error taxonomy.

Services raise these; the handlers registered in ``app.main`` turn them into
JSON responses with the matching HTTP status code.
"""

from typing import Any, Optional


class AppError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code: int = 500
    default_detail: str = "Internal server error"

    def __init__(self, detail: Optional[str] = None) -> None:
        self.detail = detail or self.default_detail
        super().__init__(self.detail)

    def to_content(self) -> dict[str, Any]:
        return {"detail": self.detail}


class Unauthenticated(AppError):
    """Missing, invalid or expired token, or an unknown/inactive/locked account."""

    status_code = 401
    default_detail = "Could not validate credentials"


class AccountLocked(AppError):
    """Temporary lockout after repeated failed logins."""

    status_code = 423
    default_detail = (
        "Account is temporarily locked due to multiple failed login attempts. "
        "Please try again later."
    )


class Forbidden(AppError):
    """Authenticated, but the role or permission is insufficient."""

    status_code = 403
    default_detail = "Insufficient permissions"


class NotFound(AppError):
    status_code = 404
    default_detail = "Resource not found"


class Conflict(AppError):
    """A unique field (e.g. email) is already taken."""

    status_code = 409
    default_detail = "Resource already exists"


class ValidationFailed(AppError):
    """Malformed input, with field-level detail."""

    status_code = 422
    default_detail = "Validation failed"

    def __init__(
        self,
        detail: Optional[str] = None,
        errors: Optional[list[dict[str, str]]] = None,
    ) -> None:
        super().__init__(detail)
        self.errors = errors or []

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationFailed":
        return cls(message, errors=[{"field": field, "message": message}])

    def to_content(self) -> dict[str, Any]:
        return {"detail": self.detail, "errors": self.errors}


class InternalError(AppError):
    status_code = 500
    default_detail = "Internal server error"
