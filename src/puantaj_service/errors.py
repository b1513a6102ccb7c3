"""Error taxonomy shared by the request pipeline and route handlers.

Every failure a request can hit is an ``AppError``. The REST layer renders
them all into one JSON shape: ``{"error": str, "details"?: [...]}``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class FieldViolation:
    """A single broken validation rule."""

    field: str
    message: str
    value: Any = None

    def as_dict(self) -> dict[str, Any]:
        return {"field": self.field, "message": self.message, "value": self.value}


class AppError(Exception):
    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None, details: list[FieldViolation] | None = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class MalformedInput(AppError):
    status_code = 400
    default_message = "Invalid JSON format in request body"


class ValidationFailed(AppError):
    status_code = 400
    default_message = "Validation failed"

    def __init__(self, violations: list[FieldViolation]):
        summary = "; ".join(v.message for v in violations)
        message = f"{self.default_message}: {summary}" if summary else self.default_message
        super().__init__(message, details=list(violations))

    @property
    def violations(self) -> list[FieldViolation]:
        return self.details or []


class Unauthenticated(AppError):
    status_code = 401
    default_message = "Authentication required"


class Forbidden(AppError):
    status_code = 403
    default_message = "Insufficient permissions"


class NotFound(AppError):
    status_code = 404
    default_message = "Resource not found"


class Conflict(AppError):
    status_code = 409
    default_message = "Resource already exists"


class Internal(AppError):
    status_code = 500
