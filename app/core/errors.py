"""Typed errors raised by the service layer.

Every error carries a machine-readable ``code`` and the HTTP status the API
boundary maps it to. Services raise these; ``app.core.error_handlers`` turns
them into JSON responses.
"""

from __future__ import annotations

from typing import Any


class AppError(Exception):
    """Base exception for all domain and infrastructure failures."""

    code: str = "INTERNAL_ERROR"
    http_status: int = 500

    def __init__(self, message: str, *, details: Any | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_response(self) -> dict:
        body: dict[str, Any] = {"detail": self.message, "code": self.code}
        if self.details is not None:
            body["details"] = self.details
        return body


# 4xx: caller can fix the request

class ValidationError(AppError):
    code = "VALIDATION_ERROR"
    http_status = 400

    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message, details={"field": field} if field else None)
        self.field = field


class NotFoundError(AppError):
    code = "NOT_FOUND"
    http_status = 404

    def __init__(self, resource: str, resource_id: Any | None = None) -> None:
        message = f"{resource} not found" if resource_id is None else f"{resource} '{resource_id}' not found"
        super().__init__(message)
        self.resource = resource
        self.resource_id = resource_id


class ForbiddenError(AppError):
    code = "FORBIDDEN"
    http_status = 403


class ConflictError(AppError):
    code = "CONFLICT"
    http_status = 409


# 5xx: upstream or internal failures

class UpstreamError(AppError):
    """The directions provider failed or could not be reached.

    ``status_code`` and ``body`` are kept for server-side diagnostics and are
    never echoed back to API clients.
    """

    code = "UPSTREAM_ERROR"
    http_status = 502

    def __init__(self, message: str, *, status_code: int | None = None, body: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class InvalidUpstreamResponse(AppError):
    """The provider answered successfully but the payload breaks its contract."""

    code = "INVALID_UPSTREAM_RESPONSE"
    http_status = 502


class InternalError(AppError):
    code = "INTERNAL_ERROR"
    http_status = 500
