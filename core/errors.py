"""
Error hierarchy for the portal.

Every failure a user can see is one of these. Controllers catch
``PortalError``, log it and turn it into a notice; the HTTP API turns the
same error into a response via ``http_status`` and ``to_dict()``.
"""

from __future__ import annotations

from typing import Any


class PortalError(Exception):
    """Base exception for all portal errors."""

    http_status = 500

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message, "details": self.details}


class ConnectivityError(PortalError):
    """The backing store is unreachable; mutations are refused."""

    http_status = 503

    def __init__(self, message: str = "Cannot connect to the server. Please try again later."):
        super().__init__(message, code="CONNECTIVITY")


class ValidationError(PortalError):
    """Input rejected before any remote call."""

    http_status = 422

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, code="VALIDATION", details=details)


class AuthenticationError(PortalError):
    http_status = 401

    def __init__(self, message: str = "You must be logged in"):
        super().__init__(message, code="AUTH_FAILED")


class PermissionDeniedError(PortalError):
    http_status = 403

    def __init__(self, message: str = "Not authorized"):
        super().__init__(message, code="NOT_AUTHORIZED")


class NotFoundError(PortalError):
    http_status = 404

    def __init__(self, what: str, ident: str | None = None):
        message = f"{what} not found" if ident is None else f"{what} {ident} not found"
        super().__init__(message, code="NOT_FOUND", details={"id": ident} if ident else None)


class TransitionError(PortalError):
    """An application status change outside the transition table."""

    http_status = 409

    def __init__(self, current: str, target: str):
        super().__init__(
            f"Cannot move application from '{current}' to '{target}'",
            code="INVALID_TRANSITION",
            details={"from": current, "to": target},
        )
        self.current = current
        self.target = target


class RemoteCallError(PortalError):
    """A Supabase auth or table call failed."""

    http_status = 502

    def __init__(self, operation: str, reason: str):
        super().__init__(
            f"{operation} failed: {reason}",
            code="REMOTE_ERROR",
            details={"operation": operation},
        )
        self.operation = operation
        self.reason = reason
