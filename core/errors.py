"""
core/errors.py -- Error taxonomy shared by the auth flow and resource handlers.

Every error carries its HTTP status and knows its JSON body. api/main.py
registers one exception handler for AppError, so route code raises these and
never builds error responses by hand.

Two body shapes are used, matching what existing clients parse:
  list form   -- {"errors": [{"msg": ...}]} for input and credential problems
  single form -- {"msg": ...} for auth, ownership and lookup failures
"""

from __future__ import annotations


class AppError(Exception):
    """Base class for errors that map onto a client-visible response."""

    status_code: int = 500
    list_body: bool = False

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        if self.list_body:
            return {"errors": [{"msg": self.message}]}
        return {"msg": self.message}


class ValidationError(AppError):
    """Malformed or missing input."""

    status_code = 422
    list_body = True


class InvalidCredentials(AppError):
    """Unknown team name or wrong secret at login."""

    status_code = 400
    list_body = True


class Conflict(AppError):
    """A unique field (team name) is already taken."""

    status_code = 409
    list_body = True


class Unauthenticated(AppError):
    """Missing, invalid or expired token.

    reason is for logs only. Every variant produces the same response so a
    client cannot probe which check failed.
    """

    status_code = 401

    def __init__(self, message: str, reason: str = "missing") -> None:
        super().__init__(message)
        self.reason = reason


class Forbidden(AppError):
    """Valid identity that does not own the resource.

    Answers 401, the status existing clients of this API expect for an
    ownership failure.
    """

    status_code = 401


class NotFound(AppError):
    status_code = 404


class InternalError(AppError):
    """Anything not otherwise classified. Never carries internal detail."""

    status_code = 500

    def __init__(self, message: str = "Server error") -> None:
        super().__init__(message)
