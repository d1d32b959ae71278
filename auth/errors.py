"""
Error taxonomy for the authentication workflow.

Every failure the workflow can produce is an ``AuthServiceError`` tagged
with an ``ErrorKind``.  The HTTP layer maps the kind to a status code in
one place (``api.errors``); nothing here knows about requests.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    CONFLICT = "conflict"
    AUTH = "auth"
    NOT_FOUND = "not_found"
    INVALID_TOKEN = "invalid_token"
    CONFIGURATION = "configuration"
    SEND = "send"
    INTERNAL = "internal"


class AuthServiceError(Exception):
    """Base exception for the auth backend."""

    kind: ErrorKind = ErrorKind.INTERNAL
    status_code: int = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(AuthServiceError):
    """Missing or malformed input."""

    kind = ErrorKind.VALIDATION
    status_code = 400


class ConflictError(AuthServiceError):
    """Email already registered."""

    kind = ErrorKind.CONFLICT
    status_code = 400


class AuthError(AuthServiceError):
    """Bad credentials or an unusable bearer token."""

    kind = ErrorKind.AUTH
    status_code = 401


class NotFoundError(AuthServiceError):
    kind = ErrorKind.NOT_FOUND
    status_code = 401


class InvalidTokenError(AuthServiceError):
    """Reset token unknown or expired."""

    kind = ErrorKind.INVALID_TOKEN
    status_code = 400


class ConfigurationError(AuthServiceError):
    kind = ErrorKind.CONFIGURATION
    status_code = 500


class SendError(AuthServiceError):
    """Outbound email could not be delivered."""

    kind = ErrorKind.SEND
    status_code = 500
