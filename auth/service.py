"""
Authentication workflow — register, login, password reset.

``AuthWorkflow`` owns no state of its own: every collaborator (user
directory, token issuer, mailer, settings, clock) is passed to the
constructor, so the HTTP layer builds one per request.

Reset lifecycle of a single user::

    NoResetPending --request_reset--> ResetPending(token, expiry)
    ResetPending   --confirm_reset--> NoResetPending

An expired ``ResetPending`` is never cleaned up; it simply stops matching.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict

from auth.errors import (
    AuthError,
    ConfigurationError,
    ConflictError,
    InvalidTokenError,
    NotFoundError,
    SendError,
    ValidationError,
)
from auth.jwt import TokenIssuer
from auth.mailer import ResetNotifier
from auth.password import MAX_PASSWORD_BYTES, hash_password_async, verify_password_async
from auth.reset_tokens import generate_reset_token
from config.settings import Settings
from database.models import UserRole
from database.repository import UserDirectory

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _require(*values: str | None) -> None:
    if any(not value for value in values):
        raise ValidationError("Fill in all the fields")


def _require_text(*values: str | None) -> None:
    """Like ``_require`` but also rejects whitespace-only names and emails."""
    if any(not value or not value.strip() for value in values):
        raise ValidationError("Fill in all the fields")


def _check_password_length(password: str) -> None:
    if len(password.encode()) > MAX_PASSWORD_BYTES:
        raise ValidationError(f"Password cannot be longer than {MAX_PASSWORD_BYTES} bytes")


class AuthWorkflow:
    def __init__(
        self,
        directory: UserDirectory,
        tokens: TokenIssuer,
        mailer: ResetNotifier,
        settings: Settings,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._directory = directory
        self._tokens = tokens
        self._mailer = mailer
        self._settings = settings
        self._clock = clock

    async def _hash(self, password: str) -> str:
        return await hash_password_async(password, self._settings.bcrypt_rounds)

    # ── Registration / login ────────────────────────────────────────────

    async def register(
        self,
        first_name: str,
        last_name: str,
        email: str,
        password: str,
    ) -> Dict[str, str]:
        """Create a user and return ``{id, token}``."""
        _require_text(first_name, last_name, email)
        _require(password)
        _check_password_length(password)

        if await self._directory.find_by_email(email) is not None:
            raise ConflictError("User already exists")

        user = await self._directory.create(
            {
                "first_name": first_name,
                "last_name": last_name,
                "email": email,
                "role": UserRole.USER,
                "password": await self._hash(password),
            }
        )
        token = self._tokens.issue(str(user.id))
        logger.info("Registered user %s", user.id)
        return {"id": str(user.id), "token": token}

    async def login(self, email: str, password: str) -> Dict[str, str]:
        """
        Check credentials and return ``{id, token}``.

        Unknown email and wrong password raise the same ``AuthError`` so
        callers cannot tell which accounts exist.
        """
        _require_text(email)
        _require(password)

        user = await self._directory.find_by_email(email)
        if user is None or not await verify_password_async(password, user.password):
            logger.info("Failed login attempt")
            raise AuthError(INVALID_CREDENTIALS)

        token = self._tokens.issue(str(user.id))
        logger.info("Login: %s", user.id)
        return {"id": str(user.id), "token": token}

    # ── Password reset ──────────────────────────────────────────────────

    async def request_reset(self, email: str) -> Dict[str, str]:
        """
        Start a reset for *email* and mail the token.

        The token is persisted before the send; if delivery fails the reset
        fields are cleared again so no unreachable token stays active.
        """
        _require_text(email)

        user = await self._directory.find_by_email(email)
        if user is None:
            raise NotFoundError("User not found")

        expires = self._clock() + timedelta(seconds=self._settings.reset_token_expiry_seconds)
        token = generate_reset_token()
        user.begin_reset(token, expires)
        await self._directory.save(user)

        try:
            ack = await self._mailer.send_reset(user.email, token)
        except (SendError, ConfigurationError):
            user.clear_reset()
            await self._directory.save(user)
            logger.warning("Reset for %s rolled back after send failure", user.id)
            raise

        logger.info("Reset requested for %s (expires %s)", user.id, expires.isoformat())
        return ack

    async def confirm_reset(self, token: str, new_password: str) -> Dict[str, str]:
        """Consume a reset *token* and set *new_password*."""
        _require(token, new_password)
        _check_password_length(new_password)

        now = self._clock()
        user = await self._directory.find_by_valid_reset_token(token, now)
        if user is None or not user.has_valid_reset_token(token, now):
            raise InvalidTokenError("Invalid or expired token")

        user.password = await self._hash(new_password)
        user.clear_reset()
        await self._directory.save(user)

        logger.info("Password reset completed for %s", user.id)
        return {"message": "Password reset successful"}
