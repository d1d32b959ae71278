"""
JWT-style token creation and verification.

Tokens are base64-encoded JSON payloads signed with HMAC-SHA256.
Secret key and lifetime come from ``Settings`` (env vars: ``JWT_SECRET``,
``JWT_EXPIRY_SECONDS``) and are handed to ``TokenIssuer`` explicitly.
"""

from __future__ import annotations

import binascii
import hashlib
import hmac
import json
import time
from base64 import b64decode, b64encode
from typing import Any, Callable, Dict

from auth.errors import AuthError, ConfigurationError


class TokenIssuer:
    """Signs and verifies bearer tokens carrying a user id."""

    def __init__(
        self,
        secret: str,
        expiry_seconds: int,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._secret = secret
        self._expiry_seconds = expiry_seconds
        self._clock = clock

    def _sign(self, raw: bytes) -> str:
        if not self._secret:
            raise ConfigurationError("token signing secret is not configured")
        return hmac.new(self._secret.encode(), raw, hashlib.sha256).hexdigest()

    def issue(self, user_id: str) -> str:
        """Create a signed token containing ``user_id`` and expiry."""
        now = int(self._clock())
        payload = {
            "id": user_id,
            "iat": now,
            "exp": now + self._expiry_seconds,
        }
        raw = json.dumps(payload).encode()
        return b64encode(raw).decode() + "." + self._sign(raw)

    def decode(self, token: str) -> Dict[str, Any]:
        """
        Verify signature and expiry, returning the full payload.

        Raises ``AuthError`` on invalid or expired tokens.
        """
        try:
            body, sig = token.split(".", 1)
            raw = b64decode(body, validate=True)
        except (ValueError, binascii.Error):
            raise AuthError("Invalid or expired token: bad format")

        if not hmac.compare_digest(sig.encode(), self._sign(raw).encode()):
            raise AuthError("Invalid or expired token: bad signature")

        try:
            payload = json.loads(raw)
        except ValueError:
            raise AuthError("Invalid or expired token: bad payload")
        if not isinstance(payload, dict) or "id" not in payload:
            raise AuthError("Invalid or expired token: bad payload")
        if payload.get("exp", 0) <= self._clock():
            raise AuthError("Invalid or expired token: token expired")
        return payload

    def verify(self, token: str) -> str:
        """Verify token and return the user id."""
        return self.decode(token)["id"]
