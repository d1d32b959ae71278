"""Opaque password-reset tokens."""

from __future__ import annotations

import secrets

RESET_TOKEN_BYTES = 20


def generate_reset_token() -> str:
    """Return a random 40-character hex token (160 bits of entropy)."""
    return secrets.token_hex(RESET_TOKEN_BYTES)
