"""
Tests for password hashing, bearer tokens and reset-token generation.
"""

import re

import pytest

from auth.errors import AuthError, ConfigurationError
from auth.jwt import TokenIssuer
from auth.password import hash_password, hash_password_async, verify_password
from auth.reset_tokens import generate_reset_token


class TestPasswordHashing:
    def test_hash_is_not_plaintext_and_verifies(self):
        hashed = hash_password("pw1", rounds=4)
        assert hashed != "pw1"
        assert verify_password("pw1", hashed)

    def test_wrong_password_rejected(self):
        hashed = hash_password("pw1", rounds=4)
        assert not verify_password("pw2", hashed)

    def test_same_password_gets_new_salt(self):
        assert hash_password("pw1", rounds=4) != hash_password("pw1", rounds=4)

    def test_malformed_hash_returns_false(self):
        assert verify_password("pw1", "not-a-bcrypt-hash") is False

    def test_over_72_bytes_refused(self):
        with pytest.raises(ValueError):
            hash_password("p" * 73, rounds=4)

    def test_long_password_never_verifies(self):
        hashed = hash_password("p" * 72, rounds=4)
        assert verify_password("p" * 100, hashed) is False

    @pytest.mark.asyncio
    async def test_async_hash_verifies(self):
        hashed = await hash_password_async("secret", rounds=4)
        assert verify_password("secret", hashed)


class _Clock:
    def __init__(self, now: float):
        self.now = now

    def __call__(self) -> float:
        return self.now


class TestTokenIssuer:
    def test_issue_and_verify(self):
        issuer = TokenIssuer("s3cret", 60)
        token = issuer.issue("user-1")
        assert issuer.verify(token) == "user-1"

    def test_payload_carries_expiry(self):
        clock = _Clock(1_000_000)
        issuer = TokenIssuer("s3cret", 60, clock=clock)
        payload = issuer.decode(issuer.issue("user-1"))
        assert payload["iat"] == 1_000_000
        assert payload["exp"] == 1_000_060

    def test_expired_token_rejected(self):
        clock = _Clock(1_000_000)
        issuer = TokenIssuer("s3cret", 60, clock=clock)
        token = issuer.issue("user-1")
        clock.now += 61
        with pytest.raises(AuthError, match="expired"):
            issuer.verify(token)

    def test_other_secret_rejected(self):
        token = TokenIssuer("s3cret", 60).issue("user-1")
        with pytest.raises(AuthError, match="signature"):
            TokenIssuer("other", 60).verify(token)

    def test_tampered_signature_rejected(self):
        issuer = TokenIssuer("s3cret", 60)
        body, sig = issuer.issue("user-1").split(".")
        forged = body + "." + ("0" if sig[0] != "0" else "1") + sig[1:]
        with pytest.raises(AuthError):
            issuer.verify(forged)

    @pytest.mark.parametrize("token", ["", "no-dot", "!!!.abc", "e30=.\u00e9"])
    def test_garbage_rejected(self, token):
        with pytest.raises(AuthError):
            TokenIssuer("s3cret", 60).verify(token)

    def test_missing_secret_is_configuration_error(self):
        with pytest.raises(ConfigurationError):
            TokenIssuer("", 60).issue("user-1")


class TestResetTokens:
    def test_fixed_length_hex(self):
        token = generate_reset_token()
        assert re.fullmatch(r"[0-9a-f]{40}", token)

    def test_tokens_are_unique(self):
        assert len({generate_reset_token() for _ in range(100)}) == 100
