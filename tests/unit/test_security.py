"""
Unit tests for password hashing, token issuing and the request guard.
"""

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest
from jose import jwt

from config import settings
from utils.errors import ForbiddenError, InvalidTokenError, MissingTokenError
from utils.hashing import get_password_hash, verify_password
from utils.tokenJWT import (
    create_access_token,
    decode_access_token,
    get_current_user,
    role_required,
    token_for_user,
)

CLAIMS = {"id": 7, "email": "alice@example.com", "name": "Alice", "role": "user"}


def _request():
    return SimpleNamespace(state=SimpleNamespace())


class TestPasswordHashing:
    """Tests for the bcrypt wrapper."""

    def test_hash_is_salted_and_verifies(self):
        first = get_password_hash("hunter22")
        second = get_password_hash("hunter22")

        assert first != second
        assert first != "hunter22"
        assert verify_password("hunter22", first)
        assert verify_password("hunter22", second)

    def test_wrong_password_returns_false(self):
        digest = get_password_hash("hunter22")
        assert verify_password("hunter23", digest) is False

    def test_malformed_digest_returns_false(self):
        assert verify_password("hunter22", "not-a-bcrypt-hash") is False
        assert verify_password("hunter22", "") is False

    def test_long_password_is_accepted(self):
        password = "x" * 100
        assert verify_password(password, get_password_hash(password))


class TestTokens:
    """Tests for issuing and validating signed tokens."""

    def test_round_trip_claims(self):
        claims = decode_access_token(create_access_token(CLAIMS))

        assert claims.id == 7
        assert claims.email == "alice@example.com"
        assert claims.name == "Alice"
        assert claims.role == "user"

    def test_default_expiry_is_24_hours(self):
        token = create_access_token(CLAIMS)
        payload = jwt.get_unverified_claims(token)
        issued_window = payload["exp"] - jwt.get_unverified_claims(
            create_access_token(CLAIMS, expires_delta=timedelta(0))
        )["exp"]

        assert settings.ACCESS_TOKEN_EXPIRE_MINUTES == 24 * 60
        assert abs(issued_window - 24 * 3600) <= 2

    def test_zero_lifetime_is_not_replaced_by_default(self):
        before = datetime.now(timezone.utc).timestamp()
        payload = jwt.get_unverified_claims(create_access_token(CLAIMS, expires_delta=timedelta(0)))

        assert payload["exp"] - before <= 2

    def test_expired_token_is_rejected(self):
        token = create_access_token(CLAIMS, expires_delta=timedelta(seconds=-10))
        with pytest.raises(InvalidTokenError):
            decode_access_token(token)

    def test_tampered_token_is_rejected(self):
        token = jwt.encode(CLAIMS, "some-other-secret", algorithm=settings.ALGORITHM)
        with pytest.raises(InvalidTokenError):
            decode_access_token(token)

    def test_garbage_token_is_rejected(self):
        with pytest.raises(InvalidTokenError):
            decode_access_token("definitely.not.ajwt")

    def test_token_without_identity_claims_is_rejected(self):
        token = create_access_token({"sub": "alice@example.com"})
        with pytest.raises(InvalidTokenError):
            decode_access_token(token)

    def test_token_for_user_carries_stored_role(self):
        stored = SimpleNamespace(id=3, email="root@example.com", name="Root", role="admin")
        claims = decode_access_token(token_for_user(stored))

        assert claims.id == 3
        assert claims.role == "admin"


class TestGuard:
    """Tests for the request guard and the role check."""

    def test_missing_token(self):
        with pytest.raises(MissingTokenError) as exc:
            get_current_user(_request(), None)
        assert exc.value.status_code == 401
        assert exc.value.detail == "Access token required"

    def test_invalid_token(self):
        with pytest.raises(InvalidTokenError) as exc:
            get_current_user(_request(), "garbage")
        assert exc.value.status_code == 401

    def test_valid_token_attaches_claims(self):
        request = _request()
        claims = get_current_user(request, create_access_token(CLAIMS))

        assert claims.id == 7
        assert request.state.user is claims

    def test_bearer_prefix_is_tolerated(self):
        claims = get_current_user(_request(), "Bearer " + create_access_token(CLAIMS))
        assert claims.email == "alice@example.com"

    def test_role_required_rejects_plain_user(self):
        checker = role_required("admin")
        user = decode_access_token(create_access_token(CLAIMS))

        with pytest.raises(ForbiddenError) as exc:
            checker(user)
        assert exc.value.status_code == 403

    def test_role_required_accepts_admin(self):
        checker = role_required("admin")
        admin = decode_access_token(create_access_token({**CLAIMS, "role": "admin"}))

        assert checker(admin) is admin
