"""Identity Resolution — tests for bearer token verification with PyJWT.

Tests cover:
    - Valid token yields its sub claim
    - Missing, malformed, expired, wrong-secret and wrong-audience tokens are anonymous
"""

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from relay.config import Settings
from relay.infrastructure.identity import bearer_token, resolve_identity

SECRET = "identity-test-secret-0123456789abcdef"


@pytest.fixture
def settings():
    return Settings(auth_jwt_secret=SECRET)


def _token(secret=SECRET, **claims):
    payload = {"sub": "user-1", "aud": "authenticated", **claims}
    return jwt.encode(payload, secret, algorithm="HS256")


def test_valid_token_yields_subject(settings):
    assert resolve_identity(f"Bearer {_token()}", settings) == "user-1"


def test_scheme_is_case_insensitive(settings):
    assert resolve_identity(f"bearer {_token()}", settings) == "user-1"


@pytest.mark.parametrize("header", [None, "", "Basic abc", "Bearer ", "Bearer not.a.jwt"])
def test_missing_or_malformed_is_anonymous(settings, header):
    assert resolve_identity(header, settings) is None


def test_expired_token_is_anonymous(settings):
    past = datetime.now(timezone.utc) - timedelta(minutes=5)
    assert resolve_identity(f"Bearer {_token(exp=past)}", settings) is None


def test_wrong_secret_is_anonymous(settings):
    token = _token(secret="another-secret-0123456789abcdefghij")
    assert resolve_identity(f"Bearer {token}", settings) is None


def test_wrong_audience_is_anonymous(settings):
    assert resolve_identity(f"Bearer {_token(aud='other')}", settings) is None


def test_token_without_subject_is_anonymous(settings):
    token = jwt.encode({"aud": "authenticated"}, SECRET, algorithm="HS256")
    assert resolve_identity(f"Bearer {token}", settings) is None


def test_bearer_token_extraction():
    assert bearer_token("Bearer abc.def") == "abc.def"
    assert bearer_token("Token abc") is None
