import pytest

import jobguide.core.security as sec
from jobguide.core.session import UserSession
from jobguide.errors import PermissionDeniedError
from jobguide.models.enums import UserRole


def test_access_token_roundtrip_carries_claims():
    token = sec.create_access_token("user-123", role="instructor", email="a@example.com")
    claims = sec.decode_access_token(token)
    assert claims["sub"] == "user-123"
    assert claims["email"] == "a@example.com"
    assert claims["user_metadata"] == {"role": "instructor"}
    assert claims["aud"] == "authenticated"


def test_decode_rejects_garbage_and_wrong_audience(monkeypatch):
    assert sec.decode_access_token("not-a-jwt") is None
    token = sec.create_access_token("user-1")
    monkeypatch.setattr(sec.settings, "jwt_audience", "someone-else")
    assert sec.decode_access_token(token) is None


def test_decode_rejects_wrong_secret(monkeypatch):
    token = sec.create_access_token("user-1")
    monkeypatch.setattr(sec.settings, "jwt_secret", "another-secret")
    assert sec.decode_access_token(token) is None


def test_generate_id_is_unique():
    assert sec.generate_id() != sec.generate_id()
    assert len(sec.generate_id()) == 36


def test_session_instructor_guard():
    with pytest.raises(PermissionDeniedError):
        UserSession(user_id="s1").require_instructor()
    UserSession(user_id="i1", role=UserRole.INSTRUCTOR).require_instructor()
