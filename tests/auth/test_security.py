# tests/auth/test_security.py
import jwt
import pytest

from auth import security


def test_password_hash_roundtrip():
    hashed = security.hash_password("secret123")

    assert hashed != "secret123"
    assert security.verify_password("secret123", hashed)
    assert not security.verify_password("wrong-password", hashed)
    assert not security.verify_password("secret123", "not-a-bcrypt-hash")


def test_access_token_carries_id_and_expiry(monkeypatch):
    monkeypatch.setenv("ACCESS_TOKEN_EXPIRE_MIN", "5")

    token, expires_at = security.build_access_token(user_id=7, email="a@example.com", token_id="jti-1")
    payload = security.decode_access_token(token)

    assert payload["sub"] == "7"
    assert payload["jti"] == "jti-1"
    assert expires_at == payload["exp"]
    assert expires_at - payload["iat"] == 300


def test_non_positive_lifetime_means_no_expiry(monkeypatch):
    monkeypatch.setenv("ACCESS_TOKEN_EXPIRE_MIN", "0")

    token, expires_at = security.build_access_token(user_id=7, email="a@example.com", token_id="jti-1")

    assert expires_at is None
    assert "exp" not in security.decode_access_token(token)


def test_decode_rejects_foreign_and_wrong_type_tokens():
    foreign = jwt.encode({"sub": "1", "type": "access", "jti": "x"}, "another-secret-with-enough-bytes!!", algorithm="HS256")
    with pytest.raises(security.AuthSecurityError):
        security.decode_access_token(foreign)

    refresh = jwt.encode({"sub": "1", "type": "refresh", "jti": "x"}, security.jwt_secret(), algorithm="HS256")
    with pytest.raises(security.AuthSecurityError, match="not an access token"):
        security.decode_access_token(refresh)

    no_id = jwt.encode({"sub": "1", "type": "access"}, security.jwt_secret(), algorithm="HS256")
    with pytest.raises(security.AuthSecurityError, match="no id"):
        security.decode_access_token(no_id)


def test_token_id_hash_is_stable_sha256():
    assert security.hash_token_id("abc") == security.hash_token_id("abc")
    assert len(security.hash_token_id("abc")) == 64


def test_random_tokens_are_sixty_characters():
    assert len(security.build_verification_token()) == 60
    assert len(security.build_reset_token()) == 60
    assert security.build_reset_token() != security.build_reset_token()


def test_reset_ttl_defaults_to_two_minutes(monkeypatch):
    assert security.password_reset_ttl_minutes() == 2
    monkeypatch.setenv("PASSWORD_RESET_TTL_MIN", "15")
    assert security.password_reset_ttl_minutes() == 15
