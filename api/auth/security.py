"""
Auth security helpers.

Bearer tokens are HS256 JWTs carrying a random `jti`. The SHA-256 of the
`jti` is stored in `personal_access_tokens`; deleting that row revokes the
token even though its signature is still valid.
"""

from __future__ import annotations

import hashlib
import secrets
import time
from typing import Any

import bcrypt
import jwt

from core import config, slugs

VERIFICATION_TOKEN_LENGTH = 60
RESET_TOKEN_LENGTH = 60


class AuthSecurityError(RuntimeError):
    pass


def jwt_secret() -> str:
    # Local default keeps development simple.
    # In production, set JWT_SECRET in environment.
    return config.env_str("JWT_SECRET", "dev-change-this-secret-for-local-use-only")


def jwt_algorithm() -> str:
    return config.env_str("JWT_ALG", "HS256")


def access_token_expire_minutes() -> int:
    """
    Lifetime of bearer tokens; 0 or less means they never expire.
    """
    return config.env_int("ACCESS_TOKEN_EXPIRE_MIN", 7 * 24 * 60)


def password_reset_ttl_minutes() -> int:
    value = config.env_int("PASSWORD_RESET_TTL_MIN", 2)
    return value if value > 0 else 2


def now_epoch_s() -> int:
    return int(time.time())


def hash_password(plain_password: str) -> str:
    password = (plain_password or "").encode("utf-8")
    if not password:
        raise AuthSecurityError("Password is empty.")
    return bcrypt.hashpw(password, bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, password_hash: str) -> bool:
    password = (plain_password or "").encode("utf-8")
    hashed = (password_hash or "").encode("utf-8")
    if not password or not hashed:
        return False
    try:
        return bcrypt.checkpw(password, hashed)
    except ValueError:
        return False


def build_token_id() -> str:
    return secrets.token_urlsafe(32)


def hash_token_id(token_id: str) -> str:
    raw = (token_id or "").encode("utf-8")
    if not raw:
        raise AuthSecurityError("Token id is empty.")
    return hashlib.sha256(raw).hexdigest()


def build_access_token(*, user_id: int, email: str, token_id: str) -> tuple[str, int | None]:
    """
    Return the encoded token and its expiry (epoch seconds, or None).
    """
    issued_at = now_epoch_s()
    payload: dict[str, Any] = {
        "sub": str(user_id),
        "email": email,
        "type": "access",
        "jti": token_id,
        "iat": issued_at,
    }

    expires_at = None
    minutes = access_token_expire_minutes()
    if minutes > 0:
        expires_at = issued_at + minutes * 60
        payload["exp"] = expires_at

    return jwt.encode(payload, jwt_secret(), algorithm=jwt_algorithm()), expires_at


def decode_access_token(token: str) -> dict[str, Any]:
    raw = (token or "").strip()
    if not raw:
        raise AuthSecurityError("Access token is empty.")

    try:
        payload = jwt.decode(raw, jwt_secret(), algorithms=[jwt_algorithm()])
    except jwt.ExpiredSignatureError as exc:
        raise AuthSecurityError("Access token has expired.") from exc
    except jwt.InvalidTokenError as exc:
        raise AuthSecurityError("Invalid access token.") from exc

    token_type = str(payload.get("type") or "").strip().lower()
    if token_type != "access":
        raise AuthSecurityError("Token is not an access token.")
    if not str(payload.get("jti") or "").strip():
        raise AuthSecurityError("Access token has no id.")

    return payload


def build_verification_token() -> str:
    return slugs.random_string(VERIFICATION_TOKEN_LENGTH)


def build_reset_token() -> str:
    return slugs.random_string(RESET_TOKEN_LENGTH)
