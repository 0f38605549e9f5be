"""
Auth persistence helpers (credential store).
"""

from __future__ import annotations

from datetime import datetime, timezone

from core import db

_USER_COLUMNS = """
    id, name, email, password_hash, verification_token, email_verified_at,
    created_at, updated_at
"""


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


async def create_user(
    *,
    name: str,
    email: str,
    password_hash: str,
    verification_token: str | None,
) -> dict:
    row = await db.fetch_one(
        f"""
        INSERT INTO users (name, email, password_hash, verification_token)
        VALUES ($1, $2, $3, $4)
        RETURNING {_USER_COLUMNS}
        """,
        name,
        normalize_email(email),
        password_hash,
        verification_token,
    )
    if row is None:
        raise RuntimeError("Failed to create user.")
    return row


async def get_user_by_email(email: str) -> dict | None:
    return await db.fetch_one(
        f"""
        SELECT {_USER_COLUMNS}
        FROM users
        WHERE lower(email) = lower($1)
        """,
        normalize_email(email),
    )


async def get_user_by_id(user_id: int) -> dict | None:
    return await db.fetch_one(
        f"""
        SELECT {_USER_COLUMNS}
        FROM users
        WHERE id = $1
        """,
        user_id,
    )


async def get_user_by_verification_token(token: str) -> dict | None:
    return await db.fetch_one(
        f"""
        SELECT {_USER_COLUMNS}
        FROM users
        WHERE verification_token = $1
        """,
        token,
    )


async def set_verification_token(user_id: int, token: str) -> None:
    await db.execute(
        """
        UPDATE users
        SET verification_token = $2,
            updated_at = now()
        WHERE id = $1
        """,
        user_id,
        token,
    )


async def mark_email_verified(user_id: int) -> None:
    await db.execute(
        """
        UPDATE users
        SET email_verified_at = now(),
            verification_token = NULL,
            updated_at = now()
        WHERE id = $1
        """,
        user_id,
    )


async def update_password(user_id: int, password_hash: str) -> None:
    await db.execute(
        """
        UPDATE users
        SET password_hash = $2,
            updated_at = now()
        WHERE id = $1
        """,
        user_id,
        password_hash,
    )


async def insert_access_token(
    *,
    user_id: int,
    token_hash: str,
    name: str,
    expires_at: datetime | None,
) -> dict:
    if expires_at is not None and expires_at.tzinfo is None:
        expires_at = expires_at.replace(tzinfo=timezone.utc)

    row = await db.fetch_one(
        """
        INSERT INTO personal_access_tokens (user_id, token_hash, name, expires_at)
        VALUES ($1, $2, $3, $4)
        RETURNING id, user_id, token_hash, name, last_used_at, expires_at, created_at
        """,
        user_id,
        token_hash,
        name,
        expires_at,
    )
    if row is None:
        raise RuntimeError("Failed to insert access token.")
    return row


async def get_access_token_by_hash(token_hash: str) -> dict | None:
    return await db.fetch_one(
        """
        SELECT id, user_id, token_hash, name, last_used_at, expires_at, created_at
        FROM personal_access_tokens
        WHERE token_hash = $1
        """,
        token_hash,
    )


async def mark_access_token_used(token_id: int) -> None:
    await db.execute(
        """
        UPDATE personal_access_tokens
        SET last_used_at = now()
        WHERE id = $1
        """,
        token_id,
    )


async def delete_access_token(token_id: int) -> bool:
    row = await db.fetch_one(
        """
        DELETE FROM personal_access_tokens
        WHERE id = $1
        RETURNING id
        """,
        token_id,
    )
    return row is not None


async def delete_access_tokens_for_user(user_id: int) -> None:
    await db.execute(
        """
        DELETE FROM personal_access_tokens
        WHERE user_id = $1
        """,
        user_id,
    )


async def purge_password_reset_tokens(*, created_before: datetime) -> None:
    await db.execute(
        """
        DELETE FROM password_reset_tokens
        WHERE created_at <= $1
        """,
        created_before,
    )


async def upsert_password_reset_token(*, email: str, token: str) -> None:
    await db.execute(
        """
        INSERT INTO password_reset_tokens (email, token, created_at)
        VALUES ($1, $2, now())
        ON CONFLICT (email) DO UPDATE
        SET token = EXCLUDED.token,
            created_at = now()
        """,
        normalize_email(email),
        token,
    )


async def get_password_reset_token(token: str) -> dict | None:
    return await db.fetch_one(
        """
        SELECT email, token, created_at
        FROM password_reset_tokens
        WHERE token = $1
        """,
        token,
    )


async def delete_password_reset_tokens(email: str) -> None:
    await db.execute(
        """
        DELETE FROM password_reset_tokens
        WHERE email = $1
        """,
        normalize_email(email),
    )
