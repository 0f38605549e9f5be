"""
Auth business logic.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import asyncpg
from fastapi import HTTPException, status

from core import mailer
from core.errors import ValidationFailed

from . import emails, repository, schemas, security

TOKEN_NAME = "auth_token"
EMAIL_TAKEN = "The email has already been taken."
BAD_CREDENTIALS = "The provided credentials are incorrect."
UNKNOWN_EMAIL = "The selected email is invalid."

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Session:
    user: dict
    token: dict


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _to_user_response(user_row: dict) -> schemas.UserResponse:
    return schemas.UserResponse(
        id=int(user_row["id"]),
        name=str(user_row["name"]),
        email=str(user_row["email"]),
        email_verified_at=user_row.get("email_verified_at"),
        created_at=user_row["created_at"],
        updated_at=user_row["updated_at"],
    )


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _confirmation_error(password: str, confirmation: str | None, field: str) -> dict[str, list[str]]:
    if confirmation != password:
        return {field: [f"The {field.replace('_', ' ')} field confirmation does not match."]}
    return {}


async def _issue_access_token(user_row: dict) -> str:
    token_id = security.build_token_id()
    access_token, expires_epoch = security.build_access_token(
        user_id=int(user_row["id"]),
        email=str(user_row["email"]),
        token_id=token_id,
    )
    expires_at = (
        datetime.fromtimestamp(expires_epoch, tz=timezone.utc) if expires_epoch is not None else None
    )
    await repository.insert_access_token(
        user_id=int(user_row["id"]),
        token_hash=security.hash_token_id(token_id),
        name=TOKEN_NAME,
        expires_at=expires_at,
    )
    return access_token


async def _send_logged(mail: mailer.Mail, *, event: str) -> None:
    # Account flows still succeed; the user can ask for the mail again.
    try:
        await mailer.send(mail)
    except mailer.MailError:
        logger.exception("%s_mail_failed to=%s", event, mail.to)


async def _send_or_fail(mail: mailer.Mail, *, failure_message: str) -> None:
    try:
        await mailer.send(mail)
    except mailer.MailError as exc:
        logger.exception("mail_failed to=%s subject=%r", mail.to, mail.subject)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"message": failure_message, "error": str(exc), "status": "failed"},
        ) from exc


async def register(payload: schemas.RegisterRequest) -> schemas.TokenResponse:
    errors: dict[str, list[str]] = {}
    if await repository.get_user_by_email(payload.email) is not None:
        errors["email"] = [EMAIL_TAKEN]
    errors.update(_confirmation_error(payload.password, payload.password_confirmation, "password"))
    if errors:
        raise ValidationFailed(errors)

    verification_token = security.build_verification_token()
    try:
        user_row = await repository.create_user(
            name=payload.name,
            email=payload.email,
            password_hash=security.hash_password(payload.password),
            verification_token=verification_token,
        )
    except asyncpg.UniqueViolationError as exc:
        raise ValidationFailed.single("email", EMAIL_TAKEN) from exc

    await _send_logged(
        emails.verification_mail(
            email=str(user_row["email"]),
            name=str(user_row["name"]),
            token=verification_token,
        ),
        event="registration",
    )

    access_token = await _issue_access_token(user_row)
    logger.info("user_registered user_id=%s", user_row["id"])
    return schemas.TokenResponse(
        message="User registered successfully. Please verify your email.",
        access_token=access_token,
    )


async def login(payload: schemas.LoginRequest) -> schemas.LoginResponse:
    user_row = await repository.get_user_by_email(payload.email)
    if user_row is None or not security.verify_password(
        payload.password, str(user_row.get("password_hash") or "")
    ):
        raise ValidationFailed.single("email", BAD_CREDENTIALS)

    if user_row.get("email_verified_at") is None:
        token = user_row.get("verification_token")
        if not token:
            token = security.build_verification_token()
            await repository.set_verification_token(int(user_row["id"]), token)
        await _send_logged(
            emails.verification_mail(
                email=str(user_row["email"]),
                name=str(user_row["name"]),
                token=str(token),
            ),
            event="login_verification",
        )
        logger.info("login_blocked_unverified user_id=%s", user_row["id"])
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={"message": "email_not_verified"},
        )

    access_token = await _issue_access_token(user_row)
    return schemas.LoginResponse(access_token=access_token, user=_to_user_response(user_row))


async def verify_email(token: str) -> dict:
    user_row = await repository.get_user_by_verification_token(token)
    if user_row is None:
        raise HTTPException(
            status_code=status.HTTP_410_GONE,
            detail={
                "message": "Verification link has expired or is invalid.",
                "status": "expired",
            },
        )

    if user_row.get("email_verified_at") is not None:
        return {"message": "Email already verified.", "status": "already_verified"}

    await repository.mark_email_verified(int(user_row["id"]))
    access_token = await _issue_access_token(user_row)
    logger.info("email_verified user_id=%s", user_row["id"])
    return schemas.VerifyEmailResponse(
        message="Email verified successfully.",
        access_token=access_token,
    ).model_dump()


async def resend_verification_email(payload: schemas.EmailRequest) -> dict:
    user_row = await repository.get_user_by_email(payload.email)
    if user_row is None:
        raise ValidationFailed.single("email", UNKNOWN_EMAIL)

    if user_row.get("email_verified_at") is not None:
        return {"message": "Email is already verified.", "status": "already_verified"}

    token = security.build_verification_token()
    await repository.set_verification_token(int(user_row["id"]), token)
    await _send_or_fail(
        emails.verification_mail(
            email=str(user_row["email"]),
            name=str(user_row["name"]),
            token=token,
        ),
        failure_message="Failed to send verification email.",
    )
    return {
        "message": "A fresh verification link has been sent to your email.",
        "status": "success",
    }


async def change_password(session: Session, payload: schemas.ChangePasswordRequest) -> schemas.TokenResponse:
    user_row = session.user
    if not security.verify_password(payload.current_password, str(user_row.get("password_hash") or "")):
        raise ValidationFailed.single("current_password", "Current password is incorrect")

    errors = _confirmation_error(payload.new_password, payload.new_password_confirmation, "new_password")
    if errors:
        raise ValidationFailed(errors)

    user_id = int(user_row["id"])
    await repository.update_password(user_id, security.hash_password(payload.new_password))
    await repository.delete_access_tokens_for_user(user_id)
    access_token = await _issue_access_token(user_row)
    logger.info("password_changed user_id=%s", user_id)
    return schemas.TokenResponse(message="Password changed successfully", access_token=access_token)


async def logout(session: Session) -> dict:
    await repository.delete_access_token(int(session.token["id"]))
    return {"message": "Logged out successfully"}


async def send_password_reset_link(payload: schemas.EmailRequest) -> dict:
    user_row = await repository.get_user_by_email(payload.email)
    if user_row is None:
        raise ValidationFailed.single("email", UNKNOWN_EMAIL)

    email = str(user_row["email"])
    token = security.build_reset_token()
    await repository.upsert_password_reset_token(email=email, token=token)
    await _send_or_fail(
        emails.password_reset_mail(
            email=email,
            token=token,
            ttl_minutes=security.password_reset_ttl_minutes(),
        ),
        failure_message="Failed to send password reset link",
    )
    return {"message": "Password reset link sent to your email", "status": "success"}


async def reset_password(token: str, payload: schemas.ResetPasswordRequest) -> dict:
    cutoff = _utc_now() - timedelta(minutes=security.password_reset_ttl_minutes())
    await repository.purge_password_reset_tokens(created_before=cutoff)

    errors = _confirmation_error(payload.password, payload.password_confirmation, "password")
    if errors:
        raise ValidationFailed(errors)

    reset_row = await repository.get_password_reset_token(token)
    created_at = (reset_row or {}).get("created_at")
    if reset_row is None or not isinstance(created_at, datetime) or created_at <= cutoff:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"message": "Token is invalid or expired", "status": "failed"},
        )

    user_row = await repository.get_user_by_email(str(reset_row["email"]))
    if user_row is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"message": "User not found", "status": "failed"},
        )

    await repository.update_password(int(user_row["id"]), security.hash_password(payload.password))
    await repository.delete_password_reset_tokens(str(user_row["email"]))
    logger.info("password_reset user_id=%s", user_row["id"])
    return {"message": "Password reset successfully", "status": "success"}


async def authenticate(access_token: str) -> Session:
    try:
        payload = security.decode_access_token(access_token)
    except security.AuthSecurityError as exc:
        raise _unauthorized(str(exc)) from exc

    subject = str(payload.get("sub") or "").strip()
    if not subject.isdigit():
        raise _unauthorized("Invalid access token subject.")

    token_row = await repository.get_access_token_by_hash(security.hash_token_id(str(payload["jti"])))
    if token_row is None or int(token_row["user_id"]) != int(subject):
        raise _unauthorized("Access token has been revoked.")

    expires_at = token_row.get("expires_at")
    if isinstance(expires_at, datetime) and expires_at <= _utc_now():
        raise _unauthorized("Access token has expired.")

    user_row = await repository.get_user_by_id(int(subject))
    if user_row is None:
        raise _unauthorized("User not found.")

    await repository.mark_access_token_used(int(token_row["id"]))
    return Session(user=user_row, token=token_row)


def me(session: Session) -> schemas.UserResponse:
    return _to_user_response(session.user)
