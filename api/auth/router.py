"""
Auth API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from . import dependencies, schemas, service

router = APIRouter()


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(request: schemas.RegisterRequest) -> schemas.TokenResponse:
    return await service.register(request)


@router.post("/login")
async def login(request: schemas.LoginRequest) -> schemas.LoginResponse:
    return await service.login(request)


@router.get("/verify-email/{token}")
async def verify_email(token: str) -> dict:
    return await service.verify_email(token)


@router.post("/resend-verification-email")
async def resend_verification_email(request: schemas.EmailRequest) -> dict:
    return await service.resend_verification_email(request)


@router.post("/send-reset-password-email")
async def send_reset_password_email(request: schemas.EmailRequest) -> dict:
    return await service.send_password_reset_link(request)


@router.post("/reset-password/{token}")
async def reset_password(token: str, request: schemas.ResetPasswordRequest) -> dict:
    return await service.reset_password(token, request)


@router.post("/logout")
async def logout(session: service.Session = Depends(dependencies.get_session)) -> dict:
    return await service.logout(session)


@router.post("/change-password")
async def change_password(
    request: schemas.ChangePasswordRequest,
    session: service.Session = Depends(dependencies.get_session),
) -> schemas.TokenResponse:
    return await service.change_password(session, request)


@router.get("/user")
async def current_user(session: service.Session = Depends(dependencies.get_session)) -> schemas.UserResponse:
    return service.me(session)
