"""
Auth API schemas (request/response models).
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field

from core.schemas import Name


class RegisterRequest(BaseModel):
    name: Name
    email: EmailStr = Field(..., max_length=255)
    password: str = Field(..., min_length=8, max_length=128)
    password_confirmation: str | None = Field(default=None, max_length=128)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)


class EmailRequest(BaseModel):
    email: EmailStr


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(..., min_length=1, max_length=128)
    new_password: str = Field(..., min_length=8, max_length=128)
    new_password_confirmation: str | None = Field(default=None, max_length=128)


class ResetPasswordRequest(BaseModel):
    password: str = Field(..., min_length=8, max_length=128)
    password_confirmation: str | None = Field(default=None, max_length=128)


class UserResponse(BaseModel):
    id: int
    name: str
    email: str
    email_verified_at: datetime | None = None
    created_at: datetime
    updated_at: datetime


class TokenResponse(BaseModel):
    message: str | None = None
    access_token: str
    token_type: str = "Bearer"


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "Bearer"
    user: UserResponse


class VerifyEmailResponse(TokenResponse):
    status: str = "success"
