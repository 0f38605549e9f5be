"""
Client-side auth state: the bearer token and the signed-in user.
"""

from __future__ import annotations

import logging
from typing import Literal

import httpx

from .api import ApiClient, ApiError

logger = logging.getLogger(__name__)

LoginResult = Literal["ok", "unverified"]


class AuthStore:
    def __init__(self, api: ApiClient) -> None:
        self.api = api
        self.user: dict | None = None

    @property
    def token(self) -> str | None:
        return self.api.token

    @property
    def is_authenticated(self) -> bool:
        return bool(self.api.token)

    def _clear(self) -> None:
        self.api.token = None
        self.user = None

    async def login(self, email: str, password: str) -> LoginResult:
        """
        Sign in and load the user. An unverified account is not an error
        here: the server has just re-sent the verification mail, so the
        caller should route to the verification notice instead.
        """
        try:
            payload = await self.api.post("/login", json={"email": email, "password": password})
        except ApiError as exc:
            if exc.status_code == 403 and exc.message == "email_not_verified":
                return "unverified"
            raise

        self.api.token = payload["access_token"]
        await self.fetch_user()
        return "ok"

    async def register(
        self,
        *,
        name: str,
        email: str,
        password: str,
        password_confirmation: str,
    ) -> dict:
        payload = await self.api.post(
            "/register",
            json={
                "name": name,
                "email": email,
                "password": password,
                "password_confirmation": password_confirmation,
            },
        )
        self.api.token = payload["access_token"]
        return payload

    async def fetch_user(self) -> dict | None:
        try:
            self.user = await self.api.get("/user")
        except ApiError:
            await self.logout()
        return self.user

    async def logout(self) -> None:
        try:
            if self.api.token:
                await self.api.post("/logout")
        except (ApiError, httpx.HTTPError):
            logger.warning("logout_request_failed")
        finally:
            self._clear()

    async def resend_verification(self, email: str) -> dict:
        return await self.api.post("/resend-verification-email", json={"email": email})

    async def send_password_reset_link(self, email: str) -> dict:
        return await self.api.post("/send-reset-password-email", json={"email": email})

    async def reset_password(self, token: str, *, password: str, password_confirmation: str) -> dict:
        return await self.api.post(
            f"/reset-password/{token}",
            json={"password": password, "password_confirmation": password_confirmation},
        )
