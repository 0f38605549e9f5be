"""
Async HTTP client for the admin API.

Wraps `httpx.AsyncClient` with the API base URL (including the `/api`
prefix) and the bearer token. Every non-2xx response raises `ApiError`
with the decoded JSON body.
"""

from __future__ import annotations

from typing import Any

import httpx


class ApiError(RuntimeError):
    def __init__(self, status_code: int, payload: Any) -> None:
        self.status_code = status_code
        self.payload = payload if isinstance(payload, dict) else {"message": str(payload or "")}
        super().__init__(f"{status_code} {self.message}")

    @property
    def message(self) -> str:
        return str(self.payload.get("message") or "")

    @property
    def errors(self) -> dict[str, list[str]]:
        errors = self.payload.get("errors")
        return errors if isinstance(errors, dict) else {}


def _decode(resp: httpx.Response) -> Any:
    if resp.status_code == 204 or not resp.content:
        return None
    try:
        return resp.json()
    except ValueError:
        # Non-JSON bodies (proxy errors, HTML pages); keep a small snippet.
        return {"message": resp.text[:500]}


class ApiClient:
    def __init__(
        self,
        base_url: str,
        *,
        token: str | None = None,
        timeout_s: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        base_url = (base_url or "").strip()
        if not base_url:
            raise ValueError("base_url is empty.")
        self.token = token
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout_s,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def _headers(self) -> dict[str, str]:
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
        data: dict[str, Any] | None = None,
        files: dict[str, Any] | None = None,
    ) -> Any:
        resp = await self._client.request(
            method,
            path,
            params=params,
            json=json,
            data=data,
            files=files,
            headers=self._headers(),
        )
        payload = _decode(resp)
        if resp.status_code >= 400:
            raise ApiError(resp.status_code, payload)
        return payload

    async def get(self, path: str, *, params: dict[str, Any] | None = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, **kwargs: Any) -> Any:
        return await self.request("POST", path, **kwargs)

    async def put(self, path: str, **kwargs: Any) -> Any:
        return await self.request("PUT", path, **kwargs)

    async def delete(self, path: str, **kwargs: Any) -> Any:
        return await self.request("DELETE", path, **kwargs)
