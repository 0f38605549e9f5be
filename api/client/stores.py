"""
Client-side state for the catalog resources.

One `ResourceStore` per resource keeps the fetched page, the record being
viewed or edited, the active options used by select inputs, and the field
errors of the last failed write.
"""

from __future__ import annotations

import logging
from typing import Any

from .api import ApiClient, ApiError

logger = logging.getLogger(__name__)

# (filename, content, content_type) as accepted by httpx `files=`.
Upload = tuple[str, bytes, str]


def _empty_pagination(per_page: int) -> dict[str, int]:
    return {"total": 0, "current_page": 1, "last_page": 1, "per_page": per_page}


class ResourceStore:
    def __init__(self, api: ApiClient, path: str, *, label: str, multipart: bool = False) -> None:
        self.api = api
        self.path = "/" + path.strip("/")
        self.label = label
        self.multipart = multipart

        self.items: list[dict] = []
        self.current: dict | None = None
        self.errors: dict[str, list[str]] = {}
        self.loading = False
        self.pagination: dict[str, int] = _empty_pagination(10)
        self.active_items: list[dict] = []

    def _record_errors(self, exc: ApiError, fallback: str) -> None:
        self.errors = exc.errors or {"general": [fallback]}

    def _body(self, fields: dict[str, Any], image: Upload | None) -> dict[str, Any]:
        if not self.multipart:
            return {"json": fields}
        data = {key: "" if value is None else str(value) for key, value in fields.items()}
        files = {"image": image} if image is not None else None
        return {"data": data, "files": files}

    async def fetch_page(
        self,
        page: int = 1,
        per_page: int = 10,
        search: str = "",
        sort_by: str = "updated_at",
        sort_direction: str = "desc",
        status: str = "",
    ) -> dict:
        params: dict[str, Any] = {
            "page": page,
            "per_page": per_page,
            "sort_by": sort_by,
            "sort_direction": sort_direction,
        }
        if search:
            params["search"] = search
        if status:
            params["status"] = status

        self.loading = True
        try:
            payload = await self.api.get(self.path, params=params)
        except ApiError:
            logger.warning("fetch_page_failed path=%s", self.path)
            self.items = []
            self.pagination = _empty_pagination(per_page)
            raise
        finally:
            self.loading = False

        meta = payload.get("meta") or {}
        self.items = list(payload.get("data") or [])
        self.pagination = {
            "total": int(meta.get("total") or 0),
            "current_page": int(meta.get("current_page") or 1),
            "last_page": int(meta.get("last_page") or 1),
            "per_page": int(meta.get("per_page") or per_page),
        }
        return payload

    async def fetch_one(self, slug: str) -> dict:
        self.loading = True
        try:
            payload = await self.api.get(f"{self.path}/{slug}")
        except ApiError as exc:
            self._record_errors(exc, f"{self.label} not found")
            self.current = None
            raise
        finally:
            self.loading = False

        self.current = payload["data"]
        return self.current

    async def create(self, fields: dict[str, Any], *, image: Upload | None = None) -> dict:
        self.loading = True
        self.errors = {}
        try:
            payload = await self.api.post(self.path, **self._body(fields, image))
        except ApiError as exc:
            self._record_errors(exc, f"Failed to create {self.label.lower()}")
            raise
        finally:
            self.loading = False

        record = payload["data"]
        self.items.insert(0, record)
        return record

    async def update(self, slug: str, fields: dict[str, Any], *, image: Upload | None = None) -> dict:
        self.loading = True
        self.errors = {}
        try:
            payload = await self.api.put(f"{self.path}/{slug}", **self._body(fields, image))
        except ApiError as exc:
            self._record_errors(exc, f"Failed to update {self.label.lower()}")
            raise
        finally:
            self.loading = False

        record = payload["data"]
        self.items = [record if item.get("slug") == slug else item for item in self.items]
        self.current = record
        return record

    async def delete(self, slug: str) -> str:
        self.loading = True
        try:
            await self.api.delete(f"{self.path}/{slug}")
        except ApiError as exc:
            self._record_errors(exc, f"Failed to delete {self.label.lower()}")
            raise
        finally:
            self.loading = False

        self._forget({slug})
        return slug

    async def delete_many(self, slugs: list[str]) -> list[str]:
        self.loading = True
        try:
            await self.api.delete(f"{self.path}/multiple", json={"slugs": slugs})
        except ApiError as exc:
            self._record_errors(exc, f"Failed to delete {self.label.lower()}s")
            raise
        finally:
            self.loading = False

        self._forget(set(slugs))
        return slugs

    async def fetch_active(self) -> list[dict]:
        self.loading = True
        try:
            payload = await self.api.get(f"{self.path}/active")
        except ApiError:
            self.active_items = []
            raise
        finally:
            self.loading = False

        self.active_items = list(payload.get("data") or [])
        return self.active_items

    def reset_errors(self) -> None:
        self.errors = {}

    def _forget(self, slugs: set[str]) -> None:
        self.items = [item for item in self.items if item.get("slug") not in slugs]
        if self.current is not None and self.current.get("slug") in slugs:
            self.current = None


def category_store(api: ApiClient) -> ResourceStore:
    return ResourceStore(api, "/category", label="Category", multipart=True)


def sub_category_store(api: ApiClient) -> ResourceStore:
    return ResourceStore(api, "/sub_category", label="Sub Category")


def brand_store(api: ApiClient) -> ResourceStore:
    return ResourceStore(api, "/brands", label="Brand")


def color_store(api: ApiClient) -> ResourceStore:
    return ResourceStore(api, "/colors", label="Color")


def product_store(api: ApiClient) -> ResourceStore:
    return ResourceStore(api, "/products", label="Product", multipart=True)
