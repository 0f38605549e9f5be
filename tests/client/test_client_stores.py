# tests/client/test_client_stores.py
import json

import httpx
import pytest

from client.api import ApiClient, ApiError
from client.auth import AuthStore
from client.stores import category_store, sub_category_store


def _client(handler, token=None) -> ApiClient:
    return ApiClient("http://api.test/api", token=token, transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_fetch_page_sends_query_and_stores_pagination():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["params"] = dict(request.url.params)
        seen["auth"] = request.headers.get("Authorization")
        return httpx.Response(
            200,
            json={
                "data": [{"slug": "a0000001", "name": "Books"}],
                "meta": {"current_page": 2, "last_page": 4, "per_page": 5, "total": 18},
            },
        )

    async with _client(handler, token="tok") as api:
        store = category_store(api)
        await store.fetch_page(page=2, per_page=5, search="bo", status="active")

    assert seen["path"] == "/api/category"
    assert seen["params"] == {
        "page": "2",
        "per_page": "5",
        "sort_by": "updated_at",
        "sort_direction": "desc",
        "search": "bo",
        "status": "active",
    }
    assert seen["auth"] == "Bearer tok"
    assert store.items == [{"slug": "a0000001", "name": "Books"}]
    assert store.pagination == {"total": 18, "current_page": 2, "last_page": 4, "per_page": 5}
    assert store.loading is False


@pytest.mark.asyncio
async def test_create_failure_records_field_errors():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            422,
            json={"message": "Validation failed", "errors": {"name": ["The name field is required."]}},
        )

    async with _client(handler) as api:
        store = sub_category_store(api)
        with pytest.raises(ApiError) as excinfo:
            await store.create({"name": "", "status": "active", "category_id": 1})

    assert excinfo.value.status_code == 422
    assert store.errors == {"name": ["The name field is required."]}
    assert store.items == []


@pytest.mark.asyncio
async def test_server_error_without_field_errors_becomes_general():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"message": "Failed to delete the category.", "error": "boom"})

    async with _client(handler) as api:
        store = category_store(api)
        with pytest.raises(ApiError):
            await store.delete("a0000001")

    assert store.errors == {"general": ["Failed to delete category"]}


@pytest.mark.asyncio
async def test_delete_many_sends_json_body_and_prunes_items():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        return httpx.Response(204)

    async with _client(handler) as api:
        store = category_store(api)
        store.items = [{"slug": "a0000001"}, {"slug": "b0000002"}, {"slug": "c0000003"}]
        store.current = {"slug": "b0000002"}
        await store.delete_many(["a0000001", "b0000002"])

    assert seen == {"method": "DELETE", "path": "/api/category/multiple", "body": {"slugs": ["a0000001", "b0000002"]}}
    assert store.items == [{"slug": "c0000003"}]
    assert store.current is None


@pytest.mark.asyncio
async def test_multipart_update_replaces_item():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["content_type"] = request.headers["content-type"]
        return httpx.Response(200, json={"data": {"slug": "a0000001", "name": "Novels"}})

    async with _client(handler) as api:
        store = category_store(api)
        store.items = [{"slug": "a0000001", "name": "Books"}]
        await store.update(
            "a0000001",
            {"name": "Novels", "status": "active"},
            image=("cover.png", b"\x89PNG", "image/png"),
        )

    assert seen["method"] == "PUT"
    assert seen["content_type"].startswith("multipart/form-data")
    assert store.items == [{"slug": "a0000001", "name": "Novels"}]
    assert store.current == {"slug": "a0000001", "name": "Novels"}


@pytest.mark.asyncio
async def test_login_unverified_is_not_an_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(403, json={"message": "email_not_verified"})

    async with _client(handler) as api:
        auth = AuthStore(api)
        result = await auth.login("jane@example.com", "secret123")

    assert result == "unverified"
    assert not auth.is_authenticated


@pytest.mark.asyncio
async def test_login_stores_token_and_loads_user():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/api/login":
            return httpx.Response(200, json={"access_token": "tok", "token_type": "Bearer"})
        assert request.headers["Authorization"] == "Bearer tok"
        return httpx.Response(200, json={"id": 1, "email": "jane@example.com"})

    async with _client(handler) as api:
        auth = AuthStore(api)
        assert await auth.login("jane@example.com", "secret123") == "ok"

    assert auth.token == "tok"
    assert auth.user == {"id": 1, "email": "jane@example.com"}


@pytest.mark.asyncio
async def test_login_validation_error_is_raised():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            422,
            json={"message": "Validation failed", "errors": {"email": ["The provided credentials are incorrect."]}},
        )

    async with _client(handler) as api:
        with pytest.raises(ApiError) as excinfo:
            await AuthStore(api).login("jane@example.com", "wrong")

    assert excinfo.value.errors == {"email": ["The provided credentials are incorrect."]}


@pytest.mark.asyncio
async def test_logout_clears_state_even_when_request_fails():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, text="<html>oops</html>")

    async with _client(handler, token="tok") as api:
        auth = AuthStore(api)
        auth.user = {"id": 1}
        await auth.logout()

    assert auth.token is None
    assert auth.user is None
