# tests/catalog/test_named_resources.py
from unittest.mock import AsyncMock

import pytest

from core import db, named, resources
from main import app
from sub_categories import repository as sub_categories_repository
from tests.factories import make_row


def _operations(prefix: str) -> dict[tuple[str, str], dict]:
    """Operations documented under `prefix`, keyed by (METHOD, path)."""
    paths = app.openapi()["paths"]
    return {
        (method.upper(), path): operation
        for path, item in paths.items()
        if path == prefix or path.startswith(prefix + "/")
        for method, operation in item.items()
    }


@pytest.mark.parametrize(
    "prefix, tag",
    [
        ("/api/category", "categories"),
        ("/api/sub_category", "sub categories"),
        ("/api/brands", "brands"),
        ("/api/colors", "colors"),
        ("/api/products", "products"),
    ],
)
def test_resource_routes_registered_under_api_prefix(prefix, tag):
    operations = _operations(prefix)
    signatures = set(operations)

    assert ("GET", prefix) in signatures
    assert ("POST", prefix) in signatures
    assert ("GET", f"{prefix}/active") in signatures
    assert ("DELETE", f"{prefix}/multiple") in signatures
    assert ("PUT", f"{prefix}/{{slug}}") in signatures
    assert ("DELETE", f"{prefix}/{{slug}}") in signatures
    for (method, path), operation in operations.items():
        assert tag in operation["tags"], f"{method} {path} is missing the '{tag}' tag."


def test_catalog_requires_bearer_token(anonymous_client):
    resp = anonymous_client.get("/api/brands")

    assert resp.status_code == 401
    assert resp.json() == {"message": "Unauthenticated."}


def test_health(anonymous_client):
    assert anonymous_client.get("/health").json() == {"status": "ok"}


def test_list_brands_paginates(client, monkeypatch):
    fetch_all = AsyncMock(return_value=[make_row(id=4, slug="Brand004", name="Nike")])
    monkeypatch.setattr(db, "fetch_all", fetch_all)
    monkeypatch.setattr(db, "fetch_value", AsyncMock(return_value=5))

    resp = client.get("/api/brands", params={"page": 3, "per_page": 2, "search": "ni"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["meta"] == {"current_page": 3, "last_page": 3, "per_page": 2, "total": 5}
    assert body["data"][0]["name"] == "Nike"
    assert set(body["data"][0]) == {"id", "slug", "name", "status", "created_at", "updated_at"}
    assert fetch_all.await_args.args[1:] == ("ni", 2, 4)


def test_list_colors_all(client, monkeypatch):
    rows = [make_row(id=i, slug=f"Color00{i}", name=f"C{i}") for i in range(1, 4)]
    monkeypatch.setattr(db, "fetch_all", AsyncMock(return_value=rows))
    fetch_value = AsyncMock()
    monkeypatch.setattr(db, "fetch_value", fetch_value)

    resp = client.get("/api/colors", params={"per_page": "all"})

    assert resp.json()["meta"] == {"current_page": 1, "last_page": 1, "per_page": 3, "total": 3}
    fetch_value.assert_not_awaited()


def test_create_brand(client, monkeypatch):
    monkeypatch.setattr(resources, "name_taken", AsyncMock(return_value=False))
    monkeypatch.setattr(resources, "new_slug", AsyncMock(return_value="Brand001"))
    insert = AsyncMock(side_effect=lambda resource, **kw: make_row(id=7, **kw))
    monkeypatch.setattr(named, "insert_named", insert)

    resp = client.post("/api/brands", json={"name": "  Puma ", "status": "active"})

    assert resp.status_code == 201
    assert resp.json()["data"]["slug"] == "Brand001"
    assert insert.await_args.args[0].table == "brands"
    assert insert.await_args.kwargs["name"] == "Puma"


def test_create_brand_duplicate_name(client, monkeypatch):
    monkeypatch.setattr(resources, "name_taken", AsyncMock(return_value=True))

    resp = client.post("/api/brands", json={"name": "Puma", "status": "active"})

    assert resp.status_code == 422
    assert resp.json() == {
        "message": "Validation failed",
        "errors": {"name": ["The name has already been taken."]},
    }



@pytest.mark.parametrize(
    "path, body",
    [
        ("/api/brands", {"name": "   ", "status": "active"}),
        ("/api/colors", {"name": "\t", "status": "active"}),
        ("/api/sub_category", {"name": "  ", "status": "active", "category_id": 3}),
    ],
)
def test_whitespace_only_name_is_required(client, monkeypatch, path, body):
    insert = AsyncMock()
    monkeypatch.setattr(named, "insert_named", insert)
    monkeypatch.setattr(sub_categories_repository, "insert_sub_category", insert)

    resp = client.post(path, json=body)

    assert resp.status_code == 422
    assert resp.json()["errors"] == {"name": ["The name field is required."]}
    insert.assert_not_awaited()


def test_whitespace_only_name_rejected_on_update(client, monkeypatch):
    update = AsyncMock()
    monkeypatch.setattr(named, "update_named", update)

    resp = client.put("/api/colors/Color002", json={"name": "  ", "status": "active"})

    assert resp.status_code == 422
    assert resp.json()["errors"] == {"name": ["The name field is required."]}
    update.assert_not_awaited()


def test_name_is_free_again_after_delete(client, monkeypatch):
    name_taken = AsyncMock(side_effect=[True, False])
    monkeypatch.setattr(resources, "name_taken", name_taken)
    monkeypatch.setattr(resources, "new_slug", AsyncMock(return_value="Brand002"))
    delete_one = AsyncMock(return_value={"message": "Brand deleted successfully."})
    monkeypatch.setattr(resources, "delete_one", delete_one)
    insert = AsyncMock(side_effect=lambda resource, **kw: make_row(id=8, **kw))
    monkeypatch.setattr(named, "insert_named", insert)

    first = client.post("/api/brands", json={"name": "Puma", "status": "active"})
    deleted = client.delete("/api/brands/Brand001")
    second = client.post("/api/brands", json={"name": "Puma", "status": "active"})

    assert first.status_code == 422
    assert deleted.json() == {"message": "Brand deleted successfully."}
    assert second.status_code == 201
    assert second.json()["data"]["name"] == "Puma"
    insert.assert_awaited_once()


def test_oversized_category_id_is_a_validation_error(client, monkeypatch):
    id_exists = AsyncMock()
    monkeypatch.setattr(resources, "id_exists", id_exists)

    resp = client.post(
        "/api/sub_category",
        json={"name": "Sneakers", "status": "active", "category_id": 2**63},
    )

    assert resp.status_code == 422
    assert list(resp.json()["errors"]) == ["category_id"]
    id_exists.assert_not_awaited()


def test_oversized_page_is_not_a_server_error(client, monkeypatch):
    fetch_all = AsyncMock(return_value=[])
    monkeypatch.setattr(db, "fetch_all", fetch_all)
    monkeypatch.setattr(db, "fetch_value", AsyncMock(return_value=0))

    resp = client.get("/api/brands", params={"page": "99999999999999999999"})

    assert resp.status_code == 200
    assert all(arg <= 2**63 - 1 for arg in fetch_all.await_args.args[1:])

def test_create_color_invalid_status(client):
    resp = client.post("/api/colors", json={"name": "Red", "status": "archived"})

    assert resp.status_code == 422
    assert list(resp.json()["errors"]) == ["status"]


def test_update_color(client, monkeypatch):
    monkeypatch.setattr(
        resources, "get_or_404", AsyncMock(return_value=make_row(id=2, slug="Color002", name="Red"))
    )
    monkeypatch.setattr(resources, "name_taken", AsyncMock(return_value=False))
    update = AsyncMock(
        side_effect=lambda resource, row_id, **kw: make_row(id=row_id, slug="Color002", **kw)
    )
    monkeypatch.setattr(named, "update_named", update)

    resp = client.put("/api/colors/Color002", json={"name": "Crimson", "status": "inactive"})

    assert resp.status_code == 200
    assert resp.json()["data"]["name"] == "Crimson"
    assert resp.json()["data"]["status"] == "inactive"


def test_create_sub_category_requires_category(client):
    resp = client.post("/api/sub_category", json={"name": "Sneakers", "status": "active"})

    assert resp.status_code == 422
    assert resp.json()["errors"] == {"category_id": ["The category id field is required."]}


def test_create_sub_category_unknown_category(client, monkeypatch):
    monkeypatch.setattr(resources, "id_exists", AsyncMock(return_value=False))

    resp = client.post(
        "/api/sub_category",
        json={"name": "Sneakers", "status": "active", "category_id": 42},
    )

    assert resp.status_code == 422
    assert resp.json()["errors"] == {"category_id": ["The selected category id is invalid."]}


def test_create_sub_category(client, monkeypatch):
    monkeypatch.setattr(resources, "id_exists", AsyncMock(return_value=True))
    monkeypatch.setattr(resources, "new_slug", AsyncMock(return_value="SubCat01"))
    monkeypatch.setattr(
        resources,
        "get_or_404",
        AsyncMock(
            return_value=make_row(
                id=9, slug="SubCat01", name="Sneakers", category_id=3, category_name="Shoes"
            )
        ),
    )
    insert = AsyncMock(return_value=9)
    monkeypatch.setattr(sub_categories_repository, "insert_sub_category", insert)

    resp = client.post(
        "/api/sub_category",
        json={"name": "Sneakers", "status": "active", "category_id": 3},
    )

    assert resp.status_code == 201
    data = resp.json()["data"]
    assert data["category"] == "Shoes"
    assert data["category_id"] == 3
    insert.assert_awaited_once_with(slug="SubCat01", name="Sneakers", status="active", category_id=3)
