# tests/core/test_named.py
from unittest.mock import AsyncMock

import asyncpg
import pytest

from brands.repository import BRAND
from colors.repository import COLOR
from core import db, named, resources
from core.errors import ValidationFailed
from core.schemas import NamedPayload
from tests.factories import make_row


@pytest.mark.asyncio
async def test_insert_named_targets_the_resource_table(monkeypatch):
    fetch_one = AsyncMock(return_value=make_row(slug="Color001", name="Red"))
    monkeypatch.setattr(db, "fetch_one", fetch_one)

    row = await named.insert_named(COLOR, slug="Color001", name="Red", status="active")

    assert row["name"] == "Red"
    sql = fetch_one.await_args.args[0]
    assert "INSERT INTO colors (slug, name, status)" in sql
    assert fetch_one.await_args.args[1:] == ("Color001", "Red", "active")


@pytest.mark.asyncio
async def test_unique_violation_race_is_reported_on_name(monkeypatch):
    monkeypatch.setattr(resources, "name_taken", AsyncMock(return_value=False))
    monkeypatch.setattr(resources, "new_slug", AsyncMock(return_value="Brand001"))
    monkeypatch.setattr(
        named, "insert_named", AsyncMock(side_effect=asyncpg.UniqueViolationError("dup"))
    )

    with pytest.raises(ValidationFailed) as excinfo:
        await named.create(BRAND, NamedPayload(name="Nike", status="active"))

    assert excinfo.value.errors == {"name": [named.NAME_TAKEN]}


def test_payload_strips_surrounding_whitespace():
    assert NamedPayload(name="  Navy\n", status="inactive").name == "Navy"


def test_present_hides_internal_columns():
    row = make_row(id=3, slug="Brand003", name="Sony", extra="hidden")

    assert set(named.present(row)) == {"id", "slug", "name", "status", "created_at", "updated_at"}
