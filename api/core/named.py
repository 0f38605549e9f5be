"""
Catalog resources that carry only a unique name and a status.

Brands and colors share every rule: case-insensitive unique name, an
active/inactive status, and the standard list/active/show/create/update/
delete/bulk-delete endpoints. A feature package declares its `Resource`
and calls `build_router`; everything else lives here.
"""

from __future__ import annotations

import logging
from typing import Any, Sequence

import asyncpg
from fastapi import APIRouter, Depends, Response, status

from . import db, listing, presenters, resources
from .errors import ValidationFailed
from .schemas import BulkDeleteRequest, NamedPayload

NAME_TAKEN = "The name has already been taken."

RETURNING = "RETURNING id, slug, name, status, created_at, updated_at"

logger = logging.getLogger(__name__)


async def insert_named(resource: resources.Resource, *, slug: str, name: str, status: str) -> dict:
    row = await db.fetch_one(
        f"""
        INSERT INTO {resource.table} (slug, name, status)
        VALUES ($1, $2, $3)
        {RETURNING}
        """,
        slug,
        name,
        status,
    )
    if row is None:
        raise RuntimeError(f"Failed to insert {resource.label_lower}.")
    return row


async def update_named(resource: resources.Resource, row_id: int, *, name: str, status: str) -> dict:
    row = await db.fetch_one(
        f"""
        UPDATE {resource.table}
        SET name = $2,
            status = $3,
            updated_at = now()
        WHERE id = $1
        {RETURNING}
        """,
        row_id,
        name,
        status,
    )
    if row is None:
        raise RuntimeError(f"Failed to update {resource.label_lower}.")
    return row


def present(row: dict) -> dict:
    return {
        "id": int(row["id"]),
        "slug": str(row["slug"]),
        "name": str(row["name"]),
        "status": str(row["status"]),
        **presenters.timestamps(row),
    }


async def create(resource: resources.Resource, payload: NamedPayload) -> dict:
    if await resources.name_taken(resource, payload.name):
        raise ValidationFailed.single("name", NAME_TAKEN)

    try:
        row = await insert_named(
            resource,
            slug=await resources.new_slug(resource),
            name=payload.name,
            status=payload.status,
        )
    except asyncpg.UniqueViolationError as exc:
        raise ValidationFailed.single("name", NAME_TAKEN) from exc

    logger.info("%s_created slug=%s", resource.label_lower, row["slug"])
    return row


async def update(resource: resources.Resource, slug: str, payload: NamedPayload) -> dict:
    current = await resources.get_or_404(resource, slug)
    row_id = int(current["id"])
    if await resources.name_taken(resource, payload.name, exclude_id=row_id):
        raise ValidationFailed.single("name", NAME_TAKEN)

    try:
        row = await update_named(resource, row_id, name=payload.name, status=payload.status)
    except asyncpg.UniqueViolationError as exc:
        raise ValidationFailed.single("name", NAME_TAKEN) from exc

    logger.info("%s_updated slug=%s", resource.label_lower, slug)
    return row


def build_router(
    resource: resources.Resource,
    prefix: str,
    *,
    dependencies: Sequence[Any] | None = None,
) -> APIRouter:
    """
    Full CRUD router for a name/status resource, mounted at `prefix`.
    """
    router = APIRouter(prefix=prefix, dependencies=list(dependencies or []))
    table = resource.table

    async def list_rows(query: listing.ListQuery = Depends(listing.list_query_params)) -> dict:
        page = await resources.list_page(resource, query)
        return listing.page_payload(page, present)

    async def store_row(request: NamedPayload) -> dict:
        return {"data": present(await create(resource, request))}

    async def delete_rows(request: BulkDeleteRequest) -> Response:
        await resources.delete_many(resource, request.slugs)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    async def active_rows() -> dict:
        rows = await resources.list_active(resource)
        return {"data": [presenters.present_active(row) for row in rows]}

    async def show_row(slug: str) -> dict:
        return {"data": present(await resources.get_or_404(resource, slug))}

    async def update_row(slug: str, request: NamedPayload) -> dict:
        return {"data": present(await update(resource, slug, request))}

    async def delete_row(slug: str) -> dict[str, Any]:
        return await resources.delete_one(resource, slug)

    # `/multiple` and `/active` are registered before `/{slug}` so they win the match.
    router.add_api_route("", list_rows, methods=["GET"], name=f"list_{table}")
    router.add_api_route(
        "", store_row, methods=["POST"], status_code=status.HTTP_201_CREATED, name=f"store_{table}"
    )
    router.add_api_route(
        "/multiple",
        delete_rows,
        methods=["DELETE"],
        status_code=status.HTTP_204_NO_CONTENT,
        name=f"delete_multiple_{table}",
    )
    router.add_api_route("/active", active_rows, methods=["GET"], name=f"active_{table}")
    router.add_api_route("/{slug}", show_row, methods=["GET"], name=f"show_{table}")
    router.add_api_route("/{slug}", update_row, methods=["PUT"], name=f"update_{table}")
    router.add_api_route("/{slug}", delete_row, methods=["DELETE"], name=f"delete_{table}")
    return router
