"""
Operations shared by every catalog resource.

A `Resource` bundles the table name, its `Listing`, and how deletes reach
stored images. Feature packages declare one `Resource` in their repository
module and call these helpers for list/lookup/slug/delete; only inserts,
updates and validation rules stay resource-specific.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import partial

import asyncpg
from fastapi import HTTPException, status

from . import db, listing, slugs, storage
from .errors import ValidationFailed

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Resource:
    label: str
    table: str
    listing: listing.Listing
    has_image: bool = False
    # SELECT returning `image` of rows removed by ON DELETE CASCADE; $1 = bigint[] of ids.
    cascade_images_sql: str | None = None

    @property
    def alias(self) -> str:
        return self.listing.alias

    @property
    def label_lower(self) -> str:
        return self.label.lower()


async def list_page(resource: Resource, query: listing.ListQuery) -> listing.Page:
    sql = listing.build_list_sql(resource.listing, query)
    rows = await db.fetch_all(sql.select, *sql.select_args)
    if not query.paginated:
        return listing.Page.everything(rows)

    total = await db.fetch_value(sql.count, *sql.count_args)
    return listing.Page(
        items=rows,
        total=int(total or 0),
        current_page=query.page,
        per_page=query.per_page,
    )


async def list_active(resource: Resource) -> list[dict]:
    return await db.fetch_all(
        f"""
        SELECT id, slug, name
        FROM {resource.table}
        WHERE status = 'active'
        ORDER BY name ASC, id ASC
        """
    )


async def find_by_slug(resource: Resource, slug: str) -> dict | None:
    lst = resource.listing
    return await db.fetch_one(
        f"""
        SELECT {lst.columns_sql}
        FROM {lst.from_sql}
        WHERE {lst.alias}.slug = $1
        """,
        slug,
    )


async def get_or_404(resource: Resource, slug: str) -> dict:
    row = await find_by_slug(resource, slug)
    if row is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{resource.label} not found.",
        )
    return row


async def slug_exists(resource: Resource, slug: str) -> bool:
    row = await db.fetch_one(
        f"SELECT 1 AS ok FROM {resource.table} WHERE slug = $1 LIMIT 1",
        slug,
    )
    return row is not None


async def new_slug(resource: Resource) -> str:
    return await slugs.generate_unique_slug(partial(slug_exists, resource))


async def name_taken(resource: Resource, name: str, *, exclude_id: int | None = None) -> bool:
    row = await db.fetch_one(
        f"""
        SELECT 1 AS ok
        FROM {resource.table}
        WHERE lower(name) = lower($1)
          AND ($2::bigint IS NULL OR id <> $2::bigint)
        LIMIT 1
        """,
        name.strip(),
        exclude_id,
    )
    return row is not None


async def id_exists(table: str, row_id: int | None) -> bool:
    if row_id is None:
        return False
    row = await db.fetch_one(f"SELECT 1 AS ok FROM {table} WHERE id = $1 LIMIT 1", row_id)
    return row is not None


async def _delete_in_transaction(resource: Resource, slug_list: list[str]) -> tuple[int, list[str]]:
    """
    Delete rows by slug in one transaction. Returns the number of deleted
    rows and the image paths that became orphaned (own images plus images
    of cascaded rows).

    Unknown slugs abort the whole transaction with a validation error.
    """
    image_column = ", image" if resource.has_image else ""
    async with db.transaction() as conn:
        rows = await conn.fetch(
            f"""
            SELECT id, slug{image_column}
            FROM {resource.table}
            WHERE slug = ANY($1::text[])
            FOR UPDATE
            """,
            slug_list,
        )
        found = {row["slug"] for row in rows}
        missing = {
            f"slugs.{i}": [f"The selected slugs.{i} is invalid."]
            for i, slug in enumerate(slug_list)
            if slug not in found
        }
        if missing:
            raise ValidationFailed(missing)

        ids = [int(row["id"]) for row in rows]
        images = [row["image"] for row in rows if resource.has_image and row["image"]]
        if resource.cascade_images_sql:
            cascaded = await conn.fetch(resource.cascade_images_sql, ids)
            images.extend(row["image"] for row in cascaded if row["image"])

        await conn.execute(f"DELETE FROM {resource.table} WHERE id = ANY($1::bigint[])", ids)

    return len(ids), images


def _delete_failed(resource: Resource, exc: Exception, *, plural: bool = False) -> HTTPException:
    what = f"the {resource.label_lower} records" if plural else f"the {resource.label_lower}"
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={"message": f"Failed to delete {what}.", "error": str(exc)},
    )


async def delete_one(resource: Resource, slug: str) -> dict:
    await get_or_404(resource, slug)
    try:
        _, images = await _delete_in_transaction(resource, [slug])
    except asyncpg.PostgresError as exc:
        logger.exception("delete_failed table=%s slug=%s", resource.table, slug)
        raise _delete_failed(resource, exc) from exc

    # Files go only after the rows are committed.
    storage.delete_files(images)
    logger.info("deleted table=%s slug=%s images=%s", resource.table, slug, len(images))
    return {"message": f"{resource.label} deleted successfully."}


async def delete_many(resource: Resource, slug_list: list[str]) -> int:
    try:
        count, images = await _delete_in_transaction(resource, slug_list)
    except asyncpg.PostgresError as exc:
        logger.exception("bulk_delete_failed table=%s count=%s", resource.table, len(slug_list))
        raise _delete_failed(resource, exc, plural=True) from exc

    storage.delete_files(images)
    logger.info("bulk_deleted table=%s count=%s images=%s", resource.table, count, len(images))
    return count
