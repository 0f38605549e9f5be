"""
Category persistence (raw SQL).
"""

from __future__ import annotations

from core import db, listing, resources

_COLUMNS = "c.id, c.slug, c.name, c.status, c.image, c.created_at, c.updated_at"

CATEGORY = resources.Resource(
    label="Category",
    table="categories",
    listing=listing.Listing(
        alias="c",
        from_sql="categories c",
        columns_sql=_COLUMNS,
        search_columns=("c.name", "c.status"),
        sort_columns={
            "name": "c.name",
            "status": "c.status",
            "updated_at": "c.updated_at",
        },
    ),
    has_image=True,
    cascade_images_sql="""
        SELECT p.image
        FROM products p
        WHERE p.category_id = ANY($1::bigint[])
           OR p.sub_category_id IN (
                SELECT s.id FROM sub_categories s WHERE s.category_id = ANY($1::bigint[])
           )
    """,
)


async def insert_category(*, slug: str, name: str, status: str, image: str | None) -> dict:
    row = await db.fetch_one(
        """
        INSERT INTO categories AS c (slug, name, status, image)
        VALUES ($1, $2, $3, $4)
        RETURNING c.id, c.slug, c.name, c.status, c.image, c.created_at, c.updated_at
        """,
        slug,
        name,
        status,
        image,
    )
    if row is None:
        raise RuntimeError("Failed to insert category.")
    return row


async def update_category(category_id: int, *, name: str, status: str, image: str) -> dict:
    row = await db.fetch_one(
        """
        UPDATE categories AS c
        SET name = $2,
            status = $3,
            image = $4,
            updated_at = now()
        WHERE c.id = $1
        RETURNING c.id, c.slug, c.name, c.status, c.image, c.created_at, c.updated_at
        """,
        category_id,
        name,
        status,
        image,
    )
    if row is None:
        raise RuntimeError("Failed to update category.")
    return row
