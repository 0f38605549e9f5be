"""
Sub category persistence (raw SQL).

Rows are always read joined with their parent category so responses can
carry the category name and lists can search/sort by it.
"""

from __future__ import annotations

from core import db, listing, resources

SUB_CATEGORY = resources.Resource(
    label="Sub Category",
    table="sub_categories",
    listing=listing.Listing(
        alias="s",
        from_sql="sub_categories s JOIN categories c ON c.id = s.category_id",
        columns_sql="""
            s.id, s.slug, s.name, s.status, s.category_id,
            c.name AS category_name,
            s.created_at, s.updated_at
        """,
        search_columns=("s.name", "s.status", "c.name"),
        sort_columns={
            "name": "s.name",
            "status": "s.status",
            "updated_at": "s.updated_at",
            "category": "c.name",
        },
    ),
    cascade_images_sql="""
        SELECT p.image
        FROM products p
        WHERE p.sub_category_id = ANY($1::bigint[])
    """,
)


async def insert_sub_category(*, slug: str, name: str, status: str, category_id: int) -> int:
    row = await db.fetch_one(
        """
        INSERT INTO sub_categories (slug, name, status, category_id)
        VALUES ($1, $2, $3, $4)
        RETURNING id
        """,
        slug,
        name,
        status,
        category_id,
    )
    if row is None:
        raise RuntimeError("Failed to insert sub category.")
    return int(row["id"])


async def update_sub_category(sub_category_id: int, *, name: str, status: str, category_id: int) -> None:
    await db.execute(
        """
        UPDATE sub_categories
        SET name = $2,
            status = $3,
            category_id = $4,
            updated_at = now()
        WHERE id = $1
        """,
        sub_category_id,
        name,
        status,
        category_id,
    )
