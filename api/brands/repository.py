"""
Brand persistence (raw SQL).
"""

from __future__ import annotations

from core import listing, resources

BRAND = resources.Resource(
    label="Brand",
    table="brands",
    listing=listing.Listing(
        alias="b",
        from_sql="brands b",
        columns_sql="b.id, b.slug, b.name, b.status, b.created_at, b.updated_at",
        search_columns=("b.name", "b.status"),
        sort_columns={
            "name": "b.name",
            "status": "b.status",
            "updated_at": "b.updated_at",
        },
    ),
    cascade_images_sql="""
        SELECT p.image
        FROM products p
        WHERE p.brand_id = ANY($1::bigint[])
    """,
)

