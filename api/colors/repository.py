"""
Color persistence (raw SQL).

Deleting a color keeps its products; `products.color_id` is set to NULL by
the foreign key.
"""

from __future__ import annotations

from core import listing, resources

COLOR = resources.Resource(
    label="Color",
    table="colors",
    listing=listing.Listing(
        alias="co",
        from_sql="colors co",
        columns_sql="co.id, co.slug, co.name, co.status, co.created_at, co.updated_at",
        search_columns=("co.name", "co.status"),
        sort_columns={
            "name": "co.name",
            "status": "co.status",
            "updated_at": "co.updated_at",
        },
    ),
)

