"""
Product persistence (raw SQL).

Products are read joined with their category (required) and optional sub
category, brand and color, so list responses carry related names and can
sort by them without ambiguous column names.
"""

from __future__ import annotations

from decimal import Decimal

from core import db, listing, resources

PRODUCT = resources.Resource(
    label="Product",
    table="products",
    listing=listing.Listing(
        alias="p",
        from_sql="""
            products p
            JOIN categories c ON c.id = p.category_id
            LEFT JOIN sub_categories s ON s.id = p.sub_category_id
            LEFT JOIN brands b ON b.id = p.brand_id
            LEFT JOIN colors co ON co.id = p.color_id
        """,
        columns_sql="""
            p.id, p.slug, p.name, p.description, p.price, p.compare_price,
            p.image, p.is_featured, p.status,
            p.category_id, p.sub_category_id, p.brand_id, p.color_id,
            c.name AS category_name,
            s.name AS sub_category_name,
            b.name AS brand_name,
            co.name AS color_name,
            p.created_at, p.updated_at
        """,
        search_columns=("p.name", "p.status", "p.price"),
        sort_columns={
            "name": "p.name",
            "status": "p.status",
            "updated_at": "p.updated_at",
            "category": "c.name",
            "sub_category": "s.name",
            "brand": "b.name",
            "color": "co.name",
            "price": "p.price",
            "compare_price": "p.compare_price",
            "is_featured": "p.is_featured",
        },
    ),
    has_image=True,
)


async def insert_product(
    *,
    slug: str,
    name: str,
    description: str,
    price: Decimal,
    compare_price: Decimal | None,
    image: str,
    is_featured: str,
    status: str,
    category_id: int,
    sub_category_id: int | None,
    brand_id: int | None,
    color_id: int | None,
) -> int:
    row = await db.fetch_one(
        """
        INSERT INTO products (
            slug, name, description, price, compare_price, image, is_featured, status,
            category_id, sub_category_id, brand_id, color_id
        )
        VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10, $11, $12)
        RETURNING id
        """,
        slug,
        name,
        description,
        price,
        compare_price,
        image,
        is_featured,
        status,
        category_id,
        sub_category_id,
        brand_id,
        color_id,
    )
    if row is None:
        raise RuntimeError("Failed to insert product.")
    return int(row["id"])


async def update_product(
    product_id: int,
    *,
    name: str,
    description: str,
    price: Decimal,
    compare_price: Decimal | None,
    image: str,
    is_featured: str,
    status: str,
    category_id: int,
    sub_category_id: int | None,
    brand_id: int | None,
    color_id: int | None,
) -> None:
    await db.execute(
        """
        UPDATE products
        SET name = $2,
            description = $3,
            price = $4,
            compare_price = $5,
            image = $6,
            is_featured = $7,
            status = $8,
            category_id = $9,
            sub_category_id = $10,
            brand_id = $11,
            color_id = $12,
            updated_at = now()
        WHERE id = $1
        """,
        product_id,
        name,
        description,
        price,
        compare_price,
        image,
        is_featured,
        status,
        category_id,
        sub_category_id,
        brand_id,
        color_id,
    )
