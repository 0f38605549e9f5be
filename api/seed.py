"""
Seed demo catalog data (categories with sub categories, brands, colors).

Usage:
    DATABASE_URL=postgresql://... python api/seed.py
    python api/seed.py --only brands,colors

Rows whose name already exists (case-insensitive) are skipped, so the
script can be re-run safely.
"""

from __future__ import annotations

import argparse
import asyncio
import logging

from brands import repository as brands_repository
from categories import repository as categories_repository
from colors import repository as colors_repository
from core import db, logs, named, resources
from sub_categories import repository as sub_categories_repository

logger = logging.getLogger("seed")

CATEGORIES: dict[str, list[str]] = {
    "Electronics": ["Mobile Phones", "Laptops", "Cameras", "Headphones", "Smart Watches"],
    "Fashion": ["Men's Clothing", "Women's Clothing", "Kids' Wear", "Footwear", "Watches"],
    "Home & Kitchen": ["Furniture", "Cookware", "Home Decor", "Storage & Organization", "Bedding"],
    "Books": ["Fiction", "Non-Fiction", "Children's Books", "Textbooks", "Self Help"],
    "Beauty & Personal Care": ["Skincare", "Makeup", "Hair Care", "Fragrances", "Bath & Body"],
    "Sports & Outdoors": ["Exercise & Fitness", "Camping & Hiking", "Cycling", "Team Sports", "Water Sports"],
    "Toys & Games": ["Board Games", "Action Figures", "Educational Toys", "Dolls", "Outdoor Play"],
    "Grocery": ["Snacks", "Beverages", "Cooking Essentials", "Dairy Products", "Canned Goods"],
}

BRANDS = [
    "Apple", "Samsung", "Sony", "Nike", "Adidas", "Puma", "Dell", "HP",
    "Lenovo", "Canon", "Philips", "LG", "Levi's", "Zara", "IKEA",
]

COLORS = [
    "Black", "White", "Red", "Blue", "Green", "Yellow", "Orange", "Purple",
    "Pink", "Brown", "Gray", "Navy", "Beige", "Silver", "Gold",
]

SECTIONS = ("categories", "brands", "colors")


async def seed_categories() -> int:
    created = 0
    category = categories_repository.CATEGORY
    for name, sub_names in CATEGORIES.items():
        if await resources.name_taken(category, name):
            logger.info("seed_skip resource=category name=%r", name)
            continue

        row = await categories_repository.insert_category(
            slug=await resources.new_slug(category),
            name=name,
            status="active",
            image=None,
        )
        created += 1
        for sub_name in sub_names:
            await sub_categories_repository.insert_sub_category(
                slug=await resources.new_slug(sub_categories_repository.SUB_CATEGORY),
                name=sub_name,
                status="active",
                category_id=int(row["id"]),
            )
    return created


async def _seed_named(resource: resources.Resource, names: list[str]) -> int:
    created = 0
    for name in names:
        if await resources.name_taken(resource, name):
            logger.info("seed_skip resource=%s name=%r", resource.label_lower, name)
            continue
        await named.insert_named(
            resource, slug=await resources.new_slug(resource), name=name, status="active"
        )
        created += 1
    return created


async def run(sections: tuple[str, ...] = SECTIONS) -> dict[str, int]:
    counts: dict[str, int] = {}
    await db.init_pool()
    try:
        if "categories" in sections:
            counts["categories"] = await seed_categories()
        if "brands" in sections:
            counts["brands"] = await _seed_named(brands_repository.BRAND, BRANDS)
        if "colors" in sections:
            counts["colors"] = await _seed_named(colors_repository.COLOR, COLORS)
    finally:
        await db.close_pool()
    return counts


def _parse_sections(raw: str) -> tuple[str, ...]:
    picked = tuple(part.strip() for part in raw.split(",") if part.strip())
    unknown = [part for part in picked if part not in SECTIONS]
    if unknown:
        raise argparse.ArgumentTypeError(f"unknown section(s): {', '.join(unknown)}")
    return picked or SECTIONS


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Seed demo catalog data.")
    parser.add_argument(
        "--only",
        type=_parse_sections,
        default=SECTIONS,
        help="Comma-separated subset of: categories,brands,colors",
    )
    args = parser.parse_args(argv)

    logs.configure_logging()
    counts = asyncio.run(run(args.only))
    for section, count in counts.items():
        logger.info("seed_done section=%s created=%d", section, count)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
