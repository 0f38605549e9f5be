"""
Sub category business logic.
"""

from __future__ import annotations

import logging

from core import presenters, resources
from core.errors import ValidationFailed

from . import repository, schemas

logger = logging.getLogger(__name__)


def present(row: dict) -> dict:
    return {
        "id": int(row["id"]),
        "slug": str(row["slug"]),
        "name": str(row["name"]),
        "status": str(row["status"]),
        "category_id": int(row["category_id"]),
        "category": row.get("category_name"),
        **presenters.timestamps(row),
    }


async def _ensure_category_exists(category_id: int) -> None:
    if not await resources.id_exists("categories", category_id):
        raise ValidationFailed.single("category_id", "The selected category id is invalid.")


async def create(payload: schemas.SubCategoryPayload) -> dict:
    await _ensure_category_exists(payload.category_id)

    slug = await resources.new_slug(repository.SUB_CATEGORY)
    await repository.insert_sub_category(
        slug=slug,
        name=payload.name,
        status=payload.status,
        category_id=payload.category_id,
    )
    logger.info("sub_category_created slug=%s category_id=%s", slug, payload.category_id)
    return await resources.get_or_404(repository.SUB_CATEGORY, slug)


async def update(slug: str, payload: schemas.SubCategoryPayload) -> dict:
    current = await resources.get_or_404(repository.SUB_CATEGORY, slug)
    await _ensure_category_exists(payload.category_id)

    await repository.update_sub_category(
        int(current["id"]),
        name=payload.name,
        status=payload.status,
        category_id=payload.category_id,
    )
    logger.info("sub_category_updated slug=%s", slug)
    return await resources.get_or_404(repository.SUB_CATEGORY, slug)
