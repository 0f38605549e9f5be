"""
Category business logic: validation, image handling, presentation.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

import asyncpg
from fastapi import UploadFile

from core import presenters, resources, storage
from core.errors import ValidationFailed, validate_payload

from . import repository, schemas

IMAGE_FOLDER = "categories"
NAME_TAKEN = "The name has already been taken."

logger = logging.getLogger(__name__)


def present(row: dict) -> dict:
    return {
        "id": int(row["id"]),
        "slug": str(row["slug"]),
        "name": str(row["name"]),
        "status": str(row["status"]),
        "image": presenters.image_url(row.get("image")),
        **presenters.timestamps(row),
    }


async def _ensure_name_free(name: str, *, exclude_id: int | None = None) -> None:
    if await resources.name_taken(repository.CATEGORY, name, exclude_id=exclude_id):
        raise ValidationFailed.single("name", NAME_TAKEN)


async def create(form: Mapping[str, Any], image: UploadFile | None) -> dict:
    missing_image = {} if storage.has_upload(image) else {"image": ["The image field is required."]}
    payload = validate_payload(schemas.CategoryPayload, form, extra_errors=missing_image)
    await _ensure_name_free(payload.name)

    path = await storage.store_image(image, IMAGE_FOLDER)
    try:
        row = await repository.insert_category(
            slug=await resources.new_slug(repository.CATEGORY),
            name=payload.name,
            status=payload.status,
            image=path,
        )
    except asyncpg.UniqueViolationError as exc:
        storage.delete_file(path)
        raise ValidationFailed.single("name", NAME_TAKEN) from exc
    except Exception:
        storage.delete_file(path)
        raise

    logger.info("category_created slug=%s", row["slug"])
    return row


async def update(slug: str, form: Mapping[str, Any], image: UploadFile | None) -> dict:
    current = await resources.get_or_404(repository.CATEGORY, slug)
    payload = validate_payload(schemas.CategoryPayload, form)
    await _ensure_name_free(payload.name, exclude_id=int(current["id"]))

    old_path = current.get("image")
    new_path = await storage.store_image(image, IMAGE_FOLDER) if storage.has_upload(image) else None
    try:
        row = await repository.update_category(
            int(current["id"]),
            name=payload.name,
            status=payload.status,
            image=new_path or old_path,
        )
    except asyncpg.UniqueViolationError as exc:
        storage.delete_file(new_path)
        raise ValidationFailed.single("name", NAME_TAKEN) from exc
    except Exception:
        storage.delete_file(new_path)
        raise

    if new_path:
        storage.delete_file(old_path)

    logger.info("category_updated slug=%s image_replaced=%s", slug, bool(new_path))
    return row
