"""
Product business logic.

Validation happens in three passes, all before anything is written:
1. field rules (`schemas.ProductPayload`) plus the required image on create
2. referenced category / sub category / brand / color must exist
3. the image itself (type, size) while it is stored
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from fastapi import UploadFile

from core import presenters, resources, storage
from core.errors import ValidationFailed, validate_payload

from . import repository, schemas

IMAGE_FOLDER = "products"
IMAGE_EXTENSIONS = frozenset({".jpeg", ".jpg", ".png", ".webp"})

# (payload field, table, message)
_REFERENCES = (
    ("category_id", "categories", "The selected category does not exist."),
    ("sub_category_id", "sub_categories", "The selected subcategory does not exist."),
    ("brand_id", "brands", "The selected brand does not exist."),
    ("color_id", "colors", "The selected color does not exist."),
)

logger = logging.getLogger(__name__)


def _related_name(row: dict, key: str) -> str:
    value = row.get(key)
    return str(value) if value is not None else presenters.NOT_AVAILABLE


def present(row: dict) -> dict:
    compare_price = presenters.money(row.get("compare_price"))
    return {
        "id": int(row["id"]),
        "slug": str(row["slug"]),
        "name": str(row["name"]),
        "status": str(row["status"]),
        "image": presenters.image_url(row.get("image")),
        "description": str(row["description"]),
        "price": presenters.money(row["price"]),
        "compare_price": compare_price if compare_price is not None else presenters.NOT_AVAILABLE,
        "is_featured": str(row["is_featured"]),
        "category": row.get("category_name"),
        "sub_category": _related_name(row, "sub_category_name"),
        "brand": _related_name(row, "brand_name"),
        "color": _related_name(row, "color_name"),
        "category_id": row.get("category_id"),
        "sub_category_id": row.get("sub_category_id"),
        "brand_id": row.get("brand_id"),
        "color_id": row.get("color_id"),
        **presenters.timestamps(row),
    }


async def _check_references(payload: schemas.ProductPayload) -> None:
    errors: dict[str, list[str]] = {}
    for field, table, message in _REFERENCES:
        value = getattr(payload, field)
        if value is None:
            continue
        if not await resources.id_exists(table, value):
            errors[field] = [message]
    if errors:
        raise ValidationFailed(errors)


def _columns(payload: schemas.ProductPayload) -> dict[str, Any]:
    return {
        "name": payload.name,
        "description": payload.description,
        "price": payload.price,
        "compare_price": payload.compare_price,
        "is_featured": payload.is_featured,
        "status": payload.status,
        "category_id": payload.category_id,
        "sub_category_id": payload.sub_category_id,
        "brand_id": payload.brand_id,
        "color_id": payload.color_id,
    }


async def create(form: Mapping[str, Any], image: UploadFile | None) -> dict:
    missing_image = {} if storage.has_upload(image) else {"image": ["The image field is required."]}
    payload = validate_payload(schemas.ProductPayload, form, extra_errors=missing_image)
    await _check_references(payload)

    path = await storage.store_image(image, IMAGE_FOLDER, allowed_extensions=IMAGE_EXTENSIONS)
    slug = await resources.new_slug(repository.PRODUCT)
    try:
        await repository.insert_product(slug=slug, image=path, **_columns(payload))
    except Exception:
        storage.delete_file(path)
        raise

    logger.info("product_created slug=%s category_id=%s", slug, payload.category_id)
    return await resources.get_or_404(repository.PRODUCT, slug)


async def update(slug: str, form: Mapping[str, Any], image: UploadFile | None) -> dict:
    current = await resources.get_or_404(repository.PRODUCT, slug)
    payload = validate_payload(schemas.ProductPayload, form)
    await _check_references(payload)

    old_path = current.get("image")
    new_path = None
    if storage.has_upload(image):
        new_path = await storage.store_image(image, IMAGE_FOLDER, allowed_extensions=IMAGE_EXTENSIONS)

    try:
        await repository.update_product(
            int(current["id"]),
            image=new_path or old_path,
            **_columns(payload),
        )
    except Exception:
        storage.delete_file(new_path)
        raise

    if new_path:
        storage.delete_file(old_path)

    logger.info("product_updated slug=%s image_replaced=%s", slug, bool(new_path))
    return await resources.get_or_404(repository.PRODUCT, slug)
