"""
Product API endpoints.

Create and update take multipart form data so the image can travel with
the fields.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, File, Form, Response, UploadFile, status

from auth import dependencies as auth_dependencies
from core import listing, presenters, resources
from core.schemas import BulkDeleteRequest

from . import repository, service

router = APIRouter(
    prefix="/products",
    dependencies=[Depends(auth_dependencies.get_current_user)],
)


def product_form(
    name: str | None = Form(None),
    description: str | None = Form(None),
    price: str | None = Form(None),
    compare_price: str | None = Form(None),
    is_featured: str | None = Form(None),
    status_: str | None = Form(None, alias="status"),
    category_id: str | None = Form(None),
    sub_category_id: str | None = Form(None),
    brand_id: str | None = Form(None),
    color_id: str | None = Form(None),
) -> dict:
    return {
        "name": name,
        "description": description,
        "price": price,
        "compare_price": compare_price,
        "is_featured": is_featured,
        "status": status_,
        "category_id": category_id,
        "sub_category_id": sub_category_id,
        "brand_id": brand_id,
        "color_id": color_id,
    }


@router.get("")
async def list_products(query: listing.ListQuery = Depends(listing.list_query_params)) -> dict:
    page = await resources.list_page(repository.PRODUCT, query)
    return listing.page_payload(page, service.present)


@router.post("", status_code=status.HTTP_201_CREATED)
async def store_product(
    form: dict = Depends(product_form),
    image: UploadFile | None = File(None),
) -> dict:
    row = await service.create(form, image)
    return {"data": service.present(row)}


@router.delete("/multiple", status_code=status.HTTP_204_NO_CONTENT)
async def delete_multiple_products(request: BulkDeleteRequest) -> Response:
    await resources.delete_many(repository.PRODUCT, request.slugs)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/active")
async def active_products() -> dict:
    rows = await resources.list_active(repository.PRODUCT)
    return {"data": [presenters.present_active(row) for row in rows]}


@router.get("/{slug}")
async def show_product(slug: str) -> dict:
    row = await resources.get_or_404(repository.PRODUCT, slug)
    return {"data": service.present(row)}


@router.put("/{slug}")
async def update_product(
    slug: str,
    form: dict = Depends(product_form),
    image: UploadFile | None = File(None),
) -> dict:
    row = await service.update(slug, form, image)
    return {"data": service.present(row)}


@router.delete("/{slug}")
async def delete_product(slug: str) -> dict:
    return await resources.delete_one(repository.PRODUCT, slug)
