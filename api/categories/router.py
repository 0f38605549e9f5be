"""
Category API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, File, Form, Response, UploadFile, status

from auth import dependencies as auth_dependencies
from core import listing, presenters, resources
from core.schemas import BulkDeleteRequest

from . import repository, service

router = APIRouter(
    prefix="/category",
    dependencies=[Depends(auth_dependencies.get_current_user)],
)


@router.get("")
async def list_categories(query: listing.ListQuery = Depends(listing.list_query_params)) -> dict:
    page = await resources.list_page(repository.CATEGORY, query)
    return listing.page_payload(page, service.present)


@router.post("", status_code=status.HTTP_201_CREATED)
async def store_category(
    name: str | None = Form(None),
    status_: str | None = Form(None, alias="status"),
    image: UploadFile | None = File(None),
) -> dict:
    row = await service.create({"name": name, "status": status_}, image)
    return {"data": service.present(row)}


@router.delete("/multiple", status_code=status.HTTP_204_NO_CONTENT)
async def delete_multiple_categories(request: BulkDeleteRequest) -> Response:
    await resources.delete_many(repository.CATEGORY, request.slugs)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/active")
async def active_categories() -> dict:
    rows = await resources.list_active(repository.CATEGORY)
    return {"data": [presenters.present_active(row) for row in rows]}


@router.get("/{slug}")
async def show_category(slug: str) -> dict:
    row = await resources.get_or_404(repository.CATEGORY, slug)
    return {"data": service.present(row)}


@router.put("/{slug}")
async def update_category(
    slug: str,
    name: str | None = Form(None),
    status_: str | None = Form(None, alias="status"),
    image: UploadFile | None = File(None),
) -> dict:
    row = await service.update(slug, {"name": name, "status": status_}, image)
    return {"data": service.present(row)}


@router.delete("/{slug}")
async def delete_category(slug: str) -> dict:
    return await resources.delete_one(repository.CATEGORY, slug)
