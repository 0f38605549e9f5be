"""
Sub category API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status

from auth import dependencies as auth_dependencies
from core import listing, presenters, resources
from core.schemas import BulkDeleteRequest

from . import repository, schemas, service

router = APIRouter(
    prefix="/sub_category",
    dependencies=[Depends(auth_dependencies.get_current_user)],
)


@router.get("")
async def list_sub_categories(query: listing.ListQuery = Depends(listing.list_query_params)) -> dict:
    page = await resources.list_page(repository.SUB_CATEGORY, query)
    return listing.page_payload(page, service.present)


@router.post("", status_code=status.HTTP_201_CREATED)
async def store_sub_category(request: schemas.SubCategoryPayload) -> dict:
    row = await service.create(request)
    return {"data": service.present(row)}


@router.delete("/multiple", status_code=status.HTTP_204_NO_CONTENT)
async def delete_multiple_sub_categories(request: BulkDeleteRequest) -> Response:
    await resources.delete_many(repository.SUB_CATEGORY, request.slugs)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/active")
async def active_sub_categories() -> dict:
    rows = await resources.list_active(repository.SUB_CATEGORY)
    return {"data": [presenters.present_active(row) for row in rows]}


@router.get("/{slug}")
async def show_sub_category(slug: str) -> dict:
    row = await resources.get_or_404(repository.SUB_CATEGORY, slug)
    return {"data": service.present(row)}


@router.put("/{slug}")
async def update_sub_category(slug: str, request: schemas.SubCategoryPayload) -> dict:
    row = await service.update(slug, request)
    return {"data": service.present(row)}


@router.delete("/{slug}")
async def delete_sub_category(slug: str) -> dict:
    return await resources.delete_one(repository.SUB_CATEGORY, slug)
