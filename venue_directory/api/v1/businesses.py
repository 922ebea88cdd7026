"""Businesses API router: filtered list, text search, detail by slug.
/api/v1/businesses"""
import math
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request

from venue_directory.api.deps import get_directory_service, get_filters
from venue_directory.api.responses import ok
from venue_directory.config import settings
from venue_directory.core.exceptions import NotFoundError
from venue_directory.schemas.base_schema import ApiResponse
from venue_directory.schemas.business_schema import BusinessDetail, BusinessPage, BusinessResult
from venue_directory.schemas.filter_schema import BusinessFilters, Pagination
from venue_directory.services.directory_service import DirectoryService
from venue_directory.services.query_builder import SORT_FIELDS

router = APIRouter()


def _page(items: List[BusinessResult], total: int, page: int, page_size: int) -> BusinessPage:
    return BusinessPage(
        items=items,
        total=total,
        page=page,
        page_size=page_size,
        pages=math.ceil(total / page_size) if total > 0 else 0,
    )


@router.get("", response_model=ApiResponse[BusinessPage])
async def list_businesses(
    request: Request,
    directory: DirectoryService = Depends(get_directory_service),
    filters: BusinessFilters = Depends(get_filters),
    sort: Optional[str] = Query(None, enum=list(SORT_FIELDS.keys())),
    order: str = Query("desc", pattern="^(asc|desc)$"),
    page: int = Query(1, ge=1),
    page_size: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
):
    """List active businesses, featured first, then by rating."""
    total = await directory.count_businesses(filters)
    items = await directory.list_businesses(filters, Pagination.from_page(page, page_size), sort=sort, order=order)
    return ok(_page(items, total, page, page_size), "Businesses listed successfully", request)


@router.get("/search", response_model=ApiResponse[BusinessPage])
async def search_businesses(
    request: Request,
    directory: DirectoryService = Depends(get_directory_service),
    filters: BusinessFilters = Depends(get_filters),
    q: Optional[str] = Query(None, description="Substring of name, description, address, city or type"),
    sort: Optional[str] = Query(None, enum=list(SORT_FIELDS.keys())),
    order: str = Query("desc", pattern="^(asc|desc)$"),
    page: int = Query(1, ge=1),
    page_size: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
):
    """Search active businesses. An empty ``q`` behaves like the plain listing."""
    total = await directory.count_search(q, filters)
    items = await directory.search_businesses(q, filters, Pagination.from_page(page, page_size), sort=sort, order=order)
    return ok(_page(items, total, page, page_size), "Businesses found", request)


@router.get("/{slug}", response_model=ApiResponse[BusinessDetail])
async def get_business(
    slug: str,
    request: Request,
    directory: DirectoryService = Depends(get_directory_service),
):
    """Get one active business with its categories, amenities and regions."""
    business = await directory.get_business_by_slug(slug)
    if business is None:
        raise NotFoundError(f"Business '{slug}' not found")
    return ok(business, "Business retrieved successfully", request)
