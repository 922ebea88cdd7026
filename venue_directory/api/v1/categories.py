"""Categories API router.
/api/v1/categories"""
from typing import List

from fastapi import APIRouter, Depends, Request

from venue_directory.api.deps import get_directory_service
from venue_directory.api.responses import ok
from venue_directory.core.exceptions import NotFoundError
from venue_directory.schemas.base_schema import ApiResponse
from venue_directory.schemas.facet_schema import CategoryRead, CategoryWithCount
from venue_directory.services.directory_service import DirectoryService

router = APIRouter()


@router.get("", response_model=ApiResponse[List[CategoryRead]])
async def list_categories(request: Request, directory: DirectoryService = Depends(get_directory_service)):
    return ok(await directory.list_categories(), "Categories listed successfully", request)


@router.get("/with-counts", response_model=ApiResponse[List[CategoryWithCount]])
async def list_categories_with_counts(request: Request, directory: DirectoryService = Depends(get_directory_service)):
    """Active categories with the number of active businesses in each."""
    return ok(await directory.list_categories_with_counts(), "Categories listed successfully", request)


@router.get("/{slug}", response_model=ApiResponse[CategoryRead])
async def get_category(slug: str, request: Request, directory: DirectoryService = Depends(get_directory_service)):
    category = await directory.get_category_by_slug(slug)
    if category is None:
        raise NotFoundError(f"Category '{slug}' not found")
    return ok(category, "Category retrieved successfully", request)
