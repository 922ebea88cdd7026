"""Amenities API router.
/api/v1/amenities"""
from typing import List

from fastapi import APIRouter, Depends, Request

from venue_directory.api.deps import get_directory_service
from venue_directory.api.responses import ok
from venue_directory.core.exceptions import NotFoundError
from venue_directory.schemas.base_schema import ApiResponse
from venue_directory.schemas.facet_schema import AmenityRead, AmenityWithCount
from venue_directory.services.directory_service import DirectoryService

router = APIRouter()


@router.get("", response_model=ApiResponse[List[AmenityRead]])
async def list_amenities(request: Request, directory: DirectoryService = Depends(get_directory_service)):
    """Active amenities, grouped by their display category."""
    return ok(await directory.list_amenities(), "Amenities listed successfully", request)


@router.get("/with-counts", response_model=ApiResponse[List[AmenityWithCount]])
async def list_amenities_with_counts(request: Request, directory: DirectoryService = Depends(get_directory_service)):
    return ok(await directory.list_amenities_with_counts(), "Amenities listed successfully", request)


@router.get("/{slug}", response_model=ApiResponse[AmenityRead])
async def get_amenity(slug: str, request: Request, directory: DirectoryService = Depends(get_directory_service)):
    amenity = await directory.get_amenity_by_slug(slug)
    if amenity is None:
        raise NotFoundError(f"Amenity '{slug}' not found")
    return ok(amenity, "Amenity retrieved successfully", request)
