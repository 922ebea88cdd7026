"""Regions API router: regions, per-state navigation.
/api/v1/regions"""
from typing import List

from fastapi import APIRouter, Depends, Request

from venue_directory.api.deps import get_directory_service
from venue_directory.api.responses import ok
from venue_directory.core.exceptions import NotFoundError
from venue_directory.schemas.base_schema import ApiResponse
from venue_directory.schemas.facet_schema import RegionRead, RegionWithCount, StateCount
from venue_directory.services.directory_service import DirectoryService

router = APIRouter()


@router.get("", response_model=ApiResponse[List[RegionRead]])
async def list_regions(request: Request, directory: DirectoryService = Depends(get_directory_service)):
    return ok(await directory.list_regions(), "Regions listed successfully", request)


@router.get("/with-counts", response_model=ApiResponse[List[RegionWithCount]])
async def list_regions_with_counts(request: Request, directory: DirectoryService = Depends(get_directory_service)):
    return ok(await directory.list_regions_with_counts(), "Regions listed successfully", request)


@router.get("/states", response_model=ApiResponse[List[StateCount]])
async def list_states(request: Request, directory: DirectoryService = Depends(get_directory_service)):
    """Every state known from businesses or regions, with both counts."""
    return ok(await directory.get_states_with_counts(), "States listed successfully", request)


@router.get("/states/{state}", response_model=ApiResponse[List[RegionWithCount]])
async def list_regions_in_state(
    state: str,
    request: Request,
    directory: DirectoryService = Depends(get_directory_service),
):
    return ok(await directory.get_regions_by_state(state), "Regions listed successfully", request)


@router.get("/{slug}", response_model=ApiResponse[RegionRead])
async def get_region(slug: str, request: Request, directory: DirectoryService = Depends(get_directory_service)):
    region = await directory.get_region_by_slug(slug)
    if region is None:
        raise NotFoundError(f"Region '{slug}' not found")
    return ok(region, "Region retrieved successfully", request)
