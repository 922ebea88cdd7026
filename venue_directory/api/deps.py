"""API dependencies: the shared directory service and common query parsing."""
from typing import List, Optional

from fastapi import Query, Request

from venue_directory.schemas.filter_schema import BusinessFilters
from venue_directory.services.directory_service import DirectoryService


def get_directory_service(request: Request) -> DirectoryService:
    """Return the DirectoryService built once in the application lifespan."""
    return request.app.state.directory


def get_filters(
    category_ids: Optional[List[int]] = Query(None, description="Category ids, OR-ed together"),
    amenity_ids: Optional[List[int]] = Query(None, description="Amenity ids, OR-ed together"),
    region_ids: Optional[List[int]] = Query(None, description="Region ids, OR-ed together"),
    city: Optional[str] = Query(None, description="Case-insensitive substring"),
    state: Optional[str] = Query(None, description="Case-insensitive substring"),
    rating_min: Optional[float] = Query(None, ge=0, le=5),
    featured_only: bool = Query(False),
    verified_only: bool = Query(False),
) -> BusinessFilters:
    """Collect filter query parameters into a BusinessFilters."""
    return BusinessFilters(
        category_ids=set(category_ids) if category_ids else None,
        amenity_ids=set(amenity_ids) if amenity_ids else None,
        region_ids=set(region_ids) if region_ids else None,
        city=city,
        state=state,
        rating_min=rating_min,
        featured_only=featured_only,
        verified_only=verified_only,
    )
