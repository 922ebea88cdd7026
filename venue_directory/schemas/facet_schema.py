"""Pydantic schemas for categories, amenities, regions and their counts."""
from pydantic import BaseModel, ConfigDict


class CategoryRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    slug: str
    is_active: bool = True


class CategoryWithCount(CategoryRead):
    business_count: int = 0


class AmenityRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    slug: str
    category: str = "other"
    is_active: bool = True


class AmenityWithCount(AmenityRead):
    business_count: int = 0


class RegionRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    slug: str
    state: str
    country: str = "Australia"


class RegionWithCount(RegionRead):
    business_count: int = 0


class StateCount(BaseModel):
    """One row of the state navigation view."""
    state: str
    business_count: int = 0
    region_count: int = 0
