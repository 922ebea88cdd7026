"""Pydantic schemas for business results, details and paginated pages."""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from venue_directory.schemas.facet_schema import AmenityRead, CategoryRead, RegionRead


class BusinessRead(BaseModel):
    """Flat projection of a business row."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    cid: Optional[str] = None
    name: str
    slug: str

    rating: float = 0.0
    reviews_count: int = 0

    full_address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    image_url: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    maps_url: Optional[str] = None

    business_type: Optional[str] = None
    description: Optional[str] = None

    is_active: bool = True
    featured: bool = False
    verified: bool = False

    meta_title: str = ""
    meta_description: str = ""

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class BusinessResult(BusinessRead):
    """A business as it appears in list and search pages."""
    categories: List[CategoryRead] = []


class BusinessDetail(BusinessRead):
    """A business with every active facet it belongs to."""
    categories: List[CategoryRead] = []
    amenities: List[AmenityRead] = []
    regions: List[RegionRead] = []


class BusinessPage(BaseModel):
    """Paginated list/search response."""
    items: List[BusinessResult]
    total: int
    page: int
    page_size: int
    pages: int
