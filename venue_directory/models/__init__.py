"""SQLAlchemy models for the venue directory."""
from venue_directory.models.business_model import Business
from venue_directory.models.facet_model import Amenity, Category, Region
from venue_directory.models.membership_model import (
    business_amenities,
    business_categories,
    business_regions,
)

__all__ = [
    "Business",
    "Category",
    "Amenity",
    "Region",
    "business_categories",
    "business_amenities",
    "business_regions",
]
