"""Membership junction tables between businesses and their facets.

Pure many-to-many relations: two foreign keys that together form the
primary key, so a business holds each facet value at most once.
"""
from sqlalchemy import Column, ForeignKey, Integer, Table

from venue_directory.database import Base


business_categories = Table(
    "business_categories",
    Base.metadata,
    Column("business_id", Integer, ForeignKey("businesses.id", ondelete="CASCADE"), primary_key=True),
    Column("category_id", Integer, ForeignKey("categories.id", ondelete="CASCADE"), primary_key=True, index=True),
)

business_amenities = Table(
    "business_amenities",
    Base.metadata,
    Column("business_id", Integer, ForeignKey("businesses.id", ondelete="CASCADE"), primary_key=True),
    Column("amenity_id", Integer, ForeignKey("amenities.id", ondelete="CASCADE"), primary_key=True, index=True),
)

business_regions = Table(
    "business_regions",
    Base.metadata,
    Column("business_id", Integer, ForeignKey("businesses.id", ondelete="CASCADE"), primary_key=True),
    Column("region_id", Integer, ForeignKey("regions.id", ondelete="CASCADE"), primary_key=True, index=True),
)
