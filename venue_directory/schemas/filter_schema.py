"""Filter and pagination inputs shared by the query engine and the counter.

Every filter field is optional. A missing facet set and an empty facet set
both mean "no constraint on this dimension"; they never mean "match nothing".
"""
from typing import Optional, Set

from pydantic import BaseModel, ConfigDict


class BusinessFilters(BaseModel):
    model_config = ConfigDict(frozen=True)

    category_ids: Optional[Set[int]] = None
    amenity_ids: Optional[Set[int]] = None
    region_ids: Optional[Set[int]] = None
    city: Optional[str] = None
    state: Optional[str] = None
    rating_min: Optional[float] = None
    featured_only: bool = False
    verified_only: bool = False


class Pagination(BaseModel):
    """Offset/limit window. Bounds are checked by the query engine."""
    offset: int = 0
    limit: int = 20

    @classmethod
    def from_page(cls, page: int, page_size: int) -> "Pagination":
        return cls(offset=(page - 1) * page_size, limit=page_size)
