"""Filter resolver: reduces the multi-valued facets to one admissible id set.

Within a facet the supplied values are OR-ed (category A or B); across facets
the per-facet id sets are intersected (categories AND amenities AND regions).

The result has three states that callers must keep apart:
  - None         no facet was supplied, the listing query is unrestricted
  - frozenset()  facets were supplied and no business satisfies all of them
  - frozenset({...}) the only business ids that may appear in the result

Store errors propagate unchanged.
"""
from typing import Iterable, Optional

from sqlalchemy import Table, select
from sqlalchemy.ext.asyncio import AsyncSession

from venue_directory.core.logging import get_logger
from venue_directory.models.membership_model import (
    business_amenities,
    business_categories,
    business_regions,
)
from venue_directory.schemas.filter_schema import BusinessFilters

logger = get_logger(__name__)


# Facet ids are 32-bit INTEGER columns; anything outside can never match.
MAX_FACET_ID = 2**31 - 1

# (filter field, junction table, facet column) in lookup order
FACETS = (
    ("category_ids", business_categories, "category_id"),
    ("amenity_ids", business_amenities, "amenity_id"),
    ("region_ids", business_regions, "region_id"),
)


async def member_ids(
    db: AsyncSession,
    junction: Table,
    facet_column: str,
    values: Iterable[int],
) -> frozenset[int]:
    """Ids of businesses holding membership in any of ``values``."""
    candidates = sorted(v for v in values if 0 < v <= MAX_FACET_ID)
    if not candidates:
        return frozenset()

    stmt = (
        select(junction.c.business_id)
        .where(junction.c[facet_column].in_(candidates))
        .distinct()
    )
    rows = (await db.execute(stmt)).scalars().all()
    return frozenset(rows)


async def resolve_admissible_ids(
    db: AsyncSession,
    filters: Optional[BusinessFilters],
) -> Optional[frozenset[int]]:
    """Intersect the per-facet membership sets of ``filters``.

    Empty facet sets are skipped exactly like missing ones. Lookups stop at
    the first empty intersection.
    """
    if filters is None:
        return None

    admissible: Optional[frozenset[int]] = None

    for field, junction, facet_column in FACETS:
        values = getattr(filters, field)
        if not values:
            continue

        ids = await member_ids(db, junction, facet_column, values)
        admissible = ids if admissible is None else admissible & ids

        if not admissible:
            logger.debug("Facet %s emptied the admissible set", field)
            return frozenset()

    return admissible
