"""Business queries: paginated list/search, matching counts, detail lookup.

Handles:
- list / search pages ordered featured → rating → id, with active categories
  attached through one batched IN query per page
- counts built from the exact same predicate tuple as the pages
- detail lookup by slug with full category / amenity / region fan-out

An empty admissible id set short-circuits to an empty page or a zero count
without issuing the listing query. Store errors are not caught here.
"""
from collections import defaultdict
from typing import Dict, List, Optional, Sequence

from sqlalchemy import distinct, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from venue_directory.core.logging import get_logger
from venue_directory.models.business_model import Business
from venue_directory.models.facet_model import Amenity, Category, Region
from venue_directory.models.membership_model import (
    business_amenities,
    business_categories,
    business_regions,
)
from venue_directory.schemas.business_schema import BusinessDetail, BusinessResult
from venue_directory.schemas.facet_schema import AmenityRead, CategoryRead, RegionRead
from venue_directory.schemas.filter_schema import BusinessFilters, Pagination
from venue_directory.services.filter_resolver import resolve_admissible_ids
from venue_directory.services.query_builder import (
    Conditions,
    build_conditions,
    order_by_clauses,
    validate_pagination,
)

logger = get_logger(__name__)


async def match_conditions(
    db: AsyncSession,
    filters: Optional[BusinessFilters],
    query: Optional[str] = None,
) -> Optional[Conditions]:
    """Resolve facets and build the shared WHERE tuple.

    Returns None when the facet intersection is empty, i.e. nothing can match.
    """
    admissible = await resolve_admissible_ids(db, filters)
    if admissible is not None and not admissible:
        return None
    return build_conditions(filters, query=query, admissible_ids=admissible)


async def categories_for(db: AsyncSession, business_ids: Sequence[int]) -> Dict[int, List[CategoryRead]]:
    """Active categories of each business, fetched in a single query."""
    if not business_ids:
        return {}

    stmt = (
        select(business_categories.c.business_id, Category)
        .join(Category, Category.id == business_categories.c.category_id)
        .where(
            business_categories.c.business_id.in_(business_ids),
            Category.is_active.is_(True),
        )
        .order_by(Category.name, Category.id)
    )
    grouped: Dict[int, List[CategoryRead]] = defaultdict(list)
    for business_id, category in (await db.execute(stmt)).all():
        grouped[business_id].append(CategoryRead.model_validate(category))
    return grouped


async def _select_page(
    db: AsyncSession,
    filters: Optional[BusinessFilters],
    pagination: Pagination,
    query: Optional[str],
    sort: Optional[str],
    order: str,
) -> List[BusinessResult]:
    validate_pagination(pagination)
    ordering = order_by_clauses(sort, order)

    conditions = await match_conditions(db, filters, query)
    if conditions is None or pagination.limit == 0:
        return []

    stmt = (
        select(Business)
        .where(*conditions)
        .order_by(*ordering)
        .offset(pagination.offset)
        .limit(pagination.limit)
    )
    businesses = (await db.execute(stmt)).scalars().all()

    categories = await categories_for(db, [b.id for b in businesses])
    return [
        BusinessResult.model_validate(b).model_copy(update={"categories": categories.get(b.id, [])})
        for b in businesses
    ]


async def _count(
    db: AsyncSession,
    filters: Optional[BusinessFilters],
    query: Optional[str],
) -> int:
    conditions = await match_conditions(db, filters, query)
    if conditions is None:
        return 0

    stmt = select(func.count(distinct(Business.id))).where(*conditions)
    return (await db.execute(stmt)).scalar_one() or 0


async def list_businesses(
    db: AsyncSession,
    filters: Optional[BusinessFilters],
    pagination: Pagination,
    sort: Optional[str] = None,
    order: str = "desc",
) -> List[BusinessResult]:
    """One page of active businesses matching ``filters``."""
    return await _select_page(db, filters, pagination, None, sort, order)


async def search_businesses(
    db: AsyncSession,
    query: Optional[str],
    filters: Optional[BusinessFilters],
    pagination: Pagination,
    sort: Optional[str] = None,
    order: str = "desc",
) -> List[BusinessResult]:
    """Like list_businesses, additionally requiring ``query`` as a substring of
    name, description, address, city or business type. Blank query = list mode."""
    return await _select_page(db, filters, pagination, query, sort, order)


async def count_businesses(db: AsyncSession, filters: Optional[BusinessFilters] = None) -> int:
    return await _count(db, filters, None)


async def count_search(db: AsyncSession, query: Optional[str], filters: Optional[BusinessFilters] = None) -> int:
    return await _count(db, filters, query)


async def get_business_by_slug(db: AsyncSession, slug: str) -> Optional[BusinessDetail]:
    """Active business with its full facet sets, or None when there is none.

    The three relation fetches run as separate statements; a concurrent
    ingestion batch may land between them.
    """
    business = (
        await db.execute(
            select(Business)
            .where(Business.slug == slug, Business.is_active.is_(True))
            .limit(1)
        )
    ).scalar_one_or_none()
    if business is None:
        logger.debug("No active business for slug", extra={"slug": slug})
        return None

    categories = (
        await db.execute(
            select(Category)
            .join(business_categories, business_categories.c.category_id == Category.id)
            .where(business_categories.c.business_id == business.id, Category.is_active.is_(True))
            .order_by(Category.name, Category.id)
        )
    ).scalars().all()

    amenities = (
        await db.execute(
            select(Amenity)
            .join(business_amenities, business_amenities.c.amenity_id == Amenity.id)
            .where(business_amenities.c.business_id == business.id, Amenity.is_active.is_(True))
            .order_by(Amenity.category, Amenity.name, Amenity.id)
        )
    ).scalars().all()

    regions = (
        await db.execute(
            select(Region)
            .join(business_regions, business_regions.c.region_id == Region.id)
            .where(business_regions.c.business_id == business.id)
            .order_by(Region.name, Region.id)
        )
    ).scalars().all()

    return BusinessDetail.model_validate(business).model_copy(
        update={
            "categories": [CategoryRead.model_validate(c) for c in categories],
            "amenities": [AmenityRead.model_validate(a) for a in amenities],
            "regions": [RegionRead.model_validate(r) for r in regions],
        }
    )
