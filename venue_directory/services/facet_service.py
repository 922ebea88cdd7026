"""Facet catalog: categories, amenities and regions, optionally with counts.

Counts are the number of distinct active businesses holding the membership.
Facets nobody belongs to are still listed, with a count of 0.
"""
from typing import Dict, List, Optional

from sqlalchemy import and_, distinct, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from venue_directory.models.business_model import Business
from venue_directory.models.facet_model import Amenity, Category, Region
from venue_directory.models.membership_model import (
    business_amenities,
    business_categories,
    business_regions,
)
from venue_directory.schemas.facet_schema import (
    AmenityRead,
    AmenityWithCount,
    CategoryRead,
    CategoryWithCount,
    RegionRead,
    RegionWithCount,
    StateCount,
)

business_count = func.count(distinct(Business.id)).label("business_count")


def _counted(model, junction, facet_column: str):
    """SELECT model, COUNT(DISTINCT active business) via two LEFT JOINs."""
    return (
        select(model, business_count)
        .outerjoin(junction, junction.c[facet_column] == model.id)
        .outerjoin(
            Business,
            and_(Business.id == junction.c.business_id, Business.is_active.is_(True)),
        )
        .group_by(model.id)
    )


async def list_categories(db: AsyncSession) -> List[CategoryRead]:
    stmt = select(Category).where(Category.is_active.is_(True)).order_by(Category.name, Category.id)
    return [CategoryRead.model_validate(c) for c in (await db.execute(stmt)).scalars().all()]


async def list_amenities(db: AsyncSession) -> List[AmenityRead]:
    stmt = (
        select(Amenity)
        .where(Amenity.is_active.is_(True))
        .order_by(Amenity.category, Amenity.name, Amenity.id)
    )
    return [AmenityRead.model_validate(a) for a in (await db.execute(stmt)).scalars().all()]


async def list_regions(db: AsyncSession) -> List[RegionRead]:
    stmt = select(Region).order_by(Region.state, Region.name, Region.id)
    return [RegionRead.model_validate(r) for r in (await db.execute(stmt)).scalars().all()]


async def list_categories_with_counts(db: AsyncSession) -> List[CategoryWithCount]:
    stmt = (
        _counted(Category, business_categories, "category_id")
        .where(Category.is_active.is_(True))
        .order_by(Category.name, Category.id)
    )
    return [
        CategoryWithCount.model_validate(category).model_copy(update={"business_count": count})
        for category, count in (await db.execute(stmt)).all()
    ]


async def list_amenities_with_counts(db: AsyncSession) -> List[AmenityWithCount]:
    stmt = (
        _counted(Amenity, business_amenities, "amenity_id")
        .where(Amenity.is_active.is_(True))
        .order_by(Amenity.category, Amenity.name, Amenity.id)
    )
    return [
        AmenityWithCount.model_validate(amenity).model_copy(update={"business_count": count})
        for amenity, count in (await db.execute(stmt)).all()
    ]


async def list_regions_with_counts(db: AsyncSession) -> List[RegionWithCount]:
    stmt = _counted(Region, business_regions, "region_id").order_by(Region.state, Region.name, Region.id)
    return [
        RegionWithCount.model_validate(region).model_copy(update={"business_count": count})
        for region, count in (await db.execute(stmt)).all()
    ]


async def get_regions_by_state(db: AsyncSession, state: str) -> List[RegionWithCount]:
    stmt = (
        _counted(Region, business_regions, "region_id")
        .where(Region.state == state)
        .order_by(Region.name, Region.id)
    )
    return [
        RegionWithCount.model_validate(region).model_copy(update={"business_count": count})
        for region, count in (await db.execute(stmt)).all()
    ]


async def get_category_by_slug(db: AsyncSession, slug: str) -> Optional[CategoryRead]:
    category = (
        await db.execute(select(Category).where(Category.slug == slug, Category.is_active.is_(True)).limit(1))
    ).scalar_one_or_none()
    return CategoryRead.model_validate(category) if category else None


async def get_amenity_by_slug(db: AsyncSession, slug: str) -> Optional[AmenityRead]:
    amenity = (
        await db.execute(select(Amenity).where(Amenity.slug == slug, Amenity.is_active.is_(True)).limit(1))
    ).scalar_one_or_none()
    return AmenityRead.model_validate(amenity) if amenity else None


async def get_region_by_slug(db: AsyncSession, slug: str) -> Optional[RegionRead]:
    region = (await db.execute(select(Region).where(Region.slug == slug).limit(1))).scalar_one_or_none()
    return RegionRead.model_validate(region) if region else None


async def get_states_with_counts(db: AsyncSession) -> List[StateCount]:
    """Merge active-business counts and region counts by state name.

    A state known to only one side still gets a row, with 0 for the other.
    """
    q_business = (
        select(Business.state, func.count(Business.id))
        .where(Business.is_active.is_(True))
        .where(Business.state.isnot(None))
        .group_by(Business.state)
    )
    q_region = select(Region.state, func.count(Region.id)).group_by(Region.state)

    states: Dict[str, StateCount] = {}
    for state, count in (await db.execute(q_business)).all():
        states[state] = StateCount(state=state, business_count=count)
    for state, count in (await db.execute(q_region)).all():
        row = states.setdefault(state, StateCount(state=state))
        row.region_count = count

    return [states[name] for name in sorted(states)]
