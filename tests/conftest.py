"""Test fixtures: test database, directory service, async test client, factories."""
from itertools import count
from typing import AsyncGenerator, Iterable

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import insert
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from venue_directory.database import Base
from venue_directory.models import (
    Amenity,
    Business,
    Category,
    Region,
    business_amenities,
    business_categories,
    business_regions,
)
from venue_directory.api.deps import get_directory_service
from venue_directory.main import app
from venue_directory.services.directory_service import DirectoryService


TEST_DATABASE_URL = "sqlite+aiosqlite:///./test.db"

_ids = count(1)


@pytest_asyncio.fixture(scope="function")
async def session_factory() -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Create tables on a fresh engine and drop them afterwards."""
    engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=NullPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Session used by tests to seed data; seeds must be committed."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def directory(session_factory) -> DirectoryService:
    return DirectoryService(session_factory, query_timeout=5.0)


@pytest_asyncio.fixture(scope="function")
async def client(directory: DirectoryService) -> AsyncGenerator[AsyncClient, None]:
    """Yield an HTTP test client with the test directory service injected."""
    app.dependency_overrides[get_directory_service] = lambda: directory

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


def make_business(**overrides) -> Business:
    """Create an active business with sensible defaults."""
    n = next(_ids)
    defaults = {
        "cid": f"cid-{n}",
        "name": f"Sample Venue {n}",
        "slug": f"sample-venue-{n}",
        "rating": 4.0,
        "reviews_count": 100,
        "full_address": f"{n} Main St, Melbourne VIC 3000",
        "city": "Melbourne",
        "state": "Victoria",
        "zip_code": "3000",
        "phone": "(03) 5550 0100",
        "website": "https://example.com",
        "business_type": "Pub",
        "description": "Friendly local venue with pokies and a bistro.",
        "is_active": True,
        "featured": False,
        "verified": False,
    }
    defaults.update(overrides)
    return Business(**defaults)


async def seed(db: AsyncSession, *objects) -> None:
    """Add and commit ORM objects."""
    db.add_all(objects)
    await db.commit()


async def link(db: AsyncSession, junction, facet_column: str, business: Business, facet_ids: Iterable[int]) -> None:
    """Insert membership rows for ``business``."""
    await db.execute(
        insert(junction),
        [{"business_id": business.id, facet_column: facet_id} for facet_id in facet_ids],
    )
    await db.commit()


async def link_categories(db: AsyncSession, business: Business, *category_ids: int) -> None:
    await link(db, business_categories, "category_id", business, category_ids)


async def link_amenities(db: AsyncSession, business: Business, *amenity_ids: int) -> None:
    await link(db, business_amenities, "amenity_id", business, amenity_ids)


async def link_regions(db: AsyncSession, business: Business, *region_ids: int) -> None:
    await link(db, business_regions, "region_id", business, region_ids)


def make_category(id: int, name: str, **overrides) -> Category:
    defaults = {"id": id, "name": name, "slug": name.lower().replace(" ", "-"), "is_active": True}
    defaults.update(overrides)
    return Category(**defaults)


def make_amenity(id: int, name: str, category: str = "Facilities", **overrides) -> Amenity:
    defaults = {
        "id": id,
        "name": name,
        "slug": name.lower().replace(" ", "-"),
        "category": category,
        "is_active": True,
    }
    defaults.update(overrides)
    return Amenity(**defaults)


def make_region(id: int, name: str, state: str = "Victoria", **overrides) -> Region:
    defaults = {
        "id": id,
        "name": name,
        "slug": name.lower().replace(" ", "-"),
        "state": state,
        "country": "Australia",
    }
    defaults.update(overrides)
    return Region(**defaults)


def make_unreachable_service() -> DirectoryService:
    """A DirectoryService whose database file can never be opened."""
    engine = create_async_engine(
        "sqlite+aiosqlite:////nonexistent-directory/venues.db",
        poolclass=NullPool,
    )
    return DirectoryService(async_sessionmaker(engine, class_=AsyncSession), query_timeout=5.0)
