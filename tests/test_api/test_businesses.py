"""Tests for Businesses API endpoints."""
import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_list_businesses_empty(client: AsyncClient):
    """GET /api/v1/businesses returns an empty page initially."""
    response = await client.get("/api/v1/businesses")
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    data = body["data"]
    assert data["total"] == 0
    assert data["items"] == []
    assert data["page"] == 1
    assert data["pages"] == 0
    assert response.headers["X-Trace-Id"] == body["trace_id"]


@pytest.mark.asyncio
async def test_list_with_filters_and_pagination(client: AsyncClient, db_session):
    """GET /api/v1/businesses applies facets and paginates consistently with total."""
    from tests.conftest import link_categories, make_business, make_category, seed

    casinos = [make_business(rating=float(i)) for i in range(1, 6)]
    pub = make_business()
    await seed(db_session, make_category(1, "Casino"), *casinos, pub)
    for venue in casinos:
        await link_categories(db_session, venue, 1)

    resp = await client.get("/api/v1/businesses", params={"category_ids": [1], "page_size": 2, "page": 2})
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["total"] == 5
    assert data["pages"] == 3
    assert [item["rating"] for item in data["items"]] == [3.0, 2.0]
    assert data["items"][0]["categories"][0]["slug"] == "casino"

    resp = await client.get("/api/v1/businesses", params={"category_ids": [999999]})
    assert resp.json()["data"]["total"] == 0
    assert resp.json()["data"]["items"] == []


@pytest.mark.asyncio
async def test_search_businesses(client: AsyncClient, db_session):
    """GET /api/v1/businesses/search matches text and respects filters."""
    from tests.conftest import make_business, seed

    await seed(
        db_session,
        make_business(name="Star Casino", city="Sydney", verified=True),
        make_business(name="Crown Casino", city="Melbourne"),
        make_business(name="Corner Pub"),
    )

    resp = await client.get("/api/v1/businesses/search", params={"q": "casino"})
    assert resp.status_code == 200
    assert resp.json()["data"]["total"] == 2

    resp = await client.get("/api/v1/businesses/search", params={"q": "casino", "verified_only": True})
    data = resp.json()["data"]
    assert data["total"] == 1
    assert data["items"][0]["name"] == "Star Casino"

    resp = await client.get("/api/v1/businesses/search")
    assert resp.json()["data"]["total"] == 3


@pytest.mark.asyncio
async def test_get_business_detail(client: AsyncClient, db_session):
    """GET /api/v1/businesses/{slug} returns the business with its facets."""
    from tests.conftest import (
        link_amenities,
        link_regions,
        make_amenity,
        make_business,
        make_region,
        seed,
    )

    venue = make_business(slug="crown-melbourne")
    await seed(db_session, make_amenity(1, "Parking"), make_region(1, "Southbank"), venue)
    await link_amenities(db_session, venue, 1)
    await link_regions(db_session, venue, 1)

    resp = await client.get("/api/v1/businesses/crown-melbourne")
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["id"] == venue.id
    assert data["categories"] == []
    assert [a["slug"] for a in data["amenities"]] == ["parking"]
    assert [r["slug"] for r in data["regions"]] == ["southbank"]


@pytest.mark.asyncio
async def test_get_business_not_found(client: AsyncClient, db_session):
    """GET /api/v1/businesses/{slug} is 404 for unknown and inactive slugs."""
    from tests.conftest import make_business, seed

    await seed(db_session, make_business(slug="closed-venue", is_active=False))

    for slug in ("nonexistent-xyz", "closed-venue"):
        resp = await client.get(f"/api/v1/businesses/{slug}")
        assert resp.status_code == 404
        assert resp.json()["success"] is False


@pytest.mark.asyncio
async def test_invalid_sort_rejected(client: AsyncClient):
    """Unknown sort keys are rejected rather than ignored."""
    resp = await client.get("/api/v1/businesses", params={"sort": "distance"})
    assert resp.status_code == 422
    assert resp.json()["success"] is False


@pytest.mark.asyncio
async def test_page_size_ceiling(client: AsyncClient):
    resp = await client.get("/api/v1/businesses", params={"page_size": 10_000})
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_oversized_facet_id_matches_nothing(client: AsyncClient, db_session):
    """Ids beyond the integer column range are unknown ids, not server errors."""
    from tests.conftest import link_categories, make_business, make_category, seed

    venue = make_business()
    await seed(db_session, make_category(1, "Casino"), venue)
    await link_categories(db_session, venue, 1)

    for path in ("/api/v1/businesses", "/api/v1/businesses/search"):
        resp = await client.get(path, params={"category_ids": [10**20], "amenity_ids": [-(10**20)]})
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["total"] == 0
        assert data["items"] == []

    resp = await client.get("/api/v1/businesses", params={"category_ids": [1, 10**20]})
    assert resp.json()["data"]["total"] == 1


@pytest.mark.asyncio
async def test_oversized_page_rejected(client: AsyncClient, db_session):
    """A page whose offset overflows 64 bits is rejected with 422."""
    from tests.conftest import make_business, seed

    await seed(db_session, make_business())

    for path in ("/api/v1/businesses", "/api/v1/businesses/search"):
        resp = await client.get(path, params={"page": 10**18})
        assert resp.status_code == 422
        assert resp.json()["success"] is False


@pytest.mark.asyncio
async def test_store_unavailable_is_503(client: AsyncClient):
    """A failing store surfaces as 503, not an empty page."""
    from venue_directory.api.deps import get_directory_service
    from venue_directory.main import app
    from tests.conftest import make_unreachable_service

    app.dependency_overrides[get_directory_service] = make_unreachable_service

    resp = await client.get("/api/v1/businesses")
    assert resp.status_code == 503
    assert resp.json()["success"] is False

    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["data"]["status"] == "unhealthy"
