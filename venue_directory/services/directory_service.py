"""DirectoryService: the read-only entry point used by routers and scripts.

Constructed once at startup around a session factory and handed to callers
(see main.lifespan and api.deps.get_directory_service). Every operation:
  - opens its own AsyncSession, so concurrent callers never share one
  - is bounded by query_timeout seconds
  - turns driver failures and timeouts into StoreUnavailableError

Operations issuing several statements are not wrapped in a transaction;
read skew against a concurrent ingestion batch is tolerated.
"""
import asyncio
import time
from typing import Any, Awaitable, Callable, List, Optional, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from venue_directory.core.exceptions import StoreUnavailableError
from venue_directory.core.logging import get_logger
from venue_directory.schemas.business_schema import BusinessDetail, BusinessResult
from venue_directory.schemas.facet_schema import (
    AmenityRead,
    AmenityWithCount,
    CategoryRead,
    CategoryWithCount,
    RegionRead,
    RegionWithCount,
    StateCount,
)
from venue_directory.schemas.filter_schema import BusinessFilters, Pagination
from venue_directory.services import business_service, facet_service

logger = get_logger(__name__)

R = TypeVar("R")


class DirectoryService:
    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        query_timeout: Optional[float] = None,
    ):
        self._session_factory = session_factory
        self._query_timeout = query_timeout

    async def _run(
        self,
        operation: str,
        func: Callable[..., Awaitable[R]],
        *args: Any,
        **kwargs: Any,
    ) -> R:
        started = time.perf_counter()
        try:
            async with self._session_factory() as db:
                result = await asyncio.wait_for(func(db, *args, **kwargs), timeout=self._query_timeout)
        except asyncio.TimeoutError as exc:
            logger.error(
                "%s timed out after %ss", operation, self._query_timeout,
                extra={"operation": operation},
            )
            raise StoreUnavailableError(f"{operation} timed out", detail={"timeout": self._query_timeout}) from exc
        except (SQLAlchemyError, OSError) as exc:
            logger.error("%s failed: %s", operation, exc, extra={"operation": operation})
            raise StoreUnavailableError(f"{operation} failed: store unavailable") from exc

        logger.debug(
            "%s completed", operation,
            extra={"operation": operation, "duration_ms": round((time.perf_counter() - started) * 1000, 2)},
        )
        return result

    # ── businesses ──

    async def list_businesses(
        self,
        filters: Optional[BusinessFilters],
        pagination: Pagination,
        sort: Optional[str] = None,
        order: str = "desc",
    ) -> List[BusinessResult]:
        return await self._run(
            "list_businesses", business_service.list_businesses, filters, pagination, sort=sort, order=order
        )

    async def search_businesses(
        self,
        query: Optional[str],
        filters: Optional[BusinessFilters],
        pagination: Pagination,
        sort: Optional[str] = None,
        order: str = "desc",
    ) -> List[BusinessResult]:
        return await self._run(
            "search_businesses", business_service.search_businesses, query, filters, pagination, sort=sort, order=order
        )

    async def count_businesses(self, filters: Optional[BusinessFilters] = None) -> int:
        total = await self._run("count_businesses", business_service.count_businesses, filters)
        logger.debug("count_businesses matched %d", total, extra={"operation": "count_businesses", "total": total})
        return total

    async def count_search(self, query: Optional[str], filters: Optional[BusinessFilters] = None) -> int:
        total = await self._run("count_search", business_service.count_search, query, filters)
        logger.debug("count_search matched %d", total, extra={"operation": "count_search", "total": total})
        return total

    async def get_business_by_slug(self, slug: str) -> Optional[BusinessDetail]:
        return await self._run("get_business_by_slug", business_service.get_business_by_slug, slug)

    # ── facets ──

    async def list_categories(self) -> List[CategoryRead]:
        return await self._run("list_categories", facet_service.list_categories)

    async def list_amenities(self) -> List[AmenityRead]:
        return await self._run("list_amenities", facet_service.list_amenities)

    async def list_regions(self) -> List[RegionRead]:
        return await self._run("list_regions", facet_service.list_regions)

    async def list_categories_with_counts(self) -> List[CategoryWithCount]:
        return await self._run("list_categories_with_counts", facet_service.list_categories_with_counts)

    async def list_amenities_with_counts(self) -> List[AmenityWithCount]:
        return await self._run("list_amenities_with_counts", facet_service.list_amenities_with_counts)

    async def list_regions_with_counts(self) -> List[RegionWithCount]:
        return await self._run("list_regions_with_counts", facet_service.list_regions_with_counts)

    async def get_category_by_slug(self, slug: str) -> Optional[CategoryRead]:
        return await self._run("get_category_by_slug", facet_service.get_category_by_slug, slug)

    async def get_amenity_by_slug(self, slug: str) -> Optional[AmenityRead]:
        return await self._run("get_amenity_by_slug", facet_service.get_amenity_by_slug, slug)

    async def get_region_by_slug(self, slug: str) -> Optional[RegionRead]:
        return await self._run("get_region_by_slug", facet_service.get_region_by_slug, slug)

    async def get_states_with_counts(self) -> List[StateCount]:
        return await self._run("get_states_with_counts", facet_service.get_states_with_counts)

    async def get_regions_by_state(self, state: str) -> List[RegionWithCount]:
        return await self._run("get_regions_by_state", facet_service.get_regions_by_state, state)

    async def ping(self) -> None:
        """Round-trip a trivial statement; raises StoreUnavailableError on failure."""
        from sqlalchemy import text

        async def _select_one(db: AsyncSession) -> None:
            await db.execute(text("SELECT 1"))

        await self._run("ping", _select_one)
