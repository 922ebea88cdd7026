"""FastAPI application factory and startup configuration.

The DirectoryService is built once in the lifespan and stored on app.state;
routers receive it through api.deps.get_directory_service. All routes are
read-only and public.
"""
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from venue_directory.config import settings
from venue_directory.core.exceptions import (
    InvalidInputError,
    NotFoundError,
    StoreUnavailableError,
)
from venue_directory.core.logging import get_logger, set_trace_id, setup_logging
from venue_directory.database import async_session_factory, engine
from venue_directory.api.deps import get_directory_service
from venue_directory.api.responses import failure, ok
from venue_directory.api.v1.businesses import router as businesses_router
from venue_directory.api.v1.categories import router as categories_router
from venue_directory.api.v1.amenities import router as amenities_router
from venue_directory.api.v1.regions import router as regions_router
from venue_directory.services.directory_service import DirectoryService

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown events."""
    setup_logging()
    logger.info("Starting %s v%s", settings.app_name, settings.app_version)

    app.state.directory = DirectoryService(
        async_session_factory,
        query_timeout=settings.query_timeout_seconds,
    )

    yield

    await engine.dispose()
    logger.info("Shutting down %s", settings.app_name)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    application = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Venue directory API: filter, search and browse active listings.",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    @application.middleware("http")
    async def add_trace_id(request: Request, call_next):
        request.state.trace_id = set_trace_id()
        response = await call_next(request)
        response.headers["X-Trace-Id"] = request.state.trace_id
        return response

    @application.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        trace_id = getattr(request.state, "trace_id", None)
        logger.exception("Unhandled exception [trace_id=%s]", trace_id, exc_info=exc)
        return JSONResponse(
            status_code=500,
            content=failure("Internal server error", request),
        )

    @application.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content=failure(str(exc), request))

    @application.exception_handler(InvalidInputError)
    async def invalid_input_handler(request: Request, exc: InvalidInputError):
        return JSONResponse(status_code=422, content=failure(str(exc), request))

    @application.exception_handler(StoreUnavailableError)
    async def store_unavailable_handler(request: Request, exc: StoreUnavailableError):
        logger.warning("Store unavailable [trace_id=%s]: %s", getattr(request.state, "trace_id", None), exc)
        return JSONResponse(
            status_code=503,
            content=failure("Service temporarily unavailable", request, errors=[str(exc)]),
        )

    application.include_router(businesses_router, prefix="/api/v1/businesses", tags=["businesses"])
    application.include_router(categories_router, prefix="/api/v1/categories", tags=["categories"])
    application.include_router(amenities_router, prefix="/api/v1/amenities", tags=["amenities"])
    application.include_router(regions_router, prefix="/api/v1/regions", tags=["regions"])

    @application.get("/health", tags=["system"])
    async def health_check(request: Request, directory: DirectoryService = Depends(get_directory_service)):
        db_status = "ok"
        try:
            await directory.ping()
        except StoreUnavailableError as e:
            db_status = f"error: {e}"

        return ok(
            {
                "status": "healthy" if db_status == "ok" else "unhealthy",
                "version": settings.app_version,
                "database": db_status,
            },
            "Health check completed",
            request,
        )

    return application


app = create_app()
