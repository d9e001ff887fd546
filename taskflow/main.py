"""FastAPI main application with app factory and route configuration."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__, deps
from .routes import categories, filters, store, tasks
from .schemas import HealthResponse, StoreStatusResponse
from .services.persistence import build_collections
from .services.task_store import StoreStatus, get_task_store, initialize_task_store
from .utils.logging import (
    configure_request_logging,
    log_shutdown_info,
    log_startup_info,
    setup_logging,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager for startup and shutdown events.

    Args:
        app: FastAPI application instance
    """
    settings = deps.get_settings()

    try:
        setup_logging(settings)
        log_startup_info(settings)

        task_records, category_records = build_collections(settings)
        task_store = initialize_task_store(task_records, category_records)

    except Exception as e:
        logger.error(f"Error during application startup: {str(e)}")
        raise

    # A failed load leaves the store errored; POST /store/reload retries it.
    result = await task_store.load()
    if result != StoreStatus.READY:
        logger.warning(f"Application started with store {result.value}: {task_store.error}")
    else:
        logger.info("Application startup completed successfully")

    yield

    log_shutdown_info(settings)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance
    """
    app = FastAPI(
        title="TaskFlow",
        description="Personal task manager with categories, priorities, due dates and filtered views",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.middleware("http")(configure_request_logging())

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Handle HTTP exceptions with proper logging."""
        logger.warning(
            f"HTTP {exc.status_code}: {exc.detail} for {request.method} {request.url}"
        )

        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": exc.detail,
                "status_code": exc.status_code,
                "path": str(request.url),
            },
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ):
        """Handle request validation errors with detailed information."""
        logger.warning(
            f"Validation error for {request.method} {request.url}: {exc.errors()}"
        )

        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "error": "Validation error",
                "details": jsonable_encoder(exc.errors()),
                "status_code": 422,
                "path": str(request.url),
            },
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle unexpected exceptions."""
        logger.error(
            f"Unexpected error for {request.method} {request.url}: {str(exc)}",
            exc_info=True,
        )

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": "Internal server error",
                "status_code": 500,
                "path": str(request.url),
            },
        )

    @app.get("/healthz", response_model=HealthResponse, tags=["health"])
    async def health_check() -> HealthResponse:
        """Health check endpoint for monitoring and load balancers.

        Reports "degraded" until the task store has loaded successfully.
        """
        task_store = get_task_store()
        if task_store is None:
            return HealthResponse(
                status="degraded",
                store=StoreStatusResponse(status="uninitialized"),
                version=__version__,
            )

        return HealthResponse(
            status="healthy" if task_store.status == StoreStatus.READY else "degraded",
            store=StoreStatusResponse(status=task_store.status.value, error=task_store.error),
            version=__version__,
        )

    @app.get("/", tags=["root"])
    async def root():
        """Root endpoint with API information."""
        return {
            "name": "TaskFlow API",
            "version": __version__,
            "docs_url": "/docs",
            "health_check": "/healthz",
            "endpoints": {
                "tasks": "/tasks",
                "categories": "/categories",
                "filters": "/filters",
                "store": "/store",
            },
        }

    # Routers carry their own prefixes and tags
    app.include_router(tasks.router)
    app.include_router(categories.router)
    app.include_router(filters.router)
    app.include_router(store.router)

    logger.info("FastAPI application created and configured")

    return app


# Create the app instance
app = create_app()
