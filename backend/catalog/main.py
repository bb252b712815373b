"""
FastAPI application entry point for the item catalog service.

This module builds the FastAPI app with CORS, request logging and error
handlers, wires the catalog core at startup, and registers the API routers.
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from catalog.config import Settings, settings
from catalog.database import init_db
from catalog.exceptions import CatalogError, NotFoundError
from catalog.routers import images, items
from catalog.schemas import HelloResponse
from catalog.services.catalog_service import CatalogService
from catalog.services.categories import CategoryResolver
from catalog.services.images import ImageStore
from catalog.services.items import SqlItemRepository

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def build_catalog(config: Settings):
    """
    Open the stores named by ``config`` and compose the catalog service.
    Returns the service together with the database it owns.
    """
    database = init_db(
        config.DATABASE_URL,
        echo=config.DATABASE_ECHO,
        timeout=config.DATABASE_TIMEOUT,
    )
    catalog = CatalogService(
        images=ImageStore(config.IMAGE_DIR, extension=config.IMAGE_EXTENSION),
        categories=CategoryResolver(database),
        items=SqlItemRepository(database),
    )
    return catalog, database


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.
    """
    # Startup
    config: Settings = app.state.settings
    logger.info("Initializing database...")
    catalog, database = build_catalog(config)
    app.state.catalog = catalog
    logger.info(f"Database initialized, images stored in {config.IMAGE_DIR}")

    yield

    # Shutdown
    logger.info("Shutting down application...")
    database.dispose()


def create_app(config: Optional[Settings] = None) -> FastAPI:
    config = config or settings

    app = FastAPI(
        title="Item Catalog API",
        description="API for listing, searching and adding catalog items",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = config

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "HEAD", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    # Add GZip compression
    app.add_middleware(GZipMiddleware, minimum_size=1000)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(
            f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms:.1f} ms)"
        )
        return response

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"detail": exc.message, "code": exc.code},
        )

    @app.exception_handler(CatalogError)
    async def catalog_error_handler(request: Request, exc: CatalogError):
        logger.error(f"{exc.code}: {exc.message} {exc.details}", exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": exc.message, "code": exc.code},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Global exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "Internal Server Error", "details": str(exc)},
        )

    @app.get("/", response_model=HelloResponse)
    async def hello():
        """Root endpoint for health check."""
        return HelloResponse(message="Hello, world!")

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "healthy"}

    # Register routers
    app.include_router(items.router, tags=["items"])
    app.include_router(images.router, tags=["images"])

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "catalog.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )
