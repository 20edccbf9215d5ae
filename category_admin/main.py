"""FastAPI application entry point.

Category administration backend: tree, move, reorder and statistics
endpoints over the category store.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from category_admin import __version__
from category_admin.api.errors import RejectionError
from category_admin.api.routes.categories import router as categories_router
from category_admin.api.routes.health import router as health_router
from category_admin.config import settings
from category_admin.core.outcome import CycleDetectedError
from category_admin.infra.database import close_db_engine, create_tables, verify_db_connection
from category_admin.infra.logging import get_logger, setup_logging
from category_admin.schemas.common import ErrorResponse

# Setup logging first
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler.

    Startup:
    - Create tables when configured
    - Verify database connection

    Shutdown:
    - Close database connections
    """
    logger.info(
        "Category admin starting",
        environment=settings.environment,
        memory_store=settings.use_memory_store,
    )

    if not settings.use_memory_store:
        if settings.db_create_tables:
            await create_tables()

        db_ok = await verify_db_connection()
        if not db_ok:
            logger.warning("Database connection failed - will retry on first request")

    yield

    logger.info("Category admin shutting down")
    if not settings.use_memory_store:
        await close_db_engine()
    logger.info("Cleanup complete")


# Create FastAPI app
app = FastAPI(
    title="Category Admin",
    description="Category tree administration for the e-commerce console",
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs" if settings.environment == "dev" else None,
    redoc_url=None,
)

# CORS middleware (admin console runs on its own origin in development)
if settings.environment == "dev":
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


# =============================================================================
# Exception Handlers
# =============================================================================


@app.exception_handler(RejectionError)
async def rejection_handler(request: Request, exc: RejectionError) -> JSONResponse:
    """Render a rejected tree operation as a structured client error."""
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            error=exc.rejection.detail or exc.rejection.reason.value,
            error_type=exc.rejection.reason.value,
        ).model_dump(),
    )


@app.exception_handler(CycleDetectedError)
async def integrity_fault_handler(request: Request, exc: CycleDetectedError) -> JSONResponse:
    """Stored categories contain a parent cycle; needs manual repair."""
    logger.error(
        "Category integrity fault",
        error=str(exc),
        category_id=exc.node_id,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            error="Category hierarchy is inconsistent",
            error_type="cycle_detected",
            detail={"category_id": exc.node_id, "chain": exc.visited},
        ).model_dump(),
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle uncaught exceptions."""
    logger.error(
        "Unhandled exception",
        error=str(exc),
        error_type=type(exc).__name__,
        path=request.url.path,
        exc_info=True,
    )

    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "Internal server error",
            "error_type": type(exc).__name__,
        },
    )


# =============================================================================
# Include Routers
# =============================================================================

app.include_router(health_router, tags=["Health"])
app.include_router(categories_router, prefix="/categories", tags=["Categories"])


# =============================================================================
# Root Endpoint
# =============================================================================


@app.get("/")
async def root() -> dict:
    """Root endpoint - basic service info."""
    return {
        "service": "Category Admin",
        "version": __version__,
        "environment": settings.environment,
    }
