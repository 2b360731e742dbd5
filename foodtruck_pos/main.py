from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
from typing import Optional
import logging

from foodtruck_pos.config import get_settings
from foodtruck_pos.database import Database
from foodtruck_pos.exceptions import POSError
from foodtruck_pos.utils.cache import CacheService
from foodtruck_pos.api import admin, auth, health, reports, seller

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.

    The server cannot work without its database, so a failure to reach it
    here is re-raised and stops the process.
    """
    # Startup
    logger.info("Starting up application...")

    logger.info("Creating database tables...")
    try:
        app.state.database.create_all()
    except Exception:
        logger.critical("Database is not reachable, shutting down", exc_info=True)
        raise
    logger.info("Database tables created successfully")

    yield

    # Shutdown
    logger.info("Shutting down application...")
    if app.state.owns_database:
        app.state.database.dispose()


def register_exception_handlers(app: FastAPI) -> None:
    """Render every error as JSON with a human-readable ``message``."""

    @app.exception_handler(POSError)
    async def pos_error_handler(request: Request, exc: POSError):
        return JSONResponse(status_code=exc.status_code, content={"message": exc.message})

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        message = exc.detail
        if exc.status_code == 404 and message == "Not Found":
            message = "Ruta de API no encontrada"
        return JSONResponse(status_code=exc.status_code, content={"message": str(message)})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        parts = []
        for error in exc.errors():
            location = ".".join(str(part) for part in error["loc"])
            parts.append(f"{location}: {error['msg']}")
        return JSONResponse(status_code=400, content={"message": "Datos inválidos - " + "; ".join(parts)})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(status_code=500, content={"message": "Error interno del servidor"})


def create_app(
    database: Optional[Database] = None,
    cache: Optional[CacheService] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        database: Store handle to use; built from DATABASE_URL when omitted
        cache: Cache to use; built from REDIS_URL when omitted
    """
    app = FastAPI(
        title="MyFoodTruck POS API",
        description="""
        Point-of-sale and back-office backend for a food truck:

        - **Auth**: Bearer tokens valid for 8 hours, admin and seller roles
        - **Admin**: Users, categories and products, plus the sales report
        - **Point of sale**: Catalog for the POS screen and sale recording

        ## Stock handling
        Recording a sale deducts stock per line inside one transaction,
        clamping at zero, and returns low-stock alerts for products at or
        below their minimum.

        ## Background processing
        Low-stock notifications and password reset codes are sent by
        Celery workers.

        ## Caching
        The POS catalog is cached in Redis and invalidated on every catalog
        change or sale.
        """,
        version="1.0.0",
        lifespan=lifespan
    )

    app.state.owns_database = database is None
    app.state.database = database or Database(settings.DATABASE_URL)
    app.state.cache = cache or CacheService.from_url(settings.REDIS_URL, settings.CACHE_TTL)

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Include API routers
    app.include_router(health.router, prefix="/api")
    app.include_router(auth.router, prefix="/api")
    app.include_router(admin.router, prefix="/api")
    app.include_router(reports.router, prefix="/api")
    app.include_router(seller.router, prefix="/api")

    @app.get("/", tags=["Root"])
    def root():
        """Root endpoint with API information."""
        return {
            "name": settings.APP_NAME,
            "version": "1.0.0",
            "docs": "/docs",
            "health": "/api/health/"
        }

    return app


app = create_app()
