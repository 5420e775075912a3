"""FastAPI application setup and configuration."""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from cleanconnect.api.middleware.error_handler import (
    generic_exception_handler,
    http_exception_handler,
    marketplace_exception_handler,
    notification_exception_handler,
    validation_exception_handler,
)
from cleanconnect.api.middleware.logging import LoggingMiddleware, setup_logging
from cleanconnect.api.routes import admin, auth, bookings, chats, cleaners, health, jobs, support, users
from cleanconnect.config import DEFAULT_JWT_SECRET, get_settings
from cleanconnect.errors import MarketplaceError
from cleanconnect.services.database import (
    get_db_manager,
    initialize_database,
    shutdown_database,
)
from cleanconnect.services.notifier import NotificationError

logger = structlog.get_logger(__name__)

VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan context manager.

    Handles startup and shutdown events.
    """
    settings = get_settings()

    # Startup
    setup_logging(log_level=settings.log_level, log_format=settings.log_format)

    if settings.jwt_secret == DEFAULT_JWT_SECRET:
        logger.warning("default_jwt_secret_in_use")

    # Tests initialize their own database before the app starts
    db_manager = get_db_manager() or initialize_database()
    await db_manager.initialize()
    if db_manager.is_sqlite:
        # SQLite deployments skip migrations
        await db_manager.create_tables()

    logger.info("application_started", version=VERSION)

    yield

    # Shutdown
    await shutdown_database()


# Create FastAPI application
app = FastAPI(
    title="CleanConnect API",
    description="Marketplace connecting clients with cleaning professionals",
    version=VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

# ========== CORS Configuration ==========

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH"],
    allow_headers=["Authorization", "Content-Type"],
)

# ========== Custom Middleware ==========

# Logging middleware (added last so it wraps every other layer)
app.add_middleware(LoggingMiddleware)

# ========== Exception Handlers ==========

app.add_exception_handler(MarketplaceError, marketplace_exception_handler)
app.add_exception_handler(NotificationError, notification_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)

# ========== Route Registration ==========

app.include_router(health.router)
app.include_router(auth.router)
app.include_router(users.router)
app.include_router(cleaners.router)
app.include_router(bookings.router)
app.include_router(jobs.router)
app.include_router(chats.router)
app.include_router(support.router)
app.include_router(admin.router)
app.include_router(admin.seed_router)

# ========== Root Endpoint ==========


@app.get(
    "/",
    tags=["root"],
    summary="API root",
    description="Returns API information and available endpoints",
)
async def root() -> dict:
    """API root endpoint.

    Returns:
        API information and version
    """
    return {
        "service": "CleanConnect API",
        "version": VERSION,
        "documentation": {
            "openapi": "/openapi.json",
            "swagger": "/docs",
            "redoc": "/redoc",
        },
        "health": {
            "liveness": "/api/health/live",
            "readiness": "/api/health/ready",
            "health": "/api/health",
        },
    }


# ========== Development Server ==========

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "cleanconnect.api.main:app",
        host="0.0.0.0",
        port=5000,
        reload=True,
        log_level="info",
    )
