"""
Wallet FastAPI Application

Main entry point for the Wallet users and groups API.
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Common library imports
from common.database import IndexSpec, MongoDB, set_main_database
from common.utils import success_response
from common.utils.handlers import register_exception_handlers

# App-specific imports
from app.config import settings
from app.routers import users_router, groups_router
from app.dependencies import init_all_services

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


# =============================================================================
# Database Instance
# =============================================================================
main_db = MongoDB()

INDEXES = [
    IndexSpec(settings.USERS_COLLECTION, "email", unique=True),
    IndexSpec(settings.USERS_COLLECTION, "username"),
    IndexSpec(settings.GROUPS_COLLECTION, "name", unique=True),
    IndexSpec(settings.GROUPS_COLLECTION, "members.email"),
    IndexSpec(settings.TRANSACTIONS_COLLECTION, "username"),
]


# =============================================================================
# Application Lifespan
# =============================================================================
@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Handles startup and shutdown tasks like database connections
    and service initialization.
    """
    # Startup
    logger.info("Starting Wallet API...")
    settings.validate_required()

    await main_db.connect(
        uri=settings.MONGODB_URI,
        database_name=settings.MONGODB_DATABASE,
        indexes=INDEXES,
    )
    set_main_database(main_db)
    logger.info(f"Connected to database: {settings.MONGODB_DATABASE}")

    init_all_services(db=main_db.db, settings=settings)
    logger.info("Wallet API started successfully!")

    yield

    # Shutdown
    logger.info("Shutting down Wallet API...")
    await main_db.disconnect()
    logger.info("Wallet API shut down complete.")


# =============================================================================
# FastAPI Application
# =============================================================================
app = FastAPI(
    title="Wallet API",
    description="Users and groups with membership reconciliation",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs" if settings.is_development() else None,
    redoc_url="/redoc" if settings.is_development() else None,
)

register_exception_handlers(app)

# =============================================================================
# CORS Middleware
# =============================================================================
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
    allow_methods=["*"],
    allow_headers=["*"],
)

# =============================================================================
# Include Routers (all under /api prefix)
# =============================================================================
API_PREFIX = "/api"

app.include_router(users_router, prefix=API_PREFIX, tags=["Users"])
app.include_router(groups_router, prefix=API_PREFIX, tags=["Groups"])


# =============================================================================
# Health Check Endpoint
# =============================================================================
@app.get("/health", tags=["Health"])
async def health():
    """
    Health check endpoint.

    Returns the status of the API and database connection.
    """
    return success_response({
        "status": "ok",
        "version": "1.0.0",
        "database": main_db.is_connected,
    })


# =============================================================================
# Run with Uvicorn
# =============================================================================
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.is_development(),
    )
