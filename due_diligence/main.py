"""
FastAPI application entry point.
"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from due_diligence.config import settings
from due_diligence.middleware.error_handler import (
    ErrorHandlerMiddleware,
    validation_exception_handler,
)
from due_diligence.middleware.rate_limit import limiter
from due_diligence.api.v1.routers import cultural_resources

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Handles startup and shutdown events using the modern FastAPI pattern.
    """
    # Startup
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Log level: {settings.log_level}")
    logger.info(f"Search radii: tribal={settings.tribal_search_radius_miles} mi, "
                f"nrhp={settings.nrhp_search_radius_miles} mi")
    logger.info(f"ArcGIS timeout: {settings.arcgis_timeout}s, "
                f"attempts: {settings.arcgis_max_retry_attempts}")
    if settings.static_tribal_lands_path or settings.static_nrhp_path:
        logger.info("Serving one or more layers from local feature sets")
    logger.info(f"Rate limit: {settings.rate_limit_requests} requests/minute")

    yield

    # Shutdown
    from due_diligence.infrastructure.external_api_client import close_api_client
    logger.info("Shutting down application...")
    await close_api_client()
    logger.info("Shutdown complete")


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    Cultural Resources API for Rio Grande Due Diligence property reports

    This API determines the cultural-resources exposure of a New Mexico property
    from public GIS data.

    ## Features

    - **Tribal Lands**: BIA land area containment and nearby tribal lands
      (Census TIGERweb AIAN as fallback)
    - **Historic Places**: NRHP historic district containment and listings within one mile
    - **Risk Determination**: risk tier, tribal consultation, Section 106 and
      recommended actions
    - **Fail-open**: GIS outages yield a degraded assessment, never a failed report
    - **Rate Limiting**: Protects the API from abuse

    ## Risk Levels

    1. `high`: on tribal land or inside an NRHP historic district
    2. `moderate`: NRHP property within 0.1 mi or tribal land within 0.25 mi
    3. `low`: otherwise
    """,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

# Add rate limiter to app state
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)

# Add CORS middleware with configurable origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Add global error handling middleware
app.add_middleware(ErrorHandlerMiddleware)

# Include routers
app.include_router(cultural_resources.router, prefix="/api/v1")


@app.get("/", tags=["health"])
async def root():
    """
    Root endpoint for health check.

    Returns:
        Status message
    """
    return {
        "status": "healthy",
        "service": settings.app_name,
        "version": settings.app_version,
    }


@app.get("/health", tags=["health"])
async def health_check():
    """
    Health check endpoint.

    Returns:
        Health status
    """
    return {
        "status": "healthy",
        "service": settings.app_name,
    }
