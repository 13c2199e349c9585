"""
FastAPI application entry point.
"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from app.config import settings
from app.api.rate_limit import limiter
from app.middleware.error_handler import ErrorHandlerMiddleware
from app.api.v1.routers import layout, materials

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
    logger.info(f"Default spacing: {settings.default_vine_spacing_ft}ft vine x "
                f"{settings.default_row_spacing_ft}ft row")
    logger.info(f"Rate limit: {settings.rate_limit_requests} requests/minute "
                f"(enabled={settings.rate_limit_enabled})")

    yield

    # Shutdown
    logger.info("Shutdown complete")


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    Field Geometry and Row Layout API for Vineyard Planning

    This API turns a hand-drawn field boundary into a trellis row layout,
    vine counts, a bill of materials and its cost.

    ## Features

    - **Field Metrics**: Spherical area, perimeter and approximate width/length
      of a geographic boundary
    - **Row Layout**: Evenly spaced rows at any bearing, clipped to convex and
      non-convex boundaries
    - **Bill of Materials**: Posts, anchors, wire, drip irrigation and hardware
      for a 3-wire VSP trellis, priced with overridable unit prices
    - **Multi-field Summary**: Totals across every field of a vineyard
    - **Rate Limiting**: Protects the API from abuse

    ## Row Layout Algorithm

    1. Computes the boundary's bounding box and its diagonal in feet
    2. Places candidate row lines across the box at the requested spacing
    3. Splits each line at its crossings with the boundary
    4. Keeps the pieces whose midpoint lies inside the field
    """,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

# Add rate limiter to app state
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

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
app.include_router(layout.router, prefix="/api/v1")
app.include_router(materials.router, prefix="/api/v1")


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
