"""
GreenCompass API — Application entry point.

Bootstraps FastAPI, wires up middleware and rate limiting, and registers
the route groups that serve carbon data to the dashboard.

Run locally:
    uvicorn greencompass.main:app --reload

Data mode is decided once, from GEMINI_API_KEY, when the service
singletons are imported; the lifespan hook only reports it.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from greencompass.core.config import settings
from greencompass.core.rate_limit import limiter
from greencompass.routes.carbon import router as carbon_router
from greencompass.routes.health import API_VERSION
from greencompass.routes.health import router as health_router

# ─── Logging ───────────────────────────────────────────────────────────────────
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


# ─── Lifespan ──────────────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Startup / shutdown logging. There is nothing to connect or tear down:
    each Gemini call opens and closes its own HTTP client.
    """
    logger.info(
        "Starting GreenCompass API (env: %s, data: %s)",
        settings.environment,
        "gemini" if settings.live_data_enabled else "offline fallback",
    )
    yield
    logger.info("Shutting down GreenCompass API")


# ─── App ───────────────────────────────────────────────────────────────────────
app = FastAPI(
    title="GreenCompass API",
    description=(
        "Carbon indexing, footprint and forecast data for the GreenCompass dashboard. "
        "Values are illustrative, not a scientific emissions model."
    ),
    version=API_VERSION,
    lifespan=lifespan,
    docs_url="/docs" if settings.environment != "production" else None,
    redoc_url="/redoc" if settings.environment != "production" else None,
)


# ─── Rate limiting ─────────────────────────────────────────────────────────────
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# ─── Middleware ─────────────────────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ─── Routes ────────────────────────────────────────────────────────────────────
app.include_router(health_router, prefix="/health", tags=["health"])
app.include_router(carbon_router)


@app.get("/", tags=["root"])
async def root():
    """API root — basic metadata."""
    return {
        "name": "GreenCompass API",
        "version": API_VERSION,
        "status": "running",
        "environment": settings.environment,
        "docs": "/docs",
    }
