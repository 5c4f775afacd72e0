"""
carbon.py — Carbon data routes consumed by the GreenCompass dashboard.

Routes:
  GET  /api/v1/carbon/regions                    — supported regions
  GET  /api/v1/carbon/solutions                  — mitigation catalogue
  GET  /api/v1/carbon/{region}/dashboard         — all four categories + forecast
  GET  /api/v1/carbon/{region}/emission-factors
  GET  /api/v1/carbon/{region}/usage
  GET  /api/v1/carbon/{region}/history
  GET  /api/v1/carbon/{region}/indexing
  GET  /api/v1/carbon/{region}/forecast?horizon=5
  POST /api/v1/carbon/footprint                  — total + tree offset

Data problems never surface as errors here: acquisition always resolves to
live or fallback data. The only client errors are 422 (unknown region,
bad horizon, bad body) and 429 (rate limit).

Routes that may call Gemini are rate-limited per client IP.

TESTING
───────
  pytest tests/test_carbon_routes.py -v
  curl http://localhost:8000/api/v1/carbon/Kathmandu/dashboard
"""

import logging

from fastapi import APIRouter, Depends, Query, Request

from greencompass.core.config import settings
from greencompass.core.rate_limit import limiter
from greencompass.models.carbon import (
    DashboardSnapshot,
    EmissionFactors,
    Forecast,
    FootprintRequest,
    FootprintResult,
    HistoricalPoint,
    IndexingProfile,
    MitigationOption,
    Region,
    UsageProfile,
)
from greencompass.services import footprint_calculator, forecast_engine, mitigation
from greencompass.services.dashboard import DashboardService, dashboard_service
from greencompass.services.data_acquisition import DataAcquisitionService, data_acquisition_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/carbon", tags=["carbon"])


# ── Dependencies (overridden in tests) ────────────────────────────────────────

def get_acquisition_service() -> DataAcquisitionService:
    return data_acquisition_service


def get_dashboard_service() -> DashboardService:
    return dashboard_service


# ── Static ────────────────────────────────────────────────────────────────────

@router.get("/regions", response_model=list[str], summary="Supported regions")
async def list_regions() -> list[str]:
    return [r.value for r in Region]


@router.get("/solutions", response_model=list[MitigationOption], summary="Mitigation options")
async def list_solutions() -> list[MitigationOption]:
    return mitigation.list_options()


# ── Acquired data ─────────────────────────────────────────────────────────────

@router.get("/{region}/dashboard", response_model=DashboardSnapshot)
@limiter.limit(settings.rate_limit)
async def get_dashboard(
    request: Request,
    region: Region,
    service: DashboardService = Depends(get_dashboard_service),
) -> DashboardSnapshot:
    """Everything the dashboard renders for one region, in a single payload."""
    return await service.load(region)


@router.get("/{region}/emission-factors", response_model=EmissionFactors)
@limiter.limit(settings.rate_limit)
async def get_emission_factors(
    request: Request,
    region: Region,
    service: DataAcquisitionService = Depends(get_acquisition_service),
) -> EmissionFactors:
    return await service.fetch_emission_factors(region)


@router.get("/{region}/usage", response_model=UsageProfile)
@limiter.limit(settings.rate_limit)
async def get_average_usage(
    request: Request,
    region: Region,
    service: DataAcquisitionService = Depends(get_acquisition_service),
) -> UsageProfile:
    return await service.fetch_average_usage(region)


@router.get("/{region}/history", response_model=list[HistoricalPoint])
@limiter.limit(settings.rate_limit)
async def get_history(
    request: Request,
    region: Region,
    service: DataAcquisitionService = Depends(get_acquisition_service),
) -> list[HistoricalPoint]:
    return await service.fetch_historical_series(region)


@router.get("/{region}/indexing", response_model=IndexingProfile)
@limiter.limit(settings.rate_limit)
async def get_indexing(
    request: Request,
    region: Region,
    service: DataAcquisitionService = Depends(get_acquisition_service),
) -> IndexingProfile:
    return await service.fetch_indexing_profile(region)


@router.get("/{region}/forecast", response_model=Forecast)
@limiter.limit(settings.rate_limit)
async def get_forecast(
    request: Request,
    region: Region,
    horizon: int = Query(default=settings.forecast_horizon_years, ge=1, le=20),
    service: DataAcquisitionService = Depends(get_acquisition_service),
) -> Forecast:
    """Historical series for the region, projected `horizon` years ahead."""
    history = await service.fetch_historical_series(region)
    return forecast_engine.project(history, horizon)


# ── Calculator ────────────────────────────────────────────────────────────────

@router.post("/footprint", response_model=FootprintResult)
@limiter.limit(settings.rate_limit)
async def calculate_footprint(
    request: Request,
    payload: FootprintRequest,
    service: DataAcquisitionService = Depends(get_acquisition_service),
) -> FootprintResult:
    """
    Monthly footprint from raw usage values.

    Uses `factors` from the body when given, otherwise acquires the
    region's emission factors.
    """
    factors = payload.factors or await service.fetch_emission_factors(payload.region)
    result = footprint_calculator.compute(payload.usage, factors)
    logger.info("Footprint computed: total=%.2f trees=%d", result.total, result.trees_required)
    return result
