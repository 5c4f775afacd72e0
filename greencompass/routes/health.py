"""
Health check endpoint.

Used by:
  - Docker HEALTHCHECK instruction
  - Load balancers / orchestrators
  - Dashboard front-end, to show "Gemini API connected" vs "Using mock data"

`live_data` reports which path carbon data takes: "gemini" when a key is
configured, "fallback" when every category is synthesised offline.
"""

import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from greencompass.core.config import settings
from greencompass.routes.carbon import get_acquisition_service
from greencompass.services.data_acquisition import DataAcquisitionService

logger = logging.getLogger(__name__)
router = APIRouter()

API_VERSION = "0.1.0"


class HealthResponse(BaseModel):
    status: str       # Always "ok" if the API process is alive
    version: str
    live_data: str    # "gemini" | "fallback"
    environment: str


@router.get("", response_model=HealthResponse, summary="API health check")
async def health_check(
    service: DataAcquisitionService = Depends(get_acquisition_service),
) -> HealthResponse:
    """
    Liveness plus the active data path.

    Healthy (HTTP 200) in offline mode too: the fallback path is a fully
    supported configuration, not a degraded one.
    """
    return HealthResponse(
        status="ok",
        version=API_VERSION,
        live_data="gemini" if service.live else "fallback",
        environment=settings.environment,
    )
