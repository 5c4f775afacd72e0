"""
dashboard.py — One-call region snapshot + stale-selection guard.

DashboardService.load() is what the dashboard needs on every region change:
the four acquisitions (concurrently) followed by the forecast.

RegionSelection covers the staleness rule. A region switch does not cancel
in-flight acquisitions. Whoever started a load must drop its result if the
user picked another region in the meantime, because those values belong to
the old region:

    selection = RegionSelection()
    ticket = selection.select(Region.LALITPUR)
    snapshot = await selection.load_for(ticket, dashboard_service)
    if snapshot is None:
        ...  # superseded by a later select(); nothing to render
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional

from greencompass.core.config import settings
from greencompass.models.carbon import DashboardSnapshot, Region
from greencompass.services import forecast_engine
from greencompass.services.data_acquisition import DataAcquisitionService, data_acquisition_service

logger = logging.getLogger(__name__)


class DashboardService:
    def __init__(
        self,
        acquisition: DataAcquisitionService = data_acquisition_service,
        horizon_years: int = settings.forecast_horizon_years,
    ) -> None:
        self.acquisition = acquisition
        self.horizon_years = horizon_years

    async def load(self, region: Region, today: Optional[date] = None) -> DashboardSnapshot:
        data = await self.acquisition.acquire_all(region, today)
        forecast = forecast_engine.project(data.history, self.horizon_years)
        logger.info(
            "Dashboard loaded for %s (live=%s, growth=%s)",
            region.value, self.acquisition.live,
            f"{forecast.growth_rate:.4f}" if forecast.growth_rate is not None else "n/a",
        )
        return DashboardSnapshot(
            region=region,
            live_data=self.acquisition.live,
            emission_factors=data.emission_factors,
            average_usage=data.average_usage,
            history=data.history,
            indexing=data.indexing,
            forecast=forecast,
        )


@dataclass(frozen=True)
class SelectionTicket:
    region: Region
    generation: int


class RegionSelection:
    """Tracks the caller's current region; older tickets become stale."""

    def __init__(self) -> None:
        self._counter = itertools.count(1)
        self._current: Optional[SelectionTicket] = None

    @property
    def current(self) -> Optional[SelectionTicket]:
        return self._current

    def select(self, region: Region) -> SelectionTicket:
        self._current = SelectionTicket(region=region, generation=next(self._counter))
        return self._current

    def is_current(self, ticket: SelectionTicket) -> bool:
        return self._current == ticket

    async def load_for(
        self,
        ticket: SelectionTicket,
        service: DashboardService,
        today: Optional[date] = None,
    ) -> Optional[DashboardSnapshot]:
        """Load the ticket's region; None if the ticket went stale meanwhile."""
        snapshot = await service.load(ticket.region, today)
        if not self.is_current(ticket):
            logger.debug(
                "Discarding stale snapshot for %s (generation %d)",
                ticket.region.value, ticket.generation,
            )
            return None
        return snapshot


# Module-level singleton
dashboard_service = DashboardService()
