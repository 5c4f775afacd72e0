"""
test_dashboard.py — Region snapshot and stale-selection handling.

Run:
    pytest tests/test_dashboard.py -v
"""

import asyncio

from greencompass.models.carbon import DataCategory, Region
from greencompass.services.dashboard import DashboardService, RegionSelection
from greencompass.services.data_acquisition import DataAcquisitionService
from greencompass.services.fallback_synthesizer import synthesize


def _offline_dashboard(sink, horizon_years=5):
    return DashboardService(DataAcquisitionService(prompt_client=None, sink=sink), horizon_years)


class TestDashboardService:

    async def test_offline_snapshot(self, sink, fixed_day):
        snapshot = await _offline_dashboard(sink).load(Region.KATHMANDU, fixed_day)
        assert snapshot.region is Region.KATHMANDU
        assert snapshot.live_data is False
        assert snapshot.history == synthesize(DataCategory.HISTORICAL_SERIES, Region.KATHMANDU, fixed_day)
        assert snapshot.indexing.sectors_sum_to_100()

    async def test_forecast_follows_history(self, sink, fixed_day):
        snapshot = await _offline_dashboard(sink, horizon_years=3).load(Region.LALITPUR, fixed_day)
        forecast = snapshot.forecast
        assert forecast.insufficient_data is False
        assert forecast.growth_rate > 0
        assert [p.year for p in forecast.predictions] == [2026, 2027, 2028]
        # Lalitpur fallback history sits above the 350 threshold
        assert all(p.status.value == "Critical" for p in forecast.predictions)

    async def test_live_flag_and_fallback_on_live_failure(self, stub_client, sink, fixed_day):
        service = DashboardService(
            DataAcquisitionService(prompt_client=stub_client("no numbers today"), sink=sink)
        )
        snapshot = await service.load(Region.BHAKTAPUR, fixed_day)
        assert snapshot.live_data is True
        assert snapshot.average_usage == synthesize(DataCategory.AVERAGE_USAGE, Region.BHAKTAPUR, fixed_day)
        assert len(sink.events) == 4

    async def test_short_live_history_gives_no_forecast(self, stub_client, sink, fixed_day):
        stub = stub_client({"annual carbon index": '[{"year": 2025, "index": 430}]'})
        service = DashboardService(DataAcquisitionService(prompt_client=stub, sink=sink))
        snapshot = await service.load(Region.KATHMANDU, fixed_day)
        assert len(snapshot.history) == 1
        assert snapshot.forecast.insufficient_data is True
        assert snapshot.forecast.predictions == []

    async def test_negative_live_index_gives_no_forecast(self, stub_client, sink, fixed_day):
        stub = stub_client({
            "annual carbon index": '[{"year": 2023, "index": 400}, {"year": 2024, "index": 300},'
                                   ' {"year": 2025, "index": -10}]',
        })
        service = DashboardService(DataAcquisitionService(prompt_client=stub, sink=sink))
        snapshot = await service.load(Region.LALITPUR, fixed_day)
        assert snapshot.history[-1].index == -10
        assert snapshot.forecast.insufficient_data is True
        assert snapshot.forecast.predictions == []


class TestRegionSelection:

    def test_latest_ticket_is_current(self):
        selection = RegionSelection()
        first = selection.select(Region.KATHMANDU)
        second = selection.select(Region.LALITPUR)
        assert not selection.is_current(first)
        assert selection.is_current(second)
        assert selection.current == second

    def test_reselecting_same_region_supersedes(self):
        selection = RegionSelection()
        first = selection.select(Region.KATHMANDU)
        second = selection.select(Region.KATHMANDU)
        assert first != second
        assert not selection.is_current(first)

    async def test_current_ticket_gets_snapshot(self, sink, fixed_day):
        selection = RegionSelection()
        ticket = selection.select(Region.BHAKTAPUR)
        snapshot = await selection.load_for(ticket, _offline_dashboard(sink), fixed_day)
        assert snapshot is not None
        assert snapshot.region is Region.BHAKTAPUR

    async def test_stale_result_is_dropped(self, sink, fixed_day):
        selection = RegionSelection()
        release = asyncio.Event()

        class SlowDashboard(DashboardService):
            async def load(self, region, today=None):
                await release.wait()
                return await super().load(region, today)

        service = SlowDashboard(DataAcquisitionService(prompt_client=None, sink=sink))
        stale = selection.select(Region.KATHMANDU)
        pending = asyncio.create_task(selection.load_for(stale, service, fixed_day))
        await asyncio.sleep(0)

        fresh = selection.select(Region.LALITPUR)
        release.set()

        assert await pending is None
        snapshot = await selection.load_for(fresh, service, fixed_day)
        assert snapshot.region is Region.LALITPUR
