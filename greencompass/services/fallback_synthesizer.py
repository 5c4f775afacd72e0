"""
fallback_synthesizer.py — Deterministic offline data for every category.

Used when no Gemini key is configured, and as the per-call substitute
whenever a live fetch fails. Pure functions of (category, region, date):
no I/O, no randomness, so the same inputs always give identical output.
Variation comes only from the calendar (day-of-month, month, season) and
the static tables in fallback_profiles.py.

Formulas
────────
  emission factors   d = (day % 10) / 100                      → +0.00 … +0.09
                     energy + d, transport + 2d, waste + d       (2 dp)
  average usage      v = day / 31                               → (0, 1]
                     base + round_half_up(v * span) + seasonal offset
  historical series  HISTORY_YEARS points ending last year,
                     index[i] = base[i] + day % mod[i]
  indexing profile   current = base + day % mod
                     trend   = base - (day % mod) * step        (2 dp)
                     sectors = base + day % mod, remainder to 100

USAGE
─────
    from datetime import date
    from greencompass.services.fallback_synthesizer import synthesize
    synthesize(DataCategory.AVERAGE_USAGE, Region.KATHMANDU, date(2026, 1, 15))
    # UsageProfile(energy=163.0, transport=57.0, waste=32.0)
"""

from __future__ import annotations

import math
from datetime import date
from typing import Union

from greencompass.models.carbon import (
    DataCategory,
    EmissionFactors,
    HistoricalPoint,
    IndexingProfile,
    IndexingSummary,
    Region,
    Sector,
    UsageProfile,
)
from greencompass.services.fallback_profiles import (
    EMISSION_FACTOR_BASES,
    HISTORY_BASES,
    HISTORY_YEARS,
    INDEXING_BASES,
    MONSOON,
    SEASONAL_USAGE_OFFSETS,
    SECTOR_PALETTE,
    SPRING_AUTUMN,
    USAGE_BASES,
    WINTER,
)

CategoryData = Union[EmissionFactors, UsageProfile, list[HistoricalPoint], IndexingProfile]


# ── Calendar helpers ──────────────────────────────────────────────────────────

def season_for(day: date) -> str:
    """Nov–Feb winter, Jun–Sep monsoon, otherwise spring/autumn."""
    if day.month >= 11 or day.month <= 2:
        return WINTER
    if 6 <= day.month <= 9:
        return MONSOON
    return SPRING_AUTUMN


def quarter_for(day: date) -> int:
    return (day.month - 1) // 3 + 1


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def assign_palette(sectors: list[Sector]) -> list[Sector]:
    """Colour sectors by cycling SECTOR_PALETTE in sector order."""
    return [
        s.model_copy(update={"color": SECTOR_PALETTE[i % len(SECTOR_PALETTE)]})
        for i, s in enumerate(sectors)
    ]


# ── Per-category synthesis ────────────────────────────────────────────────────

def emission_factors(region: Region, today: date) -> EmissionFactors:
    base = EMISSION_FACTOR_BASES[region]
    d = (today.day % 10) / 100
    return EmissionFactors(
        energy=round(base.energy + d, 2),
        transport=round(base.transport + 2 * d, 2),
        waste=round(base.waste + d, 2),
    )


def average_usage(region: Region, today: date) -> UsageProfile:
    base = USAGE_BASES[region]
    seasonal = SEASONAL_USAGE_OFFSETS[season_for(today)]
    v = today.day / 31

    def _value(name: str) -> float:
        f = getattr(base, name)
        return float(f.base + _round_half_up(v * f.span) + seasonal[name])

    return UsageProfile(
        energy=_value("energy"),
        transport=_value("transport"),
        waste=_value("waste"),
    )


def historical_series(region: Region, today: date) -> list[HistoricalPoint]:
    first_year = today.year - HISTORY_YEARS
    return [
        HistoricalPoint(year=first_year + i, index=float(base + today.day % mod))
        for i, (base, mod) in enumerate(HISTORY_BASES[region])
    ]


def indexing_profile(region: Region, today: date) -> IndexingProfile:
    p = INDEXING_BASES[region]
    day = today.day

    current_base, current_mod = p.current
    trend_base, trend_mod, trend_step = p.trend
    status_mod, status_threshold = p.status

    summary = IndexingSummary(
        current=float(current_base + day % current_mod),
        target=float(p.target),
        trend=round(trend_base - (day % trend_mod) * trend_step, 2),
        status="Improving" if day % status_mod > status_threshold else "Stable",
    )

    sectors = [Sector(name=name, value=float(base + day % mod)) for name, base, mod in p.sectors]
    sectors.append(Sector(name=p.remainder_sector, value=100.0 - sum(s.value for s in sectors)))

    phrases = [when_zero if day % mod == 0 else otherwise for mod, when_zero, otherwise in p.detail_phrases]
    details = p.details.format(*phrases, quarter=quarter_for(today), year=today.year)

    return IndexingProfile(summary=summary, sectors=assign_palette(sectors), details=details)


_SYNTHESIZERS = {
    DataCategory.EMISSION_FACTORS:  emission_factors,
    DataCategory.AVERAGE_USAGE:     average_usage,
    DataCategory.HISTORICAL_SERIES: historical_series,
    DataCategory.INDEXING_PROFILE:  indexing_profile,
}


def synthesize(category: DataCategory, region: Region, today: date) -> CategoryData:
    """Deterministic fallback value for one category, region and date."""
    return _SYNTHESIZERS[category](region, today)
