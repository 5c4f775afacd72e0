"""
fallback_profiles.py — Static per-region base profiles for offline data.

Pure data; the formulas that turn these into dated values live in
fallback_synthesizer.py. Every number here is an illustrative placeholder,
not measured climate data.

Invariants the tables must keep (checked in tests/test_fallback_synthesizer.py):
  - usage:    base + span + max(seasonal offset) and base + min(seasonal offset)
              stay inside USAGE_ADVISORY_RANGES
  - history:  base[i] - base[i-1] >= mod[i-1], so index values strictly
              increase for every day of the month
  - indexing: fixed sectors never exceed 100 together, so the remainder
              sector stays positive
"""

from dataclasses import dataclass, field

from greencompass.models.carbon import Region

# Sector colours, cycled in sector order.
SECTOR_PALETTE: tuple[str, ...] = ("#10b981", "#34d399", "#22c55e", "#059669")

# Number of historical years synthesised (ending the year before today).
HISTORY_YEARS = 5

WINTER = "winter"
MONSOON = "monsoon"
SPRING_AUTUMN = "spring_autumn"


# ── Emission factors ──────────────────────────────────────────────────────────
# kg CO2e per unit; day-of-month adds up to +0.09 (transport +0.18).

@dataclass(frozen=True)
class FactorBase:
    energy: float
    transport: float
    waste: float


EMISSION_FACTOR_BASES: dict[Region, FactorBase] = {
    Region.KATHMANDU: FactorBase(energy=0.85, transport=2.25, waste=1.40),
    Region.BHAKTAPUR: FactorBase(energy=0.82, transport=2.20, waste=1.35),
    Region.LALITPUR:  FactorBase(energy=0.84, transport=2.23, waste=1.38),
}


# ── Average usage ─────────────────────────────────────────────────────────────
# value = base + round(day/31 * span) + seasonal offset

@dataclass(frozen=True)
class UsageField:
    base: int
    span: int


@dataclass(frozen=True)
class UsageBase:
    energy: UsageField
    transport: UsageField
    waste: UsageField


USAGE_BASES: dict[Region, UsageBase] = {
    Region.KATHMANDU: UsageBase(UsageField(140, 30), UsageField(50, 15), UsageField(28, 8)),
    Region.BHAKTAPUR: UsageBase(UsageField(85, 25),  UsageField(30, 12), UsageField(18, 7)),
    Region.LALITPUR:  UsageBase(UsageField(120, 28), UsageField(42, 14), UsageField(24, 8)),
}

# Heating in winter; monsoon rain cuts commuting and raises organic waste.
SEASONAL_USAGE_OFFSETS: dict[str, dict[str, int]] = {
    WINTER:        {"energy": 8,  "transport": 0,  "waste": 0},
    MONSOON:       {"energy": -6, "transport": -4, "waste": 2},
    SPRING_AUTUMN: {"energy": 0,  "transport": 0,  "waste": 0},
}


# ── Historical series ─────────────────────────────────────────────────────────
# index[i] = base + day % mod, oldest year first.

HISTORY_BASES: dict[Region, tuple[tuple[int, int], ...]] = {
    Region.KATHMANDU: ((408, 5), (414, 6), (421, 7), (429, 8), (438, 9)),
    Region.BHAKTAPUR: ((378, 4), (383, 5), (389, 6), (396, 7), (404, 8)),
    Region.LALITPUR:  ((393, 5), (399, 6), (406, 7), (414, 8), (423, 9)),
}


# ── Indexing profile ──────────────────────────────────────────────────────────

@dataclass(frozen=True)
class IndexingBase:
    current: tuple[int, int]                  # (base, mod)   → base + day % mod
    target: float
    trend: tuple[float, int, float]           # (base, mod, step) → base - (day % mod) * step
    status: tuple[int, int]                   # (mod, threshold) → "Improving" if day % mod > threshold
    sectors: tuple[tuple[str, int, int], ...]  # (name, base, mod); remainder sector appended
    remainder_sector: str
    details: str                              # format(quarter=, year=, *phrases)
    # (mod, phrase if day % mod == 0, phrase otherwise), one per {} in details
    detail_phrases: tuple[tuple[int, str, str], ...] = field(default_factory=tuple)


INDEXING_BASES: dict[Region, IndexingBase] = {
    Region.KATHMANDU: IndexingBase(
        current=(448, 10),
        target=320,
        trend=(-5.0, 3, 0.2),
        status=(5, 2),
        sectors=(("Transportation", 30, 5), ("Energy", 34, 4), ("Industry", 17, 3)),
        remainder_sector="Agriculture",
        details="Q{quarter} {year}: Traffic emissions {}. Grid stability {}.",
        detail_phrases=((2, "slightly up", "stable"), (3, "improved", "fluctuating")),
    ),
    Region.BHAKTAPUR: IndexingBase(
        current=(394, 8),
        target=300,
        trend=(-3.8, 4, 0.15),
        status=(4, 1),
        sectors=(("Transportation", 26, 4), ("Energy", 29, 3), ("Industry", 19, 3)),
        remainder_sector="Agriculture",
        details="Q{quarter} {year}: Heritage zone traffic restrictions {} emissions.",
        detail_phrases=((2, "helping reduce", "maintaining"),),
    ),
    Region.LALITPUR: IndexingBase(
        current=(416, 9),
        target=310,
        trend=(-4.5, 3, 0.18),
        status=(3, 0),
        sectors=(("Transportation", 28, 4), ("Energy", 33, 4), ("Industry", 18, 3)),
        remainder_sector="Agriculture",
        details="Q{quarter} {year}: Construction activity {}. Solar adoption growing.",
        detail_phrases=((2, "elevated", "moderate"),),
    ),
}
