"""
carbon.py — Pydantic models for the carbon data layer.

Every model here is frozen: the acquisition service builds a snapshot once
per region selection and downstream code (forecast, calculator, routes)
only ever reads it.

The same models validate live Gemini output and fallback data, so a value
produced by fallback_synthesizer.py always passes the checks applied to
extracted JSON. Pydantic's lax mode coerces unambiguous numeric strings
("1.1" → 1.1, "2020" → 2020); anything else is a validation failure.
"""

from enum import Enum
from typing import Annotated, Any, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, TypeAdapter

# ── Enums ─────────────────────────────────────────────────────────────────────


class Region(str, Enum):
    """Supported localities. The value is the display name used in prompts."""

    KATHMANDU = "Kathmandu"
    BHAKTAPUR = "Bhaktapur"
    LALITPUR = "Lalitpur"


class DataCategory(str, Enum):
    EMISSION_FACTORS = "emission_factors"
    AVERAGE_USAGE = "average_usage"
    HISTORICAL_SERIES = "historical_series"
    INDEXING_PROFILE = "indexing_profile"


class PredictionStatus(str, Enum):
    # No "Normal" class: every projected year is flagged.
    WARNING = "Warning"
    CRITICAL = "Critical"


# ── Acquired categories ───────────────────────────────────────────────────────

# Monthly household consumption bands used in prompts and fallback tables.
# Advisory only: UsageProfile accepts values outside them.
USAGE_ADVISORY_RANGES: dict[str, tuple[float, float]] = {
    "energy":    (70.0, 200.0),   # kWh
    "transport": (15.0, 80.0),    # litres of petrol
    "waste":     (12.0, 45.0),    # kg
}

# Sector shares are percentages; live data within this distance of 100 is
# treated as summing to 100.
SECTOR_SUM_TOLERANCE = 0.5


class EmissionFactors(BaseModel):
    """kg CO2e per unit of consumption. All three must be positive."""

    model_config = ConfigDict(frozen=True)

    energy:    float = Field(..., gt=0, description="kg CO2e per kWh")
    transport: float = Field(..., gt=0, description="kg CO2e per litre petrol")
    waste:     float = Field(..., gt=0, description="kg CO2e per kg waste")


class UsageProfile(BaseModel):
    """Average monthly consumption for one household."""

    model_config = ConfigDict(frozen=True)

    energy:    float  # kWh
    transport: float  # litres
    waste:     float  # kg

    def outside_advisory_range(self) -> list[str]:
        """Names of the fields that fall outside USAGE_ADVISORY_RANGES."""
        out = []
        for name, (low, high) in USAGE_ADVISORY_RANGES.items():
            value = getattr(self, name)
            if not low <= value <= high:
                out.append(name)
        return out


class HistoricalPoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    year:  int
    index: float  # carbon index (ppm-equivalent severity score)


def _check_series(points: list[HistoricalPoint]) -> list[HistoricalPoint]:
    if not points:
        raise ValueError("historical series must not be empty")
    for prev, cur in zip(points, points[1:]):
        if cur.year <= prev.year:
            raise ValueError(
                f"historical series years must strictly increase ({prev.year} → {cur.year})"
            )
    return points


HistoricalSeries = Annotated[list[HistoricalPoint], AfterValidator(_check_series)]

# Validates raw JSON arrays (live or fallback) into a HistoricalSeries.
historical_series_adapter: TypeAdapter[list[HistoricalPoint]] = TypeAdapter(HistoricalSeries)


class IndexingSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    current: float   # current index
    target:  float   # target index
    trend:   float   # % change quarter-on-quarter (negative = improving)
    status:  str     # "Improving" | "Stable" | "Worsening"


class Sector(BaseModel):
    model_config = ConfigDict(frozen=True)

    name:  str
    value: float                  # % share of total emissions
    color: Optional[str] = None   # assigned from the palette after validation


class IndexingProfile(BaseModel):
    """Sector breakdown shown on the Carbon Indexing tab."""

    model_config = ConfigDict(frozen=True)

    summary: IndexingSummary
    sectors: list[Sector] = Field(..., min_length=1)
    details: str

    @property
    def sector_total(self) -> float:
        return sum(s.value for s in self.sectors)

    def sectors_sum_to_100(self) -> bool:
        return abs(self.sector_total - 100.0) <= SECTOR_SUM_TOLERANCE


# ── Derived values ────────────────────────────────────────────────────────────


class Prediction(BaseModel):
    model_config = ConfigDict(frozen=True)

    year:   int
    index:  float
    status: PredictionStatus


class Forecast(BaseModel):
    """
    Output of forecast_engine.project().

    insufficient_data=True means the series had fewer than two usable
    points: growth_rate is None and predictions is empty.
    """

    model_config = ConfigDict(frozen=True)

    growth_rate:       Optional[float] = None   # compound annual rate, e.g. 0.10
    predictions:       list[Prediction] = Field(default_factory=list)
    insufficient_data: bool = False


class FootprintResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    total:            float   # kg CO2e per month
    trees_required:   int     # trees needed to absorb `total` in a year
    offset_cost:      float   # NPR, 0.5 per kg CO2e
    offset_potential: float   # % of total covered by trees_required, capped at 100


class MitigationOption(BaseModel):
    model_config = ConfigDict(frozen=True)

    title:       str
    description: str
    impact:      str   # "High Impact" | "Medium Impact"


# ── Aggregates ────────────────────────────────────────────────────────────────


class RegionData(BaseModel):
    """The four acquired categories for one region."""

    model_config = ConfigDict(frozen=True)

    region:           Region
    emission_factors: EmissionFactors
    average_usage:    UsageProfile
    history:          list[HistoricalPoint]
    indexing:         IndexingProfile


class DashboardSnapshot(BaseModel):
    """Everything the dashboard renders for a region, in one payload."""

    model_config = ConfigDict(frozen=True)

    region:           Region
    live_data:        bool   # False when served from the offline fallback path
    emission_factors: EmissionFactors
    average_usage:    UsageProfile
    history:          list[HistoricalPoint]
    indexing:         IndexingProfile
    forecast:         Forecast


# ── Request bodies ────────────────────────────────────────────────────────────


class FootprintRequest(BaseModel):
    """
    Body for POST /api/v1/carbon/footprint.

    `usage` is passed through as raw form values; absent or non-numeric
    entries count as zero. When `factors` is omitted the region's emission
    factors are acquired.
    """

    usage:   dict[str, Any] = Field(default_factory=dict)
    factors: Optional[EmissionFactors] = None
    region:  Region = Region.KATHMANDU
