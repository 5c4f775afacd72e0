"""
forecast_engine.py — Compound-growth projection of the carbon index.

The historical series is treated as a single compounding trend:

    last = first * (1 + r) ** (n - 1)   →   r = (last / first) ** (1 / (n - 1)) - 1

Intermediate points do not affect the rate. The projection starts at the
last observed value and multiplies by (1 + r) once per year, rounding each point to 2 dp.

Every projected point is flagged: above CRITICAL_THRESHOLD it is Critical,
otherwise Warning. There is no Normal class in the forecast horizon.

Insufficient data (fewer than two points, or a non-positive first or last
value) is reported as Forecast(insufficient_data=True) with no predictions;
callers check the flag or the prediction count instead of catching anything.
"""

from __future__ import annotations

import logging
from typing import Sequence

from greencompass.core.exceptions import InsufficientDataError
from greencompass.models.carbon import Forecast, HistoricalPoint, Prediction, PredictionStatus

logger = logging.getLogger(__name__)

CRITICAL_THRESHOLD = 350.0
DEFAULT_HORIZON_YEARS = 5


def compute_growth_rate(series: Sequence[HistoricalPoint]) -> float:
    """
    Compound annual growth rate from the first to the last point.

    Raises InsufficientDataError for fewer than two points or when the
    first or last index is <= 0 (no real rate).
    """
    if len(series) < 2:
        raise InsufficientDataError(f"need at least 2 points, got {len(series)}")
    first, last = series[0].index, series[-1].index
    if first <= 0:
        raise InsufficientDataError(f"first index must be positive, got {first}")
    if last <= 0:
        raise InsufficientDataError(f"last index must be positive, got {last}")
    return (last / first) ** (1 / (len(series) - 1)) - 1


def classify(index: float) -> PredictionStatus:
    return PredictionStatus.CRITICAL if index > CRITICAL_THRESHOLD else PredictionStatus.WARNING


def project(series: Sequence[HistoricalPoint], horizon_years: int = DEFAULT_HORIZON_YEARS) -> Forecast:
    """Project `horizon_years` points past the end of `series`."""
    try:
        rate = compute_growth_rate(series)
    except InsufficientDataError as exc:
        logger.info("No forecast produced: %s", exc)
        return Forecast(growth_rate=None, predictions=[], insufficient_data=True)

    last = series[-1]
    value = last.index
    predictions = []
    for step in range(1, horizon_years + 1):
        value *= 1 + rate
        rounded = round(value, 2)
        predictions.append(
            Prediction(year=last.year + step, index=rounded, status=classify(rounded))
        )

    return Forecast(growth_rate=rate, predictions=predictions)
