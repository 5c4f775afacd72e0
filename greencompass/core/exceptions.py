"""
exceptions.py — Error taxonomy for the carbon data layer.

Propagation policy:
  - TransportError, EmptyResponseError, ExtractionMiss, ShapeValidationError
    are raised inside the acquisition pipeline and absorbed by
    DataAcquisitionService, which swaps in fallback data and reports the
    error to its diagnostic sink. None of them reach API consumers.
  - InsufficientDataError is raised by forecast_engine.compute_growth_rate()
    and surfaced to callers only as Forecast.insufficient_data.
"""

from typing import Optional


class CarbonDataError(Exception):
    """Base class for every error raised by the carbon data layer."""


class TransportError(CarbonDataError):
    """The Gemini endpoint was unreachable or answered with a non-2xx status."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class EmptyResponseError(CarbonDataError):
    """A 2xx response whose body has no candidates[0].content.parts[0].text."""


class ExtractionMiss(CarbonDataError):
    """No extraction strategy found parseable JSON in the model output."""


class ShapeValidationError(CarbonDataError):
    """Parsed JSON is missing required fields or has mistyped values."""


class InsufficientDataError(CarbonDataError):
    """A growth rate needs at least two points and a positive first index."""
