"""
footprint_calculator.py — Monthly footprint and biological offset.

    total          = energy * f.energy + transport * f.transport + waste * f.waste   (2 dp)
    trees_required = ceil(total / TREE_ABSORPTION_KG)
    offset_cost    = total * OFFSET_COST_PER_KG                                       (2 dp)
    offset_potential = min(100, trees_required * TREE_ABSORPTION_KG / total * 100)    (1 dp)

Usage values usually arrive straight from form fields, so anything absent,
non-numeric or non-finite counts as zero instead of failing. A total that
overflows to infinity is reported as zero. Negative values are not rejected.
"""

from __future__ import annotations

import math
from typing import Any, Mapping, Union

from greencompass.models.carbon import EmissionFactors, FootprintResult, UsageProfile

TREE_ABSORPTION_KG = 25      # kg CO2e absorbed by one tree per year
OFFSET_COST_PER_KG = 0.5     # NPR per kg CO2e

_FIELDS = ("energy", "transport", "waste")


def _coerce(value: Any) -> float:
    if isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def compute(
    usage: Union[UsageProfile, Mapping[str, Any]],
    factors: EmissionFactors,
) -> FootprintResult:
    """Combine consumption with emission factors."""
    if isinstance(usage, UsageProfile):
        usage = usage.model_dump()

    total = sum(_coerce(usage.get(name)) * getattr(factors, name) for name in _FIELDS)
    # Finite inputs can still overflow once multiplied and summed.
    total = round(total, 2) if math.isfinite(total) else 0.0
    trees = math.ceil(total / TREE_ABSORPTION_KG)

    offset_potential = 0.0
    if total > 0:
        offset_potential = round(min(100.0, trees * TREE_ABSORPTION_KG / total * 100), 1)

    return FootprintResult(
        total=total,
        trees_required=trees,
        offset_cost=round(total * OFFSET_COST_PER_KG, 2),
        offset_potential=offset_potential,
    )
