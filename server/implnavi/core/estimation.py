# implnavi/core/estimation.py
"""
Derived-value completion: CP -> hours -> cost.

A single pure function used by the API before responding and by the export
code, so both always agree on the numbers.
"""
import math
import sys
from typing import Union

from pydantic import BaseModel, ConfigDict

from implnavi.models import EstimationResult

Number = Union[int, float]


class Pricing(BaseModel):
    model_config = ConfigDict(frozen=True)

    hours_per_cp: float = 0.1
    rate_min: float = 5000
    rate_max: float = 10000


def round_half_up(value: float) -> int:
    # Math.round semantics: .5 always goes up; out-of-range values saturate
    try:
        value = float(value)
    except OverflowError:
        value = math.inf if value > 0 else -math.inf
    if math.isnan(value):
        return 0
    value = max(-sys.float_info.max, min(sys.float_info.max, value))
    return int(math.floor(value + 0.5))


def scaled(value: Number, factor: float) -> int:
    """round_half_up(value * factor) that never raises on huge inputs."""
    try:
        product = value * factor
    except OverflowError:
        product = math.inf
    return round_half_up(product)


def cp_from_items(result: EstimationResult) -> Number:
    total = sum((item.cp or 0) for block in result.breakdown for item in block.items)
    # float sums overflow to inf
    if isinstance(total, float) and total > sys.float_info.max:
        return sys.float_info.max
    return total


def complete_estimation(result: EstimationResult, pricing: Pricing) -> EstimationResult:
    """
    Fill absent aggregate fields of result.overall from the itemized figures.

    A zero value counts as absent and is replaced by the derived one. The
    input is left untouched; a new result is returned. Applying the function
    twice gives the same result as applying it once.
    """
    overall = result.overall

    cp_total = overall.cpTotal or cp_from_items(result)
    hours = overall.hours or scaled(cp_total, pricing.hours_per_cp)
    cost_min = overall.costJpyMin or scaled(hours, pricing.rate_min)
    cost_max = overall.costJpyMax or scaled(hours, pricing.rate_max)

    completed_overall = overall.model_copy(update={
        "cpTotal": cp_total,
        "hours": hours,
        "costJpyMin": cost_min,
        "costJpyMax": cost_max,
    })
    return result.model_copy(update={"overall": completed_overall})
