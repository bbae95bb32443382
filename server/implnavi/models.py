import math
from typing import Annotated, Any, List, Optional, Union
from urllib.parse import urlparse

from pydantic import AfterValidator, BaseModel, BeforeValidator, Field, StrictStr, field_validator


def _require_number(value):
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError("Expected number")
    return value


def _non_negative_finite(value):
    try:
        finite = math.isfinite(value)
    except OverflowError:
        # ints beyond float range
        finite = False
    if not finite or value < 0:
        raise ValueError("Number must be finite and non-negative")
    return value


def _at_most_five(value):
    if value > 5:
        raise ValueError("Number must be less than or equal to 5")
    return value


def _absolute_url(value: str) -> str:
    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError("Invalid url")
    return value


NonNegativeNumber = Annotated[
    Union[int, float],
    BeforeValidator(_require_number),
    AfterValidator(_non_negative_finite),
]
Stars = Annotated[NonNegativeNumber, AfterValidator(_at_most_five)]
Url = Annotated[StrictStr, AfterValidator(_absolute_url)]


class AnalyzeRequest(BaseModel):
    requirements: Any = None


class Overall(BaseModel):
    stars: Stars = 0
    cpTotal: NonNegativeNumber = 0
    hours: NonNegativeNumber = 0
    costJpyMin: NonNegativeNumber = 0
    costJpyMax: NonNegativeNumber = 0
    rationale: StrictStr = ""


class BreakdownItem(BaseModel):
    name: StrictStr
    cp: NonNegativeNumber = 0


class BreakdownCategory(BaseModel):
    category: StrictStr
    items: List[BreakdownItem] = Field(default_factory=list)


class Step(BaseModel):
    title: StrictStr
    detail: StrictStr = ""
    estimateHours: Optional[NonNegativeNumber] = 0

    @field_validator("estimateHours")
    @classmethod
    def _missing_hours_are_zero(cls, v):
        return 0 if v is None else v


class LearningLink(BaseModel):
    title: StrictStr
    url: Url


class EstimationResult(BaseModel):
    overall: Overall
    breakdown: List[BreakdownCategory] = Field(default_factory=list)
    steps: List[Step] = Field(default_factory=list)
    learning: List[LearningLink] = Field(default_factory=list)
    tsv: Optional[StrictStr] = None
