# implnavi/core/export.py
"""
Spreadsheet export and display helpers.

The TSV layout is meant to be pasted straight into Excel / Google Sheets:
  - breakdown table (category, item, CP, memo)
  - steps table (title, detail, hours, min cost, max cost)
  - five summary rows
Sections are separated by one blank row and every row ends with a newline.
"""
import math
from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from implnavi.core.estimation import Pricing, scaled
from implnavi.models import EstimationResult

# Known Gemini mistranslation of "breakdown"
DISPLAY_FIXES = {"壊す": "内訳"}

BREAKDOWN_HEADER = ["カテゴリ", "項目/説明", "CP", "メモ"]
STEPS_HEADER = ["工程", "詳細", "見積(時間)", "費用(最小)", "費用(最大)"]


def _fix_text(s: str) -> str:
    for wrong, right in DISPLAY_FIXES.items():
        s = s.replace(wrong, right)
    return s


def normalize_display(value: Any) -> Any:
    """Apply DISPLAY_FIXES to every string and dict key, recursively."""
    if isinstance(value, str):
        return _fix_text(value)
    if isinstance(value, list):
        return [normalize_display(v) for v in value]
    if isinstance(value, dict):
        return {(_fix_text(k) if isinstance(k, str) else k): normalize_display(v) for k, v in value.items()}
    return value


# ----------------------------
# Number formatting (ja-JP style)
# ----------------------------
def _as_number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    return number if math.isfinite(number) else None


def plain_number(value: Any) -> str:
    """String form without grouping; integral floats lose their '.0'."""
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_int(value: Any) -> str:
    number = _as_number(value)
    if number is None:
        return plain_number(value)
    number = round(number, 3)
    if number.is_integer():
        return f"{int(number):,}"
    return f"{number:,.3f}".rstrip("0").rstrip(".")


def format_yen(value: Any) -> str:
    if _as_number(value) is None:
        return ""
    return "￥" + format_int(value)


# ----------------------------
# TSV
# ----------------------------
def _row(*fields: Any) -> str:
    return "\t".join("" if f is None else str(f) for f in fields) + "\n"


def _as_dict(result: Any) -> Dict[str, Any]:
    if isinstance(result, BaseModel):
        return result.model_dump()
    return result if isinstance(result, dict) else {}


def make_tsv(result: Any, pricing: Pricing) -> str:
    data = _as_dict(result)
    rows: List[str] = [_row(*BREAKDOWN_HEADER)]

    for block in data.get("breakdown") or []:
        if not isinstance(block, dict):
            continue
        for item in block.get("items") or []:
            if not isinstance(item, dict):
                continue
            rows.append(_row(block.get("category") or "", item.get("name") or "", plain_number(item.get("cp")), ""))

    rows.append(_row())
    rows.append(_row(*STEPS_HEADER))
    for step in data.get("steps") or []:
        if not isinstance(step, dict):
            continue
        hours = _as_number(step.get("estimateHours")) or 0
        if hours:
            rows.append(_row(
                step.get("title") or "",
                step.get("detail") or "",
                plain_number(step.get("estimateHours")),
                format_yen(scaled(hours, pricing.rate_min)),
                format_yen(scaled(hours, pricing.rate_max)),
            ))
        else:
            rows.append(_row(step.get("title") or "", step.get("detail") or "", "", "", ""))

    overall = data.get("overall") or {}
    rows.append(_row())
    rows.append(_row("⭐", f"{plain_number(overall.get('stars'))} / 5", "", "", ""))
    rows.append(_row("総CP", plain_number(overall.get("cpTotal")), "", "", ""))
    rows.append(_row("工数", plain_number(overall.get("hours")), "時間", "", ""))
    rows.append(_row("費用(最小)", format_yen(overall.get("costJpyMin")), "", "", ""))
    rows.append(_row("費用(最大)", format_yen(overall.get("costJpyMax")), "", "", ""))
    return "".join(rows)


def render_tsv(result: EstimationResult, pricing: Pricing) -> str:
    """TSV of a completed result with display fixes applied."""
    return make_tsv(normalize_display(result.model_dump()), pricing)
