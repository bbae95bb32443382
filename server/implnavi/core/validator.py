# implnavi/core/validator.py
import json
import re
from typing import Any, Dict, List

from pydantic import ValidationError

from implnavi.models import EstimationResult

_FENCE_OPEN = re.compile(r"^```(json)?", re.IGNORECASE)
_FENCE_CLOSE = re.compile(r"```$")


class ResponseParseError(ValueError):
    pass


class EstimationValidationError(ValueError):
    def __init__(self, issues: List[Dict[str, Any]]):
        super().__init__(f"model output failed validation ({len(issues)} issue(s))")
        self.issues = issues


# ----------------------------
# Response repair
# ----------------------------
def safe_json_parse(raw: str) -> Any:
    """
    Parse model output that should be a single JSON object.

    Strips a surrounding code fence, then keeps only the span between the
    first '{' and the last '}' so stray prose around the object is dropped.
    Raises ResponseParseError when nothing parseable is left.
    """
    if not raw or not raw.strip():
        raise ResponseParseError("Empty response")

    txt = _FENCE_OPEN.sub("", raw.strip())
    txt = _FENCE_CLOSE.sub("", txt).strip()

    first = txt.find("{")
    last = txt.rfind("}")
    if first < 0 or last <= first:
        raise ResponseParseError("No JSON object found in model output")

    try:
        return json.loads(txt[first:last + 1])
    except json.JSONDecodeError as e:
        raise ResponseParseError(f"Invalid JSON in model output: {e}") from e


# ----------------------------
# Schema validation
# ----------------------------
def _issues_from(error: ValidationError) -> List[Dict[str, Any]]:
    return [
        {"path": list(err["loc"]), "code": err["type"], "message": err["msg"]}
        for err in error.errors(include_url=False)
    ]


def validate_estimation(obj: Any) -> EstimationResult:
    """
    Validate a parsed object against the EstimationResult shape, filling
    defaults for optional fields. Raises EstimationValidationError with one
    issue per offending field.
    """
    try:
        return EstimationResult.model_validate(obj)
    except ValidationError as e:
        raise EstimationValidationError(_issues_from(e)) from e
