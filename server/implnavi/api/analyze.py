# implnavi/api/analyze.py
import logging
import time
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from implnavi.core.estimation import complete_estimation
from implnavi.core.export import render_tsv
from implnavi.core.llm_client import GeminiClient, save_debug_log
from implnavi.core.prompts import build_prompt
from implnavi.core.validator import EstimationValidationError, ResponseParseError, safe_json_parse, validate_estimation
from implnavi.models import AnalyzeRequest
from implnavi.utils.config import Settings

logger = logging.getLogger(__name__)

router = APIRouter()


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_model_client(request: Request) -> GeminiClient:
    return request.app.state.model_client


def _error(status_code: int, message: str, **extra: Any) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message, **extra})


@router.get("/healthz", response_class=PlainTextResponse)
async def healthz():
    return "ok"


@router.post("/analyze", response_model=Dict[str, Any])
async def analyze(payload: Any = Body(None),
                  settings: Settings = Depends(get_settings),
                  client: GeminiClient = Depends(get_model_client)):
    """
    Estimate a free-text requirements document.
    Request JSON: {"requirements": "..."}; any other body counts as empty requirements.
    Response: completed EstimationResult (overall / breakdown / steps / learning / tsv)
      400 empty requirements, 500 missing key / unparseable output / internal error,
      502 {"error", "issues", "raw"} when the model output does not match the schema.
    """
    value = AnalyzeRequest.model_validate(payload).requirements if isinstance(payload, dict) else None
    requirements = ("" if value is None else str(value)).strip()
    if not requirements:
        return _error(400, "requirements is empty")
    if not settings.gemini_api_key:
        logger.error("analyze called but GEMINI_API_KEY is not configured")
        return _error(500, "GEMINI_API_KEY is not set")

    raw = ""
    try:
        logger.info("analyze: %d chars of requirements", len(requirements))
        start_ts = time.time()
        raw = await client.generate(build_prompt(requirements))
        logger.debug("model output received in %.2fs", time.time() - start_ts)

        parsed = safe_json_parse(raw)
        result = validate_estimation(parsed)

        completed = complete_estimation(result, settings.pricing)
        completed = completed.model_copy(update={"tsv": render_tsv(completed, settings.pricing)})
    except ResponseParseError as e:
        logger.warning("model output is not JSON: %s", e)
        save_debug_log(settings.debug_log_dir, "parse_error", {"error": str(e), "raw": raw})
        return _error(500, str(e))
    except EstimationValidationError as e:
        logger.warning("model output failed schema validation: %d issue(s)", len(e.issues))
        save_debug_log(settings.debug_log_dir, "validation_error", {"issues": e.issues, "raw": raw})
        return _error(502, "model output did not match the expected schema", issues=e.issues, raw=raw)
    except Exception as e:
        logger.exception("analyze failed")
        return _error(500, str(e) or "internal error")

    return completed.model_dump()
