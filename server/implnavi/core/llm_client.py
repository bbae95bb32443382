# implnavi/core/llm_client.py
import os
import json
import time
import logging
from typing import Any, Dict, Optional

from langchain_core.messages import HumanMessage
from langchain_google_genai import ChatGoogleGenerativeAI

from implnavi.utils.config import Settings

logger = logging.getLogger(__name__)


class ModelClientError(RuntimeError):
    pass


# -------------------------
# LLM init + raw-text call
# -------------------------
def get_llm(settings: Settings) -> ChatGoogleGenerativeAI:
    if not settings.gemini_api_key:
        raise ModelClientError("GEMINI_API_KEY is not set")
    kwargs: Dict[str, Any] = {
        "model": settings.gemini_model,
        "google_api_key": settings.gemini_api_key,
        # ask Gemini for bare JSON; the repair step still handles fenced output
        "response_mime_type": "application/json",
    }
    if settings.gemini_temperature is not None:
        kwargs["temperature"] = settings.gemini_temperature
    if settings.gemini_timeout is not None:
        kwargs["timeout"] = settings.gemini_timeout
    return ChatGoogleGenerativeAI(**kwargs)


def _message_text(message: Any) -> str:
    content = getattr(message, "content", message)
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and isinstance(part.get("text"), str):
                parts.append(part["text"])
        return "".join(parts)
    return str(content)


def save_debug_log(log_dir: Optional[str], prefix: str, payload: Dict[str, Any]) -> None:
    """Dump payload as JSON under log_dir. No-op when log_dir is unset."""
    if not log_dir:
        return
    path = os.path.join(log_dir, f"{int(time.time())}_{prefix}.json")
    try:
        os.makedirs(log_dir, exist_ok=True)
        with open(path, "w", encoding="utf-8") as fh:
            json.dump(payload, fh, indent=2, ensure_ascii=False)
    except OSError:
        logger.exception("Failed to write debug log %s", path)


class GeminiClient:
    """
    Thin wrapper around ChatGoogleGenerativeAI returning the raw response text.
    One call per request; failures propagate to the caller untouched apart from wrapping.
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self._llm: Optional[ChatGoogleGenerativeAI] = None

    @property
    def llm(self) -> ChatGoogleGenerativeAI:
        if self._llm is None:
            self._llm = get_llm(self.settings)
        return self._llm

    async def generate(self, prompt: str) -> str:
        start_ts = time.time()
        try:
            result = await self.llm.ainvoke([HumanMessage(content=prompt)])
        except ModelClientError:
            raise
        except Exception as e:
            logger.exception("Gemini call failed after %.2fs", time.time() - start_ts)
            raise ModelClientError(f"Gemini request failed: {e}") from e

        text = _message_text(result)
        logger.info("Gemini call took %.2fs, %d chars returned", time.time() - start_ts, len(text))
        return text
