# implnavi/utils/config.py
"""
Process-wide configuration.

Everything is read once from the environment (a local .env is honoured) and
frozen, then handed to create_app(). Business code never reads os.environ.
"""
import math
import os
from typing import Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

from implnavi.core.estimation import Pricing


class ConfigError(ValueError):
    pass


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    gemini_api_key: Optional[str] = Field(None, description="Credential for the Gemini API")
    gemini_model: str = Field("gemini-2.5-flash", description="Gemini model name")
    gemini_temperature: Optional[float] = None
    gemini_timeout: Optional[float] = None
    host: str = "0.0.0.0"
    port: int = 8080
    hours_per_cp: float = 0.1
    rate_min: float = 5000
    rate_max: float = 10000
    static_dir: str = "web/dist"
    log_level: str = "INFO"
    debug_log_dir: Optional[str] = None

    @property
    def pricing(self) -> Pricing:
        return Pricing(hours_per_cp=self.hours_per_cp, rate_min=self.rate_min, rate_max=self.rate_max)


def _number(env: Mapping[str, str], name: str, default, cast=float):
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = cast(raw.strip())
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}")
    if not math.isfinite(value) or value < 0:
        raise ConfigError(f"{name} must be a non-negative finite number, got {raw!r}")
    return value


def _text(env: Mapping[str, str], name: str) -> Optional[str]:
    raw = env.get(name)
    if raw is None:
        return None
    raw = raw.strip()
    return raw or None


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build Settings from env (defaults to os.environ after loading .env).
    Malformed numbers raise ConfigError so the server refuses to start.
    """
    if env is None:
        load_dotenv()
        env = os.environ

    return Settings(
        gemini_api_key=_text(env, "GEMINI_API_KEY"),
        gemini_model=_text(env, "GEMINI_MODEL") or "gemini-2.5-flash",
        gemini_temperature=_number(env, "GEMINI_TEMPERATURE", None),
        gemini_timeout=_number(env, "GEMINI_TIMEOUT", None),
        host=_text(env, "HOST") or "0.0.0.0",
        port=_number(env, "PORT", 8080, cast=int),
        hours_per_cp=_number(env, "HOURS_PER_CP", 0.1),
        rate_min=_number(env, "RATE_MIN", 5000),
        rate_max=_number(env, "RATE_MAX", 10000),
        static_dir=_text(env, "STATIC_DIR") or "web/dist",
        log_level=(_text(env, "LOG_LEVEL") or "INFO").upper(),
        debug_log_dir=_text(env, "AI_BACKEND_LOG_DIR"),
    )
