import logging
import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field


logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.0-flash"
DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_TIMEOUT_SECONDS = 60.0
DEFAULT_ALLOW_ORIGIN = "*"
DEFAULT_ALLOW_METHODS = "POST, OPTIONS"


class ProxySettings(BaseModel):
    gemini_api_key: str = Field(default="", repr=False, description="Server-side Gemini API key")
    model: str = Field(default=DEFAULT_MODEL, description="Gemini model used for generateContent")
    base_url: str = Field(default=DEFAULT_BASE_URL, description="Gemini REST API base URL")
    timeout_seconds: float = Field(default=DEFAULT_TIMEOUT_SECONDS, gt=0)
    allow_origin: str = Field(default=DEFAULT_ALLOW_ORIGIN, description="Access-Control-Allow-Origin value")
    allow_methods: str = Field(default=DEFAULT_ALLOW_METHODS, description="Access-Control-Allow-Methods value")

    @property
    def has_api_key(self) -> bool:
        return bool(self.gemini_api_key.strip())

    @property
    def generate_content_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/models/{self.model}:generateContent"


def _env_text(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip()


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not a number, using %s", name, raw, default)
        return default
    if value <= 0:
        logger.warning("Ignoring %s=%r: must be positive, using %s", name, raw, default)
        return default
    return value


def load_settings() -> ProxySettings:
    """Read proxy configuration from the environment (and a local .env file).

    Called once per invocation so serverless runtimes can rotate values
    between cold starts without any cached state in this module.
    """
    load_dotenv()
    api_key = os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY") or ""
    return ProxySettings(
        gemini_api_key=api_key.strip(),
        model=_env_text("GEMINI_MODEL", DEFAULT_MODEL),
        base_url=_env_text("GEMINI_API_BASE_URL", DEFAULT_BASE_URL),
        timeout_seconds=_env_float("GEMINI_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS),
        allow_origin=_env_text("CORS_ALLOW_ORIGIN", DEFAULT_ALLOW_ORIGIN),
        allow_methods=_env_text("CORS_ALLOW_METHODS", DEFAULT_ALLOW_METHODS),
    )


def load_settings_or_default() -> ProxySettings:
    """Like ``load_settings`` but never raises.

    A broken environment (e.g. an unreadable .env) yields settings without a
    key, so the request is answered with the missing-key error instead of
    failing inside the runtime adapter.
    """
    try:
        return load_settings()
    except Exception as exc:
        logger.error("Could not load proxy settings: %s", exc)
        return ProxySettings()
