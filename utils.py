import json
import logging
import os
from typing import Any

from dotenv import load_dotenv

from api.gemini.schemas import OutboundResponse
from proxy_settings import ProxySettings


REDACTED = "***"


def configure_logging() -> None:
    load_dotenv()
    level = os.getenv("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    # httpx logs full request URLs, which carry the Gemini key as a query parameter.
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def cors_headers(settings: ProxySettings) -> dict[str, str]:
    return {
        "Access-Control-Allow-Origin": settings.allow_origin,
        "Access-Control-Allow-Headers": "Content-Type",
        "Access-Control-Allow-Methods": settings.allow_methods,
    }


def json_response(status_code: int, payload: Any, settings: ProxySettings, **extra_headers: str) -> OutboundResponse:
    headers = {"Content-Type": "application/json", **cors_headers(settings)}
    headers.update(extra_headers)
    return OutboundResponse(
        status_code=status_code,
        headers=headers,
        content=json.dumps(payload, ensure_ascii=False).encode("utf-8"),
    )


def error_response(status_code: int, message: str, settings: ProxySettings, **extra_headers: str) -> OutboundResponse:
    return json_response(status_code, {"error": message}, settings, **extra_headers)


def empty_response(status_code: int, settings: ProxySettings) -> OutboundResponse:
    return OutboundResponse(status_code=status_code, headers=cors_headers(settings), content=b"")


def redact_secret(text: str, secret: str | None) -> str:
    if not secret:
        return text
    return text.replace(secret, REDACTED)
