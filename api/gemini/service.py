import json
import logging
import traceback
from typing import Any

import httpx

from api.gemini.schemas import InboundRequest, OutboundResponse, ProxyRequestBody
from errors import (
    BackendError,
    ConfigurationError,
    MethodNotAllowedError,
    ProxyError,
    UnexpectedError,
    ValidationError,
)
from gemini_client import generate_json
from proxy_settings import ProxySettings, load_settings_or_default
from utils import empty_response, error_response, json_response, redact_secret

logger = logging.getLogger(__name__)

HANDLED_METHODS = ("POST", "OPTIONS")


def _is_blank(value: Any) -> bool:
    """Falsy in the browser sense: null, false, "", 0 and NaN. Empty lists and objects count as values."""
    if value is None or value is False or value == "":
        return True
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value == 0 or value != value
    return False


def _parse_body(raw: bytes) -> ProxyRequestBody:
    try:
        data = json.loads(raw)
    except ValueError as exc:
        logger.error("Error parsing request body: %s", exc)
        raise ValidationError("Invalid JSON in request body.") from exc

    if not isinstance(data, dict) or _is_blank(data.get("prompt")):
        logger.error("Missing 'prompt' in request body.")
        raise ValidationError('Missing "prompt" in request body.')

    schema = data.get("responseSchema")
    body = ProxyRequestBody(prompt=data["prompt"], response_schema={} if _is_blank(schema) else schema)
    logger.info("Request body parsed prompt_len=%d has_schema=%s", len(str(body.prompt)), bool(body.response_schema))
    return body


def _proxy(request: InboundRequest, settings: ProxySettings, client: httpx.Client | None) -> OutboundResponse:
    method = request.method.upper()
    logger.info("Request received method=%s origin=%s", method, request.header("Origin"))

    if method == "OPTIONS":
        logger.info("Handling OPTIONS preflight request.")
        return empty_response(204, settings)

    if method not in HANDLED_METHODS:
        raise MethodNotAllowedError(method, HANDLED_METHODS)

    if not settings.has_api_key:
        logger.error("GEMINI_API_KEY is not configured.")
        raise ConfigurationError("Gemini API key not configured.")

    body = _parse_body(request.body)
    text = generate_json(body.prompt, body.response_schema, settings, client=client)
    return json_response(200, text, settings)


def handle(
    request: InboundRequest,
    settings: ProxySettings | None = None,
    client: httpx.Client | None = None,
) -> OutboundResponse:
    """Proxy one inbound request to Gemini and build the response for it.

    Every failure is turned into a JSON ``{"error": ...}`` response; nothing
    raised here reaches the runtime adapter. The API key is scrubbed from any
    message that leaves this function.
    """
    if settings is None:
        settings = load_settings_or_default()

    try:
        return _proxy(request, settings, client)
    except ProxyError as exc:
        message = redact_secret(exc.message, settings.gemini_api_key)
        if isinstance(exc, BackendError):
            logger.error("Error calling Gemini API: %s", message)
        return error_response(exc.status_code, message, settings, **exc.headers)
    except Exception as exc:
        error = UnexpectedError(str(exc) or type(exc).__name__)
        message = redact_secret(error.message, settings.gemini_api_key)
        secret = settings.gemini_api_key
        if secret and secret in "".join(traceback.format_exception(exc)):
            # The traceback would print the key; keep only the scrubbed message.
            logger.error("Error calling Gemini API (%s): %s", type(exc).__name__, message)
        else:
            logger.exception("Error calling Gemini API (%s): %s", type(exc).__name__, message)
        return error_response(error.status_code, message, settings)
