"""AWS Lambda entrypoint for the Gemini proxy.

Accepts API Gateway REST (payload v1) and HTTP API (payload v2) proxy
events, as well as Lambda function URL events, which share the v2 shape.
"""

import base64
import binascii
import logging
from typing import Any, Mapping

from api.gemini.schemas import InboundRequest, OutboundResponse
from api.gemini.service import handle
from proxy_settings import load_settings_or_default
from utils import configure_logging, error_response

configure_logging()
logger = logging.getLogger(__name__)


def _event_method(event: Mapping[str, Any]) -> str:
    method = event.get("httpMethod")
    if not method:
        http = (event.get("requestContext") or {}).get("http") or {}
        method = http.get("method")
    return (method or "GET").upper()


def _event_body(event: Mapping[str, Any]) -> bytes:
    body = event.get("body")
    if body is None:
        return b""
    if event.get("isBase64Encoded"):
        try:
            return base64.b64decode(body, validate=True)
        except binascii.Error:
            logger.warning("Request body flagged as base64 but could not be decoded")
    return body.encode("utf-8")


def to_inbound_request(event: Mapping[str, Any]) -> InboundRequest:
    headers = {str(k): str(v) for k, v in (event.get("headers") or {}).items() if v is not None}
    return InboundRequest(method=_event_method(event), headers=headers, body=_event_body(event))


def to_lambda_response(response: OutboundResponse) -> dict[str, Any]:
    return {
        "statusCode": response.status_code,
        "headers": dict(response.headers),
        "body": response.content.decode("utf-8"),
        "isBase64Encoded": False,
    }


def lambda_handler(event: Mapping[str, Any], context: Any) -> dict[str, Any]:
    settings = load_settings_or_default()
    try:
        inbound = to_inbound_request(event)
    except Exception as exc:
        logger.error("Could not read Lambda event: %s", exc)
        return to_lambda_response(error_response(400, "Invalid request event.", settings))
    return to_lambda_response(handle(inbound, settings))
