import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional

import httpx

from errors import ConfigurationError, UpstreamError, UpstreamShapeError
from proxy_settings import ProxySettings, load_settings
from utils import redact_secret

logger = logging.getLogger(__name__)


def build_payload(prompt: Any, response_schema: Any) -> dict[str, Any]:
    return {
        "contents": [{"role": "user", "parts": [{"text": prompt}]}],
        "generationConfig": {
            "responseMimeType": "application/json",
            "responseSchema": response_schema,
        },
    }


def extract_generated_text(result: Any) -> str:
    """Return ``candidates[0].content.parts[0].text`` from a generateContent result."""
    if not isinstance(result, dict):
        raise UpstreamShapeError(f"expected a JSON object, got {type(result).__name__}")

    candidates = result.get("candidates")
    if not isinstance(candidates, list) or not candidates:
        raise UpstreamShapeError("missing 'candidates'")

    content = candidates[0].get("content") if isinstance(candidates[0], dict) else None
    if not isinstance(content, dict):
        raise UpstreamShapeError("missing 'candidates[0].content'")

    parts = content.get("parts")
    if not isinstance(parts, list) or not parts:
        raise UpstreamShapeError("missing 'candidates[0].content.parts'")

    text = parts[0].get("text") if isinstance(parts[0], dict) else None
    if not isinstance(text, str):
        raise UpstreamShapeError("missing 'candidates[0].content.parts[0].text'")
    return text


def _post_generate_content(client: httpx.Client, settings: ProxySettings, payload: dict[str, Any]) -> str:
    resp = client.post(
        settings.generate_content_url,
        params={"key": settings.gemini_api_key},
        json=payload,
        headers={"Content-Type": "application/json"},
    )
    logger.info("Gemini HTTP model=%s returned status=%d", settings.model, resp.status_code)

    if not resp.is_success:
        error_text = resp.text
        logger.error(
            "Gemini error response status=%d body=%s",
            resp.status_code,
            redact_secret(error_text, settings.gemini_api_key)[:1000],
        )
        raise UpstreamError(resp.status_code, error_text)

    return extract_generated_text(resp.json())


def generate_json(
    prompt: Any,
    response_schema: Any,
    settings: ProxySettings,
    client: httpx.Client | None = None,
) -> str:
    """Send one prompt to Gemini in JSON mode and return the generated text.

    A caller-supplied ``client`` is used as-is and left open; otherwise a
    short-lived client bounded by ``settings.timeout_seconds`` is created.
    """
    if not settings.has_api_key:
        raise ConfigurationError("Gemini API key not configured.")

    payload = build_payload(prompt, response_schema)
    logger.info("Calling Gemini model=%s prompt_len=%d", settings.model, len(str(prompt)))
    logger.debug("Prompt preview: %s", str(prompt)[:1000])

    if client is not None:
        text = _post_generate_content(client, settings, payload)
    else:
        with httpx.Client(timeout=settings.timeout_seconds, follow_redirects=True) as owned:
            text = _post_generate_content(owned, settings, payload)

    logger.info("Gemini response received model=%s resp_len=%d", settings.model, len(text))
    logger.debug("Response preview: %s", text[:1000])
    return text


def main(argv: Optional[list[str]] = None) -> int:
    args = argv if argv is not None else sys.argv[1:]
    if not args:
        print("Usage: gemini_client.py PROMPT [SCHEMA_JSON_FILE]")
        return 1

    prompt = args[0]
    settings = load_settings()
    try:
        schema = json.loads(Path(args[1]).read_text(encoding="utf-8")) if len(args) > 1 else {}
        print(generate_json(prompt, schema, settings))
        return 0
    except Exception as exc:
        print(f"Error: {redact_secret(str(exc), settings.gemini_api_key)}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
