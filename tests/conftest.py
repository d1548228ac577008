import json

import httpx
import pytest

import proxy_settings
from api.gemini.schemas import InboundRequest
from proxy_settings import ProxySettings

SECRET = "test-secret-key-123"
PROXY_ENV_VARS = [
    "GEMINI_API_KEY",
    "GOOGLE_API_KEY",
    "GEMINI_MODEL",
    "GEMINI_API_BASE_URL",
    "GEMINI_TIMEOUT_SECONDS",
    "CORS_ALLOW_ORIGIN",
    "CORS_ALLOW_METHODS",
]


def gemini_result(text):
    return {"candidates": [{"content": {"role": "model", "parts": [{"text": text}]}}]}


def post_request(body, **headers):
    raw = body if isinstance(body, (bytes, str)) else json.dumps(body)
    if isinstance(raw, str):
        raw = raw.encode("utf-8")
    return InboundRequest(method="POST", headers={"Content-Type": "application/json", **headers}, body=raw)


class FakeGemini:
    """Stands in for the generateContent endpoint and records every call."""

    def __init__(self):
        self.requests = []
        self.status_code = 200
        self.body = gemini_result('{"answer": 42}')
        self.error = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if isinstance(self.body, (dict, list)):
            return httpx.Response(self.status_code, json=self.body)
        return httpx.Response(self.status_code, text=self.body)

    @property
    def last_payload(self):
        return json.loads(self.requests[-1].content)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch):
    for name in PROXY_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(proxy_settings, "load_dotenv", lambda *args, **kwargs: False)


@pytest.fixture
def settings():
    return ProxySettings(gemini_api_key=SECRET)


@pytest.fixture
def gemini():
    return FakeGemini()


@pytest.fixture
def http_client(gemini):
    with httpx.Client(transport=httpx.MockTransport(gemini)) as client:
        yield client
