import json
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class InboundRequest(BaseModel):
    method: str = Field(..., description="HTTP method as received by the runtime")
    headers: dict[str, str] = Field(default_factory=dict)
    body: bytes = Field(default=b"", description="Raw request body, expected to be JSON")

    def header(self, name: str, default: str | None = None) -> str | None:
        lowered = name.lower()
        for key, value in self.headers.items():
            if key.lower() == lowered:
                return value
        return default


class ProxyRequestBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    prompt: Any = Field(..., description="Prompt forwarded to Gemini as the single user part")
    response_schema: Any = Field(default_factory=dict, alias="responseSchema")


class OutboundResponse(BaseModel):
    status_code: int
    headers: dict[str, str] = Field(default_factory=dict)
    content: bytes = b""

    def payload(self) -> Any:
        return json.loads(self.content) if self.content else None
