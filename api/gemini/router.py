import httpx
from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import Response

from api.gemini.schemas import InboundRequest
from proxy_settings import ProxySettings, load_settings_or_default
from .service import handle

router = APIRouter(prefix="/api")

# Every method is routed to the proxy so unsupported ones still get a JSON 405 with CORS headers.
PROXY_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def get_gemini_client() -> httpx.Client | None:
    return None


@router.api_route("/gemini-proxy", methods=PROXY_METHODS)
async def gemini_proxy_route(
    request: Request,
    settings: ProxySettings = Depends(load_settings_or_default),
    client: httpx.Client | None = Depends(get_gemini_client),
) -> Response:
    inbound = InboundRequest(
        method=request.method,
        headers=dict(request.headers),
        body=await request.body(),
    )
    outbound = await run_in_threadpool(handle, inbound, settings, client)
    return Response(
        content=outbound.content,
        status_code=outbound.status_code,
        headers=outbound.headers,
    )
