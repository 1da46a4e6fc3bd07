"""Chat proxy endpoint.

Forwards the browser's chat request to the thirdweb AI chat API with
streaming enabled and relays the SSE body back untouched.
"""

import logging
from typing import Any

import httpx
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse, Response, StreamingResponse
from starlette.types import Receive, Scope, Send

from src.models.schemas import ChatRequest, ErrorResponse
from src.upstream.config import get_upstream_config
from src.upstream.credentials import build_credential_strategy
from src.upstream.relay import UpstreamError, UpstreamRelay, get_upstream_relay

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["chat"])

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
}


class RelayStreamingResponse(StreamingResponse):
    """StreamingResponse that always closes the upstream it relays.

    The body generator closes upstream when it finishes, but it never starts if
    sending the headers fails. Closing here covers that path too.
    """

    def __init__(self, upstream: httpx.Response, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._upstream = upstream

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        try:
            await super().__call__(scope, receive, send)
        finally:
            await self._upstream.aclose()


def _error_response(status_code: int, message: str) -> JSONResponse:
    """Wrap an error message in the JSON error envelope."""
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump(),
    )


@router.post("/chat")
async def chat(
    request: Request,
    relay: UpstreamRelay = Depends(get_upstream_relay),
) -> Response:
    """Relay a chat request to the upstream API as an SSE stream.

    Returns:
        200 text/event-stream with the upstream body relayed byte for byte.

    Raises:
        400: No credential configured (no upstream call is made).
        4xx/5xx: Upstream failure, same status with the upstream text.
        500: Any other error (malformed body, invalid configuration).
    """
    try:
        chat_request = ChatRequest.model_validate(await request.json())

        config = get_upstream_config()
        strategy = build_credential_strategy(config)
        credential = strategy.resolve(request.headers)
        if credential is None:
            logger.warning("Rejecting chat request: no upstream credential configured")
            return _error_response(status.HTTP_400_BAD_REQUEST, strategy.missing_message)

        try:
            upstream = await relay.open_stream(config, credential, chat_request)
        except UpstreamError as e:
            return _error_response(e.status_code, f"Thirdweb API error: {e.message}")

        return RelayStreamingResponse(
            upstream,
            relay.iter_bytes(upstream),
            media_type="text/event-stream",
            headers=SSE_HEADERS,
        )
    except Exception:
        logger.exception("Chat API error")
        return _error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error"
        )
