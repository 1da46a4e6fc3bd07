"""Upstream relay for the thirdweb AI chat API.

Opens a streamed chat completion upstream and hands the raw body back to the
caller chunk by chunk. Bytes are never decoded or re-encoded on the way through.

The relay holds a single shared httpx.AsyncClient for connection pooling and
keeps no other state between requests. No timeout is set: the stream lasts as
long as the upstream keeps it open or the downstream client goes away.
"""

import logging
from collections.abc import AsyncGenerator

import httpx

from src.models.schemas import ChatRequest
from src.upstream.config import UpstreamConfig
from src.upstream.credentials import Credential

logger = logging.getLogger(__name__)


class UpstreamError(Exception):
    """Raised when the upstream API answers with a non-success status."""

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(f"HTTP {status_code}: {message}")


class UpstreamRelay:
    """Service relaying chat requests to the upstream API.

    Wraps httpx with:
    - A pooled AsyncClient shared across requests
    - Status checking before any byte is relayed
    - A pass-through byte generator for StreamingResponse
    """

    def __init__(self, client: httpx.AsyncClient | None = None) -> None:
        """Initialize the relay.

        Args:
            client: Optional preconfigured client (tests pass one with a mock transport).
        """
        self._client = client or httpx.AsyncClient(timeout=None)

    async def open_stream(
        self,
        config: UpstreamConfig,
        credential: Credential,
        chat_request: ChatRequest,
    ) -> httpx.Response:
        """Start a streamed chat completion upstream.

        Args:
            config: Upstream configuration (endpoint URL).
            credential: Resolved credential header.
            chat_request: Validated inbound request.

        Returns:
            The open streaming response. Caller must consume or close it.

        Raises:
            UpstreamError: If the upstream status is not 2xx.
            httpx.HTTPError: If the upstream cannot be reached.
        """
        request = self._client.build_request(
            "POST",
            config.api_url,
            json=chat_request.upstream_payload(),
            headers={
                "Content-Type": "application/json",
                credential.header: credential.value,
            },
        )
        logger.info(f"Forwarding chat request to {config.api_url}")
        response = await self._client.send(request, stream=True)

        if response.is_success:
            return response

        try:
            await response.aread()
            error_text = response.text
        finally:
            await response.aclose()

        logger.warning(f"Upstream returned HTTP {response.status_code}: {error_text[:200]}")
        raise UpstreamError(response.status_code, error_text)

    async def iter_bytes(self, response: httpx.Response) -> AsyncGenerator[bytes]:
        """Yield the upstream body unmodified until it ends.

        Errors while reading propagate so the downstream stream terminates
        in an error state instead of ending cleanly.

        Args:
            response: Open streaming response from open_stream.

        Yields:
            Raw body chunks in upstream order.
        """
        try:
            async for chunk in response.aiter_bytes():
                yield chunk
        except httpx.HTTPError as e:
            logger.error(f"Upstream stream failed mid-relay: {e}")
            raise
        finally:
            await response.aclose()

    async def aclose(self) -> None:
        """Close the pooled HTTP client."""
        await self._client.aclose()


# Module-level singleton instance
_upstream_relay: UpstreamRelay | None = None


def get_upstream_relay() -> UpstreamRelay:
    """Get or create the global upstream relay.

    Returns:
        The UpstreamRelay instance.
    """
    global _upstream_relay
    if _upstream_relay is None:
        _upstream_relay = UpstreamRelay()
    return _upstream_relay


async def close_upstream_relay() -> None:
    """Close the global relay, if one was created."""
    global _upstream_relay
    if _upstream_relay is not None:
        await _upstream_relay.aclose()
        _upstream_relay = None
