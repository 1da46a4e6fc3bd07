"""Pytest fixtures and shared test configuration.

Provides reusable fixtures for unit and integration tests.

Fixtures:
    - clean_env: Removes THIRDWEB_* variables so tests start without credentials
    - secret_key: Configures a secret key credential
    - upstream: Fake upstream API recording requests (httpx.MockTransport)
    - async_client: HTTPX client for API testing, wired to the fake upstream

No test reaches the real network.
"""

import asyncio
from collections.abc import AsyncGenerator, Callable, Iterable

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from src.api import app
from src.upstream.relay import UpstreamRelay, get_upstream_relay

HELLO_STREAM = (
    b'event: delta\ndata: {"v":"Hel"}\n\n'
    b'event: delta\ndata: {"v":"lo"}\n\n'
    b"event: done\ndata: {}\n\n"
)


class ChunkedStream(httpx.AsyncByteStream):
    """Response body delivered as the given chunks, optionally failing or hanging after them."""

    def __init__(
        self,
        chunks: Iterable[bytes],
        error: Exception | None = None,
        hang: bool = False,
    ) -> None:
        self._chunks = list(chunks)
        self._error = error
        self._hang = hang
        self.closed = False

    async def __aiter__(self) -> AsyncGenerator[bytes]:
        for chunk in self._chunks:
            yield chunk
        if self._error is not None:
            raise self._error
        if self._hang:
            await asyncio.Event().wait()

    async def aclose(self) -> None:
        self.closed = True


class FakeUpstream:
    """Scriptable stand-in for the upstream chat API."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.status_code = 200
        self.chunks: list[bytes] = [HELLO_STREAM]
        self.body_text = ""
        self.error: Exception | None = None
        self.unreachable = False
        self.hang = False
        self.streams: list[ChunkedStream] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        if self.unreachable:
            raise httpx.ConnectError("connection refused", request=request)
        self.requests.append(request)
        if self.status_code >= 400:
            return httpx.Response(self.status_code, text=self.body_text)
        stream = ChunkedStream(self.chunks, error=self.error, hang=self.hang)
        self.streams.append(stream)
        return httpx.Response(
            self.status_code,
            headers={"Content-Type": "text/event-stream"},
            stream=stream,
        )

    def relay(self) -> UpstreamRelay:
        return UpstreamRelay(
            client=httpx.AsyncClient(transport=httpx.MockTransport(self.handler))
        )


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Start every test without upstream configuration."""
    for name in (
        "THIRDWEB_API_URL",
        "THIRDWEB_CREDENTIAL_MODE",
        "THIRDWEB_SECRET_KEY",
        "THIRDWEB_CLIENT_ID",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def secret_key(monkeypatch: pytest.MonkeyPatch) -> str:
    """Configure a secret key credential.

    Returns:
        The configured key.
    """
    monkeypatch.setenv("THIRDWEB_SECRET_KEY", "sk-test-secret")
    return "sk-test-secret"


@pytest.fixture
def upstream() -> FakeUpstream:
    """Fake upstream API that streams "Hello" by default."""
    return FakeUpstream()


@pytest.fixture
async def async_client(upstream: FakeUpstream) -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client for API testing.

    The app's relay is replaced by one talking to the fake upstream.

    Yields:
        Configured AsyncClient for making test requests.
    """
    relay = upstream.relay()
    app.dependency_overrides[get_upstream_relay] = lambda: relay
    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
    finally:
        app.dependency_overrides.pop(get_upstream_relay, None)
        await relay.aclose()


@pytest.fixture
def sse_response() -> Callable[..., httpx.MockTransport]:
    """Build a transport that answers every request with the given SSE chunks.

    Used as a fake proxy for client session tests. Requests are recorded on
    the returned transport's `requests` attribute.
    """

    def factory(
        chunks: Iterable[bytes],
        status_code: int = 200,
        error: Exception | None = None,
        hang: bool = False,
    ) -> httpx.MockTransport:
        chunk_list = list(chunks)
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            if status_code >= 400:
                return httpx.Response(status_code, json={"error": "upstream failed"})
            return httpx.Response(
                status_code,
                headers={"Content-Type": "text/event-stream"},
                stream=ChunkedStream(chunk_list, error=error, hang=hang),
            )

        transport = httpx.MockTransport(handler)
        transport.requests = requests  # type: ignore[attr-defined]
        return transport

    return factory
