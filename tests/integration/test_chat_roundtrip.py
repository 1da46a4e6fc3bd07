"""End-to-end tests: ChatSession -> proxy app -> fake upstream.

The client session talks to the real FastAPI app over ASGITransport, the app
relays from the scripted upstream. Covers the full browser-visible flow.
"""

import json
from collections.abc import AsyncGenerator

import pytest
import pytest_check as check
from httpx import ASGITransport

from src.api import app
from src.client.session import ChatSession
from src.upstream.relay import get_upstream_relay
from tests.conftest import HELLO_STREAM, FakeUpstream


@pytest.fixture
async def session(upstream: FakeUpstream) -> AsyncGenerator[ChatSession]:
    """Chat session wired to the app, whose relay uses the fake upstream."""
    relay = upstream.relay()
    app.dependency_overrides[get_upstream_relay] = lambda: relay
    yield ChatSession(api_base_url="http://test", transport=ASGITransport(app=app))
    app.dependency_overrides.pop(get_upstream_relay, None)
    await relay.aclose()


class TestChatRoundtrip:
    """Full flow from user input to rendered transcript."""

    async def test_streamed_reply_lands_in_transcript(
        self, session: ChatSession, secret_key: str
    ) -> None:
        await session.send_message("Hi")

        check.equal(session.messages[-1].role, "assistant")
        check.equal(session.messages[-1].content, "Hello")
        check.is_false(session.is_loading)

    async def test_session_id_round_trips_to_upstream(
        self, session: ChatSession, upstream: FakeUpstream, secret_key: str
    ) -> None:
        """Session id assigned upstream is echoed back on the next turn."""
        upstream.chunks = [
            b'event: init\ndata: {"session_id":"abc123"}\n\n',
            b'event: delta\ndata: {"v":"Hi there"}\n\n',
            b"event: done\ndata: {}\n\n",
        ]

        await session.send_message("first")
        await session.send_message("second")

        first, second = (json.loads(r.content) for r in upstream.requests)
        check.is_none(first["session_id"])
        check.equal(second["session_id"], "abc123")
        check.equal(
            second["messages"],
            [
                {"role": "user", "content": "first"},
                {"role": "assistant", "content": "Hi there"},
                {"role": "user", "content": "second"},
            ],
        )

    async def test_numeric_session_id_round_trips(
        self, session: ChatSession, upstream: FakeUpstream, secret_key: str
    ) -> None:
        """The proxy accepts whatever JSON type the upstream used for the session id."""
        upstream.chunks = [b'event: init\ndata: {"session_id":42}\n\n', HELLO_STREAM]

        await session.send_message("first")
        await session.send_message("second")

        check.equal(json.loads(upstream.requests[1].content)["session_id"], 42)
        check.equal(session.messages[-1].content, "Hello")

    async def test_upstream_error_event_is_shown(
        self, session: ChatSession, upstream: FakeUpstream, secret_key: str
    ) -> None:
        upstream.chunks = [b'event: error\ndata: {"message":"boom"}\n\n']

        await session.send_message("Hi")

        check.equal(session.messages[-1].content, "Error: boom")

    async def test_missing_credential_is_shown_as_http_error(
        self, session: ChatSession, upstream: FakeUpstream
    ) -> None:
        await session.send_message("Hi")

        check.equal(session.messages[-1].content, "Error: HTTP error! status: 400")
        check.equal(upstream.requests, [])
