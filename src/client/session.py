"""Client-side chat session.

Holds everything one browser page needs while it is open: the transcript,
the upstream session id, the loading flag, and the task of the request in
flight. Streaming replies are applied to the transcript as they arrive.
"""

import asyncio
import logging
import os
from collections.abc import Callable
from typing import Any

import httpx

from src.client.sse_parser import SSEStreamParser
from src.models.schemas import ChatMessage, StreamEvent

logger = logging.getLogger(__name__)

API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8000")
CHAT_PATH = "/api/chat"


class ChatStreamError(Exception):
    """Raised when a reply cannot be completed (error event or bad status)."""

    pass


class ChatSession:
    """Manages chat state for a browser session.

    Attributes:
        messages: Ordered transcript; the last assistant entry grows while streaming.
        session_id: Upstream session id, set by the first init event.
        is_loading: True while a reply is streaming.
    """

    def __init__(
        self,
        api_base_url: str = API_BASE_URL,
        on_update: Callable[[], None] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.messages: list[ChatMessage] = []
        self.session_id: Any = None
        self.is_loading: bool = False
        self._api_base_url = api_base_url.rstrip("/")
        self._on_update = on_update
        self._transport = transport
        self._task: asyncio.Task[None] | None = None

    def _notify(self) -> None:
        if self._on_update is not None:
            self._on_update()

    async def send_message(self, text: str) -> None:
        """Send a user message and stream the assistant reply into the transcript.

        Ignored while another reply is streaming or when the text is blank.
        Cancelling the request (see cancel) ends it quietly; any other failure
        replaces the reply with an `Error: ...` message.
        """
        text = text.strip()
        if not text or self.is_loading:
            return

        self.is_loading = True
        self.messages.append(ChatMessage(role="user", content=text))
        outgoing = [msg.model_dump() for msg in self.messages]
        reply_index = len(self.messages)
        self.messages.append(ChatMessage(role="assistant", content=""))
        self._notify()

        self._task = asyncio.create_task(self._stream_reply(outgoing, reply_index))
        try:
            await self._task
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if current is not None and current.cancelling():
                raise
            logger.info("Request aborted")
        except (ChatStreamError, httpx.HTTPError) as e:
            logger.error(f"Chat error: {e}")
            # Transcript may have been reset while the failure was in flight
            if reply_index < len(self.messages):
                self.messages[reply_index] = ChatMessage(
                    role="assistant", content=f"Error: {self._describe(e)}"
                )
        finally:
            self.is_loading = False
            self._task = None
            self._notify()

    async def _stream_reply(self, outgoing: list[dict], reply_index: int) -> None:
        parser = SSEStreamParser()
        reply = ""

        async with httpx.AsyncClient(timeout=None, transport=self._transport) as client:
            async with client.stream(
                "POST",
                f"{self._api_base_url}{CHAT_PATH}",
                json={"messages": outgoing, "session_id": self.session_id},
                headers={"Accept": "text/event-stream"},
            ) as response:
                if not response.is_success:
                    raise ChatStreamError(f"HTTP error! status: {response.status_code}")

                async for chunk in response.aiter_bytes():
                    for event in parser.feed(chunk):
                        reply = self._apply_event(event, reply, reply_index)

    def _apply_event(self, event: StreamEvent, reply: str, reply_index: int) -> str:
        if event.kind == "delta":
            fragment = event.text_fragment()
            if fragment:
                reply += fragment
                self.messages[reply_index] = ChatMessage(role="assistant", content=reply)
                self._notify()
        elif event.kind == "init":
            if session_id := event.session_id():
                self.session_id = session_id
        elif event.kind == "error":
            raise ChatStreamError(event.error_message())
        return reply

    @staticmethod
    def _describe(error: Exception) -> str:
        if isinstance(error, httpx.RequestError):
            return f"Connection failed: {error}"
        return str(error) or "Failed to get response from AI"

    def cancel(self) -> None:
        """Abort the request in flight, if any."""
        if self._task is not None and not self._task.done():
            self._task.cancel()

    def reset(self) -> None:
        """Start a new conversation."""
        self.cancel()
        self.messages.clear()
        self.session_id = None
        self._notify()

    def close(self) -> None:
        """Release the session when its page goes away."""
        self.cancel()
        self._on_update = None
