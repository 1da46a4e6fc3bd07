import json
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class ChatMessage(BaseModel):
    """A single message in the conversation transcript.

    Attributes:
        role: Who wrote the message (user or assistant).
        content: The message text.
    """

    role: Literal["user", "assistant"]
    content: str


class ChatRequest(BaseModel):
    """Request payload for the chat proxy endpoint.

    Attributes:
        messages: Full transcript to send upstream.
        context: Opaque upstream context, forwarded as-is.
        session_id: Upstream session for conversation continuity, echoed
            back exactly as the upstream issued it.
    """

    model_config = ConfigDict(extra="ignore")

    messages: list[ChatMessage]
    context: Any = None
    session_id: Any = None

    def upstream_payload(self) -> dict[str, Any]:
        """Build the upstream request body.

        Fields absent from the inbound body are omitted, streaming is always on.
        """
        payload = self.model_dump(exclude_unset=True)
        payload["stream"] = True
        return payload


class ErrorResponse(BaseModel):
    """JSON error envelope returned by the proxy."""

    error: str


class StreamEvent(BaseModel):
    """One decoded SSE record from the upstream stream.

    Attributes:
        kind: Effective event kind (init, delta, done, error, ...).
        data: JSON-decoded `data:` payload, usually an object.
    """

    kind: str = ""
    data: Any = Field(default=None)

    def _field(self, name: str) -> Any:
        if isinstance(self.data, dict):
            return self.data.get(name)
        return None

    def text_fragment(self) -> str:
        """Text carried by a delta event."""
        fragment = self._field("v")
        if not fragment and isinstance(self.data, str):
            fragment = self.data
        return fragment if isinstance(fragment, str) else ""

    def session_id(self) -> Any:
        """Session identifier carried by an init event, in whatever JSON type it came."""
        return self._field("session_id") or None

    def error_message(self) -> str:
        """Human-readable message carried by an error event."""
        message = (
            self._field("message")
            or self._field("error")
            or self._field("data")
            or "Unknown error"
        )
        return message if isinstance(message, str) else json.dumps(message)
