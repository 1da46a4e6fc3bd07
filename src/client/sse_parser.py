"""Incremental parser for the upstream SSE stream.

Network chunks do not line up with SSE lines, so the parser keeps two pieces
of state between calls: the pending text of an unfinished line and the name
set by the last `event:` line. A payload's own `event` field takes precedence
over that name.
"""

import codecs
import json
import logging

from src.models.schemas import StreamEvent

logger = logging.getLogger(__name__)

EVENT_PREFIX = "event: "
DATA_PREFIX = "data: "
DONE_SENTINEL = "[DONE]"


class SSEStreamParser:
    """Turns raw stream chunks into StreamEvents."""

    def __init__(self) -> None:
        self.buffer: str = ""
        self.current_event: str = ""
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")

    def feed(self, chunk: bytes) -> list[StreamEvent]:
        """Consume one network chunk.

        Complete lines are processed; the trailing partial line is kept for
        the next call. A `done` event ends processing of this chunk and the
        lines after it are dropped.

        Args:
            chunk: Raw bytes as read from the network.

        Returns:
            Events decoded from the complete lines, in order.
        """
        self.buffer += self._decoder.decode(chunk)
        *lines, self.buffer = self.buffer.split("\n")

        events: list[StreamEvent] = []
        for raw_line in lines:
            event = self._parse_line(raw_line.strip())
            if event is None:
                continue
            events.append(event)
            if event.kind == "done":
                break
        return events

    def _parse_line(self, line: str) -> StreamEvent | None:
        if not line:
            return None

        if line.startswith(EVENT_PREFIX):
            self.current_event = line[len(EVENT_PREFIX):].strip()
            return None

        if not line.startswith(DATA_PREFIX):
            return None

        payload = line[len(DATA_PREFIX):].strip()
        if not payload or payload == DONE_SENTINEL:
            return None

        try:
            data = json.loads(payload)
        except json.JSONDecodeError:
            # Likely a partial record; keep going
            logger.debug(f"Skipping undecodable data line: {payload[:80]}")
            return None
        if data is None:
            return None

        kind = self.current_event
        if isinstance(data, dict) and data.get("event"):
            kind = str(data["event"])
        return StreamEvent(kind=kind, data=data)
