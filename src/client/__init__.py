"""Browser-side chat logic, independent of any widget toolkit.

Responsibilities:
    - Incremental SSE parsing of the relayed stream
    - Transcript, session id, and loading state for one page
    - Cancellation of the request in flight
"""

from src.client.session import ChatSession, ChatStreamError
from src.client.sse_parser import SSEStreamParser

__all__ = ["ChatSession", "ChatStreamError", "SSEStreamParser"]
