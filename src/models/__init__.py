"""Pydantic models for API requests, responses, and stream events.

Provides type safety, validation, and automatic OpenAPI documentation.

Models:
    - ChatMessage: Individual message in the transcript
    - ChatRequest: Incoming chat request payload
    - ErrorResponse: JSON error envelope
    - StreamEvent: Decoded SSE record from the upstream stream
"""

from src.models.schemas import ChatMessage, ChatRequest, ErrorResponse, StreamEvent

__all__ = ["ChatMessage", "ChatRequest", "ErrorResponse", "StreamEvent"]
