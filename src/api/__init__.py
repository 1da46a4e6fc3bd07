"""FastAPI endpoints for the wallet chat proxy.

HTTP and streaming routes with async request handling.
Relays Server-Sent Events from the upstream chat API.

Endpoints:
    - GET /health: Service health status
    - POST /api/chat: Streamed chat completion relay
"""

from src.api.app import app, create_app

__all__ = ["app", "create_app"]
