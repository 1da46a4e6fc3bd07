"""Wallet Chat - streaming web chat over the thirdweb AI API.

Combines FastAPI for the streaming proxy, httpx for upstream and client
HTTP, NiceGUI for the browser UI, and Pydantic for data validation.

Components:
    - api: Proxy endpoint relaying the upstream SSE stream
    - upstream: Configuration, credentials, and the byte relay
    - client: Incremental SSE parser and per-page chat session
    - ui: Web interface for chat interactions
    - models: Request/response and stream event schemas
"""

__version__ = "0.1.0"
