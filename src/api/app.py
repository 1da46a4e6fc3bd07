"""Proxy application: builds the FastAPI app that serves /api/chat.

The module-level `app` is what uvicorn loads in separate mode; the
integrated runner builds its own via `create_app()` and mounts the UI on it.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.chat import router as chat_router
from src.upstream.relay import close_upstream_relay

logger = logging.getLogger(__name__)

SERVICE_NAME = "wallet-chat"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Log start and stop, and release the shared upstream client on exit."""
    logger.info("Wallet Chat proxy ready")
    try:
        yield
    finally:
        await close_upstream_relay()
        logger.info("Wallet Chat proxy stopped, upstream client closed")


def create_app() -> FastAPI:
    """Build the proxy app with CORS, the chat router and a health check.

    Returns:
        A new FastAPI instance; nothing is shared between calls except the
        upstream relay singleton.
    """
    application = FastAPI(
        title="Wallet Chat API",
        description=(
            "Relays chat requests to the thirdweb AI API with the server-side "
            "credential attached and streams the SSE reply back unchanged."
        ),
        version="0.1.0",
        docs_url="/docs",
        redoc_url=None,
        lifespan=lifespan,
    )

    # The page may be served from another port in separate mode
    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    application.include_router(chat_router)

    @application.get("/health", tags=["ops"])
    async def health_check() -> dict[str, str]:
        return {"status": "healthy", "service": SERVICE_NAME}

    return application


app = create_app()
