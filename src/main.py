"""Command-line launcher for the wallet chat app.

Two layouts, picked by RUN_MODE:

* integrated (default): one uvicorn server on PORT carries both the proxy
  routes and the NiceGUI page.
* separate: the proxy on port 8000 and the page on port 8080, each in its
  own process.

Settings are read from the environment after `.env` has been loaded.
"""

import logging
import os
import sys
from typing import NamedTuple

from dotenv import load_dotenv

# .env must be applied before src.* modules read their settings
load_dotenv()

logger = logging.getLogger(__name__)

PROXY_PORT = 8000
UI_PORT = 8080


class ServerSettings(NamedTuple):
    host: str
    port: int
    log_level: str


def configure_logging() -> None:
    """Send every logger's records to stdout at LOG_LEVEL (default INFO)."""
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def server_settings() -> ServerSettings:
    return ServerSettings(
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", str(PROXY_PORT))),
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )


def run_integrated() -> None:
    """Mount the chat page on the proxy app and serve both from one port.

    The page then reaches /api/chat on its own origin; API_BASE_URL has to
    match when PORT is not the default.
    """
    import uvicorn
    from nicegui import ui

    from src.api.app import create_app
    from src.ui.chat_page import chat_page  # noqa: F401 - page registration side effect

    settings = server_settings()
    app = create_app()
    ui.run_with(
        app,
        title="AI Wallet Manager",
        storage_secret=os.getenv("NICEGUI_STORAGE_SECRET", "wallet-chat-secret"),
    )

    logger.info(f"Serving chat page and /api/chat on port {settings.port}")
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level)


def run_separate() -> None:
    """Start proxy and page as child processes; stop both when either exits."""
    import subprocess
    import time

    host = server_settings().host
    children = [
        subprocess.Popen(
            [sys.executable, "-m", "uvicorn", "src.api.app:app",
             "--host", host, "--port", str(PROXY_PORT)]
        ),
        subprocess.Popen(
            [sys.executable, "-c", "from src.ui.chat_page import main; main()"]
        ),
    ]
    logger.info(f"Proxy on port {PROXY_PORT}, chat page on port {UI_PORT}")

    try:
        while all(child.poll() is None for child in children):
            time.sleep(1)
    except KeyboardInterrupt:
        logger.info("Interrupted, stopping child processes")
    finally:
        for child in children:
            child.terminate()
            child.wait()


def main() -> None:
    configure_logging()
    mode = os.getenv("RUN_MODE", "integrated").lower()
    logger.info(f"Wallet Chat starting ({mode})")

    if mode == "separate":
        run_separate()
    else:
        run_integrated()


if __name__ == "__main__":
    main()
