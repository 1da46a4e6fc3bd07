"""Upstream access for the thirdweb AI chat API.

Responsibilities:
    - Configuration loading from the environment
    - Credential resolution (secret key or client ID)
    - Streaming relay of the upstream response body

Kept separate from the HTTP layer so the route only translates outcomes
into responses.
"""

from src.upstream.config import UpstreamConfig, get_upstream_config
from src.upstream.credentials import Credential, CredentialStrategy, build_credential_strategy
from src.upstream.relay import UpstreamError, UpstreamRelay, get_upstream_relay

__all__ = [
    "Credential",
    "CredentialStrategy",
    "UpstreamConfig",
    "UpstreamError",
    "UpstreamRelay",
    "build_credential_strategy",
    "get_upstream_config",
    "get_upstream_relay",
]
