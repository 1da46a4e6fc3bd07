"""Upstream configuration with environment variable loading.

Pydantic-based configuration for the thirdweb AI chat relay.
Supports either a backend secret key or a public client ID as credential.
"""

import os
from typing import Literal

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

# Load environment variables from .env file
load_dotenv()

DEFAULT_API_URL = "https://api.thirdweb.com/ai/chat"

CredentialMode = Literal["secret_key", "client_id"]


class UpstreamConfig(BaseModel):
    """Configuration for the upstream chat API.

    Attributes:
        api_url: Chat endpoint that accepts streamed completions.
        credential_mode: Which credential strategy to use.
        secret_key: Backend secret key (sent as x-secret-key).
        client_id: Public client ID (sent as x-client-id).
    """

    model_config = ConfigDict(validate_default=True)

    api_url: str = Field(
        default_factory=lambda: os.getenv("THIRDWEB_API_URL") or DEFAULT_API_URL,
        description="Upstream chat completion endpoint",
    )
    credential_mode: CredentialMode = Field(
        default_factory=lambda: os.getenv("THIRDWEB_CREDENTIAL_MODE", "secret_key"),
        description="Credential strategy: 'secret_key' or 'client_id'",
    )
    secret_key: str | None = Field(
        default_factory=lambda: os.getenv("THIRDWEB_SECRET_KEY"),
        description="thirdweb secret key for backend usage",
    )
    client_id: str | None = Field(
        default_factory=lambda: os.getenv("THIRDWEB_CLIENT_ID"),
        description="thirdweb client ID",
    )

    @field_validator("credential_mode", mode="before")
    @classmethod
    def normalize_mode(cls, v: str) -> str:
        """Accept the mode in any case, surrounded by whitespace."""
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("secret_key", "client_id")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        """Treat blank credentials as missing."""
        if v is None or not v.strip():
            return None
        return v.strip()


def get_upstream_config() -> UpstreamConfig:
    """Create upstream configuration from environment.

    Returns:
        Configured UpstreamConfig instance.

    Raises:
        ValidationError: If THIRDWEB_CREDENTIAL_MODE is not a known mode.
    """
    return UpstreamConfig()
