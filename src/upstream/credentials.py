"""Credential resolution for the upstream chat API.

The relay is the same for every deployment; only the way the credential is
found and which header carries it changes.
"""

from collections.abc import Mapping

from pydantic import BaseModel

from src.upstream.config import UpstreamConfig


class Credential(BaseModel):
    """A resolved credential and the upstream header that carries it."""

    header: str
    value: str


class CredentialStrategy:
    """Base strategy: resolve a credential or report it missing."""

    header_name: str = ""
    missing_message: str = "Credential is required."

    def resolve(self, headers: Mapping[str, str]) -> Credential | None:
        """Resolve the credential for one inbound request.

        Args:
            headers: Inbound request headers.

        Returns:
            The credential, or None when none is configured.
        """
        raise NotImplementedError

    def _credential(self, value: str | None) -> Credential | None:
        if not value or not value.strip():
            return None
        return Credential(header=self.header_name, value=value.strip())


class SecretKeyStrategy(CredentialStrategy):
    """Backend secret key taken from the environment only."""

    header_name = "x-secret-key"
    missing_message = (
        "Thirdweb secret key is required. Set THIRDWEB_SECRET_KEY environment variable."
    )

    def __init__(self, secret_key: str | None) -> None:
        self._secret_key = secret_key

    def resolve(self, headers: Mapping[str, str]) -> Credential | None:
        return self._credential(self._secret_key)


class ClientIdStrategy(CredentialStrategy):
    """Client ID from the environment, falling back to the inbound x-client-id header."""

    header_name = "x-client-id"
    missing_message = (
        "Thirdweb client ID is required. Set THIRDWEB_CLIENT_ID environment variable "
        "or send the x-client-id header."
    )

    def __init__(self, client_id: str | None) -> None:
        self._client_id = client_id

    def resolve(self, headers: Mapping[str, str]) -> Credential | None:
        return self._credential(self._client_id or headers.get(self.header_name))


def build_credential_strategy(config: UpstreamConfig) -> CredentialStrategy:
    """Select the credential strategy configured for this deployment."""
    if config.credential_mode == "client_id":
        return ClientIdStrategy(config.client_id)
    return SecretKeyStrategy(config.secret_key)
