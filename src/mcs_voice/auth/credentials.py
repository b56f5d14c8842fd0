"""
Client credentials and token state.

Resolves client secrets from multiple sources:
1. Explicit value
2. Environment variables
3. System keyring (optional)
"""

from __future__ import annotations

import os

from mcs_voice.telemetry import get_logger

logger = get_logger("mcs_voice.auth")

KEYRING_SERVICE = "mcs-voice"


class CredentialState:
    """Client identity plus the current access and refresh tokens.

    ``client_id`` and ``client_secret`` are fixed at construction. The token
    fields start empty and are overwritten by ``TokenManager`` after each
    successful grant. Nothing is validated here; bad credentials surface as
    errors from the token endpoint.
    """

    __slots__ = ("_client_id", "_client_secret", "access_token", "refresh_token")

    def __init__(self, client_id: str, client_secret: str) -> None:
        self._client_id = client_id
        self._client_secret = client_secret
        self.refresh_token = ""
        self.access_token = ""

    @property
    def client_id(self) -> str:
        return self._client_id

    @property
    def client_secret(self) -> str:
        return self._client_secret

    @property
    def is_authenticated(self) -> bool:
        """Whether an access token is held (it may still have expired remotely)."""
        return self.access_token != ""

    @property
    def has_refresh_token(self) -> bool:
        return self.refresh_token != ""

    def __repr__(self) -> str:
        return (
            f"CredentialState(client_id={self._client_id!r}, "
            f"authenticated={self.is_authenticated}, "
            f"refreshable={self.has_refresh_token})"
        )


def resolve_client_id(explicit_id: str | None = None) -> str | None:
    """Resolve the OAuth client id from argument or ``MCS_CLIENT_ID``."""
    if explicit_id:
        return explicit_id
    return os.getenv("MCS_CLIENT_ID") or None


def resolve_client_secret(
    client_id: str,
    explicit_secret: str | None = None,
) -> str | None:
    """Resolve the client secret for a client id.

    Resolution order:
    1. Explicit secret if provided
    2. ``MCS_CLIENT_SECRET`` environment variable
    3. System keyring entry ``mcs-voice`` / client id (if keyring is installed)

    Args:
        client_id: OAuth client identifier
        explicit_secret: Explicitly provided secret

    Returns:
        Resolved secret or None if not found
    """
    if explicit_secret:
        return explicit_secret

    secret = os.getenv("MCS_CLIENT_SECRET")
    if secret:
        return secret

    return _try_keyring(client_id)


def _try_keyring(client_id: str) -> str | None:
    """Try to get the client secret from the system keyring."""
    try:
        import keyring
        from keyring.errors import KeyringError
    except ImportError:
        return None

    try:
        return keyring.get_password(KEYRING_SERVICE, client_id)
    except KeyringError as e:
        # Common in containers and WSL without a keyring backend
        logger.debug("Keyring lookup failed", error=str(e))
        return None
