"""
OAuth grant request bodies.

Two grant shapes exist: the client-credentials grant, sent while no refresh
token is held, and the refresh grant, sent once one is. Both carry the
``client_credentials`` grant type on the wire.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Union

import httpx

if TYPE_CHECKING:
    from mcs_voice.auth.credentials import CredentialState
    from mcs_voice.config import VoiceSettings

GRANT_TYPE = "client_credentials"


class GrantKind(str, Enum):
    """Grant variant tag."""

    CLIENT_CREDENTIALS = "client_credentials"
    REFRESH = "refresh"


@dataclass(frozen=True)
class ClientCredentialsGrant:
    """Identity proof with the client secret."""

    client_id: str
    client_secret: str
    grant_type: str = GRANT_TYPE
    kind: GrantKind = field(default=GrantKind.CLIENT_CREDENTIALS, init=False, repr=False)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        del data["kind"]
        return data

    def to_json(self) -> bytes:
        return json.dumps(self.to_dict()).encode("utf-8")


@dataclass(frozen=True)
class RefreshGrant:
    """Token exchange with a previously issued refresh token."""

    client_id: str
    refresh_token: str
    grant_type: str = GRANT_TYPE
    kind: GrantKind = field(default=GrantKind.REFRESH, init=False, repr=False)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        del data["kind"]
        return data

    def to_json(self) -> bytes:
        return json.dumps(self.to_dict()).encode("utf-8")


Grant = Union[ClientCredentialsGrant, RefreshGrant]


def select_grant(credentials: CredentialState) -> Grant:
    """Pick the grant for the current credential state.

    Args:
        credentials: Credential state to read from

    Returns:
        ClientCredentialsGrant when no refresh token is held, RefreshGrant otherwise
    """
    if not credentials.refresh_token:
        return ClientCredentialsGrant(
            client_id=credentials.client_id,
            client_secret=credentials.client_secret,
        )
    return RefreshGrant(
        client_id=credentials.client_id,
        refresh_token=credentials.refresh_token,
    )


def build_token_request(grant: Grant, settings: VoiceSettings) -> httpx.Request:
    """Build the POST request carrying a grant to the token endpoint."""
    return httpx.Request(
        "POST",
        settings.token_url,
        content=grant.to_json(),
        headers={"Content-Type": "application/json"},
    )
