"""
Authentication - credential state, OAuth grants and the token manager.
"""

from mcs_voice.auth.credentials import (
    CredentialState,
    resolve_client_id,
    resolve_client_secret,
)
from mcs_voice.auth.grants import (
    GRANT_TYPE,
    ClientCredentialsGrant,
    Grant,
    GrantKind,
    RefreshGrant,
    build_token_request,
    select_grant,
)
from mcs_voice.auth.manager import TokenManager
from mcs_voice.auth.token import TokenResponse, TokenScope

__all__ = [
    "GRANT_TYPE",
    "ClientCredentialsGrant",
    "CredentialState",
    "Grant",
    "GrantKind",
    "RefreshGrant",
    "TokenManager",
    "TokenResponse",
    "TokenScope",
    "build_token_request",
    "resolve_client_id",
    "resolve_client_secret",
    "select_grant",
]
