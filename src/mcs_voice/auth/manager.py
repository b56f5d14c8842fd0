"""
Token lifecycle: grant selection, exchange and credential update.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from mcs_voice.auth.grants import GrantKind, build_token_request, select_grant
from mcs_voice.auth.token import TokenResponse
from mcs_voice.errors import AuthError, extract_error_message
from mcs_voice.errors.classification import decode_error_body
from mcs_voice.telemetry import get_logger

if TYPE_CHECKING:
    from mcs_voice.auth.credentials import CredentialState
    from mcs_voice.config import VoiceSettings
    from mcs_voice.transport import HttpTransport

logger = get_logger("mcs_voice.auth")


class TokenManager:
    """Obtains access tokens for a ``CredentialState``.

    One call, one grant: there is no retry and no fallback from the refresh
    grant to the client-credentials grant. The credential state is changed
    only when a well-formed token body comes back.

    Example:
        >>> manager = TokenManager(credentials, transport, settings)
        >>> token = await manager.authenticate()
    """

    def __init__(
        self,
        credentials: CredentialState,
        transport: HttpTransport,
        settings: VoiceSettings,
    ) -> None:
        self._credentials = credentials
        self._transport = transport
        self._settings = settings
        self._last_response: TokenResponse | None = None

    @property
    def credentials(self) -> CredentialState:
        return self._credentials

    @property
    def last_response(self) -> TokenResponse | None:
        """Most recent successfully parsed token response."""
        return self._last_response

    async def authenticate(self) -> str:
        """Run one grant exchange and store the resulting tokens.

        Returns:
            The new access token (possibly empty, as sent by the service)

        Raises:
            TransportError: Network failure or deadline expiry
            AuthError: Token endpoint answered with a non-2xx status
            MalformedResponseError: Body is not a valid token response
        """
        grant = select_grant(self._credentials)
        if grant.kind is GrantKind.CLIENT_CREDENTIALS:
            logger.info("Refresh token is not set, requesting a new token")
        else:
            logger.info("Exchanging refresh token for an access token")

        request = build_token_request(grant, self._settings)
        response = await self._transport.send(request)

        if not response.is_success:
            body = decode_error_body(response.content)
            message = extract_error_message(body) or f"HTTP {response.status_code}"
            logger.warning(
                "Token request rejected",
                status=response.status_code,
                grant=grant.kind.value,
            )
            raise AuthError(
                f"Token request rejected: {message}",
                status_code=response.status_code,
                grant_kind=grant.kind.value,
            )

        token = TokenResponse.parse(response.content)
        self._store(token)

        logger.info(
            "Access token received",
            expires_in=token.expires_in,
            tts=token.scope.tts,
            asr_short=token.scope.asr_short,
            asr_stream=token.scope.asr_stream,
        )
        return token.access_token

    def _store(self, token: TokenResponse) -> None:
        # Empty values overwrite too: the service response is authoritative.
        self._credentials.refresh_token = token.refresh_token
        self._credentials.access_token = token.access_token
        self._last_response = token
