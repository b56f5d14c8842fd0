"""
Builder for fluent VoiceClient construction.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from mcs_voice.config import VoiceSettings

if TYPE_CHECKING:
    import httpx

    from mcs_voice.client.core import VoiceClient


class VoiceClientBuilder:
    """Builder for creating VoiceClient instances with custom configuration.

    Example:
        >>> client = await (
        ...     VoiceClientBuilder()
        ...     .client_id("my-app")
        ...     .client_secret("...")
        ...     .timeout(60)
        ...     .build()
        ... )
    """

    def __init__(self) -> None:
        self._client_id: str | None = None
        self._client_secret: str | None = None
        self._timeout: float | None = None
        self._token_url: str | None = None
        self._tts_url: str | None = None
        self._asr_url: str | None = None
        self._proxy: str | None = None
        self._http_client: httpx.AsyncClient | None = None

    def client_id(self, client_id: str) -> VoiceClientBuilder:
        self._client_id = client_id
        return self

    def client_secret(self, secret: str | None) -> VoiceClientBuilder:
        self._client_secret = secret
        return self

    def timeout(self, seconds: float) -> VoiceClientBuilder:
        """Set the per-call deadline in seconds."""
        self._timeout = seconds
        return self

    def token_url(self, url: str) -> VoiceClientBuilder:
        self._token_url = url
        return self

    def tts_url(self, url: str) -> VoiceClientBuilder:
        self._tts_url = url
        return self

    def asr_url(self, url: str) -> VoiceClientBuilder:
        self._asr_url = url
        return self

    def proxy(self, url: str | None) -> VoiceClientBuilder:
        self._proxy = url
        return self

    def http_client(self, client: httpx.AsyncClient) -> VoiceClientBuilder:
        """Use an existing httpx client; it stays owned by the caller."""
        self._http_client = client
        return self

    async def build(self) -> VoiceClient:
        """Build the client.

        Raises:
            ValueError: Client id or secret could not be resolved
        """
        from mcs_voice.client.core import VoiceClient

        settings = VoiceSettings.from_env(
            timeout=self._timeout,
            token_url=self._token_url,
            tts_url=self._tts_url,
            asr_url=self._asr_url,
            proxy=self._proxy,
        )
        return await VoiceClient.create(
            self._client_id,
            self._client_secret,
            settings=settings,
            http_client=self._http_client,
        )
