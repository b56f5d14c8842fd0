"""
Core VoiceClient implementation.
"""

from __future__ import annotations

import asyncio
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Any

from mcs_voice.auth import CredentialState, TokenManager, resolve_client_id, resolve_client_secret
from mcs_voice.config import VoiceSettings
from mcs_voice.stt import SttClient
from mcs_voice.telemetry import LogContext, reset_log_context, set_log_context
from mcs_voice.transport import HttpTransport
from mcs_voice.tts import TtsClient

if TYPE_CHECKING:
    from collections.abc import Iterator

    import httpx

    from mcs_voice.client.builder import VoiceClientBuilder
    from mcs_voice.stt import AudioSource, RecognitionResult
    from mcs_voice.transport import BinarySink
    from mcs_voice.tts import TtsOptions

VOICE_FILE_SUFFIX = ".oga"


class VoiceClient:
    """Client for the MCS token, synthesis and recognition endpoints.

    All parts share one ``CredentialState``. Expired tokens are reported as
    ``UnauthorizedError``; calling ``authenticate()`` again is up to the caller.

    Example:
        >>> async with await VoiceClient.create("client-id", "secret") as client:
        ...     await client.authenticate()
        ...     path = await client.text_to_voice("Привет", "greeting")
        ...     text = await client.voice_to_text(path)
    """

    def __init__(
        self,
        credentials: CredentialState,
        settings: VoiceSettings,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the client. Prefer ``create()`` or ``builder()``.

        Args:
            credentials: Credential state owned by this client
            settings: Endpoint and timeout configuration
            http_client: Optional pre-built httpx client (not closed by us)
        """
        self._credentials = credentials
        self._settings = settings
        self._transport = HttpTransport(settings, client=http_client)
        self._tokens = TokenManager(credentials, self._transport, settings)
        self._tts = TtsClient(credentials, self._transport, settings)
        self._stt = SttClient(credentials, self._transport, settings)

    @classmethod
    async def create(
        cls,
        client_id: str | None = None,
        client_secret: str | None = None,
        *,
        timeout: float | None = None,
        settings: VoiceSettings | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> VoiceClient:
        """Create a new VoiceClient.

        Args:
            client_id: OAuth client id (falls back to MCS_CLIENT_ID)
            client_secret: Client secret (falls back to MCS_CLIENT_SECRET, keyring)
            timeout: Per-call deadline in seconds (default 120)
            settings: Full settings; ``timeout`` overrides its timeout
            http_client: Optional pre-built httpx client (not closed by us)

        Raises:
            ValueError: Client id or secret could not be resolved
        """
        resolved_id = resolve_client_id(client_id)
        if not resolved_id:
            raise ValueError("Client id required (MCS_CLIENT_ID)")
        secret = resolve_client_secret(resolved_id, client_secret)
        if not secret:
            raise ValueError("Client secret required (MCS_CLIENT_SECRET)")

        if settings is None:
            settings = VoiceSettings.from_env(timeout=timeout)
        elif timeout is not None:
            settings = settings.model_copy(update={"timeout": timeout})

        return cls(CredentialState(resolved_id, secret), settings, http_client=http_client)

    @classmethod
    def builder(cls) -> VoiceClientBuilder:
        """Get a builder for advanced configuration."""
        from mcs_voice.client.builder import VoiceClientBuilder

        return VoiceClientBuilder()

    @property
    def credentials(self) -> CredentialState:
        return self._credentials

    @property
    def settings(self) -> VoiceSettings:
        return self._settings

    @property
    def token_manager(self) -> TokenManager:
        return self._tokens

    @contextmanager
    def _operation(self, name: str) -> Iterator[None]:
        token = set_log_context(LogContext.for_operation(name, self._credentials.client_id))
        try:
            yield
        finally:
            reset_log_context(token)

    async def authenticate(self) -> str:
        """Obtain a new access token (client-credentials or refresh grant)."""
        with self._operation("authenticate"):
            return await self._tokens.authenticate()

    async def synthesize(
        self,
        text: str,
        sink: BinarySink,
        options: TtsOptions | None = None,
    ) -> int:
        """Synthesize ``text`` into ``sink`` and close it; returns bytes written."""
        with self._operation("synthesize"):
            return await self._tts.synthesize(text, sink, options)

    async def text_to_voice(
        self,
        text: str,
        file_id: str,
        *,
        directory: str | Path = "voice",
        options: TtsOptions | None = None,
    ) -> Path:
        """Synthesize ``text`` into ``<directory>/<file_id>.oga``.

        The directory must already exist.

        Returns:
            Path of the written audio file
        """
        path = Path(directory) / f"{file_id}{VOICE_FILE_SUFFIX}"
        await self.synthesize(text, path.open("wb"), options)
        return path

    async def recognize(self, audio: AudioSource) -> str:
        """Recognize Opus audio and return the punctuated transcript."""
        with self._operation("recognize"):
            return await self._stt.recognize(audio)

    async def recognize_result(self, audio: AudioSource) -> RecognitionResult:
        """Recognize Opus audio and return the full recognition result."""
        with self._operation("recognize"):
            return await self._stt.recognize_result(audio)

    async def voice_to_text(self, path: str | Path) -> str:
        """Recognize the audio file at ``path``."""
        audio = await asyncio.to_thread(Path(path).read_bytes)
        return await self.recognize(audio)

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._transport.close()

    async def __aenter__(self) -> VoiceClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()
