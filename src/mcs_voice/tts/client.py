"""TTS (Text-to-Speech) client.
"""

from __future__ import annotations

from contextlib import closing
from dataclasses import dataclass
from typing import TYPE_CHECKING

import httpx

from mcs_voice.telemetry import get_logger

if TYPE_CHECKING:
    from mcs_voice.auth.credentials import CredentialState
    from mcs_voice.config import VoiceSettings
    from mcs_voice.transport import BinarySink, HttpTransport

logger = get_logger("mcs_voice.tts")

AUDIO_CONTENT_TYPE = "audio/ogg; codecs=opus"


@dataclass(frozen=True)
class TtsOptions:
    """Options for TTS synthesis."""

    model: str = "maria"
    encoder: str = "opus"
    tempo: float = 0.9

    def to_params(self, text: str) -> dict[str, str]:
        return {
            "text": text,
            "model_name": self.model,
            "encoder": self.encoder,
            "tempo": f"{self.tempo:g}",
        }


def speech_headers(access_token: str) -> dict[str, str]:
    """Headers shared by synthesis and recognition requests."""
    return {
        "Authorization": f"Bearer {access_token}",
        "Content-Type": AUDIO_CONTENT_TYPE,
    }


def build_synthesis_request(
    access_token: str,
    text: str,
    settings: VoiceSettings,
    options: TtsOptions | None = None,
) -> httpx.Request:
    """Build the GET request for synthesizing ``text``."""
    opts = options or TtsOptions()
    return httpx.Request(
        "GET",
        settings.tts_url,
        params=opts.to_params(text),
        headers=speech_headers(access_token),
    )


class TtsClient:
    """Client for text-to-speech synthesis.

    Uses whatever access token the shared ``CredentialState`` holds at call
    time; a 401 surfaces as ``UnauthorizedError`` for the caller to handle.
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

    async def synthesize(
        self,
        text: str,
        sink: BinarySink,
        options: TtsOptions | None = None,
    ) -> int:
        """Synthesize text and stream the audio into ``sink``.

        The sink is closed before this method returns or raises.

        Args:
            text: Text to synthesize
            sink: Writable binary destination (e.g. a file opened with "wb")
            options: Voice model, encoder and tempo

        Returns:
            Number of audio bytes written

        Raises:
            TransportError: Network failure, deadline expiry or non-2xx status
            UnauthorizedError: Access token rejected
            SinkError: Sink failed while writing
        """
        with closing(sink):
            request = build_synthesis_request(
                self._credentials.access_token, text, self._settings, options
            )
            written = await self._transport.stream_to(request, sink)
        logger.info("Synthesized audio", bytes=written, chars=len(text))
        return written
