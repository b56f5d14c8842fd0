"""STT (Speech-to-Text) client.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, BinaryIO, Union

import httpx

from mcs_voice.errors import error_for_response
from mcs_voice.stt.response import RecognitionResult, extract_transcript, parse_recognition
from mcs_voice.telemetry import get_logger
from mcs_voice.tts.client import speech_headers

if TYPE_CHECKING:
    from mcs_voice.auth.credentials import CredentialState
    from mcs_voice.config import VoiceSettings
    from mcs_voice.transport import HttpTransport

logger = get_logger("mcs_voice.stt")

AudioSource = Union[bytes, bytearray, BinaryIO]


def read_audio(audio: AudioSource) -> bytes:
    """Read an audio source fully into memory."""
    if isinstance(audio, (bytes, bytearray)):
        return bytes(audio)
    return audio.read()


def build_recognition_request(
    access_token: str,
    audio: bytes,
    settings: VoiceSettings,
) -> httpx.Request:
    """Build the POST request carrying Opus audio for recognition."""
    return httpx.Request(
        "POST",
        settings.asr_url,
        content=audio,
        headers=speech_headers(access_token),
    )


class SttClient:
    """Client for speech-to-text recognition of short Opus audio."""

    def __init__(
        self,
        credentials: CredentialState,
        transport: HttpTransport,
        settings: VoiceSettings,
    ) -> None:
        self._credentials = credentials
        self._transport = transport
        self._settings = settings

    async def recognize_result(self, audio: AudioSource) -> RecognitionResult:
        """Recognize audio and return the full parsed result.

        Args:
            audio: Opus-in-Ogg bytes, or a readable binary source read in a worker thread

        Returns:
            Parsed recognition result (may have no texts)

        Raises:
            TransportError: Network failure, deadline expiry or non-2xx status
            UnauthorizedError: Access token rejected
            MalformedResponseError: Body is not a recognition response
        """
        if isinstance(audio, (bytes, bytearray)):
            payload = bytes(audio)
        else:
            payload = await asyncio.to_thread(read_audio, audio)
        request = build_recognition_request(
            self._credentials.access_token, payload, self._settings
        )
        response = await self._transport.send(request)
        if not response.is_success:
            raise error_for_response(response)

        result = parse_recognition(response.content)
        logger.info(
            "Recognition finished",
            query_id=result.query_id,
            candidates=len(result.texts),
            audio_bytes=len(payload),
        )
        return result

    async def recognize(self, audio: AudioSource) -> str:
        """Recognize audio and return the transcript.

        Raises:
            EmptyResultError: Service returned no candidate texts
            TransportError, UnauthorizedError, MalformedResponseError: As in
                ``recognize_result``
        """
        result = await self.recognize_result(audio)
        return extract_transcript(result)
