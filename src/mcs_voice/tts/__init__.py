"""TTS (Text-to-Speech) module.

Synthesizes text to Opus-in-Ogg audio via the MCS voice API.
"""

from mcs_voice.tts.client import (
    AUDIO_CONTENT_TYPE,
    TtsClient,
    TtsOptions,
    build_synthesis_request,
    speech_headers,
)

__all__ = [
    "AUDIO_CONTENT_TYPE",
    "TtsClient",
    "TtsOptions",
    "build_synthesis_request",
    "speech_headers",
]
