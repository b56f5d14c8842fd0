"""mcs-voice: async client for the Mail.ru Cloud Solutions voice API.

Token acquisition and refresh, text-to-speech synthesis and speech-to-text
recognition over a single shared credential state.
"""
from __future__ import annotations

from mcs_voice.auth import CredentialState, TokenManager, TokenResponse
from mcs_voice.client import VoiceClient, VoiceClientBuilder
from mcs_voice.config import VoiceSettings
from mcs_voice.errors import (
    AuthError,
    EmptyResultError,
    MalformedResponseError,
    SinkError,
    TransportError,
    UnauthorizedError,
    VoiceError,
)
from mcs_voice.stt import RecognitionResult, RecognizedText
from mcs_voice.tts import TtsOptions

__version__ = "0.1.0"

__all__ = [
    # Client
    "VoiceClient",
    "VoiceClientBuilder",
    "VoiceSettings",
    # Auth
    "CredentialState",
    "TokenManager",
    "TokenResponse",
    # Errors
    "AuthError",
    "EmptyResultError",
    "MalformedResponseError",
    "SinkError",
    "TransportError",
    "UnauthorizedError",
    "VoiceError",
    # Types
    "RecognitionResult",
    "RecognizedText",
    "TtsOptions",
    # Version
    "__version__",
]
