"""STT (Speech-to-Text) module.

Recognizes short Opus audio via the MCS voice API.
"""

from mcs_voice.stt.client import (
    AudioSource,
    SttClient,
    build_recognition_request,
    read_audio,
)
from mcs_voice.stt.response import (
    RecognitionResult,
    RecognizedText,
    extract_transcript,
    parse_recognition,
)

__all__ = [
    "AudioSource",
    "RecognitionResult",
    "RecognizedText",
    "SttClient",
    "build_recognition_request",
    "extract_transcript",
    "parse_recognition",
    "read_audio",
]
