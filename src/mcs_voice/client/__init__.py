"""
Client module - main entry point for mcs-voice.
"""

from mcs_voice.client.builder import VoiceClientBuilder
from mcs_voice.client.core import VoiceClient

__all__ = [
    "VoiceClient",
    "VoiceClientBuilder",
]
