"""
Transport layer - HTTP client for the MCS voice endpoints.

Provides httpx-based transport with:
- Per-call deadline
- Proxy configuration
- Streaming of audio bodies into a sink
"""

from mcs_voice.transport.http import BinarySink, HttpTransport

__all__ = [
    "BinarySink",
    "HttpTransport",
]
