"""Error hierarchy for mcs-voice.

Provides structured error types for token, synthesis and recognition calls.
"""

from mcs_voice.errors.base import (
    AuthError,
    EmptyResultError,
    ErrorContext,
    MalformedResponseError,
    SinkError,
    TransportError,
    UnauthorizedError,
    VoiceError,
)
from mcs_voice.errors.classification import (
    ErrorClass,
    classify_http_status,
    error_for_response,
    extract_error_message,
    is_retryable,
)

__all__ = [
    # Base errors
    "AuthError",
    "EmptyResultError",
    "ErrorContext",
    "MalformedResponseError",
    "SinkError",
    "TransportError",
    "UnauthorizedError",
    "VoiceError",
    # Classification
    "ErrorClass",
    "classify_http_status",
    "error_for_response",
    "extract_error_message",
    "is_retryable",
]
