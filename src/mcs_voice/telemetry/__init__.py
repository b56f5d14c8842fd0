"""
Telemetry module for mcs-voice.

Provides structured logging with credential masking.
"""

from mcs_voice.telemetry.logger import (
    REDACTED,
    JsonFormatter,
    LogContext,
    SensitiveDataMasker,
    TextFormatter,
    VoiceLogger,
    get_log_context,
    get_logger,
    reset_log_context,
    set_log_context,
)

__all__ = [
    "REDACTED",
    "JsonFormatter",
    "LogContext",
    "SensitiveDataMasker",
    "TextFormatter",
    "VoiceLogger",
    "get_log_context",
    "get_logger",
    "reset_log_context",
    "set_log_context",
]
