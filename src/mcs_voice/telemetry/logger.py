"""
Structured logging for mcs-voice.

All library loggers live under the ``mcs_voice`` namespace and propagate to
it, so one handler installed by ``VoiceLogger.configure`` formats every
record. Keyword fields passed to the logging calls travel on the record and
are masked together with the message.
"""

from __future__ import annotations

import json
import logging
import re
import sys
import uuid
from contextvars import ContextVar, Token
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Any, ClassVar, TextIO

ROOT_LOGGER = "mcs_voice"

REDACTED = "***REDACTED***"

_log_context: ContextVar[LogContext | None] = ContextVar("mcs_voice_log_context", default=None)


@dataclass(frozen=True)
class LogContext:
    """Identifies the client call a log record belongs to."""

    request_id: str | None = None
    operation: str | None = None
    client_id: str | None = None

    @classmethod
    def for_operation(cls, operation: str, client_id: str | None = None) -> LogContext:
        """Create a context with a fresh request id."""
        return cls(request_id=uuid.uuid4().hex[:12], operation=operation, client_id=client_id)

    def to_dict(self) -> dict[str, Any]:
        return {k: v for k, v in asdict(self).items() if v}


def get_log_context() -> LogContext:
    """Context of the running call, empty outside of one."""
    return _log_context.get() or LogContext()


def set_log_context(context: LogContext) -> Token[LogContext | None]:
    """Install ``context`` and return the token that restores the previous one."""
    return _log_context.set(context)


def reset_log_context(token: Token[LogContext | None]) -> None:
    """Restore the context that was active before ``set_log_context``."""
    _log_context.reset(token)


class SensitiveDataMasker:
    """Masks credentials in log messages and fields."""

    DEFAULT_PATTERNS: ClassVar[list[tuple[str, str]]] = [
        (r"(Bearer\s+)([^\s\"']+)", rf"\1{REDACTED}"),
        (r"(Authorization[\"']?\s*[:=]\s*[\"']?)(?!Bearer)([^\"'\s]+)", rf"\1{REDACTED}"),
        (
            r"((?:access_token|refresh_token|client_secret)[\"']?\s*[:=]\s*[\"']?)([^\"'\s,}]+)",
            rf"\1{REDACTED}",
        ),
        (r"(MCS_CLIENT_SECRET=)([^\s]+)", rf"\1{REDACTED}"),
    ]

    SENSITIVE_KEYS: ClassVar[tuple[str, ...]] = ("token", "secret", "password", "authorization")

    def __init__(self, patterns: list[tuple[str, str]] | None = None) -> None:
        self._patterns = [
            (re.compile(p, re.IGNORECASE), r)
            for p, r in (patterns or self.DEFAULT_PATTERNS)
        ]

    def mask(self, text: str) -> str:
        """Mask credentials embedded in free text."""
        for pattern, replacement in self._patterns:
            text = pattern.sub(replacement, text)
        return text

    def mask_dict(self, data: dict[str, Any]) -> dict[str, Any]:
        """Mask a field mapping.

        Values under keys that look like credentials are replaced outright,
        strings elsewhere go through the text patterns.
        """
        return {key: self._mask_value(key, value) for key, value in data.items()}

    def _mask_value(self, key: str, value: Any) -> Any:
        if any(s in key.lower() for s in self.SENSITIVE_KEYS):
            return REDACTED
        if isinstance(value, str):
            return self.mask(value)
        if isinstance(value, dict):
            return self.mask_dict(value)
        if isinstance(value, list):
            return [self.mask_dict(v) if isinstance(v, dict) else v for v in value]
        return value


class _MaskingFormatter(logging.Formatter):
    """Collects the masked message, fields and call context of a record."""

    def __init__(
        self,
        masker: SensitiveDataMasker | None = None,
        include_context: bool = True,
    ) -> None:
        super().__init__()
        self._masker = masker or SensitiveDataMasker()
        self._include_context = include_context

    def _parts(self, record: logging.LogRecord) -> tuple[str, dict[str, Any], dict[str, Any]]:
        message = self._masker.mask(record.getMessage())
        fields = self._masker.mask_dict(getattr(record, "fields", None) or {})
        context = get_log_context().to_dict() if self._include_context else {}
        return message, fields, context


class TextFormatter(_MaskingFormatter):
    """``time | LEVEL | logger | message | k=v ... | context``"""

    def format(self, record: logging.LogRecord) -> str:
        message, fields, context = self._parts(record)
        stamp = datetime.fromtimestamp(record.created).strftime("%Y-%m-%d %H:%M:%S")
        line = f"{stamp} | {record.levelname:<8} | {record.name} | {message}"
        for group in (fields, context):
            if group:
                line += " | " + " ".join(f"{k}={v}" for k, v in group.items())
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class JsonFormatter(_MaskingFormatter):
    """One JSON object per record; fields are merged at the top level."""

    def format(self, record: logging.LogRecord) -> str:
        message, fields, context = self._parts(record)
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        payload: dict[str, Any] = {
            "timestamp": created.isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "message": message,
            **fields,
        }
        if context:
            payload["context"] = context
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class VoiceLogger:
    """Thin wrapper over ``logging.Logger`` accepting keyword fields.

    Example:
        >>> VoiceLogger.configure(logging.DEBUG, json_output=True)
        >>> get_logger("mcs_voice.auth").info("Token received", tts=1)
    """

    _handler: ClassVar[logging.Handler | None] = None

    @classmethod
    def configure(
        cls,
        level: int | str = logging.INFO,
        *,
        json_output: bool = False,
        stream: TextIO | None = None,
        masker: SensitiveDataMasker | None = None,
    ) -> None:
        """Install one masking handler on the ``mcs_voice`` logger.

        Calling it again replaces the previously installed handler.
        """
        root = logging.getLogger(ROOT_LOGGER)
        if cls._handler is not None:
            root.removeHandler(cls._handler)

        formatter_cls = JsonFormatter if json_output else TextFormatter
        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(formatter_cls(masker=masker))
        root.addHandler(handler)
        root.setLevel(level)
        cls._handler = handler

    def __init__(self, logger: logging.Logger) -> None:
        self._logger = logger

    @property
    def name(self) -> str:
        return self._logger.name

    def _log(self, level: int, msg: str, **fields: Any) -> None:
        self._logger.log(level, msg, extra={"fields": fields})

    def debug(self, msg: str, **fields: Any) -> None:
        self._log(logging.DEBUG, msg, **fields)

    def info(self, msg: str, **fields: Any) -> None:
        self._log(logging.INFO, msg, **fields)

    def warning(self, msg: str, **fields: Any) -> None:
        self._log(logging.WARNING, msg, **fields)


def get_logger(name: str) -> VoiceLogger:
    """Get a logger under the ``mcs_voice`` namespace."""
    if name != ROOT_LOGGER and not name.startswith(ROOT_LOGGER + "."):
        name = f"{ROOT_LOGGER}.{name}"
    return VoiceLogger(logging.getLogger(name))
