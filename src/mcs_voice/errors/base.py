"""Base error classes for mcs-voice.

Provides a layered error hierarchy:
- VoiceError: Base class for all library errors
- TransportError: HTTP/network errors and non-2xx speech responses
- UnauthorizedError: Access token rejected by a speech endpoint
- AuthError: Token endpoint refused the grant
- MalformedResponseError: Undecodable or ill-shaped JSON body
- EmptyResultError: Recognition returned no candidate texts
- SinkError: Output sink failed while receiving audio
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class ErrorContext:
    """Structured error context for diagnostics."""

    field_path: str | None = None
    """Path to the problematic field (e.g., 'result.texts')"""

    details: dict[str, Any] = field(default_factory=dict)
    """Additional details about the error"""

    source: str | None = None
    """Error source (e.g., 'auth', 'transport', 'stt')"""

    hint: str | None = None
    """Actionable hint for resolving the error"""

    def __str__(self) -> str:
        parts = []
        if self.source:
            parts.append(f"[{self.source}]")
        if self.field_path:
            parts.append(f"at '{self.field_path}'")
        if self.hint:
            parts.append(f"(hint: {self.hint})")
        return " ".join(parts)


class VoiceError(Exception):
    """Base class for all mcs-voice errors.

    Attributes:
        message: Human-readable error message
        context: Optional structured error context
    """

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
    ) -> None:
        self.message = message
        self.context = context or ErrorContext()
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        ctx_str = str(self.context)
        if ctx_str:
            return f"{self.message} {ctx_str}"
        return self.message


class TransportError(VoiceError):
    """Error during HTTP transport.

    Raised when:
    - Network connection failure
    - Deadline expiry (``timeout`` is True)
    - A speech endpoint answers with a non-2xx status other than 401
    """

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        *,
        url: str | None = None,
        status_code: int | None = None,
        timeout: bool = False,
        cause: BaseException | None = None,
    ) -> None:
        ctx = context or ErrorContext(source="transport")
        if url:
            ctx.details["url"] = url
        if status_code:
            ctx.details["status_code"] = status_code
        if timeout:
            ctx.details["timeout"] = True
        super().__init__(message, ctx)
        self.url = url
        self.status_code = status_code
        self.timeout = timeout
        self.__cause__ = cause


class UnauthorizedError(VoiceError):
    """Speech endpoint rejected the access token (HTTP 401).

    The caller is expected to re-authenticate and repeat the call.
    """

    status_code = 401

    def __init__(
        self,
        message: str = "Access token rejected",
        context: ErrorContext | None = None,
        *,
        url: str | None = None,
    ) -> None:
        ctx = context or ErrorContext(source="transport", hint="call authenticate() again")
        ctx.details["status_code"] = self.status_code
        if url:
            ctx.details["url"] = url
        super().__init__(message, ctx)
        self.url = url


class AuthError(VoiceError):
    """Token endpoint refused the grant."""

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        *,
        status_code: int | None = None,
        grant_kind: str | None = None,
    ) -> None:
        ctx = context or ErrorContext(source="auth")
        if status_code:
            ctx.details["status_code"] = status_code
        if grant_kind:
            ctx.details["grant"] = grant_kind
        super().__init__(message, ctx)
        self.status_code = status_code
        self.grant_kind = grant_kind


class MalformedResponseError(VoiceError):
    """Response body could not be decoded into the expected shape."""

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        *,
        body: bytes | None = None,
        cause: BaseException | None = None,
    ) -> None:
        ctx = context or ErrorContext(source="response")
        if body is not None:
            ctx.details["body_preview"] = body[:200].decode("utf-8", errors="replace")
        super().__init__(message, ctx)
        self.body = body
        self.__cause__ = cause


class EmptyResultError(VoiceError):
    """Recognition succeeded but produced no candidate texts."""

    def __init__(
        self,
        message: str = "Fail_speech_voice",
        context: ErrorContext | None = None,
        *,
        query_id: str | None = None,
    ) -> None:
        ctx = context or ErrorContext(source="stt", field_path="result.texts")
        if query_id:
            ctx.details["query_id"] = query_id
        super().__init__(message, ctx)
        self.query_id = query_id


class SinkError(VoiceError):
    """Output sink raised while synthesized audio was being written."""

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        *,
        bytes_written: int = 0,
        cause: BaseException | None = None,
    ) -> None:
        ctx = context or ErrorContext(source="tts")
        ctx.details["bytes_written"] = bytes_written
        super().__init__(message, ctx)
        self.bytes_written = bytes_written
        self.__cause__ = cause
