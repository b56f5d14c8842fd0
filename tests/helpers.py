"""Shared test helpers for mcs-voice tests."""

from __future__ import annotations

import json
from typing import Any

from mcs_voice.config import DEFAULT_ASR_URL, DEFAULT_TOKEN_URL, DEFAULT_TTS_URL

TOKEN_URL = DEFAULT_TOKEN_URL
TTS_URL = DEFAULT_TTS_URL
ASR_URL = DEFAULT_ASR_URL


def token_body(
    access_token: str = "access-1",
    refresh_token: str = "refresh-1",
    **extra: Any,
) -> dict[str, Any]:
    """Create a token endpoint body."""
    body: dict[str, Any] = {
        "access_token": access_token,
        "refresh_token": refresh_token,
        "expired_in": "3600",
        "scope": {"tts": 1, "asr_short": 1, "asr_stream": 0},
    }
    body.update(extra)
    return body


def recognition_body(*texts: tuple[str, str], qid: str = "q-1") -> bytes:
    """Create a recognition body from (text, punctuated_text) pairs."""
    return json.dumps(
        {
            "qid": qid,
            "result": {
                "texts": [
                    {"text": t, "confidence": 0.93, "punctuated_text": p}
                    for t, p in texts
                ],
                "phrase_id": "p-1",
            },
        }
    ).encode("utf-8")


class RecordingSink:
    """Binary sink that records writes and close calls.

    ``fail_on`` makes the N-th write (1-based) raise OSError.
    """

    def __init__(self, fail_on: int | None = None) -> None:
        self.chunks: list[bytes] = []
        self.closed = False
        self._fail_on = fail_on

    def write(self, data: bytes) -> int:
        if self._fail_on is not None and len(self.chunks) + 1 == self._fail_on:
            raise OSError("disk full")
        self.chunks.append(data)
        return len(data)

    def close(self) -> None:
        self.closed = True

    @property
    def data(self) -> bytes:
        return b"".join(self.chunks)
