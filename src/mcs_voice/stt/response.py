"""
Recognition response parsing.

The service answers with::

    {"qid": "...", "result": {"texts": [{"text": "...", "confidence": 0.9,
     "punctuated_text": "..."}], "phrase_id": "..."}}

Only the first candidate text is ever consulted.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from mcs_voice.errors import EmptyResultError, MalformedResponseError
from mcs_voice.telemetry import get_logger

logger = get_logger("mcs_voice.stt")


class RecognizedText(BaseModel):
    """One recognition candidate."""

    model_config = ConfigDict(extra="allow")

    text: str = ""
    confidence: float = 0.0
    punctuated_text: str = ""

    @field_validator("text", "punctuated_text", mode="before")
    @classmethod
    def _null_text(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("confidence", mode="before")
    @classmethod
    def _null_confidence(cls, value: Any) -> Any:
        return 0.0 if value is None else value


class RecognitionResult(BaseModel):
    """Recognition response flattened from its wire envelope."""

    model_config = ConfigDict(extra="ignore")

    query_id: str = Field(default="", description="Correlation id (wire name 'qid')")
    phrase_id: str = ""
    texts: list[RecognizedText] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _flatten_envelope(cls, data: Any) -> Any:
        if not isinstance(data, dict) or not ({"qid", "result"} & data.keys()):
            return data
        result = data.get("result") or {}
        if not isinstance(result, dict):
            raise ValueError("'result' must be an object")
        return {
            "query_id": data.get("qid") or "",
            "phrase_id": result.get("phrase_id") or "",
            "texts": result.get("texts") or [],
        }

    @property
    def best(self) -> RecognizedText | None:
        """First candidate, or None when there are none."""
        return self.texts[0] if self.texts else None


def parse_recognition(raw: bytes) -> RecognitionResult:
    """Decode a recognition response body.

    Raises:
        MalformedResponseError: Body is not JSON or does not match the envelope
    """
    try:
        return RecognitionResult.model_validate_json(raw)
    except ValidationError as e:
        raise MalformedResponseError(
            f"Invalid recognition response: {e.error_count()} error(s)",
            body=raw,
            cause=e,
        ) from e


def extract_transcript(result: RecognitionResult) -> str:
    """Return the caller-visible transcript of a recognition result.

    When the first candidate has an empty ``punctuated_text`` the transcript
    is empty and no error is raised, even if its plain ``text`` is not.

    Raises:
        EmptyResultError: No candidate texts at all
    """
    best = result.best
    if best is None:
        raise EmptyResultError(query_id=result.query_id or None)
    if not best.punctuated_text:
        logger.warning(
            "Recognition returned no punctuated text",
            query_id=result.query_id,
            has_plain_text=bool(best.text),
        )
    return best.punctuated_text
