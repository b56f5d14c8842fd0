"""
Token endpoint response models.
"""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from mcs_voice.errors import MalformedResponseError


class TokenScope(BaseModel):
    """Capabilities granted to the token, as counts (non-zero means granted)."""

    model_config = ConfigDict(extra="allow")

    tts: int = Field(default=0, description="Text-to-speech")
    asr_short: int = Field(default=0, description="Short audio recognition")
    asr_stream: int = Field(default=0, description="Streaming recognition")

    @property
    def has_tts(self) -> bool:
        return self.tts > 0

    @property
    def has_asr_short(self) -> bool:
        return self.asr_short > 0

    @property
    def has_asr_stream(self) -> bool:
        return self.asr_stream > 0


class TokenResponse(BaseModel):
    """Successful token endpoint body.

    ``access_token`` must be present, but may be empty. ``expires_in`` is kept
    as the string the service sent; it is never turned into a duration.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    access_token: str
    refresh_token: str = ""
    expires_in: str = Field(
        default="",
        validation_alias=AliasChoices("expires_in", "expired_in"),
    )
    scope: TokenScope = Field(default_factory=TokenScope)

    @field_validator("expires_in", mode="before")
    @classmethod
    def _stringify_expiry(cls, value: Any) -> Any:
        if value is None:
            return ""
        if isinstance(value, (int, float)):
            return str(value)
        return value

    @field_validator("refresh_token", mode="before")
    @classmethod
    def _null_refresh(cls, value: Any) -> Any:
        return "" if value is None else value

    @classmethod
    def parse(cls, raw: bytes) -> TokenResponse:
        """Decode a token endpoint body.

        Raises:
            MalformedResponseError: Body is not JSON, not an object, or lacks access_token
        """
        try:
            return cls.model_validate_json(raw)
        except ValidationError as e:
            raise MalformedResponseError(
                f"Invalid token response: {e.error_count()} error(s)",
                body=raw,
                cause=e,
            ) from e
