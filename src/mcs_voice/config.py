"""
Client settings for the MCS voice endpoints.

Values resolve in the order: explicit argument, environment variable, default.
"""

from __future__ import annotations

import os
from contextlib import suppress
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_TOKEN_URL = "https://mcs.mail.ru/auth/oauth/v1/token"
DEFAULT_TTS_URL = "https://voice.mcs.mail.ru/tts"
DEFAULT_ASR_URL = "https://voice.mcs.mail.ru/asr"

DEFAULT_TIMEOUT = 120.0
DEFAULT_CONNECT_TIMEOUT = 10.0


def _trust_env_enabled() -> bool:
    """Use env proxy settings only when explicitly enabled."""
    return os.getenv("MCS_HTTP_TRUST_ENV", "0") == "1"


class VoiceSettings(BaseModel):
    """Endpoint, timeout and proxy configuration."""

    model_config = ConfigDict(frozen=True)

    token_url: str = Field(default=DEFAULT_TOKEN_URL, description="OAuth token endpoint")
    tts_url: str = Field(default=DEFAULT_TTS_URL, description="Synthesis endpoint")
    asr_url: str = Field(default=DEFAULT_ASR_URL, description="Recognition endpoint")
    timeout: float = Field(
        default=DEFAULT_TIMEOUT, description="Per-call deadline in seconds, all endpoints"
    )
    connect_timeout: float = Field(
        default=DEFAULT_CONNECT_TIMEOUT, description="Connection timeout in seconds"
    )
    proxy: str | None = Field(default=None, description="Proxy URL")
    trust_env: bool = Field(default=False, description="Let httpx read proxy env vars")

    @field_validator("timeout", "connect_timeout")
    @classmethod
    def _positive(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("timeout must be positive")
        return value

    @classmethod
    def from_env(cls, **overrides: Any) -> VoiceSettings:
        """Build settings from MCS_* environment variables.

        Args:
            **overrides: Explicit values; ``None`` entries are ignored

        Returns:
            Resolved settings
        """
        values: dict[str, Any] = {}

        for name, env_var in (
            ("token_url", "MCS_TOKEN_URL"),
            ("tts_url", "MCS_TTS_URL"),
            ("asr_url", "MCS_ASR_URL"),
        ):
            env_value = os.getenv(env_var)
            if env_value:
                values[name] = env_value

        env_timeout = os.getenv("MCS_HTTP_TIMEOUT_SECS")
        if env_timeout:
            with suppress(ValueError):
                values["timeout"] = float(env_timeout)

        if _trust_env_enabled():
            values["trust_env"] = True
            proxy = os.getenv("MCS_PROXY_URL")
            if proxy:
                values["proxy"] = proxy

        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
