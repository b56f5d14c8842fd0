"""Root pytest fixtures for mcs-voice tests."""

from __future__ import annotations

import pytest

from mcs_voice.auth import CredentialState
from mcs_voice.config import VoiceSettings

_MCS_ENV = (
    "MCS_CLIENT_ID",
    "MCS_CLIENT_SECRET",
    "MCS_TOKEN_URL",
    "MCS_TTS_URL",
    "MCS_ASR_URL",
    "MCS_HTTP_TIMEOUT_SECS",
    "MCS_HTTP_TRUST_ENV",
    "MCS_PROXY_URL",
)


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep MCS_* variables from the host out of the tests."""
    for name in _MCS_ENV:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def settings() -> VoiceSettings:
    return VoiceSettings(timeout=5.0)


@pytest.fixture
def credentials() -> CredentialState:
    return CredentialState("client-id", "client-secret")
