"""Tests for VoiceClient and VoiceClientBuilder."""

import json
from pathlib import Path
from unittest.mock import patch

import httpx
import pytest

from mcs_voice import VoiceClient, VoiceClientBuilder
from mcs_voice.errors import EmptyResultError, UnauthorizedError
from mcs_voice.telemetry import LogContext, get_log_context, reset_log_context, set_log_context
from tests.helpers import ASR_URL, TOKEN_URL, TTS_URL, recognition_body, token_body

AUDIO = b"OggS\x00\x02opus-audio"


@pytest.fixture
def no_keyring():
    with patch("mcs_voice.auth.credentials._try_keyring", return_value=None):
        yield


class TestCreate:
    """Tests for VoiceClient.create."""

    @pytest.mark.asyncio
    async def test_explicit_credentials(self) -> None:
        client = await VoiceClient.create("my-app", "s3cret", timeout=30)

        assert client.credentials.client_id == "my-app"
        assert client.credentials.client_secret == "s3cret"
        assert client.credentials.access_token == ""
        assert client.settings.timeout == 30
        await client.close()

    @pytest.mark.asyncio
    async def test_default_timeout(self) -> None:
        client = await VoiceClient.create("my-app", "s3cret")
        assert client.settings.timeout == 120.0
        await client.close()

    @pytest.mark.asyncio
    async def test_credentials_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MCS_CLIENT_ID", "env-app")
        monkeypatch.setenv("MCS_CLIENT_SECRET", "env-secret")
        monkeypatch.setenv("MCS_TTS_URL", "https://tts.example.test/tts")

        client = await VoiceClient.create()

        assert client.credentials.client_id == "env-app"
        assert client.credentials.client_secret == "env-secret"
        assert client.settings.tts_url == "https://tts.example.test/tts"
        await client.close()

    @pytest.mark.asyncio
    async def test_missing_client_id(self, no_keyring) -> None:
        with pytest.raises(ValueError, match="Client id"):
            await VoiceClient.create(client_secret="s3cret")

    @pytest.mark.asyncio
    async def test_missing_secret(self, no_keyring) -> None:
        with pytest.raises(ValueError, match="Client secret"):
            await VoiceClient.create("my-app")


class TestBuilder:
    """Tests for VoiceClientBuilder."""

    @pytest.mark.asyncio
    async def test_build_with_overrides(self) -> None:
        client = await (
            VoiceClient.builder()
            .client_id("my-app")
            .client_secret("s3cret")
            .timeout(15)
            .asr_url("https://asr.example.test/asr")
            .build()
        )

        assert client.settings.timeout == 15
        assert client.settings.asr_url == "https://asr.example.test/asr"
        assert client.settings.tts_url == TTS_URL
        await client.close()

    @pytest.mark.asyncio
    async def test_builder_uses_given_http_client(self, httpx_mock) -> None:
        httpx_mock.add_response(url=TOKEN_URL, json=token_body())
        async with httpx.AsyncClient() as http_client:
            client = await (
                VoiceClientBuilder()
                .client_id("my-app")
                .client_secret("s3cret")
                .http_client(http_client)
                .build()
            )
            async with client:
                await client.authenticate()
            assert not http_client.is_closed

        assert client.credentials.access_token == "access-1"


class TestEndToEnd:
    """Authenticate, synthesize and recognize through one client."""

    @pytest.mark.asyncio
    async def test_text_to_voice_writes_file(self, httpx_mock, tmp_path: Path) -> None:
        httpx_mock.add_response(url=TOKEN_URL, json=token_body())
        httpx_mock.add_response(method="GET", content=AUDIO)

        async with await VoiceClient.create("my-app", "s3cret") as client:
            await client.authenticate()
            path = await client.text_to_voice("Привет", "greeting", directory=tmp_path)

        assert path == tmp_path / "greeting.oga"
        assert path.read_bytes() == AUDIO
        tts_request = httpx_mock.get_requests()[1]
        assert tts_request.headers["Authorization"] == "Bearer access-1"
        assert tts_request.url.params["text"] == "Привет"

    @pytest.mark.asyncio
    async def test_text_to_voice_missing_directory(self, tmp_path: Path) -> None:
        async with await VoiceClient.create("my-app", "s3cret") as client:
            with pytest.raises(FileNotFoundError):
                await client.text_to_voice("hi", "x", directory=tmp_path / "absent")

    @pytest.mark.asyncio
    async def test_voice_to_text_reads_file(self, httpx_mock, tmp_path: Path) -> None:
        audio_file = tmp_path / "in.oga"
        audio_file.write_bytes(AUDIO)
        httpx_mock.add_response(url=ASR_URL, content=recognition_body(("hi", "Hi.")))

        async with await VoiceClient.create("my-app", "s3cret") as client:
            client.credentials.access_token = "tok-1"
            transcript = await client.voice_to_text(audio_file)

        assert transcript == "Hi."
        assert httpx_mock.get_request().content == AUDIO

    @pytest.mark.asyncio
    async def test_caller_log_context_survives_call(self, httpx_mock) -> None:
        seen: list[LogContext] = []

        def capture(request: httpx.Request) -> httpx.Response:
            seen.append(get_log_context())
            return httpx.Response(200, content=recognition_body(("hi", "Hi.")))

        httpx_mock.add_callback(capture, url=ASR_URL)
        token = set_log_context(LogContext(request_id="caller-req"))
        try:
            async with await VoiceClient.create("my-app", "s3cret") as client:
                transcript = await client.recognize(AUDIO)
            assert get_log_context().request_id == "caller-req"
        finally:
            reset_log_context(token)

        assert transcript == "Hi."
        assert seen[0].operation == "recognize"
        assert seen[0].client_id == "my-app"
        assert seen[0].request_id != "caller-req"

    @pytest.mark.asyncio
    async def test_recognize_empty_result(self, httpx_mock) -> None:
        httpx_mock.add_response(url=ASR_URL, json={"result": {"texts": []}})

        async with await VoiceClient.create("my-app", "s3cret") as client:
            with pytest.raises(EmptyResultError):
                await client.recognize(AUDIO)

    @pytest.mark.asyncio
    async def test_reauthenticate_after_unauthorized(self, httpx_mock) -> None:
        """Caller recovers from an expired token by authenticating again."""
        httpx_mock.add_response(url=TOKEN_URL, json=token_body())
        httpx_mock.add_response(url=ASR_URL, status_code=401)
        httpx_mock.add_response(
            url=TOKEN_URL,
            json=token_body(access_token="access-2", refresh_token="refresh-2"),
        )
        httpx_mock.add_response(url=ASR_URL, content=recognition_body(("hi", "Hi.")))

        async with await VoiceClient.create("my-app", "s3cret") as client:
            await client.authenticate()
            with pytest.raises(UnauthorizedError):
                await client.recognize(AUDIO)
            await client.authenticate()
            transcript = await client.recognize(AUDIO)

        assert transcript == "Hi."
        requests = httpx_mock.get_requests()
        assert [r.url.path for r in requests] == [
            "/auth/oauth/v1/token",
            "/asr",
            "/auth/oauth/v1/token",
            "/asr",
        ]
        assert json.loads(requests[2].content)["refresh_token"] == "refresh-1"
        assert requests[3].headers["Authorization"] == "Bearer access-2"
