"""Tests for the synthesis path."""

from collections.abc import AsyncIterator

import httpx
import pytest

from mcs_voice.auth import CredentialState
from mcs_voice.config import VoiceSettings
from mcs_voice.errors import SinkError, TransportError, UnauthorizedError
from mcs_voice.transport import HttpTransport
from mcs_voice.tts import TtsClient, TtsOptions, build_synthesis_request
from tests.helpers import TTS_URL, RecordingSink

AUDIO_CHUNKS = [b"OggS\x00\x02", b"opus-frame-1", b"opus-frame-2", b"opus-frame-3"]


def chunked_audio_transport(status_code: int = 200) -> httpx.MockTransport:
    """Mock transport answering with the audio split over several chunks."""

    async def chunks() -> AsyncIterator[bytes]:
        for chunk in AUDIO_CHUNKS:
            yield chunk

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            status_code,
            headers={"Content-Type": "audio/ogg"},
            content=chunks(),
        )

    return httpx.MockTransport(handler)


def make_tts(
    credentials: CredentialState,
    settings: VoiceSettings,
    client: httpx.AsyncClient | None = None,
) -> TtsClient:
    return TtsClient(credentials, HttpTransport(settings, client=client), settings)


class TestSynthesisRequest:
    """Tests for build_synthesis_request."""

    def test_default_parameters(self, settings: VoiceSettings) -> None:
        request = build_synthesis_request("tok-1", "Привет, мир", settings)
        assert request.method == "GET"
        assert str(request.url).split("?", 1)[0] == TTS_URL
        params = request.url.params
        assert params["text"] == "Привет, мир"
        assert params["model_name"] == "maria"
        assert params["encoder"] == "opus"
        assert params["tempo"] == "0.9"
        assert request.headers["Authorization"] == "Bearer tok-1"
        assert request.headers["Content-Type"] == "audio/ogg; codecs=opus"

    def test_custom_options(self, settings: VoiceSettings) -> None:
        options = TtsOptions(model="pavel", tempo=1.25)
        request = build_synthesis_request("tok-1", "hi", settings, options)
        assert request.url.params["model_name"] == "pavel"
        assert request.url.params["tempo"] == "1.25"


class TestSynthesize:
    """Tests for TtsClient.synthesize."""

    @pytest.mark.asyncio
    async def test_writes_body_and_closes_sink(
        self, httpx_mock, credentials: CredentialState, settings: VoiceSettings
    ) -> None:
        credentials.access_token = "tok-1"
        httpx_mock.add_response(method="GET", content=b"".join(AUDIO_CHUNKS))
        sink = RecordingSink()

        written = await make_tts(credentials, settings).synthesize("hello", sink)

        assert written == len(b"".join(AUDIO_CHUNKS))
        assert sink.data == b"".join(AUDIO_CHUNKS)
        assert sink.closed
        request = httpx_mock.get_request()
        assert request.headers["Authorization"] == "Bearer tok-1"
        assert request.url.params["text"] == "hello"

    @pytest.mark.asyncio
    async def test_chunks_written_in_order(
        self, credentials: CredentialState, settings: VoiceSettings
    ) -> None:
        async with httpx.AsyncClient(transport=chunked_audio_transport()) as client:
            sink = RecordingSink()
            written = await make_tts(credentials, settings, client).synthesize("hello", sink)

        assert sink.chunks == AUDIO_CHUNKS
        assert written == sum(len(c) for c in AUDIO_CHUNKS)
        assert sink.closed

    @pytest.mark.asyncio
    async def test_sink_failure_midway_closes_sink(
        self, credentials: CredentialState, settings: VoiceSettings
    ) -> None:
        async with httpx.AsyncClient(transport=chunked_audio_transport()) as client:
            sink = RecordingSink(fail_on=3)
            with pytest.raises(SinkError) as exc_info:
                await make_tts(credentials, settings, client).synthesize("hello", sink)

        assert sink.closed
        assert sink.chunks == AUDIO_CHUNKS[:2]
        assert exc_info.value.bytes_written == len(AUDIO_CHUNKS[0]) + len(AUDIO_CHUNKS[1])
        assert isinstance(exc_info.value.__cause__, OSError)

    @pytest.mark.asyncio
    async def test_401_raises_unauthorized(
        self, httpx_mock, credentials: CredentialState, settings: VoiceSettings
    ) -> None:
        httpx_mock.add_response(method="GET", status_code=401, json={"error": "expired"})
        sink = RecordingSink()

        with pytest.raises(UnauthorizedError):
            await make_tts(credentials, settings).synthesize("hello", sink)

        assert sink.data == b""
        assert sink.closed

    @pytest.mark.asyncio
    async def test_server_error_raises_transport_error(
        self, httpx_mock, credentials: CredentialState, settings: VoiceSettings
    ) -> None:
        httpx_mock.add_response(method="GET", status_code=503, content=b"busy")
        sink = RecordingSink()

        with pytest.raises(TransportError) as exc_info:
            await make_tts(credentials, settings).synthesize("hello", sink)

        assert exc_info.value.status_code == 503
        assert exc_info.value.timeout is False
        assert exc_info.value.url == TTS_URL
        assert sink.data == b""
        assert sink.closed

    @pytest.mark.asyncio
    async def test_timeout_raises_transport_error(
        self, httpx_mock, credentials: CredentialState, settings: VoiceSettings
    ) -> None:
        httpx_mock.add_exception(httpx.ReadTimeout("timed out"))
        sink = RecordingSink()

        with pytest.raises(TransportError) as exc_info:
            await make_tts(credentials, settings).synthesize("hello", sink)

        assert exc_info.value.timeout is True
        assert sink.closed
