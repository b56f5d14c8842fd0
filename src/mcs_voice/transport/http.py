"""HTTP transport using httpx for async requests.

Provides:
- One lazily created AsyncClient per transport
- A per-call deadline covering connect, headers and body
- Mapping of httpx failures onto TransportError
- Streaming of response bodies into a writable sink
"""

from __future__ import annotations

import asyncio
import importlib.util
from typing import TYPE_CHECKING, Any, Protocol

import httpx

from mcs_voice.errors import SinkError, TransportError, error_for_response
from mcs_voice.telemetry import get_logger

if TYPE_CHECKING:
    from collections.abc import Awaitable

    from mcs_voice.config import VoiceSettings

logger = get_logger("mcs_voice.transport")

_UA_VERSION: str | None = None


class BinarySink(Protocol):
    """Anything audio bytes can be written into."""

    def write(self, data: bytes, /) -> Any: ...

    def close(self) -> None: ...


def _http2_enabled() -> bool:
    """Enable HTTP/2 only when optional dependency is present."""
    return importlib.util.find_spec("h2") is not None


def _get_ua_version() -> str:
    """Get package version for User-Agent (cached)."""
    global _UA_VERSION
    if _UA_VERSION is None:
        from importlib.metadata import PackageNotFoundError, version

        try:
            _UA_VERSION = version("mcs-voice")
        except PackageNotFoundError:
            _UA_VERSION = "0.1.0"
    return _UA_VERSION


def _strip_query(url: httpx.URL) -> str:
    """URL without its query string, for logs and errors."""
    return str(url).split("?", 1)[0]


class HttpTransport:
    """HTTP transport for the token, synthesis and recognition endpoints.

    Example:
        >>> transport = HttpTransport(VoiceSettings())
        >>> response = await transport.send(request)
        >>> await transport.close()
    """

    def __init__(
        self,
        settings: VoiceSettings,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize HTTP transport.

        Args:
            settings: Endpoint and timeout configuration
            client: Pre-built AsyncClient; the transport will not close it
        """
        self._settings = settings
        self._client = client
        self._owns_client = client is None

    @property
    def timeout(self) -> float:
        return self._settings.timeout

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            timeout = httpx.Timeout(
                self._settings.timeout,
                connect=min(self._settings.connect_timeout, self._settings.timeout),
            )
            self._client = httpx.AsyncClient(
                timeout=timeout,
                proxy=self._settings.proxy,
                http2=_http2_enabled(),
                trust_env=self._settings.trust_env,
                headers={"User-Agent": f"mcs-voice/{_get_ua_version()}"},
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
        self._client = None

    def _prepare(self, request: httpx.Request) -> httpx.Request:
        """Apply client defaults that ``AsyncClient.send`` skips for prebuilt requests."""
        client = self._get_client()
        request.extensions.setdefault("timeout", client.timeout.as_dict())
        for name, value in client.headers.items():
            request.headers.setdefault(name, value)
        return request

    async def _with_deadline(self, call: Awaitable[Any], url: str) -> Any:
        try:
            return await asyncio.wait_for(call, timeout=self._settings.timeout)
        except asyncio.TimeoutError as e:
            raise TransportError(
                f"Deadline of {self._settings.timeout:g}s exceeded",
                url=url,
                timeout=True,
                cause=e,
            ) from e
        except httpx.TimeoutException as e:
            raise TransportError(
                f"Request timed out: {e}",
                url=url,
                timeout=True,
                cause=e,
            ) from e
        except httpx.ConnectError as e:
            raise TransportError(
                f"Connection failed: {e}",
                url=url,
                cause=e,
            ) from e
        except httpx.HTTPError as e:
            raise TransportError(
                f"HTTP error: {e}",
                url=url,
                cause=e,
            ) from e

    async def send(self, request: httpx.Request) -> httpx.Response:
        """Send a request and read the whole body.

        The status code is not checked; callers classify it.

        Raises:
            TransportError: On network failure or deadline expiry
        """
        url = _strip_query(request.url)
        logger.debug("Sending request", method=request.method, url=url)
        response: httpx.Response = await self._with_deadline(
            self._get_client().send(self._prepare(request)), url
        )
        logger.debug(
            "Response received",
            status=response.status_code,
            content_type=response.headers.get("content-type"),
            size=len(response.content),
        )
        return response

    async def stream_to(self, request: httpx.Request, sink: BinarySink) -> int:
        """Send a request and copy the response body into ``sink``.

        Nothing is written for non-2xx responses. The sink is left open.

        Returns:
            Number of bytes written

        Raises:
            TransportError: On network failure, deadline expiry or non-2xx status
            UnauthorizedError: On 401
            SinkError: When the sink raises while writing
        """
        url = _strip_query(request.url)
        return await self._with_deadline(self._stream_to(request, sink), url)

    async def _stream_to(self, request: httpx.Request, sink: BinarySink) -> int:
        response = await self._get_client().send(self._prepare(request), stream=True)
        try:
            logger.info(
                "Voice file response",
                status=response.status_code,
                content_type=response.headers.get("content-type"),
                content_length=response.headers.get("content-length"),
            )
            if not response.is_success:
                await response.aread()
                raise error_for_response(response)

            written = 0
            async for chunk in response.aiter_bytes():
                try:
                    sink.write(chunk)
                except (OSError, ValueError) as e:
                    raise SinkError(
                        f"Output sink failed after {written} bytes: {e}",
                        bytes_written=written,
                        cause=e,
                    ) from e
                written += len(chunk)
            return written
        finally:
            await response.aclose()
