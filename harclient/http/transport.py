"""Transports that perform a single HTTP exchange for the HAR clients.

A transport issues one request and returns a :class:`TransportResponse`
holding the fully read body together with what the archive needs to know
about the wire: the compressed byte count, the sent request headers and the
phase timings. Connections are acquired and released inside ``issue``.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Protocol

import httpx

from harclient.constants import IDENTITY_CONTENT_ENCODINGS
from harclient.exceptions import TransportError
from harclient.options import ClientOptions

logger = logging.getLogger(__name__)

Headers = list[tuple[str, str]]


@dataclass
class TransportResponse:
    """Outcome of one exchange, with the body already decompressed and buffered."""

    status_code: int
    reason: str
    http_version: str
    headers: Headers
    content: bytes
    wire_size: int
    request_headers: Headers = field(default_factory=list)
    wait_ms: float = 0.0
    receive_ms: float = 0.0
    server_ip: str = ''
    method: str = ''
    url: str = ''
    request_content: bytes | None = None
    history: list[TransportResponse] = field(default_factory=list)

    def header(self, name: str, default: str = '') -> str:
        """Return the first value of a header, matched case-insensitively."""
        lower = name.lower()
        for key, value in self.headers:
            if key.lower() == lower:
                return value
        return default

    def header_values(self, name: str) -> list[str]:
        lower = name.lower()
        return [value for key, value in self.headers if key.lower() == lower]

    @property
    def content_type(self) -> str:
        return self.header('Content-Type')

    @property
    def is_compressed(self) -> bool:
        """True when a Content-Encoding was decoded, so the body differs in size from the wire."""
        encoding = self.header('Content-Encoding').strip().lower()
        if encoding in IDENTITY_CONTENT_ENCODINGS:
            return False
        # Encodings httpx does not know, such as compress, are left as sent.
        return self.wire_size != len(self.content)


class Transport(Protocol):
    def issue(
        self,
        method: str,
        url: str,
        headers: Headers,
        content: bytes | None = None,
    ) -> TransportResponse: ...


class AsyncTransport(Protocol):
    async def issue(
        self,
        method: str,
        url: str,
        headers: Headers,
        content: bytes | None = None,
    ) -> TransportResponse: ...


def _decode_headers(headers: httpx.Headers) -> Headers:
    # Keep the server's header name casing for the archive.
    return [
        (key.decode(headers.encoding), value.decode(headers.encoding))
        for key, value in headers.raw
    ]


def _server_ip(response: httpx.Response) -> str:
    stream = response.extensions.get('network_stream')
    if stream is None:
        return ''
    address = stream.get_extra_info('server_addr')
    if not address:
        return ''
    return str(address[0])


def _request_content(request: httpx.Request) -> bytes | None:
    try:
        content = request.content
    except httpx.RequestNotRead:
        # Redirect hops rebuild the request around the original byte stream.
        content = request.read()
    return content or None


def _redirect_hop(response: httpx.Response) -> TransportResponse:
    # Hops were read by httpx while following; their timings are not observable.
    return TransportResponse(
        status_code=response.status_code,
        reason=response.reason_phrase,
        http_version=response.http_version,
        headers=_decode_headers(response.headers),
        content=response.content,
        wire_size=response.num_bytes_downloaded,
        request_headers=_decode_headers(response.request.headers),
        method=response.request.method,
        url=str(response.request.url),
        request_content=_request_content(response.request),
    )


def _to_transport_response(
    response: httpx.Response,
    body: bytes,
    started: float,
    headers_received: float,
    finished: float,
    server_ip: str,
) -> TransportResponse:
    return TransportResponse(
        status_code=response.status_code,
        reason=response.reason_phrase,
        http_version=response.http_version,
        headers=_decode_headers(response.headers),
        content=body,
        wire_size=response.num_bytes_downloaded,
        request_headers=_decode_headers(response.request.headers),
        wait_ms=round((headers_received - started) * 1000, 3),
        receive_ms=round((finished - headers_received) * 1000, 3),
        server_ip=server_ip,
        method=response.request.method,
        url=str(response.request.url),
        request_content=_request_content(response.request),
        history=[_redirect_hop(hop) for hop in response.history],
    )


def _client_kwargs(options: ClientOptions) -> dict:
    return {
        'timeout': httpx.Timeout(options.timeout),
        'verify': options.verify_ssl,
        'follow_redirects': options.follow_redirects,
    }


class HttpxTransport:
    """Synchronous transport backed by an ``httpx.Client``."""

    def __init__(self, options: ClientOptions | None = None, client: httpx.Client | None = None):
        self._options = options or ClientOptions()
        self._client = client or httpx.Client(**_client_kwargs(self._options))

    def issue(
        self,
        method: str,
        url: str,
        headers: Headers,
        content: bytes | None = None,
    ) -> TransportResponse:
        """Perform the exchange and read the whole body before returning.

        Raises:
            TransportError: If the connection fails, times out or the
                response is malformed.
        """
        started = time.perf_counter()
        try:
            with self._client.stream(method, url, headers=headers, content=content) as response:
                headers_received = time.perf_counter()
                server_ip = _server_ip(response)
                body = response.read()
                finished = time.perf_counter()
        except httpx.RequestError as exc:
            logger.debug('Transport failure for %s %s: %r', method, url, exc)
            raise TransportError(f'{method} {url} failed: {exc}') from exc

        return _to_transport_response(
            response, body, started, headers_received, finished, server_ip
        )

    def close(self) -> None:
        if not self._client.is_closed:
            self._client.close()


class AsyncHttpxTransport:
    """Asynchronous transport backed by an ``httpx.AsyncClient``."""

    def __init__(
        self,
        options: ClientOptions | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self._options = options or ClientOptions()
        self._client = client or httpx.AsyncClient(**_client_kwargs(self._options))

    async def issue(
        self,
        method: str,
        url: str,
        headers: Headers,
        content: bytes | None = None,
    ) -> TransportResponse:
        started = time.perf_counter()
        try:
            async with self._client.stream(
                method, url, headers=headers, content=content
            ) as response:
                headers_received = time.perf_counter()
                server_ip = _server_ip(response)
                body = await response.aread()
                finished = time.perf_counter()
        except httpx.RequestError as exc:
            logger.debug('Transport failure for %s %s: %r', method, url, exc)
            raise TransportError(f'{method} {url} failed: {exc}') from exc

        return _to_transport_response(
            response, body, started, headers_received, finished, server_ip
        )

    async def aclose(self) -> None:
        if not self._client.is_closed:
            await self._client.aclose()
