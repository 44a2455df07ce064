"""HTTP clients that archive every exchange as a HAR entry.

Content capture is off by default. When it is enabled, each response body
is buffered, classified and stored in the entry's ``content`` record as
decoded text or base64; when it is disabled the record still carries size,
compression and media type, but never ``text`` or ``encoding``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from datetime import datetime, timezone
from types import TracebackType
from typing import Union

from harclient.har.classifier import ContentClassifier
from harclient.har.content import HarContentRecord
from harclient.har.entry import HarEntryBuilder
from harclient.har.log import HarLog
from harclient.http.messages import HttpRequest, HttpResponse
from harclient.http.transport import (
    AsyncHttpxTransport,
    AsyncTransport,
    HttpxTransport,
    Transport,
    TransportResponse,
)
from harclient.options import ClientOptions
from harclient.protocol.har_types import HarEntry

logger = logging.getLogger(__name__)

HeadersArg = Union[Mapping[str, str], Iterable[tuple[str, str]], None]


class _HarClientBase:
    """Request building, the capture toggle and response processing shared by both clients."""

    def __init__(
        self,
        options: ClientOptions | None = None,
        har_log: HarLog | None = None,
        classifier: ContentClassifier | None = None,
    ):
        self._options = options or ClientOptions()
        self._capture_content = self._options.capture_content
        self._har_log = har_log
        self._classifier = classifier or ContentClassifier(self._options.default_charset)
        self._entry_builder = HarEntryBuilder()

    @property
    def capture_content(self) -> bool:
        return self._capture_content

    @property
    def har_log(self) -> HarLog | None:
        return self._har_log

    def set_capture_content(self, enabled: bool) -> None:
        """Turn response body capture on or off for exchanges resolved from now on."""
        self._capture_content = bool(enabled)
        logger.debug('Content capture %s', 'enabled' if enabled else 'disabled')

    def new_request(
        self,
        method: str,
        url: str,
        headers: HeadersArg = None,
        content: bytes | None = None,
    ) -> HttpRequest:
        """Build a request descriptor. No I/O happens until it is executed.

        Raises:
            InvalidRequest: If the method is empty or the URL is not http(s).
        """
        if isinstance(headers, Mapping):
            header_list = list(headers.items())
        else:
            header_list = list(headers or [])

        request = HttpRequest(method=method, url=url, headers=header_list, content=content)
        if not request.header('User-Agent'):
            request.add_header('User-Agent', self._options.user_agent)
        return request

    def new_get(self, url: str, headers: HeadersArg = None) -> HttpRequest:
        return self.new_request('GET', url, headers)

    def new_post(
        self,
        url: str,
        content: bytes,
        content_type: str = 'application/octet-stream',
        headers: HeadersArg = None,
    ) -> HttpRequest:
        request = self.new_request('POST', url, headers, content)
        if not request.header('Content-Type'):
            request.add_header('Content-Type', content_type)
        return request

    def _process_response(
        self,
        request: HttpRequest,
        response: TransportResponse,
        started: datetime,
    ) -> HttpResponse:
        capture = self._capture_content
        mime_type = response.content_type

        # A followed redirect chain is archived as one entry per hop.
        redirect_entries = [
            self._archive(request, hop, started, capture)[1] for hop in response.history
        ]
        record, entry = self._archive(request, response, started, capture)

        if record.is_captured and not record.is_base64:
            body = record.text
        else:
            body = self._classifier.decode_text(response.content, mime_type)

        logger.debug(
            'Executed %s %s -> %s (%d bytes, capture=%s)',
            request.method,
            request.url,
            response.status_code,
            record.size,
            capture,
        )
        return HttpResponse(
            request=request,
            status_code=response.status_code,
            reason=response.reason,
            headers=response.headers,
            content=response.content,
            body=body,
            content_record=record,
            entry=entry,
            redirect_entries=redirect_entries,
        )

    def _archive(
        self,
        request: HttpRequest,
        response: TransportResponse,
        started: datetime,
        capture: bool,
    ) -> tuple[HarContentRecord, HarEntry]:
        mime_type = response.content_type
        wire_size = response.wire_size if response.is_compressed else None

        if capture:
            record = self._classifier.classify(response.content, mime_type, wire_size)
        else:
            record = self._classifier.describe(response.content, mime_type, wire_size)

        entry = self._entry_builder.build(request, response, record, started)
        if self._har_log is not None:
            self._har_log.add(entry)
        return record, entry


class HarHttpClient(_HarClientBase):
    """Synchronous HTTP client producing a HAR entry per exchange.

    Example:
        with HarHttpClient() as client:
            client.set_capture_content(True)
            response = client.execute(client.new_get('https://example.com/'))
            response.entry['response']['content']['text']
    """

    def __init__(
        self,
        options: ClientOptions | None = None,
        transport: Transport | None = None,
        har_log: HarLog | None = None,
        classifier: ContentClassifier | None = None,
    ):
        super().__init__(options, har_log, classifier)
        self._owns_transport = transport is None
        self._transport: Transport = transport or HttpxTransport(self._options)

    def execute(self, request: HttpRequest) -> HttpResponse:
        """Perform the exchange and return once the body is fully read and archived.

        Raises:
            TransportError: If the exchange fails. Nothing is added to the log.
        """
        started = datetime.now(tz=timezone.utc)
        response = self._transport.issue(
            request.method, request.url, request.headers, request.content
        )
        return self._process_response(request, response, started)

    def get(self, url: str, headers: HeadersArg = None) -> HttpResponse:
        return self.execute(self.new_get(url, headers))

    def close(self) -> None:
        if self._owns_transport and isinstance(self._transport, HttpxTransport):
            self._transport.close()

    def __enter__(self) -> HarHttpClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()


class AsyncHarHttpClient(_HarClientBase):
    """asyncio counterpart of :class:`HarHttpClient` with the same capture contract."""

    def __init__(
        self,
        options: ClientOptions | None = None,
        transport: AsyncTransport | None = None,
        har_log: HarLog | None = None,
        classifier: ContentClassifier | None = None,
    ):
        super().__init__(options, har_log, classifier)
        self._owns_transport = transport is None
        self._transport: AsyncTransport = transport or AsyncHttpxTransport(self._options)

    async def execute(self, request: HttpRequest) -> HttpResponse:
        started = datetime.now(tz=timezone.utc)
        response = await self._transport.issue(
            request.method, request.url, request.headers, request.content
        )
        return self._process_response(request, response, started)

    async def get(self, url: str, headers: HeadersArg = None) -> HttpResponse:
        return await self.execute(self.new_get(url, headers))

    async def aclose(self) -> None:
        if self._owns_transport and isinstance(self._transport, AsyncHttpxTransport):
            await self._transport.aclose()

    async def __aenter__(self) -> AsyncHarHttpClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()
