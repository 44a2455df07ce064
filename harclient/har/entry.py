"""Assembly of HAR 1.2 entries around a response's content record."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING
from urllib.parse import parse_qs, urlparse

from harclient.constants import HTTP_NOT_MODIFIED
from harclient.protocol.har_types import (
    HarCache,
    HarContent,
    HarCookie,
    HarEntry,
    HarHeader,
    HarPostData,
    HarQueryParam,
    HarRequest,
    HarResponse,
    HarTimings,
)

if TYPE_CHECKING:
    from harclient.har.content import HarContentRecord
    from harclient.http.messages import HttpRequest
    from harclient.http.transport import Headers, TransportResponse

logger = logging.getLogger(__name__)


def _first_header(headers: Headers, name: str) -> str:
    lower = name.lower()
    for key, value in headers:
        if key.lower() == lower:
            return value
    return ''


class HarEntryBuilder:
    """Builds HAR entries from a finished exchange.

    The content record is serialized when the entry is built, so the entry
    never changes if the record is modified afterwards.
    """

    def build(
        self,
        request: HttpRequest,
        response: TransportResponse,
        content: HarContentRecord,
        started: datetime | None = None,
    ) -> HarEntry:
        """Build the entry for one request/response pair.

        Args:
            request: The request as issued by the caller. The method, URL and
                body the transport reports take precedence, so a redirect hop
                is archived with the request it actually answered.
            response: What the transport returned.
            content: Content record describing the response body.
            started: When the exchange began; defaults to now (UTC).
        """
        protocol = self.normalize_http_version(response.http_version)
        # Transport-sent headers include defaults such as Host and User-Agent.
        request_headers = response.request_headers or request.headers

        har_timings = self.build_har_timings(response.wait_ms, response.receive_ms)
        total_time = sum(
            value
            for key, value in har_timings.items()
            if key != 'ssl' and value > 0
        )

        entry = HarEntry(
            startedDateTime=(started or datetime.now(tz=timezone.utc)).isoformat(),
            time=round(total_time, 2),
            request=self._build_har_request(request, response, request_headers, protocol),
            response=self._build_har_response(response, content.to_dict(), protocol),
            cache=HarCache(),
            timings=har_timings,
        )
        if response.server_ip:
            entry['serverIPAddress'] = response.server_ip

        logger.debug(
            'HAR: built entry for %s %s status=%s',
            response.method or request.method,
            response.url or request.url,
            response.status_code,
        )
        return entry

    def _build_har_request(
        self,
        request: HttpRequest,
        response: TransportResponse,
        headers: Headers,
        protocol: str,
    ) -> HarRequest:
        url = response.url or request.url
        body = response.request_content if response.url else request.content
        har_request = HarRequest(
            method=response.method or request.method,
            url=url,
            httpVersion=protocol,
            cookies=self.parse_request_cookies(headers),
            headers=self.headers_to_list(headers),
            queryString=self.parse_query_string(url),
            headersSize=-1,
            bodySize=len(body) if body else 0,
        )
        if body:
            har_request['postData'] = HarPostData(
                mimeType=_first_header(headers, 'Content-Type'),
                text=body.decode('utf-8', errors='replace'),
            )
        return har_request

    def _build_har_response(
        self,
        response: TransportResponse,
        content: HarContent,
        protocol: str,
    ) -> HarResponse:
        # For 304 (cache hit), bodySize must be 0 per HAR 1.2
        if response.status_code == HTTP_NOT_MODIFIED:
            body_size = 0
        else:
            body_size = response.wire_size

        return HarResponse(
            status=response.status_code,
            statusText=response.reason,
            httpVersion=protocol,
            cookies=self.parse_response_cookies(response.headers),
            headers=self.headers_to_list(response.headers),
            content=content,
            redirectURL=response.header('Location'),
            headersSize=-1,
            bodySize=body_size,
        )

    @staticmethod
    def build_har_timings(wait_ms: float, receive_ms: float) -> HarTimings:
        """Build HAR timings (in milliseconds) from the measured exchange phases.

        Connection-level phases are not observable through the transport and
        are reported as -1.
        """
        return HarTimings(
            blocked=-1,
            dns=-1,
            connect=-1,
            ssl=-1,
            send=0,
            wait=round(max(wait_ms, 0), 3),
            receive=round(max(receive_ms, 0), 3),
        )

    @staticmethod
    def normalize_http_version(protocol: str) -> str:
        """Normalize a transport protocol string to HAR httpVersion format.

        httpx reports 'HTTP/1.0', 'HTTP/1.1', 'HTTP/2' or 'HTTP/3'. HAR
        viewers expect uppercase HTTP/1.x and lowercase 'h2'/'h3'.
        """
        if not protocol:
            return ''
        lower = protocol.lower()
        if lower in {'h2', 'h3', 'h2c'}:
            return lower
        if lower in {'http/2', 'http/2.0'}:
            return 'h2'
        if lower in {'http/3', 'http/3.0'}:
            return 'h3'
        if lower.startswith('http/'):
            return protocol.upper()
        return ''

    @staticmethod
    def headers_to_list(headers: Headers) -> list[HarHeader]:
        return [HarHeader(name=name, value=value) for name, value in headers]

    @staticmethod
    def parse_query_string(url: str) -> list[HarQueryParam]:
        """Parse URL query string into HAR query param list."""
        parsed = urlparse(url)
        if not parsed.query:
            return []

        params = parse_qs(parsed.query, keep_blank_values=True)
        return [
            HarQueryParam(name=name, value=value)
            for name, values in params.items()
            for value in values
        ]

    @staticmethod
    def parse_request_cookies(headers: Headers) -> list[HarCookie]:
        """Parse request cookies from Cookie headers."""
        cookies: list[HarCookie] = []
        for key, cookie_header in headers:
            if key.lower() != 'cookie':
                continue
            for raw_pair in cookie_header.split(';'):
                stripped = raw_pair.strip()
                if '=' not in stripped:
                    continue
                name, value = stripped.split('=', 1)
                name = name.strip()
                if name:
                    cookies.append(HarCookie(name=name, value=value.strip()))
        return cookies

    @staticmethod
    def parse_response_cookies(headers: Headers) -> list[HarCookie]:
        """Parse response cookies, one per Set-Cookie header."""
        cookies: list[HarCookie] = []
        for key, set_cookie in headers:
            if key.lower() != 'set-cookie':
                continue
            name_value, *attrs = set_cookie.split(';')
            if '=' not in name_value:
                continue
            name, value = name_value.split('=', 1)
            name = name.strip()
            if not name:
                continue
            cookie = HarCookie(name=name, value=value.strip())
            for raw_attr in attrs:
                attr = raw_attr.strip()
                attr_lower = attr.lower()
                if attr_lower == 'httponly':
                    cookie['httpOnly'] = True
                elif attr_lower == 'secure':
                    cookie['secure'] = True
                elif attr_lower.startswith('path='):
                    cookie['path'] = attr.split('=', 1)[1]
                elif attr_lower.startswith('domain='):
                    cookie['domain'] = attr.split('=', 1)[1]
            cookies.append(cookie)
        return cookies
