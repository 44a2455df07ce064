from __future__ import annotations

from dataclasses import dataclass, field
from urllib.parse import urlparse

from harclient.exceptions import InvalidRequest
from harclient.har.content import HarContentRecord
from harclient.protocol.har_types import HarEntry

_SUPPORTED_SCHEMES = frozenset({'http', 'https'})


@dataclass
class HttpRequest:
    """Describes a request to execute. Building one performs no I/O."""

    method: str
    url: str
    headers: list[tuple[str, str]] = field(default_factory=list)
    content: bytes | None = None

    def __post_init__(self):
        if not self.method or not self.method.strip():
            raise InvalidRequest('Request method must not be empty')
        self.method = self.method.strip().upper()

        try:
            scheme = urlparse(self.url).scheme.lower()
        except ValueError as exc:
            raise InvalidRequest(f'Malformed URL {self.url!r}') from exc
        if scheme not in _SUPPORTED_SCHEMES:
            raise InvalidRequest(f'Unsupported URL scheme in {self.url!r}')

    def add_header(self, name: str, value: str) -> None:
        self.headers.append((name, value))

    def header(self, name: str, default: str = '') -> str:
        lower = name.lower()
        for key, value in self.headers:
            if key.lower() == lower:
                return value
        return default


@dataclass
class HttpResponse:
    """Result of an executed request: the raw body plus its HAR entry.

    ``content`` is the body after transport decompression. ``body`` is the
    same bytes decoded as text when the media type is textual, None otherwise.
    When redirects were followed, ``redirect_entries`` holds the entries of
    the intermediate hops in order and ``entry`` describes the final one.
    """

    request: HttpRequest
    status_code: int
    reason: str
    headers: list[tuple[str, str]]
    content: bytes
    body: str | None
    content_record: HarContentRecord
    entry: HarEntry
    redirect_entries: list[HarEntry] = field(default_factory=list)

    @property
    def content_type(self) -> str:
        lower = 'content-type'
        for key, value in self.headers:
            if key.lower() == lower:
                return value
        return ''

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300
