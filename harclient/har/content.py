"""The HAR ``content`` record describing a response body."""

from __future__ import annotations

import base64
from dataclasses import dataclass

from harclient.constants import BASE64_ENCODING, DEFAULT_CHARSET
from harclient.protocol.har_types import HarContent


@dataclass
class HarContentRecord:
    """Size, compression savings, media type and optionally captured text of a body.

    ``text`` holds either decoded character data or, when ``encoding`` is
    ``'base64'``, a base64 rendering of the raw bytes. Both stay ``None``
    unless content capture ran for the exchange.
    """

    size: int = 0
    compression: int | None = None
    mime_type: str = ''
    text: str | None = None
    encoding: str | None = None

    @property
    def is_captured(self) -> bool:
        return self.text is not None

    @property
    def is_base64(self) -> bool:
        return self.text is not None and self.encoding == BASE64_ENCODING

    def to_dict(self) -> HarContent:
        """Serialize to a HAR ``content`` object.

        ``size`` and ``mimeType`` are always present. ``compression``,
        ``text`` and ``encoding`` are omitted when absent, and ``encoding``
        is never emitted without ``text``.
        """
        content = HarContent(size=self.size, mimeType=self.mime_type or '')
        if self.compression is not None:
            content['compression'] = self.compression
        if self.text is not None:
            content['text'] = self.text
            if self.encoding is not None:
                content['encoding'] = self.encoding
        return content

    @classmethod
    def from_dict(cls, content: HarContent) -> HarContentRecord:
        """Build a record from a serialized HAR ``content`` object."""
        text = content.get('text')
        return cls(
            size=content.get('size', 0),
            compression=content.get('compression'),
            mime_type=content.get('mimeType') or '',
            text=text,
            encoding=content.get('encoding') if text is not None else None,
        )

    def decoded_content(self, charset: str = DEFAULT_CHARSET) -> bytes | None:
        """Return the body bytes this record describes, or None if nothing was captured.

        Args:
            charset: Charset used to re-encode decoded text. Should match the
                charset the text was decoded with.
        """
        if self.text is None:
            return None
        if self.encoding == BASE64_ENCODING:
            return base64.b64decode(self.text, validate=True)
        return self.text.encode(charset)
