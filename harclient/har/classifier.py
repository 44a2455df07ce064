"""Response body classification and encoding for HAR content records.

The classifier decides whether a body is character data or binary from its
declared media type, then renders it into a :class:`HarContentRecord`:
decoded text for textual bodies, padded base64 for everything else. Output
depends only on the bytes and the media type, so classifying the same input
twice yields identical records.
"""

from __future__ import annotations

import base64
import codecs
import logging

from harclient.constants import (
    BASE64_ENCODING,
    DEFAULT_CHARSET,
    TEXTUAL_MIME_TYPES,
    TEXTUAL_SUFFIXES,
)
from harclient.exceptions import EncodingError
from harclient.har.content import HarContentRecord

logger = logging.getLogger(__name__)


def parse_media_type(mime_type: str | None) -> tuple[str, dict[str, str]]:
    """Split a Content-Type value into its lowercased essence and parameters.

    >>> parse_media_type('text/html; charset="UTF-8"')
    ('text/html', {'charset': 'UTF-8'})
    """
    if not mime_type:
        return '', {}

    essence, *raw_params = mime_type.split(';')
    params: dict[str, str] = {}
    for raw_param in raw_params:
        if '=' not in raw_param:
            continue
        name, value = raw_param.split('=', 1)
        name = name.strip().lower()
        if name:
            params[name] = value.strip().strip('"\'')
    return essence.strip().lower(), params


class ContentClassifier:
    """Builds HAR content records from raw response bodies."""

    def __init__(self, default_charset: str = DEFAULT_CHARSET):
        self._default_charset = codecs.lookup(default_charset).name

    @property
    def default_charset(self) -> str:
        return self._default_charset

    @staticmethod
    def is_textual(mime_type: str | None) -> bool:
        """Return True if the media type denotes character data."""
        essence, _ = parse_media_type(mime_type)
        if not essence:
            return False
        if essence.startswith('text/') or essence in TEXTUAL_MIME_TYPES:
            return True
        return essence.endswith(TEXTUAL_SUFFIXES)

    def describe(
        self,
        body: bytes,
        mime_type: str | None,
        wire_size: int | None = None,
    ) -> HarContentRecord:
        """Build a record with size, compression and media type only.

        Args:
            body: Response body as delivered, after any transport decompression.
            mime_type: Declared Content-Type, kept verbatim.
            wire_size: Bytes received on the wire when the transport applied
                compression, None otherwise.
        """
        size = len(body)
        return HarContentRecord(
            size=size,
            compression=size - wire_size if wire_size is not None else None,
            mime_type=mime_type or '',
        )

    def classify(
        self,
        body: bytes,
        mime_type: str | None,
        wire_size: int | None = None,
    ) -> HarContentRecord:
        """Build a fully captured record: metadata plus the body's text rendering.

        Textual bodies are decoded with their declared charset, falling back
        to the default charset. Bodies that are binary, or textual but not
        decodable by any candidate charset, are stored as base64.
        """
        record = self.describe(body, mime_type, wire_size)

        text = self.decode_text(body, mime_type)
        if text is not None:
            record.text = text
            return record

        record.text = base64.b64encode(body).decode('ascii')
        record.encoding = BASE64_ENCODING
        return record

    def decode_text(self, body: bytes, mime_type: str | None) -> str | None:
        """Decode a textual body, or return None if it is binary or undecodable."""
        if not self.is_textual(mime_type):
            return None

        for charset in self._charset_candidates(mime_type):
            try:
                return body.decode(charset)
            except (UnicodeError, LookupError, ValueError):
                logger.debug('Body of %s does not decode as %s', mime_type, charset)

        logger.debug('No charset decodes body of %s, storing as base64', mime_type)
        return None

    def charset_for(self, mime_type: str | None) -> str:
        """Return the charset the textual path would try first for this media type."""
        return self._charset_candidates(mime_type)[0]

    def _charset_candidates(self, mime_type: str | None) -> list[str]:
        _, params = parse_media_type(mime_type)
        declared = params.get('charset')
        if not declared:
            return [self._default_charset]

        try:
            resolved = self._resolve_charset(declared)
        except EncodingError as exc:
            logger.debug('%s, falling back to %s', exc.message, self._default_charset)
            return [self._default_charset]

        if resolved == self._default_charset:
            return [resolved]
        return [resolved, self._default_charset]

    @staticmethod
    def _resolve_charset(charset: str) -> str:
        try:
            return codecs.lookup(charset).name
        except (LookupError, ValueError) as exc:
            raise EncodingError(f'Unknown charset {charset!r}') from exc
