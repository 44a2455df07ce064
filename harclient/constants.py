DEFAULT_CHARSET = 'utf-8'
DEFAULT_TIMEOUT = 30.0
DEFAULT_USER_AGENT = 'harclient'

BASE64_ENCODING = 'base64'

HAR_VERSION = '1.2'
HAR_CREATOR_NAME = 'harclient'

HTTP_NOT_MODIFIED = 304

# Media types outside text/* whose bodies are character data.
TEXTUAL_MIME_TYPES: frozenset[str] = frozenset({
    'application/json',
    'application/javascript',
    'application/ecmascript',
    'application/x-javascript',
    'application/xml',
    'application/xhtml+xml',
    'application/x-www-form-urlencoded',
    'application/graphql',
    'application/x-ndjson',
    'application/yaml',
    'application/x-yaml',
    'application/sql',
    'image/svg+xml',
})

TEXTUAL_SUFFIXES: tuple[str, ...] = ('+json', '+xml')

IDENTITY_CONTENT_ENCODINGS: frozenset[str] = frozenset({'', 'identity'})
