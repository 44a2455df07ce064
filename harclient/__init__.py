from harclient.exceptions import EncodingError, HarClientException, InvalidRequest, TransportError
from harclient.har import ContentClassifier, HarContentRecord, HarEntryBuilder, HarLog
from harclient.http import (
    AsyncHarHttpClient,
    AsyncHttpxTransport,
    HarHttpClient,
    HttpRequest,
    HttpResponse,
    HttpxTransport,
    TransportResponse,
)
from harclient.options import ClientOptions

__all__ = [
    'AsyncHarHttpClient',
    'AsyncHttpxTransport',
    'ClientOptions',
    'ContentClassifier',
    'EncodingError',
    'HarClientException',
    'HarContentRecord',
    'HarEntryBuilder',
    'HarHttpClient',
    'HarLog',
    'HttpRequest',
    'HttpResponse',
    'HttpxTransport',
    'InvalidRequest',
    'TransportError',
    'TransportResponse',
]
