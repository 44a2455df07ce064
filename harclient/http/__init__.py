"""
HTTP execution for harclient: request/response messages, the httpx-backed
transports and the clients that archive each exchange.
"""

from .client import AsyncHarHttpClient, HarHttpClient
from .messages import HttpRequest, HttpResponse
from .transport import AsyncHttpxTransport, HttpxTransport, TransportResponse

__all__ = [
    'AsyncHarHttpClient',
    'AsyncHttpxTransport',
    'HarHttpClient',
    'HttpRequest',
    'HttpResponse',
    'HttpxTransport',
    'TransportResponse',
]
