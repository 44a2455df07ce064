"""Shared fixtures: a local HTTP responder started and stopped per test."""

import base64
import gzip
import json
import socket
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest

PIXEL_GIF_BASE64 = 'R0lGODlhAQABAIAAAP///wAAACH5BAEAAAAALAAAAAABAAEAAAICRAEAOw=='
GZIP_TEXT = 'hello world ' * 200


class _ResponderHandler(BaseHTTPRequestHandler):
    """Deterministic handler serving the fixtures used by the client tests."""

    def do_GET(self):
        path = self.path.split('?', 1)[0]
        if path == '/html':
            self._respond(200, 'text/html;charset=utf-8', b'<h1>Hello World</h1>')
        elif path == '/pixel':
            self._respond(200, 'image/gif', base64.b64decode(PIXEL_GIF_BASE64))
        elif path == '/gzip':
            self._respond(
                200,
                'text/plain; charset=utf-8',
                gzip.compress(GZIP_TEXT.encode('utf-8'), mtime=0),
                extra_headers=[('Content-Encoding', 'gzip')],
            )
        elif path == '/latin1':
            self._respond(200, 'text/plain; charset=iso-8859-1', 'café'.encode('latin-1'))
        elif path == '/bad-charset':
            self._respond(200, 'text/plain; charset=no-such-charset', b'plain ascii')
        elif path == '/json':
            self._respond(200, 'application/json', json.dumps({'id': 1}).encode())
        elif path == '/cookies':
            self._respond(
                200,
                'text/plain',
                b'ok',
                extra_headers=[
                    ('Set-Cookie', 'session=abc; Path=/; HttpOnly'),
                    ('Set-Cookie', 'theme=dark'),
                ],
            )
        elif path == '/redirect':
            self._respond(302, 'text/plain', b'', extra_headers=[('Location', '/html')])
        elif path == '/not-modified':
            self.send_response(304)
            self.end_headers()
        else:
            self._respond(404, 'text/plain', b'Not Found')

    def do_POST(self):
        content_length = int(self.headers.get('Content-Length', 0))
        body = self.rfile.read(content_length)
        self._respond(
            201,
            'application/json',
            json.dumps({'received': body.decode('utf-8')}).encode(),
        )

    def _respond(self, status, content_type, body, extra_headers=()):
        self.send_response(status)
        self.send_header('Content-Type', content_type)
        self.send_header('Content-Length', str(len(body)))
        for name, value in extra_headers:
            self.send_header(name, value)
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format, *args):
        pass


@pytest.fixture
def responder():
    """Serve the test endpoints on a free localhost port for one test."""
    # Binding to port 0 blocks until the OS has assigned a listening port.
    server = ThreadingHTTPServer(('127.0.0.1', 0), _ResponderHandler)
    port = server.server_address[1]
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield f'http://127.0.0.1:{port}'
    server.shutdown()
    server.server_close()
    thread.join(timeout=5)


@pytest.fixture
def unused_url():
    """URL on a localhost port that was just released, so connections are refused."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(('127.0.0.1', 0))
        port = s.getsockname()[1]
    return f'http://127.0.0.1:{port}/unreachable'


@pytest.fixture
def pixel_gif_base64():
    return PIXEL_GIF_BASE64


@pytest.fixture
def gzip_text():
    return GZIP_TEXT
