"""Tests for harclient.har.entry module."""

from datetime import datetime, timezone

import pytest

from harclient.har.content import HarContentRecord
from harclient.har.entry import HarEntryBuilder
from harclient.http.messages import HttpRequest
from harclient.http.transport import TransportResponse


def _make_transport_response(
    status_code=200,
    reason='OK',
    http_version='HTTP/1.1',
    headers=None,
    content=b'<h1>Hello World</h1>',
    wire_size=None,
    request_headers=None,
    wait_ms=12.5,
    receive_ms=3.25,
    server_ip='',
):
    """Helper to build a TransportResponse."""
    return TransportResponse(
        status_code=status_code,
        reason=reason,
        http_version=http_version,
        headers=headers if headers is not None else [('Content-Type', 'text/html')],
        content=content,
        wire_size=len(content) if wire_size is None else wire_size,
        request_headers=request_headers or [],
        wait_ms=wait_ms,
        receive_ms=receive_ms,
        server_ip=server_ip,
    )


@pytest.fixture
def builder():
    return HarEntryBuilder()


@pytest.fixture
def request_instance():
    return HttpRequest('GET', 'https://example.com/page?q=1&q=2&empty=')


class TestHarEntryBuilderBuild:
    def test_build_entry_basic(self, builder, request_instance):
        started = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
        entry = builder.build(
            request_instance,
            _make_transport_response(),
            HarContentRecord(size=20, mime_type='text/html'),
            started,
        )
        assert entry['startedDateTime'] == '2024-01-02T03:04:05+00:00'
        assert entry['request']['method'] == 'GET'
        assert entry['request']['url'] == 'https://example.com/page?q=1&q=2&empty='
        assert entry['request']['httpVersion'] == 'HTTP/1.1'
        assert entry['response']['status'] == 200
        assert entry['response']['statusText'] == 'OK'
        assert entry['response']['content'] == {'size': 20, 'mimeType': 'text/html'}
        assert entry['cache'] == {}
        assert 'serverIPAddress' not in entry

    def test_entry_time_sums_positive_phases(self, builder, request_instance):
        entry = builder.build(
            request_instance,
            _make_transport_response(wait_ms=10.0, receive_ms=5.5),
            HarContentRecord(),
        )
        assert entry['time'] == 15.5

    def test_content_is_snapshotted(self, builder, request_instance):
        record = HarContentRecord(size=5, text='hello')
        entry = builder.build(request_instance, _make_transport_response(), record)
        record.text = 'changed'
        assert entry['response']['content']['text'] == 'hello'

    def test_server_ip_included_when_known(self, builder, request_instance):
        entry = builder.build(
            request_instance,
            _make_transport_response(server_ip='127.0.0.1'),
            HarContentRecord(),
        )
        assert entry['serverIPAddress'] == '127.0.0.1'

    def test_query_string_in_request(self, builder, request_instance):
        entry = builder.build(request_instance, _make_transport_response(), HarContentRecord())
        assert entry['request']['queryString'] == [
            {'name': 'q', 'value': '1'},
            {'name': 'q', 'value': '2'},
            {'name': 'empty', 'value': ''},
        ]

    def test_uses_transport_request_headers_when_available(self, builder, request_instance):
        response = _make_transport_response(
            request_headers=[('Host', 'example.com'), ('Cookie', 'a=1')]
        )
        entry = builder.build(request_instance, response, HarContentRecord())
        assert entry['request']['headers'] == [
            {'name': 'Host', 'value': 'example.com'},
            {'name': 'Cookie', 'value': 'a=1'},
        ]
        assert entry['request']['cookies'] == [{'name': 'a', 'value': '1'}]

    def test_falls_back_to_caller_headers(self, builder):
        request = HttpRequest('GET', 'https://example.com/', headers=[('X-Test', '1')])
        entry = builder.build(request, _make_transport_response(), HarContentRecord())
        assert entry['request']['headers'] == [{'name': 'X-Test', 'value': '1'}]

    def test_transport_request_line_takes_precedence(self, builder, request_instance):
        response = _make_transport_response()
        response.method = 'GET'
        response.url = 'https://example.com/landing?from=page'
        entry = builder.build(request_instance, response, HarContentRecord())
        assert entry['request']['url'] == 'https://example.com/landing?from=page'
        assert entry['request']['queryString'] == [{'name': 'from', 'value': 'page'}]

    def test_transport_request_body_takes_precedence(self, builder):
        request = HttpRequest('POST', 'https://example.com/old', content=b'caller')
        response = _make_transport_response()
        response.method = 'GET'
        response.url = 'https://example.com/new'
        entry = builder.build(request, response, HarContentRecord())
        assert entry['request']['method'] == 'GET'
        assert entry['request']['bodySize'] == 0
        assert 'postData' not in entry['request']

    def test_post_data(self, builder):
        request = HttpRequest(
            'POST',
            'https://example.com/submit',
            headers=[('Content-Type', 'application/json')],
            content=b'{"a": 1}',
        )
        entry = builder.build(request, _make_transport_response(), HarContentRecord())
        assert entry['request']['bodySize'] == 8
        assert entry['request']['postData'] == {
            'mimeType': 'application/json',
            'text': '{"a": 1}',
        }

    def test_no_post_data_without_body(self, builder, request_instance):
        entry = builder.build(request_instance, _make_transport_response(), HarContentRecord())
        assert entry['request']['bodySize'] == 0
        assert 'postData' not in entry['request']

    def test_body_size_is_wire_size(self, builder, request_instance):
        entry = builder.build(
            request_instance,
            _make_transport_response(content=b'x' * 100, wire_size=40),
            HarContentRecord(size=100, compression=60),
        )
        assert entry['response']['bodySize'] == 40
        assert entry['response']['content']['compression'] == 60

    def test_body_size_304_is_zero(self, builder, request_instance):
        entry = builder.build(
            request_instance,
            _make_transport_response(status_code=304, reason='Not Modified', wire_size=10),
            HarContentRecord(),
        )
        assert entry['response']['bodySize'] == 0

    def test_redirect_url_from_location(self, builder, request_instance):
        entry = builder.build(
            request_instance,
            _make_transport_response(status_code=302, headers=[('location', '/next')]),
            HarContentRecord(),
        )
        assert entry['response']['redirectURL'] == '/next'

    def test_response_cookies(self, builder, request_instance):
        response = _make_transport_response(
            headers=[
                ('Set-Cookie', 'session=abc; Path=/app; HttpOnly'),
                ('set-cookie', 'theme=dark; Secure; Domain=Example.com'),
            ]
        )
        entry = builder.build(request_instance, response, HarContentRecord())
        assert entry['response']['cookies'] == [
            {'name': 'session', 'value': 'abc', 'path': '/app', 'httpOnly': True},
            {'name': 'theme', 'value': 'dark', 'secure': True, 'domain': 'Example.com'},
        ]


class TestHarEntryBuilderHelpers:
    def test_headers_to_list(self):
        result = HarEntryBuilder.headers_to_list([('A', '1'), ('B', '2')])
        assert result == [{'name': 'A', 'value': '1'}, {'name': 'B', 'value': '2'}]

    def test_headers_to_list_empty(self):
        assert HarEntryBuilder.headers_to_list([]) == []

    def test_parse_query_string_no_query(self):
        assert HarEntryBuilder.parse_query_string('https://example.com/') == []

    def test_parse_request_cookies_lowercase_header(self):
        cookies = HarEntryBuilder.parse_request_cookies([('cookie', 'a=1; b=2; junk')])
        assert cookies == [{'name': 'a', 'value': '1'}, {'name': 'b', 'value': '2'}]

    def test_parse_request_cookies_empty(self):
        assert HarEntryBuilder.parse_request_cookies([]) == []

    def test_parse_response_cookies_skips_nameless(self):
        cookies = HarEntryBuilder.parse_response_cookies([
            ('Set-Cookie', 'novalue; Path=/'),
            ('Set-Cookie', '=x'),
        ])
        assert cookies == []

    def test_build_har_timings(self):
        timings = HarEntryBuilder.build_har_timings(10.12345, -1.0)
        assert timings == {
            'blocked': -1,
            'dns': -1,
            'connect': -1,
            'ssl': -1,
            'send': 0,
            'wait': 10.123,
            'receive': 0,
        }


class TestHttpVersionNormalization:
    @pytest.mark.parametrize(
        'protocol, expected',
        [
            ('HTTP/1.1', 'HTTP/1.1'),
            ('http/1.0', 'HTTP/1.0'),
            ('HTTP/2', 'h2'),
            ('HTTP/3', 'h3'),
            ('h2', 'h2'),
            ('', ''),
            ('file', ''),
        ],
    )
    def test_normalize(self, protocol, expected):
        assert HarEntryBuilder.normalize_http_version(protocol) == expected
