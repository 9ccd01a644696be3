import io

import pytest

from crisco.http import (
    ConnectionClosed,
    HttpRequest,
    InvalidContentLength,
    InvalidEncoding,
    InvalidMethod,
    InvalidRequestLine,
    OversizedBody,
    RequestError,
    RequestIOError,
    parse_request,
)


def _parse(raw):
    return parse_request(io.BytesIO(raw))


def test_parses_simple_get():
    request = _parse(b"GET /abc HTTP/1.1\r\nHost: localhost\r\n\r\n")
    assert request.method == "GET"
    assert request.path == "/abc"
    assert request.headers == [("Host", "localhost")]
    assert request.body == ""


def test_method_is_uppercased():
    request = _parse(b"post / HTTP/1.1\r\n\r\n")
    assert request.method == "POST"


def test_parses_post_body_by_content_length():
    body = b'{"url": "https://example.com"}'
    raw = b"POST / HTTP/1.1\r\nContent-Length: %d\r\n\r\n" % len(body) + body + b"extra"
    request = _parse(raw)
    assert request.body == body.decode()


def test_header_lookup_ignores_case():
    request = HttpRequest("GET", "/", [("Content-Type", "text/plain"), ("content-type", "other")])
    assert request.header("CONTENT-TYPE") == "text/plain"
    assert request.header("Missing") is None


def test_lines_without_colon_are_ignored():
    request = _parse(b"GET / HTTP/1.1\r\nnonsense\r\nA:  b \r\n\r\n")
    assert request.headers == [("A", "b")]


def test_empty_stream_is_connection_closed():
    with pytest.raises(ConnectionClosed) as info:
        _parse(b"")
    assert str(info.value) == "Connection closed by client"


def test_missing_blank_line_is_connection_closed():
    with pytest.raises(ConnectionClosed):
        _parse(b"GET / HTTP/1.1\r\nHost: localhost\r\n")


def test_short_request_line():
    with pytest.raises(InvalidRequestLine) as info:
        _parse(b"GET\r\n\r\n")
    assert str(info.value) == "Invalid request line"


def test_unsupported_method():
    with pytest.raises(InvalidMethod) as info:
        _parse(b"PUT / HTTP/1.1\r\n\r\n")
    assert str(info.value) == "Invalid HTTP method"


def test_oversized_body():
    with pytest.raises(OversizedBody) as info:
        _parse(b"POST / HTTP/1.1\r\nContent-Length: 102401\r\n\r\n")
    assert str(info.value) == "Request body is too large"


def test_invalid_utf8_body():
    with pytest.raises(InvalidEncoding):
        _parse(b"POST / HTTP/1.1\r\nContent-Length: 2\r\n\r\n\xff\xfe")


def test_truncated_body_is_io_error():
    with pytest.raises(RequestIOError):
        _parse(b"POST / HTTP/1.1\r\nContent-Length: 10\r\n\r\nabc")


def test_invalid_utf8_header_is_io_error():
    with pytest.raises(RequestIOError):
        _parse(b"GET / HTTP/1.1\r\nX: \xff\r\n\r\n")


def test_oversized_head_is_connection_closed():
    raw = b"GET / HTTP/1.1\r\nX: " + b"a" * 9000 + b"\r\n\r\n"
    with pytest.raises(ConnectionClosed):
        _parse(raw)


def test_all_errors_share_base_class():
    with pytest.raises(RequestError):
        _parse(b"DELETE / HTTP/1.1\r\n\r\n")