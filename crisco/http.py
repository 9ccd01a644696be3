"""Parsing of HTTP/1.1 requests read from a binary stream."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import BinaryIO

MAX_BODY = 102_400
MAX_HEADER = 8192
_U64_MAX = (1 << 64) - 1
_DIGITS = re.compile(r"\+?[0-9]+", re.ASCII)


class RequestError(Exception):
    """A request could not be read or parsed."""

    default_message = "Invalid request"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


class ConnectionClosed(RequestError):
    default_message = "Connection closed by client"


class InvalidMethod(RequestError):
    default_message = "Invalid HTTP method"


class InvalidRequestLine(RequestError):
    default_message = "Invalid request line"


class OversizedBody(RequestError):
    default_message = "Request body is too large"


class InvalidContentLength(RequestError):
    default_message = "invalid digit found in string"


class InvalidEncoding(RequestError):
    default_message = "invalid utf-8 sequence"


class RequestIOError(RequestError):
    default_message = "I/O error while reading request"


@dataclass
class HttpRequest:
    method: str
    path: str
    headers: list[tuple[str, str]] = field(default_factory=list)
    body: str = ""

    def header(self, name: str) -> str | None:
        """Value of the first header with this name, ignoring case."""
        wanted = name.lower()
        return next((value for key, value in self.headers if key.lower() == wanted), None)


class _HeadReader:
    """Reads lines while capping the total bytes of the request head."""

    def __init__(self, stream: BinaryIO, limit: int) -> None:
        self._stream = stream
        self._remaining = limit

    def readline(self) -> str:
        if self._remaining <= 0:
            return ""
        raw = self._stream.readline(self._remaining)
        self._remaining -= len(raw)
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise RequestIOError("stream did not contain valid UTF-8") from exc


def _parse_content_length(text: str) -> int:
    if not text:
        raise InvalidContentLength("cannot parse integer from empty string")
    if not _DIGITS.fullmatch(text):
        raise InvalidContentLength("invalid digit found in string")
    value = int(text)
    if value > _U64_MAX:
        raise InvalidContentLength("number too large to fit in target type")
    return value


def _read_exact(stream: BinaryIO, size: int) -> bytes:
    chunks = bytearray()
    while len(chunks) < size:
        chunk = stream.read(size - len(chunks))
        if not chunk:
            raise RequestIOError("failed to fill whole buffer")
        chunks.extend(chunk)
    return bytes(chunks)


def parse_request(stream: BinaryIO) -> HttpRequest:
    """Read one GET or POST request from a binary stream.

    Raises a RequestError subclass describing what went wrong.
    """
    head = _HeadReader(stream, MAX_HEADER)
    try:
        request_line = head.readline()
        if not request_line:
            raise ConnectionClosed()

        parts = request_line.split()
        if len(parts) < 2:
            raise InvalidRequestLine()

        method = parts[0].upper() if parts[0].isascii() else parts[0]
        if method not in ("GET", "POST"):
            raise InvalidMethod()
        path = parts[1]

        headers: list[tuple[str, str]] = []
        while True:
            line = head.readline()
            if not line:
                raise ConnectionClosed()
            if line == "\r\n":
                break
            name, sep, value = line.partition(":")
            if sep:
                headers.append((name.strip(), value.strip()))

        request = HttpRequest(method=method, path=path, headers=headers)
        length = _parse_content_length(request.header("Content-Length") or "0")
        if length > MAX_BODY:
            raise OversizedBody()
        body_bytes = _read_exact(stream, length)
    except OSError as exc:
        raise RequestIOError(str(exc)) from exc

    try:
        request.body = body_bytes.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise InvalidEncoding(str(exc)) from exc
    return request