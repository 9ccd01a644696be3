"""Request handlers that turn parsed requests into raw HTTP responses."""

from __future__ import annotations

import logging
from collections.abc import Iterable, MutableMapping

from crisco.http import HttpRequest, RequestError, RequestIOError
from crisco.shortener import base64_decode, extract_url, is_short_code, shorten_url

logger = logging.getLogger(__name__)

ROOT_MESSAGE = 'Try POST with {"url": "https://..."}'
BAD_URL_MESSAGE = "Missing or invalid URL in request body"
MAX_ATTEMPTS = 10

_TEXT = ("Content-Type", "text/plain")


def _response(
    status: int,
    reason: str,
    headers: Iterable[tuple[str, str]] = (),
    body: str = "",
) -> bytes:
    payload = body.encode("utf-8")
    lines = [
        f"HTTP/1.1 {status} {reason}",
        *(f"{name}: {value}" for name, value in headers),
        f"Content-Length: {len(payload)}",
        "Connection: close",
        "",
        "",
    ]
    return "\r\n".join(lines).encode("utf-8") + payload


def _redirect_to_root() -> bytes:
    logger.info("Responding with 303; redirect to /")
    return _response(303, "See Other", [("Location", "/")])


def check_basic_auth(headers: Iterable[tuple[str, str]], expected: str) -> bool:
    """Whether the Authorization header carries Basic credentials equal to expected."""
    auth = next((value for name, value in headers if name.lower() == "authorization"), "")
    if not auth.startswith("Basic "):
        return False
    decoded_bytes = base64_decode(auth[6:]) or b""
    try:
        decoded = decoded_bytes.decode("utf-8")
    except UnicodeDecodeError:
        decoded = ""
    return bool(decoded) and decoded == expected


def handle_get(store: MutableMapping[str, str], request: HttpRequest) -> bytes:
    """Serve the usage text at / and redirect known short codes."""
    if request.path == "/":
        logger.info("Responding with 200; GET /")
        return _response(200, "OK", [_TEXT], ROOT_MESSAGE)

    code = request.path.lstrip("/")
    if not is_short_code(code):
        return _redirect_to_root()

    url = store.get(code)
    if url is None:
        return _redirect_to_root()
    logger.info("Responding with 302")
    return _response(302, "Found", [("Location", url)])


def handle_post(
    store: MutableMapping[str, str],
    request: HttpRequest,
    expected_auth: str | None,
) -> bytes:
    """Shorten the URL in an authorised request body and remember it."""
    if not expected_auth:
        logger.info("Responding with 500; expected credentials not set")
        return _response(500, "Internal Server Error")

    if not check_basic_auth(request.headers, expected_auth):
        logger.info("Responding with 401")
        return _response(401, "Unauthorized", [("WWW-Authenticate", "Basic")])

    url = extract_url(request.body)
    if url is None:
        logger.info("Responding with 400; missing or invalid URL")
        return _response(400, "Bad Request", [_TEXT], BAD_URL_MESSAGE)

    attempt = 0
    code = shorten_url(url, attempt)
    while (existing := store.get(code)) is not None and existing != url:
        attempt += 1
        if attempt > MAX_ATTEMPTS:
            logger.error("Responding with 500; too many hash collisions")
            return _response(500, "Internal Server Error")
        code = shorten_url(url, attempt)

    store[code] = url
    logger.info("Responding with 200; URL shortened")
    return _response(200, "OK", [_TEXT], code)


def handle_error(error: RequestError) -> bytes:
    """Describe a request error: 500 for I/O failures, 400 otherwise."""
    message = str(error)
    if isinstance(error, RequestIOError):
        return _response(500, "Internal Server Error", [_TEXT], message)
    return _response(400, "Bad Request", [_TEXT], message)


def handle_request(
    store: MutableMapping[str, str],
    request: HttpRequest,
    expected_auth: str | None,
) -> bytes:
    """Dispatch a parsed request by method."""
    if request.method == "POST":
        return handle_post(store, request, expected_auth)
    return handle_get(store, request)