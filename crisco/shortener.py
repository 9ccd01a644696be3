"""Short-code generation and the small parsers the shortener relies on."""

from __future__ import annotations

BASE62 = "0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"
BASE64 = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"

MAX_CODE_LENGTH = 7

_U64_MASK = (1 << 64) - 1
_PREFIX_MASK = 0x0000_FFFF_FFFF_FFFF
_BASE62_SET = frozenset(BASE62)
_BASE64_INDEX = {char: index for index, char in enumerate(BASE64)}
_URL_KEY = '"url":'


def base64_decode(text: str) -> bytes | None:
    """Decode standard Base64, stopping at the first '='.

    Returns None if a character outside the Base64 alphabet appears.
    """
    output = bytearray()
    buffer = 0
    bits = 0
    for char in text:
        if char == "=":
            break
        value = _BASE64_INDEX.get(char)
        if value is None:
            return None
        buffer = (buffer << 6) | value
        bits += 6
        if bits >= 8:
            bits -= 8
            output.append((buffer >> bits) & 0xFF)
            buffer &= (1 << bits) - 1
    return bytes(output)


def extract_url(body: str) -> str | None:
    """Return the http(s) URL given as the "url" string in a JSON-like body."""
    position = body.find(_URL_KEY)
    if position < 0:
        return None
    remainder = body[position + len(_URL_KEY):].lstrip()
    if not remainder.startswith('"'):
        return None
    end = remainder.find('"', 1)
    if end < 0:
        return None
    url = remainder[1:end]
    if not url.startswith(("http://", "https://")):
        return None
    return url


def djb2(text: str) -> int:
    """The xor variant of the djb2 hash over the UTF-8 bytes, as a 64-bit value."""
    value = 5381
    for byte in text.encode("utf-8"):
        value = ((value * 33) & _U64_MASK) ^ byte
    return value


def to_base62(n: int) -> str:
    """Render a non-negative integer in Base62."""
    if n < 0:
        raise ValueError("n must be non-negative")
    if n == 0:
        return "0"
    digits = []
    while n > 0:
        n, remainder = divmod(n, 62)
        digits.append(BASE62[remainder])
    return "".join(reversed(digits))


def shorten_url(url: str, attempt: int = 0) -> str:
    """Derive the short code for a URL; attempts above zero salt the input."""
    salted = url if attempt == 0 else f"{url}:{attempt}"
    prefix = djb2(salted) & _PREFIX_MASK
    return to_base62(prefix)[:MAX_CODE_LENGTH]


def is_short_code(code: str) -> bool:
    """Whether a string has the shape of a short code."""
    return 0 < len(code) <= MAX_CODE_LENGTH and all(char in _BASE62_SET for char in code)