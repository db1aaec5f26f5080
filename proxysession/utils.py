"""Helpers that interpret common HTTP/1.x header values."""

from __future__ import annotations

import logging
import re

from .headers import Version
from .keepalive import ConnectionValue

log = logging.getLogger(__name__)

_SIGNED_INT = re.compile(r"[+-]?[0-9]+")
_UNSIGNED_INT = re.compile(r"\+?[0-9]+")
_I64_MAX = 2**63 - 1
_U64_MAX = 2**64 - 1

_KEEP_ALIVE = b"keep-alive"
_CLOSE = b"close"
_UPGRADE = b"upgrade"


def _as_bytes(value) -> bytes:
    if isinstance(value, str):
        return value.encode("utf-8")
    return bytes(value)


def is_chunked_encoding(value) -> bool:
    """True when a Transfer-Encoding value is exactly ``chunked``, in any case."""
    if value is None:
        return False
    return _as_bytes(value).lower() == b"chunked"


def content_length(value) -> int | None:
    """The length a Content-Length value declares, or None if it is unusable."""
    if value is None:
        return None
    try:
        text = _as_bytes(value).decode("utf-8")
    except UnicodeDecodeError:
        log.debug("invalid content length encoding")
        return None
    if not _SIGNED_INT.fullmatch(text) or abs(int(text)) > _I64_MAX + (text[0] == "-"):
        log.debug("invalid content length value: %r", text)
        return None
    length = int(text)
    if length < 0:
        log.debug("negative content length value: %d", length)
        return None
    return length


def is_request_upgrade(request) -> bool:
    """An HTTP/1.1 request carrying an Upgrade header."""
    return request.version is Version.HTTP_11 and request.get_header("upgrade") is not None


def is_response_upgrade(response) -> bool:
    """An HTTP/1.1 response with status 101."""
    return response.version is Version.HTTP_11 and response.status_code == 101


def is_request_expect_continue(request) -> bool:
    """An HTTP/1.1 request with ``Expect: 100-continue``."""
    expect = request.get_header("expect")
    valid = expect is not None and expect.lower() == b"100-continue"
    return request.version is Version.HTTP_11 and valid


def parse_connection_header(value) -> ConnectionValue:
    """Read the close, upgrade and keep-alive flags from a Connection value.

    Only a value that is exactly ``keep-alive`` sets the keep-alive flag; a
    list of tokens is searched for ``close`` and ``upgrade`` only.
    """
    raw = _as_bytes(value)
    lowered = raw.lower()
    if lowered == _CLOSE:
        return ConnectionValue().with_close()
    if lowered == _KEEP_ALIVE:
        return ConnectionValue().with_keep_alive()
    if lowered == _UPGRADE:
        return ConnectionValue().with_upgrade()

    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError:
        text = ""

    close = False
    upgrade = False
    tokens = (token.strip() for token in text.split(","))
    for token in filter(None, tokens):
        folded = token.encode("utf-8").lower()
        if folded == _CLOSE:
            close = True
        elif folded == _UPGRADE:
            upgrade = True
        if close and upgrade:
            break
    return ConnectionValue(upgrade=upgrade, close=close)


def is_connection_keepalive(value) -> bool | None:
    """True for keep-alive, False for close, None when the value says neither."""
    flags = parse_connection_header(value)
    if flags.keep_alive:
        return True
    if flags.close:
        return False
    return None


def _parse_unsigned(text: str) -> int | None:
    if not _UNSIGNED_INT.fullmatch(text):
        return None
    number = int(text)
    return number if number <= _U64_MAX else None


def parse_keep_alive_header(value) -> tuple[int | None, int | None]:
    """The ``timeout`` and ``max`` parameters of a Keep-Alive value."""
    if value is None:
        return None, None
    try:
        text = _as_bytes(value).decode("utf-8")
    except UnicodeDecodeError:
        return None, None

    timeout = None
    maximum = None
    for param in text.split(","):
        key, sep, raw = param.partition("=")
        if not sep:
            continue
        key = key.strip()
        if key == "timeout":
            timeout = _parse_unsigned(raw.strip())
        elif key == "max":
            maximum = _parse_unsigned(raw.strip())
    return timeout, maximum