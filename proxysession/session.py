"""Parsing of HTTP/1.x message heads and the state shared by both session sides."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from .errors import SessionError
from .headers import Version, is_token
from .keepalive import KeepaliveStatus
from .offset import Offset
from .reader import BodyReader
from .utils import is_request_upgrade, is_response_upgrade
from .writer import BodyWriter

INIT_BUFFER_SIZE = 1024
MAX_BUFFER_SIZE = 8192
MAX_HEADERS_COUNT = 256

_VERSIONS = {b"HTTP/1.1": Version.HTTP_11, b"HTTP/1.0": Version.HTTP_10}


@dataclass
class ParsedRequest:
    """A request head; ``head_size`` is the number of bytes it took."""

    method: str
    path: bytes
    version: Version
    headers: list[tuple[bytes, bytes]] = field(default_factory=list)
    head_size: int = 0


@dataclass
class ParsedResponse:
    """A response head; ``head_size`` is the number of bytes it took."""

    version: Version
    status_code: int
    reason: str
    headers: list[tuple[bytes, bytes]] = field(default_factory=list)
    head_size: int = 0


def _skip_empty_lines(data: bytes, pos: int) -> int:
    while pos < len(data):
        if data.startswith(b"\r\n", pos):
            pos += 2
        elif data[pos] == 0x0A:
            pos += 1
        else:
            break
    return pos


def _next_line(data: bytes, pos: int) -> tuple[bytes, int] | None:
    end = data.find(b"\n", pos)
    if end < 0:
        return None
    line = data[pos:end]
    if line.endswith(b"\r"):
        line = line[:-1]
    return line, end + 1


def _valid_text(value: bytes) -> bool:
    return all(byte == 0x09 or 0x20 <= byte <= 0x7E or byte >= 0x80 for byte in value)


def _parse_version(raw: bytes) -> Version:
    try:
        return _VERSIONS[raw]
    except KeyError:
        raise SessionError("invalid HTTP version") from None


def _parse_headers(
    data: bytes, pos: int, *, lenient: bool
) -> tuple[list[tuple[bytes, bytes]], int] | None:
    headers: list[tuple[bytes, bytes]] = []
    while True:
        got = _next_line(data, pos)
        if got is None:
            return None
        line, pos = got
        if not line:
            return headers, pos
        if lenient and headers and line[:1] in (b" ", b"\t"):
            # obsolete line folding: join the continuation with a single space
            name, value = headers[-1]
            more = line.strip(b" \t")
            if not _valid_text(more):
                raise SessionError("invalid header value")
            headers[-1] = (name, b" ".join(part for part in (value, more) if part))
            continue
        name, sep, value = line.partition(b":")
        if lenient:
            name = name.rstrip(b" \t")
        if not sep or not is_token(name):
            raise SessionError("invalid header name")
        value = value.strip(b" \t")
        if not _valid_text(value):
            raise SessionError("invalid header value")
        if len(headers) >= MAX_HEADERS_COUNT:
            raise SessionError("too many headers")
        headers.append((bytes(name), bytes(value)))


def parse_request_head(buf) -> ParsedRequest | None:
    """Parse a request head; None while it is incomplete."""
    data = bytes(buf)
    pos = _skip_empty_lines(data, 0)
    got = _next_line(data, pos)
    if got is None:
        return None
    line, pos = got
    parts = line.split(b" ")
    if len(parts) != 3:
        raise SessionError("invalid request line")
    method, path, version = parts
    if not is_token(method):
        raise SessionError("invalid method")
    if not path or any(byte <= 0x20 or byte >= 0x7F for byte in path):
        raise SessionError("invalid request path")
    parsed_version = _parse_version(version)
    result = _parse_headers(data, pos, lenient=False)
    if result is None:
        return None
    headers, head_size = result
    return ParsedRequest(
        method.decode("ascii"), bytes(path), parsed_version, headers, head_size
    )


def parse_response_head(buf) -> ParsedResponse | None:
    """Parse a response head; None while it is incomplete.

    Spaces before the colon of a header name and folded header lines are
    accepted, as servers in the wild still send them.
    """
    data = bytes(buf)
    pos = _skip_empty_lines(data, 0)
    got = _next_line(data, pos)
    if got is None:
        return None
    line, pos = got
    version, sep, rest = line.partition(b" ")
    parsed_version = _parse_version(version)
    if not sep:
        raise SessionError("invalid status line")
    code = rest[:3]
    if len(code) != 3 or not code.isdigit() or int(code) < 100:
        raise SessionError("invalid status code")
    tail = rest[3:]
    if tail and not tail.startswith(b" "):
        raise SessionError("invalid status line")
    reason = tail[1:]
    if not _valid_text(reason):
        raise SessionError("invalid reason phrase")
    result = _parse_headers(data, pos, lenient=True)
    if result is None:
        return None
    headers, head_size = result
    return ParsedResponse(
        parsed_version, int(code), reason.decode("latin-1"), headers, head_size
    )


async def read_head(stream, parse: Callable):
    """Read from ``stream`` until ``parse`` accepts a complete head.

    Returns ``(parsed, buffer)`` with every byte read so far, or None when
    the peer closed before sending anything.
    """
    buffer = bytearray()
    while True:
        if len(buffer) > MAX_BUFFER_SIZE:
            raise SessionError(f"request larger than {MAX_BUFFER_SIZE}")
        data = await stream.read(INIT_BUFFER_SIZE)
        if not data:
            if buffer:
                raise SessionError("connection closed")
            return None
        buffer += data
        parsed = parse(buffer)
        if parsed is not None:
            return parsed, bytes(buffer)


class HttpSession:
    """State shared by the client-facing and server-facing sides of a session."""

    def __init__(self, stream) -> None:
        self.stream = stream
        self.buffer = b""
        self.buf_headers_offset: Offset | None = None
        self.buf_body_offset: Offset | None = None
        self.request_header = None
        self.response_header = None
        self.body_writer = BodyWriter()
        self.body_reader = BodyReader()
        self.buf_write_size = 0
        self.buf_read_size = 0
        self.keepalive_timeout = KeepaliveStatus()
        self.read_timeout: float | None = None
        self.write_timeout: float | None = None
        self.upgrade = False

    def _store_head(self, head_size: int, buffer: bytes) -> None:
        self.buffer = buffer
        self.buf_headers_offset = Offset(0, head_size)
        self.buf_body_offset = Offset(head_size, len(buffer))

    def _body_rewind(self) -> bytes:
        if self.buf_body_offset is None:
            return b""
        return self.buf_body_offset.get(self.buffer)

    def set_keepalive(self, seconds: float | None) -> None:
        """None turns keepalive off, 0 keeps it on forever, more sets a timeout."""
        self.keepalive_timeout = KeepaliveStatus.from_seconds(seconds)

    def is_session_keepalive(self) -> bool:
        return self.keepalive_timeout.is_active()

    def is_request_upgrade(self) -> bool:
        if self.request_header is None:
            raise RuntimeError("request header is not set")
        return is_request_upgrade(self.request_header)

    def is_session_upgrade(self, resp_header) -> bool:
        """Both the request asked for an upgrade and the response grants it."""
        return self.is_request_upgrade() and is_response_upgrade(resp_header)

    def return_stream(self):
        """Hand back the stream, e.g. to a connection pool."""
        return self.stream