"""Request line and headers of an HTTP/1.x request."""

from __future__ import annotations

from urllib.parse import SplitResult, urlsplit

from .headers import HeaderError, HeaderMap, Version, is_token

_CRLF = b"\r\n"
_SPACE = b" "


def _checked_method(method) -> str:
    if isinstance(method, (bytes, bytearray, memoryview)):
        raw = bytes(method)
    elif isinstance(method, str):
        raw = method.encode("utf-8")
    else:
        raise HeaderError(f"invalid method: {method!r}")
    if not is_token(raw):
        raise HeaderError(f"invalid method: {raw!r}")
    return raw.decode("ascii")


def _checked_path(raw_path) -> bytes:
    if isinstance(raw_path, str):
        raw = raw_path.encode("utf-8")
    elif isinstance(raw_path, (bytes, bytearray, memoryview)):
        raw = bytes(raw_path)
    else:
        raise HeaderError(f"invalid request path: {raw_path!r}")
    if not raw:
        raise HeaderError("empty request path")
    if any(byte <= 0x20 or byte >= 0x7F for byte in raw):
        raise HeaderError(f"invalid request path: {raw!r}")
    return raw


class RequestHeader:
    """Method, path, version and headers of a request.

    The path is kept exactly as received and is what gets written back out.
    """

    def __init__(self, method, raw_path, version=Version.HTTP_11) -> None:
        self.method = _checked_method(method)
        self.raw_path = _checked_path(raw_path)
        self.version = Version(version)
        self.headers = HeaderMap()

    @property
    def uri(self) -> SplitResult:
        """The request target split into its URI parts."""
        return urlsplit(self.raw_path.decode("ascii"))

    @property
    def raw_version(self) -> str:
        return self.version.raw()

    def append_header(self, name, value) -> None:
        self.headers.append(name, value)

    def insert_header(self, name, value) -> None:
        self.headers.insert(name, value)

    def remove_header(self, name) -> list[bytes]:
        return self.headers.remove(name)

    def get_headers(self, name) -> list[bytes]:
        return self.headers.get_all(name)

    def get_header(self, name) -> bytes | None:
        return self.headers.get(name)

    def to_bytes(self) -> bytes:
        """The request head as sent on the wire, ending with a blank line."""
        line = (
            self.method.encode("ascii")
            + _SPACE
            + self.raw_path
            + _SPACE
            + self.raw_version.encode("ascii")
            + _CRLF
        )
        return line + self.headers.render() + _CRLF

    def __repr__(self) -> str:
        return (
            f"RequestHeader({self.method!r}, {self.raw_path!r}, "
            f"{self.version.raw()!r}, {self.headers!r})"
        )