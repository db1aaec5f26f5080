"""Status line and headers of an HTTP/1.x response."""

from __future__ import annotations

from .headers import HeaderError, HeaderMap, Version

_CRLF = b"\r\n"
_SPACE = b" "

_CANONICAL_REASONS = {
    100: "Continue",
    101: "Switching Protocols",
    102: "Processing",
    200: "OK",
    201: "Created",
    202: "Accepted",
    203: "Non Authoritative Information",
    204: "No Content",
    205: "Reset Content",
    206: "Partial Content",
    207: "Multi-Status",
    208: "Already Reported",
    226: "IM Used",
    300: "Multiple Choices",
    301: "Moved Permanently",
    302: "Found",
    303: "See Other",
    304: "Not Modified",
    305: "Use Proxy",
    307: "Temporary Redirect",
    308: "Permanent Redirect",
    400: "Bad Request",
    401: "Unauthorized",
    402: "Payment Required",
    403: "Forbidden",
    404: "Not Found",
    405: "Method Not Allowed",
    406: "Not Acceptable",
    407: "Proxy Authentication Required",
    408: "Request Timeout",
    409: "Conflict",
    410: "Gone",
    411: "Length Required",
    412: "Precondition Failed",
    413: "Payload Too Large",
    414: "URI Too Long",
    415: "Unsupported Media Type",
    416: "Range Not Satisfiable",
    417: "Expectation Failed",
    418: "I'm a teapot",
    421: "Misdirected Request",
    422: "Unprocessable Entity",
    423: "Locked",
    424: "Failed Dependency",
    426: "Upgrade Required",
    428: "Precondition Required",
    429: "Too Many Requests",
    431: "Request Header Fields Too Large",
    451: "Unavailable For Legal Reasons",
    500: "Internal Server Error",
    501: "Not Implemented",
    502: "Bad Gateway",
    503: "Service Unavailable",
    504: "Gateway Timeout",
    505: "HTTP Version Not Supported",
    506: "Variant Also Negotiates",
    507: "Insufficient Storage",
    508: "Loop Detected",
    510: "Not Extended",
    511: "Network Authentication Required",
}


def _checked_status(status_code) -> int:
    if isinstance(status_code, bool):
        raise HeaderError("invalid status code: bool")
    if isinstance(status_code, (bytes, bytearray)):
        status_code = bytes(status_code).decode("latin-1")
    if isinstance(status_code, str):
        if len(status_code) != 3 or not all("0" <= ch <= "9" for ch in status_code):
            raise HeaderError(f"invalid status code: {status_code!r}")
        status_code = int(status_code)
    if not isinstance(status_code, int) or not 100 <= status_code <= 999:
        raise HeaderError(f"invalid status code: {status_code!r}")
    return status_code


class ResponseHeader:
    """Status, version, reason phrase and headers of a response."""

    def __init__(self, status_code, version=Version.HTTP_11) -> None:
        self._status_code = _checked_status(status_code)
        self.version = Version(version)
        self.headers = HeaderMap()
        self._reason: str | None = None

    @property
    def status_code(self) -> int:
        return self._status_code

    @property
    def is_informational(self) -> bool:
        return 100 <= self._status_code < 200

    @property
    def raw_version(self) -> str:
        return self.version.raw()

    def set_status_code(self, status_code) -> None:
        self._status_code = _checked_status(status_code)

    def set_reason_phrase(self, reason: str | None) -> None:
        """Set a custom reason; the canonical one for the status is not stored."""
        if reason == _CANONICAL_REASONS.get(self._status_code):
            self._reason = None
        else:
            self._reason = reason

    @property
    def reason_phrase(self) -> str | None:
        """The custom reason if set, else the canonical reason of the status."""
        if self._reason is not None:
            return self._reason
        return _CANONICAL_REASONS.get(self._status_code)

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
        """The response head as sent on the wire, ending with a blank line."""
        line = (
            self.raw_version.encode("ascii")
            + _SPACE
            + str(self._status_code).encode("ascii")
            + _SPACE
        )
        reason = self.reason_phrase
        if reason is not None:
            line += reason.encode("latin-1")
        return line + _CRLF + self.headers.render() + _CRLF

    def __repr__(self) -> str:
        return (
            f"ResponseHeader({self._status_code}, {self.version.raw()!r}, "
            f"{self.reason_phrase!r}, {self.headers!r})"
        )