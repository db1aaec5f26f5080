"""HTTP versions and an ordered, case-preserving header multimap."""

from __future__ import annotations

import enum
import string
from typing import Iterator

from .case import case_header_name

_TCHAR = frozenset(
    b"!#$%&'*+-.^_`|~" + string.ascii_letters.encode() + string.digits.encode()
)
_CRLF = b"\r\n"
_DELIMITER = b": "


class HeaderError(ValueError):
    """An invalid header name, header value, method, path or status."""


class Version(enum.Enum):
    HTTP_09 = "HTTP/0.9"
    HTTP_10 = "HTTP/1.0"
    HTTP_11 = "HTTP/1.1"
    HTTP_2 = "HTTP/2"

    def raw(self) -> str:
        """The version as written on the wire."""
        return self.value


def is_token(data: bytes) -> bool:
    """True when ``data`` is a non-empty HTTP token."""
    return bool(data) and all(byte in _TCHAR for byte in data)


def _checked_name(name) -> tuple[str, bytes]:
    case = case_header_name(name)
    if not is_token(case):
        raise HeaderError(f"invalid header name: {case!r}")
    return case.decode("ascii").lower(), case


def _lookup_key(name) -> str | None:
    try:
        return _checked_name(name)[0]
    except (HeaderError, TypeError):
        return None


def _checked_value(value) -> bytes:
    if isinstance(value, bool):
        raise HeaderError("invalid header value: bool")
    if isinstance(value, int):
        return str(value).encode("ascii")
    if isinstance(value, str):
        if any(not (ch == "\t" or " " <= ch <= "~") for ch in value):
            raise HeaderError(f"invalid header value: {value!r}")
        return value.encode("ascii")
    if isinstance(value, (bytes, bytearray, memoryview)):
        data = bytes(value)
        if any(not (byte == 0x09 or (byte >= 0x20 and byte != 0x7F)) for byte in data):
            raise HeaderError(f"invalid header value: {data!r}")
        return data
    raise HeaderError(f"unsupported header value type: {type(value).__name__}")


class HeaderMap:
    """Headers keyed case-insensitively, keeping each name's original spelling.

    Names keep the order in which they first appeared; values of one name
    keep the order in which they were added.
    """

    def __init__(self) -> None:
        self._entries: dict[str, list[tuple[bytes, bytes]]] = {}

    def append(self, name, value) -> None:
        """Add a value without touching existing values of the same name."""
        key, case = _checked_name(name)
        data = _checked_value(value)
        self._entries.setdefault(key, []).append((case, data))

    def insert(self, name, value) -> None:
        """Replace every value of the name with this one."""
        key, case = _checked_name(name)
        data = _checked_value(value)
        self._entries[key] = [(case, data)]

    def remove(self, name) -> list[bytes]:
        """Drop every value of the name and return them."""
        key = _lookup_key(name)
        if key is None:
            return []
        return [value for _, value in self._entries.pop(key, [])]

    def get(self, name) -> bytes | None:
        key = _lookup_key(name)
        entries = self._entries.get(key) if key is not None else None
        return entries[0][1] if entries else None

    def get_all(self, name) -> list[bytes]:
        key = _lookup_key(name)
        if key is None:
            return []
        return [value for _, value in self._entries.get(key, [])]

    def items(self) -> Iterator[tuple[bytes, bytes]]:
        """Yield (name as spelled, value) pairs in wire order."""
        for entries in self._entries.values():
            yield from entries

    def __contains__(self, name) -> bool:
        key = _lookup_key(name)
        return key is not None and key in self._entries

    def __len__(self) -> int:
        return sum(len(entries) for entries in self._entries.values())

    def render(self) -> bytes:
        """Header lines as sent on the wire, without the closing blank line."""
        return b"".join(case + _DELIMITER + value + _CRLF for case, value in self.items())

    def __repr__(self) -> str:
        return f"HeaderMap({list(self.items())!r})"