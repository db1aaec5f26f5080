"""Case-preserving header names."""

from __future__ import annotations

_TITLED = {
    "age": "Age",
    "cache-control": "Cache-Control",
    "connection": "Connection",
    "content-type": "Content-Type",
    "content-encoding": "Content-Encoding",
    "content-length": "Content-Length",
    "date": "Date",
    "transfer-encoding": "Transfer-Encoding",
    "host": "Host",
    "server": "Server",
    "set-cookie": "Set-Cookie",
}


def titled_header_name(name: str | bytes) -> str | None:
    """Return the conventional title-cased spelling of a well-known header, if any."""
    if isinstance(name, (bytes, bytearray, memoryview)):
        name = bytes(name).decode("latin-1")
    return _TITLED.get(name.lower())


def case_header_name(name: str | bytes) -> bytes:
    """Return the header name as bytes with its original case kept."""
    if isinstance(name, (bytes, bytearray, memoryview)):
        return bytes(name)
    if isinstance(name, str):
        return name.encode("utf-8")
    raise TypeError(f"header name must be str or bytes, not {type(name).__name__}")