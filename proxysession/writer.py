"""Writing an HTTP/1.x message body by content length, chunks or until close."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass

from .errors import SessionError

log = logging.getLogger(__name__)

LAST_CHUNK = b"0\r\n\r\n"
_CRLF = b"\r\n"


class WriteMode(enum.Enum):
    START = "start"
    COMPLETED = "completed"
    CONTENT_LENGTH = "content_length"
    CHUNKED = "chunked"
    UNTIL_CLOSED = "until_closed"


@dataclass(frozen=True)
class WriteState:
    """Where a body write stands.

    ``written`` counts body bytes written so far; ``total`` is the declared
    length when the mode is CONTENT_LENGTH.
    """

    mode: WriteMode = WriteMode.START
    written: int = 0
    total: int = 0


async def _write_all(stream, data: bytes) -> None:
    try:
        await stream.write(data)
    except OSError as exc:
        raise SessionError(f"error writing: {exc!r}") from exc


class BodyWriter:
    """Writes body pieces to a stream in the framing chosen for the message.

    Writes are flushed at once except for a content-length body, which is
    flushed only when the declared length has been reached.
    """

    def __init__(self) -> None:
        self.write_state = WriteState()

    def with_content_length_write(self, length: int) -> None:
        self.write_state = WriteState(WriteMode.CONTENT_LENGTH, 0, length)

    def with_chunked_encoding_write(self) -> None:
        self.write_state = WriteState(WriteMode.CHUNKED)

    def with_until_closed_write(self) -> None:
        self.write_state = WriteState(WriteMode.UNTIL_CLOSED)

    def finished(self) -> bool:
        state = self.write_state
        if state.mode is WriteMode.COMPLETED:
            return True
        if state.mode is WriteMode.CONTENT_LENGTH:
            return state.written >= state.total
        return False

    async def write_body(self, stream, data: bytes) -> int | None:
        """Write a piece of body; returns the body bytes written, None once complete."""
        mode = self.write_state.mode
        if mode is WriteMode.COMPLETED:
            return None
        if mode is WriteMode.CONTENT_LENGTH:
            return await self._write_by_content_length(stream, bytes(data))
        if mode is WriteMode.CHUNKED:
            return await self._write_by_chunked_encoding(stream, bytes(data))
        if mode is WriteMode.UNTIL_CLOSED:
            return await self._write_until_closed(stream, bytes(data))
        raise RuntimeError("writer state is uninitialized")

    async def _write_by_content_length(self, stream, data: bytes) -> int | None:
        state = self.write_state
        if state.written >= state.total:
            return None
        to_write = state.total - state.written
        if to_write < len(data):
            log.warning("trying to write data over content-length: %d", state.total)
        else:
            to_write = len(data)
        await _write_all(stream, data[:to_write])
        self.write_state = WriteState(
            WriteMode.CONTENT_LENGTH, state.written + to_write, state.total
        )
        if self.finished():
            await stream.flush()
        return to_write

    async def _write_by_chunked_encoding(self, stream, data: bytes) -> int:
        size_line = f"{len(data):X}\r\n".encode("ascii")
        try:
            await stream.write_vectored([size_line, data, _CRLF])
        except OSError as exc:
            raise SessionError(f"error writing: {exc!r}") from exc
        await stream.flush()
        self.write_state = WriteState(
            WriteMode.CHUNKED, self.write_state.written + len(data)
        )
        return len(data)

    async def _write_until_closed(self, stream, data: bytes) -> int:
        await _write_all(stream, data)
        self.write_state = WriteState(
            WriteMode.UNTIL_CLOSED, self.write_state.written + len(data)
        )
        await stream.flush()
        return len(data)

    async def finish(self, stream) -> int | None:
        """Close the body; returns the total body bytes written, if any were framed."""
        state = self.write_state
        if state.mode in (WriteMode.COMPLETED, WriteMode.START):
            return None
        if state.mode is WriteMode.CONTENT_LENGTH:
            self.write_state = WriteState(WriteMode.COMPLETED, state.written)
            if state.written < state.total:
                raise SessionError("premature body")
            return state.written
        if state.mode is WriteMode.CHUNKED:
            try:
                await _write_all(stream, LAST_CHUNK)
            finally:
                self.write_state = WriteState(WriteMode.COMPLETED, state.written)
            return state.written
        self.write_state = WriteState(WriteMode.COMPLETED, state.written)
        return state.written