"""Reading an HTTP/1.x message body by content length, chunks or until close."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, replace

from .errors import SessionError
from .offset import Offset

log = logging.getLogger(__name__)

BODY_BUFFER_SIZE = 1024 * 64
PARTIAL_CHUNK_HEAD_LIMIT = 1024 * 8
_MAX_CHUNK_SIZE_DIGITS = 16


class ReadMode(enum.Enum):
    START = "start"
    COMPLETED = "completed"
    DONE = "done"
    PARTIAL = "partial"
    CHUNKED = "chunked"
    UNTIL_CLOSED = "until_closed"


@dataclass(frozen=True)
class ReadState:
    """Where a body read stands.

    ``read`` counts body bytes handed out so far. For PARTIAL, ``remaining``
    is what is still to read. For CHUNKED, ``buf_start`` is where the next
    chunk starts in the current buffer, ``buf_end`` where the buffer's data
    ends, and ``remaining`` how many bytes the current chunk still expects
    from the connection.
    """

    mode: ReadMode = ReadMode.START
    read: int = 0
    remaining: int = 0
    buf_start: int = 0
    buf_end: int = 0

    def finish(self, additional_bytes: int) -> ReadState:
        """Move to COMPLETED; other modes stay as they are."""
        if self.mode is ReadMode.PARTIAL:
            return ReadState(ReadMode.COMPLETED, self.read + self.remaining)
        if self.mode in (ReadMode.CHUNKED, ReadMode.UNTIL_CLOSED):
            return ReadState(ReadMode.COMPLETED, self.read + additional_bytes)
        return self

    def done(self, additional_bytes: int) -> ReadState:
        """Move to DONE after an interrupted read; other modes stay as they are."""
        if self.mode in (ReadMode.PARTIAL, ReadMode.CHUNKED, ReadMode.UNTIL_CLOSED):
            return ReadState(ReadMode.DONE, self.read + additional_bytes)
        return self

    def partial_chunk(self, bytes_read: int, bytes_to_read: int) -> ReadState:
        """A chunk continues beyond the current buffer."""
        if self.mode is not ReadMode.CHUNKED:
            return self
        return ReadState(ReadMode.CHUNKED, self.read + bytes_read, remaining=bytes_to_read)

    def multi_chunk(self, bytes_read: int, buf_start_index: int) -> ReadState:
        """More chunks follow inside the current buffer from ``buf_start_index``."""
        if self.mode is not ReadMode.CHUNKED:
            return self
        return replace(
            self, read=self.read + bytes_read, buf_start=buf_start_index, remaining=0
        )

    def partial_chunk_head(self, head_end: int, head_size: int) -> ReadState:
        """A chunk-size line is cut off; more must be read to complete it."""
        if self.mode is not ReadMode.CHUNKED:
            return self
        return replace(self, buf_start=0, buf_end=head_end, remaining=head_size)

    def new_buf(self, buf_end: int) -> ReadState:
        """A fresh buffer holding ``buf_end`` bytes was read."""
        if self.mode is not ReadMode.CHUNKED:
            return self
        return replace(self, buf_start=0, buf_end=buf_end, remaining=0)


def _hex_digit(byte: int) -> int | None:
    if 0x30 <= byte <= 0x39:
        return byte - 0x30
    if 0x61 <= byte <= 0x66:
        return byte - 0x61 + 10
    if 0x41 <= byte <= 0x46:
        return byte - 0x41 + 10
    return None


def parse_chunk_size(buf) -> tuple[int, int] | None:
    """Parse a chunk-size line.

    Returns ``(payload_index, chunk_size)`` once the line is complete, None
    when more bytes are needed, and raises SessionError for a malformed line.
    """
    data = bytes(buf)
    size = 0
    digits = 0
    in_chunk_size = True
    in_ext = False
    pos = 0
    while True:
        if pos >= len(data):
            return None
        byte = data[pos]
        pos += 1
        value = _hex_digit(byte) if in_chunk_size else None
        if value is not None:
            if digits >= _MAX_CHUNK_SIZE_DIGITS:
                raise SessionError("invalid chunk size")
            digits += 1
            size = size * 16 + value
        elif byte == 0x0D:
            if pos >= len(data):
                return None
            if data[pos] != 0x0A:
                raise SessionError("invalid chunk size")
            return pos + 1, size
        elif byte == 0x3B and not in_ext:
            in_ext = True
            in_chunk_size = False
        elif byte in (0x09, 0x20) and not in_ext:
            in_chunk_size = False
        elif not in_ext:
            raise SessionError("invalid chunk size")


class BodyReader:
    """Reads a body into an internal buffer and hands out offsets into it."""

    def __init__(self) -> None:
        self.read_state = ReadState()
        self.body_buffer: bytearray | None = None
        self.body_size = BODY_BUFFER_SIZE
        self.rewind_buf_size = 0

    def is_start(self) -> bool:
        return self.read_state.mode is ReadMode.START

    def restart(self) -> None:
        self.read_state = ReadState()

    def sliced_body(self, offset: Offset) -> bytes:
        """The body bytes an offset returned by ``read_body`` refers to."""
        if self.body_buffer is None:
            raise RuntimeError("reader has no body buffer")
        return bytes(offset.get(self.body_buffer))

    def is_finished(self) -> bool:
        return self.read_state.mode in (ReadMode.COMPLETED, ReadMode.DONE)

    def is_body_empty(self) -> bool:
        return self.read_state == ReadState(ReadMode.COMPLETED, 0)

    def _set_buffer(self, rewind) -> None:
        buffer = bytearray(rewind)
        self.rewind_buf_size = len(buffer)
        if self.body_size > len(buffer):
            buffer.extend(bytes(self.body_size - len(buffer)))
        self.body_buffer = buffer

    def with_chunked_read(self, rewind) -> None:
        self.read_state = ReadState(ReadMode.CHUNKED)
        self._set_buffer(rewind)

    def with_content_length_read(self, length: int, rewind) -> None:
        if length == 0:
            self.read_state = ReadState(ReadMode.COMPLETED, 0)
        else:
            self._set_buffer(rewind)
            self.read_state = ReadState(ReadMode.PARTIAL, 0, remaining=length)

    def with_until_closed_read(self, rewind) -> None:
        self._set_buffer(rewind)
        self.read_state = ReadState(ReadMode.UNTIL_CLOSED)

    async def _fill(self, stream, start: int) -> int:
        buffer = self.body_buffer
        data = await stream.read(len(buffer) - start)
        buffer[start:start + len(data)] = data
        return len(data)

    async def _take_rewind_or_read(self, stream) -> int:
        n = self.rewind_buf_size
        self.rewind_buf_size = 0
        if n == 0:
            n = await self._fill(stream, 0)
        return n

    async def read_body(self, stream) -> Offset | None:
        """Read the next piece of body; None once the body is over."""
        mode = self.read_state.mode
        if mode in (ReadMode.COMPLETED, ReadMode.DONE):
            return None
        if mode is ReadMode.PARTIAL:
            return await self._read_partially(stream)
        if mode is ReadMode.CHUNKED:
            return await self._read_chunked(stream)
        if mode is ReadMode.UNTIL_CLOSED:
            return await self._read_until_closed(stream)
        raise RuntimeError("reader is not initialized")

    async def _read_partially(self, stream) -> Offset | None:
        n = await self._take_rewind_or_read(stream)
        state = self.read_state
        if n == 0:
            self.read_state = ReadState(ReadMode.DONE, state.read)
            raise SessionError("connection closed")
        if n >= state.remaining:
            if n > state.remaining:
                log.warning("peer sent more data than expected")
            self.read_state = ReadState(ReadMode.COMPLETED, state.read + state.remaining)
            return Offset.from_length(0, state.remaining)
        self.read_state = ReadState(
            ReadMode.PARTIAL, state.read + n, remaining=state.remaining - n
        )
        return Offset.from_length(0, n)

    async def _read_until_closed(self, stream) -> Offset | None:
        n = await self._take_rewind_or_read(stream)
        read = self.read_state.read
        if n == 0:
            self.read_state = ReadState(ReadMode.COMPLETED, read)
            return None
        self.read_state = ReadState(ReadMode.UNTIL_CLOSED, read + n)
        return Offset.from_length(0, n)

    async def _read_chunked(self, stream) -> Offset | None:
        state = self.read_state
        buf_start = state.buf_start
        buf_end = state.buf_end
        expecting = state.remaining

        if buf_start == 0:
            if buf_end == 0:
                buf_end = self.rewind_buf_size
                self.rewind_buf_size = 0
                if buf_end == 0:
                    buf_end = await self._fill(stream, 0)
            else:
                buffer = self.body_buffer
                buffer[0:expecting] = buffer[buf_end - expecting:buf_end]
                new_bytes = await self._fill(stream, expecting)
                buf_end = expecting + new_bytes
                expecting = 0
            self.read_state = self.read_state.new_buf(buf_end)

        if buf_end == 0:
            self.read_state = self.read_state.done(0)
            log.debug("chunked body closed after %d bytes", state.read)
            raise SessionError("connection closed")

        if expecting > 0:
            if expecting >= buf_end + 2:
                self.read_state = self.read_state.partial_chunk(buf_end, expecting - buf_end)
                return Offset.from_length(0, buf_end)
            # the rest may be payload plus CRLF or only the CRLF
            payload_size = expecting - 2 if expecting > 2 else 0
            if expecting >= buf_end:
                self.read_state = self.read_state.partial_chunk(
                    payload_size, expecting - buf_end
                )
                return Offset.from_length(0, payload_size)
            self.read_state = self.read_state.multi_chunk(payload_size, expecting)
            return Offset.from_length(0, payload_size)

        return self._parse_chunked_buf(buf_start, buf_end)

    def _parse_chunked_buf(self, start: int, end: int) -> Offset | None:
        buffer = self.body_buffer[start:end]
        try:
            status = parse_chunk_size(buffer)
        except SessionError:
            self.read_state = self.read_state.done(0)
            raise

        if status is None:
            if len(buffer) > PARTIAL_CHUNK_HEAD_LIMIT:
                self.read_state = self.read_state.done(0)
                raise SessionError("chunk is over limit")
            self.read_state = self.read_state.partial_chunk_head(end, len(buffer))
            return Offset.from_length(0, 0)

        payload_index, chunk_size = status
        if chunk_size == 0:
            self.read_state = self.read_state.finish(0)
            return None

        data_end = payload_index + chunk_size
        chunk_end = data_end + 2
        if chunk_end >= len(buffer):
            actual = len(buffer) - payload_index if data_end > len(buffer) else chunk_size
            self.read_state = self.read_state.partial_chunk(actual, chunk_end - len(buffer))
            return Offset.from_length(start + payload_index, actual)

        self.read_state = self.read_state.multi_chunk(chunk_size, start + chunk_end)
        return Offset.from_length(start + payload_index, chunk_size)