"""The client-facing side of an HTTP/1.x proxy session."""

from __future__ import annotations

from email.utils import formatdate
from urllib.parse import SplitResult

from .buffer import StorageBuffer
from .errors import SessionError
from .headers import Version
from .offset import Offset
from .request import RequestHeader
from .response import ResponseHeader
from .session import HttpSession, parse_request_head, read_head
from .utils import (
    content_length,
    is_chunked_encoding,
    is_connection_keepalive,
    is_request_expect_continue,
)

BODY_BUF_LIMIT = 1024 * 64


class Downstream(HttpSession):
    """Reads a request from a client and writes the response back to it."""

    def __init__(self, stream) -> None:
        super().__init__(stream)
        self.write_body_vec_buffer = bytearray()
        self.retry_buffer: StorageBuffer | None = None
        self.update_response_headers = True
        self.ignore_response_headers = False

    async def read_request(self) -> RequestHeader | None:
        """Read and parse a request head; None when the client closed first."""
        self.buffer = b""
        result = await read_head(self.stream, parse_request_head)
        if result is None:
            return None
        parsed, buffer = result
        header = RequestHeader(parsed.method, parsed.path, parsed.version)
        for name, value in parsed.headers:
            header.append_header(name, value)
        self._store_head(parsed.head_size, buffer)
        self.request_header = header
        self.body_reader.restart()
        self.response_header = None
        self.apply_session_keepalive()
        return header

    @property
    def request(self) -> RequestHeader:
        if self.request_header is None:
            raise RuntimeError("request header is not read yet")
        return self.request_header

    def append_header(self, name, value) -> None:
        self.request.append_header(name, value)

    def insert_header(self, name, value) -> None:
        self.request.insert_header(name, value)

    def remove_header(self, name) -> list[bytes]:
        return self.request.remove_header(name)

    def get_headers(self, name) -> list[bytes]:
        return self.request.get_headers(name)

    def get_header(self, name) -> bytes | None:
        return self.request.get_header(name)

    @property
    def version(self) -> Version:
        return self.request.version

    @property
    def method(self) -> str:
        return self.request.method

    @property
    def raw_path(self) -> bytes:
        return self.request.raw_path

    @property
    def uri(self) -> SplitResult:
        return self.request.uri

    def set_request_body_reader(self) -> None:
        """Choose how the request body is framed; only done once per request."""
        if not self.body_reader.is_start():
            return
        if self.retry_buffer is not None:
            self.retry_buffer.clear()
        body = self._body_rewind()

        if self.version is Version.HTTP_11 and self.is_request_upgrade():
            self.body_reader.with_until_closed_read(body)

        if is_chunked_encoding(self.get_header("transfer-encoding")):
            self.body_reader.with_chunked_read(body)
            return

        length = content_length(self.get_header("content-length"))
        if length is not None:
            self.body_reader.with_content_length_read(length, body)
        elif self.version is Version.HTTP_11:
            self.body_reader.with_content_length_read(0, body)
        else:
            self.body_reader.with_until_closed_read(body)

    def is_retry_buffer_truncated(self) -> bool:
        return self.retry_buffer is not None and self.retry_buffer.is_truncated()

    def enable_retry_buffer(self) -> None:
        """Keep a copy of the request body, up to a limit, for retries."""
        if self.retry_buffer is None:
            self.retry_buffer = StorageBuffer(BODY_BUF_LIMIT)

    def retry_buffer_bytes(self) -> bytes | None:
        """The stored request body; None if none is stored or it was truncated."""
        if self.retry_buffer is None or self.is_retry_buffer_truncated():
            return None
        return self.retry_buffer.getvalue()

    async def read_request_body(self) -> Offset | None:
        self.set_request_body_reader()
        return await self.body_reader.read_body(self.stream)

    async def read_request_body_bytes(self) -> bytes | None:
        """Read the next piece of body; None once the body is over."""
        offset = await self.read_request_body()
        if offset is None:
            return None
        data = self.body_reader.sliced_body(offset)
        self.buf_read_size += len(data)
        if self.retry_buffer is not None:
            self.retry_buffer.write(data)
        return data

    def is_reading_request_body_finished(self) -> bool:
        self.set_request_body_reader()
        return self.body_reader.is_finished()

    def is_request_body_empty(self) -> bool:
        self.set_request_body_reader()
        return self.body_reader.is_body_empty()

    def force_close_request_body_reader(self) -> None:
        if self.upgrade and not self.body_reader.is_finished():
            self.body_reader.with_content_length_read(0, b"")

    async def idle(self) -> int:
        """Wait for one byte from the client; returns how many bytes arrived."""
        return len(await self.stream.read(1))

    async def read_request_body_or_idle(self) -> bytes | None:
        """Read body while there is any; afterwards wait and fail when the client acts."""
        if self.is_reading_request_body_finished():
            if await self.idle() == 0:
                raise SessionError("connection closed")
            raise SessionError("connect error")
        return await self.read_request_body_bytes()

    def set_response_body_writer(self, resp_header: ResponseHeader) -> None:
        code = resp_header.status_code
        if code in (204, 304) or self.method == "HEAD":
            self.body_writer.with_content_length_write(0)
            return
        if resp_header.is_informational and code != 101:
            return
        if self.is_session_upgrade(resp_header):
            self.body_writer.with_until_closed_write()
            return
        if is_chunked_encoding(resp_header.get_header("transfer-encoding")):
            self.body_writer.with_chunked_encoding_write()
            return
        length = content_length(resp_header.get_header("content-length"))
        if length is not None:
            self.body_writer.with_content_length_write(length)
        else:
            self.body_writer.with_until_closed_write()

    async def write_response_headers(self, resp_header: ResponseHeader) -> None:
        """Send a response head unless a final one was already sent.

        Date and Connection headers are set on ``resp_header`` itself when
        ``update_response_headers`` is on and the response is final.
        """
        code = resp_header.status_code
        if resp_header.is_informational and self.is_ignoring_response_headers(code):
            return

        sent = self.response_header
        if sent is not None and (not sent.is_informational or self.upgrade):
            return

        if not resp_header.is_informational and self.update_response_headers:
            resp_header.insert_header("Date", formatdate(usegmt=True))
            connection = "keep-alive" if self.is_session_keepalive() else "close"
            resp_header.insert_header("Connection", connection)

        if code == 101:
            self.set_keepalive(None)

        if code == 101 or not resp_header.is_informational:
            if self.is_session_upgrade(resp_header):
                self.upgrade = True
            else:
                self.body_reader.with_content_length_read(0, b"")
            self.set_response_body_writer(resp_header)

        flush = (
            resp_header.is_informational
            or resp_header.get_header("content-length") is None
        )
        data = resp_header.to_bytes()
        try:
            await self.stream.write(data)
        except OSError as exc:
            raise SessionError(f"error writing response header: {exc}") from exc
        if flush or self.body_writer.finished():
            await self.stream.flush()
        self.response_header = resp_header
        self.buf_write_size += len(data)

    async def write_response_body(self, data: bytes) -> int | None:
        written = await self.body_writer.write_body(self.stream, data)
        if written:
            self.buf_write_size += written
        return written

    async def vectored_write_response_body(self) -> int | None:
        """Write everything gathered in ``write_body_vec_buffer`` at once."""
        if not self.write_body_vec_buffer:
            return None
        try:
            written = await self.body_writer.write_body(
                self.stream, bytes(self.write_body_vec_buffer)
            )
        finally:
            self.write_body_vec_buffer.clear()
        if written:
            self.buf_write_size += written
        return written

    async def finish_writing_response_body(self) -> int | None:
        """End the response body and flush what is left."""
        result = await self.body_writer.finish(self.stream)
        await self.stream.flush()
        self.force_close_request_body_reader()
        return result

    def is_request_expect_continue(self) -> bool:
        return is_request_expect_continue(self.request)

    def is_ignoring_response_headers(self, status_code: int) -> bool:
        return (
            self.ignore_response_headers
            and status_code != 100
            and not (status_code == 100 and self.is_request_expect_continue())
        )

    def is_connection_keepalive(self) -> bool | None:
        value = self.get_header("connection")
        if value is None:
            return None
        return is_connection_keepalive(value)

    def keepalive_value(self) -> tuple[int | None, int | None]:
        """Keepalive timeout and maximum use; the client side sets neither."""
        return None, None

    def apply_session_keepalive(self) -> None:
        keepalive = self.is_connection_keepalive()
        if keepalive is True:
            timeout, _ = self.keepalive_value()
            self.set_keepalive(timeout if timeout is not None else 0)
        elif keepalive is False:
            self.set_keepalive(None)
        elif self.version is Version.HTTP_11:
            self.set_keepalive(0)
        else:
            self.set_keepalive(None)