# proxysession

Asyncio building blocks for an HTTP/1.x proxy. The package parses request
and response heads and builds them again. It frames message bodies and
tracks keepalive. It also drives the client-facing (downstream) side of a
proxy session.

## Modules

- `proxysession.headers`
  - `Version` is an enum of HTTP versions.
  - `HeaderMap` is an ordered multimap of headers. Lookups ignore case, and
    each name keeps the spelling it was added with.
  - `HeaderError` is raised for an invalid header name, header value, method,
    path or status.
- `proxysession.request.RequestHeader` holds the method, raw path, version and
  headers of a request.
  - `uri` gives the request target split by `urllib.parse.urlsplit`.
  - `to_bytes()` gives the request head as it goes on the wire.
- `proxysession.response.ResponseHeader` holds the status, version, reason
  phrase and headers of a response.
  - When no custom reason is set, the canonical reason for the status is used.
  - `to_bytes()` gives the response head as it goes on the wire.
- `proxysession.reader.BodyReader` reads a body in one of three modes: by
  content length (`with_content_length_read`), as chunked transfer encoding
  (`with_chunked_read`), or until the connection closes
  (`with_until_closed_read`).
  - `read_body(stream)` returns an `Offset` into the reader's buffer, or None
    once the body is over.
  - `sliced_body(offset)` returns the bytes that offset covers.
  - `parse_chunk_size` parses a single chunk-size line.
- `proxysession.writer.BodyWriter` writes a body in the same three modes.
  - `finish(stream)` writes the terminating chunk for a chunked body.
  - For a content-length body, `finish(stream)` raises `SessionError` with
    "premature body" if fewer bytes were written than declared.
- `proxysession.session` holds the head parsing and the shared session state.
  - `parse_request_head` and `parse_response_head` return None while a head is
    incomplete. The response parser also accepts spaces before a header colon
    and folded header lines.
  - `read_head(stream, parse)` reads until a head is complete. It allows at
    most 8192 bytes.
  - `HttpSession` is the state both session sides share: buffers, body
    reader and writer, keepalive status and the upgrade flag.
- `proxysession.downstream.Downstream` is the client-facing side of a session.
  It covers:
  - reading the request head;
  - choosing the request body framing;
  - an optional retry buffer that keeps up to 64 KiB of the request body;
  - writing the response head and body back to the client.

  When the response is final, `write_response_headers` sets `Date` and
  `Connection` on it, unless `update_response_headers` is False.
- `proxysession.utils` interprets header values: `is_chunked_encoding`,
  `content_length`, `parse_connection_header`, `is_connection_keepalive`,
  `parse_keep_alive_header`, `is_request_upgrade`, `is_response_upgrade`,
  `is_request_expect_continue`.
- `proxysession.keepalive` defines `KeepaliveStatus`, `KeepaliveMode` and
  `ConnectionValue`.
- `proxysession.task` defines the units of work passed between the session
  sides: `HeaderTask`, `BodyTask`, `TrailerTask`, `DoneTask` and `FailedTask`.
  Each has an `is_end()` method.
- `proxysession.buffer.StorageBuffer` is a bounded byte buffer. Once a write
  would overflow it, the buffer is marked truncated.
- `proxysession.offset` defines `Offset` and `KVOffset`, ranges into byte
  buffers.
- `proxysession.duration.AccumulatedDuration` adds up time spent between
  start and stop calls. Its `timing()` context manager times a block.

## Streams

The session classes do not open connections. The caller passes in a stream
object that has these coroutine methods:

- `read(n)` returns up to `n` bytes, and `b""` at end of stream;
- `write(data)`;
- `write_vectored(chunks)`;
- `flush()`.

## Example

```python
import asyncio

from proxysession.downstream import Downstream
from proxysession.response import ResponseHeader


class AsyncioStream:
    def __init__(self, reader, writer):
        self.reader = reader
        self.writer = writer

    async def read(self, n):
        return await self.reader.read(n)

    async def write(self, data):
        self.writer.write(data)

    async def write_vectored(self, chunks):
        self.writer.writelines(chunks)

    async def flush(self):
        await self.writer.drain()


async def handle(reader, writer):
    downstream = Downstream(AsyncioStream(reader, writer))
    request = await downstream.read_request()
    if request is None:
        writer.close()
        return

    body = b""
    while not downstream.is_reading_request_body_finished():
        piece = await downstream.read_request_body_bytes()
        if piece is None:
            break
        body += piece

    reply = f"{request.method} {request.raw_path.decode()} {len(body)}\n".encode()
    response = ResponseHeader(200)
    response.insert_header("Content-Length", len(reply))
    await downstream.write_response_headers(response)
    await downstream.write_response_body(reply)
    await downstream.finish_writing_response_body()
    writer.close()


async def main():
    server = await asyncio.start_server(handle, "localhost", 8000)
    async with server:
        await server.serve_forever()


asyncio.run(main())
```

## What it does not do

The package stops at the client-facing side of a session. It has no
server-facing session class for writing a request to an origin server and
reading the reply. It has no stream type that opens TCP or Unix connections.
It has no functions that carry `Task` values between the two sides. Forwarding
to an origin is left to the caller. The caller can build on `HttpSession`,
`parse_response_head`, `BodyReader` and `BodyWriter` for that.

## Errors

Failures on the wire raise `proxysession.errors.SessionError`. Examples are:

- a closed connection;
- a head larger than the limit;
- a malformed chunk;
- a write that failed;
- a content-length body finished too early.

Invalid header names, header values, methods, paths or status codes raise
`proxysession.headers.HeaderError`.

## Running the tests

```
pip install -e ".[test]"
pytest
```