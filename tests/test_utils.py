import pytest

from proxysession.headers import Version
from proxysession.keepalive import ConnectionValue
from proxysession.request import RequestHeader
from proxysession.response import ResponseHeader
from proxysession.utils import (
    content_length,
    is_chunked_encoding,
    is_connection_keepalive,
    is_request_expect_continue,
    is_request_upgrade,
    is_response_upgrade,
    parse_connection_header,
    parse_keep_alive_header,
)


@pytest.mark.parametrize(
    "value, expected",
    [
        (b"chunked", True),
        (b"CHUNKED", True),
        (b"Chunked", True),
        (b"gzip, chunked", False),
        (b"", False),
        (None, False),
    ],
)
def test_is_chunked_encoding(value, expected):
    assert is_chunked_encoding(value) is expected


@pytest.mark.parametrize(
    "value, expected",
    [
        (b"42", 42),
        (b"0", 0),
        (b"+7", 7),
        (b"9223372036854775807", 9223372036854775807),
    ],
)
def test_content_length_valid(value, expected):
    assert content_length(value) == expected


@pytest.mark.parametrize(
    "value",
    [b"-1", b"abc", b" 5", b"1_0", b"", b"\xff", b"9223372036854775808", None],
)
def test_content_length_invalid(value):
    assert content_length(value) is None


def _request(version=Version.HTTP_11, **headers):
    request = RequestHeader("GET", "/", version)
    for name, value in headers.items():
        request.append_header(name.replace("_", "-"), value)
    return request


def test_request_upgrade_needs_http11_and_header():
    assert is_request_upgrade(_request(Upgrade="websocket")) is True
    assert is_request_upgrade(_request(Version.HTTP_10, Upgrade="websocket")) is False
    assert is_request_upgrade(_request()) is False


def test_response_upgrade_needs_101_and_http11():
    assert is_response_upgrade(ResponseHeader(101)) is True
    assert is_response_upgrade(ResponseHeader(200)) is False
    assert is_response_upgrade(ResponseHeader(101, Version.HTTP_10)) is False


def test_expect_continue():
    assert is_request_expect_continue(_request(Expect="100-continue")) is True
    assert is_request_expect_continue(_request(Expect="100-Continue")) is True
    assert is_request_expect_continue(_request(Version.HTTP_10, Expect="100-continue")) is False
    assert is_request_expect_continue(_request(Expect="something")) is False
    assert is_request_expect_continue(_request()) is False


@pytest.mark.parametrize(
    "value, expected",
    [
        (b"close", ConnectionValue(close=True)),
        (b"Close", ConnectionValue(close=True)),
        (b"Keep-Alive", ConnectionValue(keep_alive=True)),
        (b"upgrade", ConnectionValue(upgrade=True)),
        (b"Upgrade, close", ConnectionValue(upgrade=True, close=True)),
        (b"keep-alive, upgrade", ConnectionValue(upgrade=True)),
        (b" , close ,", ConnectionValue(close=True)),
        (b"foo", ConnectionValue()),
        (b"\xff", ConnectionValue()),
    ],
)
def test_parse_connection_header(value, expected):
    assert parse_connection_header(value) == expected


@pytest.mark.parametrize(
    "value, expected",
    [
        (b"keep-alive", True),
        (b"close", False),
        (b"keep-alive, close", False),
        (b"upgrade", None),
        (b"foo", None),
    ],
)
def test_is_connection_keepalive(value, expected):
    assert is_connection_keepalive(value) is expected


@pytest.mark.parametrize(
    "value, expected",
    [
        (b"timeout=5, max=100", (5, 100)),
        (b"max=3", (None, 3)),
        (b"timeout = 7", (7, None)),
        (b"timeout=abc", (None, None)),
        (b"Timeout=5", (None, None)),
        (b"timeout", (None, None)),
        (b"\xff", (None, None)),
        (None, (None, None)),
    ],
)
def test_parse_keep_alive_header(value, expected):
    assert parse_keep_alive_header(value) == expected


def test_parse_keep_alive_header_later_value_wins():
    assert parse_keep_alive_header(b"timeout=5, timeout=9") == (9, None)