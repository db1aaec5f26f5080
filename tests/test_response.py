import pytest

from proxysession.headers import HeaderError, Version
from proxysession.response import ResponseHeader


def test_to_bytes_wire_format():
    resp = ResponseHeader(200, Version.HTTP_11)
    resp.append_header("Content-Length", 0)
    assert resp.to_bytes() == b"HTTP/1.1 200 OK\r\nContent-Length: 0\r\n\r\n"


@pytest.mark.parametrize(
    "code, reason",
    [(200, "OK"), (404, "Not Found"), (101, "Switching Protocols"), (304, "Not Modified")],
)
def test_canonical_reasons(code, reason):
    assert ResponseHeader(code).reason_phrase == reason


def test_custom_reason_used_on_wire():
    resp = ResponseHeader(200)
    resp.set_reason_phrase("Fine")
    assert resp.reason_phrase == "Fine"
    assert resp.to_bytes().startswith(b"HTTP/1.1 200 Fine\r\n")


def test_canonical_reason_not_stored():
    resp = ResponseHeader(200)
    resp.set_reason_phrase("OK")
    resp.set_status_code(404)
    assert resp.reason_phrase == "Not Found"


def test_clearing_reason_falls_back_to_canonical():
    resp = ResponseHeader(404)
    resp.set_reason_phrase("Gone Fishing")
    resp.set_reason_phrase(None)
    assert resp.reason_phrase == "Not Found"


def test_unknown_status_has_no_reason():
    resp = ResponseHeader(599, Version.HTTP_10)
    assert resp.reason_phrase is None
    assert resp.to_bytes() == b"HTTP/1.0 599 \r\n\r\n"


def test_status_from_string():
    resp = ResponseHeader("204")
    assert resp.status_code == 204
    assert not resp.is_informational


def test_is_informational():
    assert ResponseHeader(100).is_informational
    assert ResponseHeader(101).is_informational
    assert not ResponseHeader(200).is_informational


@pytest.mark.parametrize("code", [99, 1000, "20", "abc", True, None])
def test_invalid_status_rejected(code):
    with pytest.raises(HeaderError):
        ResponseHeader(code)


def test_set_status_code_validates():
    resp = ResponseHeader(200)
    with pytest.raises(HeaderError):
        resp.set_status_code(42)
    assert resp.status_code == 200


def test_header_helpers_and_order():
    resp = ResponseHeader(200)
    resp.append_header("Server", "proxy")
    resp.append_header("Set-Cookie", "a=1")
    resp.append_header("set-cookie", "b=2")
    assert resp.get_headers("SET-COOKIE") == [b"a=1", b"b=2"]
    resp.insert_header("server", "other")
    assert resp.get_header("Server") == b"other"
    assert resp.remove_header("set-cookie") == [b"a=1", b"b=2"]
    assert resp.to_bytes().endswith(b"server: other\r\n\r\n")


def test_raw_version():
    assert ResponseHeader(200, "HTTP/2").raw_version == "HTTP/2"