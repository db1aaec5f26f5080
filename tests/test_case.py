import pytest

from proxysession.case import case_header_name, titled_header_name


@pytest.mark.parametrize(
    "name, titled",
    [
        ("content-type", "Content-Type"),
        ("transfer-encoding", "Transfer-Encoding"),
        ("set-cookie", "Set-Cookie"),
        ("host", "Host"),
    ],
)
def test_known_headers_are_titled(name, titled):
    assert titled_header_name(name) == titled


def test_titling_ignores_input_case():
    assert titled_header_name("CONTENT-LENGTH") == "Content-Length"
    assert titled_header_name(b"cache-control") == "Cache-Control"


def test_unknown_header_has_no_title():
    assert titled_header_name("x-request-id") is None


def test_titled_form_is_case_insensitive_equal():
    for name in ("age", "date", "server", "connection"):
        assert titled_header_name(name).lower() == name


def test_case_header_name_keeps_case():
    assert case_header_name("X-Custom-Header") == "X-Custom-Header".encode()
    assert case_header_name(b"x-MiXeD") == b"x-MiXeD"
    assert case_header_name(bytearray(b"Host")) == b"Host"


def test_case_header_name_rejects_other_types():
    with pytest.raises(TypeError):
        case_header_name(42)