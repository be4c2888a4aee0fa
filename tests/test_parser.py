from urllib.parse import quote, quote_plus

import pytest

from wizweb.parser import (
    RES_CGIHEAD_OK,
    RES_HTMLHEAD_OK,
    ContentType,
    HttpRequest,
    Method,
    atoi,
    find_http_uri_type,
    get_http_param_value,
    get_http_uri_name,
    inet_addr,
    make_http_response_head,
    mid,
    parse_http_request,
    unescape_http_url,
)


def _post(body: str, length: int | None = None) -> str:
    if length is None:
        length = len(body)
    return (
        "/set_devinfo.cgi HTTP/1.1\r\nHost: device\r\n"
        f"Content-Length: {length}\r\n\r\n{body}"
    )


@pytest.mark.parametrize("text", ["Hello World", "a/b?c=d&e", "100% sure", "plain"])
def test_unescape_inverts_quote(text):
    assert unescape_http_url(quote(text, safe="")) == text


def test_unescape_leaves_plain_text():
    assert unescape_http_url("index.html") == "index.html"


def test_unescape_lowercase_hex():
    assert unescape_http_url("%2f") == unescape_http_url("%2F")


def test_response_head_html():
    assert make_http_response_head(ContentType.HTML, 78) == RES_HTMLHEAD_OK + "78\r\n\r\n"


@pytest.mark.parametrize(
    "content_type",
    [ContentType.CGI, ContentType.PNG, ContentType.JSON, ContentType.SVG, ContentType.TEXT],
)
def test_response_head_shape(content_type):
    head = make_http_response_head(content_type, 42)
    assert head.startswith("HTTP/1.1 200 OK\r\nContent-Type: ")
    assert head.endswith("Content-Length: 42\r\n\r\n")


def test_response_head_cgi_matches_constant():
    assert make_http_response_head(ContentType.CGI, 5) == RES_CGIHEAD_OK + "5\r\n\r\n"


@pytest.mark.parametrize("content_type", [ContentType.MPEG, ContentType.PDF, ContentType.ERR])
def test_response_head_unknown_type(content_type):
    with pytest.raises(ValueError):
        make_http_response_head(content_type, 1)


@pytest.mark.parametrize(
    "name, expected",
    [
        ("index.html", ContentType.HTML),
        ("page.htm", ContentType.HTML),
        ("logo.gif", ContentType.GIF),
        ("notes.txt", ContentType.TEXT),
        ("photo.jpg", ContentType.JPEG),
        ("get_devinfo.cgi", ContentType.CGI),
        ("SET.CGI", ContentType.CGI),
        ("data.json", ContentType.JSON),
        ("app.js", ContentType.JS),
        ("style.css", ContentType.CSS),
        ("icon.ico", ContentType.ICO),
        ("font.woff", ContentType.WOFF),
        ("image.svg", ContentType.SVG),
        ("archive.zip", ContentType.ERR),
    ],
)
def test_find_uri_type(name, expected):
    assert find_http_uri_type(name) is expected


def test_find_uri_type_first_group_wins():
    assert find_http_uri_type("a.html.gif") is ContentType.HTML


def test_parse_get():
    req = parse_http_request(b"GET /index.html HTTP/1.1\r\nHost: device\r\n\r\n")
    assert req.method is Method.GET
    assert req.uri == "/index.html"


def test_parse_lowercase_head():
    req = parse_http_request("head /a.css HTTP/1.1\r\n\r\n")
    assert req.method is Method.HEAD
    assert req.uri == "/a.css"


def test_parse_post_keeps_rest():
    rest = _post("opmode=1&baud=2")
    req = parse_http_request("POST " + rest)
    assert req.method is Method.POST
    assert req.uri == rest


def test_parse_unknown_method():
    req = parse_http_request("PUT /x HTTP/1.1")
    assert req.method is Method.ERR
    assert req.uri == "PUT"


@pytest.mark.parametrize("data", ["", "   ", "GET", "POST"])
def test_parse_incomplete(data):
    assert parse_http_request(data) == HttpRequest(method=Method.ERR, uri="")


def test_param_values():
    request = _post("opmode=1&baud=2")
    assert get_http_param_value(request, "opmode") == "1"
    assert get_http_param_value(request, "baud") == "2"


def test_param_missing():
    assert get_http_param_value(_post("opmode=1"), "baud") is None


def test_param_unescaped():
    request = _post("name=" + quote_plus("a b!/c"))
    assert get_http_param_value(request, "name") == "a b!/c"


def test_param_empty_value():
    assert get_http_param_value(_post("opmode=&baud=2"), "opmode") == ""


def test_param_cut_to_content_length():
    body = "baud=2&opmode=1"
    request = _post(body, length=len("baud=2"))
    assert get_http_param_value(request, "baud") == "2"
    assert get_http_param_value(request, "opmode") is None


def test_param_without_content_length():
    with pytest.raises(ValueError):
        get_http_param_value("/x HTTP/1.1\r\n\r\nopmode=1", "opmode")


def test_uri_name_strips_slash_and_query():
    assert get_http_uri_name("/get_devinfo.cgi?x=1") == "get_devinfo.cgi"
    assert get_http_uri_name("/index.html") == "index.html"


def test_uri_name_root():
    assert get_http_uri_name("/") == "/"


def test_uri_name_empty():
    with pytest.raises(ValueError):
        get_http_uri_name("??")


def test_inet_addr_decimal():
    assert inet_addr("192.168.11.2") == bytes([192, 168, 11, 2])


def test_inet_addr_hex_matches_decimal():
    assert inet_addr("0xC0.0xA8.0x0B.0x02") == inet_addr("192.168.11.2")


def test_inet_addr_too_short():
    with pytest.raises(ValueError):
        inet_addr("10.0.1")


@pytest.mark.parametrize("text, base", [("1234", 10), ("ff", 16), ("7FF", 16), ("0", 10)])
def test_atoi_matches_int(text, base):
    assert atoi(text, base) == int(text, base)


def test_atoi_stops_at_space():
    assert atoi("12 34", 10) == atoi("12", 10)


def test_atoi_wraps_to_16_bits():
    assert atoi("70000", 10) == 70000 & 0xFFFF


def test_mid_extracts_between():
    assert mid("Content-Length: 15\r\nHost: x", "Content-Length: ", "\r\n") == "15"


def test_mid_missing_start():
    with pytest.raises(ValueError):
        mid("abc", "X", "c")


def test_mid_missing_end():
    with pytest.raises(ValueError):
        mid("abcXdef", "X", "Y")