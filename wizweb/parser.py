"""HTTP request parsing and response-header helpers for the embedded web server."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

HTTP_SERVER_PORT = 80
MAX_URI_SIZE = 512

STATUS_OK = 200
STATUS_CREATED = 201
STATUS_ACCEPTED = 202
STATUS_NO_CONTENT = 204
STATUS_MV_PERM = 301
STATUS_MV_TEMP = 302
STATUS_NOT_MODIF = 304
STATUS_BAD_REQ = 400
STATUS_UNAUTH = 401
STATUS_FORBIDDEN = 403
STATUS_NOT_FOUND = 404
STATUS_INT_SERR = 500
STATUS_NOT_IMPL = 501
STATUS_BAD_GATEWAY = 502
STATUS_SERV_UNAVAIL = 503

ERROR_HTML_PAGE = (
    "HTTP/1.1 404 Not Found\r\nContent-Type: text/html\r\nContent-Length: 78\r\n\r\n"
    "<HTML>\r\n<BODY>\r\nSorry, the page you requested was not found.\r\n</BODY>\r\n</HTML>\r\n"
)
ERROR_REQUEST_PAGE = (
    "HTTP/1.1 400 OK\r\nContent-Type: text/html\r\nContent-Length: 50\r\n\r\n"
    "<HTML>\r\n<BODY>\r\nInvalid request.\r\n</BODY>\r\n</HTML>\r\n"
)

HTML_HEADER = "HTTP/1.1 200 OK\r\nContent-Type: text/html\r\nContent-Length: "
RES_HTMLHEAD_OK = (
    "HTTP/1.1 200 OK\r\nContent-Type: text/html\r\nConnection: keep-alive\r\nContent-Length: "
)
RES_TEXTHEAD_OK = "HTTP/1.1 200 OK\r\nContent-Type: text/plain\r\nContent-Length: "
RES_GIFHEAD_OK = "HTTP/1.1 200 OK\r\nContent-Type: image/gif\r\nContent-Length: "
RES_JPEGHEAD_OK = "HTTP/1.1 200 OK\r\nContent-Type: image/jpeg\r\nContent-Length: "
RES_PNGHEAD_OK = "HTTP/1.1 200 OK\r\nContent-Type: image/png\r\nContent-Length: "
RES_FLASHHEAD_OK = (
    "HTTP/1.1 200 OK\r\nContent-Type: application/x-shockwave-flash\r\nContent-Length: "
)
RES_XMLHEAD_OK = (
    "HTTP/1.1 200 OK\r\nContent-Type: text/xml\r\nConnection: keep-alive\r\nContent-Length: "
)
RES_CSSHEAD_OK = "HTTP/1.1 200 OK\r\nContent-Type: text/css\r\nContent-Length: "
RES_JSHEAD_OK = "HTTP/1.1 200 OK\r\nContent-Type: application/javascript\r\nContent-Length: "
RES_JSONHEAD_OK = "HTTP/1.1 200 OK\r\nContent-Type: application/json\r\nContent-Length: "
RES_ICOHEAD_OK = "HTTP/1.1 200 OK\r\nContent-Type: image/x-icon\r\nContent-Length: "
RES_CGIHEAD_OK = "HTTP/1.1 200 OK\r\nContent-Type: text/html\r\nContent-Length: "
RES_TTFHEAD_OK = (
    "HTTP/1.1 200 OK\r\nContent-Type: application/x-font-truetype\r\nContent-Length: "
)
RES_OTFHEAD_OK = (
    "HTTP/1.1 200 OK\r\nContent-Type: application/x-font-opentype\r\nContent-Length: "
)
RES_WOFFHEAD_OK = "HTTP/1.1 200 OK\r\nContent-Type: application/font-woff\r\nContent-Length: "
RES_EOTHEAD_OK = (
    "HTTP/1.1 200 OK\r\nContent-Type: application/vnd.ms-fontobject\r\nContent-Length: "
)
RES_SVGHEAD_OK = "HTTP/1.1 200 OK\r\nContent-Type: image/svg+xml\r\nContent-Length: "


class Method(IntEnum):
    """HTTP request method."""

    ERR = 0
    GET = 1
    HEAD = 2
    POST = 3


class ContentType(IntEnum):
    """Type of the requested resource, decided from its file extension."""

    ERR = 0
    HTML = 1
    GIF = 2
    TEXT = 3
    JPEG = 4
    FLASH = 5
    MPEG = 6
    PDF = 7
    CGI = 8
    XML = 9
    CSS = 10
    JS = 11
    JSON = 12
    PNG = 13
    ICO = 14
    TTF = 20
    OTF = 21
    WOFF = 22
    EOT = 23
    SVG = 24


@dataclass
class HttpRequest:
    """A parsed HTTP request: its method, resource type and URI text."""

    method: Method = Method.ERR
    content_type: ContentType = ContentType.ERR
    uri: str = ""


_RESPONSE_HEADS = {
    ContentType.HTML: RES_HTMLHEAD_OK,
    ContentType.GIF: RES_GIFHEAD_OK,
    ContentType.TEXT: RES_TEXTHEAD_OK,
    ContentType.JPEG: RES_JPEGHEAD_OK,
    ContentType.FLASH: RES_FLASHHEAD_OK,
    ContentType.XML: RES_XMLHEAD_OK,
    ContentType.CSS: RES_CSSHEAD_OK,
    ContentType.JSON: RES_JSONHEAD_OK,
    ContentType.JS: RES_JSHEAD_OK,
    ContentType.CGI: RES_CGIHEAD_OK,
    ContentType.PNG: RES_PNGHEAD_OK,
    ContentType.ICO: RES_ICOHEAD_OK,
    ContentType.TTF: RES_TTFHEAD_OK,
    ContentType.OTF: RES_OTFHEAD_OK,
    ContentType.WOFF: RES_WOFFHEAD_OK,
    ContentType.EOT: RES_EOTHEAD_OK,
    ContentType.SVG: RES_SVGHEAD_OK,
}

# Checked in order; the first extension group found anywhere in the name wins.
_EXTENSIONS = (
    ((".htm", ".html"), ContentType.HTML),
    ((".gif",), ContentType.GIF),
    ((".text", ".txt"), ContentType.TEXT),
    ((".jpeg", ".jpg"), ContentType.JPEG),
    ((".swf",), ContentType.FLASH),
    ((".cgi", ".CGI"), ContentType.CGI),
    ((".json", ".JSON"), ContentType.JSON),
    ((".js", ".JS"), ContentType.JS),
    ((".xml", ".XML"), ContentType.XML),
    ((".css", ".CSS"), ContentType.CSS),
    ((".png", ".PNG"), ContentType.PNG),
    ((".ico", ".ICO"), ContentType.ICO),
    ((".ttf", ".TTF"), ContentType.TTF),
    ((".otf", ".OTF"), ContentType.OTF),
    ((".woff", ".WOFF"), ContentType.WOFF),
    ((".eot", ".EOT"), ContentType.EOT),
    ((".svg", ".SVG"), ContentType.SVG),
)


def _c2d(ch: str) -> int:
    """Value of a hex digit; any other character yields its own code (as a byte)."""
    if "0" <= ch <= "9":
        return ord(ch) - ord("0")
    if "a" <= ch <= "f":
        return 10 + ord(ch) - ord("a")
    if "A" <= ch <= "F":
        return 10 + ord(ch) - ord("A")
    return ord(ch) & 0xFF


def _next_token(text: str, delims: str) -> tuple[str | None, str]:
    """Split off the next token the way strtok does: skip leading delimiters,
    stop at the next delimiter, and continue after that single delimiter."""
    stripped = text.lstrip(delims) if delims else text
    if not stripped:
        return None, ""
    for idx, ch in enumerate(stripped):
        if ch in delims:
            return stripped[:idx], stripped[idx + 1 :]
    return stripped, ""


def unescape_http_url(url: str) -> str:
    """Replace every %XX escape in ``url`` with the character it encodes."""
    out = []
    chars = iter(url)
    for ch in chars:
        if ch == "%":
            high = next(chars, None)
            low = next(chars, None) if high is not None else None
            value = _c2d(high) * 0x10 if high is not None else 0
            value += _c2d(low) if low is not None else 0
            out.append(chr(value & 0xFF))
        else:
            out.append(ch)
    return "".join(out)


def make_http_response_head(content_type: ContentType, length: int) -> str:
    """Build the ``200 OK`` response header for a body of ``length`` bytes."""
    try:
        head = _RESPONSE_HEADS[ContentType(content_type)]
    except (KeyError, ValueError):
        raise ValueError(f"no response header for content type {content_type!r}") from None
    return f"{head}{length}\r\n\r\n"


def find_http_uri_type(name: str) -> ContentType:
    """Decide the content type of a resource from the extensions in its name."""
    for extensions, content_type in _EXTENSIONS:
        if any(ext in name for ext in extensions):
            return content_type
    return ContentType.ERR


def parse_http_request(data: str | bytes) -> HttpRequest:
    """Parse the request line of ``data`` into an :class:`HttpRequest`.

    For GET and HEAD the URI is the second space-separated token; for POST it is
    everything after the method, headers and body included, so parameters can be
    read from it later.
    """
    if isinstance(data, (bytes, bytearray)):
        data = bytes(data).decode("latin-1")
    request = HttpRequest()
    token, rest = _next_token(data, " ")
    if token is None:
        return request

    if token in ("GET", "get"):
        request.method = Method.GET
        token, _ = _next_token(rest, " ")
    elif token in ("HEAD", "head"):
        request.method = Method.HEAD
        token, _ = _next_token(rest, " ")
    elif token in ("POST", "post"):
        request.method = Method.POST
        token = rest or None
    else:
        request.method = Method.ERR

    if token is None:
        request.method = Method.ERR
        return request
    request.uri = token
    return request


def get_http_param_value(request: str, param_name: str) -> str | None:
    """Return the value of ``param_name`` from the body of a POST request.

    The body is located after the blank line and cut to the Content-Length
    header. Returns ``None`` when the parameter name does not occur.
    """
    content_len = atoi(mid(request, "Content-Length: ", "\r\n"), 10)
    head_end = request.find("\r\n\r\n")
    if head_end < 0:
        raise ValueError("request has no end of headers")
    body = request[head_end + 4 :][:content_len]

    pos = body.find(param_name)
    if pos < 0:
        return None
    value = body[pos + len(param_name) + 1 :]
    amp = value.find("&")
    if amp >= 0:
        value = value[:amp]
    if not value:
        return ""
    return unescape_http_url(value).replace("+", " ")


def get_http_uri_name(uri: str) -> str:
    """Return the resource name of ``uri``: the path without its query and
    without the leading slash, or ``"/"`` for the root."""
    token, _ = _next_token(uri, " ?")
    if token is None:
        raise ValueError(f"no resource name in URI {uri!r}")
    return token if token == "/" else token[1:]


def inet_addr(addr: str) -> bytes:
    """Convert a dotted IPv4 address (decimal or 0x-prefixed hex parts) to 4 bytes."""
    parts = []
    rest = addr
    for _ in range(4):
        token, rest = _next_token(rest, ".")
        if token is None:
            raise ValueError(f"not a dotted IPv4 address: {addr!r}")
        if token.startswith("0x"):
            parts.append(atoi(token[2:], 16) & 0xFF)
        else:
            parts.append(atoi(token, 10) & 0xFF)
    return bytes(parts)


def atoi(text: str, base: int) -> int:
    """Convert ``text`` to an unsigned 16-bit number, stopping at a space."""
    num = 0
    for ch in text:
        if ch in ("\0", " "):
            break
        num = num * base + _c2d(ch)
    return num & 0xFFFF


def mid(src: str, start: str, end: str) -> str:
    """Return the text of ``src`` between the first ``start`` and the next ``end``."""
    begin = src.find(start)
    if begin < 0:
        raise ValueError(f"{start!r} not found")
    begin += len(start)
    finish = src.find(end, begin)
    if finish < 0:
        raise ValueError(f"{end!r} not found after {start!r}")
    return src[begin:finish]