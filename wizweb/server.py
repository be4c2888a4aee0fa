"""HTTP server that answers requests from registered pages and CGI handlers."""

from __future__ import annotations

import re
import socket
import socketserver
import threading
from typing import Callable, Iterator

from wizweb.cgi import HTTP_RESET, CgiResult
from wizweb.content import (
    INITIAL_WEBPAGE,
    M_INITIAL_WEBPAGE,
    MOBILE_INITIAL_WEBPAGE,
    ContentRegistry,
)
from wizweb.parser import (
    ERROR_HTML_PAGE,
    ERROR_REQUEST_PAGE,
    RES_CGIHEAD_OK,
    ContentType,
    HttpRequest,
    Method,
    find_http_uri_type,
    get_http_uri_name,
    make_http_response_head,
    mid,
    parse_http_request,
)

DATA_BUF_SIZE = 2048

_INDEX_ALIASES = {
    "/": INITIAL_WEBPAGE,
    "m": M_INITIAL_WEBPAGE,
    "mobile": MOBILE_INITIAL_WEBPAGE,
}

_NO_HEADER_TYPES = (ContentType.CGI, ContentType.XML)
_CONTENT_LENGTH = re.compile(rb"Content-Length: (\d+)")

_NOT_FOUND = ERROR_HTML_PAGE.encode("ascii")
_BAD_REQUEST = ERROR_REQUEST_PAGE.encode("ascii")


class HttpServer:
    """Serves registered web content and CGI endpoints, one request per connection."""

    def __init__(
        self,
        cgi,
        registry: ContentRegistry | None = None,
        chunk_size: int = DATA_BUF_SIZE,
    ) -> None:
        if chunk_size < 2:
            raise ValueError("chunk_size must be at least 2")
        self.cgi = cgi
        self.registry = registry if registry is not None else ContentRegistry()
        self.chunk_size = chunk_size
        self.mcu_reset: Callable[[], None] | None = None
        self.wdt_reset: Callable[[], None] | None = None
        self._tick = 0
        self._lock = threading.Lock()
        self._server: socketserver.ThreadingTCPServer | None = None
        self._ready = threading.Event()

    @property
    def _send_len(self) -> int:
        return self.chunk_size - 1

    def register_callbacks(
        self,
        mcu_reset: Callable[[], None] | None,
        wdt_reset: Callable[[], None] | None,
    ) -> None:
        """Install the device-reset and watchdog-reset callbacks; None keeps the current one."""
        if mcu_reset is not None:
            self.mcu_reset = mcu_reset
        if wdt_reset is not None:
            self.wdt_reset = wdt_reset

    def time_handler(self) -> None:
        """Advance the one-second tick counter."""
        with self._lock:
            self._tick += 1

    def timecount(self) -> int:
        """Number of one-second ticks counted so far."""
        return self._tick

    def handle_request(self, data: str | bytes) -> bytes:
        """Process one raw HTTP request and return the complete response bytes."""
        if isinstance(data, (bytes, bytearray)):
            data = bytes(data).decode("latin-1")
        with self._lock:
            return b"".join(self._responses(data))

    def _responses(self, data: str) -> Iterator[bytes]:
        request = parse_http_request(data)
        if request.method in (Method.GET, Method.HEAD):
            yield from self._respond_get(request)
        elif request.method == Method.POST:
            yield from self._respond_post(request)
        else:
            yield _BAD_REQUEST

    def _respond_get(self, request: HttpRequest) -> Iterator[bytes]:
        try:
            name = get_http_uri_name(request.uri)
        except ValueError:
            yield _BAD_REQUEST
            return
        name = _INDEX_ALIASES.get(name, name)
        request.content_type = find_http_uri_type(name)

        if request.content_type == ContentType.CGI:
            yield self._cgi_response(self.cgi.handle_get(name))
            return

        found = self.registry.find(name)
        if found is None:
            yield _NOT_FOUND
            return
        index, length = found

        if request.content_type not in _NO_HEADER_TYPES:
            try:
                yield make_http_response_head(request.content_type, length).encode("ascii")
            except ValueError:
                # No header is known for this type: the body goes out bare.
                pass
        for offset in range(0, length, self._send_len):
            yield self.registry.read(index, offset, self._send_len)

    def _respond_post(self, request: HttpRequest) -> Iterator[bytes]:
        try:
            name = mid(request.uri, "/", " HTTP")
        except ValueError:
            yield _BAD_REQUEST
            return
        request.content_type = find_http_uri_type(name)
        if request.content_type != ContentType.CGI:
            yield _NOT_FOUND
            return
        try:
            result = self.cgi.handle_post(name, request)
        except ValueError:
            yield _BAD_REQUEST
            return
        response = self._cgi_response(result)
        yield response
        if (
            response is not _NOT_FOUND
            and result.status == HTTP_RESET
            and self.mcu_reset is not None
        ):
            self.mcu_reset()

    def _cgi_response(self, result: CgiResult) -> bytes:
        body = result.body.encode("latin-1")
        limit = self.chunk_size - (len(RES_CGIHEAD_OK) + 8)
        if not result.found or len(body) > limit:
            return _NOT_FOUND
        return f"{RES_CGIHEAD_OK}{len(body)}\r\n\r\n".encode("ascii") + body

    def _read_request(self, sock: socket.socket) -> bytes:
        data = b""
        while len(data) < self.chunk_size:
            chunk = sock.recv(self.chunk_size - len(data))
            if not chunk:
                break
            data += chunk
            head_end = data.find(b"\r\n\r\n")
            if head_end >= 0:
                match = _CONTENT_LENGTH.search(data[:head_end])
                needed = head_end + 4 + (int(match.group(1)) if match else 0)
                if len(data) >= needed:
                    break
        return data

    @property
    def address(self) -> tuple[str, int] | None:
        """The bound (host, port) while serving, otherwise None."""
        if self._server is None:
            return None
        return self._server.server_address[:2]

    def wait_ready(self, timeout: float | None = None) -> bool:
        """Block until :meth:`serve` has bound its socket; return whether it did."""
        return self._ready.wait(timeout)

    def serve(self, host: str, port: int) -> None:
        """Listen on ``host``:``port`` and answer requests until :meth:`shutdown`."""
        owner = self

        class _Handler(socketserver.BaseRequestHandler):
            def handle(self) -> None:
                data = owner._read_request(self.request)
                if data:
                    self.request.sendall(owner.handle_request(data))
                try:
                    self.request.shutdown(socket.SHUT_RDWR)
                except OSError:
                    pass

        class _Server(socketserver.ThreadingTCPServer):
            allow_reuse_address = True
            daemon_threads = True

        with _Server((host, port), _Handler) as server:
            self._server = server
            self._ready.set()
            try:
                server.serve_forever()
            finally:
                self._server = None
                self._ready.clear()

    def shutdown(self) -> None:
        """Stop a running :meth:`serve` loop."""
        if self._server is not None:
            self._server.shutdown()