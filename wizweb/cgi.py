"""CGI endpoints of the CAN configuration web page."""

from __future__ import annotations

from dataclasses import dataclass

from wizweb.canconfig import Baudrate, CanConfig, EthMode
from wizweb.parser import HttpRequest, atoi, get_http_param_value

HTTP_FAILED = 0
HTTP_OK = 1
HTTP_RESET = 2


@dataclass(frozen=True)
class CgiResult:
    """Outcome of a CGI request: status code and response body."""

    status: int
    body: str = ""

    @property
    def found(self) -> bool:
        """Whether the CGI name was recognised."""
        return self.status != HTTP_FAILED


def make_json_devinfo(config: CanConfig) -> str:
    """Render ``config`` as the JSONP callback the web page evaluates."""
    return (
        f'DevinfoCallback({{"opmode":"{int(config.eth_mode)}",'
        f'"baud":"{int(config.baudrate)}",}});'
    )


def set_devinfo(config: CanConfig, request: str) -> bool:
    """Apply ``opmode`` and ``baud`` parameters from a POST request to ``config``.

    An out-of-range mode is ignored; an out-of-range baud rate falls back to
    125 kbps. Returns whether either parameter was present.
    """
    changed = False

    value = get_http_param_value(request, "opmode")
    if value is not None:
        mode = atoi(value, 10) & 0xFF
        if mode < len(EthMode):
            config.eth_mode = EthMode(mode)
        changed = True

    value = get_http_param_value(request, "baud")
    if value is not None:
        idx = atoi(value, 10) & 0xFF
        config.baudrate = Baudrate(idx) if idx < len(Baudrate) else Baudrate.KBPS_125
        changed = True

    return changed


class CgiHandler:
    """Dispatches CGI requests against a shared :class:`CanConfig`."""

    def __init__(self, config: CanConfig) -> None:
        self.config = config
        self.config_changed = False

    def handle_get(self, uri_name: str) -> CgiResult:
        """Answer a GET for a CGI resource.

        Every CGI name is accepted; only ``get_devinfo.cgi`` produces a body.
        """
        if uri_name == "get_devinfo.cgi":
            return CgiResult(HTTP_OK, make_json_devinfo(self.config))
        return CgiResult(HTTP_OK, "")

    def handle_post(self, uri_name: str, request: HttpRequest) -> CgiResult:
        """Answer a POST for a CGI resource and mark the configuration changed."""
        self.config_changed = True
        if uri_name == "set_devinfo.cgi":
            applied = set_devinfo(self.config, request.uri)
            return CgiResult(HTTP_OK, str(int(applied)))
        if uri_name == "example.cgi":
            return CgiResult(HTTP_OK, "1")
        return CgiResult(HTTP_FAILED, "")