"""Ready-made servers: a static hello page and the CAN bridge configuration page."""

from __future__ import annotations

import argparse
import sys

from wizweb.canconfig import CanConfig, describe_can_config
from wizweb.cgi import HTTP_FAILED, CgiHandler, CgiResult
from wizweb.content import INITIAL_WEBPAGE, ContentRegistry
from wizweb.parser import HTTP_SERVER_PORT, HttpRequest
from wizweb.server import DATA_BUF_SIZE, HttpServer

INDEX_PAGE = (
    "<!DOCTYPE html>"
    '<html lang="en">'
    "<head>"
    '<meta charset="UTF-8">'
    "<title>HTTP Server Example</title>"
    "</head>"
    "<body>"
    "<h1>Hello, World!</h1>"
    "</body>"
    "</html>"
)

CAN_INDEX_PAGE = """<!DOCTYPE html>
<html>
<head>
<meta http-equiv="Content-Type" content="text/html; charset=UTF-8">
<title>CAN Setting</title>
<meta http-equiv="pragma" content="no-cache">
<script>
function AJAX(url, callback) {
  var req = new XMLHttpRequest();
  req.onreadystatechange = function () {
    if (req.readyState == 4 && req.status == 200 && callback) {
      callback(req.responseText);
    }
  };
  this.doGet = function () {
    req.open('GET', url, true);
    req.send(null);
  };
  this.doPost = function (body) {
    req.open('POST', url, true);
    req.setRequestHeader('Content-Type', 'application/x-www-form-urlencoded');
    req.send(body);
  };
}
function $(id) { return document.getElementById(id); }
function selset(id, val) {
  var o = $(id);
  for (var i = 0; i < o.options.length; i++) {
    if (i == val) { o.options[i].selected = true; break; }
  }
}
function DevinfoCallback(o) {
  selset('selOpMode1', o.opmode);
  selset('selBaud1', o.baud);
}
function run(t) {
  try { (new Function(t))(); } catch (e) { alert(e); }
}
function getDevinfo() {
  new AJAX('get_devinfo.cgi', run).doGet();
}
function setDevinfo() {
  var body = '&opmode=' + $('selOpMode1').value + '&baud=' + $('selBaud1').value;
  new AJAX('set_devinfo.cgi', null).doPost(body);
}
</script>
</head>
<body>
<h1>WIZnet</h1>
<h2>Get/Set Interface Functions</h2>
<input type="button" value="Get Settings" onclick="getDevinfo();">
<input type="button" value="Set Settings" onclick="setDevinfo();">
<h3>CAN setting</h3>
<div>
<label for="selOpMode1">Operation mode:</label>
<select id="selOpMode1" name="opmode">
<option value="0">TCP Server</option>
<option value="1">TCP Client</option>
</select>
<label for="selBaud1">Baudrate:</label>
<select id="selBaud1" name="baud">
<option value="0">125</option>
<option value="1">250</option>
<option value="2">500</option>
</select>
</div>
</body>
</html>
"""


class _NoCgi:
    """CGI handler for servers without CGI endpoints: every name is unknown."""

    def handle_get(self, uri_name: str) -> CgiResult:
        return CgiResult(HTTP_FAILED)

    def handle_post(self, uri_name: str, request: HttpRequest) -> CgiResult:
        return CgiResult(HTTP_FAILED)


def build_http_server() -> HttpServer:
    """A server that serves the hello page as ``index.html``."""
    registry = ContentRegistry()
    registry.register(INITIAL_WEBPAGE, INDEX_PAGE)
    return HttpServer(_NoCgi(), registry, DATA_BUF_SIZE)


def build_can_web_config_server(
    config: CanConfig | None = None,
    index_page: str | bytes = CAN_INDEX_PAGE,
) -> HttpServer:
    """A server for the CAN configuration page and its CGI endpoints."""
    if config is None:
        config = CanConfig.default()
    registry = ContentRegistry()
    registry.register(INITIAL_WEBPAGE, index_page)
    return HttpServer(CgiHandler(config), registry, DATA_BUF_SIZE)


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="wizweb", description="Run the embedded web server.")
    parser.add_argument("--host", default="0.0.0.0", help="address to listen on")
    parser.add_argument("--port", type=int, default=HTTP_SERVER_PORT, help="port to listen on")
    parser.add_argument(
        "--can", action="store_true", help="serve the CAN bridge configuration page"
    )
    args = parser.parse_args(argv)
    if not 0 <= args.port <= 0xFFFF:
        parser.error(f"port out of range: {args.port}")
    return args


def main(argv: list[str] | None = None) -> int:
    """Start the selected server and run until interrupted."""
    args = _parse_args(argv)
    if args.can:
        config = CanConfig.default()
        print(describe_can_config(config), end="")
        server = build_can_web_config_server(config)
    else:
        server = build_http_server()
    print(f"Serving on {args.host}:{args.port}")
    try:
        server.serve(args.host, args.port)
    except KeyboardInterrupt:
        pass
    finally:
        server.shutdown()
    return 0


if __name__ == "__main__":
    sys.exit(main())