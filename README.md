# wizweb

A small HTTP server that serves web pages held in memory and answers CGI
requests. It ships with two ready-made servers: a plain "Hello, World!" page,
and a configuration page for a CAN-to-Ethernet bridge whose settings
(Ethernet operation mode and CAN baud rate) can be read and changed over HTTP.

## Installation

```
pip install .
```

## Running the server

```
wizweb
```

This starts the plain server, which serves the hello page as `index.html`
(also reachable at `/`). Options:

- `--host HOST` – address to listen on (default `0.0.0.0`)
- `--port PORT` – port to listen on (default `80`, which usually needs
  elevated privileges; pick a higher port otherwise)
- `--can` – serve the CAN configuration page instead; the default
  configuration is printed on start-up

```
wizweb --can --port 8080
```

The server runs until interrupted with Ctrl-C. Each connection carries one
request; the server answers it and closes the connection.

## Using it as a library

```python
from wizweb.app import build_http_server, build_can_web_config_server
from wizweb.canconfig import CanConfig

server = build_http_server()
response = server.handle_request(b"GET / HTTP/1.1\r\n\r\n")   # bytes

config = CanConfig.default()
can_server = build_can_web_config_server(config, "<html>...</html>")
can_server.handle_request(b"GET /get_devinfo.cgi HTTP/1.1\r\n\r\n")
# body: DevinfoCallback({"opmode":"0","baud":"0",});

body = b"opmode=1&baud=2"
can_server.handle_request(
    b"POST /set_devinfo.cgi HTTP/1.1\r\nContent-Length: %d\r\n\r\n%s"
    % (len(body), body)
)
# config.eth_mode is now EthMode.TCP_CLIENT, config.baudrate Baudrate.KBPS_500
```

A POST needs a `Content-Length` header; its parameters are read from the body.
An out-of-range `opmode` is ignored and an out-of-range `baud` falls back to
125 kbps.

The building blocks can also be used separately:

- `wizweb.parser` parses requests (`parse_http_request`,
  `get_http_param_value`, `get_http_uri_name`), decides content types from
  file extensions (`find_http_uri_type`) and builds response headers
  (`make_http_response_head`), with helpers `unescape_http_url`, `atoi`,
  `mid` and `inet_addr`.
- `wizweb.content.ContentRegistry` holds named web pages up to a fixed
  capacity (20 by default); `register`, `find`, `read` and `listing`.
- `wizweb.cgi.CgiHandler` answers `get_devinfo.cgi` and `set_devinfo.cgi`
  against a `CanConfig` and sets its `config_changed` flag on every POST;
  `make_json_devinfo` and `set_devinfo` are available on their own.
- `wizweb.canconfig` defines `EthMode`, `Baudrate`, `CanConfig`,
  `CanMessage`, the `RxRingBuffer` for received CAN frames, `bitrate` and
  `describe_can_config`.
- `wizweb.server.HttpServer` ties these together: `handle_request` turns raw
  request bytes into response bytes, `serve(host, port)` runs it over TCP
  until `shutdown()`, and `register_callbacks` installs reset callbacks.

## What it does not do

wizweb has no CAN bus of its own. Changing the configuration through the web
page only updates the `CanConfig` object and the handler's `config_changed`
flag; nothing opens a CAN interface, restarts a bus at the new speed, or
forwards frames between CAN and TCP. `CanMessage` and `RxRingBuffer` are data
structures for such a bridge, but nothing in the package fills or drains them.
It also does no network setup (addressing, DHCP, DNS) and serves no files from
disk—only pages registered in memory.

## Running the tests

```
pip install .[test]
pytest
```