"""
=============================================================================
TINYHTTP - Minimal HTTP/1.x Client and Server on Raw Sockets
=============================================================================

A small HTTP/1.0 and HTTP/1.1 engine: a wire codec, an exact-match router,
a one-request-per-connection client and a sequential server.

=============================================================================
PROJECT OVERVIEW
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                         TINYHTTP LAYERS                              │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   HTTPClient                               HTTPServer                │
    │      │  get / post / request                  │  run / shutdown      │
    │      ▼                                        ▼                      │
    │   ┌───────────────────────────────────────────────────────────┐     │
    │   │ codec: encode_request / decode_request                     │     │
    │   │        encode_response / decode_response                   │     │
    │   └───────────────────────────────────────────────────────────┘     │
    │      ▲                                        ▲                      │
    │   Connection.open                        SocketServer + Router       │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

What it deliberately does not do: chunked bodies, keep-alive, pipelining,
TLS, compression, HTTP/2. Every connection carries exactly one exchange.

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    tinyhttp/
    ├── __init__.py          # This file - package exports
    ├── __main__.py          # CLI entry point (python -m tinyhttp)
    ├── server.py            # HTTPServer
    ├── client.py            # HTTPClient
    ├── config.py            # ServerConfig, ClientConfig
    ├── core/                # Transport
    │   ├── socket_server.py # Listening socket and accept loop
    │   └── connection.py    # Socket as reader/writer streams
    └── http/                # Protocol
        ├── errors.py        # HTTPError hierarchy
        ├── message.py       # Method, version, status enums
        ├── headers.py       # Case-insensitive header collection
        ├── request.py       # HTTPRequest
        ├── response.py      # HTTPResponse, ok(), not_found()
        ├── streams.py       # Bounded line and exact reads
        ├── codec.py         # Wire encode/decode
        └── router.py        # Handler, FunctionHandler, Router

=============================================================================
QUICK START
=============================================================================

    from tinyhttp import HTTPServer, HTTPClient, ok

    server = HTTPServer()

    @server.get("/ok")
    def ok_handler(request):
        return ok()

    @server.post("/echo")
    def echo(request):
        return ok(request.body)

    server.run(port=8080)

    # elsewhere
    response = HTTPClient().get("http://127.0.0.1:8080/ok")

=============================================================================
"""

__version__ = "1.0.0"

from .http import (
    HTTPError,
    HTTPSyntaxError,
    HTTPIOError,
    HTTPMethod,
    HTTPVersion,
    HTTPStatus,
    Headers,
    HTTPRequest,
    HTTPResponse,
    ok,
    not_found,
    Handler,
    FunctionHandler,
    Router,
)
from .config import ServerConfig, ClientConfig
from .server import HTTPServer
from .client import HTTPClient

__all__ = [
    "HTTPServer",
    "HTTPClient",
    "ServerConfig",
    "ClientConfig",
    "HTTPError",
    "HTTPSyntaxError",
    "HTTPIOError",
    "HTTPMethod",
    "HTTPVersion",
    "HTTPStatus",
    "Headers",
    "HTTPRequest",
    "HTTPResponse",
    "ok",
    "not_found",
    "Handler",
    "FunctionHandler",
    "Router",
    "__version__",
]
