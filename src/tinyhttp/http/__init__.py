"""
=============================================================================
HTTP PROTOCOL COMPONENTS
=============================================================================

Everything that knows about HTTP but nothing about sockets:

    ┌─────────────────────────────────────────────────────────────────────┐
    │ MESSAGE MODEL (message.py, request.py, response.py)                 │
    │   HTTPMethod, HTTPVersion, HTTPStatus, HTTPRequest, HTTPResponse    │
    ├─────────────────────────────────────────────────────────────────────┤
    │ HEADERS (headers.py)                                                │
    │   Case-insensitive Headers collection, header block read/write      │
    ├─────────────────────────────────────────────────────────────────────┤
    │ CODEC (codec.py, streams.py)                                        │
    │   encode/decode requests and responses on binary streams            │
    ├─────────────────────────────────────────────────────────────────────┤
    │ ROUTING (router.py)                                                 │
    │   Handler capability, FunctionHandler, exact-match Router           │
    ├─────────────────────────────────────────────────────────────────────┤
    │ ERRORS (errors.py)                                                  │
    │   HTTPError → HTTPSyntaxError / HTTPIOError                         │
    └─────────────────────────────────────────────────────────────────────┘

Dependency order: errors → message → headers → request/response →
codec → router. Nothing here imports from tinyhttp.core.

=============================================================================
"""

from .errors import HTTPError, HTTPIOError, HTTPSyntaxError
from .message import HTTPMethod, HTTPStatus, HTTPVersion
from .headers import Headers
from .request import HTTPRequest
from .response import HTTPResponse, ok, not_found
from .codec import (
    encode_request,
    encode_response,
    decode_request,
    decode_response,
    request_to_bytes,
    response_to_bytes,
    request_from_bytes,
    response_from_bytes,
)
from .router import Handler, FunctionHandler, Route, Router

__all__ = [
    # Errors
    "HTTPError",
    "HTTPSyntaxError",
    "HTTPIOError",

    # Message model
    "HTTPMethod",
    "HTTPVersion",
    "HTTPStatus",
    "Headers",
    "HTTPRequest",
    "HTTPResponse",
    "ok",
    "not_found",

    # Codec
    "encode_request",
    "encode_response",
    "decode_request",
    "decode_response",
    "request_to_bytes",
    "response_to_bytes",
    "request_from_bytes",
    "response_from_bytes",

    # Routing
    "Handler",
    "FunctionHandler",
    "Route",
    "Router",
]
