"""
=============================================================================
HTTP RESPONSE
=============================================================================

The response half of the message model, plus one-liner constructors for
the responses handlers return most often.

=============================================================================
HTTP RESPONSE ANATOMY
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     HTTP RESPONSE STRUCTURE                         │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │    HTTP/1.1 200 OK\r\n              ← status line                    │
    │    content-type: text/plain\r\n     ← headers                        │
    │    content-length: 5\r\n            ← added by the encoder if absent │
    │    \r\n                             ← empty line                     │
    │    hello                            ← body                           │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

How does the client know where the body ends?

    1. content-length present → read exactly that many bytes
    2. content-length absent  → read until the server closes the socket
                                (HTTP/1.0 style, client side only)

Our encoder always writes a content-length, so our own client never has
to fall back to (2) when talking to our own server.

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Optional, Union
import json

from .headers import Headers
from .message import HTTPStatus, HTTPVersion, MessageMixin, coerce_body


@dataclass
class HTTPResponse(MessageMixin):
    """
    Represents one HTTP response.

    Returned by handlers on the server, produced by the decoder on the
    client.

        HTTPResponse(status=HTTPStatus.OK, body=b"hello")
        HTTPResponse(HTTPStatus.NOT_FOUND, version=HTTPVersion.HTTP_1_0)

    ``headers`` may be given as a plain dict and ``body`` as str.
    """

    status: HTTPStatus = HTTPStatus.OK
    headers: Headers = field(default_factory=Headers)
    body: bytes = b""
    version: HTTPVersion = HTTPVersion.HTTP_1_1

    def __post_init__(self):
        if not isinstance(self.status, HTTPStatus):
            self.status = HTTPStatus(self.status)
        if not isinstance(self.version, HTTPVersion):
            self.version = HTTPVersion(self.version)
        if not isinstance(self.headers, Headers):
            self.headers = Headers(self.headers)
        self.body = coerce_body(self.body)

    @property
    def status_line(self) -> str:
        """
        The status line without its CRLF.

        Format: HTTP-VERSION SP STATUS-CODE SP REASON-PHRASE
        Example: "HTTP/1.1 200 OK"
        """
        return f"{self.version.token} {self.status.value} {self.status.phrase}"

    def set_header(self, name: str, value: str) -> "HTTPResponse":
        """
        Set a response header.

        Returns self for method chaining:
            response.set_header("X-One", "1").set_header("X-Two", "2")
        """
        self.headers.insert(name, value)
        return self

    def set_body(self, body: Union[str, bytes]) -> "HTTPResponse":
        """Set the body; strings are encoded as UTF-8."""
        self.body = coerce_body(body)
        return self


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================
#
#     return ok("Hello")              # text/plain
#     return ok({"id": 1})            # application/json
#     return not_found(req.version)   # empty 404
#
# =============================================================================

def ok(
    body: Union[str, bytes, dict, list] = b"",
    content_type: Optional[str] = None,
    version: HTTPVersion = HTTPVersion.HTTP_1_1,
) -> HTTPResponse:
    """
    Create a 200 OK response.

    The body type picks the content-type unless one is given:
    - dict/list → JSON, "application/json; charset=utf-8"
    - str       → "text/plain; charset=utf-8"
    - bytes     → no content-type

    An empty bytes body yields a response with no headers at all, which
    the encoder turns into "content-length: 0".
    """
    response = HTTPResponse(status=HTTPStatus.OK, version=version)

    if isinstance(body, (dict, list)):
        response.set_body(json.dumps(body, ensure_ascii=False))
        response.set_header("Content-Type", content_type or "application/json; charset=utf-8")
    elif isinstance(body, str):
        response.set_body(body)
        response.set_header("Content-Type", content_type or "text/plain; charset=utf-8")
    else:
        response.set_body(body)
        if content_type:
            response.set_header("Content-Type", content_type)

    return response


def not_found(version: HTTPVersion = HTTPVersion.HTTP_1_1) -> HTTPResponse:
    """
    Create a 404 Not Found response.

    Empty headers and empty body; the version mirrors the request that
    could not be routed.
    """
    return HTTPResponse(status=HTTPStatus.NOT_FOUND, version=version)
