"""
=============================================================================
HTTP REQUEST
=============================================================================

The request half of the message model.

=============================================================================
HTTP REQUEST ANATOMY
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     HTTP REQUEST STRUCTURE                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │  ┌─ REQUEST LINE ─────────────────────────────────────────────────┐ │
    │  │    POST /echo HTTP/1.1\r\n                                      │ │
    │  │    ─┬── ──┬── ────┬───                                          │ │
    │  │     │     │       │                                              │ │
    │  │  Method  Path  Version                                          │ │
    │  └─────────────────────────────────────────────────────────────────┘ │
    │                                                                      │
    │  ┌─ HEADERS ──────────────────────────────────────────────────────┐ │
    │  │    host: localhost:8080\r\n                                     │ │
    │  │    content-length: 5\r\n                                        │ │
    │  └─────────────────────────────────────────────────────────────────┘ │
    │                                                                      │
    │  ┌─ EMPTY LINE ───────────────────────────────────────────────────┐ │
    │  │    \r\n                                                          │ │
    │  └─────────────────────────────────────────────────────────────────┘ │
    │                                                                      │
    │  ┌─ BODY ─────────────────────────────────────────────────────────┐ │
    │  │    hello                                                         │ │
    │  └─────────────────────────────────────────────────────────────────┘ │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

The path is kept exactly as it appeared on the request line. It is not
URL-decoded, split from its query string, or normalized, because the
router matches it byte for byte.

Encoding and decoding live in codec.py; this module only holds data.

=============================================================================
"""

from dataclasses import dataclass, field

from .headers import Headers
from .message import HTTPMethod, HTTPVersion, MessageMixin, coerce_body


@dataclass
class HTTPRequest(MessageMixin):
    """
    Represents one HTTP request.

    Created by the server's decoder or built by a client caller. Lives
    for exactly one exchange and owns its headers exclusively.

    =========================================================================
    ATTRIBUTES
    =========================================================================

        method:   HTTPMethod.GET or HTTPMethod.POST
        path:     Raw request target, e.g. "/search?q=x"
        version:  HTTPVersion.HTTP_1_0 or HTTPVersion.HTTP_1_1
        headers:  Headers collection (lowercase names)
        body:     Raw body bytes

    Convenience on construction: ``method``/``version`` may be given as
    their wire tokens, ``headers`` as a plain dict and ``body`` as str
    (UTF-8 encoded).

        HTTPRequest("POST", "/echo", body="hello",
                    headers={"Content-Type": "text/plain"})

    =========================================================================
    """

    method: HTTPMethod
    path: str
    version: HTTPVersion = HTTPVersion.HTTP_1_1
    headers: Headers = field(default_factory=Headers)
    body: bytes = b""

    def __post_init__(self):
        if not isinstance(self.method, HTTPMethod):
            self.method = HTTPMethod(self.method)
        if not isinstance(self.version, HTTPVersion):
            self.version = HTTPVersion(self.version)
        if not isinstance(self.headers, Headers):
            self.headers = Headers(self.headers)
        self.body = coerce_body(self.body)

    @property
    def request_line(self) -> str:
        """
        The request line without its CRLF.

        Example: "GET /ok HTTP/1.1"
        """
        return f"{self.method.token} {self.path} {self.version.token}"

