"""
=============================================================================
HTTP CLIENT
=============================================================================

One request per connection, no reuse, no retry:

    ┌────────────┐  Connection.open   ┌────────────┐
    │ HTTPClient │ ─────────────────► │   server   │
    │            │  encode_request    │            │
    │            │ ─────────────────► │            │
    │            │  decode_response   │            │
    │            │ ◄───────────────── │            │
    │            │  close             │            │
    └────────────┘                    └────────────┘

A response without content-length is read until the server closes the
connection, so request() may block until then.

=============================================================================
URLS
=============================================================================

    http://example.com            → ("example.com", 80), "/"
    http://localhost:8080/ok      → ("localhost", 8080), "/ok"
    http://host/search?q=x        → ("host", 80),        "/search?q=x"

Only the http scheme is accepted. The fragment is dropped; it is never
sent to a server.

=============================================================================
"""

import logging
import urllib.parse
from typing import Optional, Tuple, Union

from .config import ClientConfig
from .core import Connection
from .http import (
    HTTPMethod,
    HTTPRequest,
    HTTPResponse,
    HTTPVersion,
    decode_response,
    encode_request,
)


logger = logging.getLogger(__name__)


class HTTPClient:
    """
    Blocking HTTP/1.x client.

        client = HTTPClient()
        response = client.get("http://127.0.0.1:8080/ok")
        response.status      # HTTPStatus.OK

    Every failure propagates to the caller: HTTPIOError for transport
    problems (including connect), HTTPSyntaxError for a malformed
    response, ValueError for an unusable URL.
    """

    def __init__(self, config: Optional[ClientConfig] = None):
        self.config = config or ClientConfig()
        self.config.validate()

    def request(self, address: Tuple[str, int], request: HTTPRequest) -> HTTPResponse:
        """
        Perform one exchange with the server at ``address``.

        Args:
            address: (host, port) to connect to.
            request: The request to send. A content-length header is added
                     by the encoder if missing.

        Returns:
            The decoded response.
        """
        with Connection.open(address, timeout=self.config.timeout) as conn:
            encode_request(request, conn.writer)
            response = decode_response(
                conn.reader,
                max_line_size=self.config.max_line_size,
                max_headers=self.config.max_headers,
            )

        logger.debug(
            f"[{conn.id}] {request.request_line} → {response.status.value} "
            f"({len(response.body)} bytes)"
        )
        return response

    def get(self, url: str) -> HTTPResponse:
        """
        GET ``url``.

        Raises:
            ValueError: Not an http URL, or no host.
        """
        address, target = self._parse_url(url)
        request = self._build_request(HTTPMethod.GET, address, target)
        return self.request(address, request)

    def post(
        self,
        url: str,
        body: Union[str, bytes] = b"",
        content_type: Optional[str] = None,
    ) -> HTTPResponse:
        """
        POST ``body`` to ``url``.

        Raises:
            ValueError: Not an http URL, or no host.
        """
        address, target = self._parse_url(url)
        request = self._build_request(HTTPMethod.POST, address, target, body)
        if content_type:
            request.headers.insert("content-type", content_type)
        return self.request(address, request)

    def _build_request(
        self,
        method: HTTPMethod,
        address: Tuple[str, int],
        target: str,
        body: Union[str, bytes] = b"",
    ) -> HTTPRequest:
        request = HTTPRequest(method=method, path=target, version=HTTPVersion.HTTP_1_1, body=body)

        host, port = address
        if ":" in host:
            host = f"[{host}]"
        if port != self.config.default_port:
            host = f"{host}:{port}"
        request.headers.insert("host", host)

        if self.config.user_agent:
            request.headers.insert("user-agent", self.config.user_agent)
        return request

    def _parse_url(self, url: str) -> Tuple[Tuple[str, int], str]:
        """
        Split an http URL into ((host, port), request target).

        Raises:
            ValueError: Not an http URL, no host, or a bad port.
        """
        parts = urllib.parse.urlsplit(url)

        if parts.scheme != "http":
            raise ValueError(f"Unsupported URL scheme: {parts.scheme!r} (only http is supported)")
        if not parts.hostname:
            raise ValueError(f"Missing host in URL: {url!r}")

        # .port raises ValueError itself for out-of-range or non-numeric ports
        port = parts.port or self.config.default_port
        target = (parts.path or "/") + (f"?{parts.query}" if parts.query else "")

        return (parts.hostname, port), target
