"""
=============================================================================
HTTP SERVER
=============================================================================

Ties the transport, the codec and a handler together.

=============================================================================
ARCHITECTURE OVERVIEW
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    HTTP SERVER ARCHITECTURE                         │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │                        ┌─────────────────┐                          │
    │                        │   HTTPServer    │                          │
    │                        └────────┬────────┘                          │
    │                                 │                                    │
    │            ┌────────────────────┼────────────────────┐              │
    │            ▼                    ▼                    ▼              │
    │    ┌──────────────┐    ┌──────────────┐    ┌──────────────┐        │
    │    │ SocketServer │    │    Codec     │    │   Handler    │        │
    │    │ (accepting)  │    │ (wire bytes) │    │ (usually a   │        │
    │    └──────┬───────┘    └──────────────┘    │   Router)    │        │
    │           ▼                                └──────────────┘        │
    │    ┌──────────────┐                                                 │
    │    │  Connection  │                                                 │
    │    └──────────────┘                                                 │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
REQUEST LIFECYCLE
=============================================================================

    1. ACCEPT      SocketServer accepts one TCP connection
    2. DECODE      decode_request reads line, headers and body
    3. DISPATCH    handler.handle(request) → HTTPResponse
    4. ENCODE      encode_response writes and flushes
    5. CLOSE       connection closed, loop accepts the next one

Connections are served strictly one after another.

=============================================================================
FAILURES
=============================================================================

    ┌──────────────────────────┬─────────────────────────────────────────┐
    │ What failed              │ What happens                            │
    ├──────────────────────────┼─────────────────────────────────────────┤
    │ decode (syntax or I/O)   │ WARNING logged, connection closed,      │
    │                          │ nothing written                         │
    │ handler raised           │ traceback logged, connection closed,    │
    │                          │ nothing written                         │
    │ encode (I/O)             │ WARNING logged, connection closed       │
    └──────────────────────────┴─────────────────────────────────────────┘

In every case the accept loop keeps running. The client of an abandoned
exchange sees the connection close without a status line.

=============================================================================
"""

import logging
from typing import Optional, Tuple, Union

from .config import ServerConfig
from .core import Connection, ConnectionState, SocketServer
from .http import (
    HTTPError,
    HTTPResponse,
    Handler,
    Router,
    decode_request,
    encode_response,
)
from .http.router import HandlerFunc, as_handler


logger = logging.getLogger(__name__)


class HTTPServer:
    """
    Sequential HTTP/1.x server.

    =========================================================================
    USAGE
    =========================================================================

        server = HTTPServer()

        @server.get("/ok")
        def ok_handler(request):
            return ok()

        server.run(port=8080)   # blocks until Ctrl+C or shutdown()

    Any Handler can be served instead of the built-in router:

        server = HTTPServer(handler=MyHandler())

    =========================================================================
    """

    def __init__(
        self,
        handler: Optional[Union[Handler, HandlerFunc]] = None,
        config: Optional[ServerConfig] = None,
    ):
        """
        Args:
            handler: Handler for every request. Defaults to a new Router,
                     reachable through ``server.router``.
            config: Server configuration. Defaults to ServerConfig().
        """
        self.config = config or ServerConfig()
        self.config.validate()

        self._handler: Handler = as_handler(handler) if handler is not None else Router()
        self._socket_server = SocketServer(self.config)

    # =========================================================================
    # ROUTE REGISTRATION
    # =========================================================================

    @property
    def handler(self) -> Handler:
        return self._handler

    @property
    def router(self) -> Router:
        """
        The Router requests are dispatched to.

        Raises:
            TypeError: The server was given a handler that is not a Router.
        """
        if not isinstance(self._handler, Router):
            raise TypeError(f"Server handler is {type(self._handler).__name__}, not a Router")
        return self._handler

    def get(self, path: str):
        """Register a GET route."""
        return self.router.get(path)

    def post(self, path: str):
        """Register a POST route."""
        return self.router.post(path)

    # =========================================================================
    # SERVER LIFECYCLE
    # =========================================================================

    @property
    def address(self) -> Tuple[str, int]:
        """The bound (host, port); the real port once listening."""
        return self._socket_server.address

    def run(self, host: Optional[str] = None, port: Optional[int] = None):
        """
        Start the server (blocking).

        Blocks until shutdown() is called or SIGINT/SIGTERM arrives.

        Args:
            host: Override config host.
            port: Override config port (0 picks a free port).

        Raises:
            HTTPIOError: The address could not be bound.
        """
        if host is not None:
            self.config.host = host
        if port is not None:
            self.config.port = port
        self.config.validate()

        self._setup_logging()

        # Rules are read-only from the first accepted connection on
        if isinstance(self._handler, Router):
            self._handler.freeze()

        logger.info(f"Starting HTTP server on {self.config.host}:{self.config.port}")

        try:
            self._socket_server.start(self.handle_connection)
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")

        logger.info("Server stopped")

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """Block until the server is listening; False on timeout."""
        return self._socket_server.wait_until_ready(timeout)

    def shutdown(self):
        """Stop accepting connections; run() returns shortly after."""
        self._socket_server.shutdown()

    def _setup_logging(self):
        """Configure logging based on config."""
        level = getattr(logging, self.config.log_level.upper(), logging.INFO)

        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

        logging.getLogger("tinyhttp").setLevel(level)

    # =========================================================================
    # REQUEST HANDLING
    # =========================================================================

    def handle_connection(self, conn: Connection):
        """
        Serve exactly one exchange on an accepted connection, then close it.

        Never raises for a per-connection failure; see the module
        docstring for what each failure does.
        """
        with conn:
            conn.state = ConnectionState.READING
            try:
                request = decode_request(
                    conn.reader,
                    max_line_size=self.config.max_line_size,
                    max_headers=self.config.max_headers,
                    max_body_size=self.config.max_body_size,
                )
            except HTTPError as e:
                logger.warning(f"[{conn.id}] Bad request from {conn.peer_ip}:{conn.peer_port}: {e}")
                return

            conn.state = ConnectionState.PROCESSING
            try:
                response = self._handler.handle(request)
            except Exception as e:
                logger.exception(f"[{conn.id}] Handler error for {request.method} {request.path}: {e}")
                return

            if not isinstance(response, HTTPResponse):
                logger.error(
                    f"[{conn.id}] Handler for {request.method} {request.path} "
                    f"returned {type(response).__name__}, not HTTPResponse"
                )
                return

            conn.state = ConnectionState.WRITING
            try:
                encode_response(response, conn.writer)
            except HTTPError as e:
                logger.warning(f"[{conn.id}] Failed to send response: {e}")
                return

            logger.info(
                f"[{conn.id}] {conn.peer_ip} \"{request.request_line}\" "
                f"{response.status.value} {len(response.body)}"
            )
