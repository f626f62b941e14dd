"""
=============================================================================
SOCKET SERVER - TCP ACCEPT LOOP
=============================================================================

Owns the listening socket and hands every accepted connection to a
callback, one at a time.

=============================================================================
THE SOCKET LIFECYCLE
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     TCP SERVER SOCKET LIFECYCLE                      │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   socket() ──► bind() ──► listen() ──► accept() ◄──┐                 │
    │                                          │         │                 │
    │                                          ▼         │                 │
    │                                  connection_handler(conn)            │
    │                                          │         │                 │
    │                                          └─────────┘                 │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
SEQUENTIAL SERVING
=============================================================================

The callback runs on the accept thread. While it runs, no other
connection is accepted; new clients wait in the listen backlog. The
callback is responsible for never letting an exception escape for a
per-connection failure, so one bad client cannot stop the loop.

=============================================================================
INTERRUPTIBLE ACCEPT
=============================================================================

The listening socket has a 1 second timeout, so accept() returns
periodically and the loop can notice that shutdown() was called:

    while running:
        try:
            accept()          # blocks for 1 second max
        except timeout:
            continue          # check the flag, loop again

=============================================================================
"""

import socket
import signal
import logging
import threading
from typing import Callable, Optional, Tuple

from .connection import Connection
from ..http.errors import HTTPIOError
from ..config import ServerConfig


logger = logging.getLogger(__name__)


ACCEPT_POLL_INTERVAL = 1.0


class SocketServer:
    """
    Low-level TCP server.

    Usage:
        server = SocketServer(config)

        def handle_connection(conn: Connection):
            ...

        server.start(handle_connection)  # blocks until shutdown()
    """

    def __init__(self, config: ServerConfig):
        self.config = config

        self._socket: Optional[socket.socket] = None
        self._running = False
        self._address: Optional[Tuple[str, int]] = None

        # Set once listen() succeeded; tests wait on it before connecting
        self._ready_event = threading.Event()

        self._original_handlers: dict = {}

    @property
    def address(self) -> Tuple[str, int]:
        """
        The bound (host, port).

        After start() this is the real address, so a configured port of 0
        reports the port the OS picked.
        """
        if self._address is not None:
            return self._address
        return (self.config.host, self.config.port)

    def _create_socket(self) -> socket.socket:
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)

        # Avoid "Address already in use" while the previous socket is
        # still in TIME_WAIT after a restart
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)

        sock.settimeout(ACCEPT_POLL_INTERVAL)
        return sock

    def _setup_signals(self):
        """
        Shut down gracefully on SIGTERM / SIGINT.

        signal.signal() only works in the main thread. When the server is
        started from another thread (tests, embedding), handlers are left
        alone and shutdown() must be called explicitly.
        """
        if threading.current_thread() is not threading.main_thread():
            return

        def shutdown_handler(signum, frame):
            signal_name = signal.Signals(signum).name
            logger.info(f"Received {signal_name}, initiating shutdown...")
            self.shutdown()

        self._original_handlers[signal.SIGTERM] = signal.signal(signal.SIGTERM, shutdown_handler)
        self._original_handlers[signal.SIGINT] = signal.signal(signal.SIGINT, shutdown_handler)

    def _restore_signals(self):
        for sig, handler in self._original_handlers.items():
            signal.signal(sig, handler)
        self._original_handlers.clear()

    def start(self, connection_handler: Callable[[Connection], None]):
        """
        Bind, listen and accept connections until shutdown().

        This method BLOCKS.

        Raises:
            HTTPIOError: The address could not be bound.
        """
        self._socket = self._create_socket()

        try:
            self._socket.bind((self.config.host, self.config.port))
            self._socket.listen(self.config.backlog)
        except OSError as e:
            logger.error(f"Failed to bind to {self.config.host}:{self.config.port}: {e}")
            self._socket.close()
            self._socket = None
            raise HTTPIOError(f"Failed to bind to {self.config.host}:{self.config.port}: {e}") from e

        self._address = self._socket.getsockname()[:2]
        self._running = True

        self._setup_signals()

        logger.info(f"Server listening on {self._address[0]}:{self._address[1]}")
        self._ready_event.set()

        try:
            self._accept_loop(connection_handler)
        finally:
            self._cleanup()

    def _accept_loop(self, connection_handler: Callable[[Connection], None]):
        """
        ┌─────────────────────────────────────────────────────────────────┐
        │                     Accept Loop Flow                             │
        ├─────────────────────────────────────────────────────────────────┤
        │                                                                  │
        │   while self._running:                                           │
        │       ├──► accept()  (or timeout after 1 second)                 │
        │       ├──► wrap in Connection                                    │
        │       └──► connection_handler(conn), returns before next accept  │
        │                                                                  │
        └─────────────────────────────────────────────────────────────────┘
        """
        while self._running:
            try:
                client_socket, client_address = self._socket.accept()
            except socket.timeout:
                continue
            except OSError as e:
                # Usually means the socket was closed during shutdown
                if self._running:
                    logger.error(f"Accept error: {e}")
                break

            logger.debug(f"Accepted connection from {client_address[0]}:{client_address[1]}")

            conn = Connection(
                socket=client_socket,
                address=client_address,
                timeout=self.config.timeout,
            )
            connection_handler(conn)

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """
        Block until the server is listening.

        Returns:
            True once listening, False on timeout.
        """
        return self._ready_event.wait(timeout)

    def shutdown(self):
        """
        Stop accepting connections.

        Safe to call from another thread or a signal handler, and more
        than once. The loop exits within one poll interval, after the
        connection currently being served (if any) is finished.
        """
        logger.info("Shutting down socket server...")
        self._running = False

    def _cleanup(self):
        self._restore_signals()

        if self._socket:
            self._socket.close()
            self._socket = None

        self._ready_event.clear()
        logger.info("Socket server stopped")

