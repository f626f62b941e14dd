"""
=============================================================================
CONNECTION MANAGEMENT
=============================================================================

Wraps one TCP socket (accepted by the server, or opened by the client)
in the pair of buffered binary streams the codec works on.

=============================================================================
TCP IS A BYTE STREAM, NOT A MESSAGE PROTOCOL
=============================================================================

TCP does not preserve message boundaries. Two send() calls on one side
may arrive as one recv() on the other, or as five. The codec therefore
never calls recv() directly: it reads lines and exact byte counts from a
buffered reader, and the buffering absorbs the arbitrary chunking.

    ┌───────────────┐   makefile("rb")   ┌────────────────────────────┐
    │               │ ─────────────────► │ reader: BufferedReader     │
    │ socket.socket │                    │   readline() / read(n)     │
    │               │ ─────────────────► │ writer: BufferedWriter     │
    └───────────────┘   makefile("wb")   │   write() / flush()        │
                                         └────────────────────────────┘

=============================================================================
ONE EXCHANGE PER CONNECTION
=============================================================================

There is no keep-alive. A connection carries exactly one request and one
response, then it is closed:

    SERVER                                   CLIENT
    accept ─────────────────────────────────  connect
    decode_request  ◄───────────────────────  encode_request
    encode_response ────────────────────────► decode_response
    close                                     close

=============================================================================
CONNECTION STATE MACHINE
=============================================================================

    NEW ──────► READING ──────► PROCESSING ──────► WRITING
                   │                 │                 │
                   └─────────────────┴─────────────────┴──────► CLOSED

Any failure moves straight to CLOSED; nothing is written in that case.

=============================================================================
"""

import socket
import logging
import time
from enum import Enum
from dataclasses import dataclass, field
from typing import BinaryIO, Optional, Tuple
import uuid

from ..http.errors import HTTPIOError


logger = logging.getLogger(__name__)


# Bounds on how long close() keeps reading what the peer still sends
DRAIN_TIMEOUT = 0.5
DRAIN_LIMIT = 64 * 1024


class ConnectionState(Enum):
    """
    Connection lifecycle states.

    Used for logging and to make close() idempotent.
    """
    NEW = "new"                # Just accepted or connected
    READING = "reading"        # Decoding the incoming message
    PROCESSING = "processing"  # Request decoded, handler is executing
    WRITING = "writing"        # Encoding the outgoing message
    CLOSED = "closed"          # Socket released


@dataclass
class Connection:
    """
    One open TCP connection.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    Connection Responsibilities                       │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │  1. BUFFERED STREAMS                                                 │
    │     └── reader/writer created once from the socket                   │
    │                                                                      │
    │  2. TIMEOUT                                                          │
    │     └── None = blocking; a number bounds every read and write        │
    │                                                                      │
    │  3. STATE TRACKING                                                   │
    │     └── Which phase of the exchange we are in, for logging           │
    │                                                                      │
    │  4. GRACEFUL CLOSE                                                   │
    │     └── Flush, send FIN, drain what the peer still sends, release    │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

    Attributes:
        socket: The connected socket.
        address: Peer's (ip, port) tuple.
        id: Short identifier used in log lines.
        state: Current connection state.
        timeout: Socket timeout in seconds, None for blocking.
    """

    socket: socket.socket
    address: Tuple[str, int]

    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    state: ConnectionState = ConnectionState.NEW
    timeout: Optional[float] = None

    reader: BinaryIO = field(init=False, repr=False)
    writer: BinaryIO = field(init=False, repr=False)

    def __post_init__(self):
        # settimeout(None) also puts the socket back in blocking mode,
        # which matters for sockets accepted from a polling listener
        self.socket.settimeout(self.timeout)
        self.reader = self.socket.makefile("rb")
        self.writer = self.socket.makefile("wb")

    @classmethod
    def open(cls, address: Tuple[str, int], timeout: Optional[float] = None) -> "Connection":
        """
        Connect to ``address`` and wrap the new socket.

        Raises:
            HTTPIOError: The connection could not be established.
        """
        try:
            sock = socket.create_connection(address, timeout=timeout)
        except OSError as e:
            raise HTTPIOError(f"Failed to connect to {address[0]}:{address[1]}: {e}") from e

        conn = cls(socket=sock, address=address, timeout=timeout)
        logger.debug(f"[{conn.id}] Connected to {address[0]}:{address[1]}")
        return conn

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def peer_ip(self) -> str:
        return self.address[0]

    @property
    def peer_port(self) -> int:
        return self.address[1]

    @property
    def closed(self) -> bool:
        return self.state == ConnectionState.CLOSED

    # =========================================================================
    # CLOSING
    # =========================================================================

    def close(self):
        """
        Close the connection gracefully.

        1. Close the streams (the writer flushes whatever is buffered)
        2. shutdown(SHUT_WR): send FIN so the peer sees end-of-stream
        3. Drain what the peer still sends, at most DRAIN_LIMIT bytes
           within DRAIN_TIMEOUT seconds in total
        4. close(): release the file descriptor

        ┌─────────────────────────────────────────────────────────────────┐
        │                    TCP Close Sequence                            │
        ├─────────────────────────────────────────────────────────────────┤
        │                                                                  │
        │   Us                                  Peer                       │
        │      │   FIN ──────────────────────────► │  (shutdown SHUT_WR)  │
        │      │ ◄───────────────────────── ACK   │                       │
        │      │ ◄───────────────────────── FIN   │  (peer closes)        │
        │      │   ACK ──────────────────────────► │                       │
        │   (socket closed)                  (socket closed)               │
        │                                                                  │
        └─────────────────────────────────────────────────────────────────┘

        Safe to call more than once. Errors from a peer that is already
        gone are expected here and only logged at DEBUG.
        """
        if self.state == ConnectionState.CLOSED:
            return

        for stream in (self.writer, self.reader):
            try:
                stream.close()
            except OSError as e:
                logger.debug(f"[{self.id}] Stream close failed: {e}")

        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass  # Peer already disconnected

        deadline = time.monotonic() + DRAIN_TIMEOUT
        drained = 0
        try:
            while drained < DRAIN_LIMIT:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    break
                self.socket.settimeout(remaining)
                chunk = self.socket.recv(4096)
                if not chunk:
                    break
                drained += len(chunk)
        except OSError:
            pass  # socket.timeout is an OSError too

        self.socket.close()
        self.state = ConnectionState.CLOSED
        logger.debug(f"[{self.id}] Connection closed")

    # =========================================================================
    # CONTEXT MANAGER
    # =========================================================================

    def __enter__(self):
        """
        Allows:

            with Connection.open(("127.0.0.1", 8080)) as conn:
                encode_request(request, conn.writer)
                response = decode_response(conn.reader)
        """
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
