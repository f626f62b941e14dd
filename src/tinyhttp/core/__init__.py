"""
Core networking components.

    Connection    - one TCP connection as a buffered reader/writer pair
    SocketServer  - listening socket and sequential accept loop
"""

from .connection import Connection, ConnectionState
from .socket_server import SocketServer

__all__ = [
    "Connection",
    "ConnectionState",
    "SocketServer",
]
