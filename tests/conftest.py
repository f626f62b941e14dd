"""
pytest configuration and fixtures.
"""

import socket
import threading
from typing import Generator
import pytest

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from tinyhttp import HTTPServer, ServerConfig
from tinyhttp.http import HTTPRequest, HTTPResponse, ok


@pytest.fixture
def sample_get_request() -> bytes:
    """Sample HTTP GET request."""
    return (
        b"GET /search?q=tiny HTTP/1.1\r\n"
        b"Host: localhost:8080\r\n"
        b"User-Agent: pytest\r\n"
        b"Accept: text/plain\r\n"
        b"\r\n"
    )


@pytest.fixture
def sample_post_request() -> bytes:
    """Sample HTTP POST request with JSON body."""
    body = b'{"name": "John", "email": "john@example.com"}'
    return (
        b"POST /api/users HTTP/1.1\r\n"
        b"Host: localhost:8080\r\n"
        b"Content-Type: application/json\r\n"
        b"Content-Length: %d\r\n"
        b"\r\n"
        b"%s"
    ) % (len(body), body)


@pytest.fixture
def free_port() -> int:
    """Get a free port for testing."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(('127.0.0.1', 0))
        return s.getsockname()[1]


class TestServer:
    """Test server helper that runs in a background thread."""

    __test__ = False

    def __init__(self, server: HTTPServer, port: int):
        self.server = server
        self.port = port
        self._thread: threading.Thread = None

    @property
    def base_url(self) -> str:
        return f"http://127.0.0.1:{self.port}"

    def start(self):
        """Start server in background thread."""
        self._thread = threading.Thread(
            target=self.server.run,
            kwargs={"port": self.port},
            daemon=True
        )
        self._thread.start()

        if not self.server.wait_until_ready(timeout=5.0):
            raise RuntimeError("Server failed to start")

    def stop(self):
        """Stop the server."""
        self.server.shutdown()

        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)

    def send_raw(self, data: bytes) -> bytes:
        """Send raw bytes, half-close, and return everything the server sent back."""
        with socket.create_connection(('127.0.0.1', self.port), timeout=5.0) as s:
            s.sendall(data)
            s.shutdown(socket.SHUT_WR)
            chunks = []
            while True:
                chunk = s.recv(4096)
                if not chunk:
                    break
                chunks.append(chunk)
        return b"".join(chunks)


@pytest.fixture
def test_server(free_port: int) -> Generator[TestServer, None, None]:
    """Create a test server."""
    server = HTTPServer(config=ServerConfig(
        host="127.0.0.1",
        port=free_port,
        timeout=5.0,
        log_level="WARNING",
    ))

    @server.get("/ok")
    def ok_route(request: HTTPRequest) -> HTTPResponse:
        return ok(version=request.version)

    @server.get("/hello")
    def hello_route(request: HTTPRequest) -> HTTPResponse:
        return ok("Hello, World!")

    @server.post("/echo")
    def echo_route(request: HTTPRequest) -> HTTPResponse:
        return ok(request.body)

    @server.get("/json")
    def json_route(request: HTTPRequest) -> HTTPResponse:
        return ok({"status": "ok"})

    @server.get("/boom")
    def boom_route(request: HTTPRequest) -> HTTPResponse:
        raise RuntimeError("handler failure")

    test_srv = TestServer(server, free_port)
    test_srv.start()

    yield test_srv

    test_srv.stop()
