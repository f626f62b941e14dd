"""
=============================================================================
CONFIGURATION
=============================================================================

Typed configuration for the server and the client.

=============================================================================
12-FACTOR CONFIGURATION
=============================================================================

Values come from three places, in increasing priority:

    1. Dataclass defaults          ServerConfig()
    2. Environment variables       ServerConfig.from_env()
    3. CLI arguments               python -m tinyhttp server --port 3000

=============================================================================
ENVIRONMENT VARIABLES
=============================================================================

    TINYHTTP_HOST           Server host            (default: 127.0.0.1)
    TINYHTTP_PORT           Server port            (default: 8080)
    TINYHTTP_TIMEOUT        Socket timeout seconds (default: none, block)
    TINYHTTP_MAX_BODY_SIZE  Largest request body   (default: 10 MiB)
    TINYHTTP_LOG_LEVEL      Logging level          (default: INFO)

=============================================================================
"""

import os
from dataclasses import dataclass
from typing import Optional

from .http.headers import DEFAULT_MAX_HEADERS
from .http.streams import DEFAULT_MAX_LINE_SIZE


_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class ServerConfig:
    """
    Configuration for the HTTP server.

    =========================================================================
    CONFIGURATION GROUPS
    =========================================================================

    NETWORK SETTINGS
    - host, port, backlog, timeout

    PROTOCOL LIMITS
    - max_line_size, max_headers, max_body_size

    LOGGING
    - log_level

    =========================================================================
    """

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    host: str = "127.0.0.1"
    """
    The IP address to bind to.
    - "127.0.0.1" - Localhost only (development)
    - "0.0.0.0" - All network interfaces
    """

    port: int = 8080
    """The port number to listen on. 0 lets the OS pick a free port."""

    backlog: int = 128
    """
    Maximum number of queued connections.
    Connections are served one at a time, so waiting clients queue here.
    """

    timeout: Optional[float] = None
    """
    Per-connection socket timeout in seconds.
    None = fully blocking: a silent peer stalls the server until it
    closes. A number turns a stall into an I/O failure for that
    connection only.
    """

    # ─────────────────────────────────────────────────────────────────────
    # PROTOCOL LIMITS
    # ─────────────────────────────────────────────────────────────────────

    max_line_size: int = DEFAULT_MAX_LINE_SIZE
    """Longest request line or header line accepted, in bytes."""

    max_headers: int = DEFAULT_MAX_HEADERS
    """Most header lines accepted in one request."""

    max_body_size: Optional[int] = 10 * 1024 * 1024  # 10 MB
    """
    Largest declared request body accepted, in bytes.
    None disables the check.
    """

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)."""

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """
        Create configuration from TINYHTTP_* environment variables.

        Usage:
            TINYHTTP_PORT=3000 TINYHTTP_LOG_LEVEL=DEBUG python -m tinyhttp server
        """
        timeout = os.getenv("TINYHTTP_TIMEOUT")
        max_body = os.getenv("TINYHTTP_MAX_BODY_SIZE")
        return cls(
            host=os.getenv("TINYHTTP_HOST", "127.0.0.1"),
            port=int(os.getenv("TINYHTTP_PORT", "8080")),
            timeout=float(timeout) if timeout else None,
            max_body_size=int(max_body) if max_body else 10 * 1024 * 1024,
            log_level=os.getenv("TINYHTTP_LOG_LEVEL", "INFO"),
        )

    def validate(self) -> None:
        """
        Validate configuration values (fail fast at startup).

        Raises:
            ValueError: On the first invalid value.
        """
        if not 0 <= self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 0-65535.")

        if self.backlog < 1:
            raise ValueError("backlog must be >= 1")

        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be > 0")

        _validate_limits(self.max_line_size, self.max_headers)

        if self.max_body_size is not None and self.max_body_size < 0:
            raise ValueError("max_body_size must be >= 0")

        if self.log_level.upper() not in _LOG_LEVELS:
            raise ValueError(f"Invalid log_level: {self.log_level}")


@dataclass
class ClientConfig:
    """Configuration for HTTPClient."""

    timeout: Optional[float] = None
    """Connect/read timeout in seconds. None = block indefinitely."""

    max_line_size: int = DEFAULT_MAX_LINE_SIZE
    """Longest status line or header line accepted, in bytes."""

    max_headers: int = DEFAULT_MAX_HEADERS
    """Most header lines accepted in one response."""

    default_port: int = 80
    """Port used when a URL does not name one."""

    user_agent: Optional[str] = None
    """Sent as the user-agent header when set."""

    def validate(self) -> None:
        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be > 0")
        if not 0 < self.default_port < 65536:
            raise ValueError(f"Invalid default_port: {self.default_port}")
        _validate_limits(self.max_line_size, self.max_headers)


def _validate_limits(max_line_size: int, max_headers: int) -> None:
    if max_line_size < 64:
        raise ValueError("max_line_size must be >= 64")
    if max_headers < 1:
        raise ValueError("max_headers must be >= 1")
