"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

Centralized configuration for the server, as a typed dataclass.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    CONFIGURATION SOURCES                            │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Priority (highest to lowest):                                     │
    │                                                                      │
    │   1. Command-line arguments                                         │
    │      └── python -m minihttp --port 3000                             │
    │                                                                      │
    │   2. Environment variables                                          │
    │      └── HTTP_PORT=3000 python -m minihttp                          │
    │                                                                      │
    │   3. Default values (in this dataclass)                             │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
THE READ BUFFER
=============================================================================

buffer_size is the number of bytes read from each connection, in a single
recv() call. It is also the largest request the server can parse: anything
beyond it is never read, so the request is truncated and almost always
rejected. The default of 1024 bytes fits a request line, a handful of
headers and a small body.

=============================================================================
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional, Tuple

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class ServerConfig:
    """
    Configuration for the HTTP server.

    Development:
        ServerConfig(host="127.0.0.1", port=8080, log_level="DEBUG")

    From a bind address string:
        ServerConfig.from_address("0.0.0.0:8080")
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
    """The port to listen on. 0 lets the OS pick a free port."""

    backlog: int = 128
    """Maximum number of queued connections waiting for accept()."""

    buffer_size: int = 1024
    """
    Bytes read per connection, in one recv() call.
    Bounds the maximum request size; larger requests are truncated.
    """

    timeout: Optional[float] = None
    """
    Per-connection socket timeout in seconds.
    None = blocking: a client that stops mid-request stalls the server.
    """

    # ─────────────────────────────────────────────────────────────────────
    # APPLICATION
    # ─────────────────────────────────────────────────────────────────────

    public_dir: Optional[str] = None
    """Directory served by the bundled WebsiteHandler (CLI only)."""

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)."""

    server_name: str = "minihttp/1.0"

    @property
    def address(self) -> Tuple[str, int]:
        """The (host, port) tuple passed to bind()."""
        return (self.host, self.port)

    @property
    def level(self) -> int:
        """log_level as a logging module constant."""
        return getattr(logging, self.log_level.upper(), logging.INFO)

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """
        Create configuration from environment variables.

        HTTP_HOST         Server host (default: 127.0.0.1)
        HTTP_PORT         Server port (default: 8080)
        HTTP_BUFFER_SIZE  Read buffer in bytes (default: 1024)
        HTTP_TIMEOUT      Socket timeout in seconds (default: none)
        HTTP_PUBLIC_DIR   Directory for the website handler
        HTTP_LOG_LEVEL    Logging level (default: INFO)
        """
        timeout = os.getenv("HTTP_TIMEOUT")
        return cls(
            host=os.getenv("HTTP_HOST", "127.0.0.1"),
            port=int(os.getenv("HTTP_PORT", "8080")),
            buffer_size=int(os.getenv("HTTP_BUFFER_SIZE", "1024")),
            timeout=float(timeout) if timeout else None,
            public_dir=os.getenv("HTTP_PUBLIC_DIR"),
            log_level=os.getenv("HTTP_LOG_LEVEL", "INFO"),
        )

    @classmethod
    def from_address(cls, address: str, **kwargs) -> "ServerConfig":
        """
        Create configuration from a "host:port" bind address.

        Example:
            ServerConfig.from_address("127.0.0.1:8080", buffer_size=2048)

        Raises:
            ValueError: If the address has no port or the port is not a number.
        """
        host, sep, port = address.rpartition(":")
        if not sep or not host:
            raise ValueError(f"Invalid bind address: {address!r}. Expected host:port.")
        try:
            port_number = int(port)
        except ValueError:
            raise ValueError(f"Invalid port in bind address: {address!r}") from None
        return cls(host=host, port=port_number, **kwargs)

    def validate(self) -> None:
        """
        Validate configuration values.

        Called by HTTPServer at construction time so a bad value fails
        before any socket is opened.
        """
        if not 0 <= self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 0-65535.")

        if self.backlog < 1:
            raise ValueError("backlog must be >= 1")

        if self.buffer_size < 16:
            raise ValueError("buffer_size must be >= 16")

        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be > 0")

        if self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {self.log_level}")
