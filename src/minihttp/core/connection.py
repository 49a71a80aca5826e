"""
=============================================================================
CLIENT CONNECTION
=============================================================================

Wraps one accepted client socket for the duration of exactly one request.

=============================================================================
CONNECTION LIFECYCLE
=============================================================================

    ┌──────────┐  recv()   ┌─────────┐  parse +   ┌────────────┐
    │ ACCEPTED │ ────────► │ READING │ ─────────► │ PROCESSING │
    └──────────┘           └─────────┘  handler   └─────┬──────┘
                                                        │ write()
    ┌──────────┐  close()  ┌─────────┐                  │
    │  CLOSED  │ ◄──────── │ WRITING │ ◄────────────────┘
    └──────────┘           └─────────┘

There is no keep-alive: the connection is closed after one response, which
is also how the client learns the response is complete when it has no body.

=============================================================================
SINGLE READ
=============================================================================

read_request() calls recv() once with the configured buffer size. TCP may
deliver a request in several segments, and a request larger than the buffer
is cut short; both end up as a request the parser rejects. The server never
loops to drain more bytes.

=============================================================================
"""

import logging
import socket
import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)


class ConnectionState(Enum):
    """Where a connection is in its single request/response cycle."""
    ACCEPTED = "accepted"      # Just accepted, nothing read yet
    READING = "reading"        # Waiting on recv()
    PROCESSING = "processing"  # Request parsed, handler is executing
    WRITING = "writing"        # Sending the response
    CLOSED = "closed"          # Socket released


@dataclass
class Connection:
    """
    Represents a client connection.

    Acts as the writer for Response.send(): write() pushes bytes with
    sendall() and lets socket errors propagate to the caller.

    Attributes:
        socket: The client socket.
        address: Client's (ip, port) tuple.
        id: Short identifier used in log lines.
        state: Current connection state.
        buffer_size: Bytes requested from the single recv() call.
        timeout: Socket timeout, None for fully blocking I/O.
    """

    socket: socket.socket
    address: tuple

    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    state: ConnectionState = ConnectionState.ACCEPTED
    created_at: float = field(default_factory=time.time)

    buffer_size: int = 1024
    timeout: Optional[float] = None

    def __post_init__(self):
        # settimeout(None) puts the socket in blocking mode
        self.socket.settimeout(self.timeout)

    @property
    def client_ip(self) -> str:
        """Get the client IP address."""
        return self.address[0] if self.address else ""

    @property
    def age(self) -> float:
        """Seconds since the connection was accepted."""
        return time.time() - self.created_at

    # =========================================================================
    # READING
    # =========================================================================

    def read_request(self) -> bytes:
        """
        Read up to buffer_size bytes with a single recv().

        Returns:
            The bytes received; b"" if the client closed without sending.

        Raises:
            OSError: On socket errors, including socket.timeout when a
                     timeout is configured.
        """
        self.state = ConnectionState.READING
        data = self.socket.recv(self.buffer_size)
        logger.debug(f"[{self.id}] Read {len(data)} bytes")
        if len(data) == self.buffer_size:
            logger.debug(f"[{self.id}] Read buffer filled; request may be truncated")
        return data

    # =========================================================================
    # WRITING
    # =========================================================================

    def write(self, data: bytes) -> int:
        """
        Send all of data to the client.

        Uses sendall() so a partial send never leaves half a response.

        Returns:
            Number of bytes written.

        Raises:
            OSError: If the client went away or the socket failed.
        """
        self.state = ConnectionState.WRITING
        self.socket.sendall(data)
        return len(data)

    # =========================================================================
    # CLOSING
    # =========================================================================

    def close(self):
        """
        Close the connection gracefully.

        1. shutdown(SHUT_WR): tell the client we are done sending (FIN).
        2. Discard what the client has already sent and we never read, with
           one non-blocking recv(). Closing with unread data makes the kernel
           send RST, and the client can lose the response we just wrote.
           This never waits: the accept loop is blocked until close() returns.
        3. close(): release the file descriptor.
        """
        if self.state == ConnectionState.CLOSED:
            return

        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass  # Already disconnected

        try:
            self.socket.setblocking(False)
            self.socket.recv(self.buffer_size)
        except OSError:
            pass  # Nothing pending (BlockingIOError) or already reset

        try:
            self.socket.close()
        except OSError:
            pass

        self.state = ConnectionState.CLOSED
        logger.debug(f"[{self.id}] Connection closed after {self.age * 1000:.1f}ms")

    def __enter__(self):
        """
        Context manager entry.

            with Connection(sock, addr) as conn:
                data = conn.read_request()
                response.send(conn)
            # closed here
        """
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
