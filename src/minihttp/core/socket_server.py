"""
=============================================================================
LOW-LEVEL TCP SOCKET SERVER
=============================================================================

Owns the listening socket and the accept loop. Connections are accepted and
handed to a callback one at a time, on the calling thread: the next accept()
only happens after the callback returns.

=============================================================================
SOCKET LIFECYCLE (Server Side)
=============================================================================

    1. socket()    Create a TCP socket
    2. bind()      Associate it with IP:PORT        ── failure is fatal
    3. listen()    Let the OS queue incoming connections (backlog)
    4. accept()    Take the next queued connection  ── failure is logged
                   └─ Returns a NEW socket just for that client
    5. close()     Release the listening socket on shutdown

                    ┌───────────────────────┐
                    │   Listening Socket    │ ◄── Created once at startup
                    └───────────┬───────────┘
                                │ accept()
                                ▼
                    ┌───────────────────────┐
                    │  Client Connection    │ ◄── One at a time; the next
                    │  (read, handle, send) │     client waits in the backlog
                    └───────────────────────┘

=============================================================================
SINGLE-THREADED MODEL
=============================================================================

Exactly one connection is in flight at any time. A client that sends half a
request and stops blocks everyone else until it gives up, unless a socket
timeout is configured. Connections share no state, so the model is simple to
reason about; the cost is throughput.

=============================================================================
SHUTDOWN
=============================================================================

The listening socket has a 1 second accept() timeout so the loop can notice
shutdown() (called from a signal handler or another thread) without
waiting for one more client to connect.

=============================================================================
"""

import logging
import signal
import socket
import threading
from typing import Callable, Optional, Tuple

from ..config import ServerConfig
from .connection import Connection

logger = logging.getLogger(__name__)

ACCEPT_POLL_INTERVAL = 1.0


class SocketServer:
    """
    Low-level TCP socket server.

    Usage:
        def handle_connection(conn: Connection):
            with conn:
                ...

        server = SocketServer(config)
        server.start(handle_connection)  # Blocks until shutdown()
    """

    def __init__(self, config: ServerConfig):
        """
        Args:
            config: Server configuration (host, port, backlog, buffer_size,
                    timeout).

        The socket is created lazily in start().
        """
        self.config = config

        self._socket: Optional[socket.socket] = None
        self._running = False

        # Set once the socket is listening
        self._ready_event = threading.Event()

        self._original_handlers: dict = {}

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def address(self) -> Tuple[str, int]:
        """The bound (host, port); reflects the real port when port=0."""
        if self._socket is not None:
            return self._socket.getsockname()[:2]
        return self.config.address

    def _create_socket(self) -> socket.socket:
        """Create the listening socket with SO_REUSEADDR set."""
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)

        # Allow an immediate restart while old connections sit in TIME_WAIT
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)

        sock.settimeout(ACCEPT_POLL_INTERVAL)
        return sock

    def _setup_signals(self):
        """
        Install SIGTERM/SIGINT handlers that trigger a graceful shutdown.

        signal.signal() only works on the main thread, so a server started
        from a worker thread (as the tests do) keeps the default handlers.
        """
        if threading.current_thread() is not threading.main_thread():
            return

        def shutdown_handler(signum, frame):
            logger.info(f"Received {signal.Signals(signum).name}, initiating shutdown...")
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

        Args:
            connection_handler: Called with each accepted Connection, on this
                                thread. It owns the connection and must
                                close it.

        Raises:
            OSError: If the address cannot be bound. Nothing is retried.
        """
        self._socket = self._create_socket()

        try:
            self._socket.bind(self.config.address)
            self._socket.listen(self.config.backlog)
        except OSError as e:
            logger.error(f"Failed to bind to {self.config.host}:{self.config.port}: {e}")
            self._socket.close()
            self._socket = None
            raise

        self._running = True
        self._setup_signals()

        host, port = self.address
        logger.info(f"Listening on http://{host}:{port}")
        self._ready_event.set()

        try:
            self._accept_loop(connection_handler)
        finally:
            self._cleanup()

    def _accept_loop(self, connection_handler: Callable[[Connection], None]):
        """
        Accept connections one by one.

        An accept() error is logged and the loop carries on; it only stops
        when shutdown() clears the running flag.
        """
        while self._running:
            try:
                client_socket, client_address = self._socket.accept()
            except socket.timeout:
                continue  # Poll the running flag
            except OSError as e:
                if not self._running:
                    break  # Socket closed during shutdown
                logger.error(f"Failed to accept connection: {e}")
                continue

            logger.debug(f"Accepted connection from {client_address[0]}:{client_address[1]}")

            try:
                conn = Connection(
                    socket=client_socket,
                    address=client_address,
                    buffer_size=self.config.buffer_size,
                    timeout=self.config.timeout,
                )
            except OSError as e:
                logger.error(f"Failed to configure connection from {client_address[0]}: {e}")
                client_socket.close()
                continue

            connection_handler(conn)

    def shutdown(self):
        """
        Stop the accept loop.

        Safe to call from another thread or a signal handler, and more than
        once. The loop exits within ACCEPT_POLL_INTERVAL seconds.
        """
        logger.info("Shutting down socket server...")
        self._running = False

    def _cleanup(self):
        self._restore_signals()

        if self._socket:
            try:
                self._socket.close()
            except OSError:
                pass
            self._socket = None

        self._ready_event.clear()
        logger.info("Socket server stopped")

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """Block until the socket is listening. Returns False on timeout."""
        return self._ready_event.wait(timeout)
