"""
=============================================================================
HTTP SERVER
=============================================================================

Ties the pieces together: the socket server accepts, the connection reads,
the parser parses, the handler answers, the response is written back.

=============================================================================
PER-CONNECTION PIPELINE
=============================================================================

    accept()
       │
       ▼
    read (one recv of buffer_size bytes)
       │
       ▼
    RequestParser.parse()
       │                           │
       │ Request                   │ HTTPParseError
       ▼                           ▼
    handler.handle_request()    handler.handle_bad_request()
       │                           │
       └─────────────┬─────────────┘
                     ▼
    response.send(connection)
                     │
                     ▼
    close

=============================================================================
ERROR HANDLING
=============================================================================

    ┌──────────────────────┬────────────────────────────────────────────┐
    │ Failure              │ Outcome                                    │
    ├──────────────────────┼────────────────────────────────────────────┤
    │ bind()               │ logged, OSError raised, server never runs  │
    │ accept()             │ logged, loop continues                     │
    │ read                 │ logged, connection closed                  │
    │ parse                │ handle_bad_request() (400 by default)      │
    │ handler raises       │ logged with traceback, 500 sent            │
    │ bad handler result   │ same as a raise: 500 sent                  │
    │ write                │ logged, not retried                        │
    └──────────────────────┴────────────────────────────────────────────┘

No failure on one connection affects the next one.

=============================================================================
"""

import logging
from typing import Optional

from .config import ServerConfig
from .core import SocketServer, Connection
from .core.connection import ConnectionState
from .http import (
    Handler,
    HTTPParseError,
    Request,
    RequestParser,
    Response,
    internal_error,
)

logger = logging.getLogger(__name__)
access_logger = logging.getLogger("minihttp.access")


class HTTPServer:
    """
    Single-threaded HTTP/1.1 server.

    Usage:
        class Hello(Handler):
            def handle_request(self, request):
                return ok("hello")

        server = HTTPServer(ServerConfig(port=8080))
        server.run(Hello())   # Blocks until Ctrl+C / SIGTERM
    """

    def __init__(self, config: Optional[ServerConfig] = None):
        """
        Args:
            config: Server configuration. Uses defaults if not provided.

        Raises:
            ValueError: If the configuration is invalid.
        """
        self.config = config or ServerConfig()
        self.config.validate()

        self._socket_server = SocketServer(self.config)
        self._parser = RequestParser()
        self._handler: Optional[Handler] = None

    @property
    def address(self):
        """The bound (host, port) while running."""
        return self._socket_server.address

    @property
    def is_running(self) -> bool:
        return self._socket_server.is_running

    # =========================================================================
    # SERVER LIFECYCLE
    # =========================================================================

    def run(self, handler: Handler):
        """
        Start the server (blocking).

        Args:
            handler: Receives every request for the life of the server.

        Raises:
            OSError: If the listening socket cannot be bound.
        """
        self._handler = handler
        self._setup_logging()

        logger.info(
            f"Starting {self.config.server_name} on {self.config.host}:{self.config.port} "
            f"(read buffer {self.config.buffer_size} bytes)"
        )

        try:
            self._socket_server.start(self._handle_connection)
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")
        finally:
            self._handler = None
            logger.info("Server stopped")

    def shutdown(self):
        """Ask the accept loop to stop. Safe from other threads."""
        self._socket_server.shutdown()

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """Block until the server is listening."""
        return self._socket_server.wait_until_ready(timeout)

    def _setup_logging(self):
        """Configure logging based on config."""
        logging.basicConfig(
            level=self.config.level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        logging.getLogger("minihttp").setLevel(self.config.level)

    # =========================================================================
    # REQUEST HANDLING
    # =========================================================================

    def _handle_connection(self, conn: Connection):
        """
        Serve exactly one request on conn, then close it.

        Called by SocketServer for each accepted connection, on the accept
        thread. Never raises: any failure is logged so the accept loop keeps
        going.
        """
        with conn:
            try:
                data = conn.read_request()
            except OSError as e:
                logger.error(f"[{conn.id}] Failed to read from connection: {e}")
                return

            if not data:
                logger.debug(f"[{conn.id}] Client closed without sending a request")
                return

            conn.state = ConnectionState.PROCESSING
            request, response = self.process(data, self._handler)

            try:
                response.send(conn)
            except OSError as e:
                logger.error(f"[{conn.id}] Failed to send response: {e}")
                return

            self._log_access(conn, request, response)

    def process(self, data: bytes, handler: Handler):
        """
        Turn raw request bytes into a response.

        Returns:
            Tuple of (Request, or None if parsing failed; Response).
        """
        try:
            request = self._parser.parse(data)
        except HTTPParseError as e:
            return None, self._call(handler.handle_bad_request, e)

        return request, self._call(handler.handle_request, request)

    def _call(self, method, argument) -> Response:
        """
        Invoke a handler method, converting an exception into a 500.

        A return value that is not a Response is treated the same way, so
        nothing the handler does can fail later while sending.
        """
        try:
            response = method(argument)
            if not isinstance(response, Response):
                raise TypeError(
                    f"Handler returned {type(response).__name__}, expected Response"
                )
            return response
        except Exception as e:
            logger.exception(f"Handler error: {e}")
            return internal_error()

    def _log_access(self, conn: Connection, request: Optional[Request], response: Response):
        """One line per served request: ip "METHOD path" status bytes."""
        if request is None:
            line = "-"
        else:
            line = f"{request.method} {request.path}"
        access_logger.info(
            f'{conn.client_ip} "{line}" {response.status.value} {response.content_length}'
        )


def run(bind_address: str, handler: Handler, buffer_size: int = 1024, **kwargs):
    """
    Run a server bound to a "host:port" address (blocking).

    Example:
        run("127.0.0.1:8080", WebsiteHandler("./public"))

    Args:
        bind_address: Address to listen on, e.g. "0.0.0.0:8080".
        handler: The application handler.
        buffer_size: Bytes read per request; the maximum request size.
        **kwargs: Any other ServerConfig field.
    """
    config = ServerConfig.from_address(bind_address, buffer_size=buffer_size, **kwargs)
    HTTPServer(config).run(handler)
