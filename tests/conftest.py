"""
pytest configuration and fixtures.
"""

import socket
import threading
from typing import Generator, Optional

import pytest

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from minihttp import HTTPServer, ServerConfig
from minihttp.http import Handler, Request, Response, ok, not_found


@pytest.fixture
def sample_get_request() -> bytes:
    """Sample HTTP GET request with a multi-valued query."""
    return (
        b"GET /api/users?page=1&tag=a&tag=b HTTP/1.1\r\n"
        b"Host: localhost:8080\r\n"
        b"User-Agent: pytest\r\n"
        b"Accept: text/plain\r\n"
        b"\r\n"
    )


@pytest.fixture
def sample_post_request() -> bytes:
    """Sample HTTP POST request with a text body."""
    body = b"name=John&email=john@example.com"
    return (
        b"POST /api/users HTTP/1.1\r\n"
        b"Host: localhost:8080\r\n"
        b"Content-Type: application/x-www-form-urlencoded\r\n"
        + f"Content-Length: {len(body)}\r\n".encode()
        + b"\r\n"
    ) + body


class EchoHandler(Handler):
    """Test handler: echoes method and path; a few paths misbehave on purpose."""

    def __init__(self):
        self.seen = []

    def handle_request(self, request: Request) -> Response:
        self.seen.append(request)
        if request.path == "/boom":
            raise RuntimeError("handler exploded")
        if request.path == "/missing":
            return not_found()
        if request.path == "/bytes":
            return Response(200, b"raw bytes")
        if request.path == "/not-a-response":
            return "just a string"
        return ok(f"{request.method} {request.path}")


class ServerThread:
    """Runs an HTTPServer in a background thread on an OS-assigned port."""

    def __init__(self, server: HTTPServer, handler: Handler):
        self.server = server
        self.handler = handler
        self._thread: Optional[threading.Thread] = None

    @property
    def port(self) -> int:
        return self.server.address[1]

    def start(self):
        self._thread = threading.Thread(
            target=self.server.run,
            args=(self.handler,),
            daemon=True,
        )
        self._thread.start()

        if not self.server.wait_until_ready(timeout=5.0):
            raise RuntimeError("Server failed to start")

    def stop(self):
        self.server.shutdown()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)

    def request(self, raw: bytes) -> bytes:
        """Send raw bytes on a fresh connection and read until the server closes."""
        with socket.create_connection(("127.0.0.1", self.port), timeout=5.0) as s:
            if raw:
                s.sendall(raw)
            chunks = []
            while True:
                chunk = s.recv(4096)
                if not chunk:
                    break
                chunks.append(chunk)
        return b"".join(chunks)


@pytest.fixture
def echo_handler() -> EchoHandler:
    return EchoHandler()


@pytest.fixture
def test_server(echo_handler: EchoHandler) -> Generator[ServerThread, None, None]:
    """A running server with the echo handler."""
    server = HTTPServer(ServerConfig(
        host="127.0.0.1",
        port=0,  # Let OS pick a free port
        timeout=5.0,
        log_level="WARNING",
    ))

    srv = ServerThread(server, echo_handler)
    srv.start()

    yield srv

    srv.stop()
