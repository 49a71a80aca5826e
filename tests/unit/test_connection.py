"""
Unit tests for the client connection wrapper, over a socketpair.
"""

import socket

import pytest

from minihttp.core.connection import Connection, ConnectionState
from minihttp.http import Response


@pytest.fixture
def pair():
    server_side, client_side = socket.socketpair()
    yield server_side, client_side
    client_side.close()
    server_side.close()


class TestConnection:

    def test_single_read_bounded_by_buffer(self, pair):
        server_side, client_side = pair
        conn = Connection(socket=server_side, address=("127.0.0.1", 5555), buffer_size=16)

        client_side.sendall(b"GET / HTTP/1.1\r\nHost: example.com\r\n\r\n")
        data = conn.read_request()

        assert data == b"GET / HTTP/1.1\r\n"
        assert conn.state == ConnectionState.READING

    def test_read_returns_empty_when_client_closed(self, pair):
        server_side, client_side = pair
        conn = Connection(socket=server_side, address=("127.0.0.1", 5555))

        client_side.shutdown(socket.SHUT_WR)

        assert conn.read_request() == b""

    def test_read_timeout_raises(self, pair):
        server_side, _ = pair
        conn = Connection(socket=server_side, address=("127.0.0.1", 5555), timeout=0.05)

        with pytest.raises(OSError):
            conn.read_request()

    def test_response_send_through_connection(self, pair):
        server_side, client_side = pair
        conn = Connection(socket=server_side, address=("127.0.0.1", 5555))

        Response(200, "hi").send(conn)
        conn.close()

        received = b""
        while True:
            chunk = client_side.recv(1024)
            if not chunk:
                break
            received += chunk

        assert received == b"HTTP/1.1 200 OK\r\nContent-Length: 2\r\n\r\nhi"
        assert conn.state == ConnectionState.CLOSED

    def test_close_is_idempotent(self, pair):
        server_side, _ = pair
        conn = Connection(socket=server_side, address=("127.0.0.1", 5555))

        conn.close()
        conn.close()

        assert conn.state == ConnectionState.CLOSED

    def test_context_manager_closes(self, pair):
        server_side, _ = pair

        with Connection(socket=server_side, address=("10.0.0.1", 4242)) as conn:
            assert conn.client_ip == "10.0.0.1"

        assert conn.state == ConnectionState.CLOSED
