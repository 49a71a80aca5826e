"""
Unit tests for the accept loop, with a stand-in listening socket.
"""

import logging
import socket

from minihttp.config import ServerConfig
from minihttp.core.socket_server import SocketServer


class FlakyListener:
    """accept() fails once, then hands out one client, then stops the server."""

    def __init__(self, server: SocketServer, client: socket.socket):
        self.server = server
        self.client = client
        self.calls = 0

    def accept(self):
        self.calls += 1
        if self.calls == 1:
            raise OSError(24, "Too many open files")
        if self.calls == 2:
            return self.client, ("127.0.0.1", 5555)
        self.server.shutdown()
        raise socket.timeout()


class TestAcceptLoop:

    def test_accept_failure_is_logged_and_loop_continues(self, caplog):
        server_side, client_side = socket.socketpair()
        server = SocketServer(ServerConfig(port=0))
        listener = FlakyListener(server, server_side)
        server._socket = listener
        server._running = True

        handled = []

        def handle(conn):
            handled.append(conn)
            conn.close()

        with caplog.at_level(logging.ERROR, logger="minihttp"):
            server._accept_loop(handle)

        client_side.close()

        assert "Failed to accept connection" in caplog.text
        assert len(handled) == 1
        assert handled[0].client_ip == "127.0.0.1"
        assert listener.calls == 3
        assert not server.is_running

    def test_address_falls_back_to_config(self):
        server = SocketServer(ServerConfig(host="127.0.0.1", port=8123))

        assert server.address == ("127.0.0.1", 8123)
        assert not server.wait_until_ready(timeout=0)
