"""
=============================================================================
CORE NETWORKING
=============================================================================

    socket_server.py   SocketServer: bind, listen, sequential accept loop
    connection.py      Connection: one read, one write, graceful close

=============================================================================
"""

from .socket_server import SocketServer
from .connection import Connection, ConnectionState

__all__ = [
    "SocketServer",     # Listening socket and accept loop
    "Connection",       # Wrapper for one client socket
    "ConnectionState",  # Enum for connection lifecycle states
]
