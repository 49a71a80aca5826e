"""
=============================================================================
MINIHTTP - A Minimal HTTP/1.1 Server on Raw Sockets
=============================================================================

A small, strict HTTP/1.1 server: accept a connection, read one buffer,
parse it into a Request, hand it to your Handler, write the Response back,
close. One connection at a time.

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    minihttp/
    ├── __init__.py          # This file - package exports
    ├── __main__.py          # CLI entry point (python -m minihttp)
    ├── server.py            # HTTPServer and run()
    ├── config.py            # ServerConfig dataclass
    ├── core/                # Sockets
    │   ├── socket_server.py # Listening socket, sequential accept loop
    │   └── connection.py    # One client connection
    ├── http/                # Protocol
    │   ├── method.py        # Method enum
    │   ├── query_string.py  # QueryString
    │   ├── request.py       # Request parsing and ParseError
    │   ├── response.py      # Response serialization
    │   ├── status_codes.py  # HTTPStatus
    │   └── handler.py       # Handler contract
    └── handlers/
        └── website.py       # WebsiteHandler (static text files)

=============================================================================
QUICK START
=============================================================================

    from minihttp import Handler, HTTPServer, ServerConfig, ok, not_found

    class App(Handler):
        def handle_request(self, request):
            if request.path == "/":
                return ok("Hello World")
            return not_found()

    HTTPServer(ServerConfig(port=8080)).run(App())

=============================================================================
"""

__version__ = "1.0.0"

from .config import ServerConfig
from .server import HTTPServer, run
from .http import (
    Handler,
    HTTPParseError,
    HTTPStatus,
    Method,
    ParseError,
    QueryString,
    Request,
    Response,
    ok,
    bad_request,
    not_found,
    internal_error,
)

__all__ = [
    "HTTPServer",
    "ServerConfig",
    "run",
    "Handler",
    "HTTPParseError",
    "HTTPStatus",
    "Method",
    "ParseError",
    "QueryString",
    "Request",
    "Response",
    "ok",
    "bad_request",
    "not_found",
    "internal_error",
    "__version__",
]
