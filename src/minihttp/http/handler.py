"""
=============================================================================
HANDLER CONTRACT
=============================================================================

The one extension point of the server. An application subclasses Handler
and implements handle_request(); the server calls it once per well-formed
request and writes whatever Response it returns.

    ┌──────────────┐   Request    ┌───────────────────────┐   Response
    │   parser     │ ───────────► │ handle_request()      │ ──────────►
    └──────┬───────┘              └───────────────────────┘
           │ HTTPParseError       ┌───────────────────────┐
           └────────────────────► │ handle_bad_request()  │ ──────────►
                                  │ (default: 400, empty) │
                                  └───────────────────────┘

Usage:

    class HelloHandler(Handler):
        def handle_request(self, request):
            return ok(f"hello from {request.path}")

    HTTPServer(ServerConfig(port=8080)).run(HelloHandler())

=============================================================================
"""

import logging
from abc import ABC, abstractmethod

from .request import HTTPParseError, Request
from .response import Response, bad_request

logger = logging.getLogger(__name__)


class Handler(ABC):
    """Turns requests into responses."""

    @abstractmethod
    def handle_request(self, request: Request) -> Response:
        """
        Produce the response for a parsed request.

        Routing, storage and templating are up to the implementation; the
        server does not inspect the returned response.
        """

    def handle_bad_request(self, error: HTTPParseError) -> Response:
        """
        Produce the response for a request that failed to parse.

        Override to customize. The default logs the error and answers
        400 Bad Request with no body.
        """
        logger.warning(f"Failed to parse request: {error}")
        return bad_request()
