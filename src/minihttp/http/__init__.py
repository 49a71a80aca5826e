"""
=============================================================================
HTTP PROTOCOL LAYER
=============================================================================

Everything that knows about the HTTP/1.1 wire format, independent of
sockets:

    method.py        Method enum (GET, POST, ...) and MethodError
    query_string.py  QueryString: "a=1&a=2&b" → {"a": ["1", "2"], "b": ""}
    request.py       Request, RequestParser, ParseError, HTTPParseError
    response.py      Response and ok()/not_found()/... helpers
    status_codes.py  HTTPStatus with reason phrases
    handler.py       Handler: the application extension point

=============================================================================
"""

from .method import Method, MethodError
from .query_string import QueryString
from .request import (
    Request,
    RequestParser,
    ParseError,
    HTTPParseError,
    parse_request,
)
from .response import (
    Response,
    ok,
    bad_request,
    forbidden,
    not_found,
    internal_error,
)
from .status_codes import HTTPStatus
from .handler import Handler

__all__ = [
    # Request parsing
    "Method",
    "MethodError",
    "QueryString",
    "Request",
    "RequestParser",
    "ParseError",
    "HTTPParseError",
    "parse_request",

    # Responses
    "Response",
    "ok",
    "bad_request",
    "forbidden",
    "not_found",
    "internal_error",

    # Status codes
    "HTTPStatus",

    # Extension point
    "Handler",
]
