"""
=============================================================================
HTTP REQUEST PARSER
=============================================================================

Parses the raw bytes of a single read into a structured, immutable Request.
The parser is strict: a request either matches the framing below exactly or
is rejected with the first ParseError encountered.

=============================================================================
HTTP REQUEST ANATOMY
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     HTTP REQUEST STRUCTURE                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │  ┌─ REQUEST LINE ─────────────────────────────────────────────────┐ │
    │  │                                                                 │ │
    │  │    GET /api/users?page=1&page=2 HTTP/1.1\r\n                   │ │
    │  │    ─┬─ ──────────────┬──────────  ────┬────                    │ │
    │  │     │                │                │                         │ │
    │  │   Method           Target          Version (must be HTTP/1.1)  │ │
    │  │                      │                                          │ │
    │  │         ┌────────────┴──────────┐                              │ │
    │  │       Path               Query String                           │ │
    │  │    /api/users          page=1&page=2                            │ │
    │  │                                                                 │ │
    │  └─────────────────────────────────────────────────────────────────┘ │
    │                                                                      │
    │  ┌─ HEADERS ("Name: value", exactly ": " as separator) ───────────┐ │
    │  │    Host: example.com\r\n                                       │ │
    │  │    Content-Type: text/plain\r\n                                │ │
    │  └─────────────────────────────────────────────────────────────────┘ │
    │                                                                      │
    │  ┌─ EMPTY LINE (separator, required) ─────────────────────────────┐ │
    │  │    \r\n                                                         │ │
    │  └─────────────────────────────────────────────────────────────────┘ │
    │                                                                      │
    │  ┌─ BODY (optional, everything after the separator) ──────────────┐ │
    │  │    hello world                                                  │ │
    │  └─────────────────────────────────────────────────────────────────┘ │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
ERROR TAXONOMY
=============================================================================

    ┌─────────────────┬───────────────────────────────────────────────────┐
    │ ParseError      │ Raised when                                       │
    ├─────────────────┼───────────────────────────────────────────────────┤
    │ InvalidEncoding │ The bytes are not valid UTF-8                     │
    │ InvalidRequest  │ No blank line, or no space after the method       │
    │ InvalidUri      │ No space after the target, or an empty target     │
    │ InvalidVersion  │ The protocol token is not exactly "HTTP/1.1"      │
    │ InvalidHeader   │ A header line without ": "                        │
    │ InvalidMethod   │ The method token is not a known verb              │
    │ InvalidProtocol │ Reserved                                          │
    │ InvalidBody     │ Reserved                                          │
    └─────────────────┴───────────────────────────────────────────────────┘

Every parse error is answered with 400 Bad Request by the default handler.
The method token is validated last, so "FOO / HTTP/1.0" reports
InvalidVersion rather than InvalidMethod.

=============================================================================
KNOWN LIMITATION
=============================================================================

The server hands the parser the bytes of exactly one socket read. A request
larger than the read buffer is truncated and usually fails with
InvalidRequest (the blank line never arrived).

=============================================================================
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

from .method import Method, MethodError
from .query_string import QueryString

PROTOCOL = "HTTP/1.1"
HEADER_SEPARATOR = ": "


class ParseError(Enum):
    """Closed set of reasons a request can be rejected."""

    INVALID_REQUEST = "Invalid request"
    INVALID_ENCODING = "Invalid encoding"
    INVALID_PROTOCOL = "Invalid protocol"
    INVALID_METHOD = "Invalid method"
    INVALID_URI = "Invalid uri"
    INVALID_VERSION = "Invalid version"
    INVALID_HEADER = "Invalid header"
    INVALID_BODY = "Invalid body"

    @property
    def message(self) -> str:
        return self.value

    def __str__(self) -> str:
        return self.value


class HTTPParseError(Exception):
    """
    Raised when a request cannot be parsed.

    Carries the ParseError member that describes the failure. The message is
    fixed per member; no request data is echoed back.

    Attributes:
        error: Which rule the request broke.
        status_code: HTTP status to answer with (always 400 here).
    """

    status_code = 400

    def __init__(self, error: ParseError):
        super().__init__(error.message)
        self.error = error


@dataclass(frozen=True)
class Request:
    """
    A parsed HTTP request.

    Attributes:
        method:         The request method.
        path:           Target without the query string ("/users").
        query_string:   Parsed query, or None when the target had no "?".
        headers:        Header values keyed by lower-cased name. A repeated
                        name keeps its last value.
        body:           Text after the blank line, or None if empty.
    """

    method: Method
    path: str
    query_string: Optional[QueryString] = None
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[str] = None

    @classmethod
    def from_bytes(cls, data: bytes) -> "Request":
        """Parse raw request bytes. See RequestParser.parse."""
        return RequestParser().parse(data)

    def get_header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """
        Get a header value (case-insensitive lookup).

        Example:
            request.get_header("Content-Type")
            # Works because headers are stored lowercase
        """
        return self.headers.get(name.lower(), default)

    def get_query(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """First value of a query parameter, or default."""
        if self.query_string is None:
            return default
        return self.query_string.get_first(name, default)

    def get_query_list(self, name: str) -> List[str]:
        """All values of a query parameter (empty list if missing)."""
        if self.query_string is None:
            return []
        return self.query_string.get_list(name)


class RequestParser:
    """
    Parses raw HTTP request bytes into Request objects.

    ==========================================================================
    PARSER ARCHITECTURE
    ==========================================================================

        Raw Request Bytes
              │
              ▼
        ┌───────────────────────────────────────────────────────────────────┐
        │  1. Decode UTF-8 ───────────────────────► InvalidEncoding         │
        │  2. Split head / body at \\r\\n\\r\\n ──────► InvalidRequest          │
        │  3. Split request line / header block at the first \\r\\n         │
        │  4. Request line: METHOD SP TARGET SP VERSION                     │
        │        no method separator ──────────────► InvalidRequest         │
        │        no target separator ──────────────► InvalidUri             │
        │        version != HTTP/1.1 ──────────────► InvalidVersion         │
        │  5. Target: path [? query]                                        │
        │  6. Headers: "name: value" ──────────────► InvalidHeader          │
        │  7. Body: None when empty                                         │
        │  8. Method token ────────────────────────► InvalidMethod          │
        └───────────────────────────────────────────────────────────────────┘
              │
              ▼
        Request (frozen dataclass)

    The parser holds no state between calls; one instance can be shared.
    """

    def parse(self, data: bytes) -> Request:
        """
        Parse raw HTTP request data into a Request.

        Args:
            data: Bytes from a single socket read, used as received.

        Returns:
            Parsed Request.

        Raises:
            HTTPParseError: On the first rule the request breaks.
        """
        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError:
            raise HTTPParseError(ParseError.INVALID_ENCODING) from None

        head, separator, body = text.partition("\r\n\r\n")
        if not separator:
            raise HTTPParseError(ParseError.INVALID_REQUEST)

        # A request with no headers has no line break inside the head.
        request_line, _, header_block = head.partition("\r\n")

        method_token, path, query_string = self._parse_request_line(request_line)
        headers = self._parse_headers(header_block)

        try:
            method = Method.parse(method_token)
        except MethodError:
            raise HTTPParseError(ParseError.INVALID_METHOD) from None

        return Request(
            method=method,
            path=path,
            query_string=query_string,
            headers=headers,
            body=body or None,
        )

    def _parse_request_line(
        self,
        line: str
    ) -> Tuple[str, str, Optional[QueryString]]:
        """
        Split "METHOD SP TARGET SP VERSION" into its parts.

        Returns:
            Tuple of (method token, path, query string or None).
        """
        method_token, sep, rest = line.partition(" ")
        if not sep:
            raise HTTPParseError(ParseError.INVALID_REQUEST)

        target, sep, protocol = rest.partition(" ")
        if not sep or not target:
            raise HTTPParseError(ParseError.INVALID_URI)

        if protocol != PROTOCOL:
            raise HTTPParseError(ParseError.INVALID_VERSION)

        path, question, query = target.partition("?")
        query_string = QueryString.parse(query) if question else None

        return method_token, path, query_string

    def _parse_headers(self, block: str) -> Dict[str, str]:
        """
        Parse header lines into a dict keyed by lower-cased name.

        Values are kept verbatim (no trimming beyond the ": " separator).
        """
        headers: Dict[str, str] = {}
        if not block:
            return headers

        for line in block.split("\r\n"):
            name, sep, value = line.partition(HEADER_SEPARATOR)
            if not sep:
                raise HTTPParseError(ParseError.INVALID_HEADER)
            headers[name.lower()] = value

        return headers


def parse_request(data: bytes) -> Request:
    """
    Convenience function to parse an HTTP request.

    Args:
        data: Raw HTTP request bytes.

    Returns:
        Parsed Request.

    Raises:
        HTTPParseError: If the request is malformed.
    """
    return RequestParser().parse(data)
