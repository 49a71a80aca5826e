"""
=============================================================================
HTTP METHODS
=============================================================================

The closed set of request methods the parser accepts (RFC 7231 plus PATCH).

    ┌──────────┬────────────┬────────────┬──────────────────────────────────┐
    │  Method  │ Idempotent │  Has Body  │ Description                      │
    ├──────────┼────────────┼────────────┼──────────────────────────────────┤
    │  GET     │    Yes     │    No      │ Retrieve resource                │
    │  POST    │    No      │    Yes     │ Create resource / submit data    │
    │  PUT     │    Yes     │    Yes     │ Replace entire resource          │
    │  PATCH   │    No      │    Yes     │ Partial update                   │
    │  DELETE  │    Yes     │  Optional  │ Delete resource                  │
    │  HEAD    │    Yes     │    No      │ GET without body (metadata only) │
    │  OPTIONS │    Yes     │    No      │ Get allowed methods (CORS)       │
    │  TRACE   │    Yes     │    No      │ Echo request (debugging)         │
    │  CONNECT │    No      │    No      │ Establish tunnel (HTTPS proxy)   │
    └──────────┴────────────┴────────────┴──────────────────────────────────┘

Method tokens are case-sensitive: "GET" is a method, "get" is not.

=============================================================================
"""

from enum import Enum


class MethodError(ValueError):
    """Raised when a request line carries a token outside the method set."""

    def __init__(self, token: str):
        super().__init__(f"Unknown method: {token!r}")
        self.token = token


class Method(Enum):
    """
    HTTP request method.

        >>> Method.parse("GET")
        <Method.GET: 'GET'>
        >>> str(Method.POST)
        'POST'
        >>> Method.parse("get")
        Traceback (most recent call last):
            ...
        minihttp.http.method.MethodError: Unknown method: 'get'
    """

    GET = "GET"
    DELETE = "DELETE"
    POST = "POST"
    PUT = "PUT"
    HEAD = "HEAD"
    CONNECT = "CONNECT"
    OPTIONS = "OPTIONS"
    TRACE = "TRACE"
    PATCH = "PATCH"

    @classmethod
    def parse(cls, token: str) -> "Method":
        """
        Convert a request-line token into a Method.

        Args:
            token: The raw method token, e.g. "GET".

        Returns:
            The matching Method member.

        Raises:
            MethodError: If the token is not an exact match.
        """
        try:
            return cls(token)
        except ValueError:
            raise MethodError(token) from None

    def __str__(self) -> str:
        return self.value
