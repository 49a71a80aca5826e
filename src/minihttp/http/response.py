"""
=============================================================================
HTTP RESPONSE
=============================================================================

A response is a status code plus an optional text body. It is built once by
a handler and written to the connection once by the server.

=============================================================================
WIRE FORMAT
=============================================================================

    With a body:                         Without a body:

        HTTP/1.1 200 OK\r\n                  HTTP/1.1 404 Not Found\r\n
        Content-Length: 2\r\n                \r\n
        \r\n
        hi

Content-Length is the UTF-8 byte length of the body, not its character
count: "héllo" is 5 characters and 6 bytes.

=============================================================================
"""

from dataclasses import dataclass, field
from typing import BinaryIO, Optional

from .status_codes import HTTPStatus


@dataclass(frozen=True)
class Response:
    """
    Represents an HTTP response.

    Attributes:
        status: HTTP status code (an HTTPStatus or plain int that maps to one).
        body:   Optional body text.

    Example:
        Response(HTTPStatus.OK, "hi").to_bytes()
        # b"HTTP/1.1 200 OK\\r\\nContent-Length: 2\\r\\n\\r\\nhi"
    """

    status: HTTPStatus = HTTPStatus.OK
    body: Optional[str] = None

    # Encoded body, filled in by __post_init__
    _payload: bytes = field(default=b"", init=False, repr=False, compare=False)

    def __post_init__(self):
        """
        Normalize the status and encode the body up front.

        Raises:
            ValueError: Unknown status code.
            TypeError: Body is neither str nor None (bytes included).
            UnicodeEncodeError: Body cannot be encoded as UTF-8.
        """
        # Normalize plain ints so status.phrase is always available.
        object.__setattr__(self, "status", HTTPStatus(self.status))

        if self.body is not None:
            if not isinstance(self.body, str):
                raise TypeError(
                    f"Response body must be str or None, not {type(self.body).__name__}"
                )
            object.__setattr__(self, "_payload", self.body.encode("utf-8"))

    @property
    def status_line(self) -> str:
        """
        Get the HTTP status line.

        Format: HTTP/1.1 <code> <phrase>
        Example: HTTP/1.1 200 OK
        """
        return f"HTTP/1.1 {self.status.value} {self.status.phrase}"

    @property
    def content_length(self) -> int:
        """Byte length of the encoded body (0 when there is none)."""
        return len(self._payload)

    def to_bytes(self) -> bytes:
        """
        Serialize the response for sending over the socket.

        Returns:
            Status line, Content-Length when a body is present, the blank
            line, then the body.
        """
        head = self.status_line + "\r\n"
        if self.body is None:
            return (head + "\r\n").encode("utf-8")

        head += f"Content-Length: {len(self._payload)}\r\n\r\n"
        return head.encode("utf-8") + self._payload

    def send(self, writer: BinaryIO) -> None:
        """
        Write the serialized response with a single write call.

        Args:
            writer: Anything with a binary write() (a Connection, a file
                    from socket.makefile("wb"), io.BytesIO in tests).

        Raises:
            OSError: Whatever the writer raises; errors are not swallowed.
        """
        writer.write(self.to_bytes())


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

def ok(body: Optional[str] = None) -> Response:
    """200 OK."""
    return Response(HTTPStatus.OK, body)


def bad_request(body: Optional[str] = None) -> Response:
    """400 Bad Request. Sent for every parse error by default."""
    return Response(HTTPStatus.BAD_REQUEST, body)


def forbidden(body: Optional[str] = None) -> Response:
    """403 Forbidden."""
    return Response(HTTPStatus.FORBIDDEN, body)


def not_found(body: Optional[str] = None) -> Response:
    """404 Not Found."""
    return Response(HTTPStatus.NOT_FOUND, body)


def internal_error(body: Optional[str] = None) -> Response:
    """500 Internal Server Error. Sent when a handler raises."""
    return Response(HTTPStatus.INTERNAL_SERVER_ERROR, body)
