"""
Unit tests for the Handler contract and request dispatch.
"""

import logging

import pytest

from minihttp import HTTPServer, ServerConfig
from minihttp.http import (
    Handler,
    HTTPParseError,
    HTTPStatus,
    ParseError,
    Request,
    Response,
    ok,
)


class HelloHandler(Handler):
    def handle_request(self, request: Request) -> Response:
        return ok(f"hello {request.path}")


class VerboseHandler(HelloHandler):
    def handle_bad_request(self, error: HTTPParseError) -> Response:
        return Response(HTTPStatus.BAD_REQUEST, error.error.message)


class WrongResultHandler(Handler):
    def handle_request(self, request: Request) -> Response:
        return {"status": 200}


class ExplodingHandler(Handler):
    def handle_request(self, request: Request) -> Response:
        raise RuntimeError("boom")

    def handle_bad_request(self, error: HTTPParseError) -> Response:
        raise RuntimeError("boom too")


class TestHandler:

    def test_handle_request_is_abstract(self):
        with pytest.raises(TypeError):
            Handler()

    def test_default_bad_request(self, caplog):
        error = HTTPParseError(ParseError.INVALID_HEADER)

        with caplog.at_level(logging.WARNING, logger="minihttp"):
            response = HelloHandler().handle_bad_request(error)

        assert response.status == HTTPStatus.BAD_REQUEST
        assert response.body is None
        assert "Invalid header" in caplog.text

    def test_bad_request_can_be_overridden(self):
        error = HTTPParseError(ParseError.INVALID_METHOD)
        response = VerboseHandler().handle_bad_request(error)

        assert response.body == "Invalid method"


class TestServerProcess:
    """HTTPServer.process: raw bytes in, (request, response) out."""

    @pytest.fixture
    def server(self) -> HTTPServer:
        return HTTPServer(ServerConfig(port=0))

    def test_valid_request_goes_to_handle_request(self, server: HTTPServer):
        request, response = server.process(b"GET /world HTTP/1.1\r\n\r\n", HelloHandler())

        assert request.path == "/world"
        assert response == ok("hello /world")

    def test_parse_failure_goes_to_handle_bad_request(self, server: HTTPServer):
        request, response = server.process(b"GET / HTTP/1.0\r\n\r\n", VerboseHandler())

        assert request is None
        assert response == Response(HTTPStatus.BAD_REQUEST, "Invalid version")

    def test_handler_exception_becomes_500(self, server: HTTPServer, caplog):
        with caplog.at_level(logging.ERROR, logger="minihttp"):
            _, response = server.process(b"GET / HTTP/1.1\r\n\r\n", ExplodingHandler())

        assert response.status == HTTPStatus.INTERNAL_SERVER_ERROR
        assert "boom" in caplog.text

    def test_bad_request_handler_exception_becomes_500(self, server: HTTPServer):
        _, response = server.process(b"garbage", ExplodingHandler())

        assert response.status == HTTPStatus.INTERNAL_SERVER_ERROR

    def test_non_response_result_becomes_500(self, server: HTTPServer, caplog):
        with caplog.at_level(logging.ERROR, logger="minihttp"):
            _, response = server.process(b"GET / HTTP/1.1\r\n\r\n", WrongResultHandler())

        assert response == Response(HTTPStatus.INTERNAL_SERVER_ERROR)
        assert "expected Response" in caplog.text
