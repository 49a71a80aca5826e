"""
Unit tests for HTTP method parsing.
"""

import pytest

from minihttp.http.method import Method, MethodError


class TestMethod:

    @pytest.mark.parametrize("token", [
        "GET", "DELETE", "POST", "PUT", "HEAD",
        "CONNECT", "OPTIONS", "TRACE", "PATCH",
    ])
    def test_parse_known_methods(self, token: str):
        method = Method.parse(token)

        assert method.value == token
        assert str(method) == token

    @pytest.mark.parametrize("token", ["get", "Get", "FOO", "", " GET", "GET "])
    def test_parse_rejects_unknown(self, token: str):
        with pytest.raises(MethodError) as exc_info:
            Method.parse(token)

        assert exc_info.value.token == token

    def test_method_error_is_value_error(self):
        with pytest.raises(ValueError):
            Method.parse("BREW")

    def test_closed_set(self):
        assert len(Method) == 9
