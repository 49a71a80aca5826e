"""
Unit tests for query string parsing.
"""

from minihttp.http.query_string import QueryString


class TestQueryStringParse:

    def test_single_values(self):
        qs = QueryString.parse("page=1&limit=10")

        assert qs.get("page") == "1"
        assert qs.get("limit") == "10"
        assert len(qs) == 2

    def test_repeated_key_becomes_list(self):
        qs = QueryString.parse("a=1&a=2&b")

        assert qs.get("a") == ["1", "2"]
        assert qs.get("b") == ""
        assert qs.get_list("b") == [""]

    def test_multi_value_preserves_order(self):
        qs = QueryString.parse("id=3&id=1&other=x&id=2")

        assert qs.get("id") == ["3", "1", "2"]
        assert qs.get_first("id") == "3"

    def test_bare_key_has_empty_value(self):
        qs = QueryString.parse("debug")

        assert "debug" in qs
        assert qs["debug"] == ""

    def test_value_split_on_first_equals(self):
        qs = QueryString.parse("expr=a=b")

        assert qs.get("expr") == "a=b"

    def test_empty_text(self):
        qs = QueryString.parse("")

        assert len(qs) == 0
        assert qs == {}

    def test_empty_fragments_are_skipped(self):
        qs = QueryString.parse("a=1&&b=2&")

        assert qs == {"a": "1", "b": "2"}
        assert "" not in qs

    def test_only_separators(self):
        assert len(QueryString.parse("&")) == 0
        assert len(QueryString.parse("&&&")) == 0

    def test_no_percent_decoding(self):
        qs = QueryString.parse("q=hello%20world&plus=a+b")

        assert qs.get("q") == "hello%20world"
        assert qs.get("plus") == "a+b"


class TestQueryStringAccessors:

    def test_missing_key(self):
        qs = QueryString.parse("a=1")

        assert qs.get("missing") is None
        assert qs.get("missing", "x") == "x"
        assert qs.get_first("missing") is None
        assert qs.get_list("missing") == []

    def test_get_list_returns_copy(self):
        qs = QueryString.parse("a=1&a=2")

        values = qs.get_list("a")
        values.append("3")

        assert qs.get("a") == ["1", "2"]

    def test_iteration_and_items(self):
        qs = QueryString.parse("x=1&y=2&x=3")

        assert list(qs) == ["x", "y"]
        assert dict(qs.items()) == {"x": ["1", "3"], "y": "2"}
        assert qs.to_dict() == {"x": ["1", "3"], "y": "2"}

    def test_equality(self):
        assert QueryString.parse("a=1&a=2") == QueryString({"a": ["1", "2"]})
        assert QueryString.parse("a=1") != QueryString.parse("a=2")

    def test_constructor_copies_lists(self):
        values = ["1"]
        qs = QueryString({"a": values})

        qs._insert("a", "2")

        assert values == ["1"]
        assert qs.get_list("a") == ["1", "2"]
