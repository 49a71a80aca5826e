"""
=============================================================================
QUERY STRING PARSER
=============================================================================

Parses the query component of a request target into key → value(s).

    GET /search?tag=python&tag=http&page=2&debug HTTP/1.1
                ──────────────┬──────────────────
                              │
                ┌─────────────┴─────────────────────┐
                │  "tag"   → ["python", "http"]     │   multi-valued
                │  "page"  → "2"                    │   single value
                │  "debug" → ""                     │   bare key
                └───────────────────────────────────┘

Rules:
    - Fragments are separated by "&", key and value by the first "=".
    - A fragment without "=" maps its key to the empty string.
    - Empty fragments ("a=1&&b=2", a trailing "&", an empty query) are
      skipped.
    - Nothing is percent-decoded: values are the raw substrings.
    - Parsing never fails; odd fragments are kept as they are.

=============================================================================
"""

from typing import Dict, Iterator, List, Optional, Union

# A query value is a single string, or a list once the key repeats.
Value = Union[str, List[str]]


class QueryString:
    """
    Mapping of query keys to single or multiple values.

    Example:
        qs = QueryString.parse("a=1&a=2&b")
        qs.get("a")        # ["1", "2"]
        qs.get("b")        # ""
        qs.get_list("b")   # [""]
    """

    def __init__(self, data: Optional[Dict[str, Value]] = None):
        # Lists are copied so later inserts never touch the caller's data
        self._data: Dict[str, Value] = {
            k: list(v) if isinstance(v, list) else v for k, v in (data or {}).items()
        }

    @classmethod
    def parse(cls, text: str) -> "QueryString":
        """
        Parse raw query text (the part after "?").

        Args:
            text: Query text such as "a=1&b=2". May be empty.

        Returns:
            A QueryString; values keep their order of occurrence.
        """
        qs = cls()
        for fragment in text.split("&"):
            if not fragment:
                continue
            key, _, value = fragment.partition("=")
            qs._insert(key, value)
        return qs

    def _insert(self, key: str, value: str) -> None:
        existing = self._data.get(key)
        if existing is None:
            self._data[key] = value
        elif isinstance(existing, list):
            existing.append(value)
        else:
            self._data[key] = [existing, value]

    # =========================================================================
    # ACCESSORS
    # =========================================================================

    def get(self, key: str, default: Optional[Value] = None) -> Optional[Value]:
        """Return the raw value for key: a string, a list, or default."""
        return self._data.get(key, default)

    def get_first(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Return the first value for key, or default."""
        value = self._data.get(key)
        if value is None:
            return default
        if isinstance(value, list):
            return value[0]
        return value

    def get_list(self, key: str) -> List[str]:
        """Return every value for key as a list (empty if missing)."""
        value = self._data.get(key)
        if value is None:
            return []
        if isinstance(value, list):
            return list(value)
        return [value]

    def items(self):
        return self._data.items()

    def to_dict(self) -> Dict[str, Value]:
        return {k: list(v) if isinstance(v, list) else v for k, v in self._data.items()}

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __getitem__(self, key: str) -> Value:
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, QueryString):
            return self._data == other._data
        if isinstance(other, dict):
            return self._data == other
        return NotImplemented

    def __repr__(self) -> str:
        return f"QueryString({self._data!r})"
