"""Immutable query string parameters.

Implements ``Mapping[str, str]`` plus ``get_list`` for repeated keys.
Keeps the parsed ``(key, value)`` pairs so repeated keys stay in the
order the client sent them.
"""

from collections.abc import Iterator, Mapping
from urllib.parse import parse_qsl


class QueryParams(Mapping[str, str]):
    """Immutable query string parameters.

    Attributes:
        _pairs: Parsed ``(key, value)`` pairs in wire order.
        _data: Field name -> list of values.
        _raw: Raw query string bytes.

    ``__getitem__`` returns the first value for a key.
    ``get_list`` returns all values for a key.
    """

    _pairs: tuple[tuple[str, str], ...]
    _data: dict[str, list[str]]
    _raw: bytes

    __slots__ = ("_data", "_pairs", "_raw")

    def __init__(self, query_string: bytes = b"") -> None:
        object.__setattr__(self, "_raw", query_string)
        pairs = tuple(parse_qsl(query_string.decode("latin-1"), keep_blank_values=True))
        object.__setattr__(self, "_pairs", pairs)
        data: dict[str, list[str]] = {}
        for key, value in pairs:
            data.setdefault(key, []).append(value)
        object.__setattr__(self, "_data", data)

    def __getitem__(self, key: str) -> str:
        return self._data[key][0]

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        items = ", ".join(f"{k!r}: {self[k]!r}" for k in self)
        return f"QueryParams({{{items}}})"

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        """Return the first value for *key*, or *default* if missing."""
        values = self._data.get(key)
        if values:
            return values[0]
        return default

    def get_list(self, key: str) -> list[str]:
        """Return all values for *key*."""
        return list(self._data.get(key, []))

    def pairs(self) -> list[tuple[str, str]]:
        """All ``(key, value)`` pairs in the order they were sent."""
        return list(self._pairs)

    @property
    def query_string(self) -> str:
        """The raw query string, undecoded."""
        return self._raw.decode("latin-1")
