"""Immutable, case-insensitive request headers.

Built once from the raw ASGI byte pairs; names are lower-cased and values
decoded up front, so lookups during dispatch are plain dict hits.
"""

from collections.abc import Iterator, Mapping


class Headers(Mapping[str, str]):
    """Read-only header view keyed by lower-cased name.

    Indexing returns the first value sent for a name; ``get_list``
    returns every value in arrival order.
    """

    __slots__ = ("_index", "_raw")

    def __init__(self, raw: tuple[tuple[bytes, bytes], ...] = ()) -> None:
        self._raw = raw
        self._index: dict[str, list[str]] = {}
        for name, value in raw:
            self._index.setdefault(name.decode("latin-1").lower(), []).append(value.decode("latin-1"))

    @classmethod
    def from_mapping(cls, headers: Mapping[str, str]) -> "Headers":
        """Build headers from a plain ``str -> str`` mapping (tests, tools)."""
        pairs = tuple((name.lower().encode("latin-1"), value.encode("latin-1")) for name, value in headers.items())
        return cls(pairs)

    def __getitem__(self, key: str) -> str:
        values = self._index.get(key.lower())
        if not values:
            raise KeyError(key)
        return values[0]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.lower() in self._index

    def __iter__(self) -> Iterator[str]:
        return iter(self._index)

    def __len__(self) -> int:
        return len(self._index)

    def __repr__(self) -> str:
        first = {name: values[0] for name, values in self._index.items()}
        return f"Headers({first!r})"

    def get_list(self, key: str) -> list[str]:
        """Every value sent for *key*, in order. Empty if absent."""
        return list(self._index.get(key.lower(), ()))

    @property
    def raw(self) -> tuple[tuple[bytes, bytes], ...]:
        """The original ASGI byte pairs."""
        return self._raw
