"""Immutable ordered sequence of string key/value pairs.

This is the substrate for both baselines and working state.  Keys are not
required to be unique: lookups resolve to the *last* pair carrying a key,
which keeps transient duplicate states (mid-edit) well defined.  Callers
that need uniqueness enforce it themselves.
"""

from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass

Pair = tuple[str, str]


@dataclass(frozen=True)
class OrderedMap:
    pairs: tuple[Pair, ...] = ()

    @classmethod
    def from_pairs(cls, pairs: Iterable[Sequence[str]]) -> "OrderedMap":
        """Build a map from any iterable of 2-item sequences, copying each pair.

        Raises TypeError if a key or value is not a string.
        """
        result = []
        for k, v in pairs:
            if not isinstance(k, str) or not isinstance(v, str):
                raise TypeError(f"pair must hold two strings, got ({k!r}, {v!r})")
            result.append((k, v))
        return cls(tuple(result))

    @classmethod
    def from_dict(cls, mapping: Mapping[str, str]) -> "OrderedMap":
        return cls.from_pairs(mapping.items())

    def to_pairs(self) -> list[Pair]:
        return list(self.pairs)

    def get(self, key: str, default: str | None = None) -> str | None:
        """Return the value of the last pair with ``key``, or ``default``."""
        for k, v in reversed(self.pairs):
            if k == key:
                return v
        return default

    def keys(self) -> list[str]:
        return [k for k, _ in self.pairs]

    def non_empty(self) -> "OrderedMap":
        """Return only the pairs whose key and value are both non-empty."""
        return OrderedMap(tuple((k, v) for k, v in self.pairs if k and v))

    def __len__(self) -> int:
        return len(self.pairs)

    def __iter__(self) -> Iterator[Pair]:
        return iter(self.pairs)

    def __contains__(self, key: object) -> bool:
        return any(k == key for k, _ in self.pairs)

    def __repr__(self) -> str:
        return f"OrderedMap({list(self.pairs)!r})"
