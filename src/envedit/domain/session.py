"""Working state of an environment edit.

An ``EditSession`` wraps an ordered list of key/value slots addressed by
index, as rendered one row per slot.  Deleting a row only tombstones its
index so the indices of the rows around it stay stable while the user is
typing; the backing list is never compacted.

Change tracking has two levels.  Per slot it is positional: slot ``i`` is
dirty when its *effective* pair differs from the baseline's pair at ``i``.
A slot's effective pair is its pair when it is not tombstoned and both key
and value are non-empty, otherwise nothing.  Half-typed rows and tombstones
past the end of the baseline are therefore clean.  ``has_changes`` instead
compares the committable pairs with the baseline's, so deleting a row and
retyping the same pair elsewhere is not a change.

Sessions follow a copy-on-write discipline: every public mutator returns a
new session and leaves the receiver untouched, so a session handed to a
caller never changes underneath it.
"""

import copy
from collections.abc import Callable, Iterable, Sequence
from typing import TypeVar

from envedit.domain.filters import KeyMatcher, fuzzy_match
from envedit.domain.ordered_map import OrderedMap, Pair
from envedit.models import DiffOp, DiffOpKind, IndexState

T = TypeVar("T")

_EMPTY: Pair = ("", "")


class EditSession:
    def __init__(
        self,
        baseline: OrderedMap | None = None,
        *,
        matcher: KeyMatcher = fuzzy_match,
    ) -> None:
        self._original = baseline if baseline is not None else OrderedMap()
        self._pairs: list[Pair] = self._original.to_pairs()
        self._deleted: set[int] = set()
        self._changed: set[int] = set()
        self._filter_text = ""
        self._matcher = matcher

    @classmethod
    def from_pairs(cls, pairs: Iterable[Sequence[str]], **kwargs) -> "EditSession":
        return cls(OrderedMap.from_pairs(pairs), **kwargs)

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------

    @property
    def original(self) -> OrderedMap:
        """The baseline this session was created from."""
        return self._original

    @property
    def length(self) -> int:
        """Number of slots in the backing list, tombstones included."""
        return len(self._pairs)

    @property
    def deleted_length(self) -> int:
        return len(self._deleted)

    @property
    def has_changes(self) -> bool:
        """True when the committable pairs differ from the baseline's, order aside."""
        return set(self.entries()) != set(self._original.non_empty())

    @property
    def filter_text(self) -> str:
        return self._filter_text

    @property
    def changed_indices(self) -> frozenset[int]:
        return frozenset(self._changed)

    @property
    def deleted_indices(self) -> frozenset[int]:
        return frozenset(self._deleted)

    def is_deleted(self, index: int) -> bool:
        return index in self._deleted

    def is_dirty(self, index: int) -> bool:
        return index in self._changed

    def state_at(self, index: int) -> IndexState:
        if index in self._deleted:
            return IndexState.DELETED
        if index in self._changed:
            return IndexState.DIRTY
        return IndexState.CLEAN

    def get(self, key: str) -> str | None:
        """Return the value of the live slot holding ``key``, or None."""
        for index in range(len(self._pairs) - 1, -1, -1):
            k, v = self._pairs[index]
            if k == key and index not in self._deleted:
                return v
        return None

    # ------------------------------------------------------------------
    # Derived views
    # ------------------------------------------------------------------

    def entries(self) -> OrderedMap:
        """Return the committable state: live slots with a key and a value."""
        return OrderedMap(
            tuple(
                (k, v)
                for index, (k, v) in enumerate(self._pairs)
                if index not in self._deleted and k and v
            )
        )

    def map(self, fn: Callable[[Pair, int], T]) -> list[T]:
        """Apply ``fn`` to every visible row, in backing order.

        Tombstoned slots and slots whose key fails the active filter are
        skipped.  One empty row at index ``length`` is always appended for
        entering a new variable, whatever the filter.
        """
        rows = [
            fn(pair, index)
            for index, pair in enumerate(self._pairs)
            if index not in self._deleted and self._visible(pair)
        ]
        rows.append(fn(_EMPTY, len(self._pairs)))
        return rows

    def map_deleted(self, fn: Callable[[Pair, int], T]) -> list[T]:
        """Apply ``fn`` to every tombstoned slot, e.g. to offer an undo."""
        return [fn(self._pairs[index], index) for index in sorted(self._deleted)]

    # ------------------------------------------------------------------
    # Copy-on-write mutators
    # ------------------------------------------------------------------

    def dup(self) -> "EditSession":
        """Return a copy with independent slots and tracking sets."""
        clone = copy.copy(self)
        clone._pairs = list(self._pairs)
        clone._deleted = set(self._deleted)
        clone._changed = set(self._changed)
        return clone

    def filtered(self, filter_text: str) -> "EditSession":
        clone = self.dup()
        clone._filter_text = filter_text
        return clone

    def set_key_at_index(self, index: int, key: str) -> "EditSession":
        """Return a session with the key of slot ``index`` replaced.

        The slot is restored if it was tombstoned.  If another slot already
        holds ``key`` that slot is tombstoned instead (last write wins).
        """
        clone = self.dup()
        clone._set_key(index, key)
        return clone

    def set_value_at_index(self, index: int, value: str) -> "EditSession":
        """Return a session with the value of slot ``index`` replaced.

        A slot left with neither key nor value is tombstoned.
        """
        clone = self.dup()
        clone._set_value(index, value)
        return clone

    def remove_entry_at_index(self, index: int) -> "EditSession":
        clone = self.dup()
        clone._remove(index)
        return clone

    def apply_diff(self, ops: Iterable[DiffOp]) -> "EditSession":
        """Return a session with ``ops`` folded into the working state.

        ADD sets key and value on the slot holding the key (a new slot is
        appended if none does); REMOVE tombstones the slot holding the key.
        """
        clone = self.dup()
        for op in ops:
            index = clone._find(op.key)
            if op.kind == DiffOpKind.ADD:
                if not op.value:
                    continue
                if index is None:
                    index = len(clone._pairs)
                clone._set_key(index, op.key)
                clone._set_value(index, op.value)
            elif op.kind == DiffOpKind.REMOVE and index is not None:
                clone._remove(index)
        return clone

    # ------------------------------------------------------------------
    # In-place helpers, only ever called on a fresh copy
    # ------------------------------------------------------------------

    def _set_key(self, index: int, key: str) -> None:
        self._ensure_slot(index)
        self._deleted.discard(index)
        _, value = self._pairs[index]
        self._pairs[index] = (key, value)
        self._track(index)
        if not key:
            return
        for holder, (k, _) in enumerate(self._pairs):
            if k == key and holder != index and holder not in self._deleted:
                self._remove(holder)

    def _set_value(self, index: int, value: str) -> None:
        self._ensure_slot(index)
        key, _ = self._pairs[index]
        self._pairs[index] = (key, value)
        if not key and not value:
            self._remove(index)
        else:
            self._track(index)

    def _remove(self, index: int) -> None:
        _check_index(index)
        if index >= len(self._pairs):
            # the new-entry row has nothing to delete
            return
        self._deleted.add(index)
        self._track(index)

    def _ensure_slot(self, index: int) -> None:
        _check_index(index)
        while len(self._pairs) <= index:
            self._pairs.append(_EMPTY)

    def _find(self, key: str) -> int | None:
        """Index of the live slot holding ``key``, else of any slot holding it."""
        fallback = None
        for index, (k, _) in enumerate(self._pairs):
            if k != key:
                continue
            if index not in self._deleted:
                return index
            if fallback is None:
                fallback = index
        return fallback

    def _track(self, index: int) -> None:
        if self._effective(index) == self._baseline_effective(index):
            self._changed.discard(index)
        else:
            self._changed.add(index)

    def _effective(self, index: int) -> Pair | None:
        if index in self._deleted or index >= len(self._pairs):
            return None
        key, value = self._pairs[index]
        return (key, value) if key and value else None

    def _baseline_effective(self, index: int) -> Pair | None:
        if index >= len(self._original):
            return None
        key, value = self._original.pairs[index]
        return (key, value) if key and value else None

    def _visible(self, pair: Pair) -> bool:
        return not self._filter_text or self._matcher(pair[0], self._filter_text)

    def __repr__(self) -> str:
        return (
            f"EditSession(length={self.length}, deleted={sorted(self._deleted)}, "
            f"changed={sorted(self._changed)}, filter={self._filter_text!r})"
        )


def _check_index(index: int) -> None:
    if index < 0:
        raise IndexError(f"slot index must be non-negative, got {index}")
