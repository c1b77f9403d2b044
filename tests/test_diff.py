"""Unit tests for envedit.domain.diff: pure diff/patch functions."""

import pytest

from envedit.domain.diff import apply_diff, diff
from envedit.domain.ordered_map import OrderedMap
from envedit.models import DiffOp


def _m(*pairs: tuple[str, str]) -> OrderedMap:
    return OrderedMap.from_pairs(pairs)


class TestDiff:
    def test_identical_maps_have_empty_diff(self):
        assert diff(_m(("A", "1")), _m(("A", "1"))) == []

    def test_changed_value_is_add(self):
        """
        Given a baseline A=1, B=2 and a target with A=9
        When diff is called
        Then a single ADD(A, 9) is produced
        """
        assert diff(_m(("A", "1"), ("B", "2")), _m(("A", "9"), ("B", "2"))) == [
            DiffOp.add("A", "9")
        ]

    def test_new_key_is_add(self):
        assert diff(_m(("A", "1")), _m(("A", "1"), ("B", "2"))) == [DiffOp.add("B", "2")]

    def test_missing_key_is_remove(self):
        assert diff(_m(("A", "1"), ("B", "2")), _m(("B", "2"))) == [DiffOp.remove("A")]

    def test_empty_value_in_target_is_remove(self):
        """
        Given a target map where A is present with an empty value
        When diff is called
        Then A is removed rather than set to ""
        """
        assert diff(_m(("A", "1")), _m(("A", ""))) == [DiffOp.remove("A")]

    def test_adds_follow_target_order_then_removes_follow_source_order(self):
        """
        Given several additions and removals
        When diff is called
        Then ADDs come first in the target's order and REMOVEs after in the source's order
        """
        ops = diff(
            _m(("X", "1"), ("A", "1"), ("Y", "1")),
            _m(("C", "3"), ("A", "1"), ("B", "2")),
        )
        assert ops == [
            DiffOp.add("C", "3"),
            DiffOp.add("B", "2"),
            DiffOp.remove("X"),
            DiffOp.remove("Y"),
        ]

    def test_duplicate_keys_use_last_value_once(self):
        """
        Given a target map that repeats key A
        When diff is called
        Then one ADD is produced carrying the last value
        """
        assert diff(_m(), _m(("A", "1"), ("A", "2"))) == [DiffOp.add("A", "2")]

    def test_empty_keys_are_ignored(self):
        assert diff(_m(("", "x")), _m(("", "y"))) == []

    def test_is_deterministic(self):
        a = _m(("A", "1"), ("B", "2"), ("C", "3"))
        b = _m(("C", "4"), ("D", "5"))
        assert diff(a, b) == diff(a, b)


class TestApplyDiff:
    def test_add_appends_new_key(self):
        assert apply_diff(_m(("A", "1")), [DiffOp.add("B", "2")]) == _m(("A", "1"), ("B", "2"))

    def test_add_overwrites_in_place(self):
        """
        Given a map A=1, B=2
        When ADD(A, 9) is applied
        Then A keeps its position with the new value
        """
        result = apply_diff(_m(("A", "1"), ("B", "2")), [DiffOp.add("A", "9")])
        assert result == _m(("A", "9"), ("B", "2"))

    def test_add_collapses_duplicates(self):
        """
        Given a map where A appears twice
        When ADD(A, 9) is applied
        Then a single A remains, at the position of the last occurrence
        """
        result = apply_diff(_m(("A", "1"), ("B", "2"), ("A", "3")), [DiffOp.add("A", "9")])
        assert result == _m(("B", "2"), ("A", "9"))

    def test_add_with_empty_value_is_ignored(self):
        base = _m(("A", "1"))
        assert apply_diff(base, [DiffOp.add("A", "")]) == base

    def test_remove_drops_key(self):
        assert apply_diff(_m(("A", "1"), ("B", "2")), [DiffOp.remove("A")]) == _m(("B", "2"))

    def test_remove_absent_key_is_noop(self):
        base = _m(("A", "1"))
        assert apply_diff(base, [DiffOp.remove("Z")]) == base

    def test_base_is_not_modified(self):
        """
        Given a base map
        When a diff is applied to it
        Then the base still holds its original pairs
        """
        base = _m(("A", "1"))
        apply_diff(base, [DiffOp.add("A", "2"), DiffOp.add("B", "3")])
        assert base == _m(("A", "1"))


CASES = [
    (_m(), _m(("A", "1"))),
    (_m(("A", "1")), _m()),
    (_m(("A", "1"), ("B", "2")), _m(("B", "3"), ("C", "4"))),
    (_m(("A", "1"), ("B", "")), _m(("B", "2"), ("A", ""))),
    (_m(("X", "1"), ("Y", "2"), ("Z", "3")), _m(("Z", "3"), ("Y", "2"), ("X", "1"))),
]


class TestProperties:
    @pytest.mark.parametrize("a, b", CASES)
    def test_round_trip(self, a, b):
        """
        Given two maps A and B
        When diff(A, B) is applied to A
        Then the non-empty pairs of the result equal those of B (as sets)
        """
        result = apply_diff(a, diff(a, b))
        assert set(result.non_empty()) == set(b.non_empty())

    @pytest.mark.parametrize("a, b", CASES)
    def test_apply_is_idempotent(self, a, b):
        """
        Given a diff d
        When d is applied twice
        Then the second application changes nothing
        """
        d = diff(a, b)
        once = apply_diff(a, d)
        assert apply_diff(once, d) == once
