"""Key matchers used to filter the rows an edit session enumerates."""

from collections.abc import Callable

KeyMatcher = Callable[[str, str], bool]


def fuzzy_match(key: str, query: str) -> bool:
    """Return True if every character of ``query`` appears in ``key`` in order.

    Matching is case-insensitive; an empty query matches everything.
    ``fuzzy_match("DATABASE_URL", "dburl")`` is True.
    """
    remaining = iter(key.lower())
    return all(ch in remaining for ch in query.lower())


def substring_match(key: str, query: str) -> bool:
    """Return True if ``key`` contains ``query`` (case-insensitive)."""
    return query.lower() in key.lower()


MATCHERS: dict[str, KeyMatcher] = {
    "fuzzy": fuzzy_match,
    "substring": substring_match,
}
