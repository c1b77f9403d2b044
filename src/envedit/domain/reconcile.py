"""Carry uncommitted edits forward onto a freshly received baseline."""

import logging

from envedit.domain.diff import diff
from envedit.domain.filters import KeyMatcher, fuzzy_match
from envedit.domain.ordered_map import OrderedMap
from envedit.domain.session import EditSession

logger = logging.getLogger(__name__)


def reconcile(
    new_baseline: OrderedMap,
    previous: EditSession | None = None,
    *,
    matcher: KeyMatcher = fuzzy_match,
) -> EditSession:
    """Return a session on ``new_baseline`` carrying the edits of ``previous``.

    The pending edits are diffed against the baseline ``previous`` was created
    from, never against ``new_baseline``.  There is no conflict detection: when
    the server and the user both changed a key, the user's edit wins.
    """
    session = EditSession(new_baseline, matcher=matcher)
    if previous is None:
        return session
    session = session.filtered(previous.filter_text)
    if not previous.has_changes:
        return session

    pending = diff(previous.original, previous.entries())
    logger.debug("replaying %d pending op(s) onto new baseline", len(pending))
    return session.apply_diff(pending)
