"""Pure diff/patch functions over ordered maps.

``diff`` produces ADD/REMOVE operations turning one map into another;
``apply_diff`` replays such operations onto any map.  Both are total and
never modify their inputs.
"""

import logging

from envedit.domain.ordered_map import OrderedMap, Pair
from envedit.models import DiffOp, DiffOpKind

logger = logging.getLogger(__name__)


def _last_values(m: OrderedMap) -> dict[str, str]:
    """Collapse ``m`` to one value per non-empty key.

    Keys keep the position of their first occurrence and the value of their
    last, matching ``OrderedMap.get``.
    """
    values: dict[str, str] = {}
    for key, value in m:
        if key:
            values[key] = value
    return values


def diff(from_map: OrderedMap, to_map: OrderedMap) -> list[DiffOp]:
    """Return the operations that turn ``from_map`` into ``to_map``.

    ADD ops come first in ``to_map``'s order, followed by REMOVE ops in
    ``from_map``'s order.  A key whose value is empty in ``to_map`` counts as
    removed.
    """
    before = _last_values(from_map)
    after = _last_values(to_map)

    ops: list[DiffOp] = []
    for key, value in after.items():
        if value and before.get(key) != value:
            ops.append(DiffOp.add(key, value))
    for key in before:
        if not after.get(key):
            ops.append(DiffOp.remove(key))

    logger.debug("diff computed %d op(s) from %d to %d pairs", len(ops), len(from_map), len(to_map))
    return ops


def apply_diff(base: OrderedMap, ops: list[DiffOp]) -> OrderedMap:
    """Replay ``ops`` onto ``base`` and return the resulting map.

    - ADD overwrites the last slot holding the key in place (earlier
      duplicates are dropped) or appends a new pair.  ADD with an empty value
      is ignored.
    - REMOVE drops every pair with the key; absent keys are a no-op.
    """
    pairs: list[Pair] = base.to_pairs()
    for op in ops:
        if op.kind == DiffOpKind.ADD:
            if not op.value:
                continue
            indices = [i for i, (k, _) in enumerate(pairs) if k == op.key]
            if not indices:
                pairs.append((op.key, op.value))
                continue
            pairs[indices[-1]] = (op.key, op.value)
            for i in reversed(indices[:-1]):
                del pairs[i]
        elif op.kind == DiffOpKind.REMOVE:
            pairs = [(k, v) for k, v in pairs if k != op.key]
    return OrderedMap(tuple(pairs))
