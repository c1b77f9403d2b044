"""Coloured summary of pending env changes, shown before a release is built.

Presents:
  + Added vars in green
  - Removed vars in red
  * Edited vars in blue
"""

from rich.text import Text

from envedit.domain.ordered_map import OrderedMap
from envedit.models import DiffOp, DiffOpKind

_NO_CHANGES = Text("(no changes)", style="dim")


def diff_lines(ops: list[DiffOp], baseline: OrderedMap) -> list[Text]:
    """Render one line per op; ADD is shown as an edit when ``baseline`` has the key."""
    lines: list[Text] = []
    for op in ops:
        if op.kind == DiffOpKind.REMOVE:
            lines.append(Text(f"-  {op.key}", style="red"))
        elif baseline.get(op.key):
            lines.append(Text(f"*  {op.key}", style="blue"))
        else:
            lines.append(Text(f"+  {op.key}", style="green"))
    return lines or [_NO_CHANGES.copy()]


def change_summary(ops: list[DiffOp]) -> str:
    n = len(ops)
    if n == 1:
        return "1 unsaved change"
    if n > 1:
        return f"{n} unsaved changes"
    return ""
