"""
blockflow — Line Diff
=====================
Greedy, bounded-lookahead line diff used by the editor's "Diff vs Solution"
panel.  It is not a minimal (LCS) edit script; snippets are editor-sized and
the interactive use case only needs something stable and readable.

For cursors i (old) and j (new):

  • equal lines            → Equal, advance both
  • otherwise look for old[i] in new[j+1 : j+1+LOOKAHEAD]
    and for new[j] in old[i+1 : i+1+LOOKAHEAD]
      - neither found      → Delete old[i], Insert new[j], advance both
      - new-side distance <= old-side distance
                           → Insert new[j], advance j
      - else               → Delete old[i], advance i
  • leftovers are flushed: old lines as Delete, then new lines as Insert.

Invariant: the Equal+Delete lines rebuild the old text and the Equal+Insert
lines rebuild the new text.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Optional

LOOKAHEAD = 40


class DiffKind(str, Enum):
    EQUAL = "equal"
    INSERT = "insert"
    DELETE = "delete"


_PREFIX: Dict[DiffKind, str] = {
    DiffKind.EQUAL: " ",
    DiffKind.INSERT: "+",
    DiffKind.DELETE: "-",
}


@dataclass(frozen=True)
class DiffOp:
    kind: DiffKind
    line: str

    @classmethod
    def equal(cls, line: str) -> "DiffOp":
        return cls(DiffKind.EQUAL, line)

    @classmethod
    def insert(cls, line: str) -> "DiffOp":
        return cls(DiffKind.INSERT, line)

    @classmethod
    def delete(cls, line: str) -> "DiffOp":
        return cls(DiffKind.DELETE, line)

    def to_dict(self) -> Dict[str, str]:
        return {"type": self.kind.value, "line": self.line}


def split_lines(text: str) -> List[str]:
    """CRLF → LF, then split.  The empty text has no lines."""
    if not text:
        return []
    return text.replace("\r\n", "\n").split("\n")


def _find_next(lines: List[str], target: str, start: int) -> Optional[int]:
    try:
        return lines.index(target, start, start + LOOKAHEAD)
    except ValueError:
        return None


def diff_lines(old: str, new: str) -> List[DiffOp]:
    """Return the edit script that turns `old` into `new`."""
    a = split_lines(old)
    b = split_lines(new)

    ops: List[DiffOp] = []
    i = j = 0
    while i < len(a) and j < len(b):
        a_line, b_line = a[i], b[j]
        if a_line == b_line:
            ops.append(DiffOp.equal(a_line))
            i += 1
            j += 1
            continue

        next_in_b = _find_next(b, a_line, j + 1)
        next_in_a = _find_next(a, b_line, i + 1)

        if next_in_a is None and next_in_b is None:
            ops.append(DiffOp.delete(a_line))
            ops.append(DiffOp.insert(b_line))
            i += 1
            j += 1
            continue

        dist_b = math.inf if next_in_b is None else next_in_b - j
        dist_a = math.inf if next_in_a is None else next_in_a - i
        if dist_b <= dist_a:
            ops.append(DiffOp.insert(b_line))
            j += 1
        else:
            ops.append(DiffOp.delete(a_line))
            i += 1

    ops.extend(DiffOp.delete(line) for line in a[i:])
    ops.extend(DiffOp.insert(line) for line in b[j:])
    return ops


def has_changes(ops: Iterable[DiffOp]) -> bool:
    return any(op.kind is not DiffKind.EQUAL for op in ops)


def format_diff(
    ops: Iterable[DiffOp],
    old_label: str = "Your Code",
    new_label: str = "Solution",
) -> str:
    """Render an edit script the way the editor's diff panel shows it."""
    lines = [f"--- {old_label}", f"+++ {new_label}"]
    lines.extend(_PREFIX[op.kind] + op.line for op in ops)
    return "\n".join(lines) + "\n"


__all__ = ["DiffKind", "DiffOp", "LOOKAHEAD", "diff_lines", "format_diff",
           "has_changes", "split_lines"]
