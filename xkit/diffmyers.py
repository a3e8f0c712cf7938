"""Line diffing with the linear-space variant of Myers' O(ND) algorithm.

Lines may be ``bytes`` or ``str``; the unified output has the same type as
the lines it was made from.
"""

from __future__ import annotations

import enum
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

_CONTEXT_THRESHOLD = 2


class EditKind(enum.IntEnum):
    """The kind of an edit."""

    DELETE = 1
    INSERT = 2


@dataclass(frozen=True)
class Edit:
    """A delete or insert operation.

    ``from_position`` is the line to edit in the old sequence;
    ``to_position`` is the line in the new sequence and only matters for inserts.
    """

    kind: EditKind
    from_position: int = 0
    to_position: int = 0


def diff(from_lines: Sequence[Any], to_lines: Sequence[Any]) -> list[Edit]:
    """Return the edits that turn from_lines into to_lines."""
    return _shortest_edits(list(from_lines), list(to_lines), 0, 0)


@dataclass
class _PrintLine:
    kind: EditKind | None = None
    line: Any = None
    hunk: bool = False


def _is_binary(*sequences: Sequence[Any]) -> bool:
    for sequence in sequences:
        for line in sequence:
            if line is not None:
                return isinstance(line, (bytes, bytearray))
    return True


def print_edits(
    from_lines: Sequence[Any], to_lines: Sequence[Any], edits: Sequence[Edit]
) -> Any:
    """Render edits in unified diff format, without the file header."""
    from_lines = list(from_lines)
    to_lines = list(to_lines)
    binary = _is_binary(from_lines, to_lines)
    newline: Any = b"\n" if binary else "\n"
    empty: Any = b"" if binary else ""

    def text(value: str) -> Any:
        return value.encode() if binary else value

    if from_lines and from_lines[-1] is not None:
        last = from_lines[-1]
        if not last.endswith(newline):
            from_lines[-1] = last + newline

    out: list[_PrintLine] = []
    from_index = 0
    to_index = 0
    i = 0
    while i < len(edits):
        old_start = from_index + 1
        new_start = to_index + 1
        hunk = _PrintLine(hunk=True)
        out.append(hunk)
        insert_count = 0
        delete_count = 0
        print_hunk = False
        j = i
        while j < len(edits):
            context = from_lines[from_index : edits[i].from_position]
            out.extend(_PrintLine(line=line) for line in context)
            advance = len(context)
            to_index += advance
            from_index += advance
            insert_count += advance
            delete_count += advance
            if advance > _CONTEXT_THRESHOLD:
                i -= 1
                break
            print_hunk = True
            edit = edits[j]
            if edit.kind == EditKind.DELETE:
                delete_count += 1
                from_index += 1
                out.append(
                    _PrintLine(EditKind.DELETE, from_lines[edit.from_position])
                )
            elif edit.kind == EditKind.INSERT:
                insert_count += 1
                to_index += 1
                out.append(_PrintLine(EditKind.INSERT, to_lines[edit.to_position]))
            else:
                raise ValueError("unknown edit kind")
            i += 1
            j += 1
        if print_hunk:
            hunk.line = text(
                f"@@ -{old_start},{delete_count} +{new_start},{insert_count} @@\n"
            )
        i += 1
    out.extend(_PrintLine(line=line) for line in from_lines[from_index:])

    parts: list[Any] = []
    for print_line in out:
        if print_line.hunk and print_line.line:
            parts.append(print_line.line)
            continue
        if print_line.kind == EditKind.DELETE:
            parts.append(text("-"))
        elif print_line.kind == EditKind.INSERT:
            parts.append(text("+"))
        else:
            parts.append(text(" "))
        if print_line.line:
            parts.append(print_line.line)
    return empty.join(parts)


def _shortest_edits(
    from_lines: list[Any], to_lines: list[Any], from_offset: int, to_offset: int
) -> list[Edit]:
    n, m = len(from_lines), len(to_lines)
    if m == 0:
        return [Edit(EditKind.DELETE, from_offset + i) for i in range(n)]
    if n == 0:
        return [Edit(EditKind.INSERT, from_offset, to_offset + i) for i in range(m)]
    d, x, y, u, v = _find_middle_snake(from_lines, to_lines)
    if d > 1 or (x != u and y != v):
        return _shortest_edits(
            from_lines[:x], to_lines[:y], from_offset, to_offset
        ) + _shortest_edits(
            from_lines[u:], to_lines[v:], from_offset + u, to_offset + v
        )
    if m > n:
        return _shortest_edits([], to_lines[n:m], from_offset + n, to_offset + n)
    if m < n:
        return _shortest_edits(from_lines[m:n], [], from_offset + m, to_offset + m)
    return []


def _find_middle_snake(
    a: list[Any], b: list[Any]
) -> tuple[int, int, int, int, int]:
    """Return the length and the start and end points of the middle snake."""
    n, m = len(a), len(b)
    max_d = (n + m + 1) // 2
    vf = [-1] * (2 * max_d + 1)
    vb = [-1] * (2 * max_d + 1)
    vf[1 + max_d] = 0
    vb[1 + max_d] = 0
    delta = n - m
    odd = delta & 1 == 1
    for d in range(max_d + 1):
        for k in range(-d, d + 1, 2):
            if k == -d or (k != d and vf[k - 1 + max_d] < vf[k + 1 + max_d]):
                x = vf[k + 1 + max_d]
            else:
                x = vf[k - 1 + max_d] + 1
            y = x - k
            xi, yi = x, y
            while x < n and y < m and a[x] == b[y]:
                x += 1
                y += 1
            vf[k + max_d] = x
            c = -(k - delta)
            if odd and -(d - 1) <= c <= d - 1 and vb[c + max_d] != -1:
                if x + vb[c + max_d] >= n:
                    return 2 * d - 1, xi, yi, x, y
        for k in range(-d, d + 1, 2):
            if k == -d or (k != d and vb[k - 1 + max_d] < vb[k + 1 + max_d]):
                x = vb[k + 1 + max_d]
            else:
                x = vb[k - 1 + max_d] + 1
            y = x - k
            xi, yi = x, y
            while x < n and y < m and a[n - x - 1] == b[m - y - 1]:
                x += 1
                y += 1
            vb[k + max_d] = x
            c = -(k - delta)
            if not odd and -d <= c <= d and vf[c + max_d] != -1:
                if x + vf[c + max_d] >= n:
                    return 2 * d, n - x, m - y, n - xi, m - yi
    return -1, -1, -1, -1, -1