"""Pipe-table parsing and rendering.

Decoding side: a table is a run of contiguous lines that contain ``|``.
Separator rows (dashes, colons, pipes and whitespace only) are skipped,
every other row is split on ``|`` with empty cells dropped, and all rows
are padded to the widest row so the resulting :class:`TableBlock` is
rectangular.

Encoding side::

    | Name | Qty |
    | --- | --- |
    | apple | 3 |

Cell contents are stored and emitted as plain strings; no inline markup
is applied to table cells in either direction.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from typing import Any

from blockmark.models import ConversionWarning, TableBlock

_SEPARATOR_RE = re.compile(r"^\s*\|?[\s\-|:]+\|?\s*$")


def is_table_line(line: str) -> bool:
    """Return ``True`` if *line* opens a table (more than two pipe-split parts)."""
    return "|" in line and len(line.split("|")) > 2


def is_separator_row(line: str) -> bool:
    """Return ``True`` for a ``|---|:---:|`` style header separator."""
    return bool(_SEPARATOR_RE.match(line))


def split_row(line: str) -> list[str]:
    """Split a table row on ``|``, trimming cells and dropping empty ones."""
    return [cell.strip() for cell in line.split("|") if cell.strip()]


def pad_rows(rows: list[list[str]]) -> tuple[list[list[str]], int]:
    """Pad every row in place to the widest row's length.

    Returns
    -------
    tuple[list[list[str]], int]
        The same *rows* list and the number of rows that needed padding.
    """
    width = max((len(row) for row in rows), default=0)
    padded = 0
    for row in rows:
        if len(row) < width:
            row.extend("" for _ in range(width - len(row)))
            padded += 1
    return rows, padded


def build_table(
    lines: Sequence[str],
) -> tuple[TableBlock | None, list[ConversionWarning]]:
    """Build a :class:`TableBlock` from the raw lines of one table run.

    Parameters
    ----------
    lines:
        Every line of the run, separator rows included.

    Returns
    -------
    tuple[TableBlock | None, list[ConversionWarning]]
        ``None`` when no line yields a single cell.
    """
    warnings: list[ConversionWarning] = []
    rows: list[list[str]] = []
    for line in lines:
        if is_separator_row(line):
            continue
        cells = split_row(line)
        if cells:
            rows.append(cells)

    if not rows:
        return None, warnings

    rows, padded = pad_rows(rows)
    if padded:
        warnings.append(ConversionWarning(
            code="TABLE_ROWS_PADDED",
            message=f"{padded} table row(s) padded to {len(rows[0])} columns.",
            context={"padded_rows": padded, "width": len(rows[0])},
        ))
    return TableBlock(rows=rows), warnings


def coerce_rows(content: Any) -> list[list[str]]:
    """Coerce an arbitrary editor ``content`` value into rows of strings.

    Non-list content becomes ``[]``; non-list rows are skipped; non-string
    cells become ``""``.
    """
    if not isinstance(content, list):
        return []
    rows: list[list[str]] = []
    for row in content:
        if not isinstance(row, list):
            continue
        rows.append([cell if isinstance(cell, str) else "" for cell in row])
    return rows


def render_table(rows: Sequence[Sequence[str]]) -> str:
    """Render *rows* as a pipe table with a ``---`` separator after row 0.

    Returns the empty string when *rows* is empty.
    """
    if not rows:
        return ""

    def _line(cells: Sequence[str]) -> str:
        return "| " + " | ".join(cells) + " |"

    lines = [_line(rows[0]), _line(["---"] * len(rows[0]))]
    lines.extend(_line(row) for row in rows[1:])
    return "\n".join(lines)
