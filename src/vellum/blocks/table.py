"""ASCII table formatting.

Table syntax:
+------+------+
| Name | Size |    <- first row is the header
+------+------+
| a    | 1    |
| b    | 2    |
+------+------+

Cells are split on ``|``; an escaped pipe ``\\|`` is literal cell text.
Border lines and blank lines are skipped.
"""

from __future__ import annotations

import re

_BORDER = r"[ \t]*\+[-+=]{2,}[ \t]*$"
_ROW = r"[ \t]*\|[^\n]*"

# A border line, then one or more rows, with borders allowed in between
TABLE_PATTERN = re.compile(
    rf"^{_BORDER}(?:\n{_BORDER})*\n{_ROW}(?:\n(?:{_BORDER}|{_ROW}))*",
    re.MULTILINE,
)

_CELL_SPLIT = re.compile(r"(?<!\\)\|")
_BORDER_ONLY = re.compile(r"^[-+=]+$")


def split_cells(row: str) -> list[str]:
    """Split a table row into trimmed cell texts.

    The outer pipes are optional; escaped pipes become literal ``|``.

    Examples:
        >>> split_cells("| a | b\\\\|c |")
        ['a', 'b|c']
    """
    row = row.strip()
    if row.startswith("|"):
        row = row[1:]
    if row.endswith("|") and not row.endswith("\\|"):
        row = row[:-1]
    return [cell.strip().replace("\\|", "|") for cell in _CELL_SPLIT.split(row)]


def format_row(row: str, header: bool = False) -> str:
    """Render one row as ``<tr>`` with ``<th>`` or ``<td>`` cells."""
    tag = "th" if header else "td"
    cells = "".join(f"<{tag}>{cell}</{tag}>" for cell in split_cells(row))
    return f"<tr>{cells}</tr>"


def format_table(table: str) -> str:
    """Convert an ASCII table block into a single ``<table>``.

    The first data row becomes the header row.
    """
    rows: list[str] = []
    for line in table.split("\n"):
        line = line.strip()
        if not line or _BORDER_ONLY.match(line):
            continue
        rows.append(format_row(line, header=not rows))
    return f"<table>{''.join(rows)}</table>"
