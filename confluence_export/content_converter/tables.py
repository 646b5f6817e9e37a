"""Rendering of storage-format tables as Markdown or AsciiDoc tables.

Cells are converted with the active converter, so inline formatting and
links survive, and then flattened onto a single line.
"""

import re
from dataclasses import dataclass, field
from typing import List, Optional

from .dom_utils import child_elements, matches_tag
from .storage_parser import ElementType

MIN_COLUMN_WIDTH = 3
ROW_GROUPS = ("thead", "tbody", "tfoot")


@dataclass
class TableRow:
    """A table row with flattened cell contents.

    Attributes:
        cells: Cell contents, one line each
        is_header: True if the row sits in thead or consists of th cells
    """
    cells: List[str] = field(default_factory=list)
    is_header: bool = False


def flatten_cell(content: str) -> str:
    """Collapse a converted cell onto one line and escape column separators."""
    text = re.sub(r'\s+', ' ', content.replace("\n", " ")).strip()
    return text.replace("|", "\\|")


def collect_rows(table: ElementType, convert_cell) -> List[TableRow]:
    """Collect the rows of a table in document order.

    Args:
        table: The table element
        convert_cell: Callback rendering a cell element's children

    Returns:
        Rows that have at least one cell
    """
    rows: List[TableRow] = []

    def add_row(row: ElementType, in_header: bool) -> None:
        cells = [
            cell for cell in child_elements(row)
            if matches_tag(cell, "th") or matches_tag(cell, "td")
        ]
        if not cells:
            return
        is_header = in_header or all(matches_tag(cell, "th") for cell in cells)
        rows.append(TableRow(
            cells=[flatten_cell(convert_cell(cell)) for cell in cells],
            is_header=is_header,
        ))

    for child in child_elements(table):
        if matches_tag(child, "tr"):
            add_row(child, False)
        elif any(matches_tag(child, group) for group in ROW_GROUPS):
            for row in child_elements(child):
                if matches_tag(row, "tr"):
                    add_row(row, matches_tag(child, "thead"))

    return rows


def _pad_rows(rows: List[TableRow]) -> Optional[List[List[str]]]:
    if not rows:
        return None
    columns = max(len(row.cells) for row in rows)
    if columns == 0:
        return None
    return [row.cells + [""] * (columns - len(row.cells)) for row in rows]


def render_markdown_table(rows: List[TableRow], compact: bool = False) -> str:
    """Render rows as a pipe table; the first row becomes the header.

    Columns are padded to the widest cell (at least three characters) unless
    ``compact`` is set.

    Example:
        >>> render_markdown_table([TableRow(["A", "B"]), TableRow(["1", "2"])])
        '\\n| A   | B   |\\n| --- | --- |\\n| 1   | 2   |\\n\\n'
    """
    grid = _pad_rows(rows)
    if grid is None:
        return ""

    if compact:
        widths = [MIN_COLUMN_WIDTH] * len(grid[0])
    else:
        widths = [
            max(MIN_COLUMN_WIDTH, max(len(row[index]) for row in grid))
            for index in range(len(grid[0]))
        ]

    def format_row(cells: List[str]) -> str:
        if compact:
            return "| " + " | ".join(cells) + " |\n"
        return "| " + " | ".join(
            cell.ljust(width) for cell, width in zip(cells, widths)
        ) + " |\n"

    lines = [format_row(grid[0])]
    lines.append("| " + " | ".join("-" * width for width in widths) + " |\n")
    lines.extend(format_row(row) for row in grid[1:])
    return "\n" + "".join(lines) + "\n"


def render_asciidoc_table(rows: List[TableRow]) -> str:
    """Render rows as an AsciiDoc ``|===`` table.

    A header row is marked when the first row came from thead or only has
    th cells.
    """
    grid = _pad_rows(rows)
    if grid is None:
        return ""

    has_header = rows[0].is_header
    lines = ["\n"]
    if has_header:
        lines.append('[options="header"]\n')
    lines.append("|===\n")
    for index, cells in enumerate(grid):
        lines.append(" ".join(f"| {cell}" if cell else "|" for cell in cells) + "\n")
        if index == 0 and has_header:
            lines.append("\n")
    lines.append("|===\n\n")
    return "".join(lines)
