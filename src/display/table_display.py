"""Aligned text rendering of tables and views."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, Sequence

from core.constants import DISPLAY_COLUMN_PADDING, DISPLAY_ROW_NUMBER_HEADER

if TYPE_CHECKING:
    from store.view import View


def render_table(
    header: Sequence[str],
    rows: Iterable[Sequence[str]],
    first_row_number: int = 0,
) -> str:
    """Render rows as a left-aligned text table with a row-number column.

    Args:
        header: Column names.
        rows: Formatted cell text per row.
        first_row_number: Number printed for the first row.

    Returns:
        Table text, one line per header and row, newline terminated.
    """
    columns: list[list[str]] = [[DISPLAY_ROW_NUMBER_HEADER]]
    columns.extend([name] for name in header)
    for row_number, row in enumerate(rows, first_row_number):
        columns[0].append(str(row_number))
        for column, text in zip(columns[1:], row):
            column.append(text)
    widths = [max(len(text) for text in column) for column in columns]
    lines = []
    for line_index in range(len(columns[0])):
        cells = [
            column[line_index].ljust(width + DISPLAY_COLUMN_PADDING)
            for column, width in zip(columns, widths)
        ]
        lines.append("".join(cells).rstrip())
    return "\n".join(lines) + "\n"


def render_view(view: "View", max_rows: int | None = None) -> str:
    """Render a view, truncated to its first ``max_rows`` rows when given.

    Args:
        view: View to render.
        max_rows: Optional row limit; ``None`` or 0 renders every row.

    Returns:
        Table text with a trailing note when rows were left out.
    """
    total_rows = len(view)
    shown = view.head(max_rows) if max_rows else view
    text = render_table(view.header(), shown.formatted_rows())
    hidden_rows = total_rows - len(shown)
    if hidden_rows > 0:
        text += f"... {hidden_rows} more rows\n"
    return text
