"""Recursive-descent tokenizer for delimited text lines.

A line is split on a single separator character. A cell starting with a
grouping symbol runs to the first matching closer and its inner text is
tokenized again, producing a nested list. Other cells go through type
inference.
"""

from __future__ import annotations

from core.cell_value import CellKind, CellValue, infer_cell_value, parse_point
from core.constants import DEFAULT_SEPARATOR, GROUPING_SYMBOLS
from core.errors import MalformedLiteralError

_CLOSERS = dict(GROUPING_SYMBOLS)
_WHITESPACE = " \t\r\n\x0b\x0c"


def tokenize_line(line: str, separator: str = DEFAULT_SEPARATOR) -> list[CellValue]:
    """Convert one delimited line into cells.

    Args:
        line: Raw line text without its line ending.
        separator: Single separator character.

    Returns:
        Cells in line order; a trailing separator yields no empty cell.

    Raises:
        MalformedLiteralError: If a grouping symbol is never closed or the
            closer is followed by something other than a separator.
    """
    if len(separator) != 1:
        raise ValueError(f"Separator must be one character, got {separator!r}.")
    strip_chars = _WHITESPACE.replace(separator, "")
    text = line.strip(strip_chars)
    cells: list[CellValue] = []
    position = 0
    while True:
        position = _skip_chars(text, position, strip_chars)
        if position >= len(text):
            return cells
        closer = _CLOSERS.get(text[position])
        if closer is None:
            end = text.find(separator, position)
            if end == -1:
                end = len(text)
            cells.append(infer_cell_value(text[position:end]))
            position = end + 1
        else:
            cell, position = _take_group(text, position, closer, separator, strip_chars)
            cells.append(cell)


def _take_group(
    text: str,
    position: int,
    closer: str,
    separator: str,
    strip_chars: str,
) -> tuple[CellValue, int]:
    """Consume a grouping literal starting at ``position``.

    Returns:
        The literal's cell and the position after its trailing separator.
    """
    end = text.find(closer, position + 1)
    if end == -1:
        raise MalformedLiteralError(
            f"Unclosed '{text[position]}' at column {position + 1} in {text!r}: "
            f"expected a matching '{closer}'."
        )
    inner = text[position + 1 : end]
    after = _skip_chars(text, end + 1, strip_chars)
    if after < len(text) and text[after] != separator:
        raise MalformedLiteralError(
            f"Unexpected text after '{closer}' at column {after + 1} in {text!r}: "
            f"expected separator {separator!r} or end of line."
        )
    return _group_cell(inner, separator, strip_chars), after + 1


def _group_cell(inner: str, separator: str, strip_chars: str) -> CellValue:
    point = parse_point(inner.strip(strip_chars))
    if point is not None:
        return CellValue(CellKind.POINT2D, point)
    return CellValue.of_list(tokenize_line(inner, separator))


def _skip_chars(text: str, position: int, chars: str) -> int:
    while position < len(text) and text[position] in chars:
        position += 1
    return position
