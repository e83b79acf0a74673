"""Column lookup by position or header name."""

from __future__ import annotations

from typing import Sequence, Union

from core.errors import ColumnNotFoundError

ColumnKey = Union[int, str]


def resolve_column_index(key: ColumnKey, header: Sequence[str]) -> int:
    """Resolve a column position or name against header names.

    Names resolve to their first match, since duplicate names are legal.

    Args:
        key: Zero-based column position or header name.
        header: Logical header names.

    Returns:
        Zero-based column position.

    Raises:
        ColumnNotFoundError: If the name is unknown or the position is out of range.
    """
    if isinstance(key, str):
        for index, name in enumerate(header):
            if name == key:
                return index
        raise ColumnNotFoundError(
            f"Column '{key}' not found. Available columns: {list(header)}."
        )
    return check_column_position(key, len(header))


def check_column_position(index: int, column_count: int) -> int:
    """Validate a zero-based column position.

    Raises:
        ColumnNotFoundError: If the position is out of range.
    """
    if isinstance(index, bool) or not isinstance(index, int):
        raise TypeError(f"Column key must be int or str, got {type(index).__name__}.")
    if not 0 <= index < column_count:
        raise ColumnNotFoundError(
            f"Column index {index} is out of range for {column_count} columns."
        )
    return index
