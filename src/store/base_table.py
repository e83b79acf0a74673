"""Canonical owned table storage.

A base table owns a string arena, the header as arena ranges, and
row-major stored cells. Appends validate every row before storing any,
so a failed append leaves the table unmodified.
"""

from __future__ import annotations

from typing import Iterable, Iterator, Sequence

from core.cell_value import CellValue, to_cell_value
from core.errors import ArityError, HeaderMismatchError
from store.cell_codec import StoredCell, decode_cell, encode_cell
from store.row import Row
from store.string_arena import ArenaRange, StringArena

PreparedRow = tuple[CellValue, ...]


class BaseTable:
    """Owned storage of header names and typed rows."""

    def __init__(self, header: Sequence[str]) -> None:
        """Create an empty table.

        Args:
            header: Column names; duplicates are allowed.
        """
        self._arena = StringArena()
        self._header_ranges: tuple[ArenaRange, ...] = tuple(
            self._arena.intern(name) for name in header
        )
        self._header_names = tuple(
            self._arena.resolve(name_range) for name_range in self._header_ranges
        )
        self._rows: list[tuple[StoredCell, ...]] = []
        self._identity_map = tuple(range(len(self._header_ranges)))

    @property
    def arena(self) -> StringArena:
        return self._arena

    @property
    def identity_column_map(self) -> tuple[int, ...]:
        """Column map used by rows read without any remapping."""
        return self._identity_map

    @property
    def column_count(self) -> int:
        return len(self._header_ranges)

    def __len__(self) -> int:
        return len(self._rows)

    def is_empty(self) -> bool:
        return not self._rows

    def header(self) -> tuple[str, ...]:
        """Return header names in column order."""
        return self._header_names

    def header_name(self, index: int) -> str | None:
        """Return the name of column ``index``, or ``None`` when out of range."""
        if not 0 <= index < len(self._header_ranges):
            return None
        return self._header_names[index]

    def get_row(self, index: int) -> Row | None:
        """Return row ``index`` with the identity column map, or ``None``."""
        if not 0 <= index < len(self._rows):
            return None
        return Row(self, self._rows[index], self._identity_map)

    def __iter__(self) -> Iterator[Row]:
        for cells in self._rows:
            yield Row(self, cells, self._identity_map)

    def decode(self, stored: StoredCell) -> CellValue:
        return decode_cell(self._arena, stored)

    def append_row(self, cells: Sequence[object]) -> None:
        """Append one row.

        Raises:
            ArityError: If the cell count differs from the header length.
        """
        self.append_rows([cells])

    def append_rows(self, rows: Iterable[Sequence[object]]) -> None:
        """Append rows after validating all of them.

        Args:
            rows: Rows of ``CellValue`` or plain Python values.

        Raises:
            ArityError: If any row's cell count differs from the header length.
        """
        prepared = prepare_rows(rows, self.header())
        for cells in prepared:
            self._rows.append(tuple(encode_cell(self._arena, cell) for cell in cells))

    def append_table(self, other: "BaseTable") -> None:
        """Append every row of ``other``.

        Raises:
            HeaderMismatchError: If header name sequences differ.
        """
        check_same_header(self.header(), other.header())
        self.append_rows([row.to_list() for row in other])

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BaseTable):
            return NotImplemented
        if self.header() != other.header() or len(self) != len(other):
            return False
        return all(
            mine.to_list() == theirs.to_list() for mine, theirs in zip(self, other)
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"BaseTable(columns={list(self.header())}, rows={len(self)})"


def prepare_rows(
    rows: Iterable[Sequence[object]],
    header: Sequence[str],
) -> list[PreparedRow]:
    """Coerce rows to cells and check their arity.

    Args:
        rows: Candidate rows.
        header: Target header names.

    Returns:
        Validated rows of cells.

    Raises:
        ArityError: If a row's cell count differs from the header length.
    """
    prepared: list[PreparedRow] = []
    for position, row in enumerate(rows):
        cells = tuple(to_cell_value(value) for value in row)
        if len(cells) != len(header):
            raise ArityError(
                f"Row {position} has {len(cells)} cells but the header has "
                f"{len(header)} columns {list(header)}.",
                header=header,
                cells=[cell.format() for cell in cells],
            )
        prepared.append(cells)
    return prepared


def check_same_header(expected: Sequence[str], actual: Sequence[str]) -> None:
    """Require two header name sequences to match position by position.

    Raises:
        HeaderMismatchError: If lengths or names differ.
    """
    if tuple(expected) != tuple(actual):
        raise HeaderMismatchError(
            f"Cannot append table with header {list(actual)} to table with header "
            f"{list(expected)}. Headers must match by name and position."
        )
