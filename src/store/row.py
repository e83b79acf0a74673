"""Row handles and the view resolver.

The resolver walks a view's node chain to find the concrete backing row
or header name for a logical index. Row selections remap the index on the
way down; the outermost column selection decides which stored cells the
resulting row exposes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Iterator, Sequence

from core.cell_value import CellValue
from store.cell_codec import StoredCell
from store.column_index import ColumnKey, check_column_position, resolve_column_index
from store.view_nodes import ColumnReorderNode, LineReorderNode, ViewNode

if TYPE_CHECKING:
    from store.base_table import BaseTable


class Row:
    """Lightweight handle to one backing row seen through a column map."""

    __slots__ = ("_table", "_cells", "_column_map")

    def __init__(
        self,
        table: "BaseTable",
        cells: Sequence[StoredCell],
        column_map: Sequence[int],
    ) -> None:
        self._table = table
        self._cells = cells
        self._column_map = column_map

    def with_column_map(self, column_map: Sequence[int]) -> "Row":
        """Return the same backing row seen through another column map."""
        return Row(self._table, self._cells, column_map)

    @property
    def column_map(self) -> Sequence[int]:
        return self._column_map

    def __len__(self) -> int:
        return len(self._column_map)

    def header(self) -> tuple[str, ...]:
        """Return the logical header names of this row."""
        names = []
        for base_index in self._column_map:
            name = self._table.header_name(base_index)
            if name is None:
                raise IndexError(f"Column map entry {base_index} is out of header bounds.")
            names.append(name)
        return tuple(names)

    def get(self, key: ColumnKey) -> CellValue:
        """Return the cell at a logical column position or header name.

        Raises:
            ColumnNotFoundError: If the key does not resolve.
        """
        if isinstance(key, str):
            index = resolve_column_index(key, self.header())
        else:
            index = check_column_position(key, len(self._column_map))
        return self._table.decode(self._cells[self._column_map[index]])

    def __getitem__(self, key: ColumnKey) -> CellValue:
        return self.get(key)

    def __iter__(self) -> Iterator[CellValue]:
        for base_index in self._column_map:
            yield self._table.decode(self._cells[base_index])

    def to_list(self) -> list[CellValue]:
        return list(self)

    def formatted(self) -> list[str]:
        """Return display text of every cell in logical column order."""
        return [cell.format() for cell in self]

    def __repr__(self) -> str:
        return f"Row({self.formatted()})"


RowKeyFunction = Callable[[Row], Any]


def resolve_row(node: ViewNode, index: int) -> Row | None:
    """Resolve logical row ``index`` of a view node.

    Args:
        node: View node to start from.
        index: Logical row index.

    Returns:
        The resolved row, or ``None`` if ``index`` is out of bounds.
    """
    column_map: Sequence[int] | None = None
    while True:
        if isinstance(node, LineReorderNode):
            if not 0 <= index < len(node.row_index_map):
                return None
            index = node.row_index_map[index]
            node = node.parent.node
        elif isinstance(node, ColumnReorderNode):
            if column_map is None:
                column_map = node.resolved_column_map
            node = node.parent.node
        else:
            row = node.table.get_row(index)
            if row is None or column_map is None:
                return row
            return row.with_column_map(column_map)


def resolve_header_name(node: ViewNode, index: int) -> str | None:
    """Resolve the name of logical column ``index``; row selections are transparent."""
    while True:
        if isinstance(node, LineReorderNode):
            node = node.parent.node
        elif isinstance(node, ColumnReorderNode):
            if not 0 <= index < len(node.column_index_map):
                return None
            index = node.column_index_map[index]
            node = node.parent.node
        else:
            return node.table.header_name(index)


def resolve_column_map(node: ViewNode) -> Sequence[int]:
    """Return the base-table column map in effect for a view node."""
    while True:
        if isinstance(node, ColumnReorderNode):
            return node.resolved_column_map
        if isinstance(node, LineReorderNode):
            node = node.parent.node
        else:
            return node.table.identity_column_map


def resolve_row_count(node: ViewNode) -> int:
    """Return the logical row count of a view node without scanning rows."""
    while True:
        if isinstance(node, LineReorderNode):
            return len(node.row_index_map)
        if isinstance(node, ColumnReorderNode):
            node = node.parent.node
        else:
            return len(node.table)


def iterate_rows(node: ViewNode, indices: Sequence[int]) -> Iterator[Row]:
    """Yield resolved rows for logical ``indices`` of a view node."""
    for index in indices:
        row = resolve_row(node, index)
        if row is None:
            raise IndexError(f"Row index {index} is out of range.")
        yield row
