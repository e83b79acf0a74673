"""Immutable, shared views over base tables.

Every transformation returns a new view whose node references the parent
view through a shared handle; no node is mutated and no cell is copied.
Handles are counted so materialization can tell whether a base table is
uniquely owned: a uniquely owned ``BaseNode`` is moved out in O(1), any
other view is copied row by row in O(view size).
"""

from __future__ import annotations

import threading
from typing import Any, Callable, Iterable, Iterator, Sequence, TypeVar
import weakref

from core.cell_value import CellValue
from core.errors import ConsumedViewError, RowRangeError
from core.logging_config import get_logger
from store.base_table import BaseTable, check_same_header, prepare_rows
from store.column_index import ColumnKey, resolve_column_index
from store.grouping import Groups, build_groups
from store.row import (
    Row,
    RowKeyFunction,
    iterate_rows,
    resolve_column_map,
    resolve_header_name,
    resolve_row,
    resolve_row_count,
)
from store.view_nodes import BaseNode, ColumnReorderNode, LineReorderNode, ViewNode

_LOGGER = get_logger(__name__)

T = TypeVar("T")


class _SharedNode:
    """Reference-counted holder of one immutable view node."""

    def __init__(self, node: ViewNode) -> None:
        self.node = node
        self._handles = 0
        self._lock = threading.Lock()

    @property
    def handle_count(self) -> int:
        with self._lock:
            return self._handles

    def acquire(self) -> None:
        with self._lock:
            self._handles += 1

    def release(self) -> None:
        with self._lock:
            self._handles -= 1

    def take_if_unique(self) -> bool:
        """Drop the last handle and report success if exactly one is live."""
        with self._lock:
            if self._handles != 1:
                return False
            self._handles = 0
            return True


class View:
    """Immutable logical table: a base table seen through row and column maps.

    Constructing a view from a table takes ownership of that table; callers
    must not mutate it afterwards. Views are safe to read from many threads.
    """

    __slots__ = ("_shared", "_finalizer", "__weakref__")

    def __init__(self, table: BaseTable) -> None:
        self._attach(_SharedNode(BaseNode(table)))

    @classmethod
    def _from_node(cls, node: ViewNode) -> "View":
        return cls._from_shared(_SharedNode(node))

    @classmethod
    def _from_shared(cls, shared: _SharedNode) -> "View":
        view = cls.__new__(cls)
        view._attach(shared)
        return view

    def _attach(self, shared: _SharedNode) -> None:
        shared.acquire()
        self._shared: _SharedNode | None = shared
        self._finalizer = weakref.finalize(self, shared.release)
        self._finalizer.atexit = False

    def _live(self) -> _SharedNode:
        if self._shared is None:
            raise ConsumedViewError(
                "View handle was consumed by a materializing call. "
                "Use the table or view returned by that call instead."
            )
        return self._shared

    @property
    def node(self) -> ViewNode:
        """Return the node at the top of this view's chain."""
        return self._live().node

    @property
    def handle_count(self) -> int:
        """Return how many live handles share this view's node."""
        return self._live().handle_count

    def is_consumed(self) -> bool:
        return self._shared is None

    def clone(self) -> "View":
        """Return a new handle sharing this view's node in O(1)."""
        return View._from_shared(self._live())

    def __len__(self) -> int:
        return resolve_row_count(self.node)

    @property
    def row_count(self) -> int:
        return len(self)

    @property
    def column_count(self) -> int:
        return len(resolve_column_map(self.node))

    def is_empty(self) -> bool:
        return len(self) == 0

    def header(self) -> tuple[str, ...]:
        """Return logical header names in column order."""
        node = self.node
        names = []
        for index in range(self.column_count):
            name = resolve_header_name(node, index)
            if name is None:
                raise IndexError(f"Column {index} does not resolve to a header name.")
            names.append(name)
        return tuple(names)

    def header_name(self, index: int) -> str | None:
        return resolve_header_name(self.node, index)

    def get_row(self, index: int) -> Row | None:
        """Return logical row ``index``, or ``None`` when out of bounds."""
        return resolve_row(self.node, index)

    def __getitem__(self, index: int) -> Row:
        count = len(self)
        position = index + count if index < 0 else index
        row = resolve_row(self.node, position) if 0 <= position < count else None
        if row is None:
            raise IndexError(f"Row index {index} is out of range for {count} rows.")
        return row

    def __iter__(self) -> Iterator[Row]:
        node = self.node
        return iterate_rows(node, range(resolve_row_count(node)))

    def __reversed__(self) -> Iterator[Row]:
        node = self.node
        return iterate_rows(node, range(resolve_row_count(node) - 1, -1, -1))

    def formatted_rows(self) -> Iterator[list[str]]:
        """Yield display text of every row in logical order."""
        for row in self:
            yield row.formatted()

    def head(self, rows: int) -> "View":
        """Select the first ``rows`` logical rows."""
        count = len(self)
        _check_row_amount(rows)
        if rows >= count:
            return self.clone()
        return self._select_rows(range(rows))

    def tail(self, rows: int) -> "View":
        """Select the last ``rows`` logical rows."""
        count = len(self)
        _check_row_amount(rows)
        if rows >= count:
            return self.clone()
        return self._select_rows(range(count - rows, count))

    def range(self, start: int, end: int) -> "View":
        """Select logical rows ``[start, end)``.

        Raises:
            RowRangeError: If ``start > end``, ``start < 0`` or ``end`` exceeds the row count.
        """
        count = len(self)
        if start < 0 or start > end or end > count:
            raise RowRangeError(
                f"Invalid row range {start}..{end} for view with {count} rows. "
                "Use 0 <= start <= end <= row count."
            )
        return self._select_rows(range(start, end))

    def select_rows(self, indices: Iterable[int]) -> "View":
        """Select arbitrary logical rows; duplicates and reordering are allowed.

        Raises:
            RowRangeError: If an index is out of bounds.
        """
        count = len(self)
        selected = tuple(indices)
        for index in selected:
            if not 0 <= index < count:
                raise RowRangeError(f"Row index {index} is out of range for {count} rows.")
        return self._select_rows(selected)

    def sort(self, key_fn: RowKeyFunction, reverse: bool = False) -> "View":
        """Stably reorder rows by a key computed once per row.

        Args:
            key_fn: Function mapping a row to an orderable key.
            reverse: Sort descending; equal keys still keep their original order.

        Returns:
            Reordered view.
        """
        keys = [key_fn(row) for row in self]
        order = sorted(range(len(keys)), key=keys.__getitem__, reverse=reverse)
        return self._select_rows(order)

    def sort_by_column(self, column: ColumnKey, reverse: bool = False) -> "View":
        """Stably reorder rows by the cells of one column."""
        index = resolve_column_index(column, self.header())
        return self.sort(lambda row: row.get(index).sort_key(), reverse=reverse)

    def filter(self, predicate: Callable[[Row], bool]) -> "View":
        """Keep rows satisfying ``predicate`` in their original order."""
        return self._select_rows(
            index for index, row in enumerate(self) if predicate(row)
        )

    def drop_column(self, column: ColumnKey) -> "View":
        """Select every column except one.

        Raises:
            ColumnNotFoundError: If the column does not resolve.
        """
        dropped = resolve_column_index(column, self.header())
        return self._select_columns(
            index for index in range(self.column_count) if index != dropped
        )

    def drop_all_columns_except(self, columns: Sequence[ColumnKey]) -> "View":
        """Select exactly ``columns`` in the given order; duplicates repeat columns.

        Raises:
            ColumnNotFoundError: If a column does not resolve.
        """
        header = self.header()
        return self._select_columns(resolve_column_index(column, header) for column in columns)

    def group_by(self, key_fn: Callable[[Row], T]) -> Groups[T]:
        """Partition rows by key, ordered by each key's first row."""
        return build_groups(self, key_fn)

    def column_values(self, column: ColumnKey) -> list[CellValue]:
        """Return the cells of one column in logical row order."""
        index = resolve_column_index(column, self.header())
        return [row.get(index) for row in self]

    def fold_column(
        self,
        column: ColumnKey,
        initial: Any,
        fold_fn: Callable[[Any, CellValue], Any],
    ) -> Any:
        """Left-fold the cells of one column in logical row order."""
        accumulator = initial
        for cell in self.column_values(column):
            accumulator = fold_fn(accumulator, cell)
        return accumulator

    def to_table(self) -> BaseTable:
        """Copy this view into a new base table; the handle stays usable."""
        table = self._copy_table()
        _log_materialized("expensive", table)
        return table

    def into_table(self) -> BaseTable:
        """Materialize this view and consume the handle.

        A ``BaseNode`` with no other live handle gives up its table in O(1).
        Any other view is copied in O(view size).

        Returns:
            Base table with the view's content.
        """
        shared = self._live()
        node = shared.node
        if isinstance(node, BaseNode) and shared.take_if_unique():
            self._finalizer.detach()
            self._shared = None
            _log_materialized("cheap", node.table)
            return node.table
        table = self._copy_table()
        self._release()
        _log_materialized("expensive", table)
        return table

    def append_row(self, cells: Sequence[object]) -> "View":
        """Append one row; consumes this handle and returns the new view."""
        return self.append_rows([cells])

    def append_rows(self, rows: Iterable[Sequence[object]]) -> "View":
        """Append rows; consumes this handle and returns the new view.

        Rows are validated before the handle is consumed, so a failed
        append leaves this view usable and unchanged.

        Raises:
            ArityError: If any row's cell count differs from the header length.
        """
        prepared = prepare_rows(rows, self.header())
        table = self.into_table()
        table.append_rows(prepared)
        _LOGGER.debug("rows_appended", rows=len(prepared), total_rows=len(table))
        return View(table)

    def append_table(self, other: "BaseTable | View") -> "View":
        """Append every row of ``other``; consumes this handle.

        Raises:
            HeaderMismatchError: If header name sequences differ.
        """
        check_same_header(self.header(), other.header())
        rows = [row.to_list() for row in other]
        return self.append_rows(rows)

    def __repr__(self) -> str:
        if self._shared is None:
            return "View(consumed)"
        return (
            f"View(node={type(self.node).__name__}, rows={len(self)}, "
            f"columns={self.column_count})"
        )

    def _select_rows(self, indices: Iterable[int]) -> "View":
        return View._from_node(LineReorderNode(parent=self.clone(), row_index_map=tuple(indices)))

    def _select_columns(self, indices: Iterable[int]) -> "View":
        column_index_map = tuple(indices)
        parent_map = resolve_column_map(self.node)
        return View._from_node(
            ColumnReorderNode(
                parent=self.clone(),
                column_index_map=column_index_map,
                resolved_column_map=tuple(parent_map[index] for index in column_index_map),
            )
        )

    def _copy_table(self) -> BaseTable:
        table = BaseTable(self.header())
        table.append_rows(row.to_list() for row in self)
        return table

    def _release(self) -> None:
        self._finalizer()
        self._shared = None


def _check_row_amount(rows: int) -> None:
    if rows < 0:
        raise RowRangeError(f"Row amount must be >= 0, got {rows}.")


def _log_materialized(path: str, table: BaseTable) -> None:
    _LOGGER.debug(
        "view_materialized",
        path=path,
        rows=len(table),
        columns=table.column_count,
    )
