"""Immutable view node types.

A view is a chain of nodes ending in a ``BaseNode``. Reorder nodes hold
their parent through a view handle, so ancestors are shared, never copied.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:
    from store.base_table import BaseTable
    from store.view import View


@dataclass(frozen=True, eq=False)
class BaseNode:
    """Root node owning a base table."""

    table: "BaseTable"


@dataclass(frozen=True, eq=False)
class ColumnReorderNode:
    """Column projection or permutation over a parent view.

    Attributes:
        parent: Parent view handle.
        column_index_map: Logical column ``i`` is parent column ``column_index_map[i]``.
        resolved_column_map: The same map expressed in base table columns.
    """

    parent: "View"
    column_index_map: tuple[int, ...]
    resolved_column_map: tuple[int, ...]


@dataclass(frozen=True, eq=False)
class LineReorderNode:
    """Row selection or permutation over a parent view.

    Attributes:
        parent: Parent view handle.
        row_index_map: Logical row ``i`` is parent row ``row_index_map[i]``.
    """

    parent: "View"
    row_index_map: tuple[int, ...]


ViewNode = Union[BaseNode, ColumnReorderNode, LineReorderNode]
