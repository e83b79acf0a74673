"""Unit tests for base table storage."""

from __future__ import annotations

import pytest

from core.cell_value import CellKind, CellValue
from core.errors import ArityError, HeaderMismatchError
from store.base_table import BaseTable


def _people_table() -> BaseTable:
    table = BaseTable(["name", "age"])
    table.append_rows([["alice", 30], ["bob", 25]])
    return table


def test_append_rows_stores_typed_cells() -> None:
    """Appended rows should read back with their cell kinds."""
    table = _people_table()
    row = table.get_row(1)

    assert len(table) == 2 and table.column_count == 2
    assert row is not None
    assert row.to_list() == [CellValue.of_string("bob"), CellValue.of_integer(25)]
    assert row.get("age").kind is CellKind.INTEGER


def test_get_row_out_of_bounds_returns_none() -> None:
    """Out-of-range row reads should be absent, not errors."""
    table = _people_table()

    assert table.get_row(2) is None
    assert table.get_row(-1) is None
    assert table.header_name(5) is None


def test_append_rows_rejects_wrong_arity_without_partial_append() -> None:
    """A bad row should abort the whole append and leave the table unchanged."""
    table = _people_table()

    with pytest.raises(ArityError):
        table.append_rows([["carol", 41], ["dave"]])

    assert len(table) == 2


def test_header_allows_duplicate_names() -> None:
    """Duplicate header names are legal and name lookups use the first match."""
    table = BaseTable(["x", "x"])
    table.append_row([1, 2])
    row = table.get_row(0)

    assert table.header() == ("x", "x")
    assert row is not None and row.get("x") == CellValue.of_integer(1)


def test_append_table_requires_identical_header() -> None:
    """Appending a table should check header names position by position."""
    table = _people_table()
    other = BaseTable(["age", "name"])
    other.append_row([1, "zed"])

    with pytest.raises(HeaderMismatchError):
        table.append_table(other)

    same = BaseTable(["name", "age"])
    same.append_row(["zed", 1])
    table.append_table(same)

    assert len(table) == 3


def test_tables_compare_by_content() -> None:
    """Equality should compare header and cells, not storage identity."""
    assert _people_table() == _people_table()
    assert _people_table() != BaseTable(["name", "age"])


def test_list_cells_keep_nested_strings() -> None:
    """Nested string cells should survive storage."""
    table = BaseTable(["tags"])
    table.append_row([CellValue.of_list([CellValue.of_string("a"), CellValue.of_string("b")])])
    row = table.get_row(0)

    assert row is not None and row.get(0).format() == "[ a, b ]"
