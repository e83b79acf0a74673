"""Unit tests for grouping views by key."""

from __future__ import annotations

from core.cell_value import CellValue
from ingest.table_reader import read_table_file
from store.view import View
from tests.fixture_paths import fixture_path


def _people_view() -> View:
    return View(read_table_file(fixture_path("tables/people.csv")))


def test_group_by_orders_groups_by_first_occurrence() -> None:
    """Groups should appear in the order their key first occurs."""
    view = _people_view()

    groups = view.group_by(lambda row: row.get("city"))

    assert [key.format() for key in groups.keys()] == ["berlin", "paris", "rome"]
    assert [len(group) for group in groups.views()] == [2, 2, 1]


def test_group_sizes_sum_to_row_count() -> None:
    """Every row should land in exactly one group."""
    view = _people_view()

    groups = view.group_by(lambda row: row.get("age").as_integer() // 10)

    assert groups.total_rows() == len(view)
    assert groups.keys() == [3, 2, 4]


def test_group_rows_keep_view_order() -> None:
    """Rows within a group should keep their order in the grouped view."""
    view = _people_view().sort_by_column("name", reverse=True)

    groups = view.group_by(lambda row: row.get("age"))
    group = groups.get(CellValue.of_integer(25))

    assert group is not None
    assert [cell.format() for cell in group.column_values("name")] == ["erin", "bob"]


def test_distribution_counts_group_sizes() -> None:
    """Distribution should map group size to how many groups have it."""
    view = _people_view()

    groups = view.group_by(lambda row: row.get("score"))

    assert groups.distribution() == [(1, 3), (2, 1)]


def test_filter_keeps_matching_groups() -> None:
    """Filtering groups should drop groups failing the predicate."""
    view = _people_view()

    groups = view.group_by(lambda row: row.get("city"))
    crowded = groups.filter(lambda key, group: len(group) > 1)

    assert len(crowded) == 2
    assert groups.get(CellValue.of_string("oslo")) is None


def test_group_by_empty_view_has_no_groups() -> None:
    """Grouping an empty view should produce no groups."""
    view = _people_view().head(0)

    groups = view.group_by(lambda row: row.get(0))

    assert len(groups) == 0
    assert groups.distribution() == []
