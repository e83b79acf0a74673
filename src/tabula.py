"""Public SDK surface for Tabula.

This module provides a stable import path for library users.
It re-exports tables, views, cells, ingestion helpers, and errors.
"""

from __future__ import annotations

from core.cell_value import CellKind, CellValue, Timestamp, infer_cell_value, to_cell_value
from core.config import TabulaConfig
from core.errors import (
    ArityError,
    CellTypeError,
    ColumnNotFoundError,
    ConsumedViewError,
    HeaderMismatchError,
    InvalidHeaderError,
    MalformedLiteralError,
    RowRangeError,
    TabulaError,
)
from core.pipeline_execution import execute_pipeline_file
from display.table_display import render_table, render_view
from ingest.line_tokenizer import tokenize_line
from ingest.table_reader import (
    append_table_file,
    append_table_lines,
    read_table_file,
    read_table_lines,
    read_table_text,
)
from store.base_table import BaseTable
from store.grouping import Groups
from store.row import Row
from store.view import View

__all__ = [
    "ArityError",
    "BaseTable",
    "CellKind",
    "CellTypeError",
    "CellValue",
    "ColumnNotFoundError",
    "ConsumedViewError",
    "Groups",
    "HeaderMismatchError",
    "InvalidHeaderError",
    "MalformedLiteralError",
    "Row",
    "RowRangeError",
    "TabulaConfig",
    "TabulaError",
    "Timestamp",
    "View",
    "append_table_file",
    "append_table_lines",
    "execute_pipeline_file",
    "infer_cell_value",
    "read_table_file",
    "read_table_lines",
    "read_table_text",
    "render_table",
    "render_view",
    "to_cell_value",
    "tokenize_line",
]
