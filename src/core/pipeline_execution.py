"""Pipeline spec execution engine for CLI and SDK workflows.

This module reads a pipeline's source table and applies each step to the
current view. Transformation steps replace the current view; output steps
(``show``, ``group-by``) return printable lines and leave it unchanged.
"""

from __future__ import annotations

from typing import Callable

from core.cell_value import infer_cell_value
from core.config import TabulaConfig
from core.errors import TabulaPipelineError
from core.logging_config import get_logger
from core.pipeline_fields import (
    optional_bool,
    optional_int,
    required_column,
    required_column_list,
    required_int,
    required_scalar_text,
)
from core.pipeline_spec import PipelineSpec, PipelineStep, load_pipeline_spec
from display.table_display import render_view
from ingest.table_reader import read_table_file
from store.column_index import resolve_column_index
from store.view import View

_LOGGER = get_logger(__name__)

StepResult = tuple[View, tuple[str, ...]]


def execute_pipeline_file(spec_file: str, config: TabulaConfig | None = None) -> tuple[str, ...]:
    """Load and execute a pipeline spec file, returning printable output lines."""
    spec = load_pipeline_spec(spec_file)
    return execute_pipeline(spec, config)


def execute_pipeline(spec: PipelineSpec, config: TabulaConfig | None = None) -> tuple[str, ...]:
    """Execute a parsed pipeline spec and return output lines."""
    config = config or TabulaConfig.from_env()
    table = read_table_file(spec.source.path, spec.source.separator, config)
    view = View(table)
    output_lines: list[str] = []
    for step in spec.steps:
        view, step_lines = _execute_step(view, step, config)
        output_lines.extend(step_lines)
        _LOGGER.info(
            "pipeline_step_executed",
            command=step.command,
            rows=len(view),
            columns=view.column_count,
        )
    return tuple(output_lines)


def _execute_step(view: View, step: PipelineStep, config: TabulaConfig) -> StepResult:
    handler = _STEP_HANDLERS.get(step.command)
    if handler is None:
        raise TabulaPipelineError(f"Unsupported pipeline command '{step.command}'.")
    return handler(view, step, config)


def _execute_head_step(view: View, step: PipelineStep, config: TabulaConfig) -> StepResult:
    return view.head(required_int(step.args, "rows")), ()


def _execute_tail_step(view: View, step: PipelineStep, config: TabulaConfig) -> StepResult:
    return view.tail(required_int(step.args, "rows")), ()


def _execute_range_step(view: View, step: PipelineStep, config: TabulaConfig) -> StepResult:
    start = required_int(step.args, "start")
    end = required_int(step.args, "end")
    return view.range(start, end), ()


def _execute_sort_step(view: View, step: PipelineStep, config: TabulaConfig) -> StepResult:
    column = required_column(step.args, "column")
    descending = optional_bool(step.args, "descending") or False
    return view.sort_by_column(column, reverse=descending), ()


def _execute_filter_step(view: View, step: PipelineStep, config: TabulaConfig) -> StepResult:
    index = resolve_column_index(required_column(step.args, "column"), view.header())
    expected = infer_cell_value(required_scalar_text(step.args, "equals"))
    return view.filter(lambda row: row.get(index) == expected), ()


def _execute_drop_column_step(
    view: View,
    step: PipelineStep,
    config: TabulaConfig,
) -> StepResult:
    return view.drop_column(required_column(step.args, "column")), ()


def _execute_keep_columns_step(
    view: View,
    step: PipelineStep,
    config: TabulaConfig,
) -> StepResult:
    return view.drop_all_columns_except(required_column_list(step.args, "columns")), ()


def _execute_group_by_step(view: View, step: PipelineStep, config: TabulaConfig) -> StepResult:
    index = resolve_column_index(required_column(step.args, "column"), view.header())
    groups = view.group_by(lambda row: row.get(index))
    if optional_bool(step.args, "distribution"):
        lines = tuple(f"{size}\t{count}" for size, count in groups.distribution())
    else:
        lines = tuple(f"{key.format()}\t{len(group)}" for key, group in groups)
    return view, lines


def _execute_show_step(view: View, step: PipelineStep, config: TabulaConfig) -> StepResult:
    max_rows = optional_int(step.args, "rows")
    if max_rows is None:
        max_rows = config.display_rows
    if max_rows < 0:
        raise TabulaPipelineError("Pipeline field 'rows' must be >= 0.")
    return view, tuple(render_view(view, max_rows).splitlines())


_STEP_HANDLERS: dict[str, Callable[[View, PipelineStep, TabulaConfig], StepResult]] = {
    "head": _execute_head_step,
    "tail": _execute_tail_step,
    "range": _execute_range_step,
    "sort": _execute_sort_step,
    "filter": _execute_filter_step,
    "drop-column": _execute_drop_column_step,
    "keep-columns": _execute_keep_columns_step,
    "group-by": _execute_group_by_step,
    "show": _execute_show_step,
}
