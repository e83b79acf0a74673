"""Type-safe field parsing helpers for pipeline step execution.

This module centralizes primitive parsing so step executors stay concise
and produce consistent validation errors across CLI and SDK flows.
"""

from __future__ import annotations

from typing import Mapping

from core.errors import TabulaPipelineError


def required_int(args: Mapping[str, object], field_name: str) -> int:
    """Read a required integer field from a pipeline step."""
    value = optional_int(args, field_name)
    if value is None:
        raise TabulaPipelineError(f"Pipeline step is missing required field '{field_name}'.")
    return value


def optional_int(args: Mapping[str, object], field_name: str) -> int | None:
    """Read an optional integer field from a pipeline step."""
    value = args.get(field_name)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise TabulaPipelineError(f"Pipeline field '{field_name}' must be an integer.")
    return value


def optional_bool(args: Mapping[str, object], field_name: str) -> bool | None:
    """Read an optional boolean field from a pipeline step."""
    value = args.get(field_name)
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    raise TabulaPipelineError(f"Pipeline field '{field_name}' must be true or false.")


def required_column(args: Mapping[str, object], field_name: str) -> int | str:
    """Read a required column name or zero-based position."""
    value = args.get(field_name)
    if value is None:
        raise TabulaPipelineError(f"Pipeline step is missing required field '{field_name}'.")
    return _column_key(value, field_name)


def required_column_list(args: Mapping[str, object], field_name: str) -> list[int | str]:
    """Read a required non-empty list of column names or positions."""
    value = args.get(field_name)
    if not isinstance(value, list) or not value:
        raise TabulaPipelineError(
            f"Pipeline field '{field_name}' must be a non-empty list of columns."
        )
    return [_column_key(item, field_name) for item in value]


def required_scalar_text(args: Mapping[str, object], field_name: str) -> str:
    """Read a required scalar field as cell text.

    Booleans render as ``true``/``false`` so they infer back to boolean cells.
    """
    value = args.get(field_name)
    if value is None:
        raise TabulaPipelineError(f"Pipeline step is missing required field '{field_name}'.")
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float, str)):
        return str(value)
    raise TabulaPipelineError(f"Pipeline field '{field_name}' must be a scalar value.")


def _column_key(value: object, field_name: str) -> int | str:
    if isinstance(value, bool):
        raise TabulaPipelineError(f"Pipeline field '{field_name}' must name a column.")
    if isinstance(value, str) and value.strip():
        return value
    if isinstance(value, int):
        return value
    raise TabulaPipelineError(f"Pipeline field '{field_name}' must name a column.")
