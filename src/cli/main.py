"""Tabula CLI entry points.
This module exposes commands to display, group, and transform delimited tables.
It maps argparse commands onto view operations.
"""

from __future__ import annotations

import argparse
from dataclasses import replace
from typing import Any, Sequence

from cli.run_pipeline_command import add_run_pipeline_command, run_run_pipeline_command
from core.config import TabulaConfig, parse_separator
from core.logging_config import configure_logging
from display.table_display import render_view
from ingest.table_reader import read_table_file
from store.column_index import resolve_column_index
from store.view import View


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="tabula", description="Tabula table CLI")
    parser.add_argument("--separator", help="Override TABULA_SEPARATOR for this command")
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_show_command(subparsers)
    _add_groups_command(subparsers)
    add_run_pipeline_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the Tabula CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    config = _build_config(args.separator)
    configure_logging(config.log_level)
    if args.command == "show":
        return _run_show_command(config, args)
    if args.command == "groups":
        return _run_groups_command(config, args)
    if args.command == "run":
        return run_run_pipeline_command(config, args)
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _build_config(separator: str | None) -> TabulaConfig:
    """Build runtime config with optional separator override.

    Args:
        separator: Optional override character.

    Returns:
        Validated config.
    """
    config = TabulaConfig.from_env()
    if separator:
        config = replace(config, separator=parse_separator(separator))
    return config


def _load_view(config: TabulaConfig, source: str) -> View:
    return View(read_table_file(source, config=config))


def _run_show_command(config: TabulaConfig, args: argparse.Namespace) -> int:
    """Handle show command.

    Args:
        config: Runtime config.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    view = _load_view(config, args.source)
    if args.keep:
        view = view.drop_all_columns_except(args.keep)
    for column in args.drop or ():
        view = view.drop_column(column)
    if args.head is not None:
        view = view.head(args.head)
    if args.tail is not None:
        view = view.tail(args.tail)
    max_rows = args.max_rows if args.max_rows is not None else config.display_rows
    print(render_view(view, max_rows), end="")
    return 0


def _run_groups_command(config: TabulaConfig, args: argparse.Namespace) -> int:
    """Handle groups command.

    Args:
        config: Runtime config.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    view = _load_view(config, args.source)
    index = resolve_column_index(args.by, view.header())
    groups = view.group_by(lambda row: row.get(index))
    if args.distribution:
        for size, count in groups.distribution():
            print(f"{size}\t{count}")
        return 0
    for key, group in groups:
        print(f"{key.format()}\t{len(group)}")
    return 0


def _add_show_command(subparsers: Any) -> None:
    """Register show subcommand."""
    parser = subparsers.add_parser("show", help="Render a delimited table file")
    parser.add_argument("source", help="Delimited text file, header line first")
    parser.add_argument("--keep", action="append", help="Keep only these columns, in order")
    parser.add_argument("--drop", action="append", help="Drop a column; may repeat")
    parser.add_argument("--head", type=int, help="Show only the first N rows")
    parser.add_argument("--tail", type=int, help="Show only the last N rows")
    parser.add_argument(
        "--max-rows",
        type=int,
        help="Maximum rendered rows; 0 renders all (default TABULA_DISPLAY_ROWS)",
    )


def _add_groups_command(subparsers: Any) -> None:
    """Register groups subcommand."""
    parser = subparsers.add_parser("groups", help="Group rows by one column")
    parser.add_argument("source", help="Delimited text file, header line first")
    parser.add_argument("--by", required=True, help="Column whose values form group keys")
    parser.add_argument(
        "--distribution",
        action="store_true",
        help="Print group sizes and how many groups have each size",
    )
