"""Pipeline CLI command wiring.

This module registers the run subcommand and delegates execution to the
shared pipeline engine used by CLI and SDK entry points.
"""

from __future__ import annotations

import argparse
from typing import Any

from core.config import TabulaConfig
from core.pipeline_execution import execute_pipeline_file


def add_run_pipeline_command(subparsers: Any) -> None:
    """Register run subcommand."""
    parser = subparsers.add_parser(
        "run",
        help="Run a declarative YAML pipeline spec",
    )
    parser.add_argument("spec_file", help="Path to YAML pipeline spec file")


def run_run_pipeline_command(config: TabulaConfig, args: argparse.Namespace) -> int:
    """Handle run command invocation."""
    output_lines = execute_pipeline_file(args.spec_file, config)
    for line in output_lines:
        print(line)
    return 0
