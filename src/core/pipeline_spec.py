"""Typed pipeline spec parsing for declarative table transformations.

This module loads and validates YAML pipeline files used by CLI workflows.
A spec names one delimited text source and an ordered list of view steps.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Literal, Mapping, Sequence, cast

import yaml

from core.config import parse_separator
from core.constants import PIPELINE_SPEC_VERSION
from core.errors import TabulaConfigError, TabulaPipelineError

PipelineCommand = Literal[
    "head",
    "tail",
    "range",
    "sort",
    "filter",
    "drop-column",
    "keep-columns",
    "group-by",
    "show",
]
SUPPORTED_PIPELINE_COMMANDS: tuple[PipelineCommand, ...] = (
    "head",
    "tail",
    "range",
    "sort",
    "filter",
    "drop-column",
    "keep-columns",
    "group-by",
    "show",
)


@dataclass(frozen=True)
class PipelineSource:
    """Delimited text source of a pipeline.

    Attributes:
        path: Absolute source file path.
        separator: Optional separator override.
    """

    path: Path
    separator: str | None = None


@dataclass(frozen=True)
class PipelineStep:
    """One view transformation or output step."""

    command: PipelineCommand
    args: Mapping[str, object]


@dataclass(frozen=True)
class PipelineSpec:
    """Validated pipeline spec root object."""

    version: int
    source: PipelineSource
    steps: tuple[PipelineStep, ...]


def load_pipeline_spec(spec_path: str) -> PipelineSpec:
    """Load and validate a YAML pipeline spec from disk.

    Relative source paths resolve against the pipeline file's directory.

    Args:
        spec_path: File path to YAML pipeline spec.

    Returns:
        Fully validated pipeline spec.

    Raises:
        TabulaPipelineError: If file is invalid or schema checks fail.
    """
    spec_file = Path(spec_path).expanduser().resolve()
    payload = _load_yaml_payload(spec_file)
    root_mapping = _expect_mapping(payload, "pipeline spec root")
    _validate_keys(root_mapping, {"version", "source", "steps"}, "pipeline spec root")
    version = _parse_version(root_mapping)
    source = _parse_source(root_mapping, spec_file.parent)
    steps = _parse_steps(root_mapping)
    return PipelineSpec(version=version, source=source, steps=steps)


def _load_yaml_payload(spec_file: Path) -> object:
    if not spec_file.exists():
        raise TabulaPipelineError(
            f"Pipeline spec file does not exist at {spec_file}. Provide a valid YAML file path."
        )
    try:
        payload = cast(object, yaml.safe_load(spec_file.read_text(encoding="utf-8")))
    except OSError as error:
        raise TabulaPipelineError(
            f"Failed to read pipeline spec at {spec_file}: {error}. "
            "Check file permissions and retry."
        ) from error
    except yaml.YAMLError as error:
        raise TabulaPipelineError(
            f"Failed to parse YAML pipeline spec at {spec_file}: {error}. "
            "Fix YAML syntax and retry."
        ) from error
    if payload is None:
        raise TabulaPipelineError(
            f"Pipeline spec at {spec_file} is empty. Define 'version', 'source' and 'steps'."
        )
    return payload


def _expect_mapping(value: object, context: str) -> Mapping[str, object]:
    if isinstance(value, Mapping):
        normalized_mapping = {}
        for key, payload in value.items():
            if not isinstance(key, str):
                raise TabulaPipelineError(
                    f"Invalid {context}: expected string keys, got {type(key).__name__}."
                )
            normalized_mapping[key] = payload
        return normalized_mapping
    raise TabulaPipelineError(
        f"Invalid {context}: expected object mapping, got {type(value).__name__}."
    )


def _expect_sequence(value: object, context: str) -> Sequence[object]:
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return value
    raise TabulaPipelineError(f"Invalid {context}: expected list, got {type(value).__name__}.")


def _parse_version(root_mapping: Mapping[str, object]) -> int:
    raw_version = root_mapping.get("version")
    if not isinstance(raw_version, int) or isinstance(raw_version, bool):
        raise TabulaPipelineError(
            f"Pipeline spec field 'version' must be an integer. Set version: {PIPELINE_SPEC_VERSION}."
        )
    if raw_version != PIPELINE_SPEC_VERSION:
        raise TabulaPipelineError(
            f"Unsupported pipeline spec version {raw_version}. "
            f"Use version: {PIPELINE_SPEC_VERSION}."
        )
    return raw_version


def _parse_source(root_mapping: Mapping[str, object], base_dir: Path) -> PipelineSource:
    raw_source = root_mapping.get("source")
    if raw_source is None:
        raise TabulaPipelineError(
            "Pipeline spec missing required field 'source'. Add a source with a 'path'."
        )
    if isinstance(raw_source, str):
        raw_source = {"path": raw_source}
    source_mapping = _expect_mapping(raw_source, "pipeline spec source")
    _validate_keys(source_mapping, {"path", "separator"}, "pipeline spec source")
    raw_path = source_mapping.get("path")
    if not isinstance(raw_path, str) or not raw_path.strip():
        raise TabulaPipelineError("Pipeline spec source field 'path' must be a non-empty string.")
    source_path = Path(raw_path.strip()).expanduser()
    if not source_path.is_absolute():
        source_path = base_dir / source_path
    separator = _parse_separator(source_mapping.get("separator"))
    return PipelineSource(path=source_path, separator=separator)


def _parse_separator(raw_separator: object) -> str | None:
    if raw_separator is None:
        return None
    if not isinstance(raw_separator, str):
        raise TabulaPipelineError("Pipeline spec source field 'separator' must be a string.")
    try:
        return parse_separator(raw_separator)
    except TabulaConfigError as error:
        raise TabulaPipelineError(str(error)) from error


def _parse_steps(root_mapping: Mapping[str, object]) -> tuple[PipelineStep, ...]:
    raw_steps = root_mapping.get("steps")
    if raw_steps is None:
        raise TabulaPipelineError(
            "Pipeline spec missing required field 'steps'. Add a non-empty list of commands."
        )
    step_rows = _expect_sequence(raw_steps, "pipeline spec steps")
    if len(step_rows) == 0:
        raise TabulaPipelineError("Pipeline spec field 'steps' must include at least one step.")
    return tuple(_parse_step(step_value, index) for index, step_value in enumerate(step_rows))


def _parse_step(step_value: object, step_index: int) -> PipelineStep:
    context = f"pipeline step #{step_index + 1}"
    step_mapping = _expect_mapping(step_value, context)
    raw_command = step_mapping.get("command")
    if not isinstance(raw_command, str):
        raise TabulaPipelineError(f"Invalid {context}: field 'command' must be a string.")
    command = _parse_command(raw_command, context)
    args = {key: value for key, value in step_mapping.items() if key != "command"}
    return PipelineStep(command=command, args=args)


def _parse_command(raw_command: str, context: str) -> PipelineCommand:
    if raw_command in SUPPORTED_PIPELINE_COMMANDS:
        return cast(PipelineCommand, raw_command)
    supported_rows = ", ".join(SUPPORTED_PIPELINE_COMMANDS)
    raise TabulaPipelineError(
        f"Unsupported command '{raw_command}' in {context}. Use one of: {supported_rows}."
    )


def _validate_keys(mapping: Mapping[str, object], allowed_keys: set[str], context: str) -> None:
    unknown_keys = sorted(set(mapping) - allowed_keys)
    if unknown_keys:
        raise TabulaPipelineError(f"Invalid {context}: unknown fields {', '.join(unknown_keys)}.")
