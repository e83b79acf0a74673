"""Unit tests for pipeline spec parsing."""

from __future__ import annotations

from pathlib import Path

import pytest

from core.errors import TabulaPipelineError
from core.pipeline_spec import load_pipeline_spec
from tests.fixture_paths import fixture_path


def test_load_pipeline_spec_valid_pipeline_parses_steps() -> None:
    """Valid pipeline spec should parse expected command order."""
    spec = load_pipeline_spec(str(fixture_path("pipeline/valid_pipeline.yaml")))

    assert tuple(step.command for step in spec.steps) == ("filter", "drop-column", "show")
    assert spec.steps[0].args == {"column": "city", "equals": "paris"}


def test_load_pipeline_spec_resolves_source_relative_to_spec() -> None:
    """Relative source paths should resolve against the pipeline file directory."""
    spec = load_pipeline_spec(str(fixture_path("pipeline/group_pipeline.yaml")))

    assert spec.source.path.resolve() == fixture_path("tables/people.csv").resolve()
    assert spec.source.separator is None


def test_load_pipeline_spec_reads_source_separator() -> None:
    """Mapping sources may override the separator."""
    spec = load_pipeline_spec(str(fixture_path("pipeline/sort_pipeline.yaml")))

    assert spec.source.separator == ","


def test_load_pipeline_spec_invalid_command_raises_error() -> None:
    """Unsupported command name should raise pipeline error."""
    with pytest.raises(TabulaPipelineError):
        load_pipeline_spec(str(fixture_path("pipeline/invalid_command.yaml")))


def test_load_pipeline_spec_invalid_root_key_raises_error() -> None:
    """Unknown root fields should be rejected."""
    with pytest.raises(TabulaPipelineError):
        load_pipeline_spec(str(fixture_path("pipeline/invalid_root_key.yaml")))


def test_load_pipeline_spec_missing_steps_raises_error() -> None:
    """A spec without steps should be rejected."""
    with pytest.raises(TabulaPipelineError):
        load_pipeline_spec(str(fixture_path("pipeline/missing_steps.yaml")))


def test_load_pipeline_spec_rejects_bad_version_and_yaml(tmp_path: Path) -> None:
    """Unsupported versions and malformed YAML should be rejected."""
    wrong_version = tmp_path / "wrong_version.yaml"
    wrong_version.write_text("version: 2\nsource: a.csv\nsteps:\n  - command: show\n")
    broken_yaml = tmp_path / "broken.yaml"
    broken_yaml.write_text("version: [1\n")

    with pytest.raises(TabulaPipelineError):
        load_pipeline_spec(str(wrong_version))
    with pytest.raises(TabulaPipelineError):
        load_pipeline_spec(str(broken_yaml))
    with pytest.raises(TabulaPipelineError):
        load_pipeline_spec(str(tmp_path / "missing.yaml"))
