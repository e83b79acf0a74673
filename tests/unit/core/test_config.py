"""Unit tests for core config parsing."""

from __future__ import annotations

import pytest

from core.config import TabulaConfig, parse_separator
from core.errors import TabulaConfigError


def test_from_env_uses_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should fall back to defaults when env vars are unset."""
    for name in ("TABULA_SEPARATOR", "TABULA_ENCODING", "TABULA_DISPLAY_ROWS", "TABULA_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)

    config = TabulaConfig.from_env()

    assert config == TabulaConfig()
    assert config.separator == "," and config.display_rows == 20


def test_from_env_reads_separator_and_rows(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should resolve separator and display rows from environment."""
    monkeypatch.setenv("TABULA_SEPARATOR", ";")
    monkeypatch.setenv("TABULA_DISPLAY_ROWS", "0")
    monkeypatch.setenv("TABULA_LOG_LEVEL", " WARNING ")

    config = TabulaConfig.from_env()

    assert config.separator == ";"
    assert config.display_rows == 0
    assert config.log_level == "warning"


def test_from_env_raises_for_invalid_display_rows(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should fail for non-numeric or negative display rows."""
    monkeypatch.setenv("TABULA_DISPLAY_ROWS", "many")
    with pytest.raises(TabulaConfigError):
        TabulaConfig.from_env()

    monkeypatch.setenv("TABULA_DISPLAY_ROWS", "-1")
    with pytest.raises(TabulaConfigError):
        TabulaConfig.from_env()


def test_from_env_raises_for_unknown_log_level(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should reject unsupported log levels."""
    monkeypatch.setenv("TABULA_LOG_LEVEL", "chatty")

    with pytest.raises(TabulaConfigError):
        TabulaConfig.from_env()


def test_parse_separator_requires_one_character() -> None:
    """Separator must be exactly one character."""
    assert parse_separator("\t") == "\t"
    with pytest.raises(TabulaConfigError):
        parse_separator(",,")
    with pytest.raises(TabulaConfigError):
        parse_separator("")
