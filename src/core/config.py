"""Runtime configuration model for Tabula.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os

from core.constants import (
    DEFAULT_DISPLAY_ROWS,
    DEFAULT_ENCODING,
    DEFAULT_LOG_LEVEL,
    DEFAULT_SEPARATOR,
    SUPPORTED_LOG_LEVELS,
)
from core.errors import TabulaConfigError


@dataclass(frozen=True)
class TabulaConfig:
    """Validated runtime configuration.

    Attributes:
        separator: Default cell separator for text ingestion.
        encoding: Text encoding used when reading files.
        display_rows: Maximum rows rendered by the display layer; 0 is unlimited.
        log_level: Minimum structured log level.
    """

    separator: str = DEFAULT_SEPARATOR
    encoding: str = DEFAULT_ENCODING
    display_rows: int = DEFAULT_DISPLAY_ROWS
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls) -> "TabulaConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            TabulaConfigError: If environment values are invalid.
        """
        separator = parse_separator(os.getenv("TABULA_SEPARATOR", DEFAULT_SEPARATOR))
        encoding = os.getenv("TABULA_ENCODING", DEFAULT_ENCODING)
        display_rows = _parse_display_rows(
            os.getenv("TABULA_DISPLAY_ROWS", str(DEFAULT_DISPLAY_ROWS))
        )
        log_level = _parse_log_level(os.getenv("TABULA_LOG_LEVEL", DEFAULT_LOG_LEVEL))
        return cls(
            separator=separator,
            encoding=encoding,
            display_rows=display_rows,
            log_level=log_level,
        )


def parse_separator(raw_value: str) -> str:
    """Validate a separator value.

    Args:
        raw_value: Raw separator text.

    Returns:
        The single separator character.

    Raises:
        TabulaConfigError: If value is not exactly one character.
    """
    if len(raw_value) != 1:
        raise TabulaConfigError(
            f"Invalid separator '{raw_value}': expected exactly one character. "
            "Set TABULA_SEPARATOR to a single character such as ',' or ';'."
        )
    return raw_value


def _parse_display_rows(raw_value: str) -> int:
    """Parse the display row limit environment value.

    Args:
        raw_value: Raw string from environment.

    Returns:
        Parsed non-negative row limit.

    Raises:
        TabulaConfigError: If value is not a non-negative integer.
    """
    try:
        display_rows = int(raw_value)
    except ValueError as error:
        raise TabulaConfigError(
            "Invalid TABULA_DISPLAY_ROWS value: "
            f"expected integer, got '{raw_value}'. "
            "Set TABULA_DISPLAY_ROWS to a numeric value."
        ) from error
    if display_rows < 0:
        raise TabulaConfigError(
            f"Invalid TABULA_DISPLAY_ROWS value {display_rows}: must be >= 0."
        )
    return display_rows


def _parse_log_level(raw_value: str) -> str:
    normalized = raw_value.strip().lower()
    if normalized not in SUPPORTED_LOG_LEVELS:
        raise TabulaConfigError(
            f"Invalid TABULA_LOG_LEVEL value '{raw_value}'. "
            f"Use one of: {', '.join(SUPPORTED_LOG_LEVELS)}."
        )
    return normalized
