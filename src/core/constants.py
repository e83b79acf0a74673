"""Core constants used across Tabula modules.

This module centralizes non-domain-specific constants.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

DEFAULT_SEPARATOR = ","
DEFAULT_ENCODING = "utf-8"
DEFAULT_DISPLAY_ROWS = 20
DEFAULT_LOG_LEVEL = "info"
SUPPORTED_LOG_LEVELS = ("debug", "info", "warning", "error")
GROUPING_SYMBOLS = (
    ("(", ")"),
    ("{", "}"),
    ("<", ">"),
    ("[", "]"),
    ('"', '"'),
    ("'", "'"),
)
INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1
FLOAT32_MAX = 3.4028234663852886e38
DISPLAY_COLUMN_PADDING = 2
DISPLAY_ROW_NUMBER_HEADER = "#"
PIPELINE_SPEC_VERSION = 1
