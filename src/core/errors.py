"""Tabula exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Recoverable failures derive from ``TabulaError``; contract violations
derive from builtin ``TypeError``/``ValueError`` instead.
"""

from __future__ import annotations

from typing import Sequence


class TabulaError(Exception):
    """Base exception for all recoverable Tabula failures."""


class TabulaConfigError(TabulaError):
    """Raised for invalid runtime configuration."""


class TabulaIngestError(TabulaError):
    """Raised when a text resource cannot be read."""


class TabulaPipelineError(TabulaError):
    """Raised for invalid or unsupported pipeline spec configuration."""


class ArityError(TabulaError):
    """Raised when a row's cell count differs from the header length.

    Attributes:
        line_number: One-based source line number, when known.
        header: Header names of the target table.
        cells: Formatted cells of the offending row.
        pairs: Header name and cell text pairs; ``None`` marks a missing side.
    """

    def __init__(
        self,
        message: str,
        *,
        line_number: int | None = None,
        header: Sequence[str] = (),
        cells: Sequence[str] = (),
        pairs: Sequence[tuple[str | None, str | None]] = (),
    ) -> None:
        super().__init__(message)
        self.line_number = line_number
        self.header = tuple(header)
        self.cells = tuple(cells)
        self.pairs = tuple(pairs)


class InvalidHeaderError(TabulaError):
    """Raised when a header token is not a plain string."""


class ColumnNotFoundError(TabulaError, LookupError):
    """Raised when a column name or index does not resolve."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


class RowRangeError(TabulaError, ValueError):
    """Raised for invalid start/end bounds of a row range selection."""


class HeaderMismatchError(TabulaError):
    """Raised when appending a table whose header differs."""


class ConsumedViewError(TabulaError):
    """Raised when a view handle is used after its storage was moved out."""


class CellTypeError(TypeError):
    """Raised when a cell is narrowed to a kind it does not hold.

    This is a contract violation: the caller did not honor the declared
    column type. It is deliberately outside the ``TabulaError`` hierarchy.
    """


class MalformedLiteralError(ValueError):
    """Raised when a grouping literal is structurally invalid.

    This is a contract violation: the line cannot be tokenized at all.
    """
