"""Text ingestion boundary.

This module builds base tables from delimited text: the first line is
the header and every following line is a row checked against the header
length. Sources are files, in-memory strings, or any iterable of lines.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Iterator, Sequence

from core.cell_value import CellKind, CellValue
from core.config import TabulaConfig, parse_separator
from core.constants import DEFAULT_SEPARATOR
from core.errors import ArityError, InvalidHeaderError, TabulaIngestError
from core.logging_config import get_logger
from ingest.line_tokenizer import tokenize_line
from store.base_table import BaseTable

_LOGGER = get_logger(__name__)


def read_table_text(text: str, separator: str = DEFAULT_SEPARATOR) -> BaseTable:
    """Build a table from in-memory delimited text.

    Args:
        text: Whole text, header line first.
        separator: Single separator character.

    Returns:
        Table holding every data line.
    """
    return read_table_lines(split_lines(text), separator)


def read_table_lines(lines: Iterable[str], separator: str = DEFAULT_SEPARATOR) -> BaseTable:
    """Build a table from lines of delimited text.

    Args:
        lines: Header line followed by data lines.
        separator: Single separator character.

    Returns:
        Table holding every data line.

    Raises:
        TabulaIngestError: If there is no header line.
        InvalidHeaderError: If a header token is not a plain string.
        ArityError: If a data line's cell count differs from the header length.
    """
    separator = parse_separator(separator)
    line_iter = iter(lines)
    raw_header = next(line_iter, None)
    if raw_header is None:
        raise TabulaIngestError("Table source is empty. Provide a header line first.")
    header = build_header(_strip_line_ending(raw_header), separator)
    rows = parse_data_lines(header, enumerate(line_iter, 2), separator)
    table = BaseTable(header)
    table.append_rows(rows)
    return table


def read_table_file(
    path: str | Path,
    separator: str | None = None,
    config: TabulaConfig | None = None,
) -> BaseTable:
    """Build a table from a delimited text file.

    Args:
        path: File path.
        separator: Optional separator; defaults to the configured one.
        config: Optional runtime configuration.

    Returns:
        Table holding every data line of the file.

    Raises:
        TabulaIngestError: If the file is missing, unreadable, or empty.
    """
    config = config or TabulaConfig.from_env()
    file_path = Path(path).expanduser()
    lines = read_resource_lines(file_path, config.encoding)
    if not lines:
        raise TabulaIngestError(
            f"Table file {file_path} is empty. Add a header line and retry."
        )
    table = read_table_lines(lines, separator or config.separator)
    _LOGGER.info(
        "table_read",
        source=str(file_path),
        rows=len(table),
        columns=table.column_count,
    )
    return table


def append_table_lines(
    table: BaseTable,
    lines: Iterable[str],
    separator: str = DEFAULT_SEPARATOR,
    skip_first_line: bool = False,
) -> None:
    """Append data lines to an existing table.

    Every line is parsed and checked before any row is stored.

    Args:
        table: Target table.
        lines: Data lines, optionally preceded by a header line to skip.
        separator: Single separator character.
        skip_first_line: Skip a would-be header line.

    Raises:
        ArityError: If a line's cell count differs from the header length.
    """
    separator = parse_separator(separator)
    numbered_lines: Iterator[tuple[int, str]] = enumerate(lines, 1)
    if skip_first_line:
        next(numbered_lines, None)
    rows = parse_data_lines(table.header(), numbered_lines, separator)
    table.append_rows(rows)


def append_table_file(
    table: BaseTable,
    path: str | Path,
    separator: str | None = None,
    skip_first_line: bool = False,
    config: TabulaConfig | None = None,
) -> None:
    """Append the data lines of a delimited text file to ``table``.

    Raises:
        TabulaIngestError: If the file is missing or unreadable.
        ArityError: If a line's cell count differs from the header length.
    """
    config = config or TabulaConfig.from_env()
    file_path = Path(path).expanduser()
    lines = read_resource_lines(file_path, config.encoding)
    rows_before = len(table)
    append_table_lines(table, lines, separator or config.separator, skip_first_line)
    _LOGGER.info(
        "rows_appended",
        source=str(file_path),
        rows=len(table) - rows_before,
        total_rows=len(table),
    )


def build_header(line: str, separator: str) -> list[str]:
    """Tokenize a header line into column names.

    Raises:
        InvalidHeaderError: If a token is not a plain string.
    """
    names: list[str] = []
    for position, cell in enumerate(tokenize_line(line, separator), 1):
        if cell.kind is not CellKind.STRING:
            raise InvalidHeaderError(
                f"Header token {position} '{cell.format()}' is a {cell.kind.value}, "
                "not a plain name. The first line must contain only column names."
            )
        names.append(cell.value)
    return names


def parse_data_lines(
    header: Sequence[str],
    numbered_lines: Iterable[tuple[int, str]],
    separator: str,
) -> list[list[CellValue]]:
    """Tokenize numbered data lines and check each against the header.

    Args:
        header: Header names.
        numbered_lines: ``(one-based line number, line)`` pairs.
        separator: Single separator character.

    Returns:
        Parsed rows.

    Raises:
        ArityError: On the first line whose cell count differs from the header.
    """
    rows: list[list[CellValue]] = []
    for line_number, line in numbered_lines:
        cells = tokenize_line(_strip_line_ending(line), separator)
        if len(cells) != len(header):
            raise build_arity_error(line_number, cells, header)
        rows.append(cells)
    return rows


def build_arity_error(
    line_number: int,
    cells: Sequence[CellValue],
    header: Sequence[str],
) -> ArityError:
    """Describe a line whose cell count differs from the header.

    The message pairs every header name with its cell, using ``None`` for
    the missing side.

    Args:
        line_number: One-based line number.
        cells: Parsed cells of the line.
        header: Header names.

    Returns:
        Error ready to raise.
    """
    direction = "more" if len(cells) > len(header) else "fewer"
    texts = [cell.format() for cell in cells]
    pairs: list[tuple[str | None, str | None]] = []
    for position in range(max(len(header), len(texts))):
        name = header[position] if position < len(header) else None
        text = texts[position] if position < len(texts) else None
        pairs.append((name, text))
    message_lines = [
        f"Line {line_number} contains {direction} entries than the header; "
        f"line has {len(cells)}, header has {len(header)}."
    ]
    for name, text in pairs:
        shown_name = name if name is not None else "None"
        shown_text = repr(text) if text is not None else "None"
        message_lines.append(f"{shown_name}:  {shown_text}")
    return ArityError(
        "\n".join(message_lines),
        line_number=line_number,
        header=header,
        cells=texts,
        pairs=pairs,
    )


def read_resource_lines(path: Path, encoding: str) -> list[str]:
    """Read every line of a named text resource.

    Raises:
        TabulaIngestError: If the path is missing or unreadable.
    """
    if not path.is_file():
        raise TabulaIngestError(
            f"Failed to read table at {path}: file does not exist. "
            "Provide an existing delimited text file."
        )
    try:
        text = path.read_text(encoding=encoding)
    except (OSError, UnicodeDecodeError) as error:
        raise TabulaIngestError(
            f"Failed to read table at {path}: {error}. Check permissions and encoding."
        ) from error
    return split_lines(text)


def split_lines(text: str) -> list[str]:
    """Split text on ``\\n``; a final line ending adds no empty line."""
    if not text:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [_strip_line_ending(line) for line in lines]


def _strip_line_ending(line: str) -> str:
    if line.endswith("\n"):
        line = line[:-1]
    if line.endswith("\r"):
        line = line[:-1]
    return line
