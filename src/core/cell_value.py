"""Typed cell values.

This module defines the closed set of cell kinds stored in tables, the
text-based type inference used by ingestion, and cell text formatting.
Narrowing accessors (``as_integer`` and friends) treat a kind mismatch as
a contract violation; ``try_narrow`` is the safe variant.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
import math
import re
import struct
from typing import Any, Iterable

from core.constants import FLOAT32_MAX, INT32_MAX, INT32_MIN
from core.errors import CellTypeError

_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+", re.ASCII)
_FLOAT_PATTERN = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf|infinity|nan)",
    re.ASCII | re.IGNORECASE,
)
_TIMESTAMP_PATTERN = re.compile(
    r"([0-9]{4})-([0-9]{2})-([0-9]{2})[T ]([0-9]{2}):([0-9]{2}):([0-9]{2})"
    r"(?:\.[0-9]+)?(?:[Zz]|[+-][0-9]{2}:[0-9]{2})",
    re.ASCII,
)


class CellKind(Enum):
    """Tag of a cell value."""

    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"
    TIMESTAMP = "timestamp"
    POINT2D = "point2d"
    LIST = "list"


_KIND_RANK = {
    CellKind.BOOLEAN: 0,
    CellKind.INTEGER: 1,
    CellKind.FLOAT: 1,
    CellKind.TIMESTAMP: 2,
    CellKind.POINT2D: 3,
    CellKind.STRING: 4,
    CellKind.LIST: 5,
}


@dataclass(frozen=True, order=True)
class Timestamp:
    """Calendar date-time ordered by its field tuple, year first."""

    year: int
    month: int
    day: int
    hour: int = 0
    minute: int = 0
    second: int = 0

    @classmethod
    def from_datetime(cls, value: datetime) -> "Timestamp":
        """Build a timestamp from the calendar fields of a datetime."""
        return cls(
            year=value.year,
            month=value.month,
            day=value.day,
            hour=value.hour,
            minute=value.minute,
            second=value.second,
        )

    def format(self) -> str:
        return (
            f"{self.hour}:{self.minute}:{self.second} "
            f"on {self.day}.{self.month}.{self.year}"
        )


@dataclass(frozen=True)
class CellValue:
    """Tagged scalar or composite cell value.

    Attributes:
        kind: Cell kind tag.
        value: Python payload; ``str``, ``int``, ``float``, ``bool``,
            ``Timestamp``, a ``(x, y)`` float pair, or a tuple of cells.
    """

    kind: CellKind
    value: Any

    @classmethod
    def of_string(cls, text: str) -> "CellValue":
        return cls(CellKind.STRING, text)

    @classmethod
    def of_integer(cls, number: int) -> "CellValue":
        """Build an integer cell.

        Raises:
            ValueError: If ``number`` does not fit in 32 signed bits.
        """
        if not INT32_MIN <= number <= INT32_MAX:
            raise ValueError(f"Integer cell {number} does not fit in 32 signed bits.")
        return cls(CellKind.INTEGER, int(number))

    @classmethod
    def of_float(cls, number: float) -> "CellValue":
        return cls(CellKind.FLOAT, to_float32(number))

    @classmethod
    def of_boolean(cls, flag: bool) -> "CellValue":
        return cls(CellKind.BOOLEAN, bool(flag))

    @classmethod
    def of_timestamp(cls, timestamp: Timestamp) -> "CellValue":
        return cls(CellKind.TIMESTAMP, timestamp)

    @classmethod
    def of_point(cls, x: float, y: float) -> "CellValue":
        return cls(CellKind.POINT2D, (to_float32(x), to_float32(y)))

    @classmethod
    def of_list(cls, values: Iterable["CellValue"]) -> "CellValue":
        return cls(CellKind.LIST, tuple(values))

    def as_string(self) -> str:
        return self._narrow(CellKind.STRING)

    def as_integer(self) -> int:
        return self._narrow(CellKind.INTEGER)

    def as_float(self) -> float:
        return self._narrow(CellKind.FLOAT)

    def as_boolean(self) -> bool:
        return self._narrow(CellKind.BOOLEAN)

    def as_timestamp(self) -> Timestamp:
        return self._narrow(CellKind.TIMESTAMP)

    def as_point(self) -> tuple[float, float]:
        return self._narrow(CellKind.POINT2D)

    def as_list(self) -> tuple["CellValue", ...]:
        return self._narrow(CellKind.LIST)

    def try_narrow(self, kind: CellKind) -> Any | None:
        """Return the payload when the cell holds ``kind``, else ``None``."""
        if self.kind is kind:
            return self.value
        return None

    def format(self) -> str:
        """Render the cell as display text."""
        if self.kind is CellKind.STRING:
            return self.value
        if self.kind is CellKind.BOOLEAN:
            return "true" if self.value else "false"
        if self.kind is CellKind.INTEGER:
            return str(self.value)
        if self.kind is CellKind.FLOAT:
            return format_float32(self.value)
        if self.kind is CellKind.TIMESTAMP:
            return self.value.format()
        if self.kind is CellKind.POINT2D:
            x, y = self.value
            return f"({format_float32(x)} | {format_float32(y)})"
        if not self.value:
            return "[ ]"
        return "[ " + ", ".join(item.format() for item in self.value) + " ]"

    def sort_key(self) -> tuple[Any, ...]:
        """Return a key that totally orders cells across kinds."""
        rank = _KIND_RANK[self.kind]
        if self.kind is CellKind.LIST:
            return (rank, tuple(item.sort_key() for item in self.value))
        return (rank, self.value)

    def __str__(self) -> str:
        return self.format()

    def _narrow(self, kind: CellKind) -> Any:
        if self.kind is not kind:
            raise CellTypeError(f"cannot convert {self.format()} to {kind.value}")
        return self.value


def to_cell_value(value: object) -> CellValue:
    """Coerce a Python value into a cell.

    Strings are kept as ``String`` cells without type inference.

    Args:
        value: A ``CellValue`` or a plain Python value.

    Returns:
        The corresponding cell.

    Raises:
        TypeError: If the value has no cell representation.
    """
    if isinstance(value, CellValue):
        return value
    if isinstance(value, bool):
        return CellValue.of_boolean(value)
    if isinstance(value, int):
        return CellValue.of_integer(value)
    if isinstance(value, float):
        return CellValue.of_float(value)
    if isinstance(value, str):
        return CellValue.of_string(value)
    if isinstance(value, Timestamp):
        return CellValue.of_timestamp(value)
    if isinstance(value, datetime):
        return CellValue.of_timestamp(Timestamp.from_datetime(value))
    if isinstance(value, (list, tuple)):
        return CellValue.of_list(to_cell_value(item) for item in value)
    raise TypeError(f"Cannot store {type(value).__name__} value {value!r} in a table cell.")


def infer_cell_value(text: str) -> CellValue:
    """Infer a typed cell from raw text.

    Inference order is boolean, 32-bit integer, 32-bit float, timestamp,
    point (two floats separated by one space), and finally string.

    Args:
        text: Raw cell text.

    Returns:
        The inferred cell.
    """
    if text == "true" or text == "false":
        return CellValue.of_boolean(text == "true")
    integer = _parse_int32(text)
    if integer is not None:
        return CellValue.of_integer(integer)
    number = parse_float32(text)
    if number is not None:
        return CellValue(CellKind.FLOAT, number)
    timestamp = _parse_timestamp(text)
    if timestamp is not None:
        return CellValue.of_timestamp(timestamp)
    point = parse_point(text)
    if point is not None:
        return CellValue(CellKind.POINT2D, point)
    return CellValue.of_string(text)


def parse_point(text: str) -> tuple[float, float] | None:
    """Parse ``"x y"`` into a float pair, or return ``None``."""
    if " " not in text:
        return None
    parts = text.split(" ")
    if len(parts) != 2:
        return None
    x = parse_float32(parts[0])
    y = parse_float32(parts[1])
    if x is None or y is None:
        return None
    return (x, y)


def parse_float32(text: str) -> float | None:
    """Parse a float literal at 32-bit precision, or return ``None``."""
    if not _FLOAT_PATTERN.fullmatch(text):
        return None
    return to_float32(float(text))


def to_float32(number: float) -> float:
    """Round a float to the nearest 32-bit float; overflow maps to infinity."""
    if math.isnan(number) or math.isinf(number):
        return float(number)
    if abs(number) > FLOAT32_MAX:
        return math.copysign(math.inf, number)
    return struct.unpack("<f", struct.pack("<f", number))[0]


def format_float32(number: float) -> str:
    """Render the shortest text that round-trips at 32-bit precision.

    Digits are written out positionally; exponent notation is never used.
    """
    if math.isnan(number):
        return "NaN"
    if math.isinf(number):
        return "inf" if number > 0 else "-inf"
    text = repr(number)
    for precision in range(1, 10):
        candidate = f"{number:.{precision}g}"
        if to_float32(float(candidate)) == number:
            text = candidate
            break
    return format(Decimal(text), "f")


def _parse_int32(text: str) -> int | None:
    if not _INTEGER_PATTERN.fullmatch(text):
        return None
    number = int(text)
    if not INT32_MIN <= number <= INT32_MAX:
        return None
    return number


def _parse_timestamp(text: str) -> Timestamp | None:
    match = _TIMESTAMP_PATTERN.fullmatch(text)
    if match is None:
        return None
    fields = [int(group) for group in match.groups()]
    try:
        parsed = datetime(*fields)
    except ValueError:
        return None
    return Timestamp.from_datetime(parsed)
