"""Conversion between cell values and their stored form.

Stored cells keep string payloads as arena ranges, so a table holds no
per-cell string objects. Lists store their items recursively.
"""

from __future__ import annotations

from typing import Any, Tuple

from core.cell_value import CellKind, CellValue
from store.string_arena import StringArena

StoredCell = Tuple[CellKind, Any]


def encode_cell(arena: StringArena, cell: CellValue) -> StoredCell:
    """Intern string payloads of a cell into ``arena``."""
    if cell.kind is CellKind.STRING:
        return (CellKind.STRING, arena.intern(cell.value))
    if cell.kind is CellKind.LIST:
        return (CellKind.LIST, tuple(encode_cell(arena, item) for item in cell.value))
    return (cell.kind, cell.value)


def decode_cell(arena: StringArena, stored: StoredCell) -> CellValue:
    """Rebuild a cell value, resolving string ranges against ``arena``."""
    kind, payload = stored
    if kind is CellKind.STRING:
        return CellValue(CellKind.STRING, arena.resolve(payload))
    if kind is CellKind.LIST:
        return CellValue(CellKind.LIST, tuple(decode_cell(arena, item) for item in payload))
    return CellValue(kind, payload)
