"""Append-only string arena.

Every header name and string cell of a table is interned into one text
buffer and addressed by a half-open ``ArenaRange``. Ranges stay valid for
the arena's lifetime because the buffer only ever grows. The buffer is
kept as interned chunks with their start offsets, so neither interning
nor resolving rebuilds earlier text.
"""

from __future__ import annotations

from bisect import bisect_right
from typing import NamedTuple


class ArenaRange(NamedTuple):
    """Half-open character range ``[start, end)`` into an arena buffer."""

    start: int
    end: int


class StringArena:
    """Owned text buffer with stable range handles."""

    def __init__(self) -> None:
        self._chunks: list[str] = []
        self._starts: list[int] = []
        self._length = 0

    def __len__(self) -> int:
        return self._length

    def intern(self, text: str) -> ArenaRange:
        """Append text and return its range.

        Args:
            text: Text to store.

        Returns:
            Range addressing exactly ``text``.
        """
        start = self._length
        if text:
            self._chunks.append(text)
            self._starts.append(start)
            self._length += len(text)
        return ArenaRange(start, self._length)

    def resolve(self, text_range: ArenaRange) -> str:
        """Return the text addressed by a range.

        Raises:
            IndexError: If the range lies outside the buffer.
        """
        start, end = text_range
        if not 0 <= start <= end <= self._length:
            raise IndexError(
                f"Arena range {start}..{end} is outside buffer of length {self._length}."
            )
        if start == end:
            return ""
        index = bisect_right(self._starts, start) - 1
        offset = start - self._starts[index]
        chunk = self._chunks[index]
        if offset + (end - start) <= len(chunk):
            return chunk[offset : offset + end - start]
        # Range spans chunk boundaries.
        parts = [chunk[offset:]]
        remaining = end - start - len(parts[0])
        while remaining > 0:
            index += 1
            piece = self._chunks[index][:remaining]
            parts.append(piece)
            remaining -= len(piece)
        return "".join(parts)
