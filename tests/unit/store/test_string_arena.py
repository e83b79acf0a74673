"""Unit tests for the string arena."""

from __future__ import annotations

import pytest

from store.string_arena import ArenaRange, StringArena


def test_intern_returns_stable_ranges() -> None:
    """Earlier ranges should resolve unchanged after later appends."""
    arena = StringArena()
    first = arena.intern("alpha")
    arena.resolve(first)
    second = arena.intern("béta")
    empty = arena.intern("")

    assert first == ArenaRange(0, 5)
    assert arena.resolve(first) == "alpha"
    assert arena.resolve(second) == "béta"
    assert arena.resolve(empty) == ""
    assert len(arena) == 9


def test_resolve_out_of_bounds_range_raises() -> None:
    """A range beyond the buffer should raise IndexError."""
    arena = StringArena()
    arena.intern("abc")

    with pytest.raises(IndexError):
        arena.resolve(ArenaRange(2, 10))


def test_interleaved_intern_and_resolve_keep_every_range() -> None:
    """Resolving between interns should not disturb earlier or later ranges."""
    arena = StringArena()
    ranges = []
    for number in range(20000):
        ranges.append(arena.intern(f"cell-{number}"))
        assert arena.resolve(ranges[-1]) == f"cell-{number}"
        assert arena.resolve(ranges[0]) == "cell-0"

    assert arena.resolve(ranges[12345]) == "cell-12345"
    assert len(arena) == ranges[-1].end


def test_resolve_range_spanning_interned_texts() -> None:
    """A range crossing intern boundaries should join the covered text."""
    arena = StringArena()
    arena.intern("ab")
    arena.intern("")
    arena.intern("cd")
    arena.intern("ef")

    assert arena.resolve(ArenaRange(1, 5)) == "bcde"
    assert arena.resolve(ArenaRange(2, 2)) == ""
