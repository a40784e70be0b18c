"""Tests for pushbox.core.history – undo stack and snapshot records."""

from __future__ import annotations

from pushbox.core.grid import Cell, Direction
from pushbox.core.history import FullEntry, LightEntry, Snapshot, UndoHistory


def _light(moves: int) -> LightEntry:
    return LightEntry(x=1, y=1, facing=Direction.DOWN, moves=moves, pushes=0, stored=0, elapsed_seconds=0)


class TestUndoHistory:
    def test_pop_empty_returns_none(self):
        assert UndoHistory().pop() is None

    def test_lifo_order(self):
        h = UndoHistory()
        for i in range(3):
            h.push(_light(i))
        assert [h.pop().moves for _ in range(3)] == [2, 1, 0]
        assert len(h) == 0

    def test_copy_is_independent(self):
        h = UndoHistory()
        h.push(_light(0))
        c = h.copy()
        c.push(_light(1))
        assert len(h) == 1
        assert len(c) == 2

    def test_clear(self):
        h = UndoHistory([_light(0), _light(1)])
        h.clear()
        assert list(h) == []


class TestEntries:
    def test_full_entry_is_distinguishable(self):
        full = FullEntry(
            x=1, y=1, facing=Direction.UP, moves=0, pushes=0, stored=0, elapsed_seconds=0,
            grid=((Cell.WALL, Cell.EMPTY),),
        )
        assert isinstance(full, FullEntry)
        assert not isinstance(_light(0), FullEntry)

    def test_grid_copy_is_mutable_copy(self):
        full = FullEntry(
            x=0, y=0, facing=Direction.UP, moves=0, pushes=0, stored=0, elapsed_seconds=0,
            grid=((Cell.CRATE, Cell.TARGET),),
        )
        grid = full.grid_copy()
        grid[0][0] = Cell.EMPTY
        assert full.grid[0][0] == Cell.CRATE


class TestSnapshot:
    def test_restore_history_gives_fresh_stack(self):
        full = FullEntry(
            x=0, y=0, facing=Direction.UP, moves=2, pushes=0, stored=0, elapsed_seconds=0, grid=((Cell.EMPTY,),)
        )
        snap = Snapshot(state=full, history=(_light(0), _light(1)))
        first = snap.restore_history()
        first.pop()
        second = snap.restore_history()
        assert len(second) == 2
        assert [e.moves for e in second] == [0, 1]
