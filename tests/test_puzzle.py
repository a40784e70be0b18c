"""Tests for pushbox.core.puzzle – move and push rules."""

from __future__ import annotations

import pytest

from pushbox.core.grid import Cell, Direction, count_cells
from pushbox.core.history import FullEntry, LightEntry, UndoHistory
from pushbox.core.levels import parse_levels
from pushbox.core.puzzle import MoveResult, PuzzleState


def _state(text: str) -> PuzzleState:
    (template,) = parse_levels(text)
    return PuzzleState.from_template(template)


def _counters(s: PuzzleState) -> tuple:
    return (s.x, s.y, s.moves, s.pushes, s.stored)


# ---------------------------------------------------------------------------
# Cell / Direction helpers
# ---------------------------------------------------------------------------

class TestCell:
    def test_predicates(self):
        stored = Cell.CRATE | Cell.TARGET
        assert stored.is_crate and stored.is_target and stored.is_stored
        assert not Cell.CRATE.is_stored
        assert Cell.WALL.is_wall
        assert not Cell.EMPTY.is_wall

    def test_walkable(self):
        assert Cell.EMPTY.is_walkable
        assert Cell.TARGET.is_walkable
        assert not Cell.CRATE.is_walkable
        assert not (Cell.CRATE | Cell.TARGET).is_walkable
        assert not Cell.WALL.is_walkable

    def test_count_cells(self):
        grid = [[Cell.CRATE | Cell.TARGET, Cell.CRATE], [Cell.TARGET, Cell.CRATE | Cell.TARGET]]
        assert count_cells(grid, Cell.CRATE | Cell.TARGET) == 2
        assert count_cells(grid, Cell.CRATE) == 3


class TestDirection:
    @pytest.mark.parametrize(
        "dx,dy,expected",
        [(0, -1, Direction.UP), (0, 1, Direction.DOWN), (-1, 0, Direction.LEFT), (1, 0, Direction.RIGHT)],
    )
    def test_from_delta(self, dx, dy, expected):
        assert Direction.from_delta(dx, dy) is expected

    def test_vertical_wins(self):
        assert Direction.from_delta(1, -1) is Direction.UP

    def test_zero_keeps_default(self):
        assert Direction.from_delta(0, 0, Direction.LEFT) is Direction.LEFT


# ---------------------------------------------------------------------------
# Initial state
# ---------------------------------------------------------------------------

class TestInitialState:
    def test_from_template(self):
        s = _state("#####\n#@$.#\n#####")
        assert (s.x, s.y) == (1, 1)
        assert s.moves == s.pushes == s.elapsed_seconds == s.undo_count == 0
        assert s.stored == 0
        assert s.crate_count == 1
        assert s.facing is Direction.DOWN
        assert not s.is_solved

    def test_grid_is_a_copy(self):
        (template,) = parse_levels("#@$.#\n")
        s = PuzzleState.from_template(template)
        s.grid[0][2] = Cell.EMPTY
        assert template.grid[0][2] == Cell.CRATE

    def test_initial_stored(self):
        s = _state("#@*$.#\n")
        assert s.stored == 1 == s.count_stored()


class TestCanEnter:
    def test_floor_and_target(self):
        s = _state("#@ .$#\n")
        assert s.can_enter(2, 0)
        assert s.can_enter(3, 0)

    def test_wall_and_crate(self):
        s = _state("#@ .$#\n")
        assert not s.can_enter(0, 0)
        assert not s.can_enter(4, 0)

    def test_out_of_bounds(self):
        s = _state("#@ .$#\n")
        assert not s.can_enter(-1, 0)
        assert not s.can_enter(6, 0)
        assert not s.can_enter(1, 1)


# ---------------------------------------------------------------------------
# Steps
# ---------------------------------------------------------------------------

class TestStep:
    def test_step_onto_floor(self):
        s = _state("#@  $.#\n")
        history = UndoHistory()
        assert s.try_move(1, 0, history) is MoveResult.STEP
        assert (s.x, s.y, s.moves, s.pushes) == (2, 0, 1, 0)
        assert s.facing is Direction.RIGHT
        assert isinstance(history.pop(), LightEntry)

    def test_step_records_light_entry(self):
        s = _state("#@  $.#\n")
        history = UndoHistory()
        s.try_move(1, 0, history)
        (entry,) = list(history)
        assert not isinstance(entry, FullEntry)
        assert (entry.x, entry.moves) == (1, 0)

    def test_step_onto_target(self):
        s = _state("#@.$#\n")
        assert s.try_move(1, 0) is MoveResult.STEP
        assert s.stored == 0

    def test_into_wall_is_rejected(self):
        s = _state("#####\n#@$.#\n#####")
        before = (_counters(s), [row[:] for row in s.grid])
        history = UndoHistory()
        assert s.try_move(0, -1, history) is MoveResult.REJECTED
        assert s.try_move(-1, 0, history) is MoveResult.REJECTED
        assert (_counters(s), s.grid) == before
        assert len(history) == 0

    def test_off_grid_is_rejected(self):
        s = _state("@ $.\n")
        history = UndoHistory()
        assert s.try_move(-1, 0, history) is MoveResult.REJECTED
        assert s.try_move(0, -1, history) is MoveResult.REJECTED
        assert s.try_move(0, 1, history) is MoveResult.REJECTED
        assert _counters(s) == (0, 0, 0, 0, 0)
        assert len(history) == 0

    def test_rejected_move_keeps_facing(self):
        s = _state("#@$.#\n")
        s.try_move(0, -1)
        assert s.facing is Direction.DOWN

    def test_diagonal_delta_raises(self):
        s = _state("#@$.#\n")
        with pytest.raises(ValueError):
            s.try_move(1, 1)


# ---------------------------------------------------------------------------
# Pushes
# ---------------------------------------------------------------------------

class TestPush:
    def test_example_level_solves_in_one_push(self):
        s = _state("#####\n#@$.#\n#####")
        history = UndoHistory()
        assert s.try_move(1, 0, history) is MoveResult.PUSH
        assert (s.moves, s.pushes, s.stored) == (1, 1, 1)
        assert s.grid[1][3] == Cell.CRATE | Cell.TARGET
        assert s.grid[1][2] == Cell.EMPTY
        assert (s.x, s.y) == (2, 1)
        assert s.is_solved
        assert isinstance(history.pop(), FullEntry)

    def test_push_onto_floor(self):
        s = _state("#@$ .#\n")
        assert s.try_move(1, 0) is MoveResult.PUSH
        assert s.grid[0][3] == Cell.CRATE
        assert s.stored == 0

    def test_push_off_target(self):
        s = _state("#@* .$#\n")
        assert s.stored == 1
        assert s.try_move(1, 0) is MoveResult.PUSH
        assert s.grid[0][2] == Cell.TARGET
        assert s.stored == 0
        assert s.stored == s.count_stored()

    def test_push_from_target_to_target(self):
        s = _state("#@*.$ #\n")
        s.try_move(1, 0)
        assert s.stored == 1 == s.count_stored()

    @pytest.mark.parametrize(
        "text",
        [
            "#@$#.\n",   # wall
            "#@$$..\n",  # another crate
            "#@$*.\n",   # crate on target
            ".@$\n",     # edge of the grid
        ],
    )
    def test_blocked_push_is_rejected(self, text):
        s = _state(text)
        before = [row[:] for row in s.grid]
        history = UndoHistory()
        assert s.try_move(1, 0, history) is MoveResult.REJECTED
        assert s.grid == before
        assert _counters(s)[2:] == (0, 0, s.count_stored())
        assert len(history) == 0

    def test_push_up_against_top_edge(self):
        s = _state(" $ \n @.\n")
        before = [row[:] for row in s.grid]
        assert s.try_move(0, -1) is MoveResult.REJECTED
        assert s.grid == before

    def test_full_entry_holds_pre_push_grid(self):
        s = _state("#@$ .#\n")
        history = UndoHistory()
        original = [row[:] for row in s.grid]
        s.try_move(1, 0, history)
        entry = history.pop()
        assert entry.grid_copy() == original


class TestStoredInvariant:
    def test_incremental_count_matches_recount(self):
        text = "\n".join(
            [
                "#######",
                "#  .  #",
                "#  $  #",
                "#.$@$.#",
                "#  $  #",
                "#  .  #",
                "#######",
            ]
        )
        s = _state(text)
        script = [
            (-1, 0), (1, 0), (1, 0), (-1, 0), (0, -1), (0, 1), (0, 1),
            (0, -1), (0, -1), (-1, 0), (0, 1), (0, 1),
        ]
        for dx, dy in script:
            s.try_move(dx, dy)
            assert s.stored == s.count_stored()
        assert s.is_solved


# ---------------------------------------------------------------------------
# capture / restore
# ---------------------------------------------------------------------------

class TestRestore:
    def test_light_entry_keeps_current_grid(self):
        s = _state("#@ $.#\n")
        entry = s.capture(full=False)
        s.grid[0][2] = Cell.TARGET
        s.x, s.moves = 2, 5
        s.restore(entry)
        assert (s.x, s.moves) == (1, 0)
        assert s.grid[0][2] == Cell.TARGET

    def test_full_entry_replaces_grid(self):
        s = _state("#@ $.#\n")
        entry = s.capture(full=True)
        s.grid[0][3] = Cell.EMPTY
        s.restore(entry)
        assert s.grid[0][3] == Cell.CRATE

    def test_restored_grid_is_not_shared(self):
        s = _state("#@ $.#\n")
        entry = s.capture(full=True)
        s.restore(entry)
        s.grid[0][3] = Cell.EMPTY
        assert entry.grid[0][3] == Cell.CRATE

    def test_restore_keeps_undo_count(self):
        s = _state("#@ $.#\n")
        entry = s.capture(full=False)
        s.undo_count = 4
        s.restore(entry)
        assert s.undo_count == 4
