from __future__ import annotations

from enum import Enum
from typing import Optional

from pushbox.core.grid import Cell, Direction, Grid, count_cells
from pushbox.core.history import FullEntry, LightEntry, UndoEntry, UndoHistory
from pushbox.core.levels import LevelTemplate


class MoveResult(Enum):
    REJECTED = "rejected"
    STEP = "step"
    PUSH = "push"

    @property
    def accepted(self) -> bool:
        return self is not MoveResult.REJECTED


class PuzzleState:
    """Live state of the level being played.

    Holds a working copy of the template grid, the player position and the
    per-attempt counters. ``stored`` is maintained incrementally by
    ``try_move``; ``count_stored`` recounts it from the grid.
    """

    def __init__(self, template: LevelTemplate) -> None:
        self._template = template
        self.grid: Grid = template.new_grid()
        self.x, self.y = template.start
        self.facing = Direction.DOWN
        self.moves = 0
        self.pushes = 0
        self.stored = template.stored_count
        self.elapsed_seconds = 0
        self.undo_count = 0

    @classmethod
    def from_template(cls, template: LevelTemplate) -> PuzzleState:
        return cls(template)

    @property
    def template(self) -> LevelTemplate:
        return self._template

    @property
    def width(self) -> int:
        return self._template.width

    @property
    def height(self) -> int:
        return self._template.height

    @property
    def crate_count(self) -> int:
        return self._template.crate_count

    @property
    def is_solved(self) -> bool:
        return self.stored == self.crate_count

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def cell(self, x: int, y: int) -> Cell:
        return self.grid[y][x]

    def can_enter(self, x: int, y: int) -> bool:
        """True if (x, y) is on the grid and holds neither a wall nor a crate."""
        return self.in_bounds(x, y) and self.grid[y][x].is_walkable

    def try_move(self, dx: int, dy: int, history: Optional[UndoHistory] = None) -> MoveResult:
        """Move the player one cell, pushing a crate if there is one in the way.

        Rejected moves leave the state and ``history`` untouched. Accepted
        moves push exactly one undo entry before anything is changed.
        """
        if (dx, dy) not in {d.value for d in Direction}:
            raise ValueError(f"Invalid move delta ({dx}, {dy})")

        x, y = self.x + dx, self.y + dy
        if not self.in_bounds(x, y):
            return MoveResult.REJECTED

        if self.grid[y][x].is_crate:
            to_x, to_y = x + dx, y + dy
            if not self.can_enter(to_x, to_y):
                return MoveResult.REJECTED
            if history is not None:
                history.push(self.capture(full=True))
            self.pushes += 1
            self.grid[y][x] ^= Cell.CRATE
            if self.grid[y][x].is_target:
                self.stored -= 1
            self.grid[to_y][to_x] |= Cell.CRATE
            if self.grid[to_y][to_x].is_target:
                self.stored += 1
            result = MoveResult.PUSH
        elif self.can_enter(x, y):
            if history is not None:
                history.push(self.capture(full=False))
            result = MoveResult.STEP
        else:
            return MoveResult.REJECTED

        self.moves += 1
        self.x, self.y = x, y
        self.facing = Direction.from_delta(dx, dy, self.facing)
        return result

    def count_stored(self) -> int:
        return count_cells(self.grid, Cell.CRATE | Cell.TARGET)

    def capture(self, full: bool) -> UndoEntry:
        fields = dict(
            x=self.x,
            y=self.y,
            facing=self.facing,
            moves=self.moves,
            pushes=self.pushes,
            stored=self.stored,
            elapsed_seconds=self.elapsed_seconds,
        )
        if full:
            return FullEntry(grid=tuple(tuple(row) for row in self.grid), **fields)
        return LightEntry(**fields)

    def restore(self, entry: UndoEntry) -> None:
        """Apply an undo entry. A light entry keeps the current grid."""
        if isinstance(entry, FullEntry):
            self.grid = entry.grid_copy()
        self.x, self.y = entry.x, entry.y
        self.facing = entry.facing
        self.moves = entry.moves
        self.pushes = entry.pushes
        self.stored = entry.stored
        self.elapsed_seconds = entry.elapsed_seconds
