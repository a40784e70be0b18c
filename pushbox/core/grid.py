"""Cell flags and directions shared by the level loader and the puzzle state."""

from __future__ import annotations

from enum import Enum, IntFlag
from typing import List, Optional, Sequence


class Cell(IntFlag):
    """Contents of one grid square. TARGET and CRATE may be combined."""

    EMPTY = 0
    TARGET = 1
    CRATE = 2
    WALL = 4

    @property
    def is_wall(self) -> bool:
        return bool(self & Cell.WALL)

    @property
    def is_crate(self) -> bool:
        return bool(self & Cell.CRATE)

    @property
    def is_target(self) -> bool:
        return bool(self & Cell.TARGET)

    @property
    def is_stored(self) -> bool:
        """Crate sitting on a target."""
        return self.is_crate and self.is_target

    @property
    def is_walkable(self) -> bool:
        return self in (Cell.EMPTY, Cell.TARGET)


Grid = List[List[Cell]]


class Direction(Enum):
    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)

    @property
    def dx(self) -> int:
        return self.value[0]

    @property
    def dy(self) -> int:
        return self.value[1]

    @classmethod
    def from_delta(cls, dx: int, dy: int, default: Optional[Direction] = None) -> Optional[Direction]:
        """Facing for a move delta. The vertical component is applied last and wins."""
        facing = default
        if dx < 0:
            facing = cls.LEFT
        elif dx > 0:
            facing = cls.RIGHT
        if dy < 0:
            facing = cls.UP
        elif dy > 0:
            facing = cls.DOWN
        return facing


def copy_grid(grid: Sequence[Sequence[Cell]]) -> Grid:
    return [list(row) for row in grid]


def count_cells(grid: Sequence[Sequence[Cell]], flags: Cell) -> int:
    """Count cells that have every bit of ``flags`` set."""
    return sum(1 for row in grid for cell in row if cell & flags == flags)
