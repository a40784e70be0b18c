"""Render-ready view of the session, independent of any UI toolkit."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from pushbox.core.grid import Cell, Direction

SPRITE_EMPTY = "empty"
SPRITE_TARGET = "target"
SPRITE_STORED = "stored"
SPRITE_CRATE = "crate"
SPRITE_PLAYER = "player"
SPRITE_PLAYER_ON_TARGET = "player_on_target"
SPRITE_WALL = "wall"


@dataclass(frozen=True)
class BoardView:
    grid: Tuple[Tuple[Cell, ...], ...]
    player: Optional[Tuple[int, int]]
    facing: Direction
    label: str

    @property
    def width(self) -> int:
        return len(self.grid[0]) if self.grid else 0

    @property
    def height(self) -> int:
        return len(self.grid)

    def sprite_at(self, x: int, y: int) -> str:
        return sprite_for(self.grid[y][x], self.player == (x, y))


@dataclass(frozen=True)
class CellGeometry:
    cell_width: int
    cell_height: int
    offset_x: int


def format_elapsed(seconds: int) -> str:
    """Format seconds as H:MM:SS."""
    hours, rest = divmod(seconds, 3600)
    minutes, secs = divmod(rest, 60)
    return f"{hours}:{minutes:02}:{secs:02}"


def status_label(level_number: int, moves: int, pushes: int, elapsed_seconds: int, suffix: str = "") -> str:
    return (
        f"{level_number:02}| moves: {moves:04} pushes: {pushes:04} "
        f"time:{format_elapsed(elapsed_seconds)} {suffix}"
    )


def sprite_for(cell: Cell, is_player: bool) -> str:
    """Sprite key for a cell. The player is drawn only over floor and targets."""
    if cell == Cell.EMPTY:
        return SPRITE_PLAYER if is_player else SPRITE_EMPTY
    if cell == Cell.TARGET:
        return SPRITE_PLAYER_ON_TARGET if is_player else SPRITE_TARGET
    if cell == Cell.CRATE:
        return SPRITE_CRATE
    if cell == Cell.WALL:
        return SPRITE_WALL
    if cell == Cell.CRATE | Cell.TARGET:
        return SPRITE_STORED
    return SPRITE_EMPTY


def cell_geometry(
    board_width: int,
    board_height: int,
    viewport_width: int,
    viewport_height: int,
    status_bar_height: int,
) -> CellGeometry:
    """Integer cell size filling the viewport above the status bar, board centred horizontally."""
    if board_width <= 0 or board_height <= 0:
        return CellGeometry(0, 0, 0)
    cell_width = viewport_width // board_width
    cell_height = max(0, viewport_height - status_bar_height) // board_height
    offset_x = (viewport_width - board_width * cell_width) // 2
    return CellGeometry(cell_width, cell_height, offset_x)
