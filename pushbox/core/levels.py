from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Tuple

from pushbox.core.errors import LevelFileError, LevelFormatError
from pushbox.core.grid import Cell, Grid, copy_grid

logger = logging.getLogger(__name__)

COMMENT = ";"

# character -> (cell, targets, crates, stored, is_start)
_SYMBOLS = {
    " ": (Cell.EMPTY, 0, 0, 0, False),
    ".": (Cell.TARGET, 1, 0, 0, False),
    "$": (Cell.CRATE, 0, 1, 0, False),
    "*": (Cell.CRATE | Cell.TARGET, 1, 1, 1, False),
    "@": (Cell.EMPTY, 0, 0, 0, True),
    "&": (Cell.TARGET, 1, 0, 0, True),
    "#": (Cell.WALL, 0, 0, 0, False),
}


@dataclass(frozen=True)
class LevelTemplate:
    """Immutable starting layout of one level."""

    number: int
    width: int
    height: int
    grid: Tuple[Tuple[Cell, ...], ...]
    crate_count: int
    target_count: int
    stored_count: int
    start: Tuple[int, int]

    def new_grid(self) -> Grid:
        """Return a mutable copy of the starting grid."""
        return copy_grid(self.grid)


def _split_blocks(text: str) -> List[List[str]]:
    blocks: List[List[str]] = []
    current: List[str] = []
    for line in text.splitlines():
        if not line:
            if current:
                blocks.append(current)
                current = []
            continue
        if line.startswith(COMMENT):
            continue
        current.append(line)
    if current:
        blocks.append(current)
    return blocks


def parse_level(lines: List[str], number: int) -> LevelTemplate:
    """Build a template from the rows of one level block.

    Rows shorter than the widest one are padded with empty cells. Any
    inconsistency raises ``LevelFormatError``; there is no repair.
    """
    width = max(len(line) for line in lines)
    grid: List[Tuple[Cell, ...]] = []
    targets = crates = stored = 0
    start = None

    for y, line in enumerate(lines):
        row = [Cell.EMPTY] * width
        for x, char in enumerate(line):
            try:
                cell, t, c, s, is_start = _SYMBOLS[char]
            except KeyError:
                raise LevelFormatError(
                    number, f"invalid element [{char}] at row {y + 1}, column {x + 1}"
                ) from None
            if is_start:
                if start is not None:
                    raise LevelFormatError(number, "player found multiple times")
                start = (x, y)
            row[x] = cell
            targets += t
            crates += c
            stored += s
        grid.append(tuple(row))

    if start is None:
        raise LevelFormatError(number, "player not found")
    if crates != targets:
        raise LevelFormatError(
            number, f"mismatch between crates={crates} and targets={targets}"
        )

    return LevelTemplate(
        number=number,
        width=width,
        height=len(grid),
        grid=tuple(grid),
        crate_count=crates,
        target_count=targets,
        stored_count=stored,
        start=start,
    )


def parse_levels(text: str) -> List[LevelTemplate]:
    """Parse a whole level pack. Blocks are separated by blank lines."""
    return [parse_level(block, number) for number, block in enumerate(_split_blocks(text), start=1)]


def load_levels(path: Path) -> List[LevelTemplate]:
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise LevelFileError(f"Couldn't open the levels {path}: {e}") from e
    levels = parse_levels(text)
    if not levels:
        raise LevelFileError(f"No levels found in {path}")
    return levels


class LevelRepository:
    def __init__(self, path: Path) -> None:
        self._path = Path(path)
        self._levels = load_levels(self._path)
        logger.info("Loaded %d levels from %s", len(self._levels), self._path)

    @property
    def path(self) -> Path:
        return self._path

    def all(self) -> List[LevelTemplate]:
        return list(self._levels)

    def get(self, index: int) -> LevelTemplate:
        return self._levels[index]

    def __len__(self) -> int:
        return len(self._levels)
