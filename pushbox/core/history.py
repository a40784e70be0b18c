"""Undo entries and the single-slot snapshot.

A move that only walks the player records a ``LightEntry``; a push also
changes the grid and records a ``FullEntry`` with a copy of it. Restoring a
light entry therefore leaves the live grid alone.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple, Union

from pushbox.core.grid import Cell, Direction, Grid, copy_grid


@dataclass(frozen=True)
class LightEntry:
    x: int
    y: int
    facing: Direction
    moves: int
    pushes: int
    stored: int
    elapsed_seconds: int


@dataclass(frozen=True)
class FullEntry(LightEntry):
    grid: Tuple[Tuple[Cell, ...], ...] = ()

    def grid_copy(self) -> Grid:
        return copy_grid(self.grid)


UndoEntry = Union[LightEntry, FullEntry]


class UndoHistory:
    """LIFO stack of undo entries."""

    def __init__(self, entries: Optional[List[UndoEntry]] = None) -> None:
        self._entries: List[UndoEntry] = list(entries or [])

    def push(self, entry: UndoEntry) -> None:
        self._entries.append(entry)

    def pop(self) -> Optional[UndoEntry]:
        if not self._entries:
            return None
        return self._entries.pop()

    def clear(self) -> None:
        self._entries.clear()

    def copy(self) -> UndoHistory:
        # entries are frozen, sharing them is safe
        return UndoHistory(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[UndoEntry]:
        return iter(self._entries)


@dataclass(frozen=True)
class Snapshot:
    """A manually saved checkpoint: the full state and the undo stack behind it."""

    state: FullEntry
    history: Tuple[UndoEntry, ...]

    def restore_history(self) -> UndoHistory:
        return UndoHistory(list(self.history))
