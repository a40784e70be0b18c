from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional

from pushbox.core.errors import ScoreFileError

logger = logging.getLogger(__name__)

SCORES_VERSION = 1


@dataclass
class ScoreRecord:
    level: int
    pushes: int
    moves: int
    elapsed_seconds: int


def _parse_int(path: Path, text: str, what: str) -> int:
    try:
        return int(text.split()[0])
    except (IndexError, ValueError):
        raise ScoreFileError(path, f"Invalid {what} line {text!r}") from None


def load_scores(path: Path) -> List[ScoreRecord]:
    """Read the score file. A missing file means no level has been solved yet."""
    path = Path(path)
    if not path.exists():
        return []
    lines = path.read_text(encoding="utf-8").splitlines()

    version = _parse_int(path, lines[0] if lines else "", "version")
    if version != SCORES_VERSION:
        raise ScoreFileError(path, "Invalid scores version")
    declared = _parse_int(path, lines[1] if len(lines) > 1 else "", "count")

    records: List[ScoreRecord] = []
    for line in lines[2:]:
        if not line.strip():
            continue
        fields = line.split()
        try:
            level, pushes, moves, elapsed = (int(f) for f in fields[:4])
        except ValueError:
            raise ScoreFileError(path, f"Invalid score line {line!r}") from None
        records.append(ScoreRecord(level=level, pushes=pushes, moves=moves, elapsed_seconds=elapsed))

    if declared != len(records):
        raise ScoreFileError(
            path, f"Invalid number of scores (read {declared} parsed {len(records)})"
        )
    return records


def save_scores(path: Path, records: Iterable[ScoreRecord]) -> None:
    """Rewrite the score file. Nothing is written for an empty record list."""
    records = list(records)
    if not records:
        return
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    lines = [str(SCORES_VERSION), str(len(records))]
    lines.extend(f"{r.level} {r.pushes} {r.moves} {r.elapsed_seconds}" for r in records)
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    logger.debug("Saved %d scores to %s", len(records), path)


class ScoreStore:
    """Best-run records, one per level. The first win of a level is kept."""

    def __init__(self, path: Path) -> None:
        self._path = Path(path)
        self._records = load_scores(self._path)

    @property
    def path(self) -> Path:
        return self._path

    @property
    def records(self) -> List[ScoreRecord]:
        return list(self._records)

    def get(self, level: int) -> Optional[ScoreRecord]:
        for record in self._records:
            if record.level == level:
                return record
        return None

    def is_solved(self, level: int) -> bool:
        return self.get(level) is not None

    def record(self, level: int, pushes: int, moves: int, elapsed_seconds: int) -> bool:
        """Add a record unless the level already has one. Returns True if added."""
        if self.is_solved(level):
            return False
        self._records.append(
            ScoreRecord(level=level, pushes=pushes, moves=moves, elapsed_seconds=elapsed_seconds)
        )
        return True

    def first_unsolved(self, level_count: int) -> int:
        """Index of the first level without a record, or ``level_count`` when all are solved."""
        solved = {r.level for r in self._records if 0 <= r.level < level_count}
        for index in range(level_count):
            if index not in solved:
                return index
        return level_count

    def save(self) -> None:
        save_scores(self._path, self._records)
