from __future__ import annotations

import logging
import time
from collections import deque
from enum import Enum
from typing import Callable, Deque, Optional, Sequence

from pushbox.core.grid import Direction
from pushbox.core.history import Snapshot, UndoHistory
from pushbox.core.levels import LevelTemplate
from pushbox.core.puzzle import MoveResult, PuzzleState
from pushbox.core.scores import ScoreStore
from pushbox.core.view import BoardView, CellGeometry, cell_geometry, status_label

logger = logging.getLogger(__name__)


class Status(Enum):
    PLAY = "play"
    PAUSE = "pause"
    WIN = "win"


class Command(Enum):
    MOVE_UP = "move_up"
    MOVE_DOWN = "move_down"
    MOVE_LEFT = "move_left"
    MOVE_RIGHT = "move_right"
    TOGGLE_PAUSE = "toggle_pause"
    RESTART = "restart"
    FORCE_WIN = "force_win"
    UNDO = "undo"
    SAVE_SNAPSHOT = "save_snapshot"
    LOAD_SNAPSHOT = "load_snapshot"
    ADVANCE = "advance"
    QUIT = "quit"
    TOGGLE_DEBUG = "toggle_debug"


MOVE_COMMANDS = {
    Command.MOVE_UP: Direction.UP,
    Command.MOVE_DOWN: Direction.DOWN,
    Command.MOVE_LEFT: Direction.LEFT,
    Command.MOVE_RIGHT: Direction.RIGHT,
}

STATUS_SUFFIX = {
    Status.PLAY: "",
    Status.PAUSE: "*PAUSE* Press Space..",
    Status.WIN: "You win! Press Return..",
}

COMPLETE_LABEL = "All levels solved! Press Return.."


class GameSession:
    """Owns the live puzzle, its undo history and snapshot, and the play status.

    Input arrives as ``Command`` values queued with ``queue`` and applied on
    the next ``tick``. Draining stops after a command that changes the
    status or (re)enters a level; the rest of the queue waits for the
    following tick.

    When every level already has a score the session starts past the last
    level: ``is_complete`` is True, ``puzzle`` is None and only ADVANCE,
    QUIT and TOGGLE_DEBUG do anything.
    """

    def __init__(
        self,
        levels: Sequence[LevelTemplate],
        scores: ScoreStore,
        clock: Callable[[], float] = time.monotonic,
        debug: bool = False,
    ) -> None:
        self._levels = list(levels)
        self._scores = scores
        self._clock = clock
        self._pending: Deque[Command] = deque()
        self._last_tick = clock()
        self._viewport = (0, 0, 0)
        self._entered = False

        self.debug = debug
        self.quit = False
        self.must_draw = True
        self.status = Status.PLAY
        self.level_index = 0
        self.puzzle: Optional[PuzzleState] = None
        self.history = UndoHistory()
        self.snapshot: Optional[Snapshot] = None
        self.geometry = CellGeometry(0, 0, 0)

        start = scores.first_unsolved(len(self._levels))
        if not self.set_level(start):
            self.level_index = len(self._levels)
            logger.info("All %d levels already solved", len(self._levels))

    @property
    def levels(self) -> list[LevelTemplate]:
        return list(self._levels)

    @property
    def scores(self) -> ScoreStore:
        return self._scores

    @property
    def level(self) -> Optional[LevelTemplate]:
        return self.puzzle.template if self.puzzle is not None else None

    @property
    def is_complete(self) -> bool:
        return self.puzzle is None

    @property
    def pending(self) -> int:
        return len(self._pending)

    # -- level setup -------------------------------------------------------

    def set_level(self, index: int) -> bool:
        """Enter level ``index`` from its template. False if there is no such level.

        The snapshot slot survives a restart of the current level and is
        cleared when a different level is entered. ``undo_count`` carries over.
        """
        if not 0 <= index < len(self._levels):
            return False
        template = self._levels[index]
        previous = self.puzzle
        if previous is None or index != self.level_index:
            self.snapshot = None
        self.level_index = index
        self.puzzle = PuzzleState.from_template(template)
        if previous is not None:
            self.puzzle.undo_count = previous.undo_count
        self.history = UndoHistory()
        self.status = Status.PLAY
        self.must_draw = True
        self._entered = True
        self._update_geometry()
        logger.info(
            "Entering level %d (%dx%d, %d crates)",
            template.number,
            template.width,
            template.height,
            template.crate_count,
        )
        return True

    def restart(self) -> None:
        self.set_level(self.level_index)

    def advance(self) -> None:
        if not self.set_level(self.level_index + 1):
            logger.info("Game over.")
            self.quit = True

    def set_viewport(self, width: int, height: int, status_bar_height: int) -> None:
        self._viewport = (width, height, status_bar_height)
        self._update_geometry()
        self.must_draw = True

    def _update_geometry(self) -> None:
        if self.puzzle is None:
            self.geometry = CellGeometry(0, 0, 0)
            return
        self.geometry = cell_geometry(self.puzzle.width, self.puzzle.height, *self._viewport)

    # -- input -------------------------------------------------------------

    def queue(self, command: Command) -> None:
        self._pending.append(command)

    def tick(self, now: Optional[float] = None) -> None:
        """Apply pending commands, then account elapsed play time."""
        now = self._clock() if now is None else now
        while self._pending:
            if not self.handle(self._pending.popleft()):
                break
        self._update_elapsed(now)

    def handle(self, command: Command) -> bool:
        """Apply one command. Returns False when the remaining queue should wait."""
        if command is Command.QUIT:
            self.quit = True
            return False
        if command is Command.TOGGLE_DEBUG:
            self.debug = not self.debug
            logger.info("Debug logging %s", "enabled" if self.debug else "disabled")
            self._debug_dump()
            return True

        before = self.status
        self._entered = False
        if self.puzzle is None:
            if command is Command.ADVANCE:
                self.quit = True
        elif self.status is Status.PLAY:
            self._handle_play(command)
        elif self.status is Status.PAUSE:
            self._handle_pause(command)
        else:
            self._handle_win(command)
        return not (self.quit or self._entered or self.status is not before)

    def _handle_play(self, command: Command) -> None:
        if command in MOVE_COMMANDS:
            self.move(MOVE_COMMANDS[command])
        elif command is Command.TOGGLE_PAUSE:
            self.status = Status.PAUSE
            self.must_draw = True
        elif command is Command.RESTART:
            self.restart()
        elif command is Command.FORCE_WIN:
            self.status = Status.WIN
            self.must_draw = True
        elif command is Command.UNDO:
            self.undo()
        elif command is Command.SAVE_SNAPSHOT:
            self.save_snapshot()
        elif command is Command.LOAD_SNAPSHOT:
            self.load_snapshot()

    def _handle_pause(self, command: Command) -> None:
        if command is Command.TOGGLE_PAUSE:
            self.status = Status.PLAY
            self.must_draw = True
        elif command is Command.RESTART:
            self.restart()

    def _handle_win(self, command: Command) -> None:
        if command is Command.ADVANCE:
            self.advance()
        elif command is Command.RESTART:
            self.restart()
        elif command is Command.UNDO:
            self.undo()
        elif command is Command.LOAD_SNAPSHOT:
            self.load_snapshot()

    # -- gameplay ----------------------------------------------------------

    def move(self, direction: Direction) -> MoveResult:
        if self.puzzle is None:
            return MoveResult.REJECTED
        result = self.puzzle.try_move(direction.dx, direction.dy, self.history)
        if not result.accepted:
            return result
        if result is MoveResult.PUSH and self.puzzle.is_solved:
            self._win()
        self.must_draw = True
        self._debug_dump()
        return result

    def _win(self) -> None:
        puzzle = self.puzzle
        self.status = Status.WIN
        added = self._scores.record(
            self.level_index, puzzle.pushes, puzzle.moves, puzzle.elapsed_seconds
        )
        self._scores.save()
        logger.info(
            "Level %d solved: %d moves, %d pushes, %ds%s",
            self.level_index + 1,
            puzzle.moves,
            puzzle.pushes,
            puzzle.elapsed_seconds,
            "" if added else " (already recorded)",
        )

    def undo(self) -> bool:
        if self.puzzle is None:
            return False
        entry = self.history.pop()
        if entry is None:
            return False
        self.puzzle.restore(entry)
        self.puzzle.undo_count += 1
        self._scores.save()
        self._reopen()
        self.must_draw = True
        self._debug_dump()
        return True

    def save_snapshot(self) -> bool:
        if self.puzzle is None:
            return False
        self.snapshot = Snapshot(state=self.puzzle.capture(full=True), history=tuple(self.history))
        logger.debug("Snapshot saved at move %d", self.puzzle.moves)
        self._debug_dump()
        return True

    def load_snapshot(self) -> bool:
        if self.puzzle is None or self.snapshot is None:
            return False
        self.puzzle.restore(self.snapshot.state)
        self.history = self.snapshot.restore_history()
        self._scores.save()
        self._reopen()
        self.save_snapshot()
        logger.debug("Snapshot loaded at move %d", self.puzzle.moves)
        self.must_draw = True
        return True

    def _reopen(self) -> None:
        if self.status is Status.WIN and not self.puzzle.is_solved:
            self.status = Status.PLAY

    # -- time and drawing --------------------------------------------------

    def _update_elapsed(self, now: float) -> None:
        delta = now - self._last_tick
        if delta < 1.0:
            return
        if self.status is Status.PLAY and self.puzzle is not None:
            self.puzzle.elapsed_seconds += int(delta)
        self._last_tick = now
        self.must_draw = True

    def take_redraw(self) -> bool:
        """Return whether a redraw is pending and clear the flag."""
        pending, self.must_draw = self.must_draw, False
        return pending

    def view(self) -> BoardView:
        puzzle = self.puzzle
        if puzzle is None:
            return BoardView(grid=(), player=None, facing=Direction.DOWN, label=COMPLETE_LABEL)
        return BoardView(
            grid=tuple(tuple(row) for row in puzzle.grid),
            player=(puzzle.x, puzzle.y),
            facing=puzzle.facing,
            label=status_label(
                self.level_index + 1,
                puzzle.moves,
                puzzle.pushes,
                puzzle.elapsed_seconds,
                STATUS_SUFFIX[self.status],
            ),
        )

    def _debug_dump(self) -> None:
        if not self.debug or self.puzzle is None:
            return
        puzzle = self.puzzle
        logger.info(
            "level=%d crates=%d/%d moves=%d pushes=%d undos=%d/%d snaps=%d time=%d",
            self.level_index + 1,
            puzzle.stored,
            puzzle.crate_count,
            puzzle.moves,
            puzzle.pushes,
            puzzle.undo_count,
            len(self.history),
            0 if self.snapshot is None else 1,
            puzzle.elapsed_seconds,
        )
