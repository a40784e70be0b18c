from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtCore import Qt, QTimer
from PySide6.QtGui import QCloseEvent, QFont, QKeyEvent
from PySide6.QtWidgets import QLabel, QMainWindow, QVBoxLayout, QWidget

from pushbox.core.config import GameConfig
from pushbox.core.session import GameSession
from pushbox.ui.board_widget import BoardWidget
from pushbox.ui.colors import BoardColors

logger = logging.getLogger(__name__)


def key_name(key: int) -> Optional[str]:
    """Qt key code to its name without the ``Key_`` prefix (``Qt.Key_Up`` -> ``"Up"``)."""
    try:
        name = Qt.Key(key).name
    except ValueError:
        return None
    return name[4:] if name.startswith("Key_") else name


class MainWindow(QMainWindow):
    """Game window: the board above a one-line status bar.

    Key presses are translated into session commands through the configured
    key bindings; a frame timer drives ``GameSession.tick`` and repaints
    only when the session reports a pending redraw.
    """

    def __init__(self, session: GameSession, config: GameConfig) -> None:
        super().__init__()
        self._session = session
        self._config = config

        self.setWindowTitle("pushbox")
        self.resize(config.window_width, config.window_height)

        central = QWidget()
        layout = QVBoxLayout(central)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)

        self._board = BoardWidget()
        layout.addWidget(self._board, 1)

        self._status_label = QLabel()
        self._status_label.setFixedHeight(max(config.status_bar_height, 12))
        font = QFont("Monospace")
        font.setStyleHint(QFont.TypeWriter)
        self._status_label.setFont(font)
        self._status_label.setStyleSheet(
            f"QLabel {{ background: {BoardColors.STATUS_BAR_BG}; color: {BoardColors.STATUS_TEXT}; padding-left: 4px; }}"
        )
        layout.addWidget(self._status_label, 0)
        self.setCentralWidget(central)

        self._frame_timer = QTimer(self)
        self._frame_timer.timeout.connect(self._on_frame)
        self._frame_timer.start(config.frame_interval_ms)

    def keyPressEvent(self, event: QKeyEvent) -> None:
        name = key_name(event.key())
        command = self._config.command_for(name) if name else None
        if command is None:
            super().keyPressEvent(event)
            return
        self._session.queue(command)

    def resizeEvent(self, event) -> None:
        super().resizeEvent(event)
        QTimer.singleShot(0, self._update_viewport)

    def _update_viewport(self) -> None:
        self._session.set_viewport(self._board.width(), self._board.height(), 0)

    def _on_frame(self) -> None:
        session = self._session
        session.tick()
        if session.quit:
            self._frame_timer.stop()
            self.close()
            return
        if session.take_redraw():
            self._refresh()

    def _refresh(self) -> None:
        board = self._session.view()
        self._board.set_view(board, self._session.geometry)
        self._status_label.setText(board.label)

    def closeEvent(self, event: QCloseEvent) -> None:
        """Persist scores when closing the window."""
        self._frame_timer.stop()
        self._session.scores.save()
        super().closeEvent(event)
