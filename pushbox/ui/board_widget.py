"""Board painting: one rectangle per cell, the player as a disc with a facing marker."""

from __future__ import annotations

from typing import Optional

from PySide6.QtCore import QPointF, QRectF, Qt
from PySide6.QtGui import QBrush, QColor, QPainter, QPen
from PySide6.QtWidgets import QSizePolicy, QWidget

from pushbox.core import view
from pushbox.core.grid import Direction
from pushbox.core.view import BoardView, CellGeometry
from pushbox.ui.colors import BoardColors, fill_for


class BoardWidget(QWidget):
    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self._view: Optional[BoardView] = None
        self._geometry = CellGeometry(0, 0, 0)
        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Expanding)
        self.setAttribute(Qt.WidgetAttribute.WA_OpaquePaintEvent, True)

    def set_view(self, board: BoardView, geometry: CellGeometry) -> None:
        self._view = board
        self._geometry = geometry
        self.update()

    def paintEvent(self, event) -> None:
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing, True)
        painter.fillRect(self.rect(), QColor(BoardColors.BACKGROUND))
        board = self._view
        geo = self._geometry
        if board is None or geo.cell_width <= 0 or geo.cell_height <= 0:
            return

        for y in range(board.height):
            for x in range(board.width):
                rect = QRectF(
                    geo.offset_x + x * geo.cell_width,
                    y * geo.cell_height,
                    geo.cell_width,
                    geo.cell_height,
                )
                self._paint_cell(painter, rect, board.sprite_at(x, y), board.facing)

    def _paint_cell(self, painter: QPainter, rect: QRectF, sprite: str, facing: Direction) -> None:
        painter.setPen(Qt.NoPen)
        painter.setBrush(QBrush(QColor(fill_for(sprite))))
        if sprite == view.SPRITE_WALL:
            painter.setPen(QPen(QColor(BoardColors.WALL_EDGE), 1))
            painter.drawRect(rect)
            return
        painter.drawRect(rect)

        inset = min(rect.width(), rect.height()) * 0.15
        inner = rect.adjusted(inset, inset, -inset, -inset)
        if sprite in (view.SPRITE_TARGET, view.SPRITE_PLAYER_ON_TARGET):
            painter.setBrush(QBrush(QColor(BoardColors.TARGET)))
            dot = min(rect.width(), rect.height()) * 0.2
            painter.drawEllipse(rect.center(), dot, dot)
        if sprite in (view.SPRITE_CRATE, view.SPRITE_STORED):
            painter.setPen(QPen(QColor(BoardColors.CRATE_EDGE), 2))
            painter.drawRoundedRect(inner, 3, 3)
        if sprite in (view.SPRITE_PLAYER, view.SPRITE_PLAYER_ON_TARGET):
            self._paint_player(painter, inner, facing)

    def _paint_player(self, painter: QPainter, rect: QRectF, facing: Direction) -> None:
        painter.setPen(QPen(QColor(BoardColors.PLAYER_EDGE), 2))
        painter.setBrush(QBrush(QColor(BoardColors.PLAYER)))
        painter.drawEllipse(rect)
        # small dot towards the facing side
        center = rect.center()
        reach = min(rect.width(), rect.height()) * 0.3
        marker = QPointF(center.x() + facing.dx * reach, center.y() + facing.dy * reach)
        painter.setPen(Qt.NoPen)
        painter.setBrush(QBrush(QColor(BoardColors.PLAYER_EDGE)))
        size = max(2.0, reach * 0.35)
        painter.drawEllipse(marker, size, size)
