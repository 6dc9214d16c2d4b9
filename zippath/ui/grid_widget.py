"""Puzzle grid widget: paints the board and feeds pointer events to the session."""

from __future__ import annotations

from typing import Optional

from PySide6.QtCore import QPointF, QRectF, Qt, Signal
from PySide6.QtGui import QColor, QMouseEvent, QPainter, QPen
from PySide6.QtWidgets import QWidget

from zippath.core.board import Coord
from zippath.core.engine import CellStatus, MoveOutcome
from zippath.core.session import PuzzleSession
from zippath.ui.colors import ZipColors, path_shade
from zippath.ui.models import CellView, GridGeometry, build_cell_views


class GridWidget(QWidget):
    """Square grid of cells: committed path (teal), active drag (amber), walls (dark)."""

    path_changed = Signal()
    solved = Signal()

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self._session: Optional[PuzzleSession] = None
        self._last_cell: Optional[Coord] = None
        self.setMinimumSize(240, 240)
        self.setMouseTracking(False)

    def set_session(self, session: PuzzleSession) -> None:
        """Show the session's puzzle; called again after new puzzle / reset."""
        self._session = session
        self._last_cell = None
        self.update()

    def _geometry(self) -> Optional[GridGeometry]:
        if self._session is None:
            return None
        return GridGeometry.fit(self._session.board.size, self.width(), self.height())

    def _cell_at_event(self, event: QMouseEvent) -> Optional[Coord]:
        geometry = self._geometry()
        if geometry is None:
            return None
        pos = event.position()
        return geometry.cell_at(pos.x(), pos.y())

    def mousePressEvent(self, event: QMouseEvent) -> None:
        if self._session is None or event.button() != Qt.MouseButton.LeftButton:
            super().mousePressEvent(event)
            return
        cell = self._cell_at_event(event)
        if cell is not None and self._session.begin_drag(cell):
            self._last_cell = cell
            self.path_changed.emit()
            self.update()
        event.accept()

    def mouseMoveEvent(self, event: QMouseEvent) -> None:
        if self._session is None or not self._session.engine.is_dragging:
            return
        cell = self._cell_at_event(event)
        if cell is None or cell == self._last_cell:
            return
        self._last_cell = cell
        outcome = self._session.extend_to(cell)
        if outcome.changed:
            self.path_changed.emit()
            self.update()
        if outcome is MoveOutcome.LOCKED and self._session.is_solved():
            self.solved.emit()

    def mouseReleaseEvent(self, event: QMouseEvent) -> None:
        if self._session is None:
            return
        self._last_cell = None
        if self._session.end_drag():
            self.path_changed.emit()
            self.update()

    def paintEvent(self, event) -> None:
        """Paint cells, checkpoint badges and walls."""
        super().paintEvent(event)
        geometry = self._geometry()
        if geometry is None or geometry.cell_size <= 0:
            return
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing, True)

        views = build_cell_views(self._session.engine)
        committed = len(self._session.engine.locked_path)
        for view in views:
            self._paint_cell(painter, geometry, view, committed)
        wall_pen = QPen(QColor(ZipColors.WALL), max(3.0, geometry.cell_size * 0.1))
        wall_pen.setCapStyle(Qt.PenCapStyle.RoundCap)
        painter.setPen(wall_pen)
        for view in views:
            self._paint_walls(painter, geometry, view)
        painter.end()

    def _paint_cell(self, painter: QPainter, geometry: GridGeometry, view: CellView, committed: int) -> None:
        x, y, w, h = geometry.cell_rect(view.coord)
        rect = QRectF(x, y, w, h)
        if view.status is CellStatus.ANCHOR:
            fill = ZipColors.CELL_ANCHOR
        elif view.status is CellStatus.IN_PROGRESS:
            fill = ZipColors.CELL_IN_PROGRESS
        elif view.status is CellStatus.COMMITTED:
            fill = path_shade(view.path_index, committed)
        else:
            fill = ZipColors.CELL_EMPTY
        painter.setBrush(QColor(fill))
        painter.setPen(QPen(QColor(ZipColors.CELL_BORDER), 1))
        painter.drawRect(rect)

        if view.label:
            radius = w * 0.32
            painter.setBrush(QColor(ZipColors.CHECKPOINT_BADGE))
            painter.setPen(Qt.PenStyle.NoPen)
            painter.drawEllipse(rect.center(), radius, radius)
            font = painter.font()
            font.setPointSizeF(max(8.0, w * 0.25))
            font.setBold(True)
            painter.setFont(font)
            painter.setPen(QColor(ZipColors.CHECKPOINT_TEXT))
            painter.drawText(rect, Qt.AlignCenter, str(view.label))

    def _paint_walls(self, painter: QPainter, geometry: GridGeometry, view: CellView) -> None:
        x, y, w, h = geometry.cell_rect(view.coord)
        # Shared edges get drawn from both cells.
        for side in view.wall_sides:
            if side == "top":
                painter.drawLine(QPointF(x, y), QPointF(x + w, y))
            elif side == "bottom":
                painter.drawLine(QPointF(x, y + h), QPointF(x + w, y + h))
            elif side == "left":
                painter.drawLine(QPointF(x, y), QPointF(x, y + h))
            elif side == "right":
                painter.drawLine(QPointF(x + w, y), QPointF(x + w, y + h))
