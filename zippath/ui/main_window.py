from __future__ import annotations

import logging
import random
from typing import Optional

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QComboBox,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from zippath.core.levels import LevelRepository
from zippath.core.session import PuzzleSession
from zippath.ui.colors import ZipColors
from zippath.ui.grid_widget import GridWidget

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    """Single-screen window: preset picker, puzzle grid and status line."""

    def __init__(self, levels: LevelRepository, rng: Optional[random.Random] = None) -> None:
        super().__init__()
        self._levels_repo = levels
        self._session = PuzzleSession(levels.default(), rng=rng)

        self._level_combo: Optional[QComboBox] = None
        self._grid: Optional[GridWidget] = None
        self._status_label: Optional[QLabel] = None
        self._message_label: Optional[QLabel] = None

        self._build_ui()
        self._show_session()

    def _build_ui(self) -> None:
        self.setWindowTitle("Zip")
        self.setStyleSheet(f"""
            QMainWindow {{
                background: qlineargradient(x1:0, y1:0, x2:0, y2:1,
                    stop:0 {ZipColors.BG_TOP}, stop:1 {ZipColors.BG_BOTTOM});
            }}
        """)

        root = QWidget(self)
        layout = QVBoxLayout(root)
        layout.setContentsMargins(24, 20, 24, 20)
        layout.setSpacing(12)

        title = QLabel("Zip")
        title.setStyleSheet(f"color: {ZipColors.PRIMARY}; font-size: 28px; font-weight: 900;")
        subtitle = QLabel("Connect the numbers in order and fill every cell.")
        subtitle.setStyleSheet(f"color: {ZipColors.TEXT_SECONDARY}; font-size: 12px; font-weight: 600;")
        layout.addWidget(title)
        layout.addWidget(subtitle)

        controls = QHBoxLayout()
        self._level_combo = QComboBox()
        for level in self._levels_repo.all():
            self._level_combo.addItem(f"{level.name} ({level.size}×{level.size})", level.key)
        controls.addWidget(self._level_combo)
        controls.addStretch(1)

        button_style = f"""
            QPushButton {{
                background: {ZipColors.PRIMARY};
                color: white;
                border: none;
                border-radius: 10px;
                padding: 8px 16px;
                font-weight: 800;
            }}
            QPushButton:hover {{ background: {ZipColors.PRIMARY_DARK}; }}
        """
        new_button = QPushButton("New puzzle")
        new_button.setStyleSheet(button_style)
        new_button.clicked.connect(self._on_new_puzzle)
        reset_button = QPushButton("Reset")
        reset_button.setStyleSheet(button_style)
        reset_button.clicked.connect(self._on_reset)
        controls.addWidget(new_button)
        controls.addWidget(reset_button)
        layout.addLayout(controls)

        self._grid = GridWidget()
        self._grid.path_changed.connect(self._update_status)
        self._grid.solved.connect(self._on_solved)
        self._level_combo.currentIndexChanged.connect(self._on_level_changed)
        layout.addWidget(self._grid, 1)

        self._status_label = QLabel()
        self._status_label.setStyleSheet(f"color: {ZipColors.TEXT_PRIMARY}; font-size: 13px; font-weight: 700;")
        self._message_label = QLabel()
        self._message_label.setAlignment(Qt.AlignCenter)
        layout.addWidget(self._status_label)
        layout.addWidget(self._message_label)

        self.setCentralWidget(root)
        self.resize(560, 680)

    def _show_session(self) -> None:
        self._grid.set_session(self._session)
        self._set_message("", ZipColors.TEXT_SECONDARY)
        self._update_status()

    def _update_status(self) -> None:
        engine = self._session.engine
        board = self._session.board
        self._status_label.setText(
            f"Checkpoints {engine.highest_locked_label}/{board.checkpoint_count}"
            f"  ·  Cells {len(engine.locked_path)}/{board.cell_count}"
        )
        if engine.is_stuck:
            self._set_message("Every number is connected but cells are left empty. Reset to try again.", ZipColors.WARNING)

    def _set_message(self, text: str, color: str) -> None:
        self._message_label.setText(text)
        self._message_label.setStyleSheet(f"color: {color}; font-size: 14px; font-weight: 800;")

    def _on_solved(self) -> None:
        summary = self._session.summary()
        self._set_message(
            f"Congratulations! You solved the puzzle in {summary.elapsed_seconds:.0f}s.",
            ZipColors.SUCCESS,
        )

    def _on_level_changed(self, index: int) -> None:
        key = self._level_combo.itemData(index)
        if key is None:
            return
        logger.info("Switched to preset %s", key)
        self._session.new_puzzle(self._levels_repo.get(key))
        self._show_session()

    def _on_new_puzzle(self) -> None:
        self._session.new_puzzle()
        self._show_session()

    def _on_reset(self) -> None:
        answer = QMessageBox.question(
            self,
            "Reset puzzle",
            "Are you sure you want to reset the puzzle?",
            QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No,
        )
        if answer != QMessageBox.StandardButton.Yes:
            return
        self._session.reset()
        self._show_session()
