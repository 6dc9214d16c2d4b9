"""Data models used by the UI."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from zippath.core.board import Coord
from zippath.core.engine import CellStatus, PathEngine


@dataclass
class CellView:
    """Render state for a single cell: path status, checkpoint label and walls."""

    coord: Coord
    label: int
    status: CellStatus
    wall_sides: Tuple[str, ...] = ()
    path_index: int = -1


def build_cell_views(engine: PathEngine) -> List[CellView]:
    """Row-major render state of every cell on the engine's board."""
    board = engine.board
    locked_index = {cell: i for i, cell in enumerate(engine.locked_path)}
    return [
        CellView(
            coord=coord,
            label=board.label_at(coord),
            status=engine.cell_status(coord),
            wall_sides=board.wall_sides(coord),
            path_index=locked_index.get(coord, -1),
        )
        for coord in board.cells()
    ]


@dataclass
class GridGeometry:
    """Pixel layout of a square grid inside a widget."""

    size: int
    cell_size: float
    origin_x: float = 0.0
    origin_y: float = 0.0

    @classmethod
    def fit(cls, size: int, width: float, height: float, margin: float = 12.0) -> GridGeometry:
        """Largest centred grid that fits ``width`` × ``height``."""
        side = max(0.0, min(width, height) - 2 * margin)
        cell_size = side / size if size else 0.0
        return cls(
            size=size,
            cell_size=cell_size,
            origin_x=(width - cell_size * size) / 2,
            origin_y=(height - cell_size * size) / 2,
        )

    def cell_at(self, x: float, y: float) -> Optional[Coord]:
        """Cell under the pixel position, or None outside the grid."""
        if self.cell_size <= 0:
            return None
        col = int((x - self.origin_x) // self.cell_size)
        row = int((y - self.origin_y) // self.cell_size)
        if 0 <= row < self.size and 0 <= col < self.size:
            return (row, col)
        return None

    def cell_rect(self, coord: Coord) -> Tuple[float, float, float, float]:
        """(x, y, width, height) of a cell."""
        row, col = coord
        return (
            self.origin_x + col * self.cell_size,
            self.origin_y + row * self.cell_size,
            self.cell_size,
            self.cell_size,
        )
