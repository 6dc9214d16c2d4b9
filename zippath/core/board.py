from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterator, Mapping, Optional, Set, Tuple

logger = logging.getLogger(__name__)

Coord = Tuple[int, int]
Edge = FrozenSet[Coord]

_SIDES: Tuple[Tuple[str, int, int], ...] = (
    ("top", -1, 0),
    ("right", 0, 1),
    ("bottom", 1, 0),
    ("left", 0, -1),
)


class BoardConfigError(ValueError):
    """Raised when a board is requested with an impossible configuration."""


def is_adjacent(a: Coord, b: Coord) -> bool:
    """Return True if the two cells share a side."""
    return abs(a[0] - b[0]) + abs(a[1] - b[1]) == 1


def make_edge(a: Coord, b: Coord) -> Edge:
    """Build the unordered edge between two adjacent cells."""
    if not is_adjacent(a, b):
        raise ValueError(f"cells {a} and {b} are not adjacent")
    return frozenset((tuple(a), tuple(b)))


@dataclass(frozen=True)
class Board:
    """An N×N puzzle grid with labeled checkpoints and blocked edges.

    ``checkpoints`` maps labels 1..K to cells; ``walls`` holds edges between
    adjacent cells that the path may not cross (in either direction).
    Instances are immutable and safe to share with any number of readers.
    """

    size: int
    checkpoints: Mapping[int, Coord]
    walls: FrozenSet[Edge] = frozenset()
    _labels: Mapping[Coord, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.size < 1:
            raise BoardConfigError(f"board size must be at least 1, got {self.size}")

        checkpoints = {int(label): (int(r), int(c)) for label, (r, c) in dict(self.checkpoints).items()}
        if sorted(checkpoints) != list(range(1, len(checkpoints) + 1)):
            raise BoardConfigError(f"checkpoint labels must be 1..K, got {sorted(checkpoints)}")
        for label, coord in checkpoints.items():
            if not self.in_bounds(coord):
                raise BoardConfigError(f"checkpoint {label} at {coord} is outside the {self.size}x{self.size} grid")
        labels = {coord: label for label, coord in checkpoints.items()}
        if len(labels) != len(checkpoints):
            raise BoardConfigError("checkpoint cells must be pairwise distinct")

        walls = frozenset(frozenset(edge) for edge in self.walls)
        for edge in walls:
            cells = sorted(edge)
            if len(cells) != 2 or not is_adjacent(cells[0], cells[1]):
                raise BoardConfigError(f"wall {cells} does not join two adjacent cells")
            if not all(self.in_bounds(cell) for cell in cells):
                raise BoardConfigError(f"wall {cells} leaves the grid")

        object.__setattr__(self, "checkpoints", MappingProxyType(checkpoints))
        object.__setattr__(self, "walls", walls)
        object.__setattr__(self, "_labels", MappingProxyType(labels))

    @property
    def checkpoint_count(self) -> int:
        return len(self.checkpoints)

    @property
    def cell_count(self) -> int:
        return self.size * self.size

    def in_bounds(self, coord: Coord) -> bool:
        row, col = coord
        return 0 <= row < self.size and 0 <= col < self.size

    def label_at(self, coord: Coord) -> int:
        """Checkpoint label at ``coord``, or 0 for a plain cell."""
        return self._labels.get(tuple(coord), 0)

    def cells(self) -> Iterator[Coord]:
        """Iterate over all cells in row-major order."""
        for row in range(self.size):
            for col in range(self.size):
                yield (row, col)

    def is_blocked(self, a: Coord, b: Coord) -> bool:
        """Return True if a wall separates the two adjacent cells."""
        return frozenset((tuple(a), tuple(b))) in self.walls

    def can_step(self, a: Coord, b: Coord) -> bool:
        """Return True if the path may move directly from ``a`` to ``b``."""
        return self.in_bounds(b) and is_adjacent(a, b) and not self.is_blocked(a, b)

    def wall_sides(self, coord: Coord) -> Tuple[str, ...]:
        """Sides of ``coord`` that carry a wall, for renderers."""
        row, col = coord
        return tuple(
            side for side, dr, dc in _SIDES
            if self.is_blocked((row, col), (row + dr, col + dc))
        )


def _validate_config(
    size: int,
    checkpoint_count: int,
    wall_count: int,
    wall_length_range: Tuple[int, int],
) -> None:
    if size < 1:
        raise BoardConfigError(f"board size must be at least 1, got {size}")
    if checkpoint_count < 1:
        raise BoardConfigError(f"at least one checkpoint is required, got {checkpoint_count}")
    if checkpoint_count > size * size:
        raise BoardConfigError(
            f"cannot place {checkpoint_count} checkpoints on a {size}x{size} grid"
        )
    if wall_count < 0:
        raise BoardConfigError(f"wall count cannot be negative, got {wall_count}")
    min_len, max_len = wall_length_range
    if not 1 <= min_len <= max_len:
        raise BoardConfigError(f"invalid wall length range {wall_length_range}")


def generate_walls(
    size: int,
    wall_count: int,
    min_len: int,
    max_len: int,
    rng: Optional[random.Random] = None,
) -> FrozenSet[Edge]:
    """Scatter ``wall_count`` straight wall runs over the grid.

    Each run starts on a random cell, picks a horizontal or vertical
    direction and a length in ``[min_len, max_len]``, and blocks one edge per
    consecutive cell pair. Runs that reach the border are cut short.
    """
    rng = rng or random.Random()
    edges: Set[Edge] = set()
    for _ in range(wall_count):
        row = rng.randrange(size)
        col = rng.randrange(size)
        horizontal = rng.random() < 0.5
        length = rng.randint(min_len, max_len)
        for j in range(length):
            if horizontal:
                a, b = (row, col + j), (row, col + j + 1)
            else:
                a, b = (row + j, col), (row + j + 1, col)
            if b[0] >= size or b[1] >= size:
                break
            edges.add(make_edge(a, b))
    return frozenset(edges)


def place_checkpoints(size: int, k: int, rng: Optional[random.Random] = None) -> Dict[int, Coord]:
    """Pick ``k`` distinct cells and label them 1..k in shuffle order."""
    if k > size * size:
        raise BoardConfigError(f"cannot place {k} checkpoints on a {size}x{size} grid")
    rng = rng or random.Random()
    positions = [(row, col) for row in range(size) for col in range(size)]
    rng.shuffle(positions)
    return {label: positions[label - 1] for label in range(1, k + 1)}


def generate_board(
    size: int,
    checkpoint_count: int,
    wall_count: int,
    wall_length_range: Tuple[int, int],
    rng: Optional[random.Random] = None,
) -> Board:
    """Generate a random board.

    The result is structurally valid but not guaranteed to be solvable.
    """
    _validate_config(size, checkpoint_count, wall_count, wall_length_range)
    rng = rng or random.Random()
    min_len, max_len = wall_length_range
    walls = generate_walls(size, wall_count, min_len, max_len, rng)
    checkpoints = place_checkpoints(size, checkpoint_count, rng)
    board = Board(size=size, checkpoints=checkpoints, walls=walls)
    logger.debug(
        "Generated %dx%d board with %d checkpoints and %d wall edges",
        size, size, checkpoint_count, len(walls),
    )
    return board
