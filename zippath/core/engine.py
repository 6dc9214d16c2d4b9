from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional, Tuple

from zippath.core.board import Board, Coord

logger = logging.getLogger(__name__)


class MoveOutcome(Enum):
    """What an ``extend_to`` call did to the path."""

    REFUSED = "refused"
    UNCHANGED = "unchanged"
    EXTENDED = "extended"
    TRUNCATED = "truncated"
    LOCKED = "locked"

    @property
    def changed(self) -> bool:
        return self not in (MoveOutcome.REFUSED, MoveOutcome.UNCHANGED)


class CellStatus(Enum):
    """How a renderer should show a cell."""

    EMPTY = "empty"
    COMMITTED = "committed"
    IN_PROGRESS = "in_progress"
    ANCHOR = "anchor"


@dataclass
class PathState:
    """Mutable path of one puzzle attempt."""

    locked_path: List[Coord] = field(default_factory=list)
    active_segment: List[Coord] = field(default_factory=list)
    highest_locked_label: int = 0
    is_dragging: bool = False
    drag_start_label: int = 0

    def copy(self) -> PathState:
        return PathState(
            locked_path=list(self.locked_path),
            active_segment=list(self.active_segment),
            highest_locked_label=self.highest_locked_label,
            is_dragging=self.is_dragging,
            drag_start_label=self.drag_start_label,
        )


class PathEngine:
    """Drag-to-draw state machine for the zip puzzle.

    The player starts a drag on a checkpoint, walks the drag through adjacent
    cells and commits the walked segment by reaching the next checkpoint in
    sequence. Invalid input is never an error: every operation either changes
    the state or leaves it exactly as it was.

    States:
      * **Idle** – no drag in progress.
      * **Dragging** – ``active_segment`` is being built; it returns to Idle
        on release or when the segment reaches the next checkpoint.
    """

    def __init__(self, board: Board, on_win: Optional[Callable[[], None]] = None) -> None:
        self._board = board
        self._state = PathState()
        self._locked_cells: set[Coord] = set()
        self._on_win = on_win
        self._won = False

    # -- read accessors ---------------------------------------------------

    @property
    def board(self) -> Board:
        return self._board

    @property
    def state(self) -> PathState:
        """Snapshot of the current path state."""
        return self._state.copy()

    @property
    def locked_path(self) -> Tuple[Coord, ...]:
        return tuple(self._state.locked_path)

    @property
    def active_segment(self) -> Tuple[Coord, ...]:
        return tuple(self._state.active_segment)

    @property
    def is_dragging(self) -> bool:
        return self._state.is_dragging

    @property
    def highest_locked_label(self) -> int:
        return self._state.highest_locked_label

    @property
    def won(self) -> bool:
        return self._won

    @property
    def is_finished(self) -> bool:
        """True once the last checkpoint has been locked, won or not."""
        return self._state.highest_locked_label == self._board.checkpoint_count

    @property
    def is_stuck(self) -> bool:
        """Last checkpoint locked without covering the board; only a reset helps."""
        return self.is_finished and not self._won

    @property
    def anchor(self) -> Optional[Coord]:
        """Checkpoint cell the current drag started from."""
        if not self._state.is_dragging or not self._state.active_segment:
            return None
        return self._state.active_segment[0]

    def expected_start_label(self) -> int:
        """Label of the checkpoint a new drag has to start on."""
        return self._state.highest_locked_label or 1

    def cell_status(self, coord: Coord) -> CellStatus:
        coord = tuple(coord)
        if coord == self.anchor:
            return CellStatus.ANCHOR
        if coord in self._state.active_segment:
            return CellStatus.IN_PROGRESS
        if coord in self._locked_cells:
            return CellStatus.COMMITTED
        return CellStatus.EMPTY

    # -- transitions ------------------------------------------------------

    def begin_drag(self, coord: Coord) -> bool:
        """Start a drag on ``coord``. Returns False if the start is not allowed."""
        coord = tuple(coord)
        state = self._state
        if state.is_dragging or self.is_finished or not self._board.in_bounds(coord):
            return False
        label = self._board.label_at(coord)
        if label == 0 or label != self.expected_start_label():
            logger.debug("Refused drag start at %s (label %d)", coord, label)
            return False

        state.is_dragging = True
        state.drag_start_label = label
        state.active_segment = [coord]
        return True

    def extend_to(self, coord: Coord) -> MoveOutcome:
        """Move the drag into ``coord``: backtrack, extend, or lock a checkpoint."""
        state = self._state
        if not state.is_dragging:
            return MoveOutcome.REFUSED
        coord = tuple(coord)
        segment = state.active_segment

        if coord in segment:
            index = segment.index(coord)
            if index == len(segment) - 1:
                return MoveOutcome.UNCHANGED
            del segment[index + 1:]
            return MoveOutcome.TRUNCATED

        last = segment[-1]
        if not self._board.can_step(last, coord) or coord in self._locked_cells:
            logger.debug("Refused move %s -> %s", last, coord)
            return MoveOutcome.REFUSED

        label = self._board.label_at(coord)
        target = self._running_max() + 1
        if label not in (0, target):
            logger.debug("Refused out-of-sequence checkpoint %d at %s", label, coord)
            return MoveOutcome.REFUSED

        segment.append(coord)
        if label == target:
            self._lock(label)
            return MoveOutcome.LOCKED
        return MoveOutcome.EXTENDED

    def end_drag(self) -> bool:
        """Release the pointer: drop the unlocked segment, keep locked progress."""
        state = self._state
        if not state.is_dragging:
            return False
        state.is_dragging = False
        state.drag_start_label = 0
        state.active_segment = []
        return True

    def check_win(self) -> bool:
        """Return True if the locked path solves the puzzle."""
        locked = self._state.locked_path
        if len(locked) != self._board.cell_count:
            return False
        positions = {cell: index for index, cell in enumerate(locked)}
        last_index = -1
        for label in range(1, self._board.checkpoint_count + 1):
            index = positions.get(self._board.checkpoints[label])
            if index is None or index <= last_index:
                return False
            last_index = index
        return True

    # -- internals --------------------------------------------------------

    def _running_max(self) -> int:
        state = self._state
        return max(
            [state.drag_start_label or 1]
            + [self._board.label_at(cell) for cell in state.active_segment]
        )

    def _lock(self, label: int) -> None:
        state = self._state
        segment = state.active_segment
        if state.locked_path and segment[0] == state.locked_path[-1]:
            segment = segment[1:]
        state.locked_path.extend(segment)
        self._locked_cells.update(segment)
        state.highest_locked_label = label
        state.active_segment = []
        state.is_dragging = False
        state.drag_start_label = 0
        logger.info(
            "Locked checkpoint %d (%d/%d cells)",
            label, len(state.locked_path), self._board.cell_count,
        )

        if label == self._board.checkpoint_count and self.check_win():
            self._won = True
            logger.info("Puzzle solved")
            if self._on_win is not None:
                self._on_win()
