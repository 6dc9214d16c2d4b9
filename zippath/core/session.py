from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass
from typing import Callable, Optional

from zippath.core.board import Board, Coord
from zippath.core.engine import MoveOutcome, PathEngine
from zippath.core.levels import Level

logger = logging.getLogger(__name__)


@dataclass
class SessionSummary:
    """Snapshot of one puzzle attempt."""

    solved: bool
    moves: int
    refusals: int
    restarts: int
    elapsed_seconds: float
    covered_cells: int
    total_cells: int


class PuzzleSession:
    """Owns the board and path engine of the puzzle currently on screen.

    ``new_puzzle`` generates a fresh board from the level preset; ``reset``
    keeps the board and starts the attempt over. Both replace the engine
    outright, so no path state survives either call.
    """

    def __init__(
        self,
        level: Level,
        rng: Optional[random.Random] = None,
        on_win: Optional[Callable[[], None]] = None,
    ) -> None:
        """Create a session and generate its first board."""
        self._level = level
        self._rng = rng or random.Random()
        self._on_win = on_win
        self._board: Board = level.generate(self._rng)
        self._restarts = 0
        self._start_fresh_attempt()
        logger.info("New %s puzzle (%dx%d)", level.name, level.size, level.size)

    @property
    def level(self) -> Level:
        return self._level

    @property
    def board(self) -> Board:
        return self._board

    @property
    def engine(self) -> PathEngine:
        return self._engine

    @property
    def start_time(self) -> float:
        """Unix timestamp when the current attempt started."""
        return self._start_time

    @property
    def moves(self) -> int:
        """Number of accepted drag starts and path changes in this attempt."""
        return self._moves

    @property
    def refusals(self) -> int:
        return self._refusals

    @property
    def restarts(self) -> int:
        """Number of times the current board has been reset."""
        return self._restarts

    def new_puzzle(self, level: Optional[Level] = None) -> None:
        """Generate a new board, optionally switching to another preset."""
        if level is not None:
            self._level = level
        self._board = self._level.generate(self._rng)
        self._restarts = 0
        self._start_fresh_attempt()
        logger.info("New %s puzzle (%dx%d)", self._level.name, self._level.size, self._level.size)

    def reset(self) -> None:
        """Start the current board over with an empty path."""
        self._restarts += 1
        self._start_fresh_attempt()
        logger.info("Puzzle reset (restart %d)", self._restarts)

    def begin_drag(self, coord: Coord) -> bool:
        return self._count(self._engine.begin_drag(coord))

    def extend_to(self, coord: Coord) -> MoveOutcome:
        outcome = self._engine.extend_to(coord)
        if outcome is not MoveOutcome.UNCHANGED:
            self._count(outcome.changed)
        return outcome

    def end_drag(self) -> bool:
        return self._engine.end_drag()

    def is_solved(self) -> bool:
        return self._engine.won

    def elapsed_seconds(self) -> float:
        """Seconds spent on this attempt; stops counting once solved."""
        end = self._solved_at if self._solved_at is not None else time.time()
        return max(0.0, end - self._start_time)

    def summary(self) -> SessionSummary:
        return SessionSummary(
            solved=self.is_solved(),
            moves=self._moves,
            refusals=self._refusals,
            restarts=self._restarts,
            elapsed_seconds=self.elapsed_seconds(),
            covered_cells=len(self._engine.locked_path),
            total_cells=self._board.cell_count,
        )

    def _start_fresh_attempt(self) -> None:
        self._engine = PathEngine(self._board, on_win=self._handle_win)
        self._start_time = time.time()
        self._solved_at: Optional[float] = None
        self._moves = 0
        self._refusals = 0

    def _count(self, accepted: bool) -> bool:
        if accepted:
            self._moves += 1
        else:
            self._refusals += 1
        return accepted

    def _handle_win(self) -> None:
        self._solved_at = time.time()
        logger.info("Solved %s in %.1fs", self._level.name, self.elapsed_seconds())
        if self._on_win is not None:
            self._on_win()
