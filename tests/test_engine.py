"""Tests for zippath.core.engine – the drag/lock path state machine."""

from __future__ import annotations

from typing import List

import pytest

from zippath.core.board import Board, Coord, make_edge
from zippath.core.engine import CellStatus, MoveOutcome, PathEngine, PathState


# A boustrophedon walk over a 4x4 grid: (0,0) -> (0,3) -> (1,3) -> ... -> (3,0)
SNAKE_4X4: List[Coord] = [
    (0, 0), (0, 1), (0, 2), (0, 3),
    (1, 3), (1, 2), (1, 1), (1, 0),
    (2, 0), (2, 1), (2, 2), (2, 3),
    (3, 3), (3, 2), (3, 1), (3, 0),
]


def _drag(engine: PathEngine, cells: List[Coord]) -> List[MoveOutcome]:
    """Start a drag on the first cell and extend through the rest."""
    assert engine.begin_drag(cells[0])
    return [engine.extend_to(cell) for cell in cells[1:]]


def _assert_simple_connected(board: Board, path) -> None:
    assert len(set(path)) == len(path)
    for a, b in zip(path, path[1:]):
        assert board.can_step(a, b)


@pytest.fixture()
def two_point_board() -> Board:
    return Board(size=4, checkpoints={1: (0, 0), 2: (3, 0)})


@pytest.fixture()
def three_point_board() -> Board:
    return Board(size=4, checkpoints={1: (0, 0), 2: (0, 3), 3: (3, 0)})


@pytest.fixture()
def corner_board() -> Board:
    return Board(size=4, checkpoints={1: (0, 0), 2: (3, 3)})


# ---------------------------------------------------------------------------
# PathState
# ---------------------------------------------------------------------------

class TestPathState:
    def test_defaults(self):
        s = PathState()
        assert s.locked_path == []
        assert s.active_segment == []
        assert s.highest_locked_label == 0
        assert s.is_dragging is False
        assert s.drag_start_label == 0

    def test_copy_is_independent(self):
        s = PathState(locked_path=[(0, 0)], active_segment=[(0, 0), (0, 1)])
        c = s.copy()
        c.locked_path.append((1, 1))
        c.active_segment.clear()
        assert s.locked_path == [(0, 0)]
        assert s.active_segment == [(0, 0), (0, 1)]

    def test_copy_equal(self):
        s = PathState(locked_path=[(0, 0)], highest_locked_label=1)
        assert s.copy() == s


# ---------------------------------------------------------------------------
# MoveOutcome
# ---------------------------------------------------------------------------

class TestMoveOutcome:
    @pytest.mark.parametrize("outcome", [MoveOutcome.REFUSED, MoveOutcome.UNCHANGED])
    def test_not_changed(self, outcome):
        assert outcome.changed is False

    @pytest.mark.parametrize("outcome", [MoveOutcome.EXTENDED, MoveOutcome.TRUNCATED, MoveOutcome.LOCKED])
    def test_changed(self, outcome):
        assert outcome.changed is True


# ---------------------------------------------------------------------------
# begin_drag
# ---------------------------------------------------------------------------

class TestBeginDrag:
    def test_fresh_engine_is_idle(self, two_point_board: Board):
        e = PathEngine(two_point_board)
        assert e.is_dragging is False
        assert e.locked_path == ()
        assert e.active_segment == ()
        assert e.highest_locked_label == 0

    def test_start_on_checkpoint_one(self, two_point_board: Board):
        e = PathEngine(two_point_board)
        assert e.begin_drag((0, 0)) is True
        assert e.is_dragging is True
        assert e.active_segment == ((0, 0),)

    def test_refused_on_plain_cell(self, two_point_board: Board):
        e = PathEngine(two_point_board)
        before = e.state
        assert e.begin_drag((1, 1)) is False
        assert e.state == before

    def test_refused_on_other_checkpoint_when_nothing_locked(self, two_point_board: Board):
        e = PathEngine(two_point_board)
        before = e.state
        assert e.begin_drag((3, 0)) is False
        assert e.state == before

    def test_refused_out_of_bounds(self, two_point_board: Board):
        e = PathEngine(two_point_board)
        assert e.begin_drag((4, 0)) is False
        assert e.begin_drag((-1, 0)) is False

    def test_refused_while_dragging(self, two_point_board: Board):
        e = PathEngine(two_point_board)
        e.begin_drag((0, 0))
        e.extend_to((0, 1))
        before = e.state
        assert e.begin_drag((0, 0)) is False
        assert e.state == before

    def test_accepts_list_coordinates(self, two_point_board: Board):
        e = PathEngine(two_point_board)
        assert e.begin_drag([0, 0]) is True
        assert e.active_segment == ((0, 0),)

    def test_resumes_from_last_locked_checkpoint(self, three_point_board: Board):
        e = PathEngine(three_point_board)
        _drag(e, SNAKE_4X4[:4])
        assert e.highest_locked_label == 2
        assert e.begin_drag((0, 0)) is False  # checkpoint 1
        assert e.begin_drag((3, 0)) is False  # checkpoint 3
        assert e.begin_drag((0, 3)) is True   # checkpoint 2
        assert e.active_segment == ((0, 3),)

    def test_expected_start_label(self, three_point_board: Board):
        e = PathEngine(three_point_board)
        assert e.expected_start_label() == 1
        _drag(e, SNAKE_4X4[:4])
        assert e.expected_start_label() == 2


# ---------------------------------------------------------------------------
# extend_to
# ---------------------------------------------------------------------------

class TestExtendTo:
    def test_refused_when_idle(self, two_point_board: Board):
        e = PathEngine(two_point_board)
        assert e.extend_to((0, 1)) is MoveOutcome.REFUSED
        assert e.active_segment == ()

    def test_extend_adjacent(self, two_point_board: Board):
        e = PathEngine(two_point_board)
        e.begin_drag((0, 0))
        assert e.extend_to((0, 1)) is MoveOutcome.EXTENDED
        assert e.extend_to((1, 1)) is MoveOutcome.EXTENDED
        assert e.active_segment == ((0, 0), (0, 1), (1, 1))

    def test_refused_non_adjacent(self, two_point_board: Board):
        e = PathEngine(two_point_board)
        e.begin_drag((0, 0))
        before = e.state
        assert e.extend_to((0, 2)) is MoveOutcome.REFUSED
        assert e.extend_to((1, 1)) is MoveOutcome.REFUSED  # diagonal
        assert e.state == before

    def test_refused_out_of_bounds(self, two_point_board: Board):
        e = PathEngine(two_point_board)
        e.begin_drag((0, 0))
        assert e.extend_to((-1, 0)) is MoveOutcome.REFUSED
        assert e.extend_to((0, -1)) is MoveOutcome.REFUSED

    def test_refused_across_wall(self):
        board = Board(size=4, checkpoints={1: (0, 0), 2: (3, 0)}, walls=frozenset({make_edge((0, 0), (0, 1))}))
        e = PathEngine(board)
        e.begin_drag((0, 0))
        before = e.state
        assert e.extend_to((0, 1)) is MoveOutcome.REFUSED
        assert e.state == before
        assert e.extend_to((1, 0)) is MoveOutcome.EXTENDED

    def test_wall_blocks_both_directions(self):
        board = Board(size=2, checkpoints={1: (0, 0), 2: (1, 0)}, walls=frozenset({make_edge((0, 1), (1, 1))}))
        e = PathEngine(board)
        _drag(e, [(0, 0), (0, 1)])
        assert e.extend_to((1, 1)) is MoveOutcome.REFUSED

    def test_refused_out_of_sequence_checkpoint(self, three_point_board: Board):
        e = PathEngine(three_point_board)
        # Walk down column 0 toward checkpoint 3 before 2 has been reached.
        _drag(e, [(0, 0), (1, 0), (2, 0)])
        before = e.state
        assert e.extend_to((3, 0)) is MoveOutcome.REFUSED
        assert e.state == before

    def test_revisiting_anchor_backtracks(self):
        board = Board(size=3, checkpoints={1: (0, 0), 2: (2, 2)})
        e = PathEngine(board)
        _drag(e, [(0, 0), (0, 1), (1, 1), (1, 0)])
        # (0,0) is the anchor: revisiting it backtracks rather than re-entering.
        assert e.extend_to((0, 0)) is MoveOutcome.TRUNCATED
        assert e.active_segment == ((0, 0),)

    def test_last_cell_again_is_unchanged(self, two_point_board: Board):
        e = PathEngine(two_point_board)
        _drag(e, [(0, 0), (0, 1)])
        before = e.state
        assert e.extend_to((0, 1)) is MoveOutcome.UNCHANGED
        assert e.state == before

    def test_backtrack_truncates_after_revisited_cell(self, two_point_board: Board):
        e = PathEngine(two_point_board)
        _drag(e, [(0, 0), (0, 1), (0, 2), (1, 2), (1, 1)])
        assert e.extend_to((0, 1)) is MoveOutcome.TRUNCATED
        assert e.active_segment == ((0, 0), (0, 1))

    def test_backtrack_does_not_extend_in_same_call(self, two_point_board: Board):
        e = PathEngine(two_point_board)
        _drag(e, [(0, 0), (0, 1), (0, 2)])
        e.extend_to((0, 1))
        assert e.active_segment[-1] == (0, 1)
        assert len(e.active_segment) == 2

    def test_backtrack_then_new_direction(self, two_point_board: Board):
        e = PathEngine(two_point_board)
        _drag(e, [(0, 0), (0, 1), (0, 2)])
        e.extend_to((0, 1))
        assert e.extend_to((1, 1)) is MoveOutcome.EXTENDED
        assert e.active_segment == ((0, 0), (0, 1), (1, 1))

    def test_cannot_enter_locked_cell(self, three_point_board: Board):
        e = PathEngine(three_point_board)
        _drag(e, SNAKE_4X4[:4])
        e.begin_drag((0, 3))
        before = e.state
        assert e.extend_to((0, 2)) is MoveOutcome.REFUSED
        assert e.state == before

    def test_segment_stays_simple_and_connected(self, two_point_board: Board):
        e = PathEngine(two_point_board)
        e.begin_drag((0, 0))
        for cell in [(0, 1), (1, 1), (1, 0), (0, 0), (0, 1), (2, 1), (1, 1), (1, 2), (0, 2), (0, 1)]:
            e.extend_to(cell)
            _assert_simple_connected(two_point_board, e.active_segment)


# ---------------------------------------------------------------------------
# Lock events
# ---------------------------------------------------------------------------

class TestLockEvent:
    def test_reaching_next_checkpoint_locks(self, three_point_board: Board):
        e = PathEngine(three_point_board)
        outcomes = _drag(e, SNAKE_4X4[:4])
        assert outcomes[-1] is MoveOutcome.LOCKED
        assert e.locked_path == tuple(SNAKE_4X4[:4])
        assert e.highest_locked_label == 2
        assert e.active_segment == ()
        assert e.is_dragging is False

    def test_lock_increments_label_by_one(self, three_point_board: Board):
        e = PathEngine(three_point_board)
        _drag(e, SNAKE_4X4[:4])
        assert e.highest_locked_label == 2
        _drag(e, SNAKE_4X4[3:])
        assert e.highest_locked_label == 3

    def test_second_lock_skips_shared_anchor(self, three_point_board: Board):
        e = PathEngine(three_point_board)
        _drag(e, SNAKE_4X4[:4])
        _drag(e, SNAKE_4X4[3:])
        assert e.locked_path == tuple(SNAKE_4X4)
        _assert_simple_connected(three_point_board, e.locked_path)

    def test_lock_never_shrinks_locked_path(self, three_point_board: Board):
        e = PathEngine(three_point_board)
        _drag(e, SNAKE_4X4[:4])
        length = len(e.locked_path)
        _drag(e, SNAKE_4X4[3:])
        assert len(e.locked_path) > length

    def test_extend_after_lock_refused(self, three_point_board: Board):
        e = PathEngine(three_point_board)
        _drag(e, SNAKE_4X4[:4])
        assert e.extend_to((1, 3)) is MoveOutcome.REFUSED


# ---------------------------------------------------------------------------
# end_drag
# ---------------------------------------------------------------------------

class TestEndDrag:
    def test_discards_active_segment(self, two_point_board: Board):
        e = PathEngine(two_point_board)
        _drag(e, [(0, 0), (0, 1), (0, 2)])
        assert e.end_drag() is True
        assert e.active_segment == ()
        assert e.is_dragging is False

    def test_preserves_locked_path(self, three_point_board: Board):
        e = PathEngine(three_point_board)
        _drag(e, SNAKE_4X4[:4])
        locked = e.locked_path
        _drag(e, SNAKE_4X4[3:8])
        assert e.end_drag() is True
        assert e.locked_path == locked
        assert e.highest_locked_label == 2

    def test_idle_release_is_noop(self, two_point_board: Board):
        e = PathEngine(two_point_board)
        before = e.state
        assert e.end_drag() is False
        assert e.state == before

    def test_can_restart_after_release(self, two_point_board: Board):
        e = PathEngine(two_point_board)
        _drag(e, [(0, 0), (0, 1)])
        e.end_drag()
        assert e.begin_drag((0, 0)) is True
        assert e.active_segment == ((0, 0),)


# ---------------------------------------------------------------------------
# check_win / finish
# ---------------------------------------------------------------------------

class TestWin:
    def test_full_snake_wins(self, two_point_board: Board):
        e = PathEngine(two_point_board)
        outcomes = _drag(e, SNAKE_4X4)
        assert outcomes[-1] is MoveOutcome.LOCKED
        assert len(e.locked_path) == 16
        assert e.check_win() is True
        assert e.won is True
        assert e.is_finished is True
        assert e.is_stuck is False

    def test_win_over_several_locks(self, three_point_board: Board):
        e = PathEngine(three_point_board)
        _drag(e, SNAKE_4X4[:4])
        assert e.won is False
        _drag(e, SNAKE_4X4[3:])
        assert e.won is True

    def test_on_win_called_once(self, two_point_board: Board):
        calls = []
        e = PathEngine(two_point_board, on_win=lambda: calls.append(True))
        _drag(e, SNAKE_4X4)
        assert calls == [True]

    def test_reaching_last_checkpoint_with_cell_missing(self, corner_board: Board):
        # Covers 15 of 16 cells, skipping (3, 2).
        path = SNAKE_4X4[:8] + [(2, 0), (3, 0), (3, 1), (2, 1), (2, 2), (2, 3), (3, 3)]
        calls = []
        e = PathEngine(corner_board, on_win=lambda: calls.append(True))
        outcomes = _drag(e, path)
        assert outcomes[-1] is MoveOutcome.LOCKED
        assert len(e.locked_path) == 15
        assert e.check_win() is False
        assert e.won is False
        assert e.is_stuck is True
        assert calls == []

    def test_incomplete_path_not_won(self, three_point_board: Board):
        e = PathEngine(three_point_board)
        _drag(e, SNAKE_4X4[:4])
        assert e.check_win() is False

    def test_check_win_is_pure(self, two_point_board: Board):
        e = PathEngine(two_point_board)
        _drag(e, SNAKE_4X4)
        before = e.state
        e.check_win()
        e.check_win()
        assert e.state == before

    def test_out_of_order_locked_path_not_won(self, three_point_board: Board):
        e = PathEngine(three_point_board)
        # Reversed snake covers the board but meets checkpoint 3 first.
        e._state.locked_path = list(reversed(SNAKE_4X4))
        assert e.check_win() is False
        e._state.locked_path = list(SNAKE_4X4)
        assert e.check_win() is True

    def test_finished_puzzle_refuses_new_drag(self, two_point_board: Board):
        e = PathEngine(two_point_board)
        _drag(e, SNAKE_4X4)
        before = e.state
        assert e.begin_drag((3, 0)) is False
        assert e.begin_drag((0, 0)) is False
        assert e.extend_to((3, 1)) is MoveOutcome.REFUSED
        assert e.state == before


# ---------------------------------------------------------------------------
# Render-facing accessors
# ---------------------------------------------------------------------------

class TestCellStatus:
    def test_all_empty_initially(self, two_point_board: Board):
        e = PathEngine(two_point_board)
        assert all(e.cell_status(c) is CellStatus.EMPTY for c in two_point_board.cells())
        assert e.anchor is None

    def test_anchor_and_in_progress(self, two_point_board: Board):
        e = PathEngine(two_point_board)
        _drag(e, [(0, 0), (0, 1)])
        assert e.anchor == (0, 0)
        assert e.cell_status((0, 0)) is CellStatus.ANCHOR
        assert e.cell_status((0, 1)) is CellStatus.IN_PROGRESS
        assert e.cell_status((1, 1)) is CellStatus.EMPTY

    def test_committed_after_lock(self, three_point_board: Board):
        e = PathEngine(three_point_board)
        _drag(e, SNAKE_4X4[:4])
        assert e.cell_status((0, 1)) is CellStatus.COMMITTED
        assert e.anchor is None

    def test_resumed_anchor_overrides_committed(self, three_point_board: Board):
        e = PathEngine(three_point_board)
        _drag(e, SNAKE_4X4[:4])
        e.begin_drag((0, 3))
        assert e.cell_status((0, 3)) is CellStatus.ANCHOR
        e.end_drag()
        assert e.cell_status((0, 3)) is CellStatus.COMMITTED

    def test_accessors_return_copies(self, two_point_board: Board):
        e = PathEngine(two_point_board)
        e.begin_drag((0, 0))
        snapshot = e.state
        snapshot.active_segment.append((9, 9))
        assert e.active_segment == ((0, 0),)
        assert e.board is two_point_board
