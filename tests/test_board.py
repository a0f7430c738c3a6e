"""
Tests for board collision, placement, kicks, line clears and scoring.
"""

import pytest
import numpy as np

from tetris_game.tetris_core.config_loader import load_config
from tetris_game.tetris_core.board import Board, OUT_OF_BOUNDS
from tetris_game.tetris_core.piece import Piece
from tetris_game.tetris_core.scoring import ScoreTracker
from tetris_game.tetris_core.shape_catalog import ShapeKind


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def board(config):
    return Board(config)


def vertical_i(x: int, y: int) -> Piece:
    """I piece in rotation 1 whose single column is board column x + 2."""
    return Piece.spawn(ShapeKind.I).with_rotation(1).with_position(x, y)


class TestCollision:
    """Test bounds and occupancy checks."""

    def test_empty_board(self, board):
        """New board is 10x20 and empty."""
        assert (board.width, board.height) == (10, 20)
        assert board.filled_cell_count() == 0
        assert board.score == 0

    def test_cell_at_out_of_bounds(self, board):
        """Coordinates outside the grid report OUT_OF_BOUNDS."""
        assert board.cell_at(-1, 0) == OUT_OF_BOUNDS
        assert board.cell_at(0, 20) == OUT_OF_BOUNDS
        assert board.cell_at(0, 0) == 0

    def test_can_place_bounds(self, board):
        """Pieces must be fully inside the grid."""
        piece = Piece.spawn(ShapeKind.O)
        assert board.can_place(piece)
        assert not board.can_place(piece, dx=-1)
        assert not board.can_place(piece.with_position(9, 0))
        assert not board.can_place(piece.with_position(0, 19))

    def test_can_place_occupied(self, board):
        """Pieces may not overlap landed cells."""
        board.place(Piece.spawn(ShapeKind.O).with_position(4, 18))
        probe = Piece.spawn(ShapeKind.O).with_position(5, 17)
        assert not board.can_place(probe)
        assert board.can_place(probe, dx=1)

    def test_try_shift(self, board):
        """Legal shifts return a moved piece, blocked shifts return None."""
        piece = Piece.spawn(ShapeKind.O).with_position(0, 0)
        moved = board.try_shift(piece, 1, 0)
        assert moved is not None and moved.x == 1
        assert board.try_shift(piece, -1, 0) is None
        assert board.try_shift(piece.with_position(0, 18), 0, 1) is None


class TestRotation:
    """Test rotation and single-step kicks."""

    def test_rotate_in_place(self, board):
        """Unobstructed rotation keeps the position."""
        piece = Piece.spawn(ShapeKind.T).with_position(4, 5)
        rotated = board.rotate(piece)
        assert rotated.rotation == 1
        assert rotated.position == piece.position

    def test_kick_right(self, board):
        """Blocked by the left wall, the piece shifts right by one."""
        piece = Piece.spawn(ShapeKind.T).with_rotation(1).with_position(-1, 5)
        assert board.can_place(piece)

        rotated = board.rotate(piece)
        assert rotated.rotation == 2
        assert (rotated.x, rotated.y) == (0, 5)

    def test_kick_left(self, board):
        """Blocked by the right wall, the piece shifts left by one."""
        piece = Piece.spawn(ShapeKind.T).with_rotation(3).with_position(8, 5)
        assert board.can_place(piece)

        rotated = board.rotate(piece)
        assert rotated.rotation == 0
        assert (rotated.x, rotated.y) == (7, 5)

    def test_kick_down(self, board):
        """When in place, right and left all collide, the piece drops one row."""
        cells = np.zeros((20, 10), dtype=np.int8)
        cells[0, 4:7] = 1
        board.load_cells(cells)
        piece = Piece.spawn(ShapeKind.I).with_position(3, 0)

        rotated = board.rotate(piece)
        assert rotated.rotation == 1
        assert (rotated.x, rotated.y) == (3, 1)

    def test_failed_rotation_returns_original(self, board):
        """No legal kick leaves the piece unchanged."""
        piece = vertical_i(-2, 5)
        assert board.can_place(piece)
        assert board.rotate(piece) == piece


class TestPlacement:
    """Test placement and line clearing."""

    def test_place_writes_color(self, board):
        """Placed cells hold the piece color id."""
        piece = Piece.spawn(ShapeKind.L).with_position(3, 10)
        lines = board.place(piece)

        assert lines == 0
        for x, y in piece.cells():
            assert board.cell_at(x, y) == ShapeKind.L.color_id
        assert board.filled_cell_count() == 4

    def test_o_piece_completes_bottom_row(self, board):
        """O piece fills row 19: one line, 40 points, row 18 shifts down."""
        cells = np.zeros((20, 10), dtype=np.int8)
        cells[19, :8] = 3
        cells[18, 0] = 5
        board.load_cells(cells)

        lines = board.place(Piece.spawn(ShapeKind.O).with_position(8, 18))

        assert lines == 1
        assert board.score == 40
        bottom = [board.cell_at(x, 19) for x in range(10)]
        assert bottom == [5, 0, 0, 0, 0, 0, 0, 0, 2, 2]
        assert all(board.cell_at(x, 18) == 0 for x in range(10))

    @pytest.mark.parametrize("num_lines,points", [(1, 40), (2, 100), (3, 300), (4, 1200)])
    def test_line_clear_points(self, board, num_lines, points):
        """Clearing 1..4 lines scores 40/100/300/1200."""
        cells = np.zeros((20, 10), dtype=np.int8)
        cells[20 - num_lines:, :9] = 1
        board.load_cells(cells)

        lines = board.place(vertical_i(7, 16))

        assert lines == num_lines
        assert board.score == points
        # Cells of the I above the cleared rows survive, shifted down
        assert board.filled_cell_count() == 4 - num_lines

    def test_non_adjacent_rows(self, board):
        """Two separated full rows both clear, the row between drops intact."""
        cells = np.zeros((20, 10), dtype=np.int8)
        cells[19, :9] = 1
        cells[17, :9] = 1
        cells[18, 0] = 6
        board.load_cells(cells)

        lines = board.place(vertical_i(7, 16))

        assert lines == 2
        assert board.score == 100
        assert [board.cell_at(x, 19) for x in (0, 5, 9)] == [6, 0, 1]
        assert [board.cell_at(x, 18) for x in (0, 9)] == [0, 1]
        assert board.filled_cell_count() == 3

    def test_no_clear_scores_zero(self, board):
        """A placement without full rows leaves the score alone."""
        board.place(Piece.spawn(ShapeKind.T).with_position(0, 18))
        assert board.score == 0
        assert board.last_score_event.points == 0

    def test_reset(self, board):
        """Reset empties the grid and zeroes the score."""
        cells = np.zeros((20, 10), dtype=np.int8)
        cells[19, :8] = 1
        board.load_cells(cells)
        board.place(Piece.spawn(ShapeKind.O).with_position(8, 18))
        board.reset()
        assert board.filled_cell_count() == 0
        assert board.score == 0


class TestBoardHelpers:
    """Test snapshots and tool helpers."""

    def test_snapshot_is_independent(self, board):
        """Snapshots do not observe later placements."""
        snap = board.snapshot()
        board.place(Piece.spawn(ShapeKind.O).with_position(0, 18))
        assert snap.filled_cell_count() == 0
        assert board.snapshot() != snap

    def test_column_heights(self, board):
        """Heights count from the floor to the topmost filled cell."""
        board.place(Piece.spawn(ShapeKind.O).with_position(0, 18))
        heights = board.column_heights()
        assert heights[:3] == [2, 2, 0]

    def test_load_cells_validation(self, board):
        """Wrong shape or cell values raise ValueError."""
        with pytest.raises(ValueError):
            board.load_cells(np.zeros((10, 10), dtype=np.int8))
        bad = np.zeros((20, 10), dtype=np.int8)
        bad[0, 0] = 9
        with pytest.raises(ValueError):
            board.load_cells(bad)


class TestScoreTracker:
    """Test the score table directly."""

    def test_points_table(self, config):
        """Table lookup, zero for nothing, capped at four lines."""
        tracker = ScoreTracker(config)
        assert tracker.points_for_lines(0) == 0
        assert tracker.points_for_lines(3) == 300
        assert tracker.points_for_lines(6) == 1200

    def test_accumulates(self, config):
        """Events add up and count clearing placements."""
        tracker = ScoreTracker(config)
        tracker.apply_lines(1)
        tracker.apply_lines(0)
        tracker.apply_lines(2)
        assert tracker.score == 140
        assert tracker.clears == 2
