"""
Board
=====

Grid of landed cells. Sole authority on occupancy, collision, placement,
line clearing and score accumulation.
"""

from __future__ import annotations

from typing import List, Optional

import numpy as np

from tetris_game.tetris_core.config_loader import GameConfig, get_config
from tetris_game.tetris_core.piece import Piece
from tetris_game.tetris_core.scoring import ScoreEvent, ScoreTracker
from tetris_game.tetris_core.state_snapshot import BoardSnapshot

# Returned by cell_at for coordinates outside the grid (never a piece color)
OUT_OF_BOUNDS = -1

EMPTY = 0

# Rotation retries, in order: right, left, down
KICK_OFFSETS = ((1, 0), (-1, 0), (0, 1))


class Board:
    """
    Discrete 2D grid for piece placement.

    Cells hold 0 for empty and 1..7 for the color id of a landed piece.
    Row 0 is the top of the board.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        width: Optional[int] = None,
        height: Optional[int] = None
    ):
        """
        Initialize an empty board.

        Args:
            config: Game configuration. Uses default if None.
            width: Override board width from config.
            height: Override board height from config.
        """
        if config is None:
            config = get_config()

        self._config = config
        self.width = int(width if width is not None else config.board.width)
        self.height = int(height if height is not None else config.board.height)
        self._cells = np.zeros((self.height, self.width), dtype=np.int8)
        self._scorer = ScoreTracker(config)
        self._last_event: Optional[ScoreEvent] = None

    @property
    def score(self) -> int:
        """Accumulated score for this game."""
        return self._scorer.score

    @property
    def last_score_event(self) -> Optional[ScoreEvent]:
        """Scoring event of the most recent placement."""
        return self._last_event

    def reset(self) -> None:
        """Empty every cell and zero the score."""
        self._cells.fill(EMPTY)
        self._scorer.reset()
        self._last_event = None

    def is_inside(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def cell_at(self, x: int, y: int) -> int:
        """Cell value at (x, y), or OUT_OF_BOUNDS outside the grid."""
        if not self.is_inside(x, y):
            return OUT_OF_BOUNDS
        return int(self._cells[y, x])

    def can_place(self, piece: Piece, dx: int = 0, dy: int = 0) -> bool:
        """True if every occupied cell of piece, offset by (dx, dy), is inside and empty."""
        for x, y in piece.cells(dx, dy):
            if not self.is_inside(x, y):
                return False
            if self._cells[y, x] != EMPTY:
                return False
        return True

    def try_shift(self, piece: Piece, dx: int, dy: int) -> Optional[Piece]:
        """
        Translate a piece if the target position is legal.

        Returns:
            The moved piece, or None when the move is blocked.
        """
        if self.can_place(piece, dx, dy):
            return piece.translated(dx, dy)
        return None

    def rotate(self, piece: Piece) -> Piece:
        """
        Rotate a piece clockwise with a single-step kick.

        Tries the rotation in place, then shifted right, left and down by one
        cell. Returns the original piece when every attempt collides.
        """
        rotated = piece.rotated()
        if self.can_place(rotated):
            return rotated
        for dx, dy in KICK_OFFSETS:
            if self.can_place(rotated, dx, dy):
                return rotated.translated(dx, dy)
        return piece

    def place(self, piece: Piece) -> int:
        """
        Write a piece into the grid, clear full lines and update the score.

        The caller is responsible for checking that the piece has landed;
        cells under the piece are overwritten unconditionally.

        Returns:
            Number of lines cleared by this placement.
        """
        for x, y in piece.cells():
            if self.is_inside(x, y):
                self._cells[y, x] = piece.color_id

        lines = self._clear_full_lines()
        self._last_event = self._scorer.apply_lines(lines)
        return lines

    def _is_row_full(self, row: int) -> bool:
        return bool(np.all(self._cells[row] != EMPTY))

    def _clear_full_lines(self) -> int:
        """Remove full rows bottom-up, shifting the rows above down by one."""
        cleared = 0
        row = self.height - 1
        while row >= 0:
            if self._is_row_full(row):
                cleared += 1
                # Shift everything above down one row
                self._cells[1:row + 1] = self._cells[0:row].copy()
                self._cells[0].fill(EMPTY)
                # Same index now holds the row that was above it
            else:
                row -= 1
        return cleared

    def filled_cell_count(self) -> int:
        """Number of non-empty cells."""
        return int(np.count_nonzero(self._cells))

    def column_heights(self) -> List[int]:
        """Stack height of every column (0 for an empty column)."""
        heights = []
        for x in range(self.width):
            filled = np.flatnonzero(self._cells[:, x])
            heights.append(0 if filled.size == 0 else self.height - int(filled[0]))
        return heights

    def snapshot(self) -> BoardSnapshot:
        """Immutable copy of the grid and score."""
        return BoardSnapshot.from_array(self._cells, self.score)

    def load_cells(self, cells: np.ndarray) -> None:
        """Replace the grid contents (for tools and tests)."""
        cells = np.asarray(cells, dtype=np.int8)
        if cells.shape != (self.height, self.width):
            raise ValueError(
                f"Grid shape {cells.shape} does not match board {(self.height, self.width)}"
            )
        if cells.min() < 0 or cells.max() > 7:
            raise ValueError("Cell values must lie in 0..7")
        self._cells[:] = cells

    def __str__(self) -> str:
        return "\n".join(
            "".join("." if v == EMPTY else str(int(v)) for v in row)
            for row in self._cells
        )
