"""
State Snapshot
==============

Immutable views of the game state and a publish-on-change registry that
hands them to observers (renderers, play tools, agents).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

import numpy as np

from tetris_game.tetris_core.piece import Piece
from tetris_game.tetris_core.rules import GameState


@dataclass(frozen=True)
class BoardSnapshot:
    """
    Value copy of the board grid.

    Rows are stored as tuples so the snapshot can never observe later
    mutation of the live grid.
    """
    width: int
    height: int
    cells: Tuple[Tuple[int, ...], ...]
    score: int

    @staticmethod
    def from_array(cells: np.ndarray, score: int) -> "BoardSnapshot":
        height, width = cells.shape
        return BoardSnapshot(
            width=int(width),
            height=int(height),
            cells=tuple(tuple(int(v) for v in row) for row in cells),
            score=int(score)
        )

    @staticmethod
    def empty(width: int, height: int) -> "BoardSnapshot":
        return BoardSnapshot(
            width=width,
            height=height,
            cells=tuple((0,) * width for _ in range(height)),
            score=0
        )

    def cell_at(self, x: int, y: int) -> int:
        """Cell value, or -1 outside the grid."""
        if 0 <= x < self.width and 0 <= y < self.height:
            return self.cells[y][x]
        return -1

    def as_array(self) -> np.ndarray:
        """Fresh (height, width) int8 array."""
        return np.array(self.cells, dtype=np.int8).reshape(self.height, self.width)

    def filled_cell_count(self) -> int:
        return sum(1 for row in self.cells for v in row if v != 0)


@dataclass(frozen=True)
class GameSnapshot:
    """
    Complete, self-consistent game state.

    A new snapshot is built after every state-affecting operation.
    """
    active_piece: Optional[Piece]
    next_piece: Optional[Piece]
    state: GameState
    score: int
    board: BoardSnapshot
    level: int
    lines_cleared_this_level: int
    total_lines_cleared: int

    def active_cells_mask(self) -> np.ndarray:
        """(height, width) int8 mask of the active piece's in-bounds cells."""
        mask = np.zeros((self.board.height, self.board.width), dtype=np.int8)
        if self.active_piece is not None:
            for x, y in self.active_piece.cells():
                if 0 <= x < self.board.width and 0 <= y < self.board.height:
                    mask[y, x] = 1
        return mask

    def composite_cells(self) -> np.ndarray:
        """Board grid with the active piece drawn in its color."""
        grid = self.board.as_array()
        if self.active_piece is not None:
            for x, y in self.active_piece.cells():
                if 0 <= x < self.board.width and 0 <= y < self.board.height:
                    grid[y, x] = self.active_piece.color_id
        return grid

    def to_obs_dict(self) -> Dict[str, np.ndarray]:
        """Convert to Gymnasium observation dictionary."""
        active = self.active_piece
        nxt = self.next_piece
        return {
            "board": self.composite_cells(),
            "active_cells": self.active_cells_mask(),
            "active_kind": np.array(0 if active is None else active.color_id, dtype=np.int32),
            "active_rotation": np.array(0 if active is None else active.rotation, dtype=np.int32),
            "active_x": np.array(0 if active is None else active.x, dtype=np.int32),
            "active_y": np.array(0 if active is None else active.y, dtype=np.int32),
            "next_kind": np.array(0 if nxt is None else nxt.color_id, dtype=np.int32),
            "level": np.array(self.level, dtype=np.int32),
            "score": np.array(self.score, dtype=np.int64),
            "lines_cleared_this_level": np.array(self.lines_cleared_this_level, dtype=np.int32),
        }


class SnapshotBuilder:
    """Builds game snapshots from live engine state."""

    def build(
        self,
        active_piece: Optional[Piece],
        next_piece: Optional[Piece],
        state: GameState,
        board: BoardSnapshot,
        level: int,
        lines_cleared_this_level: int,
        total_lines_cleared: int
    ) -> GameSnapshot:
        """Build a snapshot from current game state."""
        return GameSnapshot(
            active_piece=active_piece,
            next_piece=next_piece,
            state=state,
            score=board.score,
            board=board,
            level=level,
            lines_cleared_this_level=lines_cleared_this_level,
            total_lines_cleared=total_lines_cleared
        )


SnapshotCallback = Callable[[GameSnapshot], None]


class SnapshotPublisher:
    """
    Callback registry with publish-on-change semantics.

    New subscribers immediately receive the latest snapshot, then every
    subsequent snapshot that differs from its predecessor.
    """

    def __init__(self):
        self._subscribers: List[SnapshotCallback] = []
        self._latest: Optional[GameSnapshot] = None

    @property
    def latest(self) -> Optional[GameSnapshot]:
        """Most recently published snapshot."""
        return self._latest

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def subscribe(self, callback: SnapshotCallback) -> Callable[[], None]:
        """
        Register a callback.

        Args:
            callback: Called with each published snapshot.

        Returns:
            Function that removes the subscription.
        """
        self._subscribers.append(callback)
        if self._latest is not None:
            callback(self._latest)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def publish(self, snapshot: GameSnapshot) -> bool:
        """
        Store a snapshot and notify subscribers if it changed.

        Returns:
            True if subscribers were notified.
        """
        if snapshot == self._latest:
            return False
        self._latest = snapshot
        for callback in list(self._subscribers):
            callback(snapshot)
        return True

    def clear(self) -> None:
        """Drop all subscribers."""
        self._subscribers.clear()
