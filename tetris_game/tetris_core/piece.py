"""
Piece
=====

Immutable tetromino value: kind, rotation index, board position and color id.
Every move or rotation produces a new Piece.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterator, NamedTuple, Tuple

import numpy as np

from tetris_game.tetris_core.shape_catalog import (
    NUM_ROTATIONS,
    ShapeKind,
    ShapeType,
    get_catalog,
)


class Point(NamedTuple):
    """Board coordinate, x to the right, y downward."""
    x: int
    y: int


@dataclass(frozen=True)
class Piece:
    """
    A single tetromino.

    position is the top-left corner of the bounding box on the board.
    """
    kind: ShapeKind
    rotation: int
    position: Point
    color_id: int

    @staticmethod
    def spawn(kind: ShapeKind) -> "Piece":
        """New piece of a kind at rotation 0, placed at the origin."""
        kind = ShapeKind(kind)
        return Piece(kind=kind, rotation=0, position=Point(0, 0), color_id=kind.color_id)

    @property
    def shape(self) -> ShapeType:
        return get_catalog()[self.kind]

    @property
    def x(self) -> int:
        return self.position.x

    @property
    def y(self) -> int:
        return self.position.y

    @property
    def width(self) -> int:
        """Bounding box width for the current rotation."""
        return self.shape.width(self.rotation)

    @property
    def height(self) -> int:
        """Bounding box height for the current rotation."""
        return self.shape.height(self.rotation)

    def current_matrix(self) -> np.ndarray:
        """Read-only occupancy matrix for (kind, rotation mod 4)."""
        return self.shape.matrix(self.rotation)

    def cells(self, dx: int = 0, dy: int = 0) -> Iterator[Tuple[int, int]]:
        """Board coordinates of occupied cells, optionally offset by (dx, dy)."""
        base_x = self.position.x + dx
        base_y = self.position.y + dy
        for col, row in self.shape.offsets(self.rotation):
            yield base_x + col, base_y + row

    def with_position(self, x: int, y: int) -> "Piece":
        return replace(self, position=Point(x, y))

    def with_rotation(self, rotation: int) -> "Piece":
        return replace(self, rotation=rotation % NUM_ROTATIONS)

    def translated(self, dx: int, dy: int) -> "Piece":
        return self.with_position(self.position.x + dx, self.position.y + dy)

    def rotated(self) -> "Piece":
        """Same piece turned 90 degrees clockwise, position unchanged."""
        return self.with_rotation(self.rotation + 1)

    def __repr__(self) -> str:
        return f"Piece({self.kind.name}, r={self.rotation}, x={self.position.x}, y={self.position.y})"
