"""
Shape Catalog
=============

Static definitions of the seven tetromino kinds and their precomputed
rotation matrices.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Dict, List, Optional, Tuple, Union

import numpy as np


class ShapeKind(IntEnum):
    """The seven piece kinds. The integer value is the kind's ordinal."""
    I = 0
    O = 1
    T = 2
    S = 3
    Z = 4
    J = 5
    L = 6

    @property
    def color_id(self) -> int:
        """Board cell value used for pieces of this kind (1..7)."""
        return int(self) + 1


NUM_ROTATIONS = 4

# Canonical (rotation 0) matrices, square bounding boxes
BASE_MATRICES: Dict[ShapeKind, List[List[int]]] = {
    ShapeKind.I: [[0, 0, 0, 0],
                  [1, 1, 1, 1],
                  [0, 0, 0, 0],
                  [0, 0, 0, 0]],
    ShapeKind.O: [[1, 1],
                  [1, 1]],
    ShapeKind.T: [[0, 1, 0],
                  [1, 1, 1],
                  [0, 0, 0]],
    ShapeKind.S: [[0, 1, 1],
                  [1, 1, 0],
                  [0, 0, 0]],
    ShapeKind.Z: [[1, 1, 0],
                  [0, 1, 1],
                  [0, 0, 0]],
    ShapeKind.J: [[1, 0, 0],
                  [1, 1, 1],
                  [0, 0, 0]],
    ShapeKind.L: [[0, 0, 1],
                  [1, 1, 1],
                  [0, 0, 0]],
}


def rotate_clockwise(matrix: np.ndarray) -> np.ndarray:
    """
    Rotate a matrix 90 degrees clockwise.

    For an R x C source the result is C x R, and source cell (r, c) lands
    on destination cell (c, R - 1 - r).
    """
    if matrix.size == 0:
        return matrix.copy()
    return np.ascontiguousarray(matrix[::-1].T)


def _frozen(matrix: np.ndarray) -> np.ndarray:
    matrix = np.array(matrix, dtype=np.int8)
    matrix.setflags(write=False)
    return matrix


@dataclass(frozen=True)
class ShapeType:
    """
    Runtime representation of a piece kind.

    Holds the four rotation matrices (read-only) and the occupied cell
    offsets of each rotation.
    """
    kind: ShapeKind
    rotations: Tuple[np.ndarray, ...] = field(compare=False)
    cell_offsets: Tuple[Tuple[Tuple[int, int], ...], ...] = field(compare=False)

    @staticmethod
    def build(kind: ShapeKind) -> "ShapeType":
        """Precompute all rotations of a kind by successive clockwise turns."""
        rotations = []
        matrix = np.array(BASE_MATRICES[kind], dtype=np.int8)
        for _ in range(NUM_ROTATIONS):
            rotations.append(_frozen(matrix))
            matrix = rotate_clockwise(matrix)

        offsets = []
        for rotated in rotations:
            rows, cols = np.nonzero(rotated)
            # (col, row) pairs in row-major order
            offsets.append(tuple((int(c), int(r)) for r, c in zip(rows, cols)))

        return ShapeType(kind=kind, rotations=tuple(rotations), cell_offsets=tuple(offsets))

    @property
    def name(self) -> str:
        return self.kind.name

    @property
    def color_id(self) -> int:
        return self.kind.color_id

    def matrix(self, rotation: int) -> np.ndarray:
        """Occupancy matrix for a rotation index (taken mod 4)."""
        return self.rotations[rotation % NUM_ROTATIONS]

    def width(self, rotation: int) -> int:
        """Bounding box width at a rotation."""
        return int(self.matrix(rotation).shape[1])

    def height(self, rotation: int) -> int:
        """Bounding box height at a rotation."""
        return int(self.matrix(rotation).shape[0])

    def offsets(self, rotation: int) -> Tuple[Tuple[int, int], ...]:
        """Occupied (col, row) offsets inside the bounding box."""
        return self.cell_offsets[rotation % NUM_ROTATIONS]

    def __repr__(self) -> str:
        return f"ShapeType({self.kind.name})"


class ShapeCatalog:
    """
    Collection of all piece kinds.

    Provides indexed access by kind or ordinal.
    """

    def __init__(self):
        self._types: Tuple[ShapeType, ...] = tuple(
            ShapeType.build(kind) for kind in ShapeKind
        )

    def __len__(self) -> int:
        """Total number of piece kinds."""
        return len(self._types)

    def __getitem__(self, kind: Union[ShapeKind, int]) -> ShapeType:
        """Get shape type by kind or ordinal."""
        index = int(kind)
        if 0 <= index < len(self._types):
            return self._types[index]
        raise ValueError(f"Shape ordinal {index} out of range [0, {len(self._types)})")

    def __iter__(self):
        """Iterate over all shape types in ordinal order."""
        return iter(self._types)

    @property
    def kinds(self) -> Tuple[ShapeKind, ...]:
        return tuple(t.kind for t in self._types)

    def get_by_name(self, name: str) -> Optional[ShapeType]:
        """Get shape type by letter (case-insensitive)."""
        name_upper = name.upper()
        for shape_type in self._types:
            if shape_type.name == name_upper:
                return shape_type
        return None


# Module-level singleton
_cached_catalog: Optional[ShapeCatalog] = None


def get_catalog() -> ShapeCatalog:
    """Get the shape catalog singleton (built once per process)."""
    global _cached_catalog
    if _cached_catalog is None:
        _cached_catalog = ShapeCatalog()
    return _cached_catalog
