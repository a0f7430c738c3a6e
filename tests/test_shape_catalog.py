"""
Tests for shape definitions, rotation and pieces.
"""

import pytest
import numpy as np

from tetris_game.tetris_core.shape_catalog import ShapeKind, get_catalog, rotate_clockwise
from tetris_game.tetris_core.piece import Piece, Point


@pytest.fixture
def catalog():
    return get_catalog()


class TestRotation:
    """Test the clockwise rotation primitive."""

    def test_rectangular_matrix(self):
        """R x C becomes C x R, cell (r, c) lands on (c, R - 1 - r)."""
        src = np.array([[1, 2, 3],
                        [4, 5, 6]])
        out = rotate_clockwise(src)

        assert out.shape == (3, 2)
        np.testing.assert_array_equal(out, [[4, 1], [5, 2], [6, 3]])

    def test_empty_matrix(self):
        """Empty input gives empty output."""
        out = rotate_clockwise(np.zeros((0, 0), dtype=np.int8))
        assert out.size == 0

    def test_t_piece_first_rotation(self, catalog):
        """T rotation 1 points right."""
        np.testing.assert_array_equal(
            catalog[ShapeKind.T].matrix(1),
            [[0, 1, 0], [0, 1, 1], [0, 1, 0]]
        )

    def test_four_rotations_return_to_start(self, catalog):
        """Four clockwise turns give back the original matrix."""
        for shape in catalog:
            matrix = shape.matrix(0)
            turned = matrix
            for _ in range(4):
                turned = rotate_clockwise(turned)
            np.testing.assert_array_equal(turned, matrix)
            np.testing.assert_array_equal(shape.matrix(4), matrix)


class TestShapeCatalog:
    """Test catalog contents and lookup."""

    def test_seven_kinds(self, catalog):
        """Catalog holds the seven tetrominoes in ordinal order."""
        assert len(catalog) == 7
        assert [t.name for t in catalog] == ["I", "O", "T", "S", "Z", "J", "L"]

    def test_color_ids(self, catalog):
        """Color id is ordinal + 1."""
        assert [t.color_id for t in catalog] == [1, 2, 3, 4, 5, 6, 7]

    def test_every_rotation_has_four_cells(self, catalog):
        """Each rotation occupies exactly four cells."""
        for shape in catalog:
            for r in range(4):
                assert int(shape.matrix(r).sum()) == 4
                assert len(shape.offsets(r)) == 4

    def test_matrices_are_read_only(self, catalog):
        """Shared rotation matrices cannot be mutated."""
        matrix = catalog[ShapeKind.L].matrix(0)
        with pytest.raises(ValueError):
            matrix[0, 0] = 1

    def test_invalid_ordinal(self, catalog):
        """Out of range ordinals raise ValueError."""
        with pytest.raises(ValueError):
            catalog[7]
        with pytest.raises(ValueError):
            catalog[-1]

    def test_get_by_name(self, catalog):
        """Lookup by letter is case-insensitive."""
        assert catalog.get_by_name("t").kind == ShapeKind.T
        assert catalog.get_by_name("X") is None


class TestPiece:
    """Test immutable piece values."""

    def test_spawn_defaults(self):
        """Spawned piece starts at rotation 0 at the origin."""
        piece = Piece.spawn(ShapeKind.S)
        assert piece.rotation == 0
        assert piece.position == Point(0, 0)
        assert piece.color_id == 4

    def test_moves_return_new_pieces(self):
        """Translation and rotation leave the original untouched."""
        piece = Piece.spawn(ShapeKind.J)
        moved = piece.translated(2, 3)
        turned = piece.rotated()

        assert piece.position == Point(0, 0)
        assert moved.position == Point(2, 3)
        assert turned.rotation == 1
        assert turned.position == piece.position

    def test_rotation_wraps(self):
        """Rotation index is kept modulo four."""
        piece = Piece.spawn(ShapeKind.Z)
        for _ in range(4):
            piece = piece.rotated()
        assert piece.rotation == 0
        assert piece.with_rotation(7).rotation == 3

    def test_cells_follow_position(self):
        """Occupied board cells are the offsets shifted by position."""
        piece = Piece.spawn(ShapeKind.O).with_position(4, 10)
        assert sorted(piece.cells()) == [(4, 10), (4, 11), (5, 10), (5, 11)]
        assert sorted(piece.cells(0, 1)) == [(4, 11), (4, 12), (5, 11), (5, 12)]

    def test_bounding_box(self):
        """I piece has a 4x4 box, O a 2x2 box."""
        assert Piece.spawn(ShapeKind.I).width == 4
        assert Piece.spawn(ShapeKind.I).height == 4
        assert Piece.spawn(ShapeKind.O).width == 2
