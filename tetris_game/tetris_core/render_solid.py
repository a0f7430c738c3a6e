"""
Solid Renderer
==============

Fast numpy-based renderer that draws the board as solid-color cells.
Landed cells are colored by piece id and the active piece is overlaid.
Uses numpy only, no pygame, so it works headless for rgb_array rendering.
"""

from __future__ import annotations

from typing import Optional, Tuple

import numpy as np

from tetris_game.tetris_core.config_loader import GameConfig, get_config
from tetris_game.tetris_core.state_snapshot import GameSnapshot

# Indexed by cell value: 0 = empty, 1..7 = piece color id
PIECE_COLORS: Tuple[Tuple[int, int, int], ...] = (
    (48, 48, 48),     # empty
    (0, 255, 255),    # I cyan
    (255, 255, 0),    # O yellow
    (128, 0, 128),    # T purple
    (0, 255, 0),      # S green
    (255, 0, 0),      # Z red
    (0, 0, 255),      # J blue
    (255, 165, 0),    # L orange
)

BACKGROUND_COLOR = (32, 32, 32)


def color_for(value: int) -> Tuple[int, int, int]:
    """
    RGB color for a cell value.

    Args:
        value: Cell value (0 empty, 1..7 color id).

    Returns:
        RGB tuple. Unknown values render as empty.
    """
    if 0 <= value < len(PIECE_COLORS):
        return PIECE_COLORS[value]
    return PIECE_COLORS[0]


class SolidRenderer:
    """
    Renders a game snapshot as a grid of solid-color squares.

    The board is scaled by an integer factor to fit the output image and
    centred; the remaining margin is filled with the background color.
    """

    def __init__(self, config: Optional[GameConfig] = None, show_grid: bool = True):
        """
        Initialize renderer.

        Args:
            config: Game configuration. Uses default if None.
            show_grid: Whether to separate cells with one-pixel grid lines.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._show_grid = show_grid
        self._palette = np.array(PIECE_COLORS, dtype=np.uint8)
        self._bg_color = np.array(BACKGROUND_COLOR, dtype=np.uint8)

    def color_for(self, value: int) -> Tuple[int, int, int]:
        return color_for(value)

    def render(
        self,
        snapshot: GameSnapshot,
        width: Optional[int] = None,
        height: Optional[int] = None
    ) -> np.ndarray:
        """
        Render the game state to an RGB array.

        Args:
            snapshot: Snapshot from GameController.snapshot().
            width: Output image width. Defaults to board width x cell_size.
            height: Output image height. Defaults to board height x cell_size.

        Returns:
            (height, width, 3) uint8 array.
        """
        cell = self._config.presentation.cell_size
        if width is None:
            width = self._config.board.width * cell
        if height is None:
            height = self._config.board.height * cell

        img = np.empty((height, width, 3), dtype=np.uint8)
        img[:] = self._bg_color

        grid = snapshot.composite_cells()
        board_h, board_w = grid.shape
        scale = max(1, min(width // board_w, height // board_h))

        # Palette lookup then upscale each cell to scale x scale pixels
        cells_rgb = self._palette[np.clip(grid, 0, len(PIECE_COLORS) - 1)]
        board_img = np.repeat(np.repeat(cells_rgb, scale, axis=0), scale, axis=1)

        if self._show_grid and scale >= 3:
            board_img[::scale, :] = self._bg_color
            board_img[:, ::scale] = self._bg_color

        # Centre and crop to the output image
        offset_x = max(0, (width - board_img.shape[1]) // 2)
        offset_y = max(0, (height - board_img.shape[0]) // 2)
        draw_h = min(board_img.shape[0], height - offset_y)
        draw_w = min(board_img.shape[1], width - offset_x)
        img[offset_y:offset_y + draw_h, offset_x:offset_x + draw_w] = board_img[:draw_h, :draw_w]

        return img

    def close(self) -> None:
        """Clean up resources (no-op for solid renderer)."""
        pass
