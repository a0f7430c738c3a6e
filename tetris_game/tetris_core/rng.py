"""
RNG - Uniform Piece Randomizer
==============================

Picks each new piece kind uniformly and independently. There is no bag and
no repeat protection, so droughts and repeats are possible.
"""

from __future__ import annotations

import random
from typing import List, Optional

from tetris_game.tetris_core.config_loader import GameConfig, get_config
from tetris_game.tetris_core.piece import Piece
from tetris_game.tetris_core.shape_catalog import ShapeKind, get_catalog


class PieceRandomizer:
    """
    Uniform random source of piece kinds.

    Seeded randomizers produce the same sequence for the same seed.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None
    ):
        """
        Initialize randomizer.

        Args:
            config: Game configuration. Uses default if None.
            seed: Random seed for reproducibility. Falls back to the
                configured seed, random if both are None.
        """
        if config is None:
            config = get_config()

        self._config = config
        if seed is None:
            seed = config.rng.seed
        self._seed = seed
        self._rng = random.Random(seed)
        self._kinds: List[ShapeKind] = list(get_catalog().kinds)

    @property
    def seed(self) -> Optional[int]:
        """Seed of the current sequence."""
        return self._seed

    def next_kind(self) -> ShapeKind:
        """Draw the next kind."""
        return self._rng.choice(self._kinds)

    def next_piece(self) -> Piece:
        """Draw the next kind as a freshly spawned piece."""
        return Piece.spawn(self.next_kind())

    def reset(self, seed: Optional[int] = None) -> None:
        """
        Restart the sequence.

        Args:
            seed: New random seed. Keeps current if None.
        """
        if seed is not None:
            self._seed = seed
        self._rng = random.Random(self._seed)
