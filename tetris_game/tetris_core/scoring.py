"""
Scoring System
==============

Applies line clear scores based on game configuration.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from tetris_game.tetris_core.config_loader import GameConfig, get_config


@dataclass
class ScoreEvent:
    """Record of a scoring event (one placement)."""
    points: int
    lines: int

    def __repr__(self) -> str:
        return f"ScoreEvent(lines={self.lines}, points={self.points})"


class ScoreTracker:
    """
    Tracks game score.

    Points depend only on the number of lines cleared by a single
    placement; there are no combos and no level multiplier.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize score tracker.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._table = config.scoring.line_clear_points
        self._score: int = 0
        self._clears: int = 0

    @property
    def score(self) -> int:
        """Current total score."""
        return self._score

    @property
    def clears(self) -> int:
        """Number of placements that cleared at least one line."""
        return self._clears

    def points_for_lines(self, lines: int) -> int:
        """
        Get the points awarded for clearing a number of lines at once.

        Args:
            lines: Lines cleared by one placement.

        Returns:
            Points from the scoring table (0 when nothing was cleared).
        """
        if lines <= 0:
            return 0
        return self._table[min(lines, len(self._table)) - 1]

    def apply_lines(self, lines: int) -> ScoreEvent:
        """
        Apply score for a placement and return the event.

        Args:
            lines: Lines cleared by the placement.

        Returns:
            ScoreEvent describing the points awarded.
        """
        points = self.points_for_lines(lines)
        self._score += points
        if lines > 0:
            self._clears += 1
        return ScoreEvent(points=points, lines=max(0, lines))

    def reset(self) -> None:
        """Reset score to zero."""
        self._score = 0
        self._clears = 0
