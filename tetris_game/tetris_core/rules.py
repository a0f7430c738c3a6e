"""
Game Rules
==========

Handles spawn positioning, level progression and gravity cadence.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from tetris_game.tetris_core.config_loader import GameConfig, get_config
from tetris_game.tetris_core.piece import Piece, Point


class GameState(Enum):
    """States of the game state machine."""
    PAUSED = "paused"
    PLAYING = "playing"
    LEVEL_START_ANIMATING = "level_start_animating"
    GAME_OVER = "game_over"


@dataclass
class LevelProgress:
    """Result of level accounting after a placement."""
    level: int
    lines_this_level: int
    levels_gained: int

    @property
    def leveled_up(self) -> bool:
        return self.levels_gained > 0


class SpawnRules:
    """
    Handles spawn position calculation.

    New pieces are horizontally centred (rounding left) on the spawn row.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize spawn rules.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._spawn_y = config.board.spawn_y

    @property
    def spawn_y(self) -> int:
        """Row for spawning."""
        return self._spawn_y

    def spawn_position(self, piece: Piece, board_width: int) -> Point:
        """
        Get the spawn position of a piece.

        Args:
            piece: The piece to spawn.
            board_width: Width of the board in cells.

        Returns:
            Top-left corner of the piece's bounding box.
        """
        return Point((board_width - piece.width) // 2, self._spawn_y)

    def position_for_spawn(self, piece: Piece, board_width: int) -> Piece:
        """Copy of piece moved to its spawn position."""
        spawn = self.spawn_position(piece, board_width)
        return piece.with_position(spawn.x, spawn.y)


class LevelRules:
    """
    Handles level progression and tick cadence.

    - Every lines_per_level cleared lines advance one level, remainder carried
    - Levels stop at max_level; lines keep accumulating there
    - Gravity delay shrinks by speed_factor per level, floored at min_delay_ms
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize level rules.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._start_level = config.levels.start_level
        self._max_level = config.levels.max_level
        self._lines_per_level = config.levels.lines_per_level
        self._base_delay_ms = config.speed.base_delay_ms
        self._speed_factor = config.speed.speed_factor
        self._min_delay_ms = config.speed.min_delay_ms

    @property
    def start_level(self) -> int:
        return self._start_level

    @property
    def max_level(self) -> int:
        return self._max_level

    @property
    def lines_per_level(self) -> int:
        return self._lines_per_level

    def apply_lines(self, level: int, lines_this_level: int, cleared: int) -> LevelProgress:
        """
        Account cleared lines towards the next level.

        Args:
            level: Current level.
            lines_this_level: Lines accumulated since the last level-up.
            cleared: Lines cleared by the latest placement.

        Returns:
            LevelProgress with the new level and accumulator.
        """
        lines_this_level += max(0, cleared)
        gained = 0
        while level < self._max_level and lines_this_level >= self._lines_per_level:
            level += 1
            lines_this_level -= self._lines_per_level
            gained += 1
        return LevelProgress(level=level, lines_this_level=lines_this_level, levels_gained=gained)

    def tick_delay_ms(self, level: int) -> int:
        """
        Gravity interval for a level in milliseconds.

        The delay is multiplied by speed_factor once per level above 1 and
        truncated to an integer after every step.
        """
        delay = self._base_delay_ms
        for _ in range(1, level):
            delay = int(delay * self._speed_factor)
        return max(self._min_delay_ms, delay)


class GameRules:
    """
    Combined interface for all game rules.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize game rules.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self.spawn = SpawnRules(config)
        self.levels = LevelRules(config)
