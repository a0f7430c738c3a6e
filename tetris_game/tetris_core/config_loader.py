"""
Configuration Loader
====================

Loads and validates game_config.yaml, providing typed access to all parameters.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

import yaml


@dataclass(frozen=True)
class BoardConfig:
    """Board geometry."""
    width: int                   # Cells per row
    height: int                  # Number of rows
    spawn_y: int                 # Row where new pieces appear


@dataclass(frozen=True)
class ScoringConfig:
    """Line clear scoring table."""
    line_clear_points: Tuple[int, int, int, int]


@dataclass(frozen=True)
class LevelConfig:
    """Level progression parameters."""
    start_level: int
    max_level: int
    lines_per_level: int


@dataclass(frozen=True)
class SpeedConfig:
    """Gravity cadence parameters."""
    base_delay_ms: int
    speed_factor: float
    min_delay_ms: int


@dataclass(frozen=True)
class RngConfig:
    """Piece randomizer parameters."""
    seed: Optional[int]


@dataclass(frozen=True)
class CapsConfig:
    """Episode limits for agent-facing environments."""
    max_steps: int


@dataclass(frozen=True)
class PresentationConfig:
    """Values consumed only by renderers and play tools."""
    level_start_animation_ms: int
    cell_size: int
    render_fps: int


@dataclass(frozen=True)
class GameConfig:
    """
    Complete game configuration loaded from YAML.

    All values are immutable to prevent accidental modification during runtime.
    """
    board: BoardConfig
    scoring: ScoringConfig
    levels: LevelConfig
    speed: SpeedConfig
    rng: RngConfig
    caps: CapsConfig
    presentation: PresentationConfig

    @property
    def board_shape(self) -> Tuple[int, int]:
        """(height, width) of the board grid."""
        return (self.board.height, self.board.width)

    @property
    def num_cells(self) -> int:
        """Total number of board cells."""
        return self.board.width * self.board.height


def _parse_points(points_data) -> Tuple[int, int, int, int]:
    """Parse the 4-entry line clear table from YAML."""
    if not isinstance(points_data, (list, tuple)) or len(points_data) != 4:
        raise ValueError(f"line_clear_points must have exactly 4 values, got {points_data}")
    return tuple(int(p) for p in points_data)


def _validate_config(config: GameConfig) -> None:
    """Validate configuration consistency."""
    if config.board.width < 4 or config.board.height < 4:
        raise ValueError(
            f"Board must be at least 4x4, got {config.board.width}x{config.board.height}"
        )

    if not 0 <= config.board.spawn_y < config.board.height:
        raise ValueError(f"spawn_y ({config.board.spawn_y}) must lie inside the board")

    if any(p < 0 for p in config.scoring.line_clear_points):
        raise ValueError(f"line_clear_points must be non-negative, got {config.scoring.line_clear_points}")

    levels = config.levels
    if levels.start_level < 1:
        raise ValueError(f"start_level must be >= 1, got {levels.start_level}")
    if levels.max_level < levels.start_level:
        raise ValueError(
            f"max_level ({levels.max_level}) must not be below start_level ({levels.start_level})"
        )
    if levels.lines_per_level <= 0:
        raise ValueError(f"lines_per_level must be positive, got {levels.lines_per_level}")

    speed = config.speed
    if not 0.0 < speed.speed_factor <= 1.0:
        raise ValueError(f"speed_factor must be in (0, 1], got {speed.speed_factor}")
    if speed.min_delay_ms <= 0:
        raise ValueError(f"min_delay_ms must be positive, got {speed.min_delay_ms}")
    if speed.min_delay_ms > speed.base_delay_ms:
        raise ValueError(
            f"min_delay_ms ({speed.min_delay_ms}) exceeds base_delay_ms ({speed.base_delay_ms})"
        )

    if config.caps.max_steps <= 0:
        raise ValueError(f"max_steps must be positive, got {config.caps.max_steps}")


def load_config(config_path: Optional[str] = None) -> GameConfig:
    """
    Load and validate game configuration from YAML.

    Args:
        config_path: Path to game_config.yaml. If None, uses default location.

    Returns:
        Validated GameConfig instance.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ValueError: If config validation fails.
    """
    if config_path is None:
        config_path = os.path.join(
            os.path.dirname(os.path.dirname(__file__)),
            "game_config.yaml"
        )

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r") as f:
        raw = yaml.safe_load(f) or {}

    board_data = raw.get("board", {})
    board = BoardConfig(
        width=int(board_data.get("width", 10)),
        height=int(board_data.get("height", 20)),
        spawn_y=int(board_data.get("spawn_y", 0))
    )

    scoring_data = raw.get("scoring", {})
    scoring = ScoringConfig(
        line_clear_points=_parse_points(scoring_data.get("line_clear_points", [40, 100, 300, 1200]))
    )

    levels_data = raw.get("levels", {})
    levels = LevelConfig(
        start_level=int(levels_data.get("start_level", 1)),
        max_level=int(levels_data.get("max_level", 20)),
        lines_per_level=int(levels_data.get("lines_per_level", 10))
    )

    speed_data = raw.get("speed", {})
    speed = SpeedConfig(
        base_delay_ms=int(speed_data.get("base_delay_ms", 1000)),
        speed_factor=float(speed_data.get("speed_factor", 0.80)),
        min_delay_ms=int(speed_data.get("min_delay_ms", 75))
    )

    rng_data = raw.get("rng", {})
    seed = rng_data.get("seed")
    rng = RngConfig(seed=None if seed is None else int(seed))

    caps_data = raw.get("caps", {})
    caps = CapsConfig(
        max_steps=int(caps_data.get("max_steps", 10000))
    )

    presentation_data = raw.get("presentation", {})
    presentation = PresentationConfig(
        level_start_animation_ms=int(presentation_data.get("level_start_animation_ms", 2000)),
        cell_size=int(presentation_data.get("cell_size", 30)),
        render_fps=int(presentation_data.get("render_fps", 30))
    )

    config = GameConfig(
        board=board,
        scoring=scoring,
        levels=levels,
        speed=speed,
        rng=rng,
        caps=caps,
        presentation=presentation
    )

    _validate_config(config)
    return config


# Module-level singleton for convenience
_cached_config: Optional[GameConfig] = None


def get_config() -> GameConfig:
    """Get the cached game configuration, loading if necessary."""
    global _cached_config
    if _cached_config is None:
        _cached_config = load_config()
    return _cached_config


def reload_config(config_path: Optional[str] = None) -> GameConfig:
    """Reload the configuration (useful for testing)."""
    global _cached_config
    _cached_config = load_config(config_path)
    return _cached_config
