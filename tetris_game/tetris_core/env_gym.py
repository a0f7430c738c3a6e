"""
Gymnasium Environment Wrapper
=============================

Provides a standard Gymnasium interface to the Tetris engine.
Reward is always 0.0 - agents must compute their own from info.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Any, Dict, Optional, Tuple, Union
import numpy as np

import gymnasium as gym
from gymnasium import spaces

from tetris_game.tetris_core.config_loader import GameConfig, load_config
from tetris_game.tetris_core.game import GameController
from tetris_game.tetris_core.render_solid import SolidRenderer
from tetris_game.tetris_core.rules import GameState
from tetris_game.tetris_core.state_snapshot import GameSnapshot


class Action(IntEnum):
    """Discrete actions, one player command per step."""
    NOOP = 0
    LEFT = 1
    RIGHT = 2
    ROTATE = 3
    DROP = 4


class TetrisEnv(gym.Env):
    """
    Tetris as a Gymnasium environment.

    Action Space:
        Discrete(5): NOOP, LEFT, RIGHT, ROTATE, DROP.
        Every action except DROP is followed by one gravity tick, so the
        active piece falls one row per step.

    Observation Space:
        Dict with the board (active piece overlaid), active piece mask and
        pose, next piece kind, level, score and level progress.

    Reward:
        Always 0.0. Agents must compute their own reward from the info dict.

    Info:
        Contains score, delta_score, lines_cleared, level, state, etc.
    """

    metadata = {
        "render_modes": ["rgb_array"],
        "render_fps": 30,
    }

    def __init__(
        self,
        config_path: Optional[str] = None,
        render_mode: Optional[str] = None,
        debug: bool = False,
    ):
        """
        Initialize Tetris environment.

        Args:
            config_path: Path to game_config.yaml. Uses default if None.
            render_mode: "rgb_array" for numpy images, None for headless.
            debug: If True, enables verbose debug output for agent development.
        """
        super().__init__()

        if render_mode is not None and render_mode not in self.metadata["render_modes"]:
            raise ValueError(f"Unsupported render_mode: {render_mode}")

        self._config = load_config(config_path)
        self.metadata = dict(self.metadata, render_fps=self._config.presentation.render_fps)

        self.render_mode = render_mode
        self._debug = debug

        # Image dimensions follow the configured cell size
        cell = self._config.presentation.cell_size
        self._img_width = self._config.board.width * cell
        self._img_height = self._config.board.height * cell

        self._game = GameController(config=self._config, debug=debug)
        self._renderer: Optional[SolidRenderer] = None
        self._steps = 0

        self.action_space = spaces.Discrete(len(Action))
        self.observation_space = self._build_observation_space()

        if self._debug:
            print(f"[DEBUG] TetrisEnv initialized")
            print(f"[DEBUG]   Board: {self._config.board.width}x{self._config.board.height}")
            print(f"[DEBUG]   Max steps: {self._config.caps.max_steps}")

    def _build_observation_space(self) -> spaces.Dict:
        """Build the observation space definition."""
        board_shape = self._config.board_shape
        levels = self._config.levels
        num_colors = 7

        return spaces.Dict({
            "board": spaces.Box(low=0, high=num_colors, shape=board_shape, dtype=np.int8),
            "active_cells": spaces.Box(low=0, high=1, shape=board_shape, dtype=np.int8),
            "active_kind": spaces.Box(low=0, high=num_colors, shape=(), dtype=np.int32),
            "active_rotation": spaces.Box(low=0, high=3, shape=(), dtype=np.int32),
            "active_x": spaces.Box(low=-4, high=self._config.board.width, shape=(), dtype=np.int32),
            "active_y": spaces.Box(low=-4, high=self._config.board.height, shape=(), dtype=np.int32),
            "next_kind": spaces.Box(low=0, high=num_colors, shape=(), dtype=np.int32),
            "level": spaces.Box(low=levels.start_level, high=levels.max_level, shape=(), dtype=np.int32),
            "score": spaces.Box(low=0, high=np.iinfo(np.int64).max, shape=(), dtype=np.int64),
            "lines_cleared_this_level": spaces.Box(
                low=0, high=np.iinfo(np.int32).max, shape=(), dtype=np.int32
            ),
        })

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None
    ) -> Tuple[Dict[str, np.ndarray], Dict[str, Any]]:
        """
        Reset the environment and start a new game.

        Args:
            seed: Random seed for reproducibility.
            options: Additional options (unused).

        Returns:
            (observation, info) tuple.
        """
        super().reset(seed=seed)

        # Derive the piece sequence from the env RNG so unseeded resets after
        # a seeded one stay reproducible
        game_seed = int(self.np_random.integers(0, 2**31 - 1))
        snapshot = self._game.start_game(seed=game_seed)
        self._steps = 0

        obs = snapshot.to_obs_dict()
        info = self._game.get_info()
        info["delta_score"] = 0
        info["lines_cleared"] = 0

        return obs, info

    def step(
        self,
        action: Union[int, np.ndarray]
    ) -> Tuple[Dict[str, np.ndarray], float, bool, bool, Dict[str, Any]]:
        """
        Execute one step.

        Args:
            action: One of the Action values.

        Returns:
            (observation, reward, terminated, truncated, info) tuple.
            Reward is always 0.0.

        Raises:
            ValueError: If action is outside the action space.
        """
        if isinstance(action, np.ndarray):
            action = action.item()
        if not self.action_space.contains(action):
            raise ValueError(f"Invalid action {action!r}, expected 0..{len(Action) - 1}")
        action = Action(int(action))

        score_before = self._game.score
        lines_before = self._game.total_lines_cleared

        self._apply_action(action)
        self._steps += 1

        snapshot = self._game.snapshot()
        obs = snapshot.to_obs_dict()

        # Reward is always 0.0 - agents compute their own
        reward = 0.0

        terminated = snapshot.state == GameState.GAME_OVER
        truncated = not terminated and self._steps >= self._config.caps.max_steps

        info = self._game.get_info()
        info["delta_score"] = snapshot.score - score_before
        info["lines_cleared"] = snapshot.total_lines_cleared - lines_before
        info["steps"] = self._steps

        if self._debug:
            print(f"[DEBUG] Step {self._steps}: action={action.name}, "
                  f"delta_score={info['delta_score']}, lines={info['lines_cleared']}, "
                  f"level={info['level']}")
            if terminated:
                print(f"[DEBUG] TERMINATED: game over, score={snapshot.score}")
            elif truncated:
                print(f"[DEBUG] TRUNCATED: step cap {self._config.caps.max_steps} reached")

        return obs, reward, terminated, truncated, info

    def _apply_action(self, action: Action) -> None:
        game = self._game
        if action == Action.LEFT:
            game.move_left()
        elif action == Action.RIGHT:
            game.move_right()
        elif action == Action.ROTATE:
            game.rotate()
        elif action == Action.DROP:
            game.drop()

        if action != Action.DROP:
            game.on_game_tick()

        # No presentation layer runs headless, finish the banner at once
        if game.state == GameState.LEVEL_START_ANIMATING:
            game.complete_level_start_animation()

    def _render_to_array(self, snapshot: Optional[GameSnapshot] = None) -> np.ndarray:
        """Render board to RGB array."""
        if self._renderer is None:
            self._renderer = SolidRenderer(self._config)
        if snapshot is None:
            snapshot = self._game.snapshot()
        return self._renderer.render(snapshot, self._img_width, self._img_height)

    def render(self) -> Optional[np.ndarray]:
        """
        Render the current game state.

        Returns:
            RGB array if render_mode is "rgb_array", None otherwise.
        """
        if self.render_mode == "rgb_array":
            return self._render_to_array()
        return None

    def close(self) -> None:
        """Clean up resources."""
        if self._renderer is not None:
            self._renderer.close()
            self._renderer = None

    @property
    def game(self) -> GameController:
        """Access to underlying game (for debugging/tools)."""
        return self._game

    @property
    def config(self) -> GameConfig:
        """Game configuration."""
        return self._config
