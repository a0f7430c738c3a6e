"""
Tetris Core - The heart of the game engine.

This module provides the rules engine, Gymnasium environment wrapper,
and all supporting systems (board, pieces, scoring, RNG, snapshots).

Main exports:
- GameController: Game state machine driven by commands and gravity ticks
- TickDriver: Background gravity clock for interactive play
- TetrisEnv: Gymnasium environment for single-agent training
- Board: Grid, collision, placement and line clearing
- GameConfig: Configuration loaded from game_config.yaml
"""

from tetris_game.tetris_core.config_loader import GameConfig, load_config, get_config
from tetris_game.tetris_core.shape_catalog import ShapeKind, ShapeType, ShapeCatalog, get_catalog
from tetris_game.tetris_core.piece import Piece, Point
from tetris_game.tetris_core.board import Board
from tetris_game.tetris_core.rules import GameState
from tetris_game.tetris_core.state_snapshot import BoardSnapshot, GameSnapshot
from tetris_game.tetris_core.game import GameController
from tetris_game.tetris_core.tick_driver import TickDriver
from tetris_game.tetris_core.render_solid import SolidRenderer
from tetris_game.tetris_core.env_gym import Action, TetrisEnv

__all__ = [
    "GameConfig",
    "load_config",
    "get_config",
    "ShapeKind",
    "ShapeType",
    "ShapeCatalog",
    "get_catalog",
    "Piece",
    "Point",
    "Board",
    "GameState",
    "BoardSnapshot",
    "GameSnapshot",
    "GameController",
    "TickDriver",
    "SolidRenderer",
    "Action",
    "TetrisEnv",
]
