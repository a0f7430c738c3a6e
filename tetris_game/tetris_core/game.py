"""
Core Game
=========

Game controller: owns the board and the active/next pieces, drives the
state machine and publishes a snapshot after every change.
"""

from __future__ import annotations

import threading
from typing import Any, Callable, Dict, Optional

from tetris_game.tetris_core.board import Board
from tetris_game.tetris_core.config_loader import GameConfig, get_config
from tetris_game.tetris_core.piece import Piece
from tetris_game.tetris_core.rng import PieceRandomizer
from tetris_game.tetris_core.rules import GameRules, GameState
from tetris_game.tetris_core.state_snapshot import (
    GameSnapshot,
    SnapshotBuilder,
    SnapshotCallback,
    SnapshotPublisher,
)


class GameController:
    """
    Main game state machine.

    Orchestrates:
    - Board (collision, placement, line clears, score)
    - Piece randomizer
    - Spawn and level rules
    - Snapshot publication

    Commands and gravity ticks are serialised by a re-entrant lock, so a
    tick driver thread and an input thread may share one controller.
    Illegal commands are silent no-ops.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        debug: bool = False
    ):
        """
        Initialize controller in the PAUSED state with an empty board.

        Args:
            config: Game configuration. Uses default if None.
            seed: Random seed for the piece sequence.
            debug: If True, prints state machine events.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._debug = debug
        self._lock = threading.RLock()

        self._board = Board(config)
        self._randomizer = PieceRandomizer(config, seed)
        self._rules = GameRules(config)
        self._snapshot_builder = SnapshotBuilder()
        self._publisher = SnapshotPublisher()

        # Session state
        self._state = GameState.PAUSED
        self._active: Optional[Piece] = None
        self._next: Optional[Piece] = None
        self._level = self._rules.levels.start_level
        self._lines_this_level = 0
        self._total_lines = 0
        self._pieces_placed = 0
        self._last_lines_cleared = 0

        self.reset()

    # ------------------------------------------------------------------
    # Read access

    @property
    def config(self) -> GameConfig:
        return self._config

    @property
    def board(self) -> Board:
        """Live board. Prefer snapshot() for observation."""
        return self._board

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def active_piece(self) -> Optional[Piece]:
        return self._active

    @property
    def next_piece(self) -> Optional[Piece]:
        return self._next

    @property
    def score(self) -> int:
        return self._board.score

    @property
    def level(self) -> int:
        return self._level

    @property
    def lines_cleared_this_level(self) -> int:
        return self._lines_this_level

    @property
    def total_lines_cleared(self) -> int:
        return self._total_lines

    @property
    def pieces_placed(self) -> int:
        return self._pieces_placed

    @property
    def last_lines_cleared(self) -> int:
        """Lines cleared by the most recent placement."""
        return self._last_lines_cleared

    @property
    def is_over(self) -> bool:
        return self._state == GameState.GAME_OVER

    def snapshot(self) -> GameSnapshot:
        """Latest published snapshot."""
        with self._lock:
            return self._publisher.latest

    def subscribe(self, callback: SnapshotCallback) -> Callable[[], None]:
        """
        Observe snapshots.

        The callback receives the current snapshot immediately and every
        changed snapshot afterwards. Returns an unsubscribe function.
        """
        with self._lock:
            return self._publisher.subscribe(callback)

    def get_tick_delay_millis(self) -> int:
        """Gravity interval for the current level."""
        return self._rules.levels.tick_delay_ms(self._level)

    def get_info(self) -> Dict[str, Any]:
        """Summary dict for agents and tools."""
        with self._lock:
            return {
                "score": self._board.score,
                "level": self._level,
                "lines_cleared_this_level": self._lines_this_level,
                "total_lines_cleared": self._total_lines,
                "pieces_placed": self._pieces_placed,
                "state": self._state.value,
                "tick_delay_ms": self.get_tick_delay_millis(),
            }

    # ------------------------------------------------------------------
    # Session lifecycle

    def reset(self, seed: Optional[int] = None) -> GameSnapshot:
        """
        Return to the initial PAUSED state with an empty board.

        Args:
            seed: New random seed. Keeps the current sequence seed if None.

        Returns:
            Snapshot of the reset state.
        """
        with self._lock:
            self._board.reset()
            self._randomizer.reset(seed)
            self._active = None
            self._next = None
            self._level = self._rules.levels.start_level
            self._lines_this_level = 0
            self._total_lines = 0
            self._pieces_placed = 0
            self._last_lines_cleared = 0
            self._state = GameState.PAUSED
            return self._publish()

    def start_game(self, seed: Optional[int] = None) -> GameSnapshot:
        """Start a fresh game and spawn the first piece."""
        with self._lock:
            self.reset(seed)
            self._state = GameState.PLAYING
            self._next = self._randomizer.next_piece()
            self._spawn_new_piece()
            return self._publish()

    # ------------------------------------------------------------------
    # Gravity

    def on_game_tick(self) -> bool:
        """
        Apply one gravity step.

        Moves the active piece down one row, or lands it: place, clear
        lines, account level progress, spawn the next piece.

        Returns:
            True if the tick changed the game.
        """
        with self._lock:
            if self._state != GameState.PLAYING or self._active is None:
                return False

            moved = self._board.try_shift(self._active, 0, 1)
            if moved is not None:
                self._active = moved
            else:
                self._land_active_piece()

            self._publish()
            return True

    def _land_active_piece(self) -> None:
        lines = self._board.place(self._active)
        self._pieces_placed += 1
        self._last_lines_cleared = lines
        self._total_lines += lines
        self._update_level_progress(lines)
        self._spawn_new_piece()

    def _update_level_progress(self, cleared: int) -> None:
        progress = self._rules.levels.apply_lines(self._level, self._lines_this_level, cleared)
        self._level = progress.level
        self._lines_this_level = progress.lines_this_level
        if progress.leveled_up:
            self._state = GameState.LEVEL_START_ANIMATING
            if self._debug:
                print(f"[DEBUG] Level up! New level: {self._level}, "
                      f"tick delay {self.get_tick_delay_millis()}ms")

    def _spawn_new_piece(self) -> None:
        """Promote next to active, draw a new next, detect game over."""
        candidate = self._next
        self._next = self._randomizer.next_piece()
        if candidate is None:
            self._active = None
            return

        positioned = self._rules.spawn.position_for_spawn(candidate, self._board.width)
        if self._board.can_place(positioned):
            self._active = positioned
        else:
            self._active = None
            self._state = GameState.GAME_OVER
            if self._debug:
                print(f"[DEBUG] GAME OVER: {positioned} blocked at spawn, "
                      f"score={self._board.score}, level={self._level}")

    # ------------------------------------------------------------------
    # Player commands

    def _can_act(self) -> bool:
        return self._state == GameState.PLAYING and self._active is not None

    def _shift(self, dx: int) -> bool:
        with self._lock:
            if not self._can_act():
                return False
            moved = self._board.try_shift(self._active, dx, 0)
            if moved is None:
                return False
            self._active = moved
            self._publish()
            return True

    def move_left(self) -> bool:
        """Shift the active piece one column left if legal."""
        return self._shift(-1)

    def move_right(self) -> bool:
        """Shift the active piece one column right if legal."""
        return self._shift(1)

    def rotate(self) -> bool:
        """Rotate the active piece clockwise (with kick) if legal."""
        with self._lock:
            if not self._can_act():
                return False
            rotated = self._board.rotate(self._active)
            if rotated == self._active:
                return False
            self._active = rotated
            self._publish()
            return True

    def drop(self) -> bool:
        """Hard drop: fall to the lowest legal row and land in the same call."""
        with self._lock:
            if not self._can_act():
                return False
            piece = self._active
            while True:
                moved = self._board.try_shift(piece, 0, 1)
                if moved is None:
                    break
                piece = moved
            self._active = piece
            self.on_game_tick()
            return True

    def toggle_pause(self) -> bool:
        """
        Pause or resume.

        PLAYING and LEVEL_START_ANIMATING pause; PAUSED resumes to PLAYING.
        No-op after game over.
        """
        with self._lock:
            if self._state in (GameState.PLAYING, GameState.LEVEL_START_ANIMATING):
                self._state = GameState.PAUSED
            elif self._state == GameState.PAUSED:
                self._state = GameState.PLAYING
            else:
                return False
            self._publish()
            return True

    def complete_level_start_animation(self) -> bool:
        """Signal from the presentation layer that the level banner finished."""
        with self._lock:
            if self._state != GameState.LEVEL_START_ANIMATING:
                return False
            self._state = GameState.PLAYING
            if self._debug:
                print(f"[DEBUG] Level {self._level} start animation complete, resuming play")
            self._publish()
            return True

    # ------------------------------------------------------------------

    def _publish(self) -> GameSnapshot:
        snapshot = self._snapshot_builder.build(
            active_piece=self._active,
            next_piece=self._next,
            state=self._state,
            board=self._board.snapshot(),
            level=self._level,
            lines_cleared_this_level=self._lines_this_level,
            total_lines_cleared=self._total_lines
        )
        self._publisher.publish(snapshot)
        return self._publisher.latest
