"""
Tick Driver
===========

Background gravity clock for interactive play.

Waits the controller's current tick delay between ticks, so a level-up
speeds the clock up on the next wait. Ticks are only issued while the game
is PLAYING; paused, animating and finished games keep the thread idle.

Example:
    controller = GameController()
    controller.start_game()
    driver = TickDriver(controller)
    driver.start()
    ...
    driver.stop()
"""

from __future__ import annotations

import threading
from typing import Optional

from tetris_game.tetris_core.game import GameController
from tetris_game.tetris_core.rules import GameState


class TickDriver:
    """Daemon thread calling on_game_tick at the level's cadence."""

    def __init__(self, controller: GameController):
        self._controller = controller
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._ticks = 0

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def ticks(self) -> int:
        """Number of ticks issued since start()."""
        return self._ticks

    def start(self) -> None:
        """Start ticking in a background thread (non-blocking)."""
        if self._thread is not None:
            return

        self._stop_event.clear()
        self._ticks = 0
        self._thread = threading.Thread(target=self._run_loop, name="tick-driver", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        """Stop the clock. A tick already in progress completes."""
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=2.0)
            self._thread = None

    def _run_loop(self) -> None:
        while not self._stop_event.is_set():
            delay_s = self._controller.get_tick_delay_millis() / 1000.0
            # Event.wait returns True when stop() interrupts the sleep
            if self._stop_event.wait(delay_s):
                break
            if self._controller.state == GameState.PLAYING:
                self._controller.on_game_tick()
                self._ticks += 1

    def __enter__(self) -> "TickDriver":
        self.start()
        return self

    def __exit__(self, *exc) -> None:
        self.stop()
