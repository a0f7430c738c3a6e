"""
Human Play Mode
================

Play Tetris interactively with the keyboard. Gravity runs on a background
tick driver at the level's cadence while the window handles input.

Controls:
    - Left/Right: Move piece
    - Up: Rotate
    - Down: Soft drop (one row)
    - Space: Hard drop
    - P: Pause / resume
    - R: Restart game
    - ESC: Quit

Usage:
    python -m tools.play_human [--seed SEED] [--config PATH] [--cell-size PX] [--fps FPS]
"""

from __future__ import annotations

import argparse
import sys
import time
from typing import Optional

import pygame

from tetris_game.tetris_core.config_loader import load_config, GameConfig
from tetris_game.tetris_core.game import GameController
from tetris_game.tetris_core.piece import Piece
from tetris_game.tetris_core.render_solid import BACKGROUND_COLOR, color_for
from tetris_game.tetris_core.rules import GameState
from tetris_game.tetris_core.state_snapshot import GameSnapshot
from tetris_game.tetris_core.tick_driver import TickDriver


class TetrisRenderer:
    """
    Pygame renderer for human play mode.
    Board on the left, score/level/next panel on the right.
    """

    def __init__(self, config: GameConfig, cell_size: int):
        """Initialize renderer and compute layout."""
        self._config = config
        self._cell = cell_size

        self._text_light = (230, 230, 230)
        self._text_dim = (150, 150, 150)
        self._panel_bg = (24, 24, 24)
        self._border = (90, 90, 90)

        pygame.font.init()
        self._font_huge = pygame.font.Font(None, 56)
        self._font_large = pygame.font.Font(None, 36)
        self._font_small = pygame.font.Font(None, 22)

        self._margin = 20
        self._board_w = config.board.width * cell_size
        self._board_h = config.board.height * cell_size
        self._panel_w = max(6 * cell_size, 160)

        self.window_width = self._margin * 3 + self._board_w + self._panel_w
        self.window_height = self._margin * 2 + self._board_h

    def render(self, screen: pygame.Surface, snapshot: GameSnapshot, banner_level: Optional[int]) -> None:
        """Draw one frame."""
        screen.fill(self._panel_bg)
        self._draw_board(screen, snapshot)
        self._draw_panel(screen, snapshot)

        if snapshot.state == GameState.GAME_OVER:
            self._draw_overlay(screen, "GAME OVER", f"Score: {snapshot.score:,}  -  R to restart")
        elif snapshot.state == GameState.PAUSED:
            self._draw_overlay(screen, "PAUSED", "P to resume")
        elif banner_level is not None:
            self._draw_overlay(screen, f"Level {banner_level}", "Get ready")

    def _draw_board(self, screen: pygame.Surface, snapshot: GameSnapshot) -> None:
        x0, y0 = self._margin, self._margin
        pygame.draw.rect(screen, BACKGROUND_COLOR, (x0, y0, self._board_w, self._board_h))

        grid = snapshot.composite_cells()
        for row in range(grid.shape[0]):
            for col in range(grid.shape[1]):
                rect = (x0 + col * self._cell + 1, y0 + row * self._cell + 1, self._cell - 2, self._cell - 2)
                pygame.draw.rect(screen, color_for(int(grid[row, col])), rect)

        pygame.draw.rect(screen, self._border, (x0 - 2, y0 - 2, self._board_w + 4, self._board_h + 4), 2)

    def _draw_panel(self, screen: pygame.Surface, snapshot: GameSnapshot) -> None:
        x = self._margin * 2 + self._board_w
        y = self._margin

        for label, value in (
            ("SCORE", f"{snapshot.score:,}"),
            ("LEVEL", str(snapshot.level)),
            ("LINES", str(snapshot.total_lines_cleared)),
        ):
            screen.blit(self._font_small.render(label, True, self._text_dim), (x, y))
            screen.blit(self._font_large.render(value, True, self._text_light), (x, y + 18))
            y += 60

        screen.blit(self._font_small.render("NEXT", True, self._text_dim), (x, y))
        if snapshot.next_piece is not None:
            self._draw_preview(screen, snapshot.next_piece, x, y + 22)
        y += 22 + 4 * self._cell + 10

        for line in ("Arrows: move/rotate", "Space: drop", "P: pause", "R: restart", "ESC: quit"):
            screen.blit(self._font_small.render(line, True, self._text_dim), (x, y))
            y += 20

    def _draw_preview(self, screen: pygame.Surface, piece: Piece, x: int, y: int) -> None:
        size = max(8, self._cell * 3 // 4)
        color = color_for(piece.color_id)
        for cx, cy in piece.cells():
            pygame.draw.rect(screen, color, (x + cx * size + 1, y + cy * size + 1, size - 2, size - 2))

    def _draw_overlay(self, screen: pygame.Surface, title: str, hint: str) -> None:
        """Darken the board and draw a centred message."""
        overlay = pygame.Surface((self._board_w, self._board_h), pygame.SRCALPHA)
        overlay.fill((0, 0, 0, 150))
        screen.blit(overlay, (self._margin, self._margin))

        cx = self._margin + self._board_w // 2
        cy = self._margin + self._board_h // 2
        title_surf = self._font_huge.render(title, True, self._text_light)
        screen.blit(title_surf, (cx - title_surf.get_width() // 2, cy - 40))
        hint_surf = self._font_small.render(hint, True, self._text_dim)
        screen.blit(hint_surf, (cx - hint_surf.get_width() // 2, cy + 15))


class HumanPlayer:
    """
    Human-playable Tetris with a background gravity clock and a level
    start banner.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        cell_size: Optional[int] = None,
        target_fps: Optional[int] = None
    ):
        if config is None:
            config = load_config()

        self._config = config
        self._seed = seed
        self._target_fps = target_fps or config.presentation.render_fps
        self._banner_seconds = config.presentation.level_start_animation_ms / 1000.0

        self._game = GameController(config=config, seed=seed)
        self._driver = TickDriver(self._game)

        pygame.init()
        self._renderer = TetrisRenderer(config, cell_size or config.presentation.cell_size)
        self._screen = pygame.display.set_mode((self._renderer.window_width, self._renderer.window_height))
        pygame.display.set_caption("Tetris")
        self._clock = pygame.time.Clock()

        self._running = True
        self._banner_started: Optional[float] = None
        self._last_state = GameState.PAUSED

    def run(self) -> int:
        """Run the game loop. Returns final score."""
        print("=== Tetris ===")
        print("Arrows to move/rotate, Space to drop, P to pause")
        print("R to restart, ESC to quit")
        print()

        self._game.start_game(seed=self._seed)
        self._driver.start()
        try:
            while self._running:
                self._handle_events()
                self._update_level_banner()
                self._report_state_changes()
                self._render()
                self._clock.tick(self._target_fps)
        finally:
            self._driver.stop()
            pygame.quit()

        return self._game.score

    def _handle_events(self) -> None:
        """Process pygame events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self._running = False

            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self._running = False
                elif event.key == pygame.K_r:
                    self._restart()
                elif event.key == pygame.K_p:
                    self._game.toggle_pause()
                elif event.key == pygame.K_LEFT:
                    self._game.move_left()
                elif event.key == pygame.K_RIGHT:
                    self._game.move_right()
                elif event.key == pygame.K_UP:
                    self._game.rotate()
                elif event.key == pygame.K_DOWN:
                    self._game.on_game_tick()
                elif event.key == pygame.K_SPACE:
                    self._game.drop()

    def _update_level_banner(self) -> None:
        """Hold the level banner on screen, then let play resume."""
        if self._game.state != GameState.LEVEL_START_ANIMATING:
            self._banner_started = None
            return

        now = time.monotonic()
        if self._banner_started is None:
            self._banner_started = now
        elif now - self._banner_started >= self._banner_seconds:
            self._game.complete_level_start_animation()
            self._banner_started = None

    def _report_state_changes(self) -> None:
        state = self._game.state
        if state == self._last_state:
            return
        if state == GameState.GAME_OVER:
            print(f"\nGAME OVER - Score: {self._game.score}, Level: {self._game.level}")
        elif state == GameState.LEVEL_START_ANIMATING:
            print(f"  Level {self._game.level}! (tick {self._game.get_tick_delay_millis()}ms)")
        self._last_state = state

    def _restart(self) -> None:
        """Restart the game."""
        self._game.start_game(seed=self._seed)
        self._banner_started = None
        self._last_state = GameState.PLAYING
        print("\n=== Game Restarted ===\n")

    def _render(self) -> None:
        """Render the game."""
        snapshot = self._game.snapshot()
        banner_level = snapshot.level if self._banner_started is not None else None
        self._renderer.render(self._screen, snapshot, banner_level)
        pygame.display.flip()


def main():
    parser = argparse.ArgumentParser(description="Play Tetris interactively")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--config", type=str, default=None, help="Path to game_config.yaml")
    parser.add_argument("--cell-size", type=int, default=None, help="Cell size in pixels")
    parser.add_argument("--fps", type=int, default=None, help="Target FPS")

    args = parser.parse_args()

    try:
        config = load_config(args.config)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}")
        return 1

    player = HumanPlayer(
        config=config,
        seed=args.seed,
        cell_size=args.cell_size,
        target_fps=args.fps
    )
    score = player.run()
    print(f"\nFinal Score: {score}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
