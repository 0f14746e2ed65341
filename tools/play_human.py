"""
Human Play Mode
================

Play Bouncy Ball interactively with real-time physics.

Controls:
    - Click the funnel: Drop the ball
    - Drag a barrier: Move it (only while the ball is out of play)
    - Click the ball: Park it off-screen
    - Click / Enter while an alert shows: Dismiss it
    - ESC: Quit

Usage:
    python -m tools.play_human [--width WIDTH] [--height HEIGHT] [--debug]
"""

from __future__ import annotations

import argparse
import sys
import time
from typing import Optional, Tuple

try:
    import pygame
    PYGAME_AVAILABLE = True
except ImportError:
    PYGAME_AVAILABLE = False

from bouncy_ball.core.config_loader import load_config, GameConfig
from bouncy_ball.core.game import BallDropGame
from bouncy_ball.core.render_pygame import PygameRenderer
from bouncy_ball.core.shapes import Shape


# Pointer travel (screen pixels) that turns a press into a drag
DRAG_THRESHOLD = 4


class HumanPlayer:
    """Interactive game session with mouse input and a pygame window."""

    def __init__(
        self,
        config: GameConfig,
        window_width: int = 480,
        window_height: int = 800,
        target_fps: int = 60,
        debug: bool = False
    ):
        if not PYGAME_AVAILABLE:
            raise ImportError("pygame is required for human play mode")

        self._config = config
        self._window_width = window_width
        self._window_height = window_height
        self._target_fps = target_fps

        self._game = BallDropGame(config=config, debug=debug)
        self._game.setup()

        self._renderer = PygameRenderer(config)
        self._clock = pygame.time.Clock()
        self._running = True

        # Pointer state
        self._press_pos: Optional[Tuple[int, int]] = None
        self._press_shape: Optional[Shape] = None
        self._dragging = False

        # Fixed-step physics
        self._physics_dt = config.physics.dt
        self._physics_accumulator = 0.0
        self._last_time = time.time()

    def run(self) -> int:
        """Run the game loop. Returns number of wins."""
        print("=== Bouncy Ball ===")
        print("Click the funnel to drop the ball, drag barriers between drops")
        print("Click the ball to reset it, ESC to quit")
        print()

        # Draw once so screen_to_scene() knows the layout
        self._render()

        while self._running:
            self._handle_events()
            self._update_physics()
            self._render()
            self._clock.tick(self._target_fps)

        pygame.quit()
        return self._game.wins

    def _handle_events(self) -> None:
        """Process pygame events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self._running = False

            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self._running = False
                elif event.key in (pygame.K_RETURN, pygame.K_SPACE):
                    self._game.scene.dismiss_alert()

            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                self._on_press(event.pos)

            elif event.type == pygame.MOUSEMOTION:
                self._on_motion(event.pos)

            elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
                self._on_release(event.pos)

    def _on_press(self, pos: Tuple[int, int]) -> None:
        # Alerts are modal
        if self._game.scene.active_alert is not None:
            self._game.scene.dismiss_alert()
            return

        self._press_pos = pos
        self._press_shape = self._game.scene.shape_at(self._renderer.screen_to_scene(*pos))
        self._dragging = False

    def _on_motion(self, pos: Tuple[int, int]) -> None:
        if self._press_pos is None or self._press_shape is None:
            return

        dx = pos[0] - self._press_pos[0]
        dy = pos[1] - self._press_pos[1]
        if not self._dragging and dx * dx + dy * dy < DRAG_THRESHOLD * DRAG_THRESHOLD:
            return

        if not self._press_shape.is_draggable:
            return

        self._dragging = True
        self._game.scene.drag(self._press_shape, self._renderer.screen_to_scene(*pos))

    def _on_release(self, pos: Tuple[int, int]) -> None:
        if self._press_pos is None:
            return

        if not self._dragging:
            self._game.scene.tap(self._renderer.screen_to_scene(*pos))

        self._press_pos = None
        self._press_shape = None
        self._dragging = False

    def _update_physics(self) -> None:
        """Run as many fixed physics steps as real time has passed."""
        current_time = time.time()
        frame_dt = current_time - self._last_time
        self._last_time = current_time

        # Physics pauses while an alert is up
        if self._game.scene.active_alert is not None:
            self._physics_accumulator = 0.0
            return

        self._physics_accumulator += frame_dt

        # Limit to prevent spiral
        if self._physics_accumulator > 0.2:
            self._physics_accumulator = 0.2

        while self._physics_accumulator >= self._physics_dt:
            self._physics_accumulator -= self._physics_dt
            wins_before = self._game.wins
            self._game.step(self._physics_dt)
            if self._game.wins > wins_before:
                print(f"You won! (drop #{self._game.drops})")

    def _render(self) -> None:
        """Render the game."""
        self._renderer.render_to_screen(
            self._game.get_render_data(),
            self._window_width,
            self._window_height
        )
        pygame.display.flip()


def main():
    parser = argparse.ArgumentParser(description="Play Bouncy Ball interactively")
    parser.add_argument("--config", type=str, default=None, help="Path to game_config.yaml")
    parser.add_argument("--width", type=int, default=480, help="Window width (default: 480)")
    parser.add_argument("--height", type=int, default=800, help="Window height (default: 800)")
    parser.add_argument("--fps", type=int, default=60, help="Target FPS")
    parser.add_argument("--debug", action="store_true", help="Print game events")

    args = parser.parse_args()

    try:
        config = load_config(args.config)
        player = HumanPlayer(
            config=config,
            window_width=args.width,
            window_height=args.height,
            target_fps=args.fps,
            debug=args.debug
        )
        wins = player.run()
        print(f"\nWins: {wins}")
        return 0
    except ImportError as e:
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
