"""
Pygame Renderer
===============

Draws the scene with pygame. Supports both display mode (human play) and
headless RGB output.
"""

from __future__ import annotations

from typing import Dict, Any, Optional, Tuple

try:
    import pygame
    PYGAME_AVAILABLE = True
except ImportError:
    PYGAME_AVAILABLE = False

import numpy as np

from bouncy_ball.core.config_loader import GameConfig, get_config


class PygameRenderer:
    """
    Renderer using pygame.

    Supports:
    - Circles and polygons with their fill colors
    - Dashed outline on shapes the player can drag
    - Hit counter and alert overlay
    - Screen display for human mode
    - RGB array output
    """

    UI_HEIGHT = 50

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize renderer.

        Args:
            config: Game configuration.
        """
        if not PYGAME_AVAILABLE:
            raise ImportError("pygame is required for PygameRenderer")

        if config is None:
            config = get_config()

        self._config = config

        if not pygame.get_init():
            pygame.init()

        # Display surface (created on demand)
        self._screen: Optional[pygame.Surface] = None
        self._screen_size: Optional[Tuple[int, int]] = None

        pygame.font.init()
        self._font = pygame.font.Font(None, 28)
        self._font_large = pygame.font.Font(None, 48)

        self._bg_color = (235, 240, 245)
        self._scene_color = (255, 255, 255)
        self._border_color = (170, 180, 190)
        self._text_color = (40, 50, 60)
        self._drag_outline_color = (90, 90, 90)
        self._alert_panel_color = (250, 250, 250)

        # Layout of the last rendered frame, for screen_to_scene()
        self._scale = 1.0
        self._offset = (0.0, 0.0)
        self._scene_height = float(config.scene.height)

    def render(
        self,
        render_data: Dict[str, Any],
        width: int,
        height: int
    ) -> np.ndarray:
        """
        Render to RGB array.

        Args:
            render_data: Data from BallDropGame.get_render_data().
            width: Output image width.
            height: Output image height.

        Returns:
            (height, width, 3) uint8 array.
        """
        surface = pygame.Surface((width, height))
        self._render_to_surface(surface, render_data)
        array = pygame.surfarray.array3d(surface)
        return np.transpose(array, (1, 0, 2))

    def render_to_screen(
        self,
        render_data: Dict[str, Any],
        window_width: int = 480,
        window_height: int = 800
    ) -> None:
        """
        Render to pygame window.

        Args:
            render_data: Data from BallDropGame.get_render_data().
            window_width: Window width.
            window_height: Window height.
        """
        if self._screen is None or self._screen_size != (window_width, window_height):
            self._screen = pygame.display.set_mode((window_width, window_height))
            self._screen_size = (window_width, window_height)
            pygame.display.set_caption("Bouncy Ball")

        self._render_to_surface(self._screen, render_data)

    def screen_to_scene(self, screen_x: float, screen_y: float) -> Tuple[float, float]:
        """Convert window pixels to scene coordinates (Y up)."""
        offset_x, offset_y = self._offset
        x = (screen_x - offset_x) / self._scale
        y = self._scene_height - (screen_y - offset_y) / self._scale
        return x, y

    def _to_screen(self, x: float, y: float) -> Tuple[int, int]:
        offset_x, offset_y = self._offset
        return (
            int(offset_x + x * self._scale),
            int(offset_y + (self._scene_height - y) * self._scale)
        )

    def _render_to_surface(
        self,
        surface: pygame.Surface,
        render_data: Dict[str, Any]
    ) -> None:
        """Render game state to a pygame surface."""
        width, height = surface.get_size()

        scene_width = render_data["scene_width"]
        scene_height = render_data["scene_height"]

        game_area_height = height - self.UI_HEIGHT

        # Scale scene to fit
        scale_x = (width - 20) / scene_width
        scale_y = (game_area_height - 20) / scene_height
        self._scale = min(scale_x, scale_y)
        self._scene_height = float(scene_height)

        render_width = scene_width * self._scale
        render_height = scene_height * self._scale
        self._offset = (
            (width - render_width) / 2,
            self.UI_HEIGHT + (game_area_height - render_height) / 2
        )

        surface.fill(self._bg_color)
        self._draw_ui(surface, render_data)

        scene_rect = pygame.Rect(
            int(self._offset[0]),
            int(self._offset[1]),
            int(render_width),
            int(render_height)
        )
        pygame.draw.rect(surface, self._scene_color, scene_rect)
        pygame.draw.rect(surface, self._border_color, scene_rect, 2)

        # Shapes outside the scene are clipped
        surface.set_clip(scene_rect)
        for shape in render_data["shapes"]:
            self._draw_shape(surface, shape)
        surface.set_clip(None)

        if render_data.get("alert_text"):
            self._draw_alert(surface, render_data["alert_text"])

    def _draw_shape(self, surface: pygame.Surface, shape: Dict[str, Any]) -> None:
        """Draw a single circle or polygon."""
        color = shape["fill_color"]

        if shape["points"]:
            points = [self._to_screen(x, y) for x, y in shape["points"]]
            pygame.draw.polygon(surface, color, points)
            if shape["is_draggable"]:
                self._draw_dashed_outline(surface, points)
            return

        center = self._to_screen(shape["x"], shape["y"])
        radius = max(2, int(shape["radius"] * self._scale))
        pygame.draw.circle(surface, color, center, radius)
        outline = tuple(max(0, c - 60) for c in color)
        pygame.draw.circle(surface, outline, center, radius, 2)

    def _draw_dashed_outline(self, surface: pygame.Surface, points) -> None:
        """Mark a draggable polygon with a dashed border."""
        for i, start in enumerate(points):
            end = points[(i + 1) % len(points)]
            dx = end[0] - start[0]
            dy = end[1] - start[1]
            length = max(1.0, (dx * dx + dy * dy) ** 0.5)
            dashes = int(length // 6)
            for d in range(0, dashes, 2):
                t0 = d / max(1, dashes)
                t1 = min(1.0, (d + 1) / max(1, dashes))
                pygame.draw.line(
                    surface,
                    self._drag_outline_color,
                    (start[0] + dx * t0, start[1] + dy * t0),
                    (start[0] + dx * t1, start[1] + dy * t1),
                    2
                )

    def _draw_ui(self, surface: pygame.Surface, render_data: Dict[str, Any]) -> None:
        """Draw hit counter and drop count."""
        hits_text = f"Targets: {render_data['hit_count']}/{render_data['target_count']}"
        hits_surface = self._font.render(hits_text, True, self._text_color)
        surface.blit(hits_surface, (12, 14))

        drops_text = f"Drops: {render_data['drops']}"
        drops_surface = self._font.render(drops_text, True, self._text_color)
        surface.blit(drops_surface, (surface.get_width() - drops_surface.get_width() - 12, 14))

    def _draw_alert(self, surface: pygame.Surface, text: str) -> None:
        """Draw a modal alert box over the scene."""
        width, height = surface.get_size()

        overlay = pygame.Surface((width, height), pygame.SRCALPHA)
        overlay.fill((0, 0, 0, 120))
        surface.blit(overlay, (0, 0))

        panel = pygame.Rect(0, 0, int(width * 0.7), 140)
        panel.center = (width // 2, height // 2)
        pygame.draw.rect(surface, self._alert_panel_color, panel, border_radius=10)
        pygame.draw.rect(surface, self._border_color, panel, 2, border_radius=10)

        text_surface = self._font_large.render(text, True, self._text_color)
        surface.blit(text_surface, text_surface.get_rect(center=(panel.centerx, panel.centery - 18)))

        hint_surface = self._font.render("Click to continue", True, self._border_color)
        surface.blit(hint_surface, hint_surface.get_rect(center=(panel.centerx, panel.centery + 32)))

    def close(self) -> None:
        """Clean up pygame resources."""
        if self._screen is not None:
            self._screen = None
