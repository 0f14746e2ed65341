"""
Tests for the headless pygame renderer.
"""

import os

import numpy as np
import pytest

pygame = pytest.importorskip("pygame")

from bouncy_ball.core.config_loader import load_config
from bouncy_ball.core.game import BallDropGame
from bouncy_ball.core.render_pygame import PygameRenderer


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def renderer(config):
    os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
    renderer = PygameRenderer(config)
    yield renderer
    renderer.close()


@pytest.fixture
def game(config):
    game = BallDropGame(config=config)
    game.setup()
    return game


class TestPygameRenderer:
    """Test RGB output and coordinate mapping."""

    def test_rgb_shape(self, renderer, game):
        image = renderer.render(game.get_render_data(), 240, 400)
        assert image.shape == (400, 240, 3)
        assert image.dtype == np.uint8

    def test_alert_changes_image(self, renderer, game):
        plain = renderer.render(game.get_render_data(), 240, 400)
        game.scene.present_alert("You won!")
        with_alert = renderer.render(game.get_render_data(), 240, 400)
        assert not np.array_equal(plain, with_alert)

    def test_screen_to_scene_hits_funnel(self, renderer, game):
        """Clicking where the funnel is drawn maps back onto the funnel."""
        renderer.render(game.get_render_data(), 480, 800)
        fx, fy = game.funnel.position
        screen = renderer._to_screen(fx, fy)
        point = renderer.screen_to_scene(*screen)
        assert game.scene.shape_at(point) is game.funnel
