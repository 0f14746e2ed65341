"""
End-to-end tests: drop the ball and let the physics run.
"""

from dataclasses import replace

import pytest

from bouncy_ball.core.config_loader import load_config
from bouncy_ball.core.game import BallDropGame


MAX_STEPS = 600


@pytest.fixture
def config():
    return load_config()


def make_game(config, barriers=(), targets=((200.0, 400.0),)):
    config = replace(config, barriers=tuple(barriers), targets=tuple(targets))
    game = BallDropGame(config=config)
    game.setup()
    return game


def run_until_exit(game, max_steps=MAX_STEPS):
    """Step until the ball leaves the scene. Returns steps taken or None."""
    for i in range(max_steps):
        game.step()
        if not game.scene.is_inside(game.ball):
            return i + 1
    return None


class TestDropSimulation:
    """Test full drops through the physics engine."""

    def test_parked_ball_raises_no_exit(self, config):
        """Parking the ball during setup is not an exit."""
        game = make_game(config, barriers=[replace(config.barriers[0])])
        for barrier in game.state.barriers:
            barrier.is_draggable = False

        for _ in range(30):
            game.step()

        assert all(not b.is_draggable for b in game.state.barriers)

    def test_clear_drop_hits_target_and_wins(self, config):
        game = make_game(config)
        game.scene.tap(game.funnel.position)

        assert run_until_exit(game) is not None
        game.step()

        target = game.state.targets[0]
        assert target.fill_color == config.target.hit_color
        assert game.scene.active_alert is not None
        assert game.scene.active_alert.text == config.rules.win_text
        assert game.wins == 1

    def test_missed_target_no_win(self, config):
        game = make_game(config, targets=[(50.0, 400.0)])
        game.drop_ball()

        assert run_until_exit(game) is not None
        game.step()

        assert game.state.hit_count() == 0
        assert game.scene.active_alert is None

    def test_barriers_unlock_after_exit(self, config):
        barriers = [replace(config.barriers[0], x=30.0, y=300.0)]
        game = make_game(config, barriers=barriers)
        game.drop_ball()
        assert not game.state.barriers[0].is_draggable

        assert run_until_exit(game) is not None
        game.step()

        assert game.state.barriers[0].is_draggable

    def test_ball_caught_by_barrier(self, config):
        """A barrier spanning the scene keeps the ball in play."""
        floor = replace(config.barriers[0], x=200.0, y=300.0, width=float(config.scene.width), angle=0.0)
        game = make_game(config, barriers=[floor])
        game.drop_ball()

        assert run_until_exit(game, max_steps=300) is None
        assert game.ball.position[1] > 300
        assert not game.state.barriers[0].is_draggable

    def test_target_does_not_block_ball(self, config):
        game = make_game(config)
        game.drop_ball()

        for _ in range(120):
            game.step()

        assert game.ball.position[1] < 400

    def test_default_layout_runs(self, config):
        game = BallDropGame(config=config)
        game.setup()
        game.drop_ball()

        for _ in range(MAX_STEPS):
            game.step()

        assert 0 <= game.state.hit_count() <= config.num_targets
