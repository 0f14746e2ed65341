"""
Bouncy Ball Core - shapes, scene and game controller.

Main exports:
- BallDropGame: Game controller (setup and event callbacks)
- GameState: Barrier and target registry
- Scene: pymunk-backed play area with taps, drags, alerts and events
- Shape, ShapeKind, oval_shape, polygon_shape: Scene shapes
- GameConfig: Configuration loaded from game_config.yaml
"""

from bouncy_ball.core.config_loader import GameConfig, load_config, get_config
from bouncy_ball.core.events import Alert, EventKind, SceneEvent, SceneEventHandler
from bouncy_ball.core.shapes import Shape, ShapeKind, oval_shape, polygon_shape
from bouncy_ball.core.scene import Scene
from bouncy_ball.core.game import BallDropGame, GameState

__all__ = [
    "GameConfig",
    "load_config",
    "get_config",
    "Alert",
    "EventKind",
    "SceneEvent",
    "SceneEventHandler",
    "Shape",
    "ShapeKind",
    "oval_shape",
    "polygon_shape",
    "Scene",
    "BallDropGame",
    "GameState",
]
