"""
Core Game
=========

Main game controller: builds the scene and reacts to its events.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any

from bouncy_ball.core.config_loader import GameConfig, get_config
from bouncy_ball.core.events import SceneEventHandler
from bouncy_ball.core.scene import Scene
from bouncy_ball.core.shapes import (
    Color,
    Point,
    Shape,
    ShapeKind,
    oval_shape,
    polygon_shape,
    rectangle_points,
)


@dataclass
class GameState:
    """Shapes the game keeps track of between events."""
    hit_color: Color
    barriers: List[Shape] = field(default_factory=list)
    targets: List[Shape] = field(default_factory=list)

    def is_hit(self, target: Shape) -> bool:
        """A target is hit iff it is painted the hit color."""
        return target.fill_color == self.hit_color

    def hit_count(self) -> int:
        """Number of targets painted the hit color."""
        return sum(1 for target in self.targets if self.is_hit(target))

    @property
    def all_targets_hit(self) -> bool:
        return self.hit_count() == len(self.targets)


class BallDropGame(SceneEventHandler):
    """
    Main game simulation class.

    Drop the ball from the funnel, bounce it off barriers through every
    target. Barriers can only be dragged while the ball is out of play.

    One drop runs from tapping the funnel until the ball leaves the scene.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        scene: Optional[Scene] = None,
        debug: bool = False
    ):
        """
        Initialize game. Call setup() to place the shapes.

        Args:
            config: Game configuration. Uses default if None.
            scene: Scene to play in. A new one is created if None.
            debug: If True, prints every event the game reacts to.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._debug = debug
        self._scene = scene if scene is not None else Scene(config)
        self._scene.set_event_handler(self)

        self._state = GameState(hit_color=config.target.hit_color)

        ball_cfg = config.ball
        self._ball = oval_shape(
            ball_cfg.radius * 2,
            ball_cfg.radius * 2,
            kind=ShapeKind.BALL,
            mass=ball_cfg.mass,
            friction=config.physics.default_friction
        )
        self._funnel = polygon_shape(config.funnel.points, kind=ShapeKind.FUNNEL)

        self._is_setup = False
        self._drops: int = 0
        self._wins: int = 0

    @property
    def config(self) -> GameConfig:
        """Game configuration."""
        return self._config

    @property
    def scene(self) -> Scene:
        return self._scene

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def ball(self) -> Shape:
        return self._ball

    @property
    def funnel(self) -> Shape:
        return self._funnel

    @property
    def drops(self) -> int:
        """Number of times the ball was dropped."""
        return self._drops

    @property
    def wins(self) -> int:
        """Number of drops that hit every target."""
        return self._wins

    def _log(self, message: str) -> None:
        if self._debug:
            print(f"[DEBUG] {message}")

    # -- setup ---------------------------------------------------------

    def setup(self) -> None:
        """
        Place the ball, barriers, funnel and targets, then park the ball.

        Raises:
            RuntimeError: If called more than once.
        """
        if self._is_setup:
            raise RuntimeError("Game is already set up")
        self._is_setup = True

        self._setup_ball()
        for barrier in self._config.barriers:
            self.add_barrier(barrier.position, barrier.width, barrier.height, barrier.angle)
        self._setup_funnel()
        for position in self._config.targets:
            self.add_target(position)

        self.reset_game()
        self._scene.track_shape(self._ball)

        self._log(
            f"Setup: scene {self._scene.width}x{self._scene.height}, "
            f"{len(self._state.barriers)} barriers, {len(self._state.targets)} targets"
        )

    def _setup_ball(self) -> None:
        ball_cfg = self._config.ball
        self._ball.position = ball_cfg.start_position
        self._scene.add(self._ball)
        self._ball.has_physics = True
        self._ball.fill_color = ball_cfg.color
        self._ball.is_draggable = False
        self._ball.bounciness = ball_cfg.bounciness
        self._ball.name = "ball"

    def _setup_funnel(self) -> None:
        funnel_cfg = self._config.funnel
        self._funnel.position = (funnel_cfg.x, self._scene.height - funnel_cfg.top_offset)
        self._scene.add(self._funnel)
        self._funnel.fill_color = funnel_cfg.color
        self._funnel.is_draggable = False
        self._funnel.name = "funnel"

    def add_barrier(self, position: Point, width: float, height: float, angle: float = 0.0) -> Shape:
        """Create an immobile rectangular barrier and register it."""
        barrier = polygon_shape(
            rectangle_points(width, height),
            kind=ShapeKind.BARRIER,
            friction=self._config.physics.default_friction,
            bounciness=self._config.physics.default_elasticity
        )
        self._state.barriers.append(barrier)
        barrier.position = position
        barrier.has_physics = True
        self._scene.add(barrier)
        barrier.is_immobile = True
        barrier.fill_color = self._config.barrier_color
        barrier.angle = angle
        return barrier

    def add_target(self, position: Point) -> Shape:
        """Create a permeable diamond target and register it."""
        target = polygon_shape(self._config.target.points, kind=ShapeKind.TARGET)
        self._state.targets.append(target)
        target.position = position
        target.has_physics = True
        target.is_immobile = True
        target.is_impermeable = False
        target.fill_color = self._config.target.color
        self._scene.add(target)
        target.name = "target"
        target.is_draggable = False
        return target

    # -- game callbacks ------------------------------------------------

    def drop_ball(self) -> None:
        """Move the ball into the funnel and lock the barriers in place."""
        self._ball.position = self._funnel.position
        self._ball.stop_all_motion()
        for barrier in self._state.barriers:
            barrier.is_draggable = False
        if self._config.rules.reset_targets_on_drop:
            for target in self._state.targets:
                target.fill_color = self._config.target.color
        self._drops += 1
        self._log(f"Drop #{self._drops} from {self._funnel.position}")

    def ball_collided(self, other: Shape) -> None:
        """Paint a target the hit color when the ball touches it."""
        if other.kind is not ShapeKind.TARGET:
            return
        other.fill_color = self._state.hit_color
        self._log(f"Hit {other!r} ({self._state.hit_count()}/{len(self._state.targets)})")

    def ball_exited_scene(self) -> None:
        """Unlock the barriers and check whether every target was hit."""
        for barrier in self._state.barriers:
            barrier.is_draggable = True

        hit_targets = self._state.hit_count()
        self._log(f"Ball exited scene: {hit_targets}/{len(self._state.targets)} targets hit")

        if hit_targets == len(self._state.targets):
            self._wins += 1
            self._scene.present_alert(self._config.rules.win_text, completion=self.alert_dismissed)

    def reset_game(self) -> None:
        """Park the ball at its fixed off-screen spot."""
        self._ball.position = self._config.ball.reset_position

    def alert_dismissed(self) -> None:
        self._log("Alert dismissed")

    # -- event dispatch ------------------------------------------------

    def on_tapped(self, shape: Shape) -> None:
        if shape.kind is ShapeKind.FUNNEL:
            self.drop_ball()
        elif shape.kind is ShapeKind.BALL:
            self.reset_game()

    def on_collision(self, shape: Shape, other: Shape) -> None:
        if shape.kind is ShapeKind.BALL:
            self.ball_collided(other)

    def on_exited_scene(self, shape: Shape) -> None:
        if shape.kind is ShapeKind.BALL:
            self.ball_exited_scene()

    def on_shape_moved(self, shape: Shape) -> None:
        self._log(f"{shape!r} moved to {shape.position}")

    # -- simulation ----------------------------------------------------

    def step(self, dt: Optional[float] = None) -> None:
        """Advance physics by one timestep and handle the resulting events."""
        self._scene.step(dt)

    def get_render_data(self) -> Dict[str, Any]:
        """
        Get data needed for rendering.

        Returns:
            Dict with scene size, shapes in draw order, and alert/game info.
        """
        shapes_data = []
        for shape in self._scene.shapes:
            x, y = shape.position
            shapes_data.append({
                "uid": shape.uid,
                "kind": shape.kind.value,
                "x": x,
                "y": y,
                "angle": shape.angle,
                "radius": shape.radius,
                "points": shape.world_points(),
                "fill_color": shape.fill_color,
                "is_draggable": shape.is_draggable,
            })

        alert = self._scene.active_alert
        return {
            "scene_width": self._scene.width,
            "scene_height": self._scene.height,
            "shapes": shapes_data,
            "alert_text": alert.text if alert is not None else None,
            "hit_count": self._state.hit_count(),
            "target_count": len(self._state.targets),
            "drops": self._drops,
            "wins": self._wins,
        }
