"""
Configuration Loader
====================

Loads and validates game_config.yaml, providing typed access to all parameters.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Tuple, Optional

import yaml


Point = Tuple[float, float]
Color = Tuple[int, int, int]


@dataclass(frozen=True)
class SceneConfig:
    """Visible scene size."""
    width: int
    height: int


@dataclass(frozen=True)
class PhysicsConfig:
    """Physics simulation parameters."""
    gravity_x: float
    gravity_y: float
    damping: float
    dt: float
    substeps: int
    default_friction: float
    default_elasticity: float

    @property
    def gravity(self) -> Tuple[float, float]:
        return (self.gravity_x, self.gravity_y)


@dataclass(frozen=True)
class BallConfig:
    """The ball the player drops."""
    radius: float
    mass: float
    bounciness: float
    start_x: float
    start_y: float
    reset_x: float               # Off-screen spot used by reset_game
    reset_y: float
    color: Color

    @property
    def start_position(self) -> Point:
        return (self.start_x, self.start_y)

    @property
    def reset_position(self) -> Point:
        return (self.reset_x, self.reset_y)


@dataclass(frozen=True)
class FunnelConfig:
    """Funnel the ball drops out of."""
    points: Tuple[Point, ...]
    x: float
    top_offset: float            # Distance below the top of the scene
    color: Color


@dataclass(frozen=True)
class BarrierConfig:
    """A single rectangular barrier."""
    x: float
    y: float
    width: float
    height: float
    angle: float

    @property
    def position(self) -> Point:
        return (self.x, self.y)


@dataclass(frozen=True)
class TargetConfig:
    """Shared target geometry and colors."""
    points: Tuple[Point, ...]
    color: Color
    hit_color: Color


@dataclass(frozen=True)
class RulesConfig:
    """Game rule switches."""
    reset_targets_on_drop: bool
    win_text: str


@dataclass(frozen=True)
class GameConfig:
    """
    Complete game configuration loaded from YAML.

    All values are immutable to prevent accidental modification during runtime.
    """
    scene: SceneConfig
    physics: PhysicsConfig
    ball: BallConfig
    funnel: FunnelConfig
    barrier_color: Color
    barriers: Tuple[BarrierConfig, ...]
    target: TargetConfig
    targets: Tuple[Point, ...]
    rules: RulesConfig

    @property
    def num_targets(self) -> int:
        """Number of targets placed during setup."""
        return len(self.targets)

    @property
    def num_barriers(self) -> int:
        """Number of barriers placed during setup."""
        return len(self.barriers)


def _parse_point(point_data: List) -> Point:
    """Parse an [x, y] point from YAML."""
    if len(point_data) != 2:
        raise ValueError(f"Point must have 2 values [x, y], got {point_data}")
    return (float(point_data[0]), float(point_data[1]))


def _parse_points(points_data: List) -> Tuple[Point, ...]:
    """Parse a polygon point list from YAML."""
    points = tuple(_parse_point(p) for p in points_data)
    if len(points) < 3:
        raise ValueError(f"Polygon needs at least 3 points, got {len(points)}")
    return points


def _parse_color(color_data: List) -> Color:
    """Parse RGB color from YAML."""
    if len(color_data) != 3:
        raise ValueError(f"Color must have 3 values [R, G, B], got {color_data}")
    return (int(color_data[0]), int(color_data[1]), int(color_data[2]))


def _parse_barrier(barrier_data: List) -> BarrierConfig:
    """Parse a [x, y, width, height, angle] barrier entry."""
    if len(barrier_data) not in (4, 5):
        raise ValueError(
            f"Barrier must have values [x, y, width, height, angle], got {barrier_data}"
        )
    angle = barrier_data[4] if len(barrier_data) == 5 else 0.0
    return BarrierConfig(
        x=float(barrier_data[0]),
        y=float(barrier_data[1]),
        width=float(barrier_data[2]),
        height=float(barrier_data[3]),
        angle=float(angle)
    )


def _validate_config(config: GameConfig) -> None:
    """Validate configuration consistency."""
    if config.scene.width <= 0 or config.scene.height <= 0:
        raise ValueError(
            f"Scene size must be positive, got {config.scene.width}x{config.scene.height}"
        )

    if config.physics.substeps < 1:
        raise ValueError(f"substeps must be at least 1, got {config.physics.substeps}")

    if config.ball.radius <= 0:
        raise ValueError(f"Ball radius must be positive, got {config.ball.radius}")

    for i, barrier in enumerate(config.barriers):
        if barrier.width <= 0 or barrier.height <= 0:
            raise ValueError(
                f"Barrier {i} size must be positive, got {barrier.width}x{barrier.height}"
            )

    if not config.targets:
        raise ValueError("At least one target is required")

    # Otherwise every target would count as hit before the first drop
    if config.target.hit_color == config.target.color:
        raise ValueError(
            f"target.hit_color must differ from target.color, both are {config.target.color}"
        )


def load_config(config_path: Optional[str] = None) -> GameConfig:
    """
    Load and validate game configuration from YAML.

    Args:
        config_path: Path to game_config.yaml. If None, uses default location.

    Returns:
        Validated GameConfig instance.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ValueError: If config validation fails.
    """
    if config_path is None:
        config_path = os.path.join(
            os.path.dirname(os.path.dirname(__file__)),
            "game_config.yaml"
        )

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r") as f:
        raw = yaml.safe_load(f)

    scene_data = raw["scene"]
    scene = SceneConfig(
        width=int(scene_data["width"]),
        height=int(scene_data["height"])
    )

    physics_data = raw["physics"]
    physics = PhysicsConfig(
        gravity_x=float(physics_data.get("gravity_x", 0.0)),
        gravity_y=float(physics_data["gravity_y"]),
        damping=float(physics_data.get("damping", 1.0)),
        dt=float(physics_data["dt"]),
        substeps=int(physics_data.get("substeps", 1)),
        default_friction=float(physics_data["default_friction"]),
        default_elasticity=float(physics_data["default_elasticity"])
    )

    ball_data = raw["ball"]
    ball = BallConfig(
        radius=float(ball_data["radius"]),
        mass=float(ball_data.get("mass", 1.0)),
        bounciness=float(ball_data.get("bounciness", physics.default_elasticity)),
        start_x=float(ball_data["start_x"]),
        start_y=float(ball_data["start_y"]),
        reset_x=float(ball_data["reset_x"]),
        reset_y=float(ball_data["reset_y"]),
        color=_parse_color(ball_data["color"])
    )

    funnel_data = raw["funnel"]
    funnel = FunnelConfig(
        points=_parse_points(funnel_data["points"]),
        x=float(funnel_data["x"]),
        top_offset=float(funnel_data.get("top_offset", 25)),
        color=_parse_color(funnel_data["color"])
    )

    barriers = tuple(_parse_barrier(b) for b in raw.get("barriers") or [])

    target_data = raw["target"]
    target = TargetConfig(
        points=_parse_points(target_data["points"]),
        color=_parse_color(target_data["color"]),
        hit_color=_parse_color(target_data["hit_color"])
    )
    targets = tuple(_parse_point(t) for t in raw.get("targets") or [])

    rules_data = raw.get("rules", {})
    rules = RulesConfig(
        reset_targets_on_drop=bool(rules_data.get("reset_targets_on_drop", False)),
        win_text=str(rules_data.get("win_text", "You won!"))
    )

    config = GameConfig(
        scene=scene,
        physics=physics,
        ball=ball,
        funnel=funnel,
        barrier_color=_parse_color(raw["barrier_color"]),
        barriers=barriers,
        target=target,
        targets=targets,
        rules=rules
    )

    _validate_config(config)
    return config


# Module-level singleton for convenience
_cached_config: Optional[GameConfig] = None


def get_config() -> GameConfig:
    """Get the cached game configuration, loading if necessary."""
    global _cached_config
    if _cached_config is None:
        _cached_config = load_config()
    return _cached_config


def reload_config(config_path: Optional[str] = None) -> GameConfig:
    """Reload the configuration (useful for testing)."""
    global _cached_config
    _cached_config = load_config(config_path)
    return _cached_config
