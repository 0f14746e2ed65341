"""
Shapes
======

Scene shapes backed by a pymunk body and collision shape.

Polygon points are recentered on their bounding-box center, so a shape's
``position`` is always its visual center.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional, Sequence, Tuple, List
import math

import pymunk


Point = Tuple[float, float]
Color = Tuple[int, int, int]

DEFAULT_FILL_COLOR: Color = (200, 200, 200)
DEFAULT_FRICTION = 0.5
DEFAULT_BOUNCINESS = 0.3
OVAL_SEGMENTS = 24


class ShapeKind(Enum):
    """What role a shape plays in the game."""
    GENERIC = "generic"
    BALL = "ball"
    BARRIER = "barrier"
    FUNNEL = "funnel"
    TARGET = "target"


class Shape:
    """
    A drawable, optionally physics-enabled object in the scene.

    Wraps a pymunk Body and a single pymunk Circle or Poly. The body is only
    part of the physics space while the shape is in a scene and
    ``has_physics`` is True.
    """

    def __init__(
        self,
        body: pymunk.Body,
        collision_shape: pymunk.Shape,
        kind: ShapeKind = ShapeKind.GENERIC,
        local_points: Optional[Tuple[Point, ...]] = None
    ):
        """
        Initialize shape. Use oval_shape() or polygon_shape() instead.

        Args:
            body: Dynamic pymunk body.
            collision_shape: Circle or Poly attached to ``body``.
            kind: Game role of the shape.
            local_points: Polygon vertices relative to the center.
        """
        self._body = body
        self._shape = collision_shape
        self._local_points = local_points
        self.kind = kind
        self.name: Optional[str] = None
        self.fill_color: Color = DEFAULT_FILL_COLOR
        self.is_draggable: bool = True

        self._has_physics = False
        self._is_immobile = False

        # Set when added to a scene
        self.uid: Optional[int] = None
        self._space: Optional[pymunk.Space] = None

    def __repr__(self) -> str:
        x, y = self.position
        label = self.name or self.kind.value
        return f"Shape({label}, uid={self.uid}, pos=({x:.1f}, {y:.1f}))"

    @property
    def body(self) -> pymunk.Body:
        """The underlying pymunk Body."""
        return self._body

    @property
    def collision_shape(self) -> pymunk.Shape:
        """The underlying pymunk Circle or Poly."""
        return self._shape

    @property
    def is_circle(self) -> bool:
        return isinstance(self._shape, pymunk.Circle)

    @property
    def radius(self) -> float:
        """Circle radius, 0 for polygons."""
        if self.is_circle:
            return self._shape.radius
        return 0.0

    @property
    def local_points(self) -> Optional[Tuple[Point, ...]]:
        """Polygon vertices relative to the center, None for circles."""
        return self._local_points

    # -- placement -----------------------------------------------------

    @property
    def position(self) -> Point:
        return self._body.position.x, self._body.position.y

    @position.setter
    def position(self, value: Point) -> None:
        self._body.position = value
        self._reindex()

    @property
    def angle(self) -> float:
        """Rotation in radians, counter-clockwise."""
        return self._body.angle

    @angle.setter
    def angle(self, value: float) -> None:
        self._body.angle = value
        self._reindex()

    @property
    def velocity(self) -> Point:
        return self._body.velocity.x, self._body.velocity.y

    @property
    def angular_velocity(self) -> float:
        return self._body.angular_velocity

    def stop_all_motion(self) -> None:
        """Zero linear and angular velocity and any accumulated force."""
        self._body.velocity = (0, 0)
        self._body.angular_velocity = 0
        self._body.force = (0, 0)
        self._body.torque = 0

    def _reindex(self) -> None:
        if self._space is not None and self._has_physics:
            self._space.reindex_shapes_for_body(self._body)

    # -- physics flags -------------------------------------------------

    @property
    def has_physics(self) -> bool:
        """Whether the shape takes part in the physics simulation."""
        return self._has_physics

    @has_physics.setter
    def has_physics(self, value: bool) -> None:
        value = bool(value)
        if value == self._has_physics:
            return
        self._has_physics = value
        if self._space is None:
            return
        if value:
            self._space.add(self._body, self._shape)
        else:
            self._space.remove(self._body, self._shape)

    @property
    def is_immobile(self) -> bool:
        """Immobile shapes ignore gravity and impacts but can still be moved."""
        return self._is_immobile

    @is_immobile.setter
    def is_immobile(self, value: bool) -> None:
        self._is_immobile = bool(value)
        if self._is_immobile:
            self._body.body_type = pymunk.Body.KINEMATIC
            self.stop_all_motion()
        else:
            self._body.body_type = pymunk.Body.DYNAMIC

    @property
    def is_impermeable(self) -> bool:
        """Permeable shapes report collisions but let other shapes pass through."""
        return not self._shape.sensor

    @is_impermeable.setter
    def is_impermeable(self, value: bool) -> None:
        self._shape.sensor = not value

    @property
    def bounciness(self) -> float:
        return self._shape.elasticity

    @bounciness.setter
    def bounciness(self, value: float) -> None:
        self._shape.elasticity = value

    @property
    def friction(self) -> float:
        return self._shape.friction

    @friction.setter
    def friction(self, value: float) -> None:
        self._shape.friction = value

    # -- geometry queries ----------------------------------------------

    def world_points(self) -> List[Point]:
        """Polygon vertices in scene coordinates (empty for circles)."""
        if self._local_points is None:
            return []
        result = []
        for x, y in self._local_points:
            p = self._body.local_to_world((x, y))
            result.append((p.x, p.y))
        return result

    @property
    def bounding_box(self) -> Tuple[float, float, float, float]:
        """(left, bottom, right, top) in scene coordinates."""
        bb = self._shape.cache_bb()
        return bb.left, bb.bottom, bb.right, bb.top

    def contains_point(self, point: Point) -> bool:
        """True if the scene point lies inside the shape."""
        self._shape.cache_bb()
        return self._shape.point_query(point).distance <= 0


def _new_body() -> pymunk.Body:
    # Mass is accumulated from the collision shape once added to a space
    return pymunk.Body(body_type=pymunk.Body.DYNAMIC)


def _centered(points: Sequence[Point]) -> Tuple[Point, ...]:
    """Shift points so their bounding-box center sits at the origin."""
    xs = [float(p[0]) for p in points]
    ys = [float(p[1]) for p in points]
    cx = (min(xs) + max(xs)) / 2
    cy = (min(ys) + max(ys)) / 2
    return tuple((x - cx, y - cy) for x, y in zip(xs, ys))


def polygon_shape(
    points: Sequence[Point],
    kind: ShapeKind = ShapeKind.GENERIC,
    mass: float = 1.0,
    friction: float = DEFAULT_FRICTION,
    bounciness: float = DEFAULT_BOUNCINESS
) -> Shape:
    """
    Create a polygon shape from an ordered point list.

    Args:
        points: Polygon vertices in any winding order.
        kind: Game role of the shape.
        mass: Mass used when the shape is dynamic.
        friction: Surface friction.
        bounciness: Elasticity of collisions.

    Returns:
        The new Shape, not yet added to a scene.

    Raises:
        ValueError: If fewer than 3 points are given.
    """
    if len(points) < 3:
        raise ValueError(f"Polygon needs at least 3 points, got {len(points)}")

    local_points = _centered(points)
    body = _new_body()
    poly = pymunk.Poly(body, local_points)
    poly.mass = mass
    poly.friction = friction
    poly.elasticity = bounciness
    return Shape(body, poly, kind=kind, local_points=local_points)


def oval_shape(
    width: float,
    height: float,
    kind: ShapeKind = ShapeKind.GENERIC,
    mass: float = 1.0,
    friction: float = DEFAULT_FRICTION,
    bounciness: float = DEFAULT_BOUNCINESS
) -> Shape:
    """
    Create an oval shape. Equal width and height give a true circle,
    otherwise the ellipse is approximated by a polygon.

    Raises:
        ValueError: If width or height is not positive.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Oval size must be positive, got {width}x{height}")

    if width != height:
        points = [
            (width / 2 * math.cos(2 * math.pi * i / OVAL_SEGMENTS),
             height / 2 * math.sin(2 * math.pi * i / OVAL_SEGMENTS))
            for i in range(OVAL_SEGMENTS)
        ]
        return polygon_shape(points, kind, mass, friction, bounciness)

    body = _new_body()
    circle = pymunk.Circle(body, width / 2)
    circle.mass = mass
    circle.friction = friction
    circle.elasticity = bounciness
    return Shape(body, circle, kind=kind)


def rectangle_points(width: float, height: float) -> List[Point]:
    """Corner points of an axis-aligned width x height rectangle."""
    return [(0, 0), (0, height), (width, height), (width, 0)]
