"""
Scene
=====

Manages the pymunk Space, the shapes placed in it, alerts, and the event
queue that feeds the game's handler.
"""

from __future__ import annotations

from collections import deque
from typing import Callable, Deque, Dict, List, Optional

import pymunk

from bouncy_ball.core.config_loader import GameConfig, get_config
from bouncy_ball.core.events import Alert, EventKind, SceneEvent, SceneEventHandler
from bouncy_ball.core.shapes import Point, Shape


class Scene:
    """
    The visible play area and its physics simulation.

    Handles:
    - Space creation and configuration
    - Shape registration
    - Physics stepping
    - Collision and exited-scene detection
    - Tap and drag input
    - Alerts

    Events are queued and delivered to the handler one at a time, after the
    physics step that produced them has finished.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize scene.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._width = config.scene.width
        self._height = config.scene.height

        # Create space with gravity
        self._space = pymunk.Space()
        self._space.gravity = config.physics.gravity
        self._space.damping = config.physics.damping

        # pymunk 7.x uses on_collision() instead of add_collision_handler()
        self._space.on_collision(begin=self._on_collision)

        self._shapes: Dict[int, Shape] = {}
        self._next_uid = 0

        # Tracked shape uid -> was inside the scene at last check
        self._tracked: Dict[int, bool] = {}

        self._alerts: List[Alert] = []

        self._handler: SceneEventHandler = SceneEventHandler()
        self._queue: Deque[SceneEvent] = deque()
        self._dispatching = False

    @property
    def space(self) -> pymunk.Space:
        """The pymunk Space instance."""
        return self._space

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def shapes(self) -> List[Shape]:
        """All shapes in insertion (draw) order."""
        return list(self._shapes.values())

    @property
    def tracked_shapes(self) -> List[Shape]:
        return [self._shapes[uid] for uid in self._tracked]

    def set_event_handler(self, handler: SceneEventHandler) -> None:
        """Set the object that receives scene events."""
        self._handler = handler

    def add(self, shape: Shape) -> None:
        """
        Add a shape to the scene.

        Raises:
            ValueError: If the shape already belongs to a scene.
        """
        if shape.uid is not None:
            raise ValueError(f"{shape!r} is already in a scene")

        uid = self._next_uid
        self._next_uid += 1

        # Store UID in body for collision lookup
        shape.body.shape_uid = uid
        shape.uid = uid
        shape._space = self._space

        if shape.has_physics:
            self._space.add(shape.body, shape.collision_shape)

        self._shapes[uid] = shape

    def get_shape(self, uid: int) -> Optional[Shape]:
        """Get a shape by UID."""
        return self._shapes.get(uid)

    def get_shape_by_body(self, body: pymunk.Body) -> Optional[Shape]:
        """Get a shape by its pymunk Body."""
        uid = getattr(body, "shape_uid", None)
        if uid is not None:
            return self._shapes.get(uid)
        return None

    def track_shape(self, shape: Shape) -> None:
        """Report an exited-scene event whenever the shape leaves the scene."""
        if shape.uid not in self._shapes:
            raise ValueError(f"{shape!r} must be added to the scene before tracking")
        self._tracked[shape.uid] = self.is_inside(shape)

    def is_inside(self, shape: Shape) -> bool:
        """True if any part of the shape overlaps the visible scene."""
        left, bottom, right, top = shape.bounding_box
        return right >= 0 and left <= self._width and top >= 0 and bottom <= self._height

    # -- alerts --------------------------------------------------------

    def present_alert(self, text: str, completion: Optional[Callable[[], None]] = None) -> None:
        """Show a modal message. ``completion`` runs when it is dismissed."""
        self._alerts.append(Alert(text=text, completion=completion))

    @property
    def active_alert(self) -> Optional[Alert]:
        """The alert currently showing, if any."""
        return self._alerts[0] if self._alerts else None

    def dismiss_alert(self) -> bool:
        """
        Dismiss the showing alert and run its completion.

        Returns:
            False if no alert was showing.
        """
        if not self._alerts:
            return False
        alert = self._alerts.pop(0)
        if alert.completion is not None:
            alert.completion()
        return True

    # -- input ---------------------------------------------------------

    def shape_at(self, point: Point) -> Optional[Shape]:
        """Topmost shape containing the point."""
        for shape in reversed(self.shapes):
            if shape.contains_point(point):
                return shape
        return None

    def tap(self, point: Point) -> Optional[Shape]:
        """
        Tap the scene at a point.

        Returns:
            The tapped shape, or None if the tap hit nothing.
        """
        shape = self.shape_at(point)
        if shape is not None:
            self.dispatch(SceneEvent(EventKind.TAPPED, shape))
        return shape

    def drag(self, shape: Shape, point: Point) -> bool:
        """
        Move a draggable shape to a point.

        Returns:
            False if the shape is not draggable.
        """
        if not shape.is_draggable:
            return False
        shape.position = point
        shape.stop_all_motion()
        self.dispatch(SceneEvent(EventKind.SHAPE_MOVED, shape))
        return True

    # -- simulation ----------------------------------------------------

    def _on_collision(
        self,
        arbiter: pymunk.Arbiter,
        space: pymunk.Space,
        data: any
    ) -> None:
        """
        Pymunk 7.x begin callback.

        Only queues events; the space must not be changed from inside a
        callback. Each shape of the pair gets an event with the other as
        partner.
        """
        shape_a, shape_b = arbiter.shapes
        a = self.get_shape_by_body(shape_a.body)
        b = self.get_shape_by_body(shape_b.body)

        if a is None or b is None:
            return

        self._queue.append(SceneEvent(EventKind.COLLISION, a, b))
        self._queue.append(SceneEvent(EventKind.COLLISION, b, a))

    def _check_exits(self) -> None:
        """Queue exited-scene events for tracked shapes that just left."""
        for uid, was_inside in self._tracked.items():
            shape = self._shapes[uid]
            inside = self.is_inside(shape)
            if was_inside and not inside:
                self._queue.append(SceneEvent(EventKind.EXITED_SCENE, shape))
            self._tracked[uid] = inside

    def step(self, dt: Optional[float] = None) -> None:
        """
        Advance the simulation by one timestep and deliver its events.

        Args:
            dt: Timestep duration. Uses config default if None.
        """
        if dt is None:
            dt = self._config.physics.dt

        substeps = self._config.physics.substeps
        for _ in range(substeps):
            self._space.step(dt / substeps)

        self._check_exits()
        self._drain()

    def dispatch(self, event: SceneEvent) -> None:
        """Queue an event and deliver it unless a delivery is in progress."""
        self._queue.append(event)
        self._drain()

    def _drain(self) -> None:
        if self._dispatching:
            return
        self._dispatching = True
        try:
            while self._queue:
                self._handler.handle(self._queue.popleft())
        finally:
            self._dispatching = False

    @property
    def pending_events(self) -> int:
        """Number of queued, undelivered events."""
        return len(self._queue)
