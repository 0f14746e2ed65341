"""
Tests for the scene: shape registration, input, alerts and event dispatch.
"""

import pytest

from bouncy_ball.core.config_loader import load_config
from bouncy_ball.core.events import EventKind, SceneEventHandler
from bouncy_ball.core.scene import Scene
from bouncy_ball.core.shapes import ShapeKind, oval_shape, polygon_shape, rectangle_points


class RecordingHandler(SceneEventHandler):
    """Collects every event it receives."""

    def __init__(self):
        self.events = []

    def handle(self, event):
        self.events.append(event)
        super().handle(event)

    def of_kind(self, kind):
        return [e for e in self.events if e.kind is kind]


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def scene(config):
    return Scene(config)


@pytest.fixture
def handler(scene):
    handler = RecordingHandler()
    scene.set_event_handler(handler)
    return handler


def make_ball(scene, position):
    ball = oval_shape(40, 40, kind=ShapeKind.BALL)
    ball.position = position
    ball.has_physics = True
    scene.add(ball)
    return ball


def make_floor(scene, position, width=100, height=20, impermeable=True):
    floor = polygon_shape(rectangle_points(width, height), kind=ShapeKind.BARRIER)
    floor.position = position
    floor.has_physics = True
    floor.is_immobile = True
    floor.is_impermeable = impermeable
    scene.add(floor)
    return floor


class TestSceneShapes:
    """Test adding shapes to the scene."""

    def test_size_from_config(self, scene, config):
        assert scene.width == config.scene.width
        assert scene.height == config.scene.height

    def test_add_assigns_uid(self, scene):
        a = oval_shape(10, 10)
        b = oval_shape(10, 10)
        scene.add(a)
        scene.add(b)
        assert a.uid == 0
        assert b.uid == 1
        assert scene.shapes == [a, b]
        assert scene.get_shape_by_body(b.body) is b

    def test_add_twice_rejected(self, scene):
        shape = oval_shape(10, 10)
        scene.add(shape)
        with pytest.raises(ValueError):
            scene.add(shape)

    def test_physics_toggle_updates_space(self, scene):
        shape = oval_shape(10, 10)
        scene.add(shape)
        assert shape.body not in scene.space.bodies

        shape.has_physics = True
        assert shape.body in scene.space.bodies

        shape.has_physics = False
        assert shape.body not in scene.space.bodies

    def test_track_requires_added_shape(self, scene):
        with pytest.raises(ValueError):
            scene.track_shape(oval_shape(10, 10))


class TestSceneInput:
    """Test taps and drags."""

    def test_tap_hits_topmost_shape(self, scene, handler):
        below = polygon_shape(rectangle_points(100, 100))
        above = oval_shape(20, 20)
        below.position = (100, 100)
        above.position = (100, 100)
        scene.add(below)
        scene.add(above)

        assert scene.tap((100, 100)) is above
        assert scene.tap((140, 140)) is below

        taps = handler.of_kind(EventKind.TAPPED)
        assert [e.shape for e in taps] == [above, below]

    def test_tap_on_empty_space(self, scene, handler):
        assert scene.tap((10, 10)) is None
        assert handler.events == []

    def test_drag_moves_draggable_shape(self, scene, handler):
        shape = polygon_shape(rectangle_points(50, 10))
        shape.position = (100, 100)
        scene.add(shape)

        assert scene.drag(shape, (150, 200))
        assert shape.position == pytest.approx((150, 200))

        moved = handler.of_kind(EventKind.SHAPE_MOVED)
        assert len(moved) == 1
        assert moved[0].shape is shape

    def test_drag_ignores_locked_shape(self, scene, handler):
        shape = polygon_shape(rectangle_points(50, 10))
        shape.position = (100, 100)
        shape.is_draggable = False
        scene.add(shape)

        assert not scene.drag(shape, (150, 200))
        assert shape.position == pytest.approx((100, 100))
        assert handler.events == []

    def test_events_raised_by_handler_are_queued(self, scene):
        """An event raised inside a handler is delivered after the current one."""
        order = []
        shape = oval_shape(20, 20)
        shape.position = (50, 50)
        scene.add(shape)

        class DragOnTap(SceneEventHandler):
            def on_tapped(self, tapped):
                order.append("tapped-start")
                scene.drag(tapped, (60, 60))
                order.append("tapped-end")

            def on_shape_moved(self, moved):
                order.append("moved")

        scene.set_event_handler(DragOnTap())
        scene.tap((50, 50))

        assert order == ["tapped-start", "tapped-end", "moved"]
        assert scene.pending_events == 0


class TestSceneAlerts:
    """Test alert presentation and dismissal."""

    def test_present_and_dismiss(self, scene):
        dismissed = []
        scene.present_alert("You won!", completion=lambda: dismissed.append(True))

        assert scene.active_alert.text == "You won!"
        assert scene.dismiss_alert()
        assert dismissed == [True]
        assert scene.active_alert is None

    def test_dismiss_without_alert(self, scene):
        assert not scene.dismiss_alert()

    def test_alert_without_completion(self, scene):
        scene.present_alert("Hello")
        assert scene.dismiss_alert()


class TestSceneSimulation:
    """Test collision and exited-scene events from physics steps."""

    def test_collision_reported_both_ways(self, scene, handler):
        ball = make_ball(scene, (200, 100))
        floor = make_floor(scene, (200, 50))

        for _ in range(60):
            scene.step()

        pairs = [(e.shape, e.other) for e in handler.of_kind(EventKind.COLLISION)]
        assert (ball, floor) in pairs
        assert (floor, ball) in pairs

    def test_ball_rests_on_impermeable_shape(self, scene, handler):
        ball = make_ball(scene, (200, 100))
        make_floor(scene, (200, 50))

        for _ in range(120):
            scene.step()

        assert ball.position[1] > 50

    def test_ball_passes_through_permeable_shape(self, scene, handler):
        ball = make_ball(scene, (200, 150))
        sensor = make_floor(scene, (200, 100), impermeable=False)

        for _ in range(60):
            scene.step()

        assert ball.position[1] < 80
        pairs = [(e.shape, e.other) for e in handler.of_kind(EventKind.COLLISION)]
        assert (ball, sensor) in pairs

    def test_exit_is_reported_once(self, scene, handler):
        ball = make_ball(scene, (200, 30))
        scene.track_shape(ball)

        for _ in range(200):
            scene.step()

        exits = handler.of_kind(EventKind.EXITED_SCENE)
        assert len(exits) == 1
        assert exits[0].shape is ball
        assert not scene.is_inside(ball)

    def test_untracked_shape_never_exits(self, scene, handler):
        make_ball(scene, (200, 30))

        for _ in range(200):
            scene.step()

        assert handler.of_kind(EventKind.EXITED_SCENE) == []

    def test_reentering_arms_exit_again(self, scene, handler):
        ball = make_ball(scene, (200, 30))
        scene.track_shape(ball)

        for _ in range(200):
            scene.step()

        ball.position = (200, 30)
        ball.stop_all_motion()
        for _ in range(200):
            scene.step()

        assert len(handler.of_kind(EventKind.EXITED_SCENE)) == 2
