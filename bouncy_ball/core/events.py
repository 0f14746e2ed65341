"""
Scene Events
============

Event types the scene raises and the handler interface it dispatches them to.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from bouncy_ball.core.shapes import Shape


class EventKind(Enum):
    """Kinds of scene events."""
    TAPPED = "tapped"
    COLLISION = "collision"
    EXITED_SCENE = "exited_scene"
    SHAPE_MOVED = "shape_moved"


@dataclass
class SceneEvent:
    """A single queued scene event."""
    kind: EventKind
    shape: "Shape"
    other: Optional["Shape"] = None  # Collision partner

    def __repr__(self) -> str:
        if self.other is not None:
            return f"SceneEvent({self.kind.value}, {self.shape!r}, {self.other!r})"
        return f"SceneEvent({self.kind.value}, {self.shape!r})"


@dataclass
class Alert:
    """A modal message waiting for the player to dismiss it."""
    text: str
    completion: Optional[Callable[[], None]] = None


class SceneEventHandler:
    """
    Receives scene events by kind.

    Subclasses override the hooks they care about; the defaults do nothing.
    """

    def on_tapped(self, shape: "Shape") -> None:
        pass

    def on_collision(self, shape: "Shape", other: "Shape") -> None:
        pass

    def on_exited_scene(self, shape: "Shape") -> None:
        pass

    def on_shape_moved(self, shape: "Shape") -> None:
        pass

    def handle(self, event: SceneEvent) -> None:
        """Route an event to the matching hook."""
        if event.kind is EventKind.TAPPED:
            self.on_tapped(event.shape)
        elif event.kind is EventKind.COLLISION:
            self.on_collision(event.shape, event.other)
        elif event.kind is EventKind.EXITED_SCENE:
            self.on_exited_scene(event.shape)
        elif event.kind is EventKind.SHAPE_MOVED:
            self.on_shape_moved(event.shape)
