from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

import pytest

from coordinator import ViewportCoordinator
from tilelib import Point, Size


class FakeViewport:
    """In-memory viewport. Scroll events are delivered only when a test asks."""

    def __init__(self, frame: Size = Size(300.0, 300.0)) -> None:
        self._content = Size(0.0, 0.0)
        self._frame = Size(*frame)
        self._pos = Point(0.0, 0.0)
        self.delegate: Any = None
        self.shortcuts_disabled = False
        self.set_calls: List[Tuple[Point, bool]] = []
        self.animation_target: Optional[Point] = None

    # Viewport capability
    def content_size(self) -> Size:
        return self._content

    def set_content_size(self, size: Size) -> None:
        self._content = Size(*size)

    def frame_size(self) -> Size:
        return self._frame

    def scroll_position(self) -> Point:
        return self._pos

    def set_scroll_position(self, position: Point, animated: bool = False) -> None:
        self.set_calls.append((Point(*position), animated))
        if animated:
            self.animation_target = Point(*position)
        else:
            self._pos = Point(*position)

    def disable_scroll_shortcuts(self) -> None:
        self.shortcuts_disabled = True

    def set_delegate(self, delegate: Any) -> None:
        self.delegate = delegate

    # Host-side drivers
    def scroll_to(self, x: float, y: float) -> None:
        self._pos = Point(float(x), float(y))
        self.delegate.on_scroll(self._pos)

    def jump_silently(self, x: float, y: float) -> None:
        """Move without reporting a scroll event."""
        self._pos = Point(float(x), float(y))

    def scroll_by(self, dx: float, dy: float) -> None:
        self.scroll_to(self._pos.x + dx, self._pos.y + dy)

    def drag(self, *steps: Tuple[float, float], decelerate: bool = False) -> None:
        self.delegate.on_drag_began()
        for dx, dy in steps:
            self.scroll_by(dx, dy)
        self.delegate.on_drag_ended(decelerate)

    def run_animation(self, frames: int = 4) -> None:
        start = self._pos
        target = self.animation_target
        assert target is not None
        for i in range(1, frames + 1):
            t = i / frames
            self.scroll_to(start.x + (target.x - start.x) * t, start.y + (target.y - start.y) * t)
        self.finish_animation()

    def finish_animation(self) -> None:
        self.animation_target = None
        self.delegate.on_scroll_animation_ended()

    def resize_frame(self, w: float, h: float) -> None:
        self._frame = Size(float(w), float(h))
        self.delegate.on_resize(self._frame)


class RecordingRenderer:
    def __init__(self) -> None:
        self._next = 1
        self.live: Dict[int, Dict[str, Any]] = {}
        self.created: List[Tuple[int, Point, str, bool]] = []
        self.destroyed: List[int] = []
        self.moves: List[Tuple[int, Point]] = []
        self.events: List[Tuple[str, str]] = []

    def create(self, origin: Point, size: Size, label: str, is_origin: bool) -> int:
        handle = self._next
        self._next += 1
        self.live[handle] = {"origin": Point(*origin), "size": size, "label": label, "is_origin": is_origin}
        self.created.append((handle, Point(*origin), label, is_origin))
        self.events.append(("create", label))
        return handle

    def destroy(self, handle: int) -> None:
        assert handle in self.live, f"destroy of unknown handle {handle}"
        self.events.append(("destroy", self.live[handle]["label"]))
        del self.live[handle]
        self.destroyed.append(handle)

    def move(self, handle: int, origin: Point) -> None:
        assert handle in self.live, f"move of unknown handle {handle}"
        self.live[handle]["origin"] = Point(*origin)
        self.moves.append((handle, Point(*origin)))

    def handle_for(self, label: str) -> Optional[int]:
        for handle, info in self.live.items():
            if info["label"] == label:
                return handle
        return None


@pytest.fixture
def viewport() -> FakeViewport:
    return FakeViewport()


@pytest.fixture
def renderer() -> RecordingRenderer:
    return RecordingRenderer()


@pytest.fixture
def coordinator(viewport: FakeViewport, renderer: RecordingRenderer) -> ViewportCoordinator:
    c = ViewportCoordinator(viewport, renderer, tile_size=Size(100.0, 100.0), content_size=Size(100000.0, 100000.0))
    c.setup()
    return c
