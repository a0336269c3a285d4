# coordinator.py
import logging
from enum import Enum
from typing import Any, Callable, Optional, Protocol

from tilelib import (
    Point, Size, TileCoordinate, TileWindow, Tile,
    TileCache, OffsetTracker,
    center_of, visible_window,
)

logger = logging.getLogger(__name__)


# -----------------------------
# Errors
# -----------------------------

class CanvasError(Exception):
    """Programming errors in how the coordinator is driven."""


class CanvasNotReady(CanvasError):
    pass


class InteractionInProgress(CanvasError):
    pass


# -----------------------------
# Collaborator capabilities
# -----------------------------

class Viewport(Protocol):
    """The bounded scrollable surface hosting the tiles."""

    def content_size(self) -> Size: ...

    def set_content_size(self, size: Size) -> None: ...

    def frame_size(self) -> Size: ...

    def scroll_position(self) -> Point: ...

    def set_scroll_position(self, position: Point, animated: bool = False) -> None: ...

    def disable_scroll_shortcuts(self) -> None: ...

    def set_delegate(self, delegate: Any) -> None: ...


class TileRenderer(Protocol):
    def create(self, origin: Point, size: Size, label: str, is_origin: bool) -> Any: ...

    def destroy(self, handle: Any) -> None: ...

    def move(self, handle: Any, origin: Point) -> None: ...


class InteractionPhase(Enum):
    IDLE = "idle"
    DRAGGING = "dragging"
    DECELERATING = "decelerating"
    ANIMATING = "animating"


# -----------------------------
# Coordinator
# -----------------------------

class ViewportCoordinator:
    """
    Keeps an unbounded tile grid on a viewport with a bounded scroll range.

    While the user pans, the viewport scrolls normally and the distance from
    its center is tracked as the pending delta. When the interaction ends
    (drag released without momentum, momentum stopped, or a scroll
    animation finished) the delta is folded into the logical offset, every
    tile is shifted by it, and the viewport jumps back to center. Tiles and
    scroll position move by the same amount, so nothing visibly changes.

    Tiles are created when they enter the visible window and destroyed when
    they leave it.
    """

    def __init__(
        self,
        viewport: Viewport,
        renderer: TileRenderer,
        *,
        tile_size: Size = Size(100.0, 100.0),
        content_size: Size = Size(100000.0, 100000.0),
    ):
        self.viewport = viewport
        self.renderer = renderer
        self.tile_size = Size(*tile_size)
        self.extent = Size(*content_size)

        self.cache = TileCache()
        self.offsets = OffsetTracker()

        # Called with the new offset after every commit that moved it and after a resize
        self.on_commit: Optional[Callable[[Point], None]] = None

        self._phase = InteractionPhase.IDLE
        self._ready = False

        # Window the cache currently holds exactly; None when unknown
        self._window: Optional[TileWindow] = None

    # -----------------------------
    # State
    # -----------------------------
    @property
    def offset(self) -> Point:
        return self.offsets.offset

    @property
    def pending_delta(self) -> Point:
        return self.offsets.delta

    @property
    def phase(self) -> InteractionPhase:
        return self._phase

    @property
    def center(self) -> Point:
        self._require_ready("center")
        return center_of(self.viewport.content_size(), self.viewport.frame_size())

    @property
    def tile_count(self) -> int:
        return len(self.cache)

    @property
    def window(self) -> Optional[TileWindow]:
        """Window the cache was last reconciled to, or None after a stray create."""
        return self._window

    def tile_at(self, coord) -> Optional[Tile]:
        return self.cache.get(TileCoordinate(*coord))

    def tile_origin(self, coord) -> Point:
        """Content-space origin of `coord` under the committed offset."""
        content = self.viewport.content_size()
        col, row = coord
        return Point(
            (content.width - self.tile_size.width) / 2.0 + self.offset.x + col * self.tile_size.width,
            (content.height - self.tile_size.height) / 2.0 + self.offset.y + row * self.tile_size.height,
        )

    def frame_origin(self, coord) -> Optional[Point]:
        """Where the tile sits relative to the frame's top-left corner."""
        tile = self.tile_at(coord)
        if tile is None:
            return None
        return tile.origin.minus(self.viewport.scroll_position())

    # -----------------------------
    # Setup / resize
    # -----------------------------
    def setup(self) -> None:
        vp = self.viewport
        vp.set_content_size(self.extent)
        vp.disable_scroll_shortcuts()
        vp.set_delegate(self)

        for tile in self.cache.clear():
            self.renderer.destroy(tile.handle)
        self._window = TileWindow.empty()
        self.offsets.reset()
        self._phase = InteractionPhase.IDLE
        self._ready = True

        vp.set_scroll_position(self.center)
        self.reconcile(self.visible_window())
        logger.info(
            "Canvas ready: content %gx%g, tile %gx%g, %d tiles",
            self.extent.width, self.extent.height,
            self.tile_size.width, self.tile_size.height, len(self.cache),
        )

    def resize(self, frame_size: Size) -> None:
        """
        Re-anchor after the frame changed to `frame_size`.

        The offset and pending delta go back to zero, and tiles already on
        the canvas are moved to their zero-offset positions so none of them
        is left where the old offset put it. A running recenter animation is
        retargeted at the new center.
        """
        self._require_ready("resize")
        frame = Size(*frame_size)
        vp = self.viewport
        vp.set_content_size(self.extent)
        self.offsets.reset()
        center = center_of(self.extent, frame)
        vp.set_scroll_position(center)
        if self._phase is InteractionPhase.ANIMATING:
            vp.set_scroll_position(center, animated=True)

        for tile in self.cache:
            origin = self.tile_origin(tile.coord)
            if origin != tile.origin:
                tile.origin = origin
                self.renderer.move(tile.handle, origin)

        self.reconcile(visible_window(frame, self.tile_size, self.offsets.offset, self.offsets.delta))
        logger.info("Resized to %gx%g, %d tiles", frame.width, frame.height, len(self.cache))

        if self.on_commit is not None:
            self.on_commit(self.offsets.offset)

    # -----------------------------
    # Tiles
    # -----------------------------
    def visible_window(self) -> TileWindow:
        self._require_ready("visible_window")
        return visible_window(
            self.viewport.frame_size(), self.tile_size, self.offsets.offset, self.offsets.delta
        )

    def reconcile(self, window: TileWindow) -> None:
        """Create what entered `window`, then destroy what left it."""
        self._require_ready("reconcile")

        previous = self._window
        if previous is not None:
            entering = list(window.cells_outside(previous))
            leaving = list(previous.cells_outside(window))
        else:
            entering = list(window.cells())
            leaving = [c for c in self.cache.keys() if c not in window]

        created = 0
        for coord in entering:
            if coord not in self.cache:
                self._make_tile(coord)
                created += 1

        removed = 0
        for coord in leaving:
            tile = self.cache.get(coord)
            if tile is None:
                continue
            self.cache.remove(coord)
            self.renderer.destroy(tile.handle)
            removed += 1

        self._window = window
        if created or removed:
            logger.debug("Reconcile %s: +%d -%d (%d live)", window, created, removed, len(self.cache))

    def create_tile(self, coord) -> Tile:
        self._require_ready("create_tile")
        coord = TileCoordinate(*coord)
        if coord in self.cache:
            raise KeyError(f"tile {coord} already cached")
        if self._window is not None and coord not in self._window:
            self._window = None
        return self._make_tile(coord)

    def _make_tile(self, coord: TileCoordinate) -> Tile:
        tile = Tile(coord=coord, origin=self.tile_origin(coord), size=self.tile_size, handle=None)
        tile.handle = self.renderer.create(tile.origin, tile.size, tile.label, tile.is_origin)
        self.cache.insert(tile)
        return tile

    # -----------------------------
    # Recenter
    # -----------------------------
    def commit(self) -> None:
        """
        Fold the pending delta into the offset and snap the viewport back to
        center. A second call without scrolling in between does nothing.
        """
        self._require_ready("commit")
        if self._phase is not InteractionPhase.IDLE:
            raise InteractionInProgress(f"commit() while {self._phase.value}")

        center = self.center
        applied = self.offsets.commit()
        if not applied.is_zero():
            for tile in self.cache:
                tile.origin = tile.origin.plus(applied)
                self.renderer.move(tile.handle, tile.origin)
            logger.debug("Commit %s -> offset %s", tuple(applied), tuple(self.offsets.offset))

        if Point(*self.viewport.scroll_position()) != center:
            self.viewport.set_scroll_position(center)

        if not applied.is_zero() and self.on_commit is not None:
            self.on_commit(self.offsets.offset)

    def animate_to(self, position: Point) -> None:
        """Start a programmatic scroll; its end commits like any gesture."""
        self._require_ready("animate_to")
        if self._phase not in (InteractionPhase.IDLE, InteractionPhase.ANIMATING):
            raise InteractionInProgress(f"animate_to() while {self._phase.value}")
        self._phase = InteractionPhase.ANIMATING
        self.viewport.set_scroll_position(Point(*position), animated=True)

    # -----------------------------
    # Viewport delegate
    # -----------------------------
    def on_scroll(self, position: Point) -> None:
        self._require_ready("on_scroll")
        self.offsets.track(self.center, Point(*position))
        self.reconcile(self.visible_window())

    def on_drag_began(self) -> None:
        self._require_ready("on_drag_began")
        self._phase = InteractionPhase.DRAGGING

    def on_drag_ended(self, will_decelerate: bool) -> None:
        self._require_ready("on_drag_ended")
        if will_decelerate:
            self._phase = InteractionPhase.DECELERATING
            return
        self._phase = InteractionPhase.IDLE
        self.commit()

    def on_deceleration_ended(self) -> None:
        self._require_ready("on_deceleration_ended")
        self._phase = InteractionPhase.IDLE
        self.commit()

    def on_scroll_animation_ended(self) -> None:
        self._require_ready("on_scroll_animation_ended")
        self._phase = InteractionPhase.IDLE
        self.commit()

    def on_resize(self, frame_size: Size) -> None:
        self.resize(frame_size)

    # -----------------------------
    # Misc helpers
    # -----------------------------
    def _require_ready(self, op: str) -> None:
        if not self._ready:
            raise CanvasNotReady(f"ViewportCoordinator.{op}() called before setup()")
