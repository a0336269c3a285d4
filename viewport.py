# viewport.py
import time
import math
import logging
import tkinter as tk
from collections import deque
from tkinter import ttk
from typing import Any, Deque, Optional, Tuple

from tilelib import Point, Size, ZERO

logger = logging.getLogger(__name__)


def _now_ms() -> float:
    return time.perf_counter() * 1000.0


class TkScrollViewport(ttk.Frame):
    """
    Scrollable canvas with a fixed, finite scrollregion.

    Owns the scroll position and turns raw pointer input into the
    interaction lifecycle a delegate listens to:

      - on_drag_began / on_scroll / on_drag_ended(will_decelerate)
      - on_deceleration_ended after a fling runs out of momentum
      - on_scroll_animation_ended after an animated set_scroll_position
      - on_resize when the canvas widget changes size

    Programmatic, non-animated scroll changes are not reported back.
    """

    def __init__(
        self,
        parent,
        *,
        content_size: Size = Size(100000.0, 100000.0),
        animation_ms: int = 300,
        frame_interval_ms: int = 16,
        friction: float = 0.92,
        min_fling_speed: float = 0.3,
    ):
        super().__init__(parent)
        self.rowconfigure(0, weight=1)
        self.columnconfigure(0, weight=1)

        # Canvas + scrollbars
        self.canvas = tk.Canvas(
            self, bg="#ffffff", highlightthickness=0,
            xscrollincrement=1, yscrollincrement=1, confine=False,
        )
        self.canvas.grid(row=0, column=0, sticky="nsew")

        self._xsb = ttk.Scrollbar(self, orient="horizontal", command=self.canvas.xview)
        self._ysb = ttk.Scrollbar(self, orient="vertical", command=self.canvas.yview)
        self._xsb.grid(row=1, column=0, sticky="ew")
        self._ysb.grid(row=0, column=1, sticky="ns")
        self.canvas.configure(xscrollcommand=self._xsb.set, yscrollcommand=self._ysb.set)

        self._content = Size(*content_size)
        self._pos: Point = ZERO
        self._frame = Size(0, 0)
        self._delegate: Any = None

        # Interaction state
        self._is_dragging = False
        self._drag_last: Optional[Tuple[int, int]] = None
        # (t_ms, x, y) pointer samples used to estimate fling velocity
        self._samples: Deque[Tuple[float, int, int]] = deque(maxlen=8)
        self._velocity_window_ms = 80.0

        # -------------------------
        # Deceleration (momentum)
        # -------------------------
        self._frame_interval_ms = int(frame_interval_ms)
        self._friction = float(friction)           # velocity multiplier per frame
        self._min_fling_speed = float(min_fling_speed)  # px/ms to start decelerating
        self._stop_speed = 0.02                    # px/ms to stop decelerating
        self._velocity = (0.0, 0.0)
        self._decel_after_id = None

        # -------------------------
        # Scroll animation
        # -------------------------
        self._animation_ms = max(1, int(animation_ms))
        self._anim_after_id = None
        self._anim_from: Point = ZERO
        self._anim_to: Point = ZERO
        self._anim_start_ms = 0.0

        self.canvas.configure(scrollregion=(0, 0, self._content.width, self._content.height))

        # bindings
        self.canvas.bind("<Configure>", self._on_configure)

    # -----------------------------
    # Viewport capability
    # -----------------------------
    def set_delegate(self, delegate):
        self._delegate = delegate

    def content_size(self) -> Size:
        return self._content

    def set_content_size(self, size: Size):
        self._content = Size(*size)
        self.canvas.configure(scrollregion=(0, 0, self._content.width, self._content.height))

    def frame_size(self) -> Size:
        if self._frame.width > 0 and self._frame.height > 0:
            return self._frame
        # not mapped yet
        return Size(self.canvas.winfo_width(), self.canvas.winfo_height())

    def scroll_position(self) -> Point:
        return self._pos

    def set_scroll_position(self, position: Point, animated: bool = False):
        if animated:
            self._start_animation(Point(*position))
            return
        self._apply_position(Point(*position))

    def disable_scroll_shortcuts(self):
        """
        Hide the scrollbars. Jumping along a 100000px scrollregion with them
        would hand the user the raw bounded range instead of the canvas.
        """
        self._xsb.grid_remove()
        self._ysb.grid_remove()
        self.canvas.configure(xscrollcommand="", yscrollcommand="")

    @property
    def is_animating(self) -> bool:
        return self._anim_after_id is not None

    # -----------------------------
    # Pan
    # -----------------------------
    def drag_begin(self, x: int, y: int):
        # a recenter animation always runs to completion
        if self.is_animating:
            return

        # grabbing during momentum stops it without ending the interaction
        self._cancel_after("_decel_after_id")

        self._is_dragging = True
        self._drag_last = (x, y)
        self._samples.clear()
        self._samples.append((_now_ms(), x, y))
        self._notify("on_drag_began")

    def drag_move(self, x: int, y: int):
        if not self._is_dragging or self._drag_last is None:
            return

        lx, ly = self._drag_last
        self._drag_last = (x, y)
        self._samples.append((_now_ms(), x, y))

        # content follows the pointer, so the scroll position moves against it
        self._scroll_by(-(x - lx), -(y - ly))

    def drag_end(self):
        if not self._is_dragging:
            return
        self._is_dragging = False
        self._drag_last = None

        vx, vy = self._estimate_velocity()
        will_decelerate = math.hypot(vx, vy) >= self._min_fling_speed
        self._notify("on_drag_ended", will_decelerate)

        if will_decelerate:
            self._velocity = (vx, vy)
            self._decel_after_id = self.after(self._frame_interval_ms, self._decel_tick)

    def _estimate_velocity(self) -> Tuple[float, float]:
        if len(self._samples) < 2:
            return 0.0, 0.0
        t1, x1, y1 = self._samples[-1]
        if _now_ms() - t1 > self._velocity_window_ms:
            # pointer rested before release
            return 0.0, 0.0

        t0, x0, y0 = self._samples[0]
        for t, sx, sy in self._samples:
            if t1 - t <= self._velocity_window_ms:
                t0, x0, y0 = t, sx, sy
                break
        dt = t1 - t0
        if dt <= 0:
            return 0.0, 0.0
        return (x1 - x0) / dt, (y1 - y0) / dt

    # -----------------------------
    # Deceleration
    # -----------------------------
    def _decel_tick(self):
        self._decel_after_id = None
        vx, vy = self._velocity
        vx *= self._friction
        vy *= self._friction
        self._velocity = (vx, vy)

        before = self._pos
        if math.hypot(vx, vy) >= self._stop_speed:
            self._scroll_by(-vx * self._frame_interval_ms, -vy * self._frame_interval_ms)

        # out of momentum or pinned against the edge of the scrollregion
        if math.hypot(vx, vy) < self._stop_speed or self._pos == before:
            self._velocity = (0.0, 0.0)
            self._notify("on_deceleration_ended")
            return

        self._decel_after_id = self.after(self._frame_interval_ms, self._decel_tick)

    # -----------------------------
    # Scroll animation
    # -----------------------------
    def _start_animation(self, target: Point):
        # a new request replaces the running one; only the last one ends
        self._cancel_after("_anim_after_id")
        self._anim_from = self._pos
        self._anim_to = target
        self._anim_start_ms = _now_ms()
        self._anim_after_id = self.after(0, self._anim_tick)

    def _anim_tick(self):
        t = (_now_ms() - self._anim_start_ms) / float(self._animation_ms)
        t = max(0.0, min(1.0, t))
        eased = 1.0 - (1.0 - t) ** 3  # ease-out cubic

        fx, fy = self._anim_from
        tx, ty = self._anim_to
        self._apply_position(Point(fx + (tx - fx) * eased, fy + (ty - fy) * eased))
        self._notify("on_scroll", self._pos)

        if t >= 1.0:
            self._anim_after_id = None
            self._notify("on_scroll_animation_ended")
            return
        self._anim_after_id = self.after(self._frame_interval_ms, self._anim_tick)

    # -----------------------------
    # Geometry helpers
    # -----------------------------
    def _scroll_by(self, dx: float, dy: float):
        # drag and momentum stop at the edge of the scrollregion
        before = self._pos
        self._apply_position(self._clamped(Point(before.x + dx, before.y + dy)))
        if self._pos != before:
            self._notify("on_scroll", self._pos)

    def _clamped(self, pos: Point) -> Point:
        frame = self.frame_size()
        max_x = max(0.0, self._content.width - frame.width)
        max_y = max(0.0, self._content.height - frame.height)
        return Point(max(0.0, min(max_x, pos.x)), max(0.0, min(max_y, pos.y)))

    def _apply_position(self, pos: Point):
        # programmatic positions may leave the scrollregion (confine=False)
        self._pos = pos
        self.canvas.xview_moveto(pos.x / max(1.0, float(self._content.width)))
        self.canvas.yview_moveto(pos.y / max(1.0, float(self._content.height)))

    def _on_configure(self, event):
        size = Size(event.width, event.height)
        if size == self._frame:
            return
        self._frame = size
        logger.debug("Viewport frame %dx%d", event.width, event.height)
        self._notify("on_resize", size)

    # -----------------------------
    # Misc helpers
    # -----------------------------
    def _notify(self, name: str, *args):
        if self._delegate is None:
            return
        getattr(self._delegate, name)(*args)

    def _cancel_after(self, attr: str):
        after_id = getattr(self, attr)
        if after_id is not None:
            try:
                self.after_cancel(after_id)
            except Exception:
                pass
            setattr(self, attr, None)
