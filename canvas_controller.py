# canvas_controller.py
import logging
from typing import Optional

from coordinator import InteractionPhase, ViewportCoordinator
from tilelib import Point

logger = logging.getLogger(__name__)


class CanvasController:
    """
    User-facing commands on a live canvas.

    Holds the coordinator without owning it: whoever hosts the canvas
    attaches it while the canvas is on screen and detaches it on teardown.
    Commands issued while detached are ignored.
    """

    def __init__(self, coordinator: Optional[ViewportCoordinator] = None):
        self.coordinator = coordinator

    def attach(self, coordinator: ViewportCoordinator) -> None:
        self.coordinator = coordinator

    def detach(self) -> None:
        self.coordinator = None

    def recenter_target(self) -> Optional[Point]:
        """Scroll position that brings tile (0, 0) back to the middle of the frame."""
        c = self.coordinator
        if c is None:
            return None
        return c.center.plus(c.offset).plus(c.pending_delta)

    def recenter_view(self) -> bool:
        c = self.coordinator
        if c is None:
            return False
        if c.phase in (InteractionPhase.DRAGGING, InteractionPhase.DECELERATING):
            logger.debug("Recenter ignored while %s", c.phase.value)
            return False

        target = self.recenter_target()
        logger.debug("Recenter: animating to %s", tuple(target))
        c.animate_to(target)
        return True

    def status(self) -> str:
        c = self.coordinator
        if c is None:
            return "Canvas not attached."
        total = c.offset.plus(c.pending_delta)
        return f"Offset ({total.x:g}, {total.y:g}) | {c.tile_count} tiles"
