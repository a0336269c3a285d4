# app.py
import argparse
import logging
import tkinter as tk
from tkinter import ttk
from typing import List, Optional

import ui_controls
from canvas_config import CanvasConfig, parse_size
from canvas_controller import CanvasController
from coordinator import ViewportCoordinator
from input_controller import InputController
from logging_setup import setup_logging
from tile_renderer import TkTileRenderer
from viewport import TkScrollViewport

logger = logging.getLogger(__name__)


class InfiniteCanvasApp(tk.Tk):
    def __init__(self, settings: CanvasConfig):
        super().__init__()
        self.title("Infinite Canvas")
        self.geometry(settings.window_size)

        self.settings = settings
        self._controls_win: Optional[tk.Toplevel] = None

        # Build UI (widgets + viewport)
        ui_controls.build_ui(self)

        # Canvas core: the app owns the coordinator for as long as the window lives
        self.renderer = TkTileRenderer(self.viewport.canvas)
        self.coordinator = ViewportCoordinator(
            self.viewport,
            self.renderer,
            tile_size=settings.tile_size,
            content_size=settings.content_size,
        )
        self.coordinator.on_commit = lambda _offset: self.set_status()
        self.coordinator.setup()
        self.controller = CanvasController(self.coordinator)

        # Install input controller (all bindings live there)
        self.input = InputController(self, self.viewport)
        self.input.install()

        self.set_status()

    # -------------------------------------------------
    # Viewport creation hook (used by ui_controls)
    # -------------------------------------------------
    def _create_viewport(self, parent):
        s = self.settings
        return TkScrollViewport(
            parent,
            content_size=s.content_size,
            animation_ms=s.animation_ms,
            frame_interval_ms=s.frame_interval_ms,
            friction=s.deceleration_friction,
            min_fling_speed=s.min_fling_speed,
        )

    # -----------------------------
    # Commands
    # -----------------------------
    def recenter_view(self):
        if self.controller.recenter_view():
            self.set_status()

    def set_status(self):
        self.info_var.set(self.controller.status())

    def destroy(self):
        self.controller.detach()
        super().destroy()

    def show_controls(self):
        if self._controls_win is not None and self._controls_win.winfo_exists():
            self._controls_win.lift()
            return

        win = tk.Toplevel(self)
        self._controls_win = win
        win.title("Controls")
        win.resizable(False, False)
        win.transient(self)

        frm = ttk.Frame(win, padding=12)
        frm.pack(fill="both", expand=True)
        lines = [
            "Pan: Left-click + drag (release while moving to fling)",
            "Recenter on tile (0, 0): Recenter button, C or Home",
        ]
        ttk.Label(frm, text="\n".join(lines), justify="left").pack(anchor="w")
        ttk.Button(frm, text="Close", command=win.destroy).pack(anchor="e", pady=(10, 0))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Pan an endless grid of tiles")
    parser.add_argument("--tile-size", type=parse_size, default=None,
                        help="Tile size, N or WxH (default: 100)")
    parser.add_argument("--content-size", type=parse_size, default=None,
                        help="Scrollable extent backing the canvas, N or WxH (default: 100000)")
    parser.add_argument("--geometry", dest="window_size", default=None,
                        help="Initial window size, WxH (default: 900x640)")
    parser.add_argument("--animation-ms", type=int, default=None,
                        help="Duration of the recenter animation (default: 300)")
    parser.add_argument("--log-level", default=None,
                        help="DEBUG, INFO, WARNING or ERROR (default: INFO, or $LOG_LEVEL)")
    return parser


def load_config(argv: Optional[List[str]] = None) -> CanvasConfig:
    args = build_parser().parse_args(argv)
    return CanvasConfig.from_env().with_overrides(
        tile_size=args.tile_size,
        content_size=args.content_size,
        window_size=args.window_size,
        animation_ms=args.animation_ms,
        log_level=args.log_level.upper() if args.log_level else None,
    )


def main(argv: Optional[List[str]] = None):
    settings = load_config(argv)
    setup_logging(settings.log_level)
    logger.debug("Starting with %s", settings)
    app = InfiniteCanvasApp(settings)
    app.mainloop()


if __name__ == "__main__":
    main()
