# input_controller.py
class InputController:
    """
    Dumb input layer:
      - Forwards left-button drag to the viewport's pan methods
      - Routes the recenter shortcuts (c / Home) to the app

    No math here. Scrolling and momentum live in viewport.py, tile
    bookkeeping in coordinator.py.
    """

    def __init__(self, app, viewport):
        self.app = app
        self.viewport = viewport
        self.canvas = viewport.canvas

        self._pan_active = False

    def install(self):
        # Mouse drag panning
        self.canvas.bind("<ButtonPress-1>", self._on_pan_press)
        self.canvas.bind("<B1-Motion>", self._on_pan_move)
        self.canvas.bind("<ButtonRelease-1>", self._on_pan_release)

        # Recenter (bind on app so it works even when canvas isn't focused)
        self.app.bind_all("<KeyPress-c>", self._on_recenter)
        self.app.bind_all("<KeyPress-Home>", self._on_recenter)

        # Make sure canvas can receive events
        self.canvas.bind("<Enter>", lambda e: self.canvas.focus_set())
        self.canvas.bind("<Button-1>", lambda e: self.canvas.focus_set(), add=True)

    # -----------------------------
    # Panning
    # -----------------------------
    def _on_pan_press(self, e):
        self._pan_active = True
        try:
            self.canvas.configure(cursor="fleur")
        except Exception:
            pass
        self.viewport.drag_begin(e.x, e.y)

    def _on_pan_move(self, e):
        if not self._pan_active:
            return
        self.viewport.drag_move(e.x, e.y)

    def _on_pan_release(self, _e):
        self._pan_active = False
        try:
            self.canvas.configure(cursor="")
        except Exception:
            pass
        self.viewport.drag_end()

    # -----------------------------
    # Recenter
    # -----------------------------
    def _on_recenter(self, _e=None):
        if self._pan_active:
            return "break"
        self.app.recenter_view()
        return "break"
