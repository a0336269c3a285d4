# logging_setup.py
import logging
import os
import sys
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"


def setup_logging(level: Optional[str] = None) -> None:
    """
    Configure the root logger once.
    Level precedence:
      - explicit `level` arg
      - env LOG_LEVEL (e.g., DEBUG/INFO/WARNING/ERROR)
      - default INFO
    """
    root = logging.getLogger()
    if getattr(root, "_infinite_canvas_configured", False):  # idempotent
        return

    lvl_name = (level or os.environ.get("LOG_LEVEL") or "INFO").upper()
    lvl = getattr(logging, lvl_name, None)
    if not isinstance(lvl, int):
        lvl = logging.INFO

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(lvl)
    root._infinite_canvas_configured = True  # type: ignore[attr-defined]
