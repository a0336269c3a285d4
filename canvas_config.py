# canvas_config.py
import os
import re
from dataclasses import dataclass, replace
from typing import Mapping, Optional

from tilelib import Size

ENV_PREFIX = "INFINITE_CANVAS_"

_GEOMETRY_RE = re.compile(r"^\d+x\d+$")


def parse_size(text: str) -> Size:
    """'100' -> 100x100, '120x80' -> 120x80."""
    parts = str(text).lower().strip().split("x")
    if len(parts) == 1:
        parts = parts * 2
    if len(parts) != 2:
        raise ValueError(f"bad size {text!r}, expected N or WxH")
    try:
        w, h = float(parts[0]), float(parts[1])
    except ValueError:
        raise ValueError(f"bad size {text!r}, expected N or WxH") from None
    return Size(w, h)


@dataclass(frozen=True)
class CanvasConfig:
    # Canvas geometry
    content_size: Size = Size(100000.0, 100000.0)
    tile_size: Size = Size(100.0, 100.0)

    # Window
    window_size: str = "900x640"

    # Motion tuning
    animation_ms: int = 300
    frame_interval_ms: int = 16
    deceleration_friction: float = 0.92
    min_fling_speed: float = 0.3  # px/ms

    log_level: str = "INFO"

    def __post_init__(self):
        tw, th = self.tile_size
        cw, ch = self.content_size
        if tw <= 0 or th <= 0:
            raise ValueError(f"tile_size must be positive, got {tw:g}x{th:g}")
        if cw < tw or ch < th:
            raise ValueError(f"content_size {cw:g}x{ch:g} is smaller than a tile")
        if not _GEOMETRY_RE.match(self.window_size):
            raise ValueError(f"window_size must look like 900x640, got {self.window_size!r}")
        if self.animation_ms <= 0 or self.frame_interval_ms <= 0:
            raise ValueError("animation_ms and frame_interval_ms must be positive")
        if not 0.0 < self.deceleration_friction < 1.0:
            raise ValueError("deceleration_friction must be between 0 and 1")
        if self.min_fling_speed < 0:
            raise ValueError("min_fling_speed must not be negative")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "CanvasConfig":
        env = os.environ if environ is None else environ

        def _get(name):
            v = env.get(ENV_PREFIX + name)
            return v if v not in (None, "") else None

        kw = {}
        if _get("CONTENT_SIZE") is not None:
            kw["content_size"] = parse_size(_get("CONTENT_SIZE"))
        if _get("TILE_SIZE") is not None:
            kw["tile_size"] = parse_size(_get("TILE_SIZE"))
        if _get("GEOMETRY") is not None:
            kw["window_size"] = _get("GEOMETRY")
        if _get("ANIMATION_MS") is not None:
            kw["animation_ms"] = int(_get("ANIMATION_MS"))
        if _get("FRICTION") is not None:
            kw["deceleration_friction"] = float(_get("FRICTION"))

        level = _get("LOG_LEVEL") or env.get("LOG_LEVEL")
        if level:
            kw["log_level"] = level.upper()
        return cls(**kw)

    def with_overrides(self, **overrides) -> "CanvasConfig":
        """Copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})
