# tilelib.py
import math
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, NamedTuple, Optional


# -----------------------------
# Geometry primitives
# -----------------------------

class Point(NamedTuple):
    x: float
    y: float

    def plus(self, other) -> "Point":
        return Point(self.x + other[0], self.y + other[1])

    def minus(self, other) -> "Point":
        return Point(self.x - other[0], self.y - other[1])

    def is_zero(self) -> bool:
        return self.x == 0 and self.y == 0


class Size(NamedTuple):
    width: float
    height: float


class TileCoordinate(NamedTuple):
    col: int
    row: int


ZERO = Point(0.0, 0.0)
ORIGIN_TILE = TileCoordinate(0, 0)


def round_half_away(v: float) -> int:
    """
    Round to the nearest integer, ties away from zero.

    Python's round() ties to even, which would make the tile at an exact
    half-tile boundary depend on the parity of its index.
    """
    if v >= 0:
        return int(math.floor(v + 0.5))
    return -int(math.floor(-v + 0.5))


def center_of(content: Size, frame: Size) -> Point:
    """Scroll position that puts the frame in the middle of the content."""
    return Point((content.width - frame.width) / 2.0, (content.height - frame.height) / 2.0)


# -----------------------------
# Visible window
# -----------------------------

@dataclass(frozen=True)
class TileWindow:
    """Inclusive column/row ranges. Empty when lo > hi on either axis."""
    col_lo: int
    col_hi: int
    row_lo: int
    row_hi: int

    @classmethod
    def empty(cls) -> "TileWindow":
        return cls(0, -1, 0, -1)

    @property
    def is_empty(self) -> bool:
        return self.col_lo > self.col_hi or self.row_lo > self.row_hi

    def __len__(self) -> int:
        if self.is_empty:
            return 0
        return (self.col_hi - self.col_lo + 1) * (self.row_hi - self.row_lo + 1)

    def __contains__(self, coord) -> bool:
        col, row = coord
        return self.col_lo <= col <= self.col_hi and self.row_lo <= row <= self.row_hi

    def cells(self) -> Iterator[TileCoordinate]:
        if self.is_empty:
            return
        for row in range(self.row_lo, self.row_hi + 1):
            for col in range(self.col_lo, self.col_hi + 1):
                yield TileCoordinate(col, row)

    def cells_outside(self, other: "TileWindow") -> Iterator[TileCoordinate]:
        """
        Cells of this window that are not in `other`.

        Only the strips that differ are walked, so a one-tile shift costs one
        row or column instead of the whole window.
        """
        if self.is_empty:
            return
        if other.is_empty:
            yield from self.cells()
            return

        for row in range(self.row_lo, self.row_hi + 1):
            if row < other.row_lo or row > other.row_hi:
                for col in range(self.col_lo, self.col_hi + 1):
                    yield TileCoordinate(col, row)
                continue
            # left strip
            for col in range(self.col_lo, min(self.col_hi, other.col_lo - 1) + 1):
                yield TileCoordinate(col, row)
            # right strip
            for col in range(max(self.col_lo, other.col_hi + 1), self.col_hi + 1):
                yield TileCoordinate(col, row)


def visible_window(frame: Size, tile: Size, offset: Point, delta: Point) -> TileWindow:
    """
    Tile coordinates intersecting a frame centered on the canvas origin,
    after panning by offset + delta.

        low  = round((-frame/2 - offset - delta) / tile)
        high = round(( frame/2 - offset - delta) / tile)
    """
    if frame.width <= 0 or frame.height <= 0:
        return TileWindow.empty()

    half_w = frame.width / 2.0
    half_h = frame.height / 2.0
    pan_x = offset.x + delta.x
    pan_y = offset.y + delta.y

    return TileWindow(
        col_lo=round_half_away((-half_w - pan_x) / tile.width),
        col_hi=round_half_away((half_w - pan_x) / tile.width),
        row_lo=round_half_away((-half_h - pan_y) / tile.height),
        row_hi=round_half_away((half_h - pan_y) / tile.height),
    )


def tile_label(coord: TileCoordinate) -> str:
    return f"({coord.col}, {coord.row})"


# -----------------------------
# Data structures
# -----------------------------

@dataclass
class Tile:
    coord: TileCoordinate
    origin: Point                  # absolute, in content coordinates
    size: Size
    handle: Any                    # whatever the renderer returned from create()

    @property
    def label(self) -> str:
        return tile_label(self.coord)

    @property
    def is_origin(self) -> bool:
        return self.coord == ORIGIN_TILE


class TileCache:
    """Live tiles keyed by coordinate. One tile per key."""

    def __init__(self):
        self._tiles: Dict[TileCoordinate, Tile] = {}

    def __len__(self) -> int:
        return len(self._tiles)

    def __contains__(self, coord) -> bool:
        return coord in self._tiles

    def __iter__(self) -> Iterator[Tile]:
        return iter(self._tiles.values())

    def insert(self, tile: Tile) -> None:
        if tile.coord in self._tiles:
            raise KeyError(f"tile {tile.coord} already cached")
        self._tiles[tile.coord] = tile

    def get(self, coord) -> Optional[Tile]:
        return self._tiles.get(coord)

    def remove(self, coord) -> Tile:
        return self._tiles.pop(coord)

    def keys(self) -> List[TileCoordinate]:
        # snapshot, safe to mutate the cache while walking it
        return list(self._tiles.keys())

    def clear(self) -> List[Tile]:
        dropped = list(self._tiles.values())
        self._tiles.clear()
        return dropped


class OffsetTracker:
    """
    Cumulative pan of the canvas, split into the committed offset and the
    delta of the interaction in flight.
    """

    def __init__(self):
        self.offset: Point = ZERO
        self.delta: Point = ZERO

    @property
    def total(self) -> Point:
        return self.offset.plus(self.delta)

    def track(self, center: Point, scroll: Point) -> Point:
        self.delta = Point(*center).minus(scroll)
        return self.delta

    def commit(self) -> Point:
        """Fold the delta into the offset. Returns the delta that was applied."""
        applied = self.delta
        self.offset = self.offset.plus(applied)
        self.delta = ZERO
        return applied

    def reset(self) -> None:
        self.offset = ZERO
        self.delta = ZERO
