# tile_renderer.py
from typing import Dict, Tuple

from PIL import Image, ImageDraw, ImageFont, ImageTk

from tilelib import Point, Size

# Tiles are gray at half strength over a white canvas; the origin tile is
# fully opaque so it can be found again after a long pan.
CANVAS_BG = (255, 255, 255)
TILE_GRAY = (128, 128, 128)
TEXT_COLOR = (0, 0, 0)


def _over(fg: Tuple[int, int, int], bg: Tuple[int, int, int], alpha: float) -> Tuple[int, int, int]:
    return tuple(int(round(f * alpha + b * (1.0 - alpha))) for f, b in zip(fg, bg))


def tile_fill(is_origin: bool) -> Tuple[int, int, int]:
    return _over(TILE_GRAY, CANVAS_BG, 1.0 if is_origin else 0.5)


def render_tile_image(size: Size, label: str, is_origin: bool) -> Image.Image:
    w = max(1, int(round(size[0])))
    h = max(1, int(round(size[1])))
    fill = tile_fill(is_origin)

    img = Image.new("RGB", (w, h), fill)
    draw = ImageDraw.Draw(img)

    # hairline border, black at 10%
    draw.rectangle((0, 0, w - 1, h - 1), outline=_over((0, 0, 0), fill, 0.1))

    font = ImageFont.load_default()
    l, t, r, b = draw.textbbox((0, 0), label, font=font)
    tx = (w - (r - l)) / 2.0 - l
    ty = (h - (b - t)) / 2.0 - t
    draw.text((tx, ty), label, fill=TEXT_COLOR, font=font)
    return img


class TkTileRenderer:
    """Draws each tile as an image item on a tk.Canvas; the item id is the handle."""

    def __init__(self, canvas):
        self.canvas = canvas
        # PhotoImages must stay referenced for as long as their item is shown
        self._images: Dict[int, ImageTk.PhotoImage] = {}

    def __len__(self) -> int:
        return len(self._images)

    def create(self, origin: Point, size: Size, label: str, is_origin: bool) -> int:
        tk_img = ImageTk.PhotoImage(render_tile_image(size, label, is_origin))
        item = self.canvas.create_image(origin[0], origin[1], anchor="nw", image=tk_img)
        self._images[item] = tk_img
        return item

    def destroy(self, handle: int):
        self.canvas.delete(handle)
        self._images.pop(handle, None)

    def move(self, handle: int, origin: Point):
        self.canvas.coords(handle, origin[0], origin[1])
