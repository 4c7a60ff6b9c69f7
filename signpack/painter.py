"""
painter.py — Canvas-style text and shape drawing on a transparent RGBA layer.

Painter mirrors the handful of 2D-context operations the text effects
need: fillText / strokeText with a fill color or gradient, global alpha, a
drop shadow (color, blur, offset) and a composite mode. Text is anchored on
its vertical middle; horizontal anchoring follows the current alignment.

Usage:
    painter = Painter(layer, font, align="center")
    painter.fill("CP 1", 256, 40, "#ffffff", shadow=Shadow("#000000", 4, 2, 2))
    painter.stroke("CP 1", 256, 40, "#000000", 2)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple, Union

import numpy as np
from PIL import Image, ImageChops, ImageDraw, ImageFilter

from .colors import ColorLike, composite, to_rgba

Fill = Union[ColorLike, Image.Image]

_ANCHORS = {
    "left": "lm",
    "start": "lm",
    "right": "rm",
    "end": "rm",
    "center": "mm",
}


@dataclass(frozen=True)
class Shadow:
    color: ColorLike
    blur: float = 0.0
    offset_x: float = 0.0
    offset_y: float = 0.0

    @property
    def visible(self) -> bool:
        # canvas skips shadows that are fully transparent or have no extent
        if to_rgba(self.color)[3] == 0:
            return False
        return self.blur > 0 or self.offset_x != 0 or self.offset_y != 0


class Painter:
    """Draws text (or any masked shape) onto *layer* in place."""

    def __init__(self, layer: Image.Image, font, align: str = "center") -> None:
        self.layer = layer
        self.font = font
        self.align = align

    @property
    def size(self) -> Tuple[int, int]:
        return self.layer.size

    @property
    def anchor(self) -> str:
        return _ANCHORS.get(self.align, "mm")

    def measure(self, text: str) -> float:
        return self.font.getlength(text) if text else 0.0

    # ── Masks ────────────────────────────────────────────────────────────────

    def glyph_mask(self, text: str, x: float, y: float) -> Image.Image:
        mask = Image.new("L", self.size, 0)
        if text:
            ImageDraw.Draw(mask).text((x, y), text, fill=255, font=self.font, anchor=self.anchor)
        return mask

    def outline_mask(self, text: str, x: float, y: float, line_width: float) -> Image.Image:
        """Band of *line_width* straddling the glyph outline, like strokeText."""
        mask = Image.new("L", self.size, 0)
        if not text or line_width <= 0:
            return mask
        half = max(1, int(round(line_width / 2)))
        ImageDraw.Draw(mask).text(
            (x, y), text, fill=255, font=self.font, anchor=self.anchor,
            stroke_width=half, stroke_fill=255,
        )
        inner = self.glyph_mask(text, x, y)
        if line_width >= 2:
            inner = inner.filter(ImageFilter.MinFilter(2 * half + 1))
        return ImageChops.subtract(mask, inner)

    # ── Drawing ──────────────────────────────────────────────────────────────

    def fill(
        self,
        text: str,
        x: float,
        y: float,
        fill: Fill,
        alpha: float = 1.0,
        shadow: Optional[Shadow] = None,
        mode: str = "source-over",
    ) -> None:
        self.paint_mask(self.glyph_mask(text, x, y), fill, alpha, shadow, mode)

    def stroke(
        self,
        text: str,
        x: float,
        y: float,
        color: Fill,
        line_width: float,
        alpha: float = 1.0,
        mode: str = "source-over",
    ) -> None:
        self.paint_mask(self.outline_mask(text, x, y, line_width), color, alpha, None, mode)

    def paint_mask(
        self,
        mask: Image.Image,
        fill: Fill,
        alpha: float = 1.0,
        shadow: Optional[Shadow] = None,
        mode: str = "source-over",
    ) -> None:
        """Paint *fill* through *mask*, shadow first, then the shape itself."""
        if isinstance(fill, Image.Image):
            source = fill.convert("RGBA").copy()
        else:
            source = Image.new("RGBA", self.size, to_rgba(fill))

        coverage = (
            np.asarray(mask, dtype=np.float64) / 255.0
            * np.asarray(source.getchannel("A"), dtype=np.float64) / 255.0
            * max(0.0, min(1.0, alpha))
        )
        source.putalpha(_to_l(coverage))

        if shadow is not None and shadow.visible:
            self._composite(self._shadow_layer(coverage, shadow), mode)
        self._composite(source, mode)

    def overlay(self, image: Image.Image, mode: str = "source-over") -> None:
        self._composite(image.convert("RGBA"), mode)

    def _shadow_layer(self, coverage: np.ndarray, shadow: Shadow) -> Image.Image:
        r, g, b, a = to_rgba(shadow.color)
        shape = Image.new("L", self.size, 0)
        shape.paste(_to_l(coverage), (int(round(shadow.offset_x)), int(round(shadow.offset_y))))
        if shadow.blur > 0:
            # canvas shadowBlur is twice the Gaussian standard deviation
            shape = shape.filter(ImageFilter.GaussianBlur(radius=shadow.blur / 2))
        alpha = np.asarray(shape, dtype=np.float64) * (a / 255.0)
        layer = Image.new("RGBA", self.size, (r, g, b, 0))
        layer.putalpha(_to_l(alpha / 255.0))
        return layer

    def _composite(self, source: Image.Image, mode: str) -> None:
        if mode in ("source-over", "normal"):
            self.layer.alpha_composite(source)
        else:
            self.layer.paste(composite(self.layer, source, mode), (0, 0))


def _to_l(values: np.ndarray) -> Image.Image:
    """Float coverage in [0, 1] → "L" image."""
    return Image.fromarray(np.clip(np.rint(values * 255), 0, 255).astype(np.uint8), "L")
