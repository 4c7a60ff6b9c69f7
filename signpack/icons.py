"""
icons.py — Built-in vector icon catalog and its rasteriser.

Icons are SVG path strings (Material Design style) with a viewBox. Paths are
parsed with svgpathtools, flattened to polygons, and filled with the nonzero
winding rule on a supersampled mask.

Usage:
    from signpack.icons import icon_list, render_icon

    icon_list("race")                       # → [("checkered-flag", "Checkered Flag"), ...]
    render_icon(canvas, "arrows", "arrow-up", 256, 40, 48, "#ffffff")
"""

from __future__ import annotations

import functools
import logging
import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import numpy as np
from PIL import Image, ImageDraw
from svgpathtools import Line, parse_path

from .colors import ColorLike
from .painter import Painter, Shadow

logger = logging.getLogger(__name__)

_SUPERSAMPLE = 4
_CURVE_SAMPLES = 16


@dataclass(frozen=True)
class Icon:
    id: str
    name: str
    path: str
    view_box: Tuple[float, float, float, float] = (0, 0, 24, 24)

    @property
    def width(self) -> float:
        return self.view_box[2]

    @property
    def height(self) -> float:
        return self.view_box[3]


def _icon(icon_id: str, name: str, path: str, view_box: str = "0 0 24 24") -> Tuple[str, Icon]:
    vb = tuple(float(v) for v in view_box.split())
    return icon_id, Icon(icon_id, name, path, vb)  # type: ignore[arg-type]


# ── Catalog ───────────────────────────────────────────────────────────────────

ICON_LIBRARY: Dict[str, Dict[str, Icon]] = {
    "arrows": dict([
        _icon("double-arrow-up", "Double Arrow Up",
              "M6 17.59L7.41 19 12 14.42 16.59 19 18 17.59l-6-6z M6 11l1.41 1.41L12 7.83l4.59 4.58L18 11l-6-6z"),
        _icon("double-arrow-down", "Double Arrow Down",
              "M18 6.41L16.59 5 12 9.58 7.41 5 6 6.41l6 6z M18 13l-1.41-1.41L12 16.17l-4.59-4.58L6 13l6 6z"),
        _icon("double-arrow-left", "Double Arrow Left",
              "M17.59 18L19 16.59 14.42 12 19 7.41 17.59 6l-6 6z M11 18l1.41-1.41L7.83 12l4.58-4.59L11 6l-6 6z"),
        _icon("double-arrow-right", "Double Arrow Right",
              "M6.41 6L5 7.41 9.58 12 5 16.59 6.41 18l6-6z M13 6l-1.41 1.41L16.17 12l-4.58 4.59L13 18l6-6z"),
        _icon("arrow-up", "Arrow Up", "M7.41 15.41L12 10.83l4.59 4.58L18 14l-6-6-6 6z"),
        _icon("arrow-down", "Arrow Down", "M7.41 8.59L12 13.17l4.59-4.58L18 10l-6 6-6-6 1.41-1.41z"),
        _icon("arrow-left", "Arrow Left", "M15.41 7.41L14 6l-6 6 6 6 1.41-1.41L10.83 12z"),
        _icon("arrow-right", "Arrow Right", "M8.59 16.59L10 18l6-6-6-6-1.41 1.41L13.17 12z"),
        _icon("arrow-up-left", "Arrow Up Left", "M19 17.59L17.59 19 7 8.41V15H5V5h10v2H8.41z"),
        _icon("arrow-up-right", "Arrow Up Right", "M5 17.59L6.41 19 17 8.41V15h2V5H9v2h6.59z"),
        _icon("arrow-down-left", "Arrow Down Left", "M17 6.41L15.59 5 5 15.59V9H3v10h10v-2H6.41z"),
        _icon("arrow-down-right", "Arrow Down Right", "M7 6.41L8.41 5 19 15.59V9h2v10H11v-2h6.59z"),
        _icon("fast-forward", "Fast Forward", "M4 18l8.5-6L4 6v12zm9-12v12l8.5-6L13 6z"),
        _icon("fast-rewind", "Fast Rewind", "M11 18V6l-8.5 6 8.5 6zm.5-6l8.5 6V6l-8.5 6z"),
    ]),
    "race": dict([
        _icon("checkered-flag", "Checkered Flag",
              "M4 4h2v2H4V4zm0 4h2v2H4V8zm0 4h2v2H4v-2zm0 4h2v2H4v-2zm0 4h2v2H4v-2z"
              "M6 4h2v2H6V4zm0 4h2v2H6V8zm0 4h2v2H6v-2zm0 4h2v2H6v-2zm0 4h2v2H6v-2z"
              "M8 4h2v2H8V4zm0 4h2v2H8V8zm0 4h2v2H8v-2zm0 4h2v2H8v-2z"
              "m2-12h2v2h-2V4zm0 4h2v2h-2V8zm0 4h2v2h-2v-2zm0 4h2v2h-2v-2z"
              "m2-12h2v2h-2V4zm0 4h2v2h-2V8zm0 4h2v2h-2v-2zm0 4h2v2h-2v-2z"
              "m2-12h2v2h-2V4zm0 4h2v2h-2V8zm0 4h2v2h-2v-2zm0 4h2v2h-2v-2z"
              "m2-12h2v2h-2V4zm0 4h2v2h-2V8zm0 4h2v2h-2v-2zm0 4h2v2h-2v-2z"
              "M4 2v20h2V2H4z"),
        _icon("timer", "Timer",
              "M15 1H9v2h6V1zm-4 13h2V8h-2v6zm8.03-6.61l1.42-1.42c-.43-.51-.9-.99-1.41-1.41l-1.42 1.42"
              "C16.07 4.74 14.12 4 12 4c-4.97 0-9 4.03-9 9s4.02 9 9 9 9-4.03 9-9c0-2.12-.74-4.07-1.97-5.61z"
              "M12 20c-3.87 0-7-3.13-7-7s3.13-7 7-7 7 3.13 7 7-3.13 7-7 7z"),
        _icon("speed", "Speed",
              "M20.38 8.57l-1.23 1.85a8 8 0 0 1-.22 7.58H5.07A8 8 0 0 1 15.58 6.85l1.85-1.23"
              "A10 10 0 0 0 3.35 19a2 2 0 0 0 1.72 1h13.85a2 2 0 0 0 1.74-1 10 10 0 0 0-.27-10.44z"
              "m-9.79 6.84a2 2 0 0 0 2.83 0l5.66-8.49-8.49 5.66a2 2 0 0 0 0 2.83z"),
        _icon("finish", "Finish Line", "M14.4 6L14 4H5v17h2v-7h5.6l.4 2h7V6z"),
        _icon("trophy", "Trophy",
              "M19 5h-2V3H7v2H5c-1.1 0-2 .9-2 2v1c0 2.55 1.92 4.63 4.39 4.94.63 1.5 1.98 2.63 3.61 2.96V19H7v2h10v-2h-4"
              "v-3.1c1.63-.33 2.98-1.46 3.61-2.96C19.08 12.63 21 10.55 21 8V7c0-1.1-.9-2-2-2z"
              "M5 8V7h2v3.82C5.84 10.4 5 9.3 5 8zm7 6c-1.65 0-3-1.35-3-3V5h6v6c0 1.65-1.35 3-3 3z"
              "m7-6c0 1.3-.84 2.4-2 2.82V7h2v1z"),
        _icon("star", "Star",
              "M12 17.27L18.18 21l-1.64-7.03L22 9.24l-7.19-.61L12 2 9.19 8.63 2 9.24l5.46 4.73L5.82 21z"),
        _icon("bolt", "Lightning Bolt", "M7 2v11h3v9l7-12h-4l4-8z"),
        _icon("target", "Target",
              "M12 2C6.48 2 2 6.48 2 12s4.48 10 10 10 10-4.48 10-10S17.52 2 12 2z"
              "m0 18c-4.42 0-8-3.58-8-8s3.58-8 8-8 8 3.58 8 8-3.58 8-8 8z"
              "m0-14c-3.31 0-6 2.69-6 6s2.69 6 6 6 6-2.69 6-6-2.69-6-6-6z"
              "m0 10c-2.21 0-4-1.79-4-4s1.79-4 4-4 4 1.79 4 4-1.79 4-4 4z"
              "m0-6c-1.1 0-2 .9-2 2s.9 2 2 2 2-.9 2-2-.9-2-2-2z"),
        _icon("rocket", "Rocket",
              "M9 0C5 3.5 4 8 4 9v2c0 1 1 2 2 2h1l1 2h2l1-2h1c1 0 2-1 2-2V9c0-1-1-5.5-5-9z"
              "m0 11c-.6 0-1-.4-1-1s.4-1 1-1 1 .4 1 1-.4 1-1 1zM2 22h14v-2H2v2z"
              " M7 18c0-1.1.9-2 2-2s2 .9 2 2h1c0-1.1.9-2 2-2s2 .9 2 2h2v-4H5v4h2z",
              "0 0 18 24"),
        _icon("medal", "Medal",
              "M12 8c0 2.21-1.79 4-4 4s-4-1.79-4-4 1.79-4 4-4 4 1.79 4 4z"
              "m2 4.5c0 2.49-2.01 4.5-4.5 4.5S5 14.99 5 12.5c0-.35.05-.69.13-1.02L2 7h4L8 2l2 5h4"
              "l-3.13 4.48c.08.33.13.67.13 1.02z M20 2h-4l-2 5 2 5h4z M8 2H4l2 5-2 5h4z"),
    ]),
}

ICON_CATEGORIES = tuple(ICON_LIBRARY)


def get_icon(category: str, icon_id: str) -> Optional[Icon]:
    return ICON_LIBRARY.get(category, {}).get(icon_id)


def icon_list(category: str) -> List[Tuple[str, str]]:
    """(id, name) pairs of a category in catalog order; unknown category → []."""
    return [(icon.id, icon.name) for icon in ICON_LIBRARY.get(category, {}).values()]


# ── Rasterising ───────────────────────────────────────────────────────────────

@functools.lru_cache(maxsize=None)
def _subpath_polygons(d: str) -> Tuple[Tuple[Tuple[float, float], ...], ...]:
    """Flatten an SVG path into one closed polygon per subpath (viewBox units)."""
    polygons = []
    for sub in parse_path(d).continuous_subpaths():
        pts: List[complex] = []
        for seg in sub:
            if isinstance(seg, Line):
                pts.append(seg.start)
            else:
                pts.extend(seg.point(i / _CURVE_SAMPLES) for i in range(_CURVE_SAMPLES))
        if len(pts) >= 3:
            polygons.append(tuple((p.real, p.imag) for p in pts))
    return tuple(polygons)


def _signed_area(poly) -> float:
    area = 0.0
    for (x0, y0), (x1, y1) in zip(poly, poly[1:] + poly[:1]):
        area += x0 * y1 - x1 * y0
    return area / 2


def icon_mask(icon: Icon, canvas_size: Tuple[int, int], x: float, y: float, size: float) -> Image.Image:
    """
    Coverage mask of *icon* scaled so its longer side is *size*, centred on
    (x, y), on a canvas of *canvas_size*.
    """
    width, height = canvas_size
    mask = Image.new("L", canvas_size, 0)
    scale = size / max(icon.width, icon.height)
    left = x - icon.width * scale / 2
    top = y - icon.height * scale / 2

    # rasterise only the icon's bounding box
    bx0, by0 = max(0, math.floor(left)), max(0, math.floor(top))
    bx1 = min(width, math.ceil(left + icon.width * scale))
    by1 = min(height, math.ceil(top + icon.height * scale))
    if bx1 <= bx0 or by1 <= by0:
        return mask

    s = _SUPERSAMPLE
    box_w, box_h = bx1 - bx0, by1 - by0
    winding = np.zeros((box_h * s, box_w * s), dtype=np.int16)
    vx, vy = icon.view_box[0], icon.view_box[1]
    for poly in _subpath_polygons(icon.path):
        pts = [
            (((px - vx) * scale + left - bx0) * s, ((py - vy) * scale + top - by0) * s)
            for px, py in poly
        ]
        layer = Image.new("L", (box_w * s, box_h * s), 0)
        ImageDraw.Draw(layer).polygon(pts, fill=1)
        direction = 1 if _signed_area(poly) >= 0 else -1
        winding += direction * np.asarray(layer, dtype=np.int16)

    big = Image.fromarray(np.where(winding != 0, 255, 0).astype(np.uint8), "L")
    mask.paste(big.resize((box_w, box_h), Image.LANCZOS), (bx0, by0))
    return mask


def render_icon(
    canvas: Image.Image,
    category: str,
    icon_id: str,
    x: float,
    y: float,
    size: float,
    color: ColorLike = "#ffffff",
    glow: Optional[Shadow] = None,
) -> bool:
    """
    Fill an icon onto *canvas* in place. With *glow* the icon is painted with
    that shadow applied. Unknown icons log a warning and draw nothing.
    """
    icon = get_icon(category, icon_id)
    if icon is None:
        logger.warning(f"Icon not found: {category}/{icon_id}")
        return False
    mask = icon_mask(icon, canvas.size, x, y, size)
    Painter(canvas, font=None).paint_mask(mask, color, shadow=glow)
    return True


def icon_preview(category: str, icon_id: str, size: int = 48, color: ColorLike = "#ffffff") -> Image.Image:
    """Square transparent thumbnail with the icon at 80% of its side."""
    thumb = Image.new("RGBA", (size, size), (0, 0, 0, 0))
    render_icon(thumb, category, icon_id, size / 2, size / 2, size * 0.8, color)
    return thumb
