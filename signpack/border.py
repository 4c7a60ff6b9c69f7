"""
border.py — Sign border strokes: solid, dashed, dotted, double and groove.

Widths and radii are authored for a 512px-wide sign and scaled with the
canvas. The stroke is inset by half its width so it sits fully inside.
"""

from __future__ import annotations

import logging

from PIL import Image

from .colors import darken, lighten, to_rgba
from .geometry import stroke_rounded_rect
from .settings import Settings

logger = logging.getLogger(__name__)


def draw_border(canvas: Image.Image, width: int, height: int, settings: Settings) -> None:
    if settings.border_width <= 0:
        return

    scale = Settings.scale_for(width)
    bw = settings.border_width * scale
    radius = settings.corner_radius * scale
    color = to_rgba(settings.border_color)
    style = settings.border_style

    if style == "double":
        _double(canvas, width, height, bw, radius, color)
        return
    if style == "groove":
        _groove(canvas, width, height, bw, radius, settings.border_color)
        return

    if style == "dashed":
        dash = (bw * 3, bw * 2)
    elif style == "dotted":
        dash = (bw, bw)
    else:
        if style != "solid":
            logger.warning(f"Unknown border style {style!r}; drawing solid")
        dash = ()

    stroke_rounded_rect(canvas, bw / 2, bw / 2, width - bw, height - bw, radius, color, bw, dash)


def _double(canvas, width, height, bw, radius, color):
    stroke_rounded_rect(canvas, bw / 2, bw / 2, width - bw, height - bw, radius, color, bw)
    inset = bw * 2
    if width - inset * 2 > 0 and height - inset * 2 > 0:
        stroke_rounded_rect(
            canvas, inset, inset, width - inset * 2, height - inset * 2,
            max(0.0, radius - inset), color, bw,
        )


def _groove(canvas, width, height, bw, radius, base_color: str):
    half = bw / 2
    stroke_rounded_rect(
        canvas, bw / 4, bw / 4, width - half, height - half,
        radius, to_rgba(lighten(base_color, 40)), half,
    )
    stroke_rounded_rect(
        canvas, bw * 3 / 4, bw * 3 / 4, width - bw * 1.5, height - bw * 1.5,
        max(0.0, radius - half), to_rgba(darken(base_color, 40)), half,
    )
