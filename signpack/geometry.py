"""
geometry.py — Shared path builders: rounded rectangles, dash splitting, stroking.

Pillow has no path object, so paths are sampled into point lists that
ImageDraw.polygon / ImageDraw.line can consume.
"""

from __future__ import annotations

import math
from typing import List, Sequence, Tuple

from PIL import Image, ImageDraw

Point = Tuple[float, float]

_CURVE_STEPS = 12
_SUPERSAMPLE = 4


def _quad_curve(p0: Point, ctrl: Point, p1: Point, steps: int = _CURVE_STEPS) -> List[Point]:
    """Points of a quadratic Bézier, excluding p0."""
    pts = []
    for i in range(1, steps + 1):
        t = i / steps
        a, b, c = (1 - t) ** 2, 2 * (1 - t) * t, t * t
        pts.append((a * p0[0] + b * ctrl[0] + c * p1[0], a * p0[1] + b * ctrl[1] + c * p1[1]))
    return pts


def rounded_rect_points(x: float, y: float, w: float, h: float, r: float) -> List[Point]:
    """
    Closed outline of a rounded rectangle, four quadratic corners.

    The radius is capped at half the shorter side; r <= 0 gives a plain
    rectangle. The first point is repeated at the end.
    """
    r = max(0.0, min(r, w / 2, h / 2))
    if r == 0:
        return [(x, y), (x + w, y), (x + w, y + h), (x, y + h), (x, y)]

    pts: List[Point] = [(x + r, y), (x + w - r, y)]
    pts += _quad_curve(pts[-1], (x + w, y), (x + w, y + r))
    pts.append((x + w, y + h - r))
    pts += _quad_curve(pts[-1], (x + w, y + h), (x + w - r, y + h))
    pts.append((x + r, y + h))
    pts += _quad_curve(pts[-1], (x, y + h), (x, y + h - r))
    pts.append((x, y + r))
    pts += _quad_curve(pts[-1], (x, y), (x + r, y))
    return pts


def dash_polyline(points: Sequence[Point], pattern: Sequence[float]) -> List[List[Point]]:
    """
    Split a polyline into the "on" runs of a dash pattern.

    pattern alternates on/off lengths like canvas setLineDash; an empty or
    all-zero pattern returns the whole line as one run.
    """
    if not pattern or sum(pattern) <= 0 or len(points) < 2:
        return [list(points)]
    if len(pattern) % 2:
        pattern = list(pattern) * 2

    runs: List[List[Point]] = []
    idx, remaining = 0, pattern[0]
    drawing = True
    current: List[Point] = [points[0]]

    for p0, p1 in zip(points, points[1:]):
        seg_len = math.dist(p0, p1)
        pos = 0.0
        while seg_len - pos > remaining:
            pos += remaining
            t = pos / seg_len
            cut = (p0[0] + (p1[0] - p0[0]) * t, p0[1] + (p1[1] - p0[1]) * t)
            if drawing:
                current.append(cut)
                runs.append(current)
            current = [cut]
            drawing = not drawing
            idx = (idx + 1) % len(pattern)
            remaining = pattern[idx]
        remaining -= seg_len - pos
        if drawing:
            current.append(p1)
        else:
            current = [p1]

    if drawing and len(current) > 1:
        runs.append(current)
    return runs


def stroke_path(
    draw: ImageDraw.ImageDraw,
    points: Sequence[Point],
    color,
    width: float,
    dash: Sequence[float] = (),
) -> None:
    """Stroke a polyline (optionally dashed) with round joins."""
    line_w = max(1, int(round(width)))
    for run in dash_polyline(points, dash):
        if len(run) >= 2:
            draw.line(run, fill=color, width=line_w, joint="curve")


def rounded_rect_mask(size: Tuple[int, int], radius: float) -> Image.Image:
    """Anti-aliased "L" clip mask covering the rounded canvas rectangle."""
    w, h = size
    if radius <= 0:
        return Image.new("L", size, 255)
    big = Image.new("L", (w * _SUPERSAMPLE, h * _SUPERSAMPLE), 0)
    pts = rounded_rect_points(0, 0, w * _SUPERSAMPLE, h * _SUPERSAMPLE, radius * _SUPERSAMPLE)
    ImageDraw.Draw(big).polygon(pts, fill=255)
    return big.resize(size, Image.LANCZOS)


def ring_mask(
    size: Tuple[int, int],
    x: float, y: float, w: float, h: float, r: float,
    line_width: float,
) -> Image.Image:
    """
    "L" mask of a solid stroke of width *line_width* centred on the rounded
    rectangle (x, y, w, h, r). Square corners stay square (miter joins).
    """
    s = _SUPERSAMPLE
    half = line_width / 2
    big = Image.new("L", (size[0] * s, size[1] * s), 0)
    draw = ImageDraw.Draw(big)

    outer_r = r + half if r > 0 else 0
    outer = rounded_rect_points((x - half) * s, (y - half) * s, (w + line_width) * s, (h + line_width) * s, outer_r * s)
    draw.polygon(outer, fill=255)
    if w - line_width > 0 and h - line_width > 0:
        inner = rounded_rect_points(
            (x + half) * s, (y + half) * s, (w - line_width) * s, (h - line_width) * s, max(0.0, r - half) * s
        )
        draw.polygon(inner, fill=0)
    return big.resize(size, Image.LANCZOS)


def stroke_rounded_rect(
    layer: Image.Image,
    x: float, y: float, w: float, h: float, r: float,
    color,
    line_width: float,
    dash: Sequence[float] = (),
) -> None:
    """Stroke a rounded rectangle onto an RGBA *layer*, solid or dashed."""
    if line_width <= 0:
        return
    overlay = Image.new("RGBA", layer.size, (0, 0, 0, 0))
    if dash:
        stroke_path(ImageDraw.Draw(overlay), rounded_rect_points(x, y, w, h, r), color, line_width, dash)
    else:
        overlay.paste(Image.new("RGBA", layer.size, color), (0, 0), ring_mask(layer.size, x, y, w, h, r, line_width))
    layer.alpha_composite(overlay)
