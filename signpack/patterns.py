"""
patterns.py — The fourteen procedural background patterns.

Each drawer tiles its motif across the whole canvas with the same signature:

    drawer(draw, width, height, size, color)

*size* is already resolution-scaled by the caller; *color* is an RGB(A) tuple.
"""

from __future__ import annotations

import math
from typing import Callable, Dict

from PIL import ImageDraw

Drawer = Callable[[ImageDraw.ImageDraw, int, int, float, tuple], None]


def _frange(start: float, stop: float, step: float):
    v = start
    while v < stop:
        yield v
        v += step


def _lw(width: float) -> int:
    return max(1, int(round(width)))


# ── Filled motifs ─────────────────────────────────────────────────────────────

def stripes(draw, width, height, size, color):
    for x in _frange(0, width, size * 2):
        draw.rectangle((x, 0, x + size - 1, height), fill=color)


def checkerboard(draw, width, height, size, color):
    for x in _frange(0, width, size):
        for y in _frange(0, height, size):
            if (math.floor(x / size) + math.floor(y / size)) % 2 == 0:
                draw.rectangle((x, y, x + size - 1, y + size - 1), fill=color)


def dots(draw, width, height, size, color):
    r = size / 4
    for x in _frange(size, width, size * 1.5):
        for y in _frange(size, height, size * 1.5):
            draw.ellipse((x - r, y - r, x + r, y + r), fill=color)


# ── Line motifs ───────────────────────────────────────────────────────────────

def waves(draw, width, height, size, color):
    for y in _frange(0, height, size):
        pts = [(x, y + math.sin(x / size) * (size / 4)) for x in range(0, int(width) + 1, 5)]
        draw.line(pts, fill=color, width=_lw(size / 10), joint="curve")


def grid(draw, width, height, size, color):
    x = 0.0
    while x <= width:
        draw.line([(x, 0), (x, height)], fill=color, width=1)
        x += size
    y = 0.0
    while y <= height:
        draw.line([(0, y), (width, y)], fill=color, width=1)
        y += size


def hexagon(draw, width, height, size, color):
    radius = size / 2
    hex_h = radius * math.sqrt(3)
    rows = int(height / hex_h) + 2
    cols = int(width / (radius * 1.5)) + 2
    for row in range(rows):
        for col in range(cols):
            cx = col * radius * 1.5
            cy = row * hex_h + (col % 2) * hex_h / 2
            if cx < width and cy < height:
                pts = [
                    (cx + radius * math.cos(i * math.pi / 3), cy + radius * math.sin(i * math.pi / 3))
                    for i in range(6)
                ]
                draw.polygon(pts, outline=color)


def carbon(draw, width, height, size, color):
    for x in _frange(0, width + size, size):
        for y in _frange(0, height + size, size):
            draw.line([(x, y), (x + size, y + size)], fill=color, width=1)
            draw.line([(x + size, y), (x, y + size)], fill=color, width=1)


def spiral(draw, width, height, size, color):
    cx, cy = width / 2, height / 2
    max_radius = math.hypot(cx, cy)
    spacing = size / 2
    turns = math.pi * 4
    for radius in _frange(0, max_radius, spacing):
        pts = []
        for angle in _frange(0, turns, 0.1):
            r = radius + (angle / turns) * spacing
            pts.append((cx + r * math.cos(angle), cy + r * math.sin(angle)))
        draw.line(pts, fill=color, width=2, joint="curve")


def zigzag(draw, width, height, size, color):
    half = size / 2
    for y in _frange(0, height, size):
        pts = []
        k = 0
        while k * half <= width:
            pts.append((k * half, y + (-half if k % 2 == 0 else half)))
            k += 1
        draw.line(pts, fill=color, width=2)


def crosshatch(draw, width, height, size, color):
    for i in _frange(-height, width, size):
        draw.line([(i, 0), (i + height, height)], fill=color, width=1)
    for i in _frange(0, width + height, size):
        draw.line([(i, 0), (i - height, height)], fill=color, width=1)


def triangular(draw, width, height, size, color):
    tri_h = size * math.sqrt(3) / 2
    for y in _frange(0, height + tri_h, tri_h):
        offset = (math.floor(y / tri_h) % 2) * (size / 2)
        for x in _frange(0, width + size, size):
            draw.polygon(
                [(x + offset, y), (x + size / 2 + offset, y + tri_h), (x - size / 2 + offset, y + tri_h)],
                outline=color,
            )


def diamonds(draw, width, height, size, color):
    half = size / 2
    for y in _frange(0, height + size, size):
        for x in _frange(0, width + size, size):
            draw.polygon([(x, y - half), (x + half, y), (x, y + half), (x - half, y)], outline=color)


def circles(draw, width, height, size, color):
    r = size / 3
    for y in _frange(0, height + size, size):
        for x in _frange(0, width + size, size):
            draw.ellipse((x - r, y - r, x + r, y + r), outline=color, width=1)


def scales(draw, width, height, size, color):
    radius = size / 2
    spacing = size * 0.8
    for row in range(int(height / spacing) + 2):
        for col in range(int(width / size) + 2):
            x = col * size + (row % 2) * (size / 2)
            y = row * spacing
            # lower half-circle: canvas arc(0, π) runs clockwise through +y
            draw.arc((x - radius, y - radius, x + radius, y + radius), 0, 180, fill=color, width=1)


PATTERNS: Dict[str, Drawer] = {
    "stripes": stripes,
    "checkerboard": checkerboard,
    "dots": dots,
    "waves": waves,
    "grid": grid,
    "hexagon": hexagon,
    "carbon": carbon,
    "spiral": spiral,
    "zigzag": zigzag,
    "crosshatch": crosshatch,
    "triangular": triangular,
    "diamonds": diamonds,
    "circles": circles,
    "scales": scales,
}


def draw_pattern(draw: ImageDraw.ImageDraw, pattern_type: str, width: int, height: int, size: float, color) -> bool:
    """Draw *pattern_type*; returns False (and draws nothing) for unknown names."""
    drawer = PATTERNS.get(pattern_type)
    if drawer is None or size <= 0:
        return False
    drawer(draw, width, height, size, color)
    return True
