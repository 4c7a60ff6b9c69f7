"""
colors.py — Color parsing, channel shifts and gradient rasterisation.

Gradients follow the canvas model: a list of (offset, color) stops
interpolated along a parameter t that is computed per pixel (projection on
an axis for linear, distance for radial, sweep angle for conic).

Usage:
    from signpack.colors import hex_to_rgb, linear_gradient

    hex_to_rgb("#ff8000")                 # → (255, 128, 0)
    img = linear_gradient((512, 80), (0, 0), (362, 56),
                          [(0.0, "#667eea"), (1.0, "#764ba2")])
"""

from __future__ import annotations

import colorsys
import math
import re
from typing import Sequence, Tuple, Union

import numpy as np
from PIL import Image

RGB  = Tuple[int, int, int]
RGBA = Tuple[int, int, int, int]
ColorLike = Union[str, RGB, RGBA]
Stop = Tuple[float, ColorLike]

_HEX_RE = re.compile(r"^#([A-Fa-f0-9]{6}|[A-Fa-f0-9]{3})$")


# ── Parsing ───────────────────────────────────────────────────────────────────

def is_valid_hex(value: str) -> bool:
    return bool(value) and bool(_HEX_RE.match(value))


def hex_to_rgb(hex_str: str) -> RGB:
    """'#rrggbb' or '#rgb' → (r, g, b). Unparseable input yields black."""
    h = (hex_str or "").strip().lstrip("#")
    if len(h) == 3:
        h = h[0] * 2 + h[1] * 2 + h[2] * 2
    if len(h) != 6:
        return (0, 0, 0)
    try:
        return int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16)
    except ValueError:
        return (0, 0, 0)


def rgb_to_hex(rgb: Sequence[int]) -> str:
    return "#{:02x}{:02x}{:02x}".format(*(max(0, min(255, int(c))) for c in rgb[:3]))


def to_rgba(color: ColorLike, alpha: float = 1.0) -> RGBA:
    """Normalise a hex string or tuple to RGBA, scaling alpha by *alpha* (0–1)."""
    if isinstance(color, str):
        r, g, b = hex_to_rgb(color)
        a = 255
    elif len(color) == 4:
        r, g, b, a = color  # type: ignore[misc]
    else:
        r, g, b = color  # type: ignore[misc]
        a = 255
    return int(r), int(g), int(b), int(round(a * max(0.0, min(1.0, alpha))))


# ── Channel shifts ────────────────────────────────────────────────────────────

def lighten(color: str, amount: int) -> RGB:
    r, g, b = hex_to_rgb(color)
    return min(255, r + amount), min(255, g + amount), min(255, b + amount)


def darken(color: str, amount: int) -> RGB:
    r, g, b = hex_to_rgb(color)
    return max(0, r - amount), max(0, g - amount), max(0, b - amount)


def hsl_to_rgb(hue: float, saturation: float, lightness: float) -> RGB:
    """CSS-style hsl(): hue in degrees, saturation/lightness in percent."""
    r, g, b = colorsys.hls_to_rgb((hue % 360) / 360.0, lightness / 100.0, saturation / 100.0)
    return int(round(r * 255)), int(round(g * 255)), int(round(b * 255))


# ── Gradients ─────────────────────────────────────────────────────────────────

def interpolate_stops(t: np.ndarray, stops: Sequence[Stop]) -> np.ndarray:
    """
    Map a float array of gradient positions onto colors.

    Args:
        t:     (H, W) array; values outside [0, 1] are clamped.
        stops: (offset, color) pairs in ascending offset order.

    Returns:
        (H, W, 4) uint8 RGBA array.
    """
    t = np.clip(t, 0.0, 1.0)
    offsets = np.array([s[0] for s in stops], dtype=np.float64)
    colors  = np.array([to_rgba(s[1]) for s in stops], dtype=np.float64)
    out = np.empty(t.shape + (4,), dtype=np.float64)
    for ch in range(4):
        out[..., ch] = np.interp(t, offsets, colors[:, ch])
    return np.clip(np.rint(out), 0, 255).astype(np.uint8)


def _pixel_grid(size: Tuple[int, int]) -> Tuple[np.ndarray, np.ndarray]:
    w, h = size
    xs = np.arange(w, dtype=np.float64) + 0.5
    ys = np.arange(h, dtype=np.float64) + 0.5
    return np.meshgrid(xs, ys)


def linear_gradient(
    size: Tuple[int, int],
    start: Tuple[float, float],
    end: Tuple[float, float],
    stops: Sequence[Stop],
) -> Image.Image:
    """Gradient along the axis start → end, constant perpendicular to it."""
    px, py = _pixel_grid(size)
    dx, dy = end[0] - start[0], end[1] - start[1]
    length_sq = dx * dx + dy * dy
    if length_sq == 0:
        t = np.zeros_like(px)
    else:
        t = ((px - start[0]) * dx + (py - start[1]) * dy) / length_sq
    return Image.fromarray(interpolate_stops(t, stops), "RGBA")


def vertical_gradient(size: Tuple[int, int], y0: float, y1: float, stops: Sequence[Stop]) -> Image.Image:
    return linear_gradient(size, (0, y0), (0, y1), stops)


def radial_gradient(
    size: Tuple[int, int],
    center: Tuple[float, float],
    radius: float,
    stops: Sequence[Stop],
) -> Image.Image:
    """Circular gradient from the centre (t=0) to *radius* (t=1)."""
    px, py = _pixel_grid(size)
    dist = np.hypot(px - center[0], py - center[1])
    t = dist / radius if radius > 0 else np.ones_like(dist)
    return Image.fromarray(interpolate_stops(t, stops), "RGBA")


def conic_gradient(
    size: Tuple[int, int],
    center: Tuple[float, float],
    start_angle: float,
    stops: Sequence[Stop],
) -> Image.Image:
    """
    Sweep gradient around *center* starting at *start_angle* (radians,
    clockwise on screen from the positive x axis).
    """
    px, py = _pixel_grid(size)
    angle = np.arctan2(py - center[1], px - center[0]) - start_angle
    t = np.mod(angle, 2 * math.pi) / (2 * math.pi)
    return Image.fromarray(interpolate_stops(t, stops), "RGBA")


# ── Compositing ───────────────────────────────────────────────────────────────
#
# W3C blend modes on float channels in [0, 1]; backdrop first.

def _hard_light(cb: np.ndarray, cs: np.ndarray) -> np.ndarray:
    return np.where(cs <= 0.5, cb * 2 * cs, cb + (2 * cs - 1) - cb * (2 * cs - 1))


def _soft_light(cb: np.ndarray, cs: np.ndarray) -> np.ndarray:
    d = np.where(cb <= 0.25, ((16 * cb - 12) * cb + 4) * cb, np.sqrt(cb))
    return np.where(cs <= 0.5, cb - (1 - 2 * cs) * cb * (1 - cb), cb + (2 * cs - 1) * (d - cb))


def _color_dodge(cb: np.ndarray, cs: np.ndarray) -> np.ndarray:
    with np.errstate(divide="ignore", invalid="ignore"):
        out = np.minimum(1.0, cb / (1 - cs))
    out = np.where(cs >= 1, 1.0, out)
    return np.where(cb <= 0, 0.0, out)


def _color_burn(cb: np.ndarray, cs: np.ndarray) -> np.ndarray:
    with np.errstate(divide="ignore", invalid="ignore"):
        out = 1 - np.minimum(1.0, (1 - cb) / cs)
    out = np.where(cs <= 0, 0.0, out)
    return np.where(cb >= 1, 1.0, out)


# Non-separable modes work on whole RGB triples (last axis).

def _lum(c: np.ndarray) -> np.ndarray:
    return 0.3 * c[..., 0:1] + 0.59 * c[..., 1:2] + 0.11 * c[..., 2:3]


def _clip_color(c: np.ndarray) -> np.ndarray:
    l = _lum(c)
    n = c.min(axis=-1, keepdims=True)
    x = c.max(axis=-1, keepdims=True)
    with np.errstate(divide="ignore", invalid="ignore"):
        c = np.where(n < 0, l + (c - l) * l / (l - n), c)
        c = np.where(x > 1, l + (c - l) * (1 - l) / (x - l), c)
    return c


def _set_lum(c: np.ndarray, l: np.ndarray) -> np.ndarray:
    return _clip_color(c + (l - _lum(c)))


def _sat(c: np.ndarray) -> np.ndarray:
    return c.max(axis=-1, keepdims=True) - c.min(axis=-1, keepdims=True)


def _set_sat(c: np.ndarray, s: np.ndarray) -> np.ndarray:
    low = c.min(axis=-1, keepdims=True)
    spread = _sat(c)
    with np.errstate(divide="ignore", invalid="ignore"):
        return np.where(spread > 0, (c - low) * s / spread, 0.0)


BLEND_FUNCTIONS = {
    "normal":      lambda cb, cs: cs,
    "multiply":    lambda cb, cs: cb * cs,
    "screen":      lambda cb, cs: cb + cs - cb * cs,
    "overlay":     lambda cb, cs: _hard_light(cs, cb),
    "darken":      np.minimum,
    "lighten":     np.maximum,
    "color-dodge": _color_dodge,
    "color-burn":  _color_burn,
    "hard-light":  _hard_light,
    "soft-light":  _soft_light,
    "difference":  lambda cb, cs: np.abs(cb - cs),
    "exclusion":   lambda cb, cs: cb + cs - 2 * cb * cs,
    "hue":         lambda cb, cs: _set_lum(_set_sat(cs, _sat(cb)), _lum(cb)),
    "saturation":  lambda cb, cs: _set_lum(_set_sat(cb, _sat(cs)), _lum(cb)),
    "color":       lambda cb, cs: _set_lum(cs, _lum(cb)),
    "luminosity":  lambda cb, cs: _set_lum(cb, _lum(cs)),
}


def composite(backdrop: Image.Image, source: Image.Image, mode: str = "normal") -> Image.Image:
    """
    Source-over composite of two same-size RGBA images using a blend mode.

    The blended color is weighted by backdrop coverage, so over a transparent
    backdrop every mode behaves like "normal". Unknown modes blend as normal.
    """
    if mode in ("normal", "source-over") or mode not in BLEND_FUNCTIONS:
        return Image.alpha_composite(backdrop, source)

    b = np.asarray(backdrop, dtype=np.float64) / 255.0
    s = np.asarray(source, dtype=np.float64) / 255.0
    cb, ab = b[..., :3], b[..., 3:4]
    cs, as_ = s[..., :3], s[..., 3:4]

    mixed = (1 - ab) * cs + ab * np.clip(BLEND_FUNCTIONS[mode](cb, cs), 0.0, 1.0)
    alpha = as_ + ab * (1 - as_)
    premul = as_ * mixed + ab * cb * (1 - as_)
    with np.errstate(divide="ignore", invalid="ignore"):
        color = np.where(alpha > 0, premul / alpha, 0.0)

    out = np.concatenate([color, alpha], axis=-1)
    return Image.fromarray(np.clip(np.rint(out * 255), 0, 255).astype(np.uint8), "RGBA")
