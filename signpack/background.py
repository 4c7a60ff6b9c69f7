"""
background.py — Paints the sign background for every background type.

    solid     flat background color
    linear    two-stop gradient from (0,0) towards (cos·w, sin·h)
    radial    two-stop gradient from the centre out to max(w,h)/2
    conic     sweep c1 → c2 → c1 starting at the gradient angle
    pattern   background color plus one of the fourteen tiled patterns
    noise     per-pixel stochastic speckle (replaces the canvas)
    image     uploaded picture, cover-fitted, with opacity and blend mode
    abstract  seeded procedural composition (racing / geometric / waves)

Usage:
    from signpack.background import draw_background

    canvas = Image.new("RGBA", (512, 80), (0, 0, 0, 0))
    draw_background(canvas, 512, 80, settings)
"""

from __future__ import annotations

import logging
import math
import random
from typing import Optional

import numpy as np
from PIL import Image, ImageDraw, ImageFilter

from .colors import (
    composite,
    conic_gradient,
    hex_to_rgb,
    lighten,
    linear_gradient,
    radial_gradient,
    to_rgba,
)
from .geometry import rounded_rect_mask
from .patterns import draw_pattern
from .settings import Settings

logger = logging.getLogger(__name__)


def draw_background(
    canvas: Image.Image,
    width: int,
    height: int,
    settings: Settings,
    image: Optional[Image.Image] = None,
    rng: Optional[np.random.Generator] = None,
    clip: bool = True,
) -> None:
    """
    Paint the background for *settings* onto *canvas* in place.

    With clip=True the result is masked to the rounded rectangle of radius
    cornerRadius·(w/512); the compositor passes clip=False when it clips the
    finished sign as a whole instead.
    """
    size = (width, height)
    kind = settings.background_type

    if kind == "linear":
        angle = math.radians(settings.gradient_angle)
        layer = linear_gradient(
            size, (0, 0), (math.cos(angle) * width, math.sin(angle) * height),
            [(0.0, settings.gradient_color1), (1.0, settings.gradient_color2)],
        )
    elif kind == "radial":
        layer = radial_gradient(
            size, (width / 2, height / 2), max(width, height) / 2,
            [(0.0, settings.gradient_color1), (1.0, settings.gradient_color2)],
        )
    elif kind == "conic":
        layer = conic_gradient(
            size, (width / 2, height / 2), math.radians(settings.gradient_angle or 0),
            [(0.0, settings.gradient_color1), (0.5, settings.gradient_color2), (1.0, settings.gradient_color1)],
        )
    elif kind == "pattern":
        layer = _pattern_layer(size, settings)
    elif kind == "noise":
        layer = noise_layer(size, settings, rng)
    elif kind == "image":
        layer = _image_layer(size, settings, image)
    elif kind == "abstract":
        layer = abstract_layer(size, settings)
    else:
        layer = _solid(size, settings.background_color)

    if kind == "noise":
        # the speckle buffer overwrites whatever was on the canvas
        canvas.paste(layer, (0, 0))
    else:
        canvas.alpha_composite(layer)

    if clip:
        apply_corner_clip(canvas, settings)


def apply_corner_clip(canvas: Image.Image, settings: Settings) -> None:
    """Mask *canvas* to its rounded rectangle; no-op for square corners."""
    radius = settings.corner_radius * Settings.scale_for(canvas.width)
    if radius <= 0:
        return
    mask = rounded_rect_mask(canvas.size, radius)
    alpha = np.asarray(canvas.getchannel("A"), dtype=np.uint16)
    clipped = (alpha * np.asarray(mask, dtype=np.uint16) // 255).astype(np.uint8)
    canvas.putalpha(Image.fromarray(clipped, "L"))


# ── Layers ────────────────────────────────────────────────────────────────────

def _solid(size, color: str) -> Image.Image:
    return Image.new("RGBA", size, to_rgba(color))


def _pattern_layer(size, settings: Settings) -> Image.Image:
    width, height = size
    layer = _solid(size, settings.background_color)
    pattern_size = settings.pattern_size * Settings.scale_for(width)
    drawn = draw_pattern(
        ImageDraw.Draw(layer), settings.pattern_type, width, height,
        pattern_size, to_rgba(settings.pattern_color),
    )
    if not drawn:
        logger.warning(f"Unknown pattern type {settings.pattern_type!r}; using plain fill")
    return layer


def noise_layer(size, settings: Settings, rng: Optional[np.random.Generator] = None) -> Image.Image:
    """
    Speckle buffer: each cell draws r ~ U(0,1); r > 0.5 mixes background and
    pattern color by r·intensity with alpha 255·r·intensity, else transparent.

    Unseeded unless settings.noise_seed or *rng* is given. noise_scale > 1
    draws coarser cells that are upscaled without smoothing.
    """
    width, height = size
    if rng is None:
        rng = np.random.default_rng(settings.noise_seed)

    scale = max(1.0, float(settings.noise_scale or 1.0))
    cells_w = max(1, math.ceil(width / scale))
    cells_h = max(1, math.ceil(height / scale))

    intensity = (settings.noise_intensity or 20) / 100
    noise = rng.random((cells_h, cells_w))
    mix = (noise * intensity)[..., None]

    bg = np.array(hex_to_rgb(settings.background_color), dtype=np.float64)
    fg = np.array(hex_to_rgb(settings.pattern_color), dtype=np.float64)

    out = np.zeros((cells_h, cells_w, 4), dtype=np.uint8)
    rgb = np.floor(bg * (1 - mix) + fg * mix)
    alpha = np.floor(255 * mix[..., 0])
    visible = noise > 0.5
    out[visible, :3] = rgb[visible].astype(np.uint8)
    out[visible, 3] = alpha[visible].astype(np.uint8)

    layer = Image.fromarray(out, "RGBA")
    if layer.size != size:
        layer = layer.resize(size, Image.NEAREST)
    return layer


def _image_layer(size, settings: Settings, image: Optional[Image.Image]) -> Image.Image:
    base = _solid(size, settings.background_color)
    if image is None:
        return base

    photo = fit_cover(image.convert("RGBA"), size)
    if settings.image_opacity < 100:
        alpha = np.asarray(photo.getchannel("A"), dtype=np.float64)
        alpha *= max(0, settings.image_opacity) / 100
        photo.putalpha(Image.fromarray(np.rint(alpha).astype(np.uint8), "L"))

    return composite(base, photo, settings.image_blend_mode)


def fit_cover(img: Image.Image, size) -> Image.Image:
    """Scale *img* to cover *size* (no letterbox), centred, excess cropped."""
    width, height = size
    scale = max(width / img.width, height / img.height)
    sw, sh = max(1, round(img.width * scale)), max(1, round(img.height * scale))
    resized = img.resize((sw, sh), Image.LANCZOS)
    left, top = (sw - width) // 2, (sh - height) // 2
    return resized.crop((left, top, left + width, top + height))


# ── Abstract ──────────────────────────────────────────────────────────────────

def abstract_layer(size, settings: Settings) -> Image.Image:
    """Deterministic composition for (style, colors, complexity, seed)."""
    width, height = size
    rng = random.Random(settings.abstract_seed)
    complexity = max(1, min(10, settings.abstract_complexity))
    scale = Settings.scale_for(width)

    dominant = settings.abstract_dominant
    base = linear_gradient(
        size, (0, 0), (width, height),
        [(0.0, dominant), (1.0, lighten(dominant, 18))],
    )

    shapes = Image.new("RGBA", size, (0, 0, 0, 0))
    draw = ImageDraw.Draw(shapes)
    style = settings.abstract_style
    if style == "geometric":
        _abstract_geometric(draw, width, height, complexity, scale, settings, rng)
    elif style == "waves":
        _abstract_waves(draw, width, height, complexity, scale, settings, rng)
    else:
        if style != "racing":
            logger.warning(f"Unknown abstract style {style!r}; using racing")
        _abstract_racing(draw, width, height, complexity, scale, settings, rng)

    base.alpha_composite(shapes)

    # soft accent bloom
    glow = Image.new("RGBA", size, (0, 0, 0, 0))
    gx, gy = rng.uniform(0.2, 0.8) * width, rng.uniform(0.2, 0.8) * height
    gr = max(width, height) * 0.18
    ImageDraw.Draw(glow).ellipse((gx - gr, gy - gr, gx + gr, gy + gr), fill=to_rgba(settings.abstract_accent, 0.18))
    glow = glow.filter(ImageFilter.GaussianBlur(radius=gr * 0.5))
    base.alpha_composite(glow)
    return base


def _abstract_racing(draw, width, height, complexity, scale, settings, rng):
    slant = height * rng.uniform(0.6, 1.2)
    for _ in range(2 + complexity * 2):
        x = rng.uniform(-slant, width)
        band = rng.uniform(6, 28) * scale
        color = to_rgba(settings.abstract_secondary, rng.uniform(0.45, 0.85))
        draw.polygon([(x, height), (x + band, height), (x + band + slant, 0), (x + slant, 0)], fill=color)

    for _ in range(1 + complexity // 2):
        x = rng.uniform(0, width)
        band = rng.uniform(1.5, 4) * scale
        draw.polygon(
            [(x, height), (x + band, height), (x + band + slant, 0), (x + slant, 0)],
            fill=to_rgba(settings.abstract_accent, rng.uniform(0.6, 0.95)),
        )

    # speed lines
    for _ in range(complexity * 3):
        y = rng.uniform(0, height)
        x0 = rng.uniform(0, width)
        length = rng.uniform(0.05, 0.25) * width
        draw.line([(x0, y), (x0 + length, y)], fill=to_rgba(settings.abstract_accent, 0.25), width=1)


def _abstract_geometric(draw, width, height, complexity, scale, settings, rng):
    unit = max(width, height)
    for _ in range(3 + complexity * 2):
        cx, cy = rng.uniform(0, width), rng.uniform(0, height)
        radius = rng.uniform(0.05, 0.25) * unit
        sides = rng.choice((3, 4, 5, 6))
        rot = rng.uniform(0, 2 * math.pi)
        pts = [
            (cx + radius * math.cos(rot + i * 2 * math.pi / sides),
             cy + radius * math.sin(rot + i * 2 * math.pi / sides))
            for i in range(sides)
        ]
        draw.polygon(pts, fill=to_rgba(settings.abstract_secondary, rng.uniform(0.35, 0.8)))

    for _ in range(1 + complexity // 2):
        cx, cy = rng.uniform(0, width), rng.uniform(0, height)
        radius = rng.uniform(0.04, 0.12) * unit
        pts = [(cx + radius * math.cos(i * 2 * math.pi / 3), cy + radius * math.sin(i * 2 * math.pi / 3)) for i in range(3)]
        draw.polygon(pts, outline=to_rgba(settings.abstract_accent), width=max(1, round(2 * scale)))


def _abstract_waves(draw, width, height, complexity, scale, settings, rng):
    layers = 2 + complexity
    for i in range(layers):
        level = height * (0.35 + 0.6 * i / layers)
        amp = height * rng.uniform(0.05, 0.2)
        freq = rng.uniform(1.0, 3.5) * 2 * math.pi / width
        phase = rng.uniform(0, 2 * math.pi)
        top = [(x, level + amp * math.sin(x * freq + phase)) for x in range(0, width + 1, 4)]
        color = to_rgba(settings.abstract_secondary, 0.25 + 0.5 * (i + 1) / layers)
        draw.polygon(top + [(width, height), (0, height)], fill=color)
        if i == layers - 1 or rng.random() < 0.25:
            draw.line(top, fill=to_rgba(settings.abstract_accent, 0.8), width=max(1, round(2 * scale)))
