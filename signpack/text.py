"""
text.py — Composes, positions and draws the sign label.

The label is drawn on its own transparent layer (so skew and arrow rotation
transform only the text), then composited over the background and border.

Pipeline:
    label → prefix + transform → font → anchor point
          → regular or special effect passes (per character with letter spacing)
          → skew around the centre → optional rotation → composite
"""

from __future__ import annotations

import math
from typing import Optional, Tuple, Union

from PIL import Image

from .effects import EFFECTS
from .fonts import FontResolver, default_resolver
from .painter import Painter, Shadow
from .settings import Settings, apply_text_transform, compose_label

_BASE_SHADOW_FILL = (0, 0, 0, 26)       # rgba(0,0,0,0.1)
_GLOW_FILL        = (255, 255, 255, 26)  # rgba(255,255,255,0.1)


def text_position(width: int, height: int, settings: Settings) -> Tuple[float, float]:
    """Anchor point for the label; the text is always vertically middle-anchored."""
    if settings.text_horizontal_align == "left":
        x = width * 0.05
    elif settings.text_horizontal_align == "right":
        x = width * 0.95
    else:
        x = width / 2

    if settings.text_vertical_align == "top":
        y = height * 0.2
    elif settings.text_vertical_align == "bottom":
        y = height * 0.8
    else:
        y = height / 2
    return x, y


def label_text(label: Union[str, int], settings: Settings) -> str:
    return apply_text_transform(compose_label(settings.text_prefix, label), settings.text_transform)


def draw_text(
    canvas: Image.Image,
    width: int,
    height: int,
    label: Union[str, int],
    settings: Settings,
    rotation: Optional[float] = None,
    fonts: Optional[FontResolver] = None,
) -> None:
    """Draw the styled label onto *canvas* (in place)."""
    layer = render_text_layer(width, height, label, settings, fonts)
    if rotation:
        # canvas rotation is clockwise for positive angles, PIL's is counter-clockwise
        layer = layer.rotate(-rotation, resample=Image.BICUBIC, center=(width / 2, height / 2))
    canvas.alpha_composite(layer)


def render_text_layer(
    width: int,
    height: int,
    label: Union[str, int],
    settings: Settings,
    fonts: Optional[FontResolver] = None,
) -> Image.Image:
    fonts = fonts or default_resolver()
    text = label_text(label, settings)

    layer = Image.new("RGBA", (width, height), (0, 0, 0, 0))
    painter = Painter(layer, fonts.for_settings(settings, width), settings.text_horizontal_align)
    x, y = text_position(width, height, settings)

    if settings.letter_spacing != 0:
        draw_spaced_text(painter, text, x, y, settings.letter_spacing * Settings.scale_for(width), settings)
    else:
        apply_text_effects(painter, text, x, y, settings)

    return apply_skew(painter.layer, settings.text_skew)


def draw_spaced_text(painter: Painter, text: str, x: float, y: float, spacing: float, settings: Settings) -> None:
    """Place characters one by one, each going through the full effect pipeline."""
    chars = list(text)
    if not chars:
        return
    total = sum(painter.measure(c) + spacing for c in chars) - spacing

    align = painter.align
    if align == "left":
        current = x
    elif align == "right":
        current = x - total
    else:
        current = x - total / 2

    painter.align = "start"
    try:
        for char in chars:
            apply_text_effects(painter, char, current, y, settings)
            current += painter.measure(char) + spacing
    finally:
        painter.align = align


def apply_skew(layer: Image.Image, degrees: float) -> Image.Image:
    """Horizontal shear x' = x + tan(skew)·(y − h/2)."""
    if not degrees:
        return layer
    t = math.tan(math.radians(degrees))
    cy = layer.height / 2
    return layer.transform(layer.size, Image.AFFINE, (1, -t, t * cy, 0, 1, 0), resample=Image.BICUBIC)


# ── Effect pipelines ──────────────────────────────────────────────────────────

def apply_text_effects(painter: Painter, text: str, x: float, y: float, settings: Settings) -> None:
    if settings.has_special_effect:
        draw_special_effects(painter, text, x, y, settings)
    else:
        draw_regular_effects(painter, text, x, y, settings)


def draw_regular_effects(painter: Painter, text: str, x: float, y: float, settings: Settings) -> None:
    drawn = False

    if settings.text_shadow:
        painter.fill(text, x, y, settings.text_color, shadow=_drop_shadow(settings))
        drawn = True

    if settings.text_glow:
        painter.fill(text, x, y, settings.text_color, shadow=Shadow(settings.glow_color, settings.glow_intensity))
        drawn = True

    if not drawn:
        painter.fill(text, x, y, settings.text_color)

    if settings.text_stroke:
        painter.stroke(text, x, y, settings.stroke_color, settings.stroke_width)


def draw_special_effects(painter: Painter, text: str, x: float, y: float, settings: Settings) -> None:
    if settings.text_shadow:
        painter.fill(text, x, y, _BASE_SHADOW_FILL, shadow=_drop_shadow(settings))

    effect = EFFECTS.get(settings.special_effect)
    if effect is not None:
        effect(painter, text, x, y, settings)

    if settings.text_stroke:
        painter.stroke(text, x, y, settings.stroke_color, settings.stroke_width)

    if settings.text_glow:
        painter.fill(
            text, x, y, _GLOW_FILL,
            shadow=Shadow(settings.glow_color, settings.glow_intensity),
            mode="screen",
        )


def _drop_shadow(settings: Settings) -> Shadow:
    return Shadow(settings.shadow_color, settings.shadow_blur, settings.shadow_offset_x, settings.shadow_offset_y)
