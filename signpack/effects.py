"""
effects.py — The ten special text effects.

Every effect has the signature (painter, text, x, y, settings) and draws onto
the painter's layer. Intensities are raw effectIntensity values; effects that
treat intensity as a percentage fall back to 50 when it is 0, the others to 5.
"""

from __future__ import annotations

import math
from typing import Callable, Dict

from PIL import Image, ImageDraw

from .colors import hex_to_rgb, hsl_to_rgb, vertical_gradient
from .painter import Painter, Shadow
from .settings import Settings

Effect = Callable[[Painter, str, float, float, Settings], None]

HOLOGRAM_COLORS = ("#ff0080", "#00ff80", "#8000ff")
GLITCH_COLORS   = ("#ff0000", "#00ff00", "#0000ff")

METALLIC_STOPS = [(0.0, "#ffffff"), (0.3, "#c0c0c0"), (0.7, "#808080"), (1.0, "#404040")]
CHROME_STOPS = [
    (0.0, "#f0f0f0"), (0.2, "#ffffff"), (0.4, "#d0d0d0"),
    (0.6, "#a0a0a0"), (0.8, "#ffffff"), (1.0, "#e0e0e0"),
]

SCANLINE_SPACING = 4
DEPTH_LAYERS = 8


def hologram(painter, text, x, y, settings):
    intensity = settings.effect_intensity or 5
    for color, offset in zip(HOLOGRAM_COLORS, (intensity, -intensity, 0)):
        painter.fill(text, x + offset, y + offset, color, alpha=0.7)


def neon(painter, text, x, y, settings):
    intensity = settings.effect_intensity or 5
    color = settings.text_color
    painter.fill(text, x, y, color, alpha=0.3, shadow=Shadow(color, intensity * 6))
    painter.fill(text, x, y, color, alpha=0.6, shadow=Shadow(color, intensity * 3))
    painter.fill(text, x, y, "#ffffff", alpha=1.0, shadow=Shadow(color, intensity))


def metallic(painter, text, x, y, settings):
    gradient = vertical_gradient(painter.size, y - 20, y + 20, METALLIC_STOPS)
    painter.fill(text, x, y, gradient)
    painter.stroke(text, x, y, "#000000", 1)


def chrome(painter, text, x, y, settings):
    gradient = vertical_gradient(painter.size, y - 30, y + 30, CHROME_STOPS)
    painter.fill(text, x, y, gradient, shadow=Shadow("#000000", 5, 2, 2))
    painter.stroke(text, x, y, "#ffffff", 1)


def rainbow(painter, text, x, y, settings):
    # fixed advance of one "M" per character
    chars = list(text)
    if not chars:
        return
    advance = painter.measure("M")
    current = x - len(chars) * advance / 2
    for index, char in enumerate(chars):
        hue = (index * 360 / len(chars)) % 360
        painter.fill(char, current, y, hsl_to_rgb(hue, 70, 60))
        current += advance


def glitch(painter, text, x, y, settings):
    intensity = settings.effect_intensity or 5
    painter.fill(text, x, y, settings.text_color)
    offsets = ((intensity, 0), (-intensity, 0), (0, intensity))
    for color, (dx, dy) in zip(GLITCH_COLORS, offsets):
        painter.fill(text, x + dx, y + dy, color, alpha=0.4, mode="screen")


def scanlines(painter, text, x, y, settings):
    painter.fill(text, x, y, settings.text_color)
    draw_scanlines(painter, settings)


def draw_scanlines(painter: Painter, settings: Settings) -> None:
    """Horizontal dark lines every 4px across the whole layer."""
    intensity = (settings.effect_intensity or 50) / 100
    width, height = painter.size
    overlay = Image.new("RGBA", painter.size, (0, 0, 0, 0))
    draw = ImageDraw.Draw(overlay)
    alpha = int(round(255 * max(0.0, min(1.0, intensity * 0.3))))
    for scan_y in range(0, height, SCANLINE_SPACING):
        # a 2px line centred on scan_y covers rows scan_y-1 and scan_y
        draw.rectangle((0, scan_y - 1, width, scan_y), fill=(0, 0, 0, alpha))
    painter.overlay(overlay)


def pixelate(painter, text, x, y, settings):
    factor = max(2, math.floor((settings.effect_intensity or 50) / 10))
    scratch = Painter(Image.new("RGBA", painter.size, (0, 0, 0, 0)), painter.font, painter.align)
    scratch.fill(text, x, y, settings.text_color)

    width, height = painter.size
    small = scratch.layer.resize((max(1, width // factor), max(1, height // factor)), Image.NEAREST)
    painter.overlay(small.resize(painter.size, Image.NEAREST))


def retro(painter, text, x, y, settings):
    intensity = (settings.effect_intensity or 50) / 100
    painter.fill(text, x, y, settings.text_color)
    painter.fill(text, x, y, "#00ff00", alpha=0.5, shadow=Shadow("#00ff00", 10 * intensity))
    painter.fill(text, x - 2 * intensity, y, "#ff0000", alpha=0.3, shadow=Shadow("#00ff00", 10 * intensity))
    painter.fill(text, x + 2 * intensity, y, "#0000ff", alpha=0.3, shadow=Shadow("#00ff00", 10 * intensity))
    draw_scanlines(painter, settings)


def depth3d(painter, text, x, y, settings):
    intensity = (settings.effect_intensity or 50) / 10
    r, g, b = hex_to_rgb(settings.text_color)
    for i in range(DEPTH_LAYERS, 0, -1):
        offset = i * (intensity / DEPTH_LAYERS)
        shade = i / DEPTH_LAYERS
        alpha = 0.3 + shade * 0.7
        color = (math.floor(r * shade), math.floor(g * shade), math.floor(b * shade))
        painter.fill(text, x - offset, y + offset, color, alpha=alpha)
    painter.fill(text, x, y, settings.text_color)


EFFECTS: Dict[str, Effect] = {
    "hologram": hologram,
    "neon": neon,
    "metallic": metallic,
    "chrome": chrome,
    "rainbow": rainbow,
    "glitch": glitch,
    "scanlines": scanlines,
    "pixelate": pixelate,
    "retro": retro,
    "depth3d": depth3d,
}
