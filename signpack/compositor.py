"""
Compositor — assembles one finished sign from background, border and label.

Layer order for a text sign (w × h, transparent outside the rounded corners):

  ┌──────────────────────────────────────────┐
  │  background  (solid / gradient / ...)    │
  │  border      (inset by half its width)   │
  │  text layer  (effects, skew, rotation)   │
  └──────────────────────────────────────────┘
        └─ whole composite clipped to cornerRadius · w/512

Icon signs swap the text layer for a vector icon at 60% of the short side.

Usage:
  from signpack.compositor import render_sign
  img = render_sign(descriptor, settings)          # RGBA, sized to the format
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np
from PIL import Image, ImageDraw

from .background import apply_corner_clip, draw_background
from .border import draw_border
from .fonts import FontResolver, default_resolver
from .icons import render_icon
from .painter import Shadow
from .settings import Settings
from .signlist import ROTATED_GLYPH, SignDescriptor
from .text import draw_text

logger = logging.getLogger(__name__)

ICON_SIZE_RATIO = 0.6

# ── Preview sheet geometry ────────────────────────────────────────────────────

SHEET_MARGIN   = 16
SHEET_GAP      = 12
CAPTION_H      = 22
CAPTION_SIZE   = 14
SHEET_BG       = (15, 17, 24, 255)
CAPTION_COLOR  = (170, 178, 196, 255)


# ── Single signs ──────────────────────────────────────────────────────────────

def draw_sign(
    canvas: Image.Image,
    width: int,
    height: int,
    label: Union[str, int],
    settings: Settings,
    rotation: Optional[float] = None,
    image: Optional[Image.Image] = None,
    rng: Optional[np.random.Generator] = None,
    fonts: Optional[FontResolver] = None,
) -> None:
    """Clear *canvas* and paint a complete text sign onto it."""
    _clear(canvas)
    draw_background(canvas, width, height, settings, image=image, rng=rng, clip=False)
    draw_border(canvas, width, height, settings)
    draw_text(canvas, width, height, label, settings, rotation=rotation, fonts=fonts)
    apply_corner_clip(canvas, settings)


def draw_icon_sign(
    canvas: Image.Image,
    width: int,
    height: int,
    category: str,
    icon_id: str,
    settings: Settings,
    image: Optional[Image.Image] = None,
    rng: Optional[np.random.Generator] = None,
) -> bool:
    """
    Clear *canvas* and paint a background + border + centred icon sign.

    Glow (text glow or the neon effect) tints the icon with the glow color and
    paints it a second time with a glow shadow on top.

    Returns:
        False when the icon is unknown (the sign keeps its background).
    """
    _clear(canvas)
    draw_background(canvas, width, height, settings, image=image, rng=rng, clip=False)
    draw_border(canvas, width, height, settings)

    size = min(width, height) * ICON_SIZE_RATIO
    glowing = settings.text_glow or settings.special_effect == "neon"
    color = (settings.glow_color or "#00ffff") if glowing else (settings.text_color or "#ffffff")

    found = render_icon(canvas, category, icon_id, width / 2, height / 2, size, color)
    if found and glowing:
        glow = Shadow(settings.glow_color or "#00ffff", blur=(settings.glow_intensity or 5) * Settings.scale_for(width))
        render_icon(canvas, category, icon_id, width / 2, height / 2, size, color, glow=glow)

    apply_corner_clip(canvas, settings)
    return found


def render_sign(
    descriptor: SignDescriptor,
    settings: Settings,
    image: Optional[Image.Image] = None,
    fonts: Optional[FontResolver] = None,
    rng: Optional[np.random.Generator] = None,
    canvas: Optional[Image.Image] = None,
) -> Image.Image:
    """
    Render *descriptor* at the format's size. Passing *canvas* reuses it
    (it must already have the format's dimensions).
    """
    width, height = settings.dimensions
    if canvas is None or canvas.size != (width, height):
        canvas = Image.new("RGBA", (width, height), (0, 0, 0, 0))

    if descriptor.icon is not None:
        category, icon_id = descriptor.icon
        draw_icon_sign(canvas, width, height, category, icon_id, settings, image=image, rng=rng)
    else:
        draw_sign(
            canvas, width, height, descriptor.text or "", settings,
            rotation=descriptor.rotation, image=image, rng=rng, fonts=fonts,
        )
    return canvas


def _clear(canvas: Image.Image) -> None:
    canvas.paste((0, 0, 0, 0), (0, 0, canvas.width, canvas.height))


# ── Preview sheet ─────────────────────────────────────────────────────────────

def preview_descriptors(
    checkpoint_prefix: str = "Checkpoint",
    start_text: str = "START",
    finish_text: str = "FINISH",
    arrow_mode: str = "rotated",
    icon: Optional[Tuple[str, str]] = None,
) -> List[Tuple[str, SignDescriptor]]:
    """
    The four live-preview signs with their captions: checkpoint 1, START,
    FINISH and an arrow (the first selected icon when icons are in use).
    """
    if icon is not None:
        arrow = SignDescriptor("icon", "preview-arrow.png", icon=icon)
    elif arrow_mode == "rotated":
        arrow = SignDescriptor("arrow", "preview-arrow.png", text=ROTATED_GLYPH, rotation=90)
    else:
        arrow = SignDescriptor("arrow", "preview-arrow.png", text="→")

    return [
        ("Checkpoint", SignDescriptor("checkpoint", "preview-cp.png", text=f"{checkpoint_prefix or 'Checkpoint'} 1")),
        ("Start", SignDescriptor("start", "preview-start.png", text=start_text or "START")),
        ("Finish", SignDescriptor("finish", "preview-finish.png", text=finish_text or "FINISH")),
        ("Arrow", arrow),
    ]


def render_preview_sheet(
    settings: Settings,
    descriptors: Optional[Sequence[Tuple[str, SignDescriptor]]] = None,
    image: Optional[Image.Image] = None,
    fonts: Optional[FontResolver] = None,
    max_width: int = 512,
) -> Image.Image:
    """
    Stack the preview signs vertically, each under a caption, on a dark sheet.
    Signs wider than *max_width* are scaled down to fit.
    """
    fonts = fonts or default_resolver()
    descriptors = list(descriptors or preview_descriptors())

    sign_w, sign_h = settings.dimensions
    scale = min(1.0, max_width / sign_w)
    cell_w, cell_h = max(1, round(sign_w * scale)), max(1, round(sign_h * scale))

    sheet_w = cell_w + 2 * SHEET_MARGIN
    sheet_h = 2 * SHEET_MARGIN + len(descriptors) * (CAPTION_H + cell_h) + max(0, len(descriptors) - 1) * SHEET_GAP
    sheet = Image.new("RGBA", (sheet_w, sheet_h), SHEET_BG)
    draw = ImageDraw.Draw(sheet)
    caption_font = fonts.resolve("Roboto", "400", CAPTION_SIZE)

    canvas = Image.new("RGBA", (sign_w, sign_h), (0, 0, 0, 0))
    y = SHEET_MARGIN
    for caption, descriptor in descriptors:
        draw.text((SHEET_MARGIN, y + CAPTION_H / 2), caption, fill=CAPTION_COLOR, font=caption_font, anchor="lm")
        y += CAPTION_H

        sign = render_sign(descriptor, settings, image=image, fonts=fonts, canvas=canvas)
        if scale < 1.0:
            sign = sign.resize((cell_w, cell_h), Image.LANCZOS)
        sheet.alpha_composite(sign, (SHEET_MARGIN, y))
        y += cell_h + SHEET_GAP

    logger.debug(f"Preview sheet rendered: {sheet_w}x{sheet_h}")
    return sheet
