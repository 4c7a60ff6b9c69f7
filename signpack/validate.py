"""
validate.py — Input validation for packs, ranges, settings, presets and uploads.

Validators collect every problem instead of stopping at the first one, and
return human-readable messages the CLI prints as a list. Callers that must
stop raise errors.ValidationError with those messages.

Usage:
  from .validate import validate_pack_config
  errors = validate_pack_config(config)
  if errors:
      raise ValidationError(errors)
"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Any, List, Optional, Union

from PIL import Image, UnidentifiedImageError

from .colors import is_valid_hex
from .config import ERROR_MESSAGES, LIMITS
from .errors import ValidationError
from .settings import Settings
from .signlist import PackConfig

logger = logging.getLogger(__name__)

_PRESET_NAME_RE = re.compile(r"^[a-zA-Z0-9\s_-]+$")
_ZIP_UNSAFE_RE = re.compile(r'[<>:"/\\|?*]')

COLOR_FIELDS = [
    "text_color", "background_color", "shadow_color", "stroke_color",
    "glow_color", "border_color", "gradient_color1", "gradient_color2", "pattern_color",
]

# (field, label, min, max): inclusive numeric bounds on Settings
_SETTING_BOUNDS = [
    ("font_size",        "Font size",        LIMITS["MIN_FONT_SIZE"],      LIMITS["MAX_FONT_SIZE"]),
    ("letter_spacing",   "Letter spacing",   LIMITS["MIN_LETTER_SPACING"], LIMITS["MAX_LETTER_SPACING"]),
    ("text_skew",        "Text skew",        LIMITS["MIN_TEXT_SKEW"],      LIMITS["MAX_TEXT_SKEW"]),
    ("shadow_blur",      "Shadow blur",      0,                            LIMITS["MAX_SHADOW_BLUR"]),
    ("shadow_offset_x",  "Shadow offset X",  LIMITS["MIN_SHADOW_OFFSET"],  LIMITS["MAX_SHADOW_OFFSET"]),
    ("shadow_offset_y",  "Shadow offset Y",  LIMITS["MIN_SHADOW_OFFSET"],  LIMITS["MAX_SHADOW_OFFSET"]),
    ("stroke_width",     "Stroke width",     0,                            LIMITS["MAX_STROKE_WIDTH"]),
    ("glow_intensity",   "Glow intensity",   0,                            LIMITS["MAX_GLOW_INTENSITY"]),
    ("effect_intensity", "Effect intensity", 0,                            LIMITS["MAX_EFFECT_INTENSITY"]),
    ("border_width",     "Border width",     0,                            LIMITS["MAX_BORDER_WIDTH"]),
    ("corner_radius",    "Corner radius",    0,                            LIMITS["MAX_CORNER_RADIUS"]),
    ("gradient_angle",   "Gradient angle",   0,                            LIMITS["MAX_GRADIENT_ANGLE"]),
    ("pattern_size",     "Pattern size",     LIMITS["MIN_PATTERN_SIZE"],   LIMITS["MAX_PATTERN_SIZE"]),
    ("noise_intensity",  "Noise intensity",  0,                            LIMITS["MAX_NOISE_INTENSITY"]),
    ("noise_scale",      "Noise scale",      LIMITS["MIN_NOISE_SCALE"],    LIMITS["MAX_NOISE_SCALE"]),
    ("image_opacity",    "Image opacity",    0,                            LIMITS["MAX_IMAGE_OPACITY"]),
]


def _as_int(value: Any) -> Optional[int]:
    """parseInt-style coercion: ints, integral floats and numeric strings."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return None if value != value else int(value)
    if isinstance(value, str):
        match = re.match(r"^\s*([+-]?\d+)", value)
        return int(match.group(1)) if match else None
    return None


# ── Pack configuration ────────────────────────────────────────────────────────

def validate_pack_config(config: PackConfig) -> List[str]:
    """Every problem with a category pack, one "• Field: message" line each."""
    errors: List[str] = []

    if config.include_checkpoints:
        errors += _checkpoint_range_errors(config.checkpoint_start, config.checkpoint_end)

        prefix = (config.checkpoint_prefix or "").strip()
        if not prefix:
            errors.append("• Checkpoint prefix: Cannot be empty")
        elif len(prefix) > LIMITS["MAX_PREFIX_LENGTH"]:
            errors.append("• Checkpoint prefix: Maximum 50 characters")

    if config.include_start:
        errors += _sign_text_errors("START", config.start_text)
    if config.include_finish:
        errors += _sign_text_errors("FINISH", config.finish_text)

    if config.include_arrows and not config.selected_arrows():
        errors.append("• Arrows: At least one direction must be selected")

    pack_name = (config.pack_name or "").strip()
    if not pack_name:
        errors.append("• Pack name: Cannot be empty")
    elif len(pack_name) > LIMITS["MAX_PACK_NAME_LENGTH"]:
        errors.append("• Pack name: Maximum 100 characters")

    file_prefix = (config.file_prefix or "").strip()
    if file_prefix and len(file_prefix) > LIMITS["MAX_FILE_PREFIX_LENGTH"]:
        errors.append("• File prefix: Maximum 50 characters")

    if not _any_sign_type(config):
        errors.append(ERROR_MESSAGES["NO_SIGN_TYPES"])

    return errors


def _checkpoint_range_errors(start: Any, end: Any) -> List[str]:
    start_n, end_n = _as_int(start), _as_int(end)
    if start_n is None or end_n is None:
        return ["• Checkpoint range: Start and end numbers must be valid numbers"]
    if start_n < LIMITS["MIN_CHECKPOINT"]:
        return ["• Checkpoint range: Start number must be at least 1"]
    if end_n < start_n:
        return ["• Checkpoint range: End number must be greater than or equal to start number"]
    if end_n > LIMITS["MAX_CHECKPOINT"]:
        return ["• Checkpoint range: End number cannot exceed 999"]
    if end_n - start_n + 1 > LIMITS["MAX_CHECKPOINTS_PER_PACK"]:
        return ["• Checkpoint range: Cannot generate more than 500 checkpoints (consider splitting into multiple packs)"]
    return []


def _sign_text_errors(label: str, text: Optional[str]) -> List[str]:
    text = (text or "").strip()
    if not text:
        return [f"• {label} sign: Text cannot be empty"]
    if len(text) > LIMITS["MAX_SIGN_TEXT_LENGTH"]:
        return [f"• {label} sign: Text maximum 100 characters"]
    return []


def _any_sign_type(config: PackConfig) -> bool:
    icons = config.include_icons and bool(config.arrow_icons or config.race_icons)
    return bool(
        config.include_checkpoints or config.include_start or config.include_finish
        or config.include_arrows or icons
    )


# ── Numbered range ────────────────────────────────────────────────────────────

def validate_range(start: Any, end: Any) -> List[str]:
    """Bounds and ordering of a single numbered range."""
    errors: List[str] = []
    numbers = []
    for value, label in ((start, "Start number"), (end, "End number")):
        if value is None or value == "":
            errors.append(f"{label} is required")
            continue
        n = _as_int(value)
        if n is None:
            errors.append(f"{label} must be a valid number")
        elif n < LIMITS["MIN_CHECKPOINT"]:
            errors.append(f"{label} must be at least {LIMITS['MIN_CHECKPOINT']}")
        elif n > LIMITS["MAX_CHECKPOINT"]:
            errors.append(f"{label} must be at most {LIMITS['MAX_CHECKPOINT']}")
        else:
            numbers.append(n)

    if errors:
        return errors

    start_n, end_n = numbers
    if start_n > end_n:
        return [ERROR_MESSAGES["INVALID_NUMBER_RANGE"]]
    total = end_n - start_n + 1
    limit = LIMITS["MAX_CHECKPOINTS_PER_PACK"]
    if total > limit:
        return [f"Cannot generate more than {limit} signs at once. Current range: {total} signs."]
    return []


# ── Settings ──────────────────────────────────────────────────────────────────

def validate_color(value: Optional[str], field: str = "Color") -> Optional[str]:
    if not value:
        return f"{field} is required"
    if not is_valid_hex(value):
        return f"{field} must be a valid hex color (e.g., #FF0000)"
    return None


def validate_settings(settings: Settings, strict_colors: bool = False) -> List[str]:
    """
    Numeric bounds of every slider-backed field.

    Bad colors are only logged (the renderer falls back to black) unless
    strict_colors is set, in which case they are reported as errors too.
    """
    errors: List[str] = []
    for field, label, low, high in _SETTING_BOUNDS:
        value = getattr(settings, field)
        if value < low:
            errors.append(f"{label} must be at least {low}")
        elif value > high:
            errors.append(f"{label} must be at most {high}")

    for field in COLOR_FIELDS:
        problem = validate_color(getattr(settings, field), field)
        if problem is None:
            continue
        if strict_colors:
            errors.append(problem)
        else:
            logger.warning(f"Invalid {field}: {problem}")

    return errors


# ── Presets and files ─────────────────────────────────────────────────────────

def validate_preset_name(name: Optional[str]) -> List[str]:
    if name is None or not name.strip():
        return ["Preset name cannot be empty"]
    if len(name) > LIMITS["MAX_PRESET_NAME_LENGTH"]:
        return [f"Preset name must be at most {LIMITS['MAX_PRESET_NAME_LENGTH']} characters"]
    if not _PRESET_NAME_RE.match(name):
        return ["Preset name can only contain letters, numbers, spaces, hyphens and underscores"]
    return []


def validate_image_file(path: Union[str, Path]) -> Image.Image:
    """
    Open a background image after checking type, file size and dimensions.

    Returns:
        The loaded image.

    Raises:
        ValidationError: with the user-facing message for the first failed check.
    """
    path = Path(path)
    if not path.is_file():
        raise ValidationError(["No file selected"], field="image")

    max_bytes = LIMITS["MAX_IMAGE_SIZE_MB"] * 1024 * 1024
    if os.path.getsize(path) > max_bytes:
        raise ValidationError([ERROR_MESSAGES["FILE_TOO_LARGE"].format(max=LIMITS["MAX_IMAGE_SIZE_MB"])], field="image")

    try:
        img = Image.open(path)
        fmt = (img.format or "").lower()
    except (UnidentifiedImageError, OSError):
        raise ValidationError([ERROR_MESSAGES["INVALID_FILE_TYPE"]], field="image")
    if fmt not in LIMITS["ALLOWED_IMAGE_TYPES"]:
        raise ValidationError([ERROR_MESSAGES["INVALID_FILE_TYPE"]], field="image")

    max_side = LIMITS["MAX_IMAGE_DIMENSION"]
    if img.width > max_side or img.height > max_side:
        raise ValidationError([ERROR_MESSAGES["IMAGE_TOO_LARGE"].format(max=max_side)], field="image")

    img.load()
    return img


def sanitize_zip_name(name: Optional[str]) -> str:
    """Replace characters no filesystem accepts and ensure a .zip suffix."""
    if not name or not name.strip():
        return "checkpoint_signpack.zip"
    sanitized = _ZIP_UNSAFE_RE.sub("_", name)
    if not sanitized.lower().endswith(".zip"):
        sanitized += ".zip"
    return sanitized
