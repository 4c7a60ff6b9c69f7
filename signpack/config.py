"""
config.py — Constants and environment configuration for the signpack generator.

Everything tunable lives here: sign formats, input limits, font/effect catalogs,
user-facing error texts and the few paths that can be overridden from the
environment (or a local .env file).

Environment:
    SIGNPACK_FONT_DIRS       extra font directories (os.pathsep separated)
    SIGNPACK_PRESET_FILE     preset store path (default ~/.signpack/presets.json)
    SIGNPACK_OUTPUT_DIR      where archives are written (default outputs/)
    SIGNPACK_SHARE_BASE_URL  base URL for share links
    SIGNPACK_LOG_LEVEL       logging level for the CLI (default WARNING)
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, List

from dotenv import load_dotenv

load_dotenv()

APP_NAME    = "Trackmania Signpack Generator"
APP_VERSION = "2.0.0"

# ── Sign formats ──────────────────────────────────────────────────────────────

SIGN_FORMATS: Dict[str, Dict] = {
    "6x1": {"width": 512,  "height": 80,   "name": "Panoramic (6x1)", "ratio": "6:1"},
    "1x1": {"width": 1024, "height": 1024, "name": "Square (1x1)",    "ratio": "1:1"},
    "2x1": {"width": 1024, "height": 512,  "name": "Wide (2x1)",      "ratio": "2:1"},
    "4x1": {"width": 1024, "height": 256,  "name": "Banner (4x1)",    "ratio": "4:1"},
}
DEFAULT_FORMAT = "6x1"

# Effect sizes are authored against the 512px-wide panoramic sign.
CANONICAL_WIDTH = 512

# ── Limits ────────────────────────────────────────────────────────────────────

LIMITS = {
    # Font
    "MIN_FONT_SIZE": 20,
    "MAX_FONT_SIZE": 120,
    "MIN_LETTER_SPACING": -5,
    "MAX_LETTER_SPACING": 15,
    "MIN_TEXT_SKEW": -30,
    "MAX_TEXT_SKEW": 30,

    # Checkpoint numbering
    "MIN_CHECKPOINT": 1,
    "MAX_CHECKPOINT": 999,
    "MAX_CHECKPOINTS_PER_PACK": 500,
    "WARNING_BULK_THRESHOLD": 200,

    # Text inputs
    "MAX_PREFIX_LENGTH": 50,
    "MAX_SIGN_TEXT_LENGTH": 100,
    "MAX_PACK_NAME_LENGTH": 100,
    "MAX_FILE_PREFIX_LENGTH": 50,
    "MAX_PRESET_NAME_LENGTH": 50,

    # Uploads
    "MAX_IMAGE_SIZE_MB": 10,
    "MAX_IMAGE_DIMENSION": 4096,
    "ALLOWED_IMAGE_TYPES": ("png", "jpeg"),

    # Storage
    "STORAGE_QUOTA_WARNING_MB": 4,
    "MAX_PRESETS": 50,

    # Effects
    "MAX_SHADOW_BLUR": 20,
    "MIN_SHADOW_OFFSET": -20,
    "MAX_SHADOW_OFFSET": 20,
    "MAX_STROKE_WIDTH": 10,
    "MAX_GLOW_INTENSITY": 30,
    "MAX_BORDER_WIDTH": 20,
    "MAX_CORNER_RADIUS": 50,
    "MAX_EFFECT_INTENSITY": 10,

    # Background
    "MAX_GRADIENT_ANGLE": 360,
    "MIN_PATTERN_SIZE": 5,
    "MAX_PATTERN_SIZE": 100,
    "MAX_NOISE_INTENSITY": 100,
    "MIN_NOISE_SCALE": 0.1,
    "MAX_NOISE_SCALE": 5,
    "MAX_IMAGE_OPACITY": 100,
}

# ── Catalogs ──────────────────────────────────────────────────────────────────

FONT_FAMILIES: List[str] = [
    # Core
    "Inter", "Roboto", "Poppins", "Montserrat", "Open Sans", "Lato",
    # Display
    "Orbitron", "Rajdhani", "Exo 2", "Audiowide", "Bungee", "Impact", "Anton", "Oswald",
    # Gaming
    "Press Start 2P", "Black Ops One", "Russo One", "Racing Sans One", "Staatliches", "Bebas Neue",
    # Decorative
    "Permanent Marker", "Creepster", "Monoton", "Faster One", "Alfa Slab One",
    "Righteous", "Bangers", "Squada One",
    # Script
    "Lobster", "Pacifico", "Dancing Script", "Caveat",
    # Technical
    "JetBrains Mono", "Fira Code", "Share Tech Mono", "Electrolize", "Michroma", "Chakra Petch",
]

FONT_WEIGHTS = ["100", "200", "300", "400", "500", "600", "700", "800", "900"]

BACKGROUND_TYPES = ["solid", "linear", "radial", "conic", "pattern", "noise", "image", "abstract"]

PATTERN_TYPES = [
    "stripes", "checkerboard", "dots", "waves", "grid", "hexagon", "carbon",
    "spiral", "zigzag", "crosshatch", "triangular", "diamonds", "circles", "scales",
]

ABSTRACT_STYLES = ["racing", "geometric", "waves"]

BLEND_MODES = [
    "normal", "multiply", "screen", "overlay", "darken", "lighten",
    "color-dodge", "color-burn", "hard-light", "soft-light",
    "difference", "exclusion", "hue", "saturation", "color", "luminosity",
]

BORDER_STYLES = ["solid", "dashed", "dotted", "double", "groove"]

TEXT_TRANSFORMS = ["none", "uppercase", "lowercase", "capitalize"]

# First match wins when legacy payloads carry several effect flags.
SPECIAL_EFFECTS = [
    "hologram", "neon", "metallic", "chrome", "rainbow",
    "glitch", "scanlines", "pixelate", "retro", "depth3d",
]

# ── Archive ───────────────────────────────────────────────────────────────────

ZIP_COMPRESSION_LEVEL = 6
SETTINGS_JSON_NAME    = "settings.json"
PRESET_STORAGE_KEY    = "tmSignpackPresets"

# ── User-facing messages ──────────────────────────────────────────────────────

ERROR_MESSAGES = {
    "ZIP_NOT_AVAILABLE": "ZIP compression (zlib) is not available in this Python build.",
    "DRAWING_NOT_AVAILABLE": "Pillow was built without FreeType support; signs cannot be drawn.",
    "INVALID_NUMBER_RANGE": "Start number cannot be greater than end number.",
    "NO_SIGN_TYPES": "Please select at least one sign type to generate",
    "FILE_TOO_LARGE": "Image file is too large. Maximum size is {max}MB.",
    "INVALID_FILE_TYPE": "Invalid file type. Only PNG and JPEG images are allowed.",
    "IMAGE_TOO_LARGE": "Image dimensions are too large. Maximum is {max}px per side.",
    "STORAGE_FULL": "Storage quota exceeded. Please delete some presets to free up space.",
    "GENERATION_FAILED": "Failed to generate signpack: {error}",
    "INVALID_PRESET_DATA": "Invalid preset data. Could not load preset.",
}

# ── Environment ───────────────────────────────────────────────────────────────

FONT_DIRS: List[Path] = [
    Path(p).expanduser()
    for p in os.environ.get("SIGNPACK_FONT_DIRS", "").split(os.pathsep)
    if p.strip()
]

PRESET_FILE = Path(
    os.environ.get("SIGNPACK_PRESET_FILE", "~/.signpack/presets.json")
).expanduser()

OUTPUT_DIR = Path(os.environ.get("SIGNPACK_OUTPUT_DIR", "outputs"))

SHARE_BASE_URL = os.environ.get(
    "SIGNPACK_SHARE_BASE_URL", "https://sonaclov.github.io/TrackmaniaSignpacks/"
)

LOG_LEVEL = os.environ.get("SIGNPACK_LOG_LEVEL", "WARNING").upper()
