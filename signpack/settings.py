"""
settings.py — The Settings record every renderer consumes.

One flat pydantic model with an explicit default for every visual parameter.
JSON uses the camelCase keys of the original browser tool (textPrefix,
gradientColor1, shadowOffsetX, ...) so exported settings, presets and share
links stay interchangeable with it; snake_case names are accepted too.

Usage:
    from signpack.settings import normalize_settings, sign_dimensions

    settings = normalize_settings({"fontSize": 65, "neon": True})
    settings.special_effect      # → "neon"
    sign_dimensions("2x1")       # → (1024, 512)
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, ValidationError as PydanticValidationError, field_validator, model_validator
from pydantic.alias_generators import to_camel

from .config import (
    ABSTRACT_STYLES,
    BACKGROUND_TYPES,
    BLEND_MODES,
    BORDER_STYLES,
    CANONICAL_WIDTH,
    DEFAULT_FORMAT,
    FONT_WEIGHTS,
    SIGN_FORMATS,
    SPECIAL_EFFECTS,
    TEXT_TRANSFORMS,
)

logger = logging.getLogger(__name__)

HorizontalAlign = Literal["left", "center", "right"]
VerticalAlign  = Literal["top", "middle", "bottom"]
SpecialEffect  = Literal[
    "none", "hologram", "neon", "metallic", "chrome", "rainbow",
    "glitch", "scanlines", "pixelate", "retro", "depth3d",
]

# Legacy boolean flag → enum value. "pixel" is the original key for pixelate.
_LEGACY_EFFECT_FLAGS = {
    "hologram": "hologram",
    "neon": "neon",
    "metallic": "metallic",
    "chrome": "chrome",
    "rainbow": "rainbow",
    "glitch": "glitch",
    "scanlines": "scanlines",
    "pixel": "pixelate",
    "pixelate": "pixelate",
    "retro": "retro",
    "depth3d": "depth3d",
}

# Free-text fields restricted to a config catalog.
_CATALOG_FIELDS = {
    "font_weight": FONT_WEIGHTS,
    "text_transform": TEXT_TRANSFORMS,
    "background_type": BACKGROUND_TYPES,
    "image_blend_mode": BLEND_MODES,
    "abstract_style": ABSTRACT_STYLES,
    "border_style": BORDER_STYLES,
}


class Settings(BaseModel):
    """Every visual parameter of a sign, fully populated."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )

    # ── Text ──
    text_prefix: str = ""
    font_size: int = 48
    font_family: str = "Orbitron"
    font_weight: str = "700"
    text_color: str = "#ffffff"
    text_transform: str = "none"
    letter_spacing: int = 0
    text_skew: int = 0
    text_horizontal_align: HorizontalAlign = "center"
    text_vertical_align: VerticalAlign = "middle"

    # ── Background ──
    background_type: str = "solid"
    background_color: str = "#1a1d29"
    gradient_color1: str = "#667eea"
    gradient_color2: str = "#764ba2"
    gradient_angle: int = 45
    pattern_type: str = "stripes"
    pattern_color: str = "#34495e"
    pattern_size: int = 20
    noise_intensity: int = 20
    noise_scale: float = 1.0
    noise_seed: Optional[int] = None
    image_opacity: int = 50
    image_blend_mode: str = "normal"
    abstract_style: str = "racing"
    abstract_dominant: str = "#1a1d29"
    abstract_secondary: str = "#2a2f3f"
    abstract_accent: str = "#00d9ff"
    abstract_complexity: int = 5
    abstract_seed: int = 42

    # ── Effects ──
    text_shadow: bool = False
    shadow_color: str = "#000000"
    shadow_blur: int = 4
    shadow_offset_x: int = 2
    shadow_offset_y: int = 2
    text_stroke: bool = False
    stroke_color: str = "#000000"
    stroke_width: int = 2
    text_glow: bool = False
    glow_color: str = "#00ffff"
    glow_intensity: int = 10
    special_effect: SpecialEffect = "none"
    effect_intensity: int = 5

    # ── Border ──
    border_width: int = 0
    border_color: str = "#ffffff"
    border_style: str = "solid"
    corner_radius: int = 0

    # ── Format ──
    sign_format: str = DEFAULT_FORMAT

    @field_validator(*_CATALOG_FIELDS)
    @classmethod
    def _check_catalog(cls, value: str, info) -> str:
        allowed = _CATALOG_FIELDS[info.field_name]
        if value not in allowed:
            raise ValueError(f"must be one of {', '.join(allowed)}")
        return value

    @model_validator(mode="before")
    @classmethod
    def _fold_legacy_effect_flags(cls, data: Any) -> Any:
        """Collapse the original ten effect booleans into special_effect."""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        flags = {key: data.pop(key) for key in list(data) if key in _LEGACY_EFFECT_FLAGS}
        if "specialEffect" in data or "special_effect" in data:
            return data
        for effect in SPECIAL_EFFECTS:
            legacy_keys = [k for k, v in _LEGACY_EFFECT_FLAGS.items() if v == effect]
            if any(bool(flags.get(k)) for k in legacy_keys):
                data["specialEffect"] = effect
                break
        return data

    # ── Derived values ──

    @property
    def has_special_effect(self) -> bool:
        return self.special_effect != "none"

    @property
    def dimensions(self) -> Tuple[int, int]:
        return sign_dimensions(self.sign_format)

    @staticmethod
    def scale_for(width: int) -> float:
        """Resolution factor relative to the 512px-wide canonical sign."""
        return width / CANONICAL_WIDTH

    def to_json_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


# ── Normalization ─────────────────────────────────────────────────────────────

def normalize_settings(raw: Union[Settings, Dict[str, Any], None] = None, **overrides: Any) -> Settings:
    """
    Produce a fully populated Settings from anything settings-shaped.

    Unknown keys are ignored, missing keys take their defaults, and values that
    fail validation (bad enum member, non-numeric size, ...) are dropped with a
    warning so their default applies instead.
    """
    if isinstance(raw, Settings):
        data: Dict[str, Any] = raw.to_json_dict()
    elif raw is None:
        data = {}
    elif isinstance(raw, dict):
        data = dict(raw)
    else:
        raise TypeError(f"Cannot build Settings from {type(raw).__name__}")
    data.update(overrides)

    for _ in range(len(data) + 1):
        try:
            return Settings.model_validate(data)
        except PydanticValidationError as exc:
            bad_keys = set()
            for err in exc.errors():
                if err.get("loc"):
                    bad_keys |= _key_variants(str(err["loc"][0]))
            bad_keys &= set(data)
            if not bad_keys:
                raise
            for key in bad_keys:
                logger.warning(f"Ignoring invalid setting {key}={data[key]!r}; using default")
                data.pop(key)
    return Settings()


def _key_variants(key: str) -> set:
    """A field's snake_case name and camelCase alias, whichever one was given."""
    variants = {key, to_camel(key)}
    for name, field in Settings.model_fields.items():
        if field.alias == key:
            variants.add(name)
    return variants


def sign_dimensions(format_key: Optional[str]) -> Tuple[int, int]:
    """Pixel size for a sign format key; anything unknown maps to 6x1."""
    fmt = SIGN_FORMATS.get(format_key or "", SIGN_FORMATS[DEFAULT_FORMAT])
    return fmt["width"], fmt["height"]


# ── Text helpers ──────────────────────────────────────────────────────────────

def apply_text_transform(text: str, transform: str) -> str:
    if transform == "uppercase":
        return text.upper()
    if transform == "lowercase":
        return text.lower()
    if transform == "capitalize":
        return " ".join(word[:1].upper() + word[1:].lower() for word in text.split(" "))
    return text


def compose_label(prefix: str, label: Union[str, int]) -> str:
    """prefix + " " + label when a prefix is set, else just the label."""
    if prefix and prefix.strip():
        return f"{prefix} {label}"
    return str(label)
