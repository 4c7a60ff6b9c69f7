"""
fonts.py — Font family stacks and on-disk font resolution.

Each selectable family has a fallback chain (Orbitron → Arial Black → Arial →
sans-serif). The resolver walks the chain looking for installed font files and
always ends at Pillow's bundled default so drawing never fails for want of a
font.

Usage:
    from signpack.fonts import FontResolver, css_font

    fonts = FontResolver()
    font  = fonts.resolve("Orbitron", "700", 48)
    css_font(settings, 512)   # → '700 48px "Orbitron", "Arial Black", "Arial", sans-serif'
"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

from PIL import ImageFont

from . import config

logger = logging.getLogger(__name__)

# ── Family stacks ─────────────────────────────────────────────────────────────

_FONT_STACKS: Dict[str, List[str]] = {
    "Orbitron":       ["Orbitron", "Arial Black", "Arial", "sans-serif"],
    "Rajdhani":       ["Rajdhani", "Arial Narrow", "Arial", "sans-serif"],
    "Exo 2":          ["Exo 2", "Helvetica", "Arial", "sans-serif"],
    "Press Start 2P": ["Press Start 2P", "Courier New", "monospace"],
    "Black Ops One":  ["Black Ops One", "Impact", "Arial Black", "sans-serif"],
    "Russo One":      ["Russo One", "Impact", "Arial Black", "sans-serif"],
    "Audiowide":      ["Audiowide", "Arial Black", "Arial", "sans-serif"],
    "Bungee":         ["Bungee", "Arial Black", "Arial", "sans-serif"],
    "Impact":         ["Impact", "Arial Black", "sans-serif"],
    "Anton":          ["Anton", "Arial Black", "sans-serif"],
    "Oswald":         ["Oswald", "Arial Narrow", "sans-serif"],
    "Bebas Neue":     ["Bebas Neue", "Arial Black", "sans-serif"],
    "JetBrains Mono": ["JetBrains Mono", "Consolas", "Courier New", "monospace"],
    "Fira Code":      ["Fira Code", "Consolas", "Courier New", "monospace"],
}

_GENERIC_FAMILIES = {"sans-serif", "serif", "monospace"}

# Generic CSS families → concrete files commonly installed on Linux/macOS/Windows.
_GENERIC_CANDIDATES: Dict[str, List[str]] = {
    "sans-serif": ["DejaVu Sans", "Liberation Sans", "Arial", "Helvetica", "FreeSans"],
    "serif":      ["DejaVu Serif", "Liberation Serif", "Times New Roman", "FreeSerif"],
    "monospace":  ["DejaVu Sans Mono", "Liberation Mono", "Courier New", "FreeMono"],
}

_SYSTEM_FONT_DIRS = [
    "/usr/share/fonts",
    "/usr/local/share/fonts",
    "~/.fonts",
    "~/.local/share/fonts",
    "/System/Library/Fonts",
    "/Library/Fonts",
    "~/Library/Fonts",
    "C:/Windows/Fonts",
]

_FONT_SUFFIXES = {".ttf", ".otf", ".ttc"}

_BOLD_SUFFIXES    = ["bold", "bd", "extrabold", "black", "semibold", "heavy"]
_REGULAR_SUFFIXES = ["regular", "", "medium", "book"]
_VARIABLE_SUFFIXES = ["wght", "variablefontwght"]


def font_stack(family: str) -> List[str]:
    """Fallback chain for *family*, ending in a generic CSS family."""
    return list(_FONT_STACKS.get(family, [family, "Arial", "sans-serif"]))


def css_font(settings, width: int) -> str:
    """The canvas-style font string for *settings* at a given canvas width."""
    size = scaled_font_size(settings.font_size, width)
    stack = ", ".join(
        name if name in _GENERIC_FAMILIES or name == "Impact" else f'"{name}"'
        for name in font_stack(settings.font_family)
    )
    return f"{settings.font_weight} {size}px {stack}"


def scaled_font_size(font_size: int, width: int) -> int:
    return max(1, int(round(font_size * width / config.CANONICAL_WIDTH)))


def is_bold(weight: str) -> bool:
    try:
        return int(weight) >= 600
    except (TypeError, ValueError):
        return str(weight).lower() in ("bold", "bolder")


def _normalize(name: str) -> str:
    return re.sub(r"[^a-z0-9]", "", name.lower())


# ── Resolver ──────────────────────────────────────────────────────────────────

class FontResolver:
    """
    Resolve (family, weight, size) to a Pillow font, walking the family's
    fallback chain. Lookups are cached; the file index is built on first use.
    """

    def __init__(self, font_dirs: Optional[Iterable[Path]] = None) -> None:
        dirs = list(font_dirs) if font_dirs is not None else list(config.FONT_DIRS)
        self._dirs = [Path(d).expanduser() for d in dirs] + [
            Path(d).expanduser() for d in _SYSTEM_FONT_DIRS
        ]
        self._index: Optional[Dict[str, Path]] = None
        self._cache: Dict[Tuple[str, bool, int], ImageFont.ImageFont] = {}
        self._paths: Dict[Tuple[str, bool], Optional[Path]] = {}

    @property
    def index(self) -> Dict[str, Path]:
        if self._index is None:
            self._index = self._build_index()
        return self._index

    def _build_index(self) -> Dict[str, Path]:
        index: Dict[str, Path] = {}
        for root in self._dirs:
            if not root.is_dir():
                continue
            for dirpath, _dirs, files in os.walk(root):
                for fname in files:
                    path = Path(dirpath) / fname
                    if path.suffix.lower() in _FONT_SUFFIXES:
                        # first directory wins, so user dirs shadow system fonts
                        index.setdefault(_normalize(path.stem), path)
        logger.debug(f"Indexed {len(index)} font files")
        return index

    def find_file(self, family: str, bold: bool) -> Optional[Path]:
        """Font file for one concrete family name, or None if not installed."""
        key = (family, bold)
        if key in self._paths:
            return self._paths[key]

        names = _GENERIC_CANDIDATES.get(family, [family])
        found: Optional[Path] = None
        for name in names:
            base = _normalize(name)
            suffixes = (_BOLD_SUFFIXES + _REGULAR_SUFFIXES) if bold else _REGULAR_SUFFIXES
            for suffix in suffixes + _VARIABLE_SUFFIXES:
                found = self.index.get(base + suffix)
                if found:
                    break
            if found:
                break

        self._paths[key] = found
        return found

    def resolve(self, family: str, weight: str, size: int) -> ImageFont.ImageFont:
        size = max(1, int(size))
        bold = is_bold(weight)
        key = (family, bold, size)
        if key in self._cache:
            return self._cache[key]

        font = None
        for name in font_stack(family):
            path = self.find_file(name, bold)
            if path is None:
                continue
            try:
                font = ImageFont.truetype(str(path), size)
                break
            except OSError as exc:
                logger.warning(f"Could not open font {path}: {exc}")

        if font is None:
            logger.info(f"No installed font for {family!r}; using Pillow default")
            font = ImageFont.load_default(size)

        self._cache[key] = font
        return font

    def for_settings(self, settings, width: int) -> ImageFont.ImageFont:
        return self.resolve(settings.font_family, settings.font_weight,
                            scaled_font_size(settings.font_size, width))

    def preload(self, settings, widths: Iterable[int]) -> List[ImageFont.ImageFont]:
        """Resolve every font a batch will draw with before rendering starts."""
        return [self.for_settings(settings, w) for w in widths]


_default_resolver: Optional[FontResolver] = None


def default_resolver() -> FontResolver:
    global _default_resolver
    if _default_resolver is None:
        _default_resolver = FontResolver()
    return _default_resolver
