"""
signlist.py — What a pack contains: sign descriptors and how to enumerate them.

Two enumeration strategies feed the same batch pipeline:

  PackConfig   category pack: checkpoint range, START/FINISH, arrows, icons
  RangeConfig  single numbered range with configurable number/file formats

Usage:
    from signpack.signlist import PackConfig, enumerate_pack

    signs = enumerate_pack(PackConfig(checkpoint_start=1, checkpoint_end=3))
    [s.filename for s in signs]   # → ['cp-001.png', 'cp-002.png', 'cp-003.png']
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

# ── Arrow tables ──────────────────────────────────────────────────────────────

# Rotated mode draws "↑" turned clockwise by the angle; listed in output order.
ROTATED_ARROWS: List[Tuple[str, int]] = [
    ("up", 0),
    ("right", 90),
    ("down", 180),
    ("left", 270),
    ("up-right", 45),
    ("down-right", 135),
    ("down-left", 225),
    ("up-left", 315),
]

CHARACTER_ARROWS: List[Tuple[str, str]] = [
    ("up", "↑"),
    ("down", "↓"),
    ("left", "←"),
    ("right", "→"),
    ("up-left", "↖"),
    ("up-right", "↗"),
    ("down-left", "↙"),
    ("down-right", "↘"),
]

ROTATED_GLYPH = "↑"

ARROW_DIRECTIONS_4 = ("up", "down", "left", "right")
ARROW_DIRECTIONS_8 = ARROW_DIRECTIONS_4 + ("up-left", "up-right", "down-left", "down-right")

ARROW_MODES = ("rotated", "character")
NUMBER_FORMATS = ("001", "1", "CP001", "CP1")
NUMBER_SUFFIXES = ("padded", "simple")

SIGN_KINDS = ("checkpoint", "start", "finish", "arrow", "icon")


@dataclass(frozen=True)
class SignDescriptor:
    """One image of the pack. Icon signs carry (category, id) instead of text."""
    kind: str
    filename: str
    text: Optional[str] = None
    icon: Optional[Tuple[str, str]] = None
    rotation: Optional[int] = None

    def __post_init__(self) -> None:
        if self.kind not in SIGN_KINDS:
            raise ValueError(f"Unknown sign kind {self.kind!r}")


SignList = List[SignDescriptor]


# ── Configurations ────────────────────────────────────────────────────────────

@dataclass
class PackConfig:
    include_checkpoints: bool = True
    checkpoint_start: Any = 1
    checkpoint_end: Any = 100
    checkpoint_prefix: str = "Checkpoint"

    include_start: bool = False
    start_text: str = "START"
    include_finish: bool = False
    finish_text: str = "FINISH"

    include_arrows: bool = False
    arrow_mode: str = "rotated"
    arrow_directions: str = "4"
    # explicit direction toggles; None means "all of the 4 or 8 set"
    arrows: Optional[Sequence[str]] = None

    include_icons: bool = False
    arrow_icons: List[str] = field(default_factory=list)
    race_icons: List[str] = field(default_factory=list)

    file_prefix: str = ""
    pack_name: str = "Trackmania-Signs"
    include_json: bool = False
    signpack_name: str = "Checkpoint Signpack"
    number_format: str = "001"
    file_naming: str = "Checkpoint"

    def selected_arrows(self) -> List[str]:
        if self.arrows is not None:
            chosen = set(self.arrows)
            return [d for d in ARROW_DIRECTIONS_8 if d in chosen]
        return list(ARROW_DIRECTIONS_8 if str(self.arrow_directions) == "8" else ARROW_DIRECTIONS_4)

    def metadata(self) -> Dict[str, Any]:
        return {
            "signpackName": self.signpack_name,
            "numberFormat": self.number_format,
            "fileNaming": self.file_naming,
            "numberRange": {"start": self.checkpoint_start, "end": self.checkpoint_end},
        }


@dataclass
class RangeConfig:
    start: Any = 1
    end: Any = 10
    number_format: str = "001"
    custom_prefix: str = ""
    number_suffix: str = "padded"

    file_prefix: str = ""
    pack_name: str = "Trackmania-Signs"
    include_json: bool = False
    signpack_name: str = "Checkpoint Signpack"
    file_naming: str = "Checkpoint"

    def metadata(self) -> Dict[str, Any]:
        return {
            "signpackName": self.signpack_name,
            "numberFormat": self.number_format,
            "fileNaming": self.file_naming,
            "numberRange": {"start": self.start, "end": self.end},
        }


# ── Enumeration ───────────────────────────────────────────────────────────────

def enumerate_pack(config: PackConfig) -> SignList:
    """Checkpoints, START, FINISH, arrows, then icons, in that order."""
    signs: SignList = []

    if config.include_checkpoints:
        for n in range(int(config.checkpoint_start), int(config.checkpoint_end) + 1):
            signs.append(SignDescriptor("checkpoint", f"cp-{n:03d}.png", text=f"{config.checkpoint_prefix} {n}"))

    if config.include_start:
        signs.append(SignDescriptor("start", "start.png", text=config.start_text))

    if config.include_finish:
        signs.append(SignDescriptor("finish", "finish.png", text=config.finish_text))

    if config.include_arrows:
        selected = set(config.selected_arrows())
        if config.arrow_mode == "character":
            for name, glyph in CHARACTER_ARROWS:
                if name in selected:
                    signs.append(SignDescriptor("arrow", f"arrow-{name}.png", text=glyph))
        else:
            for name, angle in ROTATED_ARROWS:
                if name in selected:
                    signs.append(SignDescriptor("arrow", f"arrow-{name}.png", text=ROTATED_GLYPH, rotation=angle))

    if config.include_icons:
        for icon_id in config.arrow_icons:
            signs.append(SignDescriptor("icon", f"icon-arrow-{icon_id}.png", icon=("arrows", icon_id)))
        for icon_id in config.race_icons:
            signs.append(SignDescriptor("icon", f"icon-race-{icon_id}.png", icon=("race", icon_id)))

    return signs


def enumerate_range(config: RangeConfig) -> SignList:
    return [
        SignDescriptor(
            "checkpoint",
            range_file_name(n, config.custom_prefix, config.number_suffix),
            text=format_number(n, config.number_format),
        )
        for n in range(int(config.start), int(config.end) + 1)
    ]


def format_number(number: int, fmt: str = "001") -> str:
    """Label text for a range sign: 001 / 1 / CP001 / CP1 (unknown → 001)."""
    if fmt == "1":
        return str(number)
    if fmt == "CP001":
        return f"CP{number:03d}"
    if fmt == "CP1":
        return f"CP{number}"
    return f"{number:03d}"


def range_file_name(number: int, prefix: str = "", suffix: str = "padded") -> str:
    """Range filename: cleaned prefix + padded or plain number + .png."""
    number_str = str(number) if suffix == "simple" else f"{number:03d}"
    clean = re.sub(r"[^a-zA-Z0-9\-_]", "", (prefix or "").strip())
    return f"{clean}{number_str}.png"


def archive_entry_name(filename: str, file_prefix: str = "") -> str:
    return f"{file_prefix}-{filename}" if file_prefix else filename
