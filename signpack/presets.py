"""
presets.py — Named Settings presets kept in a single JSON file.

File layout (one fixed storage key, plain key-value blobs):

  {
    "tmSignpackPresets": {
      "Classic Racing": { "fontSize": 65, "fontFamily": "Impact", ... },
      ...
    }
  }

Loading a preset normalizes it, so presets written by older versions (legacy
effect booleans, missing fields) still produce a complete Settings.

Usage:
  store = PresetStore()
  store.save("My Style", settings)
  settings = store.load("My Style")
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .config import ERROR_MESSAGES, LIMITS, PRESET_FILE, PRESET_STORAGE_KEY
from .errors import StorageError, ValidationError
from .settings import Settings, normalize_settings
from .validate import validate_preset_name

logger = logging.getLogger(__name__)

# ── Built-in presets ──────────────────────────────────────────────────────────

DEFAULT_PRESETS: Dict[str, Dict[str, Any]] = {
    "Classic Racing": {
        "textPrefix": "Checkpoint", "fontSize": 65, "fontFamily": "Impact", "fontWeight": "700",
        "textColor": "#ffffff", "textTransform": "uppercase", "letterSpacing": 2,
        "backgroundType": "linear", "backgroundColor": "#2c3e50",
        "gradientColor1": "#e74c3c", "gradientColor2": "#c0392b", "gradientAngle": 45,
        "textShadow": True, "shadowColor": "#000000", "shadowBlur": 8, "shadowOffsetX": 3, "shadowOffsetY": 3,
        "glowColor": "#00ff00", "glowIntensity": 5,
        "borderWidth": 4, "borderColor": "#ffffff", "borderStyle": "solid", "cornerRadius": 0,
    },
    "Neon Cyber": {
        "textPrefix": "CP", "fontSize": 70, "fontFamily": "Orbitron", "fontWeight": "900",
        "textColor": "#00ffff", "textTransform": "uppercase", "letterSpacing": 3,
        "backgroundType": "solid", "backgroundColor": "#000000",
        "textGlow": True, "glowColor": "#00ffff", "glowIntensity": 15,
        "specialEffect": "neon", "effectIntensity": 8,
        "borderWidth": 2, "borderColor": "#00ffff", "borderStyle": "solid", "cornerRadius": 5,
    },
    "Professional Clean": {
        "textPrefix": "Checkpoint", "fontSize": 55, "fontFamily": "Inter", "fontWeight": "600",
        "textColor": "#2c3e50", "textTransform": "none",
        "backgroundType": "solid", "backgroundColor": "#ffffff",
        "textShadow": True, "shadowColor": "#bdc3c7", "shadowBlur": 2, "shadowOffsetX": 1, "shadowOffsetY": 1,
        "glowColor": "#00ff00", "glowIntensity": 5,
        "borderWidth": 2, "borderColor": "#95a5a6", "borderStyle": "solid", "cornerRadius": 8,
    },
    "Retro Gaming": {
        "textPrefix": "STAGE", "fontSize": 50, "fontFamily": "Press Start 2P", "fontWeight": "400",
        "textColor": "#ffff00", "textTransform": "uppercase", "letterSpacing": 1,
        "backgroundType": "linear", "backgroundColor": "#2c3e50",
        "gradientColor1": "#8e44ad", "gradientColor2": "#3498db", "gradientAngle": 90,
        "textShadow": True, "shadowColor": "#000000", "shadowBlur": 0, "shadowOffsetX": 3, "shadowOffsetY": 3,
        "textStroke": True, "strokeColor": "#2c3e50", "strokeWidth": 3,
        "glowColor": "#00ff00", "glowIntensity": 5,
        "borderWidth": 4, "borderColor": "#ffff00", "borderStyle": "solid", "cornerRadius": 0,
    },
    "Military Tactical": {
        "textPrefix": "CHECKPOINT", "fontSize": 60, "fontFamily": "Oswald", "fontWeight": "700",
        "textColor": "#ffffff", "textTransform": "uppercase", "letterSpacing": 2,
        "backgroundType": "pattern", "backgroundColor": "#2d5016",
        "patternType": "stripes", "patternColor": "#1a2e0a", "patternSize": 15,
        "textShadow": True, "shadowColor": "#000000", "shadowBlur": 6, "shadowOffsetX": 2, "shadowOffsetY": 2,
        "textStroke": True, "strokeColor": "#1a2e0a", "strokeWidth": 2,
        "glowColor": "#00ff00", "glowIntensity": 5,
        "borderWidth": 3, "borderColor": "#5a8a30", "borderStyle": "solid", "cornerRadius": 0,
    },
    "Elegant Gold": {
        "textPrefix": "Checkpoint", "fontSize": 65, "fontFamily": "Georgia", "fontWeight": "700",
        "textColor": "#2c3e50", "textTransform": "capitalize", "letterSpacing": 1,
        "backgroundType": "radial", "backgroundColor": "#f39c12",
        "gradientColor1": "#f1c40f", "gradientColor2": "#d68910",
        "textShadow": True, "shadowColor": "#d68910", "shadowBlur": 3, "shadowOffsetX": 2, "shadowOffsetY": 2,
        "glowColor": "#00ff00", "glowIntensity": 5,
        "specialEffect": "metallic",
        "borderWidth": 3, "borderColor": "#8b7355", "borderStyle": "groove", "cornerRadius": 10,
    },
    "Space Chrome": {
        "textPrefix": "SECTOR", "fontSize": 68, "fontFamily": "Exo 2", "fontWeight": "800",
        "textColor": "#ffffff", "textTransform": "uppercase", "letterSpacing": 3,
        "backgroundType": "noise", "backgroundColor": "#1a1a2e",
        "patternColor": "#16213e", "patternSize": 12,
        "textShadow": True, "shadowColor": "#000000", "shadowBlur": 5, "shadowOffsetX": 3, "shadowOffsetY": 3,
        "glowColor": "#00ff00", "glowIntensity": 5,
        "specialEffect": "chrome", "effectIntensity": 7,
        "borderWidth": 2, "borderColor": "#0f3460", "borderStyle": "solid", "cornerRadius": 5,
    },
    "Rainbow Party": {
        "textPrefix": "FUN", "fontSize": 75, "fontFamily": "Bungee", "fontWeight": "400",
        "textColor": "#ffffff", "textTransform": "uppercase", "letterSpacing": 4,
        "backgroundType": "linear", "backgroundColor": "#2c3e50",
        "gradientColor1": "#ff006e", "gradientColor2": "#8338ec", "gradientAngle": 135,
        "textShadow": True, "shadowColor": "#000000", "shadowBlur": 10, "shadowOffsetX": 3, "shadowOffsetY": 3,
        "glowColor": "#00ff00", "glowIntensity": 5,
        "specialEffect": "rainbow", "effectIntensity": 6,
        "borderWidth": 4, "borderColor": "#ffffff", "borderStyle": "solid", "cornerRadius": 15,
    },
    "Glitch Horror": {
        "textPrefix": "ERROR", "fontSize": 62, "fontFamily": "Creepster", "fontWeight": "400",
        "textColor": "#ff0000", "textTransform": "uppercase", "letterSpacing": 1,
        "backgroundType": "solid", "backgroundColor": "#000000",
        "glowColor": "#00ff00", "glowIntensity": 5,
        "specialEffect": "glitch", "effectIntensity": 8,
        "borderWidth": 2, "borderColor": "#ff0000", "borderStyle": "dashed", "cornerRadius": 0,
    },
    "Minimalist Modern": {
        "textPrefix": "Point", "fontSize": 58, "fontFamily": "Rajdhani", "fontWeight": "500",
        "textColor": "#34495e", "textTransform": "none", "letterSpacing": 1,
        "backgroundType": "solid", "backgroundColor": "#ecf0f1",
        "glowColor": "#00ff00", "glowIntensity": 5,
        "borderWidth": 1, "borderColor": "#bdc3c7", "borderStyle": "solid", "cornerRadius": 12,
    },
}


# ── Store ─────────────────────────────────────────────────────────────────────

class PresetStore:
    """JSON-file backed preset store. Every write rewrites the whole file."""

    def __init__(self, path: Union[str, Path, None] = None, seed_defaults: bool = True) -> None:
        self.path = Path(path).expanduser() if path else PRESET_FILE
        self.seed_defaults = seed_defaults
        self._presets: Optional[Dict[str, Dict[str, Any]]] = None

    # ── Reading ──────────────────────────────────────────────────────────────

    @property
    def presets(self) -> Dict[str, Dict[str, Any]]:
        if self._presets is None:
            self._presets = self._read()
            if not self._presets and self.seed_defaults:
                self._presets = {name: normalize_settings(raw).to_json_dict() for name, raw in DEFAULT_PRESETS.items()}
                logger.info(f"Seeded {len(self._presets)} default presets")
        return self._presets

    def _read(self) -> Dict[str, Dict[str, Any]]:
        if not self.path.exists():
            return {}
        try:
            doc = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except json.JSONDecodeError as e:
            raise StorageError(f"Preset store {self.path} is not valid JSON: {e}") from e
        presets = doc.get(PRESET_STORAGE_KEY, {}) if isinstance(doc, dict) else {}
        if not isinstance(presets, dict):
            raise StorageError(f"Preset store {self.path} has an unexpected layout")
        return presets

    def names(self) -> List[str]:
        return list(self.presets)

    def all(self) -> Dict[str, Settings]:
        return {name: normalize_settings(raw) for name, raw in self.presets.items()}

    def load(self, name: str) -> Settings:
        """
        Raises:
            KeyError: when no preset has that name.
        """
        if name not in self.presets:
            raise KeyError(f'Preset "{name}" not found')
        return normalize_settings(self.presets[name])

    # ── Writing ──────────────────────────────────────────────────────────────

    def save(self, name: str, settings: Settings) -> None:
        """
        Store *settings* under *name* (overwriting a preset of the same name).

        Raises:
            ValidationError: bad name or settings.
            StorageError: store nearly full or at the preset limit.
        """
        errors = validate_preset_name(name)
        if errors:
            raise ValidationError(errors, field="name")
        if not isinstance(settings, Settings):
            raise ValidationError(["Invalid preset data"])
        name = name.strip()

        used_mb = self.storage_used_mb()
        if used_mb > LIMITS["STORAGE_QUOTA_WARNING_MB"]:
            raise StorageError(
                f"Storage is nearly full ({used_mb:.2f}MB used). Consider deleting old presets."
            )
        if name not in self.presets and len(self.presets) >= LIMITS["MAX_PRESETS"]:
            raise StorageError(
                f"Maximum of {LIMITS['MAX_PRESETS']} presets reached. Delete a preset before saving a new one."
            )

        self.presets[name] = settings.to_json_dict()
        self._write()
        logger.info(f"Preset saved: {name}")

    def delete(self, name: str) -> bool:
        if name not in self.presets:
            return False
        del self.presets[name]
        self._write()
        logger.info(f"Preset deleted: {name}")
        return True

    def storage_used_mb(self) -> float:
        if not self.path.exists():
            return 0.0
        return self.path.stat().st_size / (1024 * 1024)

    def _write(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps({PRESET_STORAGE_KEY: self.presets}, indent=2, ensure_ascii=False)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=".presets-", suffix=".json.part")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(payload)
            os.replace(tmp_name, self.path)
        except OSError as e:
            Path(tmp_name).unlink(missing_ok=True)
            raise StorageError(f"{ERROR_MESSAGES['STORAGE_FULL']} ({e})") from e


# ── Settings files ────────────────────────────────────────────────────────────

def export_settings(settings: Settings, path: Union[str, Path]) -> Path:
    """Write *settings* as a standalone, indented JSON file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(settings.to_json_dict(), indent=2, ensure_ascii=False), encoding="utf-8")
    logger.info(f"Settings exported: {path}")
    return path


def import_settings(path: Union[str, Path]) -> Settings:
    """
    Read a settings file written by export_settings (or any partial JSON
    object of settings keys; a settings.json from an archive works too).

    Raises:
        ValidationError: when the file is not a JSON object.
    """
    try:
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.warning(f"Could not read settings file {path}: {e}")
        raise ValidationError([ERROR_MESSAGES["INVALID_PRESET_DATA"]]) from e
    if not isinstance(raw, dict):
        raise ValidationError([ERROR_MESSAGES["INVALID_PRESET_DATA"]])
    raw.pop("_metadata", None)
    return normalize_settings(raw)
