"""
batch.py — Renders a whole sign list and packages it as a ZIP archive.

One pipeline, two enumeration strategies:

  generate_pack(PackConfig, settings)    checkpoints + START/FINISH + arrows + icons
  generate_range(RangeConfig, settings)  single numbered range

Pipeline steps:
  1. Validate input (every message at once) and the sign count
  2. Confirm very large batches (> 200 signs)
  3. Preload fonts, allocate one offscreen canvas at the format's size
  4. Render → encode PNG → add to archive, one sign at a time
     (a sign that fails to encode is logged and skipped)
  5. Optional settings.json with a _metadata block
  6. DEFLATE the archive and return its bytes

Progress is reported through a callback; a CancelToken is checked between
signs. BatchRunner moves the synchronous loop into an executor so an event
loop stays responsive.
"""

from __future__ import annotations

import asyncio
import functools
import io
import logging
import math
import re
import threading
import time
import zipfile
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

import numpy as np
from PIL import Image, features

from .compositor import render_sign
from .config import APP_NAME, ERROR_MESSAGES, LIMITS, SETTINGS_JSON_NAME, ZIP_COMPRESSION_LEVEL
from .errors import GenerationCancelled, SignEncodingError, SignpackEnvironmentError, ValidationError
from .fonts import FontResolver, default_resolver
from .settings import Settings
from .signlist import (
    PackConfig,
    RangeConfig,
    SignList,
    archive_entry_name,
    enumerate_pack,
    enumerate_range,
)
from .validate import sanitize_zip_name, validate_pack_config, validate_range, validate_settings
from .zip_exporter import SignArchive, write_archive

logger = logging.getLogger(__name__)


# ── Progress & cancellation ───────────────────────────────────────────────────

@dataclass(frozen=True)
class Progress:
    """One progress report. percent runs 0–90 while rendering, 95, then 100."""
    index: int
    total: int
    percent: float
    message: str
    kind: str = ""
    filename: str = ""


ProgressCallback = Callable[[Progress], None]   # sync, called from the worker thread
ConfirmCallback = Callable[[int], bool]


class CancelToken:
    """Cooperative cancellation flag shared between the caller and the batch loop."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


# ── Result model ──────────────────────────────────────────────────────────────

@dataclass
class BatchResult:
    """Output from one batch run."""
    data: bytes
    archive_name: str
    entries: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    sign_count: int = 0
    elapsed_seconds: float = 0.0

    @property
    def size_kb(self) -> int:
        return len(self.data) // 1024

    def write(self, output_dir: Path) -> Path:
        return write_archive(self.data, output_dir, self.archive_name)


# ── Environment ───────────────────────────────────────────────────────────────

def check_environment() -> None:
    """
    Make sure the archive builder and the drawing backend are usable.

    Raises:
        SignpackEnvironmentError: before any rendering work is done.
    """
    if getattr(zipfile, "zlib", None) is None:
        raise SignpackEnvironmentError(ERROR_MESSAGES["ZIP_NOT_AVAILABLE"])
    if not features.check("freetype2"):
        raise SignpackEnvironmentError(ERROR_MESSAGES["DRAWING_NOT_AVAILABLE"])


# ── Generator ─────────────────────────────────────────────────────────────────

class BatchGenerator:
    """Renders sign lists with one shared canvas and packs them into a ZIP."""

    def __init__(
        self,
        settings: Settings,
        image: Optional[Image.Image] = None,
        on_progress: Optional[ProgressCallback] = None,
        cancel: Optional[CancelToken] = None,
        confirm_large: Optional[ConfirmCallback] = None,
        fonts: Optional[FontResolver] = None,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        self.settings = settings
        self.image = image
        self.on_progress = on_progress
        self.cancel = cancel
        self.confirm_large = confirm_large
        self.fonts = fonts or default_resolver()
        self.rng = rng

    def generate(
        self,
        sign_list: SignList,
        *,
        file_prefix: str = "",
        metadata: Optional[Dict[str, Any]] = None,
        include_json: bool = False,
        archive_name: Optional[str] = None,
    ) -> BatchResult:
        start = time.time()
        total = len(sign_list)

        errors = validate_settings(self.settings)
        if errors:
            raise ValidationError(errors)
        if total == 0:
            raise ValidationError([ERROR_MESSAGES["NO_SIGN_TYPES"]])
        if total > LIMITS["WARNING_BULK_THRESHOLD"] and self.confirm_large is not None:
            if not self.confirm_large(total):
                raise GenerationCancelled(f"Generation of {total} signs declined")

        check_environment()
        self._progress(Progress(0, total, 0.0, "Initializing signpack generation..."))

        width, height = self.settings.dimensions
        self.fonts.preload(self.settings, [width])
        canvas = Image.new("RGBA", (width, height), (0, 0, 0, 0))
        archive = SignArchive(ZIP_COMPRESSION_LEVEL)
        skipped: List[str] = []

        for i, sign in enumerate(sign_list, start=1):
            if self.cancel is not None and self.cancel.cancelled:
                raise GenerationCancelled(f"Cancelled after {i - 1}/{total} signs")

            self._progress(Progress(
                i, total, i / total * 90,
                f"Generating {sign.kind} ({i}/{total})...",
                kind=sign.kind, filename=sign.filename,
            ))

            render_sign(sign, self.settings, image=self.image, fonts=self.fonts, rng=self.rng, canvas=canvas)
            try:
                data = encode_png(canvas, sign.filename)
            except SignEncodingError as e:
                logger.warning(f"Error generating sign {sign.filename}: {e}")
                skipped.append(sign.filename)
                continue
            archive.add_png(archive_entry_name(sign.filename, file_prefix), data)

        if include_json:
            archive.add_json(SETTINGS_JSON_NAME, settings_document(self.settings, metadata or {}))

        self._progress(Progress(total, total, 95.0, "Creating ZIP file..."))
        data = archive.finalize()
        self._progress(Progress(total, total, 100.0, ""))

        elapsed = time.time() - start
        logger.info(f"Generated {total - len(skipped)}/{total} signs in {elapsed:.1f}s")
        return BatchResult(
            data=data,
            archive_name=archive_name or archive_file_name(None, self.settings.sign_format),
            entries=list(archive.entries),
            skipped=skipped,
            sign_count=total - len(skipped),
            elapsed_seconds=elapsed,
        )

    def _progress(self, progress: Progress) -> None:
        if self.on_progress is None:
            return
        try:
            self.on_progress(progress)
        except Exception as e:
            # a broken progress display must not abort the batch
            logger.warning(f"Progress callback failed: {e}")


def encode_png(canvas: Image.Image, filename: str = "") -> bytes:
    buf = io.BytesIO()
    try:
        canvas.save(buf, format="PNG")
    except (OSError, ValueError) as e:
        raise SignEncodingError(filename, str(e)) from e
    data = buf.getvalue()
    if not data:
        raise SignEncodingError(filename, "empty PNG")
    return data


def settings_document(settings: Settings, metadata: Dict[str, Any]) -> Dict[str, Any]:
    """Full Settings plus a _metadata block, as written to settings.json."""
    stamp = datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
    return {
        **settings.to_json_dict(),
        "_metadata": {"generatedBy": APP_NAME, "timestamp": stamp, **metadata},
    }


# ── Strategies ────────────────────────────────────────────────────────────────

def generate_pack(config: PackConfig, settings: Settings, **kwargs: Any) -> BatchResult:
    """
    Validate *config*, enumerate its signs and run the batch.

    Keyword args are passed to BatchGenerator (image, on_progress, cancel,
    confirm_large, fonts, rng).

    Raises:
        ValidationError: listing every configuration problem.
    """
    errors = validate_pack_config(config)
    if errors:
        raise ValidationError(errors)

    signs = enumerate_pack(config)
    return BatchGenerator(settings, **kwargs).generate(
        signs,
        file_prefix=(config.file_prefix or "").strip(),
        metadata=config.metadata(),
        include_json=config.include_json,
        archive_name=archive_file_name(config.pack_name, settings.sign_format),
    )


def generate_range(config: RangeConfig, settings: Settings, **kwargs: Any) -> BatchResult:
    errors = validate_range(config.start, config.end)
    if errors:
        raise ValidationError(errors)

    signs = enumerate_range(config)
    return BatchGenerator(settings, **kwargs).generate(
        signs,
        file_prefix=(config.file_prefix or "").strip(),
        metadata=config.metadata(),
        include_json=config.include_json,
        archive_name=archive_file_name(config.pack_name, settings.sign_format),
    )


# ── Async runner ──────────────────────────────────────────────────────────────

class BatchRunner:
    """Runs a batch in the default executor so the event loop stays responsive."""

    def __init__(self, settings: Settings, **kwargs: Any) -> None:
        self.settings = settings
        self.kwargs = kwargs

    async def run(self, config: Union[PackConfig, RangeConfig]) -> BatchResult:
        strategy = generate_range if isinstance(config, RangeConfig) else generate_pack
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            None, functools.partial(strategy, config, self.settings, **self.kwargs)
        )


# ── Naming & estimates ────────────────────────────────────────────────────────

def archive_file_name(pack_name: Optional[str], sign_format: str) -> str:
    """"My Pack" + "6x1" → "My-Pack_6x1.zip"."""
    base = re.sub(r"\s+", "-", (pack_name or "").strip() or "Trackmania-Signs")
    return sanitize_zip_name(f"{base}_{sign_format}.zip")


def format_bytes(num_bytes: int, decimals: int = 2) -> str:
    if num_bytes <= 0:
        return "0 Bytes"
    units = ["Bytes", "KB", "MB", "GB"]
    i = min(len(units) - 1, int(math.floor(math.log(num_bytes, 1024))))
    value = round(num_bytes / 1024 ** i, max(0, decimals))
    return f"{value:g} {units[i]}"


def estimate_signpack_size(count: int) -> str:
    """Rough archive size at ~25 KB per sign."""
    return format_bytes(count * 25 * 1024)


def estimate_generation_time(count: int) -> str:
    """Rough wall time at ~300 ms per sign: "~45s" or "~2m 30s"."""
    seconds = math.ceil(count * 300 / 1000)
    if seconds < 60:
        return f"~{seconds}s"
    return f"~{seconds // 60}m {seconds % 60}s"
