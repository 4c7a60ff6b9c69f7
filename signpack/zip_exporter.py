"""
zip_exporter.py — Bundle rendered signs into a ZIP archive.

The archive is assembled in memory:
  <filePrefix>-cp-001.png ...   — one PNG per sign, flat layout
  settings.json                 — optional, full Settings plus _metadata

and only written to disk once complete (temp file + rename), so an aborted
run never leaves a partial archive behind.
"""

from __future__ import annotations

import io
import json
import logging
import os
import tempfile
import zipfile
from pathlib import Path
from typing import Any, List

from .config import ZIP_COMPRESSION_LEVEL

logger = logging.getLogger(__name__)


class SignArchive:
    """In-memory DEFLATE archive of named entries."""

    def __init__(self, compression_level: int = ZIP_COMPRESSION_LEVEL) -> None:
        self._buffer = io.BytesIO()
        self._zip = zipfile.ZipFile(
            self._buffer, "w", zipfile.ZIP_DEFLATED, compresslevel=compression_level
        )
        self.entries: List[str] = []
        self._data: bytes = b""

    def add_png(self, name: str, data: bytes) -> None:
        self._add(name, data)

    def add_json(self, name: str, obj: Any) -> None:
        self._add(name, json.dumps(obj, indent=2, ensure_ascii=False).encode("utf-8"))

    def _add(self, name: str, data: bytes) -> None:
        if self._zip is None:
            raise ValueError("Archive already finalized")
        if name in self.entries:
            logger.warning(f"Duplicate archive entry {name}; keeping the latest")
        self._zip.writestr(name, data)
        self.entries.append(name)

    def finalize(self) -> bytes:
        """Close the archive and return its bytes. Safe to call twice."""
        if self._zip is not None:
            self._zip.close()
            self._zip = None
            self._data = self._buffer.getvalue()
        return self._data


def write_archive(data: bytes, output_dir: Path, name: str) -> Path:
    """
    Write archive bytes to output_dir/name atomically.

    Returns:
        Path of the written archive.
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    target = output_dir / name

    fd, tmp_name = tempfile.mkstemp(dir=output_dir, prefix=".signpack-", suffix=".zip.part")
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(data)
        os.replace(tmp_name, target)
    except OSError:
        Path(tmp_name).unlink(missing_ok=True)
        raise

    logger.info(f"ZIP created: {target.name} ({len(data) // 1024} KB)")
    return target
