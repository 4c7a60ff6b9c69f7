"""
errors.py — Error kinds raised by the signpack pipeline.

  ValidationError           bad user input, carries every message at once
  SignpackEnvironmentError  archive builder / drawing backend unavailable
  SignEncodingError         one sign failed to encode (recovered by the batch loop)
  StorageError              preset store full or unwritable
  GenerationCancelled       user declined or cancelled a running batch
"""

from __future__ import annotations

from typing import Iterable, List, Optional


class SignpackError(Exception):
    """Base class for every error the generator raises on purpose."""


class ValidationError(SignpackError):
    def __init__(self, errors: Iterable[str], field: Optional[str] = None) -> None:
        self.errors: List[str] = list(errors)
        self.field = field
        super().__init__("\n".join(self.errors) or "Invalid input")


class SignpackEnvironmentError(SignpackError):
    pass


class SignEncodingError(SignpackError):
    def __init__(self, filename: str, reason: str) -> None:
        self.filename = filename
        super().__init__(f"Failed to generate image for {filename}: {reason}")


class StorageError(SignpackError):
    pass


class GenerationCancelled(SignpackError):
    pass
