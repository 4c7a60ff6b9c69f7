from __future__ import annotations

import pytest
from PIL import Image

from signpack.fonts import FontResolver
from signpack.presets import PresetStore
from signpack.settings import Settings, normalize_settings


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def make_settings():
    def _make(**fields) -> Settings:
        return normalize_settings(fields)
    return _make


@pytest.fixture
def canvas() -> Image.Image:
    return Image.new("RGBA", (512, 80), (0, 0, 0, 0))


@pytest.fixture(scope="session")
def fonts() -> FontResolver:
    return FontResolver()


@pytest.fixture
def store(tmp_path) -> PresetStore:
    return PresetStore(tmp_path / "presets.json", seed_defaults=False)
