import json

import pytest

from signpack.config import LIMITS, PRESET_STORAGE_KEY
from signpack.errors import StorageError, ValidationError
from signpack.presets import DEFAULT_PRESETS, PresetStore, export_settings, import_settings


def test_empty_store(store):
    assert store.names() == []
    assert store.storage_used_mb() == 0.0


def test_save_and_load(store, make_settings):
    s = make_settings(fontSize=90, textColor="#123456")
    store.save("  My Style ", s)
    assert store.names() == ["My Style"]
    assert store.load("My Style") == s

    doc = json.loads(store.path.read_text(encoding="utf-8"))
    assert doc[PRESET_STORAGE_KEY]["My Style"]["fontSize"] == 90

    reopened = PresetStore(store.path, seed_defaults=False)
    assert reopened.load("My Style") == s


def test_write_leaves_no_temp_files(store, settings):
    store.save("One", settings)
    assert [p.name for p in store.path.parent.iterdir()] == ["presets.json"]


def test_load_missing_raises_key_error(store):
    with pytest.raises(KeyError):
        store.load("ghost")


def test_invalid_name_rejected(store, settings):
    with pytest.raises(ValidationError) as exc:
        store.save("no/slashes", settings)
    assert exc.value.field == "name"
    assert not store.path.exists()


def test_invalid_settings_rejected(store):
    with pytest.raises(ValidationError, match="Invalid preset data"):
        store.save("Raw", {"fontSize": 40})


def test_preset_limit(store, settings, monkeypatch):
    monkeypatch.setitem(LIMITS, "MAX_PRESETS", 2)
    store.save("A", settings)
    store.save("B", settings)
    with pytest.raises(StorageError, match="Maximum of 2 presets"):
        store.save("C", settings)
    # overwriting an existing preset is still allowed
    store.save("B", settings)


def test_storage_nearly_full(store, settings, monkeypatch):
    store.save("A", settings)
    monkeypatch.setitem(LIMITS, "STORAGE_QUOTA_WARNING_MB", 0)
    with pytest.raises(StorageError, match=r"Storage is nearly full \(\d+\.\d\dMB used\)"):
        store.save("B", settings)


def test_delete(store, settings):
    store.save("A", settings)
    assert store.delete("A") is True
    assert store.delete("A") is False
    assert PresetStore(store.path, seed_defaults=False).names() == []


def test_defaults_are_seeded_without_writing(tmp_path):
    store = PresetStore(tmp_path / "presets.json")
    assert store.names() == list(DEFAULT_PRESETS)
    assert len(store.names()) == 10
    assert store.load("Neon Cyber").special_effect == "neon"
    assert store.load("Elegant Gold").special_effect == "metallic"
    assert not store.path.exists()


def test_legacy_presets_are_normalized(tmp_path):
    path = tmp_path / "presets.json"
    path.write_text(json.dumps({PRESET_STORAGE_KEY: {"Old": {"fontSize": 50, "neon": True, "pixel": True}}}))
    s = PresetStore(path).load("Old")
    assert s.font_size == 50
    assert s.special_effect == "neon"
    assert s.font_family == "Orbitron"


def test_corrupt_store(tmp_path):
    path = tmp_path / "presets.json"
    path.write_text("{not json")
    with pytest.raises(StorageError):
        PresetStore(path).names()

    path.write_text(json.dumps({PRESET_STORAGE_KEY: ["a"]}))
    with pytest.raises(StorageError):
        PresetStore(path).names()


def test_export_import(tmp_path, make_settings):
    s = make_settings(specialEffect="glitch", borderWidth=3)
    path = export_settings(s, tmp_path / "out" / "style.json")
    assert import_settings(path) == s


def test_import_archive_settings_json(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"fontSize": 66, "_metadata": {"generatedBy": "x"}}))
    assert import_settings(path).font_size == 66


@pytest.mark.parametrize("content", ["[1, 2]", "nope", None])
def test_import_rejects_bad_files(tmp_path, content):
    path = tmp_path / "settings.json"
    if content is not None:
        path.write_text(content)
    with pytest.raises(ValidationError):
        import_settings(path)
