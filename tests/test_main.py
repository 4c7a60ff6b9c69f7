import io
import zipfile

import pytest
from PIL import Image

from signpack.errors import ValidationError
from signpack.main import main, parse_args, resolve_settings
from signpack.presets import PresetStore
from signpack.sharing import encode_settings, share_link


@pytest.fixture
def presets_file(tmp_path):
    return str(tmp_path / "presets.json")


def test_overrides_apply_on_top_of_preset(presets_file):
    args = parse_args([
        "preview", "--preset", "Neon Cyber", "--presets-file", presets_file,
        "--set", "fontSize=72", "--set", "textColor=#ff00ff", "--format", "2x1", "--seed", "7",
    ])
    s = resolve_settings(args)
    assert s.special_effect == "neon"
    assert (s.font_size, s.text_color, s.sign_format, s.noise_seed) == (72, "#ff00ff", "2x1", 7)


def test_bad_override_is_a_validation_error(presets_file):
    args = parse_args(["preview", "--presets-file", presets_file, "--set", "fontSize"])
    with pytest.raises(ValidationError):
        resolve_settings(args)


@pytest.mark.parametrize("make_share", [
    lambda data: encode_settings(data),
    lambda data: share_link(data, base_url="https://example.test/?x=1"),
])
def test_settings_from_share(presets_file, make_share):
    args = parse_args(["preview", "--presets-file", presets_file, "--share", make_share({"fontSize": 33})])
    assert resolve_settings(args).font_size == 33


def test_range_command_writes_archive(tmp_path, presets_file):
    out = tmp_path / "out"
    code = main(["range", "--from", "1", "--to", "2", "--presets-file", presets_file, "--output", str(out), "--yes"])
    assert code == 0
    with zipfile.ZipFile(out / "Trackmania-Signs_6x1.zip") as zf:
        assert zf.namelist() == ["001.png", "002.png"]


def test_generate_command_with_json(tmp_path, presets_file):
    out = tmp_path / "out"
    code = main([
        "generate", "--end", "2", "--start-sign", "--arrow", "up", "--race-icon", "trophy",
        "--include-json", "--pack-name", "Test Pack", "--format", "4x1",
        "--presets-file", presets_file, "--output", str(out), "--yes",
    ])
    assert code == 0
    with zipfile.ZipFile(out / "Test-Pack_4x1.zip") as zf:
        assert zf.namelist() == [
            "cp-001.png", "cp-002.png", "start.png", "arrow-up.png", "icon-race-trophy.png", "settings.json",
        ]
        assert Image.open(io.BytesIO(zf.read("start.png"))).size == (1024, 256)


def test_generate_nothing_exits_with_validation_error(tmp_path, presets_file, capsys):
    code = main(["generate", "--no-checkpoints", "--presets-file", presets_file, "--output", str(tmp_path)])
    assert code == 2
    assert "Please select at least one sign type" in capsys.readouterr().out
    assert list(tmp_path.glob("*.zip")) == []


def test_preview_sheet(tmp_path, presets_file):
    out = tmp_path / "preview.png"
    assert main(["preview", "--presets-file", presets_file, "--out", str(out)]) == 0
    assert Image.open(out).width == 512 + 32


def test_preview_single_sign(tmp_path, presets_file):
    out = tmp_path / "one.png"
    assert main(["preview", "--text", "GO", "--format", "1x1", "--presets-file", presets_file, "--out", str(out)]) == 0
    assert Image.open(out).size == (1024, 1024)


def test_preset_lifecycle(tmp_path, presets_file):
    assert main(["presets", "save", "Mine", "--set", "fontSize=99", "--presets-file", presets_file]) == 0
    assert PresetStore(presets_file).load("Mine").font_size == 99

    exported = tmp_path / "mine.json"
    assert main(["presets", "export", "Mine", "--file", str(exported), "--presets-file", presets_file]) == 0
    assert main(["presets", "import", "Copy", "--file", str(exported), "--presets-file", presets_file]) == 0
    assert PresetStore(presets_file).load("Copy").font_size == 99

    assert main(["presets", "delete", "Mine", "--presets-file", presets_file]) == 0
    assert main(["presets", "delete", "Mine", "--presets-file", presets_file]) == 1


def test_missing_preset(presets_file, capsys):
    assert main(["presets", "show", "Nope", "--presets-file", presets_file]) == 1
    assert 'Preset "Nope" not found' in capsys.readouterr().out


def test_share_round_trip(presets_file, capsys):
    assert main(["share", "--set", "fontSize=61", "--presets-file", presets_file]) == 0
    link = capsys.readouterr().out.strip()
    assert "?preset=" in link
    assert main(["share", "--decode", link]) == 0
    assert '"fontSize": 61' in capsys.readouterr().out


def test_icons_listing(capsys):
    assert main(["icons"]) == 0
    out = capsys.readouterr().out
    assert "checkered-flag" in out and "double-arrow-up" in out


def test_fonts_listing(capsys):
    assert main(["fonts"]) == 0
    out = capsys.readouterr().out
    assert "Orbitron" in out and "Fira Code" in out
