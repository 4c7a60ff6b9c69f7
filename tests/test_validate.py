import pytest
from PIL import Image

from signpack.config import ERROR_MESSAGES
from signpack.errors import ValidationError
from signpack.signlist import PackConfig
from signpack.validate import (
    sanitize_zip_name,
    validate_color,
    validate_image_file,
    validate_pack_config,
    validate_preset_name,
    validate_range,
    validate_settings,
)


# ── Pack configuration ────────────────────────────────────────────────────────

def test_default_pack_is_valid():
    assert validate_pack_config(PackConfig()) == []


@pytest.mark.parametrize("start, end, message", [
    ("abc", 5, "• Checkpoint range: Start and end numbers must be valid numbers"),
    (0, 5, "• Checkpoint range: Start number must be at least 1"),
    (10, 5, "• Checkpoint range: End number must be greater than or equal to start number"),
    (1, 1000, "• Checkpoint range: End number cannot exceed 999"),
    (1, 501, "• Checkpoint range: Cannot generate more than 500 checkpoints (consider splitting into multiple packs)"),
])
def test_checkpoint_range_errors(start, end, message):
    assert validate_pack_config(PackConfig(checkpoint_start=start, checkpoint_end=end)) == [message]


def test_numeric_strings_are_accepted():
    assert validate_pack_config(PackConfig(checkpoint_start="3", checkpoint_end="12")) == []


def test_range_ignored_without_checkpoints():
    config = PackConfig(include_checkpoints=False, include_start=True, checkpoint_start="x")
    assert validate_pack_config(config) == []


def test_collects_every_problem():
    config = PackConfig(
        checkpoint_prefix="  ",
        include_start=True, start_text="",
        include_finish=True, finish_text="F" * 101,
        include_arrows=True, arrows=[],
        pack_name="",
        file_prefix="p" * 51,
    )
    assert validate_pack_config(config) == [
        "• Checkpoint prefix: Cannot be empty",
        "• START sign: Text cannot be empty",
        "• FINISH sign: Text maximum 100 characters",
        "• Arrows: At least one direction must be selected",
        "• Pack name: Cannot be empty",
        "• File prefix: Maximum 50 characters",
    ]


def test_no_sign_types():
    assert validate_pack_config(PackConfig(include_checkpoints=False)) == [ERROR_MESSAGES["NO_SIGN_TYPES"]]


def test_icons_without_selection_count_as_nothing():
    config = PackConfig(include_checkpoints=False, include_icons=True)
    assert validate_pack_config(config) == [ERROR_MESSAGES["NO_SIGN_TYPES"]]


# ── Numbered range ────────────────────────────────────────────────────────────

def test_valid_range():
    assert validate_range(1, 500) == []
    assert validate_range("5", "5") == []


@pytest.mark.parametrize("start, end, expected", [
    ("", 5, ["Start number is required"]),
    (None, None, ["Start number is required", "End number is required"]),
    ("x", 5, ["Start number must be a valid number"]),
    (0, 5, ["Start number must be at least 1"]),
    (1, 1000, ["End number must be at most 999"]),
    (9, 3, ["Start number cannot be greater than end number."]),
    (1, 600, ["Cannot generate more than 500 signs at once. Current range: 600 signs."]),
])
def test_range_errors(start, end, expected):
    assert validate_range(start, end) == expected


# ── Settings ──────────────────────────────────────────────────────────────────

def test_default_settings_are_valid(settings):
    assert validate_settings(settings) == []


def test_setting_bounds(make_settings):
    s = make_settings(fontSize=10, letterSpacing=99, cornerRadius=-1, noiseScale=0.01)
    assert validate_settings(s) == [
        "Font size must be at least 20",
        "Letter spacing must be at most 15",
        "Corner radius must be at least 0",
        "Noise scale must be at least 0.1",
    ]


def test_bad_colors_warn_unless_strict(make_settings, caplog):
    s = make_settings(textColor="red")
    assert validate_settings(s) == []
    assert "text_color" in caplog.text
    assert validate_settings(s, strict_colors=True) == [
        "text_color must be a valid hex color (e.g., #FF0000)",
    ]


def test_validate_color():
    assert validate_color("#a1b2c3") is None
    assert validate_color("", "Text color") == "Text color is required"
    assert validate_color("#12345", "Text color") == "Text color must be a valid hex color (e.g., #FF0000)"


# ── Presets and files ─────────────────────────────────────────────────────────

@pytest.mark.parametrize("name, ok", [
    ("My Style_2-b", True),
    ("", False),
    ("   ", False),
    ("x" * 51, False),
    ("bad/name", False),
])
def test_preset_names(name, ok):
    assert (validate_preset_name(name) == []) is ok


def test_image_file_accepts_png(tmp_path):
    path = tmp_path / "bg.png"
    Image.new("RGB", (20, 10), "red").save(path)
    img = validate_image_file(path)
    assert img.size == (20, 10)


def test_image_file_missing(tmp_path):
    with pytest.raises(ValidationError) as exc:
        validate_image_file(tmp_path / "nope.png")
    assert exc.value.errors == ["No file selected"]
    assert exc.value.field == "image"


def test_image_file_rejects_other_formats(tmp_path):
    gif = tmp_path / "bg.gif"
    Image.new("P", (4, 4)).save(gif)
    text = tmp_path / "bg.png"
    text.write_text("not an image")
    for path in (gif, text):
        with pytest.raises(ValidationError) as exc:
            validate_image_file(path)
        assert exc.value.errors == [ERROR_MESSAGES["INVALID_FILE_TYPE"]]


def test_image_file_rejects_huge_dimensions(tmp_path):
    path = tmp_path / "wide.png"
    Image.new("1", (4097, 1)).save(path)
    with pytest.raises(ValidationError) as exc:
        validate_image_file(path)
    assert "4096px" in exc.value.errors[0]


@pytest.mark.parametrize("name, expected", [
    ("My Pack_6x1.zip", "My Pack_6x1.zip"),
    ('a<b>c:d"e/f\\g|h?i*j', "a_b_c_d_e_f_g_h_i_j.zip"),
    ("", "checkpoint_signpack.zip"),
    ("pack.ZIP", "pack.ZIP"),
])
def test_sanitize_zip_name(name, expected):
    assert sanitize_zip_name(name) == expected
