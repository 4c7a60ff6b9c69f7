import pytest
from PIL import Image

from signpack.compositor import (
    CAPTION_H,
    SHEET_GAP,
    SHEET_MARGIN,
    draw_icon_sign,
    preview_descriptors,
    render_preview_sheet,
    render_sign,
)
from signpack.signlist import ROTATED_GLYPH, SignDescriptor

CP = SignDescriptor("checkpoint", "cp-001.png", text="Checkpoint 1")


@pytest.mark.parametrize("fmt, size", [
    ("6x1", (512, 80)),
    ("1x1", (1024, 1024)),
    ("2x1", (1024, 512)),
    ("4x1", (1024, 256)),
    ("bogus", (512, 80)),
])
def test_render_sign_uses_format_size(make_settings, fonts, fmt, size):
    img = render_sign(CP, make_settings(signFormat=fmt), fonts=fonts)
    assert img.size == size
    assert img.mode == "RGBA"


def test_canvas_is_reused_when_size_matches(settings, fonts):
    canvas = Image.new("RGBA", (512, 80))
    assert render_sign(CP, settings, fonts=fonts, canvas=canvas) is canvas
    wrong = Image.new("RGBA", (100, 100))
    assert render_sign(CP, settings, fonts=fonts, canvas=wrong) is not wrong


def test_reused_canvas_is_cleared_between_signs(make_settings, fonts):
    canvas = Image.new("RGBA", (512, 80), (255, 0, 0, 255))
    render_sign(CP, make_settings(cornerRadius=20), fonts=fonts, canvas=canvas)
    assert canvas.getpixel((0, 0))[3] == 0


def test_background_and_label(make_settings, fonts):
    img = render_sign(CP, make_settings(backgroundColor="#102030", textColor="#ffffff"), fonts=fonts)
    assert img.getpixel((3, 3)) == (16, 32, 48, 255)
    assert max(p[0] for p in img.getdata()) == 255


def test_corner_radius_clips_whole_sign(make_settings, fonts):
    img = render_sign(CP, make_settings(cornerRadius=20, borderWidth=4), fonts=fonts)
    assert img.getpixel((0, 0))[3] == 0
    assert img.getpixel((511, 79))[3] == 0
    assert img.getpixel((256, 3))[3] == 255


def test_rotated_arrow_differs_from_upright(settings, fonts):
    up = render_sign(SignDescriptor("arrow", "arrow-up.png", text=ROTATED_GLYPH, rotation=0), settings, fonts=fonts)
    right = render_sign(SignDescriptor("arrow", "arrow-right.png", text=ROTATED_GLYPH, rotation=90), settings, fonts=fonts)
    assert list(up.getdata()) != list(right.getdata())


def test_icon_sign_centres_icon_in_text_color(make_settings):
    s = make_settings(signFormat="1x1", textColor="#ff0000", backgroundColor="#000000")
    img = render_sign(SignDescriptor("icon", "icon-race-bolt.png", icon=("race", "bolt")), s)
    assert img.getpixel((512, 512)) == (255, 0, 0, 255)
    assert img.getpixel((20, 20)) == (0, 0, 0, 255)


@pytest.mark.parametrize("fields", [{"textGlow": True}, {"specialEffect": "neon"}])
def test_glowing_icon_uses_glow_color(make_settings, fields):
    s = make_settings(signFormat="1x1", textColor="#ff0000", glowColor="#00ff00", **fields)
    canvas = Image.new("RGBA", (1024, 1024))
    assert draw_icon_sign(canvas, 1024, 1024, "race", "bolt", s)
    assert canvas.getpixel((512, 512)) == (0, 255, 0, 255)


def test_unknown_icon_keeps_background(make_settings):
    s = make_settings(backgroundColor="#202020")
    canvas = Image.new("RGBA", (512, 80))
    assert draw_icon_sign(canvas, 512, 80, "race", "missing", s) is False
    assert canvas.getpixel((256, 40)) == (32, 32, 32, 255)


def test_preview_descriptors_default_arrow_is_rotated():
    captions = preview_descriptors()
    assert [c for c, _ in captions] == ["Checkpoint", "Start", "Finish", "Arrow"]
    assert captions[0][1].text == "Checkpoint 1"
    arrow = captions[3][1]
    assert (arrow.text, arrow.rotation) == (ROTATED_GLYPH, 90)


def test_preview_descriptors_character_and_icon_arrows():
    assert preview_descriptors(arrow_mode="character")[3][1].text == "→"
    icon = preview_descriptors(icon=("arrows", "arrow-up"))[3][1]
    assert icon.icon == ("arrows", "arrow-up") and icon.text is None


def test_preview_descriptors_fall_back_on_empty_text():
    captions = preview_descriptors(checkpoint_prefix="", start_text="", finish_text="")
    assert [d.text for _, d in captions[:3]] == ["Checkpoint 1", "START", "FINISH"]


def test_preview_sheet_layout(settings, fonts):
    sheet = render_preview_sheet(settings, fonts=fonts)
    assert sheet.size == (512 + 2 * SHEET_MARGIN, 2 * SHEET_MARGIN + 4 * (CAPTION_H + 80) + 3 * SHEET_GAP)


def test_preview_sheet_scales_wide_signs(make_settings, fonts):
    sheet = render_preview_sheet(make_settings(signFormat="2x1"), fonts=fonts, max_width=256)
    cell_h = 128
    assert sheet.size == (256 + 2 * SHEET_MARGIN, 2 * SHEET_MARGIN + 4 * (CAPTION_H + cell_h) + 3 * SHEET_GAP)
