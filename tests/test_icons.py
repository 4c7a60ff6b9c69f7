import logging

import numpy as np
import pytest
from PIL import Image

from signpack.icons import ICON_CATEGORIES, get_icon, icon_list, icon_mask, icon_preview, render_icon
from signpack.painter import Shadow


def test_catalog_sizes():
    assert ICON_CATEGORIES == ("arrows", "race")
    assert len(icon_list("arrows")) == 14
    assert len(icon_list("race")) == 10
    assert icon_list("weather") == []


def test_icon_list_keeps_catalog_order():
    ids = [icon_id for icon_id, _ in icon_list("race")]
    assert ids[0] == "checkered-flag"
    assert "trophy" in ids and "medal" in ids


def test_get_icon():
    icon = get_icon("race", "bolt")
    assert icon.name == "Lightning Bolt"
    assert (icon.width, icon.height) == (24, 24)
    assert get_icon("race", "nope") is None
    assert get_icon("nope", "bolt") is None


def test_every_icon_path_renders():
    for category in ICON_CATEGORIES:
        for icon_id, _ in icon_list(category):
            mask = icon_mask(get_icon(category, icon_id), (48, 48), 24, 24, 48)
            assert np.asarray(mask).max() == 255, f"{category}/{icon_id} drew nothing"


def test_mask_fills_inside_and_leaves_outside():
    mask = icon_mask(get_icon("race", "bolt"), (96, 96), 48, 48, 96)
    assert mask.getpixel((48, 48)) == 255
    assert mask.getpixel((4, 4)) == 0


def test_separate_subpaths_are_all_filled():
    # fast-forward is two triangles
    mask = icon_mask(get_icon("arrows", "fast-forward"), (96, 96), 48, 48, 96)
    assert mask.getpixel((24, 48)) == 255
    assert mask.getpixel((60, 48)) == 255
    assert mask.getpixel((48, 68)) == 0


def test_mask_is_clipped_to_canvas():
    mask = icon_mask(get_icon("race", "star"), (40, 40), 0, 0, 40)
    assert mask.size == (40, 40)
    assert np.asarray(mask).max() > 0
    assert icon_mask(get_icon("race", "star"), (40, 40), 500, 500, 40).getbbox() is None


def test_render_icon_paints_in_color():
    canvas = Image.new("RGBA", (96, 96), (0, 0, 0, 0))
    assert render_icon(canvas, "race", "bolt", 48, 48, 96, "#ff8000")
    assert canvas.getpixel((48, 48)) == (255, 128, 0, 255)


def test_unknown_icon_draws_nothing_and_warns(caplog):
    canvas = Image.new("RGBA", (96, 96), (0, 0, 0, 0))
    with caplog.at_level(logging.WARNING, logger="signpack.icons"):
        assert render_icon(canvas, "race", "unicorn", 48, 48, 96) is False
    assert canvas.getbbox() is None
    assert "race/unicorn" in caplog.text


def test_glow_spills_outside_the_icon():
    plain = Image.new("RGBA", (96, 96), (0, 0, 0, 0))
    glowing = Image.new("RGBA", (96, 96), (0, 0, 0, 0))
    render_icon(plain, "race", "bolt", 48, 48, 48)
    render_icon(glowing, "race", "bolt", 48, 48, 48, glow=Shadow("#00ffff", blur=10))
    l, t, r, b = plain.getbbox()
    assert glowing.getpixel((l - 3, 48))[3] > 0
    assert plain.getpixel((l - 3, 48))[3] == 0


@pytest.mark.parametrize("size", [24, 48, 64])
def test_icon_preview(size):
    thumb = icon_preview("arrows", "arrow-up", size=size)
    assert thumb.size == (size, size)
    l, t, r, b = thumb.getbbox()
    # 80% of the side, centred
    assert l >= size * 0.1 - 1 and r <= size * 0.9 + 1
