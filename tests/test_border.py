from PIL import Image

from signpack.border import draw_border


def _border(make_settings, size=(512, 80), **fields):
    canvas = Image.new("RGBA", size, (0, 0, 0, 255))
    draw_border(canvas, size[0], size[1], make_settings(**fields))
    return canvas


def _lit(img, x, y) -> bool:
    return img.getpixel((x, y))[0] > 200


def _dark(img, x, y) -> bool:
    return img.getpixel((x, y))[0] < 50


def test_no_border_when_width_zero(make_settings):
    img = _border(make_settings, borderWidth=0, borderColor="#ffffff")
    assert img.getpixel((0, 40)) == (0, 0, 0, 255)


def test_solid_border_sits_inside_edge(make_settings):
    img = _border(make_settings, borderWidth=4, borderColor="#ffffff")
    assert _lit(img, 1, 40)
    assert _lit(img, 510, 40)
    assert _lit(img, 256, 1)
    assert _dark(img, 256, 40)
    assert _dark(img, 9, 40)


def test_border_width_scales_with_canvas(make_settings):
    img = _border(make_settings, size=(1024, 256), borderWidth=4, borderColor="#ffffff")
    # 4px at 512 wide is 8px at 1024 wide
    assert _lit(img, 6, 128)
    assert _dark(img, 13, 128)


def test_dashed_border_has_gaps(make_settings):
    img = _border(make_settings, borderWidth=4, borderStyle="dashed", borderColor="#ffffff")
    top = [img.getpixel((x, 2))[0] for x in range(20, 200)]
    assert max(top) > 200 and min(top) < 50


def test_dotted_border_has_gaps(make_settings):
    img = _border(make_settings, borderWidth=6, borderStyle="dotted", borderColor="#ffffff")
    top = [img.getpixel((x, 3))[0] for x in range(20, 200)]
    assert max(top) > 200 and min(top) < 50


def test_double_border_has_two_lines(make_settings):
    img = _border(make_settings, borderWidth=8, borderStyle="double", borderColor="#ffffff")
    assert _lit(img, 256, 2)      # outer line
    assert _dark(img, 256, 10)    # gap
    assert _lit(img, 256, 16)     # inner line, inset by twice the width
    assert _dark(img, 256, 40)


def test_double_border_with_corner_radius_strokes_both(make_settings):
    img = _border(make_settings, borderWidth=8, borderStyle="double", cornerRadius=10, borderColor="#ffffff")
    assert _lit(img, 256, 2)
    assert _lit(img, 256, 16)


def test_groove_uses_light_and_dark_bands(make_settings):
    img = _border(make_settings, borderWidth=8, borderStyle="groove", borderColor="#808080")
    outer = img.getpixel((256, 1))[0]
    inner = img.getpixel((256, 6))[0]
    assert outer > 128 > inner


def test_invalid_style_falls_back_to_solid(make_settings):
    img = _border(make_settings, borderWidth=4, borderStyle="wavy", borderColor="#ffffff")
    assert _lit(img, 1, 40)
    assert _dark(img, 256, 40)
