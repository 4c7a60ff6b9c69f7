import logging

from signpack.fonts import FontResolver, css_font, font_stack, is_bold, scaled_font_size


def test_font_stacks():
    assert font_stack("Orbitron") == ["Orbitron", "Arial Black", "Arial", "sans-serif"]
    assert font_stack("Lobster") == ["Lobster", "Arial", "sans-serif"]


def test_css_font(make_settings):
    s = make_settings(fontFamily="Orbitron", fontWeight="700", fontSize=48)
    assert css_font(s, 512) == '700 48px "Orbitron", "Arial Black", "Arial", sans-serif'
    assert css_font(s, 1024).startswith("700 96px ")


def test_scaled_font_size():
    assert scaled_font_size(48, 512) == 48
    assert scaled_font_size(65, 1024) == 130
    assert scaled_font_size(1, 10) == 1


def test_is_bold():
    assert is_bold("700") and is_bold("600") and is_bold("bold")
    assert not is_bold("400") and not is_bold("normal")


def test_user_font_dirs_are_indexed(tmp_path):
    (tmp_path / "sub").mkdir()
    bold = tmp_path / "sub" / "Orbitron-Bold.ttf"
    regular = tmp_path / "Orbitron-Regular.otf"
    bold.write_bytes(b"")
    regular.write_bytes(b"")
    (tmp_path / "notes.txt").write_text("not a font")

    fonts = FontResolver([tmp_path])
    assert fonts.find_file("Orbitron", bold=True) == bold
    assert fonts.find_file("Orbitron", bold=False) == regular
    assert fonts.find_file("Definitely Not Installed", bold=False) is None


def test_unreadable_font_falls_through_the_stack(tmp_path, caplog):
    (tmp_path / "Orbitron-Bold.ttf").write_bytes(b"garbage")
    fonts = FontResolver([tmp_path])
    with caplog.at_level(logging.WARNING, logger="signpack.fonts"):
        font = fonts.resolve("Orbitron", "700", 40)
    assert font.getlength("CP") > 0
    assert "Could not open font" in caplog.text


def test_resolve_is_cached(settings):
    fonts = FontResolver([])
    assert fonts.for_settings(settings, 512) is fonts.resolve("Orbitron", "700", 48)
    assert len(fonts.preload(settings, [512, 1024])) == 2
