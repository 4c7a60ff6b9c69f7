import base64

from signpack.settings import Settings, normalize_settings
from signpack.sharing import SHARE_PARAM, decode_settings, encode_settings, settings_from_link, share_link


def test_encoding_is_base64_of_percent_escaped_json():
    encoded = encode_settings({"a": 1, "b": "x y"})
    assert base64.b64decode(encoded).decode("ascii") == "%7B%22a%22%3A1%2C%22b%22%3A%22x%20y%22%7D"


def test_settings_round_trip(make_settings):
    s = make_settings(textPrefix="Pointé", fontSize=72, specialEffect="chrome")
    decoded = decode_settings(encode_settings(s))
    assert normalize_settings(decoded) == s


def test_decode_rejects_garbage(caplog):
    assert decode_settings("!!!not base64!!!") is None
    assert decode_settings(base64.b64encode(b"%7Bbroken").decode()) is None
    assert "Failed to decompress settings" in caplog.text


def test_decode_rejects_non_objects():
    assert decode_settings(base64.b64encode(b"%5B1%2C2%5D").decode()) is None


def test_share_link_replaces_existing_preset_param():
    link = share_link({"fontSize": 60}, base_url="https://example.test/app/?preset=old&lang=en")
    assert link.startswith("https://example.test/app/?lang=en&" + SHARE_PARAM + "=")
    assert settings_from_link(link) == {"fontSize": 60}


def test_link_without_preset():
    assert settings_from_link("https://example.test/app/") is None


def test_default_link_carries_full_settings():
    data = settings_from_link(share_link(Settings()))
    assert data == Settings().to_json_dict()
