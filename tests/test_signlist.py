import pytest

from signpack.signlist import (
    SIGN_KINDS,
    PackConfig,
    RangeConfig,
    SignDescriptor,
    archive_entry_name,
    enumerate_pack,
    enumerate_range,
    format_number,
    range_file_name,
)


def test_checkpoint_range():
    signs = enumerate_pack(PackConfig(checkpoint_start=1, checkpoint_end=3))
    assert [s.filename for s in signs] == ["cp-001.png", "cp-002.png", "cp-003.png"]
    assert [s.text for s in signs] == ["Checkpoint 1", "Checkpoint 2", "Checkpoint 3"]
    assert {s.kind for s in signs} == {"checkpoint"}


def test_start_only():
    signs = enumerate_pack(PackConfig(include_checkpoints=False, include_start=True, start_text="GO"))
    assert len(signs) == 1
    assert (signs[0].kind, signs[0].filename, signs[0].text) == ("start", "start.png", "GO")


def test_nothing_selected_is_empty():
    assert enumerate_pack(PackConfig(include_checkpoints=False)) == []


def test_pack_order():
    config = PackConfig(
        checkpoint_start=1, checkpoint_end=1,
        include_start=True, include_finish=True,
        include_arrows=True, arrows=["up"],
        include_icons=True, arrow_icons=["fast-forward"], race_icons=["trophy"],
    )
    assert [s.filename for s in enumerate_pack(config)] == [
        "cp-001.png", "start.png", "finish.png", "arrow-up.png",
        "icon-arrow-fast-forward.png", "icon-race-trophy.png",
    ]


def test_rotated_arrows_eight_directions():
    config = PackConfig(include_checkpoints=False, include_arrows=True, arrow_directions="8")
    signs = enumerate_pack(config)
    assert [(s.filename, s.rotation) for s in signs] == [
        ("arrow-up.png", 0),
        ("arrow-right.png", 90),
        ("arrow-down.png", 180),
        ("arrow-left.png", 270),
        ("arrow-up-right.png", 45),
        ("arrow-down-right.png", 135),
        ("arrow-down-left.png", 225),
        ("arrow-up-left.png", 315),
    ]
    assert {s.text for s in signs} == {"↑"}


def test_character_arrows_four_directions():
    config = PackConfig(include_checkpoints=False, include_arrows=True, arrow_mode="character")
    signs = enumerate_pack(config)
    assert [(s.filename, s.text) for s in signs] == [
        ("arrow-up.png", "↑"),
        ("arrow-down.png", "↓"),
        ("arrow-left.png", "←"),
        ("arrow-right.png", "→"),
    ]
    assert all(s.rotation is None for s in signs)


def test_explicit_arrow_toggles_win_over_direction_set():
    config = PackConfig(arrow_directions="4", arrows=["down-left", "up"])
    assert config.selected_arrows() == ["up", "down-left"]


def test_icon_signs_carry_catalog_reference():
    config = PackConfig(include_checkpoints=False, include_icons=True, race_icons=["bolt"])
    (sign,) = enumerate_pack(config)
    assert sign.icon == ("race", "bolt")
    assert sign.text is None


def test_pack_metadata():
    meta = PackConfig(checkpoint_start=5, checkpoint_end=9, signpack_name="Mine").metadata()
    assert meta == {
        "signpackName": "Mine",
        "numberFormat": "001",
        "fileNaming": "Checkpoint",
        "numberRange": {"start": 5, "end": 9},
    }


@pytest.mark.parametrize("fmt, expected", [
    ("001", "007"),
    ("1", "7"),
    ("CP001", "CP007"),
    ("CP1", "CP7"),
    ("weird", "007"),
])
def test_format_number(fmt, expected):
    assert format_number(7, fmt) == expected


def test_range_file_name():
    assert range_file_name(7) == "007.png"
    assert range_file_name(7, "cp-", "simple") == "cp-7.png"
    assert range_file_name(12, " my cp!/ ") == "mycp012.png"


def test_enumerate_range():
    signs = enumerate_range(RangeConfig(start=9, end=11, number_format="CP1", custom_prefix="cp_"))
    assert [(s.filename, s.text) for s in signs] == [
        ("cp_009.png", "CP9"),
        ("cp_010.png", "CP10"),
        ("cp_011.png", "CP11"),
    ]


def test_archive_entry_name():
    assert archive_entry_name("cp-001.png") == "cp-001.png"
    assert archive_entry_name("cp-001.png", "map1") == "map1-cp-001.png"


def test_descriptor_kind_must_be_known():
    for kind in SIGN_KINDS:
        SignDescriptor(kind, "x.png")
    with pytest.raises(ValueError, match="banner"):
        SignDescriptor("banner", "x.png")
