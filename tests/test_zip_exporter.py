import io
import json
import zipfile

import pytest

from signpack.zip_exporter import SignArchive, write_archive


def _open(data: bytes) -> zipfile.ZipFile:
    return zipfile.ZipFile(io.BytesIO(data))


def test_archive_is_flat_and_deflated():
    archive = SignArchive()
    archive.add_png("cp-001.png", b"\x89PNG fake")
    archive.add_json("settings.json", {"fontSize": 48, "textPrefix": "é"})
    data = archive.finalize()

    with _open(data) as zf:
        assert zf.namelist() == ["cp-001.png", "settings.json"]
        assert all(info.compress_type == zipfile.ZIP_DEFLATED for info in zf.infolist())
        assert zf.read("cp-001.png") == b"\x89PNG fake"
        assert json.loads(zf.read("settings.json").decode("utf-8"))["textPrefix"] == "é"
    assert archive.entries == ["cp-001.png", "settings.json"]


def test_finalize_twice_returns_same_bytes():
    archive = SignArchive()
    archive.add_png("a.png", b"a")
    assert archive.finalize() == archive.finalize()


def test_cannot_add_after_finalize():
    archive = SignArchive()
    archive.finalize()
    with pytest.raises(ValueError):
        archive.add_png("late.png", b"x")


def test_duplicate_entries_warn(caplog):
    archive = SignArchive()
    archive.add_png("a.png", b"1")
    archive.add_png("a.png", b"2")
    assert "Duplicate archive entry a.png" in caplog.text


def test_write_archive(tmp_path):
    target = write_archive(b"PK-data", tmp_path / "out", "pack_6x1.zip")
    assert target == tmp_path / "out" / "pack_6x1.zip"
    assert target.read_bytes() == b"PK-data"
    assert [p.name for p in target.parent.iterdir()] == ["pack_6x1.zip"]
