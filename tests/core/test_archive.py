from __future__ import annotations

import io
import zipfile

import pytest

from canvas_recorder.core.archive import ArchiveBuilder, frame_name
from canvas_recorder.core.errors import ArchiveError, DuplicateNameError, EmptyArchiveError


def test_frame_name_is_six_digit_zero_padded_png():
    assert frame_name(0) == "000000.png"
    assert frame_name(7) == "000007.png"
    assert frame_name(123456) == "123456.png"


def test_frame_name_rejects_negative_index():
    with pytest.raises(ValueError):
        frame_name(-1)


def test_finalize_keeps_insertion_order():
    archive = ArchiveBuilder()
    for i in (0, 1, 2):
        archive.put(frame_name(i), f"frame-{i}".encode())

    data = archive.finalize()

    with zipfile.ZipFile(io.BytesIO(data)) as zf:
        assert zf.namelist() == ["000000.png", "000001.png", "000002.png"]
        assert zf.read("000001.png") == b"frame-1"
        assert all(info.compress_type == zipfile.ZIP_STORED for info in zf.infolist())


def test_finalize_is_deterministic_for_same_entries():
    def build() -> bytes:
        archive = ArchiveBuilder()
        archive.put("000000.png", b"a")
        archive.put("000001.png", b"b")
        return archive.finalize()

    assert build() == build()


def test_put_rejects_duplicate_name():
    archive = ArchiveBuilder()
    archive.put("000000.png", b"a")
    with pytest.raises(DuplicateNameError):
        archive.put("000000.png", b"b")
    assert archive.names() == ["000000.png"]


def test_finalize_rejects_empty_archive():
    with pytest.raises(EmptyArchiveError):
        ArchiveBuilder().finalize()


def test_finalize_is_one_shot_until_reset():
    archive = ArchiveBuilder()
    archive.put("000000.png", b"a")
    archive.finalize()

    assert archive.finalized
    assert len(archive) == 0
    with pytest.raises(ArchiveError):
        archive.put("000001.png", b"b")
    with pytest.raises(ArchiveError):
        archive.finalize()

    archive.reset()
    archive.put("000000.png", b"c")
    assert archive.names() == ["000000.png"]


def test_reset_discards_entries():
    archive = ArchiveBuilder()
    archive.put("000000.png", b"a")
    archive.reset()
    assert len(archive) == 0
    assert not archive.finalized
