from pathlib import Path

import pytest

from canvas_recorder.core.delivery import default_archive_path, save_archive
from canvas_recorder.core.runtime_config import set_config_path


@pytest.fixture(autouse=True)
def _reset_runtime_config() -> None:
    set_config_path(None)
    yield
    set_config_path(None)


def test_default_archive_path_uses_output_dir_and_configured_filename(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))

    assert default_archive_path() == Path("data") / "output" / "archive" / "frames.zip"


def test_save_archive_creates_parent_directories(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    explicit = tmp_path / "config.yaml"
    explicit.write_text(f'paths:\n  output_dir: "{tmp_path / "out"}"\n', encoding="utf-8")
    set_config_path(explicit)

    path = save_archive(b"PK-data")

    assert path == tmp_path / "out" / "archive" / "frames.zip"
    assert path.read_bytes() == b"PK-data"
    assert f"Saved archive: {path}" in capsys.readouterr().out


def test_save_archive_accepts_explicit_path(tmp_path: Path):
    path = save_archive(b"abc", tmp_path / "nested" / "take.zip")
    assert path.read_bytes() == b"abc"
