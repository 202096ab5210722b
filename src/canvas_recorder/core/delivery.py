# どこで: `src/canvas_recorder/core/delivery.py`。
# 何を: 確定済みアーカイブ（zip バイト列）を出力ディレクトリへ保存する既定の on_complete を提供する。
# なぜ: on_complete 未指定でも、録画結果がファイルとして手元に残るようにするため。

from __future__ import annotations

import logging
from pathlib import Path

from canvas_recorder.core.runtime_config import output_root_dir, runtime_config

_logger = logging.getLogger(__name__)


def default_archive_path() -> Path:
    """アーカイブの既定保存パスを返す。

    Notes
    -----
    パスは `{output_root}/archive/{export.archive.filename}`。
    """

    return output_root_dir() / "archive" / runtime_config().archive_filename


def save_archive(data: bytes, path: str | Path | None = None) -> Path:
    """zip バイト列をファイルへ書き出し、保存先パスを返す。"""

    _path = default_archive_path() if path is None else Path(path)
    _path.parent.mkdir(parents=True, exist_ok=True)
    _path.write_bytes(bytes(data))
    _logger.debug("archive written: %s (%d bytes)", _path, len(data))
    print(f"Saved archive: {_path}")
    return _path


__all__ = ["default_archive_path", "save_archive"]
