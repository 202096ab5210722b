# どこで: `src/canvas_recorder/core/errors.py`。
# 何を: 録画ライフサイクル/アーカイブ/フレーム直列化の例外型を定義する。
# なぜ: 呼び出し側が「どの前提が破られたか」を型で区別できるようにするため。

from __future__ import annotations


class RecorderError(RuntimeError):
    """Recorder のライフサイクル違反の基底例外。"""


class InvalidStateError(RecorderError):
    """現在の状態では許可されない操作が呼ばれた。"""


class MissingCallbackError(RecorderError):
    """draw コールバック未登録のまま start() が呼ばれた。"""


class InvalidOptionError(ValueError):
    """options() に不正な値が渡された。"""


class ArchiveError(RuntimeError):
    """ArchiveBuilder の誤用の基底例外。"""


class DuplicateNameError(ArchiveError):
    """同名のエントリが既に存在する。"""


class EmptyArchiveError(ArchiveError):
    """エントリ 0 件のまま finalize() が呼ばれた。"""


class SerializationError(RuntimeError):
    """surface からフレームのバイト列を得られなかった。"""


__all__ = [
    "ArchiveError",
    "DuplicateNameError",
    "EmptyArchiveError",
    "InvalidOptionError",
    "InvalidStateError",
    "MissingCallbackError",
    "RecorderError",
    "SerializationError",
]
