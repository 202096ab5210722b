# どこで: `src/canvas_recorder/core/settings.py`。
# 何を: Recorder の設定値（record/clear/size/frames/on_complete/color/fps）と、その検証付きマージを提供する。
# なぜ: options() を「全項目を検証してから差し替える」形にし、途中状態を作らないため。

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, replace
from typing import Any

from canvas_recorder.core.color import parse_color
from canvas_recorder.core.errors import InvalidOptionError

OnComplete = Callable[[bytes], object]

DEFAULT_SIZE: tuple[int, int] = (1024, 1024)
DEFAULT_COLOR = "white"
DEFAULT_FPS = 60.0

# options() で受け付けるキー（surface は Recorder 側で扱う）。
SETTING_KEYS = ("record", "clear", "size", "frames", "on_complete", "color", "fps")


@dataclass(frozen=True, slots=True)
class RecorderSettings:
    """Recorder の設定。

    Notes
    -----
    `frames <= 0` は無制限。`on_complete=None` は既定の保存先へ書き出す。
    """

    record: bool = True
    clear: bool = False
    size: tuple[int, int] = DEFAULT_SIZE
    frames: int = -1
    on_complete: OnComplete | None = None
    color: str = DEFAULT_COLOR
    fps: float = DEFAULT_FPS

    @property
    def width(self) -> int:
        return int(self.size[0])

    @property
    def height(self) -> int:
        return int(self.size[1])

    @property
    def bounded(self) -> bool:
        """フレーム数上限が有効なら True を返す。"""

        return int(self.frames) > 0


def _as_bool(value: Any, *, key: str) -> bool:
    if not isinstance(value, bool):
        raise InvalidOptionError(f"{key} は bool である必要があります: got={value!r}")
    return value


def _as_size(value: Any) -> tuple[int, int]:
    try:
        seq = list(value)
    except TypeError as exc:
        raise InvalidOptionError(f"size は (width, height) である必要があります: got={value!r}") from exc
    if len(seq) != 2:
        raise InvalidOptionError(f"size は (width, height) である必要があります: got={value!r}")
    try:
        w = int(seq[0])
        h = int(seq[1])
    except (TypeError, ValueError) as exc:
        raise InvalidOptionError(f"size は整数の (width, height) である必要があります: got={value!r}") from exc
    if w <= 0 or h <= 0:
        raise InvalidOptionError(f"size は正の (width, height) である必要があります: got={value!r}")
    return (w, h)


def _as_frames(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidOptionError(f"frames は整数である必要があります: got={value!r}")
    return int(value)


def _as_fps(value: Any) -> float:
    if isinstance(value, bool):
        raise InvalidOptionError(f"fps は数値である必要があります: got={value!r}")
    try:
        fps = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidOptionError(f"fps は数値である必要があります: got={value!r}") from exc
    if fps <= 0:
        raise InvalidOptionError(f"fps は正の値である必要があります: got={value!r}")
    return fps


def _as_on_complete(value: Any) -> OnComplete | None:
    if value is not None and not callable(value):
        raise InvalidOptionError(f"on_complete は callable である必要があります: got={value!r}")
    return value


def _as_color(value: Any) -> str:
    # 解釈できない色はここで弾き、surface 側に渡さない。
    parse_color(value)
    return str(value)


_COERCERS: dict[str, Callable[[Any], Any]] = {
    "record": lambda v: _as_bool(v, key="record"),
    "clear": lambda v: _as_bool(v, key="clear"),
    "size": _as_size,
    "frames": _as_frames,
    "on_complete": _as_on_complete,
    "color": _as_color,
    "fps": _as_fps,
}


def merge_options(settings: RecorderSettings, opts: Mapping[str, Any]) -> RecorderSettings:
    """opts を検証し、指定されたキーだけ差し替えた新しい設定を返す。

    Raises
    ------
    InvalidOptionError
        未知のキー、または不正な値が含まれる場合。`settings` は変更されない。
    """

    unknown = sorted(k for k in opts if k not in _COERCERS)
    if unknown:
        raise InvalidOptionError(f"未知の option です: {', '.join(unknown)}")

    changes = {key: _COERCERS[key](value) for key, value in opts.items()}
    return replace(settings, **changes)


__all__ = [
    "DEFAULT_COLOR",
    "DEFAULT_FPS",
    "DEFAULT_SIZE",
    "OnComplete",
    "RecorderSettings",
    "SETTING_KEYS",
    "merge_options",
]
