# どこで: `src/canvas_recorder/core/frame_clock.py`。
# 何を: draw コールバックに渡すフレーム時刻（ミリ秒）の生成規則を提供する。
# なぜ: 「プレビューは実時間」「録画中は固定 fps のタイムライン」を分離して見通しを良くするため。

from __future__ import annotations

import time


def frame_timestamp(
    *,
    record: bool,
    frame_index: int,
    fps: float,
    elapsed_ms: float,
) -> float:
    """1 tick 分のフレーム時刻（ミリ秒）を返す。

    Notes
    -----
    - `record=True`: `frame_index * (1000 / fps)`。処理時間に依存しない。
    - `record=False`: `elapsed_ms`（開始からの実経過時間）をそのまま返す。
    """

    if record:
        _fps = float(fps)
        if _fps <= 0:
            raise ValueError("fps は正の値である必要がある")
        return float(int(frame_index) * (1000.0 / _fps))
    return float(elapsed_ms)


class RealTimeClock:
    """実時間ベースのフレーム時計。

    Notes
    -----
    `t` は `perf_counter()` の差分（ミリ秒）。
    """

    def __init__(self, *, start_time: float | None = None) -> None:
        self._start_time = float(time.perf_counter() if start_time is None else start_time)

    @property
    def start_time(self) -> float:
        return self._start_time

    def elapsed_ms(self) -> float:
        """開始からの経過時間（ミリ秒）を返す。"""

        return float((time.perf_counter() - self._start_time) * 1000.0)

    def t(self, frame_index: int) -> float:
        """フレーム時刻（ミリ秒）を返す。`frame_index` は使わない。"""

        return frame_timestamp(record=False, frame_index=frame_index, fps=0.0, elapsed_ms=self.elapsed_ms())


class RecordingClock:
    """録画タイムラインのフレーム時計。

    Notes
    -----
    `t` は `frame_index * 1000 / fps`。
    実時間と切り離し、録画データ側の fps を維持するために使う。
    """

    def __init__(self, *, fps: float) -> None:
        _fps = float(fps)
        if _fps <= 0:
            raise ValueError("fps は正の値である必要がある")
        self._fps = _fps

    @property
    def fps(self) -> float:
        """録画 fps を返す。"""

        return float(self._fps)

    def t(self, frame_index: int) -> float:
        """フレーム時刻（ミリ秒）を返す。"""

        return frame_timestamp(record=True, frame_index=frame_index, fps=self._fps, elapsed_ms=0.0)


FrameClock = RealTimeClock | RecordingClock


def create_frame_clock(*, record: bool, fps: float) -> FrameClock:
    """record フラグに応じたフレーム時計を返す。"""

    if record:
        return RecordingClock(fps=fps)
    return RealTimeClock()


__all__ = ["FrameClock", "RealTimeClock", "RecordingClock", "create_frame_clock", "frame_timestamp"]
