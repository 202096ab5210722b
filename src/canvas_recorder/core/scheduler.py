# どこで: `src/canvas_recorder/core/scheduler.py`。
# 何を: Recorder の次 tick を asyncio のイベントループへ予約する最小スケジューラを提供する。
# なぜ: ブラウザの animation frame に相当する「1 フレームに 1 回の再開点」を、取消可能な形で抽象化するため。

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Protocol

DEFAULT_FRAME_INTERVAL = 1.0 / 60.0


class TickHandle(Protocol):
    """予約済み tick の取消ハンドル。"""

    def cancel(self) -> None: ...


class FrameScheduler(Protocol):
    """次 tick を 1 つ予約する。"""

    def schedule(self, callback: Callable[[], None]) -> TickHandle: ...


class AsyncioFrameScheduler:
    """asyncio のイベントループ上で tick を予約する。

    Notes
    -----
    `interval <= 0` は「スロットリング無し」として `call_soon()` で即座に次ループへ回す。
    `> 0` の場合は `call_later()` で表示フレーム間隔ぶん待つ。
    ループは `schedule()` 呼び出し時点で実行中のものを使う。
    """

    def __init__(
        self,
        *,
        interval: float = DEFAULT_FRAME_INTERVAL,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self._interval = float(interval)
        self._loop = loop

    @property
    def interval(self) -> float:
        return float(self._interval)

    def _event_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is not None:
            return self._loop
        try:
            return asyncio.get_running_loop()
        except RuntimeError as exc:
            raise RuntimeError(
                "実行中のイベントループがありません（start() は asyncio のコルーチン内から呼んでください）"
            ) from exc

    def schedule(self, callback: Callable[[], None]) -> asyncio.Handle:
        loop = self._event_loop()
        if self._interval <= 0:
            return loop.call_soon(callback)
        return loop.call_later(self._interval, callback)


__all__ = ["AsyncioFrameScheduler", "DEFAULT_FRAME_INTERVAL", "FrameScheduler", "TickHandle"]
