# どこで: `src/canvas_recorder/interactive/preview_window.py`。
# 何を: surface の内容を pyglet ウィンドウへ定期的に転送するプレビュー（bootstrap の既定表示先）を提供する。
# なぜ: 録画中のスケッチを目視で確認できるようにしつつ、core をヘッドレスに保つため。

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any

import pyglet
from PIL import Image

from canvas_recorder.core.runtime_config import runtime_config
from canvas_recorder.core.scheduler import DEFAULT_FRAME_INTERVAL
from canvas_recorder.core.surface import Surface

_logger = logging.getLogger(__name__)


def to_image_data(image: Image.Image) -> Any:
    """RGBA 画像を pyglet の ImageData に変換して返す。"""

    rgba = image if image.mode == "RGBA" else image.convert("RGBA")
    w, h = rgba.size
    # 負の pitch は「先頭行が上端」を意味する（PIL の行順のまま渡せる）。
    return pyglet.image.ImageData(w, h, "RGBA", rgba.tobytes(), pitch=-w * 4)


class PreviewWindow:
    """asyncio ループ上で surface をウィンドウへ映し続ける表示先。"""

    def __init__(
        self,
        *,
        interval: float = DEFAULT_FRAME_INTERVAL,
        on_close: Callable[[], object] | None = None,
    ) -> None:
        self._interval = float(interval)
        self._on_close = on_close
        # 注: pyglet の Window 型は環境/バージョン差があるため Any に寄せる。
        self._window: Any = None
        self._surface: Surface | None = None
        self._task: asyncio.Task[None] | None = None

    @property
    def window(self) -> Any:
        return self._window

    def attach(self, surface: Surface) -> None:
        """ウィンドウを開き、surface の定期転送を開始する。"""

        if self._window is not None:
            raise RuntimeError("PreviewWindow は既に attach 済みです")

        cfg = runtime_config()
        w, h = surface.size
        window = pyglet.window.Window(  # type: ignore[abstract]
            width=int(w),
            height=int(h),
            resizable=False,
            caption=cfg.preview_caption,
        )
        x, y = cfg.preview_window_position
        window.set_location(int(x), int(y))

        self._window = window
        self._surface = surface
        self._task = asyncio.ensure_future(self._run())

    def refresh(self) -> None:
        """イベントを処理し、surface の現在の内容を 1 回描画する。"""

        window = self._window
        surface = self._surface
        if window is None or surface is None:
            return

        window.switch_to()
        window.dispatch_events()
        if window.has_exit:
            return

        w, h = surface.size
        if (window.width, window.height) != (int(w), int(h)):
            window.set_size(int(w), int(h))
        window.clear()
        to_image_data(surface.snapshot()).blit(0, 0)
        window.flip()

    async def _run(self) -> None:
        try:
            while self._window is not None and not self._window.has_exit:
                self.refresh()
                await asyncio.sleep(self._interval)
        finally:
            closed_by_user = self._window is not None
            self._close_window()
            on_close = self._on_close
            if closed_by_user and on_close is not None:
                on_close()

    def _close_window(self) -> None:
        window = self._window
        self._window = None
        self._surface = None
        if window is None:
            return
        try:
            window.close()
        except Exception:
            _logger.exception("Failed to close preview window")

    def close(self) -> None:
        """転送を止めてウィンドウを閉じる。"""

        task = self._task
        self._task = None
        self._close_window()
        if task is not None:
            task.cancel()


__all__ = ["PreviewWindow", "to_image_data"]
