# どこで: `src/canvas_recorder/core/raster_surface.py`。
# 何を: Pillow の RGBA 画像を描画先とする raster surface を提供する。
# なぜ: GPU なしで動く既定の surface として、ヘッドレス環境でも録画できるようにするため。

from __future__ import annotations

from collections.abc import Awaitable

import numpy as np
from PIL import Image, ImageDraw

from canvas_recorder.core.color import parse_color
from canvas_recorder.core.settings import DEFAULT_COLOR, DEFAULT_SIZE
from canvas_recorder.core.surface import serialize_snapshot


class RasterSurface:
    """RGBA ピクセルバッファ上の 2D surface。

    Notes
    -----
    `context` は `PIL.ImageDraw.ImageDraw`。resize すると画像と context は作り直されるが、
    surface 自体は同一オブジェクトのまま残る。
    """

    def __init__(
        self,
        size: tuple[int, int] = DEFAULT_SIZE,
        *,
        color: str = DEFAULT_COLOR,
    ) -> None:
        self._rgba = parse_color(color)
        self._image = Image.new("RGBA", (1, 1))
        self._draw = ImageDraw.Draw(self._image)
        w, h = size
        self.resize(int(w), int(h))

    @property
    def size(self) -> tuple[int, int]:
        return self._image.size

    @property
    def image(self) -> Image.Image:
        """描画対象の画像（resize 後は別オブジェクトになる）。"""

        return self._image

    @property
    def context(self) -> ImageDraw.ImageDraw:
        return self._draw

    @property
    def clear_color(self) -> tuple[int, int, int, int]:
        return self._rgba

    def set_clear_color(self, color: str) -> None:
        self._rgba = parse_color(color)

    def clear(self) -> None:
        """画像全体をクリア色で塗りつぶす。"""

        self._image.paste(self._rgba, (0, 0, *self._image.size))

    def resize(self, width: int, height: int) -> None:
        """画像を作り直す（内容は破棄される）。"""

        w = int(width)
        h = int(height)
        if w <= 0 or h <= 0:
            raise ValueError("size は正の (width, height) である必要がある")
        self._image = Image.new("RGBA", (w, h), (0, 0, 0, 0))
        self._draw = ImageDraw.Draw(self._image)

    def pixels(self) -> np.ndarray:
        """現在の内容を `(height, width, 4)` の uint8 配列として返す（コピー）。"""

        return np.array(self._image, dtype=np.uint8)

    def snapshot(self) -> Image.Image:
        return self._image.copy()

    def serialize_frame(self) -> Awaitable[bytes]:
        return serialize_snapshot(self)


__all__ = ["RasterSurface"]
