# どこで: `src/canvas_recorder/interactive/gl_surface.py`。
# 何を: ModernGL のオフスクリーン framebuffer を描画先とする GPU surface を提供する。
# なぜ: シェーダで描くスケッチも raster と同じ Recorder で連番 PNG にできるようにするため。

from __future__ import annotations

from collections.abc import Awaitable

import moderngl
from PIL import Image

from canvas_recorder.core.color import parse_color, rgba255_to_rgba01
from canvas_recorder.core.settings import DEFAULT_COLOR, DEFAULT_SIZE
from canvas_recorder.core.surface import serialize_snapshot


class GLSurface:
    """RGBA8 framebuffer を持つ GPU surface。

    Notes
    -----
    `context` は `moderngl.Context`。draw コールバックは `surface.fbo.use()` 済みの状態で呼ばれる前提で
    `surface.context` に描画する。resize すると framebuffer は作り直される。
    """

    def __init__(
        self,
        size: tuple[int, int] = DEFAULT_SIZE,
        *,
        color: str = DEFAULT_COLOR,
        ctx: moderngl.Context | None = None,
    ) -> None:
        self._owns_ctx = ctx is None
        self.ctx = ctx if ctx is not None else moderngl.create_standalone_context()
        self._clear_rgba01 = rgba255_to_rgba01(parse_color(color))
        self._fbo: moderngl.Framebuffer | None = None
        w, h = size
        self.resize(int(w), int(h))

    @property
    def size(self) -> tuple[int, int]:
        return self._require_fbo().size

    @property
    def context(self) -> moderngl.Context:
        return self.ctx

    @property
    def fbo(self) -> moderngl.Framebuffer:
        return self._require_fbo()

    @property
    def clear_color(self) -> tuple[float, float, float, float]:
        return self._clear_rgba01

    def _require_fbo(self) -> moderngl.Framebuffer:
        fbo = self._fbo
        if fbo is None:
            raise RuntimeError("GLSurface は解放済みです")
        return fbo

    def set_clear_color(self, color: str) -> None:
        self._clear_rgba01 = rgba255_to_rgba01(parse_color(color))

    def clear(self) -> None:
        """framebuffer をクリア色で塗りつぶす。"""

        fbo = self._require_fbo()
        with self.ctx:
            fbo.use()
            fbo.clear(*self._clear_rgba01)

    def resize(self, width: int, height: int) -> None:
        """framebuffer を作り直し、描画先として bind する。"""

        w = int(width)
        h = int(height)
        if w <= 0 or h <= 0:
            raise ValueError("size は正の (width, height) である必要がある")
        with self.ctx:
            old = self._fbo
            self._fbo = self.ctx.simple_framebuffer((w, h), components=4)
            if old is not None:
                old.release()
            self._fbo.use()
            self.ctx.viewport = (0, 0, w, h)

    def snapshot(self) -> Image.Image:
        fbo = self._require_fbo()
        w, h = fbo.size
        with self.ctx:
            data = fbo.read(components=4, alignment=1)
        # OpenGL は左下原点なので、画像座標（左上原点）へ上下反転する。
        return Image.frombytes("RGBA", (w, h), data).transpose(Image.Transpose.FLIP_TOP_BOTTOM)

    def serialize_frame(self) -> Awaitable[bytes]:
        return serialize_snapshot(self)

    def release(self) -> None:
        """GPU リソースを解放する。"""

        fbo = self._fbo
        self._fbo = None
        if fbo is not None:
            fbo.release()
        if self._owns_ctx:
            self.ctx.release()


__all__ = ["GLSurface"]
