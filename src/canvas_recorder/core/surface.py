# どこで: `src/canvas_recorder/core/surface.py`。
# 何を: Recorder が要求する surface の能力（clear / resize / serialize_frame）と PNG 直列化の共通処理を定義する。
# なぜ: raster と GPU の両 adapter を同じ Recorder で扱い、描画方式の違いを adapter 内に閉じ込めるため。

from __future__ import annotations

import asyncio
import io
from collections.abc import Awaitable
from typing import Any, Protocol, runtime_checkable

from PIL import Image

from canvas_recorder.core.errors import SerializationError


@runtime_checkable
class Surface(Protocol):
    """Recorder が描画先として扱う surface。"""

    @property
    def size(self) -> tuple[int, int]: ...

    @property
    def context(self) -> Any:
        """描画 API の実体（ImageDraw / moderngl.Context など）。"""
        ...

    def set_clear_color(self, color: str) -> None: ...

    def clear(self) -> None: ...

    def resize(self, width: int, height: int) -> None: ...

    def snapshot(self) -> Image.Image:
        """現在の表示内容を RGBA 画像として複製して返す（上下は画像座標）。"""
        ...

    def serialize_frame(self) -> Awaitable[bytes]:
        """現在の表示内容を PNG バイト列にする awaitable を返す。"""
        ...


def encode_png(image: Image.Image) -> bytes:
    """画像を PNG バイト列にエンコードして返す。"""

    buf = io.BytesIO()
    try:
        image.save(buf, format="PNG")
    except (OSError, ValueError) as exc:
        raise SerializationError(f"PNG エンコードに失敗しました: {exc}") from exc
    return buf.getvalue()


def serialize_snapshot(surface: Surface) -> Awaitable[bytes]:
    """surface を呼び出し時点でスナップショットし、PNG 化する awaitable を返す。

    Notes
    -----
    スナップショットは同期的に取るため、await 中に surface が書き換えられても
    返るバイト列は呼び出し時点の内容のまま。エンコードはスレッドで行う。
    """

    try:
        image = surface.snapshot()
    except SerializationError:
        raise
    except Exception as exc:
        raise SerializationError(f"surface の読み出しに失敗しました: {exc}") from exc
    return asyncio.to_thread(encode_png, image)


__all__ = ["Surface", "encode_png", "serialize_snapshot"]
