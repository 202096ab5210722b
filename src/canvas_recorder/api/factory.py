# どこで: `src/canvas_recorder/api/factory.py`。
# 何を: surface の種類（2d / gl）とプレビュー表示先を配線して Recorder を生成する。
# なぜ: アプリ側のエントリポイントで明示的に Recorder を作り、モジュール単位の共有状態を持たないため。

from __future__ import annotations

from typing import Any, Literal

from canvas_recorder.core.raster_surface import RasterSurface
from canvas_recorder.core.recorder import PresentationTarget, Recorder
from canvas_recorder.core.scheduler import DEFAULT_FRAME_INTERVAL, AsyncioFrameScheduler
from canvas_recorder.core.surface import Surface

SurfaceKind = Literal["2d", "gl"]


def create_surface(kind: SurfaceKind = "2d") -> Surface:
    """種類に応じた surface を生成する（gl は ModernGL を遅延 import する）。"""

    if kind == "2d":
        return RasterSurface()
    if kind == "gl":
        from canvas_recorder.interactive.gl_surface import GLSurface

        return GLSurface()
    raise ValueError(f"未対応の surface 種別: {kind!r}")


def _preview_window() -> PresentationTarget:
    from canvas_recorder.interactive.preview_window import PreviewWindow

    return PreviewWindow()


def create_recorder(
    kind: SurfaceKind = "2d",
    *,
    frame_interval: float = DEFAULT_FRAME_INTERVAL,
    **options: Any,
) -> Recorder:
    """Recorder を生成して返す。

    Parameters
    ----------
    kind : {"2d", "gl"}
        描画先 surface の種類。
    frame_interval : float
        tick の間隔（秒）。`<=0` はスロットリング無し。
    **options
        生成直後に `Recorder.options()` へ渡す設定。
    """

    recorder = Recorder(
        create_surface(kind),
        scheduler=AsyncioFrameScheduler(interval=frame_interval),
        presenter_factory=_preview_window,
    )
    if options:
        recorder.options(**options)
    return recorder


__all__ = ["SurfaceKind", "create_recorder", "create_surface"]
