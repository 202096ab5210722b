# どこで: `src/canvas_recorder/api/__init__.py`。
# 何を: 公開 API（create_recorder / create_surface）を再エクスポートする。
# なぜ: ユーザーコードからシンプルに API を import できるようにするため。

from __future__ import annotations

from .factory import SurfaceKind, create_recorder, create_surface

__all__ = ["SurfaceKind", "create_recorder", "create_surface"]
