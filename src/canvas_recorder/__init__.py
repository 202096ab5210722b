# どこで: `src/canvas_recorder/__init__.py`。
# 何を: ルート `canvas_recorder` パッケージを定義する。
# なぜ: import 起点を `canvas_recorder` に統一するため。

from __future__ import annotations

from canvas_recorder.api import create_recorder, create_surface
from canvas_recorder.core.archive import ARCHIVE_MIME_TYPE, ArchiveBuilder, frame_name
from canvas_recorder.core.bundle import FrameBundle
from canvas_recorder.core.errors import (
    DuplicateNameError,
    EmptyArchiveError,
    InvalidOptionError,
    InvalidStateError,
    MissingCallbackError,
    SerializationError,
)
from canvas_recorder.core.raster_surface import RasterSurface
from canvas_recorder.core.recorder import Recorder, RecorderState
from canvas_recorder.core.settings import RecorderSettings
from canvas_recorder.core.surface import Surface

__all__ = [
    "ARCHIVE_MIME_TYPE",
    "ArchiveBuilder",
    "DuplicateNameError",
    "EmptyArchiveError",
    "FrameBundle",
    "InvalidOptionError",
    "InvalidStateError",
    "MissingCallbackError",
    "RasterSurface",
    "Recorder",
    "RecorderSettings",
    "RecorderState",
    "SerializationError",
    "Surface",
    "create_recorder",
    "create_surface",
    "frame_name",
]
