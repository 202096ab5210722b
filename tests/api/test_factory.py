from __future__ import annotations

import pytest

import canvas_recorder
from canvas_recorder.api import create_recorder, create_surface
from canvas_recorder.core.raster_surface import RasterSurface
from canvas_recorder.core.recorder import Recorder, RecorderState


def test_create_surface_defaults_to_raster():
    assert isinstance(create_surface(), RasterSurface)
    assert isinstance(create_surface("2d"), RasterSurface)


def test_create_surface_rejects_unknown_kind():
    with pytest.raises(ValueError, match="surface"):
        create_surface("svg")  # type: ignore[arg-type]


def test_create_recorder_applies_options():
    rec = create_recorder(size=(20, 10), frames=4, color="black")

    assert isinstance(rec, Recorder)
    assert rec.state is RecorderState.IDLE
    assert rec.settings.frames == 4
    assert rec.get_surface().size == (20, 10)


def test_create_recorder_returns_independent_instances():
    a = create_recorder(size=(4, 4))
    b = create_recorder(size=(4, 4))

    assert a is not b
    assert a.get_surface() is not b.get_surface()


def test_root_package_exports_public_api():
    for name in canvas_recorder.__all__:
        assert hasattr(canvas_recorder, name), name
    assert canvas_recorder.frame_name(7) == "000007.png"
    assert canvas_recorder.ARCHIVE_MIME_TYPE == "application/zip"
