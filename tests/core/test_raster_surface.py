from __future__ import annotations

import asyncio
import io

import numpy as np
import pytest
from PIL import Image

from canvas_recorder.core.errors import SerializationError
from canvas_recorder.core.raster_surface import RasterSurface
from canvas_recorder.core.surface import Surface, encode_png


def test_raster_surface_implements_surface_protocol():
    assert isinstance(RasterSurface((4, 4)), Surface)


def test_clear_fills_with_clear_color():
    surface = RasterSurface((3, 2), color="black")
    surface.clear()

    px = surface.pixels()
    assert px.shape == (2, 3, 4)
    assert np.all(px == np.array([0, 0, 0, 255], dtype=np.uint8))


def test_resize_replaces_image_but_keeps_surface():
    surface = RasterSurface((8, 8))
    before = surface.image
    surface.resize(30, 40)

    assert surface.size == (30, 40)
    assert surface.image is not before
    assert surface.context is not None


def test_resize_rejects_non_positive_size():
    with pytest.raises(ValueError):
        RasterSurface((4, 4)).resize(0, 4)


def test_set_clear_color_applies_on_next_clear():
    surface = RasterSurface((2, 2))
    surface.set_clear_color("#00ff00")
    surface.clear()
    assert surface.clear_color == (0, 255, 0, 255)
    assert np.all(surface.pixels() == np.array([0, 255, 0, 255], dtype=np.uint8))


def test_serialize_frame_captures_state_at_call_time():
    async def main() -> bytes:
        surface = RasterSurface((4, 4), color="red")
        surface.clear()
        pending = surface.serialize_frame()
        # await 前に描き換えても結果は呼び出し時点の内容。
        surface.context.rectangle((0, 0, 3, 3), fill=(0, 0, 255, 255))
        return await pending

    data = asyncio.run(main())

    with Image.open(io.BytesIO(data)) as img:
        assert img.format == "PNG"
        px = np.array(img.convert("RGBA"))
    assert np.all(px == np.array([255, 0, 0, 255], dtype=np.uint8))


def test_encode_png_wraps_encoder_errors():
    class _Broken:
        def save(self, *_args, **_kwargs):
            raise OSError("disk on fire")

    with pytest.raises(SerializationError, match="PNG"):
        encode_png(_Broken())  # type: ignore[arg-type]
