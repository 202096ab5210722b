"""
どこで: `src/canvas_recorder/core/color.py`。
何を: クリア色の文字列（CSS 色名 / `#rrggbb` / `rgb()` など）を RGBA に変換する。
なぜ: raster / GPU の両 surface で同じ色解釈を共有するため。
"""

from __future__ import annotations

from functools import lru_cache

from PIL import ImageColor

from canvas_recorder.core.errors import InvalidOptionError


@lru_cache(maxsize=64)
def parse_color(color: str) -> tuple[int, int, int, int]:
    """色文字列を RGBA255 タプル `(r, g, b, a)` に変換して返す。

    Parameters
    ----------
    color : str
        Pillow の `ImageColor` が解釈できる色指定。

    Returns
    -------
    tuple[int, int, int, int]
        0..255 の RGBA。アルファ未指定なら 255。

    Raises
    ------
    InvalidOptionError
        文字列でない、または解釈できない色指定の場合。
    """

    if not isinstance(color, str):
        raise InvalidOptionError(f"color は文字列である必要があります: got={color!r}")
    try:
        rgb = ImageColor.getrgb(color.strip())
    except ValueError as exc:
        raise InvalidOptionError(f"未対応の color 指定です: {color!r}") from exc

    if len(rgb) == 4:
        r, g, b, a = rgb
    else:
        r, g, b = rgb
        a = 255
    return int(r), int(g), int(b), int(a)


def rgba255_to_rgba01(rgba: tuple[int, int, int, int]) -> tuple[float, float, float, float]:
    """0..255 int の RGBA を 0..1 float の RGBA に変換して返す。"""

    r, g, b, a = rgba
    return float(r) / 255.0, float(g) / 255.0, float(b) / 255.0, float(a) / 255.0


__all__ = ["parse_color", "rgba255_to_rgba01"]
