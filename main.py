"""
どこで: リポジトリ直下 `main.py`。
何を: 回転する正方形を 120 フレーム録画し、プレビューウィンドウに表示する。
なぜ: 動作確認用の最小エントリポイントとして利用するため。
"""

import asyncio
import logging
import math

from canvas_recorder import create_recorder

CANVAS_WIDTH = 300
CANVAS_HEIGHT = 300


async def main() -> None:
    recorder = create_recorder(
        "2d",
        size=(CANVAS_WIDTH, CANVAS_HEIGHT),
        frames=120,
        fps=30,
        clear=True,
        color="white",
    )

    def draw(surface, t: float) -> None:
        cx = CANVAS_WIDTH / 2
        cy = CANVAS_HEIGHT / 2
        r = CANVAS_WIDTH * 0.3
        a = t / 1000.0 * math.pi
        points = [
            (cx + r * math.cos(a + k * math.pi / 2), cy + r * math.sin(a + k * math.pi / 2))
            for k in range(4)
        ]
        surface.context.polygon(points, fill=(0, 0, 0, 255))

    recorder.draw(draw)
    presenter = recorder.bootstrap()
    try:
        await recorder.wait()
    finally:
        close = getattr(presenter, "close", None)
        if close is not None:
            close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(main())
