# どこで: `src/canvas_recorder/core/bundle.py`。
# 何を: 自前のループから surface を 1 枚ずつ追加できる連番アーカイブ（FrameBundle）を提供する。
# なぜ: Recorder のループを使わない呼び出し側でも、同じ命名規約の zip を作れるようにするため。

from __future__ import annotations

import asyncio
from pathlib import Path

from canvas_recorder.core.archive import ArchiveBuilder, frame_name
from canvas_recorder.core.delivery import save_archive
from canvas_recorder.core.surface import Surface


class FrameBundle:
    """add_frame() した順に `000000.png` から連番で格納するアーカイブ。"""

    def __init__(self) -> None:
        self._archive = ArchiveBuilder()
        self._next_index = 0
        self._tail: asyncio.Task[str] | None = None

    @property
    def archive(self) -> ArchiveBuilder:
        return self._archive

    def names(self) -> list[str]:
        return self._archive.names()

    def add_frame(self, surface: Surface) -> asyncio.Task[str]:
        """surface の現在の内容を次の連番として追加する。

        Notes
        -----
        名前とスナップショットは呼び出し時点で確定する。書き込みは前の add_frame の
        完了後に行うため、await せずに連続で呼んでも順序は保たれる。
        返り値の Task はエントリ名を返す。
        """

        # スナップショットに失敗した場合は番号を消費しない（連番に欠番を作らない）。
        pending = surface.serialize_frame()
        name = frame_name(self._next_index)
        self._next_index += 1
        previous = self._tail
        archive = self._archive

        async def _put() -> str:
            data = await pending
            if previous is not None:
                await previous
            archive.put(name, data)
            return name

        task = asyncio.ensure_future(_put())
        self._tail = task
        return task

    def reset(self) -> None:
        """全エントリを破棄し、番号を 0 に戻す。"""

        self._archive = ArchiveBuilder()
        self._next_index = 0
        self._tail = None

    async def finalize(self) -> bytes:
        """追加中のフレームを待ってから zip バイト列を返し、bundle を空に戻す。"""

        tail = self._tail
        if tail is not None:
            await tail
        data = self._archive.finalize()
        self.reset()
        return data

    async def download(self, path: str | Path | None = None) -> Path:
        """zip を保存して保存先パスを返し、bundle を空に戻す。"""

        data = await self.finalize()
        return save_archive(data, path)


__all__ = ["FrameBundle"]
