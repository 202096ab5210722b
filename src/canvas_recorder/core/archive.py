# どこで: `src/canvas_recorder/core/archive.py`。
# 何を: 連番フレーム PNG を挿入順に保持し、1 つの zip バイト列へ確定する ArchiveBuilder を提供する。
# なぜ: 後段の変換ツール（`%06d.png` 入力）と互換なファイル名規約をここに固定するため。

from __future__ import annotations

import io
import zipfile

from canvas_recorder.core.errors import ArchiveError, DuplicateNameError, EmptyArchiveError

ARCHIVE_MIME_TYPE = "application/zip"
FRAME_NAME_WIDTH = 6
FRAME_EXTENSION = ".png"

# zip の更新日時を固定し、同じフレーム列から同じバイト列を得る。
_ZIP_DATE_TIME = (1980, 1, 1, 0, 0, 0)


def frame_name(index: int) -> str:
    """フレーム番号からアーカイブ内のエントリ名（例: `000007.png`）を返す。"""

    i = int(index)
    if i < 0:
        raise ValueError(f"frame index は 0 以上である必要があります: got={index!r}")
    return f"{i:0{FRAME_NAME_WIDTH}d}{FRAME_EXTENSION}"


class ArchiveBuilder:
    """名前付きバイト列を追記専用で保持するアーカイブ。

    Notes
    -----
    エントリは `put()` した順のまま zip に書き出され、並べ替えは行わない。
    `finalize()` 後は `reset()` するまで `put()` できない。
    """

    def __init__(self) -> None:
        self._entries: dict[str, bytes] = {}
        self._finalized = False

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def finalized(self) -> bool:
        """finalize 済みなら True を返す。"""

        return self._finalized

    def names(self) -> list[str]:
        """エントリ名を挿入順で返す。"""

        return list(self._entries)

    def put(self, name: str, data: bytes) -> None:
        """エントリを末尾に追加する。"""

        if self._finalized:
            raise ArchiveError("finalize 済みのアーカイブには追加できません（reset() が必要です）")
        key = str(name)
        if key in self._entries:
            raise DuplicateNameError(f"同名のエントリが既に存在します: {key!r}")
        self._entries[key] = bytes(data)

    def finalize(self) -> bytes:
        """全エントリを zip バイト列として確定して返す。"""

        if self._finalized:
            raise ArchiveError("アーカイブは既に finalize 済みです")
        if not self._entries:
            raise EmptyArchiveError("エントリが 0 件のアーカイブは finalize できません")

        buf = io.BytesIO()
        # PNG は既に圧縮済みなので無圧縮で格納する。
        with zipfile.ZipFile(buf, mode="w", compression=zipfile.ZIP_STORED) as zf:
            for name, data in self._entries.items():
                info = zipfile.ZipInfo(filename=name, date_time=_ZIP_DATE_TIME)
                info.compress_type = zipfile.ZIP_STORED
                zf.writestr(info, data)

        # 所有権は生成した zip 側へ移る。
        self._entries = {}
        self._finalized = True
        return buf.getvalue()

    def reset(self) -> None:
        """全エントリを破棄し、再び put() できる状態に戻す。"""

        self._entries = {}
        self._finalized = False


__all__ = ["ARCHIVE_MIME_TYPE", "ArchiveBuilder", "frame_name"]
