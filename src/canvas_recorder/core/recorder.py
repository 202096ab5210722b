# どこで: `src/canvas_recorder/core/recorder.py`。
# 何を: 設定 → draw ループ → 停止 のライフサイクルを持つ Recorder（フレームループの状態機械）を提供する。
# なぜ: tick の時刻算出・フレーム取り込み・アーカイブ確定の順序を 1 箇所に固定し、欠落/重複なく連番化するため。

from __future__ import annotations

import asyncio
import functools
import inspect
import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol

from canvas_recorder.core.archive import ArchiveBuilder, frame_name
from canvas_recorder.core.delivery import save_archive
from canvas_recorder.core.errors import (
    InvalidOptionError,
    InvalidStateError,
    MissingCallbackError,
    SerializationError,
)
from canvas_recorder.core.frame_clock import FrameClock, create_frame_clock
from canvas_recorder.core.raster_surface import RasterSurface
from canvas_recorder.core.scheduler import AsyncioFrameScheduler, FrameScheduler, TickHandle
from canvas_recorder.core.settings import RecorderSettings, merge_options
from canvas_recorder.core.surface import Surface

_logger = logging.getLogger(__name__)

DrawCallback = Callable[[Any, float], object]
Hook = Callable[[], object]


class PresentationTarget(Protocol):
    """bootstrap() が surface を見せる先（ウィンドウ等）。"""

    def attach(self, surface: Surface) -> None: ...


class RecorderState(Enum):
    IDLE = "idle"
    CONFIGURING = "configuring"
    ACTIVE = "active"


@dataclass(eq=False, slots=True)
class _Session:
    """start() から停止までの 1 回分の状態。使い回さない。"""

    settings: RecorderSettings
    clock: FrameClock
    archive: ArchiveBuilder
    done: asyncio.Future[None]
    frame_index: int = 0
    active: bool = True
    tick: TickHandle | None = None
    capture: asyncio.Task[None] | None = None
    serialization: asyncio.Future[bytes] | None = None
    finalizer: asyncio.Task[None] | None = None
    error: BaseException | None = None


class Recorder:
    """描画ループを回し、各フレームを連番 PNG の zip にまとめる。

    Notes
    -----
    - 単一スレッドの asyncio ループ上で動く。`start()` はループ実行中に呼ぶ。
    - 録画中（`record=True`）は 1 フレームの直列化が終わるまで次の tick を予約しない。
      これによりアーカイブのエントリ順は常にフレーム番号順になる。
    - draw / setup / cleanup コールバックはそれぞれ 1 つだけ保持し、再登録で上書きする。
    """

    def __init__(
        self,
        surface: Surface | None = None,
        *,
        scheduler: FrameScheduler | None = None,
        presenter_factory: Callable[[], PresentationTarget] | None = None,
    ) -> None:
        self._surface: Surface = surface if surface is not None else RasterSurface()
        self._scheduler: FrameScheduler = scheduler if scheduler is not None else AsyncioFrameScheduler()
        self._presenter_factory = presenter_factory
        self._presenter: PresentationTarget | None = None
        self._settings = RecorderSettings()
        self._state = RecorderState.IDLE
        self._draw_callback: DrawCallback | None = None
        self._setup_hook: Hook | None = None
        self._teardown_hook: Hook | None = None
        self._session: _Session | None = None
        self._apply_settings()

    # --- 参照系 ---

    @property
    def state(self) -> RecorderState:
        return self._state

    @property
    def is_active(self) -> bool:
        return self._state is RecorderState.ACTIVE

    @property
    def settings(self) -> RecorderSettings:
        """現在の設定（frozen）を返す。"""

        return self._settings

    @property
    def frame_index(self) -> int:
        """直近セッションで描画したフレーム数を返す。"""

        session = self._session
        return 0 if session is None else int(session.frame_index)

    @property
    def presenter(self) -> PresentationTarget | None:
        return self._presenter

    def get_surface(self) -> Surface:
        return self._surface

    def get_context(self) -> Any:
        return self._surface.context

    # --- 設定 ---

    def options(self, **opts: Any) -> None:
        """設定を部分的に更新し、surface へ即時反映する。

        Parameters
        ----------
        **opts
            `record`, `clear`, `size`, `frames`, `on_complete`, `color`, `fps`, `surface`。
            指定しなかった項目は現在値のまま。

        Raises
        ------
        InvalidStateError
            録画セッション中に呼ばれた場合。
        InvalidOptionError
            値が不正な場合。どちらの場合も設定は変更されない。
        """

        if self._state is RecorderState.ACTIVE:
            raise InvalidStateError("options は録画セッション中には変更できません（stop() の後に呼んでください）")

        surface = opts.pop("surface", None)
        if surface is not None and not isinstance(surface, Surface):
            raise InvalidOptionError(f"surface は Surface を実装している必要があります: got={surface!r}")
        settings = merge_options(self._settings, opts)

        self._state = RecorderState.CONFIGURING
        try:
            self._settings = settings
            if surface is not None:
                self._surface = surface
            self._apply_settings()
        finally:
            self._state = RecorderState.IDLE

    def draw(self, callback: DrawCallback) -> None:
        """フレームごとの描画関数 `callback(surface, t_ms)` を登録する（上書き）。"""

        if not callable(callback):
            raise TypeError(f"draw callback は callable である必要があります: got={callback!r}")
        self._draw_callback = callback

    def setup(self, callback: Hook) -> None:
        """start() 直後（最初のフレームの前）に 1 回呼ぶ関数を登録する（上書き）。"""

        if not callable(callback):
            raise TypeError(f"setup callback は callable である必要があります: got={callback!r}")
        self._setup_hook = callback

    def cleanup(self, callback: Hook) -> None:
        """停止時（アーカイブ確定の前）に 1 回呼ぶ関数を登録する（上書き）。"""

        if not callable(callback):
            raise TypeError(f"cleanup callback は callable である必要があります: got={callback!r}")
        self._teardown_hook = callback

    # --- ライフサイクル ---

    def _check_startable(self) -> None:
        if self._state is RecorderState.ACTIVE:
            raise InvalidStateError("録画セッションは既に開始されています（stop() してから start() してください）")
        if self._draw_callback is None:
            raise MissingCallbackError(
                "描画関数が未登録です（`draw(lambda surface, t: ...)` で登録してください）"
            )

    def start(self) -> None:
        """新しいセッションを開始し、最初の tick を予約する。"""

        self._check_startable()
        loop = asyncio.get_running_loop()

        self._apply_settings()
        settings = self._settings
        session = _Session(
            settings=settings,
            clock=create_frame_clock(record=settings.record, fps=settings.fps),
            archive=ArchiveBuilder(),
            done=loop.create_future(),
        )
        self._session = session
        self._state = RecorderState.ACTIVE
        _logger.info(
            "session started: record=%s fps=%g size=%dx%d frames=%d",
            settings.record,
            settings.fps,
            settings.width,
            settings.height,
            settings.frames,
        )

        hook = self._setup_hook
        if hook is not None:
            try:
                hook()
            except Exception:
                self._abort(session)
                raise

        if session.active:
            self._schedule_tick(session)

    def stop(self) -> None:
        """セッションを停止する。

        Notes
        -----
        - 何度呼んでもよく、draw コールバック内から呼んでもよい（2 回目以降は no-op）。
        - 録画中なら、取り込み中のフレームが書き込まれるのを待ってからアーカイブを確定し、
          `on_complete` を 1 回だけ呼ぶ。取り込み済みフレームが 0 件なら呼ばない。
        - 完了は `await wait()` で待てる。
        """

        session = self._session
        if session is None or not session.active:
            return

        session.active = False
        self._cancel_tick(session)
        self._state = RecorderState.IDLE
        _logger.info("session stopped: frames=%d", session.frame_index)

        try:
            hook = self._teardown_hook
            if hook is not None:
                hook()
        finally:
            if session.settings.record and session.error is None:
                session.finalizer = asyncio.ensure_future(self._finalize(session))
            else:
                self._resolve(session)

    def reset(self) -> None:
        """セッションを強制終了し、設定とコールバックを既定に戻す（on_complete は呼ばない）。"""

        session = self._session
        if session is not None and session.active:
            self._abort(session)

        self._state = RecorderState.CONFIGURING
        try:
            self._settings = RecorderSettings()
            self._draw_callback = None
            self._setup_hook = None
            self._teardown_hook = None
            self._apply_settings()
        finally:
            self._state = RecorderState.IDLE

    def bootstrap(self, target: PresentationTarget | None = None) -> PresentationTarget:
        """surface を表示先へ接続してから start() する。"""

        self._check_startable()
        if target is None:
            factory = self._presenter_factory
            if factory is None:
                raise RuntimeError("表示先が指定されていません（target を渡すか presenter_factory を設定してください）")
            target = factory()
        target.attach(self._surface)
        self._presenter = target
        self.start()
        return target

    async def wait(self) -> None:
        """直近セッションの終了（アーカイブ確定と on_complete を含む）を待つ。

        Raises
        ------
        SerializationError
            フレームの直列化に失敗した場合。
        """

        session = self._session
        if session is None:
            return
        await asyncio.shield(session.done)

    # --- 内部 ---

    def _apply_settings(self) -> None:
        settings = self._settings
        surface = self._surface
        surface.resize(settings.width, settings.height)
        surface.set_clear_color(settings.color)
        surface.clear()

    def _schedule_tick(self, session: _Session) -> None:
        # 予約済み tick は常に高々 1 つ。
        self._cancel_tick(session)
        session.tick = self._scheduler.schedule(functools.partial(self._tick, session))

    def _cancel_tick(self, session: _Session) -> None:
        tick = session.tick
        session.tick = None
        if tick is not None:
            tick.cancel()

    def _tick(self, session: _Session) -> None:
        session.tick = None
        if not session.active or self._session is not session:
            return

        settings = session.settings
        surface = self._surface
        index = session.frame_index
        draw = self._draw_callback

        try:
            t = session.clock.t(index)
            if settings.clear:
                surface.clear()
            if draw is not None:
                draw(surface, t)
            session.frame_index += 1

            # draw 内で stop()/reset() された場合、このフレームは取り込まない。
            if not session.active:
                return

            if settings.record:
                # 直列化は即座にタスク化し、reset() で捨てる場合も取消で確実に閉じる。
                pending = asyncio.ensure_future(surface.serialize_frame())
                session.serialization = pending
                session.capture = asyncio.ensure_future(self._capture(session, index, pending))
                return
        except Exception as exc:
            self._fail(session, exc)
            return

        if settings.bounded and session.frame_index >= settings.frames:
            self.stop()
            return
        self._schedule_tick(session)

    async def _capture(self, session: _Session, index: int, pending: asyncio.Future[bytes]) -> None:
        try:
            data = await pending
            session.serialization = None
        except SerializationError as exc:
            self._fail(session, exc)
            return
        except Exception as exc:
            err = SerializationError(f"フレーム {index} の直列化に失敗しました: {exc}")
            err.__cause__ = exc
            self._fail(session, err)
            return

        name = frame_name(index)
        session.archive.put(name, data)
        session.capture = None
        _logger.debug("captured %s (%d bytes)", name, len(data))

        if not session.active:
            return
        settings = session.settings
        if settings.bounded and len(session.archive) >= settings.frames:
            self.stop()
            return
        self._schedule_tick(session)

    async def _finalize(self, session: _Session) -> None:
        capture = session.capture
        if capture is not None:
            # 取り込み中のフレームを書き終えてから確定する。
            await capture

        if session.error is not None:
            return
        archive = session.archive
        if len(archive) == 0:
            self._resolve(session)
            return

        try:
            frames = len(archive)
            data = archive.finalize()
            on_complete = session.settings.on_complete or save_archive
            result = on_complete(data)
            if inspect.isawaitable(result):
                await result
            _logger.info("archive finalized: frames=%d bytes=%d", frames, len(data))
        except Exception as exc:
            self._fail(session, exc)
            return
        self._resolve(session)

    def _fail(self, session: _Session, exc: BaseException) -> None:
        """セッションを失敗として扱い、以降の tick を止める（例外は wait() で再送出される）。"""

        _logger.error("frame loop halted: %s", exc)
        session.error = exc
        self._cancel_tick(session)
        if not session.done.done():
            session.done.set_exception(exc)
            # ログ済みなので、wait() されずに破棄されても未取得例外として再報告しない。
            session.done.exception()

    def _abort(self, session: _Session) -> None:
        session.active = False
        self._cancel_tick(session)
        capture = session.capture
        serialization = session.serialization
        session.capture = None
        session.serialization = None
        if capture is not None:
            capture.cancel()
        if serialization is not None:
            serialization.cancel()
        self._state = RecorderState.IDLE
        self._resolve(session)

    def _resolve(self, session: _Session) -> None:
        if not session.done.done():
            session.done.set_result(None)


__all__ = ["DrawCallback", "PresentationTarget", "Recorder", "RecorderState"]
