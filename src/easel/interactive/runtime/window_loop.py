# どこで: `src/easel/interactive/runtime/window_loop.py`。
# 何を: pyglet の app loop（`pyglet.app.run()`）で描画ウィンドウを一定間隔で回す最小ランナーを提供する。
# なぜ: OS 依存のイベント配送を pyglet に任せ、フレーム駆動（setup 1 回 → draw 毎フレーム）を単純に保つため。

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

import pyglet


@dataclass(frozen=True, slots=True)
class WindowTask:
    """pyglet window と「flip しない描画関数」を束ねる。"""

    # 注: pyglet の Window 型は環境/バージョン差があるため Any に寄せる。
    window: Any

    # 1フレーム分の描画処理（back buffer へ描くだけ）。
    # `switch_to()` / `flip()` は pyglet（`Window.draw()`）が担当する前提。
    draw_frame: Callable[[], None]


class WindowLoop:
    """ウィンドウを閉じるまで一定 fps で描画を回す。"""

    def __init__(self, task: WindowTask, *, fps: float) -> None:
        """ループを初期化する。

        Parameters
        ----------
        task : WindowTask
            1 フレームごとに描画したいウィンドウと描画処理。
        fps : float
            目標フレームレート。`<=0` の場合はスロットリングしない。
        """

        self._task = task
        self._fps = float(fps)
        self._error: BaseException | None = None

    def run(self) -> None:
        """ウィンドウが閉じられるまでループを実行する。

        Raises
        ------
        BaseException
            描画中に送出された例外。ループを止めてから呼び出し元へ再送出する。
        """

        task = self._task

        def request_exit(*_: object) -> None:
            # pyglet の on_close から呼ばれるコールバックは引数が来る場合があるため *args を受ける。
            pyglet.app.exit()

        def on_draw() -> None:
            try:
                task.draw_frame()
            except Exception as exc:
                # pyglet のイベントハンドラ内で送出するとループが中途半端に残るため、記録して止める。
                self._error = exc
                pyglet.app.exit()

        task.window.push_handlers(on_close=request_exit, on_draw=on_draw)

        def draw_all(dt: float) -> None:
            if self._error is not None:
                return
            # 閉じられたウィンドウへ draw すると例外になり得るため、開いているときだけ描く。
            if task.window not in pyglet.app.windows:
                return
            task.window.draw(dt)

        if self._fps <= 0:
            pyglet.clock.schedule(draw_all)
        else:
            pyglet.clock.schedule_interval(draw_all, 1.0 / float(self._fps))

        try:
            pyglet.app.run(interval=None)
        finally:
            pyglet.clock.unschedule(draw_all)

        if self._error is not None:
            raise self._error
