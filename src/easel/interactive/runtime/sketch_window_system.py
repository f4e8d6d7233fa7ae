# どこで: `src/easel/interactive/runtime/sketch_window_system.py`。
# 何を: スケッチの `setup(c)` / `draw(c)` をウィンドウ・レンダラー・入力・録画と結線するサブシステムを提供する。
# なぜ: `src/easel/api/runner.py` の `run()` を「配線」に寄せ、描画責務を独立させるため。

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Callable

from pyglet.window import key

from easel.api.canvas import Canvas
from easel.api.input import window_to_canvas
from easel.interactive.gl.renderer import GLRenderer
from easel.interactive.runtime.recording_system import VideoRecordingSystem
from easel.interactive.runtime.screenshot import (
    default_png_output_path,
    png_output_size,
    save_rgb24_png,
)
from easel.interactive.runtime.video_recorder import default_video_output_path
from easel.interactive.sketch_window import create_sketch_window, display_size

_logger = logging.getLogger(__name__)

SketchCallback = Callable[[Canvas], None]


class SketchWindowSystem:
    """描画ウィンドウのサブシステム。"""

    def __init__(
        self,
        setup: SketchCallback | None,
        draw: SketchCallback,
        *,
        name: str,
        title: str,
        fps: float,
        samples: int,
        window_pos: tuple[int, int],
    ) -> None:
        """window / renderer / canvas を初期化し、`setup(c)` を 1 回呼ぶ。"""

        self._draw = draw
        self._name = str(name)
        self._title = str(title)
        self._window_pos = window_pos
        self._pending_png_save = False

        self.window = create_sketch_window(samples=int(samples), caption=self._title)
        self._renderer = GLRenderer(self.window)

        self._start_time = time.perf_counter()
        self._recording = VideoRecordingSystem(
            output_path=default_video_output_path(self._name, ext="mp4"),
            fps=float(fps),
        )

        self.canvas = Canvas(
            self._renderer,
            display_size=display_size(),
            on_create_canvas=self._on_create_canvas,
            clock=self._t,
        )
        self.window.push_handlers(
            on_key_press=self._on_key_press,
            on_mouse_motion=self._on_mouse_motion,
            on_mouse_drag=self._on_mouse_drag,
            on_mouse_press=self._on_mouse_press,
            on_mouse_release=self._on_mouse_release,
        )

        if setup is not None:
            # setup 中の描画（background 等）も screen に向くよう、フレーム冒頭と同じ準備をする。
            self._renderer.begin_frame()
            setup(self.canvas)
        if not self.window.visible:
            # setup で create_canvas が呼ばれなかった場合は既定サイズで表示する。
            self._on_create_canvas(self.canvas.width, self.canvas.height, self.canvas.mode)
        if self.canvas.description:
            self.window.set_caption(f"{self._title} - {self.canvas.description}")

    # ---------- イベント ----------
    def _on_create_canvas(self, width: int, height: int, mode: str) -> None:
        self.window.set_size(int(width), int(height))
        self.window.set_location(*self._window_pos)
        self.window.set_visible(True)
        _logger.info("canvas created: %dx%d (%s)", width, height, mode)

    def _on_key_press(self, symbol: int, _modifiers: int) -> None:
        if symbol == key.P:
            self._pending_png_save = True
            return
        if symbol == key.V:
            if not self._recording.is_recording:
                self.start_video_recording()
            else:
                self.stop_video_recording()

    def _move_mouse(self, x: int, y: int) -> None:
        cx, cy = window_to_canvas(x, y, window_height=self.window.height)
        self.canvas.mouse.move_to(cx, cy)

    def _on_mouse_motion(self, x: int, y: int, _dx: int, _dy: int) -> None:
        self._move_mouse(x, y)

    def _on_mouse_drag(self, x: int, y: int, _dx: int, _dy: int, _buttons: int, _modifiers: int) -> None:
        self._move_mouse(x, y)

    def _on_mouse_press(self, x: int, y: int, button: int, _modifiers: int) -> None:
        self._move_mouse(x, y)
        self.canvas.mouse.press(button)

    def _on_mouse_release(self, x: int, y: int, _button: int, _modifiers: int) -> None:
        self._move_mouse(x, y)
        self.canvas.mouse.release()

    # ---------- 録画 / 保存 ----------
    def _t(self) -> float:
        if self._recording.is_recording:
            return self._recording.t()
        return time.perf_counter() - self._start_time

    def start_video_recording(self) -> None:
        """動画録画を開始する。"""

        self._recording.start(t0=self._t())

    def stop_video_recording(self) -> None:
        """動画録画を終了する。"""

        try:
            self._recording.stop()
        except RuntimeError:
            _logger.exception("Failed to stop video recording")

    def save_png(self) -> Path:
        """現在の screen 内容を PNG として保存し、保存先パスを返す。"""

        size, data = self._renderer.read_screen()
        path = default_png_output_path(self._name, self.canvas.frame_count)
        return save_rgb24_png(data, size, path, output_size=png_output_size(size))

    # ---------- フレーム ----------
    def draw_frame(self) -> None:
        """1 フレーム分の描画を行う（`flip()` は呼ばない）。"""

        # 注: 呼び出し側（pyglet.window.Window.draw）が事前に self.window.switch_to() 済みである前提。
        self._renderer.begin_frame()

        self.canvas.run_frame(self._draw)

        if self._recording.is_recording:
            size, frame = self._renderer.read_screen()
            try:
                self._recording.write_screen(size, frame)
            except (OSError, RuntimeError, ValueError):
                _logger.exception("Failed to write video frame; recording stopped")
                self.stop_video_recording()

        if self._pending_png_save:
            self._pending_png_save = False
            try:
                path = self.save_png()
                _logger.info("Saved PNG: %s", path)
            except (OSError, ValueError):
                _logger.exception("Failed to save PNG")

    def close(self) -> None:
        """GPU / window 資源を解放する。"""

        if self._recording.is_recording:
            self.stop_video_recording()

        # renderer が保持している GPU リソースを破棄してから window を閉じる。
        try:
            self.canvas.release()
        finally:
            try:
                self._renderer.release()
            finally:
                self.window.close()


__all__ = ["SketchCallback", "SketchWindowSystem"]
