# どこで: `src/easel/interactive/runtime/recording_system.py`。
# 何を: V キー録画の開始/停止と、録画中に `millis()` が参照する時刻を管理する。
# なぜ: 録画中は描画の重さに関係なく、動画上の 1 フレームが `1 / fps` 秒になるようにするため。

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

from easel.interactive.runtime.video_recorder import VideoRecorder

_logger = logging.getLogger(__name__)


class VideoRecordingSystem:
    """録画中かどうかと、録画開始時刻 `t0` を持つ。"""

    def __init__(
        self,
        *,
        output_path: Path,
        fps: float,
        recorder_factory: Callable[..., VideoRecorder] = VideoRecorder,
    ) -> None:
        self._output_path = Path(output_path)
        self._fps = float(fps)
        self._recorder_factory = recorder_factory
        self._recorder: VideoRecorder | None = None
        self._t0 = 0.0

    @property
    def is_recording(self) -> bool:
        return self._recorder is not None

    def t(self) -> float:
        """録画開始時刻に、書き込み済みフレーム分の時間を足した値（秒）。"""

        recorder = self._recorder
        if recorder is None:
            raise RuntimeError("録画は開始されていません")
        return self._t0 + recorder.seconds

    def start(self, *, t0: float) -> None:
        """`t0` 秒から続くタイムラインで録画を開始する。録画中なら何もしない。"""

        if self._recorder is not None:
            return
        self._recorder = self._recorder_factory(output_path=self._output_path, fps=self._fps)
        self._t0 = float(t0)
        _logger.info("Started video recording: %s (fps=%g)", self._output_path, self._fps)

    def write_screen(self, size: tuple[int, int], data: bytes) -> None:
        """画面 1 フレームを書き込む。録画中でなければ何もしない。"""

        if self._recorder is not None:
            self._recorder.write_screen(size, data)

    def stop(self) -> None:
        """録画を終了する。"""

        recorder = self._recorder
        if recorder is None:
            return
        self._recorder = None
        frames = recorder.close()
        _logger.info("Saved video: %s (frames=%d, seconds=%.3f)", recorder.path, frames, recorder.seconds)


__all__ = ["VideoRecordingSystem"]
