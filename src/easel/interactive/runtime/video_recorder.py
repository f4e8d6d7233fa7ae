# どこで: `src/easel/interactive/runtime/video_recorder.py`。
# 何を: `GLRenderer.read_screen()` の (size, RGB24) を上下反転して ffmpeg へ流し、動画として保存する。
# なぜ: スケッチのプレビューを、設定 fps の一定間隔で並んだ動画として残せるようにするため。

from __future__ import annotations

import logging
import subprocess
from collections.abc import Callable
from pathlib import Path
from typing import Any

import numpy as np

from easel.core.runtime_config import output_root_dir

_logger = logging.getLogger(__name__)


def default_video_output_path(sketch_name: str, *, ext: str = "mp4") -> Path:
    """`{output_root}/video/{sketch_name}.{ext}` を返す。"""

    suffix = str(ext).lstrip(".") or "mp4"
    return output_root_dir() / "video" / f"{sketch_name}.{suffix}"


def _ffmpeg_command(*, output_path: Path, size: tuple[int, int], fps: float) -> list[str]:
    width, height = size
    source = ["-f", "rawvideo", "-pix_fmt", "rgb24", "-s", f"{width}x{height}", "-r", f"{fps:g}", "-i", "pipe:0"]
    encode = ["-an", "-c:v", "libx264", "-pix_fmt", "yuv420p"]
    return ["ffmpeg", "-hide_banner", "-loglevel", "error", "-y", *source, *encode, str(output_path)]


def flip_rows(data: bytes, size: tuple[int, int]) -> bytes:
    """下の行から並んだ RGB24 を上の行から並ぶ順へ入れ替える。"""

    width, height = size
    rows = np.frombuffer(data, dtype=np.uint8).reshape(height, width * 3)
    return rows[::-1].tobytes()


class VideoRecorder:
    """画面フレームを 1 本の動画へ書き出す録画器。

    ffmpeg は最初の `write_screen()` で起動し、そのフレームの寸法が動画の寸法になる。
    1 フレーム書くごとに動画上の時刻が `1 / fps` 秒進む。

    Parameters
    ----------
    output_path : Path
        保存先。親ディレクトリは ffmpeg 起動時に作られる。
    fps : float
        動画のフレームレート。
    popen : Callable[..., Any]
        ffmpeg プロセスの起動関数。既定は `subprocess.Popen`。
    """

    def __init__(
        self,
        *,
        output_path: Path,
        fps: float,
        popen: Callable[..., Any] = subprocess.Popen,
    ) -> None:
        _fps = float(fps)
        if _fps <= 0:
            raise ValueError(f"fps は正の値である必要がある: got={fps!r}")
        self.path = Path(output_path)
        self.fps = _fps
        self.frame_count = 0
        self._popen = popen
        self._proc: Any = None
        self._size: tuple[int, int] | None = None
        self._closed = False

    @property
    def size(self) -> tuple[int, int] | None:
        """動画の (width, height)。最初のフレーム前は None。"""
        return self._size

    @property
    def seconds(self) -> float:
        """書き込んだフレーム数から求めた動画の長さ（秒）。"""
        return self.frame_count / self.fps

    def write_screen(self, size: tuple[int, int], data: bytes) -> None:
        """`read_screen()` の戻り値 1 フレーム分を書き込む。"""

        if self._closed:
            raise RuntimeError("録画は終了しています")
        w, h = int(size[0]), int(size[1])
        if w <= 0 or h <= 0:
            raise ValueError(f"frame size は正の値である必要がある: got={size!r}")
        if len(data) != w * h * 3:
            raise ValueError(f"RGB24 のバイト数が size と一致しません: got={len(data)}, size={(w, h)}")
        if self._size is None:
            self._start((w, h))
        elif (w, h) != self._size:
            raise ValueError(f"録画中にフレームサイズが変わりました: {self._size} -> {(w, h)}")

        self._proc.stdin.write(flip_rows(data, (w, h)))
        self.frame_count += 1

    def _start(self, size: tuple[int, int]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        cmd = _ffmpeg_command(output_path=self.path, size=size, fps=self.fps)
        try:
            proc = self._popen(cmd, stdin=subprocess.PIPE, stdout=subprocess.DEVNULL, stderr=subprocess.PIPE)
        except FileNotFoundError as e:
            raise RuntimeError("ffmpeg が見つかりません（PATH を確認してください）") from e
        if proc.stdin is None:
            raise RuntimeError("ffmpeg stdin pipe の作成に失敗しました")
        self._proc = proc
        self._size = size
        _logger.debug("ffmpeg started: %s", " ".join(cmd))

    def close(self) -> int:
        """ffmpeg の終了を待ち、書き込んだフレーム数を返す。"""

        self._closed = True
        proc = self._proc
        if proc is None:
            return self.frame_count
        self._proc = None

        _stdout, stderr = proc.communicate()
        if proc.returncode != 0:
            details = stderr.decode("utf-8", errors="replace").strip() if stderr else ""
            raise RuntimeError(f"ffmpeg が失敗しました (code={proc.returncode}). {details}".strip())
        return self.frame_count


__all__ = ["VideoRecorder", "default_video_output_path", "flip_rows"]
