# どこで: `src/easel/api/__init__.py`。
# 何を: 公開 API パッケージのエントリポイントとして Canvas / Sketch / run を再エクスポートする。
# なぜ: ユーザーコードからシンプルに API を import できるようにするため。

from __future__ import annotations

from .canvas import Canvas, Framebuffer
from .sketch import Sketch

__all__ = ["Canvas", "Framebuffer", "Sketch", "run", "run_sketch"]


def run(*args, **kwargs):
    """公開 run API へのラッパ（遅延インポートで GUI 依存を後回しにする）。"""

    from .runner import run as _run

    return _run(*args, **kwargs)


def run_sketch(*args, **kwargs):
    """Sketch レコードを実行するラッパ（遅延インポート）。"""

    from .runner import run_sketch as _run_sketch

    return _run_sketch(*args, **kwargs)
