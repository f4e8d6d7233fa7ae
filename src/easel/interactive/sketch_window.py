# どこで: `src/easel/interactive/sketch_window.py`。
# 何を: スケッチ用の pyglet ウィンドウ生成と、ディスプレイ寸法の取得を行う。
# なぜ: interactive 依存をこの層に閉じ込め、Canvas/core をヘッドレスに保つため。

from __future__ import annotations

import pyglet
from pyglet.gl import Config
from pyglet.window import Window


def create_sketch_window(*, samples: int, caption: str) -> Window:
    """非表示の描画ウィンドウを生成する。

    Notes
    -----
    寸法は `create_canvas()` で確定するため、ここでは仮のサイズで作り、表示は後から行う。
    """
    if samples > 0:
        # 図形の縁を滑らかにするために MSAA を有効化
        config = Config(double_buffer=True, depth_size=24, sample_buffers=1, samples=int(samples))  # type: ignore[abstract]
    else:
        config = Config(double_buffer=True, depth_size=24)  # type: ignore[abstract]
    return pyglet.window.Window(  # type: ignore[abstract]
        width=100,
        height=100,
        resizable=False,
        visible=False,
        caption=caption,
        config=config,
    )


def display_size() -> tuple[int, int]:
    """既定スクリーンの寸法を返す。"""
    screen = pyglet.display.get_display().get_default_screen()
    return int(screen.width), int(screen.height)


__all__ = ["create_sketch_window", "display_size"]
