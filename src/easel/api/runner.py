"""
どこで: `src/easel/api/runner.py`。公開 API のランナー実装。
何を: pyglet + ModernGL を使い、`setup(c)` を 1 回、`draw(c)` を毎フレーム呼んでウィンドウに描画する。
なぜ: スケッチファイルを実行して実際にプレビューできる経路を用意するため。
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

import pyglet

from easel.api.canvas import Canvas
from easel.api.sketch import Sketch
from easel.core.logging import setup_default_logging
from easel.core.runtime_config import runtime_config, set_config_path
from easel.interactive.runtime.sketch_window_system import SketchWindowSystem
from easel.interactive.runtime.window_loop import WindowLoop, WindowTask

_logger = logging.getLogger(__name__)


def run(
    setup: Callable[[Canvas], None] | None,
    draw: Callable[[Canvas], None],
    *,
    name: str | None = None,
    title: str | None = None,
    config_path: str | Path | None = None,
    fps: float | None = None,
) -> None:
    """pyglet ウィンドウを生成し、スケッチをリアルタイム描画する。

    Parameters
    ----------
    setup : Callable[[Canvas], None] | None
        最初に 1 回だけ呼ばれる関数。`c.create_canvas(...)` でキャンバス寸法を決める。
    draw : Callable[[Canvas], None]
        毎フレーム呼ばれる描画関数。
    name : str | None
        出力ファイル名（PNG / 動画）に使う識別子。None の場合は draw の定義元モジュール名。
    title : str | None
        ウィンドウタイトル。None の場合は name。
    config_path : str | Path | None
        設定ファイル（config.yaml）のパス。指定した場合は探索より優先する。
    fps : float | None
        目標フレームレート。None の場合は config の `runtime.fps`。

    Returns
    -------
    None
        ウィンドウを閉じると制御を返す。
    """

    set_config_path(config_path)
    cfg = runtime_config()
    setup_default_logging(cfg.log_level)

    sketch_name = name or str(getattr(draw, "__module__", "sketch")).rsplit(".", 1)[-1]
    _fps = float(cfg.fps if fps is None else fps)

    # pyglet の Window 作成前にオプションを設定する。
    pyglet.options["vsync"] = False

    system = SketchWindowSystem(
        setup,
        draw,
        name=sketch_name,
        title=title or sketch_name,
        fps=_fps,
        samples=cfg.window_samples,
        window_pos=cfg.window_pos,
    )
    _logger.info("running sketch: %s (fps=%g)", sketch_name, _fps)

    loop = WindowLoop(WindowTask(window=system.window, draw_frame=system.draw_frame), fps=_fps)
    try:
        loop.run()
    finally:
        # 例外でも確実に後始末する。
        system.close()


def run_sketch(
    sketch: Sketch,
    *,
    config_path: str | Path | None = None,
    fps: float | None = None,
) -> None:
    """Sketch レコードを実行する。"""

    run(
        sketch.setup,
        sketch.draw,
        name=sketch.name,
        title=sketch.title,
        config_path=config_path,
        fps=fps,
    )
