"""
どこで: `src/easel/api/sketch.py`。
何を: `setup(c)` / `draw(c)` の組を表す Sketch レコードと、モジュールからの生成を提供する。
なぜ: 例題スケッチをモジュール単位で定義し、CLI やテストから名前で扱えるようにするため。
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from types import ModuleType
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from easel.api.canvas import Canvas


@dataclass(frozen=True, slots=True)
class Sketch:
    """1 つの例題スケッチ。

    Parameters
    ----------
    name : str
        CLI や出力ファイル名に使う識別子。
    draw : Callable[[Canvas], None]
        毎フレーム呼ばれる描画関数。
    setup : Callable[[Canvas], None] | None
        最初に 1 回だけ呼ばれる初期化関数。
    title : str
        ウィンドウタイトル。
    """

    name: str
    draw: Callable[["Canvas"], None]
    setup: Callable[["Canvas"], None] | None = None
    title: str = ""

    @classmethod
    def from_module(cls, module: ModuleType, *, name: str | None = None) -> "Sketch":
        """`setup` / `draw` / `TITLE` を持つモジュールから Sketch を作る。"""

        draw = getattr(module, "draw", None)
        if not callable(draw):
            raise TypeError(f"スケッチモジュールに draw(c) がありません: {module.__name__}")
        setup = getattr(module, "setup", None)
        if setup is not None and not callable(setup):
            raise TypeError(f"setup は呼び出し可能である必要があります: {module.__name__}")
        sketch_name = name or module.__name__.rsplit(".", 1)[-1]
        title = str(getattr(module, "TITLE", "") or sketch_name)
        return cls(name=sketch_name, draw=draw, setup=setup, title=title)


__all__ = ["Sketch"]
