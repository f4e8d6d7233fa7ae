# どこで: `src/easel/sketches/__init__.py`。
# 何を: 例題スケッチを名前で列挙・読み込むレジストリ。
# なぜ: CLI やテストから `python -m easel rotate` のように名前だけで実行できるようにするため。

from __future__ import annotations

import importlib

from easel.api.sketch import Sketch

_MODULES: dict[str, str] = {
    "rotate": "easel.sketches.rotate",
    "constrain": "easel.sketches.constrain",
    "framebuffer_blur": "easel.sketches.framebuffer_blur",
}


def available() -> tuple[str, ...]:
    """登録済みスケッチ名を返す。"""
    return tuple(sorted(_MODULES))


def load(name: str) -> Sketch:
    """名前からスケッチを読み込む。

    Raises
    ------
    KeyError
        未登録の名前が渡された場合。
    """
    module_name = _MODULES.get(str(name))
    if module_name is None:
        raise KeyError(f"未登録のスケッチ: {name!r}（choices={', '.join(available())}）")
    module = importlib.import_module(module_name)
    return Sketch.from_module(module, name=str(name))


__all__ = ["available", "load"]
