# どこで: `src/easel/__init__.py`。
# 何を: ルート `easel` パッケージを定義し、スケッチから使う公開 API を再エクスポートする。
# なぜ: スケッチ側の import を `from easel import ...` に統一するため。

from __future__ import annotations

from easel.api import Canvas, run
from easel.constants import (
    BASELINE,
    BOTTOM,
    CENTER,
    CORNER,
    CORNERS,
    DEGREES,
    HSB,
    LEFT,
    P2D,
    RADIANS,
    RADIUS,
    RGB,
    RIGHT,
    TOP,
    WEBGL,
)

__all__ = [
    "BASELINE",
    "BOTTOM",
    "CENTER",
    "CORNER",
    "CORNERS",
    "Canvas",
    "DEGREES",
    "HSB",
    "LEFT",
    "P2D",
    "RADIANS",
    "RADIUS",
    "RGB",
    "RIGHT",
    "TOP",
    "WEBGL",
    "run",
]
