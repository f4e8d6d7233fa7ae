# どこで: `src/easel/constants.py`。
# 何を: Canvas のモード指定に使う定数を定義する。
# なぜ: スケッチと Canvas 実装で同じ識別子を共有するため。

from __future__ import annotations

# レンダラー
P2D = "p2d"
WEBGL = "webgl"

# 角度
DEGREES = "degrees"
RADIANS = "radians"

# 色空間
RGB = "rgb"
HSB = "hsb"

# rect / ellipse の座標解釈
CORNER = "corner"
CORNERS = "corners"
CENTER = "center"
RADIUS = "radius"

# テキスト揃え
LEFT = "left"
RIGHT = "right"
TOP = "top"
BOTTOM = "bottom"
BASELINE = "baseline"

SHAPE_MODES = (CORNER, CORNERS, CENTER, RADIUS)
HORIZONTAL_ALIGNS = (LEFT, CENTER, RIGHT)
VERTICAL_ALIGNS = (TOP, CENTER, BOTTOM, BASELINE)
