"""
どこで: `src/easel/sketches/constrain.py`。
何を: マウス位置に円を描きつつ、円が矩形の内側からはみ出さないように座標を制限する。
なぜ: `constrain()` による値の範囲制限を示すため。
"""

from __future__ import annotations

from easel import CORNERS, RADIUS, Canvas, run
from easel.core.numeric import clamp_to_rect

TITLE = "Constrain"

WIDTH = 720
HEIGHT = 400

# 円の半径
radius = 24
# 矩形の辺とキャンバスの辺の距離
edge = 100
# 円が矩形の辺に接するときの、円の中心とキャンバスの辺の距離
inner = edge + radius


def circle_position(mouse_x: float, mouse_y: float, width: float, height: float) -> tuple[float, float]:
    """マウス座標を矩形の内側（円が収まる範囲）に制限した円の中心を返す。"""
    return clamp_to_rect(mouse_x, mouse_y, inner=inner, size=(width, height))


def setup(c: Canvas) -> None:
    c.create_canvas(WIDTH, HEIGHT)
    c.no_stroke()

    # circle() の第 3 引数を半径として、rect() を対角の 2 点で指定する
    c.ellipse_mode(RADIUS)
    c.rect_mode(CORNERS)

    c.describe(
        "Pink rectangle on a grey background. "
        "A user uses their mouse to move a white circle within the pink rectangle."
    )


def draw(c: Canvas) -> None:
    c.background(230)

    c.fill(237, 34, 93)
    c.rect(edge, edge, c.width - edge, c.height - edge)

    x, y = circle_position(c.mouse_x, c.mouse_y, c.width, c.height)
    c.fill(255)
    c.circle(x, y, radius)


if __name__ == "__main__":
    run(setup, draw, title=TITLE)
