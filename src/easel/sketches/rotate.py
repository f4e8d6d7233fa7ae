"""
どこで: `src/easel/sketches/rotate.py`。
何を: 座標系をキャンバス中央へ移動してから回転し、角度ごとの線分とラベル、毎フレーム回る線を描く。
なぜ: `translate()` / `rotate()` と `push()` / `pop()` による座標系の保存・復元を示すため。
"""

from __future__ import annotations

from easel import CENTER, DEGREES, HSB, Canvas, run

TITLE = "Rotate"

WIDTH = 720
HEIGHT = 400
LINE_LENGTH = 150
LABEL_X = 170
ANGLES = (0, 30, 60, 90)


def setup(c: Canvas) -> None:
    c.create_canvas(WIDTH, HEIGHT)
    c.angle_mode(DEGREES)

    # ラベル用の文字色・サイズ・揃え
    c.fill(255)
    c.text_size(20)
    c.text_align(CENTER, CENTER)

    c.color_mode(HSB)
    c.describe("line segments rotated around center of canvas")


def draw(c: Canvas) -> None:
    c.background(0)

    for angle in ANGLES:
        with c.pushed():
            c.translate(c.width / 2, c.height / 2)
            c.rotate(angle)

            # 角度に応じた色で x 軸方向に線を引く
            c.stroke(angle + 100, 100, 100)
            c.stroke_weight(5)
            c.line(0, 0, LINE_LENGTH, 0)

            c.stroke_weight(1)
            c.text(angle, LABEL_X, 0)

    # 1 フレーム 1 度ずつ回る線
    c.translate(c.width / 2, c.height / 2)
    c.rotate(c.frame_count)
    c.stroke(255)
    c.stroke_weight(5)
    c.line(0, 0, LINE_LENGTH, 0)


if __name__ == "__main__":
    run(setup, draw, title=TITLE)
