"""
どこで: `src/easel/sketches/framebuffer_blur.py`。
何を: 5 つの球を Framebuffer に描き、その色と深度をシェーダへ渡して被写界深度ぼかしを掛ける。
なぜ: Framebuffer の深度テクスチャをシェーダの入力に使う流れを示すため。

Notes
-----
実カメラと同じく、焦点（depth=0.9）より手前や奥にある物体ほど強くぼける。
ぼかしの計算は `easel.core.depth_blur` に CPU 版と同じ定数で定義されている。
"""

from __future__ import annotations

from easel import DEGREES, WEBGL, Canvas, run
from easel.core.depth_blur import VERTEX_SHADER, fragment_shader_source

TITLE = "Blur using Framebuffer Depth"

SPHERE_COUNT = 5

# setup で生成し、draw で使う
layer = None
blur = None


def setup(c: Canvas) -> None:
    global layer, blur

    c.create_canvas(c.window_width, c.window_height, WEBGL)
    c.angle_mode(DEGREES)
    c.no_stroke()

    layer = c.create_framebuffer()
    blur = c.create_shader(VERTEX_SHADER, fragment_shader_source())

    c.describe(
        "A row of five spheres rotating in front of the camera. "
        "The closest and farthest spheres from the camera appear blurred."
    )


def sphere_positions(width: float) -> list[float]:
    """キャンバス幅に等間隔で並ぶ球の x 座標（中心原点）を返す。"""
    spacing = width / (SPHERE_COUNT - 1)
    return [-width / 2 + i * spacing for i in range(SPHERE_COUNT)]


def draw(c: Canvas) -> None:
    if layer is None or blur is None:
        raise RuntimeError("setup() が呼ばれていません")

    with layer:
        c.background(255)
        c.ambient_light(100)
        c.directional_light(255, 255, 255, -1, 1, -1)
        c.ambient_material(255, 0, 0)
        c.fill(255, 255, 100)
        c.specular_material(255)
        c.shininess(150)

        # 1 フレーム 1 度ずつ回す
        c.rotate_y(c.frame_count)

        for x in sphere_positions(c.width):
            with c.pushed():
                c.translate(x, 0, 0)
                c.sphere()

    # Framebuffer の色と深度をぼかしシェーダへ渡し、キャンバス全体に描く
    blur.set_uniform("img", layer.color)
    blur.set_uniform("depth", layer.depth)
    c.shader(blur)
    c.rect(0, 0, c.width, c.height)


if __name__ == "__main__":
    run(setup, draw, title=TITLE)
