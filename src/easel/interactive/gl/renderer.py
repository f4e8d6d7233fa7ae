# どこで: `src/easel/interactive/gl/renderer.py`。
# 何を: Canvas の Renderer 契約を ModernGL で実装する（塗り / ライティング / ユーザーシェーダ / テキスト / Framebuffer）。
# なぜ: コンテキスト生成・シェーダ設定・メッシュ転送・描画先の切り替えを Canvas から分離し、責務を明確にするため。

from __future__ import annotations

import logging
from collections import OrderedDict
from typing import Any

import moderngl
import numpy as np
import pyglet
from pyglet.window import Window

from easel.api.renderer import Lights, Material, TextStyle
from easel.constants import BASELINE, BOTTOM, CENTER, LEFT, RIGHT, TOP
from easel.core.color import RGBA
from easel.core.projection import to_gl
from easel.core.shapes import text_outline_offsets
from easel.interactive.gl.framebuffer import GLFramebuffer
from easel.interactive.gl.mesh import Mesh
from easel.interactive.gl.programs import (
    FLAT_FRAGMENT_SHADER,
    FLAT_VERTEX_SHADER,
    LIT_FRAGMENT_SHADER,
    LIT_VERTEX_SHADER,
    MAX_DIRECTIONAL_LIGHTS,
)
from easel.interactive.gl.shader import GLShader, write_uniform

_logger = logging.getLogger(__name__)

_ANCHOR_X = {LEFT: "left", CENTER: "center", RIGHT: "right"}
_ANCHOR_Y = {TOP: "top", CENTER: "center", BOTTOM: "bottom", BASELINE: "baseline"}

_QUAD_INDICES = np.array([0, 1, 2, 0, 2, 3], dtype=np.uint32)


def _rgba255(color: RGBA) -> tuple[int, int, int, int]:
    return tuple(int(round(c * 255.0)) for c in color)  # type: ignore[return-value]


class GLRenderer:
    """pyglet ウィンドウの OpenGL コンテキスト上で動く Renderer。"""

    def __init__(self, window: Window) -> None:
        window.switch_to()
        self.window = window
        self.ctx = moderngl.create_context(require=410)
        self.ctx.enable(moderngl.BLEND)
        self.ctx.blend_func = moderngl.SRC_ALPHA, moderngl.ONE_MINUS_SRC_ALPHA

        self.flat_program = self.ctx.program(
            vertex_shader=FLAT_VERTEX_SHADER,
            fragment_shader=FLAT_FRAGMENT_SHADER,
        )
        self.lit_program = self.ctx.program(
            vertex_shader=LIT_VERTEX_SHADER,
            fragment_shader=LIT_FRAGMENT_SHADER,
        )
        self._flat_mesh = Mesh(self.ctx, self.flat_program, "3f", ("in_vert",))
        self._lit_mesh = Mesh(self.ctx, self.lit_program, "3f 3f", ("in_vert", "in_normal"))
        # ユーザーシェーダごとの単位矩形メッシュ。
        self._quad_meshes: dict[int, Mesh] = {}
        # テキストは Label の生成が重いため、文字列とスタイルごとに使い回す（LRU）。
        self._labels: OrderedDict[tuple[Any, ...], pyglet.text.Label] = OrderedDict()
        self._labels_max_items = 256

        self._target: GLFramebuffer | None = None
        self._depth = False

    # ---------- 描画先 ----------
    @property
    def pixel_ratio(self) -> float:
        fb_w, _fb_h = self.framebuffer_size()
        return float(fb_w) / float(max(1, self.window.width))

    def framebuffer_size(self) -> tuple[int, int]:
        getter = getattr(self.window, "get_framebuffer_size", None)
        if callable(getter):
            w, h = getter()
            return int(w), int(h)
        return int(self.window.width), int(self.window.height)

    def resize(self, width: int, height: int, *, depth: bool) -> None:
        """キャンバス寸法とレンダラーモード（深度テストの有無）を反映する。"""
        self._depth = bool(depth)
        if self._depth:
            self.ctx.enable(moderngl.DEPTH_TEST)
        else:
            self.ctx.disable(moderngl.DEPTH_TEST)
        _logger.debug("renderer resize: %dx%d depth=%s", width, height, depth)

    def begin_frame(self) -> None:
        """フレーム冒頭で screen を bind し、深度だけをクリアする。"""
        self._target = None
        self.ctx.screen.use()
        fb_w, fb_h = self.framebuffer_size()
        self.ctx.viewport = (0, 0, fb_w, fb_h)
        if self._depth:
            # 前フレームの色は残し（background を呼ばないスケッチのため）、深度だけを消す。
            screen = self.ctx.screen
            screen.color_mask = (False, False, False, False)
            try:
                screen.clear(depth=1.0)
            finally:
                screen.color_mask = (True, True, True, True)

    def set_target(self, framebuffer: GLFramebuffer | None) -> None:
        self._target = framebuffer
        if framebuffer is None:
            self.ctx.screen.use()
            fb_w, fb_h = self.framebuffer_size()
            self.ctx.viewport = (0, 0, fb_w, fb_h)
            return
        framebuffer.use()
        self.ctx.viewport = (0, 0, *framebuffer.size)

    def clear(self, color: RGBA) -> None:
        target = self.ctx.screen if self._target is None else self._target.fbo
        target.clear(*color, depth=1.0)

    # ---------- 描画 ----------
    def fill_triangles(
        self,
        vertices: np.ndarray,
        indices: np.ndarray,
        *,
        color: RGBA,
        view_projection: np.ndarray,
    ) -> None:
        if indices.size == 0:
            return
        self.flat_program["view_projection"].write(to_gl(view_projection))
        self.flat_program["color"].value = tuple(color)
        self._flat_mesh.upload(vertices, indices)
        self._flat_mesh.render(moderngl.TRIANGLES)

    def lit_triangles(
        self,
        vertices: np.ndarray,
        normals: np.ndarray,
        indices: np.ndarray,
        *,
        material: Material,
        lights: Lights,
        view_projection: np.ndarray,
        camera_position: tuple[float, float, float],
    ) -> None:
        if indices.size == 0:
            return
        program = self.lit_program

        ambient = np.zeros(3, dtype=np.float64)
        for c in lights.ambient:
            ambient += c[:3]
        directional = lights.directional[:MAX_DIRECTIONAL_LIGHTS]
        if len(lights.directional) > MAX_DIRECTIONAL_LIGHTS:
            _logger.warning(
                "directional light は最大 %d 個まで: got=%d",
                MAX_DIRECTIONAL_LIGHTS,
                len(lights.directional),
            )
        directions = np.zeros((MAX_DIRECTIONAL_LIGHTS, 3), dtype=np.float32)
        colors = np.zeros((MAX_DIRECTIONAL_LIGHTS, 3), dtype=np.float32)
        for i, light in enumerate(directional):
            directions[i] = light.direction
            colors[i] = light.color[:3]

        fill = material.fill
        ambient_material = material.ambient if material.ambient is not None else fill

        write_uniform(program, "view_projection", np.asarray(view_projection, dtype="f4").T)
        write_uniform(program, "ambient_light", tuple(float(v) for v in ambient))
        write_uniform(program, "directional_count", len(directional))
        write_uniform(program, "light_directions", directions)
        write_uniform(program, "light_colors", colors)
        write_uniform(program, "fill_color", tuple(fill))
        write_uniform(program, "ambient_material", tuple(ambient_material[:3]))
        write_uniform(
            program,
            "specular_material",
            tuple(material.specular[:3]) if material.specular is not None else (0.0, 0.0, 0.0),
        )
        write_uniform(program, "use_specular", 1.0 if material.specular is not None else 0.0)
        write_uniform(program, "shininess", float(material.shininess))
        write_uniform(program, "camera_position", tuple(camera_position))

        interleaved = np.hstack(
            [np.asarray(vertices, dtype=np.float32), np.asarray(normals, dtype=np.float32)]
        )
        self._lit_mesh.upload(interleaved, indices)
        self._lit_mesh.render(moderngl.TRIANGLES)

    def shaded_quad(self, shader: GLShader, vertices: np.ndarray, tex_coords: np.ndarray) -> None:
        mesh = self._quad_meshes.get(id(shader))
        if mesh is None:
            layout, attributes = shader.vertex_layout()
            mesh = Mesh(self.ctx, shader.program, layout, attributes, initial_reserve=4096)
            self._quad_meshes[id(shader)] = mesh
        shader.bind()
        interleaved = np.hstack(
            [np.asarray(vertices, dtype=np.float32), np.asarray(tex_coords, dtype=np.float32)]
        )
        mesh.upload(interleaved, _QUAD_INDICES)
        mesh.render(moderngl.TRIANGLES)

    def text(
        self,
        text: str,
        position: tuple[float, float],
        *,
        rotation: float,
        style: TextStyle,
    ) -> None:
        key = (text, round(style.size, 3), style.align_x, style.align_y)
        label = self._labels.get(key)
        if label is None:
            label = pyglet.text.Label(
                text,
                font_size=style.size,
                anchor_x=_ANCHOR_X.get(style.align_x, "left"),
                anchor_y=_ANCHOR_Y.get(style.align_y, "baseline"),
            )
            self._labels[key] = label
            while len(self._labels) > self._labels_max_items:
                _, evicted = self._labels.popitem(last=False)
                evicted.delete()
        else:
            self._labels.move_to_end(key)

        x, y = position
        # pyglet は左下原点なので y を反転する。回転はどちらも時計回りが正。
        base_x, base_y = float(x), float(self.window.height) - float(y)
        label.rotation = float(rotation)
        if style.stroke is not None:
            # 輪郭は stroke 色のラベルを円周上にずらして重ね、その上に塗りを描く。
            label.color = _rgba255(style.stroke)
            for dx, dy in text_outline_offsets(style.stroke_weight):
                label.position = (base_x + dx, base_y + dy, 0.0)
                label.draw()
        if style.color is not None:
            label.color = _rgba255(style.color)
            label.position = (base_x, base_y, 0.0)
            label.draw()

    # ---------- GPU オブジェクト ----------
    def create_framebuffer(self, width: int, height: int) -> GLFramebuffer:
        return GLFramebuffer(self.ctx, width, height, pixel_ratio=self.pixel_ratio)

    def create_shader(self, vertex_source: str, fragment_source: str) -> GLShader:
        try:
            return GLShader(self.ctx, vertex_source, fragment_source)
        except moderngl.Error:
            _logger.exception("shader のコンパイルに失敗しました")
            raise

    def read_screen(self) -> tuple[tuple[int, int], bytes]:
        """screen の RGB バイト列（下の行から）を返す。"""
        size = self.framebuffer_size()
        data = self.ctx.screen.read(viewport=(0, 0, *size), components=3, alignment=1)
        return size, data

    def release(self) -> None:
        """GPU リソースを解放する。"""
        for label in self._labels.values():
            label.delete()
        self._labels.clear()
        for mesh in self._quad_meshes.values():
            mesh.release()
        self._quad_meshes.clear()
        self._flat_mesh.release()
        self._lit_mesh.release()
        self.flat_program.release()
        self.lit_program.release()
        self.ctx.release()


__all__ = ["GLRenderer"]
