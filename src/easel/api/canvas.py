"""
どこで: `src/easel/api/canvas.py`。スケッチの `setup(c)` / `draw(c)` が受け取る Canvas。
何を: 描画状態（色・モード・行列スタック・ライト・シェーダ・描画先）を保持し、
     図形呼び出しを変換済みの三角形メッシュにして Renderer へ委譲する即時モード API を提供する。
なぜ: スケッチを「順に描画命令を呼ぶだけ」の素直なコードとして書けるようにし、
     GPU 実装（interactive.gl）と切り離してテストできるようにするため。
"""

from __future__ import annotations

import logging
import math
import time
from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass, replace
from typing import Any

import numpy as np

from easel.api.input import MouseState
from easel.api.renderer import (
    DirectionalLight,
    FramebufferHandle,
    Lights,
    Material,
    Renderer,
    ShaderHandle,
    TextStyle,
)
from easel.constants import (
    BASELINE,
    CENTER,
    CORNER,
    DEGREES,
    HORIZONTAL_ALIGNS,
    LEFT,
    P2D,
    RADIANS,
    SHAPE_MODES,
    VERTICAL_ALIGNS,
    WEBGL,
)
from easel.core import shapes
from easel.core.color import RGBA, ColorState
from easel.core.projection import camera_distance, ortho_projection, perspective_camera
from easel.core.transform import (
    MatrixStack,
    apply,
    normal_matrix,
    rotation_x,
    rotation_y,
    rotation_z,
    scaling,
    translation,
)

_logger = logging.getLogger(__name__)

DEFAULT_CANVAS_SIZE = (100, 100)
DEFAULT_SPHERE_RADIUS = 50.0

# aPosition / aTexCoord 付きの単位矩形（ユーザーシェーダ用）。
_UNIT_QUAD = np.array(
    [[0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [1.0, 1.0, 0.0], [0.0, 1.0, 0.0]],
    dtype=np.float32,
)
_UNIT_QUAD_UV = np.array([[0.0, 0.0], [1.0, 0.0], [1.0, 1.0], [0.0, 1.0]], dtype=np.float32)


@dataclass(frozen=True, slots=True)
class _Style:
    """push/pop で保存・復元する描画スタイル。"""

    fill: RGBA | None = (1.0, 1.0, 1.0, 1.0)
    stroke: RGBA | None = (0.0, 0.0, 0.0, 1.0)
    stroke_weight: float = 1.0
    rect_mode: str = CORNER
    ellipse_mode: str = CENTER
    text_size: float = 12.0
    text_align_x: str = LEFT
    text_align_y: str = BASELINE
    ambient_material: RGBA | None = None
    specular_material: RGBA | None = None
    shininess: float = 1.0
    shader: ShaderHandle | None = None


@dataclass(frozen=True, slots=True)
class _Saved:
    """push() 1 回分の保存内容。"""

    style: _Style
    color_mode: str
    ambient_lights: tuple[RGBA, ...]
    directional_lights: tuple[DirectionalLight, ...]


class Framebuffer:
    """オフスクリーン描画先。`begin()`〜`end()` の間の描画がここへ向かう。

    `with fb:` でも同じ範囲を表せる。
    """

    def __init__(self, canvas: "Canvas", handle: FramebufferHandle) -> None:
        self._canvas = canvas
        self._handle = handle

    @property
    def handle(self) -> FramebufferHandle:
        return self._handle

    @property
    def width(self) -> int:
        return int(self._handle.width)

    @property
    def height(self) -> int:
        return int(self._handle.height)

    @property
    def color(self) -> Any:
        """色テクスチャ。`Shader.set_uniform` に渡せる。"""
        return self._handle.color

    @property
    def depth(self) -> Any:
        """深度テクスチャ。`Shader.set_uniform` に渡せる。"""
        return self._handle.depth

    def begin(self) -> None:
        self._canvas._begin_framebuffer(self)

    def end(self) -> None:
        self._canvas._end_framebuffer(self)

    def __enter__(self) -> "Framebuffer":
        self.begin()
        return self

    def __exit__(self, *_exc: object) -> None:
        self.end()

    def release(self) -> None:
        self._handle.release()


class Canvas:
    """即時モードの描画 API。

    Parameters
    ----------
    renderer : Renderer
        描画命令の委譲先。
    display_size : tuple[int, int]
        画面（ディスプレイ）の寸法。`window_width` / `window_height` として参照される。
    on_create_canvas : Callable[[int, int, str], None] | None
        `create_canvas()` 時に呼ばれるフック（ウィンドウのリサイズ/表示など）。
    clock : Callable[[], float] | None
        経過秒を返す関数。`millis()` が参照する。None の場合は生成時刻からの実時間。
    """

    def __init__(
        self,
        renderer: Renderer,
        *,
        display_size: tuple[int, int] = (1280, 720),
        on_create_canvas: Callable[[int, int, str], None] | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self._renderer = renderer
        self._display_size = (int(display_size[0]), int(display_size[1]))
        self._on_create_canvas = on_create_canvas
        if clock is None:
            start = time.perf_counter()
            clock = lambda: time.perf_counter() - start  # noqa: E731
        self._clock = clock

        self._width, self._height = DEFAULT_CANVAS_SIZE
        self._mode = P2D
        self._angle_mode = RADIANS
        self._color = ColorState()
        self._style = _Style()
        self._saved: list[_Saved] = []
        self._matrix = MatrixStack()
        self._ambient_lights: list[RGBA] = []
        self._directional_lights: list[DirectionalLight] = []
        self._framebuffer: Framebuffer | None = None
        self._framebuffers: list[Framebuffer] = []
        self._shaders: list[ShaderHandle] = []

        self.mouse = MouseState()
        self.frame_count = 0
        self.description: str | None = None

    # ---------- ライフサイクル ----------
    def create_canvas(self, width: int, height: int, mode: str = P2D) -> None:
        """描画面を生成する。`setup()` の最初で 1 回呼ぶ。"""

        w, h = int(width), int(height)
        if w <= 0 or h <= 0:
            raise ValueError(f"canvas size は正の値である必要がある: got={(width, height)}")
        if mode not in (P2D, WEBGL):
            raise ValueError(f"未対応のレンダラーモード: {mode!r}")
        self._width, self._height = w, h
        self._mode = mode
        self._renderer.resize(w, h, depth=mode == WEBGL)
        if self._on_create_canvas is not None:
            self._on_create_canvas(w, h, mode)
        _logger.debug("create_canvas: %dx%d mode=%s", w, h, mode)

    def describe(self, text: str) -> None:
        """キャンバス内容の説明文（スクリーンリーダー向け）を設定する。"""

        self.description = str(text)
        _logger.info("describe: %s", self.description)

    def begin_frame(self) -> None:
        """フレーム開始時の状態リセット（ランナーが `draw()` の前に呼ぶ）。"""

        if self._framebuffer is not None:
            raise RuntimeError("前フレームの Framebuffer.begin() に対応する end() がありません")
        self.frame_count += 1
        self._matrix.clear()
        self._saved.clear()
        self._ambient_lights.clear()
        self._directional_lights.clear()
        self._style = replace(self._style, shader=None)

    def end_frame(self, *, check_balance: bool = True) -> None:
        """フレーム終了時の後処理（ランナーが `draw()` の後に呼ぶ）。

        閉じられていない framebuffer があれば描画先を画面へ戻す。`check_balance=True` のときは
        その後 `RuntimeError` を送出する。
        """

        self.mouse.end_frame()
        if self._framebuffer is None:
            return
        fb = self._framebuffer
        self._framebuffer = None
        self._renderer.set_target(None)
        if check_balance:
            raise RuntimeError(
                f"Framebuffer.begin() に対応する end() がありません: size={(fb.width, fb.height)}"
            )
        _logger.debug("閉じられていない framebuffer を破棄: size=%s", (fb.width, fb.height))

    def run_frame(self, draw: Callable[["Canvas"], None]) -> None:
        """`begin_frame()` → `draw(self)` → `end_frame()` を 1 フレーム分実行する。

        `draw` が例外で抜けた場合は framebuffer の対応チェックを行わず、その例外をそのまま伝える。
        """

        self.begin_frame()
        try:
            draw(self)
        except BaseException:
            self.end_frame(check_balance=False)
            raise
        self.end_frame()

    def release(self) -> None:
        """Canvas が生成した GPU オブジェクトを解放する。"""

        for fb in reversed(self._framebuffers):
            fb.release()
        self._framebuffers.clear()
        for shader in reversed(self._shaders):
            shader.release()
        self._shaders.clear()

    # ---------- 参照用プロパティ ----------
    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def mode(self) -> str:
        return self._mode

    @property
    def window_width(self) -> int:
        return self._display_size[0]

    @property
    def window_height(self) -> int:
        return self._display_size[1]

    @property
    def mouse_x(self) -> float:
        return self.mouse.x

    @property
    def mouse_y(self) -> float:
        return self.mouse.y

    @property
    def pmouse_x(self) -> float:
        return self.mouse.px

    @property
    def pmouse_y(self) -> float:
        return self.mouse.py

    @property
    def mouse_is_pressed(self) -> bool:
        return self.mouse.pressed

    def millis(self) -> float:
        """開始からの経過ミリ秒を返す。"""
        return float(self._clock()) * 1000.0

    # ---------- モード ----------
    def angle_mode(self, mode: str) -> None:
        if mode not in (DEGREES, RADIANS):
            raise ValueError(f"未対応の angle mode: {mode!r}")
        self._angle_mode = mode

    def color_mode(self, mode: str, *max_values: float) -> None:
        self._color.set_mode(mode, *max_values)

    def rect_mode(self, mode: str) -> None:
        if mode not in SHAPE_MODES:
            raise ValueError(f"未対応の rect mode: {mode!r}")
        self._style = replace(self._style, rect_mode=mode)

    def ellipse_mode(self, mode: str) -> None:
        if mode not in SHAPE_MODES:
            raise ValueError(f"未対応の ellipse mode: {mode!r}")
        self._style = replace(self._style, ellipse_mode=mode)

    def text_size(self, size: float) -> None:
        if float(size) <= 0:
            raise ValueError(f"text size は正の値である必要がある: got={size!r}")
        self._style = replace(self._style, text_size=float(size))

    def text_align(self, horizontal: str, vertical: str = BASELINE) -> None:
        if horizontal not in HORIZONTAL_ALIGNS or vertical not in VERTICAL_ALIGNS:
            raise ValueError(f"未対応の text align: {(horizontal, vertical)!r}")
        self._style = replace(self._style, text_align_x=horizontal, text_align_y=vertical)

    # ---------- スタイル ----------
    def background(self, *args: float | Sequence[float]) -> None:
        self._renderer.clear(self._color.parse(*args))

    def fill(self, *args: float | Sequence[float]) -> None:
        self._style = replace(self._style, fill=self._color.parse(*args))

    def no_fill(self) -> None:
        self._style = replace(self._style, fill=None)

    def stroke(self, *args: float | Sequence[float]) -> None:
        self._style = replace(self._style, stroke=self._color.parse(*args))

    def no_stroke(self) -> None:
        self._style = replace(self._style, stroke=None)

    def stroke_weight(self, weight: float) -> None:
        if float(weight) < 0:
            raise ValueError(f"stroke weight は 0 以上である必要がある: got={weight!r}")
        self._style = replace(self._style, stroke_weight=float(weight))

    # ---------- 座標系 ----------
    def push(self) -> None:
        """座標系と描画スタイル、ライトを保存する。"""
        self._matrix.push()
        self._saved.append(
            _Saved(
                style=self._style,
                color_mode=self._color.mode,
                ambient_lights=tuple(self._ambient_lights),
                directional_lights=tuple(self._directional_lights),
            )
        )

    def pop(self) -> None:
        """`push()` で保存した座標系と描画スタイル、ライトを復元する。"""
        if not self._saved:
            raise RuntimeError("pop() に対応する push() がありません")
        self._matrix.pop()
        saved = self._saved.pop()
        self._style = saved.style
        self._color.mode = saved.color_mode
        self._ambient_lights[:] = saved.ambient_lights
        self._directional_lights[:] = saved.directional_lights

    @contextmanager
    def pushed(self) -> Iterator[None]:
        """`with c.pushed():` で push/pop の対を表す。"""
        self.push()
        try:
            yield
        finally:
            self.pop()

    def translate(self, x: float, y: float, z: float = 0.0) -> None:
        self._matrix.multiply(translation(x, y, z))

    def rotate(self, angle: float) -> None:
        """z 軸回り（画面上では時計回り）に回転する。"""
        self._matrix.multiply(rotation_z(self._radians(angle)))

    def rotate_x(self, angle: float) -> None:
        self._require_webgl("rotate_x")
        self._matrix.multiply(rotation_x(self._radians(angle)))

    def rotate_y(self, angle: float) -> None:
        self._require_webgl("rotate_y")
        self._matrix.multiply(rotation_y(self._radians(angle)))

    def rotate_z(self, angle: float) -> None:
        self._require_webgl("rotate_z")
        self._matrix.multiply(rotation_z(self._radians(angle)))

    def scale(self, sx: float, sy: float | None = None, sz: float | None = None) -> None:
        self._matrix.multiply(scaling(sx, sy, sz))

    def reset_matrix(self) -> None:
        self._matrix.reset()

    # ---------- 2D 図形 ----------
    def line(self, x1: float, y1: float, x2: float, y2: float) -> None:
        style = self._style
        if style.stroke is None:
            return
        vertices, indices = shapes.line_quad(x1, y1, x2, y2, style.stroke_weight)
        self._fill_mesh(vertices, indices, style.stroke)

    def rect(self, a: float, b: float, c: float, d: float) -> None:
        style = self._style
        if style.shader is not None:
            # ユーザーシェーダは単位矩形を受け取り、配置は頂点シェーダ側が決める。
            self._renderer.shaded_quad(style.shader, _UNIT_QUAD.copy(), _UNIT_QUAD_UV.copy())
            return
        if style.fill is not None:
            vertices, indices = shapes.rect_vertices(a, b, c, d, style.rect_mode)
            self._fill_mesh(vertices, indices, style.fill)
        if style.stroke is not None:
            outline = shapes.rect_outline(a, b, c, d, style.rect_mode)
            vertices, indices = shapes.polyline_stroke(outline, style.stroke_weight, closed=True)
            self._fill_mesh(vertices, indices, style.stroke)

    def ellipse(self, a: float, b: float, c: float, d: float | None = None) -> None:
        style = self._style
        outline = shapes.ellipse_outline(a, b, c, c if d is None else d, style.ellipse_mode)
        if style.fill is not None:
            vertices, indices = shapes.fan_vertices(outline)
            self._fill_mesh(vertices, indices, style.fill)
        if style.stroke is not None:
            vertices, indices = shapes.polyline_stroke(outline, style.stroke_weight, closed=True)
            self._fill_mesh(vertices, indices, style.stroke)

    def circle(self, x: float, y: float, d: float) -> None:
        """円を描く。第 3 引数は ellipse_mode に従って解釈される（既定は直径）。"""
        self.ellipse(x, y, d, d)

    def text(self, value: object, x: float, y: float) -> None:
        """現在の fill 色で文字列を描く。stroke があれば stroke_weight 幅の輪郭も付ける。"""
        style = self._style
        stroke = style.stroke if style.stroke_weight > 0 else None
        if style.fill is None and stroke is None:
            return
        if self._mode == WEBGL:
            raise RuntimeError("WEBGL モードの text() は未対応です")
        m = self._matrix.top
        screen = apply(m, np.array([[float(x), float(y)]]))[0]
        rotation = math.degrees(math.atan2(m[1, 0], m[0, 0]))
        scale = math.sqrt(abs(float(np.linalg.det(m[:2, :2]))))
        self._renderer.text(
            str(value),
            (float(screen[0]), float(screen[1])),
            rotation=rotation,
            style=TextStyle(
                size=style.text_size * scale,
                color=style.fill,
                align_x=style.text_align_x,
                align_y=style.text_align_y,
                stroke=stroke,
                stroke_weight=style.stroke_weight * scale if stroke is not None else 0.0,
            ),
        )

    # ---------- 3D ----------
    def sphere(
        self,
        radius: float = DEFAULT_SPHERE_RADIUS,
        detail_x: int = 24,
        detail_y: int = 16,
    ) -> None:
        self._require_webgl("sphere")
        style = self._style
        if style.fill is None:
            return
        positions, normals, indices = shapes.uv_sphere(radius, detail_x, detail_y)
        m = self._matrix.top
        world = apply(m, positions)

        lights = self._lights()
        if not lights.enabled:
            self._renderer.fill_triangles(
                world,
                indices,
                color=style.fill,
                view_projection=self._view_projection(),
            )
            return

        n = normals.astype(np.float64) @ normal_matrix(m).T
        lengths = np.linalg.norm(n, axis=1, keepdims=True)
        n = (n / np.where(lengths == 0.0, 1.0, lengths)).astype(np.float32)
        self._renderer.lit_triangles(
            world,
            n,
            indices,
            material=Material(
                fill=style.fill,
                ambient=style.ambient_material,
                specular=style.specular_material,
                shininess=style.shininess,
            ),
            lights=lights,
            view_projection=self._view_projection(),
            camera_position=(0.0, 0.0, camera_distance(self._height)),
        )

    def ambient_light(self, *args: float | Sequence[float]) -> None:
        self._require_webgl("ambient_light")
        self._ambient_lights.append(self._color.parse(*args))

    def directional_light(self, *args: float | Sequence[float]) -> None:
        """平行光源を追加する。末尾 3 引数が向き、それより前が色。"""
        self._require_webgl("directional_light")
        if len(args) < 4:
            raise ValueError("directional_light は (色..., x, y, z) で指定する")
        *color_args, dx, dy, dz = args
        direction = np.array([float(dx), float(dy), float(dz)], dtype=np.float64)  # type: ignore[arg-type]
        norm = float(np.linalg.norm(direction))
        if norm == 0.0:
            raise ValueError("directional_light の向きが零ベクトルです")
        direction /= norm
        self._directional_lights.append(
            DirectionalLight(
                color=self._color.parse(*color_args),
                direction=(float(direction[0]), float(direction[1]), float(direction[2])),
            )
        )

    def no_lights(self) -> None:
        self._ambient_lights.clear()
        self._directional_lights.clear()

    def ambient_material(self, *args: float | Sequence[float]) -> None:
        self._require_webgl("ambient_material")
        self._style = replace(self._style, ambient_material=self._color.parse(*args))

    def specular_material(self, *args: float | Sequence[float]) -> None:
        self._require_webgl("specular_material")
        self._style = replace(self._style, specular_material=self._color.parse(*args))

    def shininess(self, value: float) -> None:
        # 1 未満は鏡面反射の指数として意味を成さないため 1 に丸める。
        self._style = replace(self._style, shininess=max(1.0, float(value)))

    # ---------- シェーダ / Framebuffer ----------
    def create_shader(self, vertex_source: str, fragment_source: str) -> ShaderHandle:
        """頂点/フラグメントシェーダのソースからシェーダを生成する。"""
        shader = self._renderer.create_shader(str(vertex_source), str(fragment_source))
        self._shaders.append(shader)
        return shader

    def shader(self, shader: ShaderHandle) -> None:
        """以降の `rect()` をユーザーシェーダで描く。"""
        self._require_webgl("shader")
        self._style = replace(self._style, shader=shader)

    def reset_shader(self) -> None:
        self._style = replace(self._style, shader=None)

    def create_framebuffer(self) -> Framebuffer:
        """キャンバスと同寸の Framebuffer（色 + 深度）を生成する。"""
        self._require_webgl("create_framebuffer")
        fb = Framebuffer(self, self._renderer.create_framebuffer(self._width, self._height))
        self._framebuffers.append(fb)
        return fb

    def _begin_framebuffer(self, fb: Framebuffer) -> None:
        if self._framebuffer is not None:
            raise RuntimeError("Framebuffer.begin() は入れ子にできません")
        self._framebuffer = fb
        self.push()
        self._renderer.set_target(fb.handle)

    def _end_framebuffer(self, fb: Framebuffer) -> None:
        if self._framebuffer is not fb:
            raise RuntimeError("begin() していない Framebuffer の end() が呼ばれました")
        self._renderer.set_target(None)
        self._framebuffer = None
        self.pop()

    # ---------- 内部 ----------
    def _radians(self, angle: float) -> float:
        if self._angle_mode == DEGREES:
            return math.radians(float(angle))
        return float(angle)

    def _require_webgl(self, name: str) -> None:
        if self._mode != WEBGL:
            raise RuntimeError(f"{name}() は WEBGL モードのキャンバスでのみ使えます")

    def _view_projection(self) -> np.ndarray:
        if self._mode == WEBGL:
            projection, view = perspective_camera(self._width, self._height)
            return projection @ view
        return ortho_projection(self._width, self._height)

    def _lights(self) -> Lights:
        return Lights(
            ambient=tuple(self._ambient_lights),
            directional=tuple(self._directional_lights),
        )

    def _fill_mesh(self, vertices: np.ndarray, indices: np.ndarray, color: RGBA) -> None:
        if vertices.shape[0] == 0:
            return
        self._renderer.fill_triangles(
            apply(self._matrix.top, vertices),
            indices,
            color=color,
            view_projection=self._view_projection(),
        )


__all__ = ["Canvas", "Framebuffer"]
