# どこで: `src/easel/api/renderer.py`。
# 何を: Canvas が描画命令を委譲する Renderer の契約と、ライト/マテリアルのレコードを定義する。
# なぜ: Canvas（状態機械）を GPU 実装から切り離し、スタブでテストできるようにするため。

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol

import numpy as np

from easel.core.color import RGBA


@dataclass(frozen=True, slots=True)
class DirectionalLight:
    """平行光源。direction は光が進む向き。"""

    color: RGBA
    direction: tuple[float, float, float]


@dataclass(frozen=True, slots=True)
class Lights:
    """1 フレーム内で有効なライトの集合。"""

    ambient: tuple[RGBA, ...] = ()
    directional: tuple[DirectionalLight, ...] = ()

    @property
    def enabled(self) -> bool:
        return bool(self.ambient or self.directional)


@dataclass(frozen=True, slots=True)
class Material:
    """ライティング計算に使う表面特性。"""

    fill: RGBA = (1.0, 1.0, 1.0, 1.0)
    ambient: RGBA | None = None
    specular: RGBA | None = None
    shininess: float = 1.0


@dataclass(frozen=True, slots=True)
class TextStyle:
    """テキスト描画の見た目。

    `color` が None なら塗りを、`stroke` が None なら輪郭を描かない。
    """

    size: float = 12.0
    color: RGBA | None = (0.0, 0.0, 0.0, 1.0)
    align_x: str = "left"
    align_y: str = "baseline"
    stroke: RGBA | None = None
    stroke_weight: float = 0.0


class FramebufferHandle(Protocol):
    """オフスクリーン描画先（renderer 実装が返す）。"""

    width: int
    height: int

    @property
    def color(self) -> Any: ...

    @property
    def depth(self) -> Any: ...

    def release(self) -> None: ...


class ShaderHandle(Protocol):
    """ユーザー定義シェーダ（renderer 実装が返す）。"""

    def set_uniform(self, name: str, value: Any) -> None: ...

    def release(self) -> None: ...


class Renderer(Protocol):
    """Canvas から呼ばれる描画バックエンドの契約。

    頂点はすべて変換済み（モデル行列適用後）の float32 (N, 3) で渡される。
    """

    def resize(self, width: int, height: int, *, depth: bool) -> None: ...

    def set_target(self, framebuffer: FramebufferHandle | None) -> None: ...

    def clear(self, color: RGBA) -> None: ...

    def fill_triangles(
        self,
        vertices: np.ndarray,
        indices: np.ndarray,
        *,
        color: RGBA,
        view_projection: np.ndarray,
    ) -> None: ...

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
    ) -> None: ...

    def shaded_quad(self, shader: ShaderHandle, vertices: np.ndarray, tex_coords: np.ndarray) -> None: ...

    def text(
        self,
        text: str,
        position: tuple[float, float],
        *,
        rotation: float,
        style: TextStyle,
    ) -> None: ...

    def create_framebuffer(self, width: int, height: int) -> FramebufferHandle: ...

    def create_shader(self, vertex_source: str, fragment_source: str) -> ShaderHandle: ...


__all__ = [
    "DirectionalLight",
    "FramebufferHandle",
    "Lights",
    "Material",
    "Renderer",
    "ShaderHandle",
    "TextStyle",
]
