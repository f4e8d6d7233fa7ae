"""
どこで: `src/easel/interactive/gl/mesh.py`。
何を: VBO/IBO/VAO の確保・更新・解放を担当し、描画可能な Mesh を管理。
なぜ: GPU 転送の詳細を Renderer から切り離し、再確保や VAO の張り直しを一元化するため。
"""

from __future__ import annotations

from typing import Any

import numpy as np


class Mesh:
    """
    GPUに頂点やインデックスなどの描画データを送り込む作業を管理
    """

    def __init__(
        self,
        ctx: Any,
        program: Any,
        layout: str,
        attributes: tuple[str, ...],
        # 初期GPUメモリ確保量（既定: 1MB）。必要に応じて自動拡張。
        initial_reserve: int = 1024 * 1024,
    ):
        """
        ctx: moderngl コンテキスト
        program: この Mesh を描くシェーダープログラム。
        layout: VBO 1 頂点分のフォーマット（例: "3f 3f"）。
        attributes: layout の各要素に対応する attribute 名。
        """
        self.ctx = ctx
        self.program = program
        self.layout = layout
        self.attributes = attributes
        self.initial_reserve = initial_reserve

        self.vbo = ctx.buffer(reserve=initial_reserve, dynamic=True)
        self.ibo = ctx.buffer(reserve=initial_reserve, dynamic=True)
        self.vao = self._build_vao()

        self.index_count: int = 0

    def _build_vao(self) -> Any:
        return self.ctx.vertex_array(
            self.program,
            [(self.vbo, self.layout, *self.attributes)],
            index_buffer=self.ibo,
            index_element_size=4,
        )

    # ---------- バッファ操作 ----------
    def _ensure_capacity(self, vbo_size: int, ibo_size: int) -> None:
        """データが大きくなったらGPUのバッファを再確保"""
        vao_needs_rebuild = False
        if vbo_size > self.vbo.size:
            self.vbo.release()
            self.vbo = self.ctx.buffer(reserve=max(vbo_size, self.initial_reserve), dynamic=True)
            vao_needs_rebuild = True

        if ibo_size > self.ibo.size:
            self.ibo.release()
            self.ibo = self.ctx.buffer(reserve=max(ibo_size, self.initial_reserve), dynamic=True)
            vao_needs_rebuild = True

        # VAO は VBO/IBO が差し替わるときだけ張り直す。
        if vao_needs_rebuild:
            self.vao.release()
            self.vao = self._build_vao()

    def upload(self, vertices: np.ndarray, indices: np.ndarray) -> None:
        """実際にデータをGPUへ送り込む"""
        vertices_f32 = np.ascontiguousarray(vertices, dtype=np.float32)
        indices_u32 = np.ascontiguousarray(indices, dtype=np.uint32)
        self._ensure_capacity(vertices_f32.nbytes, indices_u32.nbytes)

        self.vbo.orphan()
        self.vbo.write(vertices_f32)

        self.ibo.orphan()
        self.ibo.write(indices_u32)

        self.index_count = len(indices_u32)

    def render(self, mode: int) -> None:
        if self.index_count == 0:
            return
        self.vao.render(mode=mode, vertices=self.index_count)

    def release(self) -> None:
        """GPUのメモリを解放する（終了時に使う）"""
        self.vbo.release()
        self.ibo.release()
        self.vao.release()
