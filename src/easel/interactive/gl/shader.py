# どこで: `src/easel/interactive/gl/shader.py`。
# 何を: スケッチが渡すシェーダソースをコンパイルし、uniform の設定とテクスチャユニットの割り当てを行う。
# なぜ: `set_uniform()` で値を溜めておき、描画直前にまとめて束縛する流れを 1 箇所に閉じ込めるため。

from __future__ import annotations

import logging
from typing import Any

import moderngl
import numpy as np

_logger = logging.getLogger(__name__)

# ユーザーシェーダが受け取る頂点属性（rect 用の単位矩形）。
QUAD_ATTRIBUTES: tuple[tuple[str, int], ...] = (("aPosition", 3), ("aTexCoord", 2))


def write_uniform(program: moderngl.Program, name: str, value: Any) -> bool:
    """uniform に値を書き込む。最適化で消えた uniform は無視して False を返す。"""

    member = program.get(name, None)
    if member is None:
        return False
    if isinstance(value, np.ndarray):
        member.write(np.ascontiguousarray(value, dtype="f4").tobytes())
    elif isinstance(value, (list, tuple)):
        member.value = tuple(value)
    else:
        member.value = value
    return True


class GLShader:
    """ユーザー定義シェーダ。"""

    def __init__(self, ctx: moderngl.Context, vertex_source: str, fragment_source: str) -> None:
        self.ctx = ctx
        # コンパイルエラーは moderngl.Error として呼び出し元へ伝播させる。
        self.program = ctx.program(vertex_shader=vertex_source, fragment_shader=fragment_source)
        self._uniforms: dict[str, Any] = {}

    def set_uniform(self, name: str, value: Any) -> None:
        """uniform 値を登録する。実際の書き込みは `bind()` 時に行う。"""
        self._uniforms[str(name)] = value

    def vertex_layout(self) -> tuple[str, tuple[str, ...]]:
        """単位矩形 VBO（3f 2f）のうち、プログラムが使う属性だけを束ねる layout を返す。"""

        parts: list[str] = []
        names: list[str] = []
        for name, size in QUAD_ATTRIBUTES:
            if self.program.get(name, None) is not None:
                parts.append(f"{size}f")
                names.append(name)
            else:
                parts.append(f"{size}x4")
        return " ".join(parts), tuple(names)

    def bind(self) -> None:
        """登録済み uniform をプログラムへ書き込み、テクスチャをユニットへ割り当てる。"""

        unit = 0
        for name, value in self._uniforms.items():
            if isinstance(value, moderngl.Texture):
                if self.program.get(name, None) is None:
                    _logger.debug("unused sampler uniform: %s", name)
                    continue
                value.use(location=unit)
                self.program[name].value = unit
                unit += 1
                continue
            if not write_uniform(self.program, name, value):
                _logger.debug("unused uniform: %s", name)

    def release(self) -> None:
        self._uniforms.clear()
        self.program.release()


__all__ = ["GLShader", "QUAD_ATTRIBUTES", "write_uniform"]
