# どこで: `src/easel/core/transform.py`。
# 何を: 4x4 アフィン行列の生成と、push/pop 可能な行列スタックを提供する。
# なぜ: translate / rotate の累積を Canvas から切り出し、頂点変換を numpy で一括処理するため。

from __future__ import annotations

import numpy as np


def identity() -> np.ndarray:
    """単位行列を返す。"""
    return np.eye(4, dtype=np.float64)


def translation(x: float, y: float, z: float = 0.0) -> np.ndarray:
    """平行移動行列を返す。"""
    m = np.eye(4, dtype=np.float64)
    m[0, 3] = float(x)
    m[1, 3] = float(y)
    m[2, 3] = float(z)
    return m


def scaling(sx: float, sy: float | None = None, sz: float | None = None) -> np.ndarray:
    """拡大縮小行列を返す。sy/sz 省略時は sx と同じ値を使う。"""
    _sy = float(sx) if sy is None else float(sy)
    _sz = float(sx) if sz is None else float(sz)
    return np.diag([float(sx), _sy, _sz, 1.0]).astype(np.float64)


def rotation_x(angle: float) -> np.ndarray:
    """x 軸回りの回転行列（rad）。"""
    c, s = np.cos(angle), np.sin(angle)
    m = np.eye(4, dtype=np.float64)
    m[1, 1], m[1, 2] = c, -s
    m[2, 1], m[2, 2] = s, c
    return m


def rotation_y(angle: float) -> np.ndarray:
    """y 軸回りの回転行列（rad）。"""
    c, s = np.cos(angle), np.sin(angle)
    m = np.eye(4, dtype=np.float64)
    m[0, 0], m[0, 2] = c, s
    m[2, 0], m[2, 2] = -s, c
    return m


def rotation_z(angle: float) -> np.ndarray:
    """z 軸回りの回転行列（rad）。

    y 下向きのスクリーン座標では、正の角度が時計回りに見える。
    """
    c, s = np.cos(angle), np.sin(angle)
    m = np.eye(4, dtype=np.float64)
    m[0, 0], m[0, 1] = c, -s
    m[1, 0], m[1, 1] = s, c
    return m


def apply(matrix: np.ndarray, points: np.ndarray) -> np.ndarray:
    """点列 (N,2) または (N,3) に行列を適用し、float32 (N,3) を返す。"""
    pts = np.asarray(points, dtype=np.float64)
    if pts.ndim != 2 or pts.shape[1] not in (2, 3):
        raise ValueError(f"points は shape (N,2) または (N,3) である必要がある: got={pts.shape}")
    if pts.shape[1] == 2:
        pts = np.concatenate([pts, np.zeros((pts.shape[0], 1))], axis=1)
    out = pts @ matrix[:3, :3].T + matrix[:3, 3]
    return out.astype(np.float32, copy=False)


def normal_matrix(matrix: np.ndarray) -> np.ndarray:
    """法線変換用の 3x3 行列（逆転置）を返す。"""
    return np.linalg.inv(matrix[:3, :3]).T


class MatrixStack:
    """モデル行列のスタック。"""

    def __init__(self) -> None:
        self._top = identity()
        self._saved: list[np.ndarray] = []

    @property
    def top(self) -> np.ndarray:
        """現在のモデル行列を返す（コピー）。"""
        return self._top.copy()

    @property
    def depth(self) -> int:
        return len(self._saved)

    def push(self) -> None:
        self._saved.append(self._top.copy())

    def pop(self) -> None:
        if not self._saved:
            raise RuntimeError("pop() に対応する push() がありません")
        self._top = self._saved.pop()

    def multiply(self, matrix: np.ndarray) -> None:
        """現在の行列の右から `matrix` を掛ける（ローカル座標系での変換）。"""
        self._top = self._top @ np.asarray(matrix, dtype=np.float64)

    def reset(self) -> None:
        """現在の行列を単位行列へ戻す。保存済みスタックは保持する。"""
        self._top = identity()

    def clear(self) -> None:
        """保存済みスタックも含めて初期状態へ戻す。"""
        self._top = identity()
        self._saved.clear()


__all__ = [
    "MatrixStack",
    "apply",
    "identity",
    "normal_matrix",
    "rotation_x",
    "rotation_y",
    "rotation_z",
    "scaling",
    "translation",
]
