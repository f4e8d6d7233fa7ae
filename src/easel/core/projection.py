from __future__ import annotations

# どこで: `src/easel/core/projection.py`。
# 何を: P2D 用の正射影と、WEBGL 用の既定カメラ（透視投影 + ビュー行列）を生成する。
# なぜ: renderer 初期化と Canvas で座標系の定義を一箇所に集約するため。

import math

import numpy as np

DEFAULT_FOVY = math.pi / 3.0


def ortho_projection(canvas_width: float, canvas_height: float) -> np.ndarray:
    """左上原点・y 下向きのピクセル座標を NDC に写す正射影行列を返す。"""
    return np.array(
        [
            [2 / canvas_width, 0, 0, -1],
            [0, -2 / canvas_height, 0, 1],
            [0, 0, -1, 0],
            [0, 0, 0, 1],
        ],
        dtype=np.float64,
    )


def perspective_camera(
    canvas_width: float,
    canvas_height: float,
    *,
    fovy: float = DEFAULT_FOVY,
) -> tuple[np.ndarray, np.ndarray]:
    """既定カメラの (projection, view) を返す。

    Notes
    -----
    カメラは `z = (h/2) / tan(fovy/2)` から原点を向く。原点はキャンバス中央、y は下向き。
    near/far はカメラ距離の 1/10 倍と 10 倍。
    """
    w = float(canvas_width)
    h = float(canvas_height)
    if w <= 0 or h <= 0:
        raise ValueError(f"canvas size は正の値である必要がある: got={(w, h)}")

    eye_z = (h / 2.0) / math.tan(fovy / 2.0)
    near = eye_z / 10.0
    far = eye_z * 10.0
    aspect = w / h
    f = 1.0 / math.tan(fovy / 2.0)

    projection = np.array(
        [
            [f / aspect, 0, 0, 0],
            # y 下向きの座標系に合わせて y を反転する。
            [0, -f, 0, 0],
            [0, 0, (far + near) / (near - far), 2 * far * near / (near - far)],
            [0, 0, -1, 0],
        ],
        dtype=np.float64,
    )
    view = np.eye(4, dtype=np.float64)
    view[2, 3] = -eye_z
    return projection, view


def camera_distance(canvas_height: float, *, fovy: float = DEFAULT_FOVY) -> float:
    """既定カメラの原点からの距離を返す。"""
    return (float(canvas_height) / 2.0) / math.tan(fovy / 2.0)


def to_gl(matrix: np.ndarray) -> bytes:
    """ModernGL の uniform へ書き込むための列優先 float32 バイト列を返す。"""
    return np.ascontiguousarray(np.asarray(matrix, dtype="f4").T).tobytes()


__all__ = ["camera_distance", "ortho_projection", "perspective_camera", "to_gl"]
