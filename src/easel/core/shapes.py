"""
どこで: `src/easel/core/shapes.py`。
何を: rect / ellipse / 線分 / 球の頂点・インデックス配列を numpy で生成する。
なぜ: Canvas の描画呼び出しを「ローカル座標の三角形メッシュ」に落とし、GPU 依存なしでテストできるようにするため。
"""

from __future__ import annotations

import math

import numpy as np

from easel.constants import CENTER, CORNER, CORNERS, RADIUS

DEFAULT_ELLIPSE_SEGMENTS = 64

_QUAD_INDICES = np.array([0, 1, 2, 0, 2, 3], dtype=np.uint32)


def rect_bounds(a: float, b: float, c: float, d: float, mode: str) -> tuple[float, float, float, float]:
    """rect 引数を rect_mode に従って (x0, y0, x1, y1) に変換する。

    Parameters
    ----------
    a, b, c, d : float
        `CORNER`: (x, y, w, h)、`CORNERS`: (x0, y0, x1, y1)、
        `CENTER`: (cx, cy, w, h)、`RADIUS`: (cx, cy, rx, ry)。
    mode : str
        rect_mode / ellipse_mode。

    Returns
    -------
    tuple[float, float, float, float]
        正規化済みの左上・右下座標（x0 <= x1, y0 <= y1）。
    """
    a, b, c, d = float(a), float(b), float(c), float(d)
    if mode == CORNER:
        x0, y0, x1, y1 = a, b, a + c, b + d
    elif mode == CORNERS:
        x0, y0, x1, y1 = a, b, c, d
    elif mode == CENTER:
        x0, y0, x1, y1 = a - c / 2.0, b - d / 2.0, a + c / 2.0, b + d / 2.0
    elif mode == RADIUS:
        x0, y0, x1, y1 = a - c, b - d, a + c, b + d
    else:
        raise ValueError(f"未対応の shape mode: {mode!r}")
    return min(x0, x1), min(y0, y1), max(x0, x1), max(y0, y1)


def rect_vertices(a: float, b: float, c: float, d: float, mode: str) -> tuple[np.ndarray, np.ndarray]:
    """塗り用の矩形メッシュ（4 頂点 / 2 三角形）を返す。"""
    x0, y0, x1, y1 = rect_bounds(a, b, c, d, mode)
    vertices = np.array(
        [[x0, y0, 0.0], [x1, y0, 0.0], [x1, y1, 0.0], [x0, y1, 0.0]],
        dtype=np.float32,
    )
    return vertices, _QUAD_INDICES.copy()


def rect_outline(a: float, b: float, c: float, d: float, mode: str) -> np.ndarray:
    """矩形の輪郭点列 (4, 2) を時計回りで返す。"""
    x0, y0, x1, y1 = rect_bounds(a, b, c, d, mode)
    return np.array([[x0, y0], [x1, y0], [x1, y1], [x0, y1]], dtype=np.float64)


def ellipse_outline(
    a: float,
    b: float,
    c: float,
    d: float,
    mode: str,
    *,
    segments: int = DEFAULT_ELLIPSE_SEGMENTS,
) -> np.ndarray:
    """楕円の輪郭点列 (segments, 2) を返す。"""
    n = int(segments)
    if n < 3:
        raise ValueError(f"segments は 3 以上である必要がある: got={segments!r}")
    x0, y0, x1, y1 = rect_bounds(a, b, c, d, mode)
    cx, cy = (x0 + x1) / 2.0, (y0 + y1) / 2.0
    rx, ry = (x1 - x0) / 2.0, (y1 - y0) / 2.0
    theta = np.linspace(0.0, 2.0 * math.pi, n, endpoint=False)
    return np.stack([cx + rx * np.cos(theta), cy + ry * np.sin(theta)], axis=1)


def fan_vertices(outline: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """凸多角形の輪郭から、中心を要とする三角形ファンを返す。"""
    pts = np.asarray(outline, dtype=np.float64)
    n = int(pts.shape[0])
    if n < 3:
        raise ValueError(f"輪郭は 3 点以上である必要がある: got={n}")
    center = pts.mean(axis=0)
    vertices = np.zeros((n + 1, 3), dtype=np.float32)
    vertices[0, :2] = center
    vertices[1:, :2] = pts
    i = np.arange(n, dtype=np.uint32)
    indices = np.stack([np.zeros(n, dtype=np.uint32), i + 1, (i + 1) % n + 1], axis=1)
    return vertices, indices.reshape(-1).astype(np.uint32)


def line_quad(x1: float, y1: float, x2: float, y2: float, weight: float) -> tuple[np.ndarray, np.ndarray]:
    """太さ `weight` の線分を矩形メッシュにして返す。長さ 0 の線分は空を返す。"""
    p = np.array([float(x1), float(y1)], dtype=np.float64)
    q = np.array([float(x2), float(y2)], dtype=np.float64)
    direction = q - p
    length = float(np.hypot(direction[0], direction[1]))
    if length == 0.0 or float(weight) <= 0.0:
        return np.zeros((0, 3), dtype=np.float32), np.zeros((0,), dtype=np.uint32)

    normal = np.array([-direction[1], direction[0]]) / length * (float(weight) / 2.0)
    vertices = np.zeros((4, 3), dtype=np.float32)
    vertices[0, :2] = p + normal
    vertices[1, :2] = q + normal
    vertices[2, :2] = q - normal
    vertices[3, :2] = p - normal
    return vertices, _QUAD_INDICES.copy()


def polyline_stroke(points: np.ndarray, weight: float, *, closed: bool) -> tuple[np.ndarray, np.ndarray]:
    """点列の各辺を line_quad で連結したストロークメッシュを返す。"""
    pts = np.asarray(points, dtype=np.float64)
    n = int(pts.shape[0])
    pairs = [(i, i + 1) for i in range(n - 1)]
    if closed and n > 2:
        pairs.append((n - 1, 0))

    vertex_chunks: list[np.ndarray] = []
    index_chunks: list[np.ndarray] = []
    base = 0
    for i, j in pairs:
        v, idx = line_quad(pts[i, 0], pts[i, 1], pts[j, 0], pts[j, 1], weight)
        if v.shape[0] == 0:
            continue
        vertex_chunks.append(v)
        index_chunks.append(idx + np.uint32(base))
        base += int(v.shape[0])

    if not vertex_chunks:
        return np.zeros((0, 3), dtype=np.float32), np.zeros((0,), dtype=np.uint32)
    return (
        np.concatenate(vertex_chunks, axis=0),
        np.concatenate(index_chunks, axis=0).astype(np.uint32),
    )


def text_outline_offsets(weight: float, *, samples: int = 8) -> list[tuple[float, float]]:
    """文字の輪郭を重ね描きで表すための、半径 `weight` の円周上のずらし量を返す。"""
    w = float(weight)
    if w <= 0.0:
        return []
    step = 2.0 * math.pi / int(samples)
    return [(w * math.cos(i * step), w * math.sin(i * step)) for i in range(int(samples))]

def uv_sphere(
    radius: float = 50.0,
    detail_x: int = 24,
    detail_y: int = 16,
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """緯度経度分割の球メッシュ (positions, normals, indices) を返す。"""
    nx = int(detail_x)
    ny = int(detail_y)
    if nx < 3 or ny < 2:
        raise ValueError(f"detail は detail_x>=3, detail_y>=2 である必要がある: got={(nx, ny)}")

    # 緯度 v: 0..pi（北極→南極）、経度 u: 0..2pi（継ぎ目用に端点を重複させる）。
    v = np.linspace(0.0, math.pi, ny + 1)
    u = np.linspace(0.0, 2.0 * math.pi, nx + 1)
    vv, uu = np.meshgrid(v, u, indexing="ij")
    normals = np.stack(
        [np.sin(vv) * np.sin(uu), -np.cos(vv), np.sin(vv) * np.cos(uu)],
        axis=-1,
    ).reshape(-1, 3)
    positions = normals * float(radius)

    indices: list[int] = []
    stride = nx + 1
    for j in range(ny):
        for i in range(nx):
            a = j * stride + i
            b = a + stride
            indices.extend((a, b, a + 1, a + 1, b, b + 1))

    return (
        positions.astype(np.float32),
        normals.astype(np.float32),
        np.asarray(indices, dtype=np.uint32),
    )


__all__ = [
    "DEFAULT_ELLIPSE_SEGMENTS",
    "ellipse_outline",
    "fan_vertices",
    "line_quad",
    "polyline_stroke",
    "rect_bounds",
    "rect_outline",
    "rect_vertices",
    "text_outline_offsets",
    "uv_sphere",
]
