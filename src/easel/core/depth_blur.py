"""
どこで: `src/easel/core/depth_blur.py`。
何を: 深度バッファに基づく被写界深度ブラーの数式（ボケ量・最大ボケ距離・螺旋サンプル）と、
     その CPU 参照実装、同じ定数から生成する GLSL ソースを提供する。
なぜ: GPU シェーダと同じ規則を Python 側でも検証できるようにし、定数の食い違いを防ぐため。
"""

from __future__ import annotations

import numpy as np
from numba import njit  # type: ignore[attr-defined]

# ピントが合う深度（0=near, 1=far の非線形深度）。
FOCAL_DEPTH = 0.9
BLUR_SCALE = 40.0
DISTANCE_SCALE = 0.01
SAMPLE_COUNT = 20


def blurriness(depth: float | np.ndarray) -> float | np.ndarray:
    """深度サンプルからボケ量を返す。焦点深度から離れるほど大きい。"""
    if isinstance(depth, np.ndarray):
        return np.abs(depth.astype(np.float64, copy=False) - FOCAL_DEPTH) * BLUR_SCALE
    return abs(float(depth) - FOCAL_DEPTH) * BLUR_SCALE


def max_blur_distance(amount: float | np.ndarray) -> float | np.ndarray:
    """ボケ量をテクスチャ座標上の最大サンプル距離に変換する。"""
    if isinstance(amount, np.ndarray):
        return amount.astype(np.float64, copy=False) * DISTANCE_SCALE
    return float(amount) * DISTANCE_SCALE


def spiral_offsets(amount: float, samples: int = SAMPLE_COUNT) -> np.ndarray:
    """中心から外へ広がる螺旋状のサンプルオフセットを返す。

    Parameters
    ----------
    amount : float
        中心ピクセルのボケ量（`blurriness` の戻り値）。
    samples : int
        サンプル数。

    Returns
    -------
    np.ndarray
        float64 shape (samples, 2)。i 番目は `(cos i, sin i) * (i / samples) * max_blur_distance(amount)`。
    """
    n = int(samples)
    if n <= 0:
        raise ValueError(f"samples は正の整数である必要がある: got={samples!r}")
    i = np.arange(n, dtype=np.float64)
    distance = i / float(n) * float(max_blur_distance(float(amount)))
    return np.stack([np.cos(i) * distance, np.sin(i) * distance], axis=1)


def blur_image(color: np.ndarray, depth: np.ndarray, *, samples: int = SAMPLE_COUNT) -> np.ndarray:
    """フラグメントシェーダと同じ規則で画像に被写界深度ブラーをかける（CPU 参照実装）。

    Parameters
    ----------
    color : np.ndarray
        shape (H, W, C) の色画像。行 0 をテクスチャ座標 v=0 側として扱う。
    depth : np.ndarray
        shape (H, W) の深度画像（0..1）。
    samples : int
        螺旋サンプル数。

    Returns
    -------
    np.ndarray
        float32 shape (H, W, C) のブラー後画像。

    Notes
    -----
    テクスチャ参照は clamp-to-edge の最近傍サンプリングとする。
    """
    color_arr = np.asarray(color, dtype=np.float32)
    depth_arr = np.asarray(depth, dtype=np.float32)
    if color_arr.ndim != 3:
        raise ValueError(f"color は shape (H, W, C) である必要がある: got={color_arr.shape}")
    if depth_arr.shape != color_arr.shape[:2]:
        raise ValueError(
            "depth の shape が color と一致しない"
            f": color={color_arr.shape}, depth={depth_arr.shape}"
        )
    if int(samples) <= 0:
        raise ValueError(f"samples は正の整数である必要がある: got={samples!r}")
    return _blur_image_numba(
        np.ascontiguousarray(color_arr),
        np.ascontiguousarray(depth_arr),
        int(samples),
        float(FOCAL_DEPTH),
        float(BLUR_SCALE),
        float(DISTANCE_SCALE),
    )


@njit(cache=True)  # type: ignore[misc]
def _blur_image_numba(
    color: np.ndarray,
    depth: np.ndarray,
    samples: int,
    focal_depth: float,
    blur_scale: float,
    distance_scale: float,
) -> np.ndarray:
    h = color.shape[0]
    w = color.shape[1]
    c = color.shape[2]
    out = np.empty((h, w, c), dtype=np.float32)
    acc = np.empty((c,), dtype=np.float64)

    for y in range(h):
        v = (y + 0.5) / h
        for x in range(w):
            u = (x + 0.5) / w
            for k in range(c):
                acc[k] = color[y, x, k]
            count = 1.0
            center_depth = depth[y, x]
            center_blur = abs(center_depth - focal_depth) * blur_scale

            for s in range(samples):
                angle = float(s)
                distance = float(s) / samples * (center_blur * distance_scale)
                su = u + np.cos(angle) * distance
                sv = v + np.sin(angle) * distance
                sx = int(np.floor(su * w))
                sy = int(np.floor(sv * h))
                if sx < 0:
                    sx = 0
                elif sx >= w:
                    sx = w - 1
                if sy < 0:
                    sy = 0
                elif sy >= h:
                    sy = h - 1

                sample_depth = depth[sy, sx]
                sample_reach = abs(sample_depth - focal_depth) * blur_scale * distance_scale
                # 手前にあるか、そのボケが中心ピクセルまで届くサンプルだけを平均に加える。
                if sample_depth >= center_depth or sample_reach >= distance:
                    for k in range(c):
                        acc[k] += color[sy, sx, k]
                    count += 1.0

            for k in range(c):
                out[y, x, k] = acc[k] / count

    return out


VERTEX_SHADER = """
#version 330
in vec3 aPosition;
in vec2 aTexCoord;
out vec2 vTexCoord;
void main() {
  vec4 positionVec4 = vec4(aPosition, 1.0);
  positionVec4.xy = positionVec4.xy * 2.0 - 1.0;
  gl_Position = positionVec4;
  vTexCoord = aTexCoord;
}
"""

_FRAGMENT_TEMPLATE = """
#version 330
in vec2 vTexCoord;
out vec4 fragColor;
uniform sampler2D img;
uniform sampler2D depth;
float getBlurriness(float d) {{
  return abs(d - {focal_depth:.6f}) * {blur_scale:.6f};
}}
float maxBlurDistance(float blurriness) {{
  return blurriness * {distance_scale:.6f};
}}
void main() {{
  vec4 color = texture(img, vTexCoord);
  float samples = 1.;
  float centerDepth = texture(depth, vTexCoord).r;
  float blurriness = getBlurriness(centerDepth);
  for (int i = 0; i < {samples}; i++) {{
    // 中心ピクセルから外へ螺旋状にサンプルする
    float angle = float(i);
    float sampleDistance = float(i) / {samples}. * maxBlurDistance(blurriness);
    vec2 offset = vec2(cos(angle), sin(angle)) * sampleDistance;
    float sampleDepth = texture(depth, vTexCoord + offset).r;
    float sampleBlurDistance = maxBlurDistance(getBlurriness(sampleDepth));
    // 手前にあるか、ボケが中心まで届くサンプルだけを平均に加える
    if (sampleDepth >= centerDepth || sampleBlurDistance >= sampleDistance) {{
      color += texture(img, vTexCoord + offset);
      samples++;
    }}
  }}
  color /= samples;
  fragColor = color;
}}
"""


def fragment_shader_source(samples: int = SAMPLE_COUNT) -> str:
    """ブラー用フラグメントシェーダの GLSL ソースを返す。"""
    return _FRAGMENT_TEMPLATE.format(
        focal_depth=FOCAL_DEPTH,
        blur_scale=BLUR_SCALE,
        distance_scale=DISTANCE_SCALE,
        samples=int(samples),
    )


__all__ = [
    "BLUR_SCALE",
    "DISTANCE_SCALE",
    "FOCAL_DEPTH",
    "SAMPLE_COUNT",
    "VERTEX_SHADER",
    "blur_image",
    "blurriness",
    "fragment_shader_source",
    "max_blur_distance",
    "spiral_offsets",
]
