"""
どこで: `src/easel/core/numeric.py`。
何を: 値を範囲に収める `constrain` と、点を矩形内へ収める `clamp_to_rect` を提供する。
なぜ: マウス追従の図形をキャンバス内の矩形に閉じ込める処理をスケッチから切り出し、テスト可能にするため。
"""

from __future__ import annotations


def constrain(value: float, low: float, high: float) -> float:
    """`value` を `[low, high]` に収めて返す。

    Parameters
    ----------
    value : float
        対象の値。
    low, high : float
        範囲の下端と上端。`low > high` の場合は常に `low` が返る。

    Returns
    -------
    float
        `max(min(value, high), low)`。範囲内の入力はそのまま返る。
    """
    return max(min(float(value), float(high)), float(low))


def clamp_to_rect(
    x: float,
    y: float,
    *,
    inner: float,
    size: tuple[float, float],
) -> tuple[float, float]:
    """点 (x, y) を `[inner, W-inner] x [inner, H-inner]` に収める。

    `W < 2*inner` の軸では点は `inner` に固定される。
    """
    width, height = size
    return (
        constrain(x, inner, float(width) - float(inner)),
        constrain(y, inner, float(height) - float(inner)),
    )


__all__ = ["clamp_to_rect", "constrain"]
