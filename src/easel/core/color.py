"""
どこで: `src/easel/core/color.py`。
何を: カラーモード（RGB/HSB）と各チャンネル最大値に従い、引数列を RGBA01 に正規化する。
なぜ: `fill` / `stroke` / `background` / ライト / マテリアルで同じ色解釈を共有するため。
"""

from __future__ import annotations

import colorsys
from collections.abc import Sequence
from dataclasses import dataclass, field

from easel.constants import HSB, RGB

RGBA = tuple[float, float, float, float]

_DEFAULT_MAXES: dict[str, tuple[float, float, float, float]] = {
    RGB: (255.0, 255.0, 255.0, 255.0),
    HSB: (360.0, 100.0, 100.0, 1.0),
}


def _clamp01(v: float) -> float:
    return 0.0 if v < 0.0 else 1.0 if v > 1.0 else v


@dataclass(slots=True)
class ColorState:
    """カラーモードとチャンネル最大値の組。"""

    mode: str = RGB
    maxes: dict[str, tuple[float, float, float, float]] = field(
        default_factory=lambda: dict(_DEFAULT_MAXES)
    )

    def set_mode(self, mode: str, *max_values: float) -> None:
        """カラーモードを切り替え、必要ならチャンネル最大値を上書きする。"""

        if mode not in _DEFAULT_MAXES:
            raise ValueError(f"未対応のカラーモード: {mode!r}")
        self.mode = mode
        if not max_values:
            return
        if len(max_values) == 1:
            m = float(max_values[0])
            self.maxes[mode] = (m, m, m, m)
        elif len(max_values) in (3, 4):
            a = float(max_values[3]) if len(max_values) == 4 else self.maxes[mode][3]
            self.maxes[mode] = (
                float(max_values[0]),
                float(max_values[1]),
                float(max_values[2]),
                a,
            )
        else:
            raise ValueError(f"最大値は 1, 3, 4 個で指定する: got={len(max_values)}")

    def parse(self, *args: float | Sequence[float]) -> RGBA:
        """現在のモードで色引数を解釈して返す。"""

        return parse_color(args, self.mode, self.maxes[self.mode])


def parse_color(
    args: Sequence[float | Sequence[float]],
    mode: str,
    maxes: tuple[float, float, float, float],
) -> RGBA:
    """色引数列を RGBA（0..1）に変換する。

    Parameters
    ----------
    args : Sequence
        1 要素: グレー、2 要素: グレー + alpha、3 要素: チャンネル、4 要素: チャンネル + alpha。
        長さ 3/4 のシーケンスを 1 要素として渡してもよい。
    mode : str
        `RGB` または `HSB`。
    maxes : tuple[float, float, float, float]
        各チャンネルの最大値。

    Returns
    -------
    RGBA
        0..1 に clamp 済みの (r, g, b, a)。

    Raises
    ------
    ValueError
        引数の個数が不正な場合。
    """
    values: list[float]
    if len(args) == 1 and isinstance(args[0], Sequence) and not isinstance(args[0], str):
        values = [float(v) for v in args[0]]
    else:
        values = [float(v) for v in args]  # type: ignore[arg-type]

    m0, m1, m2, ma = (float(m) for m in maxes)

    if len(values) in (1, 2):
        # グレースケールは明度チャンネルの最大値で正規化する（HSB では 100）。
        gray = _clamp01(values[0] / m2)
        alpha = _clamp01(values[1] / ma) if len(values) == 2 else 1.0
        return (gray, gray, gray, alpha)

    if len(values) not in (3, 4):
        raise ValueError(f"色引数は 1〜4 個で指定する: got={len(values)}")

    c0 = _clamp01(values[0] / m0)
    c1 = _clamp01(values[1] / m1)
    c2 = _clamp01(values[2] / m2)
    alpha = _clamp01(values[3] / ma) if len(values) == 4 else 1.0

    if mode == HSB:
        # hue は 1 周で巻き戻す。
        hue = (values[0] / m0) % 1.0
        r, g, b = colorsys.hsv_to_rgb(hue, c1, c2)
        return (float(r), float(g), float(b), alpha)
    if mode == RGB:
        return (c0, c1, c2, alpha)
    raise ValueError(f"未対応のカラーモード: {mode!r}")


__all__ = ["ColorState", "RGBA", "parse_color"]
