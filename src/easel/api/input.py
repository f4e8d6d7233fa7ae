# どこで: `src/easel/api/input.py`。
# 何を: スケッチから参照するマウス状態を保持する。
# なぜ: pyglet のイベント座標（左下原点）を Canvas 座標（左上原点）に揃えた値を 1 箇所で管理するため。

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class MouseState:
    """マウス位置とボタン状態。座標はキャンバスの論理ピクセル（左上原点）。"""

    x: float = 0.0
    y: float = 0.0
    px: float = 0.0
    py: float = 0.0
    pressed: bool = False
    button: int | None = None

    def move_to(self, x: float, y: float) -> None:
        self.x = float(x)
        self.y = float(y)

    def end_frame(self) -> None:
        """次フレームの pmouse 用に現在位置を記録する。"""
        self.px = self.x
        self.py = self.y

    def press(self, button: int) -> None:
        self.pressed = True
        self.button = int(button)

    def release(self) -> None:
        self.pressed = False
        self.button = None


def window_to_canvas(
    x: float,
    y: float,
    *,
    window_height: float,
) -> tuple[float, float]:
    """pyglet のウィンドウ座標（左下原点）を Canvas 座標（左上原点）に変換する。"""
    return float(x), float(window_height) - float(y)


__all__ = ["MouseState", "window_to_canvas"]
