"""カラーモード付きの色解釈のテスト。"""

from __future__ import annotations

import pytest

from easel.constants import HSB, RGB
from easel.core.color import ColorState, parse_color


def test_rgb_gray_and_alpha() -> None:
    state = ColorState()
    assert state.parse(255) == (1.0, 1.0, 1.0, 1.0)
    assert state.parse(0, 127.5) == pytest.approx((0.0, 0.0, 0.0, 0.5))


def test_rgb_channels_are_normalized_and_clamped() -> None:
    state = ColorState()
    assert state.parse(237, 34, 93) == pytest.approx((237 / 255, 34 / 255, 93 / 255, 1.0))
    assert state.parse(300, -10, 0, 510) == (1.0, 0.0, 0.0, 1.0)


def test_sequence_argument_is_accepted() -> None:
    state = ColorState()
    assert state.parse((255, 0, 0)) == (1.0, 0.0, 0.0, 1.0)
    assert state.parse([0, 0, 255, 0]) == (0.0, 0.0, 1.0, 0.0)


def test_hsb_mode_converts_to_rgb() -> None:
    state = ColorState()
    state.set_mode(HSB)
    assert state.parse(0, 100, 100) == pytest.approx((1.0, 0.0, 0.0, 1.0))
    assert state.parse(120, 100, 100) == pytest.approx((0.0, 1.0, 0.0, 1.0))
    # hue は 1 周で巻き戻る
    assert state.parse(360, 100, 100) == pytest.approx((1.0, 0.0, 0.0, 1.0))


def test_hsb_gray_uses_brightness_max() -> None:
    state = ColorState()
    state.set_mode(HSB)
    assert state.parse(50) == pytest.approx((0.5, 0.5, 0.5, 1.0))
    assert state.parse(255) == (1.0, 1.0, 1.0, 1.0)


def test_set_mode_overrides_maxes() -> None:
    state = ColorState()
    state.set_mode(RGB, 1.0)
    assert state.parse(0.5, 0.25, 1.0) == pytest.approx((0.5, 0.25, 1.0, 1.0))

    state.set_mode(HSB, 1.0, 1.0, 1.0)
    assert state.maxes[HSB] == (1.0, 1.0, 1.0, 1.0)


def test_invalid_arity_and_mode_raise() -> None:
    with pytest.raises(ValueError):
        parse_color((1, 2, 3, 4, 5), RGB, (255.0, 255.0, 255.0, 255.0))
    with pytest.raises(ValueError):
        ColorState().set_mode("cmyk")
    with pytest.raises(ValueError):
        ColorState().set_mode(RGB, 1.0, 2.0)
