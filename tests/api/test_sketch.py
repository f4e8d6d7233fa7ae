"""Sketch レコードとスケッチレジストリのテスト。"""

from __future__ import annotations

import types

import pytest

from easel import sketches
from easel.api.sketch import Sketch


def test_available_lists_registered_sketches() -> None:
    assert sketches.available() == ("constrain", "framebuffer_blur", "rotate")


def test_load_returns_sketch_records() -> None:
    for name in sketches.available():
        sketch = sketches.load(name)
        assert isinstance(sketch, Sketch)
        assert sketch.name == name
        assert callable(sketch.setup)
        assert callable(sketch.draw)

    assert sketches.load("rotate").title == "Rotate"
    assert sketches.load("framebuffer_blur").title == "Blur using Framebuffer Depth"


def test_load_unknown_name_raises_key_error_with_choices() -> None:
    with pytest.raises(KeyError) as exc:
        sketches.load("spiral")
    assert "rotate" in str(exc.value)


def test_from_module_requires_draw() -> None:
    module = types.ModuleType("my_sketch")
    with pytest.raises(TypeError):
        Sketch.from_module(module)

    module.draw = lambda c: None
    sketch = Sketch.from_module(module)
    assert sketch.name == "my_sketch"
    assert sketch.title == "my_sketch"
    assert sketch.setup is None

    module.setup = 3
    with pytest.raises(TypeError):
        Sketch.from_module(module)
