from __future__ import annotations

import pytest

from easel.__main__ import main


def test_list_prints_registered_sketches(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--list"]) == 0
    out = capsys.readouterr().out.split()
    assert out == ["constrain", "framebuffer_blur", "rotate"]


def test_unknown_sketch_exits_with_choices() -> None:
    with pytest.raises(SystemExit) as exc:
        main(["spiral"])
    assert "rotate" in str(exc.value)


def test_fps_must_be_positive() -> None:
    with pytest.raises(SystemExit):
        main(["--fps", "0", "rotate"])
