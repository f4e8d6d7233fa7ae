from pathlib import Path

import pytest

from easel.core.runtime_config import output_root_dir, runtime_config, set_config_path


@pytest.fixture(autouse=True)
def _reset_runtime_config() -> None:
    set_config_path(None)
    yield
    set_config_path(None)


def _isolate_config_discovery(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))


def test_output_root_dir_uses_packaged_defaults(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)

    assert output_root_dir() == Path("data") / "output"
    cfg = runtime_config()
    assert cfg.config_path is None
    assert cfg.output_dir == Path("data") / "output"
    assert cfg.window_pos == (25, 25)
    assert cfg.window_samples == 4
    assert cfg.fps == 60.0
    assert cfg.log_level == "INFO"
    assert cfg.png_scale == 1.0


def test_discovered_config_overrides_packaged_defaults(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)

    discovered = tmp_path / ".easel" / "config.yaml"
    discovered.parent.mkdir(parents=True, exist_ok=True)
    discovered.write_text(
        'paths:\n  output_dir: "./out_discovered"\nruntime:\n  fps: 30\n',
        encoding="utf-8",
    )

    assert output_root_dir() == Path("out_discovered")
    cfg = runtime_config()
    assert cfg.config_path == discovered
    assert cfg.fps == 30.0
    # 指定していないキーは同梱デフォルトのまま
    assert cfg.window_pos == (25, 25)
    assert cfg.png_scale == 1.0


def test_explicit_config_overrides_discovered_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)

    discovered = tmp_path / ".easel" / "config.yaml"
    discovered.parent.mkdir(parents=True, exist_ok=True)
    discovered.write_text('paths:\n  output_dir: "./out_discovered"\n', encoding="utf-8")

    explicit = tmp_path / "explicit.yaml"
    explicit.write_text(
        'paths:\n  output_dir: "./out_explicit"\nwindow:\n  position: [100, 200]\n  samples: 0\n'
        "runtime:\n  log_level: debug\nexport:\n  png_scale: 2\n",
        encoding="utf-8",
    )
    set_config_path(explicit)

    assert output_root_dir() == Path("out_explicit")
    cfg = runtime_config()
    assert cfg.config_path == explicit
    assert cfg.window_pos == (100, 200)
    assert cfg.window_samples == 0
    assert cfg.log_level == "DEBUG"
    assert cfg.png_scale == 2.0


def test_runtime_config_is_cached_until_path_changes(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)

    first = runtime_config()
    assert runtime_config() is first

    explicit = tmp_path / "explicit.yaml"
    explicit.write_text("runtime:\n  fps: 24\n", encoding="utf-8")
    set_config_path(explicit)
    assert runtime_config() is not first
    assert runtime_config().fps == 24.0


def test_explicit_config_path_missing_raises(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)

    missing = tmp_path / "missing.yaml"
    set_config_path(missing)

    with pytest.raises(FileNotFoundError):
        output_root_dir()


@pytest.mark.parametrize(
    ("text", "exc"),
    [
        ("version: 2\n", RuntimeError),
        ("- not\n- a mapping\n", RuntimeError),
        ("window:\n  position: [1, 2, 3]\n", RuntimeError),
        ("runtime:\n  fps: 0\n", ValueError),
        ("export:\n  png_scale: -1\n", ValueError),
        ("window:\n  samples: -4\n", ValueError),
    ],
)
def test_invalid_config_values_raise(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, text: str, exc: type[Exception]
):
    _isolate_config_discovery(tmp_path, monkeypatch)

    explicit = tmp_path / "bad.yaml"
    explicit.write_text(text, encoding="utf-8")
    set_config_path(explicit)

    with pytest.raises(exc):
        runtime_config()
