# どこで: `src/easel/core/runtime_config.py`。
# 何を: config.yaml による実行時設定（探索・ロード・キャッシュ）を提供する。
# なぜ: 出力先やウィンドウ設定をスケッチのコードに書かず、ユーザーが外から指定できるようにするため。

from __future__ import annotations

import os
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any

import yaml


@dataclass(frozen=True, slots=True)
class RuntimeConfig:
    """easel の実行時設定。"""

    config_path: Path | None
    output_dir: Path
    window_pos: tuple[int, int]
    window_samples: int
    fps: float
    log_level: str
    png_scale: float


_EXPLICIT_CONFIG_PATH: Path | None = None
_CONFIG_CACHE: RuntimeConfig | None = None


def set_config_path(path: str | Path | None) -> None:
    """以降の設定探索で使う明示 config パスを設定する。

    Notes
    -----
    `path` を None にすると明示指定を解除し、既定の探索に戻る。
    """

    global _EXPLICIT_CONFIG_PATH, _CONFIG_CACHE
    if path is None:
        _EXPLICIT_CONFIG_PATH = None
        _CONFIG_CACHE = None
        return
    _EXPLICIT_CONFIG_PATH = Path(str(path)).expanduser()
    _CONFIG_CACHE = None


def _default_config_candidates() -> tuple[Path, ...]:
    cwd = Path.cwd()
    home = Path.home()
    return (
        cwd / ".easel" / "config.yaml",
        home / ".config" / "easel" / "config.yaml",
    )


def _expand_path_text(text: str) -> str:
    return os.path.expandvars(os.path.expanduser(str(text)))


def _as_optional_path(value: Any) -> Path | None:
    if value is None:
        return None
    s = str(value).strip()
    if not s:
        return None
    return Path(_expand_path_text(s))


def _as_mapping(value: Any, *, key: str) -> dict[str, Any]:
    if value is None:
        return {}
    if isinstance(value, dict):
        return dict(value)
    raise RuntimeError(f"{key} は mapping である必要があります: got={value!r}")


def _as_int_pair(value: Any, *, key: str) -> tuple[int, int] | None:
    if value is None:
        return None
    try:
        seq = list(value)
    except TypeError as exc:
        raise RuntimeError(f"{key} は [x, y] の配列である必要があります: got={value!r}") from exc
    if len(seq) != 2:
        raise RuntimeError(f"{key} は [x, y] の配列である必要があります: got={value!r}")
    try:
        return (int(seq[0]), int(seq[1]))
    except (TypeError, ValueError) as exc:
        raise RuntimeError(f"{key} は [x, y] の整数配列である必要があります: got={value!r}") from exc


def _as_float(value: Any, *, key: str) -> float | None:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise RuntimeError(f"{key} は数値である必要があります: got={value!r}") from exc


def _as_int(value: Any, *, key: str) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise RuntimeError(f"{key} は整数である必要があります: got={value!r}") from exc


def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """mapping を再帰的にマージする（override 側が後勝ち）。"""

    out = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _merge(out[k], v)
        else:
            out[k] = v
    return out


def _load_yaml_text(text: str, *, source: str) -> dict[str, Any]:
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise RuntimeError(f"config.yaml の読み込みに失敗しました: source={source}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise RuntimeError(f"config.yaml は mapping である必要があります: source={source}")
    return dict(data)


def _load_yaml_config(path: Path) -> dict[str, Any]:
    return _load_yaml_text(path.read_text(encoding="utf-8"), source=str(path))


def _load_packaged_default_config() -> dict[str, Any]:
    """同梱デフォルト config をロードして dict を返す。"""

    blob = (
        resources.files("easel")
        .joinpath("resource", "default_config.yaml")
        .read_text(encoding="utf-8")
    )
    return _load_yaml_text(blob, source="easel/resource/default_config.yaml")


def runtime_config() -> RuntimeConfig:
    """実行時設定をロードして返す（キャッシュ）。"""

    global _CONFIG_CACHE
    if _CONFIG_CACHE is not None:
        return _CONFIG_CACHE

    explicit_path = _EXPLICIT_CONFIG_PATH
    if explicit_path is not None and not explicit_path.is_file():
        raise FileNotFoundError(f"config.yaml が見つかりません: {explicit_path}")

    discovered_path: Path | None = None
    for p in _default_config_candidates():
        if p.is_file():
            discovered_path = p
            break

    payload = _load_packaged_default_config()
    if discovered_path is not None:
        payload = _merge(payload, _load_yaml_config(discovered_path))
    if explicit_path is not None:
        payload = _merge(payload, _load_yaml_config(explicit_path))

    version = _as_int(payload.get("version"), key="version")
    if version is None:
        raise RuntimeError("config.yaml の version が未設定です")
    if version != 1:
        raise RuntimeError(f"未対応の config.yaml version です: got={version}")

    paths = _as_mapping(payload.get("paths"), key="paths")
    output_dir = _as_optional_path(paths.get("output_dir"))
    if output_dir is None:
        raise RuntimeError("paths.output_dir が未設定です")

    window = _as_mapping(payload.get("window"), key="window")
    window_pos = _as_int_pair(window.get("position"), key="window.position")
    if window_pos is None:
        raise RuntimeError("window.position が未設定です")
    samples = _as_int(window.get("samples"), key="window.samples")
    if samples is None or samples < 0:
        raise ValueError(f"window.samples は 0 以上の整数である必要があります: got={samples!r}")

    runtime = _as_mapping(payload.get("runtime"), key="runtime")
    fps = _as_float(runtime.get("fps"), key="runtime.fps")
    if fps is None or fps <= 0:
        raise ValueError(f"runtime.fps は正の値である必要があります: got={fps!r}")
    log_level = str(runtime.get("log_level") or "INFO").upper()

    export = _as_mapping(payload.get("export"), key="export")
    png_scale = _as_float(export.get("png_scale"), key="export.png_scale")
    if png_scale is None or png_scale <= 0:
        raise ValueError(f"export.png_scale は正の値である必要があります: got={png_scale!r}")

    cfg = RuntimeConfig(
        config_path=explicit_path or discovered_path,
        output_dir=output_dir,
        window_pos=window_pos,
        window_samples=int(samples),
        fps=float(fps),
        log_level=log_level,
        png_scale=float(png_scale),
    )
    _CONFIG_CACHE = cfg
    return cfg


def output_root_dir() -> Path:
    """出力ファイルを保存する既定ルートディレクトリを返す。

    上書き順（後勝ち）:
    1) 同梱 default_config.yaml
    2) `./.easel/config.yaml` / `~/.config/easel/config.yaml`
    3) `run(..., config_path=...)` の `config_path`
    """

    return Path(runtime_config().output_dir)


__all__ = ["RuntimeConfig", "output_root_dir", "runtime_config", "set_config_path"]
