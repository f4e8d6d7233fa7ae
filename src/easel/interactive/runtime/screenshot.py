"""
どこで: `src/easel/interactive/runtime/screenshot.py`。
何を: 描画ウィンドウの RGB バイト列を PNG として保存する（Pillow）。
なぜ: P キーで現在のフレームを残す導線を、GL 依存の読み出しと切り離して用意するため。
"""

from __future__ import annotations

from pathlib import Path

from PIL import Image

from easel.core.runtime_config import output_root_dir, runtime_config


def default_png_output_path(sketch_name: str, frame_count: int) -> Path:
    """スケッチ名とフレーム番号に基づく PNG の既定保存パスを返す。

    Notes
    -----
    パスは `{output_root}/png/{sketch_name}_{frame_count:05d}.png`。
    """

    return output_root_dir() / "png" / f"{sketch_name}_{int(frame_count):05d}.png"


def png_output_size(size: tuple[int, int], *, scale: float | None = None) -> tuple[int, int]:
    """読み出しサイズに `export.png_scale` を掛けた PNG の出力ピクセルサイズを返す。"""

    s = float(runtime_config().png_scale if scale is None else scale)
    if s <= 0:
        raise ValueError(f"png scale は正の値である必要がある: got={s}")
    w, h = size
    return max(1, int(round(float(w) * s))), max(1, int(round(float(h) * s)))


def save_rgb24_png(
    data: bytes,
    size: tuple[int, int],
    path: str | Path,
    *,
    output_size: tuple[int, int] | None = None,
) -> Path:
    """下の行から並んだ RGB24 バイト列を PNG として保存し、保存先を返す。"""

    w, h = int(size[0]), int(size[1])
    expected = w * h * 3
    if len(data) != expected:
        raise ValueError(f"data bytes が想定サイズと一致しません: got={len(data)}, expected={expected}")

    image = Image.frombytes("RGB", (w, h), data).transpose(Image.Transpose.FLIP_TOP_BOTTOM)
    if output_size is not None and tuple(output_size) != (w, h):
        image = image.resize(tuple(output_size), Image.Resampling.LANCZOS)

    _path = Path(path)
    _path.parent.mkdir(parents=True, exist_ok=True)
    image.save(_path)
    return _path


__all__ = ["default_png_output_path", "png_output_size", "save_rgb24_png"]
