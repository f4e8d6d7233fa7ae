"""
どこで: `src/easel/__main__.py`。
何を: `python -m easel <sketch>` で例題スケッチを名前指定して実行する CLI。
なぜ: スケッチファイルのパスを意識せずに例題を起動できるようにするため。
"""

from __future__ import annotations

import argparse
from pathlib import Path


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)

    from easel import sketches

    if args.list or not args.sketch:
        for name in sketches.available():
            print(name)
        return 0

    try:
        sketch = sketches.load(args.sketch)
    except KeyError as exc:
        raise SystemExit(str(exc.args[0])) from exc

    from easel.api.runner import run_sketch

    run_sketch(sketch, config_path=args.config, fps=args.fps)
    return 0


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="easel", description="例題スケッチをプレビューする")
    p.add_argument("sketch", nargs="?", default="", help="スケッチ名（--list で一覧）")
    p.add_argument("--config", type=Path, default=None, help="config.yaml のパス")
    p.add_argument("--fps", type=_positive_float, default=None, help="目標フレームレート")
    p.add_argument("--list", action="store_true", help="登録済みスケッチ名を表示して終了")
    return p.parse_args(argv)


def _positive_float(value: str) -> float:
    try:
        v = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"数値ではありません: {value}") from exc
    if v <= 0:
        raise argparse.ArgumentTypeError(f"正の値である必要があります: {value}")
    return v


if __name__ == "__main__":
    raise SystemExit(main())
