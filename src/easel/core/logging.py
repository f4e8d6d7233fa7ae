"""
どこで: `src/easel/core/logging.py`。
何を: ロギングの最小構成を 1 度だけ適用するヘルパーを提供する。
なぜ: 各モジュールは `logging.getLogger(__name__)` を使うだけにし、設定はランナー/CLI 側に寄せるため。
"""

from __future__ import annotations

import logging


def setup_default_logging(level: int | str = "INFO") -> None:
    """最小限のロギング設定を 1 度だけ適用する。

    - ルートロガーにハンドラが既にあれば何もしない（no-op）
    - 上位のランナー/CLI から呼び出す想定
    """
    if isinstance(level, str):
        lvl = getattr(logging, level.upper(), logging.INFO)
    else:
        lvl = int(level)

    root = logging.getLogger()
    if root.handlers:
        return
    logging.basicConfig(
        level=lvl,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


__all__ = ["setup_default_logging"]
