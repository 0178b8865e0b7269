"""structlog ベースのロガー"""

from __future__ import annotations

import structlog

LOGGER_NAME = "hyphen_toggle"


def get_logger() -> structlog.stdlib.BoundLogger:
    """ライブラリ既定のロガーを返す。グローバル設定は変更しない。"""
    return structlog.stdlib.get_logger(LOGGER_NAME)
