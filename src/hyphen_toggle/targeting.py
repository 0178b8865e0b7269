"""ターゲティングキー生成ユーティリティ"""

from __future__ import annotations

import random
import string
from typing import Callable

from .models import ToggleContext

SuffixGenerator = Callable[[], str]

_SUFFIX_ALPHABET = string.ascii_lowercase + string.digits
_SUFFIX_LENGTH = 8


def random_suffix() -> str:
    """小文字英数字のランダムなサフィックスを生成する。暗号用途には使わない。"""
    return "".join(random.choices(_SUFFIX_ALPHABET, k=_SUFFIX_LENGTH))


def generate_target_key(
    application_id: str | None,
    environment: str | None,
    suffix_generator: SuffixGenerator = random_suffix,
) -> str:
    """applicationId, environment, サフィックスのうち空でないものをハイフンで連結する。"""
    parts = [application_id, environment, suffix_generator()]
    return "-".join(part for part in parts if part)


def resolve_targeting_key(context: ToggleContext, default_targeting_key: str) -> str:
    """targeting_key → user.id → 既定ターゲティングキーの順に解決する。"""
    if context.targeting_key:
        return context.targeting_key
    if context.user is not None and context.user.id:
        return context.user.id
    return default_targeting_key
