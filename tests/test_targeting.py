"""ターゲティングキー生成のユニットテスト"""

import re

from hyphen_toggle.models import ToggleContext, ToggleUser
from hyphen_toggle.targeting import generate_target_key, random_suffix, resolve_targeting_key


def test_random_suffix_format() -> None:
    assert re.fullmatch(r"[a-z0-9]+", random_suffix())


def test_random_suffix_varies() -> None:
    """連続呼び出しで異なる値が生成されること。"""
    suffixes = {random_suffix() for _ in range(50)}
    assert len(suffixes) > 1


def test_generate_target_key_joins_parts() -> None:
    assert generate_target_key("app", "production", lambda: "abc123") == "app-production-abc123"


def test_generate_target_key_skips_empty_parts() -> None:
    assert generate_target_key("", "staging", lambda: "xyz") == "staging-xyz"
    assert generate_target_key(None, None, lambda: "xyz") == "xyz"
    assert generate_target_key("app", None, lambda: "xyz") == "app-xyz"


def test_resolve_prefers_targeting_key() -> None:
    context = ToggleContext(targeting_key="t-1", user=ToggleUser(id="u-1"))
    assert resolve_targeting_key(context, "fallback") == "t-1"


def test_resolve_falls_back_to_user_id() -> None:
    context = ToggleContext(user=ToggleUser(id="u-1"))
    assert resolve_targeting_key(context, "fallback") == "u-1"


def test_resolve_falls_back_to_default() -> None:
    assert resolve_targeting_key(ToggleContext(), "fallback") == "fallback"
