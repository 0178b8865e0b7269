"""評価キャッシュのユニットテスト"""

import time

from hyphen_toggle.cache import EvaluationCache, payload_cache_key
from hyphen_toggle.models import Evaluation, EvaluationResponse


def make_response() -> EvaluationResponse:
    return EvaluationResponse(toggles={"flag": Evaluation(key="flag", value=True, type="boolean")})


def test_set_and_get() -> None:
    cache = EvaluationCache()
    response = make_response()
    cache.set("k", response, ttl=60)
    assert cache.get("k") is response


def test_get_missing() -> None:
    assert EvaluationCache().get("missing") is None


def test_expired_entry_is_dropped() -> None:
    """TTL 経過後は None になり、エントリも削除されること。"""
    cache = EvaluationCache()
    cache.set("k", make_response(), ttl=0.01)
    time.sleep(0.05)
    assert cache.get("k") is None
    assert len(cache) == 0


def test_set_purges_expired_entries() -> None:
    """set 時に期限切れのエントリが削除され、読まれないキーも残らないこと。"""
    cache = EvaluationCache()
    cache.set("a", make_response(), ttl=0.01)
    cache.set("keep", make_response())
    time.sleep(0.05)
    cache.set("b", make_response(), ttl=60)
    assert len(cache) == 2
    assert cache.get("a") is None


def test_delete_and_clear() -> None:
    cache = EvaluationCache()
    cache.set("a", make_response())
    cache.set("b", make_response())
    assert cache.delete("a") is True
    assert cache.delete("a") is False
    cache.clear()
    assert len(cache) == 0


def test_payload_cache_key_is_order_independent() -> None:
    assert payload_cache_key({"a": 1, "b": 2}) == payload_cache_key({"b": 2, "a": 1})
    assert payload_cache_key({"a": 1}) != payload_cache_key({"a": 2})
