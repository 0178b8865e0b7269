"""評価レスポンスのインメモリキャッシュ"""

from __future__ import annotations

import hashlib
import json
import time
from typing import Any

from .models import EvaluationResponse


class _CacheEntry:
    __slots__ = ("value", "expires_at")

    def __init__(self, value: EvaluationResponse, ttl: float | None) -> None:
        self.value = value
        self.expires_at: float | None = (
            time.monotonic() + ttl if ttl is not None else None
        )

    def is_expired(self) -> bool:
        return self.expires_at is not None and time.monotonic() >= self.expires_at


def payload_cache_key(payload: dict[str, Any]) -> str:
    """ペイロードの正規化 JSON から SHA-256 のキャッシュキーを作る。"""
    canonical = json.dumps(payload, sort_keys=True, separators=(",", ":"), default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()


class EvaluationCache:
    """TTL 付きの EvaluationResponse キャッシュ。"""

    def __init__(self) -> None:
        self._store: dict[str, _CacheEntry] = {}

    def get(self, key: str) -> EvaluationResponse | None:
        entry = self._store.get(key)
        if entry is None:
            return None
        if entry.is_expired():
            del self._store[key]
            return None
        return entry.value

    def set(self, key: str, value: EvaluationResponse, ttl: float | None = None) -> None:
        self._purge_expired()
        self._store[key] = _CacheEntry(value, ttl)

    def _purge_expired(self) -> None:
        expired = [k for k, entry in self._store.items() if entry.is_expired()]
        for k in expired:
            del self._store[k]

    def delete(self, key: str) -> bool:
        if key in self._store:
            del self._store[key]
            return True
        return False

    def clear(self) -> None:
        self._store.clear()

    def __len__(self) -> int:
        return len(self._store)
