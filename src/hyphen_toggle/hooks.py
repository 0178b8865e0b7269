"""フック / イベント購読者のレジストリ"""

from __future__ import annotations

import inspect
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Awaitable, Callable, Union

import structlog

from .logger import get_logger
from .models import ToggleGetOptions


class ToggleHooks(StrEnum):
    """getter パイプラインのフック名。"""

    BEFORE_GET = "beforeGet"
    AFTER_GET = "afterGet"


@dataclass
class ToggleHookData:
    """フックに渡す呼び出し単位のデータ。フックはどのフィールドも書き換えてよい。"""

    toggle_key: str
    default_value: Any
    options: ToggleGetOptions | None = None
    result: Any = None


HookHandler = Callable[[ToggleHookData], Union[None, Awaitable[None]]]
EventHandler = Callable[..., None]


class HookRegistry:
    """拡張ポイントごとの順序付きフックハンドラ。"""

    def __init__(self) -> None:
        self._hooks: dict[str, list[HookHandler]] = {}

    def on_hook(self, name: str, handler: HookHandler) -> None:
        """ハンドラを登録する。登録順に実行される。"""
        self._hooks.setdefault(name, []).append(handler)

    def remove_hook(self, name: str, handler: HookHandler) -> None:
        handlers = self._hooks.get(name, [])
        if handler in handlers:
            handlers.remove(handler)

    async def hook(self, name: str, data: ToggleHookData) -> None:
        """``name`` のハンドラを順に実行する。async ハンドラは await する。"""
        for handler in list(self._hooks.get(name, [])):
            outcome = handler(data)
            if inspect.isawaitable(outcome):
                await outcome


class EventEmitter:
    """イベント名ごとの同期リスナーレジストリ。

    リスナーの例外はログに記録して握りつぶし、残りのリスナーの呼び出しを続ける。
    """

    def __init__(self, log: structlog.stdlib.BoundLogger | None = None) -> None:
        self._listeners: dict[str, list[EventHandler]] = {}
        self.log = log if log is not None else get_logger()

    def on(self, event: str, listener: EventHandler) -> None:
        self._listeners.setdefault(event, []).append(listener)

    def off(self, event: str, listener: EventHandler | None = None) -> None:
        """リスナーを一つ外す。省略時は ``event`` の全リスナーを外す。"""
        if listener is None:
            self._listeners.pop(event, None)
            return
        listeners = self._listeners.get(event, [])
        if listener in listeners:
            listeners.remove(listener)

    def listener_count(self, event: str) -> int:
        return len(self._listeners.get(event, []))

    def emit(self, event: str, *args: Any) -> bool:
        """``event`` の全リスナーを呼ぶ。リスナーがなければ False を返す。"""
        listeners = list(self._listeners.get(event, []))
        for listener in listeners:
            try:
                listener(*args)
            except Exception:
                self.log.exception("event listener failed", event_name=event)
        return bool(listeners)
