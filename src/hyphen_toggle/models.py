"""toggle データモデル"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable


@dataclass
class ToggleUser:
    """評価対象ユーザー。"""

    id: str
    email: str | None = None
    name: str | None = None
    custom_attributes: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"id": self.id}
        if self.email is not None:
            data["email"] = self.email
        if self.name is not None:
            data["name"] = self.name
        if self.custom_attributes:
            data["customAttributes"] = dict(self.custom_attributes)
        return data


@dataclass
class ToggleContext:
    """トグル評価コンテキスト。"""

    targeting_key: str | None = None
    ip_address: str | None = None
    user: ToggleUser | None = None
    custom_attributes: dict[str, Any] = field(default_factory=dict)


@dataclass
class ToggleEvaluation:
    """評価 API へ送るリクエストボディ。"""

    application: str
    environment: str
    targeting_key: str | None = None
    ip_address: str | None = None
    user: ToggleUser | None = None
    custom_attributes: dict[str, Any] = field(default_factory=dict)

    @property
    def context(self) -> ToggleContext:
        """ボディに含まれるコンテキスト部分。"""
        return ToggleContext(
            targeting_key=self.targeting_key,
            ip_address=self.ip_address,
            user=self.user,
            custom_attributes=self.custom_attributes,
        )

    def to_dict(self) -> dict[str, Any]:
        """API 送信用の辞書に変換する。未設定の任意項目は含めない。"""
        data: dict[str, Any] = {
            "application": self.application,
            "environment": self.environment,
        }
        if self.targeting_key is not None:
            data["targetingKey"] = self.targeting_key
        if self.ip_address is not None:
            data["ipAddress"] = self.ip_address
        if self.user is not None:
            data["user"] = self.user.to_dict()
        if self.custom_attributes:
            data["customAttributes"] = dict(self.custom_attributes)
        return data


@dataclass
class Evaluation:
    """単一トグルの評価結果。"""

    key: str
    value: Any
    type: str
    reason: str | None = None
    error_message: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Evaluation:
        """API レスポンス辞書から Evaluation を生成する。"""
        return cls(
            key=data["key"],
            value=data.get("value"),
            type=data.get("type", ""),
            reason=data.get("reason"),
            error_message=data.get("errorMessage"),
        )


@dataclass
class EvaluationResponse:
    """評価 API レスポンス。"""

    toggles: dict[str, Evaluation] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> EvaluationResponse:
        return cls(
            toggles={
                key: Evaluation.from_dict({"key": key, **raw})
                for key, raw in (data.get("toggles") or {}).items()
            },
        )


@dataclass
class ToggleGetOptions:
    """get 呼び出し単位のオプション。"""

    context: ToggleContext | None = None


@dataclass
class ToggleCachingOptions:
    """評価レスポンスのキャッシュ設定。ttl は秒。"""

    ttl: float = 60.0
    generate_cache_key_fn: Callable[[ToggleContext], str] | None = None
