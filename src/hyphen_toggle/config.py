"""Toggle 設定モデルと読み込み"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError

from .exceptions import ToggleError, ToggleErrorCodes
from .models import ToggleCachingOptions, ToggleContext

ENV_PUBLIC_API_KEY = "HYPHEN_PUBLIC_API_KEY"
ENV_APPLICATION_ID = "HYPHEN_APPLICATION_ID"
ENV_ENVIRONMENT = "HYPHEN_ENVIRONMENT"
ENV_HORIZON_URLS = "HYPHEN_HORIZON_URLS"


class ToggleOptions(BaseModel):
    """Toggle 生成時の設定。

    horizon_urls を指定した場合はそのまま使い、公開 API キーからの導出は行わない。
    """

    public_api_key: str | None = None
    application_id: str | None = None
    environment: str | None = None
    default_context: ToggleContext | None = None
    horizon_urls: list[str] | None = None
    default_target_key: str | None = None
    caching: ToggleCachingOptions | None = None
    timeout_seconds: float = Field(default=10.0, gt=0)


def _read_yaml(path: Path) -> dict[str, Any]:
    """YAML ファイルを読み込む。"""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ToggleError(
            code=ToggleErrorCodes.READ_FILE,
            message=f"Failed to read config file: {path}",
            cause=e,
        ) from e
    try:
        data: dict[str, Any] = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise ToggleError(
            code=ToggleErrorCodes.PARSE_YAML,
            message=f"Failed to parse YAML: {path}",
            cause=e,
        ) from e
    return data


def _validate(data: Mapping[str, Any], source: str) -> ToggleOptions:
    try:
        return ToggleOptions.model_validate(data)
    except ValidationError as e:
        raise ToggleError(
            code=ToggleErrorCodes.VALIDATION,
            message=f"Toggle options validation failed ({source}): {e}",
            cause=e,
        ) from e


def load_options(path: Path) -> ToggleOptions:
    """YAML ファイルから ToggleOptions を読み込む。

    ファイル直下、または ``toggle:`` セクション配下のキーを受け付ける。
    """
    data = _read_yaml(path)
    section = data.get("toggle", data)
    if not isinstance(section, dict):
        raise ToggleError(
            code=ToggleErrorCodes.VALIDATION,
            message=f"Toggle section must be a mapping: {path}",
        )
    return _validate(section, str(path))


def options_from_env(environ: Mapping[str, str] | None = None) -> ToggleOptions:
    """解決済みの環境変数から ToggleOptions を組み立てる。"""
    env = os.environ if environ is None else environ
    data: dict[str, Any] = {}
    if env.get(ENV_PUBLIC_API_KEY):
        data["public_api_key"] = env[ENV_PUBLIC_API_KEY]
    if env.get(ENV_APPLICATION_ID):
        data["application_id"] = env[ENV_APPLICATION_ID]
    if env.get(ENV_ENVIRONMENT):
        data["environment"] = env[ENV_ENVIRONMENT]
    if env.get(ENV_HORIZON_URLS):
        data["horizon_urls"] = [
            url.strip() for url in env[ENV_HORIZON_URLS].split(",") if url.strip()
        ]
    return _validate(data, "environment")
