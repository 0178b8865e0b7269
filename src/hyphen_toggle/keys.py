"""公開 API キーの解析と Horizon URL の導出"""

from __future__ import annotations

import base64
import binascii
import re

PUBLIC_KEY_PREFIX = "public_"
HORIZON_DOMAIN = "toggle.hyphen.cloud"
DEFAULT_HORIZON_URL = f"https://{HORIZON_DOMAIN}"

_ORG_ID_PATTERN = re.compile(r"[A-Za-z0-9_-]+")


def get_org_id_from_public_key(public_key: str | None) -> str | None:
    """公開 API キーから組織 ID を取り出す。

    キーは ``public_<base64(orgId:secret)>`` 形式を想定する。プレフィックスは
    省略可能。導出できない場合は例外を送出せず None を返す。
    """
    if not public_key:
        return None
    encoded = public_key
    if encoded.startswith(PUBLIC_KEY_PREFIX):
        encoded = encoded[len(PUBLIC_KEY_PREFIX) :]
    try:
        decoded = base64.b64decode(encoded, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError, ValueError):
        return None
    org_id = decoded.split(":", 1)[0]
    if not _ORG_ID_PATTERN.fullmatch(org_id):
        return None
    return org_id


def get_default_horizon_url(public_key: str | None = None) -> str:
    """組織専用の Horizon URL を返す。組織 ID が無ければ共通 URL。"""
    if public_key:
        org_id = get_org_id_from_public_key(public_key)
        if org_id:
            return f"https://{org_id}.{HORIZON_DOMAIN}"
    return DEFAULT_HORIZON_URL


def get_default_horizon_urls(public_key: str | None = None) -> list[str]:
    """フェイルオーバー順の Horizon URL 一覧を返す。

    組織 ID が導出できた場合は [組織専用 URL, 共通 URL]、それ以外は
    [共通 URL] のみ。
    """
    if not public_key:
        return [DEFAULT_HORIZON_URL]
    primary = get_default_horizon_url(public_key)
    if primary == DEFAULT_HORIZON_URL:
        return [DEFAULT_HORIZON_URL]
    return [primary, DEFAULT_HORIZON_URL]
