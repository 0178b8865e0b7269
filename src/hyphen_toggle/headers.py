"""HTTP ヘッダーの正規化"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Union

import httpx

HeadersInput = Union[httpx.Headers, Mapping[str, str], Iterable[tuple[str, str]], None]


def normalize_headers(headers: HeadersInput) -> dict[str, str]:
    """httpx.Headers, 辞書, (名前, 値) ペアの列を順序付き辞書に揃える。

    キーの大文字小文字は与えられたまま保持する。同名キーは後勝ち。
    """
    if headers is None:
        return {}
    if isinstance(headers, httpx.Headers):
        return {key: value for key, value in headers.multi_items()}
    if isinstance(headers, Mapping):
        return {str(key): str(value) for key, value in headers.items()}
    return {str(key): str(value) for key, value in headers}
