"""toggle ライブラリの例外型定義"""

from __future__ import annotations


class ToggleError(Exception):
    """toggle ライブラリのエラー基底クラス。"""

    def __init__(
        self,
        code: str,
        message: str,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        if cause is not None:
            self.__cause__ = cause

    @property
    def message(self) -> str:
        return super().__str__()

    def __str__(self) -> str:
        return f"{self.code}: {super().__str__()}"


class ToggleErrorCodes:
    """ToggleError のエラーコード定数。"""

    CONFIG_ERROR: str = "CONFIG_ERROR"
    INVALID_API_KEY: str = "INVALID_API_KEY"
    NO_HORIZON_URLS: str = "NO_HORIZON_URLS"
    ALL_HORIZON_URLS_FAILED: str = "ALL_HORIZON_URLS_FAILED"
    TOGGLE_NOT_FOUND: str = "TOGGLE_NOT_FOUND"
    READ_FILE: str = "READ_FILE"
    PARSE_YAML: str = "PARSE_YAML"
    VALIDATION: str = "VALIDATION"
