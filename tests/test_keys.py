"""公開 API キー解析と Horizon URL 導出のユニットテスト"""

import base64

from hyphen_toggle.keys import (
    DEFAULT_HORIZON_URL,
    get_default_horizon_url,
    get_default_horizon_urls,
    get_org_id_from_public_key,
)


def make_key(decoded: str, prefix: str = "public_") -> str:
    return prefix + base64.b64encode(decoded.encode()).decode()


def test_org_id_from_valid_key() -> None:
    """正しい公開キーから組織 ID を取り出せること。"""
    assert get_org_id_from_public_key(make_key("test-org:some-secret")) == "test-org"


def test_org_id_without_prefix() -> None:
    """プレフィックスが無くても解析できること。"""
    assert get_org_id_from_public_key(make_key("org-without-prefix:secret", prefix="")) == (
        "org-without-prefix"
    )


def test_org_id_malformed_base64() -> None:
    assert get_org_id_from_public_key("public_invalid-base64!") is None


def test_org_id_empty_payload() -> None:
    assert get_org_id_from_public_key("public_") is None
    assert get_org_id_from_public_key(make_key("")) is None


def test_org_id_without_colon() -> None:
    """コロンが無い場合はデコード結果全体が候補になること。"""
    assert get_org_id_from_public_key(make_key("orgidwithoutcolon")) == "orgidwithoutcolon"


def test_org_id_multiple_colons() -> None:
    assert get_org_id_from_public_key(make_key("multi-colon-org:secret:extra:data")) == (
        "multi-colon-org"
    )


def test_org_id_invalid_characters() -> None:
    assert get_org_id_from_public_key(make_key("org@invalid#chars:data")) is None
    assert get_org_id_from_public_key(make_key("org with spaces:data")) is None


def test_org_id_empty_segment() -> None:
    assert get_org_id_from_public_key(make_key(":secret-data")) is None


def test_org_id_allowed_characters() -> None:
    assert get_org_id_from_public_key(make_key("valid_org-123:data")) == "valid_org-123"
    assert get_org_id_from_public_key(make_key("123456:data")) == "123456"
    assert get_org_id_from_public_key(make_key("a:data")) == "a"


def test_org_id_none_input() -> None:
    """None や空文字でも例外にならないこと。"""
    assert get_org_id_from_public_key(None) is None
    assert get_org_id_from_public_key("") is None


def test_org_id_non_utf8_payload() -> None:
    key = "public_" + base64.b64encode(b"\xff\xfe:secret").decode()
    assert get_org_id_from_public_key(key) is None


def test_default_horizon_url_with_org() -> None:
    assert get_default_horizon_url(make_key("test-org:some-secret")) == (
        "https://test-org.toggle.hyphen.cloud"
    )


def test_default_horizon_url_fallback() -> None:
    """組織 ID が導出できない場合は共通 URL になること。"""
    assert get_default_horizon_url("invalid-key") == "https://toggle.hyphen.cloud"
    assert get_default_horizon_url("public_invalid-base64!") == DEFAULT_HORIZON_URL
    assert get_default_horizon_url(make_key("org@invalid#chars:data")) == DEFAULT_HORIZON_URL
    assert get_default_horizon_url(None) == DEFAULT_HORIZON_URL
    assert get_default_horizon_url("") == DEFAULT_HORIZON_URL


def test_default_horizon_urls_without_key() -> None:
    assert get_default_horizon_urls() == [DEFAULT_HORIZON_URL]


def test_default_horizon_urls_primary_and_fallback() -> None:
    """組織専用 URL、共通 URL の順になること。"""
    assert get_default_horizon_urls(make_key("acme:secret")) == [
        "https://acme.toggle.hyphen.cloud",
        "https://toggle.hyphen.cloud",
    ]


def test_default_horizon_urls_single_when_no_org() -> None:
    assert get_default_horizon_urls("public_not-decodable!") == [DEFAULT_HORIZON_URL]
