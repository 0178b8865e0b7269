"""Toggle 評価クライアント"""

from __future__ import annotations

from typing import Any, TypeVar

import httpx
import structlog

from .cache import EvaluationCache, payload_cache_key
from .config import ToggleOptions
from .exceptions import ToggleError, ToggleErrorCodes
from .headers import HeadersInput, normalize_headers
from .hooks import EventEmitter, HookHandler, HookRegistry, ToggleHookData, ToggleHooks
from .keys import (
    PUBLIC_KEY_PREFIX,
    get_default_horizon_url,
    get_default_horizon_urls,
    get_org_id_from_public_key,
)
from .logger import get_logger
from .models import (
    EvaluationResponse,
    ToggleCachingOptions,
    ToggleContext,
    ToggleEvaluation,
    ToggleGetOptions,
)
from .targeting import SuffixGenerator, generate_target_key, random_suffix, resolve_targeting_key

T = TypeVar("T")

EVALUATE_PATH = "/toggle/evaluate"
DEFAULT_ENVIRONMENT = "development"
NO_HORIZON_URLS_MESSAGE = (
    "No horizon URLs configured. Set horizon_urls or provide a valid public_api_key."
)


class Toggle:
    """Hyphen Toggle サービスのフィーチャートグル評価クライアント。

    get 系メソッドは失敗時に例外を送出せず、"error" イベントを通知して
    呼び出し元のデフォルト値を返す。fetch は下位のプリミティブで、
    設定エラーと全 URL 失敗を ToggleError として送出する。
    """

    def __init__(
        self,
        options: ToggleOptions | None = None,
        *,
        suffix_generator: SuffixGenerator = random_suffix,
        log: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        if options is None:
            options = ToggleOptions()
        self._hooks = HookRegistry()
        self._log = log if log is not None else get_logger()
        self._events = EventEmitter(self._log)
        self._cache = EvaluationCache()
        self._suffix_generator = suffix_generator

        self._public_api_key: str | None = None
        self._organization_id: str | None = None
        self._horizon_urls: list[str] = []
        self._horizon_urls_derived = False
        if options.public_api_key:
            self.set_public_api_key(options.public_api_key)

        self._application_id = options.application_id
        self._environment = options.environment
        self._default_context = options.default_context
        self._caching = options.caching
        self._timeout_seconds = options.timeout_seconds

        # 明示指定された URL 一覧は空でもそのまま使う
        if options.horizon_urls is not None:
            self._horizon_urls = list(options.horizon_urls)
            self._horizon_urls_derived = False
        else:
            self._horizon_urls = get_default_horizon_urls(self._public_api_key)
            self._horizon_urls_derived = True

        self._default_targeting_key = self._initial_targeting_key(options)

    def _initial_targeting_key(self, options: ToggleOptions) -> str:
        if options.default_target_key:
            return options.default_target_key
        context = options.default_context
        if context is not None:
            if context.targeting_key:
                return context.targeting_key
            if context.user is not None and context.user.id:
                return context.user.id
        return self.generate_target_key()

    # --- properties -------------------------------------------------------

    @property
    def public_api_key(self) -> str | None:
        return self._public_api_key

    @public_api_key.setter
    def public_api_key(self, value: str | None) -> None:
        self.set_public_api_key(value)

    def set_public_api_key(self, value: str | None) -> None:
        """公開 API キーを設定し、組織 ID を再計算する。

        horizon_urls が公開 API キーから導出されたものであれば再導出する。
        明示指定された horizon_urls は変更しない。

        Raises:
            ToggleError: ``public_`` で始まらないキーの場合 (INVALID_API_KEY)
        """
        if value is not None and not value.startswith(PUBLIC_KEY_PREFIX):
            raise ToggleError(
                code=ToggleErrorCodes.INVALID_API_KEY,
                message=f'Public API key must start with "{PUBLIC_KEY_PREFIX}"',
            )
        self._public_api_key = value
        self._organization_id = get_org_id_from_public_key(value)
        if self._horizon_urls_derived:
            self._horizon_urls = get_default_horizon_urls(value)

    @property
    def organization_id(self) -> str | None:
        """公開 API キーから導出した組織 ID。"""
        return self._organization_id

    @property
    def horizon_urls(self) -> list[str]:
        return list(self._horizon_urls)

    @horizon_urls.setter
    def horizon_urls(self, value: list[str]) -> None:
        self._horizon_urls = list(value)
        self._horizon_urls_derived = False

    @property
    def application_id(self) -> str | None:
        return self._application_id

    @application_id.setter
    def application_id(self, value: str | None) -> None:
        self._application_id = value

    @property
    def environment(self) -> str | None:
        return self._environment

    @environment.setter
    def environment(self, value: str | None) -> None:
        self._environment = value

    @property
    def default_context(self) -> ToggleContext | None:
        return self._default_context

    @default_context.setter
    def default_context(self, value: ToggleContext | None) -> None:
        self._default_context = value

    @property
    def default_targeting_key(self) -> str:
        return self._default_targeting_key

    @default_targeting_key.setter
    def default_targeting_key(self, value: str) -> None:
        self._default_targeting_key = value

    @property
    def caching(self) -> ToggleCachingOptions | None:
        return self._caching

    @caching.setter
    def caching(self, value: ToggleCachingOptions | None) -> None:
        self._caching = value
        self._cache.clear()

    @property
    def cache(self) -> EvaluationCache:
        return self._cache

    @property
    def log(self) -> structlog.stdlib.BoundLogger:
        return self._log

    @log.setter
    def log(self, value: structlog.stdlib.BoundLogger) -> None:
        self._log = value
        self._events.log = value

    # --- hooks / events ---------------------------------------------------

    def on_hook(self, name: str, handler: HookHandler) -> None:
        """ToggleHooks の名前でフックを登録する。"""
        self._hooks.on_hook(name, handler)

    def remove_hook(self, name: str, handler: HookHandler) -> None:
        self._hooks.remove_hook(name, handler)

    def on(self, event: str, listener: Any) -> None:
        """イベントオブザーバーを登録する ("error" など)。"""
        self._events.on(event, listener)

    def off(self, event: str, listener: Any = None) -> None:
        self._events.off(event, listener)

    def emit(self, event: str, *args: Any) -> bool:
        return self._events.emit(event, *args)

    # --- key / endpoint / targeting helpers --------------------------------

    def get_org_id_from_public_key(self, public_key: str | None) -> str | None:
        return get_org_id_from_public_key(public_key)

    def get_default_horizon_url(self, public_key: str | None = None) -> str:
        return get_default_horizon_url(public_key)

    def get_default_horizon_urls(self, public_key: str | None = None) -> list[str]:
        return get_default_horizon_urls(public_key)

    def generate_target_key(self) -> str:
        """applicationId-environment-ランダム値 形式のターゲティングキーを生成する。"""
        return generate_target_key(
            self._application_id, self._environment, self._suffix_generator
        )

    def get_targeting_key(self, context: ToggleContext) -> str:
        return resolve_targeting_key(context, self._default_targeting_key)

    # --- evaluation -------------------------------------------------------

    def build_evaluation(self, options: ToggleGetOptions | None = None) -> ToggleEvaluation:
        """評価リクエストボディを組み立てる。

        呼び出し単位の context があればその全項目を使い、既定コンテキストは
        参照しない。無ければ既定コンテキストの各項目を使う。

        Raises:
            ToggleError: 公開 API キーまたは application_id が未設定 (CONFIG_ERROR)
        """
        if not self._public_api_key:
            raise ToggleError(
                code=ToggleErrorCodes.CONFIG_ERROR,
                message="A public API key is required to evaluate toggles",
            )
        if not isinstance(self._application_id, str) or not self._application_id:
            raise ToggleError(
                code=ToggleErrorCodes.CONFIG_ERROR,
                message="application_id must be a non-empty string",
            )

        source = self._default_context
        if options is not None and options.context is not None:
            source = options.context
        evaluation = ToggleEvaluation(
            application=self._application_id,
            environment=self._environment or DEFAULT_ENVIRONMENT,
        )
        if source is not None:
            evaluation.targeting_key = source.targeting_key
            evaluation.ip_address = source.ip_address
            evaluation.user = source.user
            evaluation.custom_attributes = dict(source.custom_attributes)

        if not evaluation.targeting_key:
            evaluation.targeting_key = self.get_targeting_key(evaluation.context)
        return evaluation

    async def get(
        self,
        toggle_key: str,
        default_value: T,
        options: ToggleGetOptions | None = None,
    ) -> T:
        """トグル値を取得する。失敗時は error を通知して default_value を返す。"""
        try:
            data = ToggleHookData(
                toggle_key=toggle_key,
                default_value=default_value,
                options=options,
            )
            await self._hooks.hook(ToggleHooks.BEFORE_GET, data)

            evaluation = self.build_evaluation(data.options)
            response = await self._evaluate(evaluation)

            toggle = response.toggles.get(data.toggle_key)
            if toggle is None:
                raise ToggleError(
                    code=ToggleErrorCodes.TOGGLE_NOT_FOUND,
                    message=f"Toggle not found in evaluation response: {data.toggle_key}",
                )

            result = ToggleHookData(
                toggle_key=data.toggle_key,
                default_value=data.default_value,
                options=data.options,
                result=toggle.value,
            )
            await self._hooks.hook(ToggleHooks.AFTER_GET, result)
            return result.result
        except Exception as e:
            self._log.error("toggle evaluation failed", toggle_key=toggle_key, error=str(e))
            self.emit("error", e)
            return default_value

    async def get_boolean(
        self, toggle_key: str, default_value: bool, options: ToggleGetOptions | None = None
    ) -> bool:
        return await self.get(toggle_key, default_value, options)

    async def get_string(
        self, toggle_key: str, default_value: str, options: ToggleGetOptions | None = None
    ) -> str:
        return await self.get(toggle_key, default_value, options)

    async def get_number(
        self, toggle_key: str, default_value: float, options: ToggleGetOptions | None = None
    ) -> float:
        return await self.get(toggle_key, default_value, options)

    async def get_object(
        self, toggle_key: str, default_value: T, options: ToggleGetOptions | None = None
    ) -> T:
        return await self.get(toggle_key, default_value, options)

    async def _evaluate(self, evaluation: ToggleEvaluation) -> EvaluationResponse:
        payload = evaluation.to_dict()
        caching = self._caching
        if caching is None:
            return EvaluationResponse.from_dict(await self.fetch(EVALUATE_PATH, payload))

        if caching.generate_cache_key_fn is not None:
            cache_key = caching.generate_cache_key_fn(evaluation.context)
        else:
            cache_key = payload_cache_key(payload)
        cached = self._cache.get(cache_key)
        if cached is not None:
            self._log.debug("toggle evaluation cache hit", cache_key=cache_key)
            return cached
        response = EvaluationResponse.from_dict(await self.fetch(EVALUATE_PATH, payload))
        self._cache.set(cache_key, response, caching.ttl)
        return response

    # --- transport --------------------------------------------------------

    def _build_headers(self, headers: HeadersInput, api_key: str | None) -> httpx.Headers:
        # ヘッダー名は大文字小文字を区別せずに上書きする
        merged = httpx.Headers({"Content-Type": "application/json", "Accept": "application/json"})
        for name, value in normalize_headers(headers).items():
            merged[name] = value
        if api_key:
            merged["x-api-key"] = api_key
        return merged

    def _make_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self._timeout_seconds)

    async def fetch(
        self,
        path: str,
        payload: Any = None,
        *,
        headers: HeadersInput = None,
        body: str | bytes | None = None,
    ) -> Any:
        """Horizon URL を順に試し、最初に成功したレスポンスの JSON を返す。

        payload を指定した場合は body より優先して JSON として送る。

        Raises:
            ToggleError: URL 一覧が空 (NO_HORIZON_URLS)、全 URL 失敗
                (ALL_HORIZON_URLS_FAILED)
        """
        horizon_urls = list(self._horizon_urls)
        if not horizon_urls:
            raise ToggleError(
                code=ToggleErrorCodes.NO_HORIZON_URLS,
                message=NO_HORIZON_URLS_MESSAGE,
            )

        request_headers = self._build_headers(headers, self._public_api_key)
        if payload is not None:
            request_kwargs: dict[str, Any] = {"json": payload}
        elif body is not None:
            request_kwargs = {"content": body}
        else:
            request_kwargs = {}

        errors: list[str] = []
        async with self._make_client() as client:
            for base_url in horizon_urls:
                url = f"{base_url.rstrip('/')}/{path.lstrip('/')}"
                self._log.debug("toggle request", url=url)
                try:
                    resp = await client.post(url, headers=request_headers, **request_kwargs)
                except Exception as e:
                    message = f"{url}: {str(e) or type(e).__name__}"
                    self._log.warning("horizon request failed", url=url, error=message)
                    errors.append(message)
                    continue
                if not resp.is_success:
                    message = f"{url}: HTTP {resp.status_code} {resp.reason_phrase}".rstrip()
                    self._log.warning("horizon request failed", url=url, error=message)
                    errors.append(message)
                    continue
                try:
                    return resp.json()
                except ValueError as e:
                    message = f"{url}: invalid JSON response: {e}"
                    self._log.warning("horizon request failed", url=url, error=message)
                    errors.append(message)

        raise ToggleError(
            code=ToggleErrorCodes.ALL_HORIZON_URLS_FAILED,
            message=f"All horizon URLs failed: {'; '.join(errors)}",
        )
