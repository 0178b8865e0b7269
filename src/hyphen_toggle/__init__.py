"""Hyphen toggle evaluation client library."""

from .cache import EvaluationCache
from .config import ToggleOptions, load_options, options_from_env
from .exceptions import ToggleError, ToggleErrorCodes
from .headers import normalize_headers
from .hooks import ToggleHookData, ToggleHooks
from .keys import (
    DEFAULT_HORIZON_URL,
    HORIZON_DOMAIN,
    get_default_horizon_url,
    get_default_horizon_urls,
    get_org_id_from_public_key,
)
from .models import (
    Evaluation,
    EvaluationResponse,
    ToggleCachingOptions,
    ToggleContext,
    ToggleEvaluation,
    ToggleGetOptions,
    ToggleUser,
)
from .targeting import generate_target_key, random_suffix
from .toggle import Toggle

__all__ = [
    "DEFAULT_HORIZON_URL",
    "Evaluation",
    "EvaluationCache",
    "EvaluationResponse",
    "HORIZON_DOMAIN",
    "Toggle",
    "ToggleCachingOptions",
    "ToggleContext",
    "ToggleError",
    "ToggleErrorCodes",
    "ToggleEvaluation",
    "ToggleGetOptions",
    "ToggleHookData",
    "ToggleHooks",
    "ToggleOptions",
    "ToggleUser",
    "generate_target_key",
    "get_default_horizon_url",
    "get_default_horizon_urls",
    "get_org_id_from_public_key",
    "load_options",
    "normalize_headers",
    "options_from_env",
    "random_suffix",
]
