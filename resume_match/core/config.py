from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

SUPPORTED_PROVIDERS = ("openai", "openrouter", "claude")
STORAGE_BACKENDS = ("sqlite", "memory")


def _get_env(name: str, default: str | None = None) -> str | None:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value


def _get_env_bool(name: str, default: bool) -> bool:
    raw = _get_env(name, None)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _get_env_int(name: str, default: int) -> int:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _get_env_float(name: str, default: float) -> float:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _get_env_list(name: str, default: list[str]) -> tuple[str, ...]:
    raw = _get_env(name, None)
    if raw is None:
        return tuple(default)
    values = [item.strip() for item in raw.split(",")]
    clean = [item for item in values if item]
    return tuple(clean) if clean else tuple(default)


def _get_secret(*names: str) -> str | None:
    for name in names:
        value = (_get_env(name) or "").strip()
        if value:
            return value
    return None


@dataclass(frozen=True)
class Settings:
    api_key: str | None
    rate_limit: str
    upload_rate_limit: str
    rate_limit_enabled: bool
    log_level: str
    sentry_dsn: str | None
    cors_allowed_origins: tuple[str, ...]
    storage_backend: str
    analysis_db_path: str
    analytics_enabled: bool
    analytics_db_path: str
    analytics_retention_days: int
    ai_analysis_enabled: bool
    default_ai_provider: str
    ai_timeout_s: float
    openai_api_key: str | None
    openrouter_api_key: str | None
    anthropic_api_key: str | None
    llm_http_referer: str
    llm_app_title: str

    def default_credential(self) -> str | None:
        return {
            "openai": self.openai_api_key,
            "openrouter": self.openrouter_api_key,
            "claude": self.anthropic_api_key,
        }.get(self.default_ai_provider)


settings = Settings(
    api_key=_get_env("API_KEY"),
    rate_limit=_get_env("RATE_LIMIT", "30/minute") or "30/minute",
    upload_rate_limit=_get_env("UPLOAD_RATE_LIMIT", "10/minute") or "10/minute",
    rate_limit_enabled=_get_env_bool("RATE_LIMIT_ENABLED", True),
    log_level=_get_env("LOG_LEVEL", "INFO") or "INFO",
    sentry_dsn=_get_env("SENTRY_DSN"),
    cors_allowed_origins=_get_env_list(
        "CORS_ALLOWED_ORIGINS",
        [
            "http://localhost:5000",
            "http://127.0.0.1:5000",
            "http://localhost:5173",
            "http://localhost:3000",
        ],
    ),
    storage_backend=(_get_env("STORAGE_BACKEND", "sqlite") or "sqlite").strip().lower(),
    analysis_db_path=_get_env("ANALYSIS_DB_PATH", "data/analyses.db") or "data/analyses.db",
    analytics_enabled=_get_env_bool("ANALYTICS_ENABLED", True),
    analytics_db_path=_get_env("ANALYTICS_DB_PATH", "data/analytics.db") or "data/analytics.db",
    analytics_retention_days=_get_env_int("ANALYTICS_RETENTION_DAYS", 90),
    ai_analysis_enabled=_get_env_bool("AI_ANALYSIS_ENABLED", True),
    default_ai_provider=(_get_env("DEFAULT_AI_PROVIDER", "openrouter") or "openrouter").strip().lower(),
    ai_timeout_s=_get_env_float("AI_TIMEOUT_S", 30.0),
    openai_api_key=_get_secret("OPENAI_API_KEY"),
    openrouter_api_key=_get_secret("OPENROUTER_API_KEY", "OPENROUTER_KEY"),
    anthropic_api_key=_get_secret("ANTHROPIC_API_KEY", "CLAUDE_API_KEY"),
    llm_http_referer=_get_env("LLM_HTTP_REFERER", "http://localhost:5000") or "http://localhost:5000",
    llm_app_title=_get_env("LLM_APP_TITLE", "AI Resume Matcher") or "AI Resume Matcher",
)

if settings.storage_backend not in STORAGE_BACKENDS:
    raise RuntimeError(f"STORAGE_BACKEND must be one of: {', '.join(STORAGE_BACKENDS)}.")

if settings.default_ai_provider not in SUPPORTED_PROVIDERS:
    raise RuntimeError(f"DEFAULT_AI_PROVIDER must be one of: {', '.join(SUPPORTED_PROVIDERS)}.")

if settings.ai_timeout_s <= 0:
    raise RuntimeError("AI_TIMEOUT_S must be a positive number of seconds.")
