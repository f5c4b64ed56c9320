import os
from dataclasses import dataclass

from resume_match.ai.types import ProviderName
from resume_match.core.config import settings


@dataclass(frozen=True)
class AIConfig:
    model: str
    base_url: str | None
    timeout_s: float
    temperature: float = 0.3
    max_tokens: int = 2000


_DEFAULTS = {
    ProviderName.OPENAI: ("OPENAI_MODEL", "gpt-4o-mini", "OPENAI_BASE_URL", None),
    ProviderName.OPENROUTER: ("OPENROUTER_MODEL", "openai/gpt-4o-mini", "OPENROUTER_BASE_URL", "https://openrouter.ai/api/v1"),
    ProviderName.CLAUDE: ("CLAUDE_MODEL", "claude-3-5-sonnet-latest", "CLAUDE_BASE_URL", "https://api.anthropic.com/v1"),
}


def load_ai_config(provider: ProviderName) -> AIConfig:
    model_env, model_default, url_env, url_default = _DEFAULTS[provider]
    model = (os.getenv(model_env) or model_default).strip()
    base_url = (os.getenv(url_env) or "").strip() or url_default
    return AIConfig(model=model, base_url=base_url, timeout_s=settings.ai_timeout_s)
