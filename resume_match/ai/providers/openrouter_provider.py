from __future__ import annotations

from resume_match.ai.providers.openai_provider import OpenAIProvider
from resume_match.ai.types import ProviderName
from resume_match.core.config import settings


class OpenRouterProvider(OpenAIProvider):
    """OpenRouter speaks the OpenAI chat completions protocol."""

    name = ProviderName.OPENROUTER

    def _default_headers(self) -> dict[str, str] | None:
        return {
            "HTTP-Referer": settings.llm_http_referer,
            "X-Title": settings.llm_app_title,
        }
