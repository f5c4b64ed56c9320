from resume_match.ai.config import load_ai_config
from resume_match.ai.types import AnalysisProvider, ProviderName

from resume_match.ai.providers.openai_provider import OpenAIProvider
from resume_match.ai.providers.openrouter_provider import OpenRouterProvider
from resume_match.ai.providers.claude_provider import ClaudeProvider


def build_provider(name: ProviderName, api_key: str) -> AnalysisProvider:
    config = load_ai_config(name)

    if name is ProviderName.OPENAI:
        return OpenAIProvider(api_key=api_key, config=config)

    if name is ProviderName.OPENROUTER:
        return OpenRouterProvider(api_key=api_key, config=config)

    if name is ProviderName.CLAUDE:
        return ClaudeProvider(api_key=api_key, config=config)

    raise ValueError(f"Unsupported provider='{name}'")
