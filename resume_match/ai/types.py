from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Protocol

from resume_match.core.errors import InputValidationError


class ProviderName(str, Enum):
    OPENAI = "openai"
    OPENROUTER = "openrouter"
    CLAUDE = "claude"


def parse_provider_name(value: Any) -> ProviderName:
    if isinstance(value, ProviderName):
        return value
    try:
        return ProviderName(str(value).strip().lower())
    except ValueError as exc:
        supported = ", ".join(p.value for p in ProviderName)
        raise InputValidationError(
            f"Unsupported provider '{value}'. Supported providers: {supported}."
        ) from exc


@dataclass(frozen=True)
class ProviderConfig:
    """Per-request provider choice. Never persisted."""

    preferred_provider: ProviderName
    credentials_by_provider: Mapping[ProviderName, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "preferred_provider", parse_provider_name(self.preferred_provider))
        credentials = {
            parse_provider_name(provider): secret
            for provider, secret in dict(self.credentials_by_provider).items()
        }
        object.__setattr__(self, "credentials_by_provider", MappingProxyType(credentials))

    def credential(self) -> str | None:
        secret = (self.credentials_by_provider.get(self.preferred_provider) or "").strip()
        return secret or None


class AnalysisProvider(Protocol):
    name: ProviderName
    model: str

    def complete(self, *, system_prompt: str, user_prompt: str) -> str: ...
