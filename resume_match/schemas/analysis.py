from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from resume_match.ai.types import ProviderConfig, ProviderName

MIN_JOB_DESCRIPTION_CHARS = 50
MIN_RESUME_CHARS = 100


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ApiSettings(CamelModel):
    preferred_provider: ProviderName = ProviderName.OPENROUTER
    credentials_by_provider: dict[ProviderName, str] = Field(default_factory=dict)
    openai_key: str | None = None
    openrouter_key: str | None = None
    claude_key: str | None = None

    def to_provider_config(self) -> ProviderConfig:
        credentials = dict(self.credentials_by_provider)
        legacy = {
            ProviderName.OPENAI: self.openai_key,
            ProviderName.OPENROUTER: self.openrouter_key,
            ProviderName.CLAUDE: self.claude_key,
        }
        for provider, key in legacy.items():
            if key and not credentials.get(provider):
                credentials[provider] = key
        return ProviderConfig(
            preferred_provider=self.preferred_provider,
            credentials_by_provider=credentials,
        )


class MatchRequest(CamelModel):
    job_description: str = Field(min_length=MIN_JOB_DESCRIPTION_CHARS)
    resume_text: str = Field(min_length=MIN_RESUME_CHARS)
    api_settings: ApiSettings | None = None


class AnalysisResult(CamelModel):
    match_score: int = Field(ge=0, le=100)
    skill_match: int = Field(ge=0, le=100)
    experience_match: int = Field(ge=0, le=100)
    education_match: int = Field(ge=0, le=100)
    keyword_match: int = Field(ge=0, le=100)
    strengths: list[str] = Field(default_factory=list)
    improvements: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    summary: str
    is_ai_generated: bool = False


class StoredAnalysis(AnalysisResult):
    id: int
    created_at: datetime
    job_description: str
    resume_text: str


class MatchResponse(StoredAnalysis):
    fallback_used: bool

    @classmethod
    def from_stored(cls, stored: StoredAnalysis) -> "MatchResponse":
        return cls(**stored.model_dump(), fallback_used=not stored.is_ai_generated)


class ExtractPdfResponse(BaseModel):
    text: str
