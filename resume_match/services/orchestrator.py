"""Provider selection and fallback policy.

One request gets at most one remote attempt: the caller's preferred provider
when a ProviderConfig is supplied, otherwise the process-wide default. Any
failure in that attempt is logged and absorbed, and the deterministic
SimilarityAnalyzer produces the result instead.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from resume_match.ai.factory import build_provider
from resume_match.ai.types import AnalysisProvider, ProviderConfig, ProviderName, parse_provider_name
from resume_match.core.config import Settings, settings as default_settings
from resume_match.core.errors import InputValidationError, MissingCredentialError, ProviderAttemptFailure
from resume_match.schemas.analysis import MIN_JOB_DESCRIPTION_CHARS, MIN_RESUME_CHARS, AnalysisResult
from resume_match.services.analysis_llm import run_remote_analysis
from resume_match.services.similarity_analyzer import SimilarityAnalyzer

logger = logging.getLogger(__name__)

ProviderFactory = Callable[[ProviderName, str], AnalysisProvider]


@dataclass(frozen=True)
class AnalysisInput:
    job_description: str
    resume_text: str

    @classmethod
    def create(cls, job_description: str, resume_text: str) -> "AnalysisInput":
        if len(job_description or "") < MIN_JOB_DESCRIPTION_CHARS:
            raise InputValidationError(
                f"Job description must be at least {MIN_JOB_DESCRIPTION_CHARS} characters long"
            )
        if len(resume_text or "") < MIN_RESUME_CHARS:
            raise InputValidationError(f"Resume text must be at least {MIN_RESUME_CHARS} characters long")
        return cls(job_description=job_description, resume_text=resume_text)


class AnalysisOrchestrator:
    def __init__(
        self,
        *,
        settings: Settings = default_settings,
        provider_factory: ProviderFactory = build_provider,
        analyzer: SimilarityAnalyzer | None = None,
    ):
        self._settings = settings
        self._provider_factory = provider_factory
        self._analyzer = analyzer or SimilarityAnalyzer()

    def analyze(
        self,
        job_description: str,
        resume_text: str,
        provider_config: ProviderConfig | None = None,
    ) -> AnalysisResult:
        analysis_input = AnalysisInput.create(job_description, resume_text)
        if provider_config is not None and not isinstance(provider_config, ProviderConfig):
            raise InputValidationError("provider_config must be a ProviderConfig")

        target = self._select_target(provider_config)
        if target is not None:
            provider_name, credential = target
            try:
                return self._attempt_remote(provider_name, credential, analysis_input)
            except Exception as exc:  # noqa: BLE001 - deterministic fallback is expected
                code = exc.code if isinstance(exc, ProviderAttemptFailure) else "provider_exception"
                logger.warning(
                    "provider_attempt_failed provider=%s code=%s: %s",
                    provider_name.value,
                    code,
                    exc,
                )

        logger.info("analysis_fallback_used reason=%s", "provider_failed" if target else "no_provider")
        return self._analyzer.analyze(analysis_input.job_description, analysis_input.resume_text)

    def _select_target(self, provider_config: ProviderConfig | None) -> tuple[ProviderName, str | None] | None:
        if provider_config is not None:
            return provider_config.preferred_provider, provider_config.credential()
        if not self._settings.ai_analysis_enabled:
            return None
        default_provider = parse_provider_name(self._settings.default_ai_provider)
        return default_provider, self._settings.default_credential()

    def _attempt_remote(
        self,
        provider_name: ProviderName,
        credential: str | None,
        analysis_input: AnalysisInput,
    ) -> AnalysisResult:
        if not credential:
            raise MissingCredentialError(f"{provider_name.value} API key not configured")
        provider = self._provider_factory(provider_name, credential)
        result = run_remote_analysis(provider, analysis_input.job_description, analysis_input.resume_text)
        logger.info(
            "provider_attempt_succeeded provider=%s model=%s score=%s",
            provider_name.value,
            provider.model,
            result.match_score,
        )
        return result
