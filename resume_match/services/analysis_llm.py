from __future__ import annotations

import json
import logging
import math
import time
import uuid
from typing import Any

from resume_match.ai.types import AnalysisProvider
from resume_match.analytics.db import log_ai_analysis_run
from resume_match.core.errors import ProviderAttemptFailure, ResponseFormatError
from resume_match.schemas.analysis import AnalysisResult

logger = logging.getLogger(__name__)

SCORE_FIELDS = ("matchScore", "skillMatch", "experienceMatch", "educationMatch", "keywordMatch")
LIST_FIELDS = ("strengths", "improvements", "recommendations")
REQUIRED_FIELDS = SCORE_FIELDS + LIST_FIELDS + ("summary",)

SYSTEM_PROMPT = (
    "You are an expert HR professional and resume analyst. Analyze the match between a resume "
    "and job description with precision and provide actionable insights."
)

ANALYSIS_PROMPT_TEMPLATE = """Please analyze how well this resume matches the given job description. Respond ONLY with a single JSON object in the following format:

{{
  "matchScore": <overall score 0-100>,
  "skillMatch": <skills alignment score 0-100>,
  "experienceMatch": <experience alignment score 0-100>,
  "educationMatch": <education alignment score 0-100>,
  "keywordMatch": <keyword coverage score 0-100>,
  "strengths": [<array of 2-4 key strengths where resume aligns well>],
  "improvements": [<array of 2-3 areas that could be improved or highlighted better>],
  "recommendations": [<array of 3-4 specific actionable recommendations>],
  "summary": "<brief 2-3 sentence overall assessment>"
}}

Job Description:
{job_description}

Resume:
{resume_text}

Analyze the alignment considering:
1. Required skills vs candidate skills
2. Experience level and domain match
3. Education requirements
4. Key responsibilities alignment
5. Industry knowledge and terminology

Provide specific, actionable insights that would help improve the match score."""


def build_analysis_prompt(job_description: str, resume_text: str) -> str:
    return ANALYSIS_PROMPT_TEMPLATE.format(job_description=job_description, resume_text=resume_text)


def extract_first_json_object(text: str) -> dict[str, Any]:
    """Parse the span from the first '{' to the last '}' in a free-form reply."""
    start = text.find("{") if text else -1
    end = text.rfind("}") if text else -1
    if start == -1 or end <= start:
        raise ResponseFormatError("No valid JSON found in response")
    try:
        parsed = json.loads(text[start : end + 1])
    except json.JSONDecodeError as exc:
        raise ResponseFormatError(f"Failed to parse AI response: {exc.msg}") from exc
    if not isinstance(parsed, dict):
        raise ResponseFormatError("AI response JSON is not an object")
    return parsed


def clamp_score(value: Any) -> int:
    if isinstance(value, bool):
        number = float(value)
    elif isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            number = 0.0
    else:
        number = 0.0
    if math.isnan(number):
        number = 0.0
    bounded = max(0.0, min(100.0, number))
    return int(math.floor(bounded + 0.5))


def _string_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [item if isinstance(item, str) else str(item) for item in value if item is not None]


def normalize_analysis_payload(payload: dict[str, Any]) -> AnalysisResult:
    missing = [field for field in REQUIRED_FIELDS if field not in payload]
    if missing:
        raise ResponseFormatError(f"Missing required field: {missing[0]}")

    summary = payload.get("summary")
    return AnalysisResult(
        match_score=clamp_score(payload["matchScore"]),
        skill_match=clamp_score(payload["skillMatch"]),
        experience_match=clamp_score(payload["experienceMatch"]),
        education_match=clamp_score(payload["educationMatch"]),
        keyword_match=clamp_score(payload["keywordMatch"]),
        strengths=_string_list(payload["strengths"]),
        improvements=_string_list(payload["improvements"]),
        recommendations=_string_list(payload["recommendations"]),
        summary=summary if isinstance(summary, str) else str(summary or ""),
        is_ai_generated=True,
    )


def _log_ai_run(
    *,
    run_id: str,
    provider: AnalysisProvider,
    status: str,
    latency_ms: int,
    error_code: str | None = None,
) -> None:
    try:
        log_ai_analysis_run(
            run_id=run_id,
            provider=provider.name.value,
            model=provider.model,
            status=status,
            error_code=error_code,
            latency_ms=latency_ms,
        )
    except Exception:  # pragma: no cover - analytics must not break analyses
        logger.debug("ai_run_logging_failed", exc_info=True)


def run_remote_analysis(
    provider: AnalysisProvider,
    job_description: str,
    resume_text: str,
) -> AnalysisResult:
    """One provider call, parsed and normalized. Raises ProviderAttemptFailure subclasses."""
    run_id = uuid.uuid4().hex
    started = time.perf_counter()
    try:
        raw = provider.complete(
            system_prompt=SYSTEM_PROMPT,
            user_prompt=build_analysis_prompt(job_description, resume_text),
        )
        result = normalize_analysis_payload(extract_first_json_object(raw))
    except Exception as exc:
        code = exc.code if isinstance(exc, ProviderAttemptFailure) else "provider_exception"
        _log_ai_run(
            run_id=run_id,
            provider=provider,
            status="error",
            error_code=code,
            latency_ms=int((time.perf_counter() - started) * 1000),
        )
        raise

    _log_ai_run(
        run_id=run_id,
        provider=provider,
        status="success",
        latency_ms=int((time.perf_counter() - started) * 1000),
    )
    return result
