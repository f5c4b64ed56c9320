"""Deterministic resume/job-description scorer.

Used whenever no remote provider produced an analysis. Keyword extraction is a
regex pass over a fixed vocabulary: cheap, explainable and network free.
Weights and thresholds are read from ``core/scoring.yaml``.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass

from resume_match.core.scoring import get_scoring_value
from resume_match.schemas.analysis import AnalysisResult

logger = logging.getLogger(__name__)

_NON_WORD_RE = re.compile(r"[^\w\s]", re.ASCII)
_SKILL_CUE_RE = re.compile(
    r"(?:experience with|proficient in|knowledge of|skills in|familiar with)\s+([^.;,]+)",
    re.IGNORECASE,
)
_SKILL_VOCABULARY_RES = (
    re.compile(
        r"(?:javascript|python|java|react|node\.js|html|css|sql|aws|docker|kubernetes|git)",
        re.IGNORECASE,
    ),
    re.compile(
        r"(?:typescript|vue|angular|mongodb|postgresql|redis|microservices|api|rest|graphql)",
        re.IGNORECASE,
    ),
)
_EXPERIENCE_PHRASE_RE = re.compile(r"\d+\s*\+?\s*years?\s+(?:of\s+)?experience", re.IGNORECASE)
_SENIORITY_RE = re.compile(r"senior|junior|lead|principal|architect|manager", re.IGNORECASE)
_EDUCATION_RE = re.compile(
    r"bachelor|master|phd|degree|computer science|engineering|mathematics",
    re.IGNORECASE,
)
_YEARS_RE = re.compile(r"(\d+)\s*\+?\s*years", re.IGNORECASE)

SKILL_STRENGTH = "Strong technical skills alignment with job requirements"
EXPERIENCE_STRENGTH = "Experience level matches job expectations well"
EDUCATION_STRENGTH = "Educational background aligns with position requirements"
GENERIC_STRENGTH = "Resume shows relevant background for the position"

SKILL_IMPROVEMENT = "Consider highlighting more technical skills mentioned in the job description"
EXPERIENCE_IMPROVEMENT = "Emphasize relevant experience and quantify achievements"
EDUCATION_IMPROVEMENT = "Consider adding relevant certifications or continuing education"

RECOMMENDATIONS = (
    "Use keywords from the job description throughout your resume",
    "Quantify your achievements with specific metrics and results",
    "Tailor your summary to highlight the most relevant experience",
    "Include specific technologies and methodologies mentioned in the job posting",
)

SUMMARY_EXCELLENT = "Excellent match! Your resume aligns very well with the job requirements."
SUMMARY_GOOD = "Good match with some areas for improvement to strengthen your application."
SUMMARY_MODERATE = (
    "Moderate match. Consider tailoring your resume to better highlight relevant experience."
)


@dataclass(frozen=True)
class KeywordSets:
    skills: frozenset[str]
    experience: frozenset[str]
    education: frozenset[str]


def _cfg(path: str) -> float:
    value = get_scoring_value(f"similarity.{path}")
    if value is None:
        raise RuntimeError(f"Missing scoring config value 'similarity.{path}'.")
    return value


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def tokenize(text: str) -> list[str]:
    min_length = int(_cfg("min_token_length"))
    cleaned = _NON_WORD_RE.sub(" ", text.lower())
    return [token for token in cleaned.split() if len(token) >= min_length]


def extract_skill_keywords(job_description: str) -> frozenset[str]:
    skills: set[str] = set()
    for match in _SKILL_CUE_RE.finditer(job_description):
        clause = match.group(1).strip().lower()
        if clause:
            skills.add(clause)
    for pattern in _SKILL_VOCABULARY_RES:
        skills.update(found.lower() for found in pattern.findall(job_description))
    return frozenset(skills)


def extract_experience_keywords(job_description: str) -> frozenset[str]:
    found = _EXPERIENCE_PHRASE_RE.findall(job_description) + _SENIORITY_RE.findall(job_description)
    return frozenset(item.lower() for item in found)


def extract_education_keywords(job_description: str) -> frozenset[str]:
    return frozenset(item.lower() for item in _EDUCATION_RE.findall(job_description))


def extract_keywords(job_description: str) -> KeywordSets:
    return KeywordSets(
        skills=extract_skill_keywords(job_description),
        experience=extract_experience_keywords(job_description),
        education=extract_education_keywords(job_description),
    )


def skill_match_score(skill_keywords: frozenset[str], resume_text: str) -> int:
    if not skill_keywords:
        return int(_cfg("skill.default_score"))
    resume_lower = resume_text.lower()
    matched = sum(1 for keyword in skill_keywords if keyword in resume_lower)
    return round_half_up(matched / len(skill_keywords) * 100)


def _first_years(text: str) -> int | None:
    match = _YEARS_RE.search(text)
    return int(match.group(1)) if match else None


def experience_match_score(job_description: str, resume_text: str) -> int:
    required = _first_years(job_description)
    if required is None:
        return int(_cfg("experience.default_score"))

    candidate = _first_years(resume_text) or 0
    if candidate >= required:
        return int(_cfg("experience.tiers.full"))
    if candidate >= required * _cfg("experience.near_ratio"):
        return int(_cfg("experience.tiers.near"))
    if candidate >= required * _cfg("experience.partial_ratio"):
        return int(_cfg("experience.tiers.partial"))
    return int(_cfg("experience.tiers.low"))


def education_match_score(job_description: str, resume_text: str) -> int:
    job_lower = job_description.lower()
    required = next(
        (term for term in _cfg("education.priority_terms") if term in job_lower),
        None,
    )
    if required is None:
        return int(_cfg("education.default_score"))
    if required in resume_text.lower():
        return int(_cfg("education.matched_score"))
    return int(_cfg("education.missing_score"))


def keyword_overlap_score(job_tokens: list[str], resume_tokens: list[str]) -> int:
    job_set = set(job_tokens)
    resume_set = set(resume_tokens)
    union = job_set | resume_set
    if not union:
        return 0
    return round_half_up(len(job_set & resume_set) / len(union) * 100)


def overall_score(skill: int, experience: int, education: int, keyword: int) -> int:
    return round_half_up(
        skill * _cfg("weights.skill")
        + experience * _cfg("weights.experience")
        + education * _cfg("weights.education")
        + keyword * _cfg("weights.keyword")
    )


def build_strengths(skill: int, experience: int, education: int) -> list[str]:
    threshold = _cfg("feedback.strength_threshold")
    strengths: list[str] = []
    if skill >= threshold:
        strengths.append(SKILL_STRENGTH)
    if experience >= threshold:
        strengths.append(EXPERIENCE_STRENGTH)
    if education >= threshold:
        strengths.append(EDUCATION_STRENGTH)
    if not strengths:
        strengths.append(GENERIC_STRENGTH)
    return strengths


def build_improvements(skill: int, experience: int, education: int) -> list[str]:
    threshold = _cfg("feedback.improvement_threshold")
    improvements: list[str] = []
    if skill < threshold:
        improvements.append(SKILL_IMPROVEMENT)
    if experience < threshold:
        improvements.append(EXPERIENCE_IMPROVEMENT)
    if education < threshold:
        improvements.append(EDUCATION_IMPROVEMENT)
    return improvements


def build_summary(match_score: int) -> str:
    if match_score >= _cfg("feedback.summary_excellent"):
        return SUMMARY_EXCELLENT
    if match_score >= _cfg("feedback.summary_good"):
        return SUMMARY_GOOD
    return SUMMARY_MODERATE


class SimilarityAnalyzer:
    """Pure function wrapped in a class so the orchestrator can take it as a dependency."""

    def analyze(self, job_description: str, resume_text: str) -> AnalysisResult:
        keywords = extract_keywords(job_description)
        logger.debug(
            "similarity_keywords skills=%d experience=%d education=%d",
            len(keywords.skills),
            len(keywords.experience),
            len(keywords.education),
        )

        skill = skill_match_score(keywords.skills, resume_text)
        experience = experience_match_score(job_description, resume_text)
        education = education_match_score(job_description, resume_text)
        keyword = keyword_overlap_score(tokenize(job_description), tokenize(resume_text))
        match_score = overall_score(skill, experience, education, keyword)

        return AnalysisResult(
            match_score=match_score,
            skill_match=skill,
            experience_match=experience,
            education_match=education,
            keyword_match=keyword,
            strengths=build_strengths(skill, experience, education),
            improvements=build_improvements(skill, experience, education),
            recommendations=list(RECOMMENDATIONS),
            summary=build_summary(match_score),
            is_ai_generated=False,
        )
