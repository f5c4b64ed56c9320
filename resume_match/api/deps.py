from __future__ import annotations

from functools import lru_cache

from resume_match.core.analysis_store import AnalysisStore, get_analysis_store
from resume_match.services.orchestrator import AnalysisOrchestrator


@lru_cache(maxsize=1)
def get_orchestrator() -> AnalysisOrchestrator:
    return AnalysisOrchestrator()


def get_store() -> AnalysisStore:
    return get_analysis_store()
