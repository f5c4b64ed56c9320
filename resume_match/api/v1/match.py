import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status

from resume_match.api.deps import get_orchestrator, get_store
from resume_match.core.analysis_store import AnalysisStore
from resume_match.core.errors import InputValidationError, StorageError
from resume_match.core.rate_limit import rate_limit
from resume_match.schemas.analysis import MatchRequest, MatchResponse, StoredAnalysis
from resume_match.services.orchestrator import AnalysisOrchestrator

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/match", response_model=MatchResponse)
@rate_limit()
def analyze_match(
    request: Request,
    payload: MatchRequest,
    orchestrator: AnalysisOrchestrator = Depends(get_orchestrator),
    store: AnalysisStore = Depends(get_store),
):
    _ = request
    try:
        provider_config = payload.api_settings.to_provider_config() if payload.api_settings else None
        result = orchestrator.analyze(payload.job_description, payload.resume_text, provider_config)
    except InputValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    try:
        stored = store.create(
            result,
            job_description=payload.job_description,
            resume_text=payload.resume_text,
        )
    except StorageError as exc:
        logger.error("analysis_store_failed: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to analyze resume match",
        ) from exc

    return MatchResponse.from_stored(stored)


@router.get("/analysis/{analysis_id}", response_model=StoredAnalysis)
def get_analysis(analysis_id: int, store: AnalysisStore = Depends(get_store)):
    try:
        analysis = store.get(analysis_id)
    except StorageError as exc:
        logger.error("analysis_lookup_failed id=%s: %s", analysis_id, exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve analysis",
        ) from exc
    if analysis is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Analysis not found")
    return analysis


@router.get("/history", response_model=list[StoredAnalysis])
def get_history(store: AnalysisStore = Depends(get_store)):
    try:
        return store.list_all()
    except StorageError as exc:
        logger.error("analysis_history_failed: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve analysis history",
        ) from exc
