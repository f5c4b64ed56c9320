from fastapi import APIRouter

from resume_match.core.config import settings

router = APIRouter()


@router.get("/health", summary="Health Check", description="Liveness plus the active storage and AI settings.")
async def health_check():
    return {
        "status": "healthy",
        "storage": settings.storage_backend,
        "aiAnalysisEnabled": settings.ai_analysis_enabled,
        "defaultProvider": settings.default_ai_provider,
    }
