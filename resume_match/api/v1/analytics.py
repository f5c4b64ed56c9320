from fastapi import APIRouter, Depends, Header

from resume_match.analytics import db as analytics_db
from resume_match.core.security import check_api_key

router = APIRouter()


def _auth(x_api_key: str | None = Header(default=None, alias="X-API-Key")):
    check_api_key(x_api_key)


@router.get("/analytics/provider-runs")
def provider_runs(_: None = Depends(_auth)):
    return analytics_db.get_provider_run_summary()
