import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi import _rate_limit_exceeded_handler
import sentry_sdk

from resume_match.api.v1.health import router as health_router
from resume_match.api.v1.match import router as match_router
from resume_match.api.v1.extract import router as extract_router
from resume_match.api.v1.analytics import router as analytics_router
from resume_match.core.rate_limit import limiter
from resume_match.core.config import settings
from resume_match.core.lifespan import lifespan

logging.basicConfig(level=settings.log_level, format="%(message)s")
if settings.sentry_dsn:
    sentry_sdk.init(dsn=settings.sentry_dsn)

app = FastAPI(title="Resume Match API", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_allowed_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    _ = request
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": "Invalid input data", "errors": jsonable_encoder(exc.errors())},
    )


app.include_router(health_router, prefix="/api", tags=["Health"])
app.include_router(match_router, prefix="/api", tags=["Match"])
app.include_router(extract_router, prefix="/api", tags=["Extract"])
app.include_router(analytics_router, prefix="/api", tags=["Analytics"])
