from fastapi import APIRouter, File, HTTPException, Request, UploadFile, status

from resume_match.core.config import settings
from resume_match.core.errors import ExtractionError
from resume_match.core.rate_limit import rate_limit
from resume_match.schemas.analysis import ExtractPdfResponse
from resume_match.services.pdf_extractor import extract_text

router = APIRouter()

MAX_UPLOAD_BYTES = 10 * 1024 * 1024  # 10 MB
PDF_CONTENT_TYPES = {"application/pdf", "application/x-pdf"}


@router.post("/extract-pdf", response_model=ExtractPdfResponse)
@rate_limit(settings.upload_rate_limit)
async def extract_pdf(request: Request, resume: UploadFile | None = File(default=None)):
    _ = request
    if resume is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No PDF file uploaded")

    filename = resume.filename or "resume.pdf"
    is_pdf_name = filename.lower().endswith(".pdf")
    if (resume.content_type or "").lower() not in PDF_CONTENT_TYPES and not is_pdf_name:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Only PDF files are allowed")

    chunks: list[bytes] = []
    total = 0
    while True:
        chunk = await resume.read(1024 * 64)
        if not chunk:
            break
        total += len(chunk)
        if total > MAX_UPLOAD_BYTES:
            raise HTTPException(
                status_code=413,
                detail=f"File too large. Maximum allowed size is {MAX_UPLOAD_BYTES // (1024 * 1024)} MB.",
            )
        chunks.append(chunk)

    try:
        text = extract_text(b"".join(chunks))
    except ExtractionError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return ExtractPdfResponse(text=text)
