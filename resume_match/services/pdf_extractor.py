from __future__ import annotations

import logging
from io import BytesIO

from pypdf import PdfReader

from resume_match.core.errors import ExtractionError

logger = logging.getLogger(__name__)

PDF_MAGIC = b"%PDF-"
MIN_EXTRACTED_CHARS = 50


def extract_text(content: bytes) -> str:
    if not content or not content.lstrip()[:5].startswith(PDF_MAGIC):
        raise ExtractionError("Failed to extract text from PDF. Please ensure the file is a valid PDF.")

    try:
        reader = PdfReader(BytesIO(content))
        page_chunks: list[str] = []
        for page in reader.pages:
            page_text = page.extract_text() or ""
            if page_text.strip():
                page_chunks.append(page_text)
    except Exception as exc:
        logger.warning("pdf_extraction_failed bytes=%s: %s", len(content), exc)
        raise ExtractionError(
            "Failed to extract text from PDF. Please ensure the file is a valid PDF."
        ) from exc

    text = "\n".join(page_chunks).strip()
    if len(text) < MIN_EXTRACTED_CHARS:
        raise ExtractionError(
            "Could not extract sufficient text from PDF. Please ensure the PDF contains readable text."
        )
    return text
