"""POST /v1/statements/* - payment extraction from statement files or text"""

import time
import logging
from fastapi import APIRouter, File, HTTPException, Request, UploadFile
from starlette.concurrency import run_in_threadpool

from rmc_recalc.api.v1.schemas import ExtractionResponse, ParseRequest, PaymentSchema
from rmc_recalc.api.dependencies import get_request_id
from rmc_recalc.config import settings
from rmc_recalc.domain.extraction import extract_payments
from rmc_recalc.domain.exceptions import NoRecordsFoundError, TextExtractionError, UnsupportedFileError
from rmc_recalc.domain.models import ExtractionResult
from rmc_recalc.infrastructure.extraction.text_extractor import extract_text
from rmc_recalc.infrastructure.observability.metrics import extraction_counter, record_extraction
from rmc_recalc.infrastructure.observability.logging import log_extraction

router = APIRouter()


def _run_extraction(text: str, source: str, request_id: str, start_time: float) -> ExtractionResult:
    try:
        result = extract_payments(text)
    except NoRecordsFoundError as e:
        extraction_counter.labels(outcome="no_records").inc()
        logging.warning(f"No records found: {e}", extra={"request_id": request_id, "source": source})
        raise HTTPException(status_code=422, detail=str(e))

    duration_ms = (time.time() - start_time) * 1000
    record_extraction(len(result.payments), result.degraded_dates)
    log_extraction(request_id, source, len(result.payments), result.degraded_dates, duration_ms)
    return result


def _response(result: ExtractionResult, text: str | None = None) -> ExtractionResponse:
    return ExtractionResponse(
        payments=[PaymentSchema.model_validate(p) for p in result.payments],
        payment_count=len(result.payments),
        degraded_dates=result.degraded_dates,
        extracted_text=text,
    )


@router.post("/statements/extract", response_model=ExtractionResponse)
async def extract_statement(request: Request, file: UploadFile = File(...)):
    """
    Extract RMC debits from an uploaded HISCRE statement (PDF, image or text).

    The extracted text is returned alongside the payments so the user can
    check what the parser saw.
    """
    start_time = time.time()
    request_id = get_request_id(request)

    if file.size is not None and file.size > settings.max_upload_bytes:
        raise HTTPException(status_code=413, detail="File too large")

    # Never buffer more than one byte past the limit
    content = await file.read(settings.max_upload_bytes + 1)
    if len(content) > settings.max_upload_bytes:
        raise HTTPException(status_code=413, detail="File too large")

    try:
        # pdfplumber and Tesseract are blocking
        text = await run_in_threadpool(extract_text, content, file.filename or "", file.content_type)
    except UnsupportedFileError as e:
        extraction_counter.labels(outcome="failed").inc()
        raise HTTPException(status_code=415, detail=str(e))
    except TextExtractionError as e:
        extraction_counter.labels(outcome="failed").inc()
        logging.error(f"Text extraction error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=502, detail="Could not extract text from file")

    result = _run_extraction(text, "file", request_id, start_time)
    return _response(result, text)


@router.post("/statements/parse", response_model=ExtractionResponse)
def parse_statement_text(request_body: ParseRequest, request: Request):
    """Extract RMC debits from statement text already extracted by the caller"""
    start_time = time.time()
    request_id = get_request_id(request)

    result = _run_extraction(request_body.text, "text", request_id, start_time)
    return _response(result)
