"""
API routes for invoice ingestion.

Base URL: /api
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from fastapi.responses import JSONResponse

from invoice_gateway.api.dependencies import get_upload_pipeline
from invoice_gateway.pipeline import ErrorKind, UploadOutcome, UploadPipeline
from invoice_gateway.services import Credentials, InvoiceFile

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


@router.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "ok"}


def _outcome_response(outcome: UploadOutcome) -> JSONResponse:
    if outcome.success:
        content = {"message": outcome.message}
        if outcome.result and outcome.result.upload_id:
            content["upload_id"] = outcome.result.upload_id
        return JSONResponse(status_code=outcome.status_code, content=content)

    content = {
        "message": outcome.message,
        "code": outcome.error_kind.code,
    }
    if outcome.reason:
        content["reason"] = outcome.reason
    return JSONResponse(status_code=outcome.status_code, content=content)


@router.post("/invoices/upload")
async def upload_invoice(
    file: Optional[UploadFile] = File(default=None),
    client_id: str = Form(default=""),
    client_secret: str = Form(default=""),
    simulate_timeout: bool = Query(default=False, alias="simulateTimeout"),
    pipeline: UploadPipeline = Depends(get_upload_pipeline)
):
    """
    Upload an invoice PDF.

    The file must be a PDF (application/pdf, .pdf extension, %PDF- header)
    that is not encrypted, parses cleanly, and is within the size limit.

    Status codes:
        400 - no file, encrypted or corrupt PDF
        401 - invalid client credentials
        413 - file too large
        415 - not a PDF
        501 - accepted by the upload service (storage not implemented)
        504 - simulated timeout
    """
    invoice = None
    if file is not None:
        try:
            data = await file.read()
        except Exception as e:
            logger.error(f"Failed to read upload body: {e}")
            return _outcome_response(UploadOutcome.fail(ErrorKind.INTERNAL_ERROR))

        invoice = InvoiceFile(
            content=data,
            content_type=file.content_type or "",
            filename=file.filename or ""
        )

    outcome = await pipeline.run(
        invoice,
        Credentials(client_id=client_id, client_secret=client_secret),
        simulate_timeout=simulate_timeout
    )

    if not outcome.success:
        logger.info(f"Upload rejected: {outcome.error_kind.code} ({outcome.message})")

    return _outcome_response(outcome)
