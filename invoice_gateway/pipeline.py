"""
Upload pipeline for invoice documents.

Stages run in order and stop at the first failure:
    file present -> authenticate -> (simulated timeout) -> format
    -> encryption -> integrity -> size -> uploader
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from invoice_gateway.services import (
    Authenticator,
    Credentials,
    InvoiceFile,
    InvoiceUploader,
    UploadResult,
)
from invoice_gateway.validation import (
    MAX_FILE_SIZE_BYTES,
    check_pdf_integrity,
    is_pdf_encrypted,
    validate_format,
    validate_size,
)

logger = logging.getLogger(__name__)


class ErrorKind(Enum):
    NO_FILE_UPLOADED = ("NO_FILE_UPLOADED", 400, "No file uploaded")
    UNAUTHORIZED = ("UNAUTHORIZED", 401, "Unauthorized")
    SERVER_TIMEOUT = ("SERVER_TIMEOUT", 504, "Server timeout")
    UNSUPPORTED_FORMAT = ("UNSUPPORTED_FORMAT", 415, "Unsupported file format")
    ENCRYPTED_DOCUMENT = ("ENCRYPTED_DOCUMENT", 400, "Encrypted PDF files are not allowed")
    CORRUPT_DOCUMENT = ("CORRUPT_DOCUMENT", 400, "PDF file is corrupted or malformed")
    FILE_TOO_LARGE = ("FILE_TOO_LARGE", 413, "File too large")
    INTERNAL_ERROR = ("INTERNAL_ERROR", 500, "Internal server error")

    def __init__(self, code: str, status_code: int, default_message: str):
        self.code = code
        self.status_code = status_code
        self.default_message = default_message


@dataclass
class UploadConfig:
    """Per-app settings for the upload pipeline."""

    max_file_size_bytes: int = MAX_FILE_SIZE_BYTES
    # Lets clients exercise timeout handling via ?simulateTimeout=true
    allow_simulated_timeout: bool = True


@dataclass
class UploadOutcome:
    success: bool
    error_kind: Optional[ErrorKind] = None
    message: str = ""
    reason: Optional[str] = None
    result: Optional[UploadResult] = None
    stages: list[str] = field(default_factory=list)

    @classmethod
    def fail(
        cls,
        kind: ErrorKind,
        message: Optional[str] = None,
        reason: Optional[str] = None,
        stages: Optional[list[str]] = None
    ) -> "UploadOutcome":
        return cls(
            success=False,
            error_kind=kind,
            message=message or kind.default_message,
            reason=reason,
            stages=stages or []
        )

    @property
    def status_code(self) -> int:
        if self.error_kind is not None:
            return self.error_kind.status_code
        if self.result is not None and self.result.implemented:
            return 201
        return 501


class UploadPipeline:
    """Runs an uploaded invoice through authentication and PDF validation."""

    def __init__(
        self,
        authenticator: Authenticator,
        uploader: InvoiceUploader,
        config: Optional[UploadConfig] = None
    ):
        self.authenticator = authenticator
        self.uploader = uploader
        self.config = config or UploadConfig()

    async def run(
        self,
        file: Optional[InvoiceFile],
        credentials: Credentials,
        simulate_timeout: bool = False
    ) -> UploadOutcome:
        """
        Process one upload request.

        Never raises; unexpected faults are logged and reported as
        INTERNAL_ERROR without their detail.

        Args:
            file: Uploaded file, or None if the request carried none
            credentials: Client credentials passed to the authenticator
            simulate_timeout: Stop with SERVER_TIMEOUT after authentication

        Returns:
            UploadOutcome for the first failing stage, or the uploader result
        """
        stages: list[str] = []
        try:
            return await self._run(file, credentials, simulate_timeout, stages)
        except Exception:
            logger.exception(f"Upload pipeline failed during stage '{stages[-1] if stages else 'start'}'")
            return UploadOutcome.fail(ErrorKind.INTERNAL_ERROR, stages=stages)

    async def _run(
        self,
        file: Optional[InvoiceFile],
        credentials: Credentials,
        simulate_timeout: bool,
        stages: list[str]
    ) -> UploadOutcome:
        if file is None:
            return UploadOutcome.fail(ErrorKind.NO_FILE_UPLOADED, stages=stages)

        stages.append("authenticate")
        authorized = await self.authenticator.authenticate(
            credentials.client_id, credentials.client_secret
        )
        if not authorized:
            logger.info(f"Rejected credentials for client '{credentials.client_id}'")
            return UploadOutcome.fail(ErrorKind.UNAUTHORIZED, stages=stages)

        if simulate_timeout and self.config.allow_simulated_timeout:
            logger.info("Simulated timeout requested, skipping validation")
            return UploadOutcome.fail(ErrorKind.SERVER_TIMEOUT, stages=stages)

        stages.append("format")
        validation = validate_format(file.content, file.content_type, file.filename)
        if not validation.valid:
            return UploadOutcome.fail(
                ErrorKind.UNSUPPORTED_FORMAT,
                message=validation.error,
                reason=validation.error_code,
                stages=stages
            )

        stages.append("encryption")
        if is_pdf_encrypted(file.content):
            return UploadOutcome.fail(ErrorKind.ENCRYPTED_DOCUMENT, stages=stages)

        stages.append("integrity")
        if not check_pdf_integrity(file.content):
            return UploadOutcome.fail(ErrorKind.CORRUPT_DOCUMENT, stages=stages)

        stages.append("size")
        validation = validate_size(file.content, self.config.max_file_size_bytes)
        if not validation.valid:
            return UploadOutcome.fail(
                ErrorKind.FILE_TOO_LARGE,
                message=validation.error,
                stages=stages
            )

        stages.append("upload")
        result = await self.uploader.upload(file)
        logger.info(f"Invoice {file.filename} passed validation ({file.size} bytes)")
        return UploadOutcome(success=True, message=result.message, result=result, stages=stages)
