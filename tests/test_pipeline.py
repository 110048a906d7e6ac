"""
Tests for the upload pipeline.

Tests:
- Stage ordering and short-circuiting
- Error kinds and status codes
- Fault remapping to INTERNAL_ERROR
"""

import pytest
from pdf_samples import build_pdf_of_size

from invoice_gateway import pipeline as pipeline_module
from invoice_gateway.pipeline import ErrorKind, UploadConfig, UploadOutcome, UploadPipeline
from invoice_gateway.services import Credentials, InvoiceFile
from invoice_gateway.services.mock import MockAuthenticator, MockUploader
from invoice_gateway.validation import MAX_FILE_SIZE_BYTES

GOOD_CREDENTIALS = Credentials(client_id="test-client", client_secret="test-secret")


@pytest.fixture
def authenticator():
    return MockAuthenticator()


@pytest.fixture
def uploader():
    return MockUploader()


@pytest.fixture
def upload_pipeline(authenticator, uploader):
    return UploadPipeline(authenticator, uploader)


def make_file(content: bytes, content_type: str = "application/pdf", filename: str = "invoice.pdf") -> InvoiceFile:
    return InvoiceFile(content=content, content_type=content_type, filename=filename)


class TestErrorKind:
    def test_status_codes(self):
        """Each error kind maps to its HTTP status."""
        assert ErrorKind.NO_FILE_UPLOADED.status_code == 400
        assert ErrorKind.UNAUTHORIZED.status_code == 401
        assert ErrorKind.SERVER_TIMEOUT.status_code == 504
        assert ErrorKind.UNSUPPORTED_FORMAT.status_code == 415
        assert ErrorKind.ENCRYPTED_DOCUMENT.status_code == 400
        assert ErrorKind.CORRUPT_DOCUMENT.status_code == 400
        assert ErrorKind.FILE_TOO_LARGE.status_code == 413
        assert ErrorKind.INTERNAL_ERROR.status_code == 500

    def test_fail_uses_default_message(self):
        outcome = UploadOutcome.fail(ErrorKind.UNAUTHORIZED)
        assert outcome.message == "Unauthorized"
        assert outcome.status_code == 401

    def test_success_status_depends_on_uploader(self):
        from invoice_gateway.services import UploadResult

        stub = UploadOutcome(success=True, result=UploadResult(message="called"))
        real = UploadOutcome(success=True, result=UploadResult(message="ok", implemented=True))
        assert stub.status_code == 501
        assert real.status_code == 201


class TestUploadPipeline:
    @pytest.mark.asyncio
    async def test_valid_pdf_reaches_uploader(self, upload_pipeline, uploader, valid_pdf):
        """Valid request runs every stage and hands the file to the uploader."""
        file = make_file(valid_pdf)
        outcome = await upload_pipeline.run(file, GOOD_CREDENTIALS)

        assert outcome.success
        assert outcome.status_code == 501
        assert outcome.message == "Invoice upload service called"
        assert outcome.stages == ["authenticate", "format", "encryption", "integrity", "size", "upload"]
        assert uploader.received == [file]

    @pytest.mark.asyncio
    async def test_no_file(self, upload_pipeline, authenticator, uploader):
        """Missing file fails before any other stage."""
        outcome = await upload_pipeline.run(None, GOOD_CREDENTIALS)

        assert outcome.error_kind == ErrorKind.NO_FILE_UPLOADED
        assert outcome.status_code == 400
        assert outcome.stages == []
        assert authenticator.calls == 0
        assert uploader.received == []

    @pytest.mark.asyncio
    async def test_no_file_wins_over_simulated_timeout(self, upload_pipeline):
        outcome = await upload_pipeline.run(None, GOOD_CREDENTIALS, simulate_timeout=True)
        assert outcome.error_kind == ErrorKind.NO_FILE_UPLOADED

    @pytest.mark.asyncio
    async def test_bad_credentials(self, upload_pipeline, uploader, valid_pdf):
        outcome = await upload_pipeline.run(
            make_file(valid_pdf),
            Credentials(client_id="test-client", client_secret="wrong")
        )

        assert outcome.error_kind == ErrorKind.UNAUTHORIZED
        assert outcome.stages == ["authenticate"]
        assert uploader.received == []

    @pytest.mark.asyncio
    async def test_authenticator_fault_is_internal_error(self, upload_pipeline, authenticator, valid_pdf):
        """Authenticator exceptions are not leaked to the caller."""
        authenticator.set_error(ConnectionError("identity provider at 10.0.0.5 unreachable"))

        outcome = await upload_pipeline.run(make_file(valid_pdf), GOOD_CREDENTIALS)

        assert outcome.error_kind == ErrorKind.INTERNAL_ERROR
        assert outcome.status_code == 500
        assert outcome.message == "Internal server error"
        assert "10.0.0.5" not in outcome.message

    @pytest.mark.asyncio
    async def test_simulated_timeout_skips_validation(self, upload_pipeline, uploader, monkeypatch):
        """Timeout hook returns 504 without running any validator."""
        called = []

        def tracking_validate_format(*args):
            called.append("format")
            raise AssertionError("validator should not run")

        monkeypatch.setattr(pipeline_module, "validate_format", tracking_validate_format)

        outcome = await upload_pipeline.run(make_file(b"not a pdf"), GOOD_CREDENTIALS, simulate_timeout=True)

        assert outcome.error_kind == ErrorKind.SERVER_TIMEOUT
        assert outcome.status_code == 504
        assert outcome.stages == ["authenticate"]
        assert called == []
        assert uploader.received == []

    @pytest.mark.asyncio
    async def test_simulated_timeout_requires_authentication(self, upload_pipeline, valid_pdf):
        outcome = await upload_pipeline.run(
            make_file(valid_pdf),
            Credentials(client_id="nobody", client_secret="nothing"),
            simulate_timeout=True
        )
        assert outcome.error_kind == ErrorKind.UNAUTHORIZED

    @pytest.mark.asyncio
    async def test_simulated_timeout_disabled(self, authenticator, uploader, valid_pdf):
        """With the hook disabled the flag is ignored."""
        pipeline = UploadPipeline(authenticator, uploader, UploadConfig(allow_simulated_timeout=False))

        outcome = await pipeline.run(make_file(valid_pdf), GOOD_CREDENTIALS, simulate_timeout=True)

        assert outcome.success
        assert len(uploader.received) == 1

    @pytest.mark.asyncio
    async def test_wrong_mime_type(self, upload_pipeline, valid_pdf):
        outcome = await upload_pipeline.run(make_file(valid_pdf, content_type="image/png"), GOOD_CREDENTIALS)

        assert outcome.error_kind == ErrorKind.UNSUPPORTED_FORMAT
        assert outcome.status_code == 415
        assert outcome.reason == "INVALID_MIME_TYPE"

    @pytest.mark.asyncio
    async def test_wrong_extension(self, upload_pipeline, valid_pdf):
        outcome = await upload_pipeline.run(make_file(valid_pdf, filename="invoice.txt"), GOOD_CREDENTIALS)

        assert outcome.error_kind == ErrorKind.UNSUPPORTED_FORMAT
        assert outcome.reason == "INVALID_EXTENSION"

    @pytest.mark.asyncio
    async def test_not_a_pdf(self, upload_pipeline):
        outcome = await upload_pipeline.run(make_file(b"This is not a PDF"), GOOD_CREDENTIALS)

        assert outcome.error_kind == ErrorKind.UNSUPPORTED_FORMAT
        assert outcome.reason == "INVALID_PDF_CONTENT"
        assert outcome.stages == ["authenticate", "format"]

    @pytest.mark.asyncio
    async def test_encrypted_pdf(self, upload_pipeline, uploader, encrypted_pdf):
        outcome = await upload_pipeline.run(make_file(encrypted_pdf), GOOD_CREDENTIALS)

        assert outcome.error_kind == ErrorKind.ENCRYPTED_DOCUMENT
        assert outcome.status_code == 400
        assert outcome.stages[-1] == "encryption"
        assert uploader.received == []

    @pytest.mark.asyncio
    async def test_corrupt_pdf(self, upload_pipeline, corrupt_pdf):
        outcome = await upload_pipeline.run(make_file(corrupt_pdf), GOOD_CREDENTIALS)

        assert outcome.error_kind == ErrorKind.CORRUPT_DOCUMENT
        assert outcome.status_code == 400
        assert outcome.stages[-1] == "integrity"

    @pytest.mark.asyncio
    async def test_too_large(self, authenticator, uploader, make_pdf):
        pipeline = UploadPipeline(authenticator, uploader, UploadConfig(max_file_size_bytes=1024))

        outcome = await pipeline.run(make_file(make_pdf(padding=2048)), GOOD_CREDENTIALS)

        assert outcome.error_kind == ErrorKind.FILE_TOO_LARGE
        assert outcome.status_code == 413
        assert outcome.stages[-1] == "size"
        assert uploader.received == []

    @pytest.mark.asyncio
    async def test_size_checked_after_integrity(self, authenticator, uploader):
        """An oversized corrupt file reports corruption, not size."""
        pipeline = UploadPipeline(authenticator, uploader, UploadConfig(max_file_size_bytes=10))

        outcome = await pipeline.run(make_file(b"%PDF-1.4 " + b"x" * 100), GOOD_CREDENTIALS)

        assert outcome.error_kind == ErrorKind.CORRUPT_DOCUMENT

    @pytest.mark.asyncio
    async def test_uploader_fault_is_internal_error(self, upload_pipeline, uploader, valid_pdf):
        uploader.set_error(RuntimeError("disk full on /var/invoices"))

        outcome = await upload_pipeline.run(make_file(valid_pdf), GOOD_CREDENTIALS)

        assert outcome.error_kind == ErrorKind.INTERNAL_ERROR
        assert outcome.message == "Internal server error"
        assert outcome.stages[-1] == "upload"

    @pytest.mark.asyncio
    async def test_validator_fault_is_internal_error(self, upload_pipeline, monkeypatch, valid_pdf):
        def broken_check(content):
            raise MemoryError("scan failed")

        monkeypatch.setattr(pipeline_module, "is_pdf_encrypted", broken_check)

        outcome = await upload_pipeline.run(make_file(valid_pdf), GOOD_CREDENTIALS)

        assert outcome.error_kind == ErrorKind.INTERNAL_ERROR

    @pytest.mark.asyncio
    async def test_implemented_uploader_returns_created(self, authenticator, valid_pdf):
        uploader = MockUploader({"implemented": True})
        pipeline = UploadPipeline(authenticator, uploader)

        outcome = await pipeline.run(make_file(valid_pdf), GOOD_CREDENTIALS)

        assert outcome.status_code == 201
        assert outcome.result.upload_id

    @pytest.mark.asyncio
    async def test_pdf_at_default_size_limit_is_accepted(self, upload_pipeline, uploader):
        """A valid PDF of exactly 20 MiB passes every stage."""
        data = build_pdf_of_size(MAX_FILE_SIZE_BYTES)

        outcome = await upload_pipeline.run(make_file(data), GOOD_CREDENTIALS)

        assert outcome.success
        assert outcome.stages[-1] == "upload"
        assert len(uploader.received) == 1

    @pytest.mark.asyncio
    async def test_pdf_one_byte_over_default_limit(self, upload_pipeline, uploader):
        data = build_pdf_of_size(MAX_FILE_SIZE_BYTES + 1)

        outcome = await upload_pipeline.run(make_file(data), GOOD_CREDENTIALS)

        assert outcome.error_kind == ErrorKind.FILE_TOO_LARGE
        assert uploader.received == []
