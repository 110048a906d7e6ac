import logging
import uuid
from typing import Optional

from .base import Authenticator, InvoiceFile, InvoiceUploader, UploadResult

logger = logging.getLogger(__name__)


class MockAuthenticator(Authenticator):
    """Mock authenticator for testing without an identity provider."""

    def __init__(self, config: dict = None):
        super().__init__(config or {})
        self._client_id = self.config.get("client_id", "test-client")
        self._client_secret = self.config.get("client_secret", "test-secret")
        self._error: Optional[Exception] = None
        self.calls = 0

    def set_error(self, error: Optional[Exception]) -> None:
        """Allow tests to make authenticate() raise."""
        self._error = error

    async def authenticate(self, client_id: str, client_secret: str) -> bool:
        self.calls += 1
        if self._error is not None:
            raise self._error
        return client_id == self._client_id and client_secret == self._client_secret


class MockUploader(InvoiceUploader):
    """Mock uploader that keeps received files in memory."""

    def __init__(self, config: dict = None):
        super().__init__(config or {})
        self._implemented = self.config.get("implemented", False)
        self._error: Optional[Exception] = None
        self.received: list[InvoiceFile] = []

    def set_error(self, error: Optional[Exception]) -> None:
        """Allow tests to make upload() raise."""
        self._error = error

    async def upload(self, file: InvoiceFile) -> UploadResult:
        if self._error is not None:
            raise self._error

        self.received.append(file)
        logger.info(f"[MOCK] Received invoice {file.filename} ({file.size} bytes)")

        if not self._implemented:
            return UploadResult(message="Invoice upload service called")

        return UploadResult(
            message="Invoice uploaded (mock)",
            implemented=True,
            upload_id=str(uuid.uuid4())
        )
