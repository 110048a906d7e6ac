"""
Stub collaborators used by the default deployment.

StaticAuthenticator checks credentials against a list from config.
NotImplementedUploader accepts the call but has no storage behind it.
"""

import hmac
import logging

from .base import Authenticator, InvoiceFile, InvoiceUploader, UploadResult

logger = logging.getLogger(__name__)


class StaticAuthenticator(Authenticator):
    """
    Authenticate against client credentials listed in config.

    Config format:
        auth:
          adapter: static
          config:
            clients:
              - client_id: demo-client
                client_secret: demo-secret
    """

    def __init__(self, config: dict = None):
        super().__init__(config or {})
        self._clients: dict[str, str] = {}
        for client in self.config.get("clients", []):
            client_id = client.get("client_id")
            client_secret = client.get("client_secret")
            if not client_id or not client_secret:
                logger.warning("Client entry missing 'client_id' or 'client_secret', skipping")
                continue
            self._clients[client_id] = client_secret

    async def authenticate(self, client_id: str, client_secret: str) -> bool:
        expected = self._clients.get(client_id)
        if expected is None:
            return False
        return hmac.compare_digest(expected.encode(), client_secret.encode())


class NotImplementedUploader(InvoiceUploader):
    """Uploader placeholder until a storage backend exists."""

    def __init__(self, config: dict = None):
        super().__init__(config or {})

    async def upload(self, file: InvoiceFile) -> UploadResult:
        logger.info(f"Invoice upload service called for {file.filename} ({file.size} bytes)")
        return UploadResult(message="Invoice upload service called")
