from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class InvoiceFile:
    """An uploaded file as received from the client."""

    content: bytes
    content_type: str
    filename: str

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class Credentials:
    client_id: str = ""
    client_secret: str = ""


@dataclass
class UploadResult:
    message: str
    implemented: bool = False
    upload_id: Optional[str] = None


class Authenticator(ABC):
    """Abstract base class for client authenticators."""

    def __init__(self, config: dict):
        self.config = config

    @abstractmethod
    async def authenticate(self, client_id: str, client_secret: str) -> bool:
        """Return True if the client credentials are accepted."""
        pass


class InvoiceUploader(ABC):
    """Abstract base class for invoice persistence backends."""

    def __init__(self, config: dict):
        self.config = config

    @abstractmethod
    async def upload(self, file: InvoiceFile) -> UploadResult:
        """Persist a validated invoice file."""
        pass
