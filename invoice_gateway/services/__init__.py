from .base import Authenticator, Credentials, InvoiceFile, InvoiceUploader, UploadResult

__all__ = ["Authenticator", "Credentials", "InvoiceFile", "InvoiceUploader", "UploadResult"]
