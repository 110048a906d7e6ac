"""
Format validation for uploaded invoices.

Checks run in a fixed order and stop at the first failure:
- Declared MIME type must be application/pdf
- Filename must end in .pdf (case-insensitive)
- Content must start with the %PDF- signature
"""

import os

from .result import ValidationResult

PDF_MIME_TYPE = "application/pdf"
PDF_EXTENSION = ".pdf"
PDF_SIGNATURE = b"%PDF-"

INVALID_MIME_TYPE = "INVALID_MIME_TYPE"
INVALID_EXTENSION = "INVALID_EXTENSION"
INVALID_PDF_CONTENT = "INVALID_PDF_CONTENT"


def validate_format(content: bytes, content_type: str, filename: str) -> ValidationResult:
    """
    Validate that an upload is declared and shaped like a PDF.

    Only the header prefix of the content is inspected; structural
    checks belong to the integrity checker.

    Args:
        content: Raw file bytes
        content_type: MIME type declared by the client
        filename: Original filename from the upload

    Returns:
        ValidationResult with the first failing check's code, if any
    """
    if content_type != PDF_MIME_TYPE:
        return ValidationResult.fail(
            f"Invalid MIME type: {content_type}. Expected: {PDF_MIME_TYPE}",
            INVALID_MIME_TYPE
        )

    _, extension = os.path.splitext(filename or "")
    if extension.lower() != PDF_EXTENSION:
        return ValidationResult.fail(
            f"Invalid file extension: '{extension}'. Expected: {PDF_EXTENSION}",
            INVALID_EXTENSION
        )

    if not content.startswith(PDF_SIGNATURE):
        return ValidationResult.fail(
            "Invalid PDF file: missing %PDF- header",
            INVALID_PDF_CONTENT
        )

    return ValidationResult.ok()
