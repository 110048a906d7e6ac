from .encryption import is_pdf_encrypted
from .format import validate_format
from .integrity import check_pdf_integrity
from .result import ValidationResult
from .size import MAX_FILE_SIZE_BYTES, validate_size

__all__ = [
    "ValidationResult",
    "validate_format",
    "validate_size",
    "is_pdf_encrypted",
    "check_pdf_integrity",
    "MAX_FILE_SIZE_BYTES",
]
