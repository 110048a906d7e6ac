from .result import ValidationResult

MAX_FILE_SIZE_BYTES = 20 * 1024 * 1024

FILE_TOO_LARGE = "FILE_TOO_LARGE"


def validate_size(content: bytes, max_bytes: int = MAX_FILE_SIZE_BYTES) -> ValidationResult:
    """Reject content longer than max_bytes. A file of exactly max_bytes passes."""
    if len(content) > max_bytes:
        limit_mb = max_bytes / (1024 * 1024)
        return ValidationResult.fail(
            f"File exceeds maximum allowed size of {limit_mb:g}MB",
            FILE_TOO_LARGE
        )
    return ValidationResult.ok()
