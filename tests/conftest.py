import pytest

from pdf_samples import ENCRYPTED_PDF, build_pdf


@pytest.fixture
def make_pdf():
    """Factory for well-formed PDFs."""
    return build_pdf


@pytest.fixture
def valid_pdf() -> bytes:
    """Minimal unencrypted PDF with catalog, pages and one page."""
    return build_pdf()


@pytest.fixture
def encrypted_pdf() -> bytes:
    return ENCRYPTED_PDF


@pytest.fixture
def corrupt_pdf() -> bytes:
    """Valid header but truncated before the cross-reference section."""
    return build_pdf()[:60]
