"""
Integrity checking for uploaded PDFs.

Two passes:
1. Structural anchors scanned from the raw bytes (header, object
   definitions, cross-reference section, trailer /Root, %%EOF)
2. A non-strict pypdf parse that must yield at least one page
"""

import logging
import re
from io import BytesIO

from pypdf import PdfReader

logger = logging.getLogger(__name__)

# %%EOF must appear near the end; producers may append a few trailing bytes
EOF_SEARCH_WINDOW = 1024

HEADER = re.compile(rb"%PDF-\d\.\d")
OBJECT_DEFINITION = re.compile(rb"(?<!\d)\d+\s+\d+\s+obj\b")
XREF_TABLE = re.compile(rb"(?:^|[\r\n])xref\b")
XREF_STREAM = re.compile(rb"/Type\s*/XRef\b")
TRAILER_DICT = re.compile(rb"trailer\s*<<")
STREAM_ROOT = re.compile(rb"/Root\s*\d+\s+\d+\s+R")
EOF_MARKER = b"%%EOF"


def _trailer_has_root(content: bytes) -> bool:
    # Only the last trailer counts; it ends where startxref begins
    start = content.rfind(b"trailer")
    if start == -1 or not TRAILER_DICT.match(content, start):
        return False

    end = content.find(b"startxref", start)
    if end == -1:
        end = len(content)

    return STREAM_ROOT.search(content, start, end) is not None


def _has_structural_anchors(content: bytes) -> bool:
    if not HEADER.match(content):
        return False

    if not OBJECT_DEFINITION.search(content):
        return False

    if XREF_TABLE.search(content):
        # Classic cross-reference table needs a trailer with a Root entry
        if not _trailer_has_root(content):
            return False
    elif XREF_STREAM.search(content):
        if not STREAM_ROOT.search(content):
            return False
    else:
        return False

    return EOF_MARKER in content[-EOF_SEARCH_WINDOW:]


def check_pdf_integrity(content: bytes) -> bool:
    """
    Check that the bytes form a well-formed, non-corrupted PDF.

    Never raises; any parse failure is reported as False.

    Args:
        content: Raw PDF bytes

    Returns:
        True if all anchors are present and the document parses
    """
    if not _has_structural_anchors(content):
        logger.debug("PDF is missing required structural anchors")
        return False

    try:
        reader = PdfReader(BytesIO(content), strict=False)
        page_count = len(reader.pages)
    except Exception as e:
        logger.debug(f"PDF failed to parse: {e}")
        return False

    return page_count > 0
