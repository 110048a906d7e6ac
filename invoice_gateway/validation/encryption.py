"""
Encryption detection for uploaded PDFs.

Heuristic byte scan, no object graph resolution. A document is treated as
encrypted when any of these markers appear:
- /Encrypt referencing an indirect object (e.g. "/Encrypt 4 0 R")
- /Encrypt with an inline dictionary
- A standard security handler dictionary ("/Filter/Standard")

Documents using a custom security handler without a trailer /Encrypt key
in plain bytes (e.g. inside a compressed object stream) are not detected.
"""

import re

ENCRYPT_REFERENCE = re.compile(rb"/Encrypt\s*\d+\s+\d+\s+R")
ENCRYPT_INLINE = re.compile(rb"/Encrypt\s*<<")
STANDARD_FILTER = re.compile(rb"/Filter\s*/Standard\b")

_MARKERS = (ENCRYPT_REFERENCE, ENCRYPT_INLINE, STANDARD_FILTER)


def is_pdf_encrypted(content: bytes) -> bool:
    """Return True if the raw bytes carry an encryption dictionary marker."""
    return any(marker.search(content) for marker in _MARKERS)
