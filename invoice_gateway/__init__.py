"""Invoice Upload Gateway: validates and ingests invoice PDFs over HTTP."""

__version__ = "1.0.0"
