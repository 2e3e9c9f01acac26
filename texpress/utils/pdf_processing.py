"""
PDF inspection helpers for compiled output.

Helper functions:
    is_pdf: Magic-number check on raw bytes.
    page_count: Quick page count without full extraction.
    extract_text: Plain text of every page, for checks and previews.
"""

import io
from typing import List, Optional

import pdfplumber
from PyPDF2 import PdfReader

PDF_MAGIC = b"%PDF"


def is_pdf(data: Optional[bytes]) -> bool:
    """True when data is non-empty and starts with the PDF magic number."""
    return bool(data) and data.startswith(PDF_MAGIC)


def page_count(pdf_bytes: bytes) -> Optional[int]:
    """Get page count from PDF bytes, or None if unreadable."""
    try:
        reader = PdfReader(io.BytesIO(pdf_bytes))
        return len(reader.pages)
    except Exception:
        return None


def extract_text(pdf_bytes: bytes) -> List[str]:
    """
    Extract the text of each page with pdfplumber.

    Args:
        pdf_bytes: Complete PDF document

    Returns:
        One string per page (empty string for pages without text)
    """
    with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
        return [page.extract_text() or "" for page in pdf.pages]
