"""
Positioned text extraction from PDFs.

Reads embedded page text with PyPDF2 and records where each fragment sits on
the page so fragments can later be grouped into table rows.
"""

from typing import BinaryIO, List, Optional, Tuple, Union
from pathlib import Path
import io
import logging

import PyPDF2

from config import PDF_MAX_PAGES
from .models import PageMetadata, TextBlock

logger = logging.getLogger(__name__)

# Rough glyph width used to estimate x_max for a fragment
CHAR_WIDTH_ESTIMATE = 5.0


def _open_pdf(source: Union[Path, bytes, BinaryIO]) -> PyPDF2.PdfReader:
    if isinstance(source, (bytes, bytearray)):
        return PyPDF2.PdfReader(io.BytesIO(source))
    if isinstance(source, Path):
        if not source.exists():
            raise FileNotFoundError(f"PDF file not found: {source}")
        return PyPDF2.PdfReader(str(source))
    return PyPDF2.PdfReader(source)


def _fragment_origin(cm: List[float], tm: List[float]) -> Tuple[float, float]:
    """Page-space origin of a text fragment (text matrix applied to the CTM)."""
    x = tm[4] * cm[0] + tm[5] * cm[2] + cm[4]
    y = tm[4] * cm[1] + tm[5] * cm[3] + cm[5]
    return x, y


def extract_page_blocks(page, page_number: int) -> List[TextBlock]:
    """
    Extract positioned text fragments from one PyPDF2 page.

    PDF coordinates grow upward; y is flipped against the page height so
    that bbox[1] grows top-down like the rest of the pipeline expects.
    """
    page_height = float(page.mediabox.height)
    blocks: List[TextBlock] = []

    def visitor(text, cm, tm, font_dict, font_size):
        if not text or not text.strip():
            return
        x, y = _fragment_origin(cm, tm)
        top = page_height - y
        size = float(font_size or 0) or 10.0
        blocks.append(TextBlock(
            text=text.strip(),
            bbox=(x, top, x + len(text.strip()) * CHAR_WIDTH_ESTIMATE, top + size),
            page_number=page_number,
        ))

    page.extract_text(visitor_text=visitor)
    return blocks


def extract_text_from_pdf(
    source: Union[Path, bytes, BinaryIO],
    max_pages: Optional[int] = None,
) -> Tuple[List[TextBlock], PageMetadata]:
    """
    Extract positioned text blocks from a PDF document.

    Args:
        source: PDF path, raw bytes, or a binary file object
        max_pages: Maximum number of pages to read (default: PDF_MAX_PAGES)

    Returns:
        Tuple of (list of TextBlock objects, PageMetadata)

    Raises:
        FileNotFoundError: If a PDF path does not exist
        PyPDF2.errors.PdfReadError: If the PDF is corrupted or unreadable
    """
    if max_pages is None:
        max_pages = PDF_MAX_PAGES

    reader = _open_pdf(source)
    page_count = len(reader.pages)
    pages_to_read = min(page_count, max_pages)

    logger.debug(f"[PDF] Document has {page_count} pages, reading {pages_to_read}")

    metadata = PageMetadata(page_count=page_count, pages_read=pages_to_read)
    text_blocks: List[TextBlock] = []

    for page_idx in range(pages_to_read):
        page_blocks = extract_page_blocks(reader.pages[page_idx], page_idx + 1)
        if not page_blocks:
            metadata.empty_pages.append(page_idx + 1)
        text_blocks.extend(page_blocks)

    if metadata.empty_pages:
        logger.info(f"[PDF] No embedded text on pages {metadata.empty_pages} (scanned pages are not OCR'd)")

    logger.info(f"[PDF] Extracted {len(text_blocks)} text blocks from {pages_to_read} pages")
    return text_blocks, metadata
