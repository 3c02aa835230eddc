"""
Data models for PDF text extraction.

Defines the positioned text fragments read from PDF pages and the metadata
describing one extraction run.
"""

from typing import List, Optional, Tuple
from dataclasses import dataclass, field


@dataclass
class PageMetadata:
    """
    Metadata about the PDF text extraction.

    Attributes:
        page_count: Total number of pages in the document
        pages_read: Number of pages actually processed
        engine: Text extraction engine used
        empty_pages: 1-indexed page numbers that yielded no text
    """
    page_count: int = 0
    pages_read: int = 0
    engine: str = "pypdf2"
    empty_pages: List[int] = field(default_factory=list)


@dataclass
class TextBlock:
    """
    A single fragment of page text with its position.

    Attributes:
        text: The text content
        bbox: Bounding box (x_min, y_min, x_max, y_max), y measured top-down
        page_number: 1-indexed page the fragment came from
        line_number: Row number within the page, assigned during grouping
    """
    text: str
    bbox: Tuple[float, float, float, float]
    page_number: int = 1
    line_number: Optional[int] = None
