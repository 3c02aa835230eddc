"""
PDF text module for turning paginated documents into table grids.

This module provides:
- Positioned text extraction from PDF pages
- Grouping of text fragments into rows by baseline
- Conversion to the row/column grid used by header detection
"""

from .reader import extract_text_from_pdf, extract_page_blocks
from .parser import group_blocks_by_row, blocks_to_grid
from .models import TextBlock, PageMetadata

__all__ = [
    "extract_text_from_pdf",
    "extract_page_blocks",
    "group_blocks_by_row",
    "blocks_to_grid",
    "TextBlock",
    "PageMetadata",
]
