"""
Grouping of positioned text fragments into table rows.

This module turns the fragments read from PDF pages into the row/column
grid the header locator consumes:
- fragments on (approximately) the same baseline form one row
- fragments within a row are ordered left to right
- pages are emitted in order, each page top to bottom
"""

from typing import Dict, List, Optional
import logging

from config import PDF_ROW_TOLERANCE
from .models import TextBlock

logger = logging.getLogger(__name__)


def group_blocks_by_row(
    text_blocks: List[TextBlock],
    row_threshold: Optional[float] = None,
) -> List[List[TextBlock]]:
    """
    Group text blocks of a single page into rows based on y-position.

    A block joins the current row while its top is within row_threshold of
    the row's first block.

    Args:
        text_blocks: Blocks from one page
        row_threshold: Maximum y-distance to consider the same row (default: PDF_ROW_TOLERANCE)

    Returns:
        List of rows, where each row is a list of TextBlock objects sorted by x
    """
    if not text_blocks:
        return []

    if row_threshold is None:
        row_threshold = PDF_ROW_TOLERANCE

    rows: List[List[TextBlock]] = []
    current_row: List[TextBlock] = []
    row_y = None

    for block in sorted(text_blocks, key=lambda b: (b.bbox[1], b.bbox[0])):
        y_min = block.bbox[1]

        if row_y is None or abs(y_min - row_y) <= row_threshold:
            if row_y is None:
                row_y = y_min
            current_row.append(block)
        else:
            rows.append(sorted(current_row, key=lambda b: b.bbox[0]))
            current_row = [block]
            row_y = y_min

    if current_row:
        rows.append(sorted(current_row, key=lambda b: b.bbox[0]))

    for line_number, row in enumerate(rows, 1):
        for block in row:
            block.line_number = line_number

    return rows


def blocks_to_grid(
    text_blocks: List[TextBlock],
    row_threshold: Optional[float] = None,
) -> List[List[str]]:
    """
    Convert positioned text blocks (possibly spanning pages) into a 2D grid.

    Each grouped row becomes one grid row whose cells are the fragment texts
    in left-to-right order.
    """
    pages: Dict[int, List[TextBlock]] = {}
    for block in text_blocks:
        pages.setdefault(block.page_number, []).append(block)

    grid: List[List[str]] = []
    for page_number in sorted(pages):
        page_rows = group_blocks_by_row(pages[page_number], row_threshold)
        logger.debug(f"[PDF] Page {page_number}: {len(pages[page_number])} blocks -> {len(page_rows)} rows")
        grid.extend([block.text for block in row] for row in page_rows)

    return grid
